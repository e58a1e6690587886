"""
Queue strategies using Strategy Pattern.
Allows switching between different access event queue backends (In-Memory, Redis).

Contract shared by every backend:
- push() never blocks and never raises; a failed push is logged and dropped
- try_pop() never blocks; returns None when the queue is empty
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Optional

from pydantic import ValidationError

from .models import LinkAccessEvent


class AccessEventQueue(ABC):
    """
    Abstract base class for access event queues.

    Redirect handlers push, the merge worker pops. Any number of
    producers and consumers may use the same queue concurrently.
    """

    @abstractmethod
    def push(self, event: LinkAccessEvent) -> bool:
        """
        Enqueue an access event.

        Args:
            event: LinkAccessEvent to enqueue

        Returns:
            True if queued, False if the event was dropped
        """
        pass

    @abstractmethod
    def try_pop(self) -> Optional[LinkAccessEvent]:
        """
        Dequeue one event without waiting.

        Returns:
            Oldest LinkAccessEvent, or None if the queue is empty
        """
        pass

    @abstractmethod
    def __len__(self) -> int:
        """Number of pending events"""
        pass

    def is_empty(self) -> bool:
        return len(self) == 0


class InMemoryAccessQueue(AccessEventQueue):
    """
    In-memory queue implementation using Python deque.

    deque.append and deque.popleft are atomic, so producers and
    consumers need no lock, and the deque has no size limit.

    Pros:
    - Simple (no external dependencies)
    - Fast (no network overhead)

    Cons:
    - Lost on restart (pending events are simply not counted)
    - Not shared between processes

    Default backend: the link store is in-process anyway.
    """

    def __init__(self):
        self._events: Deque[LinkAccessEvent] = deque()

    def push(self, event: LinkAccessEvent) -> bool:
        try:
            self._events.append(event)
            return True
        except MemoryError as e:
            print(f"❌ Failed to push access event for '{event.alias}': {e!r}")
            return False

    def try_pop(self) -> Optional[LinkAccessEvent]:
        try:
            return self._events.popleft()
        except IndexError:
            return None

    def __len__(self) -> int:
        return len(self._events)


class RedisListAccessQueue(AccessEventQueue):
    """
    Redis list implementation for the access event queue.

    RPUSH appends, LPOP removes from the head, LLEN gives an exact
    length. Events are stored as pydantic JSON.

    Useful when pending events should survive a restart of the
    service. Connection errors never reach the redirect path: a failed
    push is dropped and a failed pop reads as empty.
    """

    def __init__(self, redis_client, queue_name: str = "link_access_events"):
        """
        Initialize Redis list queue.

        Args:
            redis_client: Redis client instance (redis.Redis)
            queue_name: Key of the Redis list
        """
        self.redis = redis_client
        self.queue_name = queue_name

    def push(self, event: LinkAccessEvent) -> bool:
        try:
            self.redis.rpush(self.queue_name, event.model_dump_json())
            return True
        except Exception as e:
            print(f"❌ Redis push error for '{event.alias}': {e}")
            return False

    def try_pop(self) -> Optional[LinkAccessEvent]:
        while True:
            try:
                raw = self.redis.lpop(self.queue_name)
            except Exception as e:
                print(f"❌ Redis pop error: {e}")
                return None

            if raw is None:
                return None

            try:
                return LinkAccessEvent.model_validate_json(raw)
            except ValidationError as e:
                # Unreadable message is discarded, keep draining
                print(f"⚠️  Failed to parse access event {raw!r}: {e.error_count()} error(s)")

    def __len__(self) -> int:
        try:
            return int(self.redis.llen(self.queue_name))
        except Exception as e:
            print(f"❌ Redis length error: {e}")
            return 0
