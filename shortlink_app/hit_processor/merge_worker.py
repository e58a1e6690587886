"""
Metadata Merge Worker

This worker drains access events from the queue and applies them to the
alias metadata (used count, last used time).

Architecture:
- Redirects only push to the queue (no write lock on the hot path)
- Every tick the worker takes the write lock once and drains the whole queue
- Usage metadata lags by at most one tick
"""

import asyncio

from shortlink_app.queue.strategies import AccessEventQueue
from shortlink_app.services.link_service import LinkService


class MetadataMerger:
    """
    Periodic batch merge of access events.

    Features:
    - One exclusive lock acquisition per tick, regardless of traffic
    - Events for removed aliases are dropped and counted
    - last_used only ever moves forward
    """

    def __init__(self, service: LinkService, queue: AccessEventQueue, interval: float = 0.2):
        """
        Initialize worker with dependencies.

        Args:
            service: Link service owning the store
            queue: Queue the redirect handlers push to
            interval: Seconds between ticks
        """
        self.service = service
        self.queue = queue
        self.interval = interval
        self.running = False
        self.merged_count = 0
        self.discarded_count = 0

    async def merge_once(self) -> int:
        """
        Drain the queue into the store.

        Returns:
            Number of events applied to existing aliases
        """
        if self.queue.is_empty():
            return 0

        applied = 0
        discarded = 0

        async with self.service.exclusive() as store:
            while True:
                event = self.queue.try_pop()
                if event is None:
                    break

                entry = store.get_mut(event.alias)
                if entry is None:
                    # Alias removed after the redirect was served
                    discarded += 1
                    continue

                entry.metadata.used += 1
                entry.metadata.last_used = max(entry.metadata.last_used, event.timestamp)
                applied += 1

        self.merged_count += applied
        self.discarded_count += discarded
        if discarded:
            print(f"📊 Merged {applied} access events, discarded {discarded}")
        return applied

    async def start(self):
        """Run until stop() is called or the task is cancelled"""
        self.running = True
        print("🚀 Metadata merge worker started")
        print(f"⏰ Merge interval: {self.interval}s")

        while self.running:
            try:
                await self.merge_once()
            except asyncio.CancelledError:
                print("Merge worker task cancelled.")
                raise
            except Exception as e:
                print(f"❌ Error merging access events: {e}")

            await asyncio.sleep(self.interval)

        print("🛑 Metadata merge worker stopped")

    def stop(self):
        """Stop the worker after the current tick"""
        self.running = False
