"""
Factory for creating access event queue instances.
"""

from enum import Enum
from .strategies import AccessEventQueue, RedisListAccessQueue, InMemoryAccessQueue
from shortlink_app.config import Settings, settings as default_settings


class QueueBackend(Enum):
    """Available queue backends"""
    MEMORY = "memory"
    REDIS = "redis"


class QueueFactory:
    """
    Simple factory for creating queue instances.

    Each call builds a new queue; the application creates one at startup
    and keeps it on app.state.
    """

    @classmethod
    def create(cls, backend: QueueBackend, settings: Settings = default_settings) -> AccessEventQueue:
        """
        Create a queue instance.

        Args:
            backend: Type of queue backend (from enum)
            settings: Settings providing redis_url / queue_name

        Returns:
            AccessEventQueue instance
        """
        if backend == QueueBackend.REDIS:
            import redis

            try:
                redis_client = redis.from_url(
                    settings.redis_url,
                    decode_responses=False,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )

                # Test connection immediately
                redis_client.ping()

                queue = RedisListAccessQueue(redis_client, settings.queue_name)
                print("✅ Redis access queue initialized")
                return queue

            except Exception as e:
                print(f"⚠️  Redis connection failed: {e}")
                print("⚠️  Falling back to in-memory access queue")
                print("✅ In-memory access queue initialized (fallback)")
                return InMemoryAccessQueue()

        elif backend == QueueBackend.MEMORY:
            print("✅ In-memory access queue initialized")
            return InMemoryAccessQueue()

        raise ValueError(f"Unknown queue backend: {backend}")
