"""
Access event queue module.
Implements Strategy Pattern for flexible queue backends.
"""

from .strategies import AccessEventQueue, RedisListAccessQueue, InMemoryAccessQueue
from .factory import QueueFactory, QueueBackend
from .models import LinkAccessEvent

__all__ = [
    "AccessEventQueue",
    "RedisListAccessQueue",
    "InMemoryAccessQueue",
    "QueueFactory",
    "QueueBackend",
    "LinkAccessEvent",
]
