"""
Bakewind Adapters.

Implementations of the LockStore protocol.
"""

from bakewind.adapters.cache import CacheLockStore
from bakewind.adapters.memory import MemoryLockStore

__all__ = [
    "MemoryLockStore",
    "CacheLockStore",
]
