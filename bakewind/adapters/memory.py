"""
Memory Lock Store -- process-local lock registry.

Default store. Good for a single backend instance: locks do not survive a
restart and are invisible to other processes. Use CacheLockStore when the
API runs on more than one instance.

Configuration:
    BAKEWIND = {
        "LOCK_STORE": "bakewind.adapters.memory.MemoryLockStore",
    }
"""

from __future__ import annotations

import threading

from bakewind.protocols.locks import Lock


class MemoryLockStore:
    """
    In-memory implementation of the LockStore protocol.

    Expiry is not enforced here: OrderLockManager compares expires_at with
    its own clock and evicts lazily, so the store only needs to keep keys.
    """

    def __init__(self):
        self._locks: dict[str, Lock] = {}
        self._guard = threading.Lock()

    def get(self, key: str) -> Lock | None:
        with self._guard:
            return self._locks.get(key)

    def add(self, key: str, lock: Lock, timeout: int) -> bool:
        with self._guard:
            if key in self._locks:
                return False
            self._locks[key] = lock
            return True

    def set(self, key: str, lock: Lock, timeout: int) -> None:
        with self._guard:
            self._locks[key] = lock

    def delete(self, key: str) -> None:
        with self._guard:
            self._locks.pop(key, None)

    def keys_for_session(self, session_id: str) -> list[str]:
        with self._guard:
            return [
                key
                for key, lock in self._locks.items()
                if lock.holder.session_id == session_id
            ]

    def __len__(self) -> int:
        return len(self._locks)
