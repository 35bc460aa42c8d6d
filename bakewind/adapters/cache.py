"""
Cache Lock Store -- locks kept in a Django cache.

With a shared cache (Redis, Memcached) every API instance sees the same
locks, which lifts the single-process limitation of MemoryLockStore while
keeping OrderLockManager's contract unchanged. cache.add() provides the
atomic set-if-absent; the cache TTL garbage-collects abandoned locks.

Configuration:
    BAKEWIND = {
        "LOCK_STORE": "bakewind.adapters.cache.CacheLockStore",
        "LOCK_CACHE_ALIAS": "default",
    }
"""

from __future__ import annotations

import logging

from django.core.cache import caches

from bakewind.protocols.locks import Lock

logger = logging.getLogger(__name__)

SESSION_INDEX_PREFIX = "bakewind:lock-session:"


class CacheLockStore:
    """
    Django-cache implementation of the LockStore protocol.

    A per-session index of lock keys is kept next to the locks so that
    cleanup() can find them without scanning the cache. The index is
    best-effort: a stale entry only costs one extra get().
    """

    def __init__(self, alias: str | None = None):
        if alias is None:
            from bakewind.conf import get_setting

            alias = get_setting("LOCK_CACHE_ALIAS")
        self.alias = alias

    @property
    def cache(self):
        return caches[self.alias]

    def get(self, key: str) -> Lock | None:
        return self.cache.get(key)

    def add(self, key: str, lock: Lock, timeout: int) -> bool:
        added = self.cache.add(key, lock, timeout)
        if added:
            self._index(lock.holder.session_id, key, timeout)
        return added

    def set(self, key: str, lock: Lock, timeout: int) -> None:
        self.cache.set(key, lock, timeout)
        self._index(lock.holder.session_id, key, timeout)

    def delete(self, key: str) -> None:
        lock = self.cache.get(key)
        self.cache.delete(key)
        if lock is not None:
            self._unindex(lock.holder.session_id, key)

    def keys_for_session(self, session_id: str) -> list[str]:
        return sorted(self.cache.get(self._index_key(session_id), {}))

    # ── session index ──
    # {lock_key: ttl_seconds}; the index lives as long as its longest lock

    def _index_key(self, session_id: str) -> str:
        return f"{SESSION_INDEX_PREFIX}{session_id}"

    def _index(self, session_id: str, key: str, timeout: int) -> None:
        if not session_id:
            return
        index_key = self._index_key(session_id)
        entries = dict(self.cache.get(index_key, {}))
        entries[key] = timeout
        self.cache.set(index_key, entries, max(entries.values()))

    def _unindex(self, session_id: str, key: str) -> None:
        if not session_id:
            return
        index_key = self._index_key(session_id)
        entries = dict(self.cache.get(index_key, {}))
        entries.pop(key, None)
        if entries:
            self.cache.set(index_key, entries, max(entries.values()))
        else:
            self.cache.delete(index_key)
        logger.debug(f"Unindexed lock {key} from session {session_id}")
