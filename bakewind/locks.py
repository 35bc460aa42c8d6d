"""
Order Lock Manager -- cooperative, tenant-scoped edit locks.

A staff member asks for the lock before editing an order; a second staff
member asking while the lock is live is turned away and shown the
holder's name. Locks are advisory: the service layer checks them before
every mutation, the models do not.

Usage:
    from bakewind.conf import get_lock_manager

    locks = get_lock_manager(tenant)
    if not locks.acquire(order.pk, OrderKind.INTERNAL, holder):
        current = locks.lookup(order.pk)
        print(f"Locked by {current.holder.display_name}")

Expiry is lazy: a lock whose TTL elapsed is treated as absent and evicted
the next time anyone looks at it. There is no background sweep.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable

from django.utils import timezone

from bakewind.exceptions import OrderLocked
from bakewind.protocols.locks import Lock, LockHolder, LockStore, OrderKind

logger = logging.getLogger(__name__)

KEY_PREFIX = "bakewind:lock"


class OrderLockManager:
    """
    Lock registry for one tenant.

    At most one live lock exists per (order_kind, order_id). Re-acquiring
    as the same user refreshes the expiry; anyone else is rejected until
    the lock is released or expires.
    """

    def __init__(
        self,
        tenant_id,
        store: LockStore,
        ttl_seconds: int = 300,
        clock: Callable[[], datetime] | None = None,
    ):
        self.tenant_id = str(tenant_id)
        self.store = store
        self.ttl_seconds = int(ttl_seconds)
        self._clock = clock or timezone.now

    @property
    def ttl(self) -> timedelta:
        return timedelta(seconds=self.ttl_seconds)

    # ══════════════════════════════════════════════════════════════
    # CONTRACT
    # ══════════════════════════════════════════════════════════════

    def acquire(self, order_id, order_kind: str, holder: LockHolder) -> bool:
        """
        Try to take the edit lock.

        Returns False (without side effects) when another user holds a
        live lock. A busy result is normal flow, not an error.
        """
        key = self._key(order_kind, order_id)
        now = self._clock()
        lock = Lock(
            order_id=str(order_id),
            order_kind=str(order_kind),
            holder=holder,
            acquired_at=now,
            expires_at=now + self.ttl,
        )

        current = self._live(key, now)
        if current is None:
            if self.store.add(key, lock, self.ttl_seconds):
                logger.info(
                    f"Lock acquired on {order_kind}:{order_id} by {holder.display_name}",
                    extra={
                        "tenant": self.tenant_id,
                        "order_id": str(order_id),
                        "order_kind": str(order_kind),
                        "user_id": holder.user_id,
                    },
                )
                self._send("order_locked", lock)
                return True
            # Lost the race against a concurrent acquire
            current = self._live(key, now)
            if current is None:
                return False

        if current.holder.same_user(holder):
            refreshed = replace(lock, acquired_at=current.acquired_at)
            self.store.set(key, refreshed, self.ttl_seconds)
            logger.debug(
                f"Lock refreshed on {order_kind}:{order_id} until {refreshed.expires_at.isoformat()}"
            )
            return True

        logger.warning(
            f"Lock on {order_kind}:{order_id} denied to {holder.display_name}: "
            f"held by {current.holder.display_name}",
            extra={
                "tenant": self.tenant_id,
                "order_id": str(order_id),
                "requested_by": holder.user_id,
                "locked_by": current.holder.user_id,
            },
        )
        return False

    def release(self, order_id, order_kind: str, holder: LockHolder) -> None:
        """
        Drop the lock held by holder.

        Releasing an absent or expired lock is a no-op. Releasing a live
        lock owned by someone else raises OrderLocked.
        """
        key = self._key(order_kind, order_id)
        current = self._live(key, self._clock())
        if current is None:
            return

        if not current.holder.same_user(holder):
            raise OrderLocked(
                order_id,
                locked_by=current.holder.display_name,
                order_kind=str(order_kind),
            )

        self.store.delete(key)
        logger.info(
            f"Lock released on {order_kind}:{order_id} by {holder.display_name}",
            extra={"tenant": self.tenant_id, "order_id": str(order_id)},
        )
        self._send("order_unlocked", current)

    def lookup(self, order_id, order_kind: str = OrderKind.INTERNAL) -> Lock | None:
        """Return the live lock on an order, or None."""
        return self._live(self._key(order_kind, order_id), self._clock())

    def is_locked_by_me(
        self, order_id, holder: LockHolder, order_kind: str = OrderKind.INTERNAL
    ) -> bool:
        current = self.lookup(order_id, order_kind)
        return current is not None and current.holder.same_user(holder)

    def ensure_editable(
        self, order_id, order_kind: str, holder: LockHolder | None
    ) -> None:
        """
        Guard for mutations.

        Passes when the order is unlocked or locked by holder; raises
        OrderLocked naming the current holder otherwise.
        """
        current = self.lookup(order_id, order_kind)
        if current is None:
            return
        if holder is not None and current.holder.same_user(holder):
            return
        raise OrderLocked(
            order_id,
            locked_by=current.holder.display_name,
            order_kind=str(order_kind),
        )

    def cleanup(self, session_id: str) -> int:
        """
        Release every lock of a session in this tenant.

        Called when a page or session goes away, so staff do not see
        stale "locked" badges until the TTL runs out.
        """
        if not session_id:
            return 0

        prefix = f"{KEY_PREFIX}:{self.tenant_id}:"
        released = 0
        for key in self.store.keys_for_session(session_id):
            if not key.startswith(prefix):
                continue
            lock = self.store.get(key)
            if lock is None or lock.holder.session_id != session_id:
                continue
            self.store.delete(key)
            released += 1
            self._send("order_unlocked", lock)

        if released:
            logger.info(
                f"Cleaned up {released} lock(s) for session {session_id}",
                extra={"tenant": self.tenant_id, "session_id": session_id},
            )
        return released

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    def _key(self, order_kind: str, order_id) -> str:
        return f"{KEY_PREFIX}:{self.tenant_id}:{order_kind}:{order_id}"

    def _live(self, key: str, now: datetime) -> Lock | None:
        """Return the stored lock if still live, evicting it otherwise."""
        lock = self.store.get(key)
        if lock is None:
            return None
        if lock.is_live(now):
            return lock
        self.store.delete(key)
        logger.debug(f"Evicted expired lock {key}")
        return None

    def _send(self, signal_name: str, lock: Lock) -> None:
        from bakewind import signals

        getattr(signals, signal_name).send(
            sender=self.__class__, tenant_id=self.tenant_id, lock=lock
        )


class LockRegistry:
    """
    One OrderLockManager per tenant for the lifetime of the process.

    Built by BakewindConfig.ready(); reach it through
    bakewind.conf.get_lock_manager(tenant).
    """

    def __init__(
        self,
        store_factory: Callable[[], LockStore],
        ttl_seconds: int = 300,
        clock: Callable[[], datetime] | None = None,
    ):
        self._store_factory = store_factory
        self._store: LockStore | None = None
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._managers: dict[str, OrderLockManager] = {}
        self._guard = threading.Lock()

    @property
    def store(self) -> LockStore:
        if self._store is None:
            with self._guard:
                if self._store is None:  # double-checked
                    self._store = self._store_factory()
        return self._store

    def for_tenant(self, tenant) -> OrderLockManager:
        tenant_id = str(getattr(tenant, "pk", tenant))
        manager = self._managers.get(tenant_id)
        if manager is None:
            store = self.store
            with self._guard:
                manager = self._managers.get(tenant_id)
                if manager is None:
                    manager = OrderLockManager(
                        tenant_id,
                        store,
                        ttl_seconds=self.ttl_seconds,
                        clock=self._clock,
                    )
                    self._managers[tenant_id] = manager
        return manager

    def reset(self) -> None:
        """Forget every manager and the store (for tests)."""
        with self._guard:
            self._managers.clear()
            self._store = None
