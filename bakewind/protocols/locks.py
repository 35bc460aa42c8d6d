"""
Lock Store Protocol.

Defines the storage interface behind OrderLockManager, so the same
acquire/release/lookup contract can run on a process-local registry or
on a shared cache reachable from every instance of the service.

The one operation a store must perform atomically is add():
set-if-absent with a TTL.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable

from django.db import models
from django.utils.translation import gettext_lazy as _


class OrderKind(models.TextChoices):
    """Order families sharing the same lock space."""

    CUSTOMER = "customer", _("Customer order")
    INTERNAL = "internal", _("Internal order")


# ══════════════════════════════════════════════════════════════
# DATA TYPES
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class LockHolder:
    """Identity of a staff member holding (or asking for) a lock."""

    user_id: str
    display_name: str
    session_id: str = ""

    @classmethod
    def for_user(cls, user, session_id: str = "") -> LockHolder:
        """Build a holder from a Django user."""
        name = user.get_full_name() if hasattr(user, "get_full_name") else ""
        return cls(
            user_id=str(user.pk),
            display_name=name or user.get_username(),
            session_id=session_id or "",
        )

    def same_user(self, other: LockHolder) -> bool:
        return str(self.user_id) == str(other.user_id)


@dataclass(frozen=True)
class Lock:
    """Advisory edit lock on one order."""

    order_id: str
    order_kind: str
    holder: LockHolder
    acquired_at: datetime
    expires_at: datetime

    def is_live(self, now: datetime) -> bool:
        return now < self.expires_at

    def as_dict(self) -> dict:
        return {
            "order_id": self.order_id,
            "order_kind": str(self.order_kind),
            "locked_by_user_id": self.holder.user_id,
            "locked_by_user_name": self.holder.display_name,
            "locked_by_session_id": self.holder.session_id,
            "locked_at": self.acquired_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        }


# ══════════════════════════════════════════════════════════════
# PROTOCOL
# ══════════════════════════════════════════════════════════════


@runtime_checkable
class LockStore(Protocol):
    """
    Key/value storage for locks.

    Implementations:
        - MemoryLockStore: single process, dict + threading.Lock
        - CacheLockStore: Django cache (Redis/Memcached in production)
    """

    def get(self, key: str) -> Lock | None:
        """Return the stored lock, live or not, or None."""
        ...

    def add(self, key: str, lock: Lock, timeout: int) -> bool:
        """Store lock only if key is absent. Must be atomic."""
        ...

    def set(self, key: str, lock: Lock, timeout: int) -> None:
        """Store lock unconditionally (refresh)."""
        ...

    def delete(self, key: str) -> None:
        """Remove key if present."""
        ...

    def keys_for_session(self, session_id: str) -> list[str]:
        """Keys of every lock stored for a session."""
        ...
