"""
Bakewind Protocols.

Defines interfaces for swappable infrastructure.
"""

from bakewind.protocols.locks import Lock, LockHolder, LockStore, OrderKind

__all__ = [
    # Lock Protocol
    "LockStore",
    # Lock types
    "Lock",
    "LockHolder",
    "OrderKind",
]
