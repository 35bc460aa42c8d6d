"""
Bakewind - production-order lifecycle for bakeries.

Internal orders move through a fixed state machine, staff edit them under
advisory per-tenant locks, and the planning view aggregates a day's demand
and schedules production from approved orders.

Usage:
    from bakewind import bakery, BakewindError

    try:
        bakery.schedule_from_order(tenant, order_id, date(2026, 3, 14))
    except BakewindError as e:
        print(e.as_dict())
"""

from bakewind.exceptions import BakewindError


def __getattr__(name):
    """Lazy import to avoid AppRegistryNotReady errors."""
    if name in ("bakery", "Bakery"):
        from bakewind.service import Bakery

        return Bakery
    if name in ("LockHolder", "OrderKind"):
        from bakewind.protocols import locks

        return getattr(locks, name)
    if name == "scale":
        from bakewind.scaling import scale

        return scale
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["bakery", "Bakery", "BakewindError", "LockHolder", "OrderKind", "scale"]
__version__ = "0.1.0"
