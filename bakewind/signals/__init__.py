"""
Bakewind Signals.

Lifecycle events for listeners outside the production core (realtime
dashboards, notifications, audit).

Signals:
    order_status_changed: An internal order moved to a new status
    order_locked: A staff member acquired an order's edit lock
    order_unlocked: An edit lock was released or cleaned up
    production_scheduled: A production schedule was created from an order
    production_item_changed: A production item was started or completed
"""

from django.dispatch import Signal

# Sent after the status write commits
# Args: order, previous_status, status, holder
order_status_changed = Signal()

# Sent on a fresh acquire (not on refresh)
# Args: tenant_id, lock
order_locked = Signal()

# Sent on release and on session cleanup
# Args: tenant_id, lock
order_unlocked = Signal()

# Sent after schedule + transition commit together
# Args: order, schedule, items
production_scheduled = Signal()

# Sent after an item start or completion commits
# Args: item, previous_status, status
production_item_changed = Signal()

__all__ = [
    "order_status_changed",
    "order_locked",
    "order_unlocked",
    "production_scheduled",
    "production_item_changed",
]
