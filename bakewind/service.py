"""
Bakewind Service - facade over the production core.

Usage:
    from bakewind import bakery, LockHolder

    holder = LockHolder.for_user(request.user, session_id="tab-1")
    locks = get_lock_manager(tenant)

    if locks.acquire(order.pk, OrderKind.INTERNAL, holder):
        bakery.change_status(order, "requested", holder=holder)
        bakery.change_status(order, "approved", holder=holder)

    # Planning view
    lines = bakery.demand(tenant, date(2026, 3, 14))
    result = bakery.schedule_from_order(
        tenant, order.pk, date(2026, 3, 14), user=request.user, holder=holder
    )

    # Kitchen floor
    item = result.items[0]
    bakery.start_item(tenant, result.schedule.pk, item.pk)
    bakery.complete_item(tenant, result.schedule.pk, item.pk, quality_check=True)
"""

from bakewind.services.execution import ProductionExecution
from bakewind.services.orders import OrderLifecycle
from bakewind.services.scheduling import ProductionPlanning


class Bakery(OrderLifecycle, ProductionPlanning, ProductionExecution):
    """
    Main API for Bakewind.

    Composed from service mixins; every method is a classmethod, so the
    class itself is used as the service object.
    """
