"""
Scheduling service -- demand, ingredients, recipe previews and the
"schedule production" action.

All methods are @classmethod so the mixin can be composed into Bakery
without instantiation.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time

from django.db import transaction
from django.utils import timezone

from bakewind.exceptions import BakewindError, NotFound, RecipeMissingForProduct
from bakewind.models import (
    InternalOrder,
    InternalOrderStatus,
    Product,
    ProductionItem,
    ProductionSchedule,
    Recipe,
)
from bakewind.protocols.locks import LockHolder, OrderKind
from bakewind.results import ScheduleResult
from bakewind.scaling import scale
from bakewind.services.demand import compute_demand, planning_totals, sort_demand
from bakewind.services.ingredients import ingredients_for_date
from bakewind.transitions import transition

logger = logging.getLogger(__name__)

# Kitchen day starts at 06:00
DEFAULT_START = time(6, 0)


def schedule_from_order(
    tenant,
    order_id,
    production_date: date,
    user=None,
    holder: LockHolder | None = None,
    locks=None,
) -> ScheduleResult:
    """
    Create a production schedule from an approved internal order.

    The schedule, its items and the order's approved -> scheduled
    transition commit together or not at all.

    Raises:
        NotFound: order does not exist in tenant
        OrderLocked: someone other than holder holds the order's lock
        InvalidTransition: order is not approved
        BakewindError: EMPTY_ORDER when the order has no items
        RecipeMissingForProduct: an item's product has no linked recipe
    """
    with transaction.atomic():
        order = (
            InternalOrder.objects.select_for_update()
            .filter(tenant=tenant, pk=order_id)
            .first()
        )
        if order is None:
            raise NotFound(order_id=str(order_id))

        if holder is not None or locks is not None:
            if locks is None:
                from bakewind.conf import get_lock_manager

                locks = get_lock_manager(tenant)
            locks.ensure_editable(order.pk, OrderKind.INTERNAL, holder)

        result = transition(order, InternalOrderStatus.SCHEDULED)

        items = list(order.items.all())
        if not items:
            raise BakewindError("EMPTY_ORDER", order=order.order_number)

        products = {
            product.pk: product
            for product in Product.objects.filter(
                tenant=tenant, pk__in={item.product_id for item in items}
            ).select_related("recipe")
        }

        # Resolve every recipe before writing anything
        planned: list[tuple] = []
        for item in items:
            product = products.get(item.product_id)
            recipe = product.recipe if product is not None else None
            if recipe is not None and (
                recipe.tenant_id != order.tenant_id or not recipe.is_active
            ):
                recipe = None
            if recipe is None:
                raise RecipeMissingForProduct(
                    product.name if product is not None else item.product_name,
                    product_id=item.product_id,
                    order=order.order_number,
                )
            planned.append((item, recipe))

        scheduled_time = datetime.combine(production_date, DEFAULT_START)
        if timezone.is_naive(scheduled_time):
            scheduled_time = timezone.make_aware(scheduled_time)

        schedule = ProductionSchedule.objects.create(
            tenant_id=order.tenant_id,
            date=production_date,
            total_items=len(planned),
            notes=f"Scheduled from internal order {order.order_number}",
            created_by=f"user:{user.get_username()}" if user else "system:scheduler",
        )

        production_items = [
            ProductionItem.objects.create(
                schedule=schedule,
                internal_order=order,
                recipe=recipe,
                recipe_name=recipe.name,
                quantity=item.quantity,
                scheduled_time=scheduled_time,
                batch_number=order.batch_number,
                notes=item.special_instructions,
            )
            for item, recipe in planned
        ]

        order.status = result.status
        order.production_date = production_date
        order.save(update_fields=["status", "production_date", "updated_at"])

    logger.info(
        f"Order {order.order_number} scheduled for {production_date.isoformat()} "
        f"with {len(production_items)} production item(s)",
        extra={
            "tenant": str(order.tenant_id),
            "order_id": order.pk,
            "schedule_id": schedule.pk,
            "production_date": production_date.isoformat(),
        },
    )

    from bakewind.signals import order_status_changed, production_scheduled

    order_status_changed.send(
        sender=InternalOrder,
        order=order,
        previous_status=result.previous_status,
        status=result.status,
        holder=holder,
    )
    production_scheduled.send(
        sender=ProductionSchedule,
        order=order,
        schedule=schedule,
        items=production_items,
    )

    return ScheduleResult(order=order, schedule=schedule, items=production_items)


class ProductionPlanning:
    """Planning-view operations."""

    @classmethod
    def demand(cls, tenant, target_date: date, sort: bool = True):
        """Demand lines for a date, most urgent first unless sort=False."""
        lines = compute_demand(tenant, target_date)
        return sort_demand(lines) if sort else lines

    @classmethod
    def demand_totals(cls, lines):
        return planning_totals(lines)

    @classmethod
    def ingredients(cls, tenant, target_date: date):
        return ingredients_for_date(tenant, target_date)

    @classmethod
    def scale_recipe(cls, tenant, recipe_id, quantity, context: str | None = None):
        """Scaled preview of a tenant's recipe."""
        recipe = (
            Recipe.objects.filter(tenant=tenant, pk=recipe_id)
            .prefetch_related("ingredients")
            .first()
        )
        if recipe is None:
            raise NotFound(recipe_id=str(recipe_id))
        return scale(recipe, quantity, context=context)

    @classmethod
    def schedule_from_order(
        cls,
        tenant,
        order_id,
        production_date: date,
        user=None,
        holder: LockHolder | None = None,
        locks=None,
    ) -> ScheduleResult:
        return schedule_from_order(
            tenant, order_id, production_date, user=user, holder=holder, locks=locks
        )

    @classmethod
    def schedules(cls, tenant, target_date: date | None = None):
        qs = ProductionSchedule.objects.filter(tenant=tenant).prefetch_related("items")
        if target_date is not None:
            qs = qs.filter(date=target_date)
        return qs
