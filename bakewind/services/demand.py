"""
Production Demand Aggregator.

For one production date, sums what the kitchen has to make:

    customer orders   delivery_date (or pickup_date) == date
    internal orders   production_date (or needed_by) == date

Cancelled orders are ignored. Items are grouped by product; each line
keeps the unit total, how many orders of each kind contributed, the most
urgent priority among them, the prep estimate and the linked recipe.

An item pointing to an unknown product is skipped and logged. One bad
reference must not blank out a whole day's plan.

Usage:
    from bakewind.services.demand import compute_demand, sort_demand

    lines = sort_demand(compute_demand(tenant, date(2026, 3, 14)))
"""

from __future__ import annotations

import logging
from datetime import date

from django.db.models import Q

from bakewind.models import (
    CustomerOrder,
    CustomerOrderStatus,
    InternalOrder,
    InternalOrderStatus,
    Priority,
    Product,
)
from bakewind.protocols.locks import OrderKind
from bakewind.results import DemandSources, PlanningTotals, ProductionDemandLine

logger = logging.getLogger(__name__)

PRIORITY_RANK = {
    Priority.LOW: 0,
    Priority.NORMAL: 1,
    Priority.HIGH: 2,
    Priority.URGENT: 3,
}

# Customer priorities mapped onto the internal scale
PRIORITY_ALIASES = {
    "rush": Priority.URGENT,
}


def normalize_priority(value) -> Priority:
    value = PRIORITY_ALIASES.get(value, value)
    try:
        return Priority(value)
    except ValueError:
        return Priority.NORMAL


def priority_rank(value) -> int:
    return PRIORITY_RANK[normalize_priority(value)]


def _orders_for(tenant, target_date: date):
    customer_orders = (
        CustomerOrder.objects.filter(tenant=tenant)
        .exclude(status=CustomerOrderStatus.CANCELLED)
        .filter(
            Q(delivery_date=target_date)
            | Q(delivery_date__isnull=True, pickup_date=target_date)
        )
        .prefetch_related("items")
    )
    internal_orders = (
        InternalOrder.objects.filter(tenant=tenant)
        .exclude(status=InternalOrderStatus.CANCELLED)
        .filter(
            Q(production_date=target_date)
            | Q(production_date__isnull=True, needed_by=target_date)
        )
        .prefetch_related("items")
    )
    for order in customer_orders:
        yield OrderKind.CUSTOMER, order
    for order in internal_orders:
        yield OrderKind.INTERNAL, order


def compute_demand(tenant, target_date: date) -> list[ProductionDemandLine]:
    """
    Aggregate demand per product for target_date.

    Lines come back in first-seen order; use sort_demand() for display.
    Products with no demand on that date do not appear.
    """
    orders = list(_orders_for(tenant, target_date))

    product_ids = {item.product_id for _kind, order in orders for item in order.items.all()}
    products = {
        product.pk: product
        for product in Product.objects.filter(tenant=tenant, pk__in=product_ids)
    }

    lines: dict[int, ProductionDemandLine] = {}
    contributors: dict[int, set[tuple[str, int]]] = {}

    for kind, order in orders:
        for item in order.items.all():
            if item.quantity <= 0:
                continue

            product = products.get(item.product_id)
            if product is None:
                logger.warning(
                    f"Skipping item of {kind} order {order.order_number}: "
                    f"unknown product {item.product_id}",
                    extra={
                        "tenant": str(getattr(tenant, "pk", tenant)),
                        "order_kind": str(kind),
                        "order_id": order.pk,
                        "product_id": item.product_id,
                    },
                )
                continue

            line = lines.get(product.pk)
            if line is None:
                line = ProductionDemandLine(
                    product_id=product.pk,
                    product_name=product.name,
                    total_quantity=0,
                    sources=DemandSources(),
                    priority=Priority.LOW.value,
                    recipe_id=product.recipe_id,
                )
                lines[product.pk] = line
                contributors[product.pk] = set()

            line.total_quantity += item.quantity

            if (kind, order.pk) not in contributors[product.pk]:
                contributors[product.pk].add((kind, order.pk))
                if kind == OrderKind.CUSTOMER:
                    line.sources.external_orders += 1
                else:
                    line.sources.internal_orders += 1

            if priority_rank(order.priority) > priority_rank(line.priority):
                line.priority = normalize_priority(order.priority).value

    for product_id, line in lines.items():
        per_unit = products[product_id].prep_time_minutes
        line.estimated_prep_minutes = per_unit * line.total_quantity if per_unit else None

    logger.debug(
        f"Demand for {target_date.isoformat()}: {len(lines)} product(s) from {len(orders)} order(s)"
    )
    return list(lines.values())


def sort_demand(lines: list[ProductionDemandLine]) -> list[ProductionDemandLine]:
    """Most urgent first, then largest quantity."""
    return sorted(
        lines,
        key=lambda line: (
            -priority_rank(line.priority),
            -line.total_quantity,
            line.product_name,
        ),
    )


def planning_totals(lines: list[ProductionDemandLine]) -> PlanningTotals:
    return PlanningTotals(
        total_products=len(lines),
        total_quantity=sum(line.total_quantity for line in lines),
        total_prep_minutes=sum(line.estimated_prep_minutes or 0 for line in lines),
        urgent_lines=sum(
            1 for line in lines if priority_rank(line.priority) >= PRIORITY_RANK[Priority.HIGH]
        ),
    )
