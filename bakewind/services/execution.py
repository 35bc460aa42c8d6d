"""
Execution service -- start, complete and annotate production items.

The kitchen works through a schedule item by item. Each change recounts
the schedule's completed items, and the linked internal order follows
through the state machine:

    first item started (or completed)   scheduled -> in_production
    every item of the order completed   in_production -> quality_check

Order follow-ups are kitchen progress, not edits, so they do not check
the order's edit lock. They never skip a state: an order that is not in
the expected status is left alone.

All methods are @classmethod so the mixin can be composed into Bakery
without instantiation.
"""

from __future__ import annotations

import logging
from datetime import datetime

from django.db import transaction
from django.utils import timezone

from bakewind.exceptions import BakewindError, NotFound
from bakewind.models import (
    InternalOrder,
    InternalOrderStatus,
    ProductionItem,
    ProductionSchedule,
    ProductionStatus,
)
from bakewind.transitions import transition

logger = logging.getLogger(__name__)

# Fields update_item() may write; status has its own path
ITEM_EDITABLE_FIELDS = frozenset({"assigned_to", "notes", "batch_number"})

STARTABLE = (ProductionStatus.SCHEDULED,)
COMPLETABLE = (ProductionStatus.SCHEDULED, ProductionStatus.IN_PROGRESS)


def _locked_item(tenant, schedule_id, item_id) -> ProductionItem:
    item = (
        ProductionItem.objects.select_for_update()
        .filter(schedule__tenant=tenant, schedule_id=schedule_id, pk=item_id)
        .first()
    )
    if item is None:
        raise NotFound(schedule_id=str(schedule_id), item_id=str(item_id))
    return item


def _recount(schedule_id) -> ProductionSchedule:
    schedule = ProductionSchedule.objects.select_for_update().get(pk=schedule_id)
    schedule.completed_items = schedule.items.filter(
        status=ProductionStatus.COMPLETED
    ).count()
    schedule.save(update_fields=["completed_items", "updated_at"])
    return schedule


def _advance(order: InternalOrder, expected, target, now: datetime, results: list) -> None:
    if order.status != expected:
        return
    result = transition(order, target, now=now)
    for name, value in result.fields.items():
        setattr(order, name, value)
    order.save(update_fields=[*result.fields, "updated_at"])
    results.append(result)


class ProductionExecution:
    """Production item operations."""

    @classmethod
    def get_item(cls, tenant, schedule_id, item_id) -> ProductionItem:
        item = ProductionItem.objects.filter(
            schedule__tenant=tenant, schedule_id=schedule_id, pk=item_id
        ).first()
        if item is None:
            raise NotFound(schedule_id=str(schedule_id), item_id=str(item_id))
        return item

    @classmethod
    def update_item(cls, tenant, schedule_id, item_id, **fields) -> ProductionItem:
        """
        Edit assignment, notes or batch number of an item.

        Raises:
            NotFound: item is not in the tenant's schedule
            BakewindError: UNKNOWN_FIELD for anything else
        """
        unknown = set(fields) - ITEM_EDITABLE_FIELDS
        if unknown:
            raise BakewindError("UNKNOWN_FIELD", fields=sorted(unknown))

        with transaction.atomic():
            item = _locked_item(tenant, schedule_id, item_id)
            for name, value in fields.items():
                setattr(item, name, value)
            item.save(update_fields=list(fields))

        logger.info(
            f"Updated production item {item.pk} ({item.recipe_name})",
            extra={"schedule_id": item.schedule_id, "fields": sorted(fields)},
        )
        return item

    @classmethod
    def start_item(
        cls, tenant, schedule_id, item_id, now: datetime | None = None
    ) -> ProductionItem:
        """
        Start producing an item.

        Raises:
            NotFound: item is not in the tenant's schedule
            BakewindError: INVALID_ITEM_STATUS unless the item is scheduled
        """
        now = now or timezone.now()
        order_results = []

        with transaction.atomic():
            item = _locked_item(tenant, schedule_id, item_id)
            if item.status not in STARTABLE:
                raise BakewindError(
                    "INVALID_ITEM_STATUS",
                    item_id=str(item.pk),
                    current=item.status,
                    expected=[str(s) for s in STARTABLE],
                )

            previous = item.status
            item.status = ProductionStatus.IN_PROGRESS
            item.start_time = now
            item.save(update_fields=["status", "start_time"])

            _recount(item.schedule_id)
            order = cls._follow_up_order(item, now, order_results)

        cls._emit(item, previous, order, order_results)
        return item

    @classmethod
    def complete_item(
        cls,
        tenant,
        schedule_id,
        item_id,
        quality_check: bool = False,
        quality_notes: str = "",
        now: datetime | None = None,
    ) -> ProductionItem:
        """
        Finish an item, recording the quality check.

        An item completed without being started gets start_time = now.

        Raises:
            NotFound: item is not in the tenant's schedule
            BakewindError: INVALID_ITEM_STATUS for completed or cancelled items
        """
        now = now or timezone.now()
        order_results = []

        with transaction.atomic():
            item = _locked_item(tenant, schedule_id, item_id)
            if item.status not in COMPLETABLE:
                raise BakewindError(
                    "INVALID_ITEM_STATUS",
                    item_id=str(item.pk),
                    current=item.status,
                    expected=[str(s) for s in COMPLETABLE],
                )

            previous = item.status
            item.status = ProductionStatus.COMPLETED
            item.start_time = item.start_time or now
            item.completed_time = now
            item.quality_check = quality_check
            update_fields = ["status", "start_time", "completed_time", "quality_check"]
            if quality_notes:
                item.quality_notes = quality_notes
                update_fields.append("quality_notes")
            item.save(update_fields=update_fields)

            schedule = _recount(item.schedule_id)
            order = cls._follow_up_order(item, now, order_results)

        logger.info(
            f"Schedule {schedule.date.isoformat()}: {schedule.completed_items}/"
            f"{schedule.total_items} item(s) completed",
            extra={"schedule_id": schedule.pk, "efficiency": schedule.efficiency},
        )
        cls._emit(item, previous, order, order_results)
        return item

    # ── helpers ──

    @classmethod
    def _follow_up_order(cls, item: ProductionItem, now: datetime, results: list):
        if item.internal_order_id is None:
            return None

        order = InternalOrder.objects.select_for_update().get(pk=item.internal_order_id)
        _advance(
            order,
            InternalOrderStatus.SCHEDULED,
            InternalOrderStatus.IN_PRODUCTION,
            now,
            results,
        )

        if item.status == ProductionStatus.COMPLETED:
            pending = order.production_items.exclude(
                status__in=[ProductionStatus.COMPLETED, ProductionStatus.CANCELLED]
            )
            if not pending.exists():
                _advance(
                    order,
                    InternalOrderStatus.IN_PRODUCTION,
                    InternalOrderStatus.QUALITY_CHECK,
                    now,
                    results,
                )
        return order

    @classmethod
    def _emit(cls, item, previous_status, order, order_results) -> None:
        from bakewind.signals import order_status_changed, production_item_changed

        logger.info(
            f"Production item {item.pk} ({item.recipe_name}): {previous_status} -> {item.status}",
            extra={
                "schedule_id": item.schedule_id,
                "item_id": item.pk,
                "order_id": item.internal_order_id,
            },
        )
        production_item_changed.send(
            sender=ProductionItem,
            item=item,
            previous_status=str(previous_status),
            status=str(item.status),
        )
        for result in order_results:
            logger.info(
                f"Order {order.order_number}: {result.previous_status} -> {result.status} "
                f"(production progress)",
                extra={"order_id": order.pk, "status": result.status},
            )
            order_status_changed.send(
                sender=InternalOrder,
                order=order,
                previous_status=result.previous_status,
                status=result.status,
                holder=None,
            )
