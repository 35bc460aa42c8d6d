"""
Order lifecycle service -- create, edit, change status, delete, stats.

Every mutation of an existing order checks the edit lock first: it
passes when the order is unlocked or locked by the caller, and raises
OrderLocked otherwise. Status changes go through bakewind.transitions.

All methods are @classmethod so the mixin can be composed into Bakery
without instantiation.
"""

from __future__ import annotations

import logging
from datetime import datetime

from django.db import transaction
from django.db.models import Count

from bakewind.exceptions import BakewindError, NotFound
from bakewind.models import (
    FINISHED_STATUSES,
    PENDING_STATUSES,
    InternalOrder,
    InternalOrderItem,
    InternalOrderStatus,
    Product,
)
from bakewind.protocols.locks import LockHolder, OrderKind
from bakewind.transitions import transition

logger = logging.getLogger(__name__)

# Fields update_order() may write; status has its own path
EDITABLE_FIELDS = frozenset(
    {
        "source",
        "priority",
        "requested_by",
        "requested_by_email",
        "department",
        "needed_by",
        "production_date",
        "production_shift",
        "batch_number",
        "assigned_staff",
        "workstation",
        "target_quantity",
        "actual_quantity",
        "waste_quantity",
        "quality_notes",
        "is_recurring",
        "recurring_frequency",
        "next_order_date",
        "recurring_end_date",
        "special_instructions",
        "notes",
    }
)

ITEM_FIELDS = ("unit_cost", "special_instructions", "customizations")


def _lock_manager(tenant, locks):
    if locks is not None:
        return locks
    from bakewind.conf import get_lock_manager

    return get_lock_manager(tenant)


class OrderLifecycle:
    """Internal order operations."""

    @classmethod
    def get_order(cls, tenant, order_id) -> InternalOrder:
        order = InternalOrder.objects.filter(tenant=tenant, pk=order_id).first()
        if order is None:
            raise NotFound(order_id=str(order_id))
        return order

    @classmethod
    def create_order(cls, tenant, items: list[dict], **fields) -> InternalOrder:
        """
        Create a draft order with its items.

        Args:
            tenant: Owning tenant
            items: [{"product_id": 1, "quantity": 12, ...}, ...]
            **fields: InternalOrder fields (source, requested_by, needed_by...)

        Raises:
            BakewindError: EMPTY_ORDER, INVALID_QUANTITY, STATUS_NOT_EDITABLE
            NotFound: unknown product
        """
        if "status" in fields:
            raise BakewindError("STATUS_NOT_EDITABLE", status=fields["status"])
        unknown = set(fields) - EDITABLE_FIELDS - {"order_number"}
        if unknown:
            raise BakewindError("UNKNOWN_FIELD", fields=sorted(unknown))
        if not items:
            raise BakewindError("EMPTY_ORDER")

        with transaction.atomic():
            order = InternalOrder.objects.create(
                tenant=tenant,
                status=InternalOrderStatus.DRAFT,
                **fields,
            )
            cls._write_items(order, items)

        logger.info(
            f"Created internal order {order.order_number} with {len(items)} item(s)",
            extra={"tenant": str(order.tenant_id), "order_id": order.pk},
        )
        return order

    @classmethod
    def update_order(
        cls,
        order: InternalOrder,
        holder: LockHolder | None = None,
        locks=None,
        items: list[dict] | None = None,
        **fields,
    ) -> InternalOrder:
        """
        Edit order fields (and optionally replace its items).

        Raises:
            OrderLocked: someone else holds the order's lock
            BakewindError: STATUS_NOT_EDITABLE when status is passed
        """
        if "status" in fields:
            raise BakewindError(
                "STATUS_NOT_EDITABLE", order=order.order_number, status=fields["status"]
            )
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise BakewindError("UNKNOWN_FIELD", fields=sorted(unknown))
        if items is not None and not items:
            raise BakewindError("EMPTY_ORDER", order=order.order_number)

        _lock_manager(order.tenant_id, locks).ensure_editable(
            order.pk, OrderKind.INTERNAL, holder
        )

        with transaction.atomic():
            for name, value in fields.items():
                setattr(order, name, value)
            order.save(update_fields=[*fields, "updated_at"])

            if items is not None:
                order.items.all().delete()
                cls._write_items(order, items)

        logger.info(
            f"Updated internal order {order.order_number}",
            extra={
                "order_id": order.pk,
                "fields": sorted(fields),
                "items_replaced": items is not None,
            },
        )
        return order

    @classmethod
    def change_status(
        cls,
        order: InternalOrder,
        status: str,
        holder: LockHolder | None = None,
        locks=None,
        now: datetime | None = None,
    ) -> InternalOrder:
        """
        Move order to a new status.

        approved -> scheduled needs a production schedule, so it is routed
        through schedule_from_order() using the order's production date
        (or needed_by).

        Raises:
            OrderLocked: someone else holds the order's lock
            InvalidTransition: status not reachable from the current one
        """
        locks = _lock_manager(order.tenant_id, locks)

        if (
            status == InternalOrderStatus.SCHEDULED
            and order.status == InternalOrderStatus.APPROVED
        ):
            from bakewind.services.scheduling import schedule_from_order

            result = schedule_from_order(
                order.tenant_id,
                order.pk,
                order.production_date or order.needed_by,
                holder=holder,
                locks=locks,
            )
            return result.order

        with transaction.atomic():
            order = InternalOrder.objects.select_for_update().get(pk=order.pk)
            locks.ensure_editable(order.pk, OrderKind.INTERNAL, holder)

            result = transition(order, status, now=now)
            for name, value in result.fields.items():
                setattr(order, name, value)
            order.save(update_fields=[*result.fields, "updated_at"])

        logger.info(
            f"Order {order.order_number}: {result.previous_status} -> {result.status}",
            extra={
                "tenant": str(order.tenant_id),
                "order_id": order.pk,
                "previous_status": result.previous_status,
                "status": result.status,
            },
        )

        from bakewind.signals import order_status_changed

        order_status_changed.send(
            sender=InternalOrder,
            order=order,
            previous_status=result.previous_status,
            status=result.status,
            holder=holder,
        )
        return order

    @classmethod
    def delete_order(
        cls, order: InternalOrder, holder: LockHolder | None = None, locks=None
    ) -> None:
        """
        Delete an order that has not reached production.

        Raises:
            OrderLocked: someone else holds the order's lock
            BakewindError: ORDER_PROTECTED for scheduled or later orders
        """
        locks = _lock_manager(order.tenant_id, locks)
        locks.ensure_editable(order.pk, OrderKind.INTERNAL, holder)

        if order.is_protected:
            raise BakewindError(
                "ORDER_PROTECTED", order=order.order_number, status=order.status
            )

        order_id, number = order.pk, order.order_number
        order.delete()

        if holder is not None:
            locks.release(order_id, OrderKind.INTERNAL, holder)

        logger.info(f"Deleted internal order {number}", extra={"order_id": order_id})

    @classmethod
    def order_stats(cls, tenant, source: str | None = None) -> dict:
        """Order counters for the dashboard."""
        qs = InternalOrder.objects.filter(tenant=tenant)
        if source:
            qs = qs.filter(source=source)

        by_status = {
            row["status"]: row["count"]
            for row in qs.values("status").annotate(count=Count("id")).order_by()
        }
        return {
            "total": sum(by_status.values()),
            "pending": sum(by_status.get(s, 0) for s in PENDING_STATUSES),
            "completed": sum(by_status.get(s, 0) for s in FINISHED_STATUSES),
            "by_status": {
                status.value: by_status.get(status.value, 0)
                for status in InternalOrderStatus
            },
        }

    # ── helpers ──

    @classmethod
    def _write_items(cls, order: InternalOrder, items: list[dict]) -> list[InternalOrderItem]:
        product_ids = {int(item["product_id"]) for item in items}
        names = dict(
            Product.objects.filter(tenant_id=order.tenant_id, pk__in=product_ids)
            .values_list("pk", "name")
        )

        created = []
        for data in items:
            product_id = int(data["product_id"])
            quantity = int(data.get("quantity") or 0)
            if quantity <= 0:
                raise BakewindError(
                    "INVALID_QUANTITY", product_id=product_id, quantity=quantity
                )
            name = data.get("product_name") or names.get(product_id)
            if name is None:
                raise NotFound(product_id=str(product_id))

            created.append(
                InternalOrderItem.objects.create(
                    order=order,
                    product_id=product_id,
                    product_name=name,
                    quantity=quantity,
                    **{key: data[key] for key in ITEM_FIELDS if key in data},
                )
            )
        return created
