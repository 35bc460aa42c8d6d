"""
Tests for production item execution (bakewind.services.execution).

Starting and completing items recounts the schedule and moves the
linked internal order through the state machine.
"""

from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal

import pytest

from bakewind import signals
from bakewind.exceptions import BakewindError, NotFound
from bakewind.models import (
    InternalOrder,
    InternalOrderItem,
    InternalOrderStatus,
    Product,
    ProductionItem,
    ProductionStatus,
    Recipe,
    Tenant,
)
from bakewind.service import Bakery
from bakewind.services.scheduling import schedule_from_order

PRODUCTION_DAY = date(2026, 3, 14)
MORNING = datetime(2026, 3, 14, 6, 30, tzinfo=dt_timezone.utc)
NOON = datetime(2026, 3, 14, 12, 0, tzinfo=dt_timezone.utc)


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def tenant(db):
    return Tenant.objects.create(slug="kitchen", name="Kitchen Bakery")


def make_product(tenant, sku, name):
    recipe = Recipe.objects.create(tenant=tenant, name=name, yield_quantity=Decimal("12"))
    return Product.objects.create(tenant=tenant, sku=sku, name=name, recipe=recipe)


def scheduled_order(tenant, products):
    order = InternalOrder.objects.create(
        tenant=tenant,
        source="cafe",
        requested_by="Ana",
        needed_by=date(2026, 3, 15),
        status=InternalOrderStatus.APPROVED,
    )
    for product, quantity in products:
        InternalOrderItem.objects.create(
            order=order, product_id=product.pk, product_name=product.name, quantity=quantity
        )
    return schedule_from_order(tenant, order.pk, PRODUCTION_DAY)


@pytest.fixture
def single(tenant):
    """Scheduled order with one croissant item."""
    return scheduled_order(tenant, [(make_product(tenant, "CRS", "Croissant"), 24)])


@pytest.fixture
def double(tenant):
    """Scheduled order with croissant and brioche items."""
    return scheduled_order(
        tenant,
        [
            (make_product(tenant, "CRD", "Croissant"), 24),
            (make_product(tenant, "BRI", "Brioche"), 6),
        ],
    )


# ═══════════════════════════════════════════════════════════════════
# Start
# ═══════════════════════════════════════════════════════════════════


class TestStartItem:
    def test_starts_item(self, tenant, single):
        item = Bakery.start_item(tenant, single.schedule.pk, single.items[0].pk, now=MORNING)

        assert item.status == ProductionStatus.IN_PROGRESS
        assert item.start_time == MORNING
        item.refresh_from_db()
        assert item.status == ProductionStatus.IN_PROGRESS

    def test_moves_order_into_production(self, tenant, single):
        Bakery.start_item(tenant, single.schedule.pk, single.items[0].pk)

        single.order.refresh_from_db()
        assert single.order.status == InternalOrderStatus.IN_PRODUCTION

    def test_second_start_leaves_order(self, tenant, double):
        Bakery.start_item(tenant, double.schedule.pk, double.items[0].pk)
        Bakery.start_item(tenant, double.schedule.pk, double.items[1].pk)

        double.order.refresh_from_db()
        assert double.order.status == InternalOrderStatus.IN_PRODUCTION

    def test_already_started(self, tenant, single):
        Bakery.start_item(tenant, single.schedule.pk, single.items[0].pk)

        with pytest.raises(BakewindError) as exc:
            Bakery.start_item(tenant, single.schedule.pk, single.items[0].pk)

        assert exc.value.code == "INVALID_ITEM_STATUS"
        assert exc.value.details["current"] == "in_progress"

    def test_cancelled_order_is_left_alone(self, tenant, single):
        InternalOrder.objects.filter(pk=single.order.pk).update(
            status=InternalOrderStatus.CANCELLED
        )

        Bakery.start_item(tenant, single.schedule.pk, single.items[0].pk)

        single.order.refresh_from_db()
        assert single.order.status == InternalOrderStatus.CANCELLED

    def test_item_without_order(self, tenant, single):
        ProductionItem.objects.filter(pk=single.items[0].pk).update(internal_order=None)

        item = Bakery.start_item(tenant, single.schedule.pk, single.items[0].pk)

        assert item.status == ProductionStatus.IN_PROGRESS
        single.order.refresh_from_db()
        assert single.order.status == InternalOrderStatus.SCHEDULED


# ═══════════════════════════════════════════════════════════════════
# Complete
# ═══════════════════════════════════════════════════════════════════


class TestCompleteItem:
    def test_completes_item(self, tenant, single):
        Bakery.start_item(tenant, single.schedule.pk, single.items[0].pk, now=MORNING)

        item = Bakery.complete_item(
            tenant,
            single.schedule.pk,
            single.items[0].pk,
            quality_check=True,
            quality_notes="Even lamination",
            now=NOON,
        )

        item.refresh_from_db()
        assert item.status == ProductionStatus.COMPLETED
        assert item.start_time == MORNING
        assert item.completed_time == NOON
        assert item.quality_check is True
        assert item.quality_notes == "Even lamination"

    def test_recounts_schedule(self, tenant, double):
        Bakery.complete_item(tenant, double.schedule.pk, double.items[0].pk)

        schedule = double.schedule
        schedule.refresh_from_db()
        assert schedule.completed_items == 1
        assert schedule.total_items == 2
        assert schedule.efficiency == 50

    def test_complete_without_start(self, tenant, single):
        item = Bakery.complete_item(tenant, single.schedule.pk, single.items[0].pk, now=NOON)

        assert item.start_time == NOON
        assert item.completed_time == NOON

    def test_last_item_sends_order_to_quality_check(self, tenant, double):
        Bakery.start_item(tenant, double.schedule.pk, double.items[0].pk)
        Bakery.complete_item(tenant, double.schedule.pk, double.items[0].pk)

        double.order.refresh_from_db()
        assert double.order.status == InternalOrderStatus.IN_PRODUCTION

        Bakery.complete_item(tenant, double.schedule.pk, double.items[1].pk)

        double.order.refresh_from_db()
        assert double.order.status == InternalOrderStatus.QUALITY_CHECK
        assert double.order.completed_at is None

    def test_cancelled_item_does_not_hold_back_order(self, tenant, double):
        ProductionItem.objects.filter(pk=double.items[1].pk).update(
            status=ProductionStatus.CANCELLED
        )

        Bakery.complete_item(tenant, double.schedule.pk, double.items[0].pk)

        double.order.refresh_from_db()
        assert double.order.status == InternalOrderStatus.QUALITY_CHECK

    def test_already_completed(self, tenant, single):
        Bakery.complete_item(tenant, single.schedule.pk, single.items[0].pk)

        with pytest.raises(BakewindError) as exc:
            Bakery.complete_item(tenant, single.schedule.pk, single.items[0].pk)

        assert exc.value.code == "INVALID_ITEM_STATUS"
        schedule = single.schedule
        schedule.refresh_from_db()
        assert schedule.completed_items == 1

    def test_signals(self, tenant, single):
        received = []

        def on_item(sender, item, previous_status, status, **kwargs):
            received.append(("item", previous_status, status))

        def on_status(sender, order, previous_status, status, holder, **kwargs):
            received.append(("order", previous_status, status, holder))

        signals.production_item_changed.connect(on_item)
        signals.order_status_changed.connect(on_status)
        try:
            Bakery.complete_item(tenant, single.schedule.pk, single.items[0].pk)
        finally:
            signals.production_item_changed.disconnect(on_item)
            signals.order_status_changed.disconnect(on_status)

        assert received == [
            ("item", "scheduled", "completed"),
            ("order", "scheduled", "in_production", None),
            ("order", "in_production", "quality_check", None),
        ]


# ═══════════════════════════════════════════════════════════════════
# Update and scoping
# ═══════════════════════════════════════════════════════════════════


class TestUpdateItem:
    def test_updates_fields(self, tenant, single):
        item = Bakery.update_item(
            tenant,
            single.schedule.pk,
            single.items[0].pk,
            assigned_to="Bruno",
            batch_number="B-0314",
        )

        item.refresh_from_db()
        assert item.assigned_to == "Bruno"
        assert item.batch_number == "B-0314"
        assert item.status == ProductionStatus.SCHEDULED

    def test_status_not_editable(self, tenant, single):
        with pytest.raises(BakewindError) as exc:
            Bakery.update_item(
                tenant, single.schedule.pk, single.items[0].pk, status="completed"
            )

        assert exc.value.code == "UNKNOWN_FIELD"
        assert exc.value.details["fields"] == ["status"]

    def test_other_tenant(self, tenant, single):
        other = Tenant.objects.create(slug="other", name="Other Bakery")

        with pytest.raises(NotFound):
            Bakery.start_item(other, single.schedule.pk, single.items[0].pk)

        assert Bakery.get_item(tenant, single.schedule.pk, single.items[0].pk).status == (
            ProductionStatus.SCHEDULED
        )

    def test_item_from_another_schedule(self, tenant, single, double):
        with pytest.raises(NotFound):
            Bakery.complete_item(tenant, double.schedule.pk, single.items[0].pk)
