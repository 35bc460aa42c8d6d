"""
Tests for Bakewind API views (bakewind.api.views).

Verifies the DRF endpoints for internal orders, edit locks, production
planning and recipes.
"""

from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from bakewind.conf import get_lock_registry
from bakewind.models import (
    CustomerOrder,
    CustomerOrderItem,
    InternalOrder,
    InternalOrderItem,
    InternalOrderStatus,
    Product,
    ProductionSchedule,
    Recipe,
    RecipeIngredient,
    Tenant,
)

pytestmark = pytest.mark.urls("bakewind.tests.test_api_urls")

User = get_user_model()

BASE = "/api/bakewind"
DAY = date(2026, 3, 14)


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture(autouse=True)
def clean_locks():
    get_lock_registry().reset()
    yield
    get_lock_registry().reset()


@pytest.fixture
def tenant(db):
    return Tenant.objects.create(slug="api-bakery", name="API Bakery")


def client_for(user, tenant, session_id):
    client = APIClient()
    client.force_authenticate(user=user)
    client.credentials(HTTP_X_TENANT=tenant.slug, HTTP_X_SESSION_ID=session_id)
    return client


@pytest.fixture
def ana(db, tenant):
    user = User.objects.create_user(username="ana", password="test123", first_name="Ana")
    return client_for(user, tenant, "session-ana")


@pytest.fixture
def bruno(db, tenant):
    user = User.objects.create_user(username="bruno", password="test123", first_name="Bruno")
    return client_for(user, tenant, "session-bruno")


@pytest.fixture
def recipe(tenant):
    recipe = Recipe.objects.create(
        tenant=tenant,
        name="Croissant",
        yield_quantity=Decimal("12"),
        prep_time_minutes=30,
        cook_time_minutes=20,
    )
    RecipeIngredient.objects.create(
        recipe=recipe, ingredient_name="Flour", quantity=Decimal("1.000"), unit="kg", cost=Decimal("1.20")
    )
    return recipe


@pytest.fixture
def croissant(tenant, recipe):
    return Product.objects.create(
        tenant=tenant, sku="CRO", name="Croissant", prep_time_minutes=3, recipe=recipe
    )


@pytest.fixture
def tart(tenant):
    return Product.objects.create(tenant=tenant, sku="TRT", name="Tart")


def make_order(tenant, product, quantity=24, status=InternalOrderStatus.DRAFT, **kwargs):
    order = InternalOrder.objects.create(
        tenant=tenant,
        source="cafe",
        requested_by="Ana",
        needed_by=DAY,
        status=status,
        **kwargs,
    )
    InternalOrderItem.objects.create(
        order=order, product_id=product.pk, product_name=product.name, quantity=quantity
    )
    return order


@pytest.fixture
def order(tenant, croissant):
    return make_order(tenant, croissant)


def order_url(order, suffix=""):
    return f"{BASE}/internal-orders/{order.pk}/{suffix}"


# ═══════════════════════════════════════════════════════════════════
# Access
# ═══════════════════════════════════════════════════════════════════


class TestAccess:
    def test_requires_authentication(self, tenant, order):
        client = APIClient()
        client.credentials(HTTP_X_TENANT=tenant.slug)

        response = client.get(f"{BASE}/internal-orders/")
        assert response.status_code in (401, 403)

    def test_unknown_tenant(self, ana):
        ana.credentials(HTTP_X_TENANT="nowhere")

        response = ana.get(f"{BASE}/internal-orders/")

        assert response.status_code == 404
        assert response.data["error"]["code"] == "NOT_FOUND"

    def test_inactive_tenant(self, ana, tenant):
        tenant.is_active = False
        tenant.save()

        assert ana.get(f"{BASE}/internal-orders/").status_code == 404

    def test_other_tenant_order_invisible(self, ana, croissant):
        other = Tenant.objects.create(slug="other", name="Other")
        foreign = make_order(other, croissant)

        assert ana.get(order_url(foreign)).status_code == 404


# ═══════════════════════════════════════════════════════════════════
# Internal orders
# ═══════════════════════════════════════════════════════════════════


class TestInternalOrderAPI:
    def test_list(self, ana, order):
        response = ana.get(f"{BASE}/internal-orders/")

        assert response.status_code == 200
        assert [row["id"] for row in response.data] == [order.pk]

    def test_list_filters(self, ana, tenant, croissant, order):
        make_order(tenant, croissant, status=InternalOrderStatus.APPROVED)

        response = ana.get(f"{BASE}/internal-orders/", {"status": "approved"})
        assert len(response.data) == 1
        assert response.data[0]["status"] == "approved"

        response = ana.get(f"{BASE}/internal-orders/", {"search": order.order_number})
        assert [row["id"] for row in response.data] == [order.pk]

    def test_retrieve(self, ana, order):
        response = ana.get(order_url(order))

        assert response.status_code == 200
        assert response.data["order_number"] == order.order_number
        assert response.data["total_quantity"] == 24
        assert response.data["items"][0]["product_name"] == "Croissant"
        assert [a["status"] for a in response.data["next_actions"]] == ["requested", "cancelled"]

    def test_create(self, ana, croissant):
        response = ana.post(
            f"{BASE}/internal-orders/",
            {
                "source": "catering",
                "requested_by": "Ana",
                "needed_by": "2026-03-14",
                "items": [{"product_id": croissant.pk, "quantity": 12}],
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.data["status"] == "draft"
        assert response.data["order_number"].startswith("IO-")
        assert response.data["items"][0]["product_name"] == "Croissant"

    def test_create_requires_items(self, ana):
        response = ana.post(
            f"{BASE}/internal-orders/",
            {"source": "cafe", "requested_by": "Ana", "needed_by": "2026-03-14"},
            format="json",
        )
        assert response.status_code == 400
        assert "items" in response.data

    def test_patch(self, ana, order):
        response = ana.patch(order_url(order), {"notes": "Extra butter"}, format="json")

        assert response.status_code == 200
        assert response.data["notes"] == "Extra butter"

    def test_patch_status_rejected(self, ana, order):
        response = ana.patch(order_url(order), {"status": "approved"}, format="json")

        assert response.status_code == 400
        assert response.data["error"]["code"] == "STATUS_NOT_EDITABLE"
        order.refresh_from_db()
        assert order.status == InternalOrderStatus.DRAFT

    def test_delete(self, ana, order):
        response = ana.delete(order_url(order))

        assert response.status_code == 204
        assert not InternalOrder.objects.filter(pk=order.pk).exists()

    def test_delete_protected(self, ana, tenant, croissant):
        scheduled = make_order(tenant, croissant, status=InternalOrderStatus.SCHEDULED)

        response = ana.delete(order_url(scheduled))

        assert response.status_code == 400
        assert response.data["error"]["code"] == "ORDER_PROTECTED"

    def test_stats(self, ana, tenant, croissant, order):
        make_order(tenant, croissant, status=InternalOrderStatus.COMPLETED)

        response = ana.get(f"{BASE}/internal-orders/stats/")

        assert response.status_code == 200
        assert response.data["total"] == 2
        assert response.data["completed"] == 1
        assert response.data["by_status"]["draft"] == 1


# ═══════════════════════════════════════════════════════════════════
# Status
# ═══════════════════════════════════════════════════════════════════


class TestStatusAPI:
    def test_change_status(self, ana, order):
        response = ana.post(order_url(order, "status/"), {"status": "requested"}, format="json")

        assert response.status_code == 200
        assert response.data["status"] == "requested"
        assert [a["status"] for a in response.data["next_actions"]] == ["approved", "cancelled"]

    def test_invalid_transition(self, ana, order):
        response = ana.post(order_url(order, "status/"), {"status": "completed"}, format="json")

        assert response.status_code == 400
        error = response.data["error"]
        assert error["code"] == "INVALID_TRANSITION"
        assert error["current"] == "draft"
        assert error["requested"] == "completed"
        assert error["allowed"] == ["cancelled", "requested"]

    def test_unknown_status(self, ana, order):
        response = ana.post(order_url(order, "status/"), {"status": "baked"}, format="json")
        assert response.status_code == 400

    def test_approved_to_scheduled_creates_schedule(self, ana, tenant, croissant):
        approved = make_order(tenant, croissant, status=InternalOrderStatus.APPROVED)

        response = ana.post(order_url(approved, "status/"), {"status": "scheduled"}, format="json")

        assert response.status_code == 200
        assert response.data["status"] == "scheduled"
        assert ProductionSchedule.objects.filter(tenant=tenant, date=DAY).count() == 1


# ═══════════════════════════════════════════════════════════════════
# Locks
# ═══════════════════════════════════════════════════════════════════


class TestLockAPI:
    def test_acquire_and_inspect(self, ana, order):
        response = ana.post(order_url(order, "lock/"))

        assert response.status_code == 200
        assert response.data["acquired"] is True
        assert response.data["lock"]["locked_by_user_name"] == "Ana"
        assert response.data["lock"]["locked_by_session_id"] == "session-ana"

        response = ana.get(order_url(order, "lock/"))
        assert response.data["locked"] is True
        assert response.data["locked_by_me"] is True

    def test_busy_lock_shows_holder(self, ana, bruno, order):
        ana.post(order_url(order, "lock/"))

        response = bruno.post(order_url(order, "lock/"))

        assert response.status_code == 200
        assert response.data["acquired"] is False
        assert response.data["lock"]["locked_by_user_name"] == "Ana"

        response = bruno.get(order_url(order, "lock/"))
        assert response.data["locked"] is True
        assert response.data["locked_by_me"] is False

    def test_unlocked(self, ana, order):
        response = ana.get(order_url(order, "lock/"))
        assert response.data == {"locked": False, "locked_by_me": False, "lock": None}

    def test_edits_blocked_while_locked(self, ana, bruno, order):
        ana.post(order_url(order, "lock/"))

        response = bruno.patch(order_url(order), {"notes": "Mine"}, format="json")
        assert response.status_code == 403
        assert response.data["error"]["code"] == "ORDER_LOCKED"
        assert response.data["error"]["locked_by"] == "Ana"

        assert bruno.post(order_url(order, "status/"), {"status": "requested"}, format="json").status_code == 403
        assert bruno.delete(order_url(order)).status_code == 403

        assert ana.patch(order_url(order), {"notes": "Ana's"}, format="json").status_code == 200

    def test_release(self, ana, bruno, order):
        ana.post(order_url(order, "lock/"))

        assert bruno.delete(order_url(order, "lock/")).status_code == 403
        assert ana.delete(order_url(order, "lock/")).status_code == 204

        assert bruno.post(order_url(order, "lock/")).data["acquired"] is True

    def test_release_unlocked_is_noop(self, ana, order):
        assert ana.delete(order_url(order, "lock/")).status_code == 204

    def test_cleanup(self, ana, bruno, tenant, croissant, order):
        second = make_order(tenant, croissant)
        ana.post(order_url(order, "lock/"))
        ana.post(order_url(second, "lock/"))

        response = ana.post(f"{BASE}/locks/cleanup/")

        assert response.status_code == 200
        assert response.data == {"released": 2}
        assert bruno.post(order_url(order, "lock/")).data["acquired"] is True


# ═══════════════════════════════════════════════════════════════════
# Production
# ═══════════════════════════════════════════════════════════════════


class TestProductionAPI:
    def test_demand(self, ana, tenant, croissant):
        customer = CustomerOrder.objects.create(
            tenant=tenant, order_number="CO-1", customer_name="Hotel", pickup_date=DAY
        )
        CustomerOrderItem.objects.create(
            order=customer, product_id=croissant.pk, product_name="Croissant", quantity=3
        )
        make_order(tenant, croissant, quantity=5, status=InternalOrderStatus.REQUESTED)

        response = ana.get(f"{BASE}/production/demand/", {"date": "2026-03-14"})

        assert response.status_code == 200
        assert response.data["date"] == "2026-03-14"
        line = response.data["lines"][0]
        assert line["product_name"] == "Croissant"
        assert line["total_quantity"] == 8
        assert line["sources"] == {"external_orders": 1, "internal_orders": 1, "total": 2}
        assert line["estimated_prep_minutes"] == 24
        assert response.data["totals"]["total_quantity"] == 8

    def test_demand_requires_date(self, ana):
        response = ana.get(f"{BASE}/production/demand/")
        assert response.status_code == 400

    def test_ingredients(self, ana, tenant, croissant):
        make_order(tenant, croissant, quantity=24, status=InternalOrderStatus.REQUESTED)

        response = ana.get(f"{BASE}/production/ingredients/", {"date": "2026-03-14"})

        assert response.status_code == 200
        flour = response.data["ingredients"][0]
        assert flour["name"] == "Flour"
        assert flour["total_quantity"] == "2.000"
        assert flour["total_cost"] == "2.40"

    def test_schedule_from_order(self, ana, tenant, croissant):
        approved = make_order(tenant, croissant, status=InternalOrderStatus.APPROVED)

        response = ana.post(
            f"{BASE}/production/schedule-from-order/",
            {"order_id": approved.pk, "production_date": "2026-03-15"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["order"]["status"] == "scheduled"
        assert response.data["order"]["production_date"] == "2026-03-15"
        schedule = response.data["schedule"]
        assert schedule["date"] == "2026-03-15"
        assert schedule["created_by"] == "user:ana"
        assert len(schedule["items"]) == 1
        assert schedule["items"][0]["recipe_name"] == "Croissant"

    def test_schedule_missing_recipe(self, ana, tenant, tart):
        approved = make_order(tenant, tart, status=InternalOrderStatus.APPROVED)

        response = ana.post(
            f"{BASE}/production/schedule-from-order/",
            {"order_id": approved.pk, "production_date": "2026-03-15"},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["error"]["code"] == "RECIPE_MISSING_FOR_PRODUCT"
        assert response.data["error"]["product"] == "Tart"
        approved.refresh_from_db()
        assert approved.status == InternalOrderStatus.APPROVED
        assert not ProductionSchedule.objects.exists()

    def test_schedule_locked_by_other(self, ana, bruno, tenant, croissant):
        approved = make_order(tenant, croissant, status=InternalOrderStatus.APPROVED)
        ana.post(order_url(approved, "lock/"))

        response = bruno.post(
            f"{BASE}/production/schedule-from-order/",
            {"order_id": approved.pk, "production_date": "2026-03-15"},
            format="json",
        )

        assert response.status_code == 403
        assert not ProductionSchedule.objects.exists()

    def test_schedule_unknown_order(self, ana):
        response = ana.post(
            f"{BASE}/production/schedule-from-order/",
            {"order_id": 999999, "production_date": "2026-03-15"},
            format="json",
        )
        assert response.status_code == 404

    def test_schedules_list(self, ana, tenant, croissant):
        approved = make_order(tenant, croissant, status=InternalOrderStatus.APPROVED)
        ana.post(
            f"{BASE}/production/schedule-from-order/",
            {"order_id": approved.pk, "production_date": "2026-03-15"},
            format="json",
        )

        response = ana.get(f"{BASE}/production/schedules/", {"date": "2026-03-15"})
        assert response.status_code == 200
        assert len(response.data) == 1

        response = ana.get(f"{BASE}/production/schedules/", {"date": "2026-03-16"})
        assert response.data == []


class TestProductionItemAPI:
    @pytest.fixture
    def scheduled(self, ana, tenant, croissant):
        approved = make_order(tenant, croissant, status=InternalOrderStatus.APPROVED)
        response = ana.post(
            f"{BASE}/production/schedule-from-order/",
            {"order_id": approved.pk, "production_date": "2026-03-15"},
            format="json",
        )
        schedule = response.data["schedule"]
        return approved, f"{BASE}/production/schedules/{schedule['id']}/items/{schedule['items'][0]['id']}/"

    def test_start(self, ana, scheduled):
        order, item_url = scheduled

        response = ana.post(f"{item_url}start/")

        assert response.status_code == 200
        assert response.data["status"] == "in_progress"
        assert response.data["start_time"] is not None
        order.refresh_from_db()
        assert order.status == InternalOrderStatus.IN_PRODUCTION

    def test_complete(self, ana, scheduled):
        order, item_url = scheduled
        ana.post(f"{item_url}start/")

        response = ana.post(
            f"{item_url}complete/",
            {"quality_check": True, "quality_notes": "Golden"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["status"] == "completed"
        assert response.data["quality_check"] is True
        assert response.data["quality_notes"] == "Golden"
        order.refresh_from_db()
        assert order.status == InternalOrderStatus.QUALITY_CHECK

        schedule = ProductionSchedule.objects.get()
        assert schedule.completed_items == 1

    def test_start_twice(self, ana, scheduled):
        _order, item_url = scheduled
        ana.post(f"{item_url}start/")

        response = ana.post(f"{item_url}start/")

        assert response.status_code == 400
        assert response.data["error"]["code"] == "INVALID_ITEM_STATUS"

    def test_patch(self, ana, scheduled):
        _order, item_url = scheduled

        response = ana.patch(item_url, {"assigned_to": "Bruno"}, format="json")

        assert response.status_code == 200
        assert response.data["assigned_to"] == "Bruno"
        assert response.data["status"] == "scheduled"

    def test_unknown_item(self, ana, scheduled):
        _order, item_url = scheduled
        schedule_url = item_url.split("items/")[0]

        response = ana.post(f"{schedule_url}items/999999/start/")

        assert response.status_code == 404

    def test_other_tenant_schedule(self, scheduled, db):
        _order, item_url = scheduled
        other = Tenant.objects.create(slug="elsewhere", name="Elsewhere")
        user = User.objects.create_user(username="carla", password="test123")
        carla = client_for(user, other, "session-carla")

        response = carla.post(f"{item_url}start/")

        assert response.status_code == 404


# ═══════════════════════════════════════════════════════════════════
# Recipes
# ═══════════════════════════════════════════════════════════════════


class TestRecipeAPI:
    def test_list(self, ana, recipe):
        response = ana.get(f"{BASE}/recipes/")

        assert response.status_code == 200
        assert [row["name"] for row in response.data] == ["Croissant"]

    def test_inactive_hidden(self, ana, recipe):
        recipe.is_active = False
        recipe.save()

        assert ana.get(f"{BASE}/recipes/").data == []

    def test_scale(self, ana, recipe):
        response = ana.get(f"{BASE}/recipes/{recipe.pk}/scale/", {"quantity": "24"})

        assert response.status_code == 200
        assert response.data["name"] == "Croissant (Production Scale)"
        assert response.data["scale_factor"] == "2.0000"
        assert response.data["yield_quantity"] == "24.000"
        assert response.data["prep_time_minutes"] == 43
        assert response.data["cook_time_minutes"] == 29
        assert response.data["ingredients"][0]["quantity"] == "2.000"

    def test_scale_invalid_quantity(self, ana, recipe):
        response = ana.get(f"{BASE}/recipes/{recipe.pk}/scale/", {"quantity": "0"})

        assert response.status_code == 400
        assert response.data["error"]["code"] == "INVALID_YIELD"

    def test_scale_large_factor(self, ana, tenant):
        tiny = Recipe.objects.create(tenant=tenant, name="Glaze drop", yield_quantity=Decimal("0.01"))
        RecipeIngredient.objects.create(
            recipe=tiny, ingredient_name="Sugar", quantity=Decimal("5.000"), unit="kg"
        )

        response = ana.get(f"{BASE}/recipes/{tiny.pk}/scale/", {"quantity": "99999999.999"})

        assert response.status_code == 200
        assert response.data["scale_factor"] == "9999999999.9000"
        assert response.data["yield_quantity"] == "99999999.999"
        assert response.data["ingredients"][0]["quantity"] == "49999999999.500"

    def test_scale_unknown_recipe(self, ana):
        assert ana.get(f"{BASE}/recipes/999999/scale/", {"quantity": "1"}).status_code == 404
