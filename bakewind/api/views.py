"""
Bakewind API Views.

Every endpoint is tenant-scoped: the tenant slug comes from the
X-Tenant header (BAKEWIND["TENANT_HEADER"]). Lock sessions come from
X-Session-Id, falling back to the Django session key, then to the user.

Domain errors are answered as {"error": {"code": ..., ...}} with the
status carried by the exception class.
"""

import logging

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from bakewind.conf import get_lock_manager, get_setting
from bakewind.exceptions import BakewindError, NotFound
from bakewind.models import InternalOrder, ProductionSchedule, Recipe, Tenant
from bakewind.protocols.locks import LockHolder, OrderKind
from bakewind.service import Bakery

from .serializers import (
    CompleteItemSerializer,
    DateQuerySerializer,
    IngredientRequirementSerializer,
    InternalOrderSerializer,
    InternalOrderWriteSerializer,
    PlanningTotalsSerializer,
    ProductionDemandLineSerializer,
    ProductionItemSerializer,
    ProductionItemUpdateSerializer,
    ProductionScheduleSerializer,
    RecipeSerializer,
    ScaledRecipeSerializer,
    ScaleQuerySerializer,
    ScheduleFromOrderSerializer,
    StatusChangeSerializer,
)

logger = logging.getLogger(__name__)


class TenantScopedMixin:
    """Tenant, lock holder and error handling shared by every view."""

    permission_classes = [IsAuthenticated]

    def get_tenant(self) -> Tenant:
        if not hasattr(self, "_tenant"):
            slug = self.request.headers.get(get_setting("TENANT_HEADER"), "")
            tenant = Tenant.objects.filter(slug=slug, is_active=True).first()
            if tenant is None:
                raise NotFound(tenant=slug)
            self._tenant = tenant
        return self._tenant

    def get_session_id(self) -> str:
        session_id = self.request.headers.get(get_setting("SESSION_HEADER"))
        if session_id:
            return session_id
        session = getattr(self.request, "session", None)
        if session is not None and session.session_key:
            return session.session_key
        return f"user:{self.request.user.pk}"

    def get_holder(self) -> LockHolder:
        return LockHolder.for_user(self.request.user, session_id=self.get_session_id())

    def get_locks(self):
        return get_lock_manager(self.get_tenant())

    def handle_exception(self, exc):
        if isinstance(exc, BakewindError):
            logger.info(
                f"{self.request.method} {self.request.path} -> {exc.code}",
                extra={"code": exc.code, "status": exc.http_status},
            )
            return Response({"error": exc.as_dict()}, status=exc.http_status)
        return super().handle_exception(exc)


# ══════════════════════════════════════════════════════════════
# INTERNAL ORDERS
# ══════════════════════════════════════════════════════════════


class InternalOrderViewSet(TenantScopedMixin, viewsets.ModelViewSet):
    """
    ViewSet for InternalOrder.

    list: List orders (?status=, ?source=, ?search=)
    create: Create a draft order with items
    retrieve: Get an order
    partial_update: Edit fields (lock-gated)
    destroy: Delete an order (lock-gated, not once scheduled)
    status: Change status through the state machine
    lock: Inspect, acquire or release the edit lock
    stats: Order counters
    """

    serializer_class = InternalOrderSerializer

    def get_queryset(self):
        qs = InternalOrder.objects.filter(tenant=self.get_tenant()).prefetch_related(
            "items"
        )
        params = self.request.query_params
        if params.get("status"):
            qs = qs.filter(status=params["status"])
        if params.get("source"):
            qs = qs.filter(source=params["source"])
        if params.get("search"):
            from django.db.models import Q

            term = params["search"]
            qs = qs.filter(
                Q(order_number__icontains=term)
                | Q(requested_by__icontains=term)
                | Q(department__icontains=term)
            )
        return qs

    def create(self, request, *args, **kwargs):
        """
        Create a draft order.

        POST /api/bakewind/internal-orders/
        {
            "source": "cafe",
            "requested_by": "Ana",
            "needed_by": "2026-03-14",
            "items": [{"product_id": 1, "quantity": 24}]
        }
        """
        serializer = InternalOrderWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        items = [dict(item) for item in data.pop("items")]

        order = Bakery.create_order(self.get_tenant(), items=items, **data)
        return Response(
            InternalOrderSerializer(order).data, status=status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        """
        Edit an order. PUT and PATCH both apply the given fields only.

        Returns 403 while someone else holds the lock.
        """
        order = self.get_object()
        if "status" in request.data:
            raise BakewindError("STATUS_NOT_EDITABLE", status=request.data["status"])

        serializer = InternalOrderWriteSerializer(order, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        items = data.pop("items", None)
        if items is not None:
            items = [dict(item) for item in items]

        order = Bakery.update_order(
            order, holder=self.get_holder(), locks=self.get_locks(), items=items, **data
        )
        return Response(InternalOrderSerializer(order).data)

    def destroy(self, request, *args, **kwargs):
        order = self.get_object()
        Bakery.delete_order(order, holder=self.get_holder(), locks=self.get_locks())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        """
        Change status.

        POST /api/bakewind/internal-orders/{pk}/status/
        {"status": "approved"}
        """
        order = self.get_object()
        serializer = StatusChangeSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        order = Bakery.change_status(
            order,
            serializer.validated_data["status"],
            holder=self.get_holder(),
            locks=self.get_locks(),
        )
        return Response(InternalOrderSerializer(order).data)

    @action(detail=True, methods=["get", "post", "delete"])
    def lock(self, request, pk=None):
        """
        Edit lock.

        GET    -> {"locked", "locked_by_me", "lock"}
        POST   -> {"acquired", "lock"}; acquired=false shows the holder
        DELETE -> 204; 403 when someone else holds it
        """
        order = self.get_object()
        locks = self.get_locks()
        holder = self.get_holder()

        if request.method == "DELETE":
            locks.release(order.pk, OrderKind.INTERNAL, holder)
            return Response(status=status.HTTP_204_NO_CONTENT)

        if request.method == "POST":
            acquired = locks.acquire(order.pk, OrderKind.INTERNAL, holder)
            current = locks.lookup(order.pk, OrderKind.INTERNAL)
            return Response(
                {
                    "acquired": acquired,
                    "lock": current.as_dict() if current else None,
                }
            )

        current = locks.lookup(order.pk, OrderKind.INTERNAL)
        return Response(
            {
                "locked": current is not None,
                "locked_by_me": current is not None and current.holder.same_user(holder),
                "lock": current.as_dict() if current else None,
            }
        )

    @action(detail=False, methods=["get"])
    def stats(self, request):
        """GET /api/bakewind/internal-orders/stats/?source=cafe"""
        return Response(
            Bakery.order_stats(self.get_tenant(), source=request.query_params.get("source"))
        )


class LockCleanupView(TenantScopedMixin, APIView):
    """
    Release every lock of the caller's session.

    POST /api/bakewind/locks/cleanup/
    """

    def post(self, request):
        released = self.get_locks().cleanup(self.get_session_id())
        return Response({"released": released})


# ══════════════════════════════════════════════════════════════
# PRODUCTION
# ══════════════════════════════════════════════════════════════


class ProductionDemandView(TenantScopedMixin, APIView):
    """
    Production demand for a date.

    GET /api/bakewind/production/demand/?date=2026-03-14
    """

    def get(self, request):
        query = DateQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)

        target_date = query.validated_data["date"]
        lines = Bakery.demand(self.get_tenant(), target_date)
        return Response(
            {
                "date": target_date.isoformat(),
                "lines": ProductionDemandLineSerializer(lines, many=True).data,
                "totals": PlanningTotalsSerializer(Bakery.demand_totals(lines)).data,
            }
        )


class ProductionIngredientsView(TenantScopedMixin, APIView):
    """
    Ingredient requirements for a date.

    GET /api/bakewind/production/ingredients/?date=2026-03-14
    """

    def get(self, request):
        query = DateQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)

        target_date = query.validated_data["date"]
        requirements = Bakery.ingredients(self.get_tenant(), target_date)
        return Response(
            {
                "date": target_date.isoformat(),
                "ingredients": IngredientRequirementSerializer(requirements, many=True).data,
            }
        )


class ScheduleFromOrderView(TenantScopedMixin, APIView):
    """
    Schedule production from an approved internal order.

    POST /api/bakewind/production/schedule-from-order/
    {"order_id": 12, "production_date": "2026-03-14"}
    """

    def post(self, request):
        serializer = ScheduleFromOrderSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = Bakery.schedule_from_order(
            self.get_tenant(),
            serializer.validated_data["order_id"],
            serializer.validated_data["production_date"],
            user=request.user,
            holder=self.get_holder(),
            locks=self.get_locks(),
        )
        return Response(
            {
                "order": InternalOrderSerializer(result.order).data,
                "schedule": ProductionScheduleSerializer(result.schedule).data,
            },
            status=status.HTTP_201_CREATED,
        )


class ProductionScheduleViewSet(TenantScopedMixin, viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for ProductionSchedule.

    list: Schedules of the tenant (?date=YYYY-MM-DD)
    retrieve: One schedule with its items
    update_item: Assignment, notes, batch number of one item
    start_item / complete_item: Kitchen progress on one item
    """

    serializer_class = ProductionScheduleSerializer

    def get_queryset(self):
        qs = ProductionSchedule.objects.filter(tenant=self.get_tenant()).prefetch_related(
            "items"
        )
        if self.request.query_params.get("date"):
            qs = qs.filter(date=self.request.query_params["date"])
        return qs

    @action(detail=True, methods=["patch"], url_path=r"items/(?P<item_id>\d+)")
    def update_item(self, request, pk=None, item_id=None):
        """
        PATCH /api/bakewind/production/schedules/{pk}/items/{item_id}/
        {"assigned_to": "Ana", "batch_number": "B-0314"}
        """
        serializer = ProductionItemUpdateSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        item = Bakery.update_item(
            self.get_tenant(), self.get_object().pk, item_id, **serializer.validated_data
        )
        return Response(ProductionItemSerializer(item).data)

    @action(detail=True, methods=["post"], url_path=r"items/(?P<item_id>\d+)/start")
    def start_item(self, request, pk=None, item_id=None):
        """POST /api/bakewind/production/schedules/{pk}/items/{item_id}/start/"""
        item = Bakery.start_item(self.get_tenant(), self.get_object().pk, item_id)
        return Response(ProductionItemSerializer(item).data)

    @action(detail=True, methods=["post"], url_path=r"items/(?P<item_id>\d+)/complete")
    def complete_item(self, request, pk=None, item_id=None):
        """
        POST /api/bakewind/production/schedules/{pk}/items/{item_id}/complete/
        {"quality_check": true, "quality_notes": "Even crumb"}
        """
        serializer = CompleteItemSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        item = Bakery.complete_item(
            self.get_tenant(),
            self.get_object().pk,
            item_id,
            quality_check=serializer.validated_data["quality_check"],
            quality_notes=serializer.validated_data["quality_notes"],
        )
        return Response(ProductionItemSerializer(item).data)


# ══════════════════════════════════════════════════════════════
# RECIPES
# ══════════════════════════════════════════════════════════════


class RecipeViewSet(
    TenantScopedMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for Recipe (read-only).

    list: Active recipes of the tenant
    retrieve: One recipe with ingredients
    scale: Scaled preview for a production quantity
    """

    serializer_class = RecipeSerializer

    def get_queryset(self):
        return Recipe.objects.filter(
            tenant=self.get_tenant(), is_active=True
        ).prefetch_related("ingredients")

    @action(detail=True, methods=["get"])
    def scale(self, request, pk=None):
        """
        GET /api/bakewind/recipes/{pk}/scale/?quantity=48
        """
        recipe = self.get_object()
        query = ScaleQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)

        scaled = Bakery.scale_recipe(
            self.get_tenant(),
            recipe.pk,
            query.validated_data["quantity"],
            context=query.validated_data.get("context") or None,
        )
        return Response(ScaledRecipeSerializer(scaled).data)
