"""
Bakewind API URLs.

Include this in your project's urlpatterns:

    path('api/bakewind/', include('bakewind.api.urls')),
"""

from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import (
    InternalOrderViewSet,
    LockCleanupView,
    ProductionDemandView,
    ProductionIngredientsView,
    ProductionScheduleViewSet,
    RecipeViewSet,
    ScheduleFromOrderView,
)

router = DefaultRouter()
router.register("internal-orders", InternalOrderViewSet, basename="internal-order")
router.register("production/schedules", ProductionScheduleViewSet, basename="production-schedule")
router.register("recipes", RecipeViewSet, basename="recipe")

urlpatterns = [
    path("locks/cleanup/", LockCleanupView.as_view(), name="lock-cleanup"),
    path("production/demand/", ProductionDemandView.as_view(), name="production-demand"),
    path(
        "production/ingredients/",
        ProductionIngredientsView.as_view(),
        name="production-ingredients",
    ),
    path(
        "production/schedule-from-order/",
        ScheduleFromOrderView.as_view(),
        name="schedule-from-order",
    ),
    *router.urls,
]
