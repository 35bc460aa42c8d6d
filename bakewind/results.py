"""
Bakewind Result Types.

Derived, non-persisted structures returned by the production core:
recipe snapshots for the scaler, demand lines, transition results and
scheduling results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bakewind.models import InternalOrder, ProductionItem, ProductionSchedule


# ══════════════════════════════════════════════════════════════
# RECIPES
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class IngredientLine:
    """Ingredient of a recipe snapshot."""

    name: str
    quantity: Decimal
    unit: str
    cost: Decimal | None = None


@dataclass(frozen=True)
class RecipeData:
    """Immutable snapshot of a Recipe, as consumed by the scaler."""

    id: int | None
    name: str
    yield_quantity: Decimal
    yield_unit: str = "pcs"
    description: str = ""
    category: str = ""
    prep_time_minutes: int = 0
    cook_time_minutes: int = 0
    cost_per_unit: Decimal | None = None
    instructions: tuple[str, ...] = ()
    ingredients: tuple[IngredientLine, ...] = ()


@dataclass(frozen=True)
class ScaledRecipe(RecipeData):
    """
    Recipe resized to a production quantity.

    Same shape as RecipeData; yield_quantity holds the requested quantity
    and base_yield the yield it was scaled from.
    """

    scale_factor: Decimal = Decimal("1")
    base_yield: Decimal | None = None


# ══════════════════════════════════════════════════════════════
# DEMAND
# ══════════════════════════════════════════════════════════════


@dataclass
class DemandSources:
    """Number of contributing orders per kind (orders, not units)."""

    external_orders: int = 0
    internal_orders: int = 0

    @property
    def total(self) -> int:
        return self.external_orders + self.internal_orders


@dataclass
class ProductionDemandLine:
    """Aggregated production demand of one product on one date."""

    product_id: int
    product_name: str
    total_quantity: int
    sources: DemandSources
    priority: str
    estimated_prep_minutes: int | None = None
    recipe_id: int | None = None

    @property
    def prep_time_display(self) -> str:
        """Human-readable prep estimate, '-' when unestimated."""
        minutes = self.estimated_prep_minutes
        if not minutes:
            return "-"
        if minutes >= 60:
            hours, mins = divmod(minutes, 60)
            return f"{hours}h {mins}m" if mins else f"{hours}h"
        return f"{minutes}m"


@dataclass
class PlanningTotals:
    """Headline numbers for the planning view."""

    total_products: int
    total_quantity: int
    total_prep_minutes: int
    urgent_lines: int


@dataclass
class IngredientRequirement:
    """Ingredient quantity needed for a day's demand."""

    name: str
    unit: str
    total_quantity: Decimal
    total_cost: Decimal | None
    used_in: list[str] = field(default_factory=list)


# ══════════════════════════════════════════════════════════════
# LIFECYCLE
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class TransitionResult:
    """
    Outcome of a validated status transition.

    The caller persists status and updates in one write.
    """

    previous_status: str
    status: str
    updates: dict[str, Any] = field(default_factory=dict)

    @property
    def fields(self) -> dict[str, Any]:
        """All fields to write, status included."""
        return {"status": self.status, **self.updates}


@dataclass
class ScheduleResult:
    """Result of scheduling production from an internal order."""

    order: InternalOrder
    schedule: ProductionSchedule
    items: list[ProductionItem] = field(default_factory=list)

    @property
    def production_date(self) -> date:
        return self.schedule.date
