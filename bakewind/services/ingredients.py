"""
Ingredient requirements for a production date.

Runs the demand aggregator, scales every linked recipe to its line
quantity and sums the scaled ingredients per (ingredient, unit).

Usage:
    from bakewind.services import ingredients_for_date

    for req in ingredients_for_date(tenant, date(2026, 3, 14)):
        print(f"{req.name}: {req.total_quantity} {req.unit}")
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal

from bakewind.exceptions import InvalidYield
from bakewind.models import Recipe
from bakewind.results import IngredientRequirement
from bakewind.scaling import scale
from bakewind.services.demand import compute_demand

logger = logging.getLogger(__name__)

QUANTITY_PRECISION = Decimal("0.001")
COST_PRECISION = Decimal("0.01")


def ingredients_for_date(tenant, target_date: date) -> list[IngredientRequirement]:
    """
    Total ingredient quantities needed for target_date, sorted by name.

    Lines without a linked recipe contribute nothing. A recipe that cannot
    be scaled (yield of zero or less) is skipped with a warning.
    """
    lines = [line for line in compute_demand(tenant, target_date) if line.recipe_id]
    recipes = {
        recipe.pk: recipe
        for recipe in Recipe.objects.filter(
            tenant=tenant, pk__in={line.recipe_id for line in lines}
        ).prefetch_related("ingredients")
    }

    totals: dict[tuple[str, str], dict] = defaultdict(
        lambda: {"quantity": Decimal("0"), "cost": None, "used_in": []}
    )

    for line in lines:
        recipe = recipes.get(line.recipe_id)
        if recipe is None:
            continue

        try:
            scaled = scale(recipe, line.total_quantity, context=target_date.isoformat())
        except InvalidYield as e:
            logger.warning(
                f"Ingredients for {target_date.isoformat()}: skipping recipe {recipe.name} ({e.code})",
                extra={"recipe_id": recipe.pk, "product_id": line.product_id, "code": e.code},
            )
            continue

        for ingredient in scaled.ingredients:
            entry = totals[(ingredient.name, ingredient.unit)]
            entry["quantity"] += ingredient.quantity
            if ingredient.cost is not None:
                entry["cost"] = (entry["cost"] or Decimal("0")) + ingredient.cost
            if recipe.name not in entry["used_in"]:
                entry["used_in"].append(recipe.name)

    result = [
        IngredientRequirement(
            name=name,
            unit=unit,
            total_quantity=data["quantity"].quantize(QUANTITY_PRECISION),
            total_cost=(
                data["cost"].quantize(COST_PRECISION) if data["cost"] is not None else None
            ),
            used_in=data["used_in"],
        )
        for (name, unit), data in totals.items()
    ]
    result.sort(key=lambda req: (req.name.lower(), req.unit))

    logger.debug(
        f"Ingredients for {target_date.isoformat()}: {len(result)} line(s) from {len(lines)} recipe line(s)"
    )
    return result
