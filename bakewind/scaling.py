"""
Recipe Scaler.

Resizes a recipe to a production quantity:

    factor = target_quantity / recipe.yield_quantity

    ingredient quantity and cost  x factor
    cost_per_unit                 x factor
    prep and cook time            ceil(t * sqrt(factor))

Times grow sub-linearly because mixing a double batch does not take twice
as long. It is a heuristic; callers should not read the times as exact.

Always scale from the base recipe. Scaling a ScaledRecipe again compounds
the name and description annotations and is not supported.
"""

from __future__ import annotations

from decimal import ROUND_CEILING, Decimal, InvalidOperation

from bakewind.exceptions import BakewindError, InvalidYield
from bakewind.results import IngredientLine, RecipeData, ScaledRecipe

NAME_SUFFIX = " (Production Scale)"


def _to_decimal(value, field: str) -> Decimal:
    try:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise BakewindError("INVALID_QUANTITY", **{field: str(value)})


def _scale_time(minutes: int, root: Decimal) -> int:
    if not minutes:
        return 0
    return int((Decimal(minutes) * root).to_integral_value(rounding=ROUND_CEILING))


def scale(recipe, target_quantity, context: str | None = None) -> ScaledRecipe:
    """
    Scale recipe to target_quantity.

    Args:
        recipe: RecipeData, or anything with as_data() (a Recipe instance)
        target_quantity: Quantity to produce, in the recipe's yield unit
        context: Optional production context for the description

    Raises:
        InvalidYield: recipe yield or target quantity is zero or negative
    """
    if not isinstance(recipe, RecipeData):
        recipe = recipe.as_data()

    base_yield = _to_decimal(recipe.yield_quantity, "yield_quantity")
    target = _to_decimal(target_quantity, "target_quantity")

    if base_yield <= 0:
        raise InvalidYield(recipe=recipe.name, yield_quantity=str(base_yield))
    if target <= 0:
        raise InvalidYield(recipe=recipe.name, target_quantity=str(target))

    factor = target / base_yield
    root = factor.sqrt()

    ingredients = tuple(
        IngredientLine(
            name=line.name,
            quantity=line.quantity * factor,
            unit=line.unit,
            cost=line.cost * factor if line.cost is not None else None,
        )
        for line in recipe.ingredients
    )

    description = f"Scaled recipe for {target} {recipe.yield_unit} ({factor:.1f}x original recipe)"
    if context:
        description += f" - Production demand for {context}"

    return ScaledRecipe(
        id=recipe.id,
        name=f"{recipe.name}{NAME_SUFFIX}",
        description=description,
        category=recipe.category,
        yield_quantity=target,
        yield_unit=recipe.yield_unit,
        prep_time_minutes=_scale_time(recipe.prep_time_minutes, root),
        cook_time_minutes=_scale_time(recipe.cook_time_minutes, root),
        cost_per_unit=(
            recipe.cost_per_unit * factor if recipe.cost_per_unit is not None else None
        ),
        instructions=recipe.instructions,
        ingredients=ingredients,
        scale_factor=factor,
        base_yield=base_yield,
    )
