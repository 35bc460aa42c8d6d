"""
Recipe and RecipeIngredient models.

Recipe = base formula for one batch of a product, with its yield.
RecipeIngredient = one ingredient line of the base formula.

Quantities are always stored for the BASE recipe; production quantities
are derived on demand by the scaler (bakewind.scaling).
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords


class Recipe(models.Model):
    """
    Production recipe.

    Defines:
    - Yield of one batch (quantity + unit)
    - Prep and cook times for one batch (minutes)
    - Ingredient lines with base quantities and costs
    """

    tenant = models.ForeignKey(
        "bakewind.Tenant",
        on_delete=models.CASCADE,
        related_name="recipes",
        verbose_name=_("Tenant"),
    )

    name = models.CharField(
        max_length=255,
        verbose_name=_("Name"),
    )
    category = models.CharField(
        max_length=100,
        blank=True,
        verbose_name=_("Category"),
    )
    description = models.TextField(
        blank=True,
        verbose_name=_("Description"),
    )

    prep_time_minutes = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Prep time (minutes)"),
    )
    cook_time_minutes = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Cook time (minutes)"),
    )

    yield_quantity = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("1"),
        verbose_name=_("Yield"),
        help_text=_("Units produced by one batch of this recipe"),
    )
    yield_unit = models.CharField(
        max_length=50,
        default="pcs",
        verbose_name=_("Yield unit"),
    )

    cost_per_unit = models.DecimalField(
        max_digits=10,
        decimal_places=4,
        null=True,
        blank=True,
        verbose_name=_("Cost per unit"),
    )

    instructions = models.JSONField(
        default=list,
        blank=True,
        verbose_name=_("Instructions"),
        help_text=_("Ordered list of instruction steps"),
    )

    is_active = models.BooleanField(
        default=True,
        verbose_name=_("Active"),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    history = HistoricalRecords()

    class Meta:
        db_table = "bakewind_recipe"
        verbose_name = _("Recipe")
        verbose_name_plural = _("Recipes")
        ordering = ["name"]
        indexes = [
            models.Index(fields=["tenant", "is_active"], name="bw_recipe_tenant_active_idx"),
        ]

    def clean(self):
        super().clean()
        if self.yield_quantity is not None and self.yield_quantity <= 0:
            raise ValidationError({
                "yield_quantity": _("Must be greater than zero.")
            })
        if self.instructions and not isinstance(self.instructions, list):
            raise ValidationError({
                "instructions": _("Must be a list of instruction steps.")
            })

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} ({self.yield_quantity} {self.yield_unit})"

    def as_data(self):
        """Snapshot this recipe and its ingredients for the scaler."""
        from bakewind.results import IngredientLine, RecipeData

        return RecipeData(
            id=self.pk,
            name=self.name,
            description=self.description,
            category=self.category,
            yield_quantity=self.yield_quantity,
            yield_unit=self.yield_unit,
            prep_time_minutes=self.prep_time_minutes,
            cook_time_minutes=self.cook_time_minutes,
            cost_per_unit=self.cost_per_unit,
            instructions=tuple(self.instructions or ()),
            ingredients=tuple(
                IngredientLine(
                    name=item.ingredient_name,
                    quantity=item.quantity,
                    unit=item.unit,
                    cost=item.cost,
                )
                for item in self.ingredients.all()
            ),
        )


class RecipeIngredient(models.Model):
    """Ingredient line of a base recipe."""

    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        related_name="ingredients",
        verbose_name=_("Recipe"),
    )

    ingredient_name = models.CharField(
        max_length=255,
        verbose_name=_("Ingredient"),
    )

    # Quantity for the BASE recipe
    quantity = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        verbose_name=_("Quantity"),
    )
    unit = models.CharField(
        max_length=20,
        default="kg",
        verbose_name=_("Unit"),
        help_text=_("kg, g, L, ml, pcs..."),
    )
    cost = models.DecimalField(
        max_digits=10,
        decimal_places=4,
        null=True,
        blank=True,
        verbose_name=_("Cost"),
        help_text=_("Cost of this line for the base recipe"),
    )

    notes = models.TextField(
        blank=True,
        verbose_name=_("Notes"),
    )

    class Meta:
        db_table = "bakewind_recipe_ingredient"
        verbose_name = _("Ingredient")
        verbose_name_plural = _("Ingredients")
        ordering = ["recipe", "id"]

    def __str__(self) -> str:
        return f"{self.ingredient_name} ({self.quantity} {self.unit})"
