"""
Product model.

Catalog CRUD lives outside the production core. Bakewind only reads the
two production-relevant attributes: the per-unit prep estimate and the
linked recipe.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Product(models.Model):
    """Sellable product of a tenant."""

    tenant = models.ForeignKey(
        "bakewind.Tenant",
        on_delete=models.CASCADE,
        related_name="products",
        verbose_name=_("Tenant"),
    )

    sku = models.CharField(
        max_length=64,
        verbose_name=_("SKU"),
    )
    name = models.CharField(
        max_length=255,
        verbose_name=_("Name"),
    )

    prep_time_minutes = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_("Prep time per unit (minutes)"),
        help_text=_("Empty when unknown"),
    )

    recipe = models.ForeignKey(
        "bakewind.Recipe",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
        verbose_name=_("Recipe"),
    )

    is_active = models.BooleanField(
        default=True,
        verbose_name=_("Active"),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        db_table = "bakewind_product"
        verbose_name = _("Product")
        verbose_name_plural = _("Products")
        ordering = ["name"]
        unique_together = [["tenant", "sku"]]

    def __str__(self) -> str:
        return self.name
