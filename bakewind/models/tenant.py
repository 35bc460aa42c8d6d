"""
Bakewind Tenant model.

Minimal tenant record. Tenant resolution (domains, memberships, billing)
belongs to the host project; the production core only needs a key to
scope every query and every lock by.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Tenant(models.Model):
    """A bakery business owning its own orders, products and recipes."""

    slug = models.SlugField(
        unique=True,
        max_length=50,
        verbose_name=_("Slug"),
    )
    name = models.CharField(
        max_length=200,
        verbose_name=_("Name"),
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name=_("Active"),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))

    class Meta:
        db_table = "bakewind_tenant"
        verbose_name = _("Tenant")
        verbose_name_plural = _("Tenants")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name
