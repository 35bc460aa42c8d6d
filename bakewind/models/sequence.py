"""
Per-tenant counters behind human order numbers.

InternalOrder.save() asks for the next value of ("<tenant>", "IO-2026")
and formats it as IO-2026-00042. Each tenant numbers its orders
independently, matching the (tenant, order_number) uniqueness of
InternalOrder.
"""

from django.db import models, transaction
from django.utils.translation import gettext_lazy as _


class CodeSequence(models.Model):
    """
    Counter row per (scope, prefix).

    The row is read with SELECT FOR UPDATE, so concurrent order creation
    in one tenant never draws the same number twice.
    """

    scope = models.CharField(
        max_length=50,
        blank=True,
        verbose_name=_("Scope"),
        help_text=_("Tenant id; empty for global counters"),
    )
    prefix = models.CharField(
        max_length=50,
        verbose_name=_("Prefix"),
    )
    last_value = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Last value"),
    )

    class Meta:
        db_table = "bakewind_code_sequence"
        verbose_name = _("Code Sequence")
        verbose_name_plural = _("Code Sequences")
        unique_together = [["scope", "prefix"]]

    def __str__(self) -> str:
        label = f"{self.scope}/{self.prefix}" if self.scope else self.prefix
        return f"{label} → {self.last_value}"

    @classmethod
    def next_value(cls, prefix: str, scope="") -> int:
        """Increment the (scope, prefix) counter and return the new value."""
        with transaction.atomic():
            seq, _created = cls.objects.select_for_update().get_or_create(
                scope=str(scope), prefix=prefix
            )
            seq.last_value += 1
            seq.save(update_fields=["last_value"])
            return seq.last_value
