"""
ProductionSchedule and ProductionItem models.

ProductionSchedule = kitchen plan for one date.
ProductionItem = one recipe run inside that plan, traced back to the
order that caused it.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords


class ProductionStatus(models.TextChoices):
    """ProductionItem status."""

    SCHEDULED = "scheduled", _("Scheduled")
    IN_PROGRESS = "in_progress", _("In Progress")
    COMPLETED = "completed", _("Completed")
    CANCELLED = "cancelled", _("Cancelled")


class ProductionSchedule(models.Model):
    """
    Production schedule for a date.

    Created by the "schedule production" action together with the
    order's approved → scheduled transition, in a single transaction.
    """

    tenant = models.ForeignKey(
        "bakewind.Tenant",
        on_delete=models.CASCADE,
        related_name="production_schedules",
        verbose_name=_("Tenant"),
    )

    date = models.DateField(
        verbose_name=_("Production date"),
    )
    total_items = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Total items"),
    )
    completed_items = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Completed items"),
    )
    notes = models.TextField(
        blank=True,
        verbose_name=_("Notes"),
    )
    created_by = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_("Created by"),
        help_text=_("Ex: 'user:42', 'system:scheduler'"),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    history = HistoricalRecords()

    class Meta:
        db_table = "bakewind_production_schedule"
        verbose_name = _("Production Schedule")
        verbose_name_plural = _("Production Schedules")
        ordering = ["-date"]
        indexes = [
            models.Index(fields=["tenant", "date"], name="bw_sched_tenant_date_idx"),
        ]

    def __str__(self) -> str:
        return f"Schedule {self.date.isoformat()}"

    @property
    def efficiency(self) -> int:
        """Completed share of the schedule, in percent."""
        if not self.total_items:
            return 0
        return round(self.completed_items / self.total_items * 100)


class ProductionItem(models.Model):
    """One recipe run in a production schedule."""

    schedule = models.ForeignKey(
        ProductionSchedule,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name=_("Schedule"),
    )

    internal_order = models.ForeignKey(
        "bakewind.InternalOrder",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="production_items",
        verbose_name=_("Internal order"),
    )
    customer_order_id = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_("Customer order ID"),
    )

    recipe = models.ForeignKey(
        "bakewind.Recipe",
        on_delete=models.PROTECT,
        related_name="production_items",
        verbose_name=_("Recipe"),
    )
    recipe_name = models.CharField(
        max_length=255,
        verbose_name=_("Recipe name"),
    )
    quantity = models.PositiveIntegerField(
        verbose_name=_("Quantity"),
    )

    status = models.CharField(
        max_length=20,
        choices=ProductionStatus.choices,
        default=ProductionStatus.SCHEDULED,
        db_index=True,
        verbose_name=_("Status"),
    )
    scheduled_time = models.DateTimeField(
        verbose_name=_("Scheduled time"),
    )
    start_time = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_("Start time"),
    )
    completed_time = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_("Completed time"),
    )

    assigned_to = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_("Assigned to"),
    )
    notes = models.TextField(
        blank=True,
        verbose_name=_("Notes"),
    )
    batch_number = models.CharField(
        max_length=100,
        blank=True,
        verbose_name=_("Batch number"),
    )
    quality_check = models.BooleanField(
        default=False,
        verbose_name=_("Quality checked"),
    )
    quality_notes = models.TextField(
        blank=True,
        verbose_name=_("Quality notes"),
    )

    class Meta:
        db_table = "bakewind_production_item"
        verbose_name = _("Production Item")
        verbose_name_plural = _("Production Items")
        ordering = ["scheduled_time", "id"]

    def __str__(self) -> str:
        return f"{self.recipe_name} x{self.quantity}"
