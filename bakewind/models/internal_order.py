"""
InternalOrder and InternalOrderItem models.

InternalOrder = production request coming from inside the business
(a café counter running low on croissants, a catering event...).
InternalOrderItem = one product line of that request.

The status field is only ever written through bakewind.transitions.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords


class InternalOrderSource(models.TextChoices):
    """Department that raised the order."""

    CAFE = "cafe", _("Café")
    RESTAURANT = "restaurant", _("Restaurant")
    FRONT_HOUSE = "front_house", _("Front of House")
    CATERING = "catering", _("Catering")
    RETAIL = "retail", _("Retail")
    EVENTS = "events", _("Events")


class InternalOrderStatus(models.TextChoices):
    """InternalOrder lifecycle status."""

    DRAFT = "draft", _("Draft")
    REQUESTED = "requested", _("Requested")
    APPROVED = "approved", _("Approved")
    SCHEDULED = "scheduled", _("Scheduled")
    IN_PRODUCTION = "in_production", _("In Production")
    QUALITY_CHECK = "quality_check", _("Quality Check")
    READY = "ready", _("Ready")
    COMPLETED = "completed", _("Completed")
    DELIVERED = "delivered", _("Delivered")
    CANCELLED = "cancelled", _("Cancelled")


class Priority(models.TextChoices):
    """Order urgency, lowest first."""

    LOW = "low", _("Low")
    NORMAL = "normal", _("Normal")
    HIGH = "high", _("High")
    URGENT = "urgent", _("Urgent")


class RecurringFrequency(models.TextChoices):
    DAILY = "daily", _("Daily")
    WEEKLY = "weekly", _("Weekly")
    MONTHLY = "monthly", _("Monthly")


# Statuses in which an order may no longer be deleted
PROTECTED_STATUSES = frozenset(
    {
        InternalOrderStatus.SCHEDULED,
        InternalOrderStatus.IN_PRODUCTION,
        InternalOrderStatus.QUALITY_CHECK,
        InternalOrderStatus.READY,
        InternalOrderStatus.COMPLETED,
        InternalOrderStatus.DELIVERED,
    }
)

PENDING_STATUSES = frozenset(
    {
        InternalOrderStatus.REQUESTED,
        InternalOrderStatus.APPROVED,
        InternalOrderStatus.SCHEDULED,
        InternalOrderStatus.IN_PRODUCTION,
    }
)

FINISHED_STATUSES = frozenset(
    {InternalOrderStatus.COMPLETED, InternalOrderStatus.DELIVERED}
)


class InternalOrder(models.Model):
    """
    Internal production order.

    Status: DRAFT → REQUESTED → APPROVED → SCHEDULED → IN_PRODUCTION
            → QUALITY_CHECK → READY → COMPLETED → DELIVERED
    (CANCELLED reachable from every non-final status; see bakewind.transitions)
    """

    tenant = models.ForeignKey(
        "bakewind.Tenant",
        on_delete=models.CASCADE,
        related_name="internal_orders",
        verbose_name=_("Tenant"),
    )

    order_number = models.CharField(
        max_length=50,
        blank=True,
        verbose_name=_("Order number"),
        help_text=_("Auto-generated when empty"),
    )
    source = models.CharField(
        max_length=20,
        choices=InternalOrderSource.choices,
        verbose_name=_("Source"),
    )
    status = models.CharField(
        max_length=20,
        choices=InternalOrderStatus.choices,
        default=InternalOrderStatus.DRAFT,
        db_index=True,
        verbose_name=_("Status"),
    )
    priority = models.CharField(
        max_length=10,
        choices=Priority.choices,
        default=Priority.NORMAL,
        verbose_name=_("Priority"),
    )

    # Requester
    requested_by = models.CharField(
        max_length=255,
        verbose_name=_("Requested by"),
    )
    requested_by_email = models.EmailField(
        blank=True,
        verbose_name=_("Requester email"),
    )
    department = models.CharField(
        max_length=100,
        blank=True,
        verbose_name=_("Department"),
    )

    needed_by = models.DateField(
        db_index=True,
        verbose_name=_("Needed by"),
    )

    # Production (OPTIONAL)
    production_date = models.DateField(
        null=True,
        blank=True,
        db_index=True,
        verbose_name=_("Production date"),
    )
    production_shift = models.CharField(
        max_length=50,
        blank=True,
        verbose_name=_("Production shift"),
    )
    batch_number = models.CharField(
        max_length=100,
        blank=True,
        verbose_name=_("Batch number"),
    )
    assigned_staff = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_("Assigned staff"),
    )
    workstation = models.CharField(
        max_length=100,
        blank=True,
        verbose_name=_("Workstation"),
    )
    target_quantity = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_("Target quantity"),
    )
    actual_quantity = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_("Actual quantity"),
    )
    waste_quantity = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_("Waste quantity"),
    )
    quality_notes = models.TextField(
        blank=True,
        verbose_name=_("Quality notes"),
    )

    # Recurrence (descriptor only)
    is_recurring = models.BooleanField(
        default=False,
        verbose_name=_("Recurring"),
    )
    recurring_frequency = models.CharField(
        max_length=10,
        choices=RecurringFrequency.choices,
        blank=True,
        verbose_name=_("Frequency"),
    )
    next_order_date = models.DateField(
        null=True,
        blank=True,
        verbose_name=_("Next order date"),
    )
    recurring_end_date = models.DateField(
        null=True,
        blank=True,
        verbose_name=_("Recurrence ends"),
    )

    special_instructions = models.TextField(
        blank=True,
        verbose_name=_("Special instructions"),
    )
    notes = models.TextField(
        blank=True,
        verbose_name=_("Notes"),
    )

    completed_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_("Completed at"),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    history = HistoricalRecords()

    class Meta:
        db_table = "bakewind_internal_order"
        verbose_name = _("Internal Order")
        verbose_name_plural = _("Internal Orders")
        ordering = ["-created_at"]
        unique_together = [["tenant", "order_number"]]
        indexes = [
            models.Index(fields=["tenant", "status"], name="bw_io_tenant_status_idx"),
            models.Index(fields=["tenant", "needed_by"], name="bw_io_tenant_needed_idx"),
            models.Index(fields=["tenant", "production_date"], name="bw_io_tenant_proddate_idx"),
        ]

    def __str__(self) -> str:
        return self.order_number or f"IO-{self.pk}"

    def save(self, *args, **kwargs):
        """Override save to auto-generate the order number."""
        if not self.order_number:
            self.order_number = self._generate_order_number()
        super().save(*args, **kwargs)

    def _generate_order_number(self) -> str:
        """Generate the tenant's next order number, IO-YYYY-NNNNN."""
        from bakewind.conf import get_setting
        from bakewind.models.sequence import CodeSequence

        prefix = f"{get_setting('ORDER_NUMBER_PREFIX')}-{timezone.now().year}"
        return f"{prefix}-{CodeSequence.next_value(prefix, scope=self.tenant_id):05d}"

    @property
    def demand_date(self):
        """Date the order counts towards in production demand."""
        return self.production_date or self.needed_by

    @property
    def is_protected(self) -> bool:
        """Protected orders can no longer be deleted."""
        return self.status in PROTECTED_STATUSES

    @property
    def is_terminal(self) -> bool:
        from bakewind.transitions import is_terminal

        return is_terminal(self.status)

    @property
    def next_actions(self) -> list[dict]:
        """Status actions the UI may offer for this order."""
        from bakewind.transitions import next_actions

        return next_actions(self.status)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items.all())


class InternalOrderItem(models.Model):
    """Product line of an internal order."""

    order = models.ForeignKey(
        InternalOrder,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name=_("Order"),
    )

    # Plain reference: a deleted product leaves a dangling id, never a cascade
    product_id = models.PositiveIntegerField(
        verbose_name=_("Product ID"),
    )
    product_name = models.CharField(
        max_length=255,
        verbose_name=_("Product name"),
        help_text=_("Snapshot taken when the order was placed"),
    )

    quantity = models.PositiveIntegerField(
        verbose_name=_("Quantity"),
    )
    unit_cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_("Unit cost"),
    )
    special_instructions = models.TextField(
        blank=True,
        verbose_name=_("Special instructions"),
    )
    customizations = models.JSONField(
        default=dict,
        blank=True,
        verbose_name=_("Customizations"),
    )

    class Meta:
        db_table = "bakewind_internal_order_item"
        verbose_name = _("Internal Order Item")
        verbose_name_plural = _("Internal Order Items")
        ordering = ["order", "id"]
        indexes = [
            models.Index(fields=["product_id"], name="bw_ioi_product_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.product_name} x{self.quantity}"
