"""
CustomerOrder and CustomerOrderItem models.

External (customer-facing) sales orders. Order CRUD, payments and the
storefront live elsewhere; production only reads the date, status,
priority and item lines of these orders when aggregating demand.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class CustomerOrderStatus(models.TextChoices):
    DRAFT = "draft", _("Draft")
    PENDING = "pending", _("Pending")
    CONFIRMED = "confirmed", _("Confirmed")
    READY = "ready", _("Ready")
    DELIVERED = "delivered", _("Delivered")
    CANCELLED = "cancelled", _("Cancelled")


class CustomerOrderPriority(models.TextChoices):
    """Customer-facing urgency. RUSH ranks as urgent in production."""

    LOW = "low", _("Low")
    NORMAL = "normal", _("Normal")
    HIGH = "high", _("High")
    RUSH = "rush", _("Rush")


class CustomerOrder(models.Model):
    """Customer sales order."""

    tenant = models.ForeignKey(
        "bakewind.Tenant",
        on_delete=models.CASCADE,
        related_name="customer_orders",
        verbose_name=_("Tenant"),
    )

    order_number = models.CharField(
        max_length=50,
        verbose_name=_("Order number"),
    )
    customer_name = models.CharField(
        max_length=255,
        verbose_name=_("Customer"),
    )
    status = models.CharField(
        max_length=20,
        choices=CustomerOrderStatus.choices,
        default=CustomerOrderStatus.PENDING,
        db_index=True,
        verbose_name=_("Status"),
    )
    priority = models.CharField(
        max_length=10,
        choices=CustomerOrderPriority.choices,
        default=CustomerOrderPriority.NORMAL,
        verbose_name=_("Priority"),
    )

    pickup_date = models.DateField(
        null=True,
        blank=True,
        db_index=True,
        verbose_name=_("Pickup date"),
    )
    delivery_date = models.DateField(
        null=True,
        blank=True,
        db_index=True,
        verbose_name=_("Delivery date"),
    )

    notes = models.TextField(
        blank=True,
        verbose_name=_("Notes"),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    class Meta:
        db_table = "bakewind_customer_order"
        verbose_name = _("Customer Order")
        verbose_name_plural = _("Customer Orders")
        ordering = ["-created_at"]
        unique_together = [["tenant", "order_number"]]

    def __str__(self) -> str:
        return f"{self.order_number} - {self.customer_name}"

    @property
    def demand_date(self):
        """Date the order counts towards in production demand."""
        return self.delivery_date or self.pickup_date


class CustomerOrderItem(models.Model):
    """Product line of a customer order."""

    order = models.ForeignKey(
        CustomerOrder,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name=_("Order"),
    )

    product_id = models.PositiveIntegerField(
        verbose_name=_("Product ID"),
    )
    product_name = models.CharField(
        max_length=255,
        verbose_name=_("Product name"),
    )
    quantity = models.PositiveIntegerField(
        verbose_name=_("Quantity"),
    )
    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
        verbose_name=_("Unit price"),
    )
    special_instructions = models.TextField(
        blank=True,
        verbose_name=_("Special instructions"),
    )

    class Meta:
        db_table = "bakewind_customer_order_item"
        verbose_name = _("Customer Order Item")
        verbose_name_plural = _("Customer Order Items")
        ordering = ["order", "id"]

    def __str__(self) -> str:
        return f"{self.product_name} x{self.quantity}"
