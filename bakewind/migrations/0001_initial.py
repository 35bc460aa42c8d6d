"""
Initial migration for Bakewind.

Creates:
- Tenant, CodeSequence
- Recipe, RecipeIngredient, Product
- InternalOrder, InternalOrderItem
- CustomerOrder, CustomerOrderItem
- ProductionSchedule, ProductionItem
- History tables for InternalOrder, Recipe and ProductionSchedule
"""

import django.db.models.deletion
import simple_history.models
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models

INTERNAL_ORDER_SOURCES = [
    ("cafe", "Café"),
    ("restaurant", "Restaurant"),
    ("front_house", "Front of House"),
    ("catering", "Catering"),
    ("retail", "Retail"),
    ("events", "Events"),
]

INTERNAL_ORDER_STATUSES = [
    ("draft", "Draft"),
    ("requested", "Requested"),
    ("approved", "Approved"),
    ("scheduled", "Scheduled"),
    ("in_production", "In Production"),
    ("quality_check", "Quality Check"),
    ("ready", "Ready"),
    ("completed", "Completed"),
    ("delivered", "Delivered"),
    ("cancelled", "Cancelled"),
]

PRIORITIES = [
    ("low", "Low"),
    ("normal", "Normal"),
    ("high", "High"),
    ("urgent", "Urgent"),
]

RECURRING_FREQUENCIES = [
    ("daily", "Daily"),
    ("weekly", "Weekly"),
    ("monthly", "Monthly"),
]

HISTORY_TYPES = [("+", "Created"), ("~", "Changed"), ("-", "Deleted")]


def _id():
    return models.BigAutoField(
        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
    )


def _history_id():
    return models.BigIntegerField(
        auto_created=True, blank=True, db_index=True, verbose_name="ID"
    )


def _history_fields():
    return [
        ("history_id", models.AutoField(primary_key=True, serialize=False)),
        ("history_date", models.DateTimeField(db_index=True)),
        ("history_change_reason", models.CharField(max_length=100, null=True)),
        ("history_type", models.CharField(choices=HISTORY_TYPES, max_length=1)),
        (
            "history_user",
            models.ForeignKey(
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="+",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
    ]


def _history_tenant():
    return (
        "tenant",
        models.ForeignKey(
            blank=True,
            db_constraint=False,
            null=True,
            on_delete=django.db.models.deletion.DO_NOTHING,
            related_name="+",
            to="bakewind.tenant",
            verbose_name="Tenant",
        ),
    )


def _tenant(related_name):
    return (
        "tenant",
        models.ForeignKey(
            on_delete=django.db.models.deletion.CASCADE,
            related_name=related_name,
            to="bakewind.tenant",
            verbose_name="Tenant",
        ),
    )


def _internal_order_fields():
    return [
        ("order_number", models.CharField(blank=True, help_text="Auto-generated when empty", max_length=50, verbose_name="Order number")),
        ("source", models.CharField(choices=INTERNAL_ORDER_SOURCES, max_length=20, verbose_name="Source")),
        ("status", models.CharField(choices=INTERNAL_ORDER_STATUSES, db_index=True, default="draft", max_length=20, verbose_name="Status")),
        ("priority", models.CharField(choices=PRIORITIES, default="normal", max_length=10, verbose_name="Priority")),
        ("requested_by", models.CharField(max_length=255, verbose_name="Requested by")),
        ("requested_by_email", models.EmailField(blank=True, max_length=254, verbose_name="Requester email")),
        ("department", models.CharField(blank=True, max_length=100, verbose_name="Department")),
        ("needed_by", models.DateField(db_index=True, verbose_name="Needed by")),
        ("production_date", models.DateField(blank=True, db_index=True, null=True, verbose_name="Production date")),
        ("production_shift", models.CharField(blank=True, max_length=50, verbose_name="Production shift")),
        ("batch_number", models.CharField(blank=True, max_length=100, verbose_name="Batch number")),
        ("assigned_staff", models.CharField(blank=True, max_length=255, verbose_name="Assigned staff")),
        ("workstation", models.CharField(blank=True, max_length=100, verbose_name="Workstation")),
        ("target_quantity", models.PositiveIntegerField(blank=True, null=True, verbose_name="Target quantity")),
        ("actual_quantity", models.PositiveIntegerField(blank=True, null=True, verbose_name="Actual quantity")),
        ("waste_quantity", models.PositiveIntegerField(blank=True, null=True, verbose_name="Waste quantity")),
        ("quality_notes", models.TextField(blank=True, verbose_name="Quality notes")),
        ("is_recurring", models.BooleanField(default=False, verbose_name="Recurring")),
        ("recurring_frequency", models.CharField(blank=True, choices=RECURRING_FREQUENCIES, max_length=10, verbose_name="Frequency")),
        ("next_order_date", models.DateField(blank=True, null=True, verbose_name="Next order date")),
        ("recurring_end_date", models.DateField(blank=True, null=True, verbose_name="Recurrence ends")),
        ("special_instructions", models.TextField(blank=True, verbose_name="Special instructions")),
        ("notes", models.TextField(blank=True, verbose_name="Notes")),
        ("completed_at", models.DateTimeField(blank=True, null=True, verbose_name="Completed at")),
    ]


def _recipe_fields():
    return [
        ("name", models.CharField(max_length=255, verbose_name="Name")),
        ("category", models.CharField(blank=True, max_length=100, verbose_name="Category")),
        ("description", models.TextField(blank=True, verbose_name="Description")),
        ("prep_time_minutes", models.PositiveIntegerField(default=0, verbose_name="Prep time (minutes)")),
        ("cook_time_minutes", models.PositiveIntegerField(default=0, verbose_name="Cook time (minutes)")),
        ("yield_quantity", models.DecimalField(decimal_places=2, default=Decimal("1"), help_text="Units produced by one batch of this recipe", max_digits=10, verbose_name="Yield")),
        ("yield_unit", models.CharField(default="pcs", max_length=50, verbose_name="Yield unit")),
        ("cost_per_unit", models.DecimalField(blank=True, decimal_places=4, max_digits=10, null=True, verbose_name="Cost per unit")),
        ("instructions", models.JSONField(blank=True, default=list, help_text="Ordered list of instruction steps", verbose_name="Instructions")),
        ("is_active", models.BooleanField(default=True, verbose_name="Active")),
    ]


def _schedule_fields():
    return [
        ("date", models.DateField(verbose_name="Production date")),
        ("total_items", models.PositiveIntegerField(default=0, verbose_name="Total items")),
        ("completed_items", models.PositiveIntegerField(default=0, verbose_name="Completed items")),
        ("notes", models.TextField(blank=True, verbose_name="Notes")),
        ("created_by", models.CharField(blank=True, help_text="Ex: 'user:42', 'system:scheduler'", max_length=255, verbose_name="Created by")),
    ]


def _history_options(name, plural):
    return {
        "verbose_name": f"historical {name}",
        "verbose_name_plural": f"historical {plural}",
        "ordering": ("-history_date", "-history_id"),
        "get_latest_by": ("history_date", "history_id"),
    }


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        # ══════════════════════════════════════════════════════════════
        # TENANT & SEQUENCE
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="Tenant",
            fields=[
                ("id", _id()),
                ("slug", models.SlugField(unique=True, verbose_name="Slug")),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "Tenant",
                "verbose_name_plural": "Tenants",
                "db_table": "bakewind_tenant",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="CodeSequence",
            fields=[
                ("id", _id()),
                (
                    "scope",
                    models.CharField(
                        blank=True,
                        help_text="Tenant id; empty for global counters",
                        max_length=50,
                        verbose_name="Scope",
                    ),
                ),
                ("prefix", models.CharField(max_length=50, verbose_name="Prefix")),
                ("last_value", models.PositiveIntegerField(default=0, verbose_name="Last value")),
            ],
            options={
                "verbose_name": "Code Sequence",
                "verbose_name_plural": "Code Sequences",
                "db_table": "bakewind_code_sequence",
                "unique_together": {("scope", "prefix")},
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # CATALOG
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="Recipe",
            fields=[
                ("id", _id()),
                *_recipe_fields(),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                _tenant("recipes"),
            ],
            options={
                "verbose_name": "Recipe",
                "verbose_name_plural": "Recipes",
                "db_table": "bakewind_recipe",
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["tenant", "is_active"], name="bw_recipe_tenant_active_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="RecipeIngredient",
            fields=[
                ("id", _id()),
                ("ingredient_name", models.CharField(max_length=255, verbose_name="Ingredient")),
                ("quantity", models.DecimalField(decimal_places=3, max_digits=10, verbose_name="Quantity")),
                ("unit", models.CharField(default="kg", help_text="kg, g, L, ml, pcs...", max_length=20, verbose_name="Unit")),
                ("cost", models.DecimalField(blank=True, decimal_places=4, help_text="Cost of this line for the base recipe", max_digits=10, null=True, verbose_name="Cost")),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                (
                    "recipe",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="ingredients",
                        to="bakewind.recipe",
                        verbose_name="Recipe",
                    ),
                ),
            ],
            options={
                "verbose_name": "Ingredient",
                "verbose_name_plural": "Ingredients",
                "db_table": "bakewind_recipe_ingredient",
                "ordering": ["recipe", "id"],
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", _id()),
                ("sku", models.CharField(max_length=64, verbose_name="SKU")),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                ("prep_time_minutes", models.PositiveIntegerField(blank=True, help_text="Empty when unknown", null=True, verbose_name="Prep time per unit (minutes)")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "recipe",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="products",
                        to="bakewind.recipe",
                        verbose_name="Recipe",
                    ),
                ),
                _tenant("products"),
            ],
            options={
                "verbose_name": "Product",
                "verbose_name_plural": "Products",
                "db_table": "bakewind_product",
                "ordering": ["name"],
                "unique_together": {("tenant", "sku")},
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # INTERNAL ORDERS
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="InternalOrder",
            fields=[
                ("id", _id()),
                *_internal_order_fields(),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                _tenant("internal_orders"),
            ],
            options={
                "verbose_name": "Internal Order",
                "verbose_name_plural": "Internal Orders",
                "db_table": "bakewind_internal_order",
                "ordering": ["-created_at"],
                "unique_together": {("tenant", "order_number")},
                "indexes": [
                    models.Index(fields=["tenant", "status"], name="bw_io_tenant_status_idx"),
                    models.Index(fields=["tenant", "needed_by"], name="bw_io_tenant_needed_idx"),
                    models.Index(fields=["tenant", "production_date"], name="bw_io_tenant_proddate_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="InternalOrderItem",
            fields=[
                ("id", _id()),
                ("product_id", models.PositiveIntegerField(verbose_name="Product ID")),
                ("product_name", models.CharField(help_text="Snapshot taken when the order was placed", max_length=255, verbose_name="Product name")),
                ("quantity", models.PositiveIntegerField(verbose_name="Quantity")),
                ("unit_cost", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name="Unit cost")),
                ("special_instructions", models.TextField(blank=True, verbose_name="Special instructions")),
                ("customizations", models.JSONField(blank=True, default=dict, verbose_name="Customizations")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="bakewind.internalorder",
                        verbose_name="Order",
                    ),
                ),
            ],
            options={
                "verbose_name": "Internal Order Item",
                "verbose_name_plural": "Internal Order Items",
                "db_table": "bakewind_internal_order_item",
                "ordering": ["order", "id"],
                "indexes": [
                    models.Index(fields=["product_id"], name="bw_ioi_product_idx"),
                ],
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # CUSTOMER ORDERS
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="CustomerOrder",
            fields=[
                ("id", _id()),
                ("order_number", models.CharField(max_length=50, verbose_name="Order number")),
                ("customer_name", models.CharField(max_length=255, verbose_name="Customer")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("pending", "Pending"),
                            ("confirmed", "Confirmed"),
                            ("ready", "Ready"),
                            ("delivered", "Delivered"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                (
                    "priority",
                    models.CharField(
                        choices=[
                            ("low", "Low"),
                            ("normal", "Normal"),
                            ("high", "High"),
                            ("rush", "Rush"),
                        ],
                        default="normal",
                        max_length=10,
                        verbose_name="Priority",
                    ),
                ),
                ("pickup_date", models.DateField(blank=True, db_index=True, null=True, verbose_name="Pickup date")),
                ("delivery_date", models.DateField(blank=True, db_index=True, null=True, verbose_name="Delivery date")),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                _tenant("customer_orders"),
            ],
            options={
                "verbose_name": "Customer Order",
                "verbose_name_plural": "Customer Orders",
                "db_table": "bakewind_customer_order",
                "ordering": ["-created_at"],
                "unique_together": {("tenant", "order_number")},
            },
        ),
        migrations.CreateModel(
            name="CustomerOrderItem",
            fields=[
                ("id", _id()),
                ("product_id", models.PositiveIntegerField(verbose_name="Product ID")),
                ("product_name", models.CharField(max_length=255, verbose_name="Product name")),
                ("quantity", models.PositiveIntegerField(verbose_name="Quantity")),
                ("unit_price", models.DecimalField(decimal_places=2, default=0, max_digits=10, verbose_name="Unit price")),
                ("special_instructions", models.TextField(blank=True, verbose_name="Special instructions")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="bakewind.customerorder",
                        verbose_name="Order",
                    ),
                ),
            ],
            options={
                "verbose_name": "Customer Order Item",
                "verbose_name_plural": "Customer Order Items",
                "db_table": "bakewind_customer_order_item",
                "ordering": ["order", "id"],
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # PRODUCTION
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="ProductionSchedule",
            fields=[
                ("id", _id()),
                *_schedule_fields(),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                _tenant("production_schedules"),
            ],
            options={
                "verbose_name": "Production Schedule",
                "verbose_name_plural": "Production Schedules",
                "db_table": "bakewind_production_schedule",
                "ordering": ["-date"],
                "indexes": [
                    models.Index(fields=["tenant", "date"], name="bw_sched_tenant_date_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductionItem",
            fields=[
                ("id", _id()),
                ("customer_order_id", models.PositiveIntegerField(blank=True, null=True, verbose_name="Customer order ID")),
                ("recipe_name", models.CharField(max_length=255, verbose_name="Recipe name")),
                ("quantity", models.PositiveIntegerField(verbose_name="Quantity")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("scheduled", "Scheduled"),
                            ("in_progress", "In Progress"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="scheduled",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("scheduled_time", models.DateTimeField(verbose_name="Scheduled time")),
                ("start_time", models.DateTimeField(blank=True, null=True, verbose_name="Start time")),
                ("completed_time", models.DateTimeField(blank=True, null=True, verbose_name="Completed time")),
                ("assigned_to", models.CharField(blank=True, max_length=255, verbose_name="Assigned to")),
                ("notes", models.TextField(blank=True, verbose_name="Notes")),
                ("batch_number", models.CharField(blank=True, max_length=100, verbose_name="Batch number")),
                ("quality_check", models.BooleanField(default=False, verbose_name="Quality checked")),
                ("quality_notes", models.TextField(blank=True, verbose_name="Quality notes")),
                (
                    "internal_order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="production_items",
                        to="bakewind.internalorder",
                        verbose_name="Internal order",
                    ),
                ),
                (
                    "recipe",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="production_items",
                        to="bakewind.recipe",
                        verbose_name="Recipe",
                    ),
                ),
                (
                    "schedule",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="bakewind.productionschedule",
                        verbose_name="Schedule",
                    ),
                ),
            ],
            options={
                "verbose_name": "Production Item",
                "verbose_name_plural": "Production Items",
                "db_table": "bakewind_production_item",
                "ordering": ["scheduled_time", "id"],
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # HISTORY
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="HistoricalInternalOrder",
            fields=[
                ("id", _history_id()),
                *_internal_order_fields(),
                ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="created at")),
                ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="updated at")),
                *_history_fields(),
                _history_tenant(),
            ],
            options=_history_options("Internal Order", "Internal Orders"),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="HistoricalRecipe",
            fields=[
                ("id", _history_id()),
                *_recipe_fields(),
                ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="created at")),
                ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="updated at")),
                *_history_fields(),
                _history_tenant(),
            ],
            options=_history_options("Recipe", "Recipes"),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="HistoricalProductionSchedule",
            fields=[
                ("id", _history_id()),
                *_schedule_fields(),
                ("created_at", models.DateTimeField(blank=True, editable=False, verbose_name="created at")),
                ("updated_at", models.DateTimeField(blank=True, editable=False, verbose_name="updated at")),
                *_history_fields(),
                _history_tenant(),
            ],
            options=_history_options("Production Schedule", "Production Schedules"),
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
