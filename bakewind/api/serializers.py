"""
Bakewind API Serializers.
"""

from rest_framework import serializers

from bakewind.models import (
    InternalOrder,
    InternalOrderItem,
    InternalOrderStatus,
    ProductionItem,
    ProductionSchedule,
    Recipe,
    RecipeIngredient,
)


# ══════════════════════════════════════════════════════════════
# INTERNAL ORDERS
# ══════════════════════════════════════════════════════════════


class InternalOrderItemSerializer(serializers.ModelSerializer):
    """Serializer for InternalOrderItem model."""

    class Meta:
        model = InternalOrderItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "quantity",
            "unit_cost",
            "special_instructions",
            "customizations",
        ]
        read_only_fields = ["id"]
        extra_kwargs = {"product_name": {"required": False}}


class InternalOrderSerializer(serializers.ModelSerializer):
    """Read serializer for InternalOrder, with items and next actions."""

    items = InternalOrderItemSerializer(many=True, read_only=True)
    total_quantity = serializers.IntegerField(read_only=True)
    next_actions = serializers.ListField(read_only=True)
    is_protected = serializers.BooleanField(read_only=True)

    class Meta:
        model = InternalOrder
        fields = [
            "id",
            "order_number",
            "source",
            "status",
            "priority",
            "requested_by",
            "requested_by_email",
            "department",
            "needed_by",
            "production_date",
            "production_shift",
            "batch_number",
            "assigned_staff",
            "workstation",
            "target_quantity",
            "actual_quantity",
            "waste_quantity",
            "quality_notes",
            "is_recurring",
            "recurring_frequency",
            "next_order_date",
            "recurring_end_date",
            "special_instructions",
            "notes",
            "items",
            "total_quantity",
            "next_actions",
            "is_protected",
            "completed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class InternalOrderWriteSerializer(serializers.ModelSerializer):
    """
    Write serializer for create and edit.

    status is deliberately absent; it changes through the status action.
    """

    items = InternalOrderItemSerializer(many=True, required=False)

    class Meta:
        model = InternalOrder
        fields = [
            "source",
            "priority",
            "requested_by",
            "requested_by_email",
            "department",
            "needed_by",
            "production_date",
            "production_shift",
            "batch_number",
            "assigned_staff",
            "workstation",
            "target_quantity",
            "actual_quantity",
            "waste_quantity",
            "quality_notes",
            "is_recurring",
            "recurring_frequency",
            "next_order_date",
            "recurring_end_date",
            "special_instructions",
            "notes",
            "items",
        ]

    def validate(self, attrs):
        if self.instance is None and not attrs.get("items"):
            raise serializers.ValidationError({"items": "At least one item is required."})
        return attrs


class StatusChangeSerializer(serializers.Serializer):
    """Input for POST /internal-orders/{id}/status/."""

    status = serializers.ChoiceField(choices=InternalOrderStatus.choices)


# ══════════════════════════════════════════════════════════════
# PRODUCTION
# ══════════════════════════════════════════════════════════════


class DemandSourcesSerializer(serializers.Serializer):
    external_orders = serializers.IntegerField()
    internal_orders = serializers.IntegerField()
    total = serializers.IntegerField()


class ProductionDemandLineSerializer(serializers.Serializer):
    """Serializer for ProductionDemandLine results."""

    product_id = serializers.IntegerField()
    product_name = serializers.CharField()
    total_quantity = serializers.IntegerField()
    sources = DemandSourcesSerializer()
    priority = serializers.CharField()
    estimated_prep_minutes = serializers.IntegerField(allow_null=True)
    prep_time_display = serializers.CharField()
    recipe_id = serializers.IntegerField(allow_null=True)


class PlanningTotalsSerializer(serializers.Serializer):
    total_products = serializers.IntegerField()
    total_quantity = serializers.IntegerField()
    total_prep_minutes = serializers.IntegerField()
    urgent_lines = serializers.IntegerField()


class IngredientRequirementSerializer(serializers.Serializer):
    name = serializers.CharField()
    unit = serializers.CharField()
    total_quantity = serializers.DecimalField(max_digits=None, decimal_places=3)
    total_cost = serializers.DecimalField(max_digits=None, decimal_places=2, allow_null=True)
    used_in = serializers.ListField(child=serializers.CharField())


class DateQuerySerializer(serializers.Serializer):
    """?date=YYYY-MM-DD"""

    date = serializers.DateField()


class ScheduleFromOrderSerializer(serializers.Serializer):
    """Input for POST /production/schedule-from-order/."""

    order_id = serializers.IntegerField()
    production_date = serializers.DateField()


class ProductionItemSerializer(serializers.ModelSerializer):
    """Serializer for ProductionItem model."""

    class Meta:
        model = ProductionItem
        fields = [
            "id",
            "internal_order",
            "customer_order_id",
            "recipe",
            "recipe_name",
            "quantity",
            "status",
            "scheduled_time",
            "start_time",
            "completed_time",
            "assigned_to",
            "notes",
            "batch_number",
            "quality_check",
            "quality_notes",
        ]
        read_only_fields = fields


class ProductionItemUpdateSerializer(serializers.ModelSerializer):
    """Input for PATCH /production/schedules/{id}/items/{item_id}/."""

    class Meta:
        model = ProductionItem
        fields = ["assigned_to", "notes", "batch_number"]


class CompleteItemSerializer(serializers.Serializer):
    quality_check = serializers.BooleanField(default=False)
    quality_notes = serializers.CharField(required=False, allow_blank=True, default="")


class ProductionScheduleSerializer(serializers.ModelSerializer):
    """Serializer for ProductionSchedule model."""

    items = ProductionItemSerializer(many=True, read_only=True)
    efficiency = serializers.IntegerField(read_only=True)

    class Meta:
        model = ProductionSchedule
        fields = [
            "id",
            "date",
            "total_items",
            "completed_items",
            "efficiency",
            "notes",
            "created_by",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# ══════════════════════════════════════════════════════════════
# RECIPES
# ══════════════════════════════════════════════════════════════


class RecipeIngredientSerializer(serializers.ModelSerializer):
    class Meta:
        model = RecipeIngredient
        fields = ["id", "ingredient_name", "quantity", "unit", "cost", "notes"]


class RecipeSerializer(serializers.ModelSerializer):
    """Serializer for Recipe model."""

    ingredients = RecipeIngredientSerializer(many=True, read_only=True)

    class Meta:
        model = Recipe
        fields = [
            "id",
            "name",
            "category",
            "description",
            "prep_time_minutes",
            "cook_time_minutes",
            "yield_quantity",
            "yield_unit",
            "cost_per_unit",
            "instructions",
            "ingredients",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ScaleQuerySerializer(serializers.Serializer):
    """?quantity=N[&context=...]"""

    quantity = serializers.DecimalField(max_digits=12, decimal_places=3)
    context = serializers.CharField(required=False, allow_blank=True)


class IngredientLineSerializer(serializers.Serializer):
    name = serializers.CharField()
    quantity = serializers.DecimalField(max_digits=None, decimal_places=3)
    unit = serializers.CharField()
    cost = serializers.DecimalField(max_digits=None, decimal_places=2, allow_null=True)


class ScaledRecipeSerializer(serializers.Serializer):
    """
    Serializer for ScaledRecipe results.

    Scaled values are unbounded (a tiny yield scaled to a large batch), so
    computed decimals fix only their decimal places.
    """

    id = serializers.IntegerField(allow_null=True)
    name = serializers.CharField()
    description = serializers.CharField()
    category = serializers.CharField()
    yield_quantity = serializers.DecimalField(max_digits=None, decimal_places=3)
    yield_unit = serializers.CharField()
    base_yield = serializers.DecimalField(max_digits=None, decimal_places=3)
    scale_factor = serializers.DecimalField(max_digits=None, decimal_places=4)
    prep_time_minutes = serializers.IntegerField()
    cook_time_minutes = serializers.IntegerField()
    cost_per_unit = serializers.DecimalField(
        max_digits=None, decimal_places=2, allow_null=True
    )
    instructions = serializers.ListField(child=serializers.CharField())
    ingredients = IngredientLineSerializer(many=True)
