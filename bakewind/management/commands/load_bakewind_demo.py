"""
Load demo data for Bakewind.

Creates a small bakery tenant with:
- Recipes with ingredients, linked to products
- Customer orders for the coming days
- Internal orders across the lifecycle (draft to delivered)

Usage:
    python manage.py load_bakewind_demo
    python manage.py load_bakewind_demo --clear
    python manage.py load_bakewind_demo --tenant corner-bakery
"""

from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

RECIPES = [
    {
        "name": "Butter Croissant",
        "sku": "CRO-001",
        "category": "Viennoiserie",
        "yield_quantity": Decimal("24"),
        "prep_time_minutes": 90,
        "cook_time_minutes": 18,
        "unit_prep": 4,
        "ingredients": [
            ("Flour T45", Decimal("1.000"), "kg", Decimal("1.20")),
            ("Butter", Decimal("0.550"), "kg", Decimal("4.95")),
            ("Milk", Decimal("0.300"), "L", Decimal("0.36")),
            ("Yeast", Decimal("0.025"), "kg", Decimal("0.20")),
        ],
    },
    {
        "name": "Sourdough Loaf",
        "sku": "SRD-001",
        "category": "Bread",
        "yield_quantity": Decimal("8"),
        "prep_time_minutes": 60,
        "cook_time_minutes": 45,
        "unit_prep": 8,
        "ingredients": [
            ("Flour T65", Decimal("2.000"), "kg", Decimal("2.20")),
            ("Levain", Decimal("0.400"), "kg", None),
            ("Salt", Decimal("0.040"), "kg", Decimal("0.04")),
        ],
    },
    {
        "name": "Cinnamon Roll",
        "sku": "CIN-001",
        "category": "Pastry",
        "yield_quantity": Decimal("12"),
        "prep_time_minutes": 45,
        "cook_time_minutes": 22,
        "unit_prep": 5,
        "ingredients": [
            ("Flour T45", Decimal("0.600"), "kg", Decimal("0.72")),
            ("Butter", Decimal("0.150"), "kg", Decimal("1.35")),
            ("Cinnamon", Decimal("0.020"), "kg", Decimal("0.50")),
            ("Brown sugar", Decimal("0.120"), "kg", Decimal("0.30")),
        ],
    },
]

# Products without recipe: demand shows them, scheduling refuses them
EXTRA_PRODUCTS = [
    ("Seasonal Tart", "TRT-001", None),
]


class Command(BaseCommand):
    help = "Loads demo data for Bakewind"

    def add_arguments(self, parser):
        parser.add_argument(
            "--clear",
            action="store_true",
            help="Delete the tenant's existing data before loading",
        )
        parser.add_argument(
            "--tenant",
            default="demo-bakery",
            help="Tenant slug (created when missing)",
        )

    def handle(self, *args, **options):
        from bakewind.models import Tenant

        self.stdout.write("=" * 60)
        self.stdout.write("Loading Bakewind demo data...")
        self.stdout.write("=" * 60)

        tenant, created = Tenant.objects.get_or_create(
            slug=options["tenant"],
            defaults={"name": options["tenant"].replace("-", " ").title()},
        )
        if created:
            self.stdout.write(f"\nCreated tenant {tenant.slug}")

        with transaction.atomic():
            if options["clear"]:
                self.stdout.write("\nClearing existing data...")
                self._clear(tenant)
                self.stdout.write(self.style.SUCCESS("   ✓ Data cleared"))

            products = self._create_catalog(tenant)
            self._create_customer_orders(tenant, products)
            self._create_internal_orders(tenant, products)

        self.stdout.write("\n" + "=" * 60)
        self.stdout.write(self.style.SUCCESS("Demo data loaded."))
        self.stdout.write("=" * 60)
        self._print_summary(tenant)

    def _clear(self, tenant):
        from bakewind.models import CustomerOrder, InternalOrder, Product, ProductionSchedule, Recipe

        ProductionSchedule.objects.filter(tenant=tenant).delete()
        InternalOrder.objects.filter(tenant=tenant).delete()
        CustomerOrder.objects.filter(tenant=tenant).delete()
        Product.objects.filter(tenant=tenant).delete()
        Recipe.objects.filter(tenant=tenant).delete()

    def _create_catalog(self, tenant) -> dict:
        from bakewind.models import Product, Recipe, RecipeIngredient

        self.stdout.write("\nCreating recipes and products...")
        products = {}

        for data in RECIPES:
            recipe, _ = Recipe.objects.get_or_create(
                tenant=tenant,
                name=data["name"],
                defaults={
                    "category": data["category"],
                    "yield_quantity": data["yield_quantity"],
                    "yield_unit": "pcs",
                    "prep_time_minutes": data["prep_time_minutes"],
                    "cook_time_minutes": data["cook_time_minutes"],
                    "instructions": ["Mix", "Shape", "Proof", "Bake"],
                },
            )
            if not recipe.ingredients.exists():
                for name, quantity, unit, cost in data["ingredients"]:
                    RecipeIngredient.objects.create(
                        recipe=recipe,
                        ingredient_name=name,
                        quantity=quantity,
                        unit=unit,
                        cost=cost,
                    )

            product, _ = Product.objects.update_or_create(
                tenant=tenant,
                sku=data["sku"],
                defaults={
                    "name": data["name"],
                    "prep_time_minutes": data["unit_prep"],
                    "recipe": recipe,
                },
            )
            products[data["sku"]] = product
            self.stdout.write(f"   ✓ {recipe.name}")

        for name, sku, prep in EXTRA_PRODUCTS:
            product, _ = Product.objects.update_or_create(
                tenant=tenant,
                sku=sku,
                defaults={"name": name, "prep_time_minutes": prep, "recipe": None},
            )
            products[sku] = product
            self.stdout.write(f"   ✓ {name} (no recipe)")

        return products

    def _create_customer_orders(self, tenant, products):
        from bakewind.models import CustomerOrder, CustomerOrderItem, CustomerOrderPriority

        self.stdout.write("\nCreating customer orders...")
        today = timezone.localdate()
        plan = [
            ("CO-1001", "Hotel Lumière", 1, CustomerOrderPriority.HIGH, [("CRO-001", 48)]),
            ("CO-1002", "Marta Silva", 1, CustomerOrderPriority.NORMAL, [("SRD-001", 2), ("CRO-001", 6)]),
            ("CO-1003", "Office Breakfast Co.", 2, CustomerOrderPriority.RUSH, [("CIN-001", 36)]),
        ]
        for number, customer, days, priority, lines in plan:
            order, created = CustomerOrder.objects.get_or_create(
                tenant=tenant,
                order_number=number,
                defaults={
                    "customer_name": customer,
                    "priority": priority,
                    "pickup_date": today + timedelta(days=days),
                },
            )
            if created:
                for sku, quantity in lines:
                    product = products[sku]
                    CustomerOrderItem.objects.create(
                        order=order,
                        product_id=product.pk,
                        product_name=product.name,
                        quantity=quantity,
                    )
            self.stdout.write(f"   ✓ {order}")

    def _create_internal_orders(self, tenant, products):
        from bakewind.models import InternalOrder, InternalOrderSource, InternalOrderStatus, Priority
        from bakewind.service import Bakery

        self.stdout.write("\nCreating internal orders...")
        if InternalOrder.objects.filter(tenant=tenant).exists():
            self.stdout.write("   • Internal orders already present, skipping")
            return

        today = timezone.localdate()
        S = InternalOrderStatus
        plan = [
            (InternalOrderSource.CAFE, Priority.NORMAL, 1, [("CRO-001", 24)], []),
            (InternalOrderSource.CATERING, Priority.URGENT, 1, [("CRO-001", 12), ("SRD-001", 4)], [S.REQUESTED]),
            (InternalOrderSource.RESTAURANT, Priority.HIGH, 2, [("SRD-001", 6)], [S.REQUESTED, S.APPROVED]),
            (InternalOrderSource.EVENTS, Priority.NORMAL, 2, [("TRT-001", 3)], [S.REQUESTED, S.APPROVED]),
            (InternalOrderSource.RETAIL, Priority.LOW, 0, [("CIN-001", 12)], [S.REQUESTED, S.APPROVED, S.SCHEDULED, S.IN_PRODUCTION]),
            (InternalOrderSource.FRONT_HOUSE, Priority.NORMAL, -1, [("CRO-001", 18)], [S.REQUESTED, S.APPROVED, S.SCHEDULED, S.IN_PRODUCTION, S.QUALITY_CHECK, S.READY, S.DELIVERED]),
            (InternalOrderSource.CAFE, Priority.LOW, 3, [("CIN-001", 6)], [S.CANCELLED]),
        ]

        for source, priority, days, lines, path in plan:
            order = Bakery.create_order(
                tenant,
                items=[
                    {"product_id": products[sku].pk, "quantity": quantity}
                    for sku, quantity in lines
                ],
                source=source,
                priority=priority,
                requested_by="Demo Manager",
                department=str(source.label),
                needed_by=today + timedelta(days=days),
            )
            for status in path:
                order = Bakery.change_status(order, status)
            self.stdout.write(f"   ✓ {order.order_number} ({order.status})")

    def _print_summary(self, tenant):
        """Print summary of created data."""
        from bakewind.models import CustomerOrder, InternalOrder, Product, ProductionSchedule, Recipe

        self.stdout.write(f"\nSummary for {tenant.slug}:")
        self.stdout.write(f"   • {Recipe.objects.filter(tenant=tenant).count()} recipes")
        self.stdout.write(f"   • {Product.objects.filter(tenant=tenant).count()} products")
        self.stdout.write(f"   • {CustomerOrder.objects.filter(tenant=tenant).count()} customer orders")
        self.stdout.write(f"   • {InternalOrder.objects.filter(tenant=tenant).count()} internal orders")
        self.stdout.write(
            f"   • {ProductionSchedule.objects.filter(tenant=tenant).count()} production schedules"
        )
