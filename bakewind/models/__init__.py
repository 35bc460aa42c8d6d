"""
Bakewind Models.

Core models for the production-order lifecycle:
- Tenant: Bakery business scoping every other record
- Product / Recipe / RecipeIngredient: Catalog data read by production
- InternalOrder / InternalOrderItem: Production requests from inside the business
- CustomerOrder / CustomerOrderItem: External sales orders feeding demand
- ProductionSchedule / ProductionItem: Scheduled kitchen work
- CodeSequence: Atomic order-number counter
"""

from bakewind.models.customer_order import (
    CustomerOrder,
    CustomerOrderItem,
    CustomerOrderPriority,
    CustomerOrderStatus,
)
from bakewind.models.internal_order import (
    FINISHED_STATUSES,
    PENDING_STATUSES,
    PROTECTED_STATUSES,
    InternalOrder,
    InternalOrderItem,
    InternalOrderSource,
    InternalOrderStatus,
    Priority,
    RecurringFrequency,
)
from bakewind.models.product import Product
from bakewind.models.production import (
    ProductionItem,
    ProductionSchedule,
    ProductionStatus,
)
from bakewind.models.recipe import Recipe, RecipeIngredient
from bakewind.models.sequence import CodeSequence
from bakewind.models.tenant import Tenant

__all__ = [
    "Tenant",
    "Product",
    "Recipe",
    "RecipeIngredient",
    "InternalOrder",
    "InternalOrderItem",
    "InternalOrderSource",
    "InternalOrderStatus",
    "Priority",
    "RecurringFrequency",
    "PROTECTED_STATUSES",
    "PENDING_STATUSES",
    "FINISHED_STATUSES",
    "CustomerOrder",
    "CustomerOrderItem",
    "CustomerOrderStatus",
    "CustomerOrderPriority",
    "ProductionSchedule",
    "ProductionItem",
    "ProductionStatus",
    "CodeSequence",
]
