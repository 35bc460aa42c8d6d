"""
Bakewind Services.

Business logic that doesn't belong in models:
- orders: Create, edit, change status, delete, stats (lock-gated)
- demand: Production demand aggregation per date
- ingredients: Ingredient requirements from scaled recipes
- scheduling: Planning queries and the "schedule production" action
- execution: Start, complete and annotate production items
"""

from bakewind.services.demand import compute_demand, planning_totals, sort_demand
from bakewind.services.execution import ProductionExecution
from bakewind.services.ingredients import ingredients_for_date
from bakewind.services.orders import OrderLifecycle
from bakewind.services.scheduling import ProductionPlanning, schedule_from_order

__all__ = [
    "OrderLifecycle",
    "ProductionPlanning",
    "ProductionExecution",
    "compute_demand",
    "sort_demand",
    "planning_totals",
    "ingredients_for_date",
    "schedule_from_order",
]
