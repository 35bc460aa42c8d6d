"""
Bakewind Exceptions.

All bakewind errors derive from BakewindError for consistent handling.
The typed subclasses carry a fixed code and the HTTP status the API
layer answers with.
"""

from typing import Any


class BakewindError(Exception):
    """
    Base exception for all Bakewind errors.

    Usage:
        raise BakewindError('ORDER_PROTECTED', order='IO-2026-00001')

    Attributes:
        code: Error code (INVALID_TRANSITION, ORDER_LOCKED, etc.)
        details: Additional context as keyword arguments
    """

    default_code = "BAKEWIND_ERROR"
    http_status = 400

    def __init__(self, code: str | None = None, **details: Any):
        self.code = code or self.default_code
        self.details = details
        message = f"{self.code}: {details}" if details else self.code
        super().__init__(message)

    def as_dict(self) -> dict:
        """Return error as dictionary for API responses."""
        return {"code": self.code, **self.details}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{type(self).__name__}({self.code}: {details_str})"
        return f"{type(self).__name__}({self.code})"


class InvalidTransition(BakewindError):
    """Requested status is not reachable from the current status."""

    default_code = "INVALID_TRANSITION"

    def __init__(self, current: str, requested: str, allowed=(), **details: Any):
        super().__init__(
            current=str(current),
            requested=str(requested),
            allowed=sorted(str(s) for s in allowed),
            **details,
        )


class OrderLocked(BakewindError):
    """Another holder owns the edit lock."""

    default_code = "ORDER_LOCKED"
    http_status = 403

    def __init__(self, order_id, locked_by: str, **details: Any):
        super().__init__(order_id=str(order_id), locked_by=locked_by, **details)


class RecipeMissingForProduct(BakewindError):
    """Scheduling is blocked because a product has no linked recipe."""

    default_code = "RECIPE_MISSING_FOR_PRODUCT"

    def __init__(self, product: str, **details: Any):
        super().__init__(product=product, **details)


class InvalidYield(BakewindError):
    """Recipe yield or target quantity is zero or negative."""

    default_code = "INVALID_YIELD"


class NotFound(BakewindError):
    """Unknown order, product, recipe or tenant."""

    default_code = "NOT_FOUND"
    http_status = 404


# Generic error codes raised as BakewindError(code, ...)
# ORDER_PROTECTED: Order status forbids deletion
# EMPTY_ORDER: Order has no items to schedule
# INVALID_QUANTITY: Quantity must be greater than zero
# STATUS_NOT_EDITABLE: Status must change through the state machine
# UNKNOWN_FIELD: Field cannot be written through the order service
