"""
Internal Order State Machine.

Pure validation of status changes: no persistence and no lock checks.
The service layer checks the lock, calls transition(), and writes the
returned fields in one save.

Usage:
    from bakewind.transitions import transition

    result = transition(order, InternalOrderStatus.APPROVED)
    for name, value in result.fields.items():
        setattr(order, name, value)
    order.save(update_fields=[*result.fields, "updated_at"])
"""

from __future__ import annotations

from datetime import datetime

from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from bakewind.exceptions import InvalidTransition
from bakewind.models.internal_order import InternalOrderStatus
from bakewind.results import TransitionResult

S = InternalOrderStatus

TRANSITIONS: dict[InternalOrderStatus, frozenset[InternalOrderStatus]] = {
    S.DRAFT: frozenset({S.REQUESTED, S.CANCELLED}),
    S.REQUESTED: frozenset({S.APPROVED, S.CANCELLED}),
    # approved -> scheduled goes through services.scheduling
    S.APPROVED: frozenset({S.SCHEDULED, S.CANCELLED}),
    S.SCHEDULED: frozenset({S.IN_PRODUCTION, S.CANCELLED}),
    S.IN_PRODUCTION: frozenset({S.QUALITY_CHECK, S.CANCELLED}),
    S.QUALITY_CHECK: frozenset({S.READY, S.IN_PRODUCTION, S.CANCELLED}),
    S.READY: frozenset({S.COMPLETED, S.DELIVERED, S.CANCELLED}),
    S.COMPLETED: frozenset({S.DELIVERED}),
    S.DELIVERED: frozenset(),
    S.CANCELLED: frozenset(),
}

# UI actions per status, in display order
NEXT_ACTIONS: dict[InternalOrderStatus, tuple[tuple[InternalOrderStatus, str], ...]] = {
    S.DRAFT: ((S.REQUESTED, _("Submit request")), (S.CANCELLED, _("Cancel"))),
    S.REQUESTED: ((S.APPROVED, _("Approve")), (S.CANCELLED, _("Cancel"))),
    S.APPROVED: ((S.SCHEDULED, _("Schedule production")), (S.CANCELLED, _("Cancel"))),
    S.SCHEDULED: ((S.IN_PRODUCTION, _("Start production")), (S.CANCELLED, _("Cancel"))),
    S.IN_PRODUCTION: ((S.QUALITY_CHECK, _("Send to quality check")), (S.CANCELLED, _("Cancel"))),
    S.QUALITY_CHECK: (
        (S.READY, _("Mark ready")),
        (S.IN_PRODUCTION, _("Back to production")),
        (S.CANCELLED, _("Cancel")),
    ),
    S.READY: (
        (S.COMPLETED, _("Complete")),
        (S.DELIVERED, _("Mark delivered")),
        (S.CANCELLED, _("Cancel")),
    ),
    S.COMPLETED: ((S.DELIVERED, _("Mark delivered")),),
    S.DELIVERED: (),
    S.CANCELLED: (),
}


def _check_tables() -> None:
    statuses = set(InternalOrderStatus)
    for name, table in (("TRANSITIONS", TRANSITIONS), ("NEXT_ACTIONS", NEXT_ACTIONS)):
        missing = statuses - set(table)
        if missing:
            raise RuntimeError(f"{name} has no entry for {sorted(missing)}")
    for status, actions in NEXT_ACTIONS.items():
        targets = {target for target, _label in actions}
        if targets != TRANSITIONS[status]:
            raise RuntimeError(f"NEXT_ACTIONS[{status}] disagrees with TRANSITIONS")


_check_tables()


def _coerce(status) -> InternalOrderStatus | None:
    try:
        return InternalOrderStatus(status)
    except ValueError:
        return None


def allowed_targets(status) -> frozenset[InternalOrderStatus]:
    """Statuses reachable from status (empty for unknown values)."""
    current = _coerce(status)
    if current is None:
        return frozenset()
    return TRANSITIONS[current]


def can_transition(current, target) -> bool:
    target = _coerce(target)
    return target is not None and target in allowed_targets(current)


def is_terminal(status) -> bool:
    """Terminal statuses accept no further change."""
    return not allowed_targets(status)


def next_actions(status) -> list[dict]:
    """Actions the UI may offer for an order in status."""
    current = _coerce(status)
    if current is None:
        return []
    return [
        {"status": target.value, "label": str(label)}
        for target, label in NEXT_ACTIONS[current]
    ]


def transition(order, target, now: datetime | None = None) -> TransitionResult:
    """
    Validate moving order to target.

    Returns the new status plus derived field updates; the order itself
    is not modified.

    Raises:
        InvalidTransition: target not allowed from the order's status
    """
    current = order.status
    if not can_transition(current, target):
        raise InvalidTransition(
            current,
            target,
            allowed=allowed_targets(current),
            order_id=getattr(order, "pk", None),
        )

    target = InternalOrderStatus(target)
    updates = {}
    if target == InternalOrderStatus.COMPLETED:
        updates["completed_at"] = now or timezone.now()

    return TransitionResult(
        previous_status=str(current),
        status=target.value,
        updates=updates,
    )
