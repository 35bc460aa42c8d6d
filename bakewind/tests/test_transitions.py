"""
Tests for the internal order state machine (bakewind.transitions).

Every (current, target) pair of the 10 statuses is checked against the
transition table.
"""

import itertools
from datetime import datetime, timezone as dt_timezone
from types import SimpleNamespace

import pytest

from bakewind.exceptions import InvalidTransition
from bakewind.models import InternalOrderStatus as S
from bakewind.transitions import (
    NEXT_ACTIONS,
    TRANSITIONS,
    allowed_targets,
    can_transition,
    is_terminal,
    next_actions,
    transition,
)

EXPECTED = {
    S.DRAFT: {S.REQUESTED, S.CANCELLED},
    S.REQUESTED: {S.APPROVED, S.CANCELLED},
    S.APPROVED: {S.SCHEDULED, S.CANCELLED},
    S.SCHEDULED: {S.IN_PRODUCTION, S.CANCELLED},
    S.IN_PRODUCTION: {S.QUALITY_CHECK, S.CANCELLED},
    S.QUALITY_CHECK: {S.READY, S.IN_PRODUCTION, S.CANCELLED},
    S.READY: {S.COMPLETED, S.DELIVERED, S.CANCELLED},
    S.COMPLETED: {S.DELIVERED},
    S.DELIVERED: set(),
    S.CANCELLED: set(),
}

ALL_PAIRS = list(itertools.product(list(S), list(S)))


def order_in(status):
    return SimpleNamespace(pk=1, status=status.value)


# ═══════════════════════════════════════════════════════════════════
# Transition table
# ═══════════════════════════════════════════════════════════════════


class TestTransitionTable:
    def test_table_covers_every_status(self):
        assert set(TRANSITIONS) == set(S)
        assert set(NEXT_ACTIONS) == set(S)

    def test_table_matches_lifecycle(self):
        assert {k: set(v) for k, v in TRANSITIONS.items()} == EXPECTED

    @pytest.mark.parametrize(
        "current,target", ALL_PAIRS, ids=[f"{c.value}->{t.value}" for c, t in ALL_PAIRS]
    )
    def test_transition_succeeds_iff_allowed(self, current, target):
        order = order_in(current)

        if target in EXPECTED[current]:
            result = transition(order, target)
            assert result.status == target.value
            assert result.previous_status == current.value
            assert can_transition(current, target)
        else:
            with pytest.raises(InvalidTransition) as exc:
                transition(order, target)
            assert exc.value.code == "INVALID_TRANSITION"
            assert exc.value.details["current"] == current.value
            assert exc.value.details["requested"] == target.value
            assert not can_transition(current, target)

    def test_transition_does_not_mutate_order(self):
        order = order_in(S.DRAFT)
        transition(order, S.REQUESTED)
        assert order.status == "draft"

    def test_error_lists_allowed_targets(self):
        with pytest.raises(InvalidTransition) as exc:
            transition(order_in(S.DRAFT), S.COMPLETED)
        assert exc.value.details["allowed"] == ["cancelled", "requested"]

    def test_accepts_plain_strings(self):
        result = transition(SimpleNamespace(pk=1, status="ready"), "delivered")
        assert result.status == "delivered"

    def test_unknown_target_is_invalid(self):
        with pytest.raises(InvalidTransition):
            transition(order_in(S.DRAFT), "baking")


# ═══════════════════════════════════════════════════════════════════
# Terminal statuses
# ═══════════════════════════════════════════════════════════════════


class TestTerminalStatuses:
    @pytest.mark.parametrize("terminal", [S.DELIVERED, S.CANCELLED])
    @pytest.mark.parametrize("target", list(S))
    def test_terminal_rejects_everything(self, terminal, target):
        with pytest.raises(InvalidTransition):
            transition(order_in(terminal), target)

    def test_is_terminal(self):
        terminal = {status for status in S if is_terminal(status)}
        assert terminal == {S.DELIVERED, S.CANCELLED}

    def test_completed_is_not_terminal(self):
        assert allowed_targets(S.COMPLETED) == frozenset({S.DELIVERED})


# ═══════════════════════════════════════════════════════════════════
# Side effects
# ═══════════════════════════════════════════════════════════════════


class TestSideEffects:
    def test_completed_sets_completed_at(self):
        now = datetime(2026, 3, 14, 9, 30, tzinfo=dt_timezone.utc)
        result = transition(order_in(S.READY), S.COMPLETED, now=now)
        assert result.updates == {"completed_at": now}
        assert result.fields == {"status": "completed", "completed_at": now}

    def test_completed_defaults_to_current_time(self):
        result = transition(order_in(S.READY), S.COMPLETED)
        assert result.updates["completed_at"] is not None

    @pytest.mark.parametrize(
        "current,target",
        [
            (S.DRAFT, S.REQUESTED),
            (S.READY, S.DELIVERED),
            (S.QUALITY_CHECK, S.IN_PRODUCTION),
            (S.APPROVED, S.CANCELLED),
        ],
    )
    def test_other_transitions_have_no_side_effects(self, current, target):
        assert transition(order_in(current), target).updates == {}


# ═══════════════════════════════════════════════════════════════════
# Next actions
# ═══════════════════════════════════════════════════════════════════


class TestNextActions:
    @pytest.mark.parametrize("status", list(S))
    def test_actions_match_transitions(self, status):
        targets = {action["status"] for action in next_actions(status)}
        assert targets == {s.value for s in EXPECTED[status]}

    def test_actions_have_labels(self):
        actions = next_actions(S.APPROVED)
        assert actions[0] == {"status": "scheduled", "label": "Schedule production"}

    def test_unknown_status_has_no_actions(self):
        assert next_actions("baking") == []
        assert allowed_targets("baking") == frozenset()
