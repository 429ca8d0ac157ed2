"""
Tests for turn_state.py — the per-turn scratch state.
"""

import pytest

from ct_bot.rules_consts import (
    HIDDEN_GUERRILLAS, ACTIVE_GUERRILLAS,
    ACTION_OP_PLUS_SA, ACTION_LIMITED_OP, ACTION_OP_ONLY,
    MEDEA, ALGIERS, ORAN,
)
from ct_bot.state.state_schema import build_initial_state
from ct_bot.bots.turn_state import (
    TurnStateError, new_turn_state, begin_turn, end_turn, get_turn_state,
    can_do_special_activity, mark_special_activity_taken,
    special_activity_taken, is_free_operation, max_spaces,
    within_space_limit, allowed_spaces, mark_considered, was_considered,
    add_moving_group, moving_group, effective_action,
)


def _make_state(seed=42):
    return build_initial_state(seed=seed)


class TestLifecycle:

    def test_no_turn_in_progress(self):
        state = _make_state()
        with pytest.raises(TurnStateError):
            get_turn_state(state)

    def test_begin_and_end(self):
        state = _make_state()
        turn_state = begin_turn(state)
        assert get_turn_state(state) is turn_state
        end_turn(state)
        assert state["turn_state"] is None

    def test_defaults(self):
        turn_state = new_turn_state()
        assert turn_state["special_activity_allowed"]
        assert not turn_state["special_activity_taken"]
        assert not turn_state["free_operation"]
        assert turn_state["max_spaces"] is None
        assert turn_state["only_in"] == set()
        assert turn_state["moving_groups"] == {}


class TestSpecialActivity:

    def test_open_slot(self):
        state = _make_state()
        begin_turn(state)
        assert can_do_special_activity(state)
        mark_special_activity_taken(state)
        assert special_activity_taken(state)
        assert not can_do_special_activity(state)

    def test_not_allowed(self):
        state = _make_state()
        begin_turn(state, special_activity_allowed=False)
        assert not can_do_special_activity(state)
        with pytest.raises(TurnStateError):
            mark_special_activity_taken(state)

    def test_not_legal_in_sequence_of_play(self):
        state = _make_state()
        state["sequence"]["first_action"] = ACTION_OP_ONLY
        begin_turn(state)
        assert not can_do_special_activity(state)


class TestOperationLimits:

    def test_free_operation(self):
        state = _make_state()
        begin_turn(state, free_operation=True)
        assert is_free_operation(state)

    def test_max_spaces(self):
        state = _make_state()
        begin_turn(state, max_spaces=2)
        assert max_spaces(state) == 2
        assert within_space_limit(state, 1)
        assert not within_space_limit(state, 2)

    def test_no_cap(self):
        state = _make_state()
        begin_turn(state)
        assert within_space_limit(state, 99)

    def test_only_in(self):
        state = _make_state()
        begin_turn(state, only_in=[MEDEA])
        assert allowed_spaces(state, [ALGIERS, MEDEA, ORAN]) == [MEDEA]

    def test_no_restriction_keeps_order(self):
        state = _make_state()
        begin_turn(state)
        assert allowed_spaces(state, (ORAN, MEDEA)) == [ORAN, MEDEA]


class TestConsidered:

    def test_mark(self):
        state = _make_state()
        begin_turn(state)
        assert not was_considered(state, "rally")
        mark_considered(state, "rally")
        assert was_considered(state, "rally")
        assert not was_considered(state, "march")

    def test_unknown_operation(self):
        state = _make_state()
        begin_turn(state)
        with pytest.raises(ValueError):
            mark_considered(state, "terror")


class TestMovingGroups:

    def test_accumulates(self):
        state = _make_state()
        begin_turn(state)
        add_moving_group(state, MEDEA, {HIDDEN_GUERRILLAS: 2})
        add_moving_group(state, MEDEA, {ACTIVE_GUERRILLAS: 1})
        group = moving_group(state, MEDEA)
        assert group[HIDDEN_GUERRILLAS] == 2
        assert group[ACTIVE_GUERRILLAS] == 1

    def test_empty(self):
        state = _make_state()
        begin_turn(state)
        assert moving_group(state, ALGIERS)[HIDDEN_GUERRILLAS] == 0


class TestEffectiveAction:

    def test_special_activity(self):
        state = _make_state()
        begin_turn(state)
        mark_special_activity_taken(state)
        assert effective_action(state, 1) == ACTION_OP_PLUS_SA

    def test_single_space(self):
        state = _make_state()
        begin_turn(state)
        assert effective_action(state, 1) == ACTION_LIMITED_OP

    def test_several_spaces(self):
        state = _make_state()
        begin_turn(state)
        assert effective_action(state, 2) == ACTION_OP_ONLY

    def test_single_space_limited_op_not_legal(self):
        state = _make_state()
        state["sequence"]["first_action"] = ACTION_LIMITED_OP
        begin_turn(state)
        assert effective_action(state, 1) == ACTION_OP_ONLY
