"""
Tests for game_engine.py and victory.py — sequence of play and scores.
"""

import pytest

from ct_bot.rules_consts import (
    GOV, FLN, FLN_BASES, SUPPORT, OPPOSE,
    ACTION_PASS, ACTION_EVENT, ACTION_OP_PLUS_SA, ACTION_LIMITED_OP,
    ACTION_OP_ONLY, ALL_ACTIONS,
    MEDEA, ALGIERS, MOROCCO,
)
from ct_bot.state.state_schema import build_initial_state
from ct_bot.board.pieces import place_pieces
from ct_bot.board.control import set_support
from ct_bot.engine.game_engine import (
    available_actions, can_do, can_do_multiple_spaces, bot_will_act_twice,
    record_action, reset_sequence, perform_pass,
)
from ct_bot.engine.victory import gov_score, fln_score, calculate_scores


def _make_state(seed=42):
    return build_initial_state(seed=seed)


# ============================================================================
# SEQUENCE OF PLAY
# ============================================================================

class TestAvailableActions:

    def test_first_faction_has_everything(self):
        state = _make_state()
        assert available_actions(state) == ALL_ACTIONS

    def test_after_op_only(self):
        state = _make_state()
        record_action(state, ACTION_OP_ONLY)
        assert available_actions(state) == (ACTION_LIMITED_OP, ACTION_PASS)
        assert not can_do_multiple_spaces(state)

    def test_after_event(self):
        state = _make_state()
        record_action(state, ACTION_EVENT)
        assert can_do(state, ACTION_OP_PLUS_SA)
        assert not can_do(state, ACTION_EVENT)
        assert can_do_multiple_spaces(state)

    def test_after_pass_everything_open(self):
        state = _make_state()
        record_action(state, ACTION_PASS)
        assert available_actions(state) == ALL_ACTIONS

    def test_both_acted(self):
        state = _make_state()
        record_action(state, ACTION_PASS)
        record_action(state, ACTION_PASS)
        with pytest.raises(ValueError):
            available_actions(state)


class TestRecordAction:

    def test_records_in_order(self):
        state = _make_state()
        record_action(state, ACTION_LIMITED_OP)
        record_action(state, ACTION_OP_ONLY)
        assert state["sequence"]["first_action"] == ACTION_LIMITED_OP
        assert state["sequence"]["second_action"] == ACTION_OP_ONLY

    def test_third_action_raises(self):
        state = _make_state()
        record_action(state, ACTION_PASS)
        record_action(state, ACTION_PASS)
        with pytest.raises(ValueError):
            record_action(state, ACTION_PASS)

    def test_unknown_action(self):
        state = _make_state()
        with pytest.raises(ValueError):
            record_action(state, "Go Home")


class TestResetSequence:

    def test_needs_two_actions(self):
        state = _make_state()
        record_action(state, ACTION_PASS)
        with pytest.raises(ValueError):
            reset_sequence(state)

    def test_event_keeps_initiative(self):
        state = _make_state()
        record_action(state, ACTION_EVENT)
        record_action(state, ACTION_OP_PLUS_SA)
        reset_sequence(state)
        assert state["sequence"]["first_eligible"] == FLN
        assert state["sequence"]["first_action"] is None

    def test_op_swaps_initiative(self):
        state = _make_state()
        record_action(state, ACTION_OP_PLUS_SA)
        record_action(state, ACTION_LIMITED_OP)
        reset_sequence(state)
        assert state["sequence"]["first_eligible"] == GOV
        assert state["sequence"]["second_eligible"] == FLN


class TestActTwice:

    def test_second_after_gov_op(self):
        state = _make_state()
        state["sequence"]["first_eligible"] = GOV
        state["sequence"]["second_eligible"] = FLN
        record_action(state, ACTION_OP_ONLY)
        assert bot_will_act_twice(state)

    def test_second_after_gov_event(self):
        state = _make_state()
        state["sequence"]["first_eligible"] = GOV
        state["sequence"]["second_eligible"] = FLN
        record_action(state, ACTION_EVENT)
        assert not bot_will_act_twice(state)

    def test_first_eligible(self):
        state = _make_state()
        assert not bot_will_act_twice(state)


class TestPass:

    def test_income(self):
        state = _make_state()
        perform_pass(state, FLN)
        perform_pass(state, GOV)
        assert state["resources"][FLN] == 1
        assert state["resources"][GOV] == 2

    def test_unknown_faction(self):
        state = _make_state()
        with pytest.raises(ValueError):
            perform_pass(state, "OAS")


# ============================================================================
# VICTORY
# ============================================================================

class TestVictory:

    def test_empty_board(self):
        state = _make_state()
        assert calculate_scores(state) == {GOV: 0, FLN: 0}

    def test_gov_score(self):
        state = _make_state()
        set_support(state, ALGIERS, SUPPORT)
        state["commitment"] = 4
        assert gov_score(state) == 7

    def test_fln_score(self):
        state = _make_state()
        set_support(state, MEDEA, OPPOSE)
        place_pieces(state, MOROCCO, {FLN_BASES: 2})
        assert fln_score(state) == 4
