"""
Tests for fln_special.py — Subvert and Extort.
"""

import pytest

from ct_bot.rules_consts import (
    FLN, HIDDEN_GUERRILLAS, FLN_BASES, FRENCH_POLICE, ALGERIAN_POLICE,
    ALGERIAN_TROOPS, EVENT_UNSHADED, ACTION_OP_ONLY,
    MEDEA, ALGIERS, MOROCCO, TIZI_OUZOU, CARD_HARDENED_ATTITUDES,
)
from ct_bot.state.state_schema import build_initial_state, validate_state
from ct_bot.state.history import history_messages
from ct_bot.board.pieces import place_pieces, count_pieces, count_hidden
from ct_bot.cards.capabilities import play_momentum
from ct_bot.commands.common import CommandError
from ct_bot.commands.sa_subvert import subvert_in_space
from ct_bot.commands.sa_extort import extort_in_space
from ct_bot.bots.turn_state import begin_turn, special_activity_taken
from ct_bot.bots.fln_special import (
    subvert_commands, try_subvert, extort_candidates, try_extort,
)


def _make_state(seed=42):
    state = build_initial_state(seed=seed)
    begin_turn(state)
    return state


# ============================================================================
# SUBVERT
# ============================================================================

class TestSubvertCommands:

    def test_nothing_to_subvert(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1})
        assert subvert_commands(state) == []

    def test_last_two_cubes(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1, ALGERIAN_POLICE: 2})
        cmds = subvert_commands(state)
        assert len(cmds) == 1
        assert cmds[0].space == MEDEA
        assert not cmds[0].replace
        assert cmds[0].pieces[ALGERIAN_POLICE] == 2

    def test_only_last_cube_is_replaced(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1, ALGERIAN_POLICE: 1})
        cmds = subvert_commands(state)
        assert len(cmds) == 1
        assert cmds[0].replace
        assert cmds[0].pieces == {ALGERIAN_POLICE: 1}

    def test_last_cube_and_another(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1, ALGERIAN_POLICE: 1})
        place_pieces(state, ALGIERS, {HIDDEN_GUERRILLAS: 1,
                                      ALGERIAN_TROOPS: 2, FRENCH_POLICE: 1})
        cmds = subvert_commands(state)
        assert [(c.space, c.replace) for c in cmds] == [(MEDEA, False),
                                                        (ALGIERS, False)]
        assert cmds[1].pieces == {ALGERIAN_TROOPS: 1}

    def test_replace_police(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1, ALGERIAN_POLICE: 1,
                                    FRENCH_POLICE: 1})
        place_pieces(state, ALGIERS, {HIDDEN_GUERRILLAS: 1,
                                      ALGERIAN_TROOPS: 1, FRENCH_POLICE: 1})
        cmds = subvert_commands(state)
        assert len(cmds) == 1
        assert cmds[0].space == MEDEA
        assert cmds[0].replace

    def test_countries_ignored(self):
        state = _make_state()
        place_pieces(state, MOROCCO, {HIDDEN_GUERRILLAS: 1})
        with pytest.raises(CommandError):
            subvert_in_space(state, MOROCCO, {ALGERIAN_POLICE: 1})


class TestTrySubvert:

    def test_removes_last_cubes(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1, ALGERIAN_POLICE: 2})
        assert try_subvert(state)
        assert count_pieces(state, MEDEA, ALGERIAN_POLICE) == 0
        assert count_hidden(state, MEDEA) == 1
        assert special_activity_taken(state)
        assert "FLN executes a Subvert special ability" in (
            history_messages(state))
        assert validate_state(state) == []

    def test_slot_used(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1, ALGERIAN_POLICE: 2})
        try_subvert(state)
        place_pieces(state, ALGIERS, {HIDDEN_GUERRILLAS: 1,
                                      ALGERIAN_POLICE: 1})
        assert not try_subvert(state)

    def test_not_legal(self):
        state = build_initial_state(seed=42)
        state["sequence"]["first_action"] = ACTION_OP_ONLY
        begin_turn(state)
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1, ALGERIAN_POLICE: 2})
        assert not try_subvert(state)


# ============================================================================
# EXTORT
# ============================================================================

def _extort_board(state):
    place_pieces(state, ALGIERS, {HIDDEN_GUERRILLAS: 3})
    place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 3, FLN_BASES: 1,
                                FRENCH_POLICE: 1})
    place_pieces(state, MOROCCO, {HIDDEN_GUERRILLAS: 1})
    place_pieces(state, TIZI_OUZOU, {HIDDEN_GUERRILLAS: 1})


class TestExtortCandidates:

    def test_primary_and_secondary(self):
        state = _make_state()
        _extort_board(state)
        primary, secondary = extort_candidates(state)
        assert set(primary) == {ALGIERS, MEDEA, MOROCCO}
        assert secondary == [TIZI_OUZOU]

    def test_protected(self):
        state = _make_state()
        _extort_board(state)
        primary, secondary = extort_candidates(state,
                                               protected={ALGIERS: 2})
        assert ALGIERS not in primary
        assert ALGIERS in secondary

    def test_hardened_attitudes(self):
        state = _make_state()
        _extort_board(state)
        play_momentum(state, CARD_HARDENED_ATTITUDES, EVENT_UNSHADED)
        primary, secondary = extort_candidates(state)
        # Medea keeps its base; Tizi Ouzou is a sector without one.
        assert set(primary) == {ALGIERS, MEDEA, MOROCCO}
        assert secondary == []


class TestTryExtort:

    def test_primary_only_when_funded(self):
        state = _make_state()
        _extort_board(state)
        assert try_extort(state)
        assert state["resources"][FLN] == 3
        assert count_hidden(state, TIZI_OUZOU) == 1
        assert special_activity_taken(state)

    def test_not_below_limit(self):
        state = _make_state()
        _extort_board(state)
        state["resources"][FLN] = 5
        assert not try_extort(state)

    def test_secondary_when_broke(self):
        state = _make_state()
        place_pieces(state, TIZI_OUZOU, {HIDDEN_GUERRILLAS: 1})
        assert try_extort(state)
        assert state["resources"][FLN] == 1
        assert count_hidden(state, TIZI_OUZOU) == 0

    def test_extort_needs_control(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1, FRENCH_POLICE: 1})
        with pytest.raises(CommandError):
            extort_in_space(state, MEDEA)
