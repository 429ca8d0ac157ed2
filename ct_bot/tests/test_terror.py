"""
Tests for fln_terror.py and commands/terror.py.
"""

import pytest

from ct_bot.rules_consts import (
    FLN, HIDDEN_GUERRILLAS, FLN_BASES, FRENCH_POLICE,
    SUPPORT, NEUTRAL, EVENT_UNSHADED, EVENT_SHADED,
    ACTION_LIMITED_OP, ACTION_OP_PLUS_SA,
    MEDEA, ALGIERS, TIZI_OUZOU, MOROCCO,
    CARD_PEACE_OF_THE_BRAVE, CARD_TELEB,
)
from ct_bot.state.state_schema import build_initial_state, validate_state
from ct_bot.state.history import history_messages
from ct_bot.board.pieces import place_pieces, count_hidden, count_active
from ct_bot.board.control import set_support, get_support, get_terror
from ct_bot.board.tracks import increase_resources
from ct_bot.cards.capabilities import activate_capability, play_momentum
from ct_bot.commands.common import CommandError
from ct_bot.commands.terror import (
    terror_in_space, terror_cost, terror_guerrillas_needed,
)
from ct_bot.bots.turn_state import begin_turn
from ct_bot.bots.fln_terror import terror_candidates, do_terror


def _make_state(seed=42):
    return build_initial_state(seed=seed)


# ============================================================================
# COMMAND
# ============================================================================

class TestTerrorCommand:

    def test_terror_in_space(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1})
        set_support(state, MEDEA, SUPPORT)
        increase_resources(state, FLN, 1)
        result = terror_in_space(state, MEDEA)
        assert result["cost"] == 1
        assert result["terror_placed"]
        assert count_active(state, MEDEA) == 1
        assert get_terror(state, MEDEA) == 1
        assert get_support(state, MEDEA) == NEUTRAL
        assert state["resources"][FLN] == 0

    def test_needs_hidden_guerrilla(self):
        state = _make_state()
        with pytest.raises(CommandError):
            terror_in_space(state, MEDEA, free=True)

    def test_not_in_country(self):
        state = _make_state()
        place_pieces(state, MOROCCO, {HIDDEN_GUERRILLAS: 1})
        with pytest.raises(CommandError):
            terror_in_space(state, MOROCCO, free=True)

    def test_no_second_terror_marker(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 2})
        terror_in_space(state, MEDEA, free=True)
        result = terror_in_space(state, MEDEA, free=True)
        assert not result["terror_placed"]
        assert get_terror(state, MEDEA) == 1

    def test_peace_of_the_brave(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1})
        set_support(state, MEDEA, SUPPORT)
        play_momentum(state, CARD_PEACE_OF_THE_BRAVE, EVENT_UNSHADED)
        terror_in_space(state, MEDEA, free=True)
        assert get_support(state, MEDEA) == SUPPORT
        assert get_terror(state, MEDEA) == 1

    def test_city_capabilities(self):
        state = _make_state()
        activate_capability(state, CARD_TELEB, EVENT_SHADED)
        assert terror_cost(state, ALGIERS) == 0
        assert terror_cost(state, MEDEA) == 1
        assert terror_cost(state, MEDEA, free=True) == 0
        activate_capability(state, CARD_TELEB, EVENT_UNSHADED)
        assert terror_guerrillas_needed(state, ALGIERS) == 2
        assert terror_guerrillas_needed(state, MEDEA) == 1


# ============================================================================
# BOT
# ============================================================================

class TestTerrorCandidates:

    def test_support_only(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1})
        place_pieces(state, ALGIERS, {HIDDEN_GUERRILLAS: 1})
        set_support(state, MEDEA, SUPPORT)
        begin_turn(state)
        assert terror_candidates(state) == [MEDEA]

    def test_base_needs_two_guerrillas(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1, FLN_BASES: 1})
        set_support(state, MEDEA, SUPPORT)
        begin_turn(state)
        assert terror_candidates(state) == []

    def test_final_campaign_neutral(self):
        state = _make_state()
        place_pieces(state, ALGIERS, {HIDDEN_GUERRILLAS: 1})
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1})
        state["final_campaign"] = True
        begin_turn(state)
        # Only cities and spaces with a Government base can train.
        assert terror_candidates(state) == [ALGIERS]


class TestDoTerror:

    def test_single_space(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1})
        set_support(state, MEDEA, SUPPORT)
        increase_resources(state, FLN, 1)
        begin_turn(state)
        action = do_terror(state)
        assert action == ACTION_LIMITED_OP
        assert count_hidden(state, MEDEA) == 0
        assert count_active(state, MEDEA) == 1
        assert get_terror(state, MEDEA) == 1
        assert get_support(state, MEDEA) == NEUTRAL
        assert state["resources"][FLN] == 0
        assert "FLN chooses: Terror" in history_messages(state)
        assert validate_state(state) == []

    def test_extort_funds_terror(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1})
        set_support(state, MEDEA, SUPPORT)
        place_pieces(state, ALGIERS, {HIDDEN_GUERRILLAS: 3})
        begin_turn(state)
        action = do_terror(state)
        assert action == ACTION_OP_PLUS_SA
        assert "FLN executes an Extort special ability" in (
            history_messages(state))
        assert get_support(state, MEDEA) == NEUTRAL
        assert count_active(state, ALGIERS) == 1
        assert state["resources"][FLN] == 0

    def test_stops_when_broke(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1})
        place_pieces(state, TIZI_OUZOU, {HIDDEN_GUERRILLAS: 1,
                                         FRENCH_POLICE: 1})
        set_support(state, MEDEA, SUPPORT)
        set_support(state, TIZI_OUZOU, SUPPORT)
        increase_resources(state, FLN, 1)
        begin_turn(state)
        do_terror(state)
        terrorized = [sp for sp in (MEDEA, TIZI_OUZOU)
                      if get_terror(state, sp) == 1]
        assert len(terrorized) == 1

    def test_free_operation_with_cap(self):
        state = _make_state()
        for space in (MEDEA, TIZI_OUZOU, ALGIERS):
            place_pieces(state, space, {HIDDEN_GUERRILLAS: 1})
            set_support(state, space, SUPPORT)
        begin_turn(state, free_operation=True, max_spaces=2)
        do_terror(state)
        assert sum(get_terror(state, sp)
                   for sp in (MEDEA, TIZI_OUZOU, ALGIERS)) == 2
        # Algiers has the highest population.
        assert get_terror(state, ALGIERS) == 1
        # The broke FLN then Extorts in the space left alone.
        assert state["resources"][FLN] == 1
