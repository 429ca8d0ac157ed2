"""
Tests for fln_march.py and commands/march.py.
"""

import pytest

from ct_bot.rules_consts import (
    FLN, HIDDEN_GUERRILLAS, ACTIVE_GUERRILLAS, FLN_BASES, FRENCH_POLICE,
    ACTION_LIMITED_OP, ACTION_OP_PLUS_SA,
    MEDEA, ALGIERS, TIZI_OUZOU, BOUGIE, BORDJ_BOU_ARRERIDJ,
)
from ct_bot.state.state_schema import build_initial_state, validate_state
from ct_bot.state.history import history_messages
from ct_bot.board.pieces import place_pieces, count_hidden, count_active
from ct_bot.board.tracks import increase_resources
from ct_bot.commands.common import CommandError
from ct_bot.commands.march import march_cost, march_group
from ct_bot.bots.turn_state import begin_turn, was_considered, moving_group
from ct_bot.bots.fln_march import (
    MARCH_TYPES, resolve_march, remove_control_destinations,
    exposed_base_destinations, consider_march,
)


def _make_state(seed=42):
    return build_initial_state(seed=seed)


def _remove_control_state(resources=5, **turn_kwargs):
    state = _make_state()
    place_pieces(state, TIZI_OUZOU, {FRENCH_POLICE: 3, HIDDEN_GUERRILLAS: 1})
    place_pieces(state, BOUGIE, {HIDDEN_GUERRILLAS: 3, FLN_BASES: 1})
    increase_resources(state, FLN, resources)
    begin_turn(state, **turn_kwargs)
    return state


# ============================================================================
# COMMAND
# ============================================================================

class TestMarchCommand:

    def test_cost(self):
        path = (BOUGIE, BORDJ_BOU_ARRERIDJ, TIZI_OUZOU)
        assert march_cost(path) == 2
        assert march_cost(path, paid={TIZI_OUZOU}) == 1
        assert march_cost(path, free=True) == 0

    def test_march_group(self):
        state = _make_state()
        place_pieces(state, BOUGIE, {HIDDEN_GUERRILLAS: 2})
        increase_resources(state, FLN, 2)
        paid = march_group(state, (BOUGIE, BORDJ_BOU_ARRERIDJ, TIZI_OUZOU),
                           {HIDDEN_GUERRILLAS: 2}, activate=True)
        assert paid == {BORDJ_BOU_ARRERIDJ, TIZI_OUZOU}
        assert count_active(state, TIZI_OUZOU) == 2
        assert count_hidden(state, BORDJ_BOU_ARRERIDJ) == 0
        assert state["resources"][FLN] == 0
        assert validate_state(state) == []

    def test_active_only_one_step(self):
        state = _make_state()
        place_pieces(state, BOUGIE, {ACTIVE_GUERRILLAS: 1})
        with pytest.raises(CommandError):
            march_group(state, (BOUGIE, BORDJ_BOU_ARRERIDJ, TIZI_OUZOU),
                        {ACTIVE_GUERRILLAS: 1}, free=True)

    def test_not_adjacent(self):
        state = _make_state()
        place_pieces(state, BOUGIE, {HIDDEN_GUERRILLAS: 1})
        with pytest.raises(CommandError):
            march_group(state, (BOUGIE, ALGIERS), {HIDDEN_GUERRILLAS: 1},
                        free=True)

    def test_revisit(self):
        state = _make_state()
        place_pieces(state, BOUGIE, {HIDDEN_GUERRILLAS: 1})
        with pytest.raises(CommandError):
            march_group(state, (BOUGIE, TIZI_OUZOU, BOUGIE),
                        {HIDDEN_GUERRILLAS: 1}, free=True)


# ============================================================================
# DESTINATIONS AND RESOLUTION
# ============================================================================

class TestDestinations:

    def test_type_caps(self):
        assert [t.cap for t in MARCH_TYPES] == [None, 1, None, 1, 1]

    def test_remove_control(self):
        state = _remove_control_state()
        assert remove_control_destinations(state) == [TIZI_OUZOU]

    def test_exposed_base(self):
        state = _make_state()
        place_pieces(state, MEDEA, {FLN_BASES: 1, ACTIVE_GUERRILLAS: 1})
        assert exposed_base_destinations(state) == [MEDEA]

    def test_resolve_remove_control(self):
        state = _remove_control_state()
        resolved = resolve_march(state, MARCH_TYPES[3], TIZI_OUZOU)
        assert resolved.size == 2
        assert len(resolved.groups) == 1
        assert resolved.groups[0].path.spaces == (BOUGIE, TIZI_OUZOU)
        assert resolved.cost() == 1
        assert resolved.protected() == {BOUGIE: 2}

    def test_resolve_unfillable(self):
        state = _make_state()
        place_pieces(state, TIZI_OUZOU, {FRENCH_POLICE: 3})
        begin_turn(state)
        assert resolve_march(state, MARCH_TYPES[3], TIZI_OUZOU) is None


# ============================================================================
# CONSIDER MARCH
# ============================================================================

class TestConsiderMarch:

    def test_remove_government_control(self):
        state = _remove_control_state()
        action = consider_march(state)
        assert action == ACTION_LIMITED_OP
        assert count_hidden(state, TIZI_OUZOU) == 3
        assert count_hidden(state, BOUGIE) == 1
        assert state["resources"][FLN] == 4
        assert "FLN chooses: March" in history_messages(state)
        assert moving_group(state, TIZI_OUZOU)[HIDDEN_GUERRILLAS] == 2
        assert validate_state(state) == []

    def test_unaffordable(self):
        state = _remove_control_state(resources=0)
        assert consider_march(state) is None
        assert was_considered(state, "march")
        assert count_hidden(state, TIZI_OUZOU) == 1
        assert "FLN chooses: March" not in history_messages(state)

    def test_free_operation(self):
        state = _remove_control_state(resources=0, free_operation=True)
        assert consider_march(state) == ACTION_LIMITED_OP
        assert count_hidden(state, TIZI_OUZOU) == 3
        assert state["resources"][FLN] == 0

    def test_exposed_base_gets_hidden_guerrilla(self):
        state = _make_state()
        place_pieces(state, TIZI_OUZOU, {FLN_BASES: 1})
        place_pieces(state, BOUGIE, {HIDDEN_GUERRILLAS: 3})
        increase_resources(state, FLN, 2)
        begin_turn(state)
        action = consider_march(state)
        assert count_hidden(state, TIZI_OUZOU) == 1
        # Extort in Bougie follows, funded by the 2 guerrillas left there.
        assert action == ACTION_OP_PLUS_SA
        assert state["resources"][FLN] == 2
