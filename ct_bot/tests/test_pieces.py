"""
Tests for pieces.py and tracks.py — piece movement, pools and tracks.

Every mutation must keep the piece manifest intact; validate_state()
is used as the invariant check after each sequence of moves.
"""

import pytest

from ct_bot.rules_consts import (
    GOV, FLN,
    FRENCH_TROOPS, FRENCH_POLICE, ALGERIAN_POLICE,
    HIDDEN_GUERRILLAS, ACTIVE_GUERRILLAS, FLN_BASES,
    MEDEA, ALGIERS, TIZI_OUZOU,
    EDGE_TRACK_MAX, FRANCE_TRACK_MAX,
)
from ct_bot.state.state_schema import (
    build_initial_state, validate_state, new_pieces,
)
from ct_bot.state.history import history_messages
from ct_bot.board.pieces import (
    PieceError, add_pieces, subtract_pieces, only_pieces, total_of,
    describe_pieces, count_pieces, count_hidden, count_active,
    count_guerrillas, count_cubes, count_gov, count_fln, count_on_map,
    get_available, guerrillas_available, terror_markers_available,
    place_pieces, place_from_out_of_play, remove_to_available,
    remove_to_casualties, remove_to_out_of_play, move_pieces,
    activate_guerrillas, hide_guerrillas,
)
from ct_bot.board.control import add_terror
from ct_bot.board.tracks import (
    increase_resources, decrease_resources, increase_commitment,
    decrease_commitment, increase_france_track, france_track_letter,
    france_track_resources,
)


def _make_state(seed=42):
    return build_initial_state(seed=seed)


# ============================================================================
# PIECES ALGEBRA
# ============================================================================

class TestPiecesAlgebra:

    def test_add(self):
        total = add_pieces({HIDDEN_GUERRILLAS: 2}, {HIDDEN_GUERRILLAS: 1,
                                                    ACTIVE_GUERRILLAS: 1})
        assert total[HIDDEN_GUERRILLAS] == 3
        assert total[ACTIVE_GUERRILLAS] == 1

    def test_add_none(self):
        assert add_pieces(None, None) == new_pieces()

    def test_subtract_floors_at_zero(self):
        result = subtract_pieces({FRENCH_POLICE: 1}, {FRENCH_POLICE: 3})
        assert result[FRENCH_POLICE] == 0

    def test_only_pieces(self):
        result = only_pieces({FRENCH_POLICE: 1, HIDDEN_GUERRILLAS: 2},
                             (HIDDEN_GUERRILLAS,))
        assert result[FRENCH_POLICE] == 0
        assert result[HIDDEN_GUERRILLAS] == 2

    def test_total_of(self):
        assert total_of({FRENCH_POLICE: 1, HIDDEN_GUERRILLAS: 2}) == 3

    def test_describe(self):
        assert describe_pieces({}) == "no pieces"
        assert "2 French Police" in describe_pieces({FRENCH_POLICE: 2})

    def test_unknown_piece_type(self):
        with pytest.raises(ValueError):
            new_pieces({"Legion": 1})


# ============================================================================
# PLACEMENT AND REMOVAL
# ============================================================================

class TestPlacement:

    def test_place_from_available(self):
        state = _make_state()
        before = guerrillas_available(state)
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 3})
        assert count_hidden(state, MEDEA) == 3
        assert guerrillas_available(state) == before - 3
        assert validate_state(state) == []

    def test_place_logs(self):
        state = _make_state()
        place_pieces(state, MEDEA, {FLN_BASES: 1})
        assert any("Medea" in msg for msg in history_messages(state))

    def test_place_too_many(self):
        state = _make_state()
        with pytest.raises(PieceError):
            place_pieces(state, MEDEA, {FRENCH_TROOPS: 10})

    def test_place_nothing_is_noop(self):
        state = _make_state()
        place_pieces(state, MEDEA, {})
        assert history_messages(state) == []

    def test_active_guerrillas_drawn_from_hidden_pool(self):
        state = _make_state()
        place_pieces(state, MEDEA, {ACTIVE_GUERRILLAS: 2})
        assert count_active(state, MEDEA) == 2
        assert get_available(state, ACTIVE_GUERRILLAS) == 28
        assert validate_state(state) == []

    def test_place_from_out_of_play(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1})
        remove_to_out_of_play(state, MEDEA, {HIDDEN_GUERRILLAS: 1})
        assert state["out_of_play"][HIDDEN_GUERRILLAS] == 1
        place_from_out_of_play(state, ALGIERS, {HIDDEN_GUERRILLAS: 1})
        assert count_hidden(state, ALGIERS) == 1
        assert state["out_of_play"][HIDDEN_GUERRILLAS] == 0
        assert validate_state(state) == []

    def test_place_from_empty_out_of_play(self):
        state = _make_state()
        with pytest.raises(PieceError):
            place_from_out_of_play(state, MEDEA, {HIDDEN_GUERRILLAS: 1})


class TestRemoval:

    def test_remove_to_available(self):
        state = _make_state()
        place_pieces(state, MEDEA, {ACTIVE_GUERRILLAS: 2})
        remove_to_available(state, MEDEA, {ACTIVE_GUERRILLAS: 2})
        assert count_guerrillas(state, MEDEA) == 0
        assert guerrillas_available(state) == 30
        assert validate_state(state) == []

    def test_remove_to_casualties(self):
        state = _make_state()
        place_pieces(state, MEDEA, {FRENCH_POLICE: 2})
        remove_to_casualties(state, MEDEA, {FRENCH_POLICE: 1})
        assert count_pieces(state, MEDEA, FRENCH_POLICE) == 1
        assert state["casualties"][FRENCH_POLICE] == 1
        assert validate_state(state) == []

    def test_remove_missing_pieces(self):
        state = _make_state()
        with pytest.raises(PieceError):
            remove_to_available(state, MEDEA, {ALGERIAN_POLICE: 1})

    def test_failed_removal_changes_nothing(self):
        state = _make_state()
        place_pieces(state, MEDEA, {FRENCH_POLICE: 1})
        with pytest.raises(PieceError):
            remove_to_available(state, MEDEA, {FRENCH_POLICE: 1,
                                               ALGERIAN_POLICE: 1})
        assert count_pieces(state, MEDEA, FRENCH_POLICE) == 1


# ============================================================================
# MOVEMENT AND FLIPPING
# ============================================================================

class TestMovement:

    def test_move(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 3})
        move_pieces(state, {HIDDEN_GUERRILLAS: 2}, MEDEA, ALGIERS)
        assert count_hidden(state, MEDEA) == 1
        assert count_hidden(state, ALGIERS) == 2

    def test_move_activates(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 2})
        move_pieces(state, {HIDDEN_GUERRILLAS: 2}, MEDEA, ALGIERS,
                    activate=True)
        assert count_hidden(state, ALGIERS) == 0
        assert count_active(state, ALGIERS) == 2
        assert validate_state(state) == []

    def test_move_missing(self):
        state = _make_state()
        with pytest.raises(PieceError):
            move_pieces(state, {HIDDEN_GUERRILLAS: 1}, MEDEA, ALGIERS)

    def test_activate_and_hide(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 2})
        activate_guerrillas(state, MEDEA, 2)
        assert count_active(state, MEDEA) == 2
        hide_guerrillas(state, MEDEA, 1)
        assert count_hidden(state, MEDEA) == 1
        assert count_active(state, MEDEA) == 1

    def test_activate_too_many(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1})
        with pytest.raises(PieceError):
            activate_guerrillas(state, MEDEA, 2)

    def test_hide_too_many(self):
        state = _make_state()
        with pytest.raises(PieceError):
            hide_guerrillas(state, MEDEA, 1)


# ============================================================================
# COUNTS
# ============================================================================

class TestCounts:

    def test_faction_counts(self):
        state = _make_state()
        place_pieces(state, TIZI_OUZOU, {FRENCH_POLICE: 3,
                                         HIDDEN_GUERRILLAS: 1,
                                         FLN_BASES: 1})
        assert count_cubes(state, TIZI_OUZOU) == 3
        assert count_gov(state, TIZI_OUZOU) == 3
        assert count_fln(state, TIZI_OUZOU) == 2

    def test_count_on_map(self):
        state = _make_state()
        place_pieces(state, MEDEA, {FLN_BASES: 1})
        place_pieces(state, ALGIERS, {FLN_BASES: 1})
        assert count_on_map(state, FLN_BASES) == 2
        assert count_on_map(state, FLN_BASES, [MEDEA]) == 1

    def test_terror_markers_available(self):
        state = _make_state()
        add_terror(state, MEDEA, 2)
        assert terror_markers_available(state) == 10


# ============================================================================
# TRACKS
# ============================================================================

class TestTracks:

    def test_resources_clamped(self):
        state = _make_state()
        increase_resources(state, FLN, 60)
        assert state["resources"][FLN] == EDGE_TRACK_MAX
        decrease_resources(state, FLN, 70)
        assert state["resources"][FLN] == 0

    def test_unknown_faction(self):
        state = _make_state()
        with pytest.raises(ValueError):
            increase_resources(state, "Romans", 1)

    def test_commitment_clamped(self):
        state = _make_state()
        increase_commitment(state, 3)
        decrease_commitment(state, 5)
        assert state["commitment"] == 0

    def test_france_track(self):
        state = _make_state()
        assert france_track_letter(state) == "A"
        assert france_track_resources(state) == 1
        increase_france_track(state, 9)
        assert state["france_track"] == FRANCE_TRACK_MAX
        assert france_track_letter(state) == "F"
        assert france_track_resources(state) == 6

    def test_gov_resources(self):
        state = _make_state()
        increase_resources(state, GOV, 5)
        assert state["resources"][GOV] == 5
        assert validate_state(state) == []
