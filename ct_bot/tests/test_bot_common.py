"""
Tests for bot_common.py — the priority filter system, random selection,
die rolls and the safe underground guerrilla test.

Seeded RNGs keep every random tie-break reproducible.
"""

import random

import pytest

from ct_bot.rules_consts import (
    HIDDEN_GUERRILLAS, FLN_BASES, MEDEA, MOROCCO, DIE_MIN, DIE_MAX,
)
from ct_bot.state.state_schema import build_initial_state
from ct_bot.board.pieces import place_pieces
from ct_bot.bots.bot_common import (
    CriteriaFilter, HighestScore, LowestScore, select_candidates,
    top_priority, random_select, roll_die, has_safe_hidden_guerrilla,
)


def _make_state(seed=42):
    return build_initial_state(seed=seed)


class _ScriptedRng:
    """RNG stand-in returning a fixed sequence of randint results."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def randint(self, low, high):
        self.calls.append((low, high))
        return self.values.pop(0)


# ============================================================================
# FILTERS
# ============================================================================

class TestFilters:

    def test_criteria(self):
        f = CriteriaFilter("Even", lambda n: n % 2 == 0)
        assert f.filter([1, 2, 3, 4]) == [2, 4]

    def test_highest_keeps_ties(self):
        f = HighestScore("Value", lambda n: n // 10)
        assert f.filter([11, 25, 29, 3]) == [25, 29]

    def test_lowest_keeps_ties(self):
        f = LowestScore("Value", lambda n: n // 10)
        assert f.filter([11, 5, 7, 30]) == [5, 7]

    def test_score_filters_on_empty(self):
        assert HighestScore("x", abs).filter([]) == []
        assert LowestScore("x", abs).filter([]) == []

    def test_repr_is_description(self):
        assert repr(CriteriaFilter("Has base", bool)) == "Has base"


class TestSelectCandidates:

    def test_first_matching_filter(self):
        filters = [CriteriaFilter("Over 10", lambda n: n > 10),
                   CriteriaFilter("Even", lambda n: n % 2 == 0)]
        assert select_candidates([1, 2, 4], filters) == [2, 4]

    def test_no_match(self):
        filters = [CriteriaFilter("Negative", lambda n: n < 0)]
        assert select_candidates([1, 2], filters) == []

    def test_empty_candidates(self):
        assert select_candidates([], [CriteriaFilter("Any", bool)]) == []


# ============================================================================
# TOP PRIORITY
# ============================================================================

class TestTopPriority:

    def test_empty_candidates_raise(self):
        state = _make_state()
        with pytest.raises(ValueError):
            top_priority(state, [], [])

    def test_filters_narrow_in_order(self):
        state = _make_state()
        filters = [CriteriaFilter("Even", lambda n: n % 2 == 0),
                   HighestScore("Largest", lambda n: n)]
        assert top_priority(state, [1, 2, 3, 4, 5], filters) == 4

    def test_non_matching_filter_is_skipped(self):
        state = _make_state()
        filters = [CriteriaFilter("Negative", lambda n: n < 0),
                   LowestScore("Smallest", lambda n: n)]
        assert top_priority(state, [3, 1, 2], filters) == 1

    def test_single_candidate_needs_no_rng(self):
        state = _make_state()
        state["rng"] = _ScriptedRng([])
        assert top_priority(state, ["only"], []) == "only"

    def test_ties_broken_by_rng(self):
        state = _make_state()
        state["rng"] = _ScriptedRng([2])
        assert top_priority(state, ["a", "b", "c"], []) == "c"
        assert state["rng"].calls == [(0, 2)]

    def test_same_seed_same_choice(self):
        picks = []
        for _ in range(2):
            state = _make_state(seed=7)
            picks.append([top_priority(state, list(range(10)), [])
                          for _ in range(5)])
        assert picks[0] == picks[1]

    def test_generic_over_element_type(self):
        state = _make_state()
        filters = [HighestScore("Length", len)]
        assert top_priority(state, [("a",), ("a", "b")], filters) == (
            "a", "b")


# ============================================================================
# RANDOMNESS
# ============================================================================

class TestRandomness:

    def test_random_select_empty(self):
        state = _make_state()
        with pytest.raises(ValueError):
            random_select(state, [])

    def test_random_select_member(self):
        state = _make_state()
        assert random_select(state, ["x", "y"]) in ("x", "y")

    def test_roll_die_range(self):
        state = _make_state()
        rolls = {roll_die(state) for _ in range(200)}
        assert rolls == set(range(DIE_MIN, DIE_MAX + 1))

    def test_roll_die_uses_state_rng(self):
        state = _make_state()
        state["rng"] = random.Random(3)
        expected = random.Random(3).randint(DIE_MIN, DIE_MAX)
        assert roll_die(state) == expected


# ============================================================================
# SAFE UNDERGROUND GUERRILLA
# ============================================================================

class TestSafeHiddenGuerrilla:

    def test_no_guerrillas(self):
        state = _make_state()
        assert not has_safe_hidden_guerrilla(state, MEDEA)

    def test_without_base(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1})
        assert has_safe_hidden_guerrilla(state, MEDEA)

    def test_base_needs_two(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1, FLN_BASES: 1})
        assert not has_safe_hidden_guerrilla(state, MEDEA)
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 1})
        assert has_safe_hidden_guerrilla(state, MEDEA)

    def test_base_in_country_needs_one(self):
        state = _make_state()
        place_pieces(state, MOROCCO, {HIDDEN_GUERRILLAS: 1, FLN_BASES: 1})
        assert has_safe_hidden_guerrilla(state, MOROCCO)

    def test_flipping_two(self):
        state = _make_state()
        place_pieces(state, MEDEA, {HIDDEN_GUERRILLAS: 2})
        assert has_safe_hidden_guerrilla(state, MEDEA, 2)
        assert not has_safe_hidden_guerrilla(state, MEDEA, 3)
