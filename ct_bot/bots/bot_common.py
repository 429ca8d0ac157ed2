"""
Shared FLN Bot behaviors: the priority filter system, random selection,
die rolls and the space tests used by several operations.

Every operation module imports from here for: top_priority cascading
selection, select_candidates, criteria/highest/lowest score filters,
random selection and the "safe underground guerrilla" test.
"""

import logging

from ct_bot.rules_consts import (
    DIE_MIN, DIE_MAX,
)
from ct_bot.board.pieces import count_hidden, count_fln_bases
from ct_bot.map.map_data import is_country

logger = logging.getLogger(__name__)


# ============================================================================
# PRIORITY FILTERS
# ============================================================================

class CriteriaFilter:
    """Keep only the candidates matching a boolean test."""

    def __init__(self, desc, criteria):
        self.desc = desc
        self.criteria = criteria

    def filter(self, candidates):
        return [c for c in candidates if self.criteria(c)]

    def __repr__(self):
        return self.desc


class HighestScore:
    """Keep the candidates tied for the highest integer score."""

    def __init__(self, desc, score):
        self.desc = desc
        self.score = score

    def filter(self, candidates):
        if not candidates:
            return []
        high = max(self.score(c) for c in candidates)
        logger.debug("Highest (%s): score = %d", self.desc, high)
        return [c for c in candidates if self.score(c) == high]

    def __repr__(self):
        return self.desc


class LowestScore:
    """Keep the candidates tied for the lowest integer score."""

    def __init__(self, desc, score):
        self.desc = desc
        self.score = score

    def filter(self, candidates):
        if not candidates:
            return []
        low = min(self.score(c) for c in candidates)
        logger.debug("Lowest (%s): score = %d", self.desc, low)
        return [c for c in candidates if self.score(c) == low]

    def __repr__(self):
        return self.desc


def select_candidates(candidates, filters):
    """Return the result of the first filter that matches anything.

    Each filter is tried against the full candidate list in turn; as soon
    as one finds at least one match its result is returned. If none of
    the filters matches, returns [].
    """
    candidates = list(candidates)
    if not candidates:
        logger.debug("select_candidates: no candidates to consider")
        return []
    for f in filters:
        results = f.filter(candidates)
        if results:
            logger.debug("select_candidates (%s): %s", f, results)
            return results
        logger.debug("select_candidates (%s): failed", f)
    return []


def top_priority(state, candidates, filters):
    """Narrow candidates through each filter and return the winner.

    Each filter narrows the current set when it matches at least one
    candidate and is skipped when it matches none. When the filters are
    exhausted a single remaining candidate is returned; several are
    broken with random_select.

    Args:
        state: Game state dict (must have state["rng"]).
        candidates: Non-empty sequence of candidates.
        filters: Ordered sequence of filters.

    Returns:
        One element of candidates.

    Raises:
        ValueError: If candidates is empty.
    """
    best = list(candidates)
    if not best:
        raise ValueError("top_priority called with no candidates")
    logger.debug("top_priority: %s", best)
    for f in filters:
        if len(best) == 1:
            break
        matched = f.filter(best)
        if matched:
            logger.debug("top_priority (%s) matched %s", f, matched)
            best = matched
        else:
            logger.debug("top_priority (%s) no matches", f)
    if len(best) == 1:
        logger.debug("top_priority: picked a winner %s", best[0])
        return best[0]
    choice = random_select(state, best)
    logger.debug("top_priority: picked at random %s", choice)
    return choice


# ============================================================================
# RANDOMNESS
# ============================================================================

def random_select(state, candidates):
    """Select one candidate from equal-priority options using state RNG.

    Raises:
        ValueError: If candidates is empty.
    """
    if not candidates:
        raise ValueError("Cannot random_select from empty candidates")
    if len(candidates) == 1:
        return candidates[0]
    idx = state["rng"].randint(0, len(candidates) - 1)
    return candidates[idx]


def roll_die(state):
    """Roll a single d6 using the state RNG."""
    return state["rng"].randint(DIE_MIN, DIE_MAX)


# ============================================================================
# SPACE TESTS
# ============================================================================

def has_safe_hidden_guerrilla(state, space, num=1):
    """Can num guerrillas be flipped here without exposing an FLN base?"""
    hidden = count_hidden(state, space) - (num - 1)
    bases = count_fln_bases(state, space)
    return (((bases == 0 or is_country(space)) and hidden > 0)
            or (bases > 0 and hidden > 1))
