"""Victory module — Government and FLN scores.

Government score = total population at Support + Commitment.
FLN score = total population at Oppose + FLN bases on the map.

The Bot compares the Government score before and after speculative trials
to judge whether an event or a Terror pass helps the FLN.

Reference:
  §7.2  Victory conditions
"""

from ct_bot.rules_consts import FLN_BASES, GOV, FLN
from ct_bot.board.pieces import count_on_map
from ct_bot.board.control import get_population, is_support, is_oppose


def support_value(state, space):
    return get_population(state, space) if is_support(state, space) else 0


def oppose_value(state, space):
    return get_population(state, space) if is_oppose(state, space) else 0


def gov_score(state):
    """Total population at Support plus Commitment."""
    support = sum(support_value(state, name) for name in state["spaces"])
    return support + state["commitment"]


def fln_score(state):
    """Total population at Oppose plus FLN bases on the map."""
    oppose = sum(oppose_value(state, name) for name in state["spaces"])
    return oppose + count_on_map(state, FLN_BASES)


def calculate_scores(state):
    """Return {GOV: score, FLN: score}."""
    return {GOV: gov_score(state), FLN: fln_score(state)}
