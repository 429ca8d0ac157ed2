"""
FLN Bot Terror operation.

Terror targets populated Algerian spaces at Support (or, in the final
campaign, trainable Neutral spaces without terror) where a guerrilla can
be flipped without exposing a base. Spaces are taken one at a time by
priority until the space budget or the money runs out; Extort is tried
to fund a space when the FLN is broke. Subvert and Extort follow.
"""

import logging

from ct_bot.rules_consts import FLN
from ct_bot.board.pieces import terror_markers_available
from ct_bot.board.control import (
    get_population, is_support, is_neutral, get_terror, can_train,
)
from ct_bot.commands.terror import (
    terror_in_space, terror_cost, terror_guerrillas_needed,
)
from ct_bot.engine.game_engine import can_do_multiple_spaces
from ct_bot.map.map_data import get_algerian_spaces
from ct_bot.state.history import log
from ct_bot.bots.bot_common import (
    CriteriaFilter, HighestScore, top_priority, has_safe_hidden_guerrilla,
)
from ct_bot.bots.turn_state import (
    allowed_spaces, is_free_operation, within_space_limit, effective_action,
)
from ct_bot.bots.fln_special import try_subvert, try_extort

logger = logging.getLogger(__name__)


def terror_candidates(state):
    """Algerian spaces where the Bot would Terror."""
    def qualifies(sp):
        if get_population(state, sp) == 0:
            return False
        if not has_safe_hidden_guerrilla(state, sp,
                                         terror_guerrillas_needed(state, sp)):
            return False
        if is_support(state, sp):
            return True
        return (state["final_campaign"] and is_neutral(state, sp)
                and get_terror(state, sp) == 0 and can_train(state, sp))

    return [sp for sp in allowed_spaces(state, get_algerian_spaces())
            if qualifies(sp)]


def terror_priorities(state):
    return [
        CriteriaFilter("Remove support", lambda sp: is_support(state, sp)),
        CriteriaFilter("Add terror to neutral in final campaign",
                       lambda sp: (is_neutral(state, sp)
                                   and terror_markers_available(state) > 0)),
        HighestScore("Highest population",
                     lambda sp: get_population(state, sp)),
    ]


def do_terror(state):
    """Run a full Terror operation.

    Returns:
        The action to report for the turn.
    """
    log(state)
    log(state, "FLN chooses: Terror")
    candidates = terror_candidates(state)
    free = is_free_operation(state)
    num_spaces = 0

    while candidates and within_space_limit(state, num_spaces):
        if num_spaces == 1 and not can_do_multiple_spaces(state):
            break
        target = top_priority(state, candidates, terror_priorities(state))
        cost = terror_cost(state, target, free)
        if cost > state["resources"][FLN]:
            needed = terror_guerrillas_needed(state, target)
            try_extort(state, protected={target: needed})
            if cost > state["resources"][FLN]:
                logger.debug("Terror: out of resources")
                break
        terror_in_space(state, target, free=free)
        num_spaces += 1
        candidates.remove(target)

    try_subvert(state)
    try_extort(state)
    return effective_action(state, num_spaces)
