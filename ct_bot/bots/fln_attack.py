"""
FLN Bot Attack operation.

The Bot attacks only when it can expect to remove at least two
Government pieces over the whole operation. Attacks with 6+ guerrillas
(and no FLN base to expose) always succeed; Ambush is used where a single
underground guerrilla can be flipped safely. The Bot never Extorts to pay
for an Attack, but tries Extort afterwards.
"""

import logging

from ct_bot.rules_consts import (
    FLN, FRENCH_TROOPS, FRENCH_POLICE, POLICE,
    CARD_PEACE_TALKS, NO_AMBUSH_MIN_GUERRILLAS,
    FOLLOWUP_ATTACK_MIN_GUERRILLAS,
)
from ct_bot.board.pieces import (
    count_pieces, count_cubes, count_gov_bases, count_guerrillas,
    count_fln_bases,
)
from ct_bot.cards.capabilities import is_momentum_active
from ct_bot.commands.attack import attack_in_space
from ct_bot.engine.game_engine import can_do_multiple_spaces
from ct_bot.map.map_data import get_algerian_spaces
from ct_bot.state.history import log
from ct_bot.bots.bot_common import has_safe_hidden_guerrilla
from ct_bot.bots.turn_state import (
    allowed_spaces, is_free_operation, within_space_limit,
    can_do_special_activity, mark_special_activity_taken,
    special_activity_taken, effective_action,
)
from ct_bot.bots.fln_special import try_extort

logger = logging.getLogger(__name__)


def _gov_pieces(state, space):
    return count_cubes(state, space) + count_gov_bases(state, space)


def attack_sort_key(state, ambush):
    """Sort key putting the best Attack target first.

    Prefer, in order: a Government base exposed, a French troop exposed,
    French police present, the most pieces that can be removed.
    """
    max_losses = 1 if ambush else 2

    def key(space):
        cubes = count_cubes(state, space)
        police = count_pieces(state, space, POLICE)
        base_exposed = (count_gov_bases(state, space) > 0
                        and cubes < (1 if ambush else 2))
        troop_exposed = (count_pieces(state, space, FRENCH_TROOPS) > 0
                         and police < (1 if ambush else 2))
        return (
            not base_exposed,
            not troop_exposed,
            count_pieces(state, space, FRENCH_POLICE) == 0,
            -min(_gov_pieces(state, space), max_losses),
        )
    return key


def attack_candidates(state):
    """Return (no_ambush, kill_two, ambush) candidate lists."""
    def has_gov(sp):
        return _gov_pieces(state, sp) > 0

    spaces = allowed_spaces(state, get_algerian_spaces())
    no_ambush = [sp for sp in spaces
                 if count_fln_bases(state, sp) == 0
                 and count_guerrillas(state, sp) >= NO_AMBUSH_MIN_GUERRILLAS
                 and has_gov(sp)]
    kill_two = [sp for sp in no_ambush if _gov_pieces(state, sp) > 1]
    ambush = [sp for sp in spaces
              if sp not in no_ambush
              and has_safe_hidden_guerrilla(state, sp) and has_gov(sp)]
    return no_ambush, kill_two, ambush


def can_kill_at_least_two(state, no_ambush, kill_two, ambush):
    """Can the operation expect to remove two or more Government pieces?"""
    resources = state["resources"][FLN]
    if is_free_operation(state):
        resources = max(resources, len(no_ambush) + len(ambush))
    if resources == 0:
        return False
    if resources == 1 or not can_do_multiple_spaces(state):
        return bool(kill_two)
    if can_do_special_activity(state):
        return len(no_ambush) + len(ambush) > 1
    return len(no_ambush) > 1


def _has_funds(state):
    return is_free_operation(state) or state["resources"][FLN] > 0


def consider_attack(state):
    """Attack if two Government pieces can be removed.

    Returns:
        The action to report, or None to fall through.
    """
    if is_momentum_active(state, CARD_PEACE_TALKS):
        logger.debug("Attack: Peace Talks momentum in play")
        return None

    no_ambush, kill_two, ambush = attack_candidates(state)
    if not can_kill_at_least_two(state, no_ambush, kill_two, ambush):
        return None

    log(state)
    log(state, "FLN chooses: Attack")
    free = is_free_operation(state)
    done = []

    def attack_all(candidates, with_ambush, limit=None):
        for space in candidates:
            if limit is not None and limit <= 0:
                break
            if not _has_funds(state) or not within_space_limit(state,
                                                               len(done)):
                break
            attack_in_space(state, space, ambush=with_ambush, free=free)
            done.append(space)
            if with_ambush and not special_activity_taken(state):
                mark_special_activity_taken(state)
            if limit is not None:
                limit -= 1

    single = state["resources"][FLN] == 1 and not free
    if single or not can_do_multiple_spaces(state):
        target = sorted(kill_two, key=attack_sort_key(state, False))[0]
        attack_all([target], False)
    else:
        attack_all(sorted(no_ambush, key=attack_sort_key(state, False)),
                   False)
        if can_do_special_activity(state) and ambush:
            attack_all(sorted(ambush, key=attack_sort_key(state, True)),
                       True, limit=2)
        followup = [sp for sp in allowed_spaces(state, get_algerian_spaces())
                    if sp not in done
                    and count_fln_bases(state, sp) == 0
                    and (count_guerrillas(state, sp)
                         >= FOLLOWUP_ATTACK_MIN_GUERRILLAS)
                    and _gov_pieces(state, sp) > 0]
        attack_all(sorted(followup, key=attack_sort_key(state, False)),
                   False, limit=1)

    try_extort(state)
    return effective_action(state, len(done))
