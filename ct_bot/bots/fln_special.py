"""
FLN Bot special activities: Subvert and Extort.

Both are attempted as clean-up after an operation (and Extort also to
fund one) whenever a special activity slot is still open. Each marks the
slot taken when it does anything.
"""

import logging

from ct_bot.rules_consts import (
    FLN, ALGERIAN_POLICE, ALGERIAN_TROOPS, ALGERIAN_CUBES,
    EXTORT_RESOURCE_LIMIT, CARD_HARDENED_ATTITUDES,
)
from ct_bot.board.pieces import (
    count_hidden, count_pieces, count_algerian_cubes, count_french_cubes,
    count_cubes, count_fln_bases, guerrillas_available, only_pieces,
    get_pieces,
)
from ct_bot.board.control import get_population, is_fln_controlled
from ct_bot.cards.capabilities import is_momentum_active
from ct_bot.commands.sa_extort import extort_in_space
from ct_bot.commands.sa_subvert import subvert_in_space
from ct_bot.map.map_data import (
    get_algerian_spaces, get_country_spaces, is_sector,
)
from ct_bot.state.history import log
from ct_bot.bots.bot_common import (
    CriteriaFilter, top_priority, random_select, has_safe_hidden_guerrilla,
)
from ct_bot.bots.turn_state import (
    can_do_special_activity, mark_special_activity_taken,
)

logger = logging.getLogger(__name__)


# ============================================================================
# SUBVERT
# ============================================================================

class SubvertCmd:
    """One space of a Subvert: the cubes removed and whether replaced."""

    __slots__ = ("replace", "space", "pieces")

    def __init__(self, replace, space, pieces):
        self.replace = replace
        self.space = space
        self.pieces = pieces

    def __repr__(self):
        return (f"SubvertCmd(replace={self.replace}, space={self.space!r}, "
                f"pieces={self.pieces})")


def _best_piece(state, space):
    """Police is removed before troops."""
    if count_pieces(state, space, ALGERIAN_POLICE) > 0:
        return {ALGERIAN_POLICE: 1}
    return {ALGERIAN_TROOPS: 1}


def subvert_commands(state):
    """Choose where and what to Subvert.

    In order of preference:
    - remove the last 2 Algerian cubes in one space;
    - with one last-cube space, remove it and one other cube (or replace
      it with a guerrilla if it is the only space with cubes);
    - remove the last cube in two spaces;
    - replace a police cube with a guerrilla;
    - replace the cube in the only space with cubes;
    - remove a cube in two spaces.

    Returns:
        List of SubvertCmd, empty if there is nothing to Subvert.
    """
    spaces = [sp for sp in get_algerian_spaces()
              if count_hidden(state, sp) > 0]

    def algerian(sp):
        return count_algerian_cubes(state, sp)

    def police(sp):
        return count_pieces(state, sp, ALGERIAN_POLICE)

    last2_cubes = [sp for sp in spaces
                   if algerian(sp) == 2 and count_french_cubes(state, sp) == 0]
    last_cube = [sp for sp in spaces
                 if algerian(sp) == 1 and count_french_cubes(state, sp) == 0]
    with_police = [sp for sp in spaces if police(sp) > 0]
    generic = [sp for sp in spaces if algerian(sp) > 0]
    one_police = CriteriaFilter("Exactly 1 Police cube",
                                lambda sp: police(sp) == 1)
    has_police = CriteriaFilter("Police cube", lambda sp: police(sp) > 0)

    if last2_cubes:
        target = top_priority(state, last2_cubes, [one_police, has_police])
        return [SubvertCmd(False, target,
                           only_pieces(get_pieces(state, target),
                                       ALGERIAN_CUBES))]

    if len(last_cube) == 1:
        target = last_cube[0]
        rest = [sp for sp in generic if sp != target]
        if not rest:
            replace = guerrillas_available(state) > 0
            return [SubvertCmd(replace, target, _best_piece(state, target))]
        other = top_priority(state, rest, [has_police])
        return [SubvertCmd(False, target, _best_piece(state, target)),
                SubvertCmd(False, other, _best_piece(state, other))]

    if last_cube:
        cmds = []
        candidates = list(last_cube)
        while candidates and len(cmds) < 2:
            target = top_priority(state, candidates, [has_police])
            cmds.append(SubvertCmd(False, target, _best_piece(state, target)))
            candidates.remove(target)
        return cmds

    if with_police and guerrillas_available(state) > 0:
        target = random_select(state, with_police)
        return [SubvertCmd(True, target, _best_piece(state, target))]

    if len(generic) == 1:
        target = generic[0]
        replace = guerrillas_available(state) > 0
        return [SubvertCmd(replace, target, _best_piece(state, target))]

    return [SubvertCmd(False, sp, _best_piece(state, sp))
            for sp in generic[:2]]


def try_subvert(state):
    """Subvert if a special activity slot is open and there is a target.

    Returns:
        True if the Subvert was executed.
    """
    if not can_do_special_activity(state):
        return False
    cmds = subvert_commands(state)
    if not cmds:
        return False
    mark_special_activity_taken(state)
    log(state)
    log(state, "FLN executes a Subvert special ability")
    for cmd in cmds:
        logger.debug("Subvert: %r", cmd)
        subvert_in_space(state, cmd.space, cmd.pieces, cmd.replace)
    return True


# ============================================================================
# EXTORT
# ============================================================================

def _extort_sector_allowed(state, space):
    """Hardened Attitudes momentum: no Extort in sectors without a base."""
    if not is_momentum_active(state, CARD_HARDENED_ATTITUDES):
        return True
    return not is_sector(space) or count_fln_bases(state, space) > 0


def extort_candidates(state, protected=None):
    """Return (primary, secondary) Extort spaces.

    Args:
        state: Game state dict.
        protected: Optional {space: count} of underground guerrillas that
            must stay underground (they are about to be used).
    """
    protected = protected or {}

    def hidden(sp):
        return count_hidden(state, sp) - protected.get(sp, 0)

    def safe(sp):
        return has_safe_hidden_guerrilla(state, sp, 1 + protected.get(sp, 0))

    primary = []
    for sp in get_algerian_spaces():
        if not _extort_sector_allowed(state, sp):
            continue
        if get_population(state, sp) == 0 or not is_fln_controlled(state, sp):
            continue
        bases = count_fln_bases(state, sp)
        cubes = count_cubes(state, sp)
        if bases > 0 and cubes > 0:
            if hidden(sp) > 2:
                primary.append(sp)
        elif hidden(sp) > 1:
            primary.append(sp)
    primary += [sp for sp in get_country_spaces() if safe(sp)]

    secondary = [sp for sp in get_algerian_spaces()
                 if sp not in primary
                 and _extort_sector_allowed(state, sp)
                 and is_fln_controlled(state, sp) and safe(sp)]
    return primary, secondary


def try_extort(state, protected=None):
    """Extort if a slot is open and FLN resources are below 5.

    Primary spaces are always used; secondary spaces only if the FLN is
    still broke after the primary ones.

    Returns:
        True if the Extort was executed.
    """
    if not can_do_special_activity(state):
        return False
    if state["resources"][FLN] >= EXTORT_RESOURCE_LIMIT:
        return False
    primary, secondary = extort_candidates(state, protected)
    if not primary and not (state["resources"][FLN] == 0 and secondary):
        return False

    mark_special_activity_taken(state)
    log(state)
    log(state, "FLN executes an Extort special ability")
    for sp in primary:
        extort_in_space(state, sp)
    if state["resources"][FLN] == 0:
        for sp in secondary:
            extort_in_space(state, sp)
    return True
