"""
FLN Bot Rally operation.

Rally is considered at most once per turn. It runs when an FLN base can
be placed or when the bases look thinly garrisoned, then works through a
fixed sequence of passes, each spending from a shared budget of rallies:

  1. place bases where there are no cubes;
  2. place bases where cubes are present;
  3. reinforce unprotected bases;
  4. shift the France track;
  5. add a guerrilla to Support sectors without one;
  6. choose an agitation target worth 2+ population and reserve its cost;
  7. reinforce populated spaces next to bases (2 at most);
  8. add a guerrilla where guerrillas stand without a base (2 at most);
  9. choose any agitation target if none was chosen;
 10. agitate.

Guerrillas come from Available first, then from active guerrillas on the
map.
"""

import logging

from ct_bot.rules_consts import (
    FLN, ACTIVE_GUERRILLAS, HIDDEN_GUERRILLAS, FLN_BASES, EVENT_SHADED,
    FRANCE_TRACK_MAX, CARD_MOUDJAHIDINE, RALLY_UNLIMITED_BELOW,
    BASE_SITE_GUERRILLAS,
)
from ct_bot.board.pieces import (
    count_active, count_hidden, count_guerrillas, count_cubes,
    count_fln_bases, count_gov_bases, count_on_map, get_available,
    guerrillas_available, place_pieces, remove_to_available,
)
from ct_bot.board.control import (
    get_population, is_support, is_oppose, can_take_base, is_fln_controlled,
)
from ct_bot.cards.capabilities import is_momentum_active
from ct_bot.commands.rally import (
    rally_in_space, rally_france_track, agitate_in_space, agitate_cost,
)
from ct_bot.engine.game_engine import can_do_multiple_spaces
from ct_bot.map.map_data import (
    get_all_spaces, get_algerian_spaces, get_adjacent, is_city, is_country,
    is_sector,
)
from ct_bot.state.history import log
from ct_bot.bots.bot_common import (
    CriteriaFilter, HighestScore, LowestScore, top_priority, roll_die,
)
from ct_bot.bots.harness import try_operation, commit_trial
from ct_bot.bots.turn_state import (
    allowed_spaces, is_free_operation, max_spaces, mark_considered,
    effective_action,
)
from ct_bot.bots.fln_special import try_subvert, try_extort

logger = logging.getLogger(__name__)

PLACE_BASE = "place base"
PLACE_GUERRILLAS = "place guerrillas"


# ============================================================================
# GUERRILLA SOURCING
# ============================================================================

def _eligible_on_map(state, space):
    """Active guerrillas a space can give up; bases and Support keep 2."""
    active = count_active(state, space)
    if count_fln_bases(state, space) > 0 or is_support(state, space):
        return max(0, min(active, count_guerrillas(state, space) - 2))
    return active


def get_guerrillas_to_place(state, num, target):
    """Find num guerrillas to place in target.

    Available guerrillas are used first; the rest come from active
    guerrillas on other spaces (Algerian spaces only unless the target is
    a country), sources with the most eligible guerrillas first.

    Returns:
        Tuple (from_available, [(num, source), ...]).
    """
    if num <= 0:
        return 0, []
    available = guerrillas_available(state)
    if available >= num:
        return num, []
    pool = get_all_spaces() if is_country(target) else get_algerian_spaces()
    sources = [(_eligible_on_map(state, sp), sp) for sp in pool
               if sp != target]
    sources = sorted([s for s in sources if s[0] > 0], key=lambda s: -s[0])
    remaining = num - available
    from_map = []
    for eligible, source in sources:
        if remaining == 0:
            break
        take = min(eligible, remaining)
        from_map.append((take, source))
        remaining -= take
    return available, from_map


def place_guerrillas(state, space, from_available, from_map):
    """Place underground guerrillas found by get_guerrillas_to_place.

    Returns:
        Number of guerrillas placed.
    """
    for num, source in from_map:
        remove_to_available(state, source, {ACTIVE_GUERRILLAS: num})
    wanted = from_available + sum(num for num, _ in from_map)
    num = min(wanted, guerrillas_available(state))
    if num > 0:
        place_pieces(state, space, {HIDDEN_GUERRILLAS: num})
    return num


def num_guerrillas_to_place(state, space):
    """Guerrillas a Rally should place in a space.

    One without a base. With a base, enough to reach population + 1
    guerrillas, limited to bases + population. Under the Moudjahidine
    momentum an FLN-controlled space without a base counts as having one.
    """
    bases = count_fln_bases(state, space)
    if (bases == 0 and is_fln_controlled(state, space)
            and is_momentum_active(state, CARD_MOUDJAHIDINE, EVENT_SHADED)):
        bases = 1
    if bases == 0:
        return 1
    pop = get_population(state, space)
    return max(0, min(bases + pop, pop + 1 - count_guerrillas(state, space)))


# ============================================================================
# PRIORITIES
# ============================================================================

def base_priorities(state):
    return [
        CriteriaFilter("Has 2+ active & 1+ hidden",
                       lambda sp: (count_active(state, sp) > 1
                                   and count_hidden(state, sp) > 0)),
        CriteriaFilter("Has 1+ active & 1+ hidden",
                       lambda sp: (count_active(state, sp) > 0
                                   and count_hidden(state, sp) > 0)),
        CriteriaFilter("Has 1+ active",
                       lambda sp: count_active(state, sp) > 0),
    ]


def unprotected_base_priorities(state):
    return [
        CriteriaFilter("In Algeria", lambda sp: not is_country(sp)),
        CriteriaFilter("With cubes", lambda sp: count_cubes(state, sp) > 0),
        CriteriaFilter("1+ population",
                       lambda sp: get_population(state, sp) > 0),
        LowestScore("Fewest hidden", lambda sp: count_hidden(state, sp)),
    ]


def support_sector_priorities(state):
    return [HighestScore("Highest population",
                         lambda sp: get_population(state, sp))]


def base_adjacent_priorities(state):
    return [
        HighestScore("Highest population",
                     lambda sp: get_population(state, sp)),
        CriteriaFilter("Adjacent to a base",
                       lambda sp: _adjacent_to_fln_base(state, sp)),
        LowestScore("Fewest guerrillas",
                    lambda sp: count_guerrillas(state, sp)),
    ]


def guerrillas_no_base_priorities(state):
    return [
        CriteriaFilter("In Algeria", lambda sp: not is_country(sp)),
        HighestScore("Most guerrillas",
                     lambda sp: count_guerrillas(state, sp)),
        CriteriaFilter("No Gov cubes", lambda sp: count_cubes(state, sp) == 0),
    ]


def _adjacent_to_fln_base(state, space):
    return any(count_fln_bases(state, adj) > 0 for adj in get_adjacent(space))


# ============================================================================
# RALLY PLAN
# ============================================================================

class RallyPlan:
    """Bookkeeping for one Rally operation."""

    def __init__(self, state):
        self.state = state
        self.spaces = []
        self.shifted_france_track = False
        self.agitate_space = None
        self.reserved = 0
        self.free = is_free_operation(state)
        self.max_total = self._max_total_rallies()

    def _max_total_rallies(self):
        state = self.state
        if not can_do_multiple_spaces(state):
            limit = 1
        elif self.free or state["resources"][FLN] < RALLY_UNLIMITED_BELOW:
            limit = None
        else:
            limit = state["resources"][FLN] * 2 // 3
        cap = max_spaces(state)
        if cap is not None:
            limit = cap if limit is None else min(limit, cap)
        return limit

    @property
    def num_rallies(self):
        return len(self.spaces) + (1 if self.shifted_france_track else 0)

    def can_continue(self):
        return self.max_total is None or self.num_rallies < self.max_total

    def has_rallied(self, space):
        return space in self.spaces

    def have_a_resource(self):
        """Funds for one more rally above the reserve, Extorting if short."""
        if self.free:
            return True
        if self.state["resources"][FLN] == self.reserved:
            try_extort(self.state)
        return self.state["resources"][FLN] > self.reserved

    def total_agitate_cost(self, space):
        rally = 0 if self.has_rallied(space) or self.free else 1
        return agitate_cost(self.state, space) + rally


# ============================================================================
# RALLY PASSES
# ============================================================================

def _rally_once(plan, space, rally_type, force):
    """Rally in one space. Returns True if a rally happened."""
    state = plan.state
    if rally_type == PLACE_BASE:
        if get_available(state, FLN_BASES) == 0:
            return False
        if not plan.have_a_resource():
            return False
        rally_in_space(state, space, base=True, free=plan.free)
        return True

    num = num_guerrillas_to_place(state, space)
    from_available, from_map = get_guerrillas_to_place(state, num, space)
    if num == 0 and count_active(state, space) > 0:
        if not plan.have_a_resource():
            return False
        rally_in_space(state, space, flip_active=True, free=plan.free)
        return True
    if num == 0 or (from_available == 0 and not from_map):
        if not force or not plan.have_a_resource():
            return False
        rally_in_space(state, space, free=plan.free,
                       purpose="to allow agitation")
        return True
    if not plan.have_a_resource():
        return False
    rally_in_space(state, space, guerrillas=num, from_map=from_map,
                   free=plan.free)
    return True


def do_rallies(plan, candidates, rally_type, priorities, force=False,
               limit=None):
    """Rally in candidates by priority until the budget runs out.

    Args:
        plan: RallyPlan.
        candidates: Space names.
        rally_type: PLACE_BASE or PLACE_GUERRILLAS.
        priorities: Filters for top_priority.
        force: Rally even with nothing to place (to allow agitation).
        limit: Optional cap on the spaces rallied by this pass.
    """
    candidates = list(candidates)
    done = 0
    while candidates and plan.can_continue():
        if limit is not None and done >= limit:
            break
        space = top_priority(plan.state, candidates, priorities)
        candidates.remove(space)
        if _rally_once(plan, space, rally_type, force):
            plan.spaces.append(space)
            done += 1


def _fund_agitation(state, cost):
    if state["resources"][FLN] < cost:
        try_extort(state)
    return state["resources"][FLN] >= cost


def choose_agitate_target(plan, candidates):
    """First candidate whose agitation can be paid for, Extorting if needed.

    The funding Extort is trialed and only kept for the chosen target.
    """
    state = plan.state
    for space in candidates:
        if not (plan.has_rallied(space) or plan.can_continue()):
            continue
        trial, sufficient = try_operation(state, _fund_agitation,
                                          plan.total_agitate_cost(space))
        if sufficient:
            commit_trial(state, trial)
            return space
    return None


def _agitate_choices(plan, candidates):
    """The best (highest population, then cheapest) and the cheapest."""
    state = plan.state
    by_pop = sorted(candidates, key=lambda sp: -get_population(state, sp))
    best = sorted(by_pop, key=plan.total_agitate_cost)[0]
    cheapest = sorted(candidates, key=plan.total_agitate_cost)[0]
    return [best, cheapest]


def _select_agitation(plan, candidates):
    if not candidates:
        return
    space = choose_agitate_target(plan, _agitate_choices(plan, candidates))
    if space is None:
        return
    plan.agitate_space = space
    plan.reserved = agitate_cost(plan.state, space)
    if not plan.has_rallied(space):
        do_rallies(plan, [space], PLACE_GUERRILLAS, [], force=True)


# ============================================================================
# CONSIDER RALLY
# ============================================================================

def should_rally(state, base_candidates):
    """Rally if a base can be placed or bases look thinly garrisoned."""
    if get_available(state, FLN_BASES) > 0 and base_candidates:
        return True
    bases = count_on_map(state, FLN_BASES)
    with_bases = sum(count_guerrillas(state, sp) for sp in state["spaces"]
                     if count_fln_bases(state, sp) > 0)
    return bases * 2 > with_bases + roll_die(state) // 2


def consider_rally(state):
    """Run the Rally operation if warranted.

    Returns:
        The action to report, or None to fall through.
    """
    mark_considered(state, "rally")
    spaces = allowed_spaces(state, get_all_spaces())

    def support_city(sp):
        return is_city(sp) and is_support(state, sp)

    def base_no_cubes(sp):
        return (not support_city(sp) and can_take_base(state, sp)
                and (is_country(sp) or count_fln_bases(state, sp) == 0)
                and count_cubes(state, sp) == 0
                and count_guerrillas(state, sp) >= BASE_SITE_GUERRILLAS)

    min_with_cubes = 4 if can_do_multiple_spaces(state) else 3

    def base_with_cubes(sp):
        return (not support_city(sp) and can_take_base(state, sp)
                and count_cubes(state, sp) > 0
                and count_fln_bases(state, sp) == 0
                and count_guerrillas(state, sp) >= min_with_cubes)

    def unprotected_base(sp):
        if support_city(sp) or count_fln_bases(state, sp) == 0:
            return False
        pop = get_population(state, sp)
        if not is_country(sp) and pop > 0:
            return count_hidden(state, sp) < 2
        return count_hidden(state, sp) == 0

    def agitate_target(sp, min_pop):
        return (not support_city(sp) and get_population(state, sp) >= min_pop
                and not is_oppose(state, sp)
                and (count_gov_bases(state, sp) > 0
                     or is_fln_controlled(state, sp)))

    no_cube_sites = [sp for sp in spaces if base_no_cubes(sp)]
    cube_sites = [sp for sp in spaces if base_with_cubes(sp)]
    if not should_rally(state, no_cube_sites + cube_sites):
        return None

    log(state)
    log(state, "FLN chooses: Rally")
    plan = RallyPlan(state)

    # 1-2. Bases
    do_rallies(plan, no_cube_sites, PLACE_BASE, base_priorities(state))
    do_rallies(plan, cube_sites, PLACE_BASE, base_priorities(state))

    # 3. Unprotected bases
    do_rallies(plan, [sp for sp in spaces
                      if not plan.has_rallied(sp) and unprotected_base(sp)],
               PLACE_GUERRILLAS, unprotected_base_priorities(state))

    # 4. France track
    if state["france_track"] < FRANCE_TRACK_MAX and plan.can_continue():
        if plan.have_a_resource():
            rally_france_track(state, free=plan.free)
            plan.shifted_france_track = True

    # 5. Support sectors
    do_rallies(plan, [sp for sp in spaces
                      if not plan.has_rallied(sp) and is_sector(sp)
                      and is_support(state, sp)
                      and count_hidden(state, sp) == 0],
               PLACE_GUERRILLAS, support_sector_priorities(state))

    # 6. Agitation worth 2+ population
    algerian = allowed_spaces(state, get_algerian_spaces())
    _select_agitation(plan, [sp for sp in algerian if agitate_target(sp, 2)])

    # 7. Populated spaces next to bases
    do_rallies(plan, [sp for sp in spaces
                      if not plan.has_rallied(sp) and not support_city(sp)
                      and count_fln_bases(state, sp) == 0
                      and get_population(state, sp) > 0
                      and (get_population(state, sp) > 1
                           or _adjacent_to_fln_base(state, sp))],
               PLACE_GUERRILLAS, base_adjacent_priorities(state), limit=2)

    # 8. Guerrillas without a base
    do_rallies(plan, [sp for sp in spaces
                      if not plan.has_rallied(sp) and not support_city(sp)
                      and count_fln_bases(state, sp) == 0
                      and count_guerrillas(state, sp) > 0],
               PLACE_GUERRILLAS, guerrillas_no_base_priorities(state),
               limit=2)

    # 9. Any agitation
    if plan.agitate_space is None:
        _select_agitation(plan,
                          [sp for sp in algerian if agitate_target(sp, 1)])

    # 10. Agitate
    if plan.agitate_space is not None and plan.has_rallied(plan.agitate_space):
        agitate_in_space(state, plan.agitate_space)

    if plan.num_rallies == 0:
        logger.debug("Rally: nothing rallied")
        return None
    try_subvert(state)
    try_extort(state)
    return effective_action(state, plan.num_rallies)
