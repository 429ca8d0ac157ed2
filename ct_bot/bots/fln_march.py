"""
FLN Bot March operation.

March is considered at most once per turn. Destinations are taken by
march type in priority order, each type with its own cap on destinations:

  1. exposed bases get one guerrilla arriving underground;
  2. with Amateur Bomber in play, a Support city is brought to 2
     guerrillas;
  3. every Support space lacking a guerrilla gets one;
  4. one Government-controlled sector loses Government control;
  5. 3 guerrillas go to one empty, unpopulated sector to make a base site.

Every destination is resolved to concrete groups and paths, then trialed
so Extort can pay for it; a destination the FLN cannot afford is dropped.
"""

import logging

from ct_bot.rules_consts import (
    FLN, HIDDEN_GUERRILLAS, ACTIVE_GUERRILLAS, EVENT_UNSHADED, CARD_TELEB,
    BASE_SITE_GUERRILLAS, SUPPORT_CITY_GUERRILLAS,
)
from ct_bot.board.pieces import (
    count_hidden, count_guerrillas, count_cubes, count_fln_bases, count_fln,
    count_gov,
)
from ct_bot.board.control import (
    get_population, is_support, is_oppose, is_gov_controlled, is_resettled,
    can_take_base,
)
from ct_bot.cards.capabilities import is_capability_active
from ct_bot.commands.march import march_group
from ct_bot.engine.game_engine import can_do_multiple_spaces
from ct_bot.map.map_data import (
    get_all_spaces, get_space_data, is_city, is_country, is_sector,
)
from ct_bot.state.history import log
from ct_bot.bots.bot_common import (
    CriteriaFilter, HighestScore, LowestScore, top_priority,
)
from ct_bot.bots.harness import try_operation, commit_trial
from ct_bot.bots.march_paths import (
    march_sources, movable_guerrillas, group_for_path,
)
from ct_bot.bots.turn_state import (
    allowed_spaces, is_free_operation, within_space_limit, mark_considered,
    add_moving_group, effective_action,
)
from ct_bot.bots.fln_special import try_subvert, try_extort

logger = logging.getLogger(__name__)


# ============================================================================
# RESOLVED MARCH
# ============================================================================

class MarchGroup:
    """One group of guerrillas marching from a source along a path."""

    __slots__ = ("path", "pieces", "activate")

    def __init__(self, path, pieces, activate):
        self.path = path
        self.pieces = pieces
        self.activate = activate

    def __repr__(self):
        return (f"MarchGroup({self.path!r}, hidden="
                f"{self.pieces[HIDDEN_GUERRILLAS]}, active="
                f"{self.pieces[ACTIVE_GUERRILLAS]}, "
                f"activate={self.activate})")

    @property
    def size(self):
        return self.pieces[HIDDEN_GUERRILLAS] + self.pieces[ACTIVE_GUERRILLAS]

    @property
    def arriving_hidden(self):
        return 0 if self.activate else self.pieces[HIDDEN_GUERRILLAS]

    def arriving(self):
        """Pieces dict of the group as it stands at the destination."""
        if self.activate:
            return {HIDDEN_GUERRILLAS: 0, ACTIVE_GUERRILLAS: self.size}
        return dict(self.pieces)


class ResolvedMarch:
    """All groups marching to one destination."""

    __slots__ = ("dest", "groups")

    def __init__(self, dest, groups):
        self.dest = dest
        self.groups = groups

    def __repr__(self):
        return f"ResolvedMarch({self.dest!r}, {self.groups!r})"

    @property
    def size(self):
        return sum(g.size for g in self.groups)

    @property
    def arriving_hidden(self):
        return sum(g.arriving_hidden for g in self.groups)

    def cost(self, paid=(), free=False):
        """Resources for the entered spaces not yet paid for."""
        if free:
            return 0
        entered = set()
        for group in self.groups:
            entered.update(group.path.entered())
        return len(entered - set(paid))

    def protected(self):
        """{source: underground guerrillas that must stay underground}."""
        protected = {}
        for group in self.groups:
            hidden = group.pieces[HIDDEN_GUERRILLAS]
            if hidden:
                source = group.path.source
                protected[source] = protected.get(source, 0) + hidden
        return protected


# ============================================================================
# MARCH TYPES
# ============================================================================

class MarchType:
    """A kind of march destination and how to fill it.

    Attributes:
        name: Label for logs.
        cap: Most destinations of this type per operation, None if no cap.
        prefer_hidden: Prefer groups arriving underground over cheap paths.
        destinations: fn(state) -> candidate destination spaces.
        num_needed: fn(state, dest) -> guerrillas the destination needs.
        must_hide: fn(state, dest) -> the guerrillas must arrive underground.
        priorities: fn(state, resolved, paid) -> filters over destinations.
    """

    __slots__ = ("name", "cap", "prefer_hidden", "destinations", "num_needed",
                 "must_hide", "priorities")

    def __init__(self, name, cap, prefer_hidden, destinations, num_needed,
                 must_hide, priorities):
        self.name = name
        self.cap = cap
        self.prefer_hidden = prefer_hidden
        self.destinations = destinations
        self.num_needed = num_needed
        self.must_hide = must_hide
        self.priorities = priorities

    def __repr__(self):
        return f"MarchType({self.name!r})"


def _cost_filter(state, resolved, paid):
    free = is_free_operation(state)
    return LowestScore("Lowest cost",
                       lambda sp: resolved[sp].cost(paid, free))


def _hidden_filter(resolved):
    return HighestScore("Most arriving underground",
                        lambda sp: resolved[sp].arriving_hidden)


def _population_filter(state):
    return HighestScore("Highest population",
                        lambda sp: get_population(state, sp))


def _mountains_filter():
    return CriteriaFilter("Mountains",
                          lambda sp: get_space_data(sp).is_mountains)


def _final_campaign(state, dest):
    return state["final_campaign"]


# 1. Exposed bases

def exposed_base_destinations(state):
    return [sp for sp in get_all_spaces()
            if count_fln_bases(state, sp) > 0 and count_hidden(state, sp) == 0]


def exposed_base_priorities(state, resolved, paid):
    return [
        CriteriaFilter("In Algeria", lambda sp: not is_country(sp)),
        _population_filter(state),
        _cost_filter(state, resolved, paid),
    ]


# 2. Support city (Amateur Bomber)

def support_city_destinations(state):
    if not is_capability_active(state, CARD_TELEB, EVENT_UNSHADED):
        return []
    return [sp for sp in get_all_spaces()
            if is_city(sp) and is_support(state, sp)
            and count_guerrillas(state, sp) < SUPPORT_CITY_GUERRILLAS]


def support_city_needed(state, dest):
    return SUPPORT_CITY_GUERRILLAS - count_guerrillas(state, dest)


def support_city_priorities(state, resolved, paid):
    return [
        _population_filter(state),
        _hidden_filter(resolved),
        _cost_filter(state, resolved, paid),
    ]


# 3. Support spaces

def support_space_destinations(state):
    return [sp for sp in get_all_spaces()
            if is_support(state, sp) and count_guerrillas(state, sp) == 0]


def support_space_priorities(state, resolved, paid):
    return [
        _population_filter(state),
        _cost_filter(state, resolved, paid),
        _hidden_filter(resolved),
    ]


# 4. Remove Government control

def remove_control_destinations(state):
    return [sp for sp in get_all_spaces()
            if is_sector(sp) and is_gov_controlled(state, sp)
            and not is_oppose(state, sp) and get_population(state, sp) > 0]


def remove_control_needed(state, dest):
    """Enough guerrillas to tie the Government pieces."""
    return count_gov(state, dest) - count_fln(state, dest)


def remove_control_priorities(state, resolved, paid):
    return [
        _mountains_filter(),
        _population_filter(state),
        _cost_filter(state, resolved, paid),
    ]


# 5. Base site

def base_site_destinations(state):
    return [sp for sp in get_all_spaces()
            if is_sector(sp) and not is_resettled(state, sp)
            and get_population(state, sp) == 0 and can_take_base(state, sp)
            and count_fln(state, sp) == 0]


def base_site_priorities(state, resolved, paid):
    return [
        LowestScore("Fewest cubes", lambda sp: count_cubes(state, sp)),
        _mountains_filter(),
        _cost_filter(state, resolved, paid),
        _hidden_filter(resolved),
    ]


MARCH_TYPES = (
    MarchType("Exposed base", None, True, exposed_base_destinations,
              lambda state, dest: 1, lambda state, dest: True,
              exposed_base_priorities),
    MarchType("Support city", 1, True, support_city_destinations,
              support_city_needed, _final_campaign, support_city_priorities),
    MarchType("Support space", None, False, support_space_destinations,
              lambda state, dest: 1, _final_campaign,
              support_space_priorities),
    MarchType("Remove Government control", 1, False,
              remove_control_destinations, remove_control_needed,
              lambda state, dest: False, remove_control_priorities),
    MarchType("Base site", 1, True, base_site_destinations,
              lambda state, dest: BASE_SITE_GUERRILLAS,
              lambda state, dest: False, base_site_priorities),
)


# ============================================================================
# RESOLUTION
# ============================================================================

def _option_key(march_type, group, cost):
    size = group.size
    if march_type.prefer_hidden:
        return (-group.arriving_hidden, cost, -size)
    return (cost, -group.arriving_hidden, -size)


def resolve_march(state, march_type, dest, paid=()):
    """Work out the groups and paths that fill a destination.

    Sources are used one group each, best option first: cheapest path or
    most guerrillas arriving underground depending on the march type, the
    other as tie-break.

    Returns:
        ResolvedMarch, or None if the destination cannot be filled.
    """
    needed = march_type.num_needed(state, dest)
    if needed <= 0:
        return None
    must_hide = march_type.must_hide(state, dest)
    free = is_free_operation(state)
    sources = march_sources(state, dest)
    entered = set(paid)
    groups = []

    while needed > 0 and sources:
        best = None
        for source in sorted(sources):
            movable = movable_guerrillas(state, source)
            for path in sources[source]:
                found = group_for_path(state, path, movable, needed,
                                       must_hide=must_hide,
                                       hidden_first=march_type.prefer_hidden)
                if found is None:
                    continue
                group = MarchGroup(path, *found)
                cost = path.cost(entered, free)
                key = _option_key(march_type, group, cost)
                if best is None or key < best[0]:
                    best = (key, source, group)
        if best is None:
            break
        _, source, group = best
        groups.append(group)
        entered.update(group.path.entered())
        needed -= group.size
        del sources[source]

    if needed > 0:
        logger.debug("March: cannot fill %s (%s)", dest, march_type.name)
        return None
    return ResolvedMarch(dest, groups)


# ============================================================================
# EXECUTION
# ============================================================================

def execute_march(state, resolved, paid, announce=False):
    """Carry out a resolved march, Extorting first if short of funds.

    Returns:
        The updated set of paid spaces, or None if unaffordable.
    """
    free = is_free_operation(state)
    if announce:
        log(state)
        log(state, "FLN chooses: March")
    cost = resolved.cost(paid, free)
    if cost > state["resources"][FLN]:
        try_extort(state, protected=resolved.protected())
        if cost > state["resources"][FLN]:
            return None

    paid = set(paid)
    for group in resolved.groups:
        paid |= march_group(state, group.path.spaces, group.pieces,
                            activate=group.activate, paid=paid, free=free)
        add_moving_group(state, resolved.dest, group.arriving())
    return paid


def consider_march(state):
    """Run the March operation if any destination can be reached.

    Returns:
        The action to report, or None to fall through.
    """
    mark_considered(state, "march")
    single = not can_do_multiple_spaces(state)
    paid = set()
    dests = []

    def can_continue():
        if single and dests:
            return False
        return within_space_limit(state, len(dests))

    for march_type in MARCH_TYPES:
        candidates = [sp for sp in allowed_spaces(
            state, march_type.destinations(state)) if sp not in dests]
        done = 0
        while candidates and can_continue():
            if march_type.cap is not None and done >= march_type.cap:
                break
            resolved = {}
            for dest in candidates:
                found = resolve_march(state, march_type, dest, paid)
                if found is not None:
                    resolved[dest] = found
            if not resolved:
                break
            dest = top_priority(state, list(resolved),
                                march_type.priorities(state, resolved, paid))
            candidates.remove(dest)
            logger.debug("March %s: %r", march_type.name, resolved[dest])
            trial, result = try_operation(state, execute_march,
                                          resolved[dest], paid,
                                          announce=not dests)
            if result is None:
                logger.debug("March: cannot afford %s", dest)
                continue
            commit_trial(state, trial)
            paid = result
            dests.append(dest)
            done += 1

    if not dests:
        return None
    try_subvert(state)
    try_extort(state)
    return effective_action(state, len(dests))
