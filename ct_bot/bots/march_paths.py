"""
March path-finder.

Enumerates the acyclic paths guerrillas can march along from a source to
a destination, and works out for each path how large a group can travel
it and whether the group is activated on the way.

Paths of more than one step stay inside the source's wilaya and are taken
by underground guerrillas only; a group that would activate before its
destination cannot take the path at all.

Reference: §3.3.2
"""

from ct_bot.rules_consts import (
    HIDDEN_GUERRILLAS, ACTIVE_GUERRILLAS, EVENT_UNSHADED,
    CARD_DEAD_ZONE, CARD_PARANOIA, CARD_POPULATION_CONTROL,
    MARCH_ACTIVATION_LIMIT, OPT_POPULATION_CONTROL_CITY_CUBES,
)
from ct_bot.board.pieces import (
    count_hidden, count_active, count_guerrillas, count_cubes,
    count_fln_bases, count_fln, count_gov,
)
from ct_bot.board.control import (
    get_population, is_support, is_gov_controlled,
)
from ct_bot.cards.capabilities import is_capability_active, is_momentum_active
from ct_bot.commands.march import march_cost
from ct_bot.engine.game_engine import can_do_multiple_spaces
from ct_bot.map.map_data import (
    get_adjacent, get_wilaya, is_city, is_country, is_sector,
)
from ct_bot.bots.turn_state import moving_group


# ============================================================================
# ACTIVATION
# ============================================================================

def would_activate(state, prev, space, num):
    """Does a group of num guerrillas activate on entering space from prev?

    Entering a City or a Support space activates the group when group plus
    cubes there exceed 3; crossing an international border adds the Border
    Zone track to that sum. Under the Population Control momentum a City
    with more cubes than the configured threshold always activates.
    """
    cubes = count_cubes(state, space)
    if (is_city(space)
            and is_momentum_active(state, CARD_POPULATION_CONTROL,
                                   EVENT_UNSHADED)
            and cubes > state["options"][OPT_POPULATION_CONTROL_CITY_CUBES]):
        return True
    if is_city(space) or is_support(state, space):
        if num + cubes > MARCH_ACTIVATION_LIMIT:
            return True
    if is_country(prev) != is_country(space):
        border = state["border_zone_track"]
        if num + cubes + border > MARCH_ACTIVATION_LIMIT:
            return True
    return False


# ============================================================================
# MARCH PATH
# ============================================================================

class MarchPath:
    """An ordered sequence of spaces from a source to a destination."""

    __slots__ = ("spaces",)

    def __init__(self, spaces):
        self.spaces = tuple(spaces)

    def __repr__(self):
        return f"MarchPath({' -> '.join(self.spaces)})"

    def __eq__(self, other):
        return isinstance(other, MarchPath) and self.spaces == other.spaces

    def __hash__(self):
        return hash(self.spaces)

    @property
    def source(self):
        return self.spaces[0]

    @property
    def dest(self):
        return self.spaces[-1]

    @property
    def hops(self):
        return len(self.spaces) - 1

    def entered(self):
        return self.spaces[1:]

    def cost(self, paid=(), free=False):
        """Resources to march along this path given spaces already paid."""
        return march_cost(self.spaces, paid, free)

    def activates_at(self, state, num):
        """Index of the first space where a group of num activates, or None."""
        for i in range(1, len(self.spaces)):
            if would_activate(state, self.spaces[i - 1], self.spaces[i], num):
                return i
        return None

    def activates_on_arrival(self, state, num):
        return self.activates_at(state, num) == self.hops

    def can_carry(self, state, num):
        """A group of num reaches the destination, maybe activating there."""
        index = self.activates_at(state, num)
        return index is None or index == self.hops

    def max_movable(self, state, hidden, active):
        """Largest group that can reach the destination.

        Active guerrillas only take single-step paths.
        """
        if self.hops == 1:
            return hidden + active
        num = hidden
        while num > 0 and not self.can_carry(state, num):
            num -= 1
        return num

    def max_hidden_arrival(self, state, hidden):
        """Largest underground group that arrives still underground."""
        num = hidden
        while num > 0 and self.activates_at(state, num) is not None:
            num -= 1
        return num


# ============================================================================
# PATH ENUMERATION
# ============================================================================

def multi_step_allowed(state):
    """Dead Zone forbids marching more than one space."""
    return (can_do_multiple_spaces(state)
            and not is_capability_active(state, CARD_DEAD_ZONE,
                                         EVENT_UNSHADED))


def step_allowed(state, prev, space):
    """Paranoia: no entering a sector of another wilaya except from a country.
    """
    if not is_momentum_active(state, CARD_PARANOIA, EVENT_UNSHADED):
        return True
    if is_country(prev) or not is_sector(space):
        return True
    return get_wilaya(prev) == get_wilaya(space)


def find_paths(state, source, dest):
    """All acyclic paths from source to dest.

    A single step to an adjacent destination, plus (when multi-step paths
    are allowed) every path staying inside the source's wilaya.

    Returns:
        List of MarchPath, shortest first.
    """
    paths = []
    if dest in get_adjacent(source) and step_allowed(state, source, dest):
        paths.append(MarchPath((source, dest)))

    wilaya = get_wilaya(source)
    if not wilaya or get_wilaya(dest) != wilaya:
        return paths
    if not multi_step_allowed(state):
        return paths

    stack = [(source,)]
    while stack:
        path = stack.pop()
        for adj in get_adjacent(path[-1]):
            if adj in path or get_wilaya(adj) != wilaya:
                continue
            if adj == dest:
                if len(path) > 1:
                    paths.append(MarchPath(path + (adj,)))
                continue
            stack.append(path + (adj,))
    return sorted(paths, key=lambda p: (p.hops, p.spaces))


# ============================================================================
# MOVABLE GUERRILLAS
# ============================================================================

def movable_guerrillas(state, space):
    """Guerrillas that may march out of a space this turn.

    Guerrillas that already marched stay put. A space with an FLN base
    keeps 2 FLN pieces and, if populated, 1 underground guerrilla; a
    Support space keeps 1 guerrilla; a populated space never loses enough
    guerrillas to fall under Government control.

    Returns:
        Tuple (max_hidden, max_active, max_total).
    """
    moved = moving_group(state, space)
    free_hidden = max(0, count_hidden(state, space)
                      - moved[HIDDEN_GUERRILLAS])
    free_active = max(0, count_active(state, space)
                      - moved[ACTIVE_GUERRILLAS])
    total = count_guerrillas(state, space)
    pop = get_population(state, space)

    keep_total = 0
    keep_hidden = 0
    bases = count_fln_bases(state, space)
    if bases > 0:
        keep_total = max(0, 2 - bases)
        if pop > 0:
            keep_hidden = 1
    if is_support(state, space):
        keep_total = max(keep_total, 1)
    if pop > 0 and not is_gov_controlled(state, space):
        surplus = count_fln(state, space) - count_gov(state, space)
        keep_total = max(keep_total, total - surplus)

    max_total = max(0, min(free_hidden + free_active, total - keep_total))
    max_hidden = max(0, min(free_hidden,
                            count_hidden(state, space) - keep_hidden,
                            max_total))
    max_active = min(free_active, max_total)
    return max_hidden, max_active, max_total


def march_sources(state, dest):
    """{source: [MarchPath, ...]} for every space that can march to dest."""
    sources = {}
    for space in sorted(state["spaces"]):
        if space == dest:
            continue
        max_hidden, max_active, max_total = movable_guerrillas(state, space)
        if max_total == 0:
            continue
        paths = find_paths(state, space, dest)
        if max_hidden == 0:
            paths = [p for p in paths if p.hops == 1]
        if paths:
            sources[space] = paths
    return sources


def group_for_path(state, path, movable, wanted, must_hide=False,
                   hidden_first=False):
    """Choose the group a source sends along a path.

    Args:
        state: Game state dict.
        path: MarchPath.
        movable: Tuple from movable_guerrillas() for the source.
        wanted: Guerrillas still needed at the destination.
        must_hide: The group must arrive underground.
        hidden_first: Send underground guerrillas before active ones.

    Returns:
        Tuple (pieces dict, activate flag), or None if nothing can go.
    """
    max_hidden, max_active, max_total = movable
    wanted = min(wanted, max_total)
    single = path.hops == 1 and not must_hide

    if hidden_first or not single:
        hidden = min(max_hidden, wanted)
        active = min(max_active, wanted - hidden) if single else 0
    else:
        active = min(max_active, wanted)
        hidden = min(max_hidden, wanted - active)

    if must_hide:
        hidden = path.max_hidden_arrival(state, hidden)
    elif path.hops > 1:
        hidden = path.max_movable(state, hidden, 0)
    if hidden + active == 0:
        return None
    pieces = {HIDDEN_GUERRILLAS: hidden, ACTIVE_GUERRILLAS: active}
    return pieces, path.activates_on_arrival(state, hidden + active)
