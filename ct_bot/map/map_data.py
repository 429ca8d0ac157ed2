"""
Map data module — Static space data and adjacency queries.

Provides per-space data (type, zone, terrain, population, coastal), wilaya
membership, and adjacency queries. All constants imported from
rules_consts.py.
"""

from ct_bot.rules_consts import (
    # Space types
    CITY, SECTOR, COUNTRY,
    # Terrain
    MOUNTAINS,
    # Spaces
    SPACE_DEFINITIONS, ALL_SPACES, COUNTRY_SPACES, ADJACENCIES,
    MOROCCO, TUNISIA,
)


# ============================================================================
# ADJACENCY INDEX
# ============================================================================
# Build a symmetric adjacency lookup from the canonical ADJACENCIES table.

_ADJACENCY_MAP = {}  # {space: set(adjacent spaces)}

for _a, _neighbours in ADJACENCIES.items():
    for _b in _neighbours:
        _ADJACENCY_MAP.setdefault(_a, set()).add(_b)
        _ADJACENCY_MAP.setdefault(_b, set()).add(_a)


# ============================================================================
# SPACE DATA STRUCTURE
# ============================================================================

class SpaceData:
    """Immutable data about a map space."""
    __slots__ = ("name", "space_type", "zone", "terrain", "base_population",
                 "coastal")

    def __init__(self, name, space_type, zone, terrain, base_population,
                 coastal):
        self.name = name
        self.space_type = space_type
        self.zone = zone
        self.terrain = terrain
        self.base_population = base_population
        self.coastal = coastal

    @property
    def wilaya(self):
        """Wilaya label ("I" .. "VI"), or "" for the two countries."""
        return self.zone.split("-")[0]

    @property
    def is_city(self):
        return self.space_type == CITY

    @property
    def is_sector(self):
        return self.space_type == SECTOR

    @property
    def is_country(self):
        return self.space_type == COUNTRY

    @property
    def is_mountains(self):
        return self.terrain == MOUNTAINS


ALL_SPACE_DATA = {}
for _name, _type, _zone, _terrain, _pop, _coastal in SPACE_DEFINITIONS:
    ALL_SPACE_DATA[_name] = SpaceData(
        name=_name,
        space_type=_type,
        zone=_zone,
        terrain=_terrain,
        base_population=_pop,
        coastal=_coastal,
    )

ALGERIAN_SPACES = tuple(s for s in ALL_SPACES if s not in COUNTRY_SPACES)


# ============================================================================
# QUERY HELPERS
# ============================================================================

def get_space_data(space):
    """Get SpaceData for a space.

    Args:
        space: Space name constant from rules_consts.

    Returns:
        SpaceData object.

    Raises:
        KeyError: If space is not a valid space.
    """
    return ALL_SPACE_DATA[space]


def get_adjacent(space):
    """Get the spaces adjacent to the given space, in sorted order.

    Args:
        space: Space name constant.

    Returns:
        Tuple of adjacent space names.
    """
    return tuple(sorted(_ADJACENCY_MAP.get(space, ())))


def is_adjacent(space_a, space_b):
    """Check whether two spaces share a border."""
    return space_b in _ADJACENCY_MAP.get(space_a, ())


def get_wilaya(space):
    """Get the wilaya of a space ("" for Morocco and Tunisia)."""
    return ALL_SPACE_DATA[space].wilaya


def get_spaces_in_wilaya(wilaya):
    """Get all spaces in a wilaya, in sorted order.

    Args:
        wilaya: Wilaya label ("I" .. "VI").

    Returns:
        Tuple of space names.
    """
    return tuple(s for s in ALL_SPACES if ALL_SPACE_DATA[s].wilaya == wilaya)


def get_all_spaces():
    """All 30 map spaces in sorted order."""
    return ALL_SPACES


def get_algerian_spaces():
    """All spaces except Morocco and Tunisia, in sorted order."""
    return ALGERIAN_SPACES


def get_country_spaces():
    """Morocco and Tunisia."""
    return COUNTRY_SPACES


def is_country(space):
    return ALL_SPACE_DATA[space].is_country


def is_city(space):
    return ALL_SPACE_DATA[space].is_city


def is_sector(space):
    return ALL_SPACE_DATA[space].is_sector


def is_adjacent_to_country(space):
    """Check whether a space borders Morocco or Tunisia."""
    return is_adjacent(space, MOROCCO) or is_adjacent(space, TUNISIA)
