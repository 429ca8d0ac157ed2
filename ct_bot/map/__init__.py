"""Map module — Space and adjacency data for Colonial Twilight."""

from ct_bot.map.map_data import (
    get_space_data,
    get_adjacent,
    is_adjacent,
    get_wilaya,
    get_spaces_in_wilaya,
    get_all_spaces,
    get_algerian_spaces,
    get_country_spaces,
    is_country,
    is_city,
    is_sector,
    is_adjacent_to_country,
    ALL_SPACE_DATA,
)

__all__ = [
    "get_space_data",
    "get_adjacent",
    "is_adjacent",
    "get_wilaya",
    "get_spaces_in_wilaya",
    "get_all_spaces",
    "get_algerian_spaces",
    "get_country_spaces",
    "is_country",
    "is_city",
    "is_sector",
    "is_adjacent_to_country",
    "ALL_SPACE_DATA",
]
