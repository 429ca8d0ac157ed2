"""
Control module — Control, population, support and markers per space.

Control is derived from the pieces in a space (§1.7): the Government
controls a space where its pieces outnumber FLN pieces, the FLN where FLN
pieces outnumber Government pieces; otherwise the space is uncontrolled.
Control and population are never stored, only computed.

Support, terror and the Resettled / +1 Pop / +1 Base markers are changed
only through the mutators in this module.

Reference: §1.6, §1.7, §1.9, §4.2.2
"""

from ct_bot.rules_consts import (
    # Support
    SUPPORT, NEUTRAL, OPPOSE, SUPPORT_LEVELS,
    # Control
    GOV_CONTROL, FLN_CONTROL, UNCONTROLLED,
    # Pieces
    BASES,
    # Markers
    MARKER_RESETTLED, MARKER_PLUS1_POP, MARKER_PLUS1_BASE, MARKER_MANIFEST,
    # Limits
    MAX_BASES_PER_SPACE, MAX_BASES_WITH_MARKER,
    # Cards
    CARD_MOROCCO_TUNISIA_INDEPENDENT,
)
from ct_bot.board.pieces import (
    count_gov, count_fln, count_pieces, count_gov_bases,
    terror_markers_available, PieceError,
)
from ct_bot.map.map_data import get_space_data, is_adjacent_to_country
from ct_bot.state.history import log


# ============================================================================
# CONTROL
# ============================================================================

def calculate_control(state, space):
    """Calculate control of a space from its pieces.

    Returns:
        GOV_CONTROL, FLN_CONTROL or UNCONTROLLED.
    """
    diff = count_gov(state, space) - count_fln(state, space)
    if diff > 0:
        return GOV_CONTROL
    if diff < 0:
        return FLN_CONTROL
    return UNCONTROLLED


def is_gov_controlled(state, space):
    return calculate_control(state, space) == GOV_CONTROL


def is_fln_controlled(state, space):
    return calculate_control(state, space) == FLN_CONTROL


# ============================================================================
# POPULATION AND STACKING
# ============================================================================

def has_marker(state, space, marker):
    return marker in state["spaces"][space]["markers"]


def is_resettled(state, space):
    return has_marker(state, space, MARKER_RESETTLED)


def get_population(state, space):
    """Population of a space: 0 if Resettled, +1 with a +1 Pop marker."""
    if is_resettled(state, space):
        return 0
    base = get_space_data(space).base_population
    if has_marker(state, space, MARKER_PLUS1_POP):
        return base + 1
    return base


def max_bases(state, space):
    """Base stacking limit: 2, or 3 with a +1 Base marker — §1.4.2."""
    if has_marker(state, space, MARKER_PLUS1_BASE):
        return MAX_BASES_WITH_MARKER
    return MAX_BASES_PER_SPACE


def can_take_base(state, space):
    """True if the space has room for another base of either side."""
    return count_pieces(state, space, BASES) < max_bases(state, space)


def can_train(state, space):
    """Government may Train in Cities and in spaces with a Government Base."""
    return (get_space_data(space).is_city
            or count_gov_bases(state, space) > 0)


def is_border_sector(state, space):
    """Border sectors exist only after Morocco and Tunisia are independent."""
    return (CARD_MOROCCO_TUNISIA_INDEPENDENT in state["pivotal_played"]
            and get_space_data(space).is_sector
            and is_adjacent_to_country(space))


def morocco_tunisia_independent(state):
    return CARD_MOROCCO_TUNISIA_INDEPENDENT in state["pivotal_played"]


# ============================================================================
# SUPPORT
# ============================================================================

def get_support(state, space):
    return state["spaces"][space]["support"]


def is_support(state, space):
    return get_support(state, space) == SUPPORT


def is_neutral(state, space):
    return get_support(state, space) == NEUTRAL


def is_oppose(state, space):
    return get_support(state, space) == OPPOSE


def set_support(state, space, level):
    """Set the support level of a space.

    Raises:
        ValueError: If level is not a support level.
    """
    if level not in SUPPORT_LEVELS:
        raise ValueError(f"Unknown support level: {level}")
    old = state["spaces"][space]["support"]
    if old == level:
        return
    state["spaces"][space]["support"] = level
    log(state, f"Set {space} from {old} to {level}")


def increase_support(state, space, num):
    """Shift a space num levels toward Support.

    Raises:
        ValueError: If the shift would pass beyond Support.
    """
    if num <= 0:
        return
    old = get_support(state, space)
    index = SUPPORT_LEVELS.index(old) + num
    if index >= len(SUPPORT_LEVELS):
        raise ValueError(
            f"Cannot increase support in {space} from {old} by {num}"
        )
    set_support(state, space, SUPPORT_LEVELS[index])


def decrease_support(state, space, num):
    """Shift a space num levels toward Oppose.

    Raises:
        ValueError: If the shift would pass beyond Oppose.
    """
    if num <= 0:
        return
    old = get_support(state, space)
    index = SUPPORT_LEVELS.index(old) - num
    if index < 0:
        raise ValueError(
            f"Cannot decrease support in {space} from {old} by {num}"
        )
    set_support(state, space, SUPPORT_LEVELS[index])


# ============================================================================
# TERROR AND MARKERS
# ============================================================================

def get_terror(state, space):
    return state["spaces"][space]["terror"]


def add_terror(state, space, num=1):
    """Place terror markers in a space.

    Raises:
        PieceError: If not enough terror markers are available.
    """
    if num <= 0:
        return
    if terror_markers_available(state) < num:
        raise PieceError(f"Not enough terror markers to add {num}")
    state["spaces"][space]["terror"] += num
    log(state, f"Add {num} terror marker(s) to {space}")


def remove_terror(state, space, num):
    """Remove terror markers from a space.

    Raises:
        PieceError: If the space holds fewer markers.
    """
    if num <= 0:
        return
    if state["spaces"][space]["terror"] < num:
        raise PieceError(f"{space} does not hold {num} terror markers")
    state["spaces"][space]["terror"] -= num
    log(state, f"Remove {num} terror marker(s) from {space}")


def markers_available(state, marker):
    used = sum(1 for sp in state["spaces"].values() if marker in sp["markers"])
    return MARKER_MANIFEST[marker] - used


def add_marker(state, space, marker):
    """Add a Resettled, +1 Pop or +1 Base marker to a space.

    Raises:
        PieceError: If none of that marker is available.
    """
    if has_marker(state, space, marker):
        return
    if markers_available(state, marker) <= 0:
        raise PieceError(f"No {marker} markers available")
    state["spaces"][space]["markers"].add(marker)
    log(state, f"Add a {marker} marker to {space}")


def remove_marker(state, space, marker):
    if not has_marker(state, space, marker):
        return
    state["spaces"][space]["markers"].discard(marker)
    log(state, f"Remove the {marker} marker from {space}")


def total_terror(state):
    return sum(sp["terror"] for sp in state["spaces"].values())
