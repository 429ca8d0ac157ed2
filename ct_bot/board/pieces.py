"""
Piece operations module — The ONLY way pieces change in the game state.

All piece operations go through this module. Functions update the
Available, Casualties and Out of Play pools and maintain state integrity.
Never manipulate piece counts in space dictionaries directly.

Pieces are passed around as dicts {piece_type: count}; partial dicts are
accepted wherever a pieces argument is taken.

Reference: §1.4, §1.4.1, §1.4.3
"""

from ct_bot.rules_consts import (
    # Piece types
    PIECE_TYPES, HIDDEN_GUERRILLAS, ACTIVE_GUERRILLAS,
    GUERRILLAS, CUBES, FRENCH_CUBES, ALGERIAN_CUBES, TROOPS,
    GOV_PIECES, FLN_PIECES, GOV_BASES, FLN_BASES,
    # Markers
    TERROR_MARKER_MANIFEST,
)
from ct_bot.state.state_schema import new_pieces
from ct_bot.state.history import log


class PieceError(Exception):
    """Raised when a piece operation violates game rules."""
    pass


# ============================================================================
# PIECES ALGEBRA
# ============================================================================

def add_pieces(a, b):
    """Return a new pieces dict holding a + b."""
    a, b = new_pieces(a), new_pieces(b)
    return {t: a[t] + b[t] for t in PIECE_TYPES}


def subtract_pieces(a, b):
    """Return a new pieces dict holding a - b, never below zero."""
    a, b = new_pieces(a), new_pieces(b)
    return {t: max(0, a[t] - b[t]) for t in PIECE_TYPES}


def only_pieces(pieces, kinds):
    """Return a new pieces dict keeping only the given piece types."""
    pieces = new_pieces(pieces)
    return {t: (pieces[t] if t in kinds else 0) for t in PIECE_TYPES}


def total_of(pieces, kinds=PIECE_TYPES):
    """Sum the counts of the given piece types (all by default)."""
    return sum(pieces.get(t, 0) for t in kinds)


def describe_pieces(pieces):
    """Human readable summary, e.g. '2 Underground Guerrillas, 1 FLN Bases'."""
    parts = [f"{pieces[t]} {t}" for t in PIECE_TYPES if pieces.get(t, 0)]
    return ", ".join(parts) if parts else "no pieces"


# ============================================================================
# QUERIES
# ============================================================================

def get_pieces(state, space):
    """The live pieces dict of a space (read only by convention)."""
    return state["spaces"][space]["pieces"]


def count_pieces(state, space, kinds):
    """Count pieces in a space.

    Args:
        state: Game state dict.
        space: Space name.
        kinds: A single piece type or a tuple of piece types.

    Returns:
        Integer count.
    """
    pieces = state["spaces"][space]["pieces"]
    if isinstance(kinds, str):
        return pieces[kinds]
    return total_of(pieces, kinds)


def count_hidden(state, space):
    return count_pieces(state, space, HIDDEN_GUERRILLAS)


def count_active(state, space):
    return count_pieces(state, space, ACTIVE_GUERRILLAS)


def count_guerrillas(state, space):
    return count_pieces(state, space, GUERRILLAS)


def count_cubes(state, space):
    return count_pieces(state, space, CUBES)


def count_french_cubes(state, space):
    return count_pieces(state, space, FRENCH_CUBES)


def count_algerian_cubes(state, space):
    return count_pieces(state, space, ALGERIAN_CUBES)


def count_troops(state, space):
    return count_pieces(state, space, TROOPS)


def count_gov(state, space):
    """All Government pieces in a space (cubes and bases)."""
    return count_pieces(state, space, GOV_PIECES)


def count_fln(state, space):
    """All FLN pieces in a space (guerrillas and bases)."""
    return count_pieces(state, space, FLN_PIECES)


def count_fln_bases(state, space):
    return count_pieces(state, space, FLN_BASES)


def count_gov_bases(state, space):
    return count_pieces(state, space, GOV_BASES)


def count_on_map(state, kinds, spaces=None):
    """Count pieces of the given type(s) over the map (or given spaces)."""
    names = state["spaces"] if spaces is None else spaces
    return sum(count_pieces(state, name, kinds) for name in names)


def get_available(state, piece_type):
    """Get the count of Available pieces of a type.

    Available guerrillas are all underground, so both guerrilla types
    report the same pool.
    """
    if piece_type in GUERRILLAS:
        return state["available"][HIDDEN_GUERRILLAS]
    return state["available"][piece_type]


def guerrillas_available(state):
    return state["available"][HIDDEN_GUERRILLAS]


def terror_markers_available(state):
    """Terror markers not yet on the map."""
    on_map = sum(space["terror"] for space in state["spaces"].values())
    return TERROR_MARKER_MANIFEST - on_map


# ============================================================================
# INTERNAL HELPERS
# ============================================================================

def _pool_key(piece_type):
    """Pools hold guerrillas underground."""
    return HIDDEN_GUERRILLAS if piece_type in GUERRILLAS else piece_type


def _take_from_pool(pool, pieces, pool_name):
    needed = new_pieces()
    for piece_type in PIECE_TYPES:
        needed[_pool_key(piece_type)] += pieces[piece_type]
    for piece_type in PIECE_TYPES:
        if needed[piece_type] > pool[piece_type]:
            raise PieceError(
                f"Not enough {piece_type} in {pool_name}: need "
                f"{needed[piece_type]}, have {pool[piece_type]}"
            )
    for piece_type in PIECE_TYPES:
        pool[piece_type] -= needed[piece_type]


def _return_to_pool(pool, pieces):
    for piece_type in PIECE_TYPES:
        pool[_pool_key(piece_type)] += pieces[piece_type]


def _take_from_space(state, space, pieces):
    current = state["spaces"][space]["pieces"]
    for piece_type in PIECE_TYPES:
        if pieces[piece_type] > current[piece_type]:
            raise PieceError(
                f"{space} has {current[piece_type]} {piece_type}, cannot "
                f"remove {pieces[piece_type]}"
            )
    for piece_type in PIECE_TYPES:
        current[piece_type] -= pieces[piece_type]


def _add_to_space(state, space, pieces):
    current = state["spaces"][space]["pieces"]
    for piece_type in PIECE_TYPES:
        current[piece_type] += pieces[piece_type]


# ============================================================================
# PLACEMENT
# ============================================================================

def place_pieces(state, space, pieces):
    """Place pieces from Available into a space.

    Args:
        state: Game state dict.
        space: Destination space.
        pieces: Pieces dict to place.

    Raises:
        PieceError: If Available does not hold enough pieces.
    """
    pieces = new_pieces(pieces)
    if total_of(pieces) == 0:
        return
    _take_from_pool(state["available"], pieces, "Available")
    _add_to_space(state, space, pieces)
    log(state, f"Place {describe_pieces(pieces)} from the available box "
               f"into {space}")


def place_from_out_of_play(state, space, pieces):
    """Place pieces from Out of Play into a space.

    Raises:
        PieceError: If Out of Play does not hold enough pieces.
    """
    pieces = new_pieces(pieces)
    if total_of(pieces) == 0:
        return
    _take_from_pool(state["out_of_play"], pieces, "Out of Play")
    _add_to_space(state, space, pieces)
    log(state, f"Place {describe_pieces(pieces)} from out of play "
               f"into {space}")


# ============================================================================
# REMOVAL
# ============================================================================

def remove_to_available(state, space, pieces):
    """Remove pieces from a space to Available.

    Raises:
        PieceError: If the space does not hold the pieces.
    """
    pieces = new_pieces(pieces)
    if total_of(pieces) == 0:
        return
    _take_from_space(state, space, pieces)
    _return_to_pool(state["available"], pieces)
    log(state, f"Remove {describe_pieces(pieces)} from {space} to the "
               f"available box")


def remove_to_casualties(state, space, pieces):
    """Remove pieces from a space to Casualties.

    Raises:
        PieceError: If the space does not hold the pieces.
    """
    pieces = new_pieces(pieces)
    if total_of(pieces) == 0:
        return
    _take_from_space(state, space, pieces)
    _return_to_pool(state["casualties"], pieces)
    log(state, f"Remove {describe_pieces(pieces)} from {space} to the "
               f"casualties box")


def remove_to_out_of_play(state, space, pieces):
    """Remove pieces from a space to Out of Play.

    Raises:
        PieceError: If the space does not hold the pieces.
    """
    pieces = new_pieces(pieces)
    if total_of(pieces) == 0:
        return
    _take_from_space(state, space, pieces)
    _return_to_pool(state["out_of_play"], pieces)
    log(state, f"Remove {describe_pieces(pieces)} from {space} to out "
               f"of play")


# ============================================================================
# MOVEMENT AND FLIPPING
# ============================================================================

def move_pieces(state, pieces, source, dest, activate=False):
    """Move pieces between two spaces.

    Args:
        state: Game state dict.
        pieces: Pieces dict to move.
        source: Origin space.
        dest: Destination space.
        activate: If True, moving underground guerrillas arrive active.

    Raises:
        PieceError: If the source does not hold the pieces.
    """
    pieces = new_pieces(pieces)
    if total_of(pieces) == 0:
        return
    _take_from_space(state, source, pieces)
    arriving = dict(pieces)
    if activate:
        arriving[ACTIVE_GUERRILLAS] += arriving[HIDDEN_GUERRILLAS]
        arriving[HIDDEN_GUERRILLAS] = 0
    _add_to_space(state, dest, arriving)
    log(state, f"Move {describe_pieces(pieces)} from {source} to {dest}")
    if activate and pieces[HIDDEN_GUERRILLAS]:
        log(state, f"Guerrillas activate on arrival in {dest}")


def activate_guerrillas(state, space, num):
    """Flip underground guerrillas in a space to active.

    Raises:
        PieceError: If the space has fewer than num underground guerrillas.
    """
    if num <= 0:
        return
    current = state["spaces"][space]["pieces"]
    if current[HIDDEN_GUERRILLAS] < num:
        raise PieceError(
            f"{space} has {current[HIDDEN_GUERRILLAS]} underground "
            f"guerrillas, cannot activate {num}"
        )
    current[HIDDEN_GUERRILLAS] -= num
    current[ACTIVE_GUERRILLAS] += num
    log(state, f"Flip {num} underground guerrillas in {space} to active")


def hide_guerrillas(state, space, num):
    """Flip active guerrillas in a space underground.

    Raises:
        PieceError: If the space has fewer than num active guerrillas.
    """
    if num <= 0:
        return
    current = state["spaces"][space]["pieces"]
    if current[ACTIVE_GUERRILLAS] < num:
        raise PieceError(
            f"{space} has {current[ACTIVE_GUERRILLAS]} active guerrillas, "
            f"cannot hide {num}"
        )
    current[ACTIVE_GUERRILLAS] -= num
    current[HIDDEN_GUERRILLAS] += num
    log(state, f"Flip {num} active guerrillas in {space} to underground")
