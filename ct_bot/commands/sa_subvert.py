"""Subvert special activity — §4.3.1.

In a space with an underground guerrilla, remove Algerian cubes to
Available, or replace one Algerian cube with an underground guerrilla.
Subvert never activates a guerrilla.

Reference: §4.3.1
"""

from ct_bot.rules_consts import (
    ALGERIAN_CUBES, HIDDEN_GUERRILLAS,
)
from ct_bot.board.pieces import (
    count_hidden, count_pieces, place_pieces, remove_to_available,
    guerrillas_available, total_of,
)
from ct_bot.map.map_data import is_country
from ct_bot.commands.common import CommandError


def validate_subvert(state, space, pieces, replace=False):
    """Check a Subvert in a space.

    Returns:
        Tuple of (valid: bool, reason: str or None).
    """
    if is_country(space):
        return False, f"Subvert is not allowed in {space}"
    if count_hidden(state, space) == 0:
        return False, f"{space} has no underground guerrilla"
    num = total_of(pieces)
    if num == 0 or num > 2:
        return False, "Subvert removes 1 or 2 cubes"
    for piece_type, count in pieces.items():
        if count and piece_type not in ALGERIAN_CUBES:
            return False, f"Subvert cannot remove {piece_type}"
        if count_pieces(state, space, piece_type) < count:
            return False, f"{space} has fewer than {count} {piece_type}"
    if replace:
        if num != 1:
            return False, "Subvert replaces a single cube"
        if guerrillas_available(state) == 0:
            return False, "No guerrillas available to replace the cube"
    return True, None


def subvert_in_space(state, space, pieces, replace=False):
    """Subvert in a single space.

    Args:
        state: Game state dict. Modified in place.
        space: Target space.
        pieces: Algerian cubes to remove.
        replace: If True, place an underground guerrilla in place of the
            removed cube.

    Raises:
        CommandError: If the Subvert is not legal.
    """
    valid, reason = validate_subvert(state, space, pieces, replace)
    if not valid:
        raise CommandError(f"Cannot Subvert in {space}: {reason}")
    remove_to_available(state, space, pieces)
    if replace:
        place_pieces(state, space, {HIDDEN_GUERRILLAS: 1})
