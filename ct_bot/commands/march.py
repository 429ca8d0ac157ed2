"""March operation — §3.3.2.

Guerrillas march along a path of adjacent spaces. Each destination space
entered costs 1 Resource, paid once per operation no matter how many
groups pass through it. A group that triggers activation arrives active.

Reference: §3.3.2
"""

from ct_bot.rules_consts import GUERRILLAS, HIDDEN_GUERRILLAS
from ct_bot.board.pieces import (
    count_pieces, move_pieces, total_of, describe_pieces,
)
from ct_bot.map.map_data import is_adjacent
from ct_bot.state.history import log
from ct_bot.commands.common import CommandError, pay_fln


def march_cost(path, paid=(), free=False):
    """Resources to march along a path given spaces already paid for."""
    if free:
        return 0
    return len([space for space in path[1:] if space not in paid])


def validate_march(state, path, pieces):
    """Check a march along a path.

    Returns:
        Tuple of (valid: bool, reason: str or None).
    """
    if len(path) < 2:
        return False, "A march path needs a source and a destination"
    if len(set(path)) != len(path):
        return False, "A march path may not revisit a space"
    for here, there in zip(path, path[1:]):
        if not is_adjacent(here, there):
            return False, f"{here} is not adjacent to {there}"
    if total_of(pieces) == 0:
        return False, "Nothing to march"
    for piece_type, num in pieces.items():
        if num and piece_type not in GUERRILLAS:
            return False, f"{piece_type} cannot march"
        if count_pieces(state, path[0], piece_type) < num:
            return False, f"{path[0]} has fewer than {num} {piece_type}"
    if len(path) > 2 and total_of(pieces) != pieces.get(HIDDEN_GUERRILLAS,
                                                        0):
        return False, "Only underground guerrillas march beyond one space"
    return True, None


def march_group(state, path, pieces, *, activate=False, paid=(),
                free=False):
    """March one group of guerrillas along a path.

    Args:
        state: Game state dict. Modified in place.
        path: Sequence of space names from source to destination.
        pieces: Pieces dict of the group (guerrillas only).
        activate: If True the group arrives active at the destination.
        paid: Spaces already paid for in this operation.
        free: If True the march costs nothing.

    Returns:
        Set of the spaces newly paid for.

    Raises:
        CommandError: If the march is illegal or unaffordable.
    """
    valid, reason = validate_march(state, path, pieces)
    if not valid:
        raise CommandError(f"Cannot march: {reason}")

    cost = march_cost(path, paid, free)
    log(state)
    log(state, f"FLN executes March operation: {describe_pieces(pieces)} "
               f"from {path[0]} to {path[-1]}")
    pay_fln(state, cost, f"March to {path[-1]}")

    last = len(path) - 2
    for i, (here, there) in enumerate(zip(path, path[1:])):
        move_pieces(state, pieces, here, there, activate=activate and
                    i == last)
    if free:
        return set()
    return {space for space in path[1:] if space not in paid}
