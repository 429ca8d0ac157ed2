"""Extort special activity — §4.3.2.

In each selected FLN-controlled space, flip one underground guerrilla
active and gain 1 Resource.

Reference: §4.3.2, Card Reference (56)
"""

from ct_bot.rules_consts import FLN
from ct_bot.board.pieces import count_hidden, activate_guerrillas
from ct_bot.board.control import is_fln_controlled
from ct_bot.board.tracks import increase_resources
from ct_bot.commands.common import CommandError


def validate_extort_space(state, space):
    """Check if the FLN can Extort in a space.

    Returns:
        Tuple of (valid: bool, reason: str or None).
    """
    if not is_fln_controlled(state, space):
        return False, f"{space} is not FLN controlled"
    if count_hidden(state, space) == 0:
        return False, f"{space} has no underground guerrilla"
    return True, None


def extort_in_space(state, space):
    """Extort in a single space.

    Raises:
        CommandError: If Extort is not legal in the space.
    """
    valid, reason = validate_extort_space(state, space)
    if not valid:
        raise CommandError(f"Cannot Extort in {space}: {reason}")
    activate_guerrillas(state, space, 1)
    increase_resources(state, FLN, 1)
