"""Terror operation — §3.3.4.

Terror flips an underground guerrilla active, places a terror marker and
shifts the space to Neutral.

Cost: 1 Resource per space. City Terror is free under the FLN Taleb
capability (card 32 shaded); free operations cost nothing.
Under the Government Amateur Bomber capability (card 32 unshaded) Terror
in a City flips 2 guerrillas. The Government Peace of the Brave momentum
(card 5 unshaded) stops the shift to Neutral.

Reference: §3.3.4, Card Reference (5, 32)
"""

from ct_bot.rules_consts import (
    FLN, NEUTRAL, EVENT_SHADED, EVENT_UNSHADED,
    CARD_TELEB, CARD_PEACE_OF_THE_BRAVE,
)
from ct_bot.board.pieces import (
    count_hidden, activate_guerrillas, terror_markers_available,
)
from ct_bot.board.control import get_terror, add_terror, set_support
from ct_bot.cards.capabilities import is_capability_active, is_momentum_active
from ct_bot.map.map_data import is_city, is_country
from ct_bot.state.history import log
from ct_bot.commands.common import CommandError, pay_fln


def terror_guerrillas_needed(state, space):
    """Number of guerrillas Terror flips in a space."""
    if is_city(space) and is_capability_active(state, CARD_TELEB,
                                               EVENT_UNSHADED):
        return 2
    return 1


def terror_cost(state, space, free=False):
    if free:
        return 0
    if is_city(space) and is_capability_active(state, CARD_TELEB,
                                               EVENT_SHADED):
        return 0
    return 1


def validate_terror_space(state, space):
    """Check if the FLN can Terror in a space.

    Returns:
        Tuple of (valid: bool, reason: str or None).
    """
    if is_country(space):
        return False, f"Terror is not allowed in {space}"
    needed = terror_guerrillas_needed(state, space)
    if count_hidden(state, space) < needed:
        return False, (f"{space} needs {needed} underground guerrilla(s) "
                       f"for Terror")
    return True, None


def terror_in_space(state, space, *, free=False):
    """Execute Terror in a single space.

    Args:
        state: Game state dict. Modified in place.
        space: Target space.
        free: If True the operation costs nothing.

    Returns:
        Dict with "space", "cost", "activated" and "terror_placed".

    Raises:
        CommandError: If Terror is not legal in the space or the FLN
            cannot pay for it.
    """
    valid, reason = validate_terror_space(state, space)
    if not valid:
        raise CommandError(f"Cannot Terror in {space}: {reason}")

    cost = terror_cost(state, space, free)
    log(state)
    log(state, f"FLN executes Terror operation: {space}")
    pay_fln(state, cost, f"Terror in {space}")

    num = terror_guerrillas_needed(state, space)
    activate_guerrillas(state, space, num)

    placed = False
    if get_terror(state, space) == 0 and terror_markers_available(state) > 0:
        add_terror(state, space, 1)
        placed = True

    if is_momentum_active(state, CARD_PEACE_OF_THE_BRAVE, EVENT_UNSHADED):
        log(state, "Peace of the Brave: support is not shifted")
    else:
        set_support(state, space, NEUTRAL)

    return {
        "space": space,
        "cost": cost,
        "activated": num,
        "terror_placed": placed,
        "faction": FLN,
    }
