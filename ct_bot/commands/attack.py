"""Attack operation — §3.3.3, with the Ambush special activity — §4.3.3.

Attack without Ambush activates every underground guerrilla in the space
and rolls a die: the Attack succeeds if the roll does not exceed the
number of guerrillas present. Success removes up to 2 Government pieces
in loss order, and the FLN loses one active guerrilla (attrition) for
each Government base or French cube removed. A roll of 1 also captures
goods: one underground guerrilla is placed from Available.

Attack with Ambush needs no roll: it activates one guerrilla (none under
the FLN Zonal Commandos capability, card 17 shaded) and removes exactly
one Government piece with no attrition.

Cost: 1 Resource per space (0 for free operations).

Reference: §3.3.3, §4.3.3, Card Reference (17)
"""

from ct_bot.rules_consts import (
    # Pieces
    HIDDEN_GUERRILLAS, ACTIVE_GUERRILLAS, GOV_BASES,
    FRENCH_CUBES, ALGERIAN_CUBES, ATTACK_LOSS_ORDER, GOV_PIECES,
    # Cards
    EVENT_SHADED, CARD_COMMANDOS,
    # Die
    DIE_MIN, DIE_MAX,
)
from ct_bot.board.pieces import (
    get_pieces, count_hidden, count_guerrillas, count_pieces,
    activate_guerrillas, remove_to_available, remove_to_casualties,
    place_pieces, guerrillas_available, only_pieces, describe_pieces,
    total_of,
)
from ct_bot.cards.capabilities import is_capability_active
from ct_bot.state.history import log
from ct_bot.commands.common import CommandError, pay_fln


def attack_losses(pieces, ambush):
    """Compute the pieces removed by a successful Attack.

    Args:
        pieces: Pieces dict of the attacked space (after activation).
        ambush: True for an Ambush (1 loss, no attrition).

    Returns:
        Pieces dict of Government losses plus any attrition, counted as
        active guerrillas.
    """
    max_losses = 1 if ambush else 2
    losses = {}
    removed = 0
    for piece_type in ATTACK_LOSS_ORDER:
        num = min(pieces.get(piece_type, 0), max_losses - removed)
        if num > 0:
            losses[piece_type] = num
            removed += num
    if ambush:
        attrition = 0
    else:
        attrition = min(total_of(losses, (GOV_BASES,) + FRENCH_CUBES),
                        pieces.get(ACTIVE_GUERRILLAS, 0))
    if attrition:
        losses[ACTIVE_GUERRILLAS] = attrition
    return losses


def validate_attack_space(state, space, ambush=False):
    """Check if the FLN can Attack in a space.

    Returns:
        Tuple of (valid: bool, reason: str or None).
    """
    if count_pieces(state, space, GOV_PIECES) == 0:
        return False, f"{space} has no Government pieces"
    if count_guerrillas(state, space) == 0:
        return False, f"{space} has no guerrillas"
    if ambush and count_hidden(state, space) == 0:
        return False, f"{space} has no underground guerrilla to Ambush"
    return True, None


def remove_attack_losses(state, space, losses):
    """French pieces and attrition go to casualties, Algerian to Available."""
    french = only_pieces(losses,
                         FRENCH_CUBES + (GOV_BASES, ACTIVE_GUERRILLAS))
    algerian = only_pieces(losses, ALGERIAN_CUBES)
    remove_to_casualties(state, space, french)
    remove_to_available(state, space, algerian)


def attack_in_space(state, space, *, ambush=False, free=False):
    """Execute Attack (optionally with Ambush) in a single space.

    Args:
        state: Game state dict. Modified in place.
        space: Target space.
        ambush: If True resolve as an Ambush.
        free: If True the operation costs nothing.

    Returns:
        Dict with "space", "ambush", "roll" (None for Ambush),
        "success" and "losses".

    Raises:
        CommandError: If the Attack is not legal in the space or the FLN
            cannot pay for it.
    """
    valid, reason = validate_attack_space(state, space, ambush)
    if not valid:
        raise CommandError(f"Cannot Attack in {space}: {reason}")

    log(state)
    if ambush:
        log(state, f"FLN executes Attack operation with ambush: {space}")
    else:
        log(state, f"FLN executes Attack operation: {space}")
    pay_fln(state, 0 if free else 1, f"Attack in {space}")

    result = {"space": space, "ambush": ambush, "roll": None,
              "success": False, "losses": {}}

    if ambush:
        if is_capability_active(state, CARD_COMMANDOS, EVENT_SHADED):
            log(state, "Zonal Commandos: no guerrilla is activated")
        else:
            activate_guerrillas(state, space, 1)
        losses = attack_losses(get_pieces(state, space), ambush=True)
        remove_attack_losses(state, space, losses)
        result["success"] = True
        result["losses"] = losses
        return result

    activate_guerrillas(state, space, count_hidden(state, space))
    guerrillas = count_guerrillas(state, space)
    log(state, f"{guerrillas} guerrilla(s) present")
    die = state["rng"].randint(DIE_MIN, DIE_MAX)
    result["roll"] = die
    if die > guerrillas:
        log(state, f"Die roll result is: {die} (fails)")
        return result

    log(state, f"Die roll result is: {die} (succeeds)")
    losses = attack_losses(get_pieces(state, space), ambush=False)
    log(state, f"Losses: {describe_pieces(losses)}")
    remove_attack_losses(state, space, losses)
    result["success"] = True
    result["losses"] = losses

    if die == DIE_MIN:
        log(state, "Capture goods (die roll == 1)")
        if guerrillas_available(state) == 0:
            log(state, "No guerrillas in the available box")
        else:
            place_pieces(state, space, {HIDDEN_GUERRILLAS: 1})
    return result
