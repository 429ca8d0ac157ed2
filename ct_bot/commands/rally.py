"""Rally operation — §3.3.1, with Agitation.

Rally in a space does one of:
- place an FLN base by replacing 2 guerrillas there (active first);
- place underground guerrillas from Available (the FLN may first return
  active guerrillas from other spaces to Available to make room);
- flip all active guerrillas in a space with an FLN base underground;
- nothing more than pay, to make the space eligible for Agitation.
Rally may instead shift the France track one box toward F.

Agitation, after Rally, removes all terror markers from a space and
shifts it one level toward Oppose, for 1 Resource per marker and per
level.

Not allowed in a City at Support.

Cost: 1 Resource per space or track shift (0 for free operations).

Reference: §3.3.1, §6.3.3
"""

from ct_bot.rules_consts import (
    # Pieces
    HIDDEN_GUERRILLAS, ACTIVE_GUERRILLAS, FLN_BASES,
    # Support
    SUPPORT, NEUTRAL, OPPOSE,
    # Tracks
    FRANCE_TRACK_MAX,
)
from ct_bot.board.pieces import (
    count_active, count_guerrillas, get_available, guerrillas_available,
    place_pieces, remove_to_available, hide_guerrillas,
)
from ct_bot.board.control import (
    can_take_base, is_support, get_support, get_terror, remove_terror,
    decrease_support,
)
from ct_bot.board.tracks import increase_france_track
from ct_bot.map.map_data import is_city
from ct_bot.state.history import log
from ct_bot.commands.common import CommandError, pay_fln


_AGITATE_SHIFTS = {OPPOSE: 0, NEUTRAL: 1, SUPPORT: 2}


def agitate_cost(state, space, max_shifts=1):
    """Resources needed to remove all terror and shift up to max_shifts."""
    shifts = _AGITATE_SHIFTS[get_support(state, space)]
    return get_terror(state, space) + min(shifts, max_shifts)


def validate_rally_space(state, space):
    """Check if the FLN can Rally in a space.

    Returns:
        Tuple of (valid: bool, reason: str or None).
    """
    if is_city(space) and is_support(state, space):
        return False, f"{space} is a City at Support"
    return True, None


def _check_base(state, space):
    if get_available(state, FLN_BASES) == 0:
        raise CommandError("No FLN bases available")
    if not can_take_base(state, space):
        raise CommandError(f"{space} cannot take another base")
    if count_guerrillas(state, space) < 2:
        raise CommandError(f"{space} needs 2 guerrillas to place a base")


def rally_in_space(state, space, *, base=False, guerrillas=0, from_map=(),
                   flip_active=False, free=False, purpose=None):
    """Execute Rally in a single space.

    Args:
        state: Game state dict. Modified in place.
        space: Target space.
        base: Replace 2 guerrillas (active first) with an FLN base.
        guerrillas: Number of underground guerrillas to place (capped at
            what is Available after from_map is returned).
        from_map: Iterable of (num, source) pairs; num active guerrillas
            are returned to Available from each source first.
        flip_active: Flip all active guerrillas in the space underground.
        free: If True the operation costs nothing.
        purpose: Optional note for the log line.

    Returns:
        Dict with "space", "cost", "base", "placed" and "flipped".

    Raises:
        CommandError: If Rally is not legal here or the FLN cannot pay.
    """
    valid, reason = validate_rally_space(state, space)
    if not valid:
        raise CommandError(f"Cannot Rally in {space}: {reason}")
    if base:
        _check_base(state, space)
    for num, source in from_map:
        if count_active(state, source) < num:
            raise CommandError(
                f"{source} has fewer than {num} active guerrillas"
            )

    cost = 0 if free else 1
    log(state)
    if purpose:
        log(state, f"FLN executes Rally operation {purpose}: {space}")
    else:
        log(state, f"FLN executes Rally operation: {space}")
    pay_fln(state, cost, f"Rally in {space}")

    result = {"space": space, "cost": cost, "base": False, "placed": 0,
              "flipped": 0}

    if base:
        num_active = min(2, count_active(state, space))
        remove_to_available(state, space, {
            ACTIVE_GUERRILLAS: num_active,
            HIDDEN_GUERRILLAS: 2 - num_active,
        })
        place_pieces(state, space, {FLN_BASES: 1})
        result["base"] = True

    for num, source in from_map:
        remove_to_available(state, source, {ACTIVE_GUERRILLAS: num})

    num = min(guerrillas, guerrillas_available(state))
    if num > 0:
        place_pieces(state, space, {HIDDEN_GUERRILLAS: num})
        result["placed"] = num

    if flip_active and count_active(state, space) > 0:
        result["flipped"] = count_active(state, space)
        hide_guerrillas(state, space, result["flipped"])

    return result


def rally_france_track(state, *, free=False):
    """Rally to shift the France track one box toward F.

    Raises:
        CommandError: If the track is already at F or the FLN cannot pay.
    """
    if state["france_track"] >= FRANCE_TRACK_MAX:
        raise CommandError("The France track is already at F")
    log(state)
    log(state, "FLN executes Rally operation: France Track")
    pay_fln(state, 0 if free else 1, "Rally on the France track")
    increase_france_track(state, 1)


def agitate_in_space(state, space):
    """Agitate: remove all terror and shift one level toward Oppose.

    Returns:
        The resources spent.

    Raises:
        CommandError: If there is nothing to agitate or the FLN cannot pay.
    """
    cost = agitate_cost(state, space)
    if cost == 0:
        raise CommandError(f"Nothing to agitate in {space}")
    log(state)
    log(state, f"FLN agitates in {space}")
    pay_fln(state, cost, f"Agitation in {space}")
    remove_terror(state, space, get_terror(state, space))
    if get_support(state, space) != OPPOSE:
        decrease_support(state, space, 1)
    return cost
