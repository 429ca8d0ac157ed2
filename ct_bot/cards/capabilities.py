"""
capabilities.py — Manage capabilities and momentum in game state.

Per §5.3: Capabilities persist for the rest of the game unless removed
by a later Event (card 30 removes a Government capability). Per §5.4:
Momentum lasts until the next Propaganda round.

State storage: state["capabilities"] and state["momentum"] are dicts:
    {card_id: EVENT_SHADED or EVENT_UNSHADED}

Source: §5.3, §5.4, Card Reference
"""

from ct_bot.rules_consts import (
    EVENT_SHADED, EVENT_UNSHADED,
    CAPABILITY_NAMES, MOMENTUM_NAMES,
)
from ct_bot.state.history import log


def _check_side(side):
    if side not in (EVENT_SHADED, EVENT_UNSHADED):
        raise ValueError(
            f"side must be EVENT_SHADED or EVENT_UNSHADED, got {side!r}"
        )


# ============================================================================
# CAPABILITIES
# ============================================================================

def activate_capability(state, card_id, side):
    """Put a capability into play.

    If the capability is already in play on the other side, the new side
    replaces it.

    Args:
        state: Game state dict.
        card_id: Card number.
        side: EVENT_SHADED or EVENT_UNSHADED.

    Raises:
        ValueError: If side is not a valid event side, or the card has no
            capability on that side.
    """
    _check_side(side)
    if (card_id, side) not in CAPABILITY_NAMES:
        raise ValueError(f"Card {card_id} has no {side} capability")
    state["capabilities"][card_id] = side
    log(state, f"Capability {CAPABILITY_NAMES[(card_id, side)]} is now "
               f"in play")


def deactivate_capability(state, card_id):
    """Remove a capability from play.

    Returns:
        The side that was active, or None if the capability was not active.
    """
    side = state["capabilities"].pop(card_id, None)
    if side is not None:
        log(state, f"Remove capability {CAPABILITY_NAMES[(card_id, side)]} "
                   f"from play")
    return side


def is_capability_active(state, card_id, side=None):
    """Check if a capability is in play.

    Args:
        state: Game state dict.
        card_id: Card number.
        side: If None, True when active on either side. Otherwise True
            only when active on that side.
    """
    if card_id not in state["capabilities"]:
        return False
    if side is None:
        return True
    return state["capabilities"][card_id] == side


# ============================================================================
# MOMENTUM
# ============================================================================

def play_momentum(state, card_id, side):
    """Put a momentum event into play until the next Propaganda round.

    Raises:
        ValueError: If the card has no momentum event on that side.
    """
    _check_side(side)
    if (card_id, side) not in MOMENTUM_NAMES:
        raise ValueError(f"Card {card_id} has no {side} momentum event")
    state["momentum"][card_id] = side
    log(state, f"Momentum {MOMENTUM_NAMES[(card_id, side)]} is now in play")


def is_momentum_active(state, card_id, side=None):
    if card_id not in state["momentum"]:
        return False
    if side is None:
        return True
    return state["momentum"][card_id] == side
