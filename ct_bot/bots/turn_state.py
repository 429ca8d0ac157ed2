"""
Turn state — scratch record for the Bot action in progress.

A fresh turn state is created at the start of every Bot turn and stored
under state["turn_state"], so the speculative harness snapshots it along
with the rest of the game state. It is cleared when the turn ends.

Keys:
    rally_considered: Rally was already tried this turn.
    march_considered: March was already tried this turn.
    special_activity_allowed: A special activity may be used at all.
    special_activity_taken: A special activity was used this turn.
    free_operation: The operation costs no resources (event grant).
    max_spaces: Cap on spaces the operation may select, or None.
    only_in: Set of spaces the operation is restricted to; empty means
        no restriction.
    moving_groups: {destination: pieces dict} of guerrillas that already
        marched this turn; they may not march again.
"""

from ct_bot.rules_consts import (
    ACTION_OP_PLUS_SA, ACTION_LIMITED_OP, ACTION_OP_ONLY,
)
from ct_bot.board.pieces import add_pieces
from ct_bot.engine.game_engine import can_do


class TurnStateError(Exception):
    """Raised when the turn state is missing or its invariant breaks."""
    pass


def new_turn_state(special_activity_allowed=True, free_operation=False,
                   max_spaces=None, only_in=None):
    """Create a turn state with nothing considered or taken yet."""
    return {
        "rally_considered": False,
        "march_considered": False,
        "special_activity_allowed": special_activity_allowed,
        "special_activity_taken": False,
        "free_operation": free_operation,
        "max_spaces": max_spaces,
        "only_in": set(only_in or ()),
        "moving_groups": {},
    }


def begin_turn(state, **kwargs):
    """Install a fresh turn state in the game state and return it."""
    state["turn_state"] = new_turn_state(**kwargs)
    return state["turn_state"]


def end_turn(state):
    state["turn_state"] = None


def get_turn_state(state):
    """Return the active turn state.

    Raises:
        TurnStateError: If no Bot turn is in progress.
    """
    turn_state = state.get("turn_state")
    if turn_state is None:
        raise TurnStateError("No Bot turn in progress")
    return turn_state


# ============================================================================
# SPECIAL ACTIVITY
# ============================================================================

def can_do_special_activity(state):
    """A special activity slot is open: legal, allowed and not yet used."""
    turn_state = get_turn_state(state)
    return (can_do(state, ACTION_OP_PLUS_SA)
            and turn_state["special_activity_allowed"]
            and not turn_state["special_activity_taken"])


def mark_special_activity_taken(state):
    """Record that a special activity was used this turn.

    Raises:
        TurnStateError: If special activities are not allowed this turn.
    """
    turn_state = get_turn_state(state)
    if not turn_state["special_activity_allowed"]:
        raise TurnStateError("Special activities are not allowed this turn")
    turn_state["special_activity_taken"] = True


def special_activity_taken(state):
    return get_turn_state(state)["special_activity_taken"]


# ============================================================================
# OPERATION LIMITS
# ============================================================================

def is_free_operation(state):
    return get_turn_state(state)["free_operation"]


def max_spaces(state):
    return get_turn_state(state)["max_spaces"]


def within_space_limit(state, num_done):
    """True while num_done spaces is still below any max_spaces cap."""
    cap = get_turn_state(state)["max_spaces"]
    return cap is None or num_done < cap


def allowed_spaces(state, spaces):
    """Filter spaces by the only_in restriction, keeping order."""
    only_in = get_turn_state(state)["only_in"]
    if not only_in:
        return list(spaces)
    return [space for space in spaces if space in only_in]


def mark_considered(state, operation):
    """Mark "rally" or "march" as considered this turn.

    Raises:
        ValueError: For any other operation name.
    """
    if operation not in ("rally", "march"):
        raise ValueError(f"Unknown operation: {operation!r}")
    get_turn_state(state)[f"{operation}_considered"] = True


def was_considered(state, operation):
    if operation not in ("rally", "march"):
        raise ValueError(f"Unknown operation: {operation!r}")
    return get_turn_state(state)[f"{operation}_considered"]


# ============================================================================
# MOVING GROUPS
# ============================================================================

def add_moving_group(state, dest, pieces):
    """Record guerrillas that have marched into dest this turn."""
    groups = get_turn_state(state)["moving_groups"]
    groups[dest] = add_pieces(groups.get(dest), pieces)


def moving_group(state, space):
    """Pieces dict of guerrillas that marched into space this turn."""
    return add_pieces(get_turn_state(state)["moving_groups"].get(space),
                      None)


# ============================================================================
# EFFECTIVE ACTION
# ============================================================================

def effective_action(state, num_spaces):
    """The action to report after an operation touched num_spaces.

    Op + Special Activity if a special activity was used, else Limited Op
    for a single space when that is legal, else Op Only.
    """
    if special_activity_taken(state):
        return ACTION_OP_PLUS_SA
    if num_spaces == 1 and can_do(state, ACTION_LIMITED_OP):
        return ACTION_LIMITED_OP
    return ACTION_OP_ONLY
