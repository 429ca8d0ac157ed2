"""Game Engine — Sequence of play per §2.3.

Tracks which factions are first and second eligible on the current card,
the actions each has taken, and which actions remain open to the faction
about to act. Does NOT implement bot decision logic or card event
effects; the FLN Bot asks this module what it may do and records the
action it chose.

Reference:
  §2.3.3  Passing
  §2.3.4  Options for Eligible Factions
  §2.3.6  Adjust Eligibility
"""

import logging

from ct_bot.rules_consts import (
    # Factions
    FLN, FACTIONS,
    # Actions
    ACTION_OP_PLUS_SA, ACTION_OP_ONLY,
    ALL_ACTIONS, SECOND_ACTIONS, RETAIN_INITIATIVE,
    # Pass income
    PASS_INCOME,
)
from ct_bot.board.tracks import increase_resources
from ct_bot.state.state_schema import new_sequence

logger = logging.getLogger(__name__)


def _num_acted(sequence):
    return ((sequence["first_action"] is not None)
            + (sequence["second_action"] is not None))


# ============================================================================
# AVAILABLE ACTIONS — §2.3.4
# ============================================================================

def available_actions(state):
    """Return the actions open to the next faction to act on this card.

    Raises:
        ValueError: If both eligible factions have already acted.
    """
    sequence = state["sequence"]
    if sequence["second_action"] is not None:
        raise ValueError("Both eligible factions have already acted")
    return SECOND_ACTIONS[sequence["first_action"]]


def can_do(state, action):
    return action in available_actions(state)


def can_do_multiple_spaces(state):
    """True unless the next faction is limited to a single space."""
    return (can_do(state, ACTION_OP_PLUS_SA)
            or can_do(state, ACTION_OP_ONLY))


def bot_will_act_twice(state):
    """Is the FLN second eligible after the Government took an Op?

    If so, the FLN will also be first eligible on the next card.
    """
    sequence = state["sequence"]
    return (sequence["second_eligible"] == FLN
            and sequence["first_action"] in (ACTION_OP_PLUS_SA,
                                             ACTION_OP_ONLY))


# ============================================================================
# RECORDING ACTIONS — §2.3.6
# ============================================================================

def record_action(state, action):
    """Record the action taken by the faction that just acted.

    Raises:
        ValueError: If the action is unknown or two actions were already
            recorded on this card.
    """
    if action not in ALL_ACTIONS:
        raise ValueError(f"Unknown action: {action!r}")
    sequence = state["sequence"]
    acted = _num_acted(sequence)
    if acted == 0:
        sequence["first_action"] = action
    elif acted == 1:
        sequence["second_action"] = action
    else:
        raise ValueError("Two actions have already occurred on this card")
    logger.debug("Recorded action %r (%d acted)", action, acted + 1)


def reset_sequence(state):
    """Start the sequence of play for the next card.

    The first eligible faction keeps the initiative after a Pass, an
    Event or a Limited Op; otherwise the two factions swap.

    Raises:
        ValueError: If fewer than two actions occurred on this card.
    """
    sequence = state["sequence"]
    if _num_acted(sequence) != 2:
        raise ValueError(
            "Cannot reset the sequence of play until two actions occurred"
        )
    if sequence["first_action"] in RETAIN_INITIATIVE:
        state["sequence"] = new_sequence(sequence["first_eligible"],
                                         sequence["second_eligible"])
    else:
        state["sequence"] = new_sequence(sequence["second_eligible"],
                                         sequence["first_eligible"])


# ============================================================================
# PASS — §2.3.3
# ============================================================================

def perform_pass(state, faction):
    """Pass: the Government gains 2 resources, the FLN 1.

    Raises:
        ValueError: If faction is unknown.
    """
    if faction not in FACTIONS:
        raise ValueError(f"Unknown faction: {faction}")
    increase_resources(state, faction, PASS_INCOME[faction])
