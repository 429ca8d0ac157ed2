"""
FLN Bot flowchart — decides and carries out the FLN's action for a turn.

Node walk:
  F1  Resources 0 and limited to one space with no event to play? -> Pass
  F2  Every Algerian FLN base covered by underground guerrillas?  -> F4
  F3  Government already acted and the FLN will act twice?        -> F4
      otherwise Rally
  F4  Event or Terror, judged by speculative trials
  then Attack, Rally, March and finally Pass.

Decision nodes answer "Yes" or "No"; process nodes return an action or
None to fall through to the next node. act() wraps the walk in a fresh
turn state and records the chosen action in the sequence of play.
"""

import logging

from ct_bot.rules_consts import (
    FLN, FLN_BASES, GOV,
    ACTION_PASS, ACTION_EVENT,
    EVENT_NONE, EVENT_SHADED, EVENT_ROLL_LIMIT,
)
from ct_bot.board.pieces import count_hidden, count_fln_bases, count_on_map
from ct_bot.board.control import get_population, total_terror
from ct_bot.cards.card_data import get_card
from ct_bot.cards.card_effects import bot_event_selection, execute_event
from ct_bot.engine.game_engine import (
    can_do, can_do_multiple_spaces, bot_will_act_twice, perform_pass,
    record_action,
)
from ct_bot.engine.victory import gov_score
from ct_bot.map.map_data import get_algerian_spaces
from ct_bot.state.history import log
from ct_bot.bots.bot_common import roll_die
from ct_bot.bots.harness import try_operation, commit_trial
from ct_bot.bots.turn_state import begin_turn, end_turn, was_considered
from ct_bot.bots.fln_terror import terror_candidates, do_terror
from ct_bot.bots.fln_attack import consider_attack
from ct_bot.bots.fln_rally import consider_rally
from ct_bot.bots.fln_march import consider_march

logger = logging.getLogger(__name__)


# ============================================================================
# EVENT HELPERS
# ============================================================================

def event_selection(state):
    """The event side the Bot would play now, or EVENT_NONE.

    EVENT_NONE when the Event is not open in the sequence of play or no
    card is showing.
    """
    card_id = state["current_card"]
    if card_id is None or not can_do(state, ACTION_EVENT):
        return EVENT_NONE
    return bot_event_selection(state, card_id)


def _play_event(state, card_id, selection):
    log(state)
    log(state, f"FLN chooses: {selection} event")
    execute_event(state, card_id, shaded=selection == EVENT_SHADED)
    return ACTION_EVENT


def event_is_effective(before, after):
    """Did the event improve the FLN's position?"""
    return (gov_score(after) < gov_score(before)
            or after["resources"][GOV] < before["resources"][GOV]
            or after["france_track"] > before["france_track"]
            or (count_on_map(after, FLN_BASES)
                > count_on_map(before, FLN_BASES))
            or after["resources"][FLN] > before["resources"][FLN])


def worth_playing(state, card_id, event_state):
    """Is the tried event worth playing?

    FLN-marked cards and capabilities are always played; any other event
    must be effective and pass a die roll. The die is rolled in the trial
    so the roll is only consumed if the event is committed.
    """
    card = get_card(card_id)
    if card.fln_marked or card.is_capability:
        return True
    die = roll_die(event_state)
    logger.debug("Event die roll: %d", die)
    return die < EVENT_ROLL_LIMIT and event_is_effective(state, event_state)


# ============================================================================
# DECISION NODES
# ============================================================================

def node_f1(state):
    """F1: Resources 0, limited to one space and no event to play?

    Returns:
        "Yes" (Pass) or "No" (proceed to F2).
    """
    if (state["resources"][FLN] == 0
            and not can_do_multiple_spaces(state)
            and event_selection(state) == EVENT_NONE):
        return "Yes"
    return "No"


def node_f2(state):
    """F2: Each Algerian FLN base protected by underground guerrillas?

    A populated base space needs 2 underground guerrillas, an empty one 1.

    Returns:
        "Yes" (go to F4) or "No" (go to F3).
    """
    for space in get_algerian_spaces():
        if count_fln_bases(state, space) == 0:
            continue
        needed = 2 if get_population(state, space) > 0 else 1
        if count_hidden(state, space) < needed:
            return "No"
    return "Yes"


def node_f3(state):
    """F3: Government already acted and FLN second eligible?

    Returns:
        "Yes" (go to F4) or "No" (Rally).
    """
    return "Yes" if bot_will_act_twice(state) else "No"


# ============================================================================
# PROCESS NODES
# ============================================================================

def node_f_pass(state):
    log(state)
    log(state, "FLN chooses: Pass")
    perform_pass(state, FLN)
    return ACTION_PASS


def node_f4(state):
    """F4: Consider the event and a Terror operation.

    Both are tried on copies of the state, independently. The event wins
    when it leaves the Government score strictly lower than Terror would
    (or Terror is impossible) and it is worth playing. Terror is kept when
    it lowers the Government score or adds terror to the map.

    Returns:
        The action taken, or None to fall through to Attack.
    """
    card_id = state["current_card"]
    selection = event_selection(state)
    event = None
    if selection != EVENT_NONE:
        event, _ = try_operation(state, _play_event, card_id, selection)

    terror = None
    if terror_candidates(state):
        terror = try_operation(state, do_terror)

    if event is not None and terror is not None:
        if (gov_score(event) < gov_score(terror[0])
                and worth_playing(state, card_id, event)):
            commit_trial(state, event)
            return ACTION_EVENT
    elif event is not None:
        if worth_playing(state, card_id, event):
            commit_trial(state, event)
            return ACTION_EVENT

    if terror is not None:
        trial, action = terror
        if (gov_score(trial) < gov_score(state)
                or total_terror(trial) > total_terror(state)):
            commit_trial(state, trial)
            return action

    logger.debug("F4: neither event nor Terror taken")
    return None


def node_f_rally(state):
    if was_considered(state, "rally"):
        return None
    return consider_rally(state)


def node_f_march(state):
    if was_considered(state, "march"):
        return None
    return consider_march(state)


def _rally_march_pass(state):
    for node in (node_f_rally, node_f_march, node_f_rally):
        logger.debug("FLN flowchart: %s", node.__name__)
        action = node(state)
        if action is not None:
            return action
    return node_f_pass(state)


# ============================================================================
# TURN
# ============================================================================

def execute_fln_turn(state):
    """Walk the FLN flowchart and carry out the chosen action.

    Expects a turn state to be in place (see act()).

    Returns:
        The action taken.
    """
    logger.debug("FLN flowchart: F1")
    if node_f1(state) == "Yes":
        return node_f_pass(state)

    logger.debug("FLN flowchart: F2")
    if node_f2(state) == "No":
        logger.debug("FLN flowchart: F3")
        if node_f3(state) == "No":
            return _rally_march_pass(state)

    logger.debug("FLN flowchart: F4")
    action = node_f4(state)
    if action is not None:
        return action

    logger.debug("FLN flowchart: Attack")
    action = consider_attack(state)
    if action is not None:
        return action

    return _rally_march_pass(state)


def act(state):
    """Take the FLN Bot's turn.

    Args:
        state: Game state dict. Modified in place.

    Returns:
        The action taken (one of the ACTION_* constants).
    """
    begin_turn(state)
    try:
        action = execute_fln_turn(state)
        log(state)
        log(state, f"Place the FLN eligibility cylinder in the {action} box")
        record_action(state, action)
    finally:
        end_turn(state)
    return action
