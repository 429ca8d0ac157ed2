"""
Speculative evaluation harness — try an operation, then keep or discard.

try_operation() deep-copies the whole game state (turn state, RNG and
history included), turns log echo off in the copy and runs the operation
there. The live state is never touched, so discarding a trial is simply
dropping it. commit_trial() replaces the live state's contents with the
trial's and echoes the log lines the trial produced.
"""

import copy
import logging

from ct_bot.state.history import echo_entries, entries_since

logger = logging.getLogger(__name__)


def try_operation(state, fn, *args, **kwargs):
    """Run fn on a copy of the state with echo suppressed.

    Args:
        state: Live game state dict. Not modified.
        fn: Callable taking the trial state as its first argument.
        *args, **kwargs: Passed on to fn.

    Returns:
        Tuple (trial_state, result).
    """
    trial = copy.deepcopy(state)
    trial["echo"] = False
    result = fn(trial, *args, **kwargs)
    logger.debug("Trial %s -> %r (%d new log lines)",
                 getattr(fn, "__name__", fn), result,
                 len(trial["history"]) - len(state["history"]))
    return trial, result


def commit_trial(state, trial):
    """Make a trial the live state.

    The live echo setting is kept; if it is on, the log lines the trial
    added are emitted now.
    """
    echo = state.get("echo", False)
    seen = len(state["history"])
    state.clear()
    state.update(trial)
    state["echo"] = echo
    if echo:
        echo_entries(entries_since(state, seen))
