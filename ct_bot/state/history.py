"""
History module — In-state game log.

Every mutator appends a line to state["history"] through log(). Each entry
is {"seq": n, "msg": text}. When state["echo"] is true the line is also
emitted through the logging module; speculative trials run with echo off
so nothing they do reaches the log output until they are committed.
"""

import logging

logger = logging.getLogger(__name__)


def _ensure_history(state):
    """Ensure state has a history list."""
    if "history" not in state:
        state["history"] = []
    return state["history"]


def log(state, msg=""):
    """Append a line to the game log.

    Args:
        state: Game state dict.
        msg: Log text. An empty string is a blank separator line.
    """
    history = _ensure_history(state)
    seq = history[-1]["seq"] + 1 if history else 1
    history.append({"seq": seq, "msg": msg})
    if state.get("echo", False):
        logger.info(msg)


def echo_entries(entries):
    """Emit already-recorded history entries through the logger."""
    for entry in entries:
        logger.info(entry["msg"])


def entries_since(state, count):
    """History entries recorded after the first `count` entries."""
    return _ensure_history(state)[count:]


def history_messages(state):
    """All history messages in order (handy in tests)."""
    return [entry["msg"] for entry in state.get("history", [])]
