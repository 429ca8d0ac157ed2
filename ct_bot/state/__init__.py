"""State module — Game state schema, initialization and history log."""

from ct_bot.state.state_schema import build_initial_state, validate_state
from ct_bot.state.history import log

__all__ = ["build_initial_state", "validate_state", "log"]
