"""Common definitions shared across command modules.

Provides the base CommandError exception and the payment helper used by
the terror, attack, rally and march modules.
"""

from ct_bot.rules_consts import FLN
from ct_bot.board.tracks import decrease_resources


class CommandError(Exception):
    """Raised when a command violates game rules."""
    pass


def pay_fln(state, cost, what):
    """Spend FLN resources for an operation.

    Args:
        state: Game state dict.
        cost: Resources to spend (0 is allowed).
        what: Description used in the error message.

    Raises:
        CommandError: If the FLN cannot afford the cost.
    """
    if cost <= 0:
        return
    if state["resources"][FLN] < cost:
        raise CommandError(
            f"FLN has {state['resources'][FLN]} resources, {what} costs "
            f"{cost}"
        )
    decrease_resources(state, FLN, cost)
