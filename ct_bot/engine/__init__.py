"""Engine package — Sequence of play and scoring.

Modules:
  victory — Government and FLN scores (§7.2)
  game_engine — Sequence of play: available actions, recording, Pass (§2.3)
"""

from ct_bot.engine.victory import gov_score, fln_score, calculate_scores

from ct_bot.engine.game_engine import (
    available_actions,
    can_do,
    can_do_multiple_spaces,
    bot_will_act_twice,
    record_action,
    reset_sequence,
    perform_pass,
)

__all__ = [
    "gov_score",
    "fln_score",
    "calculate_scores",
    "available_actions",
    "can_do",
    "can_do_multiple_spaces",
    "bot_will_act_twice",
    "record_action",
    "reset_sequence",
    "perform_pass",
]
