"""
Tracks module — Resources, Commitment, France track and Border Zone track.

Resources and Commitment run 0..50 on the edge track. The France track
runs A..F (stored as 0..5); the Border Zone track runs 0..4. Every change
is clamped to its track and logged.

Reference: §1.8, §6.3.3
"""

from ct_bot.rules_consts import (
    FACTIONS,
    EDGE_TRACK_MAX, FRANCE_TRACK_MAX, BORDER_ZONE_TRACK_MAX, FRANCE_TRACK,
)
from ct_bot.state.history import log


def _check_faction(faction):
    if faction not in FACTIONS:
        raise ValueError(f"Unknown faction: {faction}")


# ============================================================================
# RESOURCES
# ============================================================================

def increase_resources(state, faction, amount):
    """Add resources, capped at the edge of the track."""
    _check_faction(faction)
    if amount <= 0:
        return
    new_value = min(EDGE_TRACK_MAX, state["resources"][faction] + amount)
    state["resources"][faction] = new_value
    log(state, f"Increase {faction} resources by +{amount} to {new_value}")


def decrease_resources(state, faction, amount):
    """Spend or lose resources, never below zero."""
    _check_faction(faction)
    if amount <= 0:
        return
    new_value = max(0, state["resources"][faction] - amount)
    state["resources"][faction] = new_value
    log(state, f"Decrease {faction} resources by -{amount} to {new_value}")


# ============================================================================
# COMMITMENT
# ============================================================================

def increase_commitment(state, amount):
    if amount <= 0:
        return
    state["commitment"] = min(EDGE_TRACK_MAX, state["commitment"] + amount)
    log(state, f"Increase commitment by +{amount} to {state['commitment']}")


def decrease_commitment(state, amount):
    if amount <= 0:
        return
    state["commitment"] = max(0, state["commitment"] - amount)
    log(state, f"Decrease commitment by -{amount} to {state['commitment']}")


# ============================================================================
# FRANCE TRACK
# ============================================================================

def france_track_letter(state):
    return FRANCE_TRACK[state["france_track"]][0]


def france_track_resources(state):
    """FLN resources printed at the current France track position."""
    return FRANCE_TRACK[state["france_track"]][2]


def increase_france_track(state, num=1):
    if num <= 0:
        return
    state["france_track"] = min(FRANCE_TRACK_MAX, state["france_track"] + num)
    log(state, f"Shift the France track right {num} to "
               f"'{france_track_letter(state)}'")


def decrease_france_track(state, num=1):
    if num <= 0:
        return
    state["france_track"] = max(0, state["france_track"] - num)
    log(state, f"Shift the France track left {num} to "
               f"'{france_track_letter(state)}'")


# ============================================================================
# BORDER ZONE TRACK
# ============================================================================

def increase_border_zone_track(state, num=1):
    if num <= 0:
        return
    state["border_zone_track"] = min(
        BORDER_ZONE_TRACK_MAX, state["border_zone_track"] + num
    )
    log(state, f"Increase the Border Zone track {num} to "
               f"{state['border_zone_track']}")


def decrease_border_zone_track(state, num=1):
    if num <= 0:
        return
    state["border_zone_track"] = max(0, state["border_zone_track"] - num)
    log(state, f"Decrease the Border Zone track {num} to "
               f"{state['border_zone_track']}")
