"""
State schema module — Master game state dictionary.

Builds an empty initial state with full Available pools and an empty map.
All constants from rules_consts.py.

Reference: §1.4.1, §1.8, §2.3
"""

import random

from ct_bot.rules_consts import (
    # Factions
    GOV, FLN,
    # Pieces
    PIECE_TYPES, PIECE_MANIFEST, GUERRILLAS, HIDDEN_GUERRILLAS,
    # Support
    NEUTRAL,
    # Tracks
    FRANCE_TRACK_MAX, BORDER_ZONE_TRACK_MAX, EDGE_TRACK_MAX,
    TERROR_MARKER_MANIFEST,
    # Spaces
    ALL_SPACES,
    # Options
    DEFAULT_OPTIONS,
)


def new_pieces(counts=None):
    """Create a pieces dict with every piece type, zero unless given.

    Args:
        counts: Optional {piece_type: count} overrides.

    Returns:
        Dict keyed by every piece type.
    """
    pieces = {piece_type: 0 for piece_type in PIECE_TYPES}
    if counts:
        for piece_type, count in counts.items():
            if piece_type not in pieces:
                raise ValueError(f"Unknown piece type: {piece_type}")
            pieces[piece_type] = count
    return pieces


def new_sequence(first_eligible=FLN, second_eligible=GOV):
    """Create a sequence of play record with no actions taken."""
    return {
        "first_eligible": first_eligible,
        "second_eligible": second_eligible,
        "first_action": None,
        "second_action": None,
    }


def build_initial_state(seed=None, options=None):
    """Create an empty game state.

    All pieces start Available, all resources and tracks at 0, every space
    Neutral and empty. Tests and callers then place pieces and set values.

    Args:
        seed: Optional RNG seed for deterministic replay.
        options: Optional overrides for DEFAULT_OPTIONS.

    Returns:
        Game state dictionary.

    Raises:
        ValueError: If an option name is not recognised.
    """
    merged_options = dict(DEFAULT_OPTIONS)
    for key, value in (options or {}).items():
        if key not in DEFAULT_OPTIONS:
            raise ValueError(f"Unknown option: {key}")
        merged_options[key] = value

    spaces = {}
    for name in ALL_SPACES:
        spaces[name] = {
            "pieces": new_pieces(),
            "support": NEUTRAL,
            "terror": 0,
            "markers": set(),
        }

    state = {
        "spaces": spaces,
        "available": new_pieces(PIECE_MANIFEST),
        "casualties": new_pieces(),
        "out_of_play": new_pieces(),
        "resources": {GOV: 0, FLN: 0},
        "commitment": 0,
        "france_track": 0,          # 0 = A .. 5 = F
        "border_zone_track": 0,
        "capabilities": {},         # {card_id: EVENT_SHADED/UNSHADED}
        "momentum": {},             # {card_id: EVENT_SHADED/UNSHADED}
        "pivotal_played": set(),
        "current_card": None,
        "final_campaign": False,
        "sequence": new_sequence(),
        "turn_state": None,
        "options": merged_options,
        "history": [],
        "echo": False,
        "rng": random.Random(seed),
    }

    return state


def validate_state(state):
    """Validate state integrity.

    Checks that for each piece type map + available + casualties +
    out of play equals the manifest, that no count is negative, and that
    tracks are within their limits.

    Args:
        state: Game state dict.

    Returns:
        List of error strings. Empty list means valid.
    """
    errors = []

    for name, space in state["spaces"].items():
        for piece_type, count in space["pieces"].items():
            if count < 0:
                errors.append(f"{name}: negative {piece_type} ({count})")
        if space["terror"] < 0:
            errors.append(f"{name}: negative terror ({space['terror']})")

    for piece_type in PIECE_TYPES:
        if piece_type in GUERRILLAS:
            continue
        on_map = sum(
            space["pieces"][piece_type] for space in state["spaces"].values()
        )
        total = (on_map + state["available"][piece_type]
                 + state["casualties"][piece_type]
                 + state["out_of_play"][piece_type])
        if total != PIECE_MANIFEST[piece_type]:
            errors.append(
                f"{piece_type}: total {total}, manifest "
                f"{PIECE_MANIFEST[piece_type]}"
            )

    # Guerrillas are counted together: available ones are all underground.
    guerrillas = state["available"][HIDDEN_GUERRILLAS]
    for pool in [space["pieces"] for space in state["spaces"].values()] + [
            state["casualties"], state["out_of_play"]]:
        guerrillas += sum(pool[g] for g in GUERRILLAS)
    if guerrillas != PIECE_MANIFEST[HIDDEN_GUERRILLAS]:
        errors.append(
            f"Guerrillas: total {guerrillas}, manifest "
            f"{PIECE_MANIFEST[HIDDEN_GUERRILLAS]}"
        )

    terror = sum(space["terror"] for space in state["spaces"].values())
    if terror > TERROR_MARKER_MANIFEST:
        errors.append(f"Terror markers: {terror} on map")

    for faction in (GOV, FLN):
        if not 0 <= state["resources"][faction] <= EDGE_TRACK_MAX:
            errors.append(f"{faction} resources out of range")
    if not 0 <= state["france_track"] <= FRANCE_TRACK_MAX:
        errors.append("France track out of range")
    if not 0 <= state["border_zone_track"] <= BORDER_ZONE_TRACK_MAX:
        errors.append("Border zone track out of range")

    return errors
