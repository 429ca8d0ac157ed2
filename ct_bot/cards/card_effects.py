"""
card_effects.py — Event effects and the FLN Bot's event selection.

Each card handler receives (state, shaded) and mutates state in place.
The dispatcher execute_event() routes to the handler by card number.
Handlers implement the side the FLN Bot plays; simple Government sides
(resources, commitment, capabilities, momentum) are implemented too, and
the remaining Government sides raise ValueError.

bot_event_selection() returns the side the FLN Bot would play for a card,
or EVENT_NONE when it never plays it (or it would have no effect now).

Source: Card Reference, FLN Bot event instructions
"""

from ct_bot.rules_consts import (
    # Factions
    GOV, FLN,
    # Pieces
    FRENCH_TROOPS, FRENCH_POLICE, ALGERIAN_TROOPS, ALGERIAN_POLICE,
    HIDDEN_GUERRILLAS, ACTIVE_GUERRILLAS, FLN_BASES,
    # Support
    OPPOSE, NEUTRAL,
    # Markers
    MARKER_PLUS1_BASE,
    # Spaces
    ALGIERS, MOROCCO, TUNISIA,
    # Tracks
    FRANCE_TRACK_MAX, EDGE_TRACK_MAX,
    # Events
    EVENT_SHADED, EVENT_UNSHADED, EVENT_NONE,
    GOV_CAPABILITIES,
)
from ct_bot.board.pieces import (
    count_pieces, count_hidden, count_active, count_guerrillas, count_cubes,
    count_algerian_cubes, count_fln, count_fln_bases, count_troops,
    get_available, guerrillas_available, terror_markers_available,
    place_pieces,
    place_from_out_of_play, remove_to_available, move_pieces,
    activate_guerrillas,
)
from ct_bot.board.control import (
    get_population, is_support, is_oppose, is_fln_controlled, get_terror,
    can_take_base, can_train, is_resettled, set_support, decrease_support,
    remove_terror, add_terror, add_marker, morocco_tunisia_independent,
)
from ct_bot.board.tracks import (
    increase_resources, decrease_resources, increase_commitment,
    decrease_commitment, increase_france_track, france_track_resources,
)
from ct_bot.cards.capabilities import (
    activate_capability, deactivate_capability, play_momentum,
)
from ct_bot.cards.card_data import get_card
from ct_bot.map.map_data import (
    get_all_spaces, get_algerian_spaces, get_adjacent, get_space_data,
    is_city, is_country, is_sector,
)
from ct_bot.state.history import log
from ct_bot.bots.bot_common import (
    CriteriaFilter, HighestScore, LowestScore, top_priority, random_select,
    roll_die, select_candidates,
)
from ct_bot.bots.turn_state import begin_turn
from ct_bot.bots.march_paths import movable_guerrillas
from ct_bot.bots.fln_rally import (
    consider_rally, get_guerrillas_to_place, place_guerrillas,
)


# ---------------------------------------------------------------------------
# Shared helpers for card event implementations
# ---------------------------------------------------------------------------

def _not_fln_event(card_id, shaded):
    side = EVENT_SHADED if shaded else EVENT_UNSHADED
    raise ValueError(
        f"Card {card_id} ({get_card(card_id).title}) {side} is not an FLN "
        f"Bot event"
    )


def _opposition_priorities(state):
    return [
        CriteriaFilter("Is at support", lambda sp: is_support(state, sp)),
        HighestScore("Highest population",
                     lambda sp: get_population(state, sp)),
        CriteriaFilter("Gov cannot train",
                       lambda sp: not can_train(state, sp)),
    ]


def _pick_spaces(state, candidates, priorities, num, action):
    """Apply action to up to num candidates chosen by priority."""
    candidates = list(candidates)
    chosen = []
    while len(chosen) < num and candidates:
        space = top_priority(state, candidates, priorities)
        candidates.remove(space)
        action(space)
        chosen.append(space)
    return chosen


def _to_place_total(to_place):
    from_available, from_map = to_place
    return from_available + sum(num for num, _ in from_map)


def _half_die(state, what):
    die = roll_die(state)
    num = (die + 1) // 2
    log(state, f"Die roll is {die}. FLN may {what} {num}")
    return num


def _fln_base_adjacent(state, space):
    """The space or an adjacent space holds an FLN base."""
    return any(count_fln_bases(state, sp) > 0
               for sp in (space,) + get_adjacent(space))


def _free_rally(state, **turn_kwargs):
    """Run Rally in a nested turn state; the caller's turn state returns."""
    saved = state.get("turn_state")
    begin_turn(state, special_activity_allowed=False, free_operation=True,
               **turn_kwargs)
    try:
        return consider_rally(state)
    finally:
        state["turn_state"] = saved


# ---------------------------------------------------------------------------
# Card handlers
# ---------------------------------------------------------------------------

def execute_card_3(state, shaded=False):
    """Card 3: Leadership Snatch.

    Shaded (Widespread rage): set up to 2 FLN-controlled spaces to Oppose.
    """
    if not shaded:
        _not_fln_event(3, shaded)
    candidates = [sp for sp in get_algerian_spaces()
                  if get_population(state, sp) > 0
                  and is_fln_controlled(state, sp)
                  and not is_oppose(state, sp)]
    _pick_spaces(state, candidates, _opposition_priorities(state), 2,
                 lambda sp: set_support(state, sp, OPPOSE))


def execute_card_5(state, shaded=False):
    """Card 5: Peace of the Brave.

    Unshaded: momentum, Terror does not shift support.
    Shaded (Fight like hell): free Rally in up to 2 spaces.
    """
    if not shaded:
        play_momentum(state, 5, EVENT_UNSHADED)
        return None
    return _free_rally(state, max_spaces=2)


def execute_card_6(state, shaded=False):
    """Card 6: Factionalism. Shaded: free Rally in 1 space with an FLN base."""
    if not shaded:
        _not_fln_event(6, shaded)
    bases = [sp for sp in get_all_spaces() if count_fln_bases(state, sp) > 0]
    if not bases:
        return None
    return _free_rally(state, max_spaces=1, only_in=bases)


def execute_card_7(state, shaded=False):
    """Card 7: 5th Bureau.

    Shaded (Propaganda flop): shift any 2 sectors 1 level toward Oppose.
    """
    if not shaded:
        _not_fln_event(7, shaded)
    candidates = [sp for sp in get_algerian_spaces()
                  if is_sector(sp) and get_population(state, sp) > 0
                  and not is_oppose(state, sp)]
    _pick_spaces(state, candidates, _opposition_priorities(state), 2,
                 lambda sp: decrease_support(state, sp, 1))


def execute_card_9(state, shaded=False):
    """Card 9: Beni-Oui-Oui. Set any 2 non-terrorized spaces to Oppose."""
    candidates = [sp for sp in get_algerian_spaces()
                  if get_population(state, sp) > 0
                  and get_terror(state, sp) == 0 and not is_oppose(state, sp)]
    _pick_spaces(state, candidates, _opposition_priorities(state), 2,
                 lambda sp: set_support(state, sp, OPPOSE))


def execute_card_10(state, shaded=False):
    """Card 10: Moudjahidine.

    Shaded (Sign me up): momentum, Rally in an FLN-controlled space
    without a base counts as if it held 1 base.
    """
    if not shaded:
        _not_fln_event(10, shaded)
    play_momentum(state, 10, EVENT_SHADED)


def execute_card_11(state, shaded=False):
    """Card 11: Bananes. Shaded (Misguided airstrike): -1 Commitment."""
    if not shaded:
        play_momentum(state, 11, EVENT_UNSHADED)
        return
    decrease_commitment(state, 1)


def execute_card_12(state, shaded=False):
    """Card 12: Ventilos.

    Shaded: move up to half a die (rounded up) underground guerrillas
    among 3 coastal spaces, into coastal spaces at Support.
    """
    if not shaded:
        play_momentum(state, 12, EVENT_UNSHADED)
        return
    num = _half_die(state, "move up to")
    sources = _navy_sources(state)
    dests = _navy_dests(state)
    if not sources or not dests:
        return
    priorities = [
        CriteriaFilter("Cities", is_city),
        HighestScore("Highest population",
                     lambda sp: get_population(state, sp)),
    ]
    sources.sort(key=lambda sp: -movable_guerrillas(state, sp)[0])
    first = sources[0]
    first_num = movable_guerrillas(state, first)[0]
    total = min(num, sum(movable_guerrillas(state, sp)[0] for sp in sources))

    if total > 1 and first_num >= total and len(dests) > 1:
        dest1 = top_priority(state, dests, priorities)
        dest2 = top_priority(state, [sp for sp in dests if sp != dest1],
                             priorities)
        move_pieces(state, {HIDDEN_GUERRILLAS: total - 1}, first, dest1)
        move_pieces(state, {HIDDEN_GUERRILLAS: 1}, first, dest2)
        return

    dest = top_priority(state, dests, priorities)
    remaining = total
    for source in sources[:2]:
        moving = min(remaining, movable_guerrillas(state, source)[0])
        move_pieces(state, {HIDDEN_GUERRILLAS: moving}, source, dest)
        remaining -= moving


def _navy_sources(state):
    return [sp for sp in get_all_spaces()
            if get_space_data(sp).coastal and not is_support(state, sp)
            and movable_guerrillas(state, sp)[0] > 0]


def _navy_dests(state):
    return [sp for sp in get_algerian_spaces()
            if get_space_data(sp).coastal and is_support(state, sp)]


def execute_card_13(state, shaded=False):
    """Card 13: SAS. Either side is a capability."""
    activate_capability(state, 13, EVENT_SHADED if shaded else EVENT_UNSHADED)


def execute_card_14(state, shaded=False):
    """Card 14: Protest in Paris. France track +2."""
    increase_france_track(state, 2)


def execute_card_15(state, shaded=False):
    """Card 15: Jean-Paul Sartre.

    Unshaded (Writes a play): +2 FLN resources.
    Shaded (Signs manifesto): -1 Commitment.
    """
    if shaded:
        decrease_commitment(state, 1)
    else:
        increase_resources(state, FLN, 2)


def execute_card_17(state, shaded=False):
    """Card 17: Commandos. Either side is a capability."""
    activate_capability(state, 17, EVENT_SHADED if shaded else EVENT_UNSHADED)


def execute_card_18(state, shaded=False):
    """Card 18: Torture. Capability affecting both sides."""
    activate_capability(state, 18, EVENT_UNSHADED)


def execute_card_19(state, shaded=False):
    """Card 19: General Strike. Shaded (UN resolution): +2 FLN resources."""
    if not shaded:
        _not_fln_event(19, shaded)
    increase_resources(state, FLN, 2)


def execute_card_21(state, shaded=False):
    """Card 21: United Nations Resolution. Commitment +1 / -1."""
    if shaded:
        decrease_commitment(state, 1)
    else:
        increase_commitment(state, 1)


def execute_card_22(state, shaded=False):
    """Card 22: The Government of USA is Convinced... Commitment +2 / -2."""
    if shaded:
        decrease_commitment(state, 2)
    else:
        increase_commitment(state, 2)


def execute_card_23(state, shaded=False):
    """Card 23: Diplomatic Leanings. Shaded (Arab Bloc solidarity): +6."""
    if not shaded:
        _not_fln_event(23, shaded)
    increase_resources(state, FLN, 6)


def execute_card_24(state, shaded=False):
    """Card 24: Economic Development. Shaded: -6 Government resources."""
    if not shaded:
        _not_fln_event(24, shaded)
    decrease_resources(state, GOV, 6)


def execute_card_25(state, shaded=False):
    """Card 25: Purge.

    Remove up to half a die (rounded up) Government cubes to Available,
    French before Algerian and troops before police, then the Government
    loses a die roll of resources.
    """
    num_pieces = _half_die(state, "remove up to")
    removed = 0
    base_priorities = [
        CriteriaFilter("Has FLN base",
                       lambda sp: count_fln_bases(state, sp) > 0),
        LowestScore("Least guerrillas",
                    lambda sp: count_guerrillas(state, sp)),
    ]
    other_priorities = [
        CriteriaFilter("Guerrilla present",
                       lambda sp: count_guerrillas(state, sp) > 0),
        CriteriaFilter("Gov control",
                       lambda sp: count_cubes(state, sp)
                       > count_fln(state, sp)),
        HighestScore("Most guerrillas",
                     lambda sp: count_guerrillas(state, sp)),
    ]
    for piece_type in (FRENCH_TROOPS, FRENCH_POLICE, ALGERIAN_TROOPS,
                       ALGERIAN_POLICE):
        candidates = [sp for sp in get_algerian_spaces()
                      if count_pieces(state, sp, piece_type) > 0]
        while removed < num_pieces and candidates:
            if any(count_fln_bases(state, sp) > 0 for sp in candidates):
                space = top_priority(state, candidates, base_priorities)
            else:
                space = top_priority(state, candidates, other_priorities)
            candidates.remove(space)
            num = min(num_pieces - removed,
                      count_pieces(state, space, piece_type))
            remove_to_available(state, space, {piece_type: num})
            removed += num

    die = roll_die(state)
    log(state, f"Die roll for resources is {die}")
    decrease_resources(state, GOV, die)


def execute_card_26(state, shaded=False):
    """Card 26: Casbah.

    Shaded (Urban uprising): place up to 4 guerrillas in Algiers; if the
    FLN then controls Algiers, remove a terror marker there or else shift
    it one level toward Oppose.
    """
    if not shaded:
        _not_fln_event(26, shaded)
    from_available, from_map = get_guerrillas_to_place(state, 4, ALGIERS)
    place_guerrillas(state, ALGIERS, from_available, from_map)
    if not is_fln_controlled(state, ALGIERS):
        return
    if get_terror(state, ALGIERS) > 0:
        remove_terror(state, ALGIERS, 1)
    elif not is_oppose(state, ALGIERS):
        decrease_support(state, ALGIERS, 1)


def execute_card_27(state, shaded=False):
    """Card 27: Covert Movement. Either side is a capability."""
    activate_capability(state, 27, EVENT_SHADED if shaded else EVENT_UNSHADED)


def execute_card_28(state, shaded=False):
    """Card 28: Atrocities and Reprisals.

    Up to twice, in different spaces: pay 1 FLN resource, place a terror
    marker, set the space Neutral and lower Commitment by 1.
    """
    priorities = [
        CriteriaFilter("Is at support", lambda sp: is_support(state, sp)),
        HighestScore("Highest population",
                     lambda sp: get_population(state, sp)),
    ]
    selected = []
    while (len(selected) < 2 and state["resources"][FLN] > 0
           and terror_markers_available(state) > 0):
        if state["commitment"] > 0:
            candidates = [sp for sp in get_algerian_spaces()
                          if not is_oppose(state, sp)]
        else:
            candidates = [sp for sp in get_algerian_spaces()
                          if is_support(state, sp)]
        candidates = [sp for sp in candidates if sp not in selected]
        if not candidates:
            break
        space = top_priority(state, candidates, priorities)
        decrease_resources(state, FLN, 1)
        add_terror(state, space, 1)
        set_support(state, space, NEUTRAL)
        decrease_commitment(state, 1)
        selected.append(space)


def execute_card_30(state, shaded=False):
    """Card 30: Change in Tactics. Remove a Government capability at random.
    """
    active = sorted(card for card, side in GOV_CAPABILITIES
                    if state["capabilities"].get(card) == side)
    if not active:
        return
    deactivate_capability(state, random_select(state, active))


def execute_card_31(state, shaded=False):
    """Card 31: Intimidation.

    Shaded: FLN gains the resources printed at the France track position.
    """
    if not shaded:
        play_momentum(state, 31, EVENT_UNSHADED)
        return
    increase_resources(state, FLN, france_track_resources(state))


def execute_card_32(state, shaded=False):
    """Card 32: Teleb the Bomb-maker. Either side is a capability."""
    activate_capability(state, 32, EVENT_SHADED if shaded else EVENT_UNSHADED)


def execute_card_33(state, shaded=False):
    """Card 33: Overkill. Either side is a capability."""
    activate_capability(state, 33, EVENT_SHADED if shaded else EVENT_UNSHADED)


def execute_card_34(state, shaded=False):
    """Card 34: Elections. Shaded (Voter suppression): 1 sector to Neutral."""
    if not shaded:
        _not_fln_event(34, shaded)
    priorities = [
        HighestScore("Highest population",
                     lambda sp: get_population(state, sp)),
        CriteriaFilter("Gov cannot train",
                       lambda sp: not can_train(state, sp)),
    ]
    candidates = [sp for sp in get_algerian_spaces()
                  if is_sector(sp) and get_population(state, sp) > 0
                  and is_support(state, sp)]
    _pick_spaces(state, candidates, priorities, 1,
                 lambda sp: set_support(state, sp, NEUTRAL))


def execute_card_35(state, shaded=False):
    """Card 35: Napalm. Either side is a capability."""
    activate_capability(state, 35, EVENT_SHADED if shaded else EVENT_UNSHADED)


def execute_card_36(state, shaded=False):
    """Card 36: Assassination.

    Shaded (Martyr): add 1 guerrilla from Out of Play or Available,
    +1d6 FLN resources.
    """
    if not shaded:
        _not_fln_event(36, shaded)
    priorities = [
        CriteriaFilter("Support space", lambda sp: is_support(state, sp)),
        CriteriaFilter("Unprotected base",
                       lambda sp: count_fln_bases(state, sp) > 0
                       and (count_hidden(state, sp) == 0
                            or count_guerrillas(state, sp) < 2)),
        CriteriaFilter("Friendly pieces", lambda sp: count_fln(state, sp) > 0),
        CriteriaFilter("In Algeria", lambda sp: not is_country(sp)),
    ]
    space = top_priority(state, list(get_all_spaces()), priorities)
    if state["out_of_play"][HIDDEN_GUERRILLAS] > 0:
        place_from_out_of_play(state, space, {HIDDEN_GUERRILLAS: 1})
    elif guerrillas_available(state) > 0:
        place_pieces(state, space, {HIDDEN_GUERRILLAS: 1})
    increase_resources(state, FLN, roll_die(state))


def execute_card_38(state, shaded=False):
    """Card 38: Economic Crisis in France.

    Unshaded: -1d6 FLN resources. Shaded: -1d6 Government resources and
    -1 Commitment.
    """
    if not shaded:
        decrease_resources(state, FLN, roll_die(state))
        return
    decrease_resources(state, GOV, roll_die(state))
    decrease_commitment(state, 1)


def execute_card_41(state, shaded=False):
    """Card 41: Egypt. Unshaded: -3 FLN resources. Shaded: +1d6."""
    if shaded:
        increase_resources(state, FLN, roll_die(state))
    else:
        decrease_resources(state, FLN, 3)


def execute_card_42(state, shaded=False):
    """Card 42: Czech Arms Deal.

    Unshaded (Intercepted): FLN loses twice the Border Zone track (2 before
    Morocco and Tunisia are independent). Shaded: +6 FLN resources.
    """
    if shaded:
        increase_resources(state, FLN, 6)
    elif morocco_tunisia_independent(state):
        decrease_resources(state, FLN, state["border_zone_track"] * 2)
    else:
        decrease_resources(state, FLN, 2)


def execute_card_43(state, shaded=False):
    """Card 43: Refugees. Shaded: base stacking in both countries rises to 3.
    """
    if not shaded:
        _not_fln_event(43, shaded)
    add_marker(state, MOROCCO, MARKER_PLUS1_BASE)
    add_marker(state, TUNISIA, MARKER_PLUS1_BASE)


def _moghazni_space(state, space):
    police = count_pieces(state, space, ALGERIAN_POLICE)
    return (is_sector(space) and is_support(state, space) and police > 0
            and _to_place_total(get_guerrillas_to_place(state, police,
                                                        space)) > 0)


def execute_card_46(state, shaded=False):
    """Card 46: Moghazni.

    Shaded: replace the Algerian police in a sector at Support with
    guerrillas.
    """
    if not shaded:
        play_momentum(state, 46, EVENT_UNSHADED)
        return
    priorities = [
        HighestScore("Most Algerian police",
                     lambda sp: count_pieces(state, sp, ALGERIAN_POLICE)),
        HighestScore("Most FLN pieces", lambda sp: count_fln(state, sp)),
        HighestScore("Highest population",
                     lambda sp: get_population(state, sp)),
    ]
    candidates = [sp for sp in get_algerian_spaces()
                  if _moghazni_space(state, sp)]
    if not candidates:
        return
    space = top_priority(state, candidates, priorities)
    to_place = get_guerrillas_to_place(
        state, count_pieces(state, space, ALGERIAN_POLICE), space)
    remove_to_available(state, space,
                        {ALGERIAN_POLICE: _to_place_total(to_place)})
    place_guerrillas(state, space, *to_place)


def _third_force_space(state, space):
    return (is_sector(space)
            and count_pieces(state, space, ALGERIAN_POLICE) > 0
            and not is_oppose(state, space))


def execute_card_47(state, shaded=False):
    """Card 47: Third Force. Shaded: a sector with Algerian police to Oppose.
    """
    if not shaded:
        _not_fln_event(47, shaded)
    candidates = [sp for sp in get_algerian_spaces()
                  if _third_force_space(state, sp)]
    _pick_spaces(state, candidates, _opposition_priorities(state), 1,
                 lambda sp: set_support(state, sp, OPPOSE))


def execute_card_48(state, shaded=False):
    """Card 48: Ultras.

    Shaded: remove half a die (rounded up) Algerian cubes to Available,
    troops before police.
    """
    if not shaded:
        _not_fln_event(48, shaded)
    total = _half_die(state, "remove up to")
    priorities = [
        CriteriaFilter("FLN base", lambda sp: count_fln_bases(state, sp) > 0),
        CriteriaFilter("Support space", lambda sp: is_support(state, sp)),
    ]
    removed = 0
    for piece_type in (ALGERIAN_TROOPS, ALGERIAN_POLICE):
        candidates = [sp for sp in get_algerian_spaces()
                      if count_pieces(state, sp, piece_type) > 0]
        while removed < total and candidates:
            space = top_priority(state, candidates, priorities)
            candidates.remove(space)
            num = min(total - removed, count_pieces(state, space, piece_type))
            remove_to_available(state, space, {piece_type: num})
            removed += num


def _factional_plot_excess(state):
    """(source, dest, num) evening out Morocco and Tunisia, or None."""
    morocco = count_guerrillas(state, MOROCCO)
    tunisia = count_guerrillas(state, TUNISIA)
    allowed = (morocco + tunisia + 1) // 2
    if morocco > allowed:
        return MOROCCO, TUNISIA, morocco - allowed
    if tunisia > allowed:
        return TUNISIA, MOROCCO, tunisia - allowed
    return None


def execute_card_49(state, shaded=False):
    """Card 49: Factional Plot.

    Shaded: redistribute guerrillas evenly between Morocco and Tunisia.
    """
    if not shaded:
        _not_fln_event(49, shaded)
    excess = _factional_plot_excess(state)
    if excess is None:
        return
    source, dest, num = excess
    hidden_share = (count_hidden(state, MOROCCO)
                    + count_hidden(state, TUNISIA) + 1) // 2
    hidden = min(num, max(0, count_hidden(state, source) - hidden_share))
    active = min(num - hidden, count_active(state, source))
    move_pieces(state, {HIDDEN_GUERRILLAS: num - active,
                        ACTIVE_GUERRILLAS: active}, source, dest)


def _stripey_hole_unshaded(state, space):
    return (is_sector(space) and not is_oppose(state, space)
            and count_fln_bases(state, space) > 0)


def _stripey_hole_shaded(state, space):
    if not (is_sector(space) and is_support(state, space)):
        return False
    return (_to_place_total(get_guerrillas_to_place(state, 2, space)) > 0
            or state["out_of_play"][HIDDEN_GUERRILLAS] > 0)


def execute_card_51(state, shaded=False):
    """Card 51: Stripey Hole.

    Unshaded (Mass arbitrary imprisonment): activate all guerrillas in a
    sector and set it to Oppose. Shaded (Prison break): place 2 guerrillas
    in a sector from Out of Play or Available.
    """
    if not shaded:
        priorities = [
            HighestScore("Highest population",
                         lambda sp: get_population(state, sp)),
            CriteriaFilter("Support space", lambda sp: is_support(state, sp)),
        ]
        candidates = [sp for sp in get_algerian_spaces()
                      if _stripey_hole_unshaded(state, sp)]
        if not candidates:
            return
        space = top_priority(state, candidates, priorities)
        activate_guerrillas(state, space, count_hidden(state, space))
        set_support(state, space, OPPOSE)
        return

    priorities = [
        CriteriaFilter("None underground",
                       lambda sp: count_hidden(state, sp) == 0),
        HighestScore("Highest population",
                     lambda sp: get_population(state, sp)),
    ]
    candidates = [sp for sp in get_algerian_spaces()
                  if _stripey_hole_shaded(state, sp)]
    if not candidates:
        return
    space = top_priority(state, candidates, priorities)
    oop = min(2, state["out_of_play"][HIDDEN_GUERRILLAS])
    place_from_out_of_play(state, space, {HIDDEN_GUERRILLAS: oop})
    if oop < 2:
        place_guerrillas(state, space,
                         *get_guerrillas_to_place(state, 2 - oop, space))


def execute_card_52(state, shaded=False):
    """Card 52: Cabinet Shuffle. France track +1."""
    increase_france_track(state, 1)


def _support_cities(state):
    return [sp for sp in get_all_spaces()
            if is_city(sp) and is_support(state, sp)]


def execute_card_53(state, shaded=False):
    """Card 53: Population Control. Shaded: a Support city to Neutral."""
    if not shaded:
        play_momentum(state, 53, EVENT_UNSHADED)
        return
    priorities = [HighestScore("Highest population",
                               lambda sp: get_population(state, sp))]
    _pick_spaces(state, _support_cities(state), priorities, 1,
                 lambda sp: set_support(state, sp, NEUTRAL))


def _op744_space(state, space):
    return (is_sector(space) and get_space_data(space).is_mountains
            and get_population(state, space) == 0
            and not _fln_base_adjacent(state, space))


def execute_card_54(state, shaded=False):
    """Card 54: Operation 744.

    Move up to 4 French troops to 1 mountain sector, then remove up to 2
    guerrillas there (active first) to Available.
    """
    candidates = [sp for sp in get_algerian_spaces()
                  if _op744_space(state, sp)]
    if not candidates:
        return
    priorities = [LowestScore("Fewest guerrillas",
                              lambda sp: count_guerrillas(state, sp))]
    dest = top_priority(state, candidates, priorities)
    sources = sorted((sp for sp in get_algerian_spaces()
                      if sp != dest
                      and count_pieces(state, sp, FRENCH_TROOPS) > 0),
                     key=lambda sp: -count_pieces(state, sp, FRENCH_TROOPS))
    remaining = 4
    for source in sources:
        if remaining == 0:
            break
        num = min(remaining, count_pieces(state, source, FRENCH_TROOPS))
        move_pieces(state, {FRENCH_TROOPS: num}, source, dest)
        remaining -= num

    num = min(2, count_guerrillas(state, dest))
    active = min(num, count_active(state, dest))
    remove_to_available(state, dest, {ACTIVE_GUERRILLAS: active,
                                      HIDDEN_GUERRILLAS: num - active})


def execute_card_55(state, shaded=False):
    """Card 55: Development. Shaded (Siphoned): +3 FLN resources."""
    if not shaded:
        _not_fln_event(55, shaded)
    increase_resources(state, FLN, 3)


def execute_card_56(state, shaded=False):
    """Card 56: Hardened Attitudes. Momentum limiting Train and Extort."""
    play_momentum(state, 56, EVENT_UNSHADED)


def execute_card_57(state, shaded=False):
    """Card 57: Peace Talks. Momentum, no Assault and no Attack."""
    play_momentum(state, 57, EVENT_UNSHADED)


def _army_in_waiting_spaces(state):
    return [sp for sp in (MOROCCO, TUNISIA) if can_take_base(state, sp)]


def execute_card_58(state, shaded=False):
    """Card 58: Army in Waiting. Shaded: place an FLN base in a country."""
    if not shaded:
        _not_fln_event(58, shaded)
    candidates = _army_in_waiting_spaces(state)
    if not candidates or get_available(state, FLN_BASES) == 0:
        return
    fewest = min(count_fln_bases(state, sp) for sp in candidates)
    candidates = [sp for sp in candidates
                  if count_fln_bases(state, sp) == fewest]
    place_pieces(state, random_select(state, candidates), {FLN_BASES: 1})


def execute_card_59(state, shaded=False):
    """Card 59: Bandung Conference. FLN resources -1d6 / +1d6."""
    if shaded:
        increase_resources(state, FLN, roll_die(state))
    else:
        decrease_resources(state, FLN, roll_die(state))


def _soummam_space(state, space):
    return can_take_base(state, space) and count_fln_bases(state, space) == 0


def execute_card_60(state, shaded=False):
    """Card 60: Soummam Conference.

    Shaded (Productive meeting): place up to 2 FLN bases in Algeria free.
    """
    if not shaded:
        _not_fln_event(60, shaded)

    def no_adjacent_troops(sp):
        return not any(count_troops(state, adj) > 0
                       for adj in get_adjacent(sp))

    hidden = CriteriaFilter("Underground",
                            lambda sp: count_hidden(state, sp) > 0)
    at_least_two = CriteriaFilter("2+ guerrillas",
                                  lambda sp: count_guerrillas(state, sp) > 1)
    no_troops = CriteriaFilter("No adjacent troops", no_adjacent_troops)
    not_resettled = CriteriaFilter("Not resettled",
                                   lambda sp: not is_resettled(state, sp))
    no_cubes_filter = CriteriaFilter("No cubes",
                                     lambda sp: count_cubes(state, sp) == 0)
    mountains = CriteriaFilter("Is mountain",
                               lambda sp: get_space_data(sp).is_mountains)
    lowest_pop = LowestScore("Lowest population",
                             lambda sp: get_population(state, sp))
    lowest_cubes = LowestScore("Lowest cubes",
                               lambda sp: count_cubes(state, sp))
    no_cube_priorities = [hidden, no_troops, lowest_pop, at_least_two,
                          mountains, not_resettled]
    other_priorities = [hidden, lowest_cubes, at_least_two, no_troops,
                        mountains, lowest_pop, not_resettled]

    candidates = [sp for sp in get_algerian_spaces()
                  if _soummam_space(state, sp)]
    remaining = min(2, get_available(state, FLN_BASES))
    while remaining > 0 and candidates:
        no_cubes = select_candidates(candidates, [no_cubes_filter])
        if no_cubes:
            space = top_priority(state, no_cubes, no_cube_priorities)
        else:
            space = top_priority(state, candidates, other_priorities)
        place_pieces(state, space, {FLN_BASES: 1})
        candidates.remove(space)
        remaining -= 1


_BASE_HANDLERS = {
    3: execute_card_3, 5: execute_card_5, 6: execute_card_6,
    7: execute_card_7, 9: execute_card_9, 10: execute_card_10,
    11: execute_card_11, 12: execute_card_12, 13: execute_card_13,
    14: execute_card_14, 15: execute_card_15, 17: execute_card_17,
    18: execute_card_18, 19: execute_card_19, 21: execute_card_21,
    22: execute_card_22, 23: execute_card_23, 24: execute_card_24,
    25: execute_card_25, 26: execute_card_26, 27: execute_card_27,
    28: execute_card_28, 30: execute_card_30, 31: execute_card_31,
    32: execute_card_32, 33: execute_card_33, 34: execute_card_34,
    35: execute_card_35, 36: execute_card_36, 38: execute_card_38,
    41: execute_card_41, 42: execute_card_42, 43: execute_card_43,
    46: execute_card_46, 47: execute_card_47, 48: execute_card_48,
    49: execute_card_49, 51: execute_card_51, 52: execute_card_52,
    53: execute_card_53, 54: execute_card_54, 55: execute_card_55,
    56: execute_card_56, 57: execute_card_57, 58: execute_card_58,
    59: execute_card_59, 60: execute_card_60,
}


def execute_event(state, card_id, shaded=False):
    """Dispatch to the correct card handler.

    Args:
        state: Game state dict. Modified in place.
        card_id: Card number.
        shaded: True for the shaded event, False for unshaded.

    Returns:
        Whatever the handler returns (the action of a free Rally, or None).

    Raises:
        KeyError: If the card has no handler.
        ValueError: If the side is a Government event the FLN never plays.
    """
    if card_id not in _BASE_HANDLERS:
        raise KeyError(f"Unknown card_id: {card_id!r}")
    return _BASE_HANDLERS[card_id](state, shaded)


def get_all_card_ids():
    """Return all card numbers that have handlers."""
    return list(_BASE_HANDLERS.keys())


# ---------------------------------------------------------------------------
# FLN Bot event selection
# ---------------------------------------------------------------------------

def _select_12(state):
    if _navy_sources(state) and _navy_dests(state):
        return EVENT_SHADED
    return EVENT_NONE


def _select_26(state):
    if _to_place_total(get_guerrillas_to_place(state, 4, ALGIERS)) > 0:
        return EVENT_SHADED
    return EVENT_NONE


def _select_28(state):
    if (state["resources"][FLN] == 0
            or terror_markers_available(state) == 0):
        return EVENT_NONE
    algerian = get_algerian_spaces()
    if state["commitment"] > 0 and any(not is_oppose(state, sp)
                                       for sp in algerian):
        return EVENT_UNSHADED
    if any(is_support(state, sp) for sp in algerian):
        return EVENT_UNSHADED
    return EVENT_NONE


def _select_30(state):
    if any(state["capabilities"].get(card) == side
           for card, side in GOV_CAPABILITIES):
        return EVENT_UNSHADED
    return EVENT_NONE


def _select_36(state):
    if (state["out_of_play"][HIDDEN_GUERRILLAS] > 0
            or guerrillas_available(state) > 0):
        return EVENT_SHADED
    return EVENT_NONE


def _select_france_track(side):
    def select(state):
        if state["france_track"] < FRANCE_TRACK_MAX:
            return side
        return EVENT_NONE
    return select


def _select_below_edge(state):
    if state["resources"][FLN] < EDGE_TRACK_MAX:
        return EVENT_SHADED
    return EVENT_NONE


def _select_49(state):
    if morocco_tunisia_independent(state) and _factional_plot_excess(state):
        return EVENT_SHADED
    return EVENT_NONE


def _select_51(state):
    algerian = get_algerian_spaces()
    if any(_stripey_hole_shaded(state, sp) for sp in algerian):
        return EVENT_SHADED
    if any(_stripey_hole_unshaded(state, sp) for sp in algerian):
        return EVENT_UNSHADED
    return EVENT_NONE


def _select_54(state):
    algerian = get_algerian_spaces()
    if (any(count_pieces(state, sp, FRENCH_TROOPS) > 0 for sp in algerian)
            and any(_op744_space(state, sp) for sp in algerian)):
        return EVENT_UNSHADED
    return EVENT_NONE


def _select_58(state):
    if _army_in_waiting_spaces(state) and get_available(state, FLN_BASES):
        return EVENT_SHADED
    return EVENT_NONE


def _select_60(state):
    if get_available(state, FLN_BASES) > 0 and any(
            _soummam_space(state, sp) for sp in get_algerian_spaces()):
        return EVENT_SHADED
    return EVENT_NONE


def _when(side, test):
    def select(state):
        return side if test(state) else EVENT_NONE
    return select


def _always(side):
    return lambda state: side


_SELECTIONS = {
    3: _always(EVENT_SHADED),
    5: _always(EVENT_SHADED),
    6: _always(EVENT_SHADED),
    7: _always(EVENT_SHADED),
    9: _always(EVENT_UNSHADED),
    10: _always(EVENT_SHADED),
    11: _always(EVENT_SHADED),
    12: _select_12,
    13: _always(EVENT_SHADED),
    14: _select_france_track(EVENT_UNSHADED),
    15: _when(EVENT_SHADED, lambda state: state["commitment"] > 0),
    17: _always(EVENT_SHADED),
    18: _always(EVENT_UNSHADED),
    19: _always(EVENT_SHADED),
    21: _always(EVENT_SHADED),
    22: _always(EVENT_SHADED),
    23: _always(EVENT_SHADED),
    24: _always(EVENT_SHADED),
    25: _always(EVENT_UNSHADED),
    26: _select_26,
    27: _always(EVENT_SHADED),
    28: _select_28,
    30: _select_30,
    31: _always(EVENT_SHADED),
    32: _always(EVENT_SHADED),
    33: _always(EVENT_SHADED),
    34: _always(EVENT_SHADED),
    35: _always(EVENT_SHADED),
    36: _select_36,
    38: _always(EVENT_SHADED),
    41: _always(EVENT_SHADED),
    42: _always(EVENT_SHADED),
    43: _when(EVENT_SHADED, morocco_tunisia_independent),
    46: _when(EVENT_SHADED, lambda state: any(
        _moghazni_space(state, sp) for sp in get_algerian_spaces())),
    47: _when(EVENT_SHADED, lambda state: any(
        _third_force_space(state, sp) for sp in get_algerian_spaces())),
    48: _when(EVENT_SHADED, lambda state: any(
        count_algerian_cubes(state, sp) > 0 for sp in get_algerian_spaces())),
    49: _select_49,
    51: _select_51,
    52: _select_france_track(EVENT_UNSHADED),
    53: _when(EVENT_SHADED, lambda state: bool(_support_cities(state))),
    54: _select_54,
    55: _select_below_edge,
    56: _when(EVENT_UNSHADED, lambda state: state["final_campaign"]),
    58: _select_58,
    59: _select_below_edge,
    60: _select_60,
}


def bot_event_selection(state, card_id):
    """The event side the FLN Bot would play for a card.

    Returns:
        EVENT_UNSHADED, EVENT_SHADED or EVENT_NONE.

    Raises:
        KeyError: If no such card exists.
    """
    get_card(card_id)
    select = _SELECTIONS.get(card_id)
    if select is None:
        return EVENT_NONE
    return select(state)
