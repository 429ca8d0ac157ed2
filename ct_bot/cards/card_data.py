"""
card_data.py — Structured metadata for every Event card.

Each card has:
- number: 1..71
- title: from CARD_NAMES
- dual: False for single-event cards (Propaganda and the pivotal cards
  included); the Bot then always plays the unshaded text
- fln_marked: True when the card carries the FLN Bot marker
- is_capability: True when either side puts a capability into play; the
  Bot plays these, like marked cards, without checking the outcome

Source: Card Reference, rules_consts.py
"""

from ct_bot.rules_consts import (
    CARD_COUNT, CARD_NAMES,
    SINGLE_EVENT_CARDS, FLN_MARKED_CARDS, CAPABILITY_CARDS,
)


class CardData:
    """Metadata for one Event card."""

    __slots__ = (
        "number", "title", "dual", "fln_marked", "is_capability",
    )

    def __init__(self, number, title, dual=True, fln_marked=False,
                 is_capability=False):
        self.number = number
        self.title = title
        self.dual = dual
        self.fln_marked = fln_marked
        self.is_capability = is_capability

    def __repr__(self):
        return (
            f"CardData(number={self.number!r}, title={self.title!r}, "
            f"dual={self.dual}, fln_marked={self.fln_marked})"
        )


def _build_cards():
    cards = {}
    for number in range(1, CARD_COUNT + 1):
        cards[number] = CardData(
            number,
            CARD_NAMES[number],
            dual=number not in SINGLE_EVENT_CARDS,
            fln_marked=number in FLN_MARKED_CARDS,
            is_capability=number in CAPABILITY_CARDS,
        )
    return cards


_CARDS = _build_cards()


def get_card(number):
    """Look up a card by number.

    Raises:
        KeyError: If no such card exists.
    """
    if number not in _CARDS:
        raise KeyError(f"Unknown card: {number!r}")
    return _CARDS[number]
