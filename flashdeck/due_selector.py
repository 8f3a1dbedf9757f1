"""
Due-card selection.

Picks the cards whose next review time has been reached. By default the
deck's insertion order is preserved; "urgency" ordering (oldest due time
first) is available as an opt-in.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Literal

from flashdeck.exceptions import InvalidInputError
from flashdeck.sm2.card_state import Card, Deck, is_due


DueOrder = Literal["insertion", "urgency"]


def select_due_cards(
    cards: Iterable[Card],
    as_of: datetime,
    order: DueOrder = "insertion"
) -> tuple[Card, ...]:
    """
    Select every card with next_review_at <= as_of.

    Args:
        cards: Cards in insertion order
        as_of: Evaluation time (inclusive boundary)
        order: "insertion" keeps the input order; "urgency" sorts by
            next_review_at ascending, ties keeping insertion order

    Returns:
        Immutable snapshot of the due cards
    """
    due = [card for card in cards if is_due(card, as_of)]

    if order == "urgency":
        due.sort(key=lambda card: card.next_review_at)
    elif order != "insertion":
        raise InvalidInputError(f"Unknown due-card order: {order!r}")

    return tuple(due)


def select_due_across_decks(
    decks: Iterable[Deck],
    as_of: datetime,
    order: DueOrder = "insertion"
) -> tuple[tuple[str, Card], ...]:
    """
    Due cards from every deck as (deck_id, card) pairs.

    Insertion order is deck order, then card order within each deck.
    """
    pairs = [
        (deck.id, card)
        for deck in decks
        for card in deck.cards
        if is_due(card, as_of)
    ]

    if order == "urgency":
        pairs.sort(key=lambda pair: pair[1].next_review_at)
    elif order != "insertion":
        raise InvalidInputError(f"Unknown due-card order: {order!r}")

    return tuple(pairs)


def count_due(cards: Iterable[Card], as_of: datetime) -> int:
    """Number of due cards, as shown next to a deck in the study picker."""
    return sum(1 for card in cards if is_due(card, as_of))
