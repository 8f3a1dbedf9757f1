"""
Card State - Decks, Cards and Derived Scheduling Status

Defines the immutable card/deck records held by the store and the
classification helpers built on a card's three numeric fields.

Key concepts:
- Ease factor: multiplier modelling how easy a card is to recall (>= 1.3)
- Interval: days until the next review after the last successful one
- Repetitions: consecutive successful reviews since the last failure
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal, Optional

from flashdeck.sm2.constants import (
    CardDifficulty,
    DeckLanguage,
    DEFAULT_EASE_FACTOR,
    DEFAULT_INTERVAL_DAYS,
    LEARNED_EASE_FACTOR,
    LEARNED_INTERVAL_DAYS,
)


CardStatus = Literal["new", "reviewing", "learned"]


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


# Latest representable due time; schedules past it are clamped here
LATEST_REVIEW_AT = datetime.max.replace(tzinfo=timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive timestamps are read as UTC; aware ones are converted to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class Card:
    """
    Scheduling state for a single flashcard.

    Instances are immutable; the store replaces a card with an updated copy
    on every review.
    """
    id: str
    front: str
    back: str

    # SM-2 parameters
    ease_factor: float
    interval_days: int
    repetitions: int

    # Timing
    next_review_at: datetime
    created_at: datetime
    last_reviewed_at: Optional[datetime] = None

    difficulty: CardDifficulty = CardDifficulty.MEDIUM
    version: int = 0  # Incremented on every review


@dataclass(frozen=True)
class Deck:
    """
    A named, ordered collection of cards.

    Cards keep insertion order; the deck exclusively owns them.
    """
    id: str
    name: str
    description: str
    language: DeckLanguage
    category: str
    created_at: datetime
    cards: tuple[Card, ...] = ()

    def find_card(self, card_id: str) -> Optional[Card]:
        """Return the card with this id, or None."""
        return next((card for card in self.cards if card.id == card_id), None)


def initialize_new_card(
    card_id: str,
    front: str,
    back: str,
    now: Optional[datetime] = None
) -> Card:
    """
    Initialize state for a new card (never reviewed).

    New cards are due immediately: next_review_at equals the creation time.

    Args:
        card_id: Unique card identifier
        front: Prompt side
        back: Answer side
        now: Creation time (defaults to now)

    Returns:
        New Card with default SM-2 parameters
    """
    if now is None:
        now = utc_now()

    return Card(
        id=card_id,
        front=front,
        back=back,
        ease_factor=DEFAULT_EASE_FACTOR,
        interval_days=DEFAULT_INTERVAL_DAYS,
        repetitions=0,
        next_review_at=now,
        created_at=now,
        last_reviewed_at=None,
    )


def is_due(card: Card, as_of: datetime) -> bool:
    """
    A card is due once as_of has reached its next_review_at (inclusive).

    A naive as_of is taken as UTC.
    """
    return card.next_review_at <= as_utc(as_of)


def is_new(card: Card) -> bool:
    return card.repetitions == 0


def is_learned(card: Card) -> bool:
    """
    Durable memorization: at least one successful repetition with
    ease factor above 2.5 and interval above 7 days.
    """
    return (
        card.repetitions > 0
        and card.ease_factor > LEARNED_EASE_FACTOR
        and card.interval_days > LEARNED_INTERVAL_DAYS
    )


def is_reviewing(card: Card, as_of: datetime) -> bool:
    """
    Previously learned at least once and due again.

    Overlaps with is_learned: a learned card that is due satisfies both.
    """
    return card.repetitions > 0 and is_due(card, as_of)


def classify_card(card: Card) -> CardStatus:
    """
    Derive the lifecycle status of a card from its numeric fields.

    new -> reviewing -> learned; any failure drops back to new.
    """
    if is_new(card):
        return "new"
    if is_learned(card):
        return "learned"
    return "reviewing"
