"""
Pydantic models for serialized deck collections.

These models define the JSON/document shape a deck collection is stored
in, and convert to and from the frozen Deck/Card records used by the store.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional, Union

from pydantic import BaseModel, Field, field_validator

from flashdeck.sm2.card_state import Card, Deck
from flashdeck.sm2.constants import (
    CardDifficulty,
    DeckLanguage,
    DEFAULT_EASE_FACTOR,
    DEFAULT_INTERVAL_DAYS,
    MIN_EASE_FACTOR,
)


# Configuration
SCHEMA_VERSION = 1


def _ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive timestamps are read as UTC; aware ones are converted to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ---- Cards ----

class CardSchema(BaseModel):
    """Serialized flashcard with its SM-2 state."""
    id: str
    front: str
    back: str
    difficulty: CardDifficulty = CardDifficulty.MEDIUM

    ease_factor: float = Field(default=DEFAULT_EASE_FACTOR, ge=MIN_EASE_FACTOR)
    interval_days: int = Field(default=DEFAULT_INTERVAL_DAYS, ge=0)
    repetitions: int = Field(default=0, ge=0)

    next_review_at: datetime
    created_at: datetime
    last_reviewed_at: Optional[datetime] = None

    version: int = Field(default=0, ge=0)

    @field_validator("next_review_at", "created_at", "last_reviewed_at")
    @classmethod
    def _timestamps_in_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _ensure_utc(value)

    @classmethod
    def from_card(cls, card: Card) -> "CardSchema":
        return cls(
            id=card.id,
            front=card.front,
            back=card.back,
            difficulty=card.difficulty,
            ease_factor=card.ease_factor,
            interval_days=card.interval_days,
            repetitions=card.repetitions,
            next_review_at=card.next_review_at,
            created_at=card.created_at,
            last_reviewed_at=card.last_reviewed_at,
            version=card.version,
        )

    def to_card(self) -> Card:
        return Card(
            id=self.id,
            front=self.front,
            back=self.back,
            ease_factor=self.ease_factor,
            interval_days=self.interval_days,
            repetitions=self.repetitions,
            next_review_at=self.next_review_at,
            created_at=self.created_at,
            last_reviewed_at=self.last_reviewed_at,
            difficulty=self.difficulty,
            version=self.version,
        )


# ---- Decks ----

class DeckSchema(BaseModel):
    """Serialized deck and its cards, in insertion order."""
    id: str
    name: str
    description: str
    language: DeckLanguage
    category: str
    created_at: datetime
    cards: list[CardSchema] = Field(default_factory=list)

    @field_validator("created_at")
    @classmethod
    def _created_in_utc(cls, value: datetime) -> datetime:
        return _ensure_utc(value)

    @classmethod
    def from_deck(cls, deck: Deck) -> "DeckSchema":
        return cls(
            id=deck.id,
            name=deck.name,
            description=deck.description,
            language=deck.language,
            category=deck.category,
            created_at=deck.created_at,
            cards=[CardSchema.from_card(card) for card in deck.cards],
        )

    def to_deck(self) -> Deck:
        return Deck(
            id=self.id,
            name=self.name,
            description=self.description,
            language=self.language,
            category=self.category,
            created_at=self.created_at,
            cards=tuple(card.to_card() for card in self.cards),
        )


# ---- Whole Collection ----

class CollectionSnapshot(BaseModel):
    """
    A learner's full deck collection, as written to a durable store.
    """
    schema_version: int = SCHEMA_VERSION
    saved_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    decks: list[DeckSchema] = Field(default_factory=list)

    @classmethod
    def from_decks(cls, decks: Iterable[Deck]) -> "CollectionSnapshot":
        return cls(decks=[DeckSchema.from_deck(deck) for deck in decks])

    def to_decks(self) -> list[Deck]:
        return [deck.to_deck() for deck in self.decks]


def dump_collection(decks: Iterable[Deck]) -> str:
    """Serialize decks to a JSON string."""
    return CollectionSnapshot.from_decks(decks).model_dump_json()


def load_collection(payload: Union[str, bytes]) -> list[Deck]:
    """
    Restore decks from a JSON string produced by dump_collection.

    Raises:
        pydantic.ValidationError: If the payload is malformed
    """
    return CollectionSnapshot.model_validate_json(payload).to_decks()
