"""
In-memory deck/card store.

The store exclusively owns its decks and each deck exclusively owns its
cards. Callers only ever receive frozen Deck/Card snapshots; every change
goes through one of the mutation methods below, which validate first and
then swap in a rebuilt Deck, so a rejected call never leaves a partial write.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Iterable, Optional, Union

from flashdeck.analytics.service import summarize
from flashdeck.analytics.types import Progress
from flashdeck.due_selector import DueOrder, select_due_across_decks, select_due_cards
from flashdeck.exceptions import ConflictError, InvalidInputError, NotFoundError
from flashdeck.sm2.card_state import Card, Deck, initialize_new_card, utc_now
from flashdeck.sm2.constants import CardDifficulty, DeckLanguage
from flashdeck.sm2.scheduler import process_review, validate_quality

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewOutcome:
    """
    Result of applying one review through the store.
    """
    deck_id: str
    card: Card
    event: dict


def _new_id() -> str:
    return uuid.uuid4().hex


def _require_text(value: str, field: str) -> str:
    """Trim a required text field, rejecting blanks."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{field} must not be empty")
    return value.strip()


class DeckStore:
    """
    Owner of a learner's decks and the only writer of card scheduling state.

    Args:
        decks: Decks to start from (e.g. restored from persistence)
        clock: Returns the current time; injectable for tests
        id_factory: Returns fresh ids for decks and cards
    """

    def __init__(
        self,
        decks: Iterable[Deck] = (),
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = _new_id
    ):
        self._clock = clock
        self._id_factory = id_factory
        self._lock = threading.RLock()
        self._decks: dict[str, Deck] = {}
        self._card_index: dict[str, str] = {}  # card_id -> deck_id

        for deck in decks:
            if deck.id in self._decks:
                raise InvalidInputError(f"Duplicate deck id: {deck.id}")
            for card in deck.cards:
                if card.id in self._card_index:
                    raise InvalidInputError(f"Duplicate card id: {card.id}")
                self._card_index[card.id] = deck.id
            self._decks[deck.id] = deck

    # ---- Read access (snapshots) ----

    @property
    def decks(self) -> tuple[Deck, ...]:
        """All decks in creation order."""
        with self._lock:
            return tuple(self._decks.values())

    def get_deck(self, deck_id: str) -> Deck:
        with self._lock:
            deck = self._decks.get(deck_id)
        if deck is None:
            raise NotFoundError(f"Deck not found: {deck_id}")
        return deck

    def find_card(self, card_id: str) -> tuple[str, Card]:
        """
        Locate a card anywhere in the store.

        Returns:
            (deck_id, card)

        Raises:
            NotFoundError: If no deck holds the card
        """
        with self._lock:
            deck_id = self._card_index.get(card_id)
            if deck_id is None:
                raise NotFoundError(f"Card not found: {card_id}")
            return deck_id, self._decks[deck_id].find_card(card_id)

    def all_cards(self) -> tuple[tuple[str, Card], ...]:
        """Every card in the store as (deck_id, card), flattened across decks."""
        with self._lock:
            return tuple(
                (deck.id, card)
                for deck in self._decks.values()
                for card in deck.cards
            )

    def now(self) -> datetime:
        """Current time according to the store's clock."""
        return self._clock()

    # ---- Mutations ----

    def create_deck(
        self,
        name: str,
        description: str,
        language: Union[DeckLanguage, str],
        category: str
    ) -> str:
        """
        Create an empty deck.

        Returns:
            The new deck's id
        """
        name = _require_text(name, "Deck name")
        description = _require_text(description, "Deck description")
        category = _require_text(category, "Deck category")
        try:
            language = DeckLanguage(language)
        except ValueError as exc:
            raise InvalidInputError(f"Unsupported deck language: {language!r}") from exc

        with self._lock:
            deck_id = self._fresh_id()
            self._decks[deck_id] = Deck(
                id=deck_id,
                name=name,
                description=description,
                language=language,
                category=category,
                created_at=self._clock(),
            )

        logger.info(f"Created deck {deck_id} ({name!r}, {language.value})")
        return deck_id

    def add_card(
        self,
        deck_id: str,
        front: str,
        back: str,
        difficulty: Union[CardDifficulty, str] = CardDifficulty.MEDIUM
    ) -> str:
        """
        Append a new card to a deck. New cards are due immediately.

        Returns:
            The new card's id

        Raises:
            NotFoundError: If the deck does not exist (nothing is created)
        """
        front = _require_text(front, "Card front")
        back = _require_text(back, "Card back")
        try:
            difficulty = CardDifficulty(difficulty)
        except ValueError as exc:
            raise InvalidInputError(f"Unknown card difficulty: {difficulty!r}") from exc

        with self._lock:
            deck = self.get_deck(deck_id)
            card_id = self._fresh_id()
            card = replace(
                initialize_new_card(card_id, front, back, now=self._clock()),
                difficulty=difficulty,
            )
            self._decks[deck_id] = replace(deck, cards=deck.cards + (card,))
            self._card_index[card_id] = deck_id

        logger.info(f"Added card {card_id} to deck {deck_id}")
        return card_id

    def review_card(
        self,
        deck_id: str,
        card_id: str,
        quality: int,
        expected_version: Optional[int] = None
    ) -> ReviewOutcome:
        """
        Apply a quality rating to a card and write the new schedule back.

        Args:
            deck_id: Deck holding the card
            card_id: Card being reviewed
            quality: Rating 0-5
            expected_version: If given, the card's version must still match
                (guards against two sessions reviewing the same card)

        Returns:
            ReviewOutcome with the updated card and the review event

        Raises:
            NotFoundError: If the deck or card does not exist
            InvalidInputError: If quality is out of range
            ConflictError: If expected_version is stale
        """
        quality = validate_quality(quality)

        with self._lock:
            deck = self.get_deck(deck_id)
            card = deck.find_card(card_id)
            if card is None:
                raise NotFoundError(f"Card {card_id} not found in deck {deck_id}")
            if expected_version is not None and card.version != expected_version:
                raise ConflictError(
                    f"Card {card_id} is at version {card.version}, expected {expected_version}"
                )

            updated, event = process_review(card, quality, timestamp=self._clock())
            event['deck_id'] = deck_id

            self._decks[deck_id] = replace(
                deck,
                cards=tuple(updated if c.id == card_id else c for c in deck.cards),
            )

        logger.debug(
            f"Reviewed card {card_id} (quality={quality}): "
            f"interval {card.interval_days} -> {updated.interval_days}, "
            f"ease {card.ease_factor:.2f} -> {updated.ease_factor:.2f}, "
            f"repetitions {card.repetitions} -> {updated.repetitions}"
        )
        return ReviewOutcome(deck_id=deck_id, card=updated, event=event)

    def review_card_by_id(self, card_id: str, quality: int) -> ReviewOutcome:
        """Review a card without knowing its deck."""
        with self._lock:
            deck_id, _ = self.find_card(card_id)
            return self.review_card(deck_id, card_id, quality)

    def delete_deck(self, deck_id: str) -> None:
        """
        Delete a deck together with all its cards.

        Raises:
            NotFoundError: If the deck does not exist
        """
        with self._lock:
            deck = self._decks.pop(deck_id, None)
            if deck is None:
                raise NotFoundError(f"Deck not found: {deck_id}")
            for card in deck.cards:
                self._card_index.pop(card.id, None)

        logger.info(f"Deleted deck {deck_id} with {len(deck.cards)} card(s)")

    # ---- Queries ----

    def due_cards(
        self,
        deck_id: str,
        as_of: Optional[datetime] = None,
        order: DueOrder = "insertion"
    ) -> tuple[Card, ...]:
        """Cards in a deck that are due at as_of (defaults to now)."""
        deck = self.get_deck(deck_id)
        return select_due_cards(deck.cards, as_of or self._clock(), order=order)

    def due_cards_all(
        self,
        as_of: Optional[datetime] = None,
        order: DueOrder = "insertion"
    ) -> tuple[tuple[str, Card], ...]:
        """Due cards across every deck as (deck_id, card) pairs."""
        return select_due_across_decks(self.decks, as_of or self._clock(), order=order)

    def summarize(self, now: Optional[datetime] = None) -> Progress:
        """Progress over every card in the store, recomputed from scratch."""
        cards = [card for _, card in self.all_cards()]
        return summarize(cards, now or self._clock())

    @property
    def progress(self) -> Progress:
        return self.summarize()

    # ---- Internals ----

    def _fresh_id(self) -> str:
        new_id = self._id_factory()
        if new_id in self._decks or new_id in self._card_index:
            raise ConflictError(f"Generated id already in use: {new_id}")
        return new_id
