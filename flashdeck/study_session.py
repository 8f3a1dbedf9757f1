"""
Study session over one deck's due cards.

A session snapshots the deck's due queue when it starts, walks it card by
card, and keeps a running tally of studied and correct answers. Reviews are
applied through the store as they happen, so a session that is abandoned
halfway keeps every answer already given.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from flashdeck.analytics.metrics import percent
from flashdeck.due_selector import DueOrder
from flashdeck.exceptions import InvalidInputError
from flashdeck.sm2.card_state import Card
from flashdeck.sm2.constants import PASS_THRESHOLD
from flashdeck.store import DeckStore, ReviewOutcome

logger = logging.getLogger(__name__)


@dataclass
class StudySession:
    """
    Launch-scoped state of one pass through a deck's due cards.
    """
    store: DeckStore
    deck_id: str
    queue: list[Card]
    start_time: datetime
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    cards_studied: int = 0
    correct_answers: int = 0
    end_time: Optional[datetime] = None
    events: list[dict] = field(default_factory=list)

    @classmethod
    def start(
        cls,
        store: DeckStore,
        deck_id: str,
        now: Optional[datetime] = None,
        order: DueOrder = "insertion"
    ) -> "StudySession":
        """
        Start a session on the cards of deck_id that are due at `now`.

        Raises:
            NotFoundError: If the deck does not exist
        """
        now = now or store.now()
        queue = list(store.due_cards(deck_id, as_of=now, order=order))
        session = cls(store=store, deck_id=deck_id, queue=queue, start_time=now)
        logger.info(f"Started study session {session.session_id} on deck {deck_id}: {len(queue)} due card(s)")
        if not queue:
            session.finish(now)
        return session

    @property
    def current_card(self) -> Optional[Card]:
        return self.queue[0] if self.queue else None

    @property
    def remaining(self) -> int:
        return len(self.queue)

    @property
    def is_finished(self) -> bool:
        return self.end_time is not None

    @property
    def accuracy(self) -> int:
        """Percent of answers rated as successful recalls."""
        return percent(self.correct_answers, self.cards_studied)

    def answer(self, quality: int) -> ReviewOutcome:
        """
        Rate the current card and move on to the next one.

        The session finishes automatically after the last card.

        Raises:
            InvalidInputError: If the session has no current card or quality is invalid
        """
        card = self.current_card
        if card is None or self.is_finished:
            raise InvalidInputError("No card left to answer in this session")

        outcome = self.store.review_card(self.deck_id, card.id, quality)
        outcome.event["session_id"] = self.session_id
        outcome.event["session_position"] = self.cards_studied
        self.events.append(outcome.event)

        self.queue.pop(0)
        self.cards_studied += 1
        if quality >= PASS_THRESHOLD:
            self.correct_answers += 1

        if not self.queue:
            self.finish()
        return outcome

    def finish(self, now: Optional[datetime] = None) -> None:
        """End the session (idempotent)."""
        if self.end_time is not None:
            return
        self.end_time = now or self.store.now()
        logger.info(
            f"Finished study session {self.session_id}: "
            f"{self.correct_answers}/{self.cards_studied} correct"
        )
