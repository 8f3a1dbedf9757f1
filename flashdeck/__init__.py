"""
flashdeck - flashcard decks with SM-2 spaced repetition scheduling.

Quick start:
    from flashdeck import DeckStore

    store = DeckStore()
    deck_id = store.create_deck("Basics", "First words", "sk", "Language Learning")
    card_id = store.add_card(deck_id, "Hello", "Ahoj")

    for card in store.due_cards(deck_id):
        store.review_card(deck_id, card.id, quality=4)

    print(store.summarize())
"""

from flashdeck.exceptions import (
    FlashdeckError,
    NotFoundError,
    InvalidInputError,
    ConflictError,
)
from flashdeck.store import DeckStore, ReviewOutcome
from flashdeck.study_session import StudySession

__all__ = [
    "DeckStore",
    "ReviewOutcome",
    "StudySession",
    "FlashdeckError",
    "NotFoundError",
    "InvalidInputError",
    "ConflictError",
]
