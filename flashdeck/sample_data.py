"""
Sample decks for a first launch.

Seeding is an explicit bootstrap step; the store itself always starts empty.
"""

from __future__ import annotations

from flashdeck.sm2.constants import CardDifficulty, DeckLanguage
from flashdeck.store import DeckStore


SAMPLE_DECKS = [
    {
        "name": "Basic Slovak Vocabulary",
        "description": "Essential Slovak words for beginners",
        "language": DeckLanguage.SLOVAK,
        "category": "Language Learning",
        "cards": [
            ("Hello", "Ahoj", CardDifficulty.EASY),
            ("Thank you", "Ďakujem", CardDifficulty.MEDIUM),
            ("Good morning", "Dobré ráno", CardDifficulty.MEDIUM),
        ],
    },
    {
        "name": "English Grammar",
        "description": "Common English grammar rules",
        "language": DeckLanguage.ENGLISH,
        "category": "Grammar",
        "cards": [
            ('Past tense of "go"', "went", CardDifficulty.EASY),
            ('Plural of "child"', "children", CardDifficulty.MEDIUM),
        ],
    },
]


def seed_sample_decks(store: DeckStore) -> list[str]:
    """
    Create the sample decks in the given store.

    Returns:
        Ids of the created decks
    """
    deck_ids = []
    for sample in SAMPLE_DECKS:
        deck_id = store.create_deck(
            sample["name"],
            sample["description"],
            sample["language"],
            sample["category"],
        )
        for front, back, difficulty in sample["cards"]:
            store.add_card(deck_id, front, back, difficulty=difficulty)
        deck_ids.append(deck_id)
    return deck_ids
