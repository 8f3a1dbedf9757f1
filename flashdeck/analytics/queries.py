"""
Data-loading helpers for analytics.
"""

from __future__ import annotations

from typing import Iterable, Optional

import pandas as pd

from flashdeck.analytics.constants import CARD_COLUMNS
from flashdeck.sm2.card_state import Card, Deck


def load_cards_df(cards: Iterable[Card], deck_id: Optional[str] = None) -> pd.DataFrame:
    """
    Load card scheduling fields into a dataframe (one row per card).

    next_review_at stays a column of Python datetimes: due times can lie far
    beyond the range of nanosecond pandas timestamps.
    """
    cards = list(cards)
    if not cards:
        return pd.DataFrame(columns=CARD_COLUMNS)

    rows = [
        {
            "deck_id": deck_id,
            "card_id": card.id,
            "ease_factor": card.ease_factor,
            "interval_days": card.interval_days,
            "repetitions": card.repetitions,
            "last_reviewed_at": card.last_reviewed_at,
        }
        for card in cards
    ]
    df = pd.DataFrame(rows)
    df["next_review_at"] = pd.Series(
        [card.next_review_at for card in cards], index=df.index, dtype=object
    )
    df["last_reviewed_at"] = pd.to_datetime(df["last_reviewed_at"], utc=True)
    return df[CARD_COLUMNS]


def load_decks_cards_df(decks: Iterable[Deck]) -> pd.DataFrame:
    """
    Load every card from every deck, tagged with its deck_id.
    """
    frames = [load_cards_df(deck.cards, deck_id=deck.id) for deck in decks if deck.cards]
    if not frames:
        return pd.DataFrame(columns=CARD_COLUMNS)
    return pd.concat(frames, ignore_index=True)
