"""
Service layer to assemble progress summaries.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from flashdeck.analytics.constants import RECENT_ACTIVITY_LIMIT, STREAK_DAYS_UNTRACKED
from flashdeck.analytics.metrics import (
    compute_learned_count,
    compute_mastered_count,
    compute_new_count,
    compute_reviewing_count,
    compute_studied_count,
    compute_total,
    percent,
)
from flashdeck.analytics.queries import load_cards_df
from flashdeck.analytics.types import DeckProgress, Progress, RecentActivity
from flashdeck.sm2.card_state import Card, Deck, utc_now


def summarize(cards: Iterable[Card], now: Optional[datetime] = None) -> Progress:
    """
    Build the progress summary for a card population.

    Always recomputed from the cards themselves; nothing is cached.
    """
    if now is None:
        now = utc_now()

    cards_df = load_cards_df(cards)

    return Progress(
        total_cards=compute_total(cards_df),
        cards_learned=compute_learned_count(cards_df),
        cards_reviewing=compute_reviewing_count(cards_df, now),
        cards_new=compute_new_count(cards_df),
        streak_days=STREAK_DAYS_UNTRACKED,
    )


def summarize_deck(deck: Deck) -> DeckProgress:
    """
    Build the per-deck progress row.
    """
    cards_df = load_cards_df(deck.cards, deck_id=deck.id)
    studied = compute_studied_count(cards_df)
    mastered = compute_mastered_count(cards_df)

    return DeckProgress(
        deck_id=deck.id,
        total_cards=compute_total(cards_df),
        studied_cards=studied,
        mastered_cards=mastered,
        accuracy=percent(mastered, studied),
    )


def recent_activity(
    decks: Iterable[Deck],
    limit: int = RECENT_ACTIVITY_LIMIT
) -> list[RecentActivity]:
    """
    Most recently reviewed cards across all decks, newest first.
    """
    reviewed = [
        RecentActivity(
            deck_id=deck.id,
            deck_name=deck.name,
            card_id=card.id,
            card_front=card.front,
            reviewed_at=card.last_reviewed_at,
        )
        for deck in decks
        for card in deck.cards
        if card.last_reviewed_at is not None
    ]
    reviewed.sort(key=lambda activity: activity.reviewed_at, reverse=True)
    return reviewed[:limit]
