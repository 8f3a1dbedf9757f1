"""
Types for progress summaries.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from flashdeck.analytics.metrics import percent


@dataclass(frozen=True)
class Progress:
    """
    Study progress over the whole card population.

    cards_reviewing and cards_learned overlap: a learned card that is due
    again is counted in both.
    """
    total_cards: int
    cards_learned: int
    cards_reviewing: int
    cards_new: int
    streak_days: int = 0

    @property
    def mastery_percentage(self) -> int:
        """Share of cards classified as learned, as a whole percent."""
        return percent(self.cards_learned, self.total_cards)


@dataclass(frozen=True)
class DeckProgress:
    """
    Per-deck progress as shown on the progress screen.
    """
    deck_id: str
    total_cards: int
    studied_cards: int
    mastered_cards: int
    accuracy: int  # Percent of studied cards that are mastered


@dataclass(frozen=True)
class RecentActivity:
    """
    One recently reviewed card.
    """
    deck_id: str
    deck_name: str
    card_id: str
    card_front: str
    reviewed_at: datetime
