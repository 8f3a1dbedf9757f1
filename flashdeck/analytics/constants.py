"""
Constants for progress summaries.
"""

from __future__ import annotations

from typing import Final


# Streak tracking needs a study-history log per day; until one exists the
# summary always reports zero.
STREAK_DAYS_UNTRACKED: Final[int] = 0

RECENT_ACTIVITY_LIMIT: Final[int] = 5

CARD_COLUMNS: Final[list[str]] = [
    "deck_id",
    "card_id",
    "ease_factor",
    "interval_days",
    "repetitions",
    "next_review_at",
    "last_reviewed_at",
]
