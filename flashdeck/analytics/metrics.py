"""
Metric computations for progress summaries.
"""

from __future__ import annotations

import math
from datetime import datetime

import pandas as pd

from flashdeck.sm2.card_state import as_utc
from flashdeck.sm2.constants import LEARNED_EASE_FACTOR, LEARNED_INTERVAL_DAYS


def percent(part: int, whole: int) -> int:
    """
    Whole-number percentage, rounding halves up. Zero when whole is zero.
    """
    if whole <= 0:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))


def compute_total(cards_df: pd.DataFrame) -> int:
    return int(len(cards_df))


def compute_new_count(cards_df: pd.DataFrame) -> int:
    """
    Cards with no successful repetition since their last reset.
    """
    if cards_df.empty:
        return 0
    return int((cards_df["repetitions"] == 0).sum())


def learned_mask(cards_df: pd.DataFrame) -> pd.Series:
    """
    Boolean mask: repetitions > 0, ease factor > 2.5, interval > 7 days.
    """
    return (
        (cards_df["repetitions"] > 0)
        & (cards_df["ease_factor"] > LEARNED_EASE_FACTOR)
        & (cards_df["interval_days"] > LEARNED_INTERVAL_DAYS)
    )


def compute_learned_count(cards_df: pd.DataFrame) -> int:
    if cards_df.empty:
        return 0
    return int(learned_mask(cards_df).sum())


def compute_reviewing_count(cards_df: pd.DataFrame, now: datetime) -> int:
    """
    Previously recalled cards that are due again at `now` (naive is taken as UTC).
    """
    if cards_df.empty:
        return 0
    now = as_utc(now)
    due = cards_df["next_review_at"].map(lambda due_at: due_at <= now).astype(bool)
    return int(((cards_df["repetitions"] > 0) & due).sum())


def compute_studied_count(cards_df: pd.DataFrame) -> int:
    """
    Cards reviewed at least once.
    """
    if cards_df.empty:
        return 0
    return int(cards_df["last_reviewed_at"].notna().sum())


def compute_mastered_count(cards_df: pd.DataFrame) -> int:
    """
    Deck-screen mastery: ease factor > 2.5 and interval > 7 days.

    Unlike compute_learned_count this does not look at repetitions.
    """
    if cards_df.empty:
        return 0
    mastered = (
        (cards_df["ease_factor"] > LEARNED_EASE_FACTOR)
        & (cards_df["interval_days"] > LEARNED_INTERVAL_DAYS)
    )
    return int(mastered.sum())
