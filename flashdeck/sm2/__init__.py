"""
SM-2 - SuperMemo 2 spaced repetition scheduler

Main API for card scheduling.

This package implements the classic SM-2 algorithm:
- Quality ratings 0-5, with 3 and above counting as a successful recall
- Fixed bootstrap intervals (1 day, then 6 days), then multiplicative growth
- Ease factor updated on every review and never allowed below 1.3

Quick start:
    from flashdeck import sm2

    # Pure calculation (no I/O)
    result = sm2.compute_next_state(quality=5, repetitions=0, ease_factor=2.5, interval_days=1)

    # Review a card record
    card, event_data = sm2.process_review(card, sm2.ReviewQuality.PERFECT)

    # Persist a collection
    sm2.init_db()
    sm2.save_collection("default", decks)
"""

# Core scheduler API (algorithm logic)
from flashdeck.sm2.scheduler import (
    ReviewResult,
    compute_next_state,
    next_review_at,
    process_review,
    update_ease_factor,
    validate_quality,
)

# Database API
from flashdeck.sm2.database import (
    init_db,
    reset_db,
    save_collection,
    load_collection,
    delete_collection,
    batch_log_review_events,
    get_recent_events,
)

# Constants and parameters
from flashdeck.sm2.constants import (
    ReviewQuality,
    DeckLanguage,
    CardDifficulty,
    HARD,
    GOOD,
    EASY,
    PASS_THRESHOLD,
    DEFAULT_EASE_FACTOR,
    MIN_EASE_FACTOR,
    LEARNED_EASE_FACTOR,
    LEARNED_INTERVAL_DAYS,
    MAX_INTERVAL_DAYS,
)

# Card state
from flashdeck.sm2.card_state import (
    Card,
    Deck,
    CardStatus,
    LATEST_REVIEW_AT,
    as_utc,
    classify_card,
    initialize_new_card,
    is_due,
    is_learned,
    is_reviewing,
)


__all__ = [
    # Core algorithm
    "ReviewResult",
    "compute_next_state",
    "next_review_at",
    "process_review",
    "update_ease_factor",
    "validate_quality",

    # Database operations
    "init_db",
    "reset_db",
    "save_collection",
    "load_collection",
    "delete_collection",
    "batch_log_review_events",
    "get_recent_events",

    # Enums
    "ReviewQuality",
    "DeckLanguage",
    "CardDifficulty",

    # Card state
    "Card",
    "Deck",
    "CardStatus",
    "LATEST_REVIEW_AT",
    "as_utc",
    "classify_card",
    "initialize_new_card",
    "is_due",
    "is_learned",
    "is_reviewing",

    # Parameters
    "HARD",
    "GOOD",
    "EASY",
    "PASS_THRESHOLD",
    "DEFAULT_EASE_FACTOR",
    "MIN_EASE_FACTOR",
    "LEARNED_EASE_FACTOR",
    "LEARNED_INTERVAL_DAYS",
    "MAX_INTERVAL_DAYS",
]
