"""
Scheduler - SM-2 Algorithm Logic

Pure SM-2 scheduling and state updates (no storage, no clock reads unless
the caller omits a timestamp).

Main workflow:
1. Validate the quality rating
2. Compute the new interval, ease factor and repetition count
3. Combine the interval with "now" to get the next due time
4. Return the updated card + event data dict

This module handles ONLY the algorithm logic.
Persistence is handled by the database module.
"""

from __future__ import annotations
import math
from dataclasses import replace
from datetime import datetime, timedelta
from typing import NamedTuple, Optional, Tuple

from flashdeck.exceptions import InvalidInputError
from flashdeck.sm2.card_state import LATEST_REVIEW_AT, Card, utc_now
from flashdeck.sm2.constants import (
    FAILURE_INTERVAL_DAYS,
    FIRST_INTERVAL_DAYS,
    MAX_INTERVAL_DAYS,
    MIN_EASE_FACTOR,
    PASS_THRESHOLD,
    QUALITY_MAX,
    QUALITY_MIN,
    SECOND_INTERVAL_DAYS,
)


class ReviewResult(NamedTuple):
    """Output of a single SM-2 step."""
    new_interval: int
    new_ease_factor: float
    new_repetitions: int


def validate_quality(quality: int) -> int:
    """
    Check that quality is an integer rating in [0, 5].

    Raises:
        InvalidInputError: If quality is not an int or is out of range
    """
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidInputError(f"quality must be an integer, got {quality!r}")
    if quality < QUALITY_MIN or quality > QUALITY_MAX:
        raise InvalidInputError(
            f"quality must be between {QUALITY_MIN} and {QUALITY_MAX}, got {quality}"
        )
    return int(quality)


def update_ease_factor(ease_factor: float, quality: int) -> float:
    """
    Classic SM-2 ease update, applied on success and failure alike.

    Formula:
        EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))

    Clamped below at 1.3. There is no upper bound.
    """
    miss = QUALITY_MAX - quality
    new_ease_factor = ease_factor + (0.1 - miss * (0.08 + miss * 0.02))
    if new_ease_factor < MIN_EASE_FACTOR:
        new_ease_factor = MIN_EASE_FACTOR
    return new_ease_factor


def _round_half_up(value: float) -> int:
    # round() would use banker's rounding: 2.5 -> 2
    return int(math.floor(value + 0.5))


def compute_next_state(
    quality: int,
    repetitions: int,
    ease_factor: float,
    interval_days: int
) -> ReviewResult:
    """
    Compute the next SM-2 state for a card.

    Success (quality >= 3):
        - repetitions + 1
        - interval 1 on the first success, 6 on the second,
          then round(interval_days * ease_factor) using the ease factor
          from before this review, capped at MAX_INTERVAL_DAYS

    Failure (quality < 3):
        - repetitions reset to 0, interval reset to 1

    The ease factor update applies in both cases.

    Args:
        quality: Rating 0-5
        repetitions: Consecutive successful reviews so far
        ease_factor: Current ease factor
        interval_days: Current interval in days

    Returns:
        ReviewResult(new_interval, new_ease_factor, new_repetitions)
    """
    quality = validate_quality(quality)

    if quality >= PASS_THRESHOLD:
        if repetitions == 0:
            new_interval = FIRST_INTERVAL_DAYS
        elif repetitions == 1:
            new_interval = SECOND_INTERVAL_DAYS
        else:
            new_interval = min(_round_half_up(interval_days * ease_factor), MAX_INTERVAL_DAYS)
        new_repetitions = repetitions + 1
    else:
        new_interval = FAILURE_INTERVAL_DAYS
        new_repetitions = 0

    new_ease_factor = update_ease_factor(ease_factor, quality)

    return ReviewResult(new_interval, new_ease_factor, new_repetitions)


def next_review_at(now: datetime, interval_days: int) -> datetime:
    """
    Due time for a card reviewed at `now` with the given interval.

    Intervals keep growing with every successful review, so a long enough
    run of them passes the last representable date. Such schedules are
    clamped to LATEST_REVIEW_AT instead of raising.
    """
    try:
        return now + timedelta(days=interval_days)
    except OverflowError:
        return LATEST_REVIEW_AT


def process_review(
    card: Card,
    quality: int,
    timestamp: Optional[datetime] = None
) -> Tuple[Card, dict]:
    """
    Process a review and return the updated card + event data.

    The input card is not modified; a new Card is returned with the
    scheduling fields written back and its version bumped.

    Args:
        card: Card being reviewed
        quality: Rating 0-5
        timestamp: Review timestamp (defaults to now)

    Returns:
        Tuple of (updated_card, event_data_dict)
        event_data_dict is ready to pass to database.batch_log_review_events()
    """
    if timestamp is None:
        timestamp = utc_now()

    result = compute_next_state(
        quality,
        card.repetitions,
        card.ease_factor,
        card.interval_days,
    )

    updated = replace(
        card,
        interval_days=result.new_interval,
        ease_factor=result.new_ease_factor,
        repetitions=result.new_repetitions,
        next_review_at=next_review_at(timestamp, result.new_interval),
        last_reviewed_at=timestamp,
        version=card.version + 1,
    )

    event_data = {
        'card_id': card.id,
        'timestamp': timestamp,
        'quality': int(quality),
        'interval_before': card.interval_days,
        'ease_factor_before': card.ease_factor,
        'repetitions_before': card.repetitions,
        'interval_after': updated.interval_days,
        'ease_factor_after': updated.ease_factor,
        'repetitions_after': updated.repetitions,
        'next_review_at': updated.next_review_at,
        'deck_id': None,  # Will be set by caller
    }

    return updated, event_data
