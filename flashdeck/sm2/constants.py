"""
SM-2 Constants and Parameters

All configurable parameters for the SM-2 scheduler in one place.
"""

from enum import Enum, IntEnum


# ---- Quality Ratings ----

class ReviewQuality(IntEnum):
    """Learner's rating of a recall attempt (0-5)."""
    BLACKOUT = 0           # No recall at all
    INCORRECT = 1          # Wrong, answer recognised once shown
    INCORRECT_FAMILIAR = 2 # Wrong, but the answer felt easy to recall
    DIFFICULT = 3          # Correct with serious difficulty
    HESITANT = 4           # Correct after hesitation
    PERFECT = 5            # Correct, instant recall


# Presets used by the three study buttons
HARD = ReviewQuality.INCORRECT
GOOD = ReviewQuality.DIFFICULT
EASY = ReviewQuality.PERFECT

QUALITY_MIN = 0
QUALITY_MAX = 5
PASS_THRESHOLD = 3  # quality >= this counts as a successful recall


# ---- Ease Factor ----

DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3


# ---- Interval Bootstrap (days) ----

DEFAULT_INTERVAL_DAYS = 1
FIRST_INTERVAL_DAYS = 1   # After the first successful repetition
SECOND_INTERVAL_DAYS = 6  # After the second successful repetition
FAILURE_INTERVAL_DAYS = 1

# Widest span a calendar date can express (date.max - date.min); longer
# intervals could not be scheduled anyway
MAX_INTERVAL_DAYS = 3_652_058


# ---- Mastery Classification ----
# A card is "learned" once both thresholds are strictly exceeded

LEARNED_EASE_FACTOR = 2.5
LEARNED_INTERVAL_DAYS = 7


# ---- Deck Metadata ----

class DeckLanguage(str, Enum):
    """Supported deck languages."""
    SLOVAK = "sk"
    ENGLISH = "en"


class CardDifficulty(str, Enum):
    """Descriptive difficulty label shown with a card (not used for scheduling)."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
