"""
Analytics package exports.
"""

from flashdeck.analytics.service import recent_activity, summarize, summarize_deck
from flashdeck.analytics.types import DeckProgress, Progress, RecentActivity

__all__ = [
    "summarize",
    "summarize_deck",
    "recent_activity",
    "Progress",
    "DeckProgress",
    "RecentActivity",
]
