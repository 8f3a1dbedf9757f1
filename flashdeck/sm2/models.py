"""
SQLAlchemy ORM Models for Deck Persistence

Defines DeckRecord, CardRecord and ReviewEvent models.
Every row is scoped by collection_key, the caller-supplied identifier a
learner's whole deck collection is saved under.
"""

from sqlalchemy import Column, DateTime, Float, ForeignKeyConstraint, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class DeckRecord(Base):
    """
    Persistent deck metadata.
    """
    __tablename__ = 'decks'

    collection_key = Column(String(255), primary_key=True, nullable=False)
    deck_id = Column(String(64), primary_key=True, nullable=False)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    language = Column(String(8), nullable=False)
    category = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    # Keeps deck order stable across save/load
    position = Column(Integer, nullable=False)

    def __repr__(self):
        return f"<DeckRecord({self.collection_key}, {self.deck_id}, {self.name!r})>"


class CardRecord(Base):
    """
    Persistent SM-2 state for a single card.
    """
    __tablename__ = 'cards'
    __table_args__ = (
        ForeignKeyConstraint(
            ['collection_key', 'deck_id'],
            ['decks.collection_key', 'decks.deck_id'],
            ondelete='CASCADE',
        ),
    )

    collection_key = Column(String(255), primary_key=True, nullable=False)
    card_id = Column(String(64), primary_key=True, nullable=False)
    deck_id = Column(String(64), nullable=False)

    front = Column(Text, nullable=False)
    back = Column(Text, nullable=False)
    difficulty = Column(String(16), nullable=False, default='medium')

    # SM-2 parameters
    ease_factor = Column(Float, nullable=False)
    interval_days = Column(Integer, nullable=False)
    repetitions = Column(Integer, nullable=False)

    # Timing
    next_review_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    last_reviewed_at = Column(DateTime(timezone=True), nullable=True)

    version = Column(Integer, nullable=False, default=0)

    # Insertion order within the deck
    position = Column(Integer, nullable=False)

    def __repr__(self):
        return f"<CardRecord({self.collection_key}, {self.deck_id}/{self.card_id})>"


class ReviewEvent(Base):
    """
    Log entry for a single review of a card.

    Captures SM-2 state before/after the review.
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)

    collection_key = Column(String(255), nullable=False)
    deck_id = Column(String(64), nullable=True)
    card_id = Column(String(64), nullable=False)

    timestamp = Column(DateTime(timezone=True), nullable=False)
    quality = Column(Integer, nullable=False)  # 0-5

    # State before review
    interval_before = Column(Integer, nullable=False)
    ease_factor_before = Column(Float, nullable=False)
    repetitions_before = Column(Integer, nullable=False)

    # State after review
    interval_after = Column(Integer, nullable=False)
    ease_factor_after = Column(Float, nullable=False)
    repetitions_after = Column(Integer, nullable=False)
    next_review_at = Column(DateTime(timezone=True), nullable=False)

    # Session context (optional)
    session_id = Column(String(64), nullable=True)
    session_position = Column(Integer, nullable=True)

    def __repr__(self):
        return f"<ReviewEvent(id={self.id}, {self.card_id}, quality={self.quality})>"
