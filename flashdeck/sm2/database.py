"""
Database - Deck Collection I/O Operations

Handles all database operations for decks, cards and review events.
Uses SQLAlchemy ORM; Postgres in production, SQLite locally and in tests.

This module handles ONLY database I/O.
Algorithm logic is handled by the scheduler module.
"""

from __future__ import annotations
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from sqlalchemy import create_engine, delete
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from flashdeck import config
from flashdeck.sm2.card_state import Card, Deck
from flashdeck.sm2.constants import CardDifficulty, DeckLanguage
from flashdeck.sm2.models import Base, CardRecord, DeckRecord, ReviewEvent as ReviewEventModel

logger = logging.getLogger(__name__)

# One engine per URL, reused across calls
_engines: dict[str, Engine] = {}


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalise a timestamp to aware UTC.

    SQLite hands back naive datetimes; everything is written in UTC, so a
    naive value read back is UTC wall time.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Get SQLAlchemy engine for database connection.

    Server databases use connection pooling; in-memory SQLite shares a
    single connection so every session sees the same data.

    Args:
        database_url: Override for config.get_database_url()

    Returns:
        SQLAlchemy Engine instance
    """
    db_url = database_url or config.get_database_url()
    engine = _engines.get(db_url)
    if engine is not None:
        return engine

    if db_url.startswith("sqlite"):
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            engine = create_engine(
                db_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                echo=False
            )
        else:
            database = make_url(db_url).database
            if database:
                Path(database).parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(db_url, echo=False)
    else:
        engine = create_engine(
            db_url,
            pool_size=5,           # Keep 5 connections open
            max_overflow=10,       # Allow up to 10 extra connections
            pool_pre_ping=True,    # Verify connections before use
            echo=False
        )

    _engines[db_url] = engine
    return engine


def get_session(database_url: Optional[str] = None) -> Session:
    """
    Get a SQLAlchemy session for database operations.

    Returns:
        SQLAlchemy Session instance
    """
    engine = get_engine(database_url)
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    return SessionLocal()


def init_db(database_url: Optional[str] = None):
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times - only creates missing tables.
    """
    engine = get_engine(database_url)
    Base.metadata.create_all(engine)


def reset_db(database_url: Optional[str] = None):
    """
    DANGEROUS: Delete all data and recreate tables.

    Only use this for testing or when you want to start fresh.
    All decks, cards and review history will be lost!
    """
    engine = get_engine(database_url)
    Base.metadata.drop_all(engine)
    logger.warning(f"All flashdeck tables dropped ({engine.url.render_as_string(hide_password=True)})")

    # Recreate tables
    init_db(database_url)


def _deck_to_record(collection_key: str, deck: Deck, position: int) -> DeckRecord:
    return DeckRecord(
        collection_key=collection_key,
        deck_id=deck.id,
        name=deck.name,
        description=deck.description,
        language=DeckLanguage(deck.language).value,
        category=deck.category,
        created_at=_as_utc(deck.created_at),
        position=position,
    )


def _card_to_record(collection_key: str, deck_id: str, card: Card, position: int) -> CardRecord:
    return CardRecord(
        collection_key=collection_key,
        card_id=card.id,
        deck_id=deck_id,
        front=card.front,
        back=card.back,
        difficulty=CardDifficulty(card.difficulty).value,
        ease_factor=card.ease_factor,
        interval_days=card.interval_days,
        repetitions=card.repetitions,
        next_review_at=_as_utc(card.next_review_at),
        created_at=_as_utc(card.created_at),
        last_reviewed_at=_as_utc(card.last_reviewed_at),
        version=card.version,
        position=position,
    )


def _record_to_card(db_card: CardRecord) -> Card:
    return Card(
        id=db_card.card_id,
        front=db_card.front,
        back=db_card.back,
        ease_factor=db_card.ease_factor,
        interval_days=db_card.interval_days,
        repetitions=db_card.repetitions,
        next_review_at=_as_utc(db_card.next_review_at),
        created_at=_as_utc(db_card.created_at),
        last_reviewed_at=_as_utc(db_card.last_reviewed_at),
        difficulty=CardDifficulty(db_card.difficulty),
        version=db_card.version,
    )


def save_collection(
    collection_key: str,
    decks: Iterable[Deck],
    database_url: Optional[str] = None
):
    """
    Save a whole deck collection under collection_key (replaces previous data).

    Decks and cards are written in a single transaction, so a failed save
    leaves the previously stored collection untouched.

    Args:
        collection_key: Caller-supplied storage key
        decks: Decks to persist, in display order
        database_url: Optional database override
    """
    decks = list(decks)
    session = get_session(database_url)
    try:
        session.execute(delete(CardRecord).where(CardRecord.collection_key == collection_key))
        session.execute(delete(DeckRecord).where(DeckRecord.collection_key == collection_key))

        card_count = 0
        for deck_position, deck in enumerate(decks):
            session.add(_deck_to_record(collection_key, deck, deck_position))
            for card_position, card in enumerate(deck.cards):
                session.add(_card_to_record(collection_key, deck.id, card, card_position))
                card_count += 1

        session.commit()
        logger.info(f"Saved collection {collection_key!r}: {len(decks)} deck(s), {card_count} card(s)")
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def load_collection(
    collection_key: str,
    database_url: Optional[str] = None
) -> list[Deck]:
    """
    Load the deck collection stored under collection_key.

    Args:
        collection_key: Caller-supplied storage key
        database_url: Optional database override

    Returns:
        Decks in their saved order (empty list if nothing is stored)
    """
    session = get_session(database_url)
    try:
        db_decks = session.query(DeckRecord).filter(
            DeckRecord.collection_key == collection_key
        ).order_by(DeckRecord.position).all()

        db_cards = session.query(CardRecord).filter(
            CardRecord.collection_key == collection_key
        ).order_by(CardRecord.deck_id, CardRecord.position).all()

        cards_by_deck: dict[str, list[Card]] = {}
        for db_card in db_cards:
            cards_by_deck.setdefault(db_card.deck_id, []).append(_record_to_card(db_card))

        decks = [
            Deck(
                id=db_deck.deck_id,
                name=db_deck.name,
                description=db_deck.description,
                language=DeckLanguage(db_deck.language),
                category=db_deck.category,
                created_at=_as_utc(db_deck.created_at),
                cards=tuple(cards_by_deck.get(db_deck.deck_id, [])),
            )
            for db_deck in db_decks
        ]

        logger.info(f"Loaded collection {collection_key!r}: {len(decks)} deck(s), {len(db_cards)} card(s)")
        return decks
    finally:
        session.close()


def delete_collection(collection_key: str, database_url: Optional[str] = None) -> bool:
    """
    Delete every deck, card and review event stored under collection_key.

    Returns:
        True if a collection existed
    """
    session = get_session(database_url)
    try:
        session.execute(delete(CardRecord).where(CardRecord.collection_key == collection_key))
        deleted = session.execute(
            delete(DeckRecord).where(DeckRecord.collection_key == collection_key)
        ).rowcount
        session.execute(
            delete(ReviewEventModel).where(ReviewEventModel.collection_key == collection_key)
        )
        session.commit()
        return bool(deleted)
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def batch_log_review_events(
    collection_key: str,
    events: list[dict],
    database_url: Optional[str] = None
):
    """
    Log multiple review events in a single database transaction.

    Args:
        collection_key: Storage key the reviewed cards belong to
        events: Event dicts as returned by scheduler.process_review, with keys:
            - deck_id, card_id, timestamp, quality
            - interval_before, ease_factor_before, repetitions_before
            - interval_after, ease_factor_after, repetitions_after, next_review_at
            - session_id, session_position (optional)
    """
    if not events:
        return

    session = get_session(database_url)
    try:
        for event in events:
            session.add(ReviewEventModel(
                collection_key=collection_key,
                deck_id=event.get('deck_id'),
                card_id=event['card_id'],
                timestamp=_as_utc(event['timestamp']),
                quality=int(event['quality']),
                interval_before=event['interval_before'],
                ease_factor_before=event['ease_factor_before'],
                repetitions_before=event['repetitions_before'],
                interval_after=event['interval_after'],
                ease_factor_after=event['ease_factor_after'],
                repetitions_after=event['repetitions_after'],
                next_review_at=_as_utc(event['next_review_at']),
                session_id=event.get('session_id'),
                session_position=event.get('session_position'),
            ))
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_recent_events(
    collection_key: str,
    limit: int = 10,
    database_url: Optional[str] = None
) -> list[dict]:
    """
    Get recent review events.

    Args:
        collection_key: Storage key to read events for
        limit: Maximum number of events to return

    Returns:
        List of recent events (newest first)
    """
    session = get_session(database_url)
    try:
        events = session.query(ReviewEventModel).filter(
            ReviewEventModel.collection_key == collection_key
        ).order_by(
            ReviewEventModel.timestamp.desc(),
            ReviewEventModel.id.desc()
        ).limit(limit).all()

        return [
            {
                "id": event.id,
                "deck_id": event.deck_id,
                "card_id": event.card_id,
                "timestamp": _as_utc(event.timestamp),
                "quality": event.quality,
                "interval_before": event.interval_before,
                "ease_factor_before": event.ease_factor_before,
                "repetitions_before": event.repetitions_before,
                "interval_after": event.interval_after,
                "ease_factor_after": event.ease_factor_after,
                "repetitions_after": event.repetitions_after,
                "next_review_at": _as_utc(event.next_review_at),
                "session_id": event.session_id,
                "session_position": event.session_position,
            }
            for event in events
        ]
    finally:
        session.close()
