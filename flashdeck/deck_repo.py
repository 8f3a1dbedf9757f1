"""
MongoDB repository for deck collections.

Stores a learner's whole deck collection as one document keyed by the
caller-supplied collection key.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from pymongo import MongoClient
from pymongo.collection import Collection

from flashdeck import config
from flashdeck.schemas import CollectionSnapshot
from flashdeck.sm2.card_state import Deck

logger = logging.getLogger(__name__)

# Global connection pool (reused across requests)
_client: Optional[MongoClient] = None
_collection: Optional[Collection] = None


# ---- Connection Management ----

def get_collection() -> Collection:
    """
    Get a connection to the MongoDB deck-collections collection.

    Uses a persistent connection pool that's reused across calls.

    Returns:
        MongoDB collection object
    """
    global _client, _collection

    # Return cached collection if it exists
    if _collection is not None:
        return _collection

    _client = MongoClient(
        config.get_mongo_uri(),
        maxPoolSize=10,  # Connection pool size
        minPoolSize=1,   # Keep at least 1 connection alive
        maxIdleTimeMS=60000  # Keep connections alive for 60 seconds
    )
    db = _client[config.get_mongo_db_name()]
    _collection = db[config.MONGO_COLLECTION_NAME]

    return _collection


def close_connection() -> None:
    """Close the cached client, if any."""
    global _client, _collection
    if _client is not None:
        _client.close()
    _client = None
    _collection = None


# ---- Collection Documents ----

def save_collection(
    collection_key: str,
    decks: Iterable[Deck],
    collection: Optional[Collection] = None
) -> None:
    """
    Save (insert or replace) the deck collection stored under collection_key.

    Args:
        collection_key: Caller-supplied storage key
        decks: Decks to persist
        collection: Optional collection override (defaults to get_collection())
    """
    collection = collection if collection is not None else get_collection()

    snapshot = CollectionSnapshot.from_decks(decks)
    document = snapshot.model_dump(mode="json")
    document["_id"] = collection_key

    collection.replace_one({"_id": collection_key}, document, upsert=True)
    logger.info(f"Saved collection {collection_key!r} to MongoDB: {len(snapshot.decks)} deck(s)")


def load_collection(
    collection_key: str,
    collection: Optional[Collection] = None
) -> list[Deck]:
    """
    Load the deck collection stored under collection_key.

    Returns:
        Decks in their saved order, or an empty list if nothing is stored
    """
    collection = collection if collection is not None else get_collection()

    document = collection.find_one({"_id": collection_key})
    if document is None:
        return []

    document = dict(document)
    document.pop("_id", None)
    return CollectionSnapshot.model_validate(document).to_decks()


def get_saved_at(
    collection_key: str,
    collection: Optional[Collection] = None
) -> Optional[datetime]:
    """
    When the collection under collection_key was last saved.

    Returns:
        Timestamp in UTC, or None if nothing is stored
    """
    collection = collection if collection is not None else get_collection()

    document = collection.find_one({"_id": collection_key}, {"saved_at": 1})
    if document is None or not document.get("saved_at"):
        return None

    saved_at = document["saved_at"]
    if isinstance(saved_at, str):
        saved_at = datetime.fromisoformat(saved_at.replace("Z", "+00:00"))
    if saved_at.tzinfo is None:
        saved_at = saved_at.replace(tzinfo=timezone.utc)
    return saved_at


def delete_collection(
    collection_key: str,
    collection: Optional[Collection] = None
) -> bool:
    """
    Delete the collection stored under collection_key.

    Returns:
        True if a document was deleted
    """
    collection = collection if collection is not None else get_collection()
    result = collection.delete_one({"_id": collection_key})
    return result.deleted_count > 0


def list_collection_keys(collection: Optional[Collection] = None) -> list[str]:
    """All stored collection keys."""
    collection = collection if collection is not None else get_collection()
    return sorted(collection.distinct("_id"))
