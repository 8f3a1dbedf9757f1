"""
Environment-driven configuration.

Values are read from the process environment, with a local .env file
loaded first when present.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv

# Load environment
load_dotenv()

# Configuration
DEFAULT_DATABASE_URL = "sqlite:///data/flashdeck.db"
PROD_DB_NAME = "flashdeck"
TEST_DB_NAME = "test_flashdeck"
DEFAULT_MONGO_DB_NAME = "flashdeck"
MONGO_COLLECTION_NAME = "collections"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_database_url() -> str:
    """
    Get the SQLAlchemy database URL from environment variables.

    Falls back to a local SQLite file when DATABASE_URL is not set.
    In test mode the production database name is swapped for the test one,
    so 'postgresql://.../flashdeck' becomes 'postgresql://.../test_flashdeck'.

    Returns:
        Database URL
    """
    url = os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
    if is_test_mode() and TEST_DB_NAME not in url:
        url = url.replace(PROD_DB_NAME, TEST_DB_NAME)
    return url


def get_mongo_uri() -> str:
    """
    Get the MongoDB connection string.

    Raises:
        ValueError: If MONGO_URI is not set
    """
    mongo_uri = os.getenv("MONGO_URI")
    if not mongo_uri:
        raise ValueError("MONGO_URI not found in environment variables")
    return mongo_uri


def get_mongo_db_name() -> str:
    """Database holding stored deck collections."""
    name = os.getenv("MONGO_DB_NAME", DEFAULT_MONGO_DB_NAME)
    if is_test_mode():
        return f"test_{name}"
    return name


def get_default_collection_key() -> str:
    """Get default key under which a learner's decks are persisted."""
    return os.getenv("DEFAULT_COLLECTION_KEY", "default")


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for scripts and host applications.

    Args:
        level: Level name; defaults to FLASHDECK_LOG_LEVEL or INFO
    """
    level_name = (level or os.getenv("FLASHDECK_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
