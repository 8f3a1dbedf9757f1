"""
Tests for environment-driven configuration.
"""

import logging

from flashdeck import config


def test_database_url_default(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("TEST_MODE", raising=False)
    assert config.get_database_url() == config.DEFAULT_DATABASE_URL


def test_database_url_test_mode(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://user:pw@localhost/flashdeck")
    monkeypatch.setenv("TEST_MODE", "true")
    assert config.get_database_url() == "postgresql://user:pw@localhost/test_flashdeck"


def test_mongo_db_name_test_mode(monkeypatch):
    monkeypatch.setenv("MONGO_DB_NAME", "decks")
    monkeypatch.setenv("TEST_MODE", "true")
    assert config.get_mongo_db_name() == "test_decks"


def test_default_collection_key(monkeypatch):
    monkeypatch.delenv("DEFAULT_COLLECTION_KEY", raising=False)
    assert config.get_default_collection_key() == "default"
    monkeypatch.setenv("DEFAULT_COLLECTION_KEY", "alice")
    assert config.get_default_collection_key() == "alice"


def test_configure_logging_level(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setenv("FLASHDECK_LOG_LEVEL", "debug")

    config.configure_logging()

    assert calls[0]["level"] == logging.DEBUG
