"""
Tests for JSON snapshots of deck collections.
"""

import json
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from flashdeck.schemas import CardSchema, CollectionSnapshot, dump_collection, load_collection
from flashdeck.sm2.card_state import LATEST_REVIEW_AT, initialize_new_card
from flashdeck.sm2.constants import MAX_INTERVAL_DAYS, CardDifficulty
from tests.conftest import T0


def test_dump_and_load_collection(populated_store):
    store, slovak, _ = populated_store
    store.review_card(slovak, store.get_deck(slovak).cards[2].id, 3)

    payload = dump_collection(store.decks)

    assert load_collection(payload) == list(store.decks)


def test_snapshot_shape(populated_store):
    store, slovak, _ = populated_store

    document = json.loads(dump_collection(store.decks))

    assert document["schema_version"] == 1
    assert "saved_at" in document
    assert [deck["id"] for deck in document["decks"]][0] == slovak
    first_card = document["decks"][0]["cards"][0]
    assert first_card["front"] == "Hello"
    assert first_card["difficulty"] == "medium"
    assert first_card["last_reviewed_at"] is None


def test_load_accepts_bytes(populated_store):
    store, _, _ = populated_store
    payload = dump_collection(store.decks).encode("utf-8")
    assert len(load_collection(payload)) == 2


def test_naive_timestamps_read_as_utc():
    card = CardSchema(
        id="c1", front="Hello", back="Ahoj",
        next_review_at=datetime(2024, 3, 2, 9, 0),
        created_at="2024-03-01T09:00:00",
    ).to_card()

    assert card.next_review_at == T0 + timedelta(days=1)
    assert card.created_at.tzinfo == timezone.utc
    assert card.difficulty is CardDifficulty.MEDIUM


def test_offset_timestamps_converted_to_utc():
    card = CardSchema(
        id="c1", front="Hello", back="Ahoj",
        next_review_at="2024-03-01T11:00:00+02:00",
        created_at=T0,
    ).to_card()

    assert card.next_review_at == T0
    assert card.next_review_at.utcoffset() == timedelta(0)


@pytest.mark.parametrize("field,value", [
    ("ease_factor", 1.2),
    ("interval_days", -1),
    ("repetitions", -3),
    ("difficulty", "impossible"),
])
def test_invalid_card_state_rejected(field, value):
    data = {"id": "c1", "front": "f", "back": "b", "next_review_at": T0, "created_at": T0, field: value}
    with pytest.raises(ValidationError):
        CardSchema(**data)


def test_malformed_payload_rejected():
    with pytest.raises(ValidationError):
        load_collection('{"decks": [{"id": "d1"}]}')


def test_empty_snapshot():
    assert CollectionSnapshot.from_decks([]).to_decks() == []
    assert load_collection("{}") == []


def test_latest_due_time_survives_json():
    card = replace(
        initialize_new_card("c1", "Hello", "Ahoj", now=T0),
        repetitions=20, interval_days=MAX_INTERVAL_DAYS, next_review_at=LATEST_REVIEW_AT,
    )

    restored = CardSchema.model_validate_json(CardSchema.from_card(card).model_dump_json()).to_card()

    assert restored == card
