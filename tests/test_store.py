"""
Tests for DeckStore: deck/card ownership, reviews and deletion.
"""

import dataclasses
from datetime import timedelta

import pytest

from flashdeck.exceptions import ConflictError, InvalidInputError, NotFoundError
from flashdeck.sm2.card_state import LATEST_REVIEW_AT, Deck, initialize_new_card
from flashdeck.sm2.constants import MAX_INTERVAL_DAYS, CardDifficulty, DeckLanguage
from flashdeck.store import DeckStore
from tests.conftest import T0


# ---- Decks ----

def test_create_deck_starts_empty(store):
    deck_id = store.create_deck("Slovak", "Basic words", "sk", "Language Learning")

    deck = store.get_deck(deck_id)
    assert deck.name == "Slovak"
    assert deck.language is DeckLanguage.SLOVAK
    assert deck.cards == ()
    assert deck.created_at == T0


def test_create_deck_trims_text(store):
    deck_id = store.create_deck("  Slovak  ", " Basic words ", DeckLanguage.SLOVAK, " Vocab ")
    deck = store.get_deck(deck_id)
    assert deck.name == "Slovak"
    assert deck.description == "Basic words"
    assert deck.category == "Vocab"


@pytest.mark.parametrize("name,description,category", [
    ("", "d", "c"),
    ("   ", "d", "c"),
    ("n", "", "c"),
    ("n", "d", " "),
])
def test_create_deck_rejects_blank_fields(store, name, description, category):
    with pytest.raises(InvalidInputError):
        store.create_deck(name, description, "en", category)
    assert store.decks == ()


def test_create_deck_rejects_unknown_language(store):
    with pytest.raises(InvalidInputError):
        store.create_deck("Dutch", "Words", "nl", "Language Learning")
    assert store.decks == ()


def test_decks_keep_creation_order(populated_store):
    store, slovak, grammar = populated_store
    assert [deck.id for deck in store.decks] == [slovak, grammar]


def test_get_missing_deck_raises(store):
    with pytest.raises(NotFoundError):
        store.get_deck("nope")


# ---- Cards ----

def test_add_card_appends_new_due_card(store, clock):
    deck_id = store.create_deck("Slovak", "Basic words", "sk", "Language Learning")
    clock.advance(minutes=5)

    card_id = store.add_card(deck_id, "Hello", "Ahoj")

    (card,) = store.get_deck(deck_id).cards
    assert card.id == card_id
    assert card.repetitions == 0
    assert card.ease_factor == 2.5
    assert card.interval_days == 1
    assert card.next_review_at == clock()
    assert card.difficulty is CardDifficulty.MEDIUM
    assert store.due_cards(deck_id) == (card,)


def test_cards_keep_insertion_order(populated_store):
    store, slovak, _ = populated_store
    fronts = [card.front for card in store.get_deck(slovak).cards]
    assert fronts == ["Hello", "Thank you", "Good morning"]


def test_add_card_to_missing_deck_creates_nothing(populated_store):
    store, _, _ = populated_store
    before = store.all_cards()

    with pytest.raises(NotFoundError):
        store.add_card("ghost", "Front", "Back")

    assert store.all_cards() == before
    assert store.summarize().total_cards == 5


@pytest.mark.parametrize("front,back", [("", "Ahoj"), ("Hello", "   ")])
def test_add_card_rejects_blank_sides(populated_store, front, back):
    store, slovak, _ = populated_store
    with pytest.raises(InvalidInputError):
        store.add_card(slovak, front, back)
    assert len(store.get_deck(slovak).cards) == 3


def test_add_card_with_difficulty(populated_store):
    store, slovak, _ = populated_store
    card_id = store.add_card(slovak, "Goodbye", "Dovidenia", difficulty="hard")
    _, card = store.find_card(card_id)
    assert card.difficulty is CardDifficulty.HARD


def test_find_card_across_decks(populated_store):
    store, _, grammar = populated_store
    target = store.get_deck(grammar).cards[1]

    deck_id, card = store.find_card(target.id)

    assert deck_id == grammar
    assert card == target


def test_find_missing_card_raises(populated_store):
    store, _, _ = populated_store
    with pytest.raises(NotFoundError):
        store.find_card("missing")


# ---- Reviews ----

def test_review_writes_state_back(populated_store, clock):
    store, slovak, _ = populated_store
    card = store.get_deck(slovak).cards[0]
    clock.advance(hours=1)

    outcome = store.review_card(slovak, card.id, 5)

    stored = store.get_deck(slovak).cards[0]
    assert outcome.card == stored
    assert stored.repetitions == 1
    assert stored.interval_days == 1
    assert stored.ease_factor == pytest.approx(2.6)
    assert stored.last_reviewed_at == clock()
    assert stored.next_review_at == clock() + timedelta(days=1)
    assert stored.version == 1
    assert outcome.event["deck_id"] == slovak
    assert outcome.event["card_id"] == card.id


def test_review_leaves_other_cards_untouched(populated_store):
    store, slovak, grammar = populated_store
    others_before = store.get_deck(slovak).cards[1:] + store.get_deck(grammar).cards

    store.review_card(slovak, store.get_deck(slovak).cards[0].id, 4)

    assert store.get_deck(slovak).cards[1:] + store.get_deck(grammar).cards == others_before


def test_review_does_not_change_earlier_snapshots(populated_store):
    store, slovak, _ = populated_store
    snapshot = store.get_deck(slovak)
    card = snapshot.cards[0]

    store.review_card(slovak, card.id, 5)

    assert snapshot.cards[0].repetitions == 0
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.cards[0].repetitions = 3


def test_successive_reviews_follow_bootstrap_intervals(populated_store, clock):
    store, slovak, _ = populated_store
    card_id = store.get_deck(slovak).cards[0].id

    intervals = []
    for quality in (5, 4, 4, 5):
        outcome = store.review_card(slovak, card_id, quality)
        intervals.append(outcome.card.interval_days)
        clock.advance(days=outcome.card.interval_days)

    assert intervals[:2] == [1, 6]
    assert intervals[2] == 16  # 6 * 2.6 rounded
    assert intervals[3] > intervals[2]


def test_failed_review_resets_progress(populated_store):
    store, slovak, _ = populated_store
    card_id = store.get_deck(slovak).cards[0].id
    store.review_card(slovak, card_id, 5)
    store.review_card(slovak, card_id, 5)

    outcome = store.review_card(slovak, card_id, 1)

    assert outcome.card.repetitions == 0
    assert outcome.card.interval_days == 1


def test_review_missing_deck_or_card(populated_store):
    store, slovak, grammar = populated_store
    slovak_card = store.get_deck(slovak).cards[0].id

    with pytest.raises(NotFoundError):
        store.review_card("ghost", slovak_card, 4)
    with pytest.raises(NotFoundError):
        store.review_card(slovak, "ghost", 4)
    # card exists, but in the other deck
    with pytest.raises(NotFoundError):
        store.review_card(grammar, slovak_card, 4)


@pytest.mark.parametrize("quality", [-1, 6, 3.5])
def test_invalid_quality_changes_nothing(populated_store, quality):
    store, slovak, _ = populated_store
    before = store.get_deck(slovak)

    with pytest.raises(InvalidInputError):
        store.review_card(slovak, before.cards[0].id, quality)

    assert store.get_deck(slovak) == before


def test_review_with_stale_version_conflicts(populated_store):
    store, slovak, _ = populated_store
    card = store.get_deck(slovak).cards[0]

    store.review_card(slovak, card.id, 5, expected_version=card.version)

    with pytest.raises(ConflictError):
        store.review_card(slovak, card.id, 5, expected_version=card.version)
    assert store.get_deck(slovak).cards[0].version == 1


def test_review_card_by_id(populated_store):
    store, _, grammar = populated_store
    card = store.get_deck(grammar).cards[0]

    outcome = store.review_card_by_id(card.id, 3)

    assert outcome.deck_id == grammar
    assert store.get_deck(grammar).cards[0].repetitions == 1


# ---- Deletion ----

def test_delete_deck_removes_its_cards(populated_store):
    store, slovak, grammar = populated_store
    slovak_cards = [card.id for card in store.get_deck(slovak).cards]

    store.delete_deck(slovak)

    assert [deck.id for deck in store.decks] == [grammar]
    assert store.summarize().total_cards == 2
    for card_id in slovak_cards:
        with pytest.raises(NotFoundError):
            store.find_card(card_id)
    assert all(deck_id == grammar for deck_id, _ in store.due_cards_all())


def test_delete_missing_deck_raises_every_time(populated_store):
    store, slovak, _ = populated_store
    store.delete_deck(slovak)

    with pytest.raises(NotFoundError):
        store.delete_deck(slovak)
    with pytest.raises(NotFoundError):
        store.delete_deck("never-existed")


# ---- Construction ----

def test_store_restored_from_decks():
    card = initialize_new_card("c1", "Hello", "Ahoj", now=T0)
    deck = Deck(
        id="d1", name="Slovak", description="Words", language=DeckLanguage.SLOVAK,
        category="Vocab", created_at=T0, cards=(card,),
    )

    store = DeckStore([deck], clock=lambda: T0)

    assert store.get_deck("d1") == deck
    assert store.find_card("c1") == ("d1", card)


def test_store_rejects_duplicate_card_ids():
    card = initialize_new_card("c1", "Hello", "Ahoj", now=T0)
    decks = [
        Deck(id=deck_id, name="n", description="d", language=DeckLanguage.ENGLISH,
             category="c", created_at=T0, cards=(card,))
        for deck_id in ("d1", "d2")
    ]
    with pytest.raises(InvalidInputError):
        DeckStore(decks)


def test_id_collision_conflicts(clock):
    store = DeckStore(clock=clock, id_factory=lambda: "same")
    store.create_deck("One", "First", "en", "c")

    with pytest.raises(ConflictError):
        store.create_deck("Two", "Second", "en", "c")
    assert len(store.decks) == 1


def test_default_ids_are_unique():
    store = DeckStore()
    deck_id = store.create_deck("Slovak", "Basic words", "sk", "Language Learning")
    card_ids = {store.add_card(deck_id, f"front {i}", "back") for i in range(50)}
    assert len(card_ids) == 50
    assert deck_id not in card_ids


# ---- Long-running schedules ----

def test_repeated_perfect_reviews_keep_store_usable(populated_store, clock):
    store, slovak, _ = populated_store
    card_id = store.get_deck(slovak).cards[0].id

    for _ in range(20):
        clock.advance(hours=1)
        store.review_card(slovak, card_id, 5)
        progress = store.summarize()

    _, card = store.find_card(card_id)
    assert card.next_review_at == LATEST_REVIEW_AT
    assert card.interval_days == MAX_INTERVAL_DAYS
    assert progress.cards_learned == 1
    assert progress.cards_reviewing == 0
    assert card_id not in [c.id for c in store.due_cards(slovak)]
    assert store.progress.mastery_percentage == 20
