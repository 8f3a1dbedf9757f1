"""
Shared test fixtures.

Provides:
- A controllable clock (no test depends on the wall clock)
- Deterministic id generation
- Stores pre-populated with decks and cards
- A throwaway SQLite database per test
"""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from flashdeck.store import DeckStore


T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = T0):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def store(clock, id_factory) -> DeckStore:
    """Empty store on the fake clock."""
    return DeckStore(clock=clock, id_factory=id_factory)


@pytest.fixture
def populated_store(store):
    """
    Store with two decks:
    - Slovak: three cards
    - Grammar: two cards
    """
    slovak = store.create_deck("Slovak", "Basic words", "sk", "Language Learning")
    for front, back in [("Hello", "Ahoj"), ("Thank you", "Ďakujem"), ("Good morning", "Dobré ráno")]:
        store.add_card(slovak, front, back)

    grammar = store.create_deck("Grammar", "English rules", "en", "Grammar")
    for front, back in [('Past of "go"', "went"), ('Plural of "child"', "children")]:
        store.add_card(grammar, front, back)

    return store, slovak, grammar


@pytest.fixture
def database_url(tmp_path) -> str:
    """Fresh SQLite database file with the schema created."""
    from flashdeck import sm2

    url = f"sqlite:///{tmp_path / 'flashdeck_test.db'}"
    sm2.init_db(url)
    return url
