"""
Pytest fixtures for impostor game tests.
"""

from typing import Any, Dict, List, Tuple

import pytest

from impostor.catalog import InMemoryCustomCardStore, StaticCatalog
from impostor.config import Settings
from impostor.core import Card, RandomSource, build_session
from impostor.game import ImpostorGame
from impostor.phases import TurnPhaseMachine
from impostor.web import EventEmitter


class ScriptedRandom(RandomSource):
    """
    Random source returning pre-scripted draws, recording every requested range.

    Once the script runs out it keeps returning the low bound.
    """

    def __init__(self, values=()):
        super().__init__(seed=0)
        self.values = list(values)
        self.calls: List[Tuple[int, int]] = []

    def uniform_int(self, low: int, high: int) -> int:
        self.calls.append((low, high))
        if self.values:
            value = self.values.pop(0)
            assert low <= value <= high, f"scripted draw {value} outside [{low}, {high}]"
            return value
        return low


class RecordingListener:
    """Collects emitted events."""

    def __init__(self):
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def __call__(self, event_type: str, data: Dict[str, Any]) -> None:
        self.events.append((event_type, data))

    @property
    def types(self) -> List[str]:
        return [event_type for event_type, _ in self.events]


@pytest.fixture
def card_pool() -> List[Card]:
    """A small catalog-like pool."""
    return [
        Card(id=26000000, name="Knight", display_ref="https://cdn.example/knight.png"),
        Card(id=26000001, name="Archers", display_ref="https://cdn.example/archers.png"),
        Card(id=26000002, name="Goblins", display_ref="https://cdn.example/goblins.png"),
        Card(id=26000003, name="Giant", display_ref="https://cdn.example/giant.png"),
    ]


@pytest.fixture
def rng() -> RandomSource:
    return RandomSource(seed=1234)


@pytest.fixture
def emitter_events():
    """An event emitter with a recording listener attached."""
    emitter = EventEmitter()
    listener = RecordingListener()
    emitter.register_listener(listener)
    return emitter, listener


@pytest.fixture
def machine(emitter_events) -> TurnPhaseMachine:
    emitter, _ = emitter_events
    return TurnPhaseMachine(event_emitter=emitter)


@pytest.fixture
def classic_session(card_pool, rng):
    return build_session(card_pool, 5, 1, "CLASSIC", rng=rng)


@pytest.fixture
def spy_session(card_pool, rng):
    return build_session(card_pool, 5, 1, "SPY", rng=rng)


@pytest.fixture
def relampago_session(card_pool, rng):
    return build_session(card_pool, 4, 1, "RELAMPAGO", rng=rng)


@pytest.fixture
def custom_store() -> InMemoryCustomCardStore:
    return InMemoryCustomCardStore([
        Card(id=1700000000000, name="Grandma's Cake", display_ref="🎂", is_custom=True),
        Card(id=1700000000001, name="Office Printer", display_ref="🖨️", is_custom=True),
    ])


@pytest.fixture
def game(card_pool, custom_store) -> ImpostorGame:
    """A game wired to offline card sources and a seeded random source."""
    return ImpostorGame(
        settings=Settings(card_source="CATALOG"),
        catalog=StaticCatalog(card_pool),
        store=custom_store,
        rng=RandomSource(seed=7),
    )
