from datetime import UTC, datetime, timedelta
from itertools import count

import pytest

from scorepad.logic.calculator import Calculator
from scorepad.logic.ledger import IdGenerator, RoundLedger
from shared.storage import InMemoryKeyValueStore

FIXED_START = datetime(2025, 3, 15, 10, 30, 0, tzinfo=UTC)


class StepClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime = FIXED_START) -> None:
        self._ticks = count()
        self._start = start

    def __call__(self) -> datetime:
        return self._start + timedelta(seconds=next(self._ticks))


def _press_keys(calculator: Calculator, keys: str) -> str:
    """Feed a space-free key string (e.g. "12+3=") to the calculator and return the display."""
    for key in keys:
        calculator.press(key)
    return calculator.get_result()


@pytest.fixture
def store():
    return InMemoryKeyValueStore("flip7")


@pytest.fixture
def make_ledger(store):
    def _make(target_store=None) -> RoundLedger:
        return RoundLedger(
            target_store if target_store is not None else store,
            clock=StepClock(),
            id_generator=IdGenerator(clock_ms=lambda: 1000),
        )

    return _make


@pytest.fixture
def ledger(make_ledger):
    return make_ledger()


@pytest.fixture
def roster_ledger(ledger):
    """Ledger with players A, B and C, in that order."""
    for name in ("A", "B", "C"):
        ledger.add_player(name)
    return ledger


@pytest.fixture
def press_keys():
    return _press_keys
