"""
Pytest fixtures for Memcare tests.
"""

import pytest

from ..engine_core import ManualScheduler, MemoryMatchEngine
from ..session import SessionManager


class ScriptedRandom:
    """
    Random source returning scripted randrange values.

    Once the script runs out it returns stop - 1, which makes every
    Fisher-Yates step a self-swap (identity shuffle).
    """

    def __init__(self, values=None):
        self.values = list(values or [])
        self.calls = []

    def randrange(self, stop):
        self.calls.append(stop)
        if self.values:
            return self.values.pop(0)
        return stop - 1


class CompletionRecorder:
    """Collects (score, time_taken) completion callbacks."""

    def __init__(self):
        self.calls = []

    def __call__(self, score, time_taken):
        self.calls.append((score, time_taken))


def pair_partner(engine, index):
    """Index of the other card carrying the same value."""
    value = engine.cards[index].value
    return next(
        c.id for c in engine.cards if c.value == value and c.id != index
    )


def assert_board_rep(board):
    """Check the board invariants: pairs, matched => flipped, matched counter."""
    if board.is_empty:
        assert not board.ready
        return
    values = board.values()
    assert all(values.count(v) == 2 for v in values)
    assert all(c.is_flipped for c in board.cards if c.is_matched)
    assert board.matched_count == sum(1 for c in board.cards if c.is_matched)


def solve(engine):
    """Match every pair on the board, in index order."""
    for card in engine.cards:
        if not engine.cards[card.id].is_matched:
            engine.click(card.id)
            engine.click(pair_partner(engine, card.id))


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def recorder() -> CompletionRecorder:
    return CompletionRecorder()


@pytest.fixture
def make_engine(scheduler, recorder):
    """Factory for engines on the manual scheduler with an identity shuffle."""

    def _make(difficulty=1, **kwargs):
        kwargs.setdefault("rng", ScriptedRandom())
        kwargs.setdefault("on_complete", recorder)
        kwargs.setdefault("scheduler", scheduler)
        kwargs.setdefault("clock", scheduler.now)
        return MemoryMatchEngine("patient-1", difficulty, **kwargs)

    return _make


@pytest.fixture
def engine(make_engine) -> MemoryMatchEngine:
    """Difficulty-1 engine: card i pairs with card i + 6."""
    return make_engine(1)


@pytest.fixture
def manager(scheduler) -> SessionManager:
    """Session manager with deterministic timers, clock and shuffle."""
    return SessionManager(
        scheduler_factory=lambda: scheduler,
        rng_factory=ScriptedRandom,
        clock=scheduler.now,
    )
