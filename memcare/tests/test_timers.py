"""
Tests for the timer schedulers.
"""

import asyncio

from ..engine_core import AsyncioScheduler, ManualScheduler, MemoryMatchEngine
from .conftest import ScriptedRandom


class TestManualScheduler:
    """Tests for the deterministic scheduler."""

    def test_fires_in_time_order(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.call_later(2.0, lambda: fired.append("late"))
        scheduler.call_later(1.0, lambda: fired.append("early"))

        assert scheduler.advance(1.0) == 1
        assert fired == ["early"]
        assert scheduler.advance(1.0) == 1
        assert fired == ["early", "late"]
        assert scheduler.now() == 2.0

    def test_cancelled_handle_never_fires(self):
        scheduler = ManualScheduler()
        fired = []
        handle = scheduler.call_later(1.0, lambda: fired.append(1))
        handle.cancel()

        assert handle.cancelled
        assert scheduler.pending == 0
        scheduler.advance(5.0)
        assert fired == []

    def test_run_pending(self):
        scheduler = ManualScheduler(start=10.0)
        fired = []
        scheduler.call_later(3.0, lambda: fired.append(scheduler.now()))

        assert scheduler.run_pending() == 1
        assert fired == [13.0]
        assert scheduler.run_pending() == 0


class TestAsyncioScheduler:
    """Tests for the event-loop scheduler."""

    def test_call_later_and_cancel(self):
        async def scenario():
            scheduler = AsyncioScheduler()
            fired = []
            scheduler.call_later(0.01, lambda: fired.append("kept"))
            dropped = scheduler.call_later(0.01, lambda: fired.append("dropped"))
            dropped.cancel()
            await asyncio.sleep(0.05)
            return fired, dropped.cancelled

        fired, cancelled = asyncio.run(scenario())
        assert fired == ["kept"]
        assert cancelled

    def test_engine_reverts_mismatch_on_event_loop(self):
        async def scenario():
            engine = MemoryMatchEngine(
                "patient-1",
                1,
                rng=ScriptedRandom(),
                scheduler=AsyncioScheduler(),
                mismatch_delay=0.01,
            )
            engine.click(0)
            engine.click(1)
            flipped_before = engine.cards[0].is_flipped
            await asyncio.sleep(0.05)
            return flipped_before, engine.cards[0].is_flipped, engine.pending

        before, after, pending = asyncio.run(scenario())
        assert before is True
        assert after is False
        assert pending == ()
