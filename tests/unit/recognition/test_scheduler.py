"""Unit tests for DebounceScheduler."""

import asyncio

import pytest

from matilda_scribe.recognition.scheduler import DebounceScheduler


class TestDebounceScheduler:
    """Test cancel-and-reschedule behaviour on a manual clock."""

    def test_rejects_non_positive_delay(self, clock):
        with pytest.raises(ValueError):
            DebounceScheduler(0, call_later=clock.call_later)

    def test_fires_after_delay(self, clock):
        fired = []
        scheduler = DebounceScheduler(700, call_later=clock.call_later)

        scheduler.arm(lambda: fired.append(clock.now))
        assert scheduler.pending is True

        clock.advance(0.699)
        assert fired == []

        clock.advance(0.002)
        assert len(fired) == 1
        assert scheduler.pending is False
        assert scheduler.fired_count == 1

    def test_rearm_restarts_window(self, clock):
        fired = []
        scheduler = DebounceScheduler(700, call_later=clock.call_later)

        scheduler.arm(lambda: fired.append("first"))
        clock.advance(0.3)
        scheduler.arm(lambda: fired.append("second"))

        clock.advance(0.69)
        assert fired == []

        clock.advance(0.02)
        assert fired == ["second"]

    def test_at_most_one_live_timer(self, clock):
        scheduler = DebounceScheduler(100, call_later=clock.call_later)
        for _ in range(5):
            scheduler.arm(lambda: None)
        assert clock.pending == 1

    def test_cancel(self, clock):
        fired = []
        scheduler = DebounceScheduler(100, call_later=clock.call_later)

        scheduler.arm(lambda: fired.append(1))
        scheduler.cancel()
        clock.advance(1.0)

        assert fired == []
        assert scheduler.pending is False

    def test_cancel_without_timer_is_noop(self, clock):
        DebounceScheduler(100, call_later=clock.call_later).cancel()

    def test_arm_without_loop_raises(self):
        scheduler = DebounceScheduler(100)
        with pytest.raises(RuntimeError):
            scheduler.arm(lambda: None)

    @pytest.mark.asyncio
    async def test_uses_running_loop_by_default(self):
        fired = asyncio.Event()
        scheduler = DebounceScheduler(20)

        scheduler.arm(fired.set)
        await asyncio.wait_for(fired.wait(), timeout=2.0)

        assert scheduler.fired_count == 1
