"""Unit tests for CommitTracker."""

import pytest

from matilda_scribe.recognition.scheduler import DebounceScheduler
from matilda_scribe.recognition.strategies import DebouncedStrategy, IncrementalStrategy
from matilda_scribe.recognition.tracker import CommitState, CommitTracker
from matilda_scribe.recognition.types import RecognitionResult, ResultEvent


def interim(text):
    return ResultEvent(results=(RecognitionResult(text, False),))


@pytest.fixture
def emitted():
    return []


def make_debounced(clock, emitted, **kwargs):
    return CommitTracker(
        DebouncedStrategy(**kwargs),
        emit=emitted.extend,
        scheduler=DebounceScheduler(700, call_later=clock.call_later),
    )


class TestCommitState:
    """Test CommitState bookkeeping."""

    def test_record_commit(self):
        state = CommitState()
        state.record_commit("a")
        state.record_commit("b")
        assert state.last_committed == "b"
        assert state.committed == {"a", "b"}

    def test_reset(self):
        state = CommitState(latest_text="x", last_final_index=4, last_final_text="y")
        state.record_commit("a")
        state.reset()
        assert state == CommitState()


class TestCommitTracker:
    """Test event routing, silence window and closing."""

    def test_debounced_requires_scheduler(self, emitted):
        with pytest.raises(ValueError):
            CommitTracker(DebouncedStrategy(), emit=emitted.extend)

    def test_preview_then_commit_on_silence(self, clock, emitted):
        tracker = make_debounced(clock, emitted)

        tracker.on_result(interim("hello"))
        assert [i.text for i in emitted] == ["hello"]
        assert tracker.scheduler.pending

        clock.advance(0.8)
        assert [(i.text, i.is_final) for i in emitted] == [("hello", False), ("hello", True)]

    def test_empty_event_does_not_arm(self, clock, emitted):
        tracker = make_debounced(clock, emitted)
        tracker.on_result(interim("   "))
        assert emitted == []
        assert not tracker.scheduler.pending

    def test_on_end_cancels_timer_and_flushes(self, clock, emitted):
        tracker = make_debounced(clock, emitted, flush_on_end=True)
        tracker.on_result(interim("bye"))
        tracker.on_end()

        assert [i.text for i in emitted if i.is_final] == ["bye"]
        assert clock.pending == 0
        assert tracker.closed

        clock.advance(5.0)
        assert len([i for i in emitted if i.is_final]) == 1

    def test_closed_tracker_ignores_events(self, clock, emitted):
        tracker = make_debounced(clock, emitted)
        tracker.close()

        assert tracker.on_result(interim("late")) == []
        assert tracker.on_end() == []
        assert emitted == []

    def test_close_cancels_pending_commit(self, clock, emitted):
        tracker = make_debounced(clock, emitted)
        tracker.on_result(interim("pending"))
        tracker.close()
        clock.advance(1.0)
        assert [i for i in emitted if i.is_final] == []

    def test_strategy_without_window(self, emitted):
        tracker = CommitTracker(IncrementalStrategy(), emit=emitted.extend)
        items = tracker.on_result(ResultEvent(results=(RecognitionResult("done", True),)))
        assert [i.text for i in items] == ["done"]
        assert emitted == items
        assert tracker.scheduler is None
