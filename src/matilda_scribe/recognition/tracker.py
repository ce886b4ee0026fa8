"""Commit tracker: decides which raw results become committed output.

The tracker owns one run's mutable reconciliation state and delegates the
emit-or-suppress decision to a commit strategy. Items go out through the
``emit`` callable handed in by the session controller.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .scheduler import DebounceScheduler
from .types import ResultEvent, TranscriptItem

if TYPE_CHECKING:
    from .strategies import CommitStrategy

logger = logging.getLogger(__name__)

EmitFn = Callable[[Sequence[TranscriptItem]], None]


@dataclass
class CommitState:
    """Per-run reconciliation state shared with the active strategy."""

    # Newest non-empty text seen, final or interim
    latest_text: str = ""

    # Last committed text in the strategy's comparison form
    last_committed: str = ""
    committed: set[str] = field(default_factory=set)

    # Lowest result index not yet committed
    last_final_index: int = 0
    last_final_text: str = ""

    def record_commit(self, text: str) -> None:
        self.last_committed = text
        self.committed.add(text)

    def reset(self) -> None:
        self.latest_text = ""
        self.last_committed = ""
        self.committed.clear()
        self.last_final_index = 0
        self.last_final_text = ""


class CommitTracker:
    """Drives a commit strategy from engine events.

    Strategies with a silence window get their ``on_silence`` hook called by
    the debounce scheduler; the window is re-armed whenever a result event
    advances the utterance (produces a preview).
    """

    def __init__(
        self,
        strategy: "CommitStrategy",
        emit: EmitFn,
        *,
        state: CommitState | None = None,
        scheduler: DebounceScheduler | None = None,
    ):
        if strategy.uses_silence_window and scheduler is None:
            raise ValueError(f"{strategy.policy.value} strategy requires a debounce scheduler")
        self.strategy = strategy
        self.state = state or CommitState()
        self.scheduler = scheduler
        self._emit = emit
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def on_result(self, event: ResultEvent) -> list[TranscriptItem]:
        """Reconcile one result event and emit the resulting items."""
        if self._closed:
            return []

        items = self.strategy.on_result(event, self.state)
        logger.debug(
            f"{self.strategy.policy.value}: {len(event.results)} results "
            f"(hint={event.result_index}) -> {len(items)} items"
        )
        self._send(items)

        if self.strategy.uses_silence_window and items:
            self.scheduler.arm(self._on_silence)

        return items

    def on_end(self) -> list[TranscriptItem]:
        """Handle the terminal engine event; the tracker is closed afterwards."""
        if self._closed:
            return []

        if self.scheduler is not None:
            self.scheduler.cancel()
        items = self.strategy.on_end(self.state)
        self._send(items)
        self.close()
        return items

    def close(self) -> None:
        """Cancel any pending timer and ignore further events."""
        if self.scheduler is not None:
            self.scheduler.cancel()
        self._closed = True

    def _on_silence(self) -> None:
        if self._closed:
            return
        items = self.strategy.on_silence(self.state)
        self._send(items)

    def _send(self, items: list[TranscriptItem]) -> None:
        if items:
            self._emit(items)
