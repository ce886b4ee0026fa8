"""Protocol definition for commit strategies.

Uses Protocol-based typing for flexibility - strategies don't need to inherit
from a base class, just implement the required methods.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ...types import CommitPolicy, ResultEvent, TranscriptItem

if TYPE_CHECKING:
    from ...tracker import CommitState


@runtime_checkable
class CommitStrategy(Protocol):
    """Protocol for transcript reconciliation strategies.

    Strategies turn raw result events into committed and preview items:
    - WholeBuffer: Commit every final as received (no dedup)
    - Debounced: Commit the latest text after a silence window
    - Incremental: Index window plus prefix-delta commits
    - IndexWindow: Commit finals at indices not seen before

    All strategies must implement:
    - on_result(): Handle a result event
    - on_silence(): Handle an elapsed silence window
    - on_end(): Handle the terminal engine event
    """

    policy: CommitPolicy
    uses_silence_window: bool

    def on_result(self, event: ResultEvent, state: "CommitState") -> list[TranscriptItem]:
        """Reconcile a result event.

        Args:
            event: Results accumulated by the engine for the utterance
            state: Mutable per-run state

        Returns:
            Items to emit, commits before the preview
        """
        ...

    def on_silence(self, state: "CommitState") -> list[TranscriptItem]:
        """Called when the silence window elapses without a new result."""
        ...

    def on_end(self, state: "CommitState") -> list[TranscriptItem]:
        """Called once when the engine reports the end of the session."""
        ...
