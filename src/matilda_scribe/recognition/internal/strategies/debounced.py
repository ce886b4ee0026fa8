"""Debounced strategy - commit on a pause in speech.

Some engine/platform combinations are unreliable about when (or whether) they
flag a result final, so this policy ignores the flag for committing:
- Every event replaces the single buffered text with its newest non-empty
  alternative and previews it
- The tracker re-arms a silence timer on every such event
- When the timer fires, the normalized buffer is committed unless it repeats
  an earlier commit

Whether the terminal end event also flushes the buffer is the
``flush_on_end`` flag. The repeat check makes a flush after a commit for
the same utterance a no-op.
"""

import logging
from typing import TYPE_CHECKING, Literal

from ...normalizer import normalize_transcript
from ...types import CommitPolicy, ResultEvent, TranscriptItem

if TYPE_CHECKING:
    from ...tracker import CommitState

logger = logging.getLogger(__name__)


class DebouncedStrategy:
    """Single-buffer commit triggered by the silence window.

    Committed text is the normalized form (trimmed, whitespace collapsed,
    trailing terminators stripped); previews carry the trimmed raw text.

    Best for:
    - Browser-style engines that re-send finals or never mark them
    - Dictation where one chunk per utterance is wanted
    """

    policy = CommitPolicy.DEBOUNCED
    uses_silence_window = True

    def __init__(
        self,
        *,
        flush_on_end: bool = True,
        suppress_repeats: Literal["run", "consecutive"] = "run",
    ):
        """Initialize debounced strategy.

        Args:
            flush_on_end: Commit the pending buffer when the engine ends
            suppress_repeats: "run" drops any text already committed in this
                run, "consecutive" only the immediately previous commit

        """
        self.flush_on_end = flush_on_end
        self.suppress_repeats = suppress_repeats

    def on_result(self, event: ResultEvent, state: "CommitState") -> list[TranscriptItem]:
        best = ""
        for result in event.results:
            text = result.text
            if text:
                best = text

        if not best:
            return []

        state.latest_text = best
        return [TranscriptItem.preview(best)]

    def on_silence(self, state: "CommitState") -> list[TranscriptItem]:
        return self._commit_pending(state)

    def on_end(self, state: "CommitState") -> list[TranscriptItem]:
        if not self.flush_on_end:
            return []
        return self._commit_pending(state)

    def _commit_pending(self, state: "CommitState") -> list[TranscriptItem]:
        text = normalize_transcript(state.latest_text)
        if not text:
            return []

        if text == state.last_committed:
            logger.debug(f"Suppressed repeat of previous commit: '{text[:50]}'")
            return []
        if self.suppress_repeats == "run" and text in state.committed:
            logger.debug(f"Suppressed text already committed this run: '{text[:50]}'")
            return []

        state.record_commit(text)
        return [TranscriptItem.committed(text)]
