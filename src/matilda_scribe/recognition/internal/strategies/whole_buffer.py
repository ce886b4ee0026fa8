"""Whole-buffer strategy - commit finals as they are received.

The simplest reconciliation policy:
- The most recent non-empty text in the event is the live candidate
- Any event containing a final result commits it immediately
- Interim text is previewed, never committed

There is no dedup beyond dropping empty text: engines that re-send the same
final across events produce duplicate commits. Kept as a baseline for
comparison with the other strategies.
"""

import logging
from typing import TYPE_CHECKING

from ...types import CommitPolicy, ResultEvent, TranscriptItem

if TYPE_CHECKING:
    from ...tracker import CommitState

logger = logging.getLogger(__name__)


class WholeBufferStrategy:
    """Commit every final result as it arrives.

    Best for:
    - Engines that emit each final exactly once
    - Comparing output against the deduplicating strategies
    """

    policy = CommitPolicy.WHOLE_BUFFER
    uses_silence_window = False

    def on_result(self, event: ResultEvent, state: "CommitState") -> list[TranscriptItem]:
        latest = ""
        latest_is_final = False
        final_text = ""

        for result in event.results:
            text = result.text
            if not text:
                continue
            latest = text
            latest_is_final = result.is_final
            if result.is_final:
                final_text = text

        if not latest:
            return []

        state.latest_text = latest
        items = []
        if final_text:
            if final_text == state.last_committed:
                logger.debug(f"Committing repeated final as received: '{final_text[:50]}'")
            state.record_commit(final_text)
            items.append(TranscriptItem.committed(final_text))
        if not latest_is_final:
            items.append(TranscriptItem.preview(latest))
        return items

    def on_silence(self, state: "CommitState") -> list[TranscriptItem]:
        return []

    def on_end(self, state: "CommitState") -> list[TranscriptItem]:
        return []
