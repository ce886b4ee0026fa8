"""Index-window strategy - commit each final index once.

Tracks only the lowest result index not yet committed. A final result at or
beyond it is committed verbatim (trimmed) and the window advances past it.
No text comparison is done, so engines that replay earlier indices with new
numbering will slip through; it is the cheapest correct policy for engines
with stable result indices.
"""

import logging
from typing import TYPE_CHECKING

from ...types import CommitPolicy, ResultEvent, TranscriptItem

if TYPE_CHECKING:
    from ...tracker import CommitState

logger = logging.getLogger(__name__)


class IndexWindowStrategy:
    """Commit finals at indices not seen before."""

    policy = CommitPolicy.INDEX_WINDOW
    uses_silence_window = False

    def on_result(self, event: ResultEvent, state: "CommitState") -> list[TranscriptItem]:
        items = []
        preview = ""

        for index, result in enumerate(event.results):
            if index < state.last_final_index:
                continue

            text = result.text
            if not result.is_final:
                if text:
                    preview = text
                continue

            state.last_final_index = index + 1
            if text:
                state.record_commit(text)
                items.append(TranscriptItem.committed(text))

        if preview:
            state.latest_text = preview
            items.append(TranscriptItem.preview(preview))

        if items:
            logger.debug(f"Window now starts at index {state.last_final_index}")
        return items

    def on_silence(self, state: "CommitState") -> list[TranscriptItem]:
        return []

    def on_end(self, state: "CommitState") -> list[TranscriptItem]:
        return []
