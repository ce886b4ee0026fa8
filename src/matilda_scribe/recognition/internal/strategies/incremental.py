"""Incremental strategy - index window plus prefix-delta commits.

Handles engines that keep re-sending a growing final string instead of
discrete new finals:
- Finals below ``last_final_index`` were already handled and are skipped
- A final that extends the previous final commits only the new suffix
- A final equal to the previous final is a re-send and commits nothing
- Any other final is committed whole, unless it normalizes to the previous
  commit
- Only the last interim result in the scan is previewed
"""

import logging
from typing import TYPE_CHECKING

from ...normalizer import normalize_transcript
from ...types import CommitPolicy, ResultEvent, TranscriptItem

if TYPE_CHECKING:
    from ...tracker import CommitState

logger = logging.getLogger(__name__)


def final_delta(text: str, previous: str) -> str:
    """Return the part of ``text`` not already committed as ``previous``.

    Example:
        >>> final_delta("alo 1 2", "alo 1")
        '2'
        >>> final_delta("alo", "alo")
        ''

    """
    if not previous:
        return text
    if text == previous:
        return ""
    if text.startswith(previous):
        return text[len(previous) :].strip()
    return text


class IncrementalStrategy:
    """Commit finals once per index, emitting suffix deltas for extensions.

    Committed text is the trimmed raw text (or its suffix delta).

    Best for:
    - Engines that grow one final string across result indices
    - Production use alongside the debounced strategy
    """

    policy = CommitPolicy.INCREMENTAL
    uses_silence_window = False

    def on_result(self, event: ResultEvent, state: "CommitState") -> list[TranscriptItem]:
        items = []
        preview = ""

        for index, result in enumerate(event.results):
            text = result.text

            if not result.is_final:
                if text:
                    preview = text
                continue

            if index < state.last_final_index:
                continue

            delta = final_delta(text, state.last_final_text) if text else ""
            state.last_final_index = index + 1
            if text:
                state.last_final_text = text
                state.latest_text = text

            if not delta:
                logger.debug(f"No new text in final at index {index}")
            elif normalize_transcript(delta) == normalize_transcript(state.last_committed):
                logger.debug(f"Suppressed repeat of previous commit at index {index}: '{delta[:50]}'")
            else:
                state.record_commit(delta)
                items.append(TranscriptItem.committed(delta))

        if preview:
            state.latest_text = preview
            items.append(TranscriptItem.preview(preview))
        return items

    def on_silence(self, state: "CommitState") -> list[TranscriptItem]:
        return []

    def on_end(self, state: "CommitState") -> list[TranscriptItem]:
        return []
