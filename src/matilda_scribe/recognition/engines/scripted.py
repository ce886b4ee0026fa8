from __future__ import annotations

import asyncio
from collections.abc import Iterable

from ..types import ErrorEvent, RecognitionResult, ResultEvent
from .base import EndHandler, ErrorHandler, ResultHandler, StartHandler


class ScriptedEngine:
    """Deterministic engine for tests, replays and local development.

    This engine captures no audio. Events are fired by calling the
    ``emit_*`` methods; ``start()`` and ``stop()`` can be made to fail.
    """

    def __init__(
        self,
        *,
        start_error: BaseException | None = None,
        stop_error: BaseException | None = None,
        end_on_stop: bool = True,
    ) -> None:
        self.lang = ""
        self.continuous = False
        self.interim_results = False
        self.max_alternatives = 1

        self.on_start: StartHandler | None = None
        self.on_result: ResultHandler | None = None
        self.on_error: ErrorHandler | None = None
        self.on_end: EndHandler | None = None

        self.start_error = start_error
        self.stop_error = stop_error
        # Real engines follow stop() with an asynchronous end event
        self.end_on_stop = end_on_stop

        self.start_calls = 0
        self.stop_calls = 0
        self.ended = False

    @property
    def started(self) -> bool:
        return self.start_calls > 0

    def start(self) -> None:
        self.start_calls += 1
        if self.start_error is not None:
            raise self.start_error

    def stop(self) -> None:
        self.stop_calls += 1
        if self.stop_error is not None:
            raise self.stop_error
        if self.end_on_stop and not self.ended:
            self._soon(self.emit_end)

    def emit_start(self) -> None:
        if self.on_start is not None:
            self.on_start()

    def emit_result(
        self,
        results: Iterable[RecognitionResult | tuple[str, bool] | str],
        result_index: int | None = None,
    ) -> None:
        """Fire a result event.

        Results may be given as RecognitionResult, ``(text, is_final)``
        tuples or bare strings (interim).
        """
        event = ResultEvent(results=tuple(_coerce(r) for r in results), result_index=result_index)
        if self.on_result is not None:
            self.on_result(event)

    def emit_error(self, error: str, message: str = "") -> None:
        if self.on_error is not None:
            self.on_error(ErrorEvent(error=error, message=message))

    def emit_end(self) -> None:
        if self.ended:
            return
        self.ended = True
        if self.on_end is not None:
            self.on_end()

    def _soon(self, callback) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            callback()
            return
        loop.call_soon(callback)


def _coerce(result: RecognitionResult | tuple[str, bool] | str) -> RecognitionResult:
    if isinstance(result, RecognitionResult):
        return result
    if isinstance(result, str):
        return RecognitionResult(transcript=result, is_final=False)
    transcript, is_final = result
    return RecognitionResult(transcript=transcript, is_final=bool(is_final))
