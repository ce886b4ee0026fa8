"""Replay recorded engine event scripts through a session controller.

A script is JSON lines, one engine event per line::

    {"at_ms": 0, "type": "start"}
    {"at_ms": 120, "type": "result", "results": [{"transcript": "xin", "is_final": false}]}
    {"at_ms": 900, "type": "result", "result_index": 0,
     "results": [{"transcript": "xin chào", "is_final": true}]}
    {"at_ms": 950, "type": "error", "error": "no-speech"}
    {"at_ms": 2000, "type": "end"}

Events fire at their offsets on the running asyncio loop, so the debounced
strategy sees real silence windows. Without an ``end`` event the session is
stopped once the last event's silence window has passed.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .recognition import (
    RecognitionResult,
    ScriptedEngine,
    SessionConfig,
    SessionController,
    SessionMetrics,
    TranscriptError,
    TranscriptItem,
)

logger = logging.getLogger(__name__)

EVENT_TYPES = ("start", "result", "error", "end")

# Slack after the final silence window before stopping
_STOP_GRACE_SECONDS = 0.05


class ScriptError(ValueError):
    """Raised when an event script cannot be parsed."""

    def __init__(self, message: str, line_no: int | None = None):
        self.line_no = line_no
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)


@dataclass(frozen=True)
class ScriptedEvent:
    """One engine event of a replay script."""

    at_ms: int
    type: str
    results: tuple[RecognitionResult, ...] = ()
    result_index: int | None = None
    error: str = ""
    message: str = ""


@dataclass
class ReplayOutcome:
    """Everything a replay delivered to the consumer callbacks."""

    items: list[TranscriptItem] = field(default_factory=list)
    errors: list[TranscriptError] = field(default_factory=list)
    metrics: SessionMetrics = field(default_factory=SessionMetrics)

    @property
    def committed(self) -> list[TranscriptItem]:
        return [item for item in self.items if item.is_final]

    @property
    def transcript(self) -> str:
        """Committed chunks, one per line."""
        return "\n".join(item.text for item in self.committed)


def parse_event(data: dict, line_no: int | None = None) -> ScriptedEvent:
    """Build a ScriptedEvent from one decoded script line."""
    if not isinstance(data, dict):
        raise ScriptError("event must be a JSON object", line_no)

    event_type = data.get("type")
    if event_type not in EVENT_TYPES:
        raise ScriptError(f"unknown event type {event_type!r}", line_no)

    try:
        at_ms = int(data.get("at_ms", 0))
    except (TypeError, ValueError):
        raise ScriptError(f"invalid at_ms {data.get('at_ms')!r}", line_no) from None
    if at_ms < 0:
        raise ScriptError("at_ms must not be negative", line_no)

    results = []
    for raw in data.get("results", []):
        if isinstance(raw, str):
            results.append(RecognitionResult(transcript=raw))
        elif isinstance(raw, dict):
            results.append(
                RecognitionResult(
                    transcript=str(raw.get("transcript", "")),
                    is_final=bool(raw.get("is_final", False)),
                )
            )
        else:
            raise ScriptError("results must be strings or objects", line_no)

    result_index = data.get("result_index")
    return ScriptedEvent(
        at_ms=at_ms,
        type=event_type,
        results=tuple(results),
        result_index=int(result_index) if result_index is not None else None,
        error=str(data.get("error", "")),
        message=str(data.get("message", "")),
    )


def load_script(path: str | Path) -> list[ScriptedEvent]:
    """Load a JSON-lines event script, ordered by offset.

    Blank lines and lines starting with ``#`` are ignored.
    """
    events = []
    with open(path, encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError as e:
                raise ScriptError(f"invalid JSON ({e.msg})", line_no) from e
            events.append(parse_event(data, line_no))

    events.sort(key=lambda event: event.at_ms)
    logger.debug(f"Loaded {len(events)} events from {path}")
    return events


def _dispatch(engine: ScriptedEngine, event: ScriptedEvent) -> None:
    if event.type == "start":
        engine.emit_start()
    elif event.type == "result":
        engine.emit_result(event.results, event.result_index)
    elif event.type == "error":
        engine.emit_error(event.error, event.message)
    else:
        engine.emit_end()


async def replay_script(
    events: list[ScriptedEvent],
    config: SessionConfig,
    *,
    timeout_seconds: float = 60.0,
) -> ReplayOutcome:
    """Replay a script through a fresh controller and collect its output.

    Args:
        events: Events to fire, offsets relative to start()
        config: Session configuration for the run
        timeout_seconds: Upper bound on the replay duration

    Returns:
        ReplayOutcome with delivered items, reported errors and metrics

    Raises:
        asyncio.TimeoutError: If the session never reports listening=False

    """
    loop = asyncio.get_running_loop()
    engine = ScriptedEngine()
    finished = asyncio.Event()
    outcome = ReplayOutcome()

    def on_state(listening: bool) -> None:
        if not listening:
            finished.set()

    controller = SessionController(lambda: engine, config)
    controller.start(
        config.language,
        on_data=outcome.items.extend,
        on_error=outcome.errors.append,
        on_state=on_state,
    )
    outcome.metrics = controller.metrics

    if finished.is_set():
        return outcome

    handles = []
    if not any(event.type == "start" for event in events):
        handles.append(loop.call_soon(engine.emit_start))
    for event in events:
        handles.append(loop.call_later(event.at_ms / 1000.0, _dispatch, engine, event))

    if not any(event.type == "end" for event in events):
        last_ms = max((event.at_ms for event in events), default=0)
        stop_at = last_ms / 1000.0 + config.pause_seconds + _STOP_GRACE_SECONDS
        handles.append(loop.call_later(stop_at, controller.stop))

    try:
        await asyncio.wait_for(finished.wait(), timeout=timeout_seconds)
    finally:
        for handle in handles:
            handle.cancel()

    logger.info(
        f"Replayed {len(events)} events: {len(outcome.committed)} commits, "
        f"{len(outcome.errors)} errors"
    )
    return outcome
