"""Type definitions for transcript reconciliation.

Provides:
- TranscriptItem: Committed or preview chunk delivered to consumers
- RecognitionResult / ResultEvent / ErrorEvent: Raw engine event payloads
- CommitPolicy: The selectable reconciliation strategies
- SessionState / SessionMetrics: Controller lifecycle and counters
- TranscriptError: Base exception for session errors
"""

import time
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from .normalizer import clean_transcript


class CommitPolicy(str, Enum):
    """Reconciliation strategy used by the commit tracker."""

    WHOLE_BUFFER = "whole_buffer"
    DEBOUNCED = "debounced"
    INCREMENTAL = "incremental"
    INDEX_WINDOW = "index_window"


class SessionState(Enum):
    """State of a recognition session."""

    IDLE = "idle"
    STARTING = "starting"
    LISTENING = "listening"
    STOPPING = "stopping"


def _new_item_id(is_final: bool) -> str:
    prefix = "final" if is_final else "interim"
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class TranscriptItem:
    """A chunk of transcript emitted to consumers.

    ``is_final=True`` items are committed and never revised; ``is_final=False``
    items are live previews that the next batch may replace.
    """

    text: str
    is_final: bool
    id: str = ""
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if not self.text or not self.text.strip():
            raise ValueError("TranscriptItem text must be non-empty")
        if not self.id:
            object.__setattr__(self, "id", _new_item_id(self.is_final))

    @classmethod
    def committed(cls, text: str) -> "TranscriptItem":
        return cls(text=text, is_final=True)

    @classmethod
    def preview(cls, text: str) -> "TranscriptItem":
        return cls(text=text, is_final=False)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "text": self.text,
            "is_final": self.is_final,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class RecognitionResult:
    """One recognition result: the primary alternative and its final flag."""

    transcript: str = ""
    is_final: bool = False

    @property
    def text(self) -> str:
        """Trimmed transcript, the form strategies read."""
        return clean_transcript(self.transcript)


@dataclass(frozen=True)
class ResultEvent:
    """Payload of an engine ``on_result`` event.

    ``results`` is the full list accumulated for the active utterance; a
    result's index is its position in this list. ``result_index`` is the
    engine's optional "first new index" hint.
    """

    results: Sequence[RecognitionResult] = ()
    result_index: int | None = None


@dataclass(frozen=True)
class ErrorEvent:
    """Payload of an engine ``on_error`` event."""

    error: str = ""
    message: str = ""

    @property
    def code(self) -> str:
        return self.error or "unknown"


@dataclass
class SessionMetrics:
    """Counters for the active controller.

    Used for monitoring and debugging reconciliation behaviour.
    """

    run_token: int = 0
    state: SessionState = SessionState.IDLE

    results_received: int = 0
    commits: int = 0
    previews: int = 0
    errors: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "run_token": self.run_token,
            "state": self.state.value,
            "results_received": self.results_received,
            "commits": self.commits,
            "previews": self.previews,
            "errors": self.errors,
        }


class TranscriptError(Exception):
    """Base exception for recognition session errors."""


class UnsupportedEngineError(TranscriptError):
    """Raised when no recognition engine is available in this environment."""

    def __init__(self, message: str = "Speech recognition engine is not available"):
        super().__init__(message)


class EngineStartError(TranscriptError):
    """Raised when the engine fails synchronously while starting."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Could not start recognition: {cause}")


class EngineRuntimeError(TranscriptError):
    """Reported for an asynchronous engine ``on_error`` event."""

    def __init__(self, code: str, message: str = ""):
        self.code = code
        detail = f"Speech recognition error: {code}"
        if message:
            detail = f"{detail} ({message})"
        super().__init__(detail)


class StopError(TranscriptError):
    """Raised when the engine fails while stopping."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Could not stop recognition: {cause}")
