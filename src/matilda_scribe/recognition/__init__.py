"""Transcript reconciliation engine.

This package turns a noisy stream of partial/final recognition results into a
deduplicated, append-only transcript.

Public API:
- SessionController: Owns the listening lifecycle and run-token gating
- create_session(): Factory function to create controllers
- SessionConfig: Configuration from the scribe config file
- TranscriptItem: Committed or preview chunk delivered to consumers
- CommitStrategy: Protocol for pluggable reconciliation policies
"""

from .config import SessionConfig
from .engines import EngineFactory, RecognitionEngine, ScriptedEngine
from .factory import create_session, create_strategy
from .normalizer import clean_transcript, normalize_transcript
from .scheduler import DebounceScheduler
from .session import SessionController
from .strategies import (
    CommitStrategy,
    DebouncedStrategy,
    IncrementalStrategy,
    IndexWindowStrategy,
    WholeBufferStrategy,
)
from .tracker import CommitState, CommitTracker
from .types import (
    CommitPolicy,
    EngineRuntimeError,
    EngineStartError,
    ErrorEvent,
    RecognitionResult,
    ResultEvent,
    SessionMetrics,
    SessionState,
    StopError,
    TranscriptError,
    TranscriptItem,
    UnsupportedEngineError,
)

__all__ = [
    # Main API
    "SessionController",
    "create_session",
    # Configuration
    "SessionConfig",
    "CommitPolicy",
    # Types
    "TranscriptItem",
    "RecognitionResult",
    "ResultEvent",
    "ErrorEvent",
    "SessionMetrics",
    "SessionState",
    # Errors
    "TranscriptError",
    "UnsupportedEngineError",
    "EngineStartError",
    "EngineRuntimeError",
    "StopError",
    # Engines
    "EngineFactory",
    "RecognitionEngine",
    "ScriptedEngine",
    # Internal (for testing/extension)
    "CommitState",
    "CommitTracker",
    "CommitStrategy",
    "DebounceScheduler",
    "DebouncedStrategy",
    "IncrementalStrategy",
    "IndexWindowStrategy",
    "WholeBufferStrategy",
    "clean_transcript",
    "create_strategy",
    "normalize_transcript",
]
