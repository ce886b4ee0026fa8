"""Recognition session controller.

SessionController owns one logical listening lifecycle:
- Builds a fresh engine instance per start() through the injected factory
- Tags every run with a monotonically increasing run token
- Forwards engine events to the run's CommitTracker
- Delivers transcript items, errors and listening state to the consumer

Every engine handler closes over the token of the run that registered it and
is a no-op once a newer run has started. Stopping an engine does not cancel
its in-flight events, so this gate is what keeps a superseded run from
touching the current one.
"""

import asyncio
import dataclasses
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from .config import SessionConfig
from .factory import create_strategy
from .scheduler import DebounceScheduler
from .tracker import CommitState, CommitTracker
from .types import (
    EngineRuntimeError,
    EngineStartError,
    ErrorEvent,
    ResultEvent,
    SessionMetrics,
    SessionState,
    StopError,
    TranscriptError,
    TranscriptItem,
    UnsupportedEngineError,
)

if TYPE_CHECKING:
    from .engines.base import EngineFactory, RecognitionEngine
    from .scheduler import CallLater

logger = logging.getLogger(__name__)

DataCallback = Callable[[list[TranscriptItem]], None]
ErrorCallback = Callable[[TranscriptError], None]
StateCallback = Callable[[bool], None]


@dataclass(frozen=True)
class _Callbacks:
    on_data: DataCallback | None = None
    on_error: ErrorCallback | None = None
    on_state: StateCallback | None = None


class SessionController:
    """Drives a recognition engine and reconciles its results.

    The debounced strategy schedules its silence timer on the asyncio loop
    running when start() is called, or on an explicit ``call_later``.
    Starting it with neither is reported as EngineStartError.

    Example:
        controller = SessionController(ScriptedEngine, SessionConfig())
        controller.start(
            "en-US",
            on_data=lambda items: render(items),
            on_error=lambda error: show(error),
            on_state=lambda listening: toggle(listening),
        )
        ...
        controller.stop()   # the engine's end event reports listening=False

    """

    def __init__(
        self,
        engine_factory: Optional["EngineFactory"],
        config: SessionConfig | None = None,
        *,
        call_later: Optional["CallLater"] = None,
    ):
        """Initialize the controller.

        Args:
            engine_factory: Builds one engine per run; None when this
                environment has no recognition engine
            config: Session configuration (loaded from file if None)
            call_later: Timer primitive for the silence window (defaults to
                the asyncio loop running at start())

        """
        self._engine_factory = engine_factory
        self.config = config or SessionConfig.from_config()
        self._call_later = call_later

        self._run_token = 0
        self._engine: Optional["RecognitionEngine"] = None
        self._tracker: CommitTracker | None = None
        self._callbacks = _Callbacks()
        self._carried_commit = ""
        self._consumer_error: Exception | None = None

        self._metrics = SessionMetrics()

    @property
    def is_supported(self) -> bool:
        """Whether a recognition engine is available."""
        return self._engine_factory is not None

    @property
    def run_token(self) -> int:
        return self._run_token

    @property
    def state(self) -> SessionState:
        return self._metrics.state

    @property
    def is_listening(self) -> bool:
        return self._metrics.state == SessionState.LISTENING

    @property
    def metrics(self) -> SessionMetrics:
        return self._metrics

    @property
    def tracker(self) -> CommitTracker | None:
        """Commit tracker of the active run, if any."""
        return self._tracker

    def start(
        self,
        language: str | None = None,
        *,
        pause_ms: int | None = None,
        on_data: DataCallback | None = None,
        on_error: ErrorCallback | None = None,
        on_state: StateCallback | None = None,
    ) -> None:
        """Start a new listening run, superseding any previous one.

        Engine failures are reported through ``on_error``, never raised.

        Args:
            language: BCP 47 language tag (config default if None)
            pause_ms: Silence window override for the debounced strategy
            on_data: Receives each batch of transcript items
            on_error: Receives TranscriptError instances
            on_state: Receives listening state changes

        Raises:
            ValueError: If ``pause_ms`` is not positive; nothing is started

        """
        callbacks = _Callbacks(on_data=on_data, on_error=on_error, on_state=on_state)

        if self._engine_factory is None:
            self._report(UnsupportedEngineError(), callbacks)
            return

        run_config = dataclasses.replace(
            self.config,
            language=language or self.config.language,
            pause_ms=pause_ms if pause_ms is not None else self.config.pause_ms,
        )

        self._run_token += 1
        token = self._run_token
        self._callbacks = callbacks
        self._metrics.run_token = token

        self._discard_run()

        try:
            self._tracker = self._create_tracker(token, run_config)
            engine = self._engine_factory()
        except Exception as e:
            self._fail_start(e)
            return

        engine.lang = run_config.language
        engine.continuous = True
        engine.interim_results = True
        engine.max_alternatives = 1

        engine.on_start = lambda: self._handle_start(token)
        engine.on_result = lambda event: self._handle_result(token, event)
        engine.on_error = lambda event: self._handle_error(token, event)
        engine.on_end = lambda: self._handle_end(token)

        self._engine = engine
        self._set_state(SessionState.STARTING)
        logger.info(
            f"Starting run {token} ({run_config.language}, "
            f"{run_config.strategy.value} strategy)"
        )

        self._consumer_error = None
        try:
            engine.start()
        except Exception as e:
            # Raised by a consumer callback the engine fired synchronously
            if e is self._consumer_error:
                raise
            if token == self._run_token:
                self._fail_start(e)

    def stop(self) -> None:
        """Request the engine to stop.

        Does not emit items or state by itself; the engine's end event does.
        A no-op when no run is active.
        """
        engine = self._engine
        if engine is None:
            return

        logger.info(f"Stopping run {self._run_token}")
        self._set_state(SessionState.STOPPING)
        try:
            engine.stop()
        except Exception as e:
            self._report(StopError(e))

    def _create_tracker(self, token: int, run_config: SessionConfig) -> CommitTracker:
        strategy = create_strategy(run_config)

        state = CommitState()
        scheduler = None
        if strategy.uses_silence_window:
            scheduler = DebounceScheduler(run_config.pause_ms, call_later=self._resolve_call_later())
            # Blocks an immediate repeat of the previous run's last commit
            if run_config.dedupe_across_runs and self._carried_commit:
                state.last_committed = self._carried_commit

        return CommitTracker(
            strategy,
            emit=lambda items: self._deliver(token, items),
            state=state,
            scheduler=scheduler,
        )

    def _resolve_call_later(self) -> "CallLater":
        """Bind the silence timer to the caller's event loop for this run."""
        if self._call_later is not None:
            return self._call_later
        try:
            return asyncio.get_running_loop().call_later
        except RuntimeError:
            raise RuntimeError(
                f"{self.config.strategy.value} strategy needs a running asyncio event loop "
                "or an explicit call_later"
            ) from None

    def _fail_start(self, cause: BaseException) -> None:
        self._report(EngineStartError(cause))
        self._close_tracker()
        self._engine = None
        self._set_state(SessionState.IDLE)
        self._notify_state(False)

    def _discard_run(self) -> None:
        """Best-effort stop of the previous engine; never blocks a new run."""
        previous = self._engine
        self._engine = None
        self._close_tracker()

        if previous is None:
            return
        try:
            previous.stop()
        except Exception as e:
            logger.debug(f"Ignoring failure to stop superseded engine: {e}")

    def _close_tracker(self) -> None:
        tracker = self._tracker
        self._tracker = None
        if tracker is None:
            return
        tracker.close()
        if tracker.state.last_committed:
            self._carried_commit = tracker.state.last_committed

    def _handle_start(self, token: int) -> None:
        if token != self._run_token:
            return
        logger.info(f"Run {token} listening")
        self._set_state(SessionState.LISTENING)
        self._notify_state(True)

    def _handle_result(self, token: int, event: ResultEvent) -> None:
        if token != self._run_token:
            logger.debug(f"Dropped result from stale run {token}")
            return
        if self._tracker is None:
            return
        self._metrics.results_received += 1
        self._tracker.on_result(event)

    def _handle_error(self, token: int, event: ErrorEvent) -> None:
        if token != self._run_token:
            return
        self._report(EngineRuntimeError(event.code, event.message))

    def _handle_end(self, token: int) -> None:
        if token != self._run_token:
            logger.debug(f"Dropped end event from stale run {token}")
            return

        if self._tracker is not None:
            self._tracker.on_end()
        self._close_tracker()
        self._engine = None

        logger.info(
            f"Run {token} ended: {self._metrics.commits} commits, "
            f"{self._metrics.previews} previews"
        )
        self._set_state(SessionState.IDLE)
        self._notify_state(False)

    def _deliver(self, token: int, items: Sequence[TranscriptItem]) -> None:
        if token != self._run_token or not items:
            return

        batch = list(items)
        for item in batch:
            if item.is_final:
                self._metrics.commits += 1
                logger.debug(f"Committed: '{item.text[:50]}'")
            else:
                self._metrics.previews += 1

        self._invoke(self._callbacks.on_data, batch)

    def _report(self, error: TranscriptError, callbacks: _Callbacks | None = None) -> None:
        callbacks = callbacks or self._callbacks
        self._metrics.errors += 1
        logger.warning(str(error))
        self._invoke(callbacks.on_error, error)

    def _notify_state(self, listening: bool) -> None:
        self._invoke(self._callbacks.on_state, listening)

    def _set_state(self, state: SessionState) -> None:
        self._metrics.state = state

    def _invoke(self, callback: Callable[[Any], None] | None, arg: Any) -> None:
        if callback is None:
            return
        try:
            callback(arg)
        except Exception as e:
            self._consumer_error = e
            raise
