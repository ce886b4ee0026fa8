"""Silence-window debounce scheduler.

A single-shot delayed callback that is cancelled and re-armed on every
incoming result. At most one timer is live per scheduler.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


# Same shape as asyncio.AbstractEventLoop.call_later
CallLater = Callable[..., TimerHandle]


class DebounceScheduler:
    """Delays a callback until ``delay_ms`` passes without a re-arm.

    By default timers are scheduled on the running asyncio loop. Pass
    ``call_later`` to use another clock (tests use a manual one).

    Example:
        scheduler = DebounceScheduler(700)
        scheduler.arm(commit)   # t=0
        scheduler.arm(commit)   # t=0.3, previous timer cancelled
        # commit() runs once at t=1.0

    """

    def __init__(self, delay_ms: int, call_later: CallLater | None = None):
        if delay_ms <= 0:
            raise ValueError(f"delay_ms must be positive, got {delay_ms}")
        self.delay_ms = delay_ms
        self._call_later = call_later
        self._handle: TimerHandle | None = None
        self.fired_count = 0

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000.0

    @property
    def pending(self) -> bool:
        """Whether a timer is armed and has not fired."""
        return self._handle is not None

    def arm(self, callback: Callable[[], Any]) -> None:
        """(Re)start the silence window; ``callback`` runs when it elapses."""
        self.cancel()
        call_later = self._call_later or asyncio.get_running_loop().call_later
        self._handle = call_later(self.delay_seconds, self._fire, callback)

    def cancel(self) -> None:
        """Cancel the pending timer, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, callback: Callable[[], Any]) -> None:
        self._handle = None
        self.fired_count += 1
        logger.debug(f"Silence window of {self.delay_ms}ms elapsed")
        callback()
