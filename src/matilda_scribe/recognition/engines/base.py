"""Recognition engine capability consumed by the session controller.

The engine is an external collaborator: the controller constructs one
instance per run through an injected factory, configures it, assigns the
four handler slots and calls ``start()``.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from ..types import ErrorEvent, ResultEvent

StartHandler = Callable[[], None]
ResultHandler = Callable[[ResultEvent], None]
ErrorHandler = Callable[[ErrorEvent], None]
EndHandler = Callable[[], None]


@runtime_checkable
class RecognitionEngine(Protocol):
    """Protocol for streaming speech recognition engines.

    Events may be delivered after ``stop()`` returns; ``on_end`` is terminal
    and no further events follow it until the next instance starts.
    """

    lang: str
    continuous: bool
    interim_results: bool
    max_alternatives: int

    on_start: StartHandler | None
    on_result: ResultHandler | None
    on_error: ErrorHandler | None
    on_end: EndHandler | None

    def start(self) -> None:
        """Begin capturing audio. May raise synchronously."""
        ...

    def stop(self) -> None:
        """Request termination. May raise; ``on_end`` follows asynchronously."""
        ...


EngineFactory = Callable[[], RecognitionEngine]
