"""Factory for commit strategies and session controllers.

Provides create_session() that:
- Resolves configuration (config file when none given)
- Returns a ready-to-use SessionController

and create_strategy() used by the controller for every run.
"""

import logging
from typing import TYPE_CHECKING, Optional

from .config import SessionConfig
from .types import CommitPolicy

if TYPE_CHECKING:
    from .engines.base import EngineFactory
    from .scheduler import CallLater
    from .session import SessionController
    from .strategies import CommitStrategy

logger = logging.getLogger(__name__)


def create_strategy(config: SessionConfig) -> "CommitStrategy":
    """Create strategy instance for the configured policy.

    Args:
        config: Session configuration

    Returns:
        Strategy instance

    """
    policy = CommitPolicy(config.strategy)

    if policy == CommitPolicy.DEBOUNCED:
        from .strategies import DebouncedStrategy

        return DebouncedStrategy(
            flush_on_end=config.flush_on_end,
            suppress_repeats=config.suppress_repeats,
        )

    if policy == CommitPolicy.INCREMENTAL:
        from .strategies import IncrementalStrategy

        return IncrementalStrategy()

    if policy == CommitPolicy.INDEX_WINDOW:
        from .strategies import IndexWindowStrategy

        return IndexWindowStrategy()

    from .strategies import WholeBufferStrategy

    return WholeBufferStrategy()


def create_session(
    engine_factory: Optional["EngineFactory"],
    config: Optional[SessionConfig] = None,
    call_later: Optional["CallLater"] = None,
) -> "SessionController":
    """Create a session controller around an engine capability.

    Args:
        engine_factory: Builds one engine instance per run, or None when no
            engine is available (the controller then reports unsupported)
        config: Optional config (loaded from the config file if None)
        call_later: Optional timer primitive for the silence window

    Returns:
        Configured SessionController

    """
    from .session import SessionController

    if config is None:
        config = SessionConfig.from_config()

    controller = SessionController(engine_factory, config, call_later=call_later)
    logger.info(
        f"Created session controller with {config.strategy.value} strategy "
        f"(supported={controller.is_supported})"
    )
    return controller
