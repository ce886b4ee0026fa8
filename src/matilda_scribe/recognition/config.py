"""Session configuration from the scribe config file.

Provides SessionConfig with validated defaults.
"""

from dataclasses import dataclass
from typing import Literal

from ..core.config import ConfigLoader, get_config
from .types import CommitPolicy

SUPPRESS_REPEAT_MODES = ("run", "consecutive")


@dataclass
class SessionConfig:
    """Configuration for recognition sessions.

    Loaded from config["session"] with sensible defaults.
    """

    language: str = "vi-VN"

    # Silence window before strategy B commits
    pause_ms: int = 700

    strategy: CommitPolicy = CommitPolicy.DEBOUNCED

    # Strategy B: flush pending text on the terminal end event
    flush_on_end: bool = True
    suppress_repeats: Literal["run", "consecutive"] = "run"
    # Strategy B: keep the last committed text when a new run starts
    dedupe_across_runs: bool = False

    def __post_init__(self) -> None:
        try:
            self.strategy = CommitPolicy(self.strategy)
        except ValueError:
            valid = ", ".join(p.value for p in CommitPolicy)
            raise ValueError(f"Unknown strategy '{self.strategy}'. Use one of: {valid}") from None
        if self.pause_ms <= 0:
            raise ValueError(f"pause_ms must be positive, got {self.pause_ms}")
        if self.suppress_repeats not in SUPPRESS_REPEAT_MODES:
            raise ValueError(
                f"Unknown suppress_repeats '{self.suppress_repeats}'. "
                f"Use one of: {', '.join(SUPPRESS_REPEAT_MODES)}"
            )

    @classmethod
    def from_config(cls, loader: ConfigLoader | None = None) -> "SessionConfig":
        """Load session config from the scribe config file.

        Args:
            loader: Loader to read from (the global one if None)

        """
        config = loader or get_config()
        return cls(
            language=config.language,
            pause_ms=config.pause_ms,
            strategy=config.strategy,
            flush_on_end=config.flush_on_end,
            suppress_repeats=config.suppress_repeats,
            dedupe_across_runs=config.dedupe_across_runs,
        )

    @property
    def pause_seconds(self) -> float:
        """Silence window in seconds."""
        return self.pause_ms / 1000.0
