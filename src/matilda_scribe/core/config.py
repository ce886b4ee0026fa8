"""Configuration loader that reads from config files."""
import os
from pathlib import Path
from typing import Any

import tomllib

DEFAULT_CONFIG: dict[str, Any] = {
    "session": {
        "language": "vi-VN",
        "pause_ms": 700,
        "strategy": "debounced",
        # Strategy B: commit pending text when the engine ends
        "flush_on_end": True,
        # "run" blocks any repeat within a run, "consecutive" only the previous commit
        "suppress_repeats": "run",
        "dedupe_across_runs": False,
    },
    "logging": {"level": "INFO", "console": False, "file": True},
}


class ConfigLoader:
    """Load configuration from config files."""

    def __init__(self, config_path: str | Path | None = None) -> None:
        if config_path is None:
            config_path = self._default_config_path()

        self.config_file = str(config_path)
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path, "rb") as f:
                full_config = tomllib.load(f)
            scribe_config = full_config.get("scribe", {})
        else:
            scribe_config = {}

        self._config = self._merge_dicts(DEFAULT_CONFIG, scribe_config)

    def _default_config_path(self) -> Path:
        env_path = os.environ.get("MATILDA_SCRIBE_CONFIG")
        if env_path:
            return Path(env_path)
        return Path.home() / ".matilda" / "scribe.toml"

    def _merge_dicts(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        merged = base.copy()
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._merge_dicts(merged[key], value)
            else:
                merged[key] = value
        return merged

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get a value using dot notation (e.g., 'session.pause_ms')"""
        keys = key_path.split(".")
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    @property
    def language(self) -> str:
        env_language = os.environ.get("MATILDA_SCRIBE_LANGUAGE")
        if env_language:
            return env_language
        return str(self.get("session.language", "vi-VN"))

    @property
    def pause_ms(self) -> int:
        return int(self.get("session.pause_ms", 700))

    @property
    def strategy(self) -> str:
        """Get the commit strategy name.

        Prioritizes 'MATILDA_SCRIBE_STRATEGY' environment variable if set.
        """
        env_strategy = os.environ.get("MATILDA_SCRIBE_STRATEGY")
        if env_strategy:
            return env_strategy
        return str(self.get("session.strategy", "debounced"))

    @property
    def flush_on_end(self) -> bool:
        return bool(self.get("session.flush_on_end", True))

    @property
    def suppress_repeats(self) -> str:
        return str(self.get("session.suppress_repeats", "run"))

    @property
    def dedupe_across_runs(self) -> bool:
        return bool(self.get("session.dedupe_across_runs", False))

    @property
    def log_level(self) -> str:
        return str(self.get("logging.level", "INFO"))

    @property
    def log_to_console(self) -> bool:
        return bool(self.get("logging.console", False))

    @property
    def log_to_file(self) -> bool:
        return bool(self.get("logging.file", True))


# Global singleton instance
_config_loader: ConfigLoader | None = None


def get_config() -> ConfigLoader:
    """Get the global config loader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader


def reset_config() -> None:
    """Drop the cached loader so the next get_config() re-reads the file."""
    global _config_loader
    _config_loader = None
