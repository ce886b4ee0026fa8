"""Matilda Scribe - transcript reconciliation for streaming speech recognition."""

from importlib import metadata
from importlib import import_module
from pathlib import Path
import tomllib
from typing import TYPE_CHECKING


def _get_version() -> str:
    try:
        return metadata.version("goobits-matilda-scribe")
    except metadata.PackageNotFoundError:
        pass

    try:
        pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
        return str(data["project"]["version"])
    except (OSError, KeyError, tomllib.TOMLDecodeError):
        return "unknown"


__version__ = _get_version()

if TYPE_CHECKING:
    from .core.config import ConfigLoader, get_config
    from .recognition import (
        CommitPolicy,
        ScriptedEngine,
        SessionConfig,
        SessionController,
        TranscriptItem,
        create_session,
    )

_LAZY_EXPORTS = {
    "ConfigLoader": (".core.config", "ConfigLoader"),
    "get_config": (".core.config", "get_config"),
    "CommitPolicy": (".recognition", "CommitPolicy"),
    "ScriptedEngine": (".recognition", "ScriptedEngine"),
    "SessionConfig": (".recognition", "SessionConfig"),
    "SessionController": (".recognition", "SessionController"),
    "TranscriptItem": (".recognition", "TranscriptItem"),
    "create_session": (".recognition", "create_session"),
}


def __getattr__(name):
    if name in {"core", "recognition"}:
        module = import_module(f".{name}", __name__)
        globals()[name] = module
        return module

    if name not in _LAZY_EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attr_name = _LAZY_EXPORTS[name]
    module = import_module(module_name, __name__)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


__all__ = [
    "ConfigLoader",
    "get_config",
    "CommitPolicy",
    "ScriptedEngine",
    "SessionConfig",
    "SessionController",
    "TranscriptItem",
    "create_session",
]
