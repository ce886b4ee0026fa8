"""Shared pytest configuration.

Keeps tests away from the user's config file and log directory.
"""

import pytest

from matilda_scribe.core import config as config_module
from matilda_scribe.core.logging import shutdown_logging


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("MATILDA_SCRIBE_CONFIG", str(tmp_path / "missing-scribe.toml"))
    monkeypatch.setenv("MATILDA_SCRIBE_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("MATILDA_SCRIBE_STRATEGY", raising=False)
    monkeypatch.delenv("MATILDA_SCRIBE_LANGUAGE", raising=False)
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() so caplog sees records in later tests."""
    yield
    shutdown_logging()
