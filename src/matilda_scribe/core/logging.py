"""Logging setup for the ``matilda_scribe`` logger tree.

Modules log through ``logging.getLogger(__name__)`` and never install
handlers themselves. Entry points call :func:`configure_logging` once with
the loaded config. Records go through a queue to a listener thread that owns
the file and console handlers, so engine callbacks never wait on disk I/O.
"""

import atexit
import logging
import os
import sys
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import SimpleQueue
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import ConfigLoader

LOGGER_NAME = "matilda_scribe"
LOG_FILENAME = "matilda-scribe.log"

_FORMATTER = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
)

_listener: QueueListener | None = None


def log_dir() -> Path:
    """Directory holding the log file: ``MATILDA_SCRIBE_LOG_DIR`` or ~/.matilda/logs."""
    env_dir = os.environ.get("MATILDA_SCRIBE_LOG_DIR")
    if env_dir:
        return Path(env_dir)
    return Path.home() / ".matilda" / "logs"


def _file_handler() -> logging.Handler:
    directory = log_dir()
    directory.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        directory / LOG_FILENAME, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )


def setup_logging(level: str = "INFO", *, console: bool = False, log_file: bool = True) -> logging.Logger:
    """(Re)configure the package logger.

    Any previous configuration is shut down first, so repeated calls leave
    exactly one set of handlers.

    Args:
        level: Level name for the whole tree (DEBUG, INFO, WARNING, ERROR)
        console: Also write records to stderr
        log_file: Write records to the rotating file under :func:`log_dir`

    Returns:
        The ``matilda_scribe`` logger

    """
    global _listener

    shutdown_logging()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    logger.propagate = False

    handlers: list[logging.Handler] = []
    file_error = None
    if log_file:
        try:
            handlers.append(_file_handler())
        except OSError as e:
            file_error = e
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))

    if not handlers:
        logger.addHandler(logging.NullHandler())
    else:
        for handler in handlers:
            handler.setFormatter(_FORMATTER)
        queue: SimpleQueue = SimpleQueue()
        _listener = QueueListener(queue, *handlers)
        _listener.start()
        logger.addHandler(QueueHandler(queue))

    if file_error is not None:
        logger.warning(f"File logging disabled: {file_error}")
    return logger


def configure_logging(config: "ConfigLoader", *, debug: bool = False) -> logging.Logger:
    """Apply the ``[scribe.logging]`` table; ``debug`` forces DEBUG to stderr."""
    return setup_logging(
        "DEBUG" if debug else config.log_level,
        console=debug or config.log_to_console,
        log_file=config.log_to_file,
    )


def shutdown_logging() -> None:
    """Flush pending records and detach everything setup_logging() installed."""
    global _listener

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if _listener is not None:
        _listener.stop()
        for handler in _listener.handlers:
            handler.close()
        _listener = None

    logger.setLevel(logging.NOTSET)
    logger.propagate = True


atexit.register(shutdown_logging)

__all__ = ["configure_logging", "log_dir", "setup_logging", "shutdown_logging"]
