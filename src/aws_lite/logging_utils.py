"""Logging for the aws-lite engine.

Engine modules log through loggers under ``aws_lite``. Handlers live on the
root logger and are installed once, by the first ``get_logger`` call or an
explicit ``configure_logging``.
"""

from __future__ import annotations

import logging
import sys
import threading
from pathlib import Path

from aws_lite.config import Settings, load_settings

ENGINE_LOGGER = "aws_lite"

_logging_configured = False
_logging_lock = threading.Lock()

_logger = logging.getLogger(__name__)


def _level(settings: Settings) -> int:
    if settings.debug:
        return logging.DEBUG
    return getattr(logging, settings.logging.level.upper(), logging.INFO)


def _handlers(log_file: str | None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        path = Path(log_file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(path))
        except OSError as exc:
            _logger.warning("Failed to open log file %s: %s", log_file, exc)

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(settings: Settings | None = None) -> None:
    """Install root handlers from ``settings``, loading them when omitted."""
    global _logging_configured

    settings = settings or load_settings()
    logging.basicConfig(
        level=_level(settings),
        handlers=_handlers(settings.logging.file),
        force=True,
    )
    _logging_configured = True


def get_logger(name: str, *, debug: bool = False) -> logging.Logger:
    """Return logger ``name``, configuring logging on first use.

    ``debug=True`` opens the whole ``aws_lite`` tree at DEBUG. A client built
    with ``debug=True`` traces its requests this way while the root level
    stays as configured.
    """
    with _logging_lock:
        if not _logging_configured:
            configure_logging()
        if debug:
            logging.getLogger(ENGINE_LOGGER).setLevel(logging.DEBUG)
    return logging.getLogger(name)
