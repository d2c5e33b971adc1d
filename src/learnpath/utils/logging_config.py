"""Logging setup shared by the CLI and the interactive session."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from learnpath.config import LEARNPATH_LOG_FILE, LEARNPATH_LOG_LEVEL

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_ROOT_LOGGER = "learnpath"


def configure_logging(
    level: str | None = None,
    *,
    log_file: str | Path | None = None,
) -> logging.Logger:
    """Configure the ``learnpath`` logger hierarchy.

    Args:
        level: Log level name. Defaults to ``LEARNPATH_LOG_LEVEL``.
        log_file: Optional log file. Defaults to ``LEARNPATH_LOG_FILE``; when
            neither is set, records at WARNING and above go to stderr.

    Returns:
        The configured package root logger.
    """
    logger = logging.getLogger(_ROOT_LOGGER)
    level_name = (level or LEARNPATH_LOG_LEVEL).upper()
    logger.setLevel(getattr(logging, level_name, logging.WARNING))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    target = log_file or LEARNPATH_LOG_FILE
    if target:
        handler: logging.Handler = logging.FileHandler(Path(target).expanduser(), encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.WARNING)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the ``learnpath`` hierarchy."""
    if name == _ROOT_LOGGER or name.startswith(_ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")
