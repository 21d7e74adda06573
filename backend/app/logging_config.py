"""Logging setup for SplitFrame."""

from __future__ import annotations

import logging
import os
import sys

LOGGER_NAME = "splitframe"
LEVEL_ENV_VAR = "SPLITFRAME_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"


def resolve_level(level: str | None = None) -> int:
    """Numeric level for a name, falling back to the environment, then INFO."""
    name = level or os.environ.get(LEVEL_ENV_VAR) or "INFO"
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: str | None = None) -> logging.Logger:
    """Attach a stdout handler to the ``splitframe`` logger.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR). Defaults to
            ``$SPLITFRAME_LOG_LEVEL``.

    Returns:
        The ``splitframe`` logger; every module logs under it.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_level(level))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)

    # PIL logs every PNG chunk at DEBUG
    logging.getLogger("PIL").setLevel(logging.INFO)
    return logger
