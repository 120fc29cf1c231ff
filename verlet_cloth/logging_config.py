"""
Logging setup for the cloth simulator.

Library modules log through ``logging.getLogger(__name__)`` and stay silent
until an application calls :func:`setup_logging`.
"""
import logging
import sys
from typing import Optional, Union

import warp as wp

PACKAGE_LOGGER = "verlet_cloth"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def resolve_level(level: Union[int, str]) -> int:
    """Turn a level name such as ``"debug"`` or a numeric level into an int.

    Raises:
        ValueError: If ``level`` is a string that is not one of ``LOG_LEVELS``.
    """
    if isinstance(level, str):
        name = level.upper()
        if name not in LOG_LEVELS:
            raise ValueError(f"unknown log level {level!r}, expected one of {LOG_LEVELS}")
        return getattr(logging, name)
    return int(level)


def setup_logging(
    level: Union[int, str] = logging.INFO, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Attach console and optional file handlers to the package logger.

    Calling this again replaces the handlers from the previous call. Warp's
    own startup banner is silenced unless the level is DEBUG.

    Args:
        level: Level name from ``LOG_LEVELS`` or a numeric logging level.
        log_file: Optional path; the file is truncated and receives the same records.

    Returns:
        The ``verlet_cloth`` logger.
    """
    level = resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    wp.config.quiet = level > logging.DEBUG
    logger.debug("Logging at %s%s", logging.getLevelName(level),
                 f", also writing to {log_file}" if log_file else "")
    return logger
