"""Logging setup for lookup-cache.

Usage:
    from lookup_cache.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Match found (max. sim: %.3f)", score)
"""

import logging
import sys

PACKAGE_LOGGER = "lookup_cache"
DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%H:%M:%S"

_configured = False


def _configure_root(level: str) -> None:
    """Attach a single console handler to the package logger.

    Records stop at the package logger, so an application that configures
    the Python root logger does not print them a second time.
    """
    global _configured
    if _configured:
        return

    root = logging.getLogger(PACKAGE_LOGGER)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, DEFAULT_DATE_FORMAT))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module, configuring the package logger on first use.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        The configured logger.
    """
    from lookup_cache.config import settings

    _configure_root(settings.log_level)
    return logging.getLogger(name)
