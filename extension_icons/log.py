"""Console logging setup for the icon generator."""

from __future__ import annotations

import logging

from .config import ICON_LOG_LEVEL

LOGGER_NAME = "extension_icons"


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a console handler to the package logger.

    Calling this more than once replaces the previous handler rather than
    stacking duplicates.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level or ICON_LOG_LEVEL)
    logger.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(console)
    return logger
