"""Logging configuration for the URL shortener."""

import logging
import sys

LOGGER_NAME = "shortener"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the package logger.

    Every module logs through logging.getLogger(__name__), which places it
    under the 'shortener' logger configured here. Calling this again replaces
    the handler instead of stacking a second one.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        The configured 'shortener' logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(handler)

    return logger
