"""Logging configuration for the URL shortener."""

import logging
import sys

LOGGER_NAME = "shortener"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a stdout handler to the package logger.

    Module loggers (logging.getLogger(__name__)) all live under
    "shortener" and inherit this handler. Calling it twice does not
    duplicate output.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        The package logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger
