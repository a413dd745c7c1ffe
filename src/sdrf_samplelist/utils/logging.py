"""
Logging for the SDRF sample list annotator.

All records go to stderr; stdout carries the mzML document when the tool is
used as a pipe filter.
"""

import logging
import sys

PACKAGE_LOGGER = "sdrf_samplelist"
HANDLER_NAME = "sdrf_samplelist.stderr"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s]: %(message)s"

_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def setup_logging(verbose: int = 0) -> logging.Logger:
    """
    Configure the package logger from a ``-v`` count.

    Calling it again replaces the handler installed by the previous call
    instead of adding a second one.

    Args:
        verbose: 0 for WARNING, 1 for INFO, 2 or more for DEBUG

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_LEVELS.get(verbose, logging.DEBUG))

    for handler in list(logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module below the package namespace."""
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
