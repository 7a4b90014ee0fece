"""
Logging configuration.

The terminal itself is the drawing surface, so log records go to stderr or a
file, never to stdout.
"""

import logging
import sys
from typing import Optional

LOGGER_NAME = 'term_flexbox'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the 'term_flexbox' logger.

    Args:
        level: Logging level (e.g. logging.DEBUG)
        log_file: Write to this file instead of stderr

    Returns:
        The configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Avoid duplicate records when called more than once
    if logger.hasHandlers():
        logger.handlers.clear()

    if log_file:
        handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    ))
    logger.addHandler(handler)

    logger.debug("Logging initialized")
    return logger
