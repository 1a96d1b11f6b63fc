"""Logging configuration. Outputs to stderr so stdout stays clean for command output."""

import logging
import sys


def setup_logger(name: str = "redmine_cli", level: str = "WARNING") -> logging.Logger:
    """Create a logger that writes to stderr.

    Calling it again only adjusts the level of the existing logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s")
    )
    logger.addHandler(handler)
    return logger
