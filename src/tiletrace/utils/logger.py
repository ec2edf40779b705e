"""Logging setup shared by the coordinator, the workers and the example scripts."""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str | int = "INFO") -> logging.Logger:
    """Configure root logging once and return the package logger.

    Worker processes call this too, since spawned processes start with
    logging unconfigured.
    """
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger = logging.getLogger("tiletrace")
    logger.setLevel(level)
    return logger
