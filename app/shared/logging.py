"""
Logging configuration for the application.

Sets up structured logging with a consistent format.
Logging must not change program behavior.
Never logs sensitive data: upstream URLs carry API keys in their query
strings, so the HTTP client's own request log is silenced.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

QUIET_LOGGERS = ("uvicorn.access", "uvicorn.error", "httpx", "httpcore")


def configure_logging(level: str = "INFO") -> None:
    """Configure structured logging for the application.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
