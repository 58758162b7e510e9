"""Logging configuration for the launchctlutil command line tool.

The library only emits records through module loggers; handlers are
attached here, by the CLI.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_level(level: str) -> int:
    name = level.strip().upper()
    if name not in LOG_LEVELS:
        msg = f"unknown log level {level!r}, expected one of {', '.join(LOG_LEVELS)}"
        raise ValueError(msg)
    return logging.getLevelNamesMapping()[name]


def configure_logging(level: str) -> logging.Handler:
    """Send ``launchctlutil`` records at ``level`` and above to stderr."""
    numeric_level = parse_level(level)
    package_logger = logging.getLogger("launchctlutil")
    for old in list(package_logger.handlers):
        package_logger.removeHandler(old)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(numeric_level)
    return handler
