# filename: snapdir/log.py
"""
Logging helpers for snapdir.

The core never prints. Diagnostic messages go through a log hook: either a
callback injected by the caller (via SnapshotConfig.log) or, when none is
given, the ``snapdir`` logger at DEBUG level.
"""

import logging
import sys
from typing import Callable, Optional

LOGGER_NAME = "snapdir"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LogHook = Callable[[str], None]


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a logger instance for the snapdir package.

    Args:
        name: Logger name (typically __name__ of the calling module)
        level: Optional logging level override

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger


def configure_logging(level: int = logging.INFO, format_string: Optional[str] = None) -> None:
    """
    Attach a stderr handler to the package logger.

    Called by the command-line adapter; library users route the ``snapdir``
    logger however they like instead.

    Args:
        level: Logging level (default: INFO)
        format_string: Custom format string (optional)
    """
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(level)

    # Only add handler if none exist (avoid duplicate handlers)
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
        package_logger.addHandler(handler)


def make_log_hook(callback: Optional[LogHook], logger: Optional[logging.Logger] = None) -> LogHook:
    """Return the injected callback, or the given (package) logger's debug method."""
    if callback is not None:
        return callback
    return (logger or logging.getLogger(LOGGER_NAME)).debug
