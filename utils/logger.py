"""
utils/logger.py
---------------
Centralized logging configuration.
All modules should use `get_logger(__name__)` to obtain a logger instance.
The root level comes from LOG_LEVEL in the environment (default: INFO).
"""

import logging
import sys

from config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that flood the output at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore")

_initialized = False


def resolve_level(name: str) -> int | None:
    """Map a level name such as 'debug' or 'WARNING' to its number; None if unknown."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else None


def _init_logging() -> None:
    """Configure the root logger once, attaching a single stdout handler."""
    global _initialized
    if _initialized:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    root = logging.getLogger()
    level = resolve_level(LOG_LEVEL)
    root.setLevel(level if level is not None else logging.INFO)
    root.addHandler(handler)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))
    _initialized = True
    if level is None:
        logging.getLogger(__name__).warning(f"Unknown LOG_LEVEL {LOG_LEVEL!r}, logging at INFO.")


def get_logger(name: str) -> logging.Logger:
    """Get a named logger; the first call sets up logging for the process."""
    _init_logging()
    return logging.getLogger(name)
