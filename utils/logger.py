"""
utils/logger.py
---------------
Process-wide logging setup for the ledger.
Every module obtains its logger with `get_logger(__name__)`; the level
comes from the LOG_LEVEL setting.
"""

import logging
import sys

from config import LOG_LEVEL

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_configured = False


def _resolve_level(name: str) -> int:
    """Map a level name such as 'debug' to its numeric value (INFO if unknown)."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _configure() -> None:
    global _configured
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    root = logging.getLogger()
    root.setLevel(_resolve_level(LOG_LEVEL))
    root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Named logger for a ledger module, configuring the root logger on first use.

    Args:
        name: Usually ``__name__`` of the calling module.
    """
    _configure()
    return logging.getLogger(name)
