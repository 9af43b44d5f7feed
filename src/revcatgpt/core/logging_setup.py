"""
Logging setup for the service process.

All modules log through named ``revcatgpt.*`` loggers; this module only
decides where records go and at which level.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "FATAL": logging.CRITICAL,
    "PANIC": logging.CRITICAL,
    "CRITICAL": logging.CRITICAL,
}


def resolve_level(name: Optional[str]) -> int:
    """Map a configured level name to a logging level; unknown names mean DEBUG."""
    return _LEVELS.get((name or "").strip().upper(), logging.DEBUG)


def configure_logging(level: Optional[str] = "DEBUG", log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach a single handler to the ``revcatgpt`` logger.

    Records go to ``log_file`` (appended) when set, otherwise to stdout.
    Calling this again replaces the previous handler.
    """
    root = logging.getLogger("revcatgpt")
    root.setLevel(resolve_level(level))

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    return root
