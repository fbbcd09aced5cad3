"""Process-wide logging setup.

Entry points (HTTP handler, CLI, scheduler) call ``setup_logging`` once;
modules only use ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Iterable, Optional

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that flood INFO with per-request lines
NOISY_LOGGERS = ("urllib3", "requests", "httpx", "httpcore", "supabase", "feedparser")


def _resolve_level(level: Optional[str]) -> int:
    name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    return getattr(logging, name, logging.INFO)


def setup_logging(
    level: Optional[str] = None,
    format_string: str = DEFAULT_FORMAT,
    quiet_loggers: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """Send log records to stdout.

    Args:
        level: Level name; falls back to ``LOG_LEVEL`` and then ``INFO``.
        format_string: Record format.
        quiet_loggers: Loggers capped at WARNING.
    """
    logging.basicConfig(
        level=_resolve_level(level),
        format=format_string,
        datefmt=DEFAULT_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Return ``logging.getLogger(name)``, optionally pinned to ``level``."""
    logger = logging.getLogger(name)
    if level:
        logger.setLevel(_resolve_level(level))
    return logger
