"""Environment access for configuration objects.

``.env`` files are loaded with python-dotenv; typed accessors turn raw strings
into ints and floats and fail loudly on garbage.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)


def load_env(env_file: Optional[str] = None, override: bool = False) -> bool:
    """Load a ``.env`` file into ``os.environ``.

    Args:
        env_file: Explicit path. When omitted, the nearest ``.env`` at or above
            the working directory is used.
        override: Replace variables that are already set.

    Returns:
        True when a file was found and loaded.
    """
    path = env_file or find_dotenv(usecwd=True)
    if not path or not os.path.exists(path):
        if env_file:
            logger.warning("Env file %s does not exist", env_file)
        else:
            logger.debug("No .env file found; using process environment only")
        return False

    load_dotenv(path, override=override)
    logger.debug("Loaded environment from %s", path)
    return True


def get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(key, default)


def _read_number(key: str, cast, kind: str, default):
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{key} must be {kind}, got {raw!r}") from exc


def get_int_env(key: str, default: Optional[int] = None) -> Optional[int]:
    return _read_number(key, int, "an integer", default)


def get_float_env(key: str, default: Optional[float] = None) -> Optional[float]:
    return _read_number(key, float, "numeric", default)
