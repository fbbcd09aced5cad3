"""Supabase client factory.

Articles, insights and source configurations share one Supabase project; every
store receives its client from ``get_supabase_client`` unless a test injects one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from src.shared.utils.env import get_env

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA = "public"


@dataclass
class SupabaseConfig:
    """Project URL, API key and schema of the Supabase backend."""

    url: str
    key: str
    schema: str = DEFAULT_SCHEMA

    def validate(self) -> None:
        missing = [name for name, value in (("url", self.url), ("key", self.key)) if not value]
        if missing:
            raise ValueError(f"Supabase {' and '.join(missing)} must be provided")
        self.schema = (self.schema or DEFAULT_SCHEMA).strip()

    @classmethod
    def from_env(cls) -> SupabaseConfig:
        """Read ``SUPABASE_URL``, ``SUPABASE_KEY`` and ``SUPABASE_SCHEMA``.

        Raises:
            ValueError: If the URL or key is not set
        """
        config = cls(
            url=get_env("SUPABASE_URL") or "",
            key=get_env("SUPABASE_KEY") or "",
            schema=get_env("SUPABASE_SCHEMA", DEFAULT_SCHEMA) or DEFAULT_SCHEMA,
        )
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(
                f"{exc}. Set SUPABASE_URL and SUPABASE_KEY in your .env file or environment."
            ) from exc
        return config


def get_supabase_client(config: Optional[SupabaseConfig] = None) -> Any:
    """Create a Supabase client, scoped to ``config.schema`` when it is not public."""

    from supabase import create_client

    config = config or SupabaseConfig.from_env()
    config.validate()

    client = create_client(config.url, config.key)
    logger.debug("Created Supabase client for %s", config.url)

    if config.schema == DEFAULT_SCHEMA:
        return client

    scope = getattr(client, "schema", None)
    if not callable(scope):
        logger.warning("Supabase client cannot switch schema; using %s", DEFAULT_SCHEMA)
        return client
    return scope(config.schema) or client
