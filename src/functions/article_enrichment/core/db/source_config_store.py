"""
Source configuration stores.

A source configuration is a named, ordered list of feed URLs. Configurations
live in Supabase; a read-only YAML variant serves local runs.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml

from src.shared.db.connection import get_supabase_client

from ..config import TableConfig
from ..contracts import SourceConfiguration
from ..errors import SourceConfigurationNotFound
from .paging import fetch_all_rows

logger = logging.getLogger(__name__)

SUPPORTED_CONFIG_VERSION = 1


class SupabaseSourceConfigurationStore:
    """CRUD access to source configurations."""

    def __init__(self, client: Optional[Any] = None, *, table: Optional[str] = None) -> None:
        self.client = client or get_supabase_client()
        self.table = table or TableConfig().source_configurations

    def list_all(self) -> List[SourceConfiguration]:
        rows = fetch_all_rows(
            lambda: self.client.table(self.table).select("*").order("id")
        )
        return [SourceConfiguration.from_record(row) for row in rows]

    def get(self, uuid: str) -> Optional[SourceConfiguration]:
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("uuid", uuid)
            .limit(1)
            .execute()
        )
        rows = getattr(response, "data", None) or []
        return SourceConfiguration.from_record(rows[0]) if rows else None

    def create(self, name: str, sources: Sequence[str]) -> SourceConfiguration:
        configuration = SourceConfiguration(name=name, sources=list(sources))
        response = self.client.table(self.table).insert(configuration.to_record()).execute()
        rows = getattr(response, "data", None) or []
        return SourceConfiguration.from_record(rows[0]) if rows else configuration

    def update(
        self,
        uuid: str,
        *,
        name: Optional[str] = None,
        sources: Optional[Sequence[str]] = None,
    ) -> SourceConfiguration:
        """Update name and/or sources.

        Raises:
            SourceConfigurationNotFound: If no configuration has this uuid
        """

        changes: Dict[str, Any] = {}
        if name is not None:
            changes["name"] = name
        if sources is not None:
            changes["sources"] = list(sources)
        if not changes:
            existing = self.get(uuid)
            if existing is None:
                raise SourceConfigurationNotFound(uuid)
            return existing

        response = self.client.table(self.table).update(changes).eq("uuid", uuid).execute()
        rows = getattr(response, "data", None) or []
        if not rows:
            raise SourceConfigurationNotFound(uuid)
        return SourceConfiguration.from_record(rows[0])

    def delete(self, uuid: str) -> None:
        response = self.client.table(self.table).delete().eq("uuid", uuid).execute()
        if not getattr(response, "data", None):
            raise SourceConfigurationNotFound(uuid)


class FileSourceConfigurationStore:
    """Read-only source configurations loaded from a YAML file.

    Expected layout::

        version: 1
        sources:
          - uuid: tech-daily
            name: Tech daily
            sources:
              - https://example.com/feed.xml
    """

    def __init__(self, config_path: Union[str, Path]) -> None:
        self.config_path = Path(config_path)
        self._configurations = self._load()

    def list_all(self) -> List[SourceConfiguration]:
        return list(self._configurations)

    def get(self, uuid: str) -> Optional[SourceConfiguration]:
        for configuration in self._configurations:
            if configuration.uuid == uuid:
                return configuration
        return None

    def _load(self) -> List[SourceConfiguration]:
        if not self.config_path.exists():
            raise FileNotFoundError(f"Source configuration file not found: {self.config_path}")

        logger.info(f"Loading source configurations from {self.config_path}")
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}") from e

        if not isinstance(raw_config, dict):
            raise ValueError("Source configuration file must be a YAML dictionary")

        version = raw_config.get("version")
        if version != SUPPORTED_CONFIG_VERSION:
            raise ValueError(
                f"Unsupported configuration version: {version}. "
                f"Expected version {SUPPORTED_CONFIG_VERSION}."
            )

        configurations: List[SourceConfiguration] = []
        for index, entry in enumerate(raw_config.get("sources") or []):
            if not isinstance(entry, dict) or not entry.get("uuid"):
                logger.warning(f"Skipping source configuration {index + 1}: missing uuid")
                continue
            configurations.append(SourceConfiguration.from_record(entry))

        logger.info(f"Loaded {len(configurations)} source configurations")
        return configurations
