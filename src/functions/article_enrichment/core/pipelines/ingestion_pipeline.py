"""
Ingestion: source configuration -> feed items -> articles -> insights.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

from ..contracts import Article, ArticleInsight, FeedItem, SourceConfiguration
from ..errors import IngestionError, SourceConfigurationNotFound
from .batch_pipeline import BatchExtractionPipeline

logger = logging.getLogger(__name__)


class SourceConfigurationReader(Protocol):
    def get(self, uuid: str) -> Optional[SourceConfiguration]:
        ...

    def list_all(self) -> List[SourceConfiguration]:
        ...


class FeedReader(Protocol):
    def parse_feed(self, url: str) -> List[FeedItem]:
        ...


class ArticleRepository(Protocol):
    def create_many(self, items: Sequence[FeedItem]) -> List[Article]:
        ...

    def list_all(self) -> List[Article]:
        ...


@dataclass
class IngestionResult:
    """Outcome of ingesting one source configuration."""

    source_configuration_uuid: str
    feeds_read: int = 0
    items_created: int = 0
    insights: List[ArticleInsight] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for insight in self.insights if insight.is_success)

    @property
    def failed_count(self) -> int:
        return len(self.insights) - self.success_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_configuration_uuid": self.source_configuration_uuid,
            "feeds_read": self.feeds_read,
            "items_created": self.items_created,
            "insights_produced": len(self.insights),
            "success": self.success_count,
            "failed": self.failed_count,
        }


class IngestionPipeline:
    """Resolve a source configuration, store its feed items, then enrich."""

    def __init__(
        self,
        source_configs: SourceConfigurationReader,
        feed_reader: FeedReader,
        article_store: ArticleRepository,
        pipeline: BatchExtractionPipeline,
    ) -> None:
        self.source_configs = source_configs
        self.feed_reader = feed_reader
        self.article_store = article_store
        self.pipeline = pipeline

    async def ingest(self, source_configuration_uuid: str) -> IngestionResult:
        """
        Ingest every feed of one configuration and enrich the stored articles.

        The whole stored article set is handed to the extraction pipeline,
        not only the rows created by this call.

        Raises:
            SourceConfigurationNotFound: Unknown configuration uuid
            IngestionError: Reading configurations or storing articles failed
            InsightPersistenceError: Propagated from the extraction pipeline
        """
        try:
            configuration = await asyncio.to_thread(
                self.source_configs.get, source_configuration_uuid
            )
        except Exception as exc:
            raise IngestionError(
                f"Failed to load source configuration {source_configuration_uuid}"
            ) from exc
        if configuration is None:
            raise SourceConfigurationNotFound(source_configuration_uuid)

        result = IngestionResult(source_configuration_uuid=source_configuration_uuid)
        logger.info(
            "Ingesting %d feeds for configuration '%s'",
            len(configuration.sources),
            configuration.name,
        )

        try:
            for url in configuration.sources:
                items = await asyncio.to_thread(self.feed_reader.parse_feed, url)
                result.feeds_read += 1
                if not items:
                    continue
                created = await asyncio.to_thread(self.article_store.create_many, items)
                result.items_created += len(created)
            articles = await asyncio.to_thread(self.article_store.list_all)
        except Exception as exc:
            logger.error("Failed to fetch articles for %s: %s", source_configuration_uuid, exc)
            raise IngestionError("Failed to fetch articles") from exc

        result.insights = await self.pipeline.process_articles(articles)
        logger.info(
            "Ingestion of '%s' finished: %d items created, %d insights (%d failed)",
            configuration.name,
            result.items_created,
            len(result.insights),
            result.failed_count,
        )
        return result
