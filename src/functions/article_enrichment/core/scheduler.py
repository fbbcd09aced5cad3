"""Daily ingestion and sweep.

The sweep reuses the on-demand entry points: ``ingest`` per configuration,
then ``process_articles`` over unprocessed articles and, optionally,
``retry_failed_articles`` over every stored article.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol

from .contracts import Article, ArticleInsight
from .errors import IngestionError
from .pipelines.batch_pipeline import BatchExtractionPipeline
from .pipelines.ingestion_pipeline import (
    IngestionPipeline,
    IngestionResult,
    SourceConfigurationReader,
)
from .pipelines.retry_coordinator import RetryCoordinator

logger = logging.getLogger(__name__)

DEFAULT_RUN_HOUR = 10
DEFAULT_RUN_MINUTE = 0


class ArticleSweepSource(Protocol):
    def list_unprocessed(self) -> List[Article]:
        ...

    def list_all(self) -> List[Article]:
        ...


@dataclass
class SweepResult:
    ingestions: List[IngestionResult] = field(default_factory=list)
    failed_configurations: List[str] = field(default_factory=list)
    swept: List[ArticleInsight] = field(default_factory=list)
    retried: List[ArticleInsight] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "configurations": len(self.ingestions) + len(self.failed_configurations),
            "failed_configurations": list(self.failed_configurations),
            "ingestions": [ingestion.to_dict() for ingestion in self.ingestions],
            "swept": len(self.swept),
            "retried": len(self.retried),
        }


def seconds_until_next_run(
    now: datetime,
    hour: int = DEFAULT_RUN_HOUR,
    minute: int = DEFAULT_RUN_MINUTE,
) -> float:
    """Seconds from ``now`` until the next ``hour:minute`` (tomorrow if already passed)."""

    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


class DailySweepScheduler:
    """Run ingestion for every source configuration, then sweep leftovers."""

    def __init__(
        self,
        source_configs: SourceConfigurationReader,
        ingestion: IngestionPipeline,
        article_store: ArticleSweepSource,
        pipeline: BatchExtractionPipeline,
        retry_coordinator: Optional[RetryCoordinator] = None,
        *,
        hour: int = DEFAULT_RUN_HOUR,
        minute: int = DEFAULT_RUN_MINUTE,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ) -> None:
        self.source_configs = source_configs
        self.ingestion = ingestion
        self.article_store = article_store
        self.pipeline = pipeline
        self.retry_coordinator = retry_coordinator
        self.hour = hour
        self.minute = minute
        self._clock = clock
        self._sleep = sleep or asyncio.sleep

    async def run_daily_sweep(self, *, retry_failed: bool = False) -> SweepResult:
        result = SweepResult()
        configurations = await asyncio.to_thread(self.source_configs.list_all)
        if not configurations:
            logger.info("No source configurations found; skipping daily sweep")
            return result

        for configuration in configurations:
            if not configuration.uuid:
                continue
            try:
                result.ingestions.append(await self.ingestion.ingest(configuration.uuid))
            except IngestionError as exc:
                logger.error("Ingestion failed for '%s': %s", configuration.name, exc)
                result.failed_configurations.append(configuration.uuid)

        unprocessed = await asyncio.to_thread(self.article_store.list_unprocessed)
        logger.info("Sweeping %d unprocessed articles", len(unprocessed))
        result.swept = await self.pipeline.process_articles(unprocessed)

        if retry_failed and self.retry_coordinator is not None:
            candidates = await asyncio.to_thread(self.article_store.list_all)
            result.retried = await self.retry_coordinator.retry_failed_articles(candidates)

        logger.info("Daily sweep finished: %s", result.to_dict())
        return result

    async def run_forever(self, *, retry_failed: bool = False, max_runs: Optional[int] = None) -> None:
        """Sleep until the next scheduled time, sweep, repeat.

        A failed sweep is logged and the loop waits for the next day.
        """

        runs = 0
        while max_runs is None or runs < max_runs:
            delay = seconds_until_next_run(self._clock(), self.hour, self.minute)
            logger.info("Next daily sweep in %.0f seconds", delay)
            await self._sleep(delay)
            try:
                await self.run_daily_sweep(retry_failed=retry_failed)
            except Exception:
                logger.exception("Daily sweep failed")
            runs += 1
