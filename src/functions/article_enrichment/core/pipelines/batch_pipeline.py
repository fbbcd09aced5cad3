"""Batched, paced extraction of article insights.

Articles are split into contiguous batches. Each batch waits the batch delay,
then runs its members concurrently; each member waits the item delay, calls
the extraction provider and persists the resulting insight (success or failed
marker) with bounded retry. Batches run strictly one after another with a
short cooldown between them.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterator, List, Optional, Protocol, Sequence

from tenacity import AsyncRetrying, RetryCallState, stop_after_attempt, wait_incrementing

from ..config import PacingConfig
from ..contracts import Article, ArticleInsight, ExtractionSuccess
from ..errors import InsightPersistenceError
from ..llm.gemini_client import ExtractionProvider
from ..search.search_sync import NullSearchSync

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]


class InsightWriter(Protocol):
    def save(self, insight: ArticleInsight) -> Any:
        ...


class ArticleStatusUpdater(Protocol):
    def mark_processed(self, article_id: int) -> None:
        ...


class InsightIndexer(Protocol):
    def add_insight(self, insight: ArticleInsight) -> Any:
        ...


def iter_batches(articles: Sequence[Article], batch_size: int) -> Iterator[List[Article]]:
    """Yield contiguous slices of ``batch_size`` articles (the last may be shorter)."""

    for start in range(0, len(articles), batch_size):
        yield list(articles[start:start + batch_size])


class BatchExtractionPipeline:
    """Turn articles into persisted insights under a coarse throughput ceiling."""

    def __init__(
        self,
        provider: ExtractionProvider,
        insight_store: InsightWriter,
        article_store: ArticleStatusUpdater,
        *,
        search_sync: Optional[InsightIndexer] = None,
        pacing: Optional[PacingConfig] = None,
        sleep: Optional[SleepFunc] = None,
    ) -> None:
        self.provider = provider
        self.insight_store = insight_store
        self.article_store = article_store
        self.search_sync = search_sync or NullSearchSync()
        self.pacing = pacing or PacingConfig()
        self._sleep = sleep or asyncio.sleep

    async def process_articles(self, articles: Sequence[Article]) -> List[ArticleInsight]:
        """Enrich ``articles`` and return their insights in input order.

        Provider failures only downgrade the affected article to a failed
        insight. An ``InsightPersistenceError`` aborts the run once the
        current batch has settled; insights saved before that are kept.
        """

        if not articles:
            return []

        total = len(articles)
        batches = list(iter_batches(articles, self.pacing.batch_size))
        logger.info(
            "Processing %d articles in %d batches of up to %d",
            total,
            len(batches),
            self.pacing.batch_size,
        )

        results: List[ArticleInsight] = []
        for index, batch in enumerate(batches, start=1):
            logger.debug("Waiting %.1fs before batch %d/%d", self.pacing.batch_delay_seconds, index, len(batches))
            await self._sleep(self.pacing.batch_delay_seconds)

            outcomes = await asyncio.gather(
                *(self._process_article(article) for article in batch),
                return_exceptions=True,
            )
            for outcome in outcomes:
                if isinstance(outcome, BaseException):
                    raise outcome

            results.extend(outcomes)
            logger.info("Processed %d/%d articles", len(results), total)

            if index < len(batches):
                await self._sleep(self.pacing.batch_cooldown_seconds)

        success_count = sum(1 for insight in results if insight.is_success)
        logger.info(
            "Processing completed. Success: %d, Failed: %d",
            success_count,
            len(results) - success_count,
        )
        return results

    async def save_insight(self, insight: ArticleInsight) -> ArticleInsight:
        """Persist an insight and flag its article as processed.

        Attempted ``save_attempts`` times, waiting ``save_backoff_seconds * n``
        after the n-th failure.

        Raises:
            InsightPersistenceError: When every attempt failed
        """

        attempts = self.pacing.save_attempts
        backoff = self.pacing.save_backoff_seconds
        retrying = AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_incrementing(start=backoff, increment=backoff),
            sleep=self._sleep,
            before_sleep=self._log_save_retry(insight),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    saved = await self._persist(insight)
        except Exception as exc:
            logger.error(
                "Failed to save insight for article %s after %d attempts: %s",
                insight.article_id,
                attempts,
                exc,
            )
            raise InsightPersistenceError(
                insight.article_id,
                attempts,
                f"Could not save insight for article {insight.article_id} after {attempts} attempts",
            ) from exc
        return saved

    async def _process_article(self, article: Article) -> ArticleInsight:
        await self._sleep(self.pacing.item_delay_seconds)

        try:
            result = await self.provider.extract(article.title, article.description)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Extraction raised for article %s: %s", article.id, exc)
            result = None

        if isinstance(result, ExtractionSuccess):
            insight = ArticleInsight.from_extraction(article.id, result.insight)
        else:
            if result is not None:
                logger.warning("Extraction failed for article %s: %s", article.id, result.message)
            insight = ArticleInsight.failed(article.id)

        return await self.save_insight(insight)

    async def _persist(self, insight: ArticleInsight) -> ArticleInsight:
        saved = await asyncio.to_thread(self.insight_store.save, insight)
        await asyncio.to_thread(self.article_store.mark_processed, insight.article_id)
        stored = saved if isinstance(saved, ArticleInsight) else insight

        if stored.is_success and stored.has_enrichment:
            try:
                await asyncio.to_thread(self.search_sync.add_insight, stored)
            except Exception as exc:  # noqa: BLE001
                logger.warning(
                    "Search sync failed for article %s: %s", insight.article_id, exc
                )
        return stored

    @staticmethod
    def _log_save_retry(insight: ArticleInsight) -> Callable[[RetryCallState], None]:
        def _log(retry_state: RetryCallState) -> None:
            exc = retry_state.outcome.exception() if retry_state.outcome else None
            wait = retry_state.next_action.sleep if retry_state.next_action else 0
            logger.warning(
                "Save attempt %d for article %s failed (%s); retrying in %.1fs",
                retry_state.attempt_number,
                insight.article_id,
                exc,
                wait,
            )

        return _log
