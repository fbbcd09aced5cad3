"""Re-submit articles whose last insight failed."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Protocol, Sequence

from ..contracts import Article, ArticleInsight
from .batch_pipeline import BatchExtractionPipeline

logger = logging.getLogger(__name__)


class FailedInsightSource(Protocol):
    def list_failed(self) -> List[ArticleInsight]:
        ...


class RetryCoordinator:
    """Plain re-submission: matched articles go through the pipeline again,
    overwriting their failed insight with a fresh outcome."""

    def __init__(self, pipeline: BatchExtractionPipeline, insight_store: FailedInsightSource) -> None:
        self.pipeline = pipeline
        self.insight_store = insight_store

    async def retry_failed_articles(self, candidate_articles: Sequence[Article]) -> List[ArticleInsight]:
        failed_insights = await asyncio.to_thread(self.insight_store.list_failed)
        if not failed_insights:
            logger.info("No failed insights to retry")
            return []

        failed_article_ids = {insight.article_id for insight in failed_insights}
        matched = [article for article in candidate_articles if article.id in failed_article_ids]
        if not matched:
            logger.info(
                "None of %d candidate articles has a failed insight", len(candidate_articles)
            )
            return []

        logger.info("Retrying %d articles with failed insights", len(matched))
        return await self.pipeline.process_articles(matched)
