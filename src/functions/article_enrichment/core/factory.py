"""Wire concrete stores, provider and pipelines from environment configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from src.shared.db.connection import get_supabase_client
from src.shared.utils.env import get_env, load_env
from src.shared.utils.logging import get_logger

from .config import LLMConfig, PacingConfig, SearchConfig, TableConfig
from .db import (
    FileSourceConfigurationStore,
    SupabaseArticleStore,
    SupabaseInsightStore,
    SupabaseSourceConfigurationStore,
)
from .feeds import RssFeedReader
from .llm import ExtractionProvider, GeminiExtractionClient
from .pipelines import BatchExtractionPipeline, IngestionPipeline, RetryCoordinator
from .scheduler import DailySweepScheduler
from .search import MeilisearchIndexClient, NullSearchSync, SearchSync

LOGGER = get_logger(__name__)


@dataclass
class EnrichmentServices:
    article_store: SupabaseArticleStore
    insight_store: SupabaseInsightStore
    source_configs: Union[SupabaseSourceConfigurationStore, FileSourceConfigurationStore]
    search_sync: Union[SearchSync, NullSearchSync]
    pipeline: BatchExtractionPipeline
    retry_coordinator: RetryCoordinator
    ingestion: IngestionPipeline
    scheduler: DailySweepScheduler


def build_services(
    *,
    pacing: Optional[PacingConfig] = None,
    llm_config: Optional[LLMConfig] = None,
    search_config: Optional[SearchConfig] = None,
    tables: Optional[TableConfig] = None,
    provider: Optional[ExtractionProvider] = None,
    supabase_client: Optional[Any] = None,
    source_config_path: Optional[str] = None,
) -> EnrichmentServices:
    """Build every collaborator of the enrichment module.

    Arguments left as ``None`` are read from the environment (``.env`` included).
    """

    load_env()

    tables = tables or TableConfig.from_env()
    pacing = pacing or PacingConfig.from_env()
    search_config = search_config or SearchConfig.from_env()
    client = supabase_client or get_supabase_client()

    article_store = SupabaseArticleStore(client, table=tables.articles)
    insight_store = SupabaseInsightStore(client, table=tables.insights)

    source_config_path = source_config_path or get_env("SOURCE_CONFIG_PATH")
    if source_config_path:
        source_configs = FileSourceConfigurationStore(source_config_path)
    else:
        source_configs = SupabaseSourceConfigurationStore(
            client, table=tables.source_configurations
        )

    if search_config.enabled:
        search_sync = SearchSync(
            MeilisearchIndexClient(search_config),
            article_store,
            insight_store,
        )
    else:
        LOGGER.info("MEILISEARCH_URL not set; search sync disabled")
        search_sync = NullSearchSync()

    provider = provider or GeminiExtractionClient(llm_config or LLMConfig.from_env())

    pipeline = BatchExtractionPipeline(
        provider,
        insight_store,
        article_store,
        search_sync=search_sync,
        pacing=pacing,
    )
    retry_coordinator = RetryCoordinator(pipeline, insight_store)
    ingestion = IngestionPipeline(source_configs, RssFeedReader(), article_store, pipeline)
    scheduler = DailySweepScheduler(
        source_configs,
        ingestion,
        article_store,
        pipeline,
        retry_coordinator,
    )

    return EnrichmentServices(
        article_store=article_store,
        insight_store=insight_store,
        source_configs=source_configs,
        search_sync=search_sync,
        pipeline=pipeline,
        retry_coordinator=retry_coordinator,
        ingestion=ingestion,
        scheduler=scheduler,
    )
