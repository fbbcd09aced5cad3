"""Core building blocks for the article enrichment module."""

from .config import LLMConfig, PacingConfig, SearchConfig, TableConfig
from .errors import (
    ArticleNotFoundError,
    EnrichmentError,
    IngestionError,
    InsightPersistenceError,
    MalformedProviderResponse,
    ProviderError,
    SourceConfigurationNotFound,
)

__all__ = [
    "ArticleNotFoundError",
    "EnrichmentError",
    "IngestionError",
    "InsightPersistenceError",
    "LLMConfig",
    "MalformedProviderResponse",
    "PacingConfig",
    "ProviderError",
    "SearchConfig",
    "SourceConfigurationNotFound",
    "TableConfig",
]
