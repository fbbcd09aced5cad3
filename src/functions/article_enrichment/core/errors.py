"""Error taxonomy for the article enrichment pipeline."""

from __future__ import annotations

from typing import Any, Optional


class EnrichmentError(RuntimeError):
    """Base class for enrichment failures."""


class ProviderError(EnrichmentError):
    """The text-analysis provider call failed (network, quota, timeout, non-2xx).

    Never raised past the provider adapter; it is returned inside an
    ``ExtractionFailure`` and downgrades only the affected article.
    """


class MalformedProviderResponse(ProviderError):
    """The provider answered, but no usable insight object could be parsed."""

    def __init__(self, message: str, raw_response: Optional[str] = None) -> None:
        super().__init__(message)
        self.raw_response = raw_response


class InsightPersistenceError(EnrichmentError):
    """An insight could not be stored within the retry budget. Fatal to a run."""

    def __init__(self, article_id: Any, attempts: int, message: str) -> None:
        super().__init__(message)
        self.article_id = article_id
        self.attempts = attempts


class ArticleNotFoundError(EnrichmentError):
    """An article referenced by id or uuid does not exist."""


class SourceConfigurationNotFound(EnrichmentError):
    """The requested source configuration does not exist."""

    def __init__(self, uuid: str) -> None:
        super().__init__(f"Source configuration not found: {uuid}")
        self.uuid = uuid


class IngestionError(EnrichmentError):
    """Feed ingestion failed for a reason other than a missing configuration."""
