"""Data contracts for article enrichment."""

from .article import Article, FeedItem, SourceConfiguration
from .extraction import (
    CATEGORIES,
    UNKNOWN_CATEGORY,
    ExtractedInsight,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    NamedEntities,
)
from .insight import ArticleInsight, InsightStatus

__all__ = [
    "Article",
    "ArticleInsight",
    "CATEGORIES",
    "ExtractedInsight",
    "ExtractionFailure",
    "ExtractionResult",
    "ExtractionSuccess",
    "FeedItem",
    "InsightStatus",
    "NamedEntities",
    "SourceConfiguration",
    "UNKNOWN_CATEGORY",
]
