"""Supabase and file-backed stores for article enrichment."""

from .article_store import SupabaseArticleStore
from .insight_store import SupabaseInsightStore
from .source_config_store import (
    FileSourceConfigurationStore,
    SupabaseSourceConfigurationStore,
)

__all__ = [
    "FileSourceConfigurationStore",
    "SupabaseArticleStore",
    "SupabaseInsightStore",
    "SupabaseSourceConfigurationStore",
]
