"""Search index synchronization."""

from .index_client import MeilisearchIndexClient, SearchIndexError
from .search_sync import NullSearchSync, SearchSync, build_search_document

__all__ = [
    "MeilisearchIndexClient",
    "NullSearchSync",
    "SearchIndexError",
    "SearchSync",
    "build_search_document",
]
