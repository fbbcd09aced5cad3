"""Feed readers for article ingestion."""

from .rss_reader import RssFeedReader

__all__ = ["RssFeedReader"]
