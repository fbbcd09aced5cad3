"""
RSS feed reader.

Downloads a feed and maps its entries to ``FeedItem`` objects. Never raises:
an unreachable or unparseable feed yields an empty list and an error log.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

import feedparser
import requests
from dateutil import parser as date_parser

from ..contracts import FeedItem

logger = logging.getLogger(__name__)

RSS_TIMEOUT_SECONDS = 30
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; ArticleEnrichmentBot/1.0)"


class RssFeedReader:
    """Read feed items from RSS and Atom feeds."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        timeout: int = RSS_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout
        self.user_agent = user_agent

    def parse_feed(self, url: str) -> List[FeedItem]:
        """
        Fetch and parse one feed.

        Args:
            url: Feed URL

        Returns:
            Feed items in document order; empty when the feed has no items or
            could not be read
        """
        try:
            response = self.session.get(
                url,
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
            )
            response.raise_for_status()
            feed = feedparser.parse(response.content)
        except Exception as e:  # noqa: BLE001
            logger.error(f"Error parsing RSS feed {url}: {e}")
            return []

        if getattr(feed, "bozo", False) and not feed.entries:
            logger.error(
                f"Error parsing RSS feed {url}: {getattr(feed, 'bozo_exception', 'unknown error')}"
            )
            return []

        if not feed.entries:
            logger.warning(f"No items found in feed: {url}")
            return []

        items = [self._to_feed_item(entry) for entry in feed.entries]
        logger.info(f"Parsed {len(items)} items from {url}")
        return items

    def _to_feed_item(self, entry: Any) -> FeedItem:
        return FeedItem(
            title=entry.get("title") or "",
            description=self._description(entry),
            pub_date=self._publication_date(entry),
            source_url=entry.get("link") or "",
        )

    @staticmethod
    def _description(entry: Any) -> str:
        content = entry.get("content")
        if content:
            values = [part.get("value", "") for part in content if part.get("value")]
            if values:
                return "\n".join(values)
        return entry.get("summary") or entry.get("description") or ""

    @staticmethod
    def _publication_date(entry: Any) -> str:
        for parsed_field in ("published_parsed", "updated_parsed"):
            parsed = entry.get(parsed_field)
            if parsed:
                try:
                    return datetime(*parsed[:6], tzinfo=timezone.utc).isoformat()
                except (TypeError, ValueError):
                    continue

        for date_field in ("published", "updated", "created"):
            date_str = entry.get(date_field)
            if date_str:
                try:
                    parsed_date = date_parser.parse(date_str)
                except (ValueError, TypeError, OverflowError):
                    continue
                if parsed_date.tzinfo is None:
                    parsed_date = parsed_date.replace(tzinfo=timezone.utc)
                return parsed_date.isoformat()

        return datetime.now(timezone.utc).isoformat()
