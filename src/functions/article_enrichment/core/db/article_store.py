"""Supabase-backed Article Store."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from src.shared.db.connection import get_supabase_client

from ..config import TableConfig
from ..contracts import Article, FeedItem
from ..errors import ArticleNotFoundError
from .paging import fetch_all_rows

logger = logging.getLogger(__name__)


class SupabaseArticleStore:
    """Persist and query ingested articles."""

    def __init__(self, client: Optional[Any] = None, *, table: Optional[str] = None) -> None:
        self.client = client or get_supabase_client()
        self.table = table or TableConfig().articles
        logger.info("Initialized SupabaseArticleStore (table=%s)", self.table)

    def create_many(self, items: Sequence[FeedItem]) -> List[Article]:
        """Create article rows for feed items.

        Rows are upserted on ``source_url``; an existing article keeps its
        ``is_processed`` flag because the payload never carries it.
        """

        if not items:
            return []

        records: Dict[str, Dict[str, Any]] = {}
        unkeyed: List[Dict[str, Any]] = []
        for item in items:
            record = Article.from_feed_item(item).to_record()
            if record.get("source_url"):
                records[record["source_url"]] = record
            else:
                unkeyed.append(record)

        created: List[Dict[str, Any]] = []
        if records:
            response = (
                self.client.table(self.table)
                .upsert(list(records.values()), on_conflict="source_url")
                .execute()
            )
            created.extend(getattr(response, "data", None) or [])
        if unkeyed:
            response = self.client.table(self.table).insert(unkeyed).execute()
            created.extend(getattr(response, "data", None) or [])

        logger.info("Stored %d articles from %d feed items", len(created), len(items))
        return [Article.from_record(row) for row in created]

    def list_all(self) -> List[Article]:
        rows = fetch_all_rows(
            lambda: self.client.table(self.table).select("*").order("id")
        )
        return [Article.from_record(row) for row in rows]

    def list_unprocessed(self) -> List[Article]:
        rows = fetch_all_rows(
            lambda: self.client.table(self.table)
            .select("*")
            .eq("is_processed", False)
            .order("id")
        )
        return [Article.from_record(row) for row in rows]

    def get(self, article_id: int) -> Optional[Article]:
        return self._get_one("id", article_id)

    def get_by_uuid(self, uuid: str) -> Optional[Article]:
        return self._get_one("uuid", uuid)

    def mark_processed(self, article_id: int, is_processed: bool = True) -> None:
        """Set the processed flag of one article.

        Raises:
            ArticleNotFoundError: If no article has this id
        """

        response = (
            self.client.table(self.table)
            .update({"is_processed": is_processed})
            .eq("id", article_id)
            .execute()
        )
        if not getattr(response, "data", None):
            raise ArticleNotFoundError(f"Article not found: {article_id}")

    def delete(self, uuid: str) -> bool:
        """Delete an article; the database cascades the owned insight."""

        response = self.client.table(self.table).delete().eq("uuid", uuid).execute()
        deleted = bool(getattr(response, "data", None))
        if not deleted:
            logger.warning("Article %s not found for deletion", uuid)
        return deleted

    def _get_one(self, column: str, value: Any) -> Optional[Article]:
        response = (
            self.client.table(self.table)
            .select("*")
            .eq(column, value)
            .limit(1)
            .execute()
        )
        rows = getattr(response, "data", None) or []
        return Article.from_record(rows[0]) if rows else None
