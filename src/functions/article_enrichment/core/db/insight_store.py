"""Supabase-backed Insight Store. One insight row per article."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from src.shared.db.connection import get_supabase_client

from ..config import TableConfig
from ..contracts import ArticleInsight, InsightStatus
from .paging import fetch_all_rows

logger = logging.getLogger(__name__)


class SupabaseInsightStore:
    def __init__(self, client: Optional[Any] = None, *, table: Optional[str] = None) -> None:
        self.client = client or get_supabase_client()
        self.table = table or TableConfig().insights
        logger.info("Initialized SupabaseInsightStore (table=%s)", self.table)

    def save(self, insight: ArticleInsight) -> ArticleInsight:
        """Upsert the insight of one article; the latest save wins."""

        response = (
            self.client.table(self.table)
            .upsert(insight.to_record(), on_conflict="article_id")
            .execute()
        )
        rows = getattr(response, "data", None) or []
        return ArticleInsight.from_record(rows[0]) if rows else insight

    def list_failed(self) -> List[ArticleInsight]:
        return self._list(InsightStatus.FAILED)

    def list_successful(self) -> List[ArticleInsight]:
        return self._list(InsightStatus.SUCCESS)

    def list_all(self) -> List[ArticleInsight]:
        return self._list(None)

    def get(self, insight_id: int) -> Optional[ArticleInsight]:
        return self._get_one("id", insight_id)

    def delete(self, insight_id: int) -> bool:
        response = self.client.table(self.table).delete().eq("id", insight_id).execute()
        return bool(getattr(response, "data", None))

    def count_by_status(self) -> Dict[str, int]:
        """Insight totals per status, used for progress reporting."""

        rows = fetch_all_rows(
            lambda: self.client.table(self.table).select("status").order("id")
        )
        counts = Counter(row.get("status") for row in rows)
        return {status.value: counts.get(status.value, 0) for status in InsightStatus}

    def _list(self, status: Optional[InsightStatus]) -> List[ArticleInsight]:
        def build_query():
            query = self.client.table(self.table).select("*")
            if status is not None:
                query = query.eq("status", status.value)
            return query.order("id")

        return [ArticleInsight.from_record(row) for row in fetch_all_rows(build_query)]

    def _get_one(self, column: str, value: Any) -> Optional[ArticleInsight]:
        response = (
            self.client.table(self.table)
            .select("*")
            .eq(column, value)
            .limit(1)
            .execute()
        )
        rows = getattr(response, "data", None) or []
        return ArticleInsight.from_record(rows[0]) if rows else None
