"""
Hand-written fakes shared by the article enrichment tests.

Provides an in-memory Supabase query builder, in-memory stores, a scripted
extraction provider and a recording sleep.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from src.functions.article_enrichment.core.contracts import (
    Article,
    ArticleInsight,
    ExtractedInsight,
    ExtractionFailure,
    ExtractionSuccess,
    FeedItem,
    InsightStatus,
)
from src.functions.article_enrichment.core.errors import ArticleNotFoundError, ProviderError


# ---------------------------------------------------------------------------
# Supabase
# ---------------------------------------------------------------------------


class _Response:
    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data


class FakeQuery:
    """Subset of the PostgREST builder used by the stores."""

    def __init__(self, client: "FakeSupabaseClient", table: str):
        self._client = client
        self._table = table
        self._op = "select"
        self._payload: Any = None
        self._on_conflict: Optional[str] = None
        self._filters: List[tuple] = []
        self._order: Optional[str] = None
        self._range: Optional[tuple] = None
        self._limit: Optional[int] = None

    def select(self, columns: str = "*"):
        self._op = "select"
        return self

    def insert(self, payload):
        self._op = "insert"
        self._payload = payload
        return self

    def upsert(self, payload, on_conflict: Optional[str] = None):
        self._op = "upsert"
        self._payload = payload
        self._on_conflict = on_conflict
        return self

    def update(self, payload):
        self._op = "update"
        self._payload = payload
        return self

    def delete(self):
        self._op = "delete"
        return self

    def eq(self, column, value):
        self._filters.append((column, value))
        return self

    def order(self, column, desc: bool = False):
        self._order = column
        return self

    def range(self, start: int, end: int):
        self._range = (start, end)
        return self

    def limit(self, count: int):
        self._limit = count
        return self

    def execute(self):
        self._client.calls.append((self._table, self._op, copy.deepcopy(self._payload), self._on_conflict))
        rows = self._client.rows(self._table)

        if self._op == "select":
            matched = [row for row in rows if self._matches(row)]
            if self._order:
                matched.sort(key=lambda row: row.get(self._order) or 0)
            if self._range:
                start, end = self._range
                matched = matched[start:end + 1]
            if self._limit is not None:
                matched = matched[: self._limit]
            return _Response(copy.deepcopy(matched))

        if self._op == "insert":
            records = self._payload if isinstance(self._payload, list) else [self._payload]
            return _Response([copy.deepcopy(self._client.add_row(self._table, r)) for r in records])

        if self._op == "upsert":
            records = self._payload if isinstance(self._payload, list) else [self._payload]
            stored = []
            for record in records:
                existing = None
                if self._on_conflict:
                    existing = next(
                        (row for row in rows if row.get(self._on_conflict) == record.get(self._on_conflict)),
                        None,
                    )
                if existing is not None:
                    existing.update(copy.deepcopy(record))
                    stored.append(copy.deepcopy(existing))
                else:
                    stored.append(copy.deepcopy(self._client.add_row(self._table, record)))
            return _Response(stored)

        if self._op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(copy.deepcopy(self._payload))
                    updated.append(copy.deepcopy(row))
            return _Response(updated)

        removed = [row for row in rows if self._matches(row)]
        self._client.tables[self._table] = [row for row in rows if not self._matches(row)]
        return _Response(copy.deepcopy(removed))

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in self._filters)


class FakeSupabaseClient:
    """In-memory tables with auto-assigned ``id`` and ``uuid`` columns."""

    def __init__(self, defaults: Optional[Dict[str, Dict[str, Any]]] = None):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.defaults = defaults or {}
        self.calls: List[tuple] = []
        self._next_id = 1

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(name, [])

    def add_row(self, name: str, record: Dict[str, Any]) -> Dict[str, Any]:
        row = dict(self.defaults.get(name, {}))
        row.update(copy.deepcopy(record))
        row.setdefault("id", self._next_id)
        row.setdefault("uuid", f"{name}-uuid-{row['id']}")
        self._next_id = max(self._next_id, row["id"]) + 1
        self.rows(name).append(row)
        return row


# ---------------------------------------------------------------------------
# Pipeline collaborators
# ---------------------------------------------------------------------------


def make_articles(count: int, start_id: int = 1) -> List[Article]:
    return [
        Article(
            id=article_id,
            uuid=f"article-{article_id}",
            title=f"Article {article_id}",
            description=f"Body of article {article_id}",
            source_url=f"https://example.com/{article_id}",
        )
        for article_id in range(start_id, start_id + count)
    ]


def sample_insight(**overrides: Any) -> ExtractedInsight:
    payload = {
        "topics": "ai, chips",
        "keywords": "gpu, datacenter",
        "namedEntities": {"people": "Ada", "organizations": "Acme", "locations": "Berlin"},
        "category": "Technology",
    }
    payload.update(overrides)
    return ExtractedInsight.model_validate(payload)


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeProvider:
    """Succeeds for every title except those listed in ``failing_titles``."""

    def __init__(
        self,
        failing_titles: Iterable[str] = (),
        *,
        raising_titles: Iterable[str] = (),
        insight_factory: Callable[[str], ExtractedInsight] = lambda title: sample_insight(),
    ) -> None:
        self.failing_titles = set(failing_titles)
        self.raising_titles = set(raising_titles)
        self.insight_factory = insight_factory
        self.calls: List[tuple] = []

    async def extract(self, title: str, body: Optional[str]):
        self.calls.append((title, body))
        if title in self.raising_titles:
            raise RuntimeError("provider exploded")
        if title in self.failing_titles:
            return ExtractionFailure(error=ProviderError("upstream unavailable"))
        return ExtractionSuccess(insight=self.insight_factory(title))


class InMemoryInsightStore:
    """Insight store keyed by article id; ``failures`` scripts save errors per article."""

    def __init__(self, failures: Optional[Dict[int, int]] = None) -> None:
        self.insights: Dict[int, ArticleInsight] = {}
        self.failures = dict(failures or {})
        self.save_calls: List[int] = []

    def save(self, insight: ArticleInsight) -> ArticleInsight:
        self.save_calls.append(insight.article_id)
        remaining = self.failures.get(insight.article_id, 0)
        if remaining:
            self.failures[insight.article_id] = remaining - 1
            raise ConnectionError("database unavailable")
        stored = copy.deepcopy(insight)
        stored.id = insight.article_id
        self.insights[insight.article_id] = stored
        return stored

    def list_failed(self) -> List[ArticleInsight]:
        return [i for i in self.insights.values() if i.status is InsightStatus.FAILED]

    def list_successful(self) -> List[ArticleInsight]:
        return [i for i in self.insights.values() if i.status is InsightStatus.SUCCESS]

    def count_by_status(self) -> Dict[str, int]:
        return {
            "success": len(self.list_successful()),
            "failed": len(self.list_failed()),
        }


class InMemoryArticleStore:
    def __init__(self, articles: Sequence[Article] = ()) -> None:
        self.articles: Dict[int, Article] = {a.id: copy.deepcopy(a) for a in articles}
        self.created: List[FeedItem] = []
        self._next_id = max(self.articles, default=0) + 1

    def create_many(self, items: Sequence[FeedItem]) -> List[Article]:
        created = []
        for item in items:
            self.created.append(item)
            article = Article.from_feed_item(item)
            article.id = self._next_id
            self._next_id += 1
            self.articles[article.id] = article
            created.append(copy.deepcopy(article))
        return created

    def list_all(self) -> List[Article]:
        return [copy.deepcopy(a) for a in self.articles.values()]

    def list_unprocessed(self) -> List[Article]:
        return [copy.deepcopy(a) for a in self.articles.values() if not a.is_processed]

    def get(self, article_id: int) -> Optional[Article]:
        article = self.articles.get(article_id)
        return copy.deepcopy(article) if article else None

    def mark_processed(self, article_id: int, is_processed: bool = True) -> None:
        if article_id not in self.articles:
            raise ArticleNotFoundError(f"Article not found: {article_id}")
        self.articles[article_id].is_processed = is_processed


class RecordingSearchSync:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.added: List[ArticleInsight] = []

    def add_insight(self, insight: ArticleInsight) -> bool:
        if self.fail:
            raise RuntimeError("search index down")
        self.added.append(insight)
        return True
