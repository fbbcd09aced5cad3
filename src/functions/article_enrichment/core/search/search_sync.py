"""Mirror successful insights into the article search index."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

from ..contracts import Article, ArticleInsight
from .index_client import MeilisearchIndexClient

logger = logging.getLogger(__name__)

SEARCHABLE_ATTRIBUTES = [
    "title",
    "description",
    "topics",
    "keywords",
    "people",
    "organizations",
    "locations",
    "category",
]
FILTERABLE_ATTRIBUTES = [
    "title",
    "topics",
    "category",
    "keywords",
    "people",
    "organizations",
    "locations",
    "publicationDate",
]
SORTABLE_ATTRIBUTES = ["publicationDate", "title", "category"]


class ArticleLookup(Protocol):
    def get(self, article_id: int) -> Optional[Article]:
        ...


class SuccessfulInsightSource(Protocol):
    def list_successful(self) -> List[ArticleInsight]:
        ...


def build_search_document(article: Article, insight: ArticleInsight) -> Dict[str, Any]:
    """Flatten an article and its insight into one index document keyed by article id."""

    return {
        "id": article.id,
        "title": article.title,
        "description": article.description,
        "publicationDate": article.publication_date,
        "sourceUrl": article.source_url,
        "topics": insight.topics,
        "keywords": insight.keywords,
        "people": insight.people,
        "organizations": insight.organizations,
        "locations": insight.locations,
        "category": insight.category,
    }


class SearchSync:
    """Keep the search index in step with stored insights."""

    def __init__(
        self,
        index: MeilisearchIndexClient,
        article_store: ArticleLookup,
        insight_store: SuccessfulInsightSource,
    ) -> None:
        self.index = index
        self.article_store = article_store
        self.insight_store = insight_store

    def initialize_index(self) -> None:
        self.index.update_settings(
            {
                "searchableAttributes": SEARCHABLE_ATTRIBUTES,
                "filterableAttributes": FILTERABLE_ATTRIBUTES,
                "sortableAttributes": SORTABLE_ATTRIBUTES,
            }
        )
        logger.info("Search index settings updated")

    def add_insight(self, insight: ArticleInsight) -> bool:
        """Index one insight. Returns False when the owning article is gone."""

        article = self.article_store.get(insight.article_id)
        if article is None:
            logger.warning("Article %s not found; insight not indexed", insight.article_id)
            return False
        self.index.add_documents([build_search_document(article, insight)])
        return True

    def delete_article(self, article_id: int) -> None:
        self.index.delete_document(article_id)

    def delete_all(self) -> None:
        self.index.delete_all_documents()

    def rebuild(self) -> int:
        """Clear the index and re-add every successful stored insight."""

        self.delete_all()
        documents = []
        for insight in self.insight_store.list_successful():
            article = self.article_store.get(insight.article_id)
            if article is None:
                continue
            documents.append(build_search_document(article, insight))
        if documents:
            self.index.add_documents(documents)
        logger.info("Search index rebuilt with %d documents", len(documents))
        return len(documents)

    def search(self, keyword: str, limit: int = 20) -> List[Dict[str, Any]]:
        return self.index.search(keyword, limit=limit, sort=["title:asc"])


class NullSearchSync:
    """Search sync used when no index is configured."""

    def initialize_index(self) -> None:
        logger.debug("Search index not configured; skipping settings update")

    def add_insight(self, insight: ArticleInsight) -> bool:
        return False

    def delete_article(self, article_id: int) -> None:
        return None

    def delete_all(self) -> None:
        return None

    def rebuild(self) -> int:
        logger.info("Search index not configured; nothing to rebuild")
        return 0

    def search(self, keyword: str, limit: int = 20) -> List[Dict[str, Any]]:
        return []
