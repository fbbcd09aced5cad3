"""Article insight contract: the enrichment result or failure marker of one article."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .extraction import ExtractedInsight

ENRICHMENT_FIELDS = ("topics", "keywords", "people", "organizations", "locations", "category")


class InsightStatus(str, Enum):
    """Outcome of one enrichment attempt."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class ArticleInsight:
    """Derived metadata for one article. One row per article; retries overwrite it."""

    article_id: int
    status: InsightStatus
    topics: Optional[str] = None
    keywords: Optional[str] = None
    people: Optional[str] = None
    organizations: Optional[str] = None
    locations: Optional[str] = None
    category: Optional[str] = None
    id: Optional[int] = None
    uuid: Optional[str] = None

    @classmethod
    def failed(cls, article_id: int) -> ArticleInsight:
        """Minimal marker: only the article reference and the failed status."""

        return cls(article_id=article_id, status=InsightStatus.FAILED)

    @classmethod
    def from_extraction(cls, article_id: int, extracted: ExtractedInsight) -> ArticleInsight:
        return cls(
            article_id=article_id,
            status=InsightStatus.SUCCESS,
            topics=extracted.topics,
            keywords=extracted.keywords,
            people=extracted.named_entities.people,
            organizations=extracted.named_entities.organizations,
            locations=extracted.named_entities.locations,
            category=extracted.category,
        )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> ArticleInsight:
        return cls(
            id=record.get("id"),
            uuid=record.get("uuid"),
            article_id=record["article_id"],
            status=InsightStatus(record.get("status") or InsightStatus.FAILED.value),
            topics=record.get("topics"),
            keywords=record.get("keywords"),
            people=record.get("people"),
            organizations=record.get("organizations"),
            locations=record.get("locations"),
            category=record.get("category"),
        )

    @property
    def is_success(self) -> bool:
        return self.status is InsightStatus.SUCCESS

    @property
    def has_enrichment(self) -> bool:
        return any(getattr(self, name) is not None for name in ENRICHMENT_FIELDS)

    def to_record(self) -> Dict[str, Any]:
        """Row payload. Enrichment columns are always written so a retry
        clears whatever the previous attempt stored."""

        record: Dict[str, Any] = {
            "article_id": self.article_id,
            "status": self.status.value,
        }
        for name in ENRICHMENT_FIELDS:
            record[name] = getattr(self, name)
        if self.uuid is not None:
            record["uuid"] = self.uuid
        return record
