"""Article, feed item and source configuration contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class FeedItem:
    """One entry read from a content feed, before it becomes an article."""

    title: str
    description: str
    pub_date: str
    source_url: str


@dataclass
class Article:
    """An ingested content item awaiting or having undergone enrichment.

    ``is_processed`` means "has completed one pipeline pass", whatever the
    outcome of that pass was; the outcome lives on the article's insight.
    """

    title: str
    id: Optional[int] = None
    uuid: Optional[str] = None
    description: Optional[str] = None
    publication_date: Optional[str] = None
    source_url: Optional[str] = None
    is_processed: bool = False

    @classmethod
    def from_feed_item(cls, item: FeedItem) -> Article:
        return cls(
            title=item.title,
            description=item.description,
            publication_date=item.pub_date,
            source_url=item.source_url,
        )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Article:
        return cls(
            id=record.get("id"),
            uuid=record.get("uuid"),
            title=record.get("title") or "",
            description=record.get("description"),
            publication_date=record.get("publication_date"),
            source_url=record.get("source_url"),
            is_processed=bool(record.get("is_processed", False)),
        )

    def to_record(self) -> Dict[str, Any]:
        """Row payload for insertion; identity columns are left to the database."""

        record: Dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "publication_date": self.publication_date,
            "source_url": self.source_url,
        }
        if self.id is not None:
            record["id"] = self.id
        if self.uuid is not None:
            record["uuid"] = self.uuid
        return record


@dataclass
class SourceConfiguration:
    """A named, ordered list of feed URLs."""

    name: str
    sources: List[str] = field(default_factory=list)
    uuid: Optional[str] = None
    id: Optional[int] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> SourceConfiguration:
        raw_sources = record.get("sources") or []
        if isinstance(raw_sources, str):
            raw_sources = [raw_sources]
        return cls(
            id=record.get("id"),
            uuid=record.get("uuid"),
            name=record.get("name") or "",
            sources=[str(url) for url in raw_sources if url],
        )

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {"name": self.name, "sources": list(self.sources)}
        if self.uuid is not None:
            record["uuid"] = self.uuid
        return record
