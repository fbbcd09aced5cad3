"""Provider-facing contracts: the canonical insight payload and the tagged result."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..errors import ProviderError

UNKNOWN_CATEGORY = "Unknown"

CATEGORIES = (
    "Politics",
    "Technology",
    "Business",
    "Sports",
    "Entertainment",
    "Science",
    "Health",
)


def _join_values(value: Any) -> str:
    """Flatten a provider value into the comma separated text stored on insights."""

    if value is None:
        return ""
    if isinstance(value, (list, tuple, set)):
        parts = [str(item).strip() for item in value if item is not None]
        return ", ".join(part for part in parts if part)
    return str(value).strip()


class NamedEntities(BaseModel):
    """People, organizations and locations mentioned in an article."""

    model_config = ConfigDict(extra="ignore")

    people: str = ""
    organizations: str = ""
    locations: str = ""

    @field_validator("people", "organizations", "locations", mode="before")
    @classmethod
    def _flatten(cls, value: Any) -> str:
        return _join_values(value)


class ExtractedInsight(BaseModel):
    """Canonical provider output.

    ``{"topics", "keywords", "namedEntities": {"people", "organizations",
    "locations"}, "category"}``; ``named_entities`` is accepted as well.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    topics: str = ""
    keywords: str = ""
    named_entities: NamedEntities = Field(
        default_factory=NamedEntities,
        validation_alias=AliasChoices("namedEntities", "named_entities"),
    )
    category: str = UNKNOWN_CATEGORY

    @field_validator("topics", "keywords", mode="before")
    @classmethod
    def _flatten(cls, value: Any) -> str:
        return _join_values(value)

    @field_validator("named_entities", mode="before")
    @classmethod
    def _default_entities(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("category", mode="before")
    @classmethod
    def _default_category(cls, value: Any) -> str:
        text = _join_values(value)
        return text or UNKNOWN_CATEGORY


@dataclass(frozen=True)
class ExtractionSuccess:
    """Provider call succeeded and produced a validated insight."""

    insight: ExtractedInsight
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class ExtractionFailure:
    """Provider call failed; ``error`` says why."""

    error: ProviderError
    ok: bool = field(default=False, init=False)

    @property
    def message(self) -> str:
        return str(self.error)


ExtractionResult = Union[ExtractionSuccess, ExtractionFailure]
