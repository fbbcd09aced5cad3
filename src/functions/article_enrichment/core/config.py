"""Configuration models for the article enrichment module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.shared.utils.env import get_env, get_float_env, get_int_env

_ALLOWED_TIMEOUT_RANGE = (1, 300)

DEFAULT_RATE_LIMIT_PER_MINUTE = 30
DEFAULT_BATCH_SIZE = 5
DEFAULT_BATCH_COOLDOWN_SECONDS = 1.0
DEFAULT_SAVE_ATTEMPTS = 3
DEFAULT_SAVE_BACKOFF_SECONDS = 1.0
DEFAULT_MAX_BODY_CHARS = 4000


def _ensure_non_empty(value: Optional[str], field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be provided")
    return value.strip()


def _ensure_positive_int(value: int, field_name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ValueError(f"{field_name} must be a positive integer")
    return value


def _ensure_non_negative(value: float, field_name: str) -> float:
    try:
        numeric = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field_name} must be numeric") from exc
    if numeric < 0:
        raise ValueError(f"{field_name} must not be negative")
    return numeric


def _ensure_timeout(value: int, field_name: str, bounds: tuple[int, int]) -> int:
    minimum, maximum = bounds
    if not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer")
    if value < minimum or value > maximum:
        raise ValueError(
            f"{field_name} must be between {minimum} and {maximum} seconds"
        )
    return value


def pacing_delay_seconds(rate_limit_per_minute: int, batch_size: int) -> float:
    """Delay that spaces ``batch_size`` calls so the per-minute quota holds on average."""

    return (60.0 / rate_limit_per_minute) * batch_size


@dataclass
class PacingConfig:
    """Throughput controls for the extraction orchestrator.

    ``batch_delay_seconds`` is slept before every batch and ``item_delay_seconds``
    again inside every batch member before its provider call. Both default to
    ``(60 / rate_limit_per_minute) * batch_size`` (10s for 30/min and batches of 5).
    """

    rate_limit_per_minute: int = DEFAULT_RATE_LIMIT_PER_MINUTE
    batch_size: int = DEFAULT_BATCH_SIZE
    batch_delay_seconds: Optional[float] = None
    item_delay_seconds: Optional[float] = None
    batch_cooldown_seconds: float = DEFAULT_BATCH_COOLDOWN_SECONDS
    save_attempts: int = DEFAULT_SAVE_ATTEMPTS
    save_backoff_seconds: float = DEFAULT_SAVE_BACKOFF_SECONDS

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        self.rate_limit_per_minute = _ensure_positive_int(
            self.rate_limit_per_minute, "rate_limit_per_minute"
        )
        self.batch_size = _ensure_positive_int(self.batch_size, "batch_size")
        self.save_attempts = _ensure_positive_int(self.save_attempts, "save_attempts")

        default_delay = pacing_delay_seconds(self.rate_limit_per_minute, self.batch_size)
        if self.batch_delay_seconds is None:
            self.batch_delay_seconds = default_delay
        if self.item_delay_seconds is None:
            self.item_delay_seconds = default_delay

        self.batch_delay_seconds = _ensure_non_negative(
            self.batch_delay_seconds, "batch_delay_seconds"
        )
        self.item_delay_seconds = _ensure_non_negative(
            self.item_delay_seconds, "item_delay_seconds"
        )
        self.batch_cooldown_seconds = _ensure_non_negative(
            self.batch_cooldown_seconds, "batch_cooldown_seconds"
        )
        self.save_backoff_seconds = _ensure_non_negative(
            self.save_backoff_seconds, "save_backoff_seconds"
        )

    @classmethod
    def from_env(cls) -> PacingConfig:
        """Build pacing settings from ``ENRICHMENT_*`` environment variables."""

        return cls(
            rate_limit_per_minute=get_int_env(
                "ENRICHMENT_RATE_LIMIT", DEFAULT_RATE_LIMIT_PER_MINUTE
            ),
            batch_size=get_int_env("ENRICHMENT_BATCH_SIZE", DEFAULT_BATCH_SIZE),
            batch_delay_seconds=get_float_env("ENRICHMENT_BATCH_DELAY_SECONDS"),
            item_delay_seconds=get_float_env("ENRICHMENT_ITEM_DELAY_SECONDS"),
            batch_cooldown_seconds=get_float_env(
                "ENRICHMENT_BATCH_COOLDOWN_SECONDS", DEFAULT_BATCH_COOLDOWN_SECONDS
            ),
            save_attempts=get_int_env("ENRICHMENT_SAVE_ATTEMPTS", DEFAULT_SAVE_ATTEMPTS),
            save_backoff_seconds=get_float_env(
                "ENRICHMENT_SAVE_BACKOFF_SECONDS", DEFAULT_SAVE_BACKOFF_SECONDS
            ),
        )


@dataclass
class LLMConfig:
    """Configuration for the Gemini extraction provider."""

    model: str = "gemini-1.5-pro"
    api_key: Optional[str] = None
    timeout_seconds: int = 60
    max_body_chars: int = DEFAULT_MAX_BODY_CHARS
    temperature: float = 0.1

    def validate(self) -> None:
        self.model = _ensure_non_empty(self.model, "model")
        self.api_key = _ensure_non_empty(self.api_key, "api_key")
        self.timeout_seconds = _ensure_timeout(
            self.timeout_seconds,
            "timeout_seconds",
            _ALLOWED_TIMEOUT_RANGE,
        )
        self.max_body_chars = _ensure_positive_int(self.max_body_chars, "max_body_chars")
        self.temperature = _ensure_non_negative(self.temperature, "temperature")

    @classmethod
    def from_env(cls) -> LLMConfig:
        config = cls(
            model=get_env("GEMINI_MODEL") or cls.model,
            api_key=get_env("GEMINI_API_KEY") or get_env("GOOGLE_API_KEY"),
            timeout_seconds=get_int_env("GEMINI_TIMEOUT_SECONDS", 60),
            max_body_chars=get_int_env("ENRICHMENT_MAX_BODY_CHARS", DEFAULT_MAX_BODY_CHARS),
        )
        config.validate()
        return config


@dataclass
class SearchConfig:
    """Connection details for the Meilisearch article index."""

    url: Optional[str] = None
    api_key: Optional[str] = None
    index_uid: str = "article"
    timeout_seconds: int = 10

    @property
    def enabled(self) -> bool:
        return bool(self.url and self.url.strip())

    def validate(self) -> None:
        self.index_uid = _ensure_non_empty(self.index_uid, "index_uid")
        self.timeout_seconds = _ensure_timeout(
            self.timeout_seconds,
            "timeout_seconds",
            _ALLOWED_TIMEOUT_RANGE,
        )

    @classmethod
    def from_env(cls) -> SearchConfig:
        config = cls(
            url=get_env("MEILISEARCH_URL"),
            api_key=get_env("MEILI_MASTER_KEY"),
            index_uid=get_env("MEILISEARCH_INDEX", "article") or "article",
            timeout_seconds=get_int_env("MEILISEARCH_TIMEOUT_SECONDS", 10),
        )
        config.validate()
        return config


@dataclass
class TableConfig:
    """Supabase table names used by the stores."""

    articles: str = "articles"
    insights: str = "article_insights"
    source_configurations: str = "source_configurations"

    @classmethod
    def from_env(cls) -> TableConfig:
        return cls(
            articles=get_env("ARTICLES_TABLE", "articles") or "articles",
            insights=get_env("INSIGHTS_TABLE", "article_insights") or "article_insights",
            source_configurations=get_env(
                "SOURCE_CONFIGURATIONS_TABLE", "source_configurations"
            )
            or "source_configurations",
        )
