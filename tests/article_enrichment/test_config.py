import pytest

from src.functions.article_enrichment.core.config import (
    LLMConfig,
    PacingConfig,
    SearchConfig,
    TableConfig,
    pacing_delay_seconds,
)


def test_pacing_defaults_match_thirty_calls_per_minute_in_batches_of_five():
    pacing = PacingConfig()

    assert pacing_delay_seconds(30, 5) == 10.0
    assert pacing.batch_delay_seconds == 10.0
    assert pacing.item_delay_seconds == 10.0
    assert pacing.batch_cooldown_seconds == 1.0
    assert pacing.save_attempts == 3
    assert pacing.save_backoff_seconds == 1.0


def test_pacing_delays_are_independently_configurable():
    pacing = PacingConfig(item_delay_seconds=0)

    assert pacing.item_delay_seconds == 0.0
    assert pacing.batch_delay_seconds == 10.0


@pytest.mark.parametrize(
    "overrides",
    [
        {"batch_size": 0},
        {"rate_limit_per_minute": -1},
        {"save_attempts": 0},
        {"batch_delay_seconds": -0.5},
        {"batch_cooldown_seconds": "soon"},
    ],
)
def test_pacing_rejects_invalid_values(overrides):
    with pytest.raises(ValueError):
        PacingConfig(**overrides)


def test_pacing_from_env(monkeypatch):
    monkeypatch.setenv("ENRICHMENT_RATE_LIMIT", "60")
    monkeypatch.setenv("ENRICHMENT_BATCH_SIZE", "2")
    monkeypatch.setenv("ENRICHMENT_ITEM_DELAY_SECONDS", "0")
    monkeypatch.delenv("ENRICHMENT_BATCH_DELAY_SECONDS", raising=False)

    pacing = PacingConfig.from_env()

    assert pacing.batch_size == 2
    assert pacing.batch_delay_seconds == 2.0
    assert pacing.item_delay_seconds == 0.0


def test_pacing_from_env_rejects_non_numeric(monkeypatch):
    monkeypatch.setenv("ENRICHMENT_BATCH_SIZE", "five")

    with pytest.raises(ValueError):
        PacingConfig.from_env()


def test_llm_config_from_env_requires_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)

    with pytest.raises(ValueError, match="api_key"):
        LLMConfig.from_env()


def test_llm_config_from_env(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "key")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-test")
    monkeypatch.delenv("ENRICHMENT_MAX_BODY_CHARS", raising=False)

    config = LLMConfig.from_env()

    assert config.model == "gemini-test"
    assert config.max_body_chars == 4000


def test_search_config_disabled_without_url(monkeypatch):
    monkeypatch.delenv("MEILISEARCH_URL", raising=False)

    config = SearchConfig.from_env()

    assert config.enabled is False
    assert config.index_uid == "article"


def test_table_names_from_env(monkeypatch):
    monkeypatch.setenv("INSIGHTS_TABLE", "insights_v2")
    monkeypatch.delenv("ARTICLES_TABLE", raising=False)

    tables = TableConfig.from_env()

    assert tables.articles == "articles"
    assert tables.insights == "insights_v2"
