from src.functions.article_enrichment.core.contracts import (
    Article,
    ArticleInsight,
    ExtractedInsight,
    FeedItem,
    InsightStatus,
    SourceConfiguration,
)
from tests.article_enrichment.fakes import sample_insight


def test_failed_insight_carries_only_article_and_status():
    insight = ArticleInsight.failed(5)

    assert insight.status is InsightStatus.FAILED
    assert insight.has_enrichment is False
    assert insight.to_record() == {
        "article_id": 5,
        "status": "failed",
        "topics": None,
        "keywords": None,
        "people": None,
        "organizations": None,
        "locations": None,
        "category": None,
    }


def test_blank_category_defaults_to_unknown():
    assert ExtractedInsight.model_validate({"category": "  "}).category == "Unknown"
    assert ExtractedInsight.model_validate({}).category == "Unknown"


def test_insight_from_record_round_trips_status():
    insight = ArticleInsight.from_extraction(3, sample_insight())

    restored = ArticleInsight.from_record({"id": 9, **insight.to_record()})

    assert restored.id == 9
    assert restored.is_success
    assert restored.organizations == "Acme"


def test_article_from_feed_item_is_unprocessed():
    item = FeedItem(
        title="Title",
        description="Body",
        pub_date="2025-01-06T10:00:00+00:00",
        source_url="https://example.com/a",
    )

    article = Article.from_feed_item(item)

    assert article.is_processed is False
    assert article.publication_date == item.pub_date
    assert "is_processed" not in article.to_record()


def test_source_configuration_accepts_single_url():
    configuration = SourceConfiguration.from_record(
        {"uuid": "u", "name": "One", "sources": "https://example.com/rss"}
    )

    assert configuration.sources == ["https://example.com/rss"]
