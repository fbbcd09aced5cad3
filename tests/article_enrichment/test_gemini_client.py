import asyncio
import json
import threading

import pytest
from google.api_core.exceptions import InternalServerError, ResourceExhausted

from src.functions.article_enrichment.core.config import LLMConfig
from src.functions.article_enrichment.core.contracts import ExtractionFailure, ExtractionSuccess
from src.functions.article_enrichment.core.errors import MalformedProviderResponse, ProviderError
from src.functions.article_enrichment.core.llm.gemini_client import (
    GeminiExtractionClient,
    locate_json_object,
    parse_insight_payload,
)


class _FakeResponse:
    def __init__(self, text):
        self.text = text


class _FakeModel:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.prompts = []
        self.request_options = []

    def generate_content(self, prompt, request_options=None):
        self.prompts.append(prompt)
        self.request_options.append(request_options)
        if self.error:
            raise self.error
        return _FakeResponse(self.text)


def _client(model, **config_overrides):
    config = LLMConfig(api_key="test-key", **config_overrides)
    return GeminiExtractionClient(config, model=model)


CANONICAL = {
    "topics": "a,b",
    "keywords": "k1, k2",
    "namedEntities": {"people": "Ada", "organizations": "Acme", "locations": "Paris"},
    "category": "Science",
}


def test_extracts_object_embedded_in_prose():
    model = _FakeModel(f"here is your answer: {json.dumps(CANONICAL)} thanks")

    result = asyncio.run(_client(model).extract("Title", "Body"))

    assert isinstance(result, ExtractionSuccess)
    assert result.ok is True
    assert result.insight.topics == "a,b"
    assert result.insight.named_entities.locations == "Paris"
    assert result.insight.category == "Science"


def test_markdown_fenced_json_is_parsed():
    model = _FakeModel("```json\n" + json.dumps(CANONICAL) + "\n```")

    result = asyncio.run(_client(model).extract("Title", "Body"))

    assert isinstance(result, ExtractionSuccess)
    assert result.insight.keywords == "k1, k2"
    assert result.insight.named_entities.people == "Ada"


def test_response_without_braces_is_a_malformed_failure():
    model = _FakeModel("I cannot help with that.")

    result = asyncio.run(_client(model).extract("Title", "Body"))

    assert isinstance(result, ExtractionFailure)
    assert isinstance(result.error, MalformedProviderResponse)
    assert result.error.raw_response == "I cannot help with that."


def test_locate_json_object_rejects_reversed_braces():
    with pytest.raises(MalformedProviderResponse):
        locate_json_object("} nothing here {")


@pytest.mark.parametrize("raw", ["", "   ", "{not json}", "[1, 2]", '{"namedEntities": "Ada"}'])
def test_unusable_payloads_raise_malformed_response(raw):
    with pytest.raises(MalformedProviderResponse):
        parse_insight_payload(raw)


def test_body_is_truncated_before_submission():
    model = _FakeModel(json.dumps(CANONICAL))
    body = "x" * 5000

    asyncio.run(_client(model).extract("Title", body))

    prompt = model.prompts[0]
    assert "x" * 4000 in prompt
    assert "x" * 4001 not in prompt


def test_configured_body_limit_is_respected():
    model = _FakeModel(json.dumps(CANONICAL))

    asyncio.run(_client(model, max_body_chars=10).extract("Title", "abcdefghijKLMNOP"))

    assert "abcdefghij" in model.prompts[0]
    assert "KLMNOP" not in model.prompts[0]


def test_missing_body_is_sent_as_empty_content():
    model = _FakeModel(json.dumps(CANONICAL))

    result = asyncio.run(_client(model).extract("Only a title", None))

    assert isinstance(result, ExtractionSuccess)
    assert "Title: Only a title" in model.prompts[0]


@pytest.mark.parametrize(
    "error",
    [ResourceExhausted("quota"), InternalServerError("boom"), ConnectionError("reset")],
)
def test_upstream_errors_become_provider_failures(error):
    model = _FakeModel(error=error)

    result = asyncio.run(_client(model).extract("Title", "Body"))

    assert isinstance(result, ExtractionFailure)
    assert isinstance(result.error, ProviderError)
    assert result.ok is False


class _BlockingModel:
    def __init__(self):
        self.release = threading.Event()

    def generate_content(self, prompt, request_options=None):
        self.release.wait(timeout=10)
        return _FakeResponse(json.dumps(CANONICAL))


def test_slow_model_call_times_out_as_failure():
    model = _BlockingModel()
    client = _client(model, timeout_seconds=1)

    async def run():
        try:
            return await client.extract("Title", "Body")
        finally:
            model.release.set()

    result = asyncio.run(run())

    assert isinstance(result, ExtractionFailure)
    assert isinstance(result.error, ProviderError)
    assert "timed out after 1s" in result.message


def test_timeout_is_passed_to_the_sdk_request():
    model = _FakeModel(json.dumps(CANONICAL))

    asyncio.run(_client(model, timeout_seconds=15).extract("Title", "Body"))

    assert model.request_options == [{"timeout": 15}]


def test_empty_model_text_is_a_failure():
    model = _FakeModel("")

    result = asyncio.run(_client(model).extract("Title", "Body"))

    assert isinstance(result, ExtractionFailure)
    assert "empty" in result.message


def test_list_values_and_snake_case_entities_are_normalized():
    raw = json.dumps(
        {
            "topics": ["ai", "chips"],
            "keywords": ["gpu"],
            "named_entities": {"people": ["Ada", "Grace"], "organizations": None},
        }
    )

    insight = parse_insight_payload(raw)

    assert insight.topics == "ai, chips"
    assert insight.named_entities.people == "Ada, Grace"
    assert insight.named_entities.organizations == ""
    assert insight.named_entities.locations == ""
    assert insight.category == "Unknown"


def test_client_requires_api_key():
    with pytest.raises(ValueError):
        GeminiExtractionClient(LLMConfig(api_key=None), model=_FakeModel("{}"))
