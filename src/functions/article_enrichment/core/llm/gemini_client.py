"""Gemini-backed extraction provider.

Maps ``(title, body)`` to an ``ExtractionSuccess`` or an ``ExtractionFailure``.
Nothing raised by the SDK, the transport or the parser escapes ``extract``.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Protocol

import google.generativeai as genai
from google.api_core.exceptions import GoogleAPIError, ResourceExhausted
from pydantic import ValidationError

from ..config import LLMConfig
from ..contracts.extraction import (
    ExtractedInsight,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
)
from ..errors import MalformedProviderResponse, ProviderError
from .prompts import build_extraction_prompt

logger = logging.getLogger(__name__)

_MAX_OUTPUT_TOKENS = 1024


class ExtractionProvider(Protocol):
    """Anything that turns an article title and body into an insight or a failure."""

    async def extract(self, title: str, body: Optional[str]) -> ExtractionResult:
        ...


def truncate_body(body: Optional[str], max_chars: int) -> str:
    """Keep the leading ``max_chars`` characters of the article body."""

    if not body:
        return ""
    return body[:max_chars]


def locate_json_object(raw_text: str) -> str:
    """Return the span from the first ``{`` to the last ``}`` of a response.

    Raises:
        MalformedProviderResponse: If the response holds no such span
    """

    start = raw_text.find("{")
    end = raw_text.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise MalformedProviderResponse(
            "Provider response does not contain a JSON object", raw_response=raw_text
        )
    return raw_text[start:end + 1]


def parse_insight_payload(raw_text: Optional[str]) -> ExtractedInsight:
    """Parse a provider response, tolerating prose around the JSON object.

    Raises:
        MalformedProviderResponse: On empty, non-JSON or wrongly shaped output
    """

    if not raw_text or not raw_text.strip():
        raise MalformedProviderResponse("Provider returned an empty response", raw_response=raw_text)

    span = locate_json_object(raw_text)
    try:
        data: Any = json.loads(span)
    except json.JSONDecodeError as exc:
        raise MalformedProviderResponse(
            f"Provider response is not valid JSON: {exc}", raw_response=raw_text
        ) from exc

    if not isinstance(data, dict):
        raise MalformedProviderResponse(
            "Provider response JSON is not an object", raw_response=raw_text
        )

    try:
        return ExtractedInsight.model_validate(data)
    except ValidationError as exc:
        messages = "; ".join(error.get("msg", "invalid value") for error in exc.errors())
        raise MalformedProviderResponse(
            f"Provider response has an unexpected shape: {messages}", raw_response=raw_text
        ) from exc


class GeminiExtractionClient:
    """Async wrapper around Gemini that never raises past ``extract``."""

    def __init__(self, config: LLMConfig, *, model: Optional[Any] = None) -> None:
        config.validate()
        self.config = config
        self._request_timeout = config.timeout_seconds
        genai.configure(api_key=config.api_key)
        generation_config: Dict[str, Any] = {
            "temperature": config.temperature,
            "max_output_tokens": _MAX_OUTPUT_TOKENS,
        }
        self._model = model or genai.GenerativeModel(
            model_name=config.model,
            generation_config=generation_config,
        )
        logger.info("Initialized GeminiExtractionClient with model: %s", config.model)

    async def extract(self, title: str, body: Optional[str]) -> ExtractionResult:
        """Extract topics, keywords, named entities and category for one article."""

        prompt = build_extraction_prompt(
            title or "",
            truncate_body(body, self.config.max_body_chars),
        )
        try:
            raw_text = await self._invoke_model(prompt)
            insight = parse_insight_payload(raw_text)
        except ProviderError as exc:
            logger.warning("Insight extraction failed for %r: %s", (title or "")[:80], exc)
            return ExtractionFailure(error=exc)
        return ExtractionSuccess(insight=insight)

    async def _invoke_model(self, prompt: str) -> str:
        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(
                    self._model.generate_content,
                    prompt,
                    request_options={"timeout": self._request_timeout},
                ),
                timeout=self._request_timeout,
            )
        except ResourceExhausted as exc:
            raise ProviderError(f"Gemini rate limit reached: {exc}") from exc
        except GoogleAPIError as exc:
            raise ProviderError(f"Gemini API error: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise ProviderError(
                f"Gemini request timed out after {self._request_timeout}s"
            ) from exc
        except Exception as exc:  # noqa: BLE001
            raise ProviderError(f"Unexpected Gemini failure: {exc}") from exc

        return self._extract_text(response)

    @staticmethod
    def _extract_text(result: Any) -> str:
        try:
            text = getattr(result, "text", None)
        except ValueError:
            # Raised by the SDK when the candidate was blocked or has no parts
            text = None
        if text:
            return str(text)
        for candidate in getattr(result, "candidates", None) or []:
            content = getattr(candidate, "content", None)
            if not content:
                continue
            segments = [
                segment.text
                for segment in getattr(content, "parts", [])
                if getattr(segment, "text", None)
            ]
            if segments:
                return " ".join(segments)
        return ""
