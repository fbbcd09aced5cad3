"""Extraction provider for the article enrichment module."""

from .gemini_client import (
    ExtractionProvider,
    GeminiExtractionClient,
    locate_json_object,
    parse_insight_payload,
    truncate_body,
)
from .prompts import build_extraction_prompt

__all__ = [
    "ExtractionProvider",
    "GeminiExtractionClient",
    "build_extraction_prompt",
    "locate_json_object",
    "parse_insight_payload",
    "truncate_body",
]
