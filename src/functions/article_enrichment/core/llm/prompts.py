"""Prompt helpers for article insight extraction."""

from __future__ import annotations

from ..contracts.extraction import CATEGORIES

EXTRACTION_PROMPT_TEMPLATE = (
    "Analyze this news article and extract the following information in JSON format:\n"
    "1. Main topics (up to 3) (comma-separated string)\n"
    "2. Keywords (up to 5) (comma-separated string)\n"
    "3. Named entities (people, organizations, locations) (comma-separated string)\n"
    "4. Category (one of: {categories})\n\n"
    "Title: {title}\n"
    "Content: {content}\n\n"
    "Respond only with a JSON object containing these fields:\n"
    "{{\n"
    '  "topics": "",\n'
    '  "keywords": "",\n'
    '  "namedEntities": {{"people": "", "organizations": "", "locations": ""}},\n'
    '  "category": ""\n'
    "}}"
)


def build_extraction_prompt(title: str, content: str) -> str:
    """Construct the insight extraction prompt for one article.

    ``content`` must already be truncated to the provider payload limit.
    """

    return EXTRACTION_PROMPT_TEMPLATE.format(
        categories=", ".join(CATEGORIES),
        title=title.strip(),
        content=content.strip(),
    )
