"""Deployment wrapper for the article enrichment Cloud Function."""

from __future__ import annotations

import sys
from pathlib import Path

import flask

project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.functions.article_enrichment.functions.main import (
    article_enrichment_handler,
    health_check_handler,
)


def enrich_articles(request: flask.Request) -> flask.Response:
    return article_enrichment_handler(request)


def health_check(request: flask.Request) -> flask.Response:
    return health_check_handler(request)
