"""Cloud Function entry point for the article enrichment service."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Tuple

import flask

# Ensure project root is on sys.path before importing project modules
project_root = Path(__file__).parent.parent.parent.parent.parent.absolute()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.shared.utils.env import load_env
from src.shared.utils.logging import setup_logging

from src.functions.article_enrichment.core.errors import (
    InsightPersistenceError,
    SourceConfigurationNotFound,
)
from src.functions.article_enrichment.core.factory import EnrichmentServices, build_services

load_env()
setup_logging(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

SUPPORTED_ACTIONS = (
    "ingest",
    "sweep",
    "retry_failed",
    "process_unprocessed",
    "rebuild_search_index",
)


def handle_request(
    payload: Mapping[str, Any],
    services_factory: Callable[[], EnrichmentServices] = build_services,
) -> Tuple[Dict[str, Any], int]:
    """Run one enrichment action and return ``(body, http_status)``.

    Payload fields:
        action: one of ``SUPPORTED_ACTIONS`` (default ``ingest``)
        source_configuration_uuid: required for ``ingest``
        retry_failed: optional flag for ``sweep``
    """

    if not isinstance(payload, Mapping):
        return _error_body("Payload must be a JSON object", 400)

    action = payload.get("action") or "ingest"
    if action not in SUPPORTED_ACTIONS:
        return _error_body(
            f"Unsupported action '{action}'. Use one of: {', '.join(SUPPORTED_ACTIONS)}", 400
        )

    uuid = payload.get("source_configuration_uuid")
    if action == "ingest" and not uuid:
        return _error_body("`source_configuration_uuid` is required for ingest", 400)

    try:
        services = services_factory()
        body = asyncio.run(_dispatch(services, action, payload))
    except SourceConfigurationNotFound as exc:
        logger.warning("%s", exc)
        return _error_body(str(exc), 404)
    except InsightPersistenceError as exc:
        logger.error("Enrichment run aborted: %s", exc)
        return _error_body(str(exc), 500)
    except Exception:  # noqa: BLE001
        logger.error("Unexpected failure while running '%s'", action, exc_info=True)
        message = "Failed to fetch articles" if action == "ingest" else "Internal server error"
        return _error_body(message, 500)

    body["status"] = "success"
    body["action"] = action
    return body, 200


async def _dispatch(services: EnrichmentServices, action: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
    if action == "ingest":
        result = await services.ingestion.ingest(str(payload["source_configuration_uuid"]))
        return result.to_dict()

    if action == "sweep":
        sweep = await services.scheduler.run_daily_sweep(
            retry_failed=_as_bool(payload.get("retry_failed"))
        )
        return sweep.to_dict()

    if action == "retry_failed":
        candidates = await asyncio.to_thread(services.article_store.list_all)
        insights = await services.retry_coordinator.retry_failed_articles(candidates)
        return _insight_counts(insights)

    if action == "process_unprocessed":
        articles = await asyncio.to_thread(services.article_store.list_unprocessed)
        insights = await services.pipeline.process_articles(articles)
        return _insight_counts(insights)

    await asyncio.to_thread(services.search_sync.initialize_index)
    indexed = await asyncio.to_thread(services.search_sync.rebuild)
    return {"indexed": indexed}


def _insight_counts(insights) -> Dict[str, Any]:
    success = sum(1 for insight in insights if insight.is_success)
    return {"processed": len(insights), "success": success, "failed": len(insights) - success}


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "on"}
    return bool(value)


def _error_body(message: str, status: int) -> Tuple[Dict[str, Any], int]:
    return {"status": "error", "message": message}, status


def article_enrichment_handler(request: flask.Request) -> flask.Response:
    """HTTP handler for ingestion, sweeps, retries and index rebuilds."""

    if request.method == "OPTIONS":
        return _cors_response({}, status=204)

    if request.method != "POST":
        logger.warning("Unsupported HTTP method: %s", request.method)
        return _cors_response(
            {"status": "error", "message": "Method not allowed. Use POST."}, status=405
        )

    payload = request.get_json(silent=True)
    if payload is None:
        return _cors_response(
            {"status": "error", "message": "Invalid or missing JSON payload"}, status=400
        )

    body, status = handle_request(payload)
    return _cors_response(body, status=status)


def health_check_handler(request: flask.Request) -> flask.Response:
    """Health check endpoint."""
    return _cors_response({"status": "healthy", "service": "article_enrichment"})


def _cors_response(body: Dict[str, Any], status: int = 200) -> flask.Response:
    """Create a CORS-enabled JSON response."""
    response = flask.make_response(json.dumps(body, ensure_ascii=False), status)
    headers = response.headers
    headers["Content-Type"] = "application/json"
    headers["Access-Control-Allow-Origin"] = "*"
    headers["Access-Control-Allow-Methods"] = "POST,OPTIONS"
    headers["Access-Control-Allow-Headers"] = "Content-Type"
    return response

