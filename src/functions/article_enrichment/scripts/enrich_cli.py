"""
Command-line interface for article enrichment.

Ingests source configurations, sweeps unprocessed articles, retries failed
insights, rebuilds the search index and runs the daily schedule.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Bootstrap to add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parents[4]))

from src.shared.utils.logging import setup_logging
from src.shared.utils.env import load_env
from src.functions.article_enrichment.core.errors import (
    EnrichmentError,
    SourceConfigurationNotFound,
)
from src.functions.article_enrichment.core.factory import EnrichmentServices, build_services

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Ingest feeds and enrich articles with topics, keywords, entities and category",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--source-config-file",
        help="YAML file with source configurations (overrides SOURCE_CONFIG_PATH)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Ingest one source configuration")
    ingest.add_argument("--config", required=True, help="Source configuration UUID")

    sweep = subparsers.add_parser(
        "sweep", help="Ingest every configuration, then process unprocessed articles"
    )
    sweep.add_argument(
        "--retry-failed",
        action="store_true",
        help="Also re-submit articles whose last insight failed",
    )

    subparsers.add_parser("retry-failed", help="Re-submit articles with failed insights")
    subparsers.add_parser("rebuild-index", help="Rebuild the search index from stored insights")

    schedule = subparsers.add_parser("schedule", help="Run the sweep every day at a fixed time")
    schedule.add_argument("--hour", type=int, default=10, help="Hour of day (default: 10)")
    schedule.add_argument("--minute", type=int, default=0, help="Minute (default: 0)")
    schedule.add_argument("--retry-failed", action="store_true")

    subparsers.add_parser("progress", help="Show processing and insight status counts")
    return parser


def print_summary(title: str, summary: Dict[str, Any]) -> None:
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)
    for key, value in summary.items():
        if isinstance(value, (list, dict)):
            value = json.dumps(value, indent=2)
        print(f"{key}: {value}")
    print("=" * 60 + "\n")


def _counts(insights: List[Any]) -> Dict[str, int]:
    success = sum(1 for insight in insights if insight.is_success)
    return {"processed": len(insights), "success": success, "failed": len(insights) - success}


async def run_command(args: argparse.Namespace, services: EnrichmentServices) -> Dict[str, Any]:
    if args.command == "ingest":
        result = await services.ingestion.ingest(args.config)
        return result.to_dict()

    if args.command == "sweep":
        result = await services.scheduler.run_daily_sweep(retry_failed=args.retry_failed)
        return result.to_dict()

    if args.command == "retry-failed":
        candidates = await asyncio.to_thread(services.article_store.list_all)
        return _counts(await services.retry_coordinator.retry_failed_articles(candidates))

    if args.command == "rebuild-index":
        await asyncio.to_thread(services.search_sync.initialize_index)
        return {"indexed": await asyncio.to_thread(services.search_sync.rebuild)}

    if args.command == "schedule":
        scheduler = services.scheduler
        scheduler.hour = args.hour
        scheduler.minute = args.minute
        await scheduler.run_forever(retry_failed=args.retry_failed)
        return {}

    unprocessed = await asyncio.to_thread(services.article_store.list_unprocessed)
    counts = await asyncio.to_thread(services.insight_store.count_by_status)
    return {"unprocessed_articles": len(unprocessed), **counts}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    load_env()
    setup_logging(level="DEBUG" if args.verbose else None)

    try:
        services = build_services(source_config_path=args.source_config_file)
        summary = asyncio.run(run_command(args, services))
    except SourceConfigurationNotFound as exc:
        logger.error("%s", exc)
        return 2
    except EnrichmentError as exc:
        logger.error("Enrichment failed: %s", exc)
        return 1
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130

    if summary:
        print_summary(f"ARTICLE ENRICHMENT: {args.command}", summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
