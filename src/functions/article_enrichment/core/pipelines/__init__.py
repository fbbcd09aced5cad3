"""Enrichment pipelines."""

from .batch_pipeline import BatchExtractionPipeline, iter_batches
from .ingestion_pipeline import IngestionPipeline, IngestionResult
from .retry_coordinator import RetryCoordinator

__all__ = [
    "BatchExtractionPipeline",
    "IngestionPipeline",
    "IngestionResult",
    "RetryCoordinator",
    "iter_batches",
]
