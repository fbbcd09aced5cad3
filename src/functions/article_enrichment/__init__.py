"""Article enrichment: feed ingestion and batched LLM insight extraction."""
