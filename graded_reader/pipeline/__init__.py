"""Ingestion pipeline."""

from .ingestion import IngestionPipeline, IngestionResult

__all__ = ["IngestionPipeline", "IngestionResult"]
