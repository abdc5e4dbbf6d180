"""Graded Chinese reading content backend."""

from .content_analysis import ContentAnalyzer, Difficulty, classify
from .pipeline import IngestionPipeline, IngestionResult
from .storage import ArticleStore, create_session_factory

__version__ = "1.0.0"

__all__ = [
    "ArticleStore",
    "ContentAnalyzer",
    "Difficulty",
    "IngestionPipeline",
    "IngestionResult",
    "classify",
    "create_session_factory",
]
