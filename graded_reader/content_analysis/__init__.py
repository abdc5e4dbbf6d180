"""Difficulty scoring and tagging for ingested articles."""

from .analyzer import ArticleAnalysis, ContentAnalyzer
from .difficulty import (
    DIFFICULTY_INFO,
    DIFFICULTY_ORDER,
    Difficulty,
    DifficultyInfo,
    classify,
    composite_score,
    difficulty_order,
)

__all__ = [
    "ArticleAnalysis",
    "ContentAnalyzer",
    "DIFFICULTY_INFO",
    "DIFFICULTY_ORDER",
    "Difficulty",
    "DifficultyInfo",
    "classify",
    "composite_score",
    "difficulty_order",
]
