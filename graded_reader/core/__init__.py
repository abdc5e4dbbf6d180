"""Core definitions shared across the graded reader."""

from .errors import (
    BaseError,
    ErrorCategory,
    ErrorSeverity,
    FeedFetchError,
    ProcessingError,
    StorageError,
    TranslationError,
    ValidationError,
)

__all__ = [
    "BaseError",
    "ErrorCategory",
    "ErrorSeverity",
    "FeedFetchError",
    "ProcessingError",
    "StorageError",
    "TranslationError",
    "ValidationError",
]
