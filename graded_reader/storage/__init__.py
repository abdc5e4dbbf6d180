"""Article storage."""

from .db import Base, create_db_engine, create_session_factory
from .repository import ArticleStore
from .schemas import (
    Article,
    ArticleDraft,
    ArticlePatch,
    ArticleQuery,
    Page,
    ScheduleLog,
    Statistics,
    TagCount,
    calculate_pagination,
)

__all__ = [
    "Article",
    "ArticleDraft",
    "ArticlePatch",
    "ArticleQuery",
    "ArticleStore",
    "Base",
    "Page",
    "ScheduleLog",
    "Statistics",
    "TagCount",
    "calculate_pagination",
    "create_db_engine",
    "create_session_factory",
]
