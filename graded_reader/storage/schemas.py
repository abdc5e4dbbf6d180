"""Pydantic views of stored articles and store queries."""

import json
import math
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from graded_reader.content_analysis import Difficulty

SortField = Literal["publish_date", "difficulty", "reading_time", "hot_score"]
SortOrder = Literal["asc", "desc"]

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC for storage."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class Article(BaseModel):
    """A stored article."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: str
    original_content: str
    translated_content: str
    difficulty: Difficulty
    source: str
    source_url: str
    publish_date: datetime
    created_at: datetime
    updated_at: datetime
    tags: List[str] = Field(default_factory=list)
    reading_time: int
    word_count: int
    hot_score: float = 0.0
    is_published: bool = True

    @field_validator("tags", mode="before")
    @classmethod
    def _decode_tags(cls, value):
        if isinstance(value, str):
            return json.loads(value or "[]")
        return value


class ArticleDraft(BaseModel):
    """Fields needed to create an article; id and timestamps are assigned by the store."""

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    original_content: str = Field(..., min_length=1)
    translated_content: str = Field(..., min_length=1)
    difficulty: Difficulty
    source: str = Field(..., min_length=1)
    source_url: str = Field(..., min_length=1)
    publish_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    tags: List[str] = Field(default_factory=list)
    reading_time: int = Field(5, ge=1)
    word_count: int = Field(0, ge=0)
    hot_score: float = 0.0
    is_published: bool = True


class ArticlePatch(BaseModel):
    """Field-level update; fields left as None are not touched."""

    title: Optional[str] = None
    content: Optional[str] = None
    original_content: Optional[str] = None
    translated_content: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    source: Optional[str] = None
    source_url: Optional[str] = None
    publish_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    reading_time: Optional[int] = Field(None, ge=1)
    word_count: Optional[int] = Field(None, ge=0)
    hot_score: Optional[float] = None
    is_published: Optional[bool] = None


class ArticleQuery(BaseModel):
    """Paging, sorting and filtering options for listing articles.

    The search term matches title or content. Tag filters are OR'd with the
    search term, so they widen rather than narrow the result.
    """

    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    sort_by: SortField = "publish_date"
    sort_order: SortOrder = "desc"
    difficulty: Optional[Difficulty] = None
    tags: List[str] = Field(default_factory=list)
    search_term: Optional[str] = None
    source: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    published_only: bool = True


class Page(BaseModel):
    """One page of articles with pagination metadata."""

    items: List[Article]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next: bool
    has_prev: bool


class TagCount(BaseModel):
    tag: str
    count: int


class Statistics(BaseModel):
    """Aggregate figures over all stored articles."""

    total_articles: int
    articles_by_difficulty: Dict[str, int]
    average_reading_time: float
    total_reading_time: int
    popular_tags: List[TagCount]


class ScheduleLog(BaseModel):
    """One recorded execution of a scheduled task."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    task_type: str
    status: str
    message: Optional[str] = None
    new_articles: int = 0
    duration_ms: Optional[int] = None
    created_at: datetime


def calculate_pagination(total: int, page: int, limit: int) -> Dict[str, int]:
    """Derive total pages and neighbour flags for a page request."""
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }
