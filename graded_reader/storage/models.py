"""ORM tables for articles and their bookkeeping."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .db import Base


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite does not keep offsets."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return uuid.uuid4().hex


class ArticleRecord(Base):
    __tablename__ = "articles"

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String(512), nullable=False, index=True)
    content = Column(Text, nullable=False)
    original_content = Column(Text, nullable=False)
    translated_content = Column(Text, nullable=False)
    difficulty = Column(String(16), nullable=False, index=True)
    source = Column(String(128), nullable=False)
    source_url = Column(String(1024), nullable=False, index=True)
    publish_date = Column(DateTime, nullable=False, index=True)
    # JSON encoded list, insertion order kept
    tags = Column(Text, nullable=False, default="[]")
    reading_time = Column(Integer, nullable=False, default=1)
    word_count = Column(Integer, nullable=False, default=0)
    hot_score = Column(Float, nullable=False, default=0.0)
    is_published = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    bookmarks = relationship(
        "BookmarkRecord", back_populates="article", cascade="all, delete-orphan"
    )


class BookmarkRecord(Base):
    __tablename__ = "bookmarks"
    __table_args__ = (UniqueConstraint("reader_id", "article_id", name="uq_bookmark_reader_article"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    reader_id = Column(String(128), nullable=False, index=True)
    article_id = Column(
        String(32), ForeignKey("articles.id", ondelete="CASCADE"), nullable=False
    )
    created_at = Column(DateTime, default=utcnow, nullable=False)

    article = relationship("ArticleRecord", back_populates="bookmarks")


class SettingRecord(Base):
    __tablename__ = "settings"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class ScheduleLogRecord(Base):
    __tablename__ = "schedule_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_type = Column(String(64), nullable=False, index=True)
    status = Column(String(16), nullable=False)
    message = Column(Text, nullable=True)
    new_articles = Column(Integer, nullable=False, default=0)
    duration_ms = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
