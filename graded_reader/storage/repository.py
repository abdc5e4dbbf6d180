"""Article store backed by SQLAlchemy."""

import json
from collections import Counter
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Iterator, List, Optional

import structlog
from sqlalchemy import case, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from graded_reader.content_analysis import DIFFICULTY_ORDER, Difficulty
from graded_reader.core.errors import StorageError
from graded_reader.text_metrics import count_script_characters, reading_time_minutes

from .models import ArticleRecord, BookmarkRecord, ScheduleLogRecord, SettingRecord
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
    to_naive_utc,
)

logger = structlog.get_logger(__name__)

POPULAR_TAG_LIMIT = 10

_DIFFICULTY_RANK = case(
    {level.value: rank for rank, level in enumerate(DIFFICULTY_ORDER)},
    value=ArticleRecord.difficulty,
    else_=len(DIFFICULTY_ORDER),
)

_SORT_COLUMNS = {
    "publish_date": ArticleRecord.publish_date,
    "difficulty": _DIFFICULTY_RANK,
    "reading_time": ArticleRecord.reading_time,
    "hot_score": ArticleRecord.hot_score,
}

_SAMPLE_TEXT = {
    Difficulty.EASY: (
        "基础中文阅读",
        "第{i}篇：这是为初学者准备的短文，内容简单易懂，包含常用词汇与基本句式，便于快速阅读与理解。",
        "No.{i}: This is a short passage for beginners with common words and simple sentences "
        "for quick reading.",
        ["教育", "中文"],
    ),
    Difficulty.MEDIUM: (
        "科技与社会观察",
        "第{i}篇：本文围绕当下科技与社会的联系展开，包含一定数量的复合句与常见成语表达，以提升阅读理解能力。",
        "No.{i}: This article discusses the relationship between technology and society, "
        "using some compound sentences and idiomatic expressions.",
        ["科技", "社会"],
    ),
    Difficulty.HARD: (
        "深度技术与趋势分析",
        "第{i}篇：本文从系统角度讨论前沿技术与产业趋势，涉及专业术语与较复杂的语法结构，适合进阶读者研读。",
        "No.{i}: This article analyzes cutting-edge technologies and industry trends with "
        "technical terms and complex structures for advanced readers.",
        ["技术", "趋势", "研究"],
    ),
}


def _encode_tags(tags: List[str]) -> str:
    return json.dumps(tags, ensure_ascii=False)


class ArticleStore:
    """Persistence for articles, bookmarks, settings and schedule logs.

    Every public call runs in its own session and commits before
    returning. Lookups that find nothing return None or False; database
    failures surface as StorageError.
    """

    def __init__(self, session_factory: sessionmaker):
        """Initialize the store.

        Args:
            session_factory: Session factory from create_session_factory
        """
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("storage_operation_failed", error=str(e))
            raise StorageError(f"Database error: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # Articles

    def create(self, draft: ArticleDraft) -> Article:
        """Insert a new article and return it with id and timestamps assigned."""
        record = ArticleRecord(
            title=draft.title,
            content=draft.content,
            original_content=draft.original_content,
            translated_content=draft.translated_content,
            difficulty=Difficulty(draft.difficulty).value,
            source=draft.source,
            source_url=draft.source_url,
            publish_date=to_naive_utc(draft.publish_date),
            tags=_encode_tags(draft.tags),
            reading_time=draft.reading_time,
            word_count=draft.word_count,
            hot_score=draft.hot_score,
            is_published=draft.is_published,
        )
        with self._session() as session:
            session.add(record)
            session.flush()
            article = Article.model_validate(record)
        logger.info("article_created", article_id=article.id, title=article.title)
        return article

    def get(self, article_id: str) -> Optional[Article]:
        with self._session() as session:
            record = session.get(ArticleRecord, article_id)
            return Article.model_validate(record) if record else None

    def find_all(self) -> List[Article]:
        """All articles, newest publish date first."""
        return self._select(select(ArticleRecord).order_by(ArticleRecord.publish_date.desc()))

    def find_by_url_or_title(self, url: str, title: str) -> Optional[Article]:
        """Return an article whose source URL or title matches, if any."""
        statement = (
            select(ArticleRecord)
            .where(or_(ArticleRecord.source_url == url, ArticleRecord.title == title))
            .limit(1)
        )
        articles = self._select(statement)
        return articles[0] if articles else None

    def find_by_difficulty(self, level: Difficulty) -> List[Article]:
        statement = (
            select(ArticleRecord)
            .where(ArticleRecord.difficulty == Difficulty(level).value)
            .order_by(ArticleRecord.publish_date.desc())
        )
        return self._select(statement)

    def search(self, term: str) -> List[Article]:
        """Articles whose title, content or tags contain the term."""
        statement = (
            select(ArticleRecord)
            .where(
                or_(
                    ArticleRecord.title.contains(term, autoescape=True),
                    ArticleRecord.content.contains(term, autoescape=True),
                    ArticleRecord.tags.contains(term, autoescape=True),
                )
            )
            .order_by(ArticleRecord.publish_date.desc())
        )
        return self._select(statement)

    def update(self, article_id: str, patch: ArticlePatch) -> Optional[Article]:
        """Apply the non-None fields of a patch.

        Returns:
            The updated article, or None when the id is unknown
        """
        changes = patch.model_dump(exclude_none=True)
        if "tags" in changes:
            changes["tags"] = _encode_tags(changes["tags"])
        if "publish_date" in changes:
            changes["publish_date"] = to_naive_utc(changes["publish_date"])
        if "difficulty" in changes:
            changes["difficulty"] = Difficulty(changes["difficulty"]).value

        with self._session() as session:
            record = session.get(ArticleRecord, article_id)
            if record is None:
                return None
            for field, value in changes.items():
                setattr(record, field, value)
            session.flush()
            article = Article.model_validate(record)
        logger.info("article_updated", article_id=article_id, fields=sorted(changes))
        return article

    def delete(self, article_id: str) -> bool:
        """Delete an article; False when it does not exist."""
        with self._session() as session:
            record = session.get(ArticleRecord, article_id)
            if record is None:
                return False
            session.delete(record)
        logger.info("article_deleted", article_id=article_id)
        return True

    def delete_published_before(self, cutoff: datetime) -> int:
        """Delete articles published before cutoff and return how many went."""
        with self._session() as session:
            records = session.scalars(
                select(ArticleRecord).where(ArticleRecord.publish_date < to_naive_utc(cutoff))
            ).all()
            for record in records:
                session.delete(record)
            deleted = len(records)
        logger.info("old_articles_deleted", count=deleted, cutoff=cutoff.isoformat())
        return deleted

    def paginate(self, query: Optional[ArticleQuery] = None) -> Page:
        """Return one page of articles matching the query.

        Args:
            query: Paging, sorting and filter options; defaults apply when omitted

        Returns:
            The page with its pagination metadata
        """
        query = query or ArticleQuery()
        conditions = []
        if query.published_only:
            conditions.append(ArticleRecord.is_published.is_(True))
        if query.difficulty:
            conditions.append(ArticleRecord.difficulty == Difficulty(query.difficulty).value)
        if query.source:
            conditions.append(ArticleRecord.source.contains(query.source, autoescape=True))
        if query.date_from:
            conditions.append(ArticleRecord.publish_date >= to_naive_utc(query.date_from))
        if query.date_to:
            conditions.append(ArticleRecord.publish_date <= to_naive_utc(query.date_to))

        alternatives = []
        if query.search_term:
            alternatives.append(ArticleRecord.title.contains(query.search_term, autoescape=True))
            alternatives.append(ArticleRecord.content.contains(query.search_term, autoescape=True))
        for tag in query.tags:
            alternatives.append(ArticleRecord.tags.contains(tag, autoescape=True))
        if alternatives:
            conditions.append(or_(*alternatives))

        column = _SORT_COLUMNS[query.sort_by]
        ordering = column.asc() if query.sort_order == "asc" else column.desc()

        with self._session() as session:
            total = session.scalar(
                select(func.count()).select_from(ArticleRecord).where(*conditions)
            )
            records = session.scalars(
                select(ArticleRecord)
                .where(*conditions)
                .order_by(ordering, ArticleRecord.id)
                .offset((query.page - 1) * query.limit)
                .limit(query.limit)
            ).all()
            items = [Article.model_validate(record) for record in records]

        return Page(items=items, **calculate_pagination(total or 0, query.page, query.limit))

    def statistics(self) -> Statistics:
        """Aggregate counts, reading times and the most used tags."""
        with self._session() as session:
            total = session.scalar(select(func.count()).select_from(ArticleRecord)) or 0
            by_difficulty = {level.value: 0 for level in DIFFICULTY_ORDER}
            for level, count in session.execute(
                select(ArticleRecord.difficulty, func.count()).group_by(ArticleRecord.difficulty)
            ):
                by_difficulty[level] = count
            average, reading_total = session.execute(
                select(func.avg(ArticleRecord.reading_time), func.sum(ArticleRecord.reading_time))
            ).one()
            tag_counts: Counter = Counter()
            for encoded in session.scalars(select(ArticleRecord.tags)):
                tag_counts.update(json.loads(encoded or "[]"))

        return Statistics(
            total_articles=total,
            articles_by_difficulty=by_difficulty,
            average_reading_time=float(average or 0),
            total_reading_time=int(reading_total or 0),
            popular_tags=[
                TagCount(tag=tag, count=count)
                for tag, count in tag_counts.most_common(POPULAR_TAG_LIMIT)
            ],
        )

    def count(self) -> int:
        with self._session() as session:
            return session.scalar(select(func.count()).select_from(ArticleRecord)) or 0

    def _select(self, statement) -> List[Article]:
        with self._session() as session:
            return [Article.model_validate(record) for record in session.scalars(statement)]

    # Settings

    def save_setting(self, key: str, value: str) -> None:
        with self._session() as session:
            record = session.get(SettingRecord, key)
            if record is None:
                session.add(SettingRecord(key=key, value=value))
            else:
                record.value = value

    def get_setting(self, key: str, default: Optional[str] = None) -> Optional[str]:
        with self._session() as session:
            record = session.get(SettingRecord, key)
            return record.value if record else default

    # Schedule logs

    def log_schedule_task(
        self,
        task_type: str,
        status: str,
        message: Optional[str] = None,
        new_articles: int = 0,
        duration_ms: Optional[int] = None,
    ) -> ScheduleLog:
        """Record one execution of a scheduled task."""
        record = ScheduleLogRecord(
            task_type=task_type,
            status=status,
            message=message,
            new_articles=new_articles,
            duration_ms=duration_ms,
        )
        with self._session() as session:
            session.add(record)
            session.flush()
            return ScheduleLog.model_validate(record)

    def schedule_logs(self, limit: int = 50) -> List[ScheduleLog]:
        """Most recent schedule log entries first."""
        with self._session() as session:
            records = session.scalars(
                select(ScheduleLogRecord)
                .order_by(ScheduleLogRecord.created_at.desc(), ScheduleLogRecord.id.desc())
                .limit(limit)
            )
            return [ScheduleLog.model_validate(record) for record in records]

    # Bookmarks

    def add_bookmark(self, reader_id: str, article_id: str) -> bool:
        """Bookmark an article for a reader.

        Returns:
            False when the article does not exist; bookmarking twice is a no-op
        """
        with self._session() as session:
            if session.get(ArticleRecord, article_id) is None:
                return False
            existing = session.scalar(
                select(BookmarkRecord).where(
                    BookmarkRecord.reader_id == reader_id,
                    BookmarkRecord.article_id == article_id,
                )
            )
            if existing is None:
                session.add(BookmarkRecord(reader_id=reader_id, article_id=article_id))
        return True

    def remove_bookmark(self, reader_id: str, article_id: str) -> bool:
        with self._session() as session:
            record = session.scalar(
                select(BookmarkRecord).where(
                    BookmarkRecord.reader_id == reader_id,
                    BookmarkRecord.article_id == article_id,
                )
            )
            if record is None:
                return False
            session.delete(record)
        return True

    def bookmarks(self, reader_id: str) -> List[Article]:
        """A reader's bookmarked articles, most recently bookmarked first."""
        statement = (
            select(ArticleRecord)
            .join(BookmarkRecord, BookmarkRecord.article_id == ArticleRecord.id)
            .where(BookmarkRecord.reader_id == reader_id)
            .order_by(BookmarkRecord.created_at.desc(), BookmarkRecord.id.desc())
        )
        return self._select(statement)

    # Sample data

    def seed_sample_articles(self, count: int = 12, now: Optional[datetime] = None) -> int:
        """Insert sample articles cycling through the difficulty levels.

        Does nothing when any article already exists.

        Returns:
            Number of articles created
        """
        if self.count() > 0:
            logger.info("sample_data_exists")
            return 0

        now = now or datetime.now(timezone.utc)
        for i in range(1, count + 1):
            level = DIFFICULTY_ORDER[i % len(DIFFICULTY_ORDER)]
            title, zh, en, tags = _SAMPLE_TEXT[level]
            text = zh.format(i=i)
            self.create(
                ArticleDraft(
                    title=f"{title} {i}",
                    content=text,
                    original_content=text,
                    translated_content=en.format(i=i),
                    difficulty=level,
                    source="示例数据",
                    source_url=f"https://example.com/sample-{i}",
                    publish_date=now - timedelta(days=i),
                    tags=list(tags),
                    reading_time=reading_time_minutes(count_script_characters(text)),
                    word_count=count_script_characters(text),
                )
            )
        logger.info("sample_data_created", count=count)
        return count
