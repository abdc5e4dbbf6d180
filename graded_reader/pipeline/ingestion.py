"""Feed-to-article ingestion."""

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

import pydantic
import structlog

from graded_reader.content_analysis import ContentAnalyzer
from graded_reader.core.errors import ProcessingError
from graded_reader.feeds import FeedItem, FeedSource
from graded_reader.metrics import metrics
from graded_reader.storage import Article, ArticleDraft, ArticleStore
from graded_reader.text_metrics import process_content
from graded_reader.translation import TranslationRequest, Translator, placeholder_translation

logger = structlog.get_logger(__name__)

DEFAULT_SOURCE_NAME = "极客公园"


@dataclass
class IngestionResult:
    """Outcome of one pass over the feed."""

    created_articles: List[Article] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    skipped: int = 0

    @property
    def count(self) -> int:
        return len(self.created_articles)


class IngestionPipeline:
    """Turns the newest feed items into stored, translated, graded articles.

    Items are handled one at a time. An item whose link or title is already
    stored is skipped. A failed translation is replaced by a placeholder,
    and a failed store write is recorded in the result without stopping the
    run, as is a failed duplicate lookup. Only a feed fetch failure aborts.
    """

    def __init__(
        self,
        feed: FeedSource,
        translator: Translator,
        store: ArticleStore,
        analyzer: Optional[ContentAnalyzer] = None,
        limit: int = 5,
        source_name: str = DEFAULT_SOURCE_NAME,
    ):
        """Initialize the pipeline.

        Args:
            feed: Source of feed items
            translator: Chinese to English translator
            store: Article store used for dedupe and writes
            analyzer: Content analyzer, a default one when omitted
            limit: Number of newest feed items considered per run
            source_name: Display name stored on created articles
        """
        self.feed = feed
        self.translator = translator
        self.store = store
        self.analyzer = analyzer or ContentAnalyzer()
        self.limit = limit
        self.source_name = source_name

        self.items_total = metrics.get_metric("ingestion_items_total")
        self.run_duration = metrics.get_metric("ingestion_run_duration_seconds")

    def process_feed(self) -> IngestionResult:
        """Fetch the newest items and store the ones not seen before.

        Returns:
            Created articles in feed order, per-item error messages and
            the number of skipped duplicates

        Raises:
            FeedFetchError: If the feed cannot be fetched
        """
        start_time = time.time()
        items = self.feed.fetch_latest_items(self.limit)
        logger.info("ingestion_started", items=len(items), limit=self.limit)

        result = IngestionResult()
        for item in items:
            try:
                existing = self.store.find_by_url_or_title(item.link, item.title)
                if existing is not None:
                    logger.info("article_exists", title=item.title, article_id=existing.id)
                    self.items_total.labels(status="skipped").inc()
                    result.skipped += 1
                    continue
                article = self.process_item(item)
            except Exception as e:
                message = f'Error processing "{item.title}": {e}'
                logger.error("item_processing_failed", title=item.title, error=str(e))
                self.items_total.labels(status="error").inc()
                result.errors.append(message)
                continue

            self.items_total.labels(status="created").inc()
            result.created_articles.append(article)

        self.run_duration.observe(time.time() - start_time)
        logger.info(
            "ingestion_completed",
            created=result.count,
            skipped=result.skipped,
            errors=len(result.errors),
        )
        return result

    def process_item(self, item: FeedItem) -> Article:
        """Translate, analyze and store a single feed item."""
        text = process_content(item.body)
        translated = self.translate(text, item.title)
        analysis = self.analyzer.analyze(text)

        try:
            draft = ArticleDraft(
                title=item.title,
                content=text,
                original_content=text,
                translated_content=translated,
                difficulty=analysis.difficulty,
                source=self.source_name,
                source_url=item.link,
                publish_date=item.pub_date or datetime.now(timezone.utc),
                tags=analysis.tags,
                reading_time=analysis.reading_time,
                word_count=analysis.word_count,
                is_published=True,
            )
        except pydantic.ValidationError as e:
            fields = sorted({str(error["loc"][0]) for error in e.errors()})
            raise ProcessingError(
                f"Invalid article fields: {', '.join(fields)}",
                details={"link": item.link, "fields": fields},
            ) from e
        return self.store.create(draft)

    def translate(self, text: str, title: str) -> str:
        """Translate text to English, falling back to a placeholder on any failure."""
        try:
            response = self.translator.translate(
                TranslationRequest(text=text, from_language="zh", to_language="en")
            )
        except Exception as e:
            logger.warning("translation_failed", title=title, error=str(e))
            return placeholder_translation(title)
        return response.translated_text or placeholder_translation(title)
