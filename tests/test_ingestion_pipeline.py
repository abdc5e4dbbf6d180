"""Tests for the feed-to-article ingestion pipeline."""
from datetime import datetime, timezone
from unittest.mock import Mock, patch

import pytest

from graded_reader.content_analysis import Difficulty
from graded_reader.core.errors import (
    FeedFetchError,
    ProcessingError,
    StorageError,
    TranslationError,
)
from graded_reader.feeds import FeedItem, SampleFeedSource
from graded_reader.pipeline import IngestionPipeline
from graded_reader.translation import (
    GlossaryTranslator,
    TranslationResponse,
    Translator,
    placeholder_translation,
)


def make_pipeline(feed, store, translator=None, **kwargs):
    return IngestionPipeline(feed, translator or GlossaryTranslator(), store, **kwargs)


class FailingOnTitle(Translator):
    """Translator that fails for texts containing a marker."""

    name = "failing"

    def __init__(self, marker):
        self.marker = marker

    def translate(self, request):
        if self.marker in request.text:
            raise TranslationError("service unavailable")
        return TranslationResponse(
            translated_text=f"EN: {request.text}",
            original_text=request.text,
            from_language=request.from_language,
            to_language=request.to_language,
            confidence=0.9,
        )


def test_creates_article_per_new_item(store, static_feed, feed_items):
    result = make_pipeline(static_feed, store).process_feed()

    assert result.count == 5
    assert result.errors == []
    assert result.skipped == 0
    assert [a.title for a in result.created_articles] == [item.title for item in feed_items]

    article = result.created_articles[0]
    assert article.source == "极客公园"
    assert article.source_url == feed_items[0].link
    assert article.content == article.original_content == feed_items[0].content
    assert article.translated_content
    assert article.difficulty in set(Difficulty)
    assert article.tags[0] == "科技"
    assert "人工智能" in article.tags
    assert article.reading_time >= 1
    assert article.word_count > 0
    assert article.publish_date == feed_items[0].pub_date.replace(tzinfo=None)


def test_second_run_is_idempotent(store, static_feed):
    pipeline = make_pipeline(static_feed, store)
    pipeline.process_feed()

    result = pipeline.process_feed()

    assert result.count == 0
    assert result.skipped == 5
    assert len(store.find_all()) == 5


def test_duplicate_by_title_or_link(store, static_feed, feed_items, make_draft):
    store.create(make_draft(title=feed_items[0].title, source_url="https://other.example.com/1"))
    store.create(make_draft(title="完全不同的标题", source_url=feed_items[1].link))

    result = make_pipeline(static_feed, store).process_feed()

    assert result.skipped == 2
    assert [a.title for a in result.created_articles] == [item.title for item in feed_items[2:]]


def test_limit_passed_to_feed(store):
    feed = Mock()
    feed.fetch_latest_items.return_value = []

    result = make_pipeline(feed, store, limit=3).process_feed()

    feed.fetch_latest_items.assert_called_once_with(3)
    assert result.count == 0
    assert result.errors == []


def test_translation_failure_uses_placeholder(store, static_feed, feed_items):
    translator = FailingOnTitle(marker="第2条")

    result = make_pipeline(static_feed, store, translator=translator).process_feed()

    assert result.count == 5
    assert result.errors == []
    by_title = {a.title: a for a in result.created_articles}
    assert by_title[feed_items[1].title].translated_content == placeholder_translation(
        feed_items[1].title
    )
    assert by_title[feed_items[0].title].translated_content.startswith("EN: ")


def test_store_failure_is_recorded_and_run_continues(store, static_feed, feed_items):
    original_create = store.create
    failing_title = feed_items[2].title

    def create(draft):
        if draft.title == failing_title:
            raise StorageError("disk full")
        return original_create(draft)

    with patch.object(store, "create", side_effect=create):
        result = make_pipeline(static_feed, store).process_feed()

    assert result.count == 4
    assert result.errors == [f'Error processing "{failing_title}": disk full']
    assert store.find_by_url_or_title(feed_items[2].link, failing_title) is None


def test_feed_failure_propagates(store):
    feed = Mock()
    feed.fetch_latest_items.side_effect = FeedFetchError("RSS fetch failed")

    with pytest.raises(FeedFetchError):
        make_pipeline(feed, store).process_feed()
    assert store.find_all() == []


def test_content_is_normalized_and_falls_back_to_description(store):
    items = [
        FeedItem(
            title="空白测试",
            content="多余   空格\n\n\n下一行。",
            link="https://example.com/1",
            pub_date=datetime(2024, 1, 2, tzinfo=timezone.utc),
        ),
        FeedItem(
            title="只有摘要",
            description="这是摘要。",
            link="https://example.com/2",
            pub_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
        ),
    ]
    feed = Mock()
    feed.fetch_latest_items.return_value = items

    result = make_pipeline(feed, store).process_feed()

    assert [a.content for a in result.created_articles] == ["多余 空格\n下一行。", "这是摘要。"]


def test_undated_item_gets_current_time(store):
    feed = Mock()
    feed.fetch_latest_items.return_value = [
        FeedItem(title="无日期", content="没有发布日期的文章。", link="https://example.com/x")
    ]
    before = datetime.now(timezone.utc).replace(tzinfo=None)

    article = make_pipeline(feed, store).process_feed().created_articles[0]

    assert article.publish_date >= before


def test_custom_source_name(store, static_feed):
    result = make_pipeline(static_feed, store, limit=1, source_name="少数派").process_feed()
    assert [a.source for a in result.created_articles] == ["少数派"]


def test_sample_feed_end_to_end(store):
    result = make_pipeline(SampleFeedSource(), store).process_feed()

    assert result.count == 5
    assert store.statistics().total_articles == 5
    assert all(a.translated_content for a in result.created_articles)


def test_duplicate_lookup_failure_is_recorded_and_run_continues(store, static_feed, feed_items):
    original_lookup = store.find_by_url_or_title
    failing_title = feed_items[1].title

    def lookup(url, title):
        if title == failing_title:
            raise StorageError("database is locked")
        return original_lookup(url, title)

    with patch.object(store, "find_by_url_or_title", side_effect=lookup):
        result = make_pipeline(static_feed, store).process_feed()

    assert result.count == 4
    assert result.skipped == 0
    assert result.errors == [f'Error processing "{failing_title}": database is locked']
    assert failing_title not in [a.title for a in result.created_articles]
    assert len(store.find_all()) == 4


def test_empty_translation_uses_placeholder(store, static_feed, feed_items):
    translator = Mock(spec=Translator)
    translator.translate.return_value = TranslationResponse(
        translated_text="",
        original_text="",
        from_language="zh",
        to_language="en",
        confidence=0.0,
    )

    result = make_pipeline(static_feed, store, translator=translator, limit=1).process_feed()

    assert result.count == 1
    assert result.created_articles[0].translated_content == placeholder_translation(
        feed_items[0].title
    )


def test_item_without_text_is_recorded_as_processing_error(store):
    feed = Mock()
    feed.fetch_latest_items.return_value = [
        FeedItem(title="空文章", link="https://example.com/empty"),
        FeedItem(title="正常文章", content="这是正文。", link="https://example.com/ok"),
    ]
    pipeline = make_pipeline(feed, store)

    result = pipeline.process_feed()

    assert [a.title for a in result.created_articles] == ["正常文章"]
    assert result.errors == [
        'Error processing "空文章": Invalid article fields: content, original_content'
    ]
    with pytest.raises(ProcessingError) as exc_info:
        pipeline.process_item(feed.fetch_latest_items.return_value[0])
    assert exc_info.value.details["link"] == "https://example.com/empty"
