import itertools
import os
from datetime import datetime, timedelta, timezone
from typing import List

import pytest
import structlog

from graded_reader.content_analysis import Difficulty
from graded_reader.feeds import FeedItem, FeedSource
from graded_reader.storage import ArticleDraft, ArticleStore, create_session_factory


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of the tests."""
    for name in list(os.environ):
        if name.startswith("GRADED_READER_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("KIMI_API_KEY", raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any structlog configuration a test installed."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def session_factory():
    """Session factory bound to a fresh in-memory database."""
    return create_session_factory("sqlite://")


@pytest.fixture
def store(session_factory):
    return ArticleStore(session_factory)


@pytest.fixture
def make_draft():
    """Factory for article drafts; each call is one hour newer than the last."""
    counter = itertools.count(1)
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _make(**overrides) -> ArticleDraft:
        n = next(counter)
        values = {
            "title": f"测试文章 {n}",
            "content": "这是一篇测试文章。",
            "original_content": "这是一篇测试文章。",
            "translated_content": "This is a test article.",
            "difficulty": Difficulty.EASY,
            "source": "极客公园",
            "source_url": f"https://example.com/articles/{n}",
            "publish_date": base + timedelta(hours=n),
            "tags": ["科技"],
            "reading_time": 1,
            "word_count": 8,
        }
        values.update(overrides)
        return ArticleDraft(**values)

    return _make


class StaticFeed(FeedSource):
    """Feed source serving a fixed list of items."""

    def __init__(self, items: List[FeedItem]):
        self.items = items

    def fetch_items(self) -> List[FeedItem]:
        return list(self.items)


@pytest.fixture
def feed_items():
    """Five feed items, newest first."""
    now = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
    return [
        FeedItem(
            title=f"新闻标题{n}",
            description=f"新闻摘要{n}。",
            content=f"第{n}条新闻：人工智能技术正在改变我们的生活。研究人员发布了新的模型！",
            link=f"https://www.geekpark.net/news/{1000 + n}",
            pub_date=now - timedelta(hours=n),
            guid=f"news-{n}",
        )
        for n in range(1, 6)
    ]


@pytest.fixture
def static_feed(feed_items):
    return StaticFeed(feed_items)
