"""Tests for the SQLAlchemy article store."""
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

from graded_reader.content_analysis import Difficulty
from graded_reader.core.errors import StorageError
from graded_reader.storage import (
    ArticlePatch,
    ArticleQuery,
    ArticleStore,
    calculate_pagination,
    create_session_factory,
)
from graded_reader.text_metrics import count_script_characters, reading_time_minutes


def test_tables_created(tmp_path):
    """File-backed databases get their directory and tables created."""
    db_path = tmp_path / "nested" / "articles.db"
    factory = create_session_factory(f"sqlite:///{db_path}")

    assert db_path.exists()
    tables = set(inspect(factory.kw["bind"]).get_table_names())
    assert {"articles", "bookmarks", "settings", "schedule_logs"} <= tables


class TestArticleCrud:
    def test_create_assigns_identity(self, store, make_draft):
        article = store.create(make_draft(tags=["科技", "人工智能"], difficulty=Difficulty.HARD))

        assert len(article.id) == 32
        assert article.created_at is not None
        assert article.updated_at is not None
        assert article.tags == ["科技", "人工智能"]
        assert article.difficulty == Difficulty.HARD
        assert article.hot_score == 0.0
        assert article.is_published

    def test_create_stores_publish_date_as_utc(self, store, make_draft):
        published = datetime(2024, 1, 1, 18, 0, tzinfo=timezone(timedelta(hours=8)))
        article = store.create(make_draft(publish_date=published))
        assert article.publish_date == datetime(2024, 1, 1, 10, 0)

    def test_get(self, store, make_draft):
        article = store.create(make_draft())
        assert store.get(article.id) == article
        assert store.get("missing") is None

    def test_find_all_newest_first(self, store, make_draft):
        first = store.create(make_draft())
        second = store.create(make_draft())
        assert [a.id for a in store.find_all()] == [second.id, first.id]

    def test_find_by_url_or_title(self, store, make_draft):
        article = store.create(make_draft(title="标题", source_url="https://example.com/a"))

        assert store.find_by_url_or_title("https://example.com/a", "其他").id == article.id
        assert store.find_by_url_or_title("https://example.com/b", "标题").id == article.id
        assert store.find_by_url_or_title("https://example.com/b", "其他") is None

    def test_find_by_difficulty(self, store, make_draft):
        store.create(make_draft(difficulty=Difficulty.EASY))
        hard = store.create(make_draft(difficulty=Difficulty.HARD))
        assert [a.id for a in store.find_by_difficulty(Difficulty.HARD)] == [hard.id]

    def test_search_title_content_and_tags(self, store, make_draft):
        by_title = store.create(make_draft(title="量子计算突破"))
        by_content = store.create(make_draft(content="研究人员展示了量子芯片。"))
        by_tag = store.create(make_draft(tags=["量子科技"]))
        store.create(make_draft())

        found = {a.id for a in store.search("量子")}
        assert found == {by_title.id, by_content.id, by_tag.id}

    def test_search_escapes_wildcards(self, store, make_draft):
        store.create(make_draft(title="百分之百"))
        assert store.search("%") == []

    def test_update_only_given_fields(self, store, make_draft):
        article = store.create(make_draft(title="旧标题", tags=["科技"]))

        updated = store.update(article.id, ArticlePatch(title="新标题", tags=["科技", "游戏"]))

        assert updated.title == "新标题"
        assert updated.tags == ["科技", "游戏"]
        assert updated.content == article.content
        assert updated.difficulty == article.difficulty
        assert updated.updated_at >= article.updated_at
        assert store.get(article.id).title == "新标题"

    def test_update_unknown_id(self, store):
        assert store.update("missing", ArticlePatch(title="x")) is None

    def test_delete_is_idempotent(self, store, make_draft):
        article = store.create(make_draft())
        assert store.delete(article.id) is True
        assert store.delete(article.id) is False
        assert store.get(article.id) is None

    def test_delete_published_before(self, store, make_draft):
        old = store.create(make_draft(publish_date=datetime(2023, 1, 1, tzinfo=timezone.utc)))
        recent = store.create(make_draft(publish_date=datetime(2024, 6, 1, tzinfo=timezone.utc)))

        deleted = store.delete_published_before(datetime(2024, 1, 1, tzinfo=timezone.utc))

        assert deleted == 1
        assert store.get(old.id) is None
        assert store.get(recent.id) is not None


class TestPaginate:
    def test_pagination_metadata(self, store, make_draft):
        for _ in range(25):
            store.create(make_draft())

        first = store.paginate(ArticleQuery(page=1, limit=10))
        last = store.paginate(ArticleQuery(page=3, limit=10))

        assert (first.total, first.total_pages, first.has_next, first.has_prev) == (25, 3, True, False)
        assert len(first.items) == 10
        assert len(last.items) == 5
        assert (last.has_next, last.has_prev) == (False, True)

    def test_default_query(self, store, make_draft):
        store.create(make_draft())
        page = store.paginate()
        assert page.page == 1
        assert page.limit == 12
        assert page.total == 1

    def test_unpublished_hidden_by_default(self, store, make_draft):
        store.create(make_draft())
        store.create(make_draft(is_published=False))

        assert store.paginate(ArticleQuery()).total == 1
        assert store.paginate(ArticleQuery(published_only=False)).total == 2

    def test_sort_by_difficulty(self, store, make_draft):
        for level in (Difficulty.HARD, Difficulty.EASY, Difficulty.MEDIUM):
            store.create(make_draft(difficulty=level))

        page = store.paginate(ArticleQuery(sort_by="difficulty", sort_order="asc"))
        assert [a.difficulty for a in page.items] == [
            Difficulty.EASY,
            Difficulty.MEDIUM,
            Difficulty.HARD,
        ]

    def test_sort_by_reading_time_desc(self, store, make_draft):
        for minutes in (3, 9, 1):
            store.create(make_draft(reading_time=minutes))

        page = store.paginate(ArticleQuery(sort_by="reading_time"))
        assert [a.reading_time for a in page.items] == [9, 3, 1]

    def test_difficulty_and_source_filters(self, store, make_draft):
        store.create(make_draft(difficulty=Difficulty.EASY, source="极客公园"))
        match = store.create(make_draft(difficulty=Difficulty.MEDIUM, source="极客公园"))
        store.create(make_draft(difficulty=Difficulty.MEDIUM, source="示例数据"))

        page = store.paginate(ArticleQuery(difficulty=Difficulty.MEDIUM, source="极客"))
        assert [a.id for a in page.items] == [match.id]

    def test_search_and_tags_widen_results(self, store, make_draft):
        by_title = store.create(make_draft(title="苹果新品"))
        by_tag = store.create(make_draft(tags=["游戏"]))
        store.create(make_draft(tags=["教育"]))

        page = store.paginate(ArticleQuery(search_term="苹果", tags=["游戏"]))
        assert {a.id for a in page.items} == {by_title.id, by_tag.id}

    def test_date_range(self, store, make_draft):
        store.create(make_draft(publish_date=datetime(2024, 1, 1, tzinfo=timezone.utc)))
        inside = store.create(make_draft(publish_date=datetime(2024, 2, 15, tzinfo=timezone.utc)))
        store.create(make_draft(publish_date=datetime(2024, 4, 1, tzinfo=timezone.utc)))

        page = store.paginate(
            ArticleQuery(
                date_from=datetime(2024, 2, 1, tzinfo=timezone.utc),
                date_to=datetime(2024, 3, 1, tzinfo=timezone.utc),
            )
        )
        assert [a.id for a in page.items] == [inside.id]


@pytest.mark.parametrize(
    "total,page,limit,expected",
    [
        (0, 1, 12, (0, False, False)),
        (12, 1, 12, (1, False, False)),
        (13, 1, 12, (2, True, False)),
        (30, 2, 10, (3, True, True)),
    ],
)
def test_calculate_pagination(total, page, limit, expected):
    result = calculate_pagination(total, page, limit)
    assert (result["total_pages"], result["has_next"], result["has_prev"]) == expected


class TestStatistics:
    def test_empty_store(self, store):
        stats = store.statistics()
        assert stats.total_articles == 0
        assert stats.articles_by_difficulty == {"easy": 0, "medium": 0, "hard": 0}
        assert stats.average_reading_time == 0.0
        assert stats.total_reading_time == 0
        assert stats.popular_tags == []

    def test_aggregates(self, store, make_draft):
        store.create(make_draft(difficulty=Difficulty.EASY, reading_time=2, tags=["科技", "游戏"]))
        store.create(make_draft(difficulty=Difficulty.EASY, reading_time=4, tags=["科技"]))
        store.create(make_draft(difficulty=Difficulty.HARD, reading_time=6, tags=["科技", "游戏", "硬件"]))

        stats = store.statistics()

        assert stats.total_articles == 3
        assert stats.articles_by_difficulty == {"easy": 2, "medium": 0, "hard": 1}
        assert stats.average_reading_time == pytest.approx(4.0)
        assert stats.total_reading_time == 12
        assert [(t.tag, t.count) for t in stats.popular_tags] == [("科技", 3), ("游戏", 2), ("硬件", 1)]

    def test_popular_tags_top_ten(self, store, make_draft):
        store.create(make_draft(tags=[f"标签{i}" for i in range(15)]))
        assert len(store.statistics().popular_tags) == 10


class TestSettings:
    def test_save_and_get(self, store):
        assert store.get_setting("sync_enabled") is None
        assert store.get_setting("sync_enabled", "false") == "false"

        store.save_setting("sync_enabled", "true")
        store.save_setting("sync_enabled", "false")

        assert store.get_setting("sync_enabled") == "false"


class TestScheduleLogs:
    def test_log_and_list(self, store):
        store.log_schedule_task("rss_sync", "success", "3 new articles", new_articles=3, duration_ms=120)
        store.log_schedule_task("cleanup", "error", "boom")

        logs = store.schedule_logs()

        assert [entry.task_type for entry in logs] == ["cleanup", "rss_sync"]
        assert logs[1].new_articles == 3
        assert logs[1].duration_ms == 120
        assert logs[0].status == "error"

    def test_limit(self, store):
        for _ in range(5):
            store.log_schedule_task("hot_scores", "success")
        assert len(store.schedule_logs(limit=2)) == 2


class TestBookmarks:
    def test_add_list_remove(self, store, make_draft):
        article = store.create(make_draft())

        assert store.add_bookmark("reader-1", article.id) is True
        assert store.add_bookmark("reader-1", article.id) is True
        assert [a.id for a in store.bookmarks("reader-1")] == [article.id]
        assert store.bookmarks("reader-2") == []

        assert store.remove_bookmark("reader-1", article.id) is True
        assert store.remove_bookmark("reader-1", article.id) is False
        assert store.bookmarks("reader-1") == []

    def test_unknown_article(self, store):
        assert store.add_bookmark("reader-1", "missing") is False

    def test_deleted_with_article(self, store, make_draft):
        article = store.create(make_draft())
        store.add_bookmark("reader-1", article.id)

        store.delete(article.id)

        assert store.bookmarks("reader-1") == []


class TestSeedSampleArticles:
    def test_seeds_empty_store(self, store):
        assert store.seed_sample_articles(6) == 6

        articles = store.find_all()
        assert len(articles) == 6
        assert articles[0].title == "科技与社会观察 1"
        assert articles[0].difficulty == Difficulty.MEDIUM
        assert articles[1].difficulty == Difficulty.HARD
        assert articles[2].difficulty == Difficulty.EASY
        assert articles[2].tags == ["教育", "中文"]
        assert articles[0].source == "示例数据"
        assert articles[0].source_url == "https://example.com/sample-1"

    def test_reading_time_follows_script_characters(self, store):
        store.seed_sample_articles(3)

        for article in store.find_all():
            assert article.word_count == count_script_characters(article.content)
            assert article.reading_time == reading_time_minutes(article.word_count)

    def test_skips_when_not_empty(self, store, make_draft):
        store.create(make_draft())
        assert store.seed_sample_articles() == 0
        assert len(store.find_all()) == 1


def test_database_errors_become_storage_errors():
    session = MagicMock()
    session.get.side_effect = OperationalError("SELECT 1", {}, Exception("disk I/O error"))
    store = ArticleStore(MagicMock(return_value=session))

    with pytest.raises(StorageError):
        store.get("any")
    session.rollback.assert_called_once()
    session.close.assert_called_once()
