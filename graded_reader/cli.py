"""Command line interface for the graded reader."""

import asyncio
import dataclasses
import json
import sys
from datetime import datetime
from functools import wraps

import click
import structlog

from graded_reader.config import Settings
from graded_reader.content_analysis import DIFFICULTY_INFO, Difficulty
from graded_reader.core.errors import BaseError, ValidationError
from graded_reader.feeds import build_feed_source
from graded_reader.logging_config import configure_logging
from graded_reader.metrics import start_metrics_server
from graded_reader.pipeline import IngestionPipeline
from graded_reader.scheduler import CRON_SCHEDULES, ScheduledJobs, ScheduleService
from graded_reader.storage import ArticleQuery, ArticleStore, create_session_factory
from graded_reader.translation import build_translator

logger = structlog.get_logger(__name__)


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def build_store(settings: Settings) -> ArticleStore:
    return ArticleStore(create_session_factory(settings.database_url))


def build_jobs(settings: Settings, store: ArticleStore) -> ScheduledJobs:
    """Wire the feed, translator and store into the scheduled jobs."""
    pipeline = IngestionPipeline(
        feed=build_feed_source(settings),
        translator=build_translator(settings),
        store=store,
        limit=settings.feed_limit,
        source_name=settings.source_name,
    )
    return ScheduledJobs(store, pipeline)


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


@click.group()
@click.option("--database-url", help="SQLAlchemy database URL")
@click.option(
    "--feed-mode",
    type=click.Choice(["live", "sample"]),
    help="Read the live RSS feed or the built-in sample items",
)
@click.option("--log-level", help="Minimum log level")
@click.option("--json-logs", is_flag=True, help="Render logs as JSON lines")
@click.pass_context
def cli(ctx, database_url, feed_mode, log_level, json_logs):
    """Graded Chinese reading content backend."""
    overrides = {
        "database_url": database_url,
        "feed_mode": feed_mode,
        "log_level": log_level,
        "log_json": json_logs or None,
    }
    try:
        settings = dataclasses.replace(
            Settings.from_env(),
            **{key: value for key, value in overrides.items() if value is not None},
        )
    except ValidationError as e:
        raise click.UsageError(e.message)
    configure_logging(settings.log_level, json=settings.log_json)
    ctx.obj = settings


@cli.command("init-db")
@click.pass_obj
def init_db(settings: Settings):
    """Create the database tables."""
    create_session_factory(settings.database_url)
    click.echo(f"Database ready at {settings.database_url}")


@cli.command()
@click.option("--count", default=12, show_default=True, help="Number of sample articles")
@click.pass_obj
def seed(settings: Settings, count: int):
    """Insert sample articles into an empty database."""
    created = build_store(settings).seed_sample_articles(count)
    if created:
        click.echo(f"Created {created} sample articles")
    else:
        click.echo("Articles already exist, nothing seeded")


@cli.command()
@click.option(
    "--limit", type=click.IntRange(min=1), help="Number of newest feed items to consider"
)
@click.pass_obj
def sync(settings: Settings, limit):
    """Ingest the newest feed items."""
    if limit is not None:
        settings = dataclasses.replace(settings, feed_limit=limit)
    store = build_store(settings)
    jobs = build_jobs(settings, store)
    try:
        result = jobs.run_rss_sync()
    except BaseError as e:
        click.echo(f"Sync failed: {e.message}", err=True)
        sys.exit(1)

    click.echo(
        f"Created {result['new_articles']} articles, skipped {result['skipped']} existing"
    )
    for error in result["errors"]:
        click.echo(f"- {error}", err=True)


@cli.command()
@click.argument("period", type=click.Choice([*CRON_SCHEDULES, "due"]))
@click.option("--days-to-keep", type=int, help="Retention for the monthly cleanup")
@click.pass_obj
def cron(settings: Settings, period: str, days_to_keep):
    """Run one scheduled task: hot scores, sync, weekly report or cleanup.

    "due" runs every task whose schedule matches the current minute, for
    use from a system crontab that fires every minute.
    """
    store = build_store(settings)
    jobs = build_jobs(settings, store)
    days_to_keep = days_to_keep or settings.cleanup_days
    try:
        if period == "due":
            result = {
                due: jobs.run_cron(due, days_to_keep) for due in jobs.due_periods(datetime.now())
            }
        else:
            result = jobs.run_cron(period, days_to_keep)
    except BaseError as e:
        click.echo(f"{period.capitalize()} cron failed: {e.message}", err=True)
        sys.exit(1)
    _echo_json(result)


@cli.command()
@click.option("--interval", type=float, help="Seconds between syncs")
@click.option("--once", is_flag=True, help="Trigger a single sync and print the outcome")
@click.pass_obj
@async_command
async def schedule(settings: Settings, interval, once: bool):
    """Run the periodic feed sync until interrupted."""
    store = build_store(settings)
    service = ScheduleService(
        build_jobs(settings, store), interval=interval or settings.sync_interval
    )

    if once:
        outcome = service.trigger_sync()
        _echo_json(outcome)
        if not outcome["success"]:
            sys.exit(1)
        return

    if settings.metrics_port:
        start_metrics_server(settings.metrics_port)
        logger.info("metrics_server_started", port=settings.metrics_port)

    try:
        await service.start()
    except (KeyboardInterrupt, asyncio.CancelledError):
        service.stop()


@cli.command()
@click.option("--limit", default=20, show_default=True, help="Number of entries")
@click.pass_obj
def logs(settings: Settings, limit: int):
    """Show recent scheduled task executions."""
    for entry in build_store(settings).schedule_logs(limit):
        click.echo(
            f"{entry.created_at:%Y-%m-%d %H:%M:%S}  {entry.task_type:<14} {entry.status:<8} "
            f"{entry.duration_ms or 0:>6}ms  {entry.message or ''}"
        )


@cli.command()
@click.option("--format", "output", type=click.Choice(["text", "json"]), default="text")
@click.pass_obj
def stats(settings: Settings, output: str):
    """Show article statistics."""
    statistics = build_store(settings).statistics()
    if output == "json":
        _echo_json(statistics.model_dump())
        return

    click.echo(f"Total articles: {statistics.total_articles}")
    for level, count in statistics.articles_by_difficulty.items():
        name = DIFFICULTY_INFO[Difficulty(level)].name
        click.echo(f"  {name} ({level}): {count}")
    click.echo(f"Average reading time: {statistics.average_reading_time:.1f} min")
    click.echo(f"Total reading time: {statistics.total_reading_time} min")
    if statistics.popular_tags:
        tags = ", ".join(f"{tag.tag} ({tag.count})" for tag in statistics.popular_tags)
        click.echo(f"Popular tags: {tags}")


@cli.command()
@click.option("--page", default=1, show_default=True)
@click.option("--limit", default=12, show_default=True)
@click.option(
    "--sort-by",
    type=click.Choice(["publish_date", "difficulty", "reading_time", "hot_score"]),
    default="publish_date",
    show_default=True,
)
@click.option("--order", type=click.Choice(["asc", "desc"]), default="desc", show_default=True)
@click.option("--difficulty", type=click.Choice([level.value for level in Difficulty]))
@click.option("--tag", "tags", multiple=True, help="Tag filter, may be repeated")
@click.option("--search", help="Search title and content")
@click.option("--source", help="Source name contains")
@click.option("--all", "include_unpublished", is_flag=True, help="Include unpublished articles")
@click.option("--format", "output", type=click.Choice(["text", "json"]), default="text")
@click.pass_obj
def articles(
    settings: Settings,
    page,
    limit,
    sort_by,
    order,
    difficulty,
    tags,
    search,
    source,
    include_unpublished,
    output,
):
    """List articles page by page."""
    query = ArticleQuery(
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=order,
        difficulty=difficulty,
        tags=list(tags),
        search_term=search,
        source=source,
        published_only=not include_unpublished,
    )
    result = build_store(settings).paginate(query)
    if output == "json":
        _echo_json(result.model_dump())
        return

    for article in result.items:
        click.echo(
            f"[{article.difficulty.value:<6}] {article.title}  "
            f"({article.reading_time} min, {article.publish_date:%Y-%m-%d})"
        )
    click.echo(
        f"Page {result.page}/{result.total_pages}, {result.total} articles"
        + (", more available" if result.has_next else "")
    )


@cli.group()
def bookmarks():
    """Manage a reader's bookmarks."""


@bookmarks.command("add")
@click.argument("reader_id")
@click.argument("article_id")
@click.pass_obj
def bookmark_add(settings: Settings, reader_id: str, article_id: str):
    """Bookmark an article."""
    if not build_store(settings).add_bookmark(reader_id, article_id):
        click.echo(f"Article {article_id} not found", err=True)
        sys.exit(1)
    click.echo("Bookmarked")


@bookmarks.command("remove")
@click.argument("reader_id")
@click.argument("article_id")
@click.pass_obj
def bookmark_remove(settings: Settings, reader_id: str, article_id: str):
    """Remove a bookmark."""
    if build_store(settings).remove_bookmark(reader_id, article_id):
        click.echo("Removed")
    else:
        click.echo("No such bookmark")


@bookmarks.command("list")
@click.argument("reader_id")
@click.pass_obj
def bookmark_list(settings: Settings, reader_id: str):
    """List a reader's bookmarked articles."""
    for article in build_store(settings).bookmarks(reader_id):
        click.echo(f"{article.id}  [{article.difficulty.value}] {article.title}")


def main():
    cli(prog_name="graded-reader")


if __name__ == "__main__":
    main()
