"""Scheduled maintenance jobs and the periodic sync loop."""

import asyncio
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

import structlog

from graded_reader.content_analysis import DIFFICULTY_ORDER
from graded_reader.metrics import metrics
from graded_reader.pipeline import IngestionPipeline
from graded_reader.storage import Article, ArticlePatch, ArticleStore

logger = structlog.get_logger(__name__)

HOT_SCORE_HALF_LIFE_HOURS = 48.0
MAX_READING_BONUS = 10

# Cron expressions for the periodic tasks, minute hour day month weekday
CRON_SCHEDULES: Dict[str, str] = {
    "hourly": "0 * * * *",
    "daily": "0 9 * * *",
    "weekly": "0 10 * * 1",
    "monthly": "0 2 1 * *",
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def compute_hot_score(article: Article, now: datetime) -> float:
    """Score an article by publish-date recency plus a small reading-time bonus.

    Recency halves every 48 hours from 100 for a just-published article.
    Each minute of reading time adds one point, up to ten.
    """
    age_hours = max(0.0, (_naive_utc(now) - _naive_utc(article.publish_date)).total_seconds() / 3600)
    recency = 100 * 0.5 ** (age_hours / HOT_SCORE_HALF_LIFE_HOURS)
    return round(recency + min(article.reading_time, MAX_READING_BONUS), 2)


class ScheduledJobs:
    """The periodic tasks: feed sync, hot scores, weekly report and cleanup.

    Each job returns a small result dict and records a schedule log row,
    with status "error" and the message when it raises.
    """

    def __init__(
        self,
        store: ArticleStore,
        pipeline: Optional[IngestionPipeline] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.pipeline = pipeline
        self.clock = clock or _utc_now
        self.jobs_total = metrics.get_metric("scheduled_jobs_total")

    def _run(self, task_type: str, job: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
        start_time = time.time()
        logger.info("scheduled_task_started", task=task_type)
        try:
            result = job()
        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)
            logger.error("scheduled_task_failed", task=task_type, error=str(e))
            self.jobs_total.labels(task=task_type, status="error").inc()
            try:
                self.store.log_schedule_task(
                    task_type, "error", message=str(e), duration_ms=duration_ms
                )
            except Exception as log_error:
                logger.error("schedule_log_failed", task=task_type, error=str(log_error))
            raise e

        duration_ms = int((time.time() - start_time) * 1000)
        result["duration_ms"] = duration_ms
        self.jobs_total.labels(task=task_type, status="success").inc()
        self.store.log_schedule_task(
            task_type,
            "success",
            message=result.pop("message", None),
            new_articles=result.get("new_articles", 0),
            duration_ms=duration_ms,
        )
        logger.info("scheduled_task_completed", task=task_type, duration_ms=duration_ms)
        return result

    def run_rss_sync(self) -> Dict[str, Any]:
        """Run the ingestion pipeline and log the store statistics afterwards."""
        if self.pipeline is None:
            raise RuntimeError("RSS sync needs an ingestion pipeline")

        def job():
            outcome = self.pipeline.process_feed()
            stats = self.store.statistics()
            logger.info(
                "store_statistics",
                total=stats.total_articles,
                **stats.articles_by_difficulty,
            )
            return {
                "new_articles": outcome.count,
                "skipped": outcome.skipped,
                "errors": outcome.errors,
                "message": f"{outcome.count} new articles",
            }

        return self._run("rss_sync", job)

    def refresh_hot_scores(self) -> Dict[str, Any]:
        """Recompute hot_score for every stored article."""

        def job():
            now = self.clock()
            articles = self.store.find_all()
            for article in articles:
                self.store.update(article.id, ArticlePatch(hot_score=compute_hot_score(article, now)))
            return {
                "updated_articles": len(articles),
                "message": f"hot scores updated for {len(articles)} articles",
            }

        return self._run("hot_scores", job)

    def build_weekly_report(self) -> Dict[str, Any]:
        """Summarize articles published in the last seven days."""

        def job():
            end = self.clock()
            start = end - timedelta(days=7)
            recent = [
                article
                for article in self.store.find_all()
                if _naive_utc(article.publish_date) >= _naive_utc(start)
            ]
            by_difficulty = {level.value: 0 for level in DIFFICULTY_ORDER}
            for article in recent:
                by_difficulty[article.difficulty.value] += 1
            report = {
                "period": "weekly",
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "total_articles": len(recent),
                "articles_by_difficulty": by_difficulty,
                "overall_stats": self.store.statistics().model_dump(),
            }
            logger.info("weekly_report", total=len(recent), **by_difficulty)
            return {"report": report, "message": f"{len(recent)} articles this week"}

        return self._run("weekly_report", job)

    def cleanup_old_articles(self, days_to_keep: int = 30) -> Dict[str, Any]:
        """Delete articles published more than days_to_keep days ago."""

        def job():
            cutoff = self.clock() - timedelta(days=days_to_keep)
            deleted = self.store.delete_published_before(cutoff)
            return {
                "deleted_count": deleted,
                "message": f"{deleted} articles older than {days_to_keep} days deleted",
            }

        return self._run("cleanup", job)

    def run_cron(self, period: str, days_to_keep: int = 30) -> Dict[str, Any]:
        """Run the job bound to an hourly, daily, weekly or monthly trigger."""
        if period not in CRON_SCHEDULES:
            raise ValueError(f"Unknown cron period: {period}")
        if period == "hourly":
            return self.refresh_hot_scores()
        if period == "daily":
            return self.run_rss_sync()
        if period == "weekly":
            return self.build_weekly_report()
        return self.cleanup_old_articles(days_to_keep)

    @staticmethod
    def due_periods(now: Optional[datetime] = None) -> List[str]:
        """Periods whose cron expression matches now, in CRON_SCHEDULES order."""
        return [
            period
            for period, expression in CRON_SCHEDULES.items()
            if SimpleCron.should_run(expression, now)
        ]


@dataclass(frozen=True)
class CronExpression:
    """Parsed five-field cron expression; None fields match anything."""

    minute: Optional[int]
    hour: Optional[int]
    day: Optional[int]
    month: Optional[int]
    weekday: Optional[int]


class SimpleCron:
    """Minimal cron matching with numeric fields or ``*`` wildcards."""

    @staticmethod
    def parse(expression: str) -> Optional[CronExpression]:
        """Parse "m h dom mon dow"; None when the expression is malformed."""
        parts = expression.split()
        if len(parts) != 5:
            return None
        try:
            fields = [None if part == "*" else int(part) for part in parts]
        except ValueError:
            return None
        return CronExpression(*fields)

    @classmethod
    def should_run(cls, expression: str, now: Optional[datetime] = None) -> bool:
        """Check whether now matches the expression. Weekday 0 is Sunday."""
        cron = cls.parse(expression)
        if cron is None:
            return False
        now = now or datetime.now()
        weekday = (now.weekday() + 1) % 7
        checks = (
            (cron.minute, now.minute),
            (cron.hour, now.hour),
            (cron.day, now.day),
            (cron.month, now.month),
            (cron.weekday, weekday),
        )
        return all(expected is None or expected == actual for expected, actual in checks)

    @classmethod
    def next_run_time(cls, expression: str, start: Optional[datetime] = None) -> Optional[datetime]:
        """Next daily run for expressions with a fixed hour and minute.

        Returns None for any other shape of expression.
        """
        cron = cls.parse(expression)
        if cron is None or cron.hour is None or cron.minute is None:
            return None
        start = start or datetime.now()
        candidate = start.replace(hour=cron.hour, minute=cron.minute, second=0, microsecond=0)
        if candidate <= start:
            candidate += timedelta(days=1)
        return candidate


class ScheduleService:
    """Runs the feed sync immediately and then every interval seconds."""

    def __init__(self, jobs: ScheduledJobs, interval: float = 3600.0):
        """Initialize the service.

        Args:
            jobs: Scheduled jobs with an ingestion pipeline configured
            interval: Seconds between sync runs
        """
        self.jobs = jobs
        self.interval = interval
        self.running = False
        self.started_at: Optional[float] = None
        self.last_run: Optional[datetime] = None
        self._stop_event: Optional[asyncio.Event] = None

        self.service_running = metrics.register_gauge(
            "schedule_service_running", "Whether the schedule service loop is running"
        )

    async def start(self):
        """Run the sync loop until stop() is called."""
        if self.running:
            logger.warning("schedule_service_already_running")
            return

        self.running = True
        self.started_at = time.time()
        self._stop_event = asyncio.Event()
        self.service_running.set(1)
        logger.info("schedule_service_started", interval=self.interval)

        try:
            while self.running:
                await self._execute_sync()
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
                except asyncio.TimeoutError:
                    pass
        finally:
            self.running = False
            self.started_at = None
            self.service_running.set(0)
            logger.info("schedule_service_stopped")

    def stop(self):
        """Ask the loop to finish after the current run."""
        if not self.running:
            logger.warning("schedule_service_not_running")
            return
        self.running = False
        if self._stop_event is not None:
            self._stop_event.set()

    async def _execute_sync(self):
        self.last_run = datetime.now(timezone.utc)
        try:
            await asyncio.to_thread(self.jobs.run_rss_sync)
        except Exception as e:
            logger.error("scheduled_sync_failed", error=str(e))

    def status(self) -> Dict[str, Any]:
        """Whether the loop runs, its uptime and the approximate next run."""
        next_run = None
        uptime = None
        if self.running and self.started_at is not None:
            uptime = round(time.time() - self.started_at, 3)
            base = self.last_run or datetime.now(timezone.utc)
            next_run = (base + timedelta(seconds=self.interval)).isoformat()
        return {
            "is_running": self.running,
            "interval": self.interval,
            "next_run": next_run,
            "uptime": uptime,
        }

    def trigger_sync(self) -> Dict[str, Any]:
        """Run one sync now and report the outcome instead of raising."""
        logger.info("manual_sync_triggered")
        try:
            result = self.jobs.run_rss_sync()
        except Exception as e:
            return {"success": False, "count": 0, "error": str(e)}
        return {"success": True, "count": result["new_articles"], "error": None}
