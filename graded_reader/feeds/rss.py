"""RSS feed client."""

import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, List, Optional

import feedparser
import requests
import structlog

from graded_reader.core.errors import FeedFetchError
from graded_reader.metrics import metrics
from graded_reader.text_metrics import clean_content, clean_text

from .models import FeedItem

logger = structlog.get_logger(__name__)

# Minimum length for a field to be taken as the article body
MIN_CONTENT_LENGTH = 50


def sort_newest_first(items: List[FeedItem]) -> List[FeedItem]:
    """Order items by publish date, newest first; undated items go last."""
    oldest = datetime.min.replace(tzinfo=timezone.utc)

    def key(item: FeedItem) -> datetime:
        if item.pub_date is None:
            return oldest
        if item.pub_date.tzinfo is None:
            return item.pub_date.replace(tzinfo=timezone.utc)
        return item.pub_date

    return sorted(items, key=key, reverse=True)


class FeedSource(ABC):
    """Anything that can supply the latest feed items."""

    @abstractmethod
    def fetch_items(self) -> List[FeedItem]:
        """Return every item currently in the feed."""
        raise NotImplementedError

    def fetch_latest_items(self, limit: int = 10) -> List[FeedItem]:
        """Return at most limit items, newest first.

        Raises:
            FeedFetchError: If the feed cannot be retrieved
        """
        return sort_newest_first(self.fetch_items())[:limit]

    def search_items(self, keyword: str) -> List[FeedItem]:
        """Return items whose title, description or content contains keyword."""
        needle = keyword.lower()
        return [
            item
            for item in self.fetch_items()
            if needle in item.title.lower()
            or needle in item.description.lower()
            or needle in (item.content or "").lower()
        ]


class RSSFeedClient(FeedSource):
    """Downloads and parses an RSS 2.0 feed."""

    def __init__(
        self,
        url: str,
        timeout: float = 15.0,
        user_agent: str = "Chinese Level Reader Bot 1.0",
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            url: Feed URL
            timeout: Request timeout in seconds
            user_agent: User-Agent header sent with the request
            session: Optional requests session, mainly for tests
        """
        self.url = url
        self.timeout = timeout
        self.user_agent = user_agent
        self.session = session or requests.Session()
        self.fetch_counter = metrics.get_metric("feed_fetch_total")

    def _download(self) -> bytes:
        try:
            response = self.session.get(
                self.url, headers={"User-Agent": self.user_agent}, timeout=self.timeout
            )
            response.raise_for_status()
            return response.content
        except requests.exceptions.RequestException as e:
            self.fetch_counter.labels(status="error").inc()
            logger.error("feed_download_failed", url=self.url, error=str(e))
            raise FeedFetchError(f"RSS fetch failed: {e}", details={"url": self.url}) from e

    def fetch_items(self) -> List[FeedItem]:
        """Download the feed and convert every entry.

        Raises:
            FeedFetchError: On HTTP errors or an unparseable document
        """
        start_time = time.time()
        parsed = self.parse(self._download())
        items = [self._to_item(entry) for entry in parsed.entries]
        self.fetch_counter.labels(status="success").inc()
        logger.info(
            "feed_fetched",
            url=self.url,
            items=len(items),
            duration=round(time.time() - start_time, 3),
        )
        return items

    def parse(self, document: bytes) -> Any:
        """Parse a feed document with feedparser."""
        parsed = feedparser.parse(document)
        if parsed.bozo and not parsed.entries:
            self.fetch_counter.labels(status="error").inc()
            raise FeedFetchError(
                f"Failed to parse RSS XML: {parsed.get('bozo_exception')}",
                details={"url": self.url},
            )
        return parsed

    def _to_item(self, entry: Any) -> FeedItem:
        link = entry.get("link", "")
        return FeedItem(
            title=clean_text(entry.get("title", "")),
            description=clean_text(entry.get("description", "")),
            content=self._extract_content(entry),
            link=link,
            pub_date=self._parse_date(entry),
            guid=entry.get("id") or link,
        )

    def _extract_content(self, entry: Any) -> str:
        candidates = [block.get("value") for block in entry.get("content", [])]
        candidates.extend([entry.get("description"), entry.get("summary")])
        for candidate in candidates:
            if isinstance(candidate, str) and len(candidate) > MIN_CONTENT_LENGTH:
                return clean_content(candidate)
        return clean_text(entry.get("title", ""))

    @staticmethod
    def _parse_date(entry: Any) -> Optional[datetime]:
        parsed = entry.get("published_parsed") or entry.get("updated_parsed")
        if not parsed:
            return None
        return datetime(*parsed[:6], tzinfo=timezone.utc)
