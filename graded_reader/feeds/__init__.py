"""Feed sources for article ingestion."""

from graded_reader.config import Settings

from .models import FeedItem
from .rss import FeedSource, RSSFeedClient, sort_newest_first
from .sample import SampleFeedSource


def build_feed_source(settings: Settings) -> FeedSource:
    """Return the sample feed in "sample" mode, otherwise the live RSS client."""
    if settings.feed_mode == "sample":
        return SampleFeedSource()
    return RSSFeedClient(
        settings.feed_url,
        timeout=settings.request_timeout,
        user_agent=settings.user_agent,
    )


__all__ = [
    "FeedItem",
    "FeedSource",
    "RSSFeedClient",
    "SampleFeedSource",
    "build_feed_source",
    "sort_newest_first",
]
