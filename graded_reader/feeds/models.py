"""Feed item model."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class FeedItem(BaseModel):
    """One entry of the ingested RSS feed."""

    title: str
    description: str = ""
    content: Optional[str] = None
    link: str
    pub_date: Optional[datetime] = Field(None, description="Publish date reported by the feed")
    guid: str = ""

    @property
    def body(self) -> str:
        """Full text when the feed provides it, otherwise the description."""
        return self.content or self.description
