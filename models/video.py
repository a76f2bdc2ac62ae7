"""
Search result models.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

VIDEO_KIND = "youtube#video"


class SearchResultId(BaseModel):
    """The ``id`` object of a search.list item."""

    kind: str = ""
    video_id: Optional[str] = Field(None, alias="videoId")


class SearchResultSnippet(BaseModel):
    """The fields of a search.list ``snippet`` used for announcements."""

    title: str = ""
    channel_title: str = Field("", alias="channelTitle")
    published_at: Optional[datetime] = Field(None, alias="publishedAt")


class SearchResultItem(BaseModel):
    """Shape of one search.list response item."""

    id: SearchResultId = Field(default_factory=SearchResultId)
    snippet: SearchResultSnippet = Field(default_factory=SearchResultSnippet)


class VideoCandidate(BaseModel):
    """One item returned by a channel search; not necessarily a video."""

    kind: str = Field(..., description="Resource kind, e.g. youtube#video")
    video_id: Optional[str] = Field(None, description="YouTube video ID when kind is a video")
    title: str = ""
    channel_title: str = ""
    published_at: Optional[datetime] = None

    @property
    def is_video(self) -> bool:
        """Whether this candidate is an announceable video."""
        return self.kind == VIDEO_KIND and bool(self.video_id)

    @property
    def watch_url(self) -> str:
        """Get short YouTube watch URL."""
        return f"https://youtu.be/{self.video_id}"

    @classmethod
    def from_search_item(cls, item: Dict[str, Any]) -> "VideoCandidate":
        """
        Build a candidate from a search.list response item.

        Raises:
            ValidationError: If the item does not have the search result shape
        """
        parsed = SearchResultItem.model_validate(item)

        return cls(
            kind=parsed.id.kind,
            video_id=parsed.id.video_id,
            title=parsed.snippet.title,
            channel_title=parsed.snippet.channel_title,
            published_at=parsed.snippet.published_at,
        )
