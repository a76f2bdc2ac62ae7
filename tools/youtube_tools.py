"""
YouTube Data API v3 search client.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from models.video import VideoCandidate
from utils.time_utils import to_rfc3339

# Setup logging
logger = logging.getLogger(__name__)

YOUTUBE_API_BASE_URL = "https://www.googleapis.com/youtube/v3"


# Custom exceptions
class YouTubeAPIError(Exception):
    """Base YouTube API error."""
    pass

class YouTubeQuotaExceededError(YouTubeAPIError):
    """YouTube API quota exceeded."""
    pass

class YouTubeRateLimitError(YouTubeAPIError):
    """YouTube API rate limit exceeded."""
    pass

class YouTubeChannelNotFoundError(YouTubeAPIError):
    """YouTube channel not found."""
    pass


class YouTubeSearchClient:
    """Async YouTube Data API v3 client for channel upload searches."""

    def __init__(
        self,
        api_key: str,
        base_url: str = YOUTUBE_API_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport
        self.request_count = 0
        # search.list costs 100 units per call regardless of page size
        self.quota_used = 0

    async def _make_request(
        self,
        endpoint: str,
        params: Dict[str, Any],
        quota_cost: int = 1
    ) -> Dict[str, Any]:
        """Make authenticated request to YouTube API."""

        # Add API key to params
        params = {**params, "key": self.api_key}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}/{endpoint}", params=params)
            except httpx.RequestError as e:
                logger.error(f"HTTP request failed: {e}")
                raise YouTubeAPIError(f"Request failed: {e}") from e

        self.request_count += 1

        # Handle different HTTP status codes
        if response.status_code == 200:
            self.quota_used += quota_cost
            try:
                return response.json()
            except ValueError as e:
                raise YouTubeAPIError(f"Invalid JSON in API response: {e}") from e

        reason = self._error_reason(response)

        if response.status_code == 403:
            if "quotaExceeded" in reason:
                raise YouTubeQuotaExceededError("Daily quota limit reached")
            if "rateLimitExceeded" in reason:
                raise YouTubeRateLimitError("API rate limit exceeded")
            raise YouTubeAPIError(f"API access forbidden: {reason or response.text[:200]}")

        if response.status_code == 404:
            raise YouTubeChannelNotFoundError("Channel not found")

        if response.status_code == 429:
            raise YouTubeRateLimitError("Too many requests")

        raise YouTubeAPIError(
            f"Unexpected HTTP {response.status_code} from {endpoint}: {reason or response.text[:200]}"
        )

    @staticmethod
    def _error_reason(response: httpx.Response) -> str:
        """Extract the first error reason from a Google API error body."""
        try:
            error_data = response.json()
        except ValueError:
            return ""
        error = error_data.get("error") if isinstance(error_data, dict) else None
        if not isinstance(error, dict):
            return ""
        errors = error.get("errors")
        first = errors[0] if isinstance(errors, list) and errors else None
        reason = first.get("reason") if isinstance(first, dict) else None
        return str(reason or error.get("message") or "")

    async def search_channel(
        self,
        channel_id: str,
        published_after: datetime,
        max_results: int = 5
    ) -> List[VideoCandidate]:
        """
        Search a channel for uploads published after a point in time.

        Args:
            channel_id: YouTube channel ID
            published_after: Only return items published after this UTC time
            max_results: Page size; only the first page is fetched

        Returns:
            Candidates newest first, as returned by the API

        Raises:
            YouTubeAPIError: On network or API failure
        """
        params = {
            "part": "snippet",
            "channelId": channel_id,
            "channelType": "any",
            "order": "date",
            "type": "video",
            "publishedAfter": to_rfc3339(published_after),
            "maxResults": min(max_results, 50),  # YouTube API limit
        }

        response = await self._make_request("search", params, quota_cost=100)

        items = response.get("items", []) if isinstance(response, dict) else None
        if not isinstance(items, list):
            raise YouTubeAPIError(f"Unexpected search response shape for channel {channel_id}")

        candidates = []
        for item in items:
            try:
                candidates.append(VideoCandidate.from_search_item(item))
            except ValueError as e:
                logger.warning(f"Skipping malformed search item for channel {channel_id}: {e}")

        logger.debug(f"Search for channel {channel_id} returned {len(candidates)} items")
        return candidates

    def get_quota_usage(self) -> Dict[str, int]:
        """Get quota usage statistics for this client."""
        return {
            "quota_used": self.quota_used,
            "requests_made": self.request_count
        }
