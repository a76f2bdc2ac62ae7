"""
Clients for the external search API and the chat webhook.
"""

from .youtube_tools import (
    YouTubeSearchClient,
    YouTubeAPIError,
    YouTubeQuotaExceededError,
    YouTubeRateLimitError,
    YouTubeChannelNotFoundError
)
from .discord_tools import DiscordWebhookClient

__all__ = [
    "YouTubeSearchClient",
    "YouTubeAPIError",
    "YouTubeQuotaExceededError",
    "YouTubeRateLimitError",
    "YouTubeChannelNotFoundError",
    "DiscordWebhookClient"
]
