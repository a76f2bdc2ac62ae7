"""
Announcement pipeline: dedup, format, deliver and record new videos.
"""

import html
import logging
from collections import Counter
from datetime import datetime
from typing import Any, Callable, Dict, List, Sequence

from config.settings import DEFAULT_MESSAGE_TEMPLATE
from models.channel import MonitoredChannel
from models.notification import AnnouncementOutcome
from models.video import VideoCandidate
from storage.ledger import Ledger
from tools.discord_tools import DiscordWebhookClient
from utils import RateLimiter, create_result_dict, safe_log_text, utc_now

# Setup logging
logger = logging.getLogger(__name__)


def format_announcement(
    candidate: VideoCandidate,
    channel: MonitoredChannel,
    template: str = DEFAULT_MESSAGE_TEMPLATE
) -> str:
    """
    Render the webhook message for a video.

    The search API returns HTML-escaped titles, so both titles are unescaped.
    The configured display name is used when the API omits the channel title.
    """
    channel_title = html.unescape(candidate.channel_title) or channel.name
    return template.format(
        channel=channel_title,
        title=html.unescape(candidate.title),
        video_id=candidate.video_id,
        url=candidate.watch_url
    )


class AnnouncementPipeline:
    """
    Announces each new video from a channel search at most once.

    Delivery failures are not retried: the video is recorded as announced
    whether or not the webhook accepted the message.
    """

    def __init__(
        self,
        ledger: Ledger,
        notifier: DiscordWebhookClient,
        limiter: RateLimiter,
        clock: Callable[[], datetime] = utc_now,
        message_template: str = DEFAULT_MESSAGE_TEMPLATE
    ):
        self.ledger = ledger
        self.notifier = notifier
        self.limiter = limiter
        self.clock = clock
        self.message_template = message_template

    async def process(
        self,
        channel: MonitoredChannel,
        candidates: Sequence[VideoCandidate]
    ) -> Dict[str, Any]:
        """
        Process one channel's search results in order.

        Args:
            channel: Channel the candidates were found for
            candidates: Search results

        Returns:
            Result with per-outcome counts

        Raises:
            StorageError: If the ledger cannot be read or written
        """
        outcomes: List[AnnouncementOutcome] = []
        errors: List[str] = []

        for candidate in candidates:
            await self.limiter.acquire()
            outcome = await self.announce(channel, candidate)
            outcomes.append(outcome)
            if outcome is AnnouncementOutcome.DELIVERY_FAILED:
                errors.append(f"Delivery failed for video {candidate.video_id}")

        counts = Counter(outcomes)
        return create_result_dict(
            success=not errors,
            errors=errors,
            candidates=len(candidates),
            announced=counts[AnnouncementOutcome.ANNOUNCED],
            delivery_failures=counts[AnnouncementOutcome.DELIVERY_FAILED],
            already_announced=counts[AnnouncementOutcome.ALREADY_ANNOUNCED],
            not_videos=counts[AnnouncementOutcome.NOT_A_VIDEO]
        )

    async def announce(
        self,
        channel: MonitoredChannel,
        candidate: VideoCandidate
    ) -> AnnouncementOutcome:
        """Handle a single candidate."""
        if not candidate.is_video:
            logger.debug(f"Skipping {candidate.kind} item as it is not a video")
            return AnnouncementOutcome.NOT_A_VIDEO

        title = safe_log_text(html.unescape(candidate.title))

        if await self.ledger.has_been_announced(candidate.video_id):
            logger.debug(f"Video {candidate.video_id} ({title}) already posted")
            return AnnouncementOutcome.ALREADY_ANNOUNCED

        logger.info(f"Posting video {candidate.video_id} ({title}) from {safe_log_text(channel.name)}")
        message = format_announcement(candidate, channel, self.message_template)
        result = await self.notifier.send_message(message)

        if not result.success:
            logger.error(
                f"Failed to post video {candidate.video_id}: {result.error_message}; "
                f"recording it as announced anyway"
            )

        await self.ledger.record_announcement(candidate.video_id, self.clock())

        if result.success:
            return AnnouncementOutcome.ANNOUNCED
        return AnnouncementOutcome.DELIVERY_FAILED
