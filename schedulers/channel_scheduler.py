"""
Per-channel scan gating backed by ledger check marks.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from models.channel import MonitorConfig, MonitoredChannel
from storage.ledger import Ledger
from utils import safe_log_text

# Setup logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanTicket:
    """Permission to scan one channel, granted after its check mark was written."""
    channel: MonitoredChannel
    checked_at: datetime
    published_after: datetime


class ChannelScanScheduler:
    """Decides whether a channel is due for a search."""

    def __init__(self, ledger: Ledger, config: MonitorConfig):
        self.ledger = ledger
        self.config = config

    def lookback_start(self, now: datetime) -> datetime:
        """Earliest publish time requested from the search."""
        return now - self.config.lookback

    async def expire_stale_marks(self, now: datetime) -> int:
        """Drop check marks that have reached the recheck interval."""
        expired = await self.ledger.prune_check_marks(now - self.config.recheck_interval)
        if expired:
            logger.debug(f"Expired {expired} stale check marks")
        return expired

    async def claim_channel(self, channel: MonitoredChannel, now: datetime) -> Optional[ScanTicket]:
        """
        Claim a channel for scanning.

        The check mark is written before the caller searches, so a crash or a
        slow API response cannot cause an immediate rescan.

        Args:
            channel: Channel to claim
            now: Current UTC time

        Returns:
            A ticket when the channel should be scanned, None when it was checked
            within the recheck interval
        """
        if await self.ledger.was_recently_checked(channel.channel_id):
            logger.debug(
                f"Channel {safe_log_text(channel.name)} ({channel.channel_id}) "
                f"checked less than {self.config.recheck_interval} ago, skipping"
            )
            return None

        await self.ledger.mark_checked(channel.channel_id, now)

        return ScanTicket(
            channel=channel,
            checked_at=now,
            published_after=self.lookback_start(now)
        )
