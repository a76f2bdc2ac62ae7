"""
Main workflow orchestration chain for one tracking cycle.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from config.settings import Settings
from models.channel import MonitorConfig, MonitoredChannel
from schedulers.channel_scheduler import ChannelScanScheduler, ScanTicket
from storage.database import DatabaseManager
from storage.ledger import Ledger
from storage.retention import RetentionSweeper
from tools.discord_tools import DiscordWebhookClient
from tools.youtube_tools import YouTubeAPIError, YouTubeSearchClient
from utils import RateLimiter, create_result_dict, handle_step_error, safe_log_text, utc_now
from chains.announcement_chain import AnnouncementPipeline

# Setup logging
logger = logging.getLogger(__name__)


class TrackingChain:
    """
    Runs the scan, announce and sweep steps over every monitored channel.

    Workflow: Expire marks → (Claim → Search → Announce) per channel → Sweep

    A search failure only skips its channel. Storage errors propagate and
    end the run, since the ledger can no longer be trusted.
    """

    def __init__(
        self,
        config: MonitorConfig,
        db: DatabaseManager,
        search_client: YouTubeSearchClient,
        notifier: DiscordWebhookClient,
        limiter: Optional[RateLimiter] = None,
        clock: Callable[[], datetime] = utc_now,
        message_template: Optional[str] = None
    ):
        self.config = config
        self.db = db
        self.search_client = search_client
        self.clock = clock
        self.limiter = limiter or RateLimiter(config.item_delay_seconds)

        self.ledger = Ledger(db)
        self.scheduler = ChannelScanScheduler(self.ledger, config)
        self.sweeper = RetentionSweeper(self.ledger, config)

        pipeline_kwargs = {"message_template": message_template} if message_template else {}
        self.pipeline = AnnouncementPipeline(
            self.ledger, notifier, self.limiter, clock=clock, **pipeline_kwargs
        )

        self.executions = 0
        self.successful_executions = 0

    async def initialize(self) -> None:
        """Open the ledger and create its tables if required."""
        await self.db.init_database()

    async def close(self) -> None:
        """Release the ledger connection."""
        await self.db.close()

    async def run_cycle(self) -> Dict[str, Any]:
        """
        Execute one full cycle over all monitored channels.

        Returns:
            Cycle result with channel and announcement counters

        Raises:
            StorageError: If the ledger fails outside the sweep
        """
        logger.info(f"Starting tracking cycle for {len(self.config.channels)} channels")
        start_time = self.clock()
        self.executions += 1

        errors = []
        channels_checked = 0
        channels_skipped = 0
        channels_failed = 0
        announced = 0
        delivery_failures = 0

        await self.scheduler.expire_stale_marks(start_time)

        for channel in self.config.channels:
            ticket = await self.scheduler.claim_channel(channel, self.clock())
            if ticket is None:
                channels_skipped += 1
                continue

            try:
                channel_result = await self._scan_channel(ticket)
            except YouTubeAPIError as e:
                channels_failed += 1
                handle_step_error(
                    f"Search failed for channel {safe_log_text(channel.name)} ({channel.channel_id}): {e}",
                    errors,
                    logger
                )
                continue

            channels_checked += 1
            announced += channel_result["announced"]
            delivery_failures += channel_result["delivery_failures"]
            errors.extend(channel_result["errors"])

        sweep_result = await self.sweeper.sweep(self.clock())
        errors.extend(sweep_result["errors"])

        success = not errors
        if success:
            self.successful_executions += 1

        execution_time = (self.clock() - start_time).total_seconds()
        logger.info(
            f"Completed tracking cycle: {'SUCCESS' if success else 'PARTIAL'} - "
            f"{channels_checked} checked, {channels_skipped} skipped, {channels_failed} failed, "
            f"{announced} announced in {execution_time:.2f}s"
        )

        return create_result_dict(
            success=success,
            errors=errors,
            channels_checked=channels_checked,
            channels_skipped=channels_skipped,
            channels_failed=channels_failed,
            announced=announced,
            delivery_failures=delivery_failures,
            sweep=sweep_result,
            execution_time_seconds=execution_time
        )

    async def _scan_channel(self, ticket: ScanTicket) -> Dict[str, Any]:
        """Search one claimed channel and announce what it returns."""
        channel: MonitoredChannel = ticket.channel
        logger.info(
            f"Checking {safe_log_text(channel.name)} ({channel.channel_id}) "
            f"for videos published after {ticket.published_after:%Y-%m-%d %H:%M:%S}"
        )

        await self.limiter.acquire()
        candidates = await self.search_client.search_channel(
            channel.channel_id,
            ticket.published_after,
            self.config.max_results_per_search
        )

        if not candidates:
            logger.info(f"No new videos found for {safe_log_text(channel.name)}")

        return await self.pipeline.process(channel, candidates)

    def get_stats(self) -> Dict[str, Any]:
        """Get cycle execution statistics."""
        return {
            "executions": self.executions,
            "successful_executions": self.successful_executions,
            "rate_limited_seconds": self.limiter.total_waited
        }


def create_tracking_chain(settings: Settings) -> TrackingChain:
    """Wire a tracking chain from application settings."""
    return TrackingChain(
        config=settings.to_monitor_config(),
        db=DatabaseManager(settings.database_url),
        search_client=YouTubeSearchClient(
            settings.gc_api_key, timeout=settings.request_timeout_seconds
        ),
        notifier=DiscordWebhookClient(
            settings.webhook, timeout=settings.request_timeout_seconds
        ),
        message_template=settings.message_template
    )
