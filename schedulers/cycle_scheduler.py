"""
APScheduler-based periodic execution of tracking cycles (watch mode).
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, EVENT_JOB_MISSED
from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from chains.tracking_chain import TrackingChain
from storage.database import StorageError

# Setup logging
logger = logging.getLogger(__name__)

CYCLE_JOB_ID = "tracking_cycle"


class CycleScheduler:
    """Runs a tracking cycle on a fixed interval until stopped or a storage error occurs."""

    def __init__(self, tracking_chain: TrackingChain, interval_minutes: int = 60):
        self.tracking_chain = tracking_chain
        self.interval_minutes = interval_minutes
        self.scheduler: Optional[AsyncIOScheduler] = None
        self.is_running = False
        self.cycles_executed = 0
        self.cycles_failed = 0
        self.fatal_error: Optional[BaseException] = None
        self._stopped = asyncio.Event()

    def start(self) -> None:
        """Start the scheduler; the first cycle runs immediately."""
        if self.is_running:
            logger.warning("Scheduler already running")
            return

        self.scheduler = AsyncIOScheduler(
            executors={'default': AsyncIOExecutor()},
            job_defaults={
                'coalesce': True,  # Combine multiple pending executions into one
                'max_instances': 1,  # Never overlap two cycles
            },
            timezone='UTC'
        )

        self.scheduler.add_listener(self._job_executed_listener, EVENT_JOB_EXECUTED)
        self.scheduler.add_listener(self._job_error_listener, EVENT_JOB_ERROR)
        self.scheduler.add_listener(self._job_missed_listener, EVENT_JOB_MISSED)

        self.scheduler.add_job(
            func=self._run_cycle,
            trigger='interval',
            minutes=self.interval_minutes,
            id=CYCLE_JOB_ID,
            name="Scan monitored channels",
            next_run_time=datetime.now(timezone.utc),
            replace_existing=True
        )

        self.scheduler.start()
        self.is_running = True
        logger.info(f"Scheduler started (interval: {self.interval_minutes} minutes)")

    def stop(self) -> None:
        """Stop the scheduler."""
        if not self.is_running:
            return

        self.scheduler.shutdown(wait=False)
        self.is_running = False
        self._stopped.set()
        logger.info("Scheduler stopped")

    async def wait(self) -> None:
        """Block until stop() is called or a cycle hits a storage error."""
        await self._stopped.wait()

    async def _run_cycle(self) -> None:
        """Job body: one tracking cycle; storage errors stop the scheduler."""
        try:
            result = await self.tracking_chain.run_cycle()
        except StorageError as e:
            logger.error(f"Fatal storage error, stopping: {e}")
            self.fatal_error = e
            self._stopped.set()
            return

        if not result["success"]:
            logger.warning(f"Cycle completed with errors: {result['errors']}")

    def _job_executed_listener(self, event) -> None:
        """Handle job execution events."""
        self.cycles_executed += 1
        logger.debug(f"Job executed: {event.job_id}")

    def _job_error_listener(self, event) -> None:
        """Handle job error events."""
        self.cycles_failed += 1
        logger.error(f"Job failed: {event.job_id} - {event.exception}")

    def _job_missed_listener(self, event) -> None:
        """Handle missed job events."""
        logger.warning(f"Job missed: {event.job_id}")

    def get_stats(self) -> Dict[str, Any]:
        """Get scheduler statistics."""
        next_run_time = None
        if self.scheduler and self.is_running:
            job = self.scheduler.get_job(CYCLE_JOB_ID)
            next_run_time = job.next_run_time if job else None

        return {
            "is_running": self.is_running,
            "cycles_executed": self.cycles_executed,
            "cycles_failed": self.cycles_failed,
            "next_run_time": next_run_time
        }
