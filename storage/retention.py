"""
Retention sweep for expired ledger records.
"""

import logging
from datetime import datetime
from typing import Any, Dict

from models.channel import MonitorConfig
from storage.database import StorageError
from storage.ledger import Ledger
from utils import create_result_dict, handle_step_error

# Setup logging
logger = logging.getLogger(__name__)


class RetentionSweeper:
    """Deletes expired announcements and check marks, then compacts the store."""

    def __init__(self, ledger: Ledger, config: MonitorConfig):
        self.ledger = ledger
        self.config = config

    async def sweep(self, now: datetime) -> Dict[str, Any]:
        """
        Run one sweep. Storage failures are logged and never raised.

        Args:
            now: Reference time for the retention thresholds

        Returns:
            Sweep result with deleted row counts
        """
        logger.debug("Cleaning ledger")
        errors = []
        announcements_deleted = 0
        check_marks_deleted = 0
        reclaimed = False

        try:
            announcements_deleted = await self.ledger.prune_announcements(
                now - self.config.announcement_retention
            )
        except StorageError as e:
            handle_step_error(f"Error deleting old announcement records: {e}", errors, logger)

        try:
            check_marks_deleted = await self.ledger.prune_check_marks(
                now - self.config.recheck_interval
            )
        except StorageError as e:
            handle_step_error(f"Error deleting old check marks: {e}", errors, logger)

        try:
            await self.ledger.reclaim_space()
            reclaimed = True
        except StorageError as e:
            handle_step_error(f"Error vacuuming ledger: {e}", errors, logger)

        if announcements_deleted or check_marks_deleted:
            logger.info(
                f"Swept ledger: {announcements_deleted} announcements, "
                f"{check_marks_deleted} check marks removed"
            )

        return create_result_dict(
            success=not errors,
            errors=errors,
            announcements_deleted=announcements_deleted,
            check_marks_deleted=check_marks_deleted,
            reclaimed=reclaimed
        )
