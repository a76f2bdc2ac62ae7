"""
Persistent ledger of announced videos and channel check marks.
"""

import logging
from datetime import datetime
from typing import List

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from storage.database import (
    AnnouncedVideo,
    ChannelCheckMark,
    DatabaseManager,
    DuplicateAnnouncementError,
    StorageError,
)

# Setup logging
logger = logging.getLogger(__name__)


class Ledger:
    """
    Sole owner of announcement and check-mark records.

    Every write is an insert; an existing key is never overwritten.
    """

    def __init__(self, db: DatabaseManager):
        self.db = db

    async def has_been_announced(self, video_id: str) -> bool:
        """Check whether a video was already announced."""
        try:
            async with self.db.session() as session:
                result = await session.execute(
                    select(AnnouncedVideo.id).where(AnnouncedVideo.id == video_id)
                )
                return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to query videos_posted for {video_id}: {e}") from e

    async def record_announcement(self, video_id: str, now: datetime) -> None:
        """
        Record a video as announced.

        Raises:
            DuplicateAnnouncementError: If the video was already recorded
            StorageError: On any other storage failure
        """
        try:
            async with self.db.session() as session:
                session.add(AnnouncedVideo(id=video_id, date_posted=now))
        except IntegrityError as e:
            raise DuplicateAnnouncementError(f"Video {video_id} is already recorded as announced") from e
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to insert video {video_id} into videos_posted: {e}") from e

        logger.debug(f"Recorded announcement of video {video_id}")

    async def was_recently_checked(self, channel_id: str) -> bool:
        """Check whether a live check mark exists for a channel."""
        try:
            async with self.db.session() as session:
                result = await session.execute(
                    select(ChannelCheckMark.id).where(ChannelCheckMark.id == channel_id)
                )
                return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to query channel_check_times for {channel_id}: {e}") from e

    async def mark_checked(self, channel_id: str, now: datetime) -> None:
        """
        Record that a channel is being scanned.

        Raises:
            StorageError: If a mark already exists or the insert fails
        """
        try:
            async with self.db.session() as session:
                session.add(ChannelCheckMark(id=channel_id, date_checked=now))
        except IntegrityError as e:
            raise StorageError(f"Channel {channel_id} already has a check mark") from e
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to insert check mark for {channel_id}: {e}") from e

        logger.debug(f"Marked channel {channel_id} as checked at {now}")

    async def prune_announcements(self, older_than: datetime) -> int:
        """Delete announcements posted at or before the threshold."""
        try:
            async with self.db.session() as session:
                result = await session.execute(
                    delete(AnnouncedVideo).where(AnnouncedVideo.date_posted <= older_than)
                )
                return result.rowcount or 0
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete old videos_posted records: {e}") from e

    async def prune_check_marks(self, older_than: datetime) -> int:
        """Delete check marks written at or before the threshold."""
        try:
            async with self.db.session() as session:
                result = await session.execute(
                    delete(ChannelCheckMark).where(ChannelCheckMark.date_checked <= older_than)
                )
                return result.rowcount or 0
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete old channel_check_times records: {e}") from e

    async def reclaim_space(self) -> None:
        """Compact the store after pruning."""
        try:
            await self.db.vacuum()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to vacuum ledger: {e}") from e

    async def count_announcements(self) -> int:
        """Number of videos currently remembered as announced."""
        try:
            async with self.db.session() as session:
                result = await session.execute(select(func.count()).select_from(AnnouncedVideo))
                return result.scalar_one()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to count videos_posted records: {e}") from e

    async def list_check_marks(self) -> List[ChannelCheckMark]:
        """All live check marks, most recent first."""
        try:
            async with self.db.session() as session:
                result = await session.execute(
                    select(ChannelCheckMark).order_by(ChannelCheckMark.date_checked.desc())
                )
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list channel_check_times records: {e}") from e
