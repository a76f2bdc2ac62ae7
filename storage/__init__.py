"""
Ledger storage and retention.
"""

from .database import (
    DatabaseManager,
    AnnouncedVideo,
    ChannelCheckMark,
    StorageError,
    DuplicateAnnouncementError
)
from .ledger import Ledger
from .retention import RetentionSweeper

__all__ = [
    "DatabaseManager",
    "AnnouncedVideo",
    "ChannelCheckMark",
    "StorageError",
    "DuplicateAnnouncementError",
    "Ledger",
    "RetentionSweeper"
]
