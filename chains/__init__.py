"""
Workflow chains for announcing new uploads.
"""

from .announcement_chain import AnnouncementPipeline, format_announcement
from .tracking_chain import TrackingChain, create_tracking_chain

__all__ = [
    "AnnouncementPipeline",
    "format_announcement",
    "TrackingChain",
    "create_tracking_chain"
]
