"""
Pydantic models for data validation and structure.
"""

from .channel import MonitorConfig, MonitoredChannel
from .video import VideoCandidate
from .notification import AnnouncementOutcome, DeliveryResult

__all__ = [
    "MonitorConfig",
    "MonitoredChannel",
    "VideoCandidate",
    "AnnouncementOutcome",
    "DeliveryResult"
]
