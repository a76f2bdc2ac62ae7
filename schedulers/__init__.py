"""
Channel scan gating and periodic cycle scheduling.
"""

from .channel_scheduler import ChannelScanScheduler, ScanTicket

__all__ = [
    "ChannelScanScheduler",
    "ScanTicket"
]
