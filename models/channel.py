"""
Monitored channel and runtime monitoring configuration models.
"""

from datetime import timedelta
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, validator


class MonitoredChannel(BaseModel):
    """A channel whose uploads are announced."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name used in messages")
    channel_id: str = Field(..., description="YouTube channel ID")

    @validator('name', 'channel_id')
    def validate_not_blank(cls, v):
        """Channel fields must carry a value."""
        if not v.strip():
            raise ValueError('must not be empty')
        return v.strip()


class MonitorConfig(BaseModel):
    """Immutable configuration for one process lifetime."""

    model_config = ConfigDict(frozen=True)

    channels: Tuple[MonitoredChannel, ...]
    recheck_interval: timedelta = timedelta(hours=12)
    lookback: timedelta = timedelta(hours=48)
    announcement_retention: timedelta = timedelta(days=30)
    item_delay_seconds: float = Field(10, ge=0)
    max_results_per_search: int = Field(5, ge=1, le=50)

    @validator('channels')
    def validate_unique_channels(cls, v):
        """A channel ID may only be monitored once."""
        seen = set()
        for channel in v:
            if channel.channel_id in seen:
                raise ValueError(f'channel {channel.channel_id} is listed more than once')
            seen.add(channel.channel_id)
        return v

    @validator('lookback')
    def validate_lookback(cls, v, values):
        """Lookback must exceed the recheck interval so skipped scans leave no gap."""
        interval = values.get('recheck_interval')
        if interval is not None and v <= interval:
            raise ValueError(
                f'lookback ({v}) must be longer than the recheck interval ({interval})'
            )
        return v
