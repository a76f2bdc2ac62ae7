"""
Notification delivery and announcement outcome models.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, validator


class AnnouncementOutcome(str, Enum):
    """What happened to one search candidate."""
    ANNOUNCED = "announced"
    DELIVERY_FAILED = "delivery_failed"
    ALREADY_ANNOUNCED = "already_announced"
    NOT_A_VIDEO = "not_a_video"


class DeliveryResult(BaseModel):
    """Result of a single webhook POST."""

    success: bool
    status_code: Optional[int] = None
    error_message: Optional[str] = None

    @validator('error_message', always=True)
    def validate_error_message(cls, v, values):
        """Validate error message is present when success is False."""
        if not values.get('success') and not v:
            raise ValueError('Error message required when success is False')
        return v
