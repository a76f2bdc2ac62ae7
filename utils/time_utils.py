"""
Time helpers.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the ledger."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_rfc3339(value: datetime) -> str:
    """Format a naive UTC datetime for YouTube API timestamp parameters."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")
