"""
Datetime helpers.

Timestamps are stored as naive UTC datetimes, which is what pymongo
returns by default when reading them back.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def to_utc_iso(value: datetime) -> str:
    """ISO 8601 in UTC with an explicit ``Z``, e.g. 2025-01-31T09:30:00Z."""
    return to_naive_utc(value).isoformat() + "Z"
