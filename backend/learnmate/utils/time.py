"""
Time utilities for LearnMate backend.
"""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Get current UTC time (timezone-aware, Python 3.12+ compatible)."""
    return datetime.now(timezone.utc)


def to_utc_naive(value: datetime) -> datetime:
    """Convert to a naive UTC datetime for storage. Naive input is taken as UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_utc_naive(value: datetime) -> datetime:
    """Attach UTC to a naive datetime read back from storage."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
