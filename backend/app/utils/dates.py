"""
Date helpers shared by the aggregators and the dashboard.
"""

from datetime import datetime, timezone


def as_utc(value: datetime) -> datetime:
    """Make ``value`` comparable with any other: naive datetimes are read as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
