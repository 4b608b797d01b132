"""Utility functions for working with dates and times."""

from datetime import datetime, timezone

__all__ = [
    "get_current_timestamp",
    "to_iso8601",
]

def get_current_timestamp() -> datetime:
    """Return the current UTC datetime with micro-second precision.

    This object can be stored directly in MongoDB where it will be written as
    a BSON Date.
    """
    return datetime.now(tz=timezone.utc)


def to_iso8601(value: datetime) -> str:
    """Format *value* as ISO-8601, treating naive datetimes as UTC.

    BSON dates carry no zone, so a client without ``tz_aware`` hands back
    naive datetimes that are nevertheless UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()
