"""Utility functions for date manipulation."""

from datetime import datetime

import pytz


def utc_now() -> datetime:
    """Returns the current time as an aware UTC datetime."""
    return datetime.now(pytz.utc)


def format_datetime_for_db(dt: datetime | None) -> str | None:
    """Formats a datetime for MySQL DATETIME, normalising aware values to UTC."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(pytz.utc)
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def parse_datetime_from_db(value: datetime | str | None) -> datetime | None:
    """Reads a MySQL DATETIME (stored as naive UTC) back into an aware datetime."""
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value
