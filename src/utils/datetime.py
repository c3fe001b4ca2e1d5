# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for the sync API.

All timestamps are stored in UTC and all Python datetimes are
timezone-aware. Engagement buckets are keyed by the UTC calendar day, so
every caller that needs "today" goes through utc_today() to keep the day
boundary consistent across the system.

Usage:
    from src.utils.datetime import utc_now, utc_today

    synced_at = utc_now()
    bucket_day = utc_today()
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Get the current UTC calendar day."""
    return utc_now().date()


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def to_utc_day(value: date | datetime | None) -> date:
    """Truncate a timestamp to its UTC calendar day.

    Args:
        value: A date, a datetime (naive values are taken as UTC) or None
            for today.

    Returns:
        The UTC calendar day.
    """
    if value is None:
        return utc_today()
    if isinstance(value, datetime):
        return ensure_utc(value).date()
    return value


def format_iso(dt: datetime | None) -> str | None:
    """Format a datetime as ISO 8601 string.

    Args:
        dt: Datetime to format.

    Returns:
        ISO 8601 formatted string or None.
    """
    if dt is None:
        return None

    return ensure_utc(dt).isoformat()
