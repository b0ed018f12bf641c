"""Timestamp helpers; everything is persisted as RFC3339 UTC."""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_rfc3339(value: datetime) -> str:
    """Format a datetime as RFC3339, treating naive values as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a stored timestamp.

    Accepts RFC3339 (with ``Z`` or an offset) and SQLite's
    ``datetime('now')`` format. Returns None for empty or unparseable input.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def minutes_ago(minutes: int, now: datetime | None = None) -> datetime:
    return (now or utc_now()) - timedelta(minutes=minutes)
