"""
UTC datetime helpers.

Every timestamp the service stores or returns is timezone-aware UTC.
"""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Normalize a datetime to aware UTC.

    Naive values (as returned by some drivers and by SQLite) are assumed to
    already be UTC. Used at the persistence and serialization boundaries.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def from_timestamp_utc(timestamp: float) -> datetime:
    """Create a UTC-aware datetime from a Unix timestamp (seconds)."""
    return datetime.fromtimestamp(timestamp, tz=UTC)


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 string (``Z`` suffix allowed) into aware UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    result = ensure_utc(parsed)
    assert result is not None
    return result


def coerce_date(value: date | datetime | str) -> date:
    """
    Reduce a date, datetime or ISO string to a calendar date.

    Clients send hearing dates either as ``YYYY-MM-DD`` or as a full ISO
    timestamp; only the date part is kept.

    Raises:
        ValueError: If the string is not an ISO date or datetime.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    return parse_iso_datetime(text).date()
