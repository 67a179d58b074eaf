"""
UTC timestamp utilities.

SQLite has no native datetime type: ``CURRENT_TIMESTAMP`` stores text in
``YYYY-MM-DD HH:MM:SS`` form (always UTC), while values written from Python
usually arrive as ISO-8601.  :func:`parse_timestamp` accepts both and always
returns a timezone-aware UTC ``datetime``.
"""

from __future__ import annotations

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """Parse a SQLite ``DATETIME`` value into an aware UTC datetime.

    Naive values are assumed to be UTC (SQLite's ``CURRENT_TIMESTAMP`` is).
    Returns ``None`` for ``None`` or empty strings.

    >>> parse_timestamp("2025-01-02 03:04:05").isoformat()
    '2025-01-02T03:04:05+00:00'
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_iso8601(dt: datetime | None) -> str | None:
    """Convert datetime to ISO 8601 string."""
    if dt is None:
        return None
    return dt.isoformat()
