"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def to_iso(value: datetime | str | None) -> str | None:
    """Render a timestamp column as ISO8601.

    SQLite hands back text for raw SQL timestamp columns, PostgreSQL hands back
    datetime objects; both end up as the same string shape.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value).replace(" ", "T", 1)
