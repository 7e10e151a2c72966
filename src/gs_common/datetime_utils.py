"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def isoformat_or_empty(value: datetime | None) -> str:
    return value.isoformat() if value else ""
