"""Time helpers shared by the history store, updater and ranker."""

from __future__ import annotations

from datetime import UTC, date, datetime


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def local_day(moment: datetime) -> date:
    """Calendar day of ``moment`` in the local timezone."""
    return ensure_aware(moment).astimezone().date()


def days_between(earlier: date, later: date) -> int:
    """Whole calendar days from ``earlier`` to ``later`` (negative if reversed)."""
    return (later - earlier).days


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp written by :func:`format_timestamp`."""
    if not value:
        return None
    return ensure_aware(datetime.fromisoformat(value))


def format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return ensure_aware(value).isoformat()
