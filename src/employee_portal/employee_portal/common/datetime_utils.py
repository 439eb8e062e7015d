from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_date(value: Any) -> Optional[date]:
    """Accept a date, a datetime or an ISO string (date or timestamp) from a row."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value)[:10])


def coerce_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def utc_now() -> datetime:
    """Server-side stamp for created_at/updated_at columns (naive UTC, MySQL DATETIME)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
