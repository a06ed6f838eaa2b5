from __future__ import annotations

from datetime import date, datetime, time, timedelta

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError("Invalid date (expected YYYY-MM-DD)")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_bounds(work_date: date) -> tuple[datetime, datetime]:
    """Half-open [start, end) interval covering one calendar day."""
    start = datetime.combine(work_date, time.min)
    return start, start + timedelta(days=1)


def format_hours_minutes(decimal_hours: float) -> str:
    """Format decimal hours as H:MM (hours truncated, minutes rounded)."""
    hours = int(decimal_hours)
    minutes = int(round((decimal_hours - hours) * 60))
    if minutes == 60:
        hours += 1
        minutes = 0
    return f"{hours}:{minutes:02d}"
