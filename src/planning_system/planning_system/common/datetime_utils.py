from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Union

from ..core.constants import DAYS_PER_WEEK

DateLike = Union[date, datetime, str]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def to_date(value: DateLike) -> date:
    """Accept date, datetime or an ISO string (a trailing time part is ignored).

    Raises ValueError/TypeError when the value is not a calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_iso_date(value.strip()[:10])
    raise TypeError(f"Unsupported date value type: {type(value)!r}")


def parse_optional_date(value: Optional[DateLike]) -> Optional[date]:
    """Like to_date, but returns None for missing or unparsable input."""
    if value is None or value == "":
        return None
    try:
        return to_date(value)
    except (TypeError, ValueError):
        return None


def week_start(day: date) -> date:
    """Monday of the week containing `day`."""
    return day - timedelta(days=day.weekday())


def add_weeks(day: date, weeks: int = 1) -> date:
    return day + timedelta(days=DAYS_PER_WEEK * weeks)


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now().date()
