"""
Timezone utilities for tournament-local dates.

Providers key their per-date endpoints on the US calendar date of tip-off,
so "today" must be computed in the tournament timezone rather than UTC:
a 10:30pm ET final is already "tomorrow" in UTC.
"""
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo


def tournament_today(tz_name: str, now: Optional[datetime] = None) -> date:
    """
    Current calendar date in the tournament timezone.

    Args:
        tz_name: IANA timezone name (e.g. "America/New_York")
        now: Aware datetime to use instead of the clock (tests)
    """
    now = now or datetime.now(timezone.utc)
    return now.astimezone(ZoneInfo(tz_name)).date()


def today_and_yesterday(tz_name: str, now: Optional[datetime] = None) -> List[str]:
    """
    Today's and yesterday's dates as YYYY-MM-DD, today first.

    Examples:
        >>> now = datetime(2026, 3, 21, 3, 30, tzinfo=timezone.utc)
        >>> today_and_yesterday("America/New_York", now)
        ['2026-03-20', '2026-03-19']
    """
    today = tournament_today(tz_name, now)
    return [today.isoformat(), (today - timedelta(days=1)).isoformat()]


def parse_day(value: str) -> str:
    """
    Validate a YYYY-MM-DD string and return it unchanged.

    Raises:
        ValueError: ``value`` is not a calendar date in that format
    """
    if len(value) != 10:
        raise ValueError(f"Invalid date {value!r}; expected YYYY-MM-DD")
    return date.fromisoformat(value).isoformat()


def utc_now() -> datetime:
    """Naive UTC timestamp for DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
