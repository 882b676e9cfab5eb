from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta

from .numbers import round_int


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_clock_time(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into a time of day."""
    fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    return datetime.strptime(value, fmt).time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def month_range(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month (both inclusive)."""
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def previous_month(day: date) -> tuple[int, int]:
    if day.month == 1:
        return day.year - 1, 12
    return day.year, day.month - 1


def work_week_range(day: date) -> tuple[date, date]:
    """Monday and Friday of the week containing ``day``."""
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=4)


def working_days_in_month(year: int, month: int) -> int:
    """Count Monday-Friday days in the month."""
    first, last = month_range(year, month)
    count = 0
    current = first
    while current <= last:
        if current.weekday() < 5:
            count += 1
        current += timedelta(days=1)
    return count


def is_late(clock_in: datetime, work_start: time) -> bool:
    return clock_in > datetime.combine(clock_in.date(), work_start)


def work_duration_minutes(clock_in: datetime | None, clock_out: datetime | None) -> int:
    """Whole minutes between clock-in and clock-out, never negative."""
    if not clock_in or not clock_out:
        return 0
    return max(0, round_int((clock_out - clock_in).total_seconds() / 60))


def format_duration(minutes: int | None) -> str:
    """Format minutes as ``8h 30m`` / ``8h`` / ``30m``."""
    if not minutes or minutes < 0:
        return "0m"

    hours, rest = divmod(int(minutes), 60)
    if hours == 0:
        return f"{rest}m"
    if rest == 0:
        return f"{hours}h"
    return f"{hours}h {rest}m"


def format_time(value: datetime) -> str:
    return value.strftime("%H:%M:%S")


def to_iso(value: datetime | date | None) -> str | None:
    return value.isoformat() if value else None
