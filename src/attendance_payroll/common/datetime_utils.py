from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Protocol

from ..core.constants import MINUTES_PER_DAY
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_time_of_day(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into time."""
    value = value.strip()
    fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    return datetime.strptime(value, fmt).time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        raise NotImplementedError


class SystemClock:
    def now(self) -> datetime:
        return now_local()

    def today(self) -> date:
        return now_local().date()


@dataclass
class FixedClock:
    """Clock frozen at a given instant (tests, replays)."""

    current: datetime

    def now(self) -> datetime:
        return self.current

    def today(self) -> date:
        return self.current.date()


def _minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def duration_hours(check_in: time, check_out: time) -> float:
    """Hours between two times of day, wrapping past midnight.

    A check-out earlier than the check-in belongs to the next day.
    """
    minutes = (_minutes(check_out) - _minutes(check_in)) % MINUTES_PER_DAY
    return round(minutes / 60, 2)


def normalized_interval(start: time, end: time) -> tuple[int, int]:
    """Interval in minutes from midnight with ``end`` pushed past 24h when it wraps."""
    s = _minutes(start)
    e = _minutes(end)
    if e < s:
        e += MINUTES_PER_DAY
    return s, e


def intervals_overlap(a: tuple[int, int], b: tuple[int, int]) -> bool:
    # Half-open: back-to-back intervals do not overlap.
    return a[0] < b[1] and a[1] > b[0]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


_WEEK_RE = re.compile(r"^(\d{4})-W(\d{1,2})$")
_MONTH_RE = re.compile(r"^(\d{4})-(\d{1,2})$")
_YEAR_RE = re.compile(r"^(\d{4})$")


def resolve_period(period: str) -> tuple[date, date]:
    """Turn a period string into an inclusive (start, end) date range.

    Supported: ``YYYY-MM-DD``, ``YYYY-Www`` (ISO week), ``YYYY-MM`` and ``YYYY``.
    """
    value = (period or "").strip()
    try:
        if len(value) == 10:
            d = parse_iso_date(value)
            return d, d

        m = _WEEK_RE.match(value)
        if m:
            start = date.fromisocalendar(int(m.group(1)), int(m.group(2)), 1)
            return start, start + timedelta(days=6)

        m = _MONTH_RE.match(value)
        if m:
            return month_bounds(int(m.group(1)), int(m.group(2)))

        m = _YEAR_RE.match(value)
        if m:
            year = int(m.group(1))
            return date(year, 1, 1), date(year, 12, 31)
    except ValueError as e:
        raise ValidationError(f"Invalid period: {period!r}") from e

    raise ValidationError(f"Invalid period: {period!r}")


def optional_time(value: Optional[str]) -> Optional[time]:
    if value is None or not str(value).strip():
        return None
    try:
        return parse_time_of_day(str(value))
    except ValueError as e:
        raise ValidationError(f"Invalid time: {value!r}") from e
