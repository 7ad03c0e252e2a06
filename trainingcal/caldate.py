"""
Timezone-free calendar dates and date ranges.

A CalendarDate is just (year, month, day). It never passes through an
instant-in-time representation, so a session dated 2025-03-31 stays on
2025-03-31 no matter where the host runs.

Weekdays follow the convention of the upstream API:
    0 = Sunday, 1 = Monday, ..., 6 = Saturday
"""

from __future__ import annotations

import calendar
import datetime as _dt
from dataclasses import dataclass
from typing import Iterator, Optional

from trainingcal.errors import InvalidDate


@dataclass(frozen=True, order=True)
class CalendarDate:
    """
    One valid Gregorian date. Ordering is by (year, month, day).
    """

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        try:
            _dt.date(self.year, self.month, self.day)
        except (TypeError, ValueError) as exc:
            raise InvalidDate(f"Invalid date: {self.year!r}-{self.month!r}-{self.day!r}") from exc

    def __str__(self) -> str:
        return to_iso_string(self)

    @property
    def weekday(self) -> int:
        return weekday_of(self)

    @classmethod
    def from_date(cls, value: _dt.date) -> "CalendarDate":
        return cls(value.year, value.month, value.day)

    def to_date(self) -> _dt.date:
        return _dt.date(self.year, self.month, self.day)


@dataclass(frozen=True)
class Period:
    """
    Inclusive date range. A missing bound means the range is open on that side.
    """

    start: Optional[CalendarDate] = None
    end: Optional[CalendarDate] = None

    @property
    def is_bounded(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def is_empty(self) -> bool:
        return self.start is not None and self.end is not None and self.start > self.end


UNBOUNDED = Period()


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def is_ascii_digits(text: str) -> bool:
    # str.isdigit also accepts '²' and other digits int() rejects
    return text.isascii() and text.isdecimal()


def from_iso_string(s: str) -> CalendarDate:
    """
    Parse 'YYYY-MM-DD' into a CalendarDate.

    ISO datetime strings ('2025-03-31T00:00:00Z', '2025-03-31 08:00') are
    accepted too: only the literal date part is kept, without any timezone
    shift.
    """
    if not isinstance(s, str):
        raise InvalidDate(f"Invalid date: {s!r}")

    text = s.strip()
    if len(text) > 10 and text[10] in "T ":
        text = text[:10]

    parts = text.split("-")
    if len(parts) != 3 or len(parts[0]) != 4 or not all(is_ascii_digits(p) for p in parts):
        raise InvalidDate(f"Invalid date: {s!r}")

    return CalendarDate(int(parts[0]), int(parts[1]), int(parts[2]))


def to_iso_string(d: CalendarDate) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def today() -> CalendarDate:
    # Host wall-clock date; only the CLI uses this to pick a default range.
    return CalendarDate.from_date(_dt.date.today())


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------


def compare(a: CalendarDate, b: CalendarDate) -> int:
    """Return -1, 0 or 1."""
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def add_days(d: CalendarDate, n: int) -> CalendarDate:
    return CalendarDate.from_date(d.to_date() + _dt.timedelta(days=n))


def weekday_of(d: CalendarDate) -> int:
    # isoweekday: Monday=1 .. Sunday=7, so % 7 maps Sunday to 0
    return d.to_date().isoweekday() % 7


def days_in_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise InvalidDate(f"Invalid month: {month!r}")
    return calendar.monthrange(year, month)[1]


def is_within(d: CalendarDate, period: Period) -> bool:
    """Inclusive on both ends; open bounds always match."""
    if period.start is not None and d < period.start:
        return False
    if period.end is not None and d > period.end:
        return False
    return True


# ---------------------------------------------------------------------------
# Ranges
# ---------------------------------------------------------------------------


def intersect(a: Period, b: Period) -> Optional[Period]:
    """
    Intersection of two periods, or None if it is empty.

    Each bound is handled independently, so a period that only limits
    its end narrows the other period's end and leaves its start alone.
    """
    starts = [x for x in (a.start, b.start) if x is not None]
    ends = [x for x in (a.end, b.end) if x is not None]

    start = max(starts) if starts else None
    end = min(ends) if ends else None

    if start is not None and end is not None and start > end:
        return None
    return Period(start, end)


def iter_days(period: Period) -> Iterator[CalendarDate]:
    """Yield every date of a bounded period, one calendar day at a time."""
    if not period.is_bounded:
        raise ValueError("Cannot iterate an unbounded period")

    current = period.start
    while current <= period.end:
        yield current
        if current == period.end:
            # stepping past 9999-12-31 would overflow
            return
        current = add_days(current, 1)


def day_range(d: CalendarDate) -> Period:
    return Period(d, d)


def week_range(d: CalendarDate) -> Period:
    """The Monday-to-Sunday week that contains d."""
    # days since Monday: Sunday (0) is 6 days after Monday
    offset = (weekday_of(d) - 1) % 7
    start = add_days(d, -offset)
    return Period(start, add_days(start, 6))


def month_range(year: int, month: int) -> Period:
    return Period(
        CalendarDate(year, month, 1),
        CalendarDate(year, month, days_in_month(year, month)),
    )


def parse_month(s: str) -> tuple[int, int]:
    """Parse 'YYYY-MM' into (year, month)."""
    parts = s.strip().split("-")
    if len(parts) != 2 or not all(is_ascii_digits(p) for p in parts):
        raise InvalidDate(f"Invalid month: {s!r}")
    year, month = int(parts[0]), int(parts[1])
    if not 1 <= month <= 12:
        raise InvalidDate(f"Invalid month: {s!r}")
    return year, month
