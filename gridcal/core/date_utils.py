from __future__ import annotations

import calendar
from datetime import date, datetime, tzinfo

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

WEEK_DAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

_WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

LOCAL_INPUT_FORMAT = "%Y-%m-%dT%H:%M"


def normalize_month(year: int, month: int) -> tuple[int, int]:
    """Fold a zero-based month index outside 0-11 into the neighbouring years."""
    return year + month // 12, month % 12


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    return normalize_month(year, month + delta)


def days_in_month(year: int, month: int) -> int:
    year, month = normalize_month(year, month)
    return calendar.monthrange(year, month + 1)[1]


def first_weekday_of_month(year: int, month: int) -> int:
    """Weekday of the 1st, Sunday based (0 = Sunday, 6 = Saturday)."""
    year, month = normalize_month(year, month)
    return (calendar.weekday(year, month + 1, 1) + 1) % 7


def sunday_weekday(value: date) -> int:
    return (value.weekday() + 1) % 7


def to_local_date(value: date | datetime, tz: tzinfo | None = None) -> date:
    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


def is_same_calendar_day(a: date | datetime, b: date | datetime, tz: tzinfo | None = None) -> bool:
    left = to_local_date(a, tz)
    right = to_local_date(b, tz)
    return (left.year, left.month, left.day) == (right.year, right.month, right.day)


def format_time_of_day(value: datetime, *, tz: tzinfo | None = None, hour12: bool = True) -> str:
    if tz is not None and value.tzinfo is not None:
        value = value.astimezone(tz)
    if not hour12:
        return f"{value.hour:02d}:{value.minute:02d}"
    suffix = "AM" if value.hour < 12 else "PM"
    hour = value.hour % 12 or 12
    return f"{hour:02d}:{value.minute:02d} {suffix}"


def format_full_date(value: date | datetime) -> str:
    day = to_local_date(value)
    return f"{_WEEKDAY_NAMES[sunday_weekday(day)]}, {MONTH_NAMES[day.month - 1]} {day.day}"


def format_for_local_input(value: datetime, tz: tzinfo | None = None) -> str:
    """Render wall-clock time in ``tz`` as ``YYYY-MM-DDTHH:MM``.

    The offset is applied before seconds are dropped, so an aware UTC
    timestamp shows the viewer's local time, not UTC.
    """
    if tz is not None and value.tzinfo is not None:
        value = value.astimezone(tz)
    return value.strftime(LOCAL_INPUT_FORMAT)


def parse_local_input(text: str, tz: tzinfo | None = None) -> datetime:
    raw = (text or "").strip()
    if not raw:
        raise ValueError("empty datetime")
    normalized = raw.replace(" ", "T", 1) if "T" not in raw else raw
    parsed = datetime.strptime(normalized, LOCAL_INPUT_FORMAT)
    if tz is not None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed
