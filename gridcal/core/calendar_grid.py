from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, tzinfo

from gridcal.core.date_utils import (
    MONTH_NAMES,
    days_in_month,
    first_weekday_of_month,
    is_same_calendar_day,
    normalize_month,
    shift_month,
    to_local_date,
)
from gridcal.core.models import CalendarEvent, DayInfo

GRID_WEEKS = 6
GRID_SIZE = GRID_WEEKS * 7


def month_title(year: int, month: int) -> str:
    year, month = normalize_month(year, month)
    return f"{MONTH_NAMES[month]} {year}"


def build_grid(
    year: int,
    month: int,
    events: Sequence[CalendarEvent],
    *,
    now: datetime,
    tz: tzinfo | None = None,
) -> list[DayInfo]:
    """Lay out ``month`` (zero-based) as 42 day cells, Sunday first.

    Leading cells come from the previous month and trailing cells from the
    next one. Each cell carries the events whose start falls on that local
    date, in input order.
    """
    year, month = normalize_month(year, month)
    today = to_local_date(now, tz)
    month_days = days_in_month(year, month)
    leading = first_weekday_of_month(year, month)

    prev_year, prev_month = shift_month(year, month, -1)
    prev_days = days_in_month(prev_year, prev_month)
    next_year, next_month = shift_month(year, month, 1)

    dates: list[tuple[date, bool]] = []
    for offset in range(leading):
        day_value = prev_days - leading + 1 + offset
        dates.append((date(prev_year, prev_month + 1, day_value), False))
    for day_value in range(1, month_days + 1):
        dates.append((date(year, month + 1, day_value), True))
    remaining = GRID_SIZE - len(dates)
    for day_value in range(1, remaining + 1):
        dates.append((date(next_year, next_month + 1, day_value), False))

    return [
        DayInfo(
            date=cell_date,
            is_current_month=in_month,
            is_today=is_same_calendar_day(cell_date, today),
            events=events_on_day(events, cell_date, tz=tz),
        )
        for cell_date, in_month in dates
    ]


def events_on_day(
    events: Sequence[CalendarEvent],
    day: date,
    *,
    tz: tzinfo | None = None,
) -> list[CalendarEvent]:
    return [event for event in events if is_same_calendar_day(event.start, day, tz)]
