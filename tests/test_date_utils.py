from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from gridcal.core.date_utils import (
    days_in_month,
    first_weekday_of_month,
    format_for_local_input,
    format_full_date,
    format_time_of_day,
    is_same_calendar_day,
    parse_local_input,
    shift_month,
)


def test_days_in_month_leap_years() -> None:
    assert days_in_month(2024, 1) == 29
    assert days_in_month(2023, 1) == 28
    assert days_in_month(2000, 1) == 29
    assert days_in_month(1900, 1) == 28


@pytest.mark.parametrize(
    ("year", "month", "expected"),
    [
        (2024, 12, 31),  # January 2025
        (2024, 13, 28),  # February 2025
        (2024, -1, 31),  # December 2023
        (2024, -11, 28),  # February 2023
    ],
)
def test_days_in_month_overflow(year: int, month: int, expected: int) -> None:
    assert days_in_month(year, month) == expected


def test_first_weekday_of_month_is_sunday_based() -> None:
    assert first_weekday_of_month(2024, 0) == 1  # Monday
    assert first_weekday_of_month(2023, 9) == 0  # Sunday
    assert first_weekday_of_month(2024, 5) == 6  # Saturday
    assert first_weekday_of_month(2024, 12) == 3  # Wednesday, Jan 1 2025


def test_shift_month_wraps_years() -> None:
    assert shift_month(2024, 0, -1) == (2023, 11)
    assert shift_month(2024, 11, 1) == (2025, 0)
    assert shift_month(2024, 5, 0) == (2024, 5)
    assert shift_month(2024, 0, -25) == (2021, 11)


def test_is_same_calendar_day_ignores_time_of_day() -> None:
    morning = datetime(2024, 3, 15, 0, 1)
    evening = datetime(2024, 3, 15, 23, 59)
    assert is_same_calendar_day(morning, evening)
    assert is_same_calendar_day(morning, date(2024, 3, 15))
    assert not is_same_calendar_day(morning, date(2024, 3, 16))


def test_is_same_calendar_day_uses_local_date() -> None:
    late_utc = datetime(2024, 3, 15, 23, 30, tzinfo=timezone.utc)
    tokyo = ZoneInfo("Asia/Tokyo")

    assert is_same_calendar_day(late_utc, date(2024, 3, 16), tokyo)
    assert not is_same_calendar_day(late_utc, date(2024, 3, 16))


def test_format_time_of_day() -> None:
    assert format_time_of_day(datetime(2024, 3, 15, 10, 0)) == "10:00 AM"
    assert format_time_of_day(datetime(2024, 3, 15, 0, 5)) == "12:05 AM"
    assert format_time_of_day(datetime(2024, 3, 15, 12, 30)) == "12:30 PM"
    assert format_time_of_day(datetime(2024, 3, 15, 9, 0)) == "09:00 AM"
    assert format_time_of_day(datetime(2024, 3, 15, 15, 7), hour12=False) == "15:07"


def test_format_time_of_day_converts_zone() -> None:
    value = datetime(2024, 3, 15, 22, 30, tzinfo=timezone.utc)
    assert format_time_of_day(value, tz=ZoneInfo("Asia/Tokyo"), hour12=False) == "07:30"


def test_format_full_date() -> None:
    assert format_full_date(date(2026, 1, 5)) == "Monday, January 5"
    assert format_full_date(datetime(2024, 3, 15, 18, 0)) == "Friday, March 15"


def test_format_for_local_input_applies_offset() -> None:
    value = datetime(2024, 3, 15, 22, 30, tzinfo=timezone.utc)

    assert format_for_local_input(value, ZoneInfo("Asia/Tokyo")) == "2024-03-16T07:30"
    assert format_for_local_input(value, ZoneInfo("America/New_York")) == "2024-03-15T18:30"
    assert format_for_local_input(value) == "2024-03-15T22:30"


def test_local_input_round_trip_keeps_wall_clock() -> None:
    berlin = ZoneInfo("Europe/Berlin")
    value = datetime(2024, 7, 1, 13, 45, tzinfo=timezone.utc)

    parsed = parse_local_input(format_for_local_input(value, berlin), berlin)

    assert (parsed.hour, parsed.minute) == (15, 45)
    assert parsed == value


def test_parse_local_input_accepts_space_separator() -> None:
    parsed = parse_local_input("2024-03-15 10:00", timezone.utc)
    assert parsed == datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("raw", ["", "   ", "tomorrow", "2024-13-01T10:00", "2024-03-15"])
def test_parse_local_input_rejects_garbage(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_local_input(raw, timezone.utc)
