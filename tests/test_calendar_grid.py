from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from gridcal.core.calendar_grid import GRID_SIZE, build_grid, month_title
from gridcal.core.date_utils import days_in_month
from gridcal.core.models import CalendarEvent

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def _event(event_id: str, start: datetime, *, minutes: int = 60) -> CalendarEvent:
    return CalendarEvent(id=event_id, title=f"Event {event_id}", start=start, end=start + timedelta(minutes=minutes))


def test_grid_invariants_for_every_month() -> None:
    for year in range(1999, 2031):
        for month in range(12):
            grid = build_grid(year, month, [], now=NOW)

            assert len(grid) == GRID_SIZE
            assert sum(1 for cell in grid if cell.is_current_month) == days_in_month(year, month)
            for previous, current in zip(grid, grid[1:]):
                assert current.date - previous.date == timedelta(days=1)
            current_month_cells = [cell for cell in grid if cell.is_current_month]
            assert current_month_cells[0].date == date(year, month + 1, 1)


def test_january_2024_layout() -> None:
    grid = build_grid(2024, 0, [], now=NOW)

    leading = [cell for cell in grid[:7] if not cell.is_current_month]
    trailing = [cell for cell in grid if not cell.is_current_month and cell.date.month == 2]
    assert [cell.date for cell in leading] == [date(2023, 12, 31)]
    assert grid[1].date == date(2024, 1, 1)
    assert len(trailing) == 10
    assert grid[-1].date == date(2024, 2, 10)


def test_month_starting_on_sunday_has_no_leading_cells() -> None:
    grid = build_grid(2023, 9, [], now=NOW)  # October 2023

    assert grid[0].date == date(2023, 10, 1)
    assert grid[0].is_current_month


def test_long_month_starting_on_saturday() -> None:
    grid = build_grid(2025, 2, [], now=NOW)  # March 2025 starts on Saturday

    assert [cell.is_current_month for cell in grid[:7]] == [False] * 6 + [True]
    assert grid[0].date == date(2025, 2, 23)
    assert sum(1 for cell in grid[-5:] if cell.date.month == 4) == 5


def test_year_boundaries_and_overflow() -> None:
    december = build_grid(2024, 11, [], now=NOW)
    assert december[-1].date.year == 2025

    overflow = build_grid(2023, 12, [], now=NOW)
    january = build_grid(2024, 0, [], now=NOW)
    assert [cell.date for cell in overflow] == [cell.date for cell in january]


def test_event_lands_only_on_its_day() -> None:
    event = _event("a", datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc))

    grid = build_grid(2024, 2, [event], now=NOW, tz=timezone.utc)

    holders = [cell for cell in grid if cell.events]
    assert len(holders) == 1
    assert holders[0].date == date(2024, 3, 15)
    assert holders[0].events == [event]


def test_event_matching_uses_local_zone() -> None:
    event = _event("late", datetime(2024, 3, 15, 23, 30, tzinfo=timezone.utc))

    grid = build_grid(2024, 2, [event], now=NOW, tz=ZoneInfo("Asia/Tokyo"))

    holders = [cell.date for cell in grid if cell.events]
    assert holders == [date(2024, 3, 16)]


def test_filler_cells_carry_events() -> None:
    leap_day = _event("leap", datetime(2024, 2, 29, 9, 0, tzinfo=timezone.utc))

    grid = build_grid(2024, 2, [leap_day], now=NOW, tz=timezone.utc)

    assert grid[4].date == date(2024, 2, 29)
    assert not grid[4].is_current_month
    assert grid[4].events == [leap_day]


def test_events_keep_input_order() -> None:
    later = _event("later", datetime(2024, 3, 15, 16, 0, tzinfo=timezone.utc))
    earlier = _event("earlier", datetime(2024, 3, 15, 8, 0, tzinfo=timezone.utc))

    grid = build_grid(2024, 2, [later, earlier], now=NOW, tz=timezone.utc)

    cell = next(cell for cell in grid if cell.date == date(2024, 3, 15))
    assert [event.id for event in cell.events] == ["later", "earlier"]


def test_today_marker_follows_injected_now() -> None:
    march = build_grid(2024, 2, [], now=NOW, tz=timezone.utc)
    today_cells = [cell for cell in march if cell.is_today]
    assert [cell.date for cell in today_cells] == [date(2024, 3, 15)]

    january = build_grid(2024, 0, [], now=NOW, tz=timezone.utc)
    assert not any(cell.is_today for cell in january)


def test_today_marker_in_filler_cell() -> None:
    now = datetime(2024, 2, 29, 8, 0, tzinfo=timezone.utc)

    grid = build_grid(2024, 2, [], now=now, tz=timezone.utc)

    today_cells = [cell for cell in grid if cell.is_today]
    assert len(today_cells) == 1
    assert not today_cells[0].is_current_month


def test_month_title() -> None:
    assert month_title(2024, 2) == "March 2024"
    assert month_title(2024, 12) == "January 2025"
