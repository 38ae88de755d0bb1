from datetime import datetime, timedelta

import pytest

from backend.calendar_math import (
    add_days,
    add_months,
    clamp_duration,
    day_of_week,
    is_same_calendar_day,
    month_grid,
    normalized_end,
    start_of_month,
    start_of_week,
)


def test_day_of_week_is_sunday_based():
    assert day_of_week(datetime(2024, 3, 3)) == 0  # Sunday
    assert day_of_week(datetime(2024, 3, 4)) == 1  # Monday
    assert day_of_week(datetime(2024, 3, 9)) == 6  # Saturday


def test_start_of_week_goes_back_to_sunday_midnight():
    assert start_of_week(datetime(2024, 3, 6, 15, 30)) == datetime(2024, 3, 3)
    assert start_of_week(datetime(2024, 3, 3, 23, 59)) == datetime(2024, 3, 3)


def test_start_of_month():
    assert start_of_month(datetime(2024, 2, 29, 12, 0)) == datetime(2024, 2, 1)


def test_add_days_keeps_time_of_day():
    assert add_days(datetime(2024, 2, 28, 9, 15), 2) == datetime(2024, 3, 1, 9, 15)


@pytest.mark.parametrize("start, months, expected", [
    (datetime(2024, 1, 31), 1, datetime(2024, 2, 29)),
    (datetime(2023, 1, 31), 1, datetime(2023, 2, 28)),
    (datetime(2024, 3, 31), 1, datetime(2024, 4, 30)),
    (datetime(2024, 11, 15, 8, 0), 3, datetime(2025, 2, 15, 8, 0)),
    (datetime(2024, 1, 10), -1, datetime(2023, 12, 10)),
])
def test_add_months_clamps_to_shorter_month(start, months, expected):
    assert add_months(start, months) == expected


def test_is_same_calendar_day_ignores_time():
    assert is_same_calendar_day(datetime(2024, 3, 4, 0, 0), datetime(2024, 3, 4, 23, 59))
    assert not is_same_calendar_day(datetime(2024, 3, 4, 23, 59), datetime(2024, 3, 5, 0, 0))


@pytest.mark.parametrize("month", [
    datetime(2024, 2, 1),   # 29 days, starts Thursday
    datetime(2015, 2, 1),   # 28 days, starts Sunday
    datetime(2024, 3, 15),  # 31 days, mid-month input
    datetime(2023, 12, 1),
])
def test_month_grid_is_always_six_full_weeks(month):
    grid = month_grid(month)
    assert len(grid) == 6
    assert all(len(week) == 7 for week in grid)
    cells = [cell for week in grid for cell in week]
    assert len(cells) == 42
    assert day_of_week(cells[0]) == 0
    assert cells[0] <= start_of_month(month)
    assert all(b - a == timedelta(days=1) for a, b in zip(cells, cells[1:]))


def test_month_grid_starts_on_first_when_month_begins_on_sunday():
    assert month_grid(datetime(2015, 2, 1))[0][0] == datetime(2015, 2, 1)
    assert month_grid(datetime(2024, 3, 1))[0][0] == datetime(2024, 2, 25)


def test_duration_floor():
    assert clamp_duration(timedelta(minutes=30)) == timedelta(hours=1)
    assert clamp_duration(timedelta(hours=-2)) == timedelta(hours=1)
    assert clamp_duration(timedelta(hours=3)) == timedelta(hours=3)


def test_normalized_end_forces_at_least_an_hour():
    start = datetime(2024, 3, 4, 9, 0)
    assert normalized_end(start, start) == datetime(2024, 3, 4, 10, 0)
    assert normalized_end(start, datetime(2024, 3, 4, 8, 0)) == datetime(2024, 3, 4, 10, 0)
    assert normalized_end(start, None) == datetime(2024, 3, 4, 10, 0)
    assert normalized_end(start, datetime(2024, 3, 4, 11, 30)) == datetime(2024, 3, 4, 11, 30)
