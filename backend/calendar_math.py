"""Calendar helpers shared by the planner, habits and synchronizer.

All values are naive local datetimes. Days of the week are numbered
0 (Sunday) through 6 (Saturday), matching the planner's week layout.
"""

import calendar
from datetime import datetime, timedelta

MIN_DURATION = timedelta(hours=1)
DAYS_PER_WEEK = 7
MONTH_GRID_WEEKS = 6


def day_of_week(value):
    """Sunday-based weekday: 0 = Sunday ... 6 = Saturday."""
    return (value.weekday() + 1) % 7


def start_of_day(value):
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(value):
    return start_of_day(value) - timedelta(days=day_of_week(value))


def start_of_month(value):
    return start_of_day(value).replace(day=1)


def add_days(value, n):
    return value + timedelta(days=n)


def add_months(value, n):
    """Shift by whole months, clamping to the last day of a shorter target month."""
    month_index = value.month - 1 + n
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    _, last_dom = calendar.monthrange(year, month)
    return value.replace(year=year, month=month, day=min(value.day, last_dom))


def is_same_calendar_day(a, b):
    return a.year == b.year and a.month == b.month and a.day == b.day


def at_time(value, hour, minute=0):
    return value.replace(hour=hour, minute=minute, second=0, microsecond=0)


def month_grid(month_start):
    """
    Return a 6x7 matrix of day starts for a month view.

    The first cell is the Sunday on or before the 1st of the month, so the
    grid always holds 42 days regardless of month length.
    """
    first = start_of_month(month_start)
    current = add_days(first, -day_of_week(first))
    weeks = []
    for _ in range(MONTH_GRID_WEEKS):
        week = []
        for _ in range(DAYS_PER_WEEK):
            week.append(current)
            current = add_days(current, 1)
        weeks.append(week)
    return weeks


def clamp_duration(duration):
    """Apply the 1-hour floor every planner block honours."""
    return max(MIN_DURATION, duration)


def normalized_end(starts_at, ends_at):
    """End time for a direct edit, with the same 1-hour floor as recurrence expansion."""
    if ends_at is None:
        return starts_at + MIN_DURATION
    return starts_at + clamp_duration(ends_at - starts_at)


def day_bounds(value):
    """Half-open [start, end) range covering the calendar day of `value`."""
    start = start_of_day(value)
    return start, add_days(start, 1)


def combine(day_value, hour=0, minute=0):
    """Build a datetime from a date at the given wall-clock time."""
    return datetime(day_value.year, day_value.month, day_value.day, hour, minute)
