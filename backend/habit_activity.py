"""Decide which habits are due on a given calendar day."""

from datetime import datetime

from backend.calendar_math import day_of_week
from models import FREQUENCY_DAILY, FREQUENCY_MONTHLY, FREQUENCY_WEEKLY


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    return value


def is_habit_active_on(habit, day_value):
    """
    True when the habit's frequency puts it on `day_value`'s calendar day.

    MONTHLY habits fire on the day-of-month they were created on; months
    without that day are skipped.
    """
    frequency = habit.frequency
    if frequency == FREQUENCY_DAILY:
        return True
    if frequency == FREQUENCY_WEEKLY:
        return day_of_week(day_value) in habit.get_days_of_week()
    if frequency == FREQUENCY_MONTHLY:
        created = habit.created_at
        return created is not None and day_value.day == created.day
    return False


def is_habit_due_on(habit, day_value):
    """Frequency rule plus the visibility guards: not archived, not before creation."""
    if habit.is_archived:
        return False
    if habit.created_at is not None and _as_date(day_value) < _as_date(habit.created_at):
        return False
    return is_habit_active_on(habit, day_value)


def habits_due_on(habits, day_value):
    return [h for h in habits if is_habit_due_on(h, day_value)]


def habits_by_day(habits, days):
    """Map each day (a date) to the habits due on it."""
    return {_as_date(day_value): habits_due_on(habits, day_value) for day_value in days}
