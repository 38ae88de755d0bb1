"""Resolve planner drag-and-drop moves and direct time edits."""

from dataclasses import dataclass

from backend.calendar_math import add_days, at_time, normalized_end, start_of_week


@dataclass(frozen=True)
class TimeSlot:
    """Drop on an hour row of a displayed week."""
    day_index: int
    hour: int


@dataclass(frozen=True)
class DayOnly:
    """Drop on a day header; keeps the block's time of day."""
    day_index: int


def resolve_drop(starts_at, ends_at, week_start, target):
    """
    Return the (starts_at, ends_at) pair after dropping a block on `target`.

    `week_start` is any moment in the displayed week. The block keeps its
    duration whatever the target.
    """
    if isinstance(target, TimeSlot):
        hour, minute = target.hour, 0
    elif isinstance(target, DayOnly):
        hour, minute = starts_at.hour, starts_at.minute
    else:
        raise TypeError(f"Unsupported drop target: {target!r}")
    duration = ends_at - starts_at
    day = add_days(start_of_week(week_start), target.day_index)
    new_start = at_time(day, hour, minute)
    return new_start, new_start + duration


def resolve_direct_edit(starts_at, ends_at):
    """Times typed into the edit form; the end never lands at or before the start."""
    return starts_at, normalized_end(starts_at, ends_at)


def apply_times(entry, starts_at, ends_at):
    entry.starts_at = starts_at
    entry.ends_at = ends_at
    return entry
