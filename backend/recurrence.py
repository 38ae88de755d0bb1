"""Expand a planner recurrence into the concrete blocks to persist."""

from dataclasses import dataclass
from typing import List, Optional

from backend.calendar_math import MIN_DURATION, add_days, clamp_duration
from backend.errors import InvalidRecurrenceError
from models import IMPORTANCE_MEDIUM

RECURRENCE_NONE = 'NONE'
RECURRENCE_DAILY = 'DAILY'
RECURRENCE_WEEKLY = 'WEEKLY'

# kind -> (number of occurrences, days between occurrences)
RECURRENCE_STEPS = {
    RECURRENCE_NONE: (1, 0),
    RECURRENCE_DAILY: (7, 1),
    RECURRENCE_WEEKLY: (4, 7),
}


@dataclass(frozen=True)
class Occurrence:
    starts_at: object
    ends_at: object

    @classmethod
    def from_bounds(cls, starts_at, ends_at=None):
        """Build an occurrence from user input; a missing end means one hour."""
        if ends_at is None:
            ends_at = starts_at + MIN_DURATION
        return cls(starts_at, ends_at)

    @property
    def duration(self):
        return self.ends_at - self.starts_at


@dataclass(frozen=True)
class RecurrencePolicy:
    kind: str
    base: Occurrence


@dataclass(frozen=True)
class PlannedBlock:
    """An occurrence paired with the metadata shared by the whole batch."""
    title: str
    starts_at: object
    ends_at: object
    importance: str = IMPORTANCE_MEDIUM
    description: Optional[str] = None


def occurrences_for(policy: RecurrencePolicy) -> List[Occurrence]:
    if policy.kind not in RECURRENCE_STEPS:
        raise InvalidRecurrenceError(policy.kind)
    count, step_days = RECURRENCE_STEPS[policy.kind]
    duration = clamp_duration(policy.base.duration)
    result = []
    for i in range(count):
        starts_at = add_days(policy.base.starts_at, i * step_days)
        result.append(Occurrence(starts_at, starts_at + duration))
    return result


def expand(policy, title, importance=IMPORTANCE_MEDIUM, description=None):
    """Return the ordered blocks for a recurrence; none of them are to-do mirrors."""
    return [
        PlannedBlock(
            title=title,
            starts_at=occ.starts_at,
            ends_at=occ.ends_at,
            importance=importance,
            description=description,
        )
        for occ in occurrences_for(policy)
    ]
