from datetime import datetime, timedelta

import pytest

from backend.calendar_math import day_of_week
from backend.errors import InvalidRecurrenceError
from backend.recurrence import Occurrence, RecurrencePolicy, expand, occurrences_for


def _policy(kind, start, end):
    return RecurrencePolicy(kind=kind, base=Occurrence(start, end))


def test_none_yields_single_occurrence():
    result = occurrences_for(_policy('NONE', datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 11)))
    assert result == [Occurrence(datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 11))]


def test_daily_yields_seven_consecutive_days():
    result = occurrences_for(_policy('DAILY', datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 10)))
    assert len(result) == 7
    assert [o.starts_at.day for o in result] == [4, 5, 6, 7, 8, 9, 10]


def test_weekly_yields_four_occurrences_on_the_same_weekday():
    base_start = datetime(2024, 3, 4, 18, 45)
    result = occurrences_for(_policy('WEEKLY', base_start, datetime(2024, 3, 4, 20)))
    assert len(result) == 4
    assert [o.starts_at for o in result] == [base_start + timedelta(days=7 * i) for i in range(4)]
    assert {day_of_week(o.starts_at) for o in result} == {day_of_week(base_start)}


@pytest.mark.parametrize("kind", ['NONE', 'DAILY', 'WEEKLY'])
def test_time_of_day_and_duration_are_invariant(kind):
    start = datetime(2024, 1, 29, 7, 20)
    result = occurrences_for(_policy(kind, start, start + timedelta(minutes=95)))
    for occ in result:
        assert (occ.starts_at.hour, occ.starts_at.minute) == (7, 20)
        assert occ.duration == timedelta(minutes=95)


@pytest.mark.parametrize("end_offset", [timedelta(0), timedelta(minutes=30), timedelta(hours=-1)])
def test_short_or_inverted_input_is_clamped_to_one_hour(end_offset):
    start = datetime(2024, 3, 4, 9)
    for occ in occurrences_for(_policy('DAILY', start, start + end_offset)):
        assert occ.ends_at - occ.starts_at == timedelta(hours=1)


def test_unknown_kind_is_rejected():
    with pytest.raises(InvalidRecurrenceError):
        occurrences_for(_policy('MONTHLY', datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 10)))


def test_missing_end_defaults_to_one_hour():
    occ = Occurrence.from_bounds(datetime(2024, 3, 4, 9))
    assert occ.ends_at == datetime(2024, 3, 4, 10)


def test_expand_carries_metadata_to_every_block():
    blocks = expand(
        _policy('WEEKLY', datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 9, 30)),
        title='Review',
        importance='HIGH',
        description='weekly review',
    )
    assert len(blocks) == 4
    assert {(b.title, b.importance, b.description) for b in blocks} == {('Review', 'HIGH', 'weekly review')}
    assert all(not hasattr(b, 'source_todo_id') for b in blocks)
