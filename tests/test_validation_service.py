from datetime import date, datetime

from services.validation_service import (
    normalize_frequency,
    normalize_importance,
    normalize_status,
    parse_bool,
    parse_day_value,
    parse_days_of_week,
    parse_month_value,
    parse_timestamp,
)


def test_parse_bool_accepts_common_truthy_strings():
    assert parse_bool("yes")
    assert parse_bool("On")
    assert not parse_bool("nope")
    assert parse_bool(None, default=True)


def test_normalize_choices_fall_back_to_default():
    assert normalize_importance(" high ") == 'HIGH'
    assert normalize_importance("urgent") == 'MEDIUM'
    assert normalize_status("in_progress") == 'IN_PROGRESS'
    assert normalize_status("blocked", default=None) is None
    assert normalize_frequency(None) == 'DAILY'


def test_parse_timestamp_drops_zone_and_keeps_wall_time():
    assert parse_timestamp("2024-03-04T09:30") == datetime(2024, 3, 4, 9, 30)
    assert parse_timestamp("2024-03-04T09:30:00Z") == datetime(2024, 3, 4, 9, 30)
    assert parse_timestamp("2024-03-04T09:30:00+02:00") == datetime(2024, 3, 4, 9, 30)
    assert parse_timestamp("tomorrow") is None
    assert parse_timestamp("") is None


def test_parse_days_of_week_filters_out_of_range_values():
    assert parse_days_of_week([3, "1", 9, "x", 1]) == [1, 3]
    assert parse_days_of_week("0,6") == [0, 6]
    assert parse_days_of_week(None) == []


def test_parse_day_and_month_values():
    assert parse_day_value("2024-03-03") == date(2024, 3, 3)
    assert parse_day_value("03/03/2024") is None
    assert parse_month_value("2024-02") == datetime(2024, 2, 1)
    assert parse_month_value("2024-02-17") == datetime(2024, 2, 1)
    assert parse_month_value("Feb") is None
