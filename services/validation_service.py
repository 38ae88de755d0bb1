from datetime import date, datetime

from models import (
    ALLOWED_FREQUENCIES,
    ALLOWED_HABIT_TYPES,
    ALLOWED_IMPORTANCES,
    ALLOWED_STATUSES,
    FREQUENCY_DAILY,
    HABIT_TYPE_YES_NO,
    IMPORTANCE_MEDIUM,
    STATUS_TODO,
)


def parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ["1", "true", "yes", "on"]


def normalize_choice(raw, allowed, default):
    value = str(raw or "").strip().upper()
    return value if value in allowed else default


def normalize_importance(raw, default=IMPORTANCE_MEDIUM):
    return normalize_choice(raw, ALLOWED_IMPORTANCES, default)


def normalize_status(raw, default=STATUS_TODO):
    return normalize_choice(raw, ALLOWED_STATUSES, default)


def normalize_frequency(raw, default=FREQUENCY_DAILY):
    return normalize_choice(raw, ALLOWED_FREQUENCIES, default)


def normalize_habit_type(raw, default=HABIT_TYPE_YES_NO):
    return normalize_choice(raw, ALLOWED_HABIT_TYPES, default)


def parse_timestamp(raw):
    """Parse an ISO-8601 timestamp into a naive local datetime; None on failure."""
    if not raw:
        return None
    if isinstance(raw, datetime):
        return raw.replace(tzinfo=None)
    value = str(raw).strip()
    if value.endswith("Z"):
        value = value[:-1]
    try:
        return datetime.fromisoformat(value).replace(tzinfo=None)
    except (TypeError, ValueError):
        return None


def parse_days_of_week(raw):
    """Sunday-based weekday numbers (0-6); anything else is dropped."""
    if raw is None:
        return []
    if isinstance(raw, list):
        values = raw
    else:
        values = str(raw).split(",")
    days = []
    for val in values:
        try:
            day = int(val)
        except (TypeError, ValueError):
            continue
        if 0 <= day <= 6:
            days.append(day)
    return sorted(set(days))


def parse_day_value(raw):
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    try:
        return datetime.strptime(str(raw), "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return None


def parse_month_value(raw):
    """Accept 'YYYY-MM' or 'YYYY-MM-DD'; returns the first day of that month."""
    if not raw:
        return None
    value = str(raw).strip()
    for fmt in ("%Y-%m", "%Y-%m-%d"):
        try:
            return datetime.strptime(value, fmt).replace(day=1)
        except ValueError:
            continue
    return None


def parse_int(raw, default=None):
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default
