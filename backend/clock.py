from datetime import datetime

import pytz

DEFAULT_TIMEZONE = 'America/New_York'


class SystemClock:
    """Wall-clock time in the configured zone, returned as naive local time."""

    def __init__(self, timezone_name=DEFAULT_TIMEZONE):
        self.tz = pytz.timezone(timezone_name)

    def now(self):
        return datetime.now(self.tz).replace(tzinfo=None)

    def today(self):
        return self.now().date()


class FixedClock:
    """Clock pinned to a given instant; used by tests and replays."""

    def __init__(self, instant):
        self.instant = instant

    def now(self):
        return self.instant

    def today(self):
        return self.instant.date()

    def set(self, instant):
        self.instant = instant


def get_clock():
    from flask import current_app

    clock = current_app.config.get('CLOCK')
    if clock is None:
        clock = SystemClock(current_app.config.get('DEFAULT_TIMEZONE', DEFAULT_TIMEZONE))
        current_app.config['CLOCK'] = clock
    return clock
