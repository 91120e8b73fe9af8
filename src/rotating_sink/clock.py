"""
Time source and calendar-day boundaries for rotation decisions
"""

import time
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional


class Clock:
    """
    Supplies the current time in UTC or local time.

    ``time_func`` returns epoch seconds and can be replaced to make
    day-boundary logic deterministic.
    """

    def __init__(self, local: bool = False, time_func: Callable[[], float] = time.time):
        self.local = local
        self.time_func = time_func

    def timestamp(self) -> float:
        return self.time_func()

    def now(self) -> datetime:
        """Current instant as an aware datetime in the configured zone"""
        return self.from_timestamp(self.time_func())

    def from_timestamp(self, ts: float) -> datetime:
        if self.local:
            return datetime.fromtimestamp(ts).astimezone()
        return datetime.fromtimestamp(ts, tz=timezone.utc)

    def localize(self, naive: datetime) -> datetime:
        """Attach the configured zone to a naive datetime"""
        if self.local:
            # astimezone() on a naive value treats it as system local time
            return naive.astimezone()
        return naive.replace(tzinfo=timezone.utc)

    def _last_second(self, day: date) -> datetime:
        return self.localize(datetime(day.year, day.month, day.day, 23, 59, 59))

    def end_of_day(self, dt: Optional[datetime] = None) -> datetime:
        """23:59:59 of the calendar day containing ``dt`` (default: now)"""
        dt = dt or self.now()
        return self._last_second(dt.date())

    def end_of_previous_day(self, dt: Optional[datetime] = None) -> datetime:
        """23:59:59 of the calendar day before ``dt`` (default: now)"""
        dt = dt or self.now()
        return self._last_second(dt.date() - timedelta(days=1))
