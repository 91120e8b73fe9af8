"""
Shared helpers for rotating sink tests
"""

import threading
from datetime import datetime, timezone

import pytest

from rotating_sink import Clock

START = datetime(2024, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


class ManualTime:
    """Time source that only moves when told to"""

    def __init__(self, start: datetime = START):
        self.now = start.timestamp()

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TickingTime:
    """Time source that moves one second forward on every call"""

    def __init__(self, start: datetime = START):
        self.now = start.timestamp()
        self.lock = threading.Lock()

    def __call__(self) -> float:
        with self.lock:
            current = self.now
            self.now += 1
            return current


@pytest.fixture
def manual_time():
    return ManualTime()


@pytest.fixture
def manual_clock(manual_time):
    return Clock(local=False, time_func=manual_time)


@pytest.fixture
def ticking_clock():
    return Clock(local=False, time_func=TickingTime())
