"""
Shared fixtures for availability tests.
"""

import time
from datetime import datetime, timedelta, timezone

import pytest


class FixedOffsetResolver:
    """Offset resolver returning the same offset for every instant and zone."""

    def __init__(self, offset: timedelta):
        self.offset = offset
        self.calls = []

    def utc_offset(self, instant: datetime, tz: str) -> timedelta:
        self.calls.append((instant, tz))
        return self.offset


class TransitionResolver:
    """Offset resolver with a single transition: `before` until `at`, then `after`."""

    def __init__(self, at: datetime, before: timedelta, after: timedelta):
        self.at = at
        self.before = before
        self.after = after

    def utc_offset(self, instant: datetime, tz: str) -> timedelta:
        return self.before if instant < self.at else self.after


def utc(*args) -> datetime:
    """utc(2024, 1, 15, 9) -> aware datetime in UTC."""
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def fixed_resolver():
    """Factory for fixed-offset resolvers: fixed_resolver(hours=9)."""
    def factory(**kwargs):
        return FixedOffsetResolver(timedelta(**kwargs))
    return factory


@pytest.fixture
def local_tz(monkeypatch):
    """Switch the process local timezone: local_tz("Asia/Tokyo")."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset not available on this platform")

    def switch(name: str):
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield switch
    monkeypatch.undo()
    time.tzset()
