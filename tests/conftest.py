"""Pytest configuration for tourcore tests."""

from datetime import datetime, timezone

import pytest


class FakeClock:
    """Manually advanced monotonic clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock to drive cache expiry."""
    return FakeClock()


@pytest.fixture
def now() -> datetime:
    """Fixed reconciliation time."""
    return datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

