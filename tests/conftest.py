"""Pytest configuration and fixtures shared across all test modules.

Environment defaults are set before any import that might build settings, so
tests never pick up a developer's .env file values for the limiter.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("LOG_FORMAT", "plain")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("APP_MOCK_AUTH_ENABLED", "true")

import pytest

from app.adapters.rate_limit.base import RateLimitOptions
from app.adapters.rate_limit.in_memory import InMemoryAttemptLimiter


class FakeClock:
    """Deterministic millisecond clock used to test expiry logic."""

    def __init__(self, start: int = 1_000_000) -> None:
        self.current = start

    def __call__(self) -> int:
        return self.current

    def advance(self, ms: int) -> None:
        self.current += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock: FakeClock):
    """Limiter from the reference scenario: 3 attempts per 1s, 5s lockout."""
    options = RateLimitOptions(window_ms=1000, max_attempts=3, block_duration_ms=5000)
    with InMemoryAttemptLimiter(options, clock=clock, auto_cleanup=False) as instance:
        yield instance
