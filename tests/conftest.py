"""Shared test fixtures."""

from __future__ import annotations

import pytest

from chatrelay.api.pubsub import MessageBus
from chatrelay.config import Config
from chatrelay.ratelimit import RateLimiter


class FakeClock:
    """Manually advanced stand-in for ``time.monotonic``."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def bus() -> MessageBus:
    """Provide a fresh bus with the default queue size."""
    return MessageBus()


@pytest.fixture
def limiter(clock: FakeClock) -> RateLimiter:
    """Provide a rate limiter driven by the fake clock."""
    return RateLimiter(min_interval=1.0, clock=clock)


@pytest.fixture
def config() -> Config:
    """Config with a long keepalive so streams stay quiet unless told otherwise."""
    return Config(keepalive_interval=60.0)
