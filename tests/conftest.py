"""
Pytest configuration and shared fixtures for circuit_breaker_middleware tests.
"""

import pytest

from circuit_breaker_middleware.storage.memory import MemoryStorageAdapter


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake clock starting at a fixed epoch time."""
    return FakeClock()


@pytest.fixture
def storage(clock: FakeClock) -> MemoryStorageAdapter:
    """Create a fresh memory storage adapter driven by the fake clock."""
    return MemoryStorageAdapter(clock=clock)


@pytest.fixture
def sample_uri() -> str:
    """Provide a sample request URI for tests."""
    return "http://example.com/api/orders?page=2"
