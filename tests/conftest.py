"""Shared pytest fixtures for the tubeten test suite.

No test reaches the network: the catalog is always a FakeCatalog or a
mocked googleapiclient resource, and the cache is an in-memory store with a
hand-driven clock.
"""

from __future__ import annotations

import random

import pytest

from tubeten.core.options import ServiceOptions
from tubeten.services.store import MemoryPoolStore


class ManualClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _no_ambient_credentials(monkeypatch):
    for name in ("YOUTUBE_API_KEY", "TUBETEN_YT_API_KEY", "YT_API_KEY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _fresh_library_services():
    import tubeten

    tubeten._services.clear()
    yield
    tubeten._services.clear()


@pytest.fixture
def options() -> ServiceOptions:
    return ServiceOptions(yt_api_key="test-key")


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def store(clock) -> MemoryPoolStore:
    return MemoryPoolStore(clock=clock)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
