from __future__ import annotations

import pytest

from relaysearch.config import ClientConfig
from relaysearch.hosts import InMemoryHostHealthStore


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def health_store(clock: FakeClock) -> InMemoryHostHealthStore:
    return InMemoryHostHealthStore(
        ["r1", "r2", "r3"],
        ["w1", "w2"],
        retry_delay=60.0,
        clock=clock,
    )


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(
        application_id="APPID",
        api_key="secret-key",
        read_hosts=["h1", "h2"],
        write_hosts=["w1", "w2"],
        search_timeout=2.0,
        write_timeout=10.0,
    )
