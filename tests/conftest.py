"""
Shared pytest configuration.

Settings are read once at import time, so the test environment is set
before any `app` module is imported: an in-memory article store, dummy
provider keys and inbound rate limiting off.
"""

import asyncio
import os
import time

os.environ.update(
    {
        "DATABASE_URL": "sqlite://",
        "FMP_API_KEY": "test-fmp-key",
        "FINNHUB_API_KEY": "test-finnhub-key",
        "NEWS_API_KEY": "test-news-key",
        "FRED_API_KEY": "test-fred-key",
        "TWELVE_API_KEY": "test-twelve-key",
        "RATE_LIMIT_ENABLED": "false",
        "LOG_LEVEL": "WARNING",
    }
)

import pytest  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402

from app.infrastructure.markets.database import build_engine, create_schema  # noqa: E402


class FakeClock:
    """Manual clock whose sleep advances time instead of waiting."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def engine() -> Engine:
    """A fresh in-memory article store."""
    db = build_engine("sqlite://")
    create_schema(db)
    yield db
    db.dispose()


@pytest.fixture
def watch_loop():
    """Await a coroutine while a 10 ms ticker measures event loop stalls.

    Returns the coroutine's result and the longest gap between ticks.
    """

    async def watch(coro):
        gaps: list[float] = []
        done = asyncio.Event()

        async def ticker() -> None:
            last = time.perf_counter()
            while not done.is_set():
                await asyncio.sleep(0.01)
                now = time.perf_counter()
                gaps.append(now - last)
                last = now

        task = asyncio.create_task(ticker())
        await asyncio.sleep(0.02)
        try:
            result = await coro
        finally:
            done.set()
            await task
        return result, max(gaps)

    return watch
