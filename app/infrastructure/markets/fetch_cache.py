"""
Fetch cache and request throttle for a rate-limited upstream.

Wraps an httpx.AsyncClient so that GET requests to one provider are:
- served from an in-memory cache while the entry is fresh (5 minutes)
- spaced at least MIN_REQUEST_INTERVAL apart (cooperative sleep, not a queue)
- retried exactly once after a pause when the upstream answers HTTP 429
- de-duplicated when several callers miss the cache for the same key

The throttle is keyed by provider name, so every endpoint of a provider
shares one spacing budget. Entries are never evicted automatically.
"""

import asyncio
import json
import logging
import time
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

import httpx

from app.domain.markets.entities import CacheEntry

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DURATION = 5 * 60.0
DEFAULT_MIN_REQUEST_INTERVAL = 1.0
DEFAULT_RETRY_DELAY = 5.0
HTTP_TOO_MANY_REQUESTS = 429

ParamValue = Union[str, int, float]
Params = Mapping[str, ParamValue]
Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


def cache_key(url: str, params: Optional[Params]) -> str:
    """Build the cache key: URL plus compact JSON of the params.

    Params keep their insertion order, so the same mapping built in a
    different order is a different key.
    """
    return f"{url}-{json.dumps(dict(params or {}), separators=(',', ':'))}"


class ResponseCache:
    """Time-bounded in-memory store of upstream payloads."""

    def __init__(self, duration: float, clock: Clock) -> None:
        self._duration = duration
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get_fresh(self, key: str) -> Optional[CacheEntry]:
        """Return the entry if it is younger than the cache duration."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp < self._duration:
            return entry
        return None

    def store(self, key: str, data: Any) -> None:
        self._entries[key] = CacheEntry(data=data, timestamp=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class RequestThrottle:
    """Keeps requests to a provider at least `min_interval` seconds apart.

    Concurrent callers may all observe the same stale timestamp and proceed
    together; spacing is only approximate under concurrent load.
    """

    def __init__(self, min_interval: float, clock: Clock, sleep: Sleep) -> None:
        self._min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_request: dict[str, float] = {}

    async def wait(self, provider: str) -> float:
        """Sleep out the remainder of the interval. Returns the seconds waited."""
        last = self._last_request.get(provider)
        if last is None:
            return 0.0
        elapsed = self._clock() - last
        if elapsed >= self._min_interval:
            return 0.0
        delay = self._min_interval - elapsed
        logger.debug("Rate limiting %s: waiting %.3fs", provider, delay)
        await self._sleep(delay)
        return delay

    def mark(self, provider: str) -> None:
        """Record that a request to the provider is being dispatched now."""
        self._last_request[provider] = self._clock()

    def last_request(self, provider: str) -> Optional[float]:
        return self._last_request.get(provider)

    def clear(self) -> None:
        self._last_request.clear()


class FetchCache:
    """Cached, throttled JSON GETs against a single upstream provider.

    Construct one per provider and share it for the lifetime of the process.
    The clock and sleep functions are injectable so tests can run without
    real delays.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        provider: str = "fmp",
        cache_duration: float = DEFAULT_CACHE_DURATION,
        min_request_interval: float = DEFAULT_MIN_REQUEST_INTERVAL,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._client = client
        self._provider = provider
        self._retry_delay = retry_delay
        self._sleep = sleep
        self._cache = ResponseCache(cache_duration, clock)
        self._throttle = RequestThrottle(min_request_interval, clock, sleep)
        self._in_flight: dict[str, asyncio.Future] = {}

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def throttle(self) -> RequestThrottle:
        return self._throttle

    def is_fresh(self, url: str, params: Optional[Params] = None) -> bool:
        """Return True if request(url, params) would be served from cache."""
        return self._cache.get_fresh(cache_key(url, params)) is not None

    def clear(self) -> None:
        """Drop every cached entry and the throttle state."""
        self._cache.clear()
        self._throttle.clear()

    async def request(self, url: str, params: Optional[Params] = None) -> Any:
        """GET a JSON payload, honoring the cache, spacing and 429 policy.

        Args:
            url: Absolute upstream URL.
            params: Flat query parameters (strings or numbers).

        Returns:
            The decoded JSON payload.

        Raises:
            httpx.HTTPStatusError: For non-2xx answers other than a single 429,
                or when the retry after a 429 fails too.
            httpx.RequestError: For network failures.
        """
        key = cache_key(url, params)
        entry = self._cache.get_fresh(key)
        if entry is not None:
            logger.debug("Cache HIT: %s", url)
            return entry.data

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch(key, url, params))
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
        else:
            logger.debug("Joining in-flight request: %s", url)
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Future) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Mark the failure as retrieved even when every waiter was cancelled.
        if not task.cancelled():
            task.exception()

    async def _fetch(self, key: str, url: str, params: Optional[Params]) -> Any:
        await self._throttle.wait(self._provider)
        self._throttle.mark(self._provider)
        try:
            payload = await self._get(url, params)
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code != HTTP_TOO_MANY_REQUESTS:
                raise
            logger.warning(
                "%s rate limit hit for %s, retrying once in %.1fs",
                self._provider,
                url,
                self._retry_delay,
            )
            await self._sleep(self._retry_delay)
            self._throttle.mark(self._provider)
            payload = await self._get(url, params)

        self._cache.store(key, payload)
        logger.debug("Cache SET: %s", url)
        return payload

    async def _get(self, url: str, params: Optional[Params]) -> Any:
        response = await self._client.get(url, params=dict(params or {}))
        response.raise_for_status()
        return response.json()
