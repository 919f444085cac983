"""
Ordered fallback over unreliable data sources.

A fallback chain is a list of strategies tried in order. The first one whose
result passes the acceptance check wins. Domain errors raised by a strategy are
recorded and the chain moves on; anything else propagates. Nothing is retried.
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, Optional, TypeVar, Union

from app.domain.markets.errors import MarketDomainError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Strategy(Generic[T]):
    """A named way of obtaining a value."""

    name: str
    run: Callable[[], Awaitable[T]]


@dataclass(frozen=True)
class Attempt(Generic[T]):
    """Outcome of running a single strategy.

    Exactly one of `value` or `error` is meaningful: `error` is set when the
    strategy raised, otherwise `value` holds what it returned.
    """

    strategy: str
    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class Found(Generic[T]):
    """A strategy produced an acceptable value."""

    value: T
    strategy: str
    attempts: list[Attempt[T]] = field(default_factory=list)


@dataclass(frozen=True)
class Exhausted(Generic[T]):
    """No strategy produced an acceptable value."""

    attempts: list[Attempt[T]] = field(default_factory=list)

    @property
    def all_failed(self) -> bool:
        """True when every strategy raised instead of returning."""
        return all(attempt.failed for attempt in self.attempts)

    def first_returned(self) -> Optional[Attempt[T]]:
        """Return the first attempt that completed without raising."""
        for attempt in self.attempts:
            if not attempt.failed:
                return attempt
        return None


FallbackResult = Union[Found[T], Exhausted[T]]


async def first_success(
    strategies: list[Strategy[T]],
    accept: Callable[[T], bool],
) -> FallbackResult:
    """Run strategies in order until one returns an accepted value.

    Args:
        strategies: Strategies in priority order.
        accept: Predicate deciding whether a returned value is good enough.

    Returns:
        Found with the winning value, or Exhausted with every attempt.
    """
    attempts: list[Attempt[T]] = []
    for strategy in strategies:
        try:
            value = await strategy.run()
        except MarketDomainError as exc:
            logger.info("Strategy %s failed: %s", strategy.name, exc)
            attempts.append(Attempt(strategy=strategy.name, error=exc))
            continue

        attempts.append(Attempt(strategy=strategy.name, value=value))
        if accept(value):
            return Found(value=value, strategy=strategy.name, attempts=attempts)
        logger.info("Strategy %s returned insufficient data", strategy.name)

    return Exhausted(attempts=attempts)
