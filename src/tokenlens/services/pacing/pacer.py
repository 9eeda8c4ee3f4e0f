"""Per-category request pacer for upstream API calls.

Each request category (kline, holders, ...) owns an independent pacing
counter and a minimum interval between calls. A paced operation that fails
with a rate-limit signal is retried exactly once after a fixed backoff.

Example:
    ```python
    pacer = Pacer()
    holders = await pacer.schedule(RequestCategory.HOLDERS, fetch_holders)
    ```
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

import structlog
from tenacity import RetryCallState

from tokenlens.constants.ave import DEFAULT_DELAY_MS, ENDPOINT_DELAYS_MS
from tokenlens.services.pacing.retry import RetryPolicy

log = structlog.get_logger(__name__)

T = TypeVar("T")


class RequestCategory(str, Enum):
    """Upstream data kinds, each with its own pacing budget."""

    KLINE = "kline"
    TOKEN_DETAILS = "tokenDetails"
    TRANSACTIONS = "transactions"
    HOLDERS = "holders"
    RISK = "risk"
    SEARCH = "search"


@dataclass
class PacingCounter:
    """Pacing state for one category.

    Attributes:
        last_request_at: Monotonic timestamp of the last call start, None
            until the first call.
        count: Number of calls started (retries excluded).
    """

    last_request_at: float | None = None
    count: int = 0


class Pacer:
    """Minimum-interval throttle with retry-once on rate limiting.

    Counters live on the instance, so every service object (and every test)
    gets its own pacing state. Counter read-modify-write happens under a
    per-category asyncio.Lock; the lock is released before the operation
    runs, so only call start times are serialized.
    """

    def __init__(
        self,
        delays_ms: dict[str, int] | None = None,
        default_delay_ms: int = DEFAULT_DELAY_MS,
        retry_policy: RetryPolicy | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize pacer.

        Args:
            delays_ms: Minimum interval per category in milliseconds.
            default_delay_ms: Interval for categories missing from delays_ms.
            retry_policy: Rate limit classification and backoff.
            clock: Monotonic clock in seconds.
        """
        self.delays_ms = dict(ENDPOINT_DELAYS_MS if delays_ms is None else delays_ms)
        self.default_delay_ms = default_delay_ms
        self.retry_policy = retry_policy or RetryPolicy()
        self._clock = clock
        self._counters: dict[str, PacingCounter] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    @staticmethod
    def _key(category: RequestCategory | str) -> str:
        return category.value if isinstance(category, RequestCategory) else str(category)

    def min_delay_ms(self, category: RequestCategory | str) -> int:
        """Return the configured minimum interval for a category."""
        return self.delays_ms.get(self._key(category), self.default_delay_ms)

    def counter(self, category: RequestCategory | str) -> PacingCounter:
        """Return (creating if needed) the counter for a category."""
        key = self._key(category)
        if key not in self._counters:
            self._counters[key] = PacingCounter()
        return self._counters[key]

    def _lock(self, key: str) -> asyncio.Lock:
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    async def acquire(
        self,
        category: RequestCategory | str,
        min_delay_ms: int | None = None,
    ) -> None:
        """Wait until the category's minimum interval has elapsed, then mark a start.

        Args:
            category: Request category.
            min_delay_ms: Override of the category's default interval.
        """
        key = self._key(category)
        delay = (self.min_delay_ms(key) if min_delay_ms is None else min_delay_ms) / 1000.0
        counter = self.counter(key)

        async with self._lock(key):
            if counter.last_request_at is not None:
                elapsed = self._clock() - counter.last_request_at
                if elapsed < delay:
                    wait = delay - elapsed
                    log.debug(
                        "pacer_throttling",
                        category=key,
                        elapsed_ms=int(elapsed * 1000),
                        sleep_ms=int(wait * 1000),
                    )
                    await asyncio.sleep(wait)

            counter.last_request_at = self._clock()
            counter.count += 1

    async def schedule(
        self,
        category: RequestCategory | str,
        operation: Callable[[], Awaitable[T]],
        min_delay_ms: int | None = None,
    ) -> T:
        """Run an operation once the category's pacing budget allows it.

        A rate-limit failure (429 or "rate limit" in the message) is retried
        exactly once after the policy backoff; any other failure, or a
        second failure, propagates.

        Args:
            category: Request category.
            operation: Zero-argument coroutine function to run.
            min_delay_ms: Override of the category's default interval.

        Returns:
            The operation's result.
        """
        key = self._key(category)
        await self.acquire(key, min_delay_ms)
        counter = self.counter(key)

        def _before_attempt(retry_state: RetryCallState) -> None:
            if retry_state.attempt_number > 1:
                counter.last_request_at = self._clock()
                log.warning(
                    "pacer_rate_limited_retry",
                    category=key,
                    attempt=retry_state.attempt_number,
                    backoff_seconds=self.retry_policy.rate_limit_backoff,
                )

        async for attempt in self.retry_policy.retrying(before=_before_attempt):
            with attempt:
                return await operation()

        raise AssertionError("retrying stopped without a result")

    def snapshot(self) -> dict[str, dict[str, float | int | None]]:
        """Return pacing counters per category for diagnostics."""
        return {
            key: {
                "count": counter.count,
                "min_delay_ms": self.min_delay_ms(key),
                "last_request_at": counter.last_request_at,
            }
            for key, counter in self._counters.items()
        }
