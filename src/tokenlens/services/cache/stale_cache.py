"""In-memory TTL cache that serves stale values when a refresh fails."""

import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """A cached value.

    Attributes:
        value: The cached value.
        stored_at: Clock reading when the value was stored.
        error: Last refresh failure that caused this entry to be served stale.
    """

    value: T
    stored_at: float
    error: Exception | None = None

    def is_fresh(self, ttl_seconds: float, now: float) -> bool:
        return now - self.stored_at < ttl_seconds


def make_cache_key(category: str, params: Mapping[str, Any]) -> str:
    """Build a deterministic cache key from a category and request params.

    Params are sorted by name, None values dropped and address/chain
    lower-cased so equivalent requests share an entry.

    Example:
        make_cache_key("holders", {"chain": "BSC", "address": "0xAB"})
        # "holders:address=0xab&chain=bsc"
    """
    parts = []
    for name in sorted(params):
        value = params[name]
        if value is None:
            continue
        text = str(value)
        if name in ("address", "chain", "keyword"):
            text = text.lower()
        parts.append(f"{name}={text}")
    return f"{category}:{'&'.join(parts)}"


class StaleTolerantCache:
    """Process-lifetime key/value cache with stale-on-error fallback.

    Entries are never evicted; a successful refresh overwrites them. That is
    what lets an expired value still be served when upstream is failing.
    No lock is taken: the cache is only touched from the event loop and
    compute() runs without holding any shared state.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize cache.

        Args:
            clock: Monotonic clock in seconds.
        """
        self._clock = clock
        self._entries: dict[str, CacheEntry[Any]] = {}
        self._hits = 0
        self._misses = 0
        self._stale_hits = 0

    async def get_or_compute(
        self,
        key: str,
        ttl_seconds: float,
        compute: Callable[[], Awaitable[T]],
    ) -> T:
        """Return a fresh cached value or compute and store a new one.

        Args:
            key: Cache key.
            ttl_seconds: Freshness window for this key.
            compute: Zero-argument coroutine function producing the value.

        Returns:
            The fresh cached value, the newly computed value, or the stale
            value when compute fails and a prior entry exists.

        Raises:
            Exception: Whatever compute raised, when no prior entry exists.
        """
        entry = self._entries.get(key)
        if entry is not None and entry.is_fresh(ttl_seconds, self._clock()):
            self._hits += 1
            logger.debug("cache_hit", key=key)
            return entry.value

        self._misses += 1
        try:
            value = await compute()
        except Exception as e:
            if entry is None:
                raise
            entry.error = e
            self._stale_hits += 1
            logger.warning(
                "cache_serving_stale",
                key=key,
                age_seconds=round(self._clock() - entry.stored_at, 1),
                error=str(e),
            )
            return entry.value

        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())
        return value

    def peek(self, key: str) -> CacheEntry[Any] | None:
        """Return the entry for a key regardless of freshness."""
        return self._entries.get(key)

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            dict with cache stats
        """
        total = self._hits + self._misses
        hit_rate = self._hits / total if total > 0 else 0.0

        return {
            "size": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "stale_hits": self._stale_hits,
            "hit_rate": round(hit_rate, 4),
        }
