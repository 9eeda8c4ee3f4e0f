"""Stale-tolerant response cache."""

from tokenlens.services.cache.stale_cache import CacheEntry, StaleTolerantCache, make_cache_key

__all__ = ["CacheEntry", "StaleTolerantCache", "make_cache_key"]
