"""Ave.ai market data service.

Composes the request policy layer for every logical operation:

    cache (fresh hit returns immediately)
      -> pacer (per-category minimum interval, one retry on rate limit)
        -> multi-format fetcher (candidates in priority order)
          -> normalizer

On total failure a stale cache entry is served when one exists; otherwise
the typed error propagates to the caller, which picks the fallback payload.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import structlog

from tokenlens.config.settings import Settings
from tokenlens.constants.ave import CACHE_TTL_SECONDS, DEFAULT_CACHE_TTL_SECONDS
from tokenlens.core.exceptions import (
    ConfigurationError,
    ShapeMismatchError,
    UpstreamExhaustedError,
)
from tokenlens.models.token import (
    HolderEntry,
    KlinePoint,
    RiskReport,
    SearchToken,
    TokenDetails,
    TransactionEntry,
)
from tokenlens.services.ave import candidates
from tokenlens.services.ave.client import AveClient
from tokenlens.services.ave.fetcher import MultiFormatFetcher
from tokenlens.services.cache import StaleTolerantCache, make_cache_key
from tokenlens.services.pacing import Pacer, RequestCategory, RetryPolicy

logger = structlog.get_logger(__name__)


class AveMarketService:
    """Cached, paced access to Ave.ai token data.

    One instance owns all process state (pacing counters, cache map, HTTP
    client). The app builds it at startup; tests build their own.
    """

    def __init__(
        self,
        client: AveClient,
        pacer: Pacer,
        cache: StaleTolerantCache,
        fetcher: MultiFormatFetcher,
        ttls: dict[str, int] | None = None,
    ) -> None:
        """Initialize service.

        Args:
            client: Ave API client.
            pacer: Per-category request pacer.
            cache: Stale-tolerant cache for normalized results.
            fetcher: Multi-format fetcher bound to the same client.
            ttls: Cache TTL per category in seconds.
        """
        self.client = client
        self.pacer = pacer
        self.cache = cache
        self.fetcher = fetcher
        self.ttls = dict(CACHE_TTL_SECONDS if ttls is None else ttls)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AveMarketService":
        """Build a service and its collaborators from settings."""
        retry_policy = RetryPolicy(
            rate_limit_backoff=settings.rate_limit_backoff_seconds,
            candidate_pause=settings.candidate_rate_limit_pause_seconds,
        )
        client = AveClient.from_settings(settings)
        return cls(
            client=client,
            pacer=Pacer(retry_policy=retry_policy),
            cache=StaleTolerantCache(),
            fetcher=MultiFormatFetcher(
                client,
                retry_policy=retry_policy,
                timeout=settings.request_timeout_seconds,
            ),
        )

    @property
    def upstream_configured(self) -> bool:
        return self.client.api_key_configured

    def ttl_for(self, category: RequestCategory) -> int:
        return self.ttls.get(category.value, DEFAULT_CACHE_TTL_SECONDS)

    async def _load(
        self,
        category: RequestCategory,
        params: dict[str, Any],
        fetch: Callable[[], Awaitable[Any]],
    ) -> Any:
        key = make_cache_key(category.value, params)

        async def compute() -> Any:
            return await self.pacer.schedule(category, fetch)

        return await self.cache.get_or_compute(key, self.ttl_for(category), compute)

    def _first_match(
        self,
        operation: str,
        requests: Sequence[candidates.CandidateRequest],
    ) -> Callable[[], Awaitable[Any]]:
        async def fetch() -> Any:
            return await self.fetcher.fetch_first_match(operation, requests)

        return fetch

    async def search_tokens(self, keyword: str, chain: str | None = None) -> list[SearchToken]:
        """Search tokens by keyword.

        An upstream that answers but finds nothing yields an empty list.

        Raises:
            ConfigurationError: If no API key is configured.
            UpstreamExhaustedError: If the upstream could not be queried.
        """
        if not self.upstream_configured:
            raise ConfigurationError("AVE_API_KEY is not configured")

        requests = candidates.search_candidates(keyword, chain)

        async def fetch() -> list[SearchToken]:
            try:
                return await self.fetcher.fetch_first_match("search", requests)
            except UpstreamExhaustedError as e:
                if isinstance(e.last_error, ShapeMismatchError):
                    logger.info("search_no_results", keyword=keyword, chain=chain)
                    return []
                raise

        return await self._load(
            RequestCategory.SEARCH,
            {"keyword": keyword, "chain": chain},
            fetch,
        )

    async def get_token_details(self, address: str, chain: str) -> TokenDetails:
        requests = candidates.token_details_candidates(address, chain)
        return await self._load(
            RequestCategory.TOKEN_DETAILS,
            {"address": address, "chain": chain},
            self._first_match("token_details", requests),
        )

    async def get_klines(
        self,
        address: str,
        chain: str,
        interval: str,
        limit: int,
    ) -> list[KlinePoint]:
        requests = candidates.kline_candidates(address, chain, interval, limit)
        return await self._load(
            RequestCategory.KLINE,
            {"address": address, "chain": chain, "interval": interval, "limit": limit},
            self._first_match("klines", requests),
        )

    async def get_holders(self, address: str, chain: str) -> list[HolderEntry]:
        requests = candidates.holders_candidates(address, chain)
        return await self._load(
            RequestCategory.HOLDERS,
            {"address": address, "chain": chain},
            self._first_match("holders", requests),
        )

    async def get_transactions(
        self,
        address: str,
        chain: str,
        limit: int,
        to_time: str | None = None,
    ) -> list[TransactionEntry]:
        requests = candidates.transactions_candidates(address, chain, limit, to_time)
        return await self._load(
            RequestCategory.TRANSACTIONS,
            {"address": address, "chain": chain, "limit": limit, "to_time": to_time},
            self._first_match("transactions", requests),
        )

    async def get_risk_report(self, address: str, chain: str) -> RiskReport:
        requests = candidates.risk_candidates(address, chain)
        return await self._load(
            RequestCategory.RISK,
            {"address": address, "chain": chain},
            self._first_match("risk", requests),
        )

    def stats(self) -> dict[str, Any]:
        """Cache statistics and pacing counters for diagnostics."""
        return {"cache": self.cache.get_stats(), "pacing": self.pacer.snapshot()}

    async def close(self) -> None:
        """Close the upstream HTTP client."""
        await self.client.close()
