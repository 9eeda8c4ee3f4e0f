"""Shared pytest fixtures for tokenlens tests.

This module provides fixtures for:
- Test environment variables
- A fully wired market service with fast pacing and backoff
- Upstream payload samples

Usage:
    @pytest.mark.asyncio
    async def test_something(market_service, respx_mock):
        respx_mock.get(f"{AVE_TEST_BASE_URL}/contracts/0xabc-bsc").respond(json={...})
        report = await market_service.get_risk_report("0xabc", "bsc")
"""

import os
from collections.abc import AsyncGenerator, Generator
from typing import Any

import pytest

AVE_TEST_BASE_URL = "https://ave.test/v2"

# =============================================================================
# Environment Configuration
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """Set up test environment variables.

    Loads .env file first, then sets defaults for any missing variables.
    """
    from dotenv import load_dotenv

    original_env = os.environ.copy()

    # Load .env file if it exists (won't override existing env vars)
    load_dotenv()

    os.environ.setdefault("AVE_API_KEY", "test-api-key")
    os.environ.setdefault("AVE_BASE_URL", AVE_TEST_BASE_URL)

    yield

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Drop cached settings so each test sees its own environment."""
    from tokenlens.config.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def fast_retry_policy():
    """Retry policy with millisecond pauses."""
    from tokenlens.services.pacing import RetryPolicy

    return RetryPolicy(rate_limit_backoff=0.01, candidate_pause=0.01)


@pytest.fixture
def ave_client():
    """Ave client pointed at the test base URL."""
    from tokenlens.services.ave.client import AveClient

    return AveClient(base_url=AVE_TEST_BASE_URL, api_key="test-api-key", timeout=1.0)


@pytest.fixture
async def market_service(ave_client, fast_retry_policy) -> AsyncGenerator[Any, None]:
    """Market service with no pacing delay and fast backoff.

    Upstream calls must be mocked (respx_mock).
    """
    from tokenlens.services.ave.fetcher import MultiFormatFetcher
    from tokenlens.services.ave.service import AveMarketService
    from tokenlens.services.cache import StaleTolerantCache
    from tokenlens.services.pacing import Pacer

    service = AveMarketService(
        client=ave_client,
        pacer=Pacer(delays_ms={}, default_delay_ms=0, retry_policy=fast_retry_policy),
        cache=StaleTolerantCache(),
        fetcher=MultiFormatFetcher(ave_client, retry_policy=fast_retry_policy),
    )
    yield service
    await service.close()


# =============================================================================
# Upstream Payload Samples
# =============================================================================


@pytest.fixture
def sample_token_payload() -> dict[str, Any]:
    """Ave token object as returned inside token detail responses."""
    return {
        "token": "0xABC",
        "chain": "bsc",
        "symbol": "PEPE",
        "name": "Pepe",
        "logo_url": "https://logo.test/pepe.png",
        "current_price_usd": "0.0123",
        "price_change_1d": "1.5",
        "price_change_24h": "-2.25",
        "tx_volume_u_24h": "1000.5",
        "market_cap": "123456",
        "total": "1000000000",
        "holders": "4321",
        "appendix": '{"website": "https://pepe.test", "twitter": "@pepe", "telegram": "t.me/pepe"}',
        "created_at": 1700000000,
        "risk_score": "12",
        "risk_level": 1,
        "launch_at": 1690000000,
        "buy_tx": 10,
        "sell_tx": 4,
        "locked_percent": "0.5",
        "burn_amount": "100",
    }
