"""Ave.ai API client.

API base: https://prod.ave-api.com/v2 (X-API-KEY header auth)

The upstream has accumulated several URL and response shapes per endpoint;
this client only knows how to send one request and decode its JSON. Which
URLs to try, and how to read them, lives in candidates.py.
"""

from typing import Any

import structlog

from tokenlens.config.settings import Settings
from tokenlens.constants.ave import (
    AVE_API_KEY_HEADER,
    AVE_SERVICE_NAME,
    DEFAULT_TIMEOUT_SECONDS,
)
from tokenlens.core.exceptions import ShapeMismatchError
from tokenlens.services.base import BaseAPIClient

log = structlog.get_logger(__name__)


class AveClient(BaseAPIClient):
    """Ave.ai market data API client.

    Example:
        client = AveClient.from_settings(get_settings())
        try:
            body = await client.get_json("/tokens", params={"keyword": "pepe"})
        finally:
            await client.close()
    """

    def __init__(
        self, base_url: str, api_key: str, timeout: float = DEFAULT_TIMEOUT_SECONDS
    ) -> None:
        """Initialize Ave client.

        Args:
            base_url: API base URL.
            api_key: API key sent in the X-API-KEY header.
            timeout: Default per-request timeout in seconds.
        """
        super().__init__(
            base_url=base_url,
            service=AVE_SERVICE_NAME,
            timeout=timeout,
            headers={"Accept": "*/*", AVE_API_KEY_HEADER: api_key},
        )
        self.api_key_configured = bool(api_key)
        log.info("ave_client_initialized", base_url=base_url)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AveClient":
        """Build a client from application settings."""
        return cls(
            base_url=settings.ave_base_url,
            api_key=settings.ave_api_key.get_secret_value(),
            timeout=settings.request_timeout_seconds,
        )

    async def get_json(
        self,
        path: str,
        params: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """GET a path and decode the JSON body.

        Args:
            path: Request path relative to the base URL.
            params: Query parameters.
            timeout: Per-request timeout override in seconds.

        Returns:
            Decoded JSON body.

        Raises:
            ShapeMismatchError: If the 2xx body is not valid JSON.
            ExternalServiceError: Subclasses raised by the base client.
        """
        response = await self.get(path, params=params, timeout=timeout)
        try:
            return response.json()
        except ValueError as e:
            raise ShapeMismatchError(
                service=self.service,
                message=f"GET {path} returned invalid JSON",
            ) from e
