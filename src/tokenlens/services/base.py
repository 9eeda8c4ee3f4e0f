"""Base API client for upstream HTTP calls.

Makes single-attempt requests with an enforced timeout and translates
transport and status failures into typed exceptions. Retrying is left to the
callers' policy (Pacer / Multi-Format Fetcher) so one attempt here is one
attempt on the wire.
"""

from typing import Any

import httpx
import structlog

from tokenlens.core.exceptions import (
    RateLimitError,
    UpstreamConnectionError,
    UpstreamStatusError,
    UpstreamTimeoutError,
)

log = structlog.get_logger(__name__)


class BaseAPIClient:
    """Base API client with lazy httpx initialization and typed errors.

    Attributes:
        base_url: Base URL for all requests.
        service: Service name used in error messages.
        timeout: Default request timeout in seconds.
        headers: Default headers for all requests.

    Example:
        client = BaseAPIClient(
            base_url="https://api.example.com",
            service="example",
            headers={"X-API-KEY": "secret"},
        )
        response = await client.get("/endpoint")
        await client.close()
    """

    def __init__(
        self,
        base_url: str,
        service: str,
        timeout: float = 10.0,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize BaseAPIClient.

        Args:
            base_url: Base URL for all requests.
            service: Service name used in error messages.
            timeout: Default request timeout in seconds (default: 10).
            headers: Default headers for all requests.
        """
        self.base_url = base_url
        self.service = service
        self.timeout = timeout
        self.headers = headers or {}
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the httpx client (lazy initialization).

        Returns:
            The httpx AsyncClient instance.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
            )
            log.debug("httpx_client_created", base_url=self.base_url)
        return self._client

    async def close(self) -> None:
        """Close the httpx client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            log.debug("httpx_client_closed", base_url=self.base_url)

    async def _request(
        self,
        method: str,
        path: str,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a single HTTP request.

        Args:
            method: HTTP method.
            path: Request path (appended to base_url).
            timeout: Per-request timeout override in seconds.
            **kwargs: Additional arguments passed to httpx.request.

        Returns:
            httpx.Response with a 2xx status.

        Raises:
            UpstreamTimeoutError: If the request exceeded its timeout.
            UpstreamConnectionError: If the request could not be sent.
            RateLimitError: If the upstream answered 429.
            UpstreamStatusError: If the upstream answered any other non-2xx.
        """
        client = await self._get_client()
        if timeout is not None:
            kwargs["timeout"] = timeout

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            log.warning("request_timeout", method=method, path=path, error=str(e))
            raise UpstreamTimeoutError(
                service=self.service,
                message=f"{method} {path} timed out",
                status_code=504,
            ) from e
        except httpx.RequestError as e:
            log.warning("request_connection_error", method=method, path=path, error=str(e))
            raise UpstreamConnectionError(
                service=self.service,
                message=f"{method} {path} failed: {e}",
                status_code=502,
            ) from e

        if response.status_code == 429:
            log.warning("request_rate_limited", method=method, path=path)
            raise RateLimitError(service=self.service)

        if not response.is_success:
            log.warning(
                "request_status_error",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise UpstreamStatusError(
                service=self.service,
                message=f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
            )

        return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a GET request.

        Args:
            path: Request path.
            **kwargs: Additional arguments passed to httpx.

        Returns:
            httpx.Response on success.
        """
        return await self._request("GET", path, **kwargs)
