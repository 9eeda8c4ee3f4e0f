"""Token data API routes proxying Ave.ai.

Token routes degrade instead of failing: when upstream is exhausted and no
cached value exists they answer 200 with an empty payload (holders,
transactions, risk) or synthetic candles flagged ``is_mock_data`` (klines).
Search and token details surface upstream failures as error statuses.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from tokenlens.api.dependencies import MarketServiceDep
from tokenlens.constants.ave import (
    DEFAULT_KLINE_INTERVAL,
    DEFAULT_KLINE_LIMIT,
    DEFAULT_TRANSACTION_LIMIT,
)
from tokenlens.core.exceptions import (
    ConfigurationError,
    ExternalServiceError,
    TokenLensError,
    UpstreamConnectionError,
    UpstreamTimeoutError,
    ValidationError,
)
from tokenlens.services.ave.mock_klines import generate_mock_klines

log = structlog.get_logger(__name__)

router = APIRouter(tags=["tokens"])

MISSING_TOKEN_PARAMS = "Missing required parameters: address and chain"

# Upstream statuses the search route passes through unchanged
_SEARCH_PASSTHROUGH_MESSAGES = {
    400: "Invalid search request",
    403: "Upstream API rejected the API key",
    429: "Upstream rate limit exceeded, try again later",
}


def _error_response(status_code: int, error: str, message: str | None = None) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "error": error}
    if message is not None:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content)


def _require_token_params(address: str | None, chain: str | None) -> None:
    if not address or not chain:
        raise ValidationError(MISSING_TOKEN_PARAMS)


def _root_cause(error: Exception) -> Exception:
    last_error = getattr(error, "last_error", None)
    return last_error if isinstance(last_error, Exception) else error


def _upstream_failure_status(error: Exception) -> tuple[int, str]:
    """Map an upstream failure to (status, error label)."""
    cause = _root_cause(error)
    if isinstance(cause, UpstreamTimeoutError):
        return 504, "Upstream request timed out"
    if isinstance(cause, UpstreamConnectionError):
        return 502, "Could not reach upstream"
    return 500, "Upstream request failed"


@router.get("/search-tokens")
async def search_tokens(
    service: MarketServiceDep,
    keyword: str | None = None,
    chain: str | None = None,
) -> Any:
    """Search tokens by keyword, optionally filtered by chain."""
    if not keyword:
        raise ValidationError("Missing required parameter: keyword")

    try:
        tokens = await service.search_tokens(keyword, chain)
    except ConfigurationError as e:
        log.error("search_not_configured", error=str(e))
        return _error_response(500, "Upstream API key is not configured", str(e))
    except ExternalServiceError as e:
        status_code = getattr(_root_cause(e), "status_code", None)
        if status_code in _SEARCH_PASSTHROUGH_MESSAGES:
            error = _SEARCH_PASSTHROUGH_MESSAGES[status_code]
        else:
            status_code, error = _upstream_failure_status(e)
        log.warning("search_failed", keyword=keyword, status_code=status_code, error=str(e))
        return _error_response(status_code, error, str(e))

    payload: dict[str, Any] = {
        "success": True,
        "tokens": [token.model_dump() for token in tokens],
        "count": len(tokens),
        "keyword": keyword,
        "chain": chain or "all",
    }
    if not tokens:
        payload["message"] = "No tokens found matching your search"
    return payload


@router.get("/token-details")
async def token_details(
    service: MarketServiceDep,
    address: str | None = None,
    chain: str | None = None,
) -> Any:
    """Get token details."""
    _require_token_params(address, chain)

    try:
        details = await service.get_token_details(address, chain)
    except TokenLensError as e:
        status_code, error = _upstream_failure_status(e)
        log.warning("token_details_failed", address=address, chain=chain, error=str(e))
        return _error_response(status_code, error, str(e))

    return details.model_dump(by_alias=True)


@router.get("/token-kline")
async def token_kline(
    service: MarketServiceDep,
    address: str | None = None,
    chain: str | None = None,
    interval: str = DEFAULT_KLINE_INTERVAL,
    limit: int = Query(default=DEFAULT_KLINE_LIMIT, ge=1),
) -> Any:
    """Get candles; falls back to synthetic candles when upstream is down."""
    _require_token_params(address, chain)

    try:
        klines = await service.get_klines(address, chain, interval, limit)
    except TokenLensError as e:
        log.warning(
            "kline_serving_mock_data",
            address=address,
            chain=chain,
            interval=interval,
            error=str(e),
        )
        mock = generate_mock_klines(interval, limit)
        return {
            "success": True,
            "klines": [point.model_dump() for point in mock],
            "is_mock_data": True,
            "error_info": str(e),
        }

    return {"success": True, "klines": [point.model_dump() for point in klines]}


@router.get("/token-holders")
async def token_holders(
    service: MarketServiceDep,
    address: str | None = None,
    chain: str | None = None,
) -> Any:
    """Get the top holders of a token."""
    _require_token_params(address, chain)

    try:
        holders = await service.get_holders(address, chain)
    except TokenLensError as e:
        log.warning("holders_unavailable", address=address, chain=chain, error=str(e))
        holders = []

    return {"success": True, "holders": [holder.model_dump() for holder in holders]}


@router.get("/token-transactions")
async def token_transactions(
    service: MarketServiceDep,
    address: str | None = None,
    chain: str | None = None,
    limit: int = Query(default=DEFAULT_TRANSACTION_LIMIT, ge=1),
    to_time: str | None = None,
) -> Any:
    """Get recent swaps of a token."""
    _require_token_params(address, chain)

    try:
        transactions = await service.get_transactions(address, chain, limit, to_time)
    except TokenLensError as e:
        log.warning("transactions_unavailable", address=address, chain=chain, error=str(e))
        transactions = []

    return {"success": True, "transactions": [tx.model_dump() for tx in transactions]}


@router.get("/token-risk")
async def token_risk(
    service: MarketServiceDep,
    address: str | None = None,
    chain: str | None = None,
) -> Any:
    """Get the contract risk report of a token."""
    _require_token_params(address, chain)

    try:
        report = await service.get_risk_report(address, chain)
    except TokenLensError as e:
        log.warning("risk_unavailable", address=address, chain=chain, error=str(e))
        return {"success": True, "risk": {}}

    return {"success": True, "risk": report.model_dump()}
