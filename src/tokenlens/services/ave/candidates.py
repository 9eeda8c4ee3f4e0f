"""Prioritized candidate requests per logical Ave.ai operation.

Each builder returns the URL variants known to serve an operation, most
likely first. A candidate pairs the request with a parser that turns the
decoded body into normalized records, or None when the body is not in a
shape the parser recognizes.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from tokenlens.constants.ave import DEFAULT_KLINE_INTERVAL_MINUTES, KLINE_INTERVAL_MINUTES
from tokenlens.models.token import (
    HolderEntry,
    KlinePoint,
    RiskReport,
    SearchToken,
    TokenDetails,
    TransactionEntry,
)
from tokenlens.services.ave import normalizer, shapes
from tokenlens.services.ave.shapes import Detected, Shape
from tokenlens.services.pacing.pacer import RequestCategory

Parser = Callable[[Any], Any | None]


@dataclass
class CandidateRequest:
    """One guess at an upstream URL and response shape.

    Attributes:
        description: Short label used in logs.
        path: Request path relative to the API base URL.
        params: Query parameters.
        parser: Maps a decoded body to a normalized payload or None.
    """

    description: str
    path: str
    parser: Parser
    params: dict[str, str] = field(default_factory=dict)


# =============================================================================
# Parsers
# =============================================================================


def _normalize_detected(
    kind: RequestCategory, detected: Detected, address: str = "", chain: str = ""
) -> Any | None:
    if detected.shape is Shape.UNKNOWN:
        return None
    return normalizer.normalize(kind, detected.payload, address=address, chain=chain)


def parse_token_details(body: Any, address: str, chain: str) -> TokenDetails | None:
    return _normalize_detected(
        RequestCategory.TOKEN_DETAILS,
        shapes.detect_token_details(body),
        address=address,
        chain=chain,
    )


def parse_holders(body: Any) -> list[HolderEntry] | None:
    return _normalize_detected(RequestCategory.HOLDERS, shapes.detect_holders(body))


def parse_transactions(body: Any, address: str) -> list[TransactionEntry] | None:
    return _normalize_detected(
        RequestCategory.TRANSACTIONS, shapes.detect_transactions(body), address=address
    )


def parse_legacy_transactions(body: Any, address: str) -> list[TransactionEntry] | None:
    return _normalize_detected(
        RequestCategory.TRANSACTIONS, shapes.detect_legacy_transactions(body), address=address
    )


def parse_risk(body: Any) -> RiskReport | None:
    return _normalize_detected(RequestCategory.RISK, shapes.detect_risk(body))


def parse_klines(body: Any) -> list[KlinePoint] | None:
    return _normalize_detected(RequestCategory.KLINE, shapes.detect_klines(body))


def parse_search(body: Any) -> list[SearchToken] | None:
    return _normalize_detected(RequestCategory.SEARCH, shapes.detect_search(body))


# =============================================================================
# Builders
# =============================================================================


def token_details_candidates(address: str, chain: str) -> list[CandidateRequest]:
    parser = partial(parse_token_details, address=address, chain=chain)
    return [
        CandidateRequest("token-chain path", f"/tokens/{address}-{chain}", parser),
        CandidateRequest(
            "query params", "/tokens", parser, params={"token": address, "chain": chain}
        ),
        CandidateRequest("chain-token path", f"/token/{chain}/{address}", parser),
    ]


def holders_candidates(address: str, chain: str) -> list[CandidateRequest]:
    return [
        CandidateRequest("top100", f"/tokens/top100/{address}-{chain}", parse_holders),
        CandidateRequest(
            "holders query",
            "/tokens/holders",
            parse_holders,
            params={"token": address, "chain": chain},
        ),
        CandidateRequest("chain holders path", f"/token/{chain}/holders/{address}", parse_holders),
    ]


def transactions_candidates(
    address: str,
    chain: str,
    limit: int,
    to_time: str | None = None,
) -> list[CandidateRequest]:
    """Build transaction candidates.

    The current endpoint is keyed by a pair id whose format has changed
    over time, so several id spellings are tried before the legacy
    endpoints.
    """
    addr = address.lower()
    chain_id = chain.lower()
    params = {"limit": str(limit)}
    if to_time:
        params["to_time"] = to_time

    parser = partial(parse_transactions, address=address)
    legacy_parser = partial(parse_legacy_transactions, address=address)
    legacy_params = {"token": address, "chain": chain, **params}

    pair_ids = [f"{addr}-{chain_id}", f"{addr}_fo-{chain_id}", addr, f"{chain_id}-{addr}"]
    candidates = [
        CandidateRequest(f"txs {pair_id}", f"/txs/{pair_id}", parser, params=dict(params))
        for pair_id in pair_ids
    ]
    candidates.append(
        CandidateRequest(
            "latest transactions",
            "/transactions/latest",
            legacy_parser,
            params=dict(legacy_params),
        )
    )
    candidates.append(
        CandidateRequest("token txs", "/tokens/txs", legacy_parser, params=dict(legacy_params))
    )
    return candidates


def risk_candidates(address: str, chain: str) -> list[CandidateRequest]:
    return [CandidateRequest("contract risk", f"/contracts/{address}-{chain}", parse_risk)]


def interval_minutes(interval: str) -> int:
    """Map an interval label ("1h", "1d", ...) to upstream minutes."""
    return KLINE_INTERVAL_MINUTES.get(interval, DEFAULT_KLINE_INTERVAL_MINUTES)


def kline_candidates(address: str, chain: str, interval: str, limit: int) -> list[CandidateRequest]:
    return [
        CandidateRequest(
            "token klines",
            f"/klines/token/{address}-{chain}",
            parse_klines,
            params={"interval": str(interval_minutes(interval)), "size": str(limit)},
        )
    ]


def search_candidates(keyword: str, chain: str | None = None) -> list[CandidateRequest]:
    params = {"keyword": keyword}
    if chain:
        params["chain"] = chain
    return [CandidateRequest("keyword search", "/tokens", parse_search, params=params)]
