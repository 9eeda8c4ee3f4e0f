"""Map upstream payloads into normalized token records.

All functions here are pure and never raise on malformed input: unknown or
unparseable fields fall back to defaults. Numeric coercion follows the
upstream's JavaScript heritage, so "12.5abc" reads as 12.5 and anything
unparseable reads as 0.
"""

import json
import math
import re
from typing import Any

from tokenlens.constants.ave import CREATOR_PERCENT_WARNING, HIGH_RISK_SCORE
from tokenlens.models.token import (
    HolderEntry,
    KlinePoint,
    RiskReport,
    SearchToken,
    TokenDetails,
    TransactionEntry,
)
from tokenlens.services.pacing.pacer import RequestCategory

_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")

_QUANTITY_FIELDS = ("quantity", "balance", "amount_cur", "amount")

# (flag field, reason) checked in order when upstream gives no risk_reasons
_RISK_FLAG_REASONS: tuple[tuple[str, str], ...] = (
    ("is_honeypot", "Token is a honeypot and may not be sellable"),
    ("hidden_owner", "Token has a hidden owner"),
    ("has_mint_method", "Contract can mint new tokens, which may cause inflation"),
    ("has_black_method", "Contract has a blacklist function"),
    ("has_white_method", "Contract has a whitelist function"),
    ("analysis_big_wallet", "Large wallets hold a significant share"),
)
_RISK_FLAG_REASONS_AFTER_CREATOR: tuple[tuple[str, str], ...] = (
    ("selfdestruct", "Contract can self-destruct"),
    ("big_lp_without_any_lock", "Large liquidity pool is not locked"),
    ("transfer_pausable", "Transfers can be paused"),
    ("cannot_sell_all", "Holders cannot sell their entire balance"),
    ("can_take_back_ownership", "Contract owner can take back ownership"),
)


def parse_float(value: Any) -> float | None:
    """Parse a leading float like JavaScript parseFloat; None when unparseable."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        number = float(value)
    else:
        match = _FLOAT_PREFIX.match(str(value))
        if match is None:
            return None
        number = float(match.group(0))
    return number if math.isfinite(number) else None


def to_float(value: Any) -> float:
    """Coerce to float, 0.0 when unparseable."""
    number = parse_float(value)
    return 0.0 if number is None else number


def to_int(value: Any) -> int:
    """Coerce to int like JavaScript parseInt, 0 when unparseable."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, float):
        return math.trunc(value) if math.isfinite(value) else 0
    if isinstance(value, int):
        return value
    match = _INT_PREFIX.match(str(value))
    return int(match.group(0)) if match else 0


def to_str(value: Any, default: str = "") -> str:
    """Coerce to str, default for None and empty values."""
    if value is None or value == "":
        return default
    return str(value)


def format_number(value: float) -> str:
    """Render a float without a trailing ".0" for whole numbers."""
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def _first(record: dict[str, Any], *keys: str) -> Any:
    """Return the first truthy field among keys, else None."""
    for key in keys:
        value = record.get(key)
        if value:
            return value
    return None


def _parse_appendix(appendix: Any) -> dict[str, Any]:
    if isinstance(appendix, dict):
        return appendix
    if not isinstance(appendix, str) or not appendix:
        return {}
    try:
        parsed = json.loads(appendix)
    except ValueError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


# =============================================================================
# Token records
# =============================================================================


def normalize_search_token(raw: dict[str, Any]) -> SearchToken:
    appendix = _parse_appendix(raw.get("appendix"))
    name = _first(raw, "name") or appendix.get("tokenName") or _first(raw, "symbol")
    return SearchToken(
        token=to_str(raw.get("token")),
        chain=to_str(raw.get("chain")),
        symbol=to_str(raw.get("symbol")),
        name=to_str(name, "Unknown Token"),
        logo_url=to_str(raw.get("logo_url")),
        current_price_usd=to_float(raw.get("current_price_usd")),
        price_change_24h=to_float(raw.get("price_change_24h")),
        tx_volume_u_24h=to_float(raw.get("tx_volume_u_24h")),
        holders=to_int(raw.get("holders")),
        market_cap=to_str(raw.get("market_cap"), "0"),
        risk_score=to_float(raw.get("risk_score")),
    )


def normalize_token_details(
    raw: dict[str, Any],
    address: str = "",
    chain: str = "",
) -> TokenDetails:
    """Build a TokenDetails record from an upstream token object.

    Args:
        raw: Token object extracted by the shape detector.
        address: Requested address, used when upstream omits it.
        chain: Requested chain, used when upstream omits it.
    """
    appendix = _parse_appendix(raw.get("appendix"))
    return TokenDetails(
        symbol=to_str(raw.get("symbol"), "N/A"),
        name=to_str(raw.get("name"), "Unknown"),
        address=to_str(raw.get("token"), address),
        logo=to_str(raw.get("logo_url")),
        chain=to_str(raw.get("chain"), chain),
        price=to_float(raw.get("current_price_usd")),
        price_change=to_float(raw.get("price_change_1d")),
        price_change_24h=to_float(raw.get("price_change_24h")),
        volume_24h=to_float(raw.get("tx_volume_u_24h")),
        market_cap=to_float(raw.get("market_cap")),
        total_supply=to_float(raw.get("total")),
        holders=to_int(raw.get("holders")),
        website=to_str(appendix.get("website")),
        twitter=to_str(appendix.get("twitter")),
        telegram=to_str(appendix.get("telegram")),
        created_at=to_int(raw.get("created_at")),
        risk_score=to_float(raw.get("risk_score")),
        risk_level=to_int(raw.get("risk_level")),
        launch_at=to_int(raw.get("launch_at")),
        buy_tx=to_float(raw.get("buy_tx")),
        sell_tx=to_float(raw.get("sell_tx")),
        locked_percent=to_float(raw.get("locked_percent")),
        burn_amount=to_float(raw.get("burn_amount")),
    )


# =============================================================================
# Holders
# =============================================================================


def _holder_quantity(holder: dict[str, Any]) -> float:
    raw = _first(holder, *_QUANTITY_FIELDS)
    if isinstance(raw, str):
        raw = raw.replace(",", "")
    return to_float(raw)


def _holder_percent(holder: dict[str, Any]) -> float | None:
    for key in ("percent", "percentage"):
        value = holder.get(key)
        if value:
            parsed = parse_float(value)
            if parsed is not None:
                return parsed
    return None


def normalize_holders(holders: list[Any]) -> list[HolderEntry]:
    """Normalize a holder list and compute each holder's share.

    A holder's own numeric ``percent``/``percentage`` wins; otherwise the
    share is ``quantity / total * 100`` over the listed holders. When the
    total is zero every share is "0.00".
    """
    rows = [holder for holder in holders if isinstance(holder, dict)]
    quantities = [_holder_quantity(holder) for holder in rows]
    total = sum(quantities)

    entries = []
    for index, (holder, quantity) in enumerate(zip(rows, quantities, strict=True)):
        if total == 0:
            percent = 0.0
        else:
            upstream_percent = _holder_percent(holder)
            percent = quantity / total * 100 if upstream_percent is None else upstream_percent

        entries.append(
            HolderEntry(
                address=to_str(holder.get("address"), f"Unknown-{index}"),
                quantity=format_number(quantity),
                percent=f"{percent:.2f}",
                is_contract=holder.get("is_contract") in (1, True),
                mark=to_str(_first(holder, "mark", "tag")) or None,
            )
        )
    return entries


# =============================================================================
# Transactions
# =============================================================================


def normalize_transaction(tx: dict[str, Any], address: str) -> TransactionEntry:
    """Normalize one swap as seen from the requested token.

    A swap whose ``to_token_address`` is the requested token is a buy: the
    token amount/symbol come from the "to" side and the paid amount from
    the "from" side. Records that are already flat (legacy endpoints) keep
    their own fields.
    """
    to_token = to_str(tx.get("to_token_address")).lower()
    is_buy = to_token == address.lower() if to_token else bool(tx.get("is_buy"))
    got, paid = ("to", "from") if is_buy else ("from", "to")

    return TransactionEntry(
        tx_hash=to_str(_first(tx, "tx_hash", "hash")),
        timestamp=to_int(_first(tx, "tx_time", "timestamp")),
        from_addr=to_str(_first(tx, "wallet_address", "sender_address", "from_addr")),
        to_addr=to_str(_first(tx, "recipient_address", "to_addr")),
        is_buy=is_buy,
        token_amount=to_float(_first(tx, f"{got}_token_amount", "token_amount")),
        token_symbol=to_str(_first(tx, f"{got}_token_symbol", "token_symbol")),
        eth_amount=to_float(_first(tx, f"{paid}_token_amount", "eth_amount")),
        main_token_symbol=to_str(_first(tx, f"{paid}_token_symbol", "main_token_symbol")),
        usd_amount=to_float(_first(tx, "amount_usd", "usd_amount")),
        block_number=to_int(tx.get("block_number")),
        amm=to_str(tx.get("amm")),
        chain=to_str(tx.get("chain")),
    )


def normalize_transactions(txs: list[Any], address: str) -> list[TransactionEntry]:
    return [normalize_transaction(tx, address) for tx in txs if isinstance(tx, dict)]


# =============================================================================
# Risk
# =============================================================================


def derive_risk_reasons(raw: dict[str, Any]) -> list[str]:
    """Explain a risk report from its flag fields."""
    reasons = [reason for flag, reason in _RISK_FLAG_REASONS if to_int(raw.get(flag)) == 1]

    creator_percent = to_float(raw.get("creator_percent"))
    if creator_percent > CREATOR_PERCENT_WARNING:
        reasons.append(f"Creator holds a large share: {format_number(creator_percent)}%")

    reasons.extend(
        reason for flag, reason in _RISK_FLAG_REASONS_AFTER_CREATOR if to_int(raw.get(flag)) == 1
    )

    if not reasons and to_float(raw.get("risk_score")) > HIGH_RISK_SCORE:
        reasons.append("High risk score, trade with caution")
    return reasons


def normalize_risk(raw: dict[str, Any]) -> RiskReport:
    upstream_reasons = raw.get("risk_reasons")
    if isinstance(upstream_reasons, list) and upstream_reasons:
        reasons = [str(reason) for reason in upstream_reasons]
    else:
        reasons = derive_risk_reasons(raw)

    return RiskReport(
        token=to_str(raw.get("token")),
        chain=to_str(raw.get("chain")),
        risk_score=to_float(raw.get("risk_score")),
        risk_level=to_int(raw.get("risk_level")),
        is_honeypot=to_int(raw.get("is_honeypot")),
        hidden_owner=to_int(raw.get("hidden_owner")),
        has_mint_method=to_int(raw.get("has_mint_method")),
        has_black_method=to_int(raw.get("has_black_method")),
        has_white_method=to_int(raw.get("has_white_method")),
        analysis_big_wallet=to_int(raw.get("analysis_big_wallet")),
        selfdestruct=to_int(raw.get("selfdestruct")),
        big_lp_without_any_lock=to_int(raw.get("big_lp_without_any_lock")),
        transfer_pausable=to_int(raw.get("transfer_pausable")),
        cannot_sell_all=to_int(raw.get("cannot_sell_all")),
        can_take_back_ownership=to_int(raw.get("can_take_back_ownership")),
        creator_percent=to_float(raw.get("creator_percent")),
        owner=to_str(raw.get("owner")),
        buy_tax=to_float(raw.get("buy_tax")),
        sell_tax=to_float(raw.get("sell_tax")),
        risk_reasons=reasons,
    )


# =============================================================================
# Klines
# =============================================================================


def normalize_klines(points: list[Any]) -> list[KlinePoint]:
    """Convert upstream points (``time`` in seconds) to KlinePoints (ms)."""
    return [
        KlinePoint(
            timestamp=to_int(point.get("time")) * 1000,
            open=to_float(point.get("open")),
            high=to_float(point.get("high")),
            low=to_float(point.get("low")),
            close=to_float(point.get("close")),
            volume=to_float(point.get("volume")),
        )
        for point in points
        if isinstance(point, dict)
    ]


def normalize(
    kind: RequestCategory,
    payload: Any,
    *,
    address: str = "",
    chain: str = "",
) -> Any:
    """Normalize a detected payload for a data kind.

    Args:
        kind: Data kind of the payload.
        payload: Payload extracted by a shape detector.
        address: Requested token address (details and transactions).
        chain: Requested chain (details).

    Returns:
        The normalized record, or list of records for list kinds.
    """
    as_dict = payload if isinstance(payload, dict) else {}
    as_list = payload if isinstance(payload, list) else []

    match kind:
        case RequestCategory.TOKEN_DETAILS:
            return normalize_token_details(as_dict, address=address, chain=chain)
        case RequestCategory.HOLDERS:
            return normalize_holders(as_list)
        case RequestCategory.TRANSACTIONS:
            return normalize_transactions(as_list, address)
        case RequestCategory.RISK:
            return normalize_risk(as_dict)
        case RequestCategory.KLINE:
            return normalize_klines(as_list)
        case RequestCategory.SEARCH:
            return [normalize_search_token(item) for item in as_list if isinstance(item, dict)]
