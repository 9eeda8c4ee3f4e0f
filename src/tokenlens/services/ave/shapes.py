"""Named detectors for the upstream response shapes.

The Ave.ai API wraps the same data differently depending on endpoint version
and URL variant. Each detector inspects a decoded body and returns a
``Detected`` tagged with the shape it recognized, or ``Shape.UNKNOWN``.
Detectors check shapes in a fixed order; the first match wins.
"""

from enum import Enum
from typing import Any, NamedTuple


class Shape(Enum):
    """Recognized upstream body layouts."""

    DATA_TOKEN = "data.token"  # {"data": {"token": {...}}}
    DATA = "data"  # {"data": {...}}
    DIRECT_TOKEN = "token"  # {"token": {...}}
    DIRECT_RECORD = "record"  # {"success": true, "symbol": ..., ...}
    STATUS_DATA = "status.data"  # {"status": 1, "data": ...}
    HOLDERS_FIELD = "holders"  # {"holders": [...]}
    BARE_LIST = "list"  # [...]
    DATA_LIST = "data[]"  # {"data": [...]} without status
    TXS = "data.txs"  # {"status": 1, "data": {"txs": [...]}}
    TRANSACTIONS_FIELD = "transactions"  # {"transactions": [...]}
    KLINE_POINTS = "data.points"  # {"status": 1, "data": {"points": [...]}}
    UNKNOWN = "unknown"


class Detected(NamedTuple):
    shape: Shape
    payload: Any


UNKNOWN = Detected(Shape.UNKNOWN, None)


def _status_ok(body: Any) -> bool:
    return isinstance(body, dict) and body.get("status") == 1


def _nested(body: Any, *keys: str) -> Any:
    current = body
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def detect_token_details(body: Any) -> Detected:
    """Classify a token detail response."""
    if not isinstance(body, dict):
        return UNKNOWN

    if isinstance(_nested(body, "data", "token"), dict):
        return Detected(Shape.DATA_TOKEN, body["data"]["token"])
    if isinstance(body.get("data"), dict) and body["data"]:
        return Detected(Shape.DATA, body["data"])
    if isinstance(body.get("token"), dict):
        return Detected(Shape.DIRECT_TOKEN, body["token"])
    if body.get("success") and body.get("symbol"):
        return Detected(Shape.DIRECT_RECORD, body)
    return UNKNOWN


def detect_holders(body: Any) -> Detected:
    """Classify a top-holders response."""
    if isinstance(body, list):
        return Detected(Shape.BARE_LIST, body)
    if not isinstance(body, dict):
        return UNKNOWN

    if _status_ok(body) and isinstance(body.get("data"), list):
        return Detected(Shape.STATUS_DATA, body["data"])
    if isinstance(body.get("holders"), list):
        return Detected(Shape.HOLDERS_FIELD, body["holders"])
    if isinstance(body.get("data"), list):
        return Detected(Shape.DATA_LIST, body["data"])
    return UNKNOWN


def detect_transactions(body: Any) -> Detected:
    """Classify a response from the current /txs endpoint."""
    txs = _nested(body, "data", "txs")
    if _status_ok(body) and isinstance(txs, list):
        return Detected(Shape.TXS, txs)
    return UNKNOWN


def detect_legacy_transactions(body: Any) -> Detected:
    """Classify a response from the legacy transaction endpoints."""
    if isinstance(body, list):
        return Detected(Shape.BARE_LIST, body)
    if not isinstance(body, dict):
        return UNKNOWN

    if _status_ok(body):
        if isinstance(body.get("data"), list):
            return Detected(Shape.STATUS_DATA, body["data"])
        if isinstance(_nested(body, "data", "txs"), list):
            return Detected(Shape.TXS, body["data"]["txs"])
    if isinstance(body.get("transactions"), list):
        return Detected(Shape.TRANSACTIONS_FIELD, body["transactions"])
    return UNKNOWN


def detect_risk(body: Any) -> Detected:
    """Classify a contract risk response."""
    if _status_ok(body) and isinstance(body.get("data"), dict):
        return Detected(Shape.STATUS_DATA, body["data"])
    return UNKNOWN


def detect_klines(body: Any) -> Detected:
    """Classify a kline response."""
    points = _nested(body, "data", "points")
    if _status_ok(body) and isinstance(points, list):
        return Detected(Shape.KLINE_POINTS, points)
    return UNKNOWN


def detect_search(body: Any) -> Detected:
    """Classify a token search response."""
    if _status_ok(body) and isinstance(body.get("data"), list):
        return Detected(Shape.STATUS_DATA, body["data"])
    return UNKNOWN
