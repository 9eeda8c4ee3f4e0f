"""Unit tests for upstream response shape detection."""

import pytest

from tokenlens.services.ave.shapes import (
    Shape,
    detect_holders,
    detect_klines,
    detect_legacy_transactions,
    detect_risk,
    detect_search,
    detect_token_details,
    detect_transactions,
)


class TestDetectTokenDetails:
    """Shapes recognized for token details, first match wins."""

    def test_data_token_wins_over_data(self) -> None:
        body = {"status": 1, "data": {"token": {"symbol": "PEPE"}, "pairs": []}}

        detected = detect_token_details(body)

        assert detected.shape is Shape.DATA_TOKEN
        assert detected.payload == {"symbol": "PEPE"}

    def test_data_object(self) -> None:
        detected = detect_token_details({"data": {"symbol": "PEPE"}})

        assert detected.shape is Shape.DATA
        assert detected.payload == {"symbol": "PEPE"}

    def test_direct_token(self) -> None:
        detected = detect_token_details({"token": {"symbol": "PEPE"}})

        assert detected.shape is Shape.DIRECT_TOKEN

    def test_direct_record(self) -> None:
        body = {"success": True, "symbol": "PEPE", "price": 1}

        detected = detect_token_details(body)

        assert detected.shape is Shape.DIRECT_RECORD
        assert detected.payload is body

    @pytest.mark.parametrize(
        "body",
        [None, [], "oops", {}, {"data": {}}, {"data": []}, {"success": True}, {"token": "0xabc"}],
    )
    def test_unknown(self, body) -> None:
        assert detect_token_details(body).shape is Shape.UNKNOWN


class TestDetectHolders:
    """Shapes recognized for top holders."""

    def test_status_data_list(self) -> None:
        detected = detect_holders({"status": 1, "data": [{"address": "a"}]})

        assert detected.shape is Shape.STATUS_DATA
        assert detected.payload == [{"address": "a"}]

    def test_holders_field(self) -> None:
        detected = detect_holders({"holders": [{"address": "a"}]})

        assert detected.shape is Shape.HOLDERS_FIELD

    def test_bare_list(self) -> None:
        assert detect_holders([{"address": "a"}]).shape is Shape.BARE_LIST

    def test_data_list_without_status(self) -> None:
        detected = detect_holders({"status": 0, "data": [{"address": "a"}]})

        assert detected.shape is Shape.DATA_LIST

    def test_unknown(self) -> None:
        assert detect_holders({"status": 1, "data": {"holders": 3}}).shape is Shape.UNKNOWN


class TestDetectTransactions:
    """Shapes recognized for the current and legacy transaction endpoints."""

    def test_current_endpoint_txs(self) -> None:
        detected = detect_transactions({"status": 1, "data": {"txs": [{"tx_hash": "0x1"}]}})

        assert detected.shape is Shape.TXS
        assert detected.payload == [{"tx_hash": "0x1"}]

    def test_current_endpoint_requires_status(self) -> None:
        assert detect_transactions({"status": 0, "data": {"txs": []}}).shape is Shape.UNKNOWN

    def test_current_endpoint_ignores_data_list(self) -> None:
        assert detect_transactions({"status": 1, "data": []}).shape is Shape.UNKNOWN

    def test_legacy_status_data_list(self) -> None:
        detected = detect_legacy_transactions({"status": 1, "data": [{"tx_hash": "0x1"}]})

        assert detected.shape is Shape.STATUS_DATA

    def test_legacy_txs(self) -> None:
        detected = detect_legacy_transactions({"status": 1, "data": {"txs": [{}]}})

        assert detected.shape is Shape.TXS

    def test_legacy_transactions_field(self) -> None:
        detected = detect_legacy_transactions({"transactions": [{"tx_hash": "0x1"}]})

        assert detected.shape is Shape.TRANSACTIONS_FIELD

    def test_legacy_bare_list(self) -> None:
        assert detect_legacy_transactions([{}]).shape is Shape.BARE_LIST


class TestDetectOthers:
    """Risk, kline and search shapes."""

    def test_risk_status_data(self) -> None:
        detected = detect_risk({"status": 1, "data": {"is_honeypot": 0}})

        assert detected.shape is Shape.STATUS_DATA
        assert detected.payload == {"is_honeypot": 0}

    def test_risk_requires_object(self) -> None:
        assert detect_risk({"status": 1, "data": []}).shape is Shape.UNKNOWN

    def test_kline_points(self) -> None:
        detected = detect_klines({"status": 1, "data": {"points": [{"time": 1}]}})

        assert detected.shape is Shape.KLINE_POINTS
        assert detected.payload == [{"time": 1}]

    def test_kline_unknown_when_status_not_ok(self) -> None:
        assert detect_klines({"status": 0, "data": {"points": []}}).shape is Shape.UNKNOWN

    def test_search_status_data(self) -> None:
        assert detect_search({"status": 1, "data": []}).shape is Shape.STATUS_DATA

    def test_search_unknown_on_error_status(self) -> None:
        assert detect_search({"status": 0, "msg": "no results"}).shape is Shape.UNKNOWN
