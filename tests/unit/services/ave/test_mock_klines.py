"""Unit tests for synthetic kline generation."""

import random

import pytest

from tokenlens.services.ave.mock_klines import generate_mock_klines


class TestGenerateMockKlines:
    """Tests for generate_mock_klines."""

    def test_returns_requested_number_of_points(self) -> None:
        points = generate_mock_klines("1h", 100)

        assert len(points) == 100

    @pytest.mark.parametrize(
        ("interval", "step"),
        [("1m", 60), ("15m", 900), ("1h", 3600), ("1d", 86400), ("1w", 604800), ("7h", 3600)],
    )
    def test_points_are_spaced_by_interval(self, interval: str, step: int) -> None:
        """
        Given: A fixed end time
        When: Candles are generated
        Then: They end one step before now and are spaced by the interval
        """
        points = generate_mock_klines(interval, 5, now=1_700_000_000)

        timestamps = [p.timestamp for p in points]
        assert timestamps[-1] == (1_700_000_000 - step) * 1000
        assert all(b - a == step * 1000 for a, b in zip(timestamps, timestamps[1:]))

    def test_prices_are_plausible(self) -> None:
        points = generate_mock_klines("1h", 50, rng=random.Random(42))

        for point in points:
            assert point.low <= min(point.open, point.close)
            assert point.high >= max(point.open, point.close)
            assert 0.007 < point.close < 0.0077
            assert 100 <= point.volume <= 2100

    def test_seeded_rng_is_deterministic(self) -> None:
        first = generate_mock_klines("1h", 10, now=1_700_000_000, rng=random.Random(7))
        second = generate_mock_klines("1h", 10, now=1_700_000_000, rng=random.Random(7))

        assert first == second

    def test_zero_limit(self) -> None:
        assert generate_mock_klines("1h", 0) == []
