"""Synthetic kline series served when no real or cached data exists."""

import random
import time

from tokenlens.constants.ave import (
    DEFAULT_MOCK_KLINE_STEP_SECONDS,
    MOCK_KLINE_BASE_PRICE,
    MOCK_KLINE_STEP_SECONDS,
    MOCK_KLINE_VOLATILITY,
)
from tokenlens.models.token import KlinePoint


def generate_mock_klines(
    interval: str,
    limit: int,
    now: float | None = None,
    rng: random.Random | None = None,
) -> list[KlinePoint]:
    """Generate ``limit`` plausible candles ending at ``now``.

    Args:
        interval: Interval label; sets the spacing between points.
        limit: Number of points.
        now: Epoch seconds of the series end (default: current time).
        rng: Random source, injectable for deterministic tests.

    Returns:
        Points in ascending time order with millisecond timestamps.
    """
    rng = rng or random.Random()
    end = int(time.time() if now is None else now)
    step = MOCK_KLINE_STEP_SECONDS.get(interval, DEFAULT_MOCK_KLINE_STEP_SECONDS)

    points = []
    for index in range(limit):
        price_change = MOCK_KLINE_BASE_PRICE * MOCK_KLINE_VOLATILITY * (0.5 - rng.random())
        open_price = MOCK_KLINE_BASE_PRICE + price_change * (index - 1) / limit
        close_price = MOCK_KLINE_BASE_PRICE + price_change * index / limit
        high = max(open_price, close_price) * (1 + rng.random() * 0.02)
        low = min(open_price, close_price) * (1 - rng.random() * 0.02)

        points.append(
            KlinePoint(
                timestamp=(end - (limit - index) * step) * 1000,
                open=open_price,
                high=high,
                low=low,
                close=close_price,
                volume=100 + rng.random() * 2000,
            )
        )
    return points
