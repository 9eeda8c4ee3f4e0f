"""Ave.ai upstream constants: pacing delays, cache TTLs and interval tables."""

from typing import Final

# Pacing: minimum interval between upstream calls per category (milliseconds).
# Shorter delays for categories the UI needs first.
ENDPOINT_DELAYS_MS: Final[dict[str, int]] = {
    "kline": 500,
    "tokenDetails": 1000,
    "transactions": 1500,
    "holders": 2000,
    "risk": 2500,
}
DEFAULT_DELAY_MS: Final[int] = 1000

# Rate limit handling
RATE_LIMIT_BACKOFF_SECONDS: Final[float] = 2.0
CANDIDATE_RATE_LIMIT_PAUSE_SECONDS: Final[float] = 5.0
RATE_LIMIT_MAX_ATTEMPTS: Final[int] = 2  # first call + one retry

# Cache TTLs per category (seconds)
CACHE_TTL_SECONDS: Final[dict[str, int]] = {
    "search": 300,
    "kline": 600,
    "tokenDetails": 60,
    "holders": 60,
    "transactions": 15,
    "risk": 3600,
}
DEFAULT_CACHE_TTL_SECONDS: Final[int] = 60

# Upstream
AVE_SERVICE_NAME: Final[str] = "ave"
AVE_API_KEY_HEADER: Final[str] = "X-API-KEY"
DEFAULT_TIMEOUT_SECONDS: Final[float] = 10.0

# Kline interval label -> upstream interval in minutes
KLINE_INTERVAL_MINUTES: Final[dict[str, int]] = {
    "1m": 1,
    "5m": 5,
    "15m": 15,
    "30m": 30,
    "1h": 60,
    "2h": 120,
    "4h": 240,
    "1d": 1440,
    "3d": 4320,
    "1w": 10080,
    "1M": 43200,
    "1y": 525600,
}
DEFAULT_KLINE_INTERVAL_MINUTES: Final[int] = 1440

# Kline interval label -> spacing of synthetic points in seconds
MOCK_KLINE_STEP_SECONDS: Final[dict[str, int]] = {
    "1m": 60,
    "5m": 300,
    "15m": 900,
    "1h": 3600,
    "4h": 14400,
    "1d": 86400,
    "1w": 604800,
}
DEFAULT_MOCK_KLINE_STEP_SECONDS: Final[int] = 3600
MOCK_KLINE_BASE_PRICE: Final[float] = 0.007354
MOCK_KLINE_VOLATILITY: Final[float] = 0.005

# Route defaults
DEFAULT_KLINE_INTERVAL: Final[str] = "1h"
DEFAULT_KLINE_LIMIT: Final[int] = 100
DEFAULT_TRANSACTION_LIMIT: Final[int] = 20

# Risk analysis
CREATOR_PERCENT_WARNING: Final[float] = 10.0
HIGH_RISK_SCORE: Final[float] = 50.0
