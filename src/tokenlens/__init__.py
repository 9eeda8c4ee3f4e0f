"""tokenlens - token market data proxy for the Ave.ai API."""

__version__ = "0.1.0"
