"""Ave.ai market data: client, candidates, fetcher and service."""

from tokenlens.services.ave.client import AveClient
from tokenlens.services.ave.fetcher import MultiFormatFetcher
from tokenlens.services.ave.service import AveMarketService

__all__ = [
    "AveClient",
    "AveMarketService",
    "MultiFormatFetcher",
]
