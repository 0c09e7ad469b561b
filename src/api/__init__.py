"""
API client modules for external data sources.

Data source: CoinGecko market chart (daily BTC/USD history).
"""

from .coingecko import (
    APIError,
    CoinGeckoClient,
    CoinGeckoError,
    RateLimitError,
)

__all__ = [
    "APIError",
    "CoinGeckoClient",
    "CoinGeckoError",
    "RateLimitError",
]
