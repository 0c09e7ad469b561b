"""
Price data loading modules.
"""

from .loader import LoaderError, LoadResult, PriceLoader, build_price_frame, parse_market_chart

__all__ = [
    "PriceLoader",
    "LoadResult",
    "LoaderError",
    "build_price_frame",
    "parse_market_chart",
]
