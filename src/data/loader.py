"""
Price history loading for Halvback.

Requests the full daily BTC/USD history from CoinGecko once and normalizes
it into an ordered DataFrame with columns:
- timestamp: epoch milliseconds (int64)
- date: UTC calendar date as "YYYY-MM-DD"
- price: USD price (float)

A failed load leaves the caller with no data: there is no retry, no cache
and no partially populated series.
"""

import math
from dataclasses import dataclass
from typing import Any, Iterable

import pandas as pd

from api.coingecko import CoinGeckoClient, CoinGeckoError
from config import COIN_ID, HISTORY_DAYS, HISTORY_INTERVAL, VS_CURRENCY
from utils.logging import get_logger

# Module logger
logger = get_logger(__name__)


class LoaderError(Exception):
    """Raised when the market chart payload cannot be parsed."""

    pass


@dataclass
class LoadResult:
    """Result of a price history load."""

    success: bool
    message: str
    prices: pd.DataFrame | None = None
    errors: list[str] | None = None


def build_price_frame(pairs: Iterable[Any]) -> pd.DataFrame:
    """
    Build the price DataFrame from [timestamp_ms, price] pairs.

    Row order is preserved as received.

    Raises:
        LoaderError: If a pair is not a two-element numeric sequence, a
            price is not finite or a timestamp is outside the datetime range
    """
    timestamps: list[int] = []
    prices: list[float] = []

    for i, pair in enumerate(pairs):
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise LoaderError(f"Malformed price entry at index {i}: {pair!r}")
        ts, price = pair
        if isinstance(ts, bool) or isinstance(price, bool):
            raise LoaderError(f"Malformed price entry at index {i}: {pair!r}")
        try:
            ts = int(ts)
            price = float(price)
        except (TypeError, ValueError, OverflowError) as e:
            raise LoaderError(f"Malformed price entry at index {i}: {pair!r}") from e
        if not math.isfinite(price):
            raise LoaderError(f"Non-finite price at index {i}: {pair!r}")
        timestamps.append(ts)
        prices.append(price)

    try:
        df = pd.DataFrame(
            {
                "timestamp": pd.Series(timestamps, dtype="int64"),
                "price": pd.Series(prices, dtype="float64"),
            }
        )
        df["date"] = pd.to_datetime(df["timestamp"], unit="ms", utc=True).dt.strftime("%Y-%m-%d")
    except (OverflowError, ValueError, NotImplementedError, pd.errors.OutOfBoundsDatetime) as e:
        raise LoaderError(f"Timestamp out of range: {e}") from e

    return df[["timestamp", "date", "price"]]


def parse_market_chart(payload: Any) -> pd.DataFrame:
    """
    Parse a CoinGecko market_chart payload into the price DataFrame.

    Only the 'prices' field is consumed.

    Raises:
        LoaderError: If the payload does not have the expected shape
    """
    if not isinstance(payload, dict):
        raise LoaderError(f"Expected a JSON object, got {type(payload).__name__}")

    pairs = payload.get("prices")
    if not isinstance(pairs, list):
        raise LoaderError("Response has no 'prices' array")

    return build_price_frame(pairs)


class PriceLoader:
    """
    Loads the BTC/USD daily history from CoinGecko.

    Workflow:
    1. Request market_chart once (max range, daily interval)
    2. Parse the 'prices' array into a DataFrame
    3. Report success or failure as a LoadResult
    """

    def __init__(
        self,
        client: CoinGeckoClient | None = None,
        coin_id: str = COIN_ID,
        vs_currency: str = VS_CURRENCY,
        days: int | str = HISTORY_DAYS,
        interval: str | None = HISTORY_INTERVAL,
    ):
        """
        Initialize the loader.

        Args:
            client: CoinGecko API client (default: new instance)
            coin_id: CoinGecko coin ID (default: "bitcoin")
            vs_currency: Quote currency (default: "usd")
            days: History range (default: "max")
            interval: Granularity (default: "daily")
        """
        self.client = client or CoinGeckoClient()
        self.coin_id = coin_id
        self.vs_currency = vs_currency
        self.days = days
        self.interval = interval

    def load(self) -> LoadResult:
        """
        Perform the single load attempt.

        Never raises for network or payload errors; they are logged and
        reported through the returned LoadResult.
        """
        logger.info(
            "Fetching %s/%s history (days=%s, interval=%s)...",
            self.coin_id,
            self.vs_currency,
            self.days,
            self.interval,
        )

        try:
            payload = self.client.get_coin_market_chart(
                self.coin_id,
                vs_currency=self.vs_currency,
                days=self.days,
                interval=self.interval,
            )
            prices = parse_market_chart(payload)

        except CoinGeckoError as e:
            logger.error("Error fetching data: %s", e)
            return LoadResult(success=False, message=f"API error: {e}", errors=[str(e)])
        except LoaderError as e:
            logger.error("Error parsing data: %s", e)
            return LoadResult(success=False, message=f"Malformed response: {e}", errors=[str(e)])

        if prices.empty:
            logger.warning("CoinGecko returned an empty price history")
        else:
            logger.info(
                "Loaded %d price points (%s to %s)",
                len(prices),
                prices["date"].iloc[0],
                prices["date"].iloc[-1],
            )

        return LoadResult(
            success=True,
            message=f"Loaded {len(prices)} price points",
            prices=prices,
        )
