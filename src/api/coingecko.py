"""
CoinGecko API client for Halvback.

Provides methods to:
- Fetch historical market chart data for a coin
- Check API connectivity
- Enforce client-side rate limiting
"""

import time
from typing import Any

import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from config import (
    API_CALLS_PER_MINUTE,
    API_MAX_ATTEMPTS,
    API_RETRY_MAX_WAIT,
    API_RETRY_MIN_WAIT,
    API_TIMEOUT_SECONDS,
    COINGECKO_BASE_URL,
    HISTORY_DAYS,
    HISTORY_INTERVAL,
    VS_CURRENCY,
)


class CoinGeckoError(Exception):
    """Base exception for CoinGecko API errors."""
    pass


class RateLimitError(CoinGeckoError):
    """Raised when API rate limit is exceeded."""
    pass


class APIError(CoinGeckoError):
    """Raised for general API errors."""
    pass


class CoinGeckoClient:
    """
    CoinGecko API client with rate limiting.

    Usage:
        client = CoinGeckoClient()
        chart = client.get_coin_market_chart("bitcoin", vs_currency="usd", days="max")
    """

    def __init__(
        self,
        base_url: str = COINGECKO_BASE_URL,
        calls_per_minute: int = API_CALLS_PER_MINUTE,
        timeout: float = API_TIMEOUT_SECONDS,
    ):
        """
        Initialize the CoinGecko client.

        Args:
            base_url: CoinGecko API base URL
            calls_per_minute: Maximum API calls per minute (rate limiting)
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.calls_per_minute = calls_per_minute
        self.min_interval = 60.0 / calls_per_minute
        self.timeout = timeout
        self._last_request_time: float | None = None
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": "Halvback/0.1.0",
        })

    def _wait_for_rate_limit(self) -> None:
        """Wait if necessary to respect rate limits."""
        if self._last_request_time is not None:
            elapsed = time.time() - self._last_request_time
            if elapsed < self.min_interval:
                time.sleep(self.min_interval - elapsed)

    @retry(
        retry=retry_if_exception_type(RateLimitError),
        stop=stop_after_attempt(API_MAX_ATTEMPTS),
        wait=wait_exponential(
            multiplier=1,
            min=API_RETRY_MIN_WAIT,
            max=API_RETRY_MAX_WAIT,
        ),
        reraise=True,
    )
    def _request(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> dict | list:
        """
        Make a rate-limited request to the CoinGecko API.

        Args:
            endpoint: API endpoint (e.g., "/coins/bitcoin/market_chart")
            params: Query parameters

        Returns:
            Parsed JSON response

        Raises:
            RateLimitError: When rate limit is exceeded
            APIError: For other API errors, transport failures or invalid JSON
        """
        self._wait_for_rate_limit()

        url = f"{self.base_url}{endpoint}"

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            self._last_request_time = time.time()

            if response.status_code == 429:
                raise RateLimitError("Rate limit exceeded")

            if response.status_code != 200:
                raise APIError(
                    f"API error {response.status_code}: {response.text}"
                )

            return response.json()

        except requests.RequestException as e:
            raise APIError(f"Request failed: {e}") from e
        except ValueError as e:
            # Undecodable body
            raise APIError(f"Invalid JSON response: {e}") from e

    def get_coin_market_chart(
        self,
        coin_id: str,
        vs_currency: str = VS_CURRENCY,
        days: int | str = HISTORY_DAYS,
        interval: str | None = HISTORY_INTERVAL,
    ) -> dict[str, Any]:
        """
        Fetch historical market data for a coin.

        Args:
            coin_id: CoinGecko coin ID (e.g., "bitcoin")
            vs_currency: Quote currency (default: "usd")
            days: Number of days of data, or "max" for all available
            interval: Data granularity (default: "daily", None lets the API decide)

        Returns:
            Raw JSON payload; 'prices' holds a list of [timestamp_ms, price] pairs
        """
        params = {
            "vs_currency": vs_currency,
            "days": str(days),
        }
        if interval:
            params["interval"] = interval

        return self._request(f"/coins/{coin_id}/market_chart", params=params)

    def ping(self) -> bool:
        """
        Check if the API is reachable.

        Returns:
            True if API responds successfully
        """
        try:
            self._request("/ping")
            return True
        except CoinGeckoError:
            return False
