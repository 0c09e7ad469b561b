"""
Configuration constants for the Halvback project.

Halvback - Bitcoin price backtest around halving events.
"""

from dataclasses import dataclass
from datetime import date
from pathlib import Path

# =============================================================================
# Project Paths
# =============================================================================

# Relative to the working directory the CLI is run from
OUTPUT_DIR = Path("output")
DASHBOARD_HTML = OUTPUT_DIR / "dashboard.html"

# =============================================================================
# Bitcoin Halving Events
# =============================================================================


@dataclass(frozen=True)
class HalvingEvent:
    """A Bitcoin halving with its block height and reference price (USD)."""

    date: date
    block_height: int
    cycle: int
    price_at_halving: float


HALVING_EVENTS: tuple[HalvingEvent, ...] = (
    HalvingEvent(date(2012, 11, 28), 210000, 1, 12.35),
    HalvingEvent(date(2016, 7, 9), 420000, 2, 650.63),
    HalvingEvent(date(2020, 5, 11), 630000, 3, 8821.42),
    HalvingEvent(date(2024, 4, 19), 840000, 4, 63812.00),
)

# =============================================================================
# Backtest Windows
# =============================================================================

MS_PER_DAY = 24 * 60 * 60 * 1000

PRE_HALVING_DAYS = 365
POST_HALVING_DAYS = 730  # 2 years after, the peak is typically 12-18 months out

# Trough search is limited to this many points after the peak (not days)
CRASH_WINDOW_POINTS = 365

# =============================================================================
# CoinGecko API Configuration
# =============================================================================

COINGECKO_BASE_URL = "https://api.coingecko.com/api/v3"

COIN_ID = "bitcoin"
VS_CURRENCY = "usd"
HISTORY_DAYS = "max"
HISTORY_INTERVAL = "daily"

# Free tier allows 10-30 calls/minute, we stay conservative
API_CALLS_PER_MINUTE = 10
API_TIMEOUT_SECONDS = 30

# One load attempt per session: the retry policy stops after the first try
API_MAX_ATTEMPTS = 1
API_RETRY_MIN_WAIT = 1  # seconds
API_RETRY_MAX_WAIT = 60  # seconds

# =============================================================================
# Visualization Configuration
# =============================================================================

COLORS = {
    "price_line": "#F59E0B",  # Amber
    "halving_line": "#EF4444",  # Red
    "pre_halving": "#3B82F6",  # Blue
    "post_halving": "#22C55E",  # Green
    "drawdown": "#EF4444",  # Red
    "grid": "rgba(128, 128, 128, 0.2)",
}

CHART_HEIGHT = 500
CYCLE_CHART_HEIGHT = 420
