"""
Halving cycle backtest for Halvback.

For each halving event, scans the daily price series to measure:
- Pre-halving run-up (365 days before the halving)
- Post-halving peak (within 730 days after the halving)
- Bear market trough (first 365 points after the peak)

Degenerate windows never raise: empty windows fall back to sentinel points
and zero denominators produce non-finite percentages that are passed through
unchanged to the caller.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

import numpy as np
import pandas as pd

from config import (
    CRASH_WINDOW_POINTS,
    HALVING_EVENTS,
    MS_PER_DAY,
    POST_HALVING_DAYS,
    PRE_HALVING_DAYS,
    HalvingEvent,
)
from utils.logging import get_logger

logger = get_logger(__name__)

PRICE_COLUMNS = ["timestamp", "date", "price"]


@dataclass(frozen=True)
class PricePoint:
    """A single daily price observation."""

    timestamp: int
    date: str
    price: float


@dataclass(frozen=True)
class PreHalvingStats:
    """Run-up over the window ending on the halving day."""

    days: int
    start_price: float
    halving_price: float
    percentage_gain: float


@dataclass(frozen=True)
class PostHalvingStats:
    """Move from the halving price to the cycle peak."""

    days: int  # number of data points in the post-halving window
    halving_price: float
    peak_price: float
    peak_date: str
    peak_timestamp: int
    percentage_gain: float
    days_to_peak: int


@dataclass(frozen=True)
class CrashStats:
    """Decline from the cycle peak to the subsequent bottom."""

    crash_date: str
    crash_timestamp: int
    bottom_price: float
    percentage_from_peak: float


@dataclass(frozen=True)
class CycleAnalysis:
    """Backtest result for one halving cycle."""

    cycle: int
    halving_date: str
    pre_halving: PreHalvingStats
    post_halving: PostHalvingStats
    crash: CrashStats

    def to_record(self) -> dict[str, Any]:
        """Flatten to a single row for tabular output."""
        return {
            "cycle": self.cycle,
            "halving_date": self.halving_date,
            "start_price": self.pre_halving.start_price,
            "halving_price": self.pre_halving.halving_price,
            "pre_halving_gain_pct": self.pre_halving.percentage_gain,
            "post_halving_points": self.post_halving.days,
            "peak_date": self.post_halving.peak_date,
            "peak_price": self.post_halving.peak_price,
            "days_to_peak": self.post_halving.days_to_peak,
            "post_halving_gain_pct": self.post_halving.percentage_gain,
            "crash_date": self.crash.crash_date,
            "bottom_price": self.crash.bottom_price,
            "drawdown_pct": self.crash.percentage_from_peak,
        }


@dataclass(frozen=True)
class CycleSummary:
    """Averages across all analysed cycles."""

    avg_pre_halving_gain: float
    avg_post_halving_gain: float
    avg_drawdown: float
    cycles: int


def percentage_change(start: float, end: float) -> float:
    """
    Percentage change from start to end.

    A zero start yields inf, -inf or nan instead of raising.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return float((np.float64(end) - np.float64(start)) / np.float64(start) * 100)


def halving_timestamp(event: HalvingEvent) -> int:
    """Epoch milliseconds of the halving day at 00:00 UTC."""
    midnight = datetime(event.date.year, event.date.month, event.date.day, tzinfo=timezone.utc)
    return int(midnight.timestamp()) * 1000


def _point_at(prices: pd.DataFrame, position: int) -> PricePoint:
    row = prices.iloc[position]
    return PricePoint(
        timestamp=int(row["timestamp"]),
        date=str(row["date"]),
        price=float(row["price"]),
    )


def analyze_cycle(prices: pd.DataFrame, event: HalvingEvent) -> CycleAnalysis:
    """
    Run the backtest for a single halving event.

    Args:
        prices: DataFrame with 'timestamp' (epoch ms), 'date' and 'price'
            columns, ordered by timestamp ascending
        event: Halving event to analyse

    Returns:
        CycleAnalysis for the event
    """
    t_halving = halving_timestamp(event)
    timestamps = prices["timestamp"]

    # Pre-halving window: [T - 365d, T]
    pre_start = t_halving - PRE_HALVING_DAYS * MS_PER_DAY
    pre_window = prices[(timestamps >= pre_start) & (timestamps <= t_halving)]

    if pre_window.empty:
        start_price = 0.0
        halving_price = event.price_at_halving
    else:
        start_price = float(pre_window["price"].iloc[0])
        halving_price = float(pre_window["price"].iloc[-1])

    pre_gain = percentage_change(start_price, halving_price)

    # Post-halving window: (T, T + 730d]
    post_end = t_halving + POST_HALVING_DAYS * MS_PER_DAY
    post_window = prices[(timestamps > t_halving) & (timestamps <= post_end)]

    if post_window.empty:
        peak = PricePoint(timestamp=0, date="", price=0.0)
    else:
        # argmax returns the first occurrence of the maximum
        peak = _point_at(post_window, int(post_window["price"].argmax()))

    days_to_peak = (peak.timestamp - t_halving) // MS_PER_DAY
    post_gain = percentage_change(halving_price, peak.price)

    # Crash window: first N points strictly after the peak
    crash_window = prices[timestamps > peak.timestamp].head(CRASH_WINDOW_POINTS)

    if crash_window.empty:
        trough = PricePoint(timestamp=0, date="", price=peak.price)
    else:
        trough = _point_at(crash_window, int(crash_window["price"].argmin()))

    drawdown = percentage_change(peak.price, trough.price)

    logger.debug(
        "Cycle %d: pre %d pts, post %d pts, crash %d pts",
        event.cycle,
        len(pre_window),
        len(post_window),
        len(crash_window),
    )

    return CycleAnalysis(
        cycle=event.cycle,
        halving_date=event.date.isoformat(),
        pre_halving=PreHalvingStats(
            days=PRE_HALVING_DAYS,
            start_price=start_price,
            halving_price=halving_price,
            percentage_gain=pre_gain,
        ),
        post_halving=PostHalvingStats(
            days=len(post_window),
            halving_price=halving_price,
            peak_price=peak.price,
            peak_date=peak.date,
            peak_timestamp=peak.timestamp,
            percentage_gain=post_gain,
            days_to_peak=days_to_peak,
        ),
        crash=CrashStats(
            crash_date=trough.date,
            crash_timestamp=trough.timestamp,
            bottom_price=trough.price,
            percentage_from_peak=drawdown,
        ),
    )


def run_backtest(
    prices: pd.DataFrame,
    events: Iterable[HalvingEvent] = HALVING_EVENTS,
) -> list[CycleAnalysis]:
    """
    Analyse every halving event independently.

    Args:
        prices: Ordered daily price DataFrame (see analyze_cycle)
        events: Halving events (default: HALVING_EVENTS from config)

    Returns:
        One CycleAnalysis per event, in event order
    """
    missing = [c for c in PRICE_COLUMNS if c not in prices.columns]
    if missing:
        raise ValueError(f"Price data is missing columns: {missing}")

    analyses = [analyze_cycle(prices, event) for event in events]
    logger.info("Backtested %d halving cycles over %d price points", len(analyses), len(prices))
    return analyses


def summarize_cycles(analyses: list[CycleAnalysis]) -> CycleSummary:
    """Average the pre-halving gain, post-halving gain and drawdown over all cycles."""
    if not analyses:
        nan = float("nan")
        return CycleSummary(nan, nan, nan, 0)

    n = len(analyses)
    return CycleSummary(
        avg_pre_halving_gain=sum(a.pre_halving.percentage_gain for a in analyses) / n,
        avg_post_halving_gain=sum(a.post_halving.percentage_gain for a in analyses) / n,
        avg_drawdown=sum(a.crash.percentage_from_peak for a in analyses) / n,
        cycles=n,
    )


def analyses_to_frame(analyses: list[CycleAnalysis]) -> pd.DataFrame:
    """Tabulate analyses, one row per cycle indexed by cycle number."""
    df = pd.DataFrame([a.to_record() for a in analyses])
    if not df.empty:
        df = df.set_index("cycle")
    return df
