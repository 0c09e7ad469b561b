"""
Analysis modules for the halving cycle backtest.
"""

from .backtest import (
    CycleAnalysis,
    CycleSummary,
    PricePoint,
    analyses_to_frame,
    analyze_cycle,
    percentage_change,
    run_backtest,
    summarize_cycles,
)

__all__ = [
    "CycleAnalysis",
    "CycleSummary",
    "PricePoint",
    "analyses_to_frame",
    "analyze_cycle",
    "percentage_change",
    "run_backtest",
    "summarize_cycles",
]
