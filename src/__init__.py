"""
Halvback - Bitcoin price backtest around halving events.

This package provides tools to:
- Load the full daily BTC/USD price history from CoinGecko
- Measure pre-halving run-up, post-halving peak and bear market drawdown
- Render a single-page HTML dashboard with Plotly charts
"""

__app_name__ = "halvback"
