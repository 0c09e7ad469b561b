"""
Visualization module for Halvback.

Creates interactive Plotly charts for:
- BTC/USD price history (log scale) with halving markers
- Per-cycle comparison of pre-halving gain, post-halving gain and drawdown
"""

from typing import Iterable

import pandas as pd
import plotly.graph_objects as go

from analysis.backtest import CycleAnalysis
from config import CHART_HEIGHT, COLORS, CYCLE_CHART_HEIGHT, HALVING_EVENTS, HalvingEvent


def create_price_history_chart(
    prices: pd.DataFrame,
    events: Iterable[HalvingEvent] = HALVING_EVENTS,
) -> go.Figure:
    """
    Create the BTC/USD price history chart with a marker at each halving.

    Args:
        prices: Price DataFrame with 'date' and 'price' columns
        events: Halving events to mark (default: HALVING_EVENTS)

    Returns:
        Plotly Figure
    """
    fig = go.Figure()

    fig.add_trace(
        go.Scatter(
            x=pd.to_datetime(prices["date"]),
            y=prices["price"],
            mode="lines",
            name="BTC Price (USD)",
            line={"color": COLORS["price_line"], "width": 2},
            hovertemplate="Date: %{x|%Y-%m-%d}<br>Price: $%{y:,.2f}<extra></extra>",
        )
    )

    fig.update_layout(
        title={
            "text": "Bitcoin Price History (Log Scale)",
            "font": {"size": 20},
        },
        xaxis={
            "title": "Date",
            "tickformat": "%Y",
            "dtick": "M12",
            "gridcolor": COLORS["grid"],
        },
        yaxis={
            "title": "BTC Price (USD)",
            "type": "log",
            "tickprefix": "$",
            "tickformat": ",",
            "gridcolor": COLORS["grid"],
        },
        legend={
            "yanchor": "top",
            "y": 0.99,
            "xanchor": "left",
            "x": 0.01,
        },
        template="plotly_dark",
        hovermode="x unified",
        height=CHART_HEIGHT,
    )

    for event in events:
        halving_day = event.date.isoformat()
        fig.add_vline(
            x=halving_day,
            line_dash="dash",
            line_color=COLORS["halving_line"],
            opacity=0.8,
        )
        fig.add_annotation(
            x=halving_day,
            y=1.02,
            yref="paper",
            text=f"Halving {event.cycle}",
            showarrow=False,
            font={"color": COLORS["halving_line"]},
        )

    return fig


def create_cycle_comparison_chart(
    analyses: list[CycleAnalysis],
) -> go.Figure:
    """
    Create a grouped bar chart comparing the cycles side by side.

    Args:
        analyses: Backtest results, one per cycle

    Returns:
        Plotly Figure
    """
    labels = [f"Cycle {a.cycle} ({a.halving_date[:4]})" for a in analyses]

    series = [
        ("Pre-Halving Gain", [a.pre_halving.percentage_gain for a in analyses], "pre_halving"),
        ("Post-Halving Gain", [a.post_halving.percentage_gain for a in analyses], "post_halving"),
        ("Drawdown", [a.crash.percentage_from_peak for a in analyses], "drawdown"),
    ]

    fig = go.Figure()
    for name, values, color_key in series:
        fig.add_trace(
            go.Bar(
                x=labels,
                y=values,
                name=name,
                marker_color=COLORS[color_key],
                hovertemplate=f"{name}: " "%{y:.2f}%<extra></extra>",
            )
        )

    fig.update_layout(
        title={
            "text": "Halving Cycle Comparison",
            "font": {"size": 20},
        },
        barmode="group",
        yaxis={
            "title": "Change (%)",
            "ticksuffix": "%",
            "gridcolor": COLORS["grid"],
        },
        template="plotly_dark",
        height=CYCLE_CHART_HEIGHT,
    )

    fig.add_hline(y=0, line_color="rgba(255,255,255,0.4)")

    return fig
