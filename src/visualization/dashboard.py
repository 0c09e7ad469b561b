"""
Single-page HTML dashboard for the halving backtest.

Renders the price history chart, one card per halving cycle and the
averaged summary statistics. When no price data is available the page
shows the loading indicator only.
"""

import math
from datetime import datetime, timezone
from html import escape
from pathlib import Path

import pandas as pd

from analysis.backtest import CycleAnalysis, summarize_cycles
from config import DASHBOARD_HTML, HALVING_EVENTS
from utils.logging import get_logger
from visualization.charts import create_cycle_comparison_chart, create_price_history_chart

logger = get_logger(__name__)

PAGE_STYLE = """
        :root {
            --bg-primary: #111827;
            --bg-card: #1f2937;
            --text-primary: #f9fafb;
            --text-muted: #9ca3af;
            --accent-orange: #fb923c;
            --accent-blue: #60a5fa;
            --accent-green: #4ade80;
            --accent-red: #f87171;
        }

        * {
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }

        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Helvetica, Arial, sans-serif;
            background: var(--bg-primary);
            color: var(--text-primary);
            line-height: 1.6;
            min-height: 100vh;
        }

        main {
            max-width: 1280px;
            margin: 0 auto;
            padding: 2rem;
        }

        h1 { font-size: 2.25rem; margin-bottom: 0.5rem; }
        .subtitle { color: var(--text-muted); margin-bottom: 2rem; }

        .panel {
            background: var(--bg-card);
            border-radius: 8px;
            padding: 1.5rem;
            margin-bottom: 2rem;
        }

        .cards {
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(420px, 1fr));
            gap: 1.5rem;
            margin-bottom: 2rem;
        }

        .card h3 { color: var(--accent-orange); font-size: 1.5rem; margin-bottom: 1rem; }
        .section { border-left: 4px solid; padding-left: 1rem; margin-bottom: 1rem; }
        .section h4 { margin-bottom: 0.5rem; }
        .section p { font-size: 0.9rem; }
        .pre { border-color: var(--accent-blue); }
        .pre h4 { color: var(--accent-blue); }
        .post { border-color: var(--accent-green); }
        .post h4 { color: var(--accent-green); }
        .crash { border-color: var(--accent-red); }
        .crash h4 { color: var(--accent-red); }
        .value { font-family: monospace; }
        .gain { color: var(--accent-green); font-weight: bold; }
        .loss { color: var(--accent-red); font-weight: bold; }

        .summary { display: grid; grid-template-columns: repeat(3, 1fr); gap: 1.5rem; }
        .summary .big { font-size: 1.9rem; font-weight: bold; }
        .summary .note { color: var(--text-muted); font-size: 0.85rem; }

        .loading {
            min-height: 100vh;
            display: flex;
            align-items: center;
            justify-content: center;
            font-size: 1.5rem;
        }

        footer { text-align: center; color: var(--text-muted); font-size: 0.85rem; margin-top: 2rem; }
"""


def format_currency(value: float) -> str:
    """Format as USD with thousands grouping and at most two decimals ($63,812)."""
    if not math.isfinite(value):
        return f"${value}"
    whole, fraction = f"{value:,.2f}".split(".")
    fraction = fraction.rstrip("0")
    return f"${whole}.{fraction}" if fraction else f"${whole}"


def format_percentage(value: float) -> str:
    """Format with two decimals; non-finite values are shown as-is (inf%, nan%)."""
    return f"{value:.2f}%"


def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
    <style>{PAGE_STYLE}    </style>
</head>
<body>
{body}
</body>
</html>
"""


def _render_loading_page() -> str:
    return _page(
        "Bitcoin Halving Analysis & Backtest",
        '    <div class="loading">Loading Bitcoin data...</div>',
    )


def _render_cycle_card(analysis: CycleAnalysis) -> str:
    pre = analysis.pre_halving
    post = analysis.post_halving
    crash = analysis.crash

    return f"""
        <div class="panel card">
            <h3>Cycle {analysis.cycle} - Halving: {escape(analysis.halving_date)}</h3>
            <div class="section pre">
                <h4>Pre-Halving ({pre.days} days)</h4>
                <p>Start Price: <span class="value">{format_currency(pre.start_price)}</span></p>
                <p>Halving Price: <span class="value">{format_currency(pre.halving_price)}</span></p>
                <p class="gain">Gain: {format_percentage(pre.percentage_gain)}</p>
            </div>
            <div class="section post">
                <h4>Post-Halving (to Peak)</h4>
                <p>Halving Price: <span class="value">{format_currency(post.halving_price)}</span></p>
                <p>Peak Price: <span class="value">{format_currency(post.peak_price)}</span></p>
                <p>Peak Date: <span class="value">{escape(post.peak_date)}</span></p>
                <p>Days to Peak: <span class="value">{post.days_to_peak} days</span></p>
                <p class="gain">Gain: {format_percentage(post.percentage_gain)}</p>
            </div>
            <div class="section crash">
                <h4>Bear Market Correction</h4>
                <p>Crash Date: <span class="value">{escape(crash.crash_date)}</span></p>
                <p>Bottom Price: <span class="value">{format_currency(crash.bottom_price)}</span></p>
                <p class="loss">Drawdown: {format_percentage(crash.percentage_from_peak)}</p>
            </div>
        </div>"""


def _render_summary(analyses: list[CycleAnalysis]) -> str:
    summary = summarize_cycles(analyses)

    return f"""
        <div class="panel">
            <h3>Summary Statistics</h3>
            <div class="summary">
                <div>
                    <h4>Avg Pre-Halving Gain</h4>
                    <p class="big gain">{format_percentage(summary.avg_pre_halving_gain)}</p>
                    <p class="note">365 days before halving</p>
                </div>
                <div>
                    <h4>Avg Post-Halving Gain</h4>
                    <p class="big gain">{format_percentage(summary.avg_post_halving_gain)}</p>
                    <p class="note">Halving to cycle peak</p>
                </div>
                <div>
                    <h4>Avg Bear Market Drawdown</h4>
                    <p class="big loss">{format_percentage(summary.avg_drawdown)}</p>
                    <p class="note">Peak to cycle bottom</p>
                </div>
            </div>
        </div>"""


def render_dashboard_html(
    prices: pd.DataFrame | None,
    analyses: list[CycleAnalysis],
) -> str:
    """
    Render the complete dashboard page.

    Args:
        prices: Loaded price DataFrame, or None when the load failed
        analyses: Backtest results, one per cycle

    Returns:
        Complete HTML string
    """
    if prices is None:
        return _render_loading_page()

    price_chart = create_price_history_chart(prices, HALVING_EVENTS)
    cycle_chart = create_cycle_comparison_chart(analyses)

    cards = "".join(_render_cycle_card(a) for a in analyses)
    generated = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")

    body = f"""    <main>
        <h1>Bitcoin Halving Analysis &amp; Backtest</h1>
        <p class="subtitle">Historical analysis of Bitcoin price movements around halving events</p>

        <div class="panel">
            {price_chart.to_html(full_html=False, include_plotlyjs="cdn")}
        </div>

        <div class="cards">{cards}
        </div>

        <div class="panel">
            {cycle_chart.to_html(full_html=False, include_plotlyjs=False)}
        </div>
{_render_summary(analyses)}

        <footer>
            <p>Data source: CoinGecko API | Generated {generated}</p>
            <p>Note: Past performance does not guarantee future results</p>
        </footer>
    </main>"""

    return _page("Bitcoin Halving Analysis & Backtest", body)


def write_dashboard(
    prices: pd.DataFrame | None,
    analyses: list[CycleAnalysis],
    output_path: Path = DASHBOARD_HTML,
) -> Path:
    """
    Render the dashboard and write it to disk.

    Args:
        prices: Loaded price DataFrame, or None when the load failed
        analyses: Backtest results
        output_path: Destination HTML file (default: output/dashboard.html)

    Returns:
        Path to the written file
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(render_dashboard_html(prices, analyses))

    logger.info("Dashboard written: %s", output_path)
    return output_path
