"""
Tests for the dashboard page and chart builders.
"""

import math
from datetime import date

import plotly.graph_objects as go
import pytest

from analysis.backtest import analyze_cycle, halving_timestamp, run_backtest
from config import HALVING_EVENTS, MS_PER_DAY, HalvingEvent
from data.loader import build_price_frame
from visualization.charts import create_cycle_comparison_chart, create_price_history_chart
from visualization.dashboard import (
    format_currency,
    format_percentage,
    render_dashboard_html,
    write_dashboard,
)

EVENT = HalvingEvent(date(2016, 7, 9), 420000, 2, 650.63)


@pytest.fixture
def prices():
    t = halving_timestamp(EVENT)
    return build_price_frame([
        [t - 300 * MS_PER_DAY, 420.0],
        [t, 650.63],
        [t + 500 * MS_PER_DAY, 19497.4],
        [t + 700 * MS_PER_DAY, 6200.0],
    ])


@pytest.fixture
def analyses(prices):
    return [analyze_cycle(prices, EVENT)]


class TestFormatting:
    """Tests for currency and percentage formatting."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (63812.0, "$63,812"),
            (12.35, "$12.35"),
            (1234.5, "$1,234.5"),
            (1234567.891, "$1,234,567.89"),
            (0.0, "$0"),
            (-5.5, "$-5.5"),
        ],
    )
    def test_format_currency(self, value, expected):
        assert format_currency(value) == expected

    def test_format_currency_non_finite(self):
        assert format_currency(math.inf) == "$inf"

    @pytest.mark.parametrize(
        "value, expected",
        [
            (100.0, "100.00%"),
            (-25.0, "-25.00%"),
            (5251.123, "5251.12%"),
            (math.inf, "inf%"),
            (-math.inf, "-inf%"),
            (math.nan, "nan%"),
        ],
    )
    def test_format_percentage(self, value, expected):
        assert format_percentage(value) == expected


class TestCharts:
    """Tests for the Plotly chart builders."""

    def test_price_history_chart(self, prices):
        fig = create_price_history_chart(prices)

        assert isinstance(fig, go.Figure)
        assert len(fig.data) == 1
        assert fig.layout.yaxis.type == "log"
        assert len(fig.layout.shapes) == len(HALVING_EVENTS)
        texts = [a.text for a in fig.layout.annotations]
        assert texts == [f"Halving {e.cycle}" for e in HALVING_EVENTS]

    def test_cycle_comparison_chart(self, analyses):
        fig = create_cycle_comparison_chart(analyses)

        assert [trace.name for trace in fig.data] == [
            "Pre-Halving Gain",
            "Post-Halving Gain",
            "Drawdown",
        ]
        assert list(fig.data[0].x) == ["Cycle 2 (2016)"]
        assert fig.data[2].y[0] == pytest.approx(analyses[0].crash.percentage_from_peak)


class TestRenderDashboard:
    """Tests for the dashboard HTML."""

    def test_loading_page_without_data(self):
        html = render_dashboard_html(None, [])

        assert "Loading Bitcoin data..." in html
        assert "Summary Statistics" not in html

    def test_cycle_card(self, prices, analyses):
        html = render_dashboard_html(prices, analyses)

        assert "Cycle 2 - Halving: 2016-07-09" in html
        assert "Start Price: <span class=\"value\">$420</span>" in html
        assert "Peak Price: <span class=\"value\">$19,497.4</span>" in html
        assert "Days to Peak: <span class=\"value\">500 days</span>" in html
        assert "Bottom Price: <span class=\"value\">$6,200</span>" in html
        assert f"Gain: {format_percentage(analyses[0].pre_halving.percentage_gain)}" in html

    def test_summary_and_footer(self, prices, analyses):
        html = render_dashboard_html(prices, analyses)

        assert "Summary Statistics" in html
        assert "Avg Bear Market Drawdown" in html
        assert "Data source: CoinGecko API" in html
        assert "Past performance does not guarantee future results" in html

    def test_non_finite_values_surface(self, prices):
        late = HalvingEvent(date(2030, 1, 1), 1050000, 5, 0.0)
        analyses = run_backtest(prices, events=[EVENT, late])

        html = render_dashboard_html(prices, analyses)

        assert "Drawdown: inf%" in html

    def test_write_dashboard(self, prices, analyses, tmp_path):
        path = write_dashboard(prices, analyses, tmp_path / "site" / "index.html")

        assert path.exists()
        assert "Bitcoin Halving Analysis &amp; Backtest" in path.read_text(encoding="utf-8")

    def test_write_loading_page(self, tmp_path):
        path = write_dashboard(None, [], tmp_path / "dashboard.html")
        assert "Loading Bitcoin data..." in path.read_text(encoding="utf-8")
