"""Visualization module for Halvback charts and the dashboard page."""

from visualization.charts import create_cycle_comparison_chart, create_price_history_chart
from visualization.dashboard import (
    format_currency,
    format_percentage,
    render_dashboard_html,
    write_dashboard,
)

__all__ = [
    "create_price_history_chart",
    "create_cycle_comparison_chart",
    "format_currency",
    "format_percentage",
    "render_dashboard_html",
    "write_dashboard",
]
