"""
Halvback - Bitcoin Halving Backtest

Command-line entry point for the dashboard pipeline.

Usage:
    python -m main [command] [options]

Commands:
    dashboard   Load prices, run the backtest and write the HTML dashboard
    backtest    Load prices, run the backtest and log the results
    ping        Check CoinGecko API connectivity

Examples:
    # Build output/dashboard.html
    python -m main dashboard

    # Write the dashboard somewhere else
    python -m main dashboard --output site/index.html

    # Print the per-cycle table
    python -m main backtest --verbose
"""

import argparse
import logging
import sys
from pathlib import Path

from analysis.backtest import analyses_to_frame, run_backtest, summarize_cycles
from api.coingecko import CoinGeckoClient
from config import DASHBOARD_HTML, OUTPUT_DIR
from data.loader import PriceLoader
from utils.logging import get_logger, setup_logging

# Module logger
logger = get_logger(__name__)


def _fmt_pct(value: float) -> str:
    return f"{value:.2f}%"


def cmd_dashboard(args: argparse.Namespace) -> int:
    """Load prices once, backtest and write the dashboard page."""
    from visualization.dashboard import write_dashboard

    logger.info("=" * 60)
    logger.info("HALVBACK - Build Dashboard")
    logger.info("=" * 60)

    result = PriceLoader().load()

    if not result.success:
        logger.error("Failed: %s", result.message)
        # The page is left in its "no data" state
        path = write_dashboard(None, [], args.output)
        logger.info("Wrote loading page: %s", path)
        return 1

    analyses = run_backtest(result.prices)
    path = write_dashboard(result.prices, analyses, args.output)

    logger.info("-" * 60)
    logger.info("Dashboard: %s", path)

    return 0


def cmd_backtest(args: argparse.Namespace) -> int:
    """Load prices once and log the per-cycle backtest."""
    logger.info("=" * 60)
    logger.info("HALVBACK - Halving Backtest")
    logger.info("=" * 60)

    result = PriceLoader().load()

    if not result.success:
        logger.error("Failed: %s", result.message)
        return 1

    analyses = run_backtest(result.prices)

    logger.info("-" * 60)
    logger.info("RESULTS")
    logger.info("-" * 60)
    for a in analyses:
        logger.info("Cycle %d (halving %s)", a.cycle, a.halving_date)
        logger.info(
            "  Pre-halving:  $%.2f -> $%.2f  (%s)",
            a.pre_halving.start_price,
            a.pre_halving.halving_price,
            _fmt_pct(a.pre_halving.percentage_gain),
        )
        logger.info(
            "  Peak:         $%.2f on %s, %d days after  (%s)",
            a.post_halving.peak_price,
            a.post_halving.peak_date or "n/a",
            a.post_halving.days_to_peak,
            _fmt_pct(a.post_halving.percentage_gain),
        )
        logger.info(
            "  Bottom:       $%.2f on %s  (%s)",
            a.crash.bottom_price,
            a.crash.crash_date or "n/a",
            _fmt_pct(a.crash.percentage_from_peak),
        )

    summary = summarize_cycles(analyses)
    logger.info("-" * 60)
    logger.info("Averages over %d cycles:", summary.cycles)
    logger.info("  Pre-halving gain:   %s", _fmt_pct(summary.avg_pre_halving_gain))
    logger.info("  Post-halving gain:  %s", _fmt_pct(summary.avg_post_halving_gain))
    logger.info("  Drawdown:           %s", _fmt_pct(summary.avg_drawdown))

    logger.debug("Full table:\n%s", analyses_to_frame(analyses).to_string())

    return 0


def cmd_ping(args: argparse.Namespace) -> int:
    """Check API connectivity."""
    logger.info("Checking CoinGecko API connectivity...")
    if not CoinGeckoClient().ping():
        logger.error("Could not connect to CoinGecko API")
        return 1
    logger.info("API is reachable")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="halvback",
        description="Bitcoin price backtest around halving events",
    )

    # Global arguments
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Log to file (in addition to console)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # dashboard command
    dashboard_parser = subparsers.add_parser(
        "dashboard",
        help="Load prices, run the backtest and write the HTML dashboard",
    )
    dashboard_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=DASHBOARD_HTML,
        help=f"Output HTML file (default: {DASHBOARD_HTML})",
    )

    # backtest command
    subparsers.add_parser(
        "backtest",
        help="Load prices, run the backtest and log the results",
    )

    # ping command
    subparsers.add_parser(
        "ping",
        help="Check CoinGecko API connectivity",
    )

    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    log_file = args.log_file or (OUTPUT_DIR / "halvback.log" if args.verbose else None)
    setup_logging(level=log_level, log_file=log_file, verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "dashboard": cmd_dashboard,
        "backtest": cmd_backtest,
        "ping": cmd_ping,
    }

    handler = commands.get(args.command)
    if handler:
        try:
            return handler(args)
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            return 130
        except Exception as e:
            logger.exception("Unexpected error: %s", e)
            return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
