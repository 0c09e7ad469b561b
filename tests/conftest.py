"""
Pytest configuration and fixtures for Halvback tests.
"""

import sys
from pathlib import Path

import pytest

# Modules live flat under src/ (config, main, analysis, api, ...)
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def pytest_addoption(parser):
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests that call the live CoinGecko API",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: test makes real network calls to CoinGecko"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration is given."""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="Use --run-integration to run API tests")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture
def sample_chart_data():
    """Market chart payload in the shape CoinGecko returns it."""
    return {
        "prices": [
            [1367107200000, 135.3],  # 2013-04-28
            [1367193600000, 141.96],  # 2013-04-29
            [1367280000000, 135.3],  # 2013-04-30
        ],
        "market_caps": [[1367107200000, 1500517590]],
        "total_volumes": [[1367107200000, 0]],
    }
