"""
Tests for the command-line entry point.
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

import main
from analysis.backtest import halving_timestamp
from api.coingecko import CoinGeckoClient
from config import HALVING_EVENTS, MS_PER_DAY
from data.loader import LoadResult, PriceLoader, build_price_frame


@pytest.fixture(autouse=True)
def reset_logging():
    """main() attaches handlers to the halvback logger; drop them after each test."""
    yield
    logging.getLogger("halvback").handlers.clear()


@pytest.fixture
def loaded():
    """A successful load covering the third halving."""
    t = halving_timestamp(HALVING_EVENTS[2])
    prices = build_price_frame([
        [t - 200 * MS_PER_DAY, 7000.0],
        [t, 8600.0],
        [t + 300 * MS_PER_DAY, 58000.0],
        [t + 600 * MS_PER_DAY, 33000.0],
    ])
    return LoadResult(success=True, message="Loaded 4 price points", prices=prices)


@pytest.fixture
def failed():
    return LoadResult(success=False, message="API error: timeout", errors=["timeout"])


class TestMain:
    """Tests for argument handling and command routing."""

    def test_no_command_prints_help(self, capsys):
        assert main.main([]) == 0
        assert "dashboard" in capsys.readouterr().out

    def test_unknown_command_exits(self):
        with pytest.raises(SystemExit):
            main.main(["unknown"])

    def test_dashboard_writes_page(self, loaded, tmp_path):
        output = tmp_path / "dashboard.html"

        with patch("main.PriceLoader") as mock_loader:
            mock_loader.return_value.load.return_value = loaded
            code = main.main(["dashboard", "--output", str(output)])

        assert code == 0
        mock_loader.return_value.load.assert_called_once_with()
        html = output.read_text(encoding="utf-8")
        assert "Cycle 3 - Halving: 2020-05-11" in html
        assert "Cycle 4 - Halving: 2024-04-19" in html

    def test_dashboard_default_output_under_working_directory(
        self, loaded, tmp_path, monkeypatch
    ):
        monkeypatch.chdir(tmp_path)

        with patch("main.PriceLoader") as mock_loader:
            mock_loader.return_value.load.return_value = loaded
            code = main.main(["dashboard"])

        assert code == 0
        assert (tmp_path / "output" / "dashboard.html").exists()

    def test_dashboard_malformed_payload_writes_loading_page(self, tmp_path):
        output = tmp_path / "dashboard.html"
        client = MagicMock(spec=CoinGeckoClient)
        client.get_coin_market_chart.return_value = {"prices": [[10**17, 1.0]]}

        with patch("main.PriceLoader", side_effect=lambda: PriceLoader(client=client)):
            code = main.main(["dashboard", "-o", str(output)])

        assert code == 1
        assert "Loading Bitcoin data..." in output.read_text(encoding="utf-8")

    def test_dashboard_failed_load_writes_loading_page(self, failed, tmp_path):
        output = tmp_path / "dashboard.html"

        with patch("main.PriceLoader") as mock_loader:
            mock_loader.return_value.load.return_value = failed
            code = main.main(["dashboard", "-o", str(output)])

        assert code == 1
        assert "Loading Bitcoin data..." in output.read_text(encoding="utf-8")

    def test_backtest_logs_results(self, loaded, caplog):
        with patch("main.PriceLoader") as mock_loader:
            mock_loader.return_value.load.return_value = loaded
            with caplog.at_level("INFO", logger="halvback"):
                code = main.main(["backtest"])

        assert code == 0
        assert "Cycle 3 (halving 2020-05-11)" in caplog.text
        assert "Averages over 4 cycles" in caplog.text

    def test_backtest_failed_load(self, failed):
        with patch("main.PriceLoader") as mock_loader:
            mock_loader.return_value.load.return_value = failed
            assert main.main(["backtest"]) == 1

    def test_unexpected_error_returns_1(self):
        with patch("main.PriceLoader") as mock_loader:
            mock_loader.return_value.load.side_effect = RuntimeError("boom")
            assert main.main(["backtest"]) == 1

    @pytest.mark.parametrize("reachable, expected", [(True, 0), (False, 1)])
    def test_ping(self, reachable, expected):
        with patch("main.CoinGeckoClient") as mock_client:
            mock_client.return_value.ping.return_value = reachable
            assert main.main(["ping"]) == expected
