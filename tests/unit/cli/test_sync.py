"""
Unit tests for walletsync.cli.commands.sync module.

Tests cover:
- Posting held instruments through the (mocked) Investidor10 client
- --wallet-id / --session overrides
- Dry-run preview
- Exit status on failures and missing credentials
"""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import Mock, patch
from zoneinfo import ZoneInfo

import pytest
from click.testing import CliRunner

from walletsync.cli.commands.sync import sync_command
from walletsync.services.sync.interface import TickerNotFoundError
from walletsync.services.sync.models import TradeRequest

TRADES = """\
01/03/2023 10:00:00,PETR4,B,200,14.00
02/03/2023 10:00:00,BBAS3,B,100,20.00
03/03/2023 10:00:00,PETR4,S,50,15.00
04/03/2023 10:00:00,BBAS3,S,100,21.00
"""


@pytest.fixture
def cli_runner():
    """Fixture providing Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    config = tmp_path / "system.yaml"
    config.write_text(
        """
sync:
  base_url: https://investidor10.test
  session_token: abc
  wallet_id: 194632

logging:
  level: ERROR
"""
    )
    return config


@pytest.fixture
def mock_client():
    """Fixture providing a mock Investidor10Client instance."""
    client = Mock()
    client.add_asset.return_value = None
    return client


class TestSyncCommand:
    """Test the sync command."""

    def test_posts_events_of_held_instruments(self, cli_runner, config_file, mock_client):
        """Test only events of held instruments are posted, in order."""
        with patch("walletsync.cli.commands.sync.Investidor10Client", return_value=mock_client):
            result = cli_runner.invoke(sync_command, ["-c", str(config_file)], input=TRADES)

        assert result.exit_code == 0, result.output
        posted = [call.args[0] for call in mock_client.add_asset.call_args_list]
        assert [(e.code, e.quantity) for e in posted] == [("PETR4", 200), ("PETR4", 50)]
        assert "Added: 2" in result.output

    def test_cli_overrides_wallet_and_session(self, cli_runner, config_file, mock_client):
        """Test --wallet-id and --session override the config file."""
        with patch("walletsync.cli.commands.sync.Investidor10Client", return_value=mock_client) as client_cls:
            result = cli_runner.invoke(
                sync_command,
                ["-c", str(config_file), "--wallet-id", "7", "--session", "override"],
                input=TRADES,
            )

        assert result.exit_code == 0, result.output
        sync_config = client_cls.call_args.args[0]
        assert sync_config.wallet_id == 7
        assert sync_config.session_token == "override"

    def test_trade_dates_use_source_timezone(self, cli_runner, tmp_path, mock_client):
        """Test the client formats trade dates in the trade file's timezone."""
        config = tmp_path / "sao_paulo.yaml"
        config.write_text(
            "source:\n  timezone: America/Sao_Paulo\n"
            "sync:\n  session_token: abc\n  wallet_id: 1\n"
            "logging:\n  level: ERROR\n"
        )

        with patch("walletsync.cli.commands.sync.Investidor10Client", return_value=mock_client) as client_cls:
            result = cli_runner.invoke(sync_command, ["-c", str(config)], input=TRADES)

        assert result.exit_code == 0, result.output
        assert client_cls.call_args.kwargs["trade_timezone"] == ZoneInfo("America/Sao_Paulo")

    def test_failure_sets_exit_status(self, cli_runner, config_file, mock_client):
        """Test a failed trade is reported, the run continues, and exit status is 1."""
        mock_client.add_asset.side_effect = [TickerNotFoundError("PETR4"), None]

        with patch("walletsync.cli.commands.sync.Investidor10Client", return_value=mock_client):
            result = cli_runner.invoke(sync_command, ["-c", str(config_file)], input=TRADES)

        assert result.exit_code == 1
        assert mock_client.add_asset.call_count == 2
        assert "Ticker PETR4 not found" in result.output
        assert "Failed: 1" in result.output

    def test_no_holdings(self, cli_runner, config_file, mock_client):
        """Test nothing is posted when no instrument is held."""
        closed = "01/03/2023 10:00:00,BBAS3,B,100,20.00\n02/03/2023 10:00:00,BBAS3,S,100,21.00\n"

        with patch("walletsync.cli.commands.sync.Investidor10Client", return_value=mock_client):
            result = cli_runner.invoke(sync_command, ["-c", str(config_file)], input=closed)

        assert result.exit_code == 0, result.output
        assert "No holdings to sync" in result.output
        mock_client.add_asset.assert_not_called()

    def test_dry_run_does_not_post(self, cli_runner, config_file, mock_client):
        """Test --dry-run builds trade requests without posting them."""
        mock_client.build_trade_request.return_value = TradeRequest(
            ticker_type="Ticker",
            user_wallet_id=194632,
            trade_type="BUY",
            date=datetime(2023, 3, 1, tzinfo=timezone.utc),
            qty=200,
            ticker=7,
            price=Decimal("14.00"),
        )

        with patch("walletsync.cli.commands.sync.Investidor10Client", return_value=mock_client):
            result = cli_runner.invoke(sync_command, ["-c", str(config_file), "--dry-run"], input=TRADES)

        assert result.exit_code == 0, result.output
        assert mock_client.build_trade_request.call_count == 2
        mock_client.add_asset.assert_not_called()
        assert "14,00000000" in result.output

    def test_missing_wallet_id_is_reported(self, cli_runner, tmp_path, monkeypatch):
        """Test a missing wallet id is a clean CLI error."""
        monkeypatch.delenv("INVESTIDOR10_WALLET_ID", raising=False)
        config = tmp_path / "no_wallet.yaml"
        config.write_text("sync:\n  session_token: abc\nlogging:\n  level: ERROR\n")

        result = cli_runner.invoke(sync_command, ["-c", str(config)], input=TRADES)

        assert result.exit_code == 1
        assert "wallet id" in result.output

    def test_missing_session_token_is_reported(self, cli_runner, tmp_path, monkeypatch):
        """Test a missing session token is a clean CLI error."""
        monkeypatch.delenv("INVESTIDOR10_SESSION", raising=False)
        config = tmp_path / "no_token.yaml"
        config.write_text("sync:\n  wallet_id: 1\nlogging:\n  level: ERROR\n")

        result = cli_runner.invoke(sync_command, ["-c", str(config)], input=TRADES)

        assert result.exit_code == 1
        assert "session token" in result.output
