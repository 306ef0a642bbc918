"""Tests for the command-line interface."""

from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from restoauth.cli import cli


def make_settings(**overrides) -> MagicMock:
    settings = MagicMock()
    settings.database_url = "sqlite+aiosqlite:///./data/restoauth.db"
    settings.host = "0.0.0.0"
    settings.port = 8000
    settings.workers = 1
    settings.log_level = "INFO"
    settings.environment = "development"
    for key, value in overrides.items():
        setattr(settings, key, value)
    return settings


def test_serve_rejects_multiple_workers_with_sqlite():
    runner = CliRunner()
    with patch("restoauth.cli.get_settings", return_value=make_settings()), patch(
        "uvicorn.run"
    ) as mock_run:
        result = runner.invoke(cli, ["serve", "--workers", "2"])

    assert result.exit_code == 1
    assert "SQLite does not support multiple worker processes" in result.output
    mock_run.assert_not_called()


def test_serve_starts_uvicorn():
    runner = CliRunner()
    with patch("restoauth.cli.get_settings", return_value=make_settings()), patch(
        "restoauth.cli.configure_logging"
    ), patch("uvicorn.run") as mock_run:
        result = runner.invoke(cli, ["serve", "--port", "9000"])

    assert result.exit_code == 0
    args, kwargs = mock_run.call_args
    assert args[0] == "restoauth.infrastructure.api.app:app"
    assert kwargs["port"] == 9000


def test_info_lists_authorization_settings():
    result = CliRunner().invoke(cli, ["info"])
    assert result.exit_code == 0
    assert "Token Issuer" in result.output
    assert "Timeout" in result.output


def test_show_user_rejects_malformed_id():
    result = CliRunner().invoke(cli, ["show-user", "not-a-uuid"])
    assert result.exit_code == 1
    assert "Invalid user identifier" in result.output
