"""Tests for the httplog CLI."""

from unittest.mock import patch

from typer.testing import CliRunner

from httplog import __version__
from httplog.cli.main import cli

runner = CliRunner()


class TestVersion:
    """Tests for `httplog version`."""

    def test_prints_version(self):
        result = runner.invoke(cli, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output
        assert "authorization" in result.output


class TestServe:
    """Tests for `httplog serve` (server start is mocked)."""

    def test_defaults(self):
        with patch("httplog.server.run") as mock_run:
            result = runner.invoke(cli, ["serve"])

        assert result.exit_code == 0
        options = mock_run.call_args.args[0]
        assert options.format == "json"
        assert options.concise is False
        assert mock_run.call_args.kwargs == {"host": "127.0.0.1", "port": 8080}

    def test_overrides(self):
        with patch("httplog.server.run") as mock_run:
            result = runner.invoke(
                cli,
                ["serve", "--format", "text", "--concise", "--leak", "--service", "hello", "-p", "9000"],
            )

        assert result.exit_code == 0
        options = mock_run.call_args.args[0]
        assert options.format == "text"
        assert options.concise is True
        assert options.leak_sensitive_values is True
        assert options.service_name == "hello"
        assert mock_run.call_args.kwargs["port"] == 9000
