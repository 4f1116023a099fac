"""Unit tests for the command-line interface."""

import json

from click.testing import CliRunner

from widget_proxy.cli.main import cli


class TestCheckCommand:
    """Tests for the check command."""

    def test_valid_url(self) -> None:
        """Test that an accepted URL prints its normalized form."""
        result = CliRunner().invoke(cli, ["check", "example.com/path"])

        assert result.exit_code == 0
        output = json.loads(result.output)
        assert output["is_valid"] is True
        assert output["normalized_url"] == "https://example.com/path"
        assert output["domain"] == "example.com"

    def test_blocked_url_exits_1(self) -> None:
        """Test that a rejected URL prints the reason and fails."""
        result = CliRunner().invoke(cli, ["check", "http://10.0.0.5/"])

        assert result.exit_code == 1
        output = json.loads(result.output)
        assert output["is_valid"] is False
        assert output["category"] == "SecurityBlocked"
        assert output["error"] == (
            "Private IP addresses are not allowed for security reasons"
        )


class TestCliGroup:
    """Tests for the command group."""

    def test_help_lists_commands(self) -> None:
        """Test that serve and check are registered."""
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "serve" in result.output
        assert "check" in result.output

    def test_version(self) -> None:
        """Test the version option."""
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output
