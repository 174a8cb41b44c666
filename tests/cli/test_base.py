"""Tests for CLI base functionality."""

from __future__ import annotations

from click.testing import CliRunner

import runtask
from runtask.cli import cli


class TestCLIBase:
    """Tests for basic CLI functionality."""

    def test_cli_help(self):
        """Test that --help works."""
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Runtask" in result.output
        assert "run" in result.output
        assert "list" in result.output

    def test_cli_version(self):
        """Test that --version works."""
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert runtask.__version__ in result.output

    def test_cli_no_command(self):
        """Test CLI with no command shows usage."""
        runner = CliRunner()
        result = runner.invoke(cli, [])
        assert "Usage:" in result.output

    def test_cli_invalid_command(self):
        """Test CLI with invalid command."""
        runner = CliRunner()
        result = runner.invoke(cli, ["invalid"])
        assert result.exit_code != 0
