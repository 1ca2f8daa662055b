"""Unit tests for the root CLI application."""

import logging

import pytest
from orbitctl import __version__
from orbitctl.cli.main import app, configure_logging
from typer.testing import CliRunner

runner = CliRunner()


class TestRootApp:
    """Tests for the root Typer app."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"orbitctl version {__version__}" in result.stdout

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("uuid", "cleanup", "bootstrap"):
            assert command in result.stdout


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.mark.parametrize(
        ("verbose", "quiet", "level"),
        [
            (False, False, logging.WARNING),
            (True, False, logging.DEBUG),
            (False, True, logging.ERROR),
            (True, True, logging.DEBUG),
        ],
    )
    def test_levels(self, verbose: bool, quiet: bool, level: int) -> None:
        configure_logging(verbose=verbose, quiet=quiet)
        assert logging.getLogger().level == level
