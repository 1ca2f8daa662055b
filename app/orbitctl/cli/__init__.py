"""CLI package for orbitctl.

This package contains the Typer application and all subcommands.
"""

from orbitctl.cli.main import app

__all__ = ["app"]
