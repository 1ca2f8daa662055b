"""CLI commands for orbitctl.

This package contains all subcommand implementations.
"""

from orbitctl.cli.commands import bootstrap, cleanup, uuid

__all__ = ["bootstrap", "cleanup", "uuid"]
