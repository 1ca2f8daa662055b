"""Main CLI application entry point.

Defines the Typer application, global options, and logging setup.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from orbitctl import __version__
from orbitctl.cli.commands import bootstrap, cleanup, uuid
from orbitctl.utils.formatting import err_console

app = typer.Typer(
    name="orbitctl",
    help="Maintenance tools for the orbit agent and its fleet server.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"orbitctl version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: Show debug records.
        quiet: Show errors only. Ignored when verbose is set.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    handler = RichHandler(console=err_console, show_path=False, show_time=verbose)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """orbitctl - maintenance tools for the orbit agent.

    Read the host UUID through osquery, clean up agent data, and
    bootstrap the fleet server container.
    """
    configure_logging(verbose=verbose, quiet=quiet)


app.add_typer(uuid.app, name="uuid")
app.add_typer(cleanup.app, name="cleanup")
app.add_typer(bootstrap.app, name="bootstrap")


if __name__ == "__main__":
    app()
