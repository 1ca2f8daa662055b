"""Bootstrap commands for the fleet server container.

``orbitctl bootstrap run`` is the container entrypoint; ``orbitctl
bootstrap init`` runs only the account initialization against an
already running server.
"""

import os

import typer

from orbitctl.bootstrap.config import BootstrapConfig, BootstrapError, InitConfig
from orbitctl.bootstrap.fleetctl import FleetInitializer
from orbitctl.bootstrap.runner import BootstrapRunner
from orbitctl.utils.formatting import print_error

app = typer.Typer(
    help="Fleet server container bootstrap.",
    no_args_is_help=True,
)


@app.command()
def run() -> None:
    """Wait for MySQL and Redis, prepare the database, and run the fleet server.

    All settings come from the environment (FLEET_MYSQL_ADDRESS,
    FLEET_REDIS_ADDRESS, FLEET_CONFIG, FLEET_SERVER_PORT,
    FLEET_SETUP_AUTO_INIT, ...). Exits with the server's exit code.
    """
    try:
        config = BootstrapConfig.from_env(os.environ)
        returncode = BootstrapRunner(config).run()
    except BootstrapError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    raise typer.Exit(code=returncode)


@app.command()
def init() -> None:
    """Create the admin and API-only accounts and save the API token.

    Skipped when the token file (FLEET_API_TOKEN_FILE) already exists.
    """
    try:
        config = InitConfig.from_env(os.environ)
        FleetInitializer(config).run()
    except BootstrapError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
