"""UUID command for reading the host hardware UUID.

Only available in OpenFrame mode, where orbit drives a separately
installed osqueryd binary.
"""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from orbitctl.core.paths import resolve_root_dir
from orbitctl.osquery.query import OsqueryError, get_host_uuid
from orbitctl.utils.formatting import print_error

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="uuid",
    help="Get the host hardware UUID in OpenFrame mode.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def uuid(
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output UUID in JSON format.",
        ),
    ] = False,
    openframe_mode: Annotated[
        bool,
        typer.Option(
            "--openframe-mode",
            envvar="ORBIT_OPENFRAME_MODE",
            help="Enable OpenFrame mode for osquery.",
        ),
    ] = False,
    osquery_path: Annotated[
        Path | None,
        typer.Option(
            "--openframe-osquery-path",
            envvar="ORBIT_OPENFRAME_OSQUERY_PATH",
            help="Path to the osqueryd binary used in OpenFrame mode.",
        ),
    ] = None,
    root_dir: Annotated[
        Path | None,
        typer.Option(
            "--root-dir",
            envvar="ORBIT_ROOT_DIR",
            help="Agent root directory (platform default if omitted).",
        ),
    ] = None,
) -> None:
    """Print the host UUID reported by osquery.

    Examples:
        orbitctl uuid --openframe-mode --openframe-osquery-path /usr/bin/osqueryd
        orbitctl uuid --json     # {"uuid":"..."}
    """
    if not openframe_mode:
        print_error(
            "This command only works in OpenFrame mode.\n"
            "Please run with --openframe-mode flag or set ORBIT_OPENFRAME_MODE environment variable"
        )
        raise typer.Exit(code=1)

    root = resolve_root_dir(root_dir)
    logger.debug("Using root directory %s", root)

    if osquery_path is None:
        print_error("--openframe-osquery-path must be specified when OpenFrame mode is enabled")
        raise typer.Exit(code=1)

    try:
        host_uuid = get_host_uuid(osquery_path)
    except OsqueryError as e:
        print_error(f"failed to get host UUID: {e}")
        raise typer.Exit(code=1) from e

    if json_output:
        typer.echo(json.dumps({"uuid": host_uuid}, separators=(",", ":")))
    else:
        typer.echo(host_uuid)
