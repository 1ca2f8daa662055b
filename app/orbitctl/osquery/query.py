"""Single-shot osquery queries.

Runs osqueryd in shell mode (``-S``) against a throwaway database
directory and parses its JSON output. osqueryd may exit non-zero (for
example with status 78) while still printing a valid result, so output
that parses is accepted regardless of the exit status.
"""

import json
import logging
import shutil
import subprocess
import tempfile
import uuid
from pathlib import Path
from typing import Any

from orbitctl.utils.shell import run_command

logger = logging.getLogger(__name__)

UUID_QUERY = "SELECT uuid FROM system_info"

# osqueryd can take a while to initialise its database on first start.
_QUERY_TIMEOUT: float = 60.0


class OsqueryError(Exception):
    """Raised when osqueryd cannot run or returns an unusable result."""


def check_osqueryd_path(osqueryd_path: Path) -> None:
    """Verify that the osqueryd binary exists.

    Raises:
        OsqueryError: If the path does not exist or cannot be inspected.
    """
    try:
        osqueryd_path.stat()
    except FileNotFoundError:
        msg = f"custom openframe osqueryd binary not found: {osqueryd_path}"
        raise OsqueryError(msg) from None
    except OSError as e:
        msg = f"failed to check custom openframe osqueryd binary: {e}"
        raise OsqueryError(msg) from e


def run_query(osqueryd_path: Path, database_path: Path, query: str) -> list[dict[str, Any]]:
    """Run one query through osqueryd and return its rows.

    Args:
        osqueryd_path: Path to the osqueryd binary.
        database_path: Scratch database directory for this invocation.
        query: SQL to execute.

    Returns:
        Rows decoded from osqueryd's JSON output.

    Raises:
        OsqueryError: If osqueryd cannot start or its output is not a JSON
            array of objects.
    """
    # osqueryd -S does not create missing parent directories.
    try:
        database_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        msg = f"failed to create osquery database directory: {e}"
        raise OsqueryError(msg) from e

    args = [
        str(osqueryd_path),
        "-S",
        "--database_path",
        str(database_path),
        "--json",
        query,
    ]
    logger.debug("Running osquery: %s", " ".join(args))

    try:
        result = run_command(args, timeout=_QUERY_TIMEOUT)
    except (OSError, subprocess.TimeoutExpired) as e:
        msg = f"osqueryd failed: {e}"
        raise OsqueryError(msg) from e

    try:
        rows = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        if result.success:
            msg = f"failed to parse osqueryd output: {e}"
        else:
            msg = (
                f"osqueryd failed: exit status {result.returncode}, "
                f"output: {result.stdout}, stderr: {result.stderr}"
            )
        raise OsqueryError(msg) from e

    if not result.success:
        logger.debug("osqueryd exited with %d but produced valid output", result.returncode)

    if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
        msg = "failed to parse osqueryd output: expected a JSON array of objects"
        raise OsqueryError(msg)
    return rows


def query_host_uuid(osqueryd_path: Path, database_path: Path) -> str:
    """Read the hardware UUID of this host.

    Raises:
        OsqueryError: If the query fails or does not return exactly one
            row with a string ``uuid`` field.
    """
    rows = run_query(osqueryd_path, database_path, UUID_QUERY)

    if len(rows) != 1:
        msg = f"expected 1 row from UUID query, got {len(rows)}"
        raise OsqueryError(msg)

    host_uuid = rows[0].get("uuid")
    if not isinstance(host_uuid, str):
        msg = "UUID field not found or not a string"
        raise OsqueryError(msg)
    return host_uuid


def get_host_uuid(osqueryd_path: Path, scratch_root: Path | None = None) -> str:
    """Read the host UUID using a scratch database that is always removed.

    Args:
        osqueryd_path: Path to the osqueryd binary.
        scratch_root: Parent of the scratch directory. Defaults to the
            system temporary directory.

    Returns:
        The host UUID exactly as osquery reports it.

    Raises:
        OsqueryError: If the binary is missing or the query fails.
    """
    check_osqueryd_path(osqueryd_path)

    base = scratch_root or Path(tempfile.gettempdir())
    database_path = base / f"orbit-uuid-{uuid.uuid4()}"
    try:
        return query_host_uuid(osqueryd_path, database_path)
    finally:
        shutil.rmtree(database_path, ignore_errors=True)
