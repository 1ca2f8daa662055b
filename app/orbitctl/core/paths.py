"""Well-known locations used by the orbit agent and orbitctl itself.

The agent keeps logs, update metadata, and secrets under a single root
directory whose default depends on the operating system:

- Linux / macOS: /opt/orbit (or /var/lib/orbit for packaged installs)
- Windows: %ProgramFiles%\\Orbit
"""

import os
import platform
import sys
from pathlib import Path

APP_NAME = "orbitctl"

# Packaged installs that run the agent out of this directory keep their data there.
PACKAGED_ROOT_DIR = Path("/var/lib/orbit")

POSIX_ROOT_DIR = Path("/opt/orbit")

# Secret and identity files written by the agent under the root directory.
NODE_KEY_FILE_NAME = "secret-orbit-node-key.txt"
DESKTOP_TOKEN_FILE_NAME = "identifier"
ENROLL_SECRET_FILE_NAME = "secret-osquery.txt"
SERVER_OVERRIDES_FILE_NAME = "server-overrides.json"
OSQUERY_DB_NAME = "osquery.db"

# Fleet server container locations.
DEFAULT_FLEET_CONFIG = Path("/etc/fleet/fleet.yml")
DEFAULT_API_TOKEN_FILE = Path("/etc/fleet/api_token.txt")


def get_config_dir() -> Path:
    """Get the orbitctl configuration directory.

    Returns:
        Path to ~/.config/orbitctl/ (or XDG_CONFIG_HOME/orbitctl/).
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_fleetctl_config_path() -> Path:
    """Get the file where fleetctl stores its address and session token.

    Returns:
        Path to ~/.fleet/config.
    """
    return Path.home() / ".fleet" / "config"


def get_default_root_dir(system: str | None = None) -> Path:
    """Return the platform default root directory for agent data.

    Args:
        system: Value in the style of ``platform.system()``. Detected if None.

    Returns:
        Default root directory for the given platform.
    """
    system = system or platform.system()
    if system == "Windows":
        program_files = os.environ.get("ProgramFiles", r"C:\Program Files")
        return Path(program_files) / "Orbit"
    return POSIX_ROOT_DIR


def resolve_root_dir(
    explicit: Path | None = None,
    *,
    system: str | None = None,
    executable: str | None = None,
) -> Path:
    """Resolve the agent root directory.

    An explicit directory always wins. Otherwise an executable located
    under /var/lib/orbit selects that directory, and the platform default
    is used in every other case.

    Args:
        explicit: Directory passed on the command line or via ORBIT_ROOT_DIR.
        system: Value in the style of ``platform.system()``. Detected if None.
        executable: Path of the running program. Defaults to sys.argv[0].

    Returns:
        Root directory to operate on.
    """
    if explicit is not None:
        return explicit

    executable = executable if executable is not None else sys.argv[0]
    if executable and os.path.abspath(executable).startswith(str(PACKAGED_ROOT_DIR)):
        return PACKAGED_ROOT_DIR

    return get_default_root_dir(system)
