"""Candidate path sets for each cleanup category.

Path sets are derived data: they are computed from the root directory
and the platform policy on every run and may include paths that do not
exist. Removal skips missing paths.
"""

import logging
import os
from pathlib import Path

from orbitctl.core.paths import (
    DESKTOP_TOKEN_FILE_NAME,
    ENROLL_SECRET_FILE_NAME,
    NODE_KEY_FILE_NAME,
    OSQUERY_DB_NAME,
    SERVER_OVERRIDES_FILE_NAME,
)
from orbitctl.platforms.base import Platform

logger = logging.getLogger(__name__)

LOG_FILE_NAMES: tuple[str, ...] = (
    "osquery_log",
    "orbit.stderr.log",
    "orbit.stdout.log",
)

CACHE_ENTRY_NAMES: tuple[str, ...] = (
    "shell",  # scratch data for interactive shells
    "update-metadata",  # TUF update cache
    "updates.json",  # legacy update metadata
)

# Files left behind by the updater when it swaps in a new binary.
LEGACY_BACKUP_SUFFIX = ".old"

SECRET_FILE_NAMES: tuple[str, ...] = (
    NODE_KEY_FILE_NAME,
    DESKTOP_TOKEN_FILE_NAME,
    ENROLL_SECRET_FILE_NAME,
    SERVER_OVERRIDES_FILE_NAME,
    OSQUERY_DB_NAME,
    f"{OSQUERY_DB_NAME}-wal",
    f"{OSQUERY_DB_NAME}-shm",
)


def get_log_paths(root_dir: Path, platform: Platform) -> list[Path]:
    """Return agent log files plus the platform system log directory."""
    return [root_dir / name for name in LOG_FILE_NAMES] + platform.system_log_paths()


def get_cache_paths(root_dir: Path) -> list[Path]:
    """Return cache entries plus every legacy backup file under the root.

    The root is walked recursively; unreadable subdirectories are skipped.

    Args:
        root_dir: Agent root directory.

    Returns:
        The fixed cache entries followed by the backup files in sorted order.
    """
    paths = [root_dir / name for name in CACHE_ENTRY_NAMES]
    paths.extend(sorted(find_legacy_backups(root_dir)))
    return paths


def find_legacy_backups(root_dir: Path) -> list[Path]:
    """Find files whose name ends with the legacy backup suffix."""
    found: list[Path] = []

    def _on_error(error: OSError) -> None:
        logger.debug("Skipping unreadable directory: %s", error)

    for dirpath, _dirnames, filenames in os.walk(root_dir, onerror=_on_error):
        for filename in filenames:
            if filename.endswith(LEGACY_BACKUP_SUFFIX):
                found.append(Path(dirpath) / filename)
    return found


def get_secret_paths(root_dir: Path) -> list[Path]:
    """Return identity, enrollment, and osquery database files."""
    return [root_dir / name for name in SECRET_FILE_NAMES]
