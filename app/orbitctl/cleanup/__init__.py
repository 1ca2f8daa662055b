"""Agent cleanup: path sets, operators, and the orchestrator."""

from orbitctl.cleanup.operator import CommandOperator, PathOperator
from orbitctl.cleanup.orchestrator import (
    CleanupError,
    CleanupOrchestrator,
    PrivilegeError,
    require_admin,
)
from orbitctl.cleanup.paths import get_cache_paths, get_log_paths, get_secret_paths

__all__ = [
    "CleanupError",
    "CleanupOrchestrator",
    "CommandOperator",
    "PathOperator",
    "PrivilegeError",
    "get_cache_paths",
    "get_log_paths",
    "get_secret_paths",
    "require_admin",
]
