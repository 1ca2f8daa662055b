"""Cleanup domain models.

This module defines the categories a cleanup run can target, the error
policies, and the immutable report every cleanup step returns. Steps
never share an accumulator: each returns a CleanupReport and the caller
merges them.
"""

from dataclasses import dataclass
from enum import Enum

from orbitctl.models.action import ActionResult


class CleanupCategory(str, Enum):
    """Something a cleanup run can remove or stop.

    Declaration order is the execution order.

    Attributes:
        SERVICE: Stop the agent service and desktop helper.
        COLLECTOR: Stop the osquery collection process (OpenFrame mode).
        LOGS: Agent log files and the system log directory.
        CACHE: Temporary data, update metadata, and legacy backups.
        SECRETS: Node key, enrollment secret, tokens, and osquery database.
        REGISTRY: Windows registry entries.
        SERVICE_FILES: Service definitions and the installed agent binary.
    """

    SERVICE = "service"
    COLLECTOR = "collector"
    LOGS = "logs"
    CACHE = "cache"
    SECRETS = "secrets"
    REGISTRY = "registry"
    SERVICE_FILES = "service_files"


class ErrorPolicy(str, Enum):
    """How a cleanup run reacts to a failed removal.

    Attributes:
        FAIL_FAST: Abort on the first error; later categories are skipped.
        CONTINUE: Keep going and report the aggregated error count.
    """

    FAIL_FAST = "fail-fast"
    CONTINUE = "continue"


@dataclass(frozen=True, slots=True)
class PathResult:
    """Result of removing (or simulating removal of) a single path.

    Attributes:
        path: Path that was operated on.
        success: Whether the removal succeeded.
        error: Error message if the removal failed, None otherwise.
        dry_run: Whether this was a dry-run (nothing deleted).
    """

    path: str
    success: bool
    error: str | None = None
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class CleanupReport:
    """Outcome of one cleanup step, or of a whole run after merging.

    Attributes:
        removed: Paths removed (or that would be removed in dry-run).
        stopped: Services or processes stopped.
        errors: Error messages for failed removals and required actions.
        actions: Every command outcome, best-effort ones included.
        aborted: Whether the run stopped early under FAIL_FAST.
    """

    removed: tuple[str, ...] = ()
    stopped: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
    actions: tuple[ActionResult, ...] = ()
    aborted: bool = False

    @property
    def has_errors(self) -> bool:
        """Check if any error was recorded."""
        return bool(self.errors)

    @property
    def failed(self) -> bool:
        """Check if the run must exit with a failure status."""
        return self.aborted or self.has_errors

    def merge(self, other: "CleanupReport") -> "CleanupReport":
        """Return a new report with ``other`` appended after this one."""
        return CleanupReport(
            removed=self.removed + other.removed,
            stopped=self.stopped + other.stopped,
            errors=self.errors + other.errors,
            actions=self.actions + other.actions,
            aborted=self.aborted or other.aborted,
        )

    @classmethod
    def from_path_results(cls, results: list[PathResult]) -> "CleanupReport":
        """Build a report from per-path removal results."""
        return cls(
            removed=tuple(r.path for r in results if r.success),
            errors=tuple(f"{r.path}: {r.error}" for r in results if not r.success),
        )
