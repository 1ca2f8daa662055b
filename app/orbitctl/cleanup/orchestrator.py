"""Cleanup orchestration.

Runs the selected cleanup categories in a fixed order against one
platform policy and root directory. Each step returns its own
CleanupReport; the orchestrator merges them and applies the error
policy between and within steps.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from orbitctl.cleanup.operator import CommandOperator, PathOperator
from orbitctl.cleanup.paths import get_cache_paths, get_log_paths, get_secret_paths
from orbitctl.models.action import ActionResult
from orbitctl.models.cleanup import CleanupCategory, CleanupReport, ErrorPolicy, PathResult
from orbitctl.platforms.base import Platform
from orbitctl.utils.formatting import console, print_step

logger = logging.getLogger(__name__)


class CleanupError(Exception):
    """Base exception for cleanup failures that prevent a run."""


class PrivilegeError(CleanupError):
    """Raised when cleanup is attempted without administrator rights."""


def require_admin(platform: Platform) -> None:
    """Refuse to continue unless the process has administrator rights.

    Raises:
        PrivilegeError: If the platform privilege probe fails.
    """
    if not platform.has_admin_privileges():
        msg = (
            "This command requires administrator/root privileges.\n"
            "Please run with sudo (macOS/Linux) or as Administrator (Windows)"
        )
        raise PrivilegeError(msg)


class CleanupOrchestrator:
    """Executes cleanup categories for one agent installation.

    Attributes:
        _platform: Operating-system policy providing paths and commands.
        _root_dir: Agent root directory.
        _policy: Reaction to a failed removal.
    """

    def __init__(
        self,
        platform: Platform,
        root_dir: Path,
        *,
        dry_run: bool = False,
        policy: ErrorPolicy = ErrorPolicy.FAIL_FAST,
        path_operator: PathOperator | None = None,
        command_operator: CommandOperator | None = None,
    ) -> None:
        self._platform = platform
        self._root_dir = root_dir
        self._policy = policy
        self._paths = path_operator or PathOperator(dry_run=dry_run)
        self._commands = command_operator or CommandOperator(dry_run=dry_run)

    @property
    def policy(self) -> ErrorPolicy:
        return self._policy

    def run(
        self,
        categories: Iterable[CleanupCategory],
        *,
        collector_name: str | None = None,
    ) -> CleanupReport:
        """Run the selected categories and return the merged report.

        Categories always execute in CleanupCategory declaration order.
        Under FAIL_FAST the first step that reports an error ends the
        run and the report is marked aborted.

        Args:
            categories: Categories to run.
            collector_name: Process name for CleanupCategory.COLLECTOR.

        Returns:
            Merged report for every step that ran.

        Raises:
            ValueError: If COLLECTOR is selected without a collector name.
        """
        selected = set(categories)
        if CleanupCategory.COLLECTOR in selected and not collector_name:
            msg = "A collector process name is required to stop the collector"
            raise ValueError(msg)

        report = CleanupReport()
        for category in CleanupCategory:
            if category not in selected:
                continue

            step = self._run_category(category, collector_name)
            report = report.merge(step)

            if step.has_errors and self._policy is ErrorPolicy.FAIL_FAST:
                logger.error("Aborting cleanup after %s step failed", category.value)
                return report.merge(CleanupReport(aborted=True))

        return report

    def _run_category(
        self, category: CleanupCategory, collector_name: str | None
    ) -> CleanupReport:
        if category is CleanupCategory.COLLECTOR:
            return self.stop_collector(collector_name or "")

        steps = {
            CleanupCategory.SERVICE: self.stop_service,
            CleanupCategory.LOGS: self.clean_logs,
            CleanupCategory.CACHE: self.clean_cache,
            CleanupCategory.SECRETS: self.clean_secrets,
            CleanupCategory.REGISTRY: self.clean_registry,
            CleanupCategory.SERVICE_FILES: self.clean_service_files,
        }
        return steps[category]()

    # === Steps ===

    def stop_service(self) -> CleanupReport:
        """Stop the agent service and the desktop helper (never osqueryd)."""
        service = self._platform.service_name
        print_step(f"Stopping {service} and fleet-desktop...")
        results = self._commands.run_all(self._platform.service_stop_actions())
        _warn_if_first_failed(results)
        return _actions_report(results, stopped=(service,))

    def stop_collector(self, process_name: str) -> CleanupReport:
        """Stop the osquery collection process (the agent service is left alone)."""
        print_step(f"Stopping collection process {process_name}...")
        results = self._commands.run_all(self._platform.collector_stop_actions(process_name))
        _warn_if_first_failed(results)
        return _actions_report(results, stopped=(process_name,))

    def clean_logs(self) -> CleanupReport:
        print_step("Cleaning log files...")
        return self._remove_paths(get_log_paths(self._root_dir, self._platform))

    def clean_cache(self) -> CleanupReport:
        print_step("Cleaning cache files...")
        return self._remove_paths(get_cache_paths(self._root_dir))

    def clean_secrets(self) -> CleanupReport:
        print_step("Cleaning secrets and enrollment data...")
        return self._remove_paths(get_secret_paths(self._root_dir))

    def clean_registry(self) -> CleanupReport:
        """Remove registry entries where the platform has a registry."""
        if not self._platform.supports_registry:
            console.print(f"[skipped]Registry cleanup skipped on {self._platform.name}[/]")
            return CleanupReport()

        print_step("Cleaning Windows registry...")
        return _actions_report(self._commands.run_all(self._platform.registry_actions()))

    def clean_service_files(self) -> CleanupReport:
        """Remove service definitions and the agent binary, then reload the init system."""
        print_step("Cleaning service configuration files...")
        report = self._remove_paths(self._platform.service_file_paths())
        if report.has_errors and self._policy is ErrorPolicy.FAIL_FAST:
            return report
        post_actions = self._commands.run_all(self._platform.service_file_actions())
        return report.merge(_actions_report(post_actions))

    def _remove_paths(self, paths: list[Path]) -> CleanupReport:
        """Remove each existing path, stopping early under FAIL_FAST."""
        results: list[PathResult] = []
        for path in paths:
            result = self._paths.remove_if_exists(path)
            if result is None:
                continue
            results.append(result)
            if not result.success and self._policy is ErrorPolicy.FAIL_FAST:
                break
        return CleanupReport.from_path_results(results)


def _warn_if_first_failed(results: list[ActionResult]) -> None:
    """Log a failed primary stop command; the step still continues."""
    if results and not results[0].success:
        first = results[0]
        logger.warning("Failed to stop: %s: %s", first.action.display, first.error)


def _actions_report(
    results: list[ActionResult], stopped: tuple[str, ...] = ()
) -> CleanupReport:
    """Build a report from command outcomes; only required failures are errors."""
    return CleanupReport(
        stopped=stopped,
        errors=tuple(f"{r.action.display}: {r.error}" for r in results if r.is_error),
        actions=tuple(results),
    )
