"""Path and command operators used by the cleanup orchestrator.

Both operators honour dry-run mode: nothing is removed and no command
is started, but the intended action is printed and reported as if it
had succeeded.
"""

import logging
import shutil
import subprocess
from pathlib import Path

from rich.markup import escape

from orbitctl.models.action import ActionResult, CommandAction
from orbitctl.models.cleanup import PathResult
from orbitctl.utils.formatting import console
from orbitctl.utils.shell import run_command

logger = logging.getLogger(__name__)


class PathOperator:
    """Removes files, directories, and symlinks.

    Attributes:
        _dry_run: If True, simulate removals without modifying the filesystem.
    """

    def __init__(self, dry_run: bool = False) -> None:
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Check if operator is in dry-run mode."""
        return self._dry_run

    def remove_if_exists(self, path: Path) -> PathResult | None:
        """Remove a path if it exists.

        Directories are removed recursively; symlinks are removed without
        following them.

        Args:
            path: Path to remove.

        Returns:
            PathResult for an existing path, None if there was nothing to remove.
        """
        if not _lexists(path):
            return None

        if self._dry_run:
            console.print(f"  [dry_run]Would remove:[/] {escape(str(path))}", soft_wrap=True)
            return PathResult(path=str(path), success=True, dry_run=True)

        console.print(f"  [removed]Removing:[/] {escape(str(path))}", soft_wrap=True)
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as e:
            logger.error("Failed to remove %s: %s", path, e)
            return PathResult(path=str(path), success=False, error=str(e))

        return PathResult(path=str(path), success=True)


class CommandOperator:
    """Runs CommandActions, tolerating failures of best-effort ones.

    Attributes:
        _dry_run: If True, describe commands instead of running them.
        _timeout: Seconds to wait for each command.
    """

    def __init__(self, dry_run: bool = False, timeout: float = 60.0) -> None:
        self._dry_run = dry_run
        self._timeout = timeout

    @property
    def dry_run(self) -> bool:
        """Check if operator is in dry-run mode."""
        return self._dry_run

    def run(self, action: CommandAction) -> ActionResult:
        """Run (or describe) a single action.

        A command that cannot be started or times out is reported as a
        failed result rather than raised.
        """
        if self._dry_run:
            console.print(f"  [dry_run]Would run:[/] {escape(action.display)}", soft_wrap=True)
            return ActionResult(action=action, success=True, dry_run=True)

        logger.info("Running: %s", action.display)
        try:
            result = run_command(list(action.args), timeout=self._timeout)
        except (OSError, subprocess.TimeoutExpired) as e:
            return self._failure(action, str(e))

        if not result.success:
            error = result.stderr.strip() or f"exit status {result.returncode}"
            return self._failure(action, error)

        return ActionResult(action=action, success=True)

    def run_all(self, actions: list[CommandAction]) -> list[ActionResult]:
        """Run every action in order; failures never stop the sequence."""
        return [self.run(action) for action in actions]

    def _failure(self, action: CommandAction, error: str) -> ActionResult:
        if action.best_effort:
            # Expected when the service or process is not running.
            logger.debug("Ignoring failure of %s: %s", action.display, error)
        else:
            logger.error("Command failed: %s: %s", action.display, error)
        return ActionResult(action=action, success=False, error=error)


def _lexists(path: Path) -> bool:
    """Check existence without following a final symlink."""
    return path.exists() or path.is_symlink()
