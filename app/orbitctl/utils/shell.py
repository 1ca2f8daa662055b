"""Subprocess helpers.

Every external program orbitctl drives (osqueryd, systemctl, launchctl,
fleet, fleetctl, ...) goes through these functions so tests can patch a
single seam.
"""

import subprocess
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


def run_command(args: list[str], *, timeout: float | None = 60.0) -> CommandResult:
    """Execute a command and capture its output.

    Args:
        args: Command and arguments to execute.
        timeout: Maximum time in seconds to wait for command.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=False,
        timeout=timeout,
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def run_interactive(args: list[str]) -> int:
    """Execute a command with inherited stdout/stderr.

    Used for long-running tools whose output belongs in the container
    log (database migrations), so nothing is captured.

    Returns:
        Exit code of the command.

    Raises:
        FileNotFoundError: If command executable is not found.
        OSError: If command cannot be executed.
    """
    result = subprocess.run(args, check=False)  # nosec: B603
    return result.returncode


def start_background(args: list[str]) -> subprocess.Popen[bytes]:
    """Launch a long-running command without waiting for it.

    The child inherits stdout/stderr so its log stays visible.

    Raises:
        FileNotFoundError: If command executable is not found.
        OSError: If command cannot be executed.
    """
    return subprocess.Popen(args)  # nosec: B603
