"""Command action models.

A CommandAction describes one external command orbitctl may run while
cleaning up (stopping a service, reloading systemd, editing the
registry). Actions are either required, where a failure counts as a
cleanup error, or best-effort, where a failure is expected when the
target is already absent and is only recorded.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandAction:
    """A single external command to execute.

    Attributes:
        args: Command and arguments.
        description: Human-readable text shown in dry-run output.
            Defaults to the joined command line.
        required: Whether a failure must be reported as an error.
    """

    args: tuple[str, ...]
    description: str | None = None
    required: bool = False

    def __post_init__(self) -> None:
        """Validate action data after initialization."""
        if not self.args:
            msg = "Command arguments cannot be empty"
            raise ValueError(msg)

    @property
    def display(self) -> str:
        """Text used when reporting the action."""
        return self.description or " ".join(self.args)

    @property
    def best_effort(self) -> bool:
        """Check if failures of this action are tolerated."""
        return not self.required


def best_effort(*args: str, description: str | None = None) -> CommandAction:
    """Create an action whose failure is tolerated."""
    return CommandAction(args=args, description=description, required=False)


def required(*args: str, description: str | None = None) -> CommandAction:
    """Create an action whose failure is a cleanup error."""
    return CommandAction(args=args, description=description, required=True)


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Outcome of running (or simulating) a CommandAction.

    Attributes:
        action: The action that was executed.
        success: Whether the command exited successfully (True for dry-run).
        error: Error message if the command failed or could not start.
        dry_run: Whether the command was only described.
    """

    action: CommandAction
    success: bool
    error: str | None = None
    dry_run: bool = False

    @property
    def failed(self) -> bool:
        """Check if the command failed."""
        return not self.success

    @property
    def is_error(self) -> bool:
        """Check if this outcome must be counted as a cleanup error."""
        return self.failed and self.action.required
