"""Shared Rich display functions for cleanup results."""

from rich.markup import escape
from rich.table import Table

from orbitctl.models.cleanup import CleanupReport
from orbitctl.utils.formatting import console, print_rule, print_success, print_warning


def create_errors_table(errors: tuple[str, ...]) -> Table:
    """Create a Rich table listing cleanup errors.

    Args:
        errors: Error messages in the order they occurred.

    Returns:
        Rich Table with one numbered row per error.
    """
    table = Table(
        title="Errors",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("#", width=4, justify="right")
    table.add_column("Error", style="error", overflow="fold")

    for index, error in enumerate(errors, start=1):
        table.add_row(str(index), escape(error))

    return table


def print_cleanup_summary(
    report: CleanupReport,
    dry_run: bool = False,
    collector_stopped: bool = False,
) -> None:
    """Print the counts of a cleanup run and any errors.

    Args:
        report: Merged report of the run.
        dry_run: Whether nothing was actually changed.
        collector_stopped: Whether the run stopped the collection process
            (OpenFrame mode) instead of the agent service.
    """
    removed = len(report.removed)
    stopped = len(report.stopped)

    console.print()
    print_rule()
    if dry_run:
        console.print(f"[success]Would clean {removed} files/directories[/]")
        console.print(f"[success]Would stop {stopped} services/processes[/]")
    else:
        console.print(f"[success]Cleaned {removed} files/directories[/]")
        console.print(f"[success]Stopped {stopped} services/processes[/]")

    if report.has_errors:
        console.print(f"[warning]{len(report.errors)} errors occurred[/]")
    print_rule()

    if report.has_errors:
        console.print(create_errors_table(report.errors))

    if report.aborted:
        print_warning("Cleanup aborted after the first error; remaining steps were skipped.")
        return

    if not dry_run and not report.has_errors:
        print_success("Cleanup completed successfully!")
        if not collector_stopped:
            console.print("[muted]Note: osqueryd process was NOT stopped.[/]")
