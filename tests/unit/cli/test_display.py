"""Unit tests for cli/display.py.

Tests for the cleanup summary and error table.
"""

import io

from orbitctl.cli.display import create_errors_table, print_cleanup_summary
from orbitctl.core.theme import get_theme
from orbitctl.models.cleanup import CleanupReport
from rich.console import Console


def _capture_console_output(func: object, *args: object, **kwargs: object) -> str:
    """Capture Rich console output by temporarily replacing the consoles.

    Patches the module-level consoles used by display functions and captures
    stdout and stderr output to one StringIO buffer.
    """
    import orbitctl.cli.display as display_mod
    import orbitctl.utils.formatting as fmt_mod

    buf = io.StringIO()
    test_console = Console(theme=get_theme(), file=buf, color_system=None, width=120)

    originals = (display_mod.console, fmt_mod.console, fmt_mod.err_console)
    display_mod.console = test_console
    fmt_mod.console = test_console
    fmt_mod.err_console = test_console
    try:
        func(*args, **kwargs)  # type: ignore[operator]
    finally:
        display_mod.console, fmt_mod.console, fmt_mod.err_console = originals

    return buf.getvalue()


class TestCreateErrorsTable:
    """Tests for create_errors_table."""

    def test_one_row_per_error(self) -> None:
        table = create_errors_table(("/opt/orbit/a: denied", "/opt/orbit/b: busy"))
        assert table.row_count == 2
        assert [col.header for col in table.columns] == ["#", "Error"]

    def test_markup_is_escaped(self) -> None:
        """Error text with brackets renders literally."""
        table = create_errors_table(("/opt/orbit/[bold]x: denied",))

        buf = io.StringIO()
        Console(theme=get_theme(), file=buf, color_system=None, width=120).print(table)

        assert "[bold]x" in buf.getvalue()


class TestPrintCleanupSummary:
    """Tests for print_cleanup_summary."""

    def test_success(self) -> None:
        report = CleanupReport(removed=("/a", "/b"), stopped=("orbit.service",))

        output = _capture_console_output(print_cleanup_summary, report)

        assert "Cleaned 2 files/directories" in output
        assert "Stopped 1 services/processes" in output
        assert "Cleanup completed successfully!" in output
        assert "osqueryd process was NOT stopped" in output

    def test_collector_stopped_omits_note(self) -> None:
        report = CleanupReport(stopped=("osqueryd",))

        output = _capture_console_output(print_cleanup_summary, report, collector_stopped=True)

        assert "NOT stopped" not in output

    def test_dry_run(self) -> None:
        report = CleanupReport(removed=("/a",))

        output = _capture_console_output(print_cleanup_summary, report, dry_run=True)

        assert "Would clean 1 files/directories" in output
        assert "Would stop 0 services/processes" in output
        assert "completed successfully" not in output

    def test_errors(self) -> None:
        report = CleanupReport(removed=("/a",), errors=("/b: Permission denied",))

        output = _capture_console_output(print_cleanup_summary, report)

        assert "1 errors occurred" in output
        assert "/b: Permission denied" in output
        assert "completed successfully" not in output

    def test_aborted(self) -> None:
        report = CleanupReport(errors=("/b: Permission denied",), aborted=True)

        output = _capture_console_output(print_cleanup_summary, report)

        assert "Cleanup aborted after the first error" in output
