"""Unit tests for shell execution utilities."""

from unittest.mock import MagicMock, patch

import pytest
from orbitctl.utils.shell import (
    CommandResult,
    run_command,
    run_interactive,
    start_background,
)


class TestCommandResult:
    """Tests for CommandResult."""

    def test_success(self) -> None:
        """A zero exit code is a success."""
        assert CommandResult(stdout="", stderr="", returncode=0).success is True

    def test_failure(self) -> None:
        """A non-zero exit code is a failure."""
        assert CommandResult(stdout="", stderr="", returncode=78).success is False


class TestRunCommand:
    """Tests for run_command."""

    @patch("orbitctl.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """run_command returns captured stdout, stderr, and exit code."""
        mock_run.return_value = MagicMock(stdout="out", stderr="err", returncode=3)

        result = run_command(["osqueryd", "-S"])

        assert result == CommandResult(stdout="out", stderr="err", returncode=3)
        assert mock_run.call_args.kwargs["capture_output"] is True
        assert mock_run.call_args.kwargs["text"] is True

    @patch("orbitctl.utils.shell.subprocess.run")
    def test_passes_timeout(self, mock_run: MagicMock) -> None:
        """run_command forwards the timeout."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["true"], timeout=5.0)

        assert mock_run.call_args.kwargs["timeout"] == 5.0

    @patch("orbitctl.utils.shell.subprocess.run")
    def test_non_zero_exit_is_returned(self, mock_run: MagicMock) -> None:
        """A failing command is reported through the result, not raised."""
        mock_run.return_value = MagicMock(stdout="", stderr="boom", returncode=1)

        result = run_command(["systemctl", "stop", "orbit.service"])

        assert result.success is False
        assert mock_run.call_args.kwargs["check"] is False

    def test_raises_file_not_found(self) -> None:
        """run_command propagates a missing executable."""
        with pytest.raises(FileNotFoundError):
            run_command(["definitely-not-a-real-command-orbitctl"])


class TestRunInteractive:
    """Tests for run_interactive function."""

    @patch("orbitctl.utils.shell.subprocess.run")
    def test_returns_exit_code(self, mock_run: MagicMock) -> None:
        """run_interactive returns the subprocess exit code."""
        mock_run.return_value = MagicMock(returncode=1)

        assert run_interactive(["fleet", "prepare", "db"]) == 1

    @patch("orbitctl.utils.shell.subprocess.run")
    def test_does_not_capture_output(self, mock_run: MagicMock) -> None:
        """run_interactive inherits stdout/stderr."""
        mock_run.return_value = MagicMock(returncode=0)

        run_interactive(["fleet", "prepare", "db"])

        call_kwargs = mock_run.call_args.kwargs
        assert "capture_output" not in call_kwargs
        assert "stdout" not in call_kwargs
        assert "stderr" not in call_kwargs


class TestStartBackground:
    """Tests for start_background."""

    @patch("orbitctl.utils.shell.subprocess.Popen")
    def test_returns_process(self, mock_popen: MagicMock) -> None:
        """start_background returns the Popen handle without waiting."""
        process = start_background(["fleet", "serve"])

        assert process is mock_popen.return_value
        mock_popen.assert_called_once_with(["fleet", "serve"])
        mock_popen.return_value.wait.assert_not_called()
