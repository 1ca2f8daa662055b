"""Utility modules for orbitctl.

This module exports commonly used utility functions.
"""

from orbitctl.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_rule,
    print_step,
    print_success,
    print_warning,
)
from orbitctl.utils.shell import (
    CommandResult,
    run_command,
    run_interactive,
    start_background,
)

__all__ = [
    "CommandResult",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_rule",
    "print_step",
    "print_success",
    "print_warning",
    "run_command",
    "run_interactive",
    "start_background",
]
