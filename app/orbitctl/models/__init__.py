"""Data models for orbitctl.

This module exports the command action and cleanup report models.
"""

from orbitctl.models.action import ActionResult, CommandAction, best_effort, required
from orbitctl.models.cleanup import CleanupCategory, CleanupReport, ErrorPolicy, PathResult

__all__ = [
    "ActionResult",
    "CleanupCategory",
    "CleanupReport",
    "CommandAction",
    "ErrorPolicy",
    "PathResult",
    "best_effort",
    "required",
]
