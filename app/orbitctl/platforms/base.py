"""Abstract base class for platform policies.

A Platform bundles everything that differs between operating systems
for agent cleanup: where the agent keeps data, how to stop it, and how
to check for administrator rights. One policy is selected at startup
and handed to the cleanup orchestrator.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from orbitctl.models.action import CommandAction


class Platform(ABC):
    """Operating-system specific cleanup policy.

    Example:
        >>> policy = get_platform()
        >>> if policy.has_admin_privileges():
        ...     for action in policy.service_stop_actions():
        ...         print(action.display)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the ``platform.system()`` name this policy handles."""

    @property
    @abstractmethod
    def service_name(self) -> str:
        """Return the name of the agent service reported when stopped."""

    @abstractmethod
    def has_admin_privileges(self) -> bool:
        """Check whether the current process may modify agent files."""

    @abstractmethod
    def system_log_paths(self) -> list[Path]:
        """Return log locations outside the root directory."""

    @abstractmethod
    def service_stop_actions(self) -> list[CommandAction]:
        """Return the commands that stop the agent and its desktop helper.

        The osquery collection process is never part of this list.
        """

    @abstractmethod
    def collector_stop_actions(self, process_name: str) -> list[CommandAction]:
        """Return the commands that stop the named collection process."""

    def service_file_paths(self) -> list[Path]:
        """Return service definitions and binaries installed outside the root."""
        return []

    def service_file_actions(self) -> list[CommandAction]:
        """Return commands to run after service files are removed."""
        return []

    def registry_actions(self) -> list[CommandAction]:
        """Return registry cleanup commands (empty where there is no registry)."""
        return []

    @property
    def supports_registry(self) -> bool:
        """Check if this platform has registry entries to clean."""
        return bool(self.registry_actions())
