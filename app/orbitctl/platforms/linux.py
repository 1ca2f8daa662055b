"""Linux cleanup policy (systemd)."""

import os
from pathlib import Path

from orbitctl.models.action import CommandAction, best_effort
from orbitctl.platforms.base import Platform


class PosixPlatform(Platform):
    """Shared behaviour of Linux and macOS."""

    def has_admin_privileges(self) -> bool:
        """Check for an effective uid of root."""
        return os.geteuid() == 0

    def system_log_paths(self) -> list[Path]:
        return [Path("/var/log/orbit")]

    def collector_stop_actions(self, process_name: str) -> list[CommandAction]:
        return [best_effort("pkill", "-x", process_name)]


class LinuxPlatform(PosixPlatform):
    """Agent installed as ``orbit.service`` under systemd."""

    @property
    def name(self) -> str:
        return "Linux"

    @property
    def service_name(self) -> str:
        return "orbit.service"

    def service_stop_actions(self) -> list[CommandAction]:
        return [
            best_effort("systemctl", "stop", "orbit.service"),
            best_effort("systemctl", "disable", "orbit.service"),
            best_effort("pkill", "-f", "fleet-desktop"),
        ]

    def service_file_paths(self) -> list[Path]:
        return [
            Path("/usr/lib/systemd/system/orbit.service"),
            Path("/etc/default/orbit"),
            Path("/usr/local/bin/orbit"),
        ]

    def service_file_actions(self) -> list[CommandAction]:
        return [best_effort("systemctl", "daemon-reload")]
