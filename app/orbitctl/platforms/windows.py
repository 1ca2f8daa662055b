"""Windows cleanup policy (service control manager and registry)."""

import logging
import os
import subprocess
from pathlib import Path

from orbitctl.models.action import CommandAction, best_effort
from orbitctl.platforms.base import Platform
from orbitctl.utils.shell import run_command

logger = logging.getLogger(__name__)

SERVICE_NAME = "Fleet osquery"

_REMOVE_UNINSTALL_ENTRY = (
    'Get-ChildItem "HKLM:\\SOFTWARE\\Microsoft\\Windows\\CurrentVersion\\Uninstall" | '
    f'Where-Object {{ (Get-ItemProperty $_.PSPath).DisplayName -eq "{SERVICE_NAME}" }} | '
    "Remove-Item -Recurse -Force"
)
_REMOVE_SERVICE_KEY = (
    f'Remove-Item "HKLM:\\SYSTEM\\CurrentControlSet\\Services\\{SERVICE_NAME}" '
    "-Recurse -Force -ErrorAction SilentlyContinue"
)


class WindowsPlatform(Platform):
    """Agent installed as the "Fleet osquery" Windows service."""

    @property
    def name(self) -> str:
        return "Windows"

    @property
    def service_name(self) -> str:
        return SERVICE_NAME

    def has_admin_privileges(self) -> bool:
        """Probe for an elevated session with ``net session``.

        The command only succeeds for members of the Administrators group
        running elevated.
        """
        try:
            result = run_command(["net", "session"], timeout=10.0)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug("Privilege probe failed to run: %s", e)
            return False
        return result.success

    def system_log_paths(self) -> list[Path]:
        system_root = os.environ.get("SystemRoot", r"C:\Windows")
        profile = Path(system_root) / "system32" / "config" / "systemprofile"
        return [profile / "AppData" / "Local" / "FleetDM" / "Orbit" / "Logs"]

    def service_stop_actions(self) -> list[CommandAction]:
        return [
            best_effort("net", "stop", SERVICE_NAME),
            best_effort("taskkill", "/F", "/IM", "fleet-desktop.exe"),
        ]

    def collector_stop_actions(self, process_name: str) -> list[CommandAction]:
        image = process_name if process_name.lower().endswith(".exe") else f"{process_name}.exe"
        return [best_effort("taskkill", "/F", "/IM", image)]

    def registry_actions(self) -> list[CommandAction]:
        return [
            best_effort(
                "powershell",
                "-Command",
                command,
                description=f"PowerShell: {command}",
            )
            for command in (_REMOVE_UNINSTALL_ENTRY, _REMOVE_SERVICE_KEY)
        ]
