"""macOS cleanup policy (launchd)."""

from pathlib import Path

from orbitctl.models.action import CommandAction, best_effort
from orbitctl.platforms.linux import PosixPlatform

LAUNCH_DAEMON_LABEL = "com.fleetdm.orbit"
LAUNCH_DAEMON_PLIST = Path("/Library/LaunchDaemons/com.fleetdm.orbit.plist")
PACKAGE_ID = "com.fleetdm.orbit.base.pkg"


class DarwinPlatform(PosixPlatform):
    """Agent installed as a launch daemon from a .pkg installer."""

    @property
    def name(self) -> str:
        return "Darwin"

    @property
    def service_name(self) -> str:
        return LAUNCH_DAEMON_LABEL

    def service_stop_actions(self) -> list[CommandAction]:
        return [
            best_effort("launchctl", "stop", LAUNCH_DAEMON_LABEL),
            best_effort("launchctl", "unload", str(LAUNCH_DAEMON_PLIST)),
            best_effort("pkill", "fleet-desktop"),
        ]

    def service_file_paths(self) -> list[Path]:
        return [LAUNCH_DAEMON_PLIST, Path("/usr/local/bin/orbit")]

    def service_file_actions(self) -> list[CommandAction]:
        # Drop the installer receipt so the package can be reinstalled cleanly.
        return [best_effort("pkgutil", "--forget", PACKAGE_ID)]
