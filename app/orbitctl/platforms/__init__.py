"""Platform policies for agent cleanup.

This module provides one Platform implementation per supported
operating system and a factory that selects the policy for the
running system.
"""

import platform

from orbitctl.platforms.base import Platform
from orbitctl.platforms.darwin import DarwinPlatform
from orbitctl.platforms.linux import LinuxPlatform, PosixPlatform
from orbitctl.platforms.windows import WindowsPlatform

_PLATFORMS: dict[str, type[Platform]] = {
    "Linux": LinuxPlatform,
    "Darwin": DarwinPlatform,
    "Windows": WindowsPlatform,
}


class UnsupportedPlatformError(RuntimeError):
    """Raised when orbitctl runs on an operating system it has no policy for."""


def get_platform(system: str | None = None) -> Platform:
    """Get the cleanup policy for an operating system.

    Args:
        system: Value in the style of ``platform.system()``. Detected if None.

    Returns:
        Platform instance for the system.

    Raises:
        UnsupportedPlatformError: If the system is not Linux, macOS or Windows.
    """
    system = system or platform.system()
    try:
        return _PLATFORMS[system]()
    except KeyError:
        msg = f"Unsupported platform: {system}"
        raise UnsupportedPlatformError(msg) from None


__all__ = [
    "DarwinPlatform",
    "LinuxPlatform",
    "Platform",
    "PosixPlatform",
    "UnsupportedPlatformError",
    "WindowsPlatform",
    "get_platform",
]
