"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest
from orbitctl.models.action import CommandAction, best_effort
from orbitctl.platforms.base import Platform


class FakePlatform(Platform):
    """Platform policy that keeps every external location under a temp dir."""

    def __init__(self, base: Path, admin: bool = True) -> None:
        self.base = base
        self.admin = admin

    @property
    def name(self) -> str:
        return "Linux"

    @property
    def service_name(self) -> str:
        return "orbit.service"

    def has_admin_privileges(self) -> bool:
        return self.admin

    def system_log_paths(self) -> list[Path]:
        return [self.base / "var-log-orbit"]

    def service_stop_actions(self) -> list[CommandAction]:
        return [
            best_effort("systemctl", "stop", "orbit.service"),
            best_effort("pkill", "-f", "fleet-desktop"),
        ]

    def collector_stop_actions(self, process_name: str) -> list[CommandAction]:
        return [best_effort("pkill", "-x", process_name)]

    def service_file_paths(self) -> list[Path]:
        return [self.base / "orbit.service", self.base / "bin" / "orbit"]

    def service_file_actions(self) -> list[CommandAction]:
        return [best_effort("systemctl", "daemon-reload")]


@pytest.fixture
def agent_root(tmp_path: Path) -> Path:
    """Create a populated agent root directory."""
    root = tmp_path / "orbit"
    root.mkdir()

    # Logs
    (root / "osquery_log").write_text("log\n")
    (root / "orbit.stdout.log").write_text("stdout\n")
    (root / "orbit.stderr.log").write_text("stderr\n")

    # Cache
    (root / "shell").mkdir()
    (root / "shell" / "history").write_text("select 1;\n")
    (root / "update-metadata").mkdir()
    (root / "update-metadata" / "root.json").write_text("{}")
    (root / "updates.json").write_text("{}")
    (root / "bin" / "orbit" / "stable").mkdir(parents=True)
    (root / "bin" / "orbit" / "stable" / "orbit").write_text("binary")
    (root / "bin" / "orbit" / "stable" / "orbit.old").write_text("old binary")

    # Secrets
    (root / "secret-orbit-node-key.txt").write_text("node-key")
    (root / "identifier").write_text("token")
    (root / "secret-osquery.txt").write_text("enroll-secret")
    (root / "osquery.db").mkdir()
    (root / "osquery.db" / "000001.log").write_text("data")

    return root


@pytest.fixture
def fake_platform(tmp_path: Path) -> FakePlatform:
    """Platform policy with system locations under tmp_path/system."""
    base = tmp_path / "system"
    base.mkdir()
    (base / "var-log-orbit").mkdir()
    (base / "var-log-orbit" / "orbit.log").write_text("system log\n")
    (base / "orbit.service").write_text("[Unit]\n")
    (base / "bin").mkdir()
    (base / "bin" / "orbit").write_text("binary")
    return FakePlatform(base)
