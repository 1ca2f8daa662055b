"""Fleet server container bootstrap.

Readiness polling for MySQL/Redis, database preparation, server
startup, and optional account initialization.
"""

from orbitctl.bootstrap.config import (
    BootstrapConfig,
    BootstrapConfigError,
    BootstrapError,
    InitConfig,
    ServiceAddress,
    parse_address,
)
from orbitctl.bootstrap.fleetctl import FleetInitializer, InitializationError
from orbitctl.bootstrap.readiness import (
    DependencyTimeoutError,
    ServerStartupError,
    wait_for_http,
    wait_for_port,
)
from orbitctl.bootstrap.runner import BootstrapRunner, DatabasePreparationError

__all__ = [
    "BootstrapConfig",
    "BootstrapConfigError",
    "BootstrapError",
    "BootstrapRunner",
    "DatabasePreparationError",
    "DependencyTimeoutError",
    "FleetInitializer",
    "InitConfig",
    "InitializationError",
    "ServerStartupError",
    "ServiceAddress",
    "parse_address",
    "wait_for_http",
    "wait_for_port",
]
