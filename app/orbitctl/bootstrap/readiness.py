"""Readiness probes used by the container entrypoint.

Dependencies are polled with plain TCP connects; the fleet server is
polled over HTTP. Both loops use a fixed interval and a bounded number
of attempts.
"""

import logging
import socket
import subprocess
import time

import httpx

from orbitctl.bootstrap.config import BootstrapError, ServiceAddress
from orbitctl.utils.formatting import print_info, print_success

logger = logging.getLogger(__name__)

_CONNECT_TIMEOUT: float = 2.0
_HTTP_TIMEOUT: float = 5.0


class DependencyTimeoutError(BootstrapError):
    """Raised when a dependency never accepts connections."""


class ServerStartupError(BootstrapError):
    """Raised when the fleet server exits or never becomes ready."""


def is_port_open(host: str, port: int, timeout: float = _CONNECT_TIMEOUT) -> bool:
    """Check whether a TCP connection to host:port succeeds."""
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False


def wait_for_port(
    address: ServiceAddress,
    *,
    name: str,
    interval: float,
    max_attempts: int,
) -> int:
    """Block until a dependency accepts TCP connections.

    Args:
        address: Dependency to probe.
        name: Label used in progress output (e.g. "MySQL").
        interval: Seconds to sleep between attempts.
        max_attempts: Number of connection attempts before giving up.

    Returns:
        The attempt number that succeeded.

    Raises:
        DependencyTimeoutError: If every attempt fails.
    """
    print_info(f"Waiting for {name} ({address})...")
    for attempt in range(1, max_attempts + 1):
        if is_port_open(address.host, address.port):
            print_success(f"{name} is ready")
            return attempt
        logger.debug("%s not reachable (attempt %d/%d)", name, attempt, max_attempts)
        if attempt < max_attempts:
            time.sleep(interval)

    msg = f"{name} at {address} was not reachable after {max_attempts} attempts"
    raise DependencyTimeoutError(msg)


def wait_for_http(
    url: str,
    *,
    interval: float,
    max_attempts: int,
    process: subprocess.Popen[bytes] | None = None,
    client: httpx.Client | None = None,
) -> int:
    """Block until ``url`` answers with a successful status.

    Args:
        url: Endpoint to probe.
        interval: Seconds to sleep between attempts.
        max_attempts: Number of requests before giving up.
        process: Server process; polling stops early if it exits.
        client: HTTP client to use. A short-lived one is created if None.

    Returns:
        The attempt number that succeeded.

    Raises:
        ServerStartupError: If the process exits or every attempt fails.
    """
    owns_client = client is None
    http = client or httpx.Client(timeout=_HTTP_TIMEOUT)
    try:
        for attempt in range(1, max_attempts + 1):
            if process is not None and process.poll() is not None:
                msg = f"Server process exited with code {process.returncode} during startup"
                raise ServerStartupError(msg)

            try:
                response = http.get(url)
                if response.is_success:
                    print_success("Fleet is ready!")
                    return attempt
                logger.debug("Readiness probe returned HTTP %d", response.status_code)
            except httpx.HTTPError as e:
                logger.debug("Readiness probe failed: %s", e)

            print_info(f"Attempt {attempt}/{max_attempts} failed. Retrying...")
            if attempt < max_attempts:
                time.sleep(interval)
    finally:
        if owns_client:
            http.close()

    msg = f"Fleet failed to start after {max_attempts} attempts"
    raise ServerStartupError(msg)
