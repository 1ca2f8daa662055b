"""Container entrypoint for the fleet server.

Sequence: wait for MySQL and Redis, prepare the database, start
``fleet serve`` in the background, wait for it to answer over HTTP,
optionally initialize accounts, then block on the server and return
its exit code.
"""

import logging
import signal
import subprocess
from types import FrameType

import httpx

from orbitctl.bootstrap.config import BootstrapConfig, BootstrapError
from orbitctl.bootstrap.fleetctl import FleetInitializer
from orbitctl.bootstrap.readiness import ServerStartupError, wait_for_http, wait_for_port
from orbitctl.utils.formatting import print_info, print_warning
from orbitctl.utils.shell import run_interactive, start_background

logger = logging.getLogger(__name__)

# Seconds to wait for the server after asking it to stop.
_SHUTDOWN_GRACE: float = 10.0


class DatabasePreparationError(BootstrapError):
    """Raised when ``fleet prepare db`` fails."""


class BootstrapRunner:
    """Drives the entrypoint sequence for one container start.

    Attributes:
        _config: Validated entrypoint settings.
        _client: HTTP client for readiness probes (created on demand if None).
    """

    def __init__(
        self,
        config: BootstrapConfig,
        *,
        client: httpx.Client | None = None,
        initializer: FleetInitializer | None = None,
    ) -> None:
        self._config = config
        self._client = client
        self._initializer = initializer or FleetInitializer(config.init)

    def run(self) -> int:
        """Run the full sequence and return the server's exit code.

        Raises:
            DependencyTimeoutError: If MySQL or Redis never become reachable.
            DatabasePreparationError: If the migration command fails.
            ServerStartupError: If the server cannot start or never becomes ready.
        """
        self.wait_for_dependencies()
        self.prepare_database()

        process = self.start_server()
        try:
            wait_for_http(
                self._config.health_url,
                interval=self._config.health_interval,
                max_attempts=self._config.health_attempts,
                process=process,
                client=self._client,
            )
        except ServerStartupError:
            _stop(process)
            raise

        self.initialize()
        return self.wait(process)

    def wait_for_dependencies(self) -> None:
        config = self._config
        for name, address in (("MySQL", config.mysql_address), ("Redis", config.redis_address)):
            wait_for_port(
                address,
                name=name,
                interval=config.dependency_interval,
                max_attempts=config.dependency_attempts,
            )

    def prepare_database(self) -> None:
        """Apply database migrations without prompting."""
        print_info("Preparing database...")
        args = [
            self._config.fleet_binary,
            "prepare",
            "db",
            "--config",
            str(self._config.config_file),
            "--no-prompt",
        ]
        try:
            returncode = run_interactive(args)
        except OSError as e:
            msg = f"Could not run {self._config.fleet_binary}: {e}"
            raise DatabasePreparationError(msg) from e
        if returncode != 0:
            msg = f"Database preparation failed with exit code {returncode}"
            raise DatabasePreparationError(msg)

    def start_server(self) -> subprocess.Popen[bytes]:
        print_info("Starting Fleet server...")
        args = [self._config.fleet_binary, "serve", "--config", str(self._config.config_file)]
        try:
            process = start_background(args)
        except OSError as e:
            msg = f"Could not start {self._config.fleet_binary}: {e}"
            raise ServerStartupError(msg) from e
        logger.info("Fleet server started with pid %d", process.pid)
        return process

    def initialize(self) -> bool:
        """Run account initialization when enabled; failures are only reported.

        Returns:
            True if initialization ran and wrote a token.
        """
        if not self._config.auto_init:
            return False
        if self._config.init.token_file.exists():
            logger.debug("Token file %s exists, skipping init", self._config.init.token_file)
            return False

        print_info("Running Fleet initialization...")
        try:
            return self._initializer.run()
        except BootstrapError as e:
            print_warning(f"Fleet initialization failed: {e}")
            return False

    def wait(self, process: subprocess.Popen[bytes]) -> int:
        """Block on the server, forwarding SIGTERM/SIGINT to it."""

        def _forward(signum: int, _frame: FrameType | None) -> None:
            logger.info("Forwarding signal %d to fleet server", signum)
            process.send_signal(signum)

        previous = {sig: signal.signal(sig, _forward) for sig in (signal.SIGTERM, signal.SIGINT)}
        try:
            returncode = process.wait()
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)

        # Killed by a signal: report it the way a shell would.
        if returncode < 0:
            return 128 - returncode
        return returncode


def _stop(process: subprocess.Popen[bytes]) -> None:
    """Terminate a server that failed to become ready."""
    if process.poll() is not None:
        return
    process.terminate()
    try:
        process.wait(timeout=_SHUTDOWN_GRACE)
    except subprocess.TimeoutExpired:
        process.kill()
        process.wait()
