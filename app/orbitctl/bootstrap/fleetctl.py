"""One-shot fleet account initialization through fleetctl.

Creates (or verifies) the admin account and an API-only user, and
persists the API user's token to a file readable only by its owner.
The token file doubles as a sentinel: once it exists, initialization
is skipped.
"""

import logging
import os
import subprocess
from pathlib import Path

from orbitctl.bootstrap.config import BootstrapError, InitConfig
from orbitctl.core.paths import get_fleetctl_config_path
from orbitctl.utils.formatting import print_info, print_success, print_warning
from orbitctl.utils.shell import CommandResult, run_command

logger = logging.getLogger(__name__)

TOKEN_MARKER = "Success! The API token for your new user is:"

_FLEETCTL_TIMEOUT: float = 120.0


class InitializationError(BootstrapError):
    """Raised when account initialization cannot complete."""


def read_config_token(config_path: Path) -> str | None:
    """Read the session token fleetctl stored after a login.

    Args:
        config_path: fleetctl config file (usually ~/.fleet/config).

    Returns:
        The token, or None if the file or the ``token:`` entry is missing.
    """
    try:
        lines = config_path.read_text().splitlines()
    except OSError as e:
        logger.debug("Cannot read fleetctl config %s: %s", config_path, e)
        return None

    for line in lines:
        key, sep, value = line.strip().partition(":")
        if sep and key == "token":
            token = value.strip().strip("\"'")
            if token:
                return token
    return None


def parse_created_token(output: str) -> str | None:
    """Extract the token printed by ``fleetctl user create --api-only``."""
    for line in output.splitlines():
        if TOKEN_MARKER in line:
            token = line.split(TOKEN_MARKER, 1)[1].strip()
            return token or None
    return None


def write_token_file(path: Path, token: str) -> None:
    """Persist the API token with owner-only permissions.

    Raises:
        InitializationError: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            f.write(f"{token}\n")
        os.chmod(path, 0o600)
    except OSError as e:
        msg = f"Failed to write API token to {path}: {e}"
        raise InitializationError(msg) from e


class FleetInitializer:
    """Runs the fleetctl login/setup/user-create sequence.

    Attributes:
        _config: Credentials and locations.
        _fleetctl_config: Where fleetctl keeps its session token.
    """

    def __init__(self, config: InitConfig, fleetctl_config: Path | None = None) -> None:
        self._config = config
        self._fleetctl_config = fleetctl_config or get_fleetctl_config_path()

    def run(self) -> bool:
        """Initialize accounts unless the token file already exists.

        Returns:
            True if a token was written, False if initialization was skipped.

        Raises:
            BootstrapConfigError: If required credentials are missing.
            InitializationError: If any required fleetctl step fails.
        """
        config = self._config
        if config.token_file.exists():
            print_info("API token file already exists, skipping initialization...")
            return False

        config.require_complete()

        print_info("Configuring fleetctl...")
        self._require(self._fleetctl("config", "set", "--address", config.server_url), "config set")

        if not self._login(config.admin_email, config.admin_password):
            print_info("Performing initial Fleet setup...")
            result = self._fleetctl(
                "setup",
                f"--email={config.admin_email}",
                f"--password={config.admin_password}",
                f"--org-name={config.org_name}",
                f"--name={config.admin_name}",
            )
            if not result.success:
                # Setup fails when another replica already ran it; the login below decides.
                print_warning(f"fleetctl setup failed: {result.stderr.strip()}")
        else:
            print_info("Fleet already initialized, skipping setup")

        print_info("Logging in as admin...")
        if not self._login(config.admin_email, config.admin_password):
            raise InitializationError("Admin login failed")

        print_info("Attempting to log in as API user...")
        if self._login(config.api_user_email, config.api_user_password):
            print_info("Successfully logged in as API user")
            token = read_config_token(self._fleetctl_config)
            if token is None:
                raise InitializationError("Failed to get API token")
        else:
            token = self._create_api_user()

        write_token_file(config.token_file, token)
        print_success(f"API token saved to {config.token_file}")
        print_success("Fleet initialization complete!")
        return True

    def _create_api_user(self) -> str:
        config = self._config
        print_info("API user doesn't exist, creating...")
        result = self._fleetctl(
            "user",
            "create",
            "--name",
            str(config.api_user_name),
            "--email",
            str(config.api_user_email),
            "--password",
            str(config.api_user_password),
            "--global-role",
            "admin",
            "--api-only",
        )
        output = f"{result.stdout}\n{result.stderr}"
        token = parse_created_token(output)
        if token is None:
            msg = f"Failed to create API user. Output was:\n{output.strip()}"
            raise InitializationError(msg)

        print_success("Successfully created API user and got token")
        self._require(self._fleetctl("config", "set", "--token", token), "config set --token")
        return token

    def _login(self, email: str | None, password: str | None) -> bool:
        result = self._fleetctl("login", f"--email={email}", f"--password={password}")
        return result.success

    def _fleetctl(self, *args: str) -> CommandResult:
        # Arguments carry passwords; only the subcommand is logged.
        logger.debug("Running fleetctl %s", args[0])
        try:
            return run_command([self._config.fleetctl_binary, *args], timeout=_FLEETCTL_TIMEOUT)
        except (OSError, subprocess.TimeoutExpired) as e:
            msg = f"fleetctl {args[0]} could not run: {e}"
            raise InitializationError(msg) from e

    @staticmethod
    def _require(result: CommandResult, step: str) -> None:
        if not result.success:
            msg = f"fleetctl {step} failed: {result.stderr.strip() or result.stdout.strip()}"
            raise InitializationError(msg)
