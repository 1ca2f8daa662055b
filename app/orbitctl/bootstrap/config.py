"""Bootstrap configuration read from the container environment.

All settings are validated before any network activity so that a
missing or malformed variable fails the container immediately.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Any, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from orbitctl.core.paths import DEFAULT_API_TOKEN_FILE, DEFAULT_FLEET_CONFIG

DEFAULT_MYSQL_PORT = 3306
DEFAULT_REDIS_PORT = 6379
DEFAULT_SERVER_PORT = 8070

ModelT = TypeVar("ModelT", bound=BaseModel)


class BootstrapError(Exception):
    """Base exception for bootstrap failures."""


class BootstrapConfigError(BootstrapError):
    """Raised when required environment is missing or malformed."""


class ServiceAddress(BaseModel):
    """A ``host:port`` pair of a dependency service."""

    model_config = ConfigDict(frozen=True)

    host: Annotated[str, Field(min_length=1)]
    port: Annotated[int, Field(ge=1, le=65535)]

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


def parse_address(value: str, default_port: int) -> ServiceAddress:
    """Parse ``host`` or ``host:port`` into a ServiceAddress.

    Args:
        value: Address as found in the environment.
        default_port: Port used when the value has none.

    Raises:
        ValueError: If the host is empty or the port is not a valid number.
    """
    value = value.strip()
    host, sep, port_str = value.rpartition(":")
    if not sep:
        host, port_str = value, ""

    if not host:
        msg = f"missing host in address '{value}'"
        raise ValueError(msg)

    if not port_str:
        return ServiceAddress(host=host, port=default_port)

    try:
        port = int(port_str)
    except ValueError:
        msg = f"invalid port in address '{value}'"
        raise ValueError(msg) from None
    if not 1 <= port <= 65535:
        msg = f"port out of range in address '{value}'"
        raise ValueError(msg)
    return ServiceAddress(host=host, port=port)


class InitConfig(BaseModel):
    """Settings for creating the admin and API-only accounts.

    Attributes:
        server_port: Port the fleet server listens on locally.
        fleetctl_binary: fleetctl executable name or path.
        token_file: Where the API token is persisted (sentinel for re-runs).
        admin_email / admin_password / admin_name: Initial admin account.
        org_name: Organisation name used by ``fleetctl setup``.
        api_user_name / api_user_email / api_user_password: API-only account.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    server_port: Annotated[int, Field(ge=1, le=65535)] = DEFAULT_SERVER_PORT
    fleetctl_binary: Annotated[str, Field(min_length=1)] = "fleetctl"
    token_file: Path = DEFAULT_API_TOKEN_FILE

    admin_email: str | None = None
    admin_password: str | None = None
    admin_name: str = "Admin"
    org_name: str | None = None

    api_user_name: str | None = None
    api_user_email: str | None = None
    api_user_password: str | None = None

    @property
    def server_url(self) -> str:
        return f"http://localhost:{self.server_port}"

    def missing_fields(self) -> list[str]:
        """Return the environment variables needed for initialization that are unset."""
        required = {
            "admin_email": self.admin_email,
            "admin_password": self.admin_password,
            "org_name": self.org_name,
            "api_user_name": self.api_user_name,
            "api_user_email": self.api_user_email,
            "api_user_password": self.api_user_password,
        }
        return [ENV_VARS[name] for name, value in required.items() if not value]

    def require_complete(self) -> None:
        """Raise BootstrapConfigError unless every credential is set."""
        missing = self.missing_fields()
        if missing:
            msg = f"Missing required environment for initialization: {', '.join(missing)}"
            raise BootstrapConfigError(msg)

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "InitConfig":
        """Build the init settings from environment variables."""
        return _validate(cls, _collect(environ, cls.model_fields))


class BootstrapConfig(BaseModel):
    """Settings for the container entrypoint.

    Attributes:
        mysql_address / redis_address: Dependencies polled before startup.
        config_file: fleet configuration file passed to prepare and serve.
        fleet_binary: fleet server executable name or path.
        auto_init: Run account initialization once the server is ready.
        dependency_interval / dependency_attempts: TCP polling schedule.
        health_interval / health_attempts / health_path: HTTP polling schedule.
        init: Account initialization settings.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    mysql_address: ServiceAddress
    redis_address: ServiceAddress
    config_file: Path = DEFAULT_FLEET_CONFIG
    fleet_binary: Annotated[str, Field(min_length=1)] = "fleet"
    auto_init: bool = False

    dependency_interval: Annotated[float, Field(gt=0)] = 2.0
    dependency_attempts: Annotated[int, Field(ge=1)] = 60
    health_interval: Annotated[float, Field(gt=0)] = 5.0
    health_attempts: Annotated[int, Field(ge=1)] = 30
    health_path: str = "/setup"

    init: InitConfig = InitConfig()

    @field_validator("mysql_address", "redis_address", mode="before")
    @classmethod
    def parse_service_address(cls, v: object, info: Any) -> object:
        if isinstance(v, str):
            if info.field_name == "mysql_address":
                return parse_address(v, DEFAULT_MYSQL_PORT)
            return parse_address(v, DEFAULT_REDIS_PORT)
        return v

    @field_validator("health_path")
    @classmethod
    def validate_health_path(cls, v: str) -> str:
        if not v.startswith("/"):
            msg = "health path must start with '/'"
            raise ValueError(msg)
        return v

    @property
    def health_url(self) -> str:
        return f"{self.init.server_url}{self.health_path}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "BootstrapConfig":
        """Build the entrypoint settings from environment variables.

        Raises:
            BootstrapConfigError: If a required variable is missing or any
                value is malformed.
        """
        init = InitConfig.from_env(environ)
        data: dict[str, Any] = _collect(environ, cls.model_fields)
        data["init"] = init
        return _validate(cls, data)


# Field name -> environment variable.
ENV_VARS: dict[str, str] = {
    "mysql_address": "FLEET_MYSQL_ADDRESS",
    "redis_address": "FLEET_REDIS_ADDRESS",
    "config_file": "FLEET_CONFIG",
    "fleet_binary": "FLEET_BINARY",
    "auto_init": "FLEET_SETUP_AUTO_INIT",
    "dependency_interval": "FLEET_BOOTSTRAP_DEPENDENCY_INTERVAL",
    "dependency_attempts": "FLEET_BOOTSTRAP_DEPENDENCY_ATTEMPTS",
    "health_interval": "FLEET_BOOTSTRAP_HEALTH_INTERVAL",
    "health_attempts": "FLEET_BOOTSTRAP_HEALTH_ATTEMPTS",
    "health_path": "FLEET_BOOTSTRAP_HEALTH_PATH",
    "server_port": "FLEET_SERVER_PORT",
    "fleetctl_binary": "FLEETCTL_BINARY",
    "token_file": "FLEET_API_TOKEN_FILE",
    "admin_email": "FLEET_SETUP_ADMIN_EMAIL",
    "admin_password": "FLEET_SETUP_ADMIN_PASSWORD",
    "admin_name": "FLEET_SETUP_ADMIN_NAME",
    "org_name": "FLEET_SETUP_ORG_NAME",
    "api_user_name": "FLEET_API_USER_NAME",
    "api_user_email": "FLEET_API_USER_EMAIL",
    "api_user_password": "FLEET_API_USER_PASSWORD",
}

# Credentials are passed on exactly as given.
_UNSTRIPPED_FIELDS = frozenset({"admin_password", "api_user_password"})


def _collect(environ: Mapping[str, str], fields: Mapping[str, object]) -> dict[str, Any]:
    """Pick the non-empty environment values for the given model fields."""
    data: dict[str, Any] = {}
    for name in fields:
        env_var = ENV_VARS.get(name)
        if env_var is None:
            continue
        raw = environ.get(env_var, "")
        if not raw.strip():
            continue
        data[name] = raw if name in _UNSTRIPPED_FIELDS else raw.strip()
    return data


def _validate(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    """Validate data, turning pydantic errors into one readable message."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        problems = []
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else ""
            label = ENV_VARS.get(field, field or "configuration")
            message = error["msg"].removeprefix("Value error, ")
            problems.append(f"{label}: {message}")
        msg = "Invalid bootstrap configuration: " + "; ".join(problems)
        raise BootstrapConfigError(msg) from e
