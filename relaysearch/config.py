"""Client configuration."""

import os
import random
from dataclasses import dataclass, field, fields
from typing import Any, Optional

import yaml

from relaysearch.exceptions import ConfigurationError
from relaysearch.types import OperationClass

DEFAULT_USER_AGENT = "relaysearch-python/0.1.0"
DEFAULT_PRIMARY_DOMAIN = "relaysearch.net"
DEFAULT_FALLBACK_DOMAIN = "relaysearch-net.com"

APPLICATION_ID_HEADER = "X-Relay-Application-Id"
API_KEY_HEADER = "X-Relay-API-Key"


@dataclass
class ClientConfig:
    """Client configuration.

    Attributes:
        application_id: Application identifier sent with every request
        api_key: API key sent with every request
        read_hosts: Hosts for search and read operations, in priority order
        write_hosts: Hosts for write operations, in priority order
        search_timeout: Per-attempt timeout for search operations, in seconds
        write_timeout: Per-attempt timeout for read and write operations, in seconds
        host_retry_delay: Seconds before a failed host is tried again
        transport: Name of the registered transport binding
        user_agent: User-Agent header value
        primary_domain: Domain of the primary hosts derived from the application id
        fallback_domain: Domain of the fallback hosts derived from the application id
    """
    application_id: str
    api_key: str
    read_hosts: Optional[list[str]] = None
    write_hosts: Optional[list[str]] = None
    search_timeout: float = 5.0
    write_timeout: float = 30.0
    host_retry_delay: float = 300.0
    transport: str = "httpx"
    user_agent: str = DEFAULT_USER_AGENT
    primary_domain: str = DEFAULT_PRIMARY_DOMAIN
    fallback_domain: str = DEFAULT_FALLBACK_DOMAIN
    extra_headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.application_id:
            raise ConfigurationError("application_id is required")
        if not self.api_key:
            raise ConfigurationError("api_key is required")
        if self.search_timeout <= 0 or self.write_timeout <= 0:
            raise ConfigurationError("timeouts must be positive")
        if self.host_retry_delay < 0:
            raise ConfigurationError("host_retry_delay cannot be negative")

        if not self.read_hosts or not self.write_hosts:
            fallbacks = [
                f"{self.application_id}-{i}.{self.fallback_domain}" for i in (1, 2, 3)
            ]
            random.shuffle(fallbacks)
            if not self.read_hosts:
                self.read_hosts = [f"{self.application_id}-dsn.{self.primary_domain}", *fallbacks]
            if not self.write_hosts:
                self.write_hosts = [f"{self.application_id}.{self.primary_domain}", *fallbacks]

    def timeout_for(self, operation: OperationClass) -> float:
        """Per-attempt timeout for an operation class."""
        if operation is OperationClass.SEARCH:
            return self.search_timeout
        return self.write_timeout

    def default_headers(self) -> dict[str, str]:
        """Headers sent with every request before request option headers."""
        headers = {
            APPLICATION_ID_HEADER: self.application_id,
            API_KEY_HEADER: self.api_key,
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }
        headers.update(self.extra_headers)
        return headers

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientConfig":
        """Build a configuration from ``RELAYSEARCH_*`` environment variables.

        Args:
            **overrides: Values taking precedence over the environment

        Returns:
            Client configuration
        """
        values: dict[str, Any] = {
            "application_id": os.environ.get("RELAYSEARCH_APPLICATION_ID", ""),
            "api_key": os.environ.get("RELAYSEARCH_API_KEY", ""),
        }
        transport = os.environ.get("RELAYSEARCH_TRANSPORT")
        if transport:
            values["transport"] = transport
        values.update(overrides)
        return cls(**values)


def _resolve_env_vars(value: Any) -> Any:
    """Resolve environment variables in configuration values.

    Supports format: os.environ/VAR_NAME or ${VAR_NAME}

    Args:
        value: Configuration value

    Returns:
        Resolved value
    """
    if isinstance(value, str):
        if value.startswith("os.environ/"):
            return os.environ.get(value[11:])
        elif value.startswith("${") and value.endswith("}"):
            return os.environ.get(value[2:-1])
    elif isinstance(value, dict):
        return {k: _resolve_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_resolve_env_vars(v) for v in value]
    return value


def load_config(config_path: str) -> ClientConfig:
    """Load a client configuration from a YAML file.

    The file may hold the settings at the top level or under a ``client``
    key.

    Args:
        config_path: Path to the configuration file

    Returns:
        Client configuration

    Raises:
        ConfigurationError: If the file is missing, malformed, or has unknown keys
    """
    if not os.path.exists(config_path):
        raise ConfigurationError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a mapping in {config_path}")
    if isinstance(data.get("client"), dict):
        data = data["client"]

    known = {f.name for f in fields(ClientConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown config keys: {', '.join(unknown)}")

    return ClientConfig(**_resolve_env_vars(data))
