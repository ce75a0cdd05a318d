"""relaysearch - Multi-host failover client for a hosted search and indexing service."""

__version__ = "0.1.0"

from relaysearch.client import SearchClient
from relaysearch.config import ClientConfig, load_config
from relaysearch.executor import RequestExecutor
from relaysearch.hosts import HostHealthStore, InMemoryHostHealthStore
from relaysearch.options import RequestOptions
from relaysearch.transports import AiohttpTransport, BaseTransport, HttpxTransport
from relaysearch.types import HttpMethod, OperationClass
from relaysearch.exceptions import (
    RelaySearchError,
    FatalRequestError,
    RequestCancelledError,
    HostsUnreachableError,
    ConfigurationError,
)

__all__ = [
    # Version
    "__version__",
    # Client
    "SearchClient",
    "ClientConfig",
    "load_config",
    "RequestExecutor",
    "RequestOptions",
    # Hosts
    "HostHealthStore",
    "InMemoryHostHealthStore",
    # Transports
    "BaseTransport",
    "HttpxTransport",
    "AiohttpTransport",
    # Types
    "HttpMethod",
    "OperationClass",
    # Exceptions
    "RelaySearchError",
    "FatalRequestError",
    "RequestCancelledError",
    "HostsUnreachableError",
    "ConfigurationError",
]
