"""Common type definitions shared across the client."""

from enum import Enum


class HostPool(str, Enum):
    """Host pools tracked separately by the health store."""

    READ = "read"
    WRITE = "write"


class OperationClass(str, Enum):
    """Logical class of an operation; selects host pool, timeout and headers."""

    SEARCH = "search"
    READ = "read"
    WRITE = "write"

    @property
    def pool(self) -> HostPool:
        """Host pool used by this operation class."""
        if self is OperationClass.WRITE:
            return HostPool.WRITE
        return HostPool.READ


class HttpMethod(str, Enum):
    """HTTP methods understood by the remote service."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @property
    def has_body(self) -> bool:
        """Whether requests with this method may carry a body."""
        return self in (HttpMethod.POST, HttpMethod.PUT)

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid method names."""
        return [m.value for m in cls]
