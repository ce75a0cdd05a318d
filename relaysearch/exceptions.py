"""Custom exceptions for relaysearch."""

from typing import Any, Optional


class RelaySearchError(Exception):
    """Base exception for all relaysearch errors."""

    def __init__(
        self,
        message: str,
        *,
        type: Optional[str] = None,
        code: Optional[str] = None,
        body: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.type = type or "relaysearch_error"
        self.code = code
        self.body = body or {}

    def __str__(self) -> str:
        msg = self.message
        if self.type:
            msg = f"{self.type}: {msg}"
        if self.code:
            msg = f"[{self.code}] {msg}"
        return msg


class FatalRequestError(RelaySearchError):
    """The request itself is invalid; retrying on another host cannot help."""

    def __init__(
        self,
        message: str = "Invalid request",
        status: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            type="invalid_request_error",
            code=str(status) if status is not None else None,
            **kwargs,
        )
        self.status = status


class RequestCancelledError(RelaySearchError):
    """The caller cancelled the request before it completed."""

    def __init__(self, message: str = "Request cancelled", **kwargs: Any) -> None:
        super().__init__(message, type="request_cancelled", **kwargs)


class HostsUnreachableError(RelaySearchError):
    """Every candidate host failed with a retryable error."""

    def __init__(
        self,
        errors: Optional[list[tuple[str, str]]] = None,
        **kwargs: Any,
    ) -> None:
        self.errors = list(errors or [])
        message = "Hosts unreachable: " + ", ".join(
            f"{key}={value}" for key, value in self.errors
        )
        super().__init__(message, type="hosts_unreachable", **kwargs)


class ConfigurationError(RelaySearchError):
    """Invalid client configuration."""

    def __init__(self, message: str = "Invalid configuration", **kwargs: Any) -> None:
        super().__init__(message, type="configuration_error", **kwargs)
