"""Transport outcomes and classified results.

Both are closed sets of small frozen dataclasses; callers dispatch on the
concrete type rather than on exceptions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional, Union


class FailureKind(Enum):
    """Non-HTTP transport failure kinds."""

    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"
    CONNECTION_ERROR = "connection_error"


@dataclass(frozen=True)
class TransportResponse:
    """Any HTTP response, successful or not.

    Attributes:
        status_code: HTTP status code
        body: Raw response body text
        reason: Reason phrase reported by the transport
    """
    status_code: int
    body: str
    reason: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class TransportFailure:
    """A failure where no HTTP response was received."""
    kind: FailureKind
    detail: str = ""


TransportOutcome = Union[TransportResponse, TransportFailure]


@dataclass(frozen=True)
class Succeeded:
    """Parsed body of a 2xx response."""
    body: dict[str, Any]


@dataclass(frozen=True)
class Retryable:
    """This host failed; another host might succeed."""
    host: str
    status: Optional[str]
    message: str

    @property
    def key(self) -> str:
        """Diagnostic key: the host, annotated with the status when known."""
        if self.status is None:
            return self.host
        return f"{self.host}({self.status})"


@dataclass(frozen=True)
class Fatal:
    """The request itself is invalid."""
    message: str
    status: Optional[int] = None


@dataclass(frozen=True)
class Cancelled:
    """The caller withdrew interest in the call."""


ClassifiedResult = Union[Succeeded, Retryable, Fatal, Cancelled]


@dataclass
class ErrorAccumulator:
    """Insertion-ordered record of retryable failures for one call."""

    entries: list[tuple[str, str]] = field(default_factory=list)

    def add(self, error: Retryable) -> None:
        self.entries.append((error.key, error.message))

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __str__(self) -> str:
        return ", ".join(f"{key}={message}" for key, message in self.entries)
