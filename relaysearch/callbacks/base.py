"""Base callback interface for observability."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class AttemptStatus(Enum):
    """Attempt status enum."""
    STARTED = "started"
    SUCCESS = "success"
    RETRYABLE = "retryable"
    FATAL = "fatal"
    CANCELLED = "cancelled"


@dataclass
class AttemptLog:
    """Log entry for one host attempt.

    Attributes:
        request_id: ID shared by every attempt of a call
        timestamp: Attempt start time
        operation: Operation class name
        method: HTTP method
        path: Request path and query
        host: Host the attempt was sent to
        attempt: Zero-based position of the host in the candidate list
        status: Attempt status
        status_label: Status reported by the service, if any
        error_message: Error message if the attempt failed
        latency_ms: Attempt latency in milliseconds
    """
    request_id: str
    timestamp: datetime
    operation: str
    method: str
    path: str
    host: str
    attempt: int = 0
    status: AttemptStatus = AttemptStatus.STARTED
    status_label: Optional[str] = None
    error_message: Optional[str] = None
    latency_ms: float = 0.0


class Callback(ABC):
    """Base class for observability callbacks."""

    @abstractmethod
    async def on_attempt_start(self, log: AttemptLog) -> None:
        """Called before a request is sent to a host.

        Args:
            log: Attempt log entry
        """
        pass

    @abstractmethod
    async def on_attempt_end(self, log: AttemptLog) -> None:
        """Called once the attempt has been classified.

        Args:
            log: Attempt log entry, with its final status
        """
        pass


class CallbackManager:
    """Manager for multiple callbacks."""

    def __init__(self, callbacks: Optional[list[Callback]] = None) -> None:
        """Initialize the callback manager.

        Args:
            callbacks: Callbacks to register up front
        """
        self._callbacks: list[Callback] = list(callbacks or [])

    def register(self, callback: Callback) -> None:
        """Register a callback.

        Args:
            callback: Callback to register
        """
        self._callbacks.append(callback)

    def unregister(self, callback: Callback) -> None:
        """Unregister a callback.

        Args:
            callback: Callback to unregister
        """
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    async def on_attempt_start(self, log: AttemptLog) -> None:
        """Notify all callbacks of an attempt start."""
        for callback in self._callbacks:
            try:
                await callback.on_attempt_start(log)
            except Exception:
                # A broken callback must not fail the request
                logger.exception("Callback %r failed in on_attempt_start", callback)

    async def on_attempt_end(self, log: AttemptLog) -> None:
        """Notify all callbacks of an attempt end."""
        for callback in self._callbacks:
            try:
                await callback.on_attempt_end(log)
            except Exception:
                logger.exception("Callback %r failed in on_attempt_end", callback)
