"""Observability callbacks for relaysearch."""

from relaysearch.callbacks.base import AttemptLog, AttemptStatus, Callback, CallbackManager
from relaysearch.callbacks.logging_callback import LoggingCallback

__all__ = [
    "AttemptLog",
    "AttemptStatus",
    "Callback",
    "CallbackManager",
    "LoggingCallback",
]
