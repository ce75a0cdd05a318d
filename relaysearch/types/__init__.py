"""Type definitions for relaysearch."""

from .common import HostPool, HttpMethod, OperationClass
from .requests import RequestDescriptor
from .outcomes import (
    Cancelled,
    ClassifiedResult,
    ErrorAccumulator,
    FailureKind,
    Fatal,
    Retryable,
    Succeeded,
    TransportFailure,
    TransportOutcome,
    TransportResponse,
)

__all__ = [
    # Common
    "HostPool",
    "HttpMethod",
    "OperationClass",
    # Requests
    "RequestDescriptor",
    # Outcomes
    "FailureKind",
    "TransportFailure",
    "TransportOutcome",
    "TransportResponse",
    # Classification
    "Cancelled",
    "ClassifiedResult",
    "ErrorAccumulator",
    "Fatal",
    "Retryable",
    "Succeeded",
]
