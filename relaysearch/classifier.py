"""Classification of transport outcomes into success, retryable and fatal."""

import json
from typing import Any, Optional

from relaysearch.types import (
    Cancelled,
    ClassifiedResult,
    FailureKind,
    Fatal,
    Retryable,
    Succeeded,
    TransportFailure,
    TransportOutcome,
    TransportResponse,
)

DEFAULT_ERROR_MESSAGE = "Internal Error"
TIMEOUT_MESSAGE = "Timeout expired"


def _parse_object(body: str) -> Optional[dict[str, Any]]:
    try:
        parsed = json.loads(body)
    except (TypeError, ValueError):
        return None
    return parsed if isinstance(parsed, dict) else None


def _status_as_int(status: Any) -> Optional[int]:
    if isinstance(status, bool):
        return None
    try:
        return int(status)
    except (TypeError, ValueError):
        return None


def _classify_response(response: TransportResponse, host: str) -> ClassifiedResult:
    parsed = _parse_object(response.body)

    if response.is_success:
        if parsed is None:
            return Retryable(host, None, f"Invalid JSON response: {response.body[:200]!r}")
        return Succeeded(parsed)

    if parsed is None:
        return Retryable(host, "0", response.reason or DEFAULT_ERROR_MESSAGE)

    message = parsed.get("message")
    message = DEFAULT_ERROR_MESSAGE if message is None else str(message)
    status = parsed.get("status")
    if status is None:
        return Retryable(host, "0", message)

    code = _status_as_int(status)
    if code is not None and code // 100 == 4:
        return Fatal(message, code)
    return Retryable(host, str(status), message)


def classify(outcome: TransportOutcome, host: str) -> ClassifiedResult:
    """Classify one attempt against ``host``.

    4xx error bodies are fatal: the request is wrong, not the host. Every
    other failure, including unparseable error bodies, is retryable.

    Args:
        outcome: Result of the transport send
        host: Host the attempt was sent to

    Returns:
        Classified result
    """
    if isinstance(outcome, TransportResponse):
        return _classify_response(outcome, host)

    if isinstance(outcome, TransportFailure):
        if outcome.kind is FailureKind.CANCELLED:
            return Cancelled()
        if outcome.kind is FailureKind.TIMED_OUT:
            return Retryable(host, None, TIMEOUT_MESSAGE)
        return Retryable(host, None, outcome.detail or "Connection error")

    raise TypeError(f"Unknown transport outcome: {outcome!r}")
