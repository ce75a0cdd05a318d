"""Shared test doubles."""

from __future__ import annotations

import json
from typing import Any, Optional
from urllib.parse import urlsplit

from relaysearch.hosts import HostHealthStore, HostStatus
from relaysearch.transports import BaseTransport
from relaysearch.types import (
    FailureKind,
    HostPool,
    OperationClass,
    RequestDescriptor,
    TransportFailure,
    TransportOutcome,
    TransportResponse,
)

TIMEOUTS = {
    OperationClass.SEARCH: 5.0,
    OperationClass.READ: 30.0,
    OperationClass.WRITE: 30.0,
}


def json_response(status: int, payload: Any, reason: str = "") -> TransportResponse:
    return TransportResponse(status_code=status, body=json.dumps(payload), reason=reason)


def error_response(status: int, message: str, reason: str = "") -> TransportResponse:
    return json_response(status, {"message": message, "status": status}, reason)


def timed_out() -> TransportFailure:
    return TransportFailure(FailureKind.TIMED_OUT, "read timeout")


def connection_error(detail: str = "Connection refused") -> TransportFailure:
    return TransportFailure(FailureKind.CONNECTION_ERROR, detail)


class ScriptedTransport(BaseTransport):
    """Transport returning a fixed outcome per host and recording each attempt."""

    transport_name = "scripted"

    def __init__(self, outcomes: dict[str, TransportOutcome]) -> None:
        self.outcomes = outcomes
        self.calls: list[dict[str, Any]] = []

    @property
    def hosts(self) -> list[str]:
        return [call["host"] for call in self.calls]

    async def _perform(
        self,
        descriptor: RequestDescriptor,
        url: str,
        timeout: float,
    ) -> TransportOutcome:
        host = urlsplit(url).hostname
        self.calls.append({"host": host, "url": url, "timeout": timeout, "descriptor": descriptor})
        return self.outcomes[host]


class RecordingHealthStore(HostHealthStore):
    """Health store with fixed candidates that records every update."""

    def __init__(
        self,
        read_hosts: Optional[list[str]] = None,
        write_hosts: Optional[list[str]] = None,
    ) -> None:
        self.candidates = {
            HostPool.READ: list(read_hosts or []),
            HostPool.WRITE: list(write_hosts or []),
        }
        self.updates: list[tuple[HostPool, str, bool]] = []

    def filter_active_hosts(self, pool: HostPool) -> list[str]:
        return list(self.candidates[pool])

    def record_health(self, pool: HostPool, host: str, healthy: bool) -> None:
        self.updates.append((pool, host, healthy))

    def get_status(self, pool: HostPool, host: str) -> Optional[HostStatus]:
        return None

    def reset(self) -> None:
        self.updates.clear()
