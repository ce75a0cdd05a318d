"""Failover request executor.

Sends a call to each candidate host in turn until one succeeds, the request
is found to be invalid, or the caller cancels. Every attempt's outcome is
pushed to the host health store so later calls can skip failing hosts.
"""

import asyncio
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Union

from relaysearch.callbacks import AttemptLog, AttemptStatus, CallbackManager
from relaysearch.classifier import classify
from relaysearch.exceptions import (
    FatalRequestError,
    HostsUnreachableError,
    RequestCancelledError,
)
from relaysearch.hosts import HostHealthStore
from relaysearch.options import RequestOptions
from relaysearch.request_builder import build_request
from relaysearch.transports import BaseTransport
from relaysearch.types import (
    Cancelled,
    ErrorAccumulator,
    Fatal,
    HttpMethod,
    OperationClass,
    Retryable,
    Succeeded,
)

logger = logging.getLogger(__name__)


class RequestExecutor:
    """Executes a call against an ordered list of candidate hosts."""

    def __init__(
        self,
        transport: BaseTransport,
        health_store: HostHealthStore,
        *,
        timeouts: Union[Mapping[OperationClass, float], Callable[[OperationClass], float]],
        default_headers: Optional[Mapping[str, str]] = None,
        callbacks: Optional[CallbackManager] = None,
    ) -> None:
        """Initialize the executor.

        Args:
            transport: Transport binding used for every attempt
            health_store: Source of candidate hosts and sink for health updates
            timeouts: Per-attempt timeout for each operation class, as a
                mapping or a function
            default_headers: Headers sent with every request
            callbacks: Attempt-level observability callbacks
        """
        self.transport = transport
        self.health_store = health_store
        self._timeouts = timeouts
        self.default_headers = dict(default_headers or {})
        self.callbacks = callbacks or CallbackManager()

    def timeout_for(self, operation: OperationClass) -> float:
        if callable(self._timeouts):
            return self._timeouts(operation)
        return self._timeouts[operation]

    async def execute_request(
        self,
        operation: Union[OperationClass, str],
        method: Union[HttpMethod, str],
        path: str,
        content: Any = None,
        *,
        cancel_event: Optional[asyncio.Event] = None,
        request_options: Optional[RequestOptions] = None,
    ) -> dict[str, Any]:
        """Execute a request with host failover.

        Args:
            operation: Operation class; selects host pool and timeout
            method: HTTP method
            path: Path, optionally with its own query string
            content: Request body for POST/PUT
            cancel_event: Set to abandon the call
            request_options: Extra query parameters and headers

        Returns:
            Parsed JSON body of the first successful response

        Raises:
            FatalRequestError: A host rejected the request as invalid
            RequestCancelledError: ``cancel_event`` was set
            HostsUnreachableError: Every candidate host failed
        """
        operation = OperationClass(operation)
        pool = operation.pool
        timeout = self.timeout_for(operation)
        descriptor = build_request(
            method,
            path,
            content,
            default_headers=self.default_headers,
            request_options=request_options,
        )
        if cancel_event is not None and cancel_event.is_set():
            logger.info("%s %s cancelled before the first attempt", descriptor.method.value, path)
            raise RequestCancelledError()

        hosts = self.health_store.filter_active_hosts(pool)
        errors = ErrorAccumulator()
        request_id = uuid.uuid4().hex

        for index, host in enumerate(hosts):
            log = AttemptLog(
                request_id=request_id,
                timestamp=datetime.now(timezone.utc),
                operation=operation.value,
                method=descriptor.method.value,
                path=path,
                host=host,
                attempt=index,
            )
            await self.callbacks.on_attempt_start(log)

            start_time = time.monotonic()
            outcome = await self.transport.send(descriptor, host, timeout, cancel_event)
            result = classify(outcome, host)
            log.latency_ms = (time.monotonic() - start_time) * 1000

            if isinstance(result, Succeeded):
                self.health_store.record_health(pool, host, True)
                log.status = AttemptStatus.SUCCESS
                await self.callbacks.on_attempt_end(log)
                return result.body

            if isinstance(result, Fatal):
                self.health_store.record_health(pool, host, False)
                log.status = AttemptStatus.FATAL
                log.status_label = str(result.status) if result.status is not None else None
                log.error_message = result.message
                await self.callbacks.on_attempt_end(log)
                logger.warning(
                    "%s %s rejected by %s: %s", log.method, path, host, result.message
                )
                raise FatalRequestError(result.message, status=result.status)

            if isinstance(result, Cancelled):
                log.status = AttemptStatus.CANCELLED
                await self.callbacks.on_attempt_end(log)
                logger.info("%s %s cancelled while trying %s", log.method, path, host)
                raise RequestCancelledError()

            if isinstance(result, Retryable):
                self.health_store.record_health(pool, host, False)
                errors.add(result)
                log.status = AttemptStatus.RETRYABLE
                log.status_label = result.status
                log.error_message = result.message
                await self.callbacks.on_attempt_end(log)
                logger.warning(
                    "%s %s failed on %s: %s", log.method, path, result.key, result.message
                )
                continue

            raise TypeError(f"Unknown classified result: {result!r}")

        logger.error("%s %s: all %d hosts failed (%s)", descriptor.method.value, path, len(hosts), errors)
        raise HostsUnreachableError(list(errors))
