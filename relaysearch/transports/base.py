"""Base transport interface for relaysearch."""

import asyncio
import contextlib
import logging
from abc import ABC, abstractmethod
from typing import Optional

from relaysearch.request_builder import build_url
from relaysearch.types import (
    FailureKind,
    RequestDescriptor,
    TransportFailure,
    TransportOutcome,
)

logger = logging.getLogger(__name__)


class BaseTransport(ABC):
    """Base class for HTTP transport bindings.

    A binding sends one request to one host and reports what happened. It
    never raises for network problems and never interprets status codes;
    both are left to the classifier.
    """

    transport_name: str = ""

    async def send(
        self,
        descriptor: RequestDescriptor,
        host: str,
        timeout: float,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> TransportOutcome:
        """Send a request to a single host.

        Args:
            descriptor: The request to send
            host: Target host name
            timeout: Seconds to wait for a response
            cancel_event: Call-wide cancellation signal

        Returns:
            The transport outcome
        """
        if cancel_event is not None and cancel_event.is_set():
            return TransportFailure(FailureKind.CANCELLED, "Request cancelled")

        url = build_url(host, descriptor.path, descriptor.extra_query)
        if cancel_event is None:
            return await self._perform(descriptor, url, timeout)

        attempt = asyncio.ensure_future(self._perform(descriptor, url, timeout))
        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait(
                {attempt, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            attempt.cancel()
            waiter.cancel()
            raise

        waiter.cancel()
        if attempt in done:
            return attempt.result()

        attempt.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await attempt
        logger.debug("Request to %s cancelled in flight", host)
        return TransportFailure(FailureKind.CANCELLED, "Request cancelled")

    @abstractmethod
    async def _perform(
        self,
        descriptor: RequestDescriptor,
        url: str,
        timeout: float,
    ) -> TransportOutcome:
        """Execute the HTTP exchange for one attempt.

        Implementations own a client scoped to this attempt and release it
        on every exit path.

        Args:
            descriptor: The request to send
            url: Fully-qualified URL for this attempt
            timeout: Seconds to wait for a response

        Returns:
            A response outcome, or a timeout / connection failure
        """
        pass

    async def close(self) -> None:
        """Release any resources held across attempts."""
        return None
