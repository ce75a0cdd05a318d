"""General-purpose async transport built on httpx."""

import asyncio
import logging
from typing import Optional

import httpx

from relaysearch.types import (
    FailureKind,
    RequestDescriptor,
    TransportFailure,
    TransportOutcome,
    TransportResponse,
)

from .base import BaseTransport
from .registry import register_transport

logger = logging.getLogger(__name__)


def _describe(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


@register_transport("httpx")
class HttpxTransport(BaseTransport):
    """Transport binding on top of ``httpx.AsyncClient``.

    A new client is opened for every attempt and closed before the attempt
    returns, so no connection outlives the host it was opened for.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        """Initialize the transport.

        Args:
            transport: Optional httpx transport, e.g. ``httpx.MockTransport``
        """
        self._transport = transport

    def _get_client(self, timeout: float) -> httpx.AsyncClient:
        """Get a client scoped to one attempt."""
        return httpx.AsyncClient(
            timeout=timeout,
            transport=self._transport,
            headers={"Accept-Encoding": "gzip, deflate"},
        )

    async def _perform(
        self,
        descriptor: RequestDescriptor,
        url: str,
        timeout: float,
    ) -> TransportOutcome:
        headers = dict(descriptor.headers)
        if descriptor.body is not None and not any(
            k.lower() == "content-type" for k in headers
        ):
            headers["Content-Type"] = "application/json"

        client = self._get_client(timeout)
        try:
            # httpx timeouts apply per phase; bound the whole exchange as well
            response = await asyncio.wait_for(
                client.request(
                    descriptor.method.value,
                    url,
                    content=descriptor.body,
                    headers=headers,
                ),
                timeout,
            )
            logger.debug("%s %s -> %s", descriptor.method.value, url, response.status_code)
            return TransportResponse(
                status_code=response.status_code,
                body=response.text,
                reason=response.reason_phrase,
            )
        except asyncio.TimeoutError:
            logger.debug("%s %s exceeded %ss", descriptor.method.value, url, timeout)
            return TransportFailure(FailureKind.TIMED_OUT, "Timeout expired")
        except httpx.TimeoutException as e:
            logger.debug("%s %s timed out: %s", descriptor.method.value, url, e)
            return TransportFailure(FailureKind.TIMED_OUT, _describe(e))
        except httpx.HTTPError as e:
            logger.debug("%s %s failed: %s", descriptor.method.value, url, e)
            return TransportFailure(FailureKind.CONNECTION_ERROR, _describe(e))
        finally:
            await client.aclose()
