"""Alternate transport built on aiohttp."""

import asyncio
import logging
from typing import Callable, Optional

import aiohttp

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

SessionFactory = Callable[[aiohttp.ClientTimeout], aiohttp.ClientSession]


def _default_session(timeout: aiohttp.ClientTimeout) -> aiohttp.ClientSession:
    return aiohttp.ClientSession(timeout=timeout, auto_decompress=True)


@register_transport("aiohttp")
class AiohttpTransport(BaseTransport):
    """Transport binding on top of ``aiohttp.ClientSession``.

    Headers are set on each request rather than on the session, and the
    session lives for exactly one attempt.
    """

    def __init__(self, session_factory: Optional[SessionFactory] = None) -> None:
        self._session_factory = session_factory or _default_session

    async def _perform(
        self,
        descriptor: RequestDescriptor,
        url: str,
        timeout: float,
    ) -> TransportOutcome:
        headers = dict(descriptor.headers)
        data = None
        if descriptor.body is not None:
            data = descriptor.body.encode("utf-8")
            if not any(k.lower() == "content-type" for k in headers):
                headers["Content-Type"] = "application/json"

        try:
            async with self._session_factory(aiohttp.ClientTimeout(total=timeout)) as session:
                async with session.request(
                    descriptor.method.value,
                    url,
                    data=data,
                    headers=headers,
                ) as response:
                    body = await response.text(errors="replace")
                    logger.debug("%s %s -> %s", descriptor.method.value, url, response.status)
                    return TransportResponse(
                        status_code=response.status,
                        body=body,
                        reason=response.reason or "",
                    )
        except asyncio.TimeoutError as e:
            logger.debug("%s %s timed out", descriptor.method.value, url)
            return TransportFailure(FailureKind.TIMED_OUT, str(e) or "Timeout expired")
        except aiohttp.ClientError as e:
            logger.debug("%s %s failed: %s", descriptor.method.value, url, e)
            return TransportFailure(FailureKind.CONNECTION_ERROR, str(e) or type(e).__name__)
