"""HTTP transport bindings."""

from .base import BaseTransport
from .registry import TransportRegistry, register_transport
from .httpx_transport import HttpxTransport
from .aiohttp_transport import AiohttpTransport

__all__ = [
    "AiohttpTransport",
    "BaseTransport",
    "HttpxTransport",
    "TransportRegistry",
    "register_transport",
]
