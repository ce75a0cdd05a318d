"""Transport registry for managing HTTP bindings."""

from typing import Any, Callable, Type

from relaysearch.exceptions import ConfigurationError
from .base import BaseTransport


class TransportRegistry:
    """Registry for transport bindings."""

    _transports: dict[str, Type[BaseTransport]] = {}

    @classmethod
    def register(cls, transport_name: str, transport_class: Type[BaseTransport]) -> None:
        """Register a transport.

        Args:
            transport_name: The transport identifier
            transport_class: The transport class
        """
        cls._transports[transport_name] = transport_class

    @classmethod
    def get(cls, transport_name: str) -> Type[BaseTransport]:
        """Get a transport by name.

        Args:
            transport_name: The transport identifier

        Returns:
            The transport class

        Raises:
            ConfigurationError: If the transport is not registered
        """
        if transport_name not in cls._transports:
            raise ConfigurationError(
                f"Transport '{transport_name}' is not registered "
                f"(available: {', '.join(sorted(cls._transports))})"
            )
        return cls._transports[transport_name]

    @classmethod
    def create(cls, transport_name: str, **kwargs: Any) -> BaseTransport:
        """Instantiate a registered transport."""
        return cls.get(transport_name)(**kwargs)

    @classmethod
    def list_transports(cls) -> list[str]:
        """List all registered transport names."""
        return list(cls._transports.keys())


def register_transport(transport_name: str) -> Callable[[Type[BaseTransport]], Type[BaseTransport]]:
    """Decorator to register a transport class.

    Args:
        transport_name: The transport identifier

    Returns:
        Decorator function
    """
    def decorator(cls: Type[BaseTransport]) -> Type[BaseTransport]:
        TransportRegistry.register(transport_name, cls)
        cls.transport_name = transport_name
        return cls
    return decorator
