"""Base host health store interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from relaysearch.types import HostPool


@dataclass(frozen=True)
class HostStatus:
    """Most recent health observation for a host.

    Attributes:
        up: Whether the last attempt against the host succeeded
        last_modified: Time of the observation (seconds since the epoch)
    """
    up: bool
    last_modified: float


class HostHealthStore(ABC):
    """Abstract base class for host health stores.

    Implementations must be safe to share between concurrent calls.
    """

    @abstractmethod
    def filter_active_hosts(self, pool: HostPool) -> list[str]:
        """Return the ordered candidate hosts for a call.

        Args:
            pool: Host pool to draw from

        Returns:
            Ordered list of host names
        """
        pass

    @abstractmethod
    def record_health(self, pool: HostPool, host: str, healthy: bool) -> None:
        """Record the outcome of an attempt against a host.

        Args:
            pool: Host pool the host belongs to
            host: Host name
            healthy: Whether the attempt succeeded
        """
        pass

    @abstractmethod
    def get_status(self, pool: HostPool, host: str) -> Optional[HostStatus]:
        """Get the last recorded status for a host, if any."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Forget all recorded health."""
        pass

    def get_stats(self) -> dict[str, Any]:
        """Get health statistics.

        Returns:
            Statistics dictionary
        """
        return {}
