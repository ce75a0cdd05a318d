"""Host health tracking."""

from relaysearch.hosts.base import HostHealthStore, HostStatus
from relaysearch.hosts.memory import InMemoryHostHealthStore
from relaysearch.types import HostPool

__all__ = [
    "HostHealthStore",
    "HostPool",
    "HostStatus",
    "InMemoryHostHealthStore",
]
