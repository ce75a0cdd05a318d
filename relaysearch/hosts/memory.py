"""In-memory host health store."""

import logging
import threading
import time
from typing import Any, Callable, Optional, Sequence

from relaysearch.hosts.base import HostHealthStore, HostStatus
from relaysearch.types import HostPool

logger = logging.getLogger(__name__)


class InMemoryHostHealthStore(HostHealthStore):
    """Process-local host health with time-based recovery.

    A host that failed is skipped until ``retry_delay`` seconds have passed
    since the failure, after which it becomes a candidate again. When every
    host in a pool is down the whole pool is returned, so a call always has
    something to try.
    """

    def __init__(
        self,
        read_hosts: Sequence[str],
        write_hosts: Sequence[str],
        *,
        retry_delay: float = 300.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the store.

        Args:
            read_hosts: Hosts serving search and read operations, in priority order
            write_hosts: Hosts serving write operations, in priority order
            retry_delay: Seconds before a failed host is tried again
            clock: Time source, in seconds
        """
        self.retry_delay = retry_delay
        self._clock = clock
        self._hosts: dict[HostPool, list[str]] = {
            HostPool.READ: list(read_hosts),
            HostPool.WRITE: list(write_hosts),
        }
        self._status: dict[HostPool, dict[str, HostStatus]] = {
            HostPool.READ: {},
            HostPool.WRITE: {},
        }
        self._lock = threading.Lock()

    def hosts(self, pool: HostPool) -> list[str]:
        """Configured hosts for a pool, in priority order."""
        return list(self._hosts[pool])

    def _is_up_or_retryable(self, status: Optional[HostStatus], now: float) -> bool:
        if status is None or status.up:
            return True
        return now - status.last_modified >= self.retry_delay

    def filter_active_hosts(self, pool: HostPool) -> list[str]:
        now = self._clock()
        with self._lock:
            statuses = dict(self._status[pool])
        configured = self._hosts[pool]

        active = [
            host for host in configured
            if self._is_up_or_retryable(statuses.get(host), now)
        ]
        if not active and configured:
            logger.warning("All %s hosts are down, trying all of them", pool.value)
            return list(configured)
        return active

    def record_health(self, pool: HostPool, host: str, healthy: bool) -> None:
        status = HostStatus(up=healthy, last_modified=self._clock())
        with self._lock:
            previous = self._status[pool].get(host)
            self._status[pool][host] = status
        if previous is not None and previous.up != healthy:
            logger.info(
                "Host %s (%s) is now %s", host, pool.value, "up" if healthy else "down"
            )

    def get_status(self, pool: HostPool, host: str) -> Optional[HostStatus]:
        with self._lock:
            return self._status[pool].get(host)

    def reset(self) -> None:
        with self._lock:
            for statuses in self._status.values():
                statuses.clear()

    def get_stats(self) -> dict[str, Any]:
        """Get per-pool host health.

        Returns:
            Mapping of pool name to a list of host entries
        """
        now = self._clock()
        with self._lock:
            snapshot = {pool: dict(statuses) for pool, statuses in self._status.items()}
        return {
            pool.value: [
                {
                    "host": host,
                    "up": snapshot[pool][host].up if host in snapshot[pool] else True,
                    "active": self._is_up_or_retryable(snapshot[pool].get(host), now),
                    "last_modified": (
                        snapshot[pool][host].last_modified if host in snapshot[pool] else None
                    ),
                }
                for host in self._hosts[pool]
            ]
            for pool in (HostPool.READ, HostPool.WRITE)
        }
