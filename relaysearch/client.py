"""Search client: wires configuration, host health, transport and executor."""

import asyncio
from typing import Any, Optional, Union
from urllib.parse import quote, urlencode

from relaysearch.callbacks import Callback, CallbackManager
from relaysearch.config import ClientConfig
from relaysearch.executor import RequestExecutor
from relaysearch.hosts import HostHealthStore, InMemoryHostHealthStore
from relaysearch.options import RequestOptions
from relaysearch.transports import BaseTransport, TransportRegistry
from relaysearch.types import HttpMethod, OperationClass


def _quote(segment: str) -> str:
    return quote(str(segment), safe="")


class SearchClient:
    """Client for the hosted search service.

    Examples:
        ```python
        async with SearchClient(ClientConfig("APP_ID", "API_KEY")) as client:
            results = await client.search("products", "running shoes", hitsPerPage=5)
            for hit in results["hits"]:
                print(hit["objectID"])
        ```
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        health_store: Optional[HostHealthStore] = None,
        transport: Optional[BaseTransport] = None,
        callbacks: Optional[list[Callback]] = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Client configuration; read from the environment if omitted
            health_store: Host health store; in-memory if omitted
            transport: Transport binding; built from ``config.transport`` if omitted
            callbacks: Attempt-level observability callbacks
        """
        self.config = config or ClientConfig.from_env()
        self.health_store = health_store or InMemoryHostHealthStore(
            self.config.read_hosts or [],
            self.config.write_hosts or [],
            retry_delay=self.config.host_retry_delay,
        )
        self.transport = transport or TransportRegistry.create(self.config.transport)
        self.executor = RequestExecutor(
            self.transport,
            self.health_store,
            timeouts=self.config.timeout_for,
            default_headers=self.config.default_headers(),
            callbacks=CallbackManager(callbacks),
        )

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
        """Execute a raw request with host failover.

        See ``RequestExecutor.execute_request``.
        """
        return await self.executor.execute_request(
            operation,
            method,
            path,
            content,
            cancel_event=cancel_event,
            request_options=request_options,
        )

    async def search(
        self,
        index_name: str,
        query: str = "",
        *,
        cancel_event: Optional[asyncio.Event] = None,
        request_options: Optional[RequestOptions] = None,
        **params: Any,
    ) -> dict[str, Any]:
        """Search an index.

        Args:
            index_name: Index to search
            query: Full-text query
            cancel_event: Set to abandon the call
            request_options: Extra query parameters and headers
            **params: Additional search parameters

        Returns:
            Search response
        """
        body = {"params": urlencode({"query": query, **params})}
        return await self.execute_request(
            OperationClass.SEARCH,
            HttpMethod.POST,
            f"/1/indexes/{_quote(index_name)}/query",
            body,
            cancel_event=cancel_event,
            request_options=request_options,
        )

    async def get_object(
        self,
        index_name: str,
        object_id: str,
        *,
        attributes: Optional[list[str]] = None,
        cancel_event: Optional[asyncio.Event] = None,
        request_options: Optional[RequestOptions] = None,
    ) -> dict[str, Any]:
        """Fetch a single object by id."""
        path = f"/1/indexes/{_quote(index_name)}/{_quote(object_id)}"
        if attributes:
            path += "?" + urlencode({"attributesToRetrieve": ",".join(attributes)})
        return await self.execute_request(
            OperationClass.READ,
            HttpMethod.GET,
            path,
            cancel_event=cancel_event,
            request_options=request_options,
        )

    async def add_object(
        self,
        index_name: str,
        body: dict[str, Any],
        *,
        cancel_event: Optional[asyncio.Event] = None,
        request_options: Optional[RequestOptions] = None,
    ) -> dict[str, Any]:
        """Add an object, letting the service assign its id."""
        return await self.execute_request(
            OperationClass.WRITE,
            HttpMethod.POST,
            f"/1/indexes/{_quote(index_name)}",
            body,
            cancel_event=cancel_event,
            request_options=request_options,
        )

    async def save_object(
        self,
        index_name: str,
        object_id: str,
        body: dict[str, Any],
        *,
        cancel_event: Optional[asyncio.Event] = None,
        request_options: Optional[RequestOptions] = None,
    ) -> dict[str, Any]:
        """Create or replace an object with a known id."""
        return await self.execute_request(
            OperationClass.WRITE,
            HttpMethod.PUT,
            f"/1/indexes/{_quote(index_name)}/{_quote(object_id)}",
            body,
            cancel_event=cancel_event,
            request_options=request_options,
        )

    async def delete_object(
        self,
        index_name: str,
        object_id: str,
        *,
        cancel_event: Optional[asyncio.Event] = None,
        request_options: Optional[RequestOptions] = None,
    ) -> dict[str, Any]:
        """Delete an object by id."""
        return await self.execute_request(
            OperationClass.WRITE,
            HttpMethod.DELETE,
            f"/1/indexes/{_quote(index_name)}/{_quote(object_id)}",
            cancel_event=cancel_event,
            request_options=request_options,
        )

    async def list_indexes(
        self,
        *,
        cancel_event: Optional[asyncio.Event] = None,
        request_options: Optional[RequestOptions] = None,
    ) -> dict[str, Any]:
        """List the application's indexes."""
        return await self.execute_request(
            OperationClass.READ,
            HttpMethod.GET,
            "/1/indexes",
            cancel_event=cancel_event,
            request_options=request_options,
        )

    def search_sync(self, index_name: str, query: str = "", **kwargs: Any) -> dict[str, Any]:
        """Synchronous version of search.

        Args:
            index_name: Index to search
            query: Full-text query
            **kwargs: Additional arguments passed to search()

        Returns:
            Search response
        """
        return asyncio.run(self.search(index_name, query, **kwargs))

    async def close(self) -> None:
        """Release transport resources."""
        await self.transport.close()

    async def __aenter__(self) -> "SearchClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
