"""Tests for the failover executor."""

import asyncio

import pytest

from relaysearch.callbacks import AttemptLog, AttemptStatus, Callback, CallbackManager
from relaysearch.exceptions import (
    FatalRequestError,
    HostsUnreachableError,
    RequestCancelledError,
)
from relaysearch.executor import RequestExecutor
from relaysearch.options import RequestOptions
from relaysearch.types import (
    HostPool,
    OperationClass,
    RequestDescriptor,
    TransportOutcome,
    TransportResponse,
)

from tests.helpers import (
    RecordingHealthStore,
    ScriptedTransport,
    TIMEOUTS,
    connection_error,
    error_response,
    json_response,
    timed_out,
)


def make_executor(outcomes, read_hosts=None, write_hosts=None, callbacks=None):
    transport = ScriptedTransport(outcomes)
    store = RecordingHealthStore(read_hosts=read_hosts, write_hosts=write_hosts)
    executor = RequestExecutor(
        transport,
        store,
        timeouts=TIMEOUTS,
        default_headers={"X-Relay-Application-Id": "app"},
        callbacks=callbacks,
    )
    return executor, transport, store


class RecordingCallback(Callback):
    def __init__(self):
        self.started: list[str] = []
        self.ended: list[tuple[str, AttemptStatus]] = []

    async def on_attempt_start(self, log: AttemptLog) -> None:
        self.started.append(log.host)

    async def on_attempt_end(self, log: AttemptLog) -> None:
        self.ended.append((log.host, log.status))


class TestSuccess:
    """First success wins."""

    async def test_first_host_success_skips_others(self):
        """Test a 2xx on the first host returns without contacting the rest."""
        executor, transport, store = make_executor(
            {"h1": json_response(200, {"hits": [1]}), "h2": json_response(200, {"hits": [2]})},
            read_hosts=["h1", "h2", "h3"],
        )

        result = await executor.execute_request(OperationClass.SEARCH, "POST", "/1/indexes/a/query", {"q": 1})

        assert result == {"hits": [1]}
        assert transport.hosts == ["h1"]
        assert store.updates == [(HostPool.READ, "h1", True)]

    async def test_network_error_then_success(self):
        """Test failing over from a network error to a healthy host."""
        executor, transport, store = make_executor(
            {"h1": connection_error(), "h2": json_response(200, {"hits": []})},
            read_hosts=["h1", "h2"],
        )

        result = await executor.execute_request(OperationClass.READ, "GET", "/1/indexes")

        assert result == {"hits": []}
        assert transport.hosts == ["h1", "h2"]
        assert store.updates == [(HostPool.READ, "h1", False), (HostPool.READ, "h2", True)]

    async def test_server_error_then_success(self):
        """Test failing over from a 5xx."""
        executor, transport, store = make_executor(
            {"h1": error_response(503, "Unavailable"), "h2": json_response(201, {"taskID": 7})},
            write_hosts=["h1", "h2"],
        )

        result = await executor.execute_request(OperationClass.WRITE, "POST", "/1/indexes/a", {"x": 1})

        assert result == {"taskID": 7}
        assert store.updates == [(HostPool.WRITE, "h1", False), (HostPool.WRITE, "h2", True)]


class TestFatal:
    """4xx responses abort the call."""

    async def test_client_error_on_first_host(self):
        """Test a 403 fails the call with the service's message."""
        executor, transport, store = make_executor(
            {
                "h1": json_response(403, {"message": "Invalid API key", "status": 403}),
                "h2": json_response(200, {}),
            },
            read_hosts=["h1", "h2"],
        )

        with pytest.raises(FatalRequestError) as exc_info:
            await executor.execute_request(OperationClass.SEARCH, "GET", "/1/indexes")

        assert exc_info.value.message == "Invalid API key"
        assert exc_info.value.status == 403
        assert transport.hosts == ["h1"]
        assert store.updates == [(HostPool.READ, "h1", False)]

    async def test_client_error_after_retryable(self):
        """Test later hosts are never tried once a 4xx is seen."""
        executor, transport, store = make_executor(
            {
                "h1": error_response(500, "boom"),
                "h2": error_response(404, "Index does not exist"),
                "h3": json_response(200, {}),
            },
            read_hosts=["h1", "h2", "h3"],
        )

        with pytest.raises(FatalRequestError) as exc_info:
            await executor.execute_request(OperationClass.READ, "GET", "/1/indexes/missing")

        # Only the fatal message is reported, not the earlier retryable one
        assert exc_info.value.message == "Index does not exist"
        assert transport.hosts == ["h1", "h2"]
        assert store.updates == [(HostPool.READ, "h1", False), (HostPool.READ, "h2", False)]


class TestExhausted:
    """Every host fails with a retryable error."""

    async def test_all_server_errors(self):
        """Test the aggregate lists every host in attempt order."""
        executor, transport, store = make_executor(
            {"h1": error_response(500, "boom"), "h2": error_response(503, "down")},
            read_hosts=["h1", "h2"],
        )

        with pytest.raises(HostsUnreachableError) as exc_info:
            await executor.execute_request(OperationClass.SEARCH, "GET", "/1/indexes")

        assert exc_info.value.errors == [("h1(500)", "boom"), ("h2(503)", "down")]
        assert exc_info.value.message == "Hosts unreachable: h1(500)=boom, h2(503)=down"
        assert store.updates == [(HostPool.READ, "h1", False), (HostPool.READ, "h2", False)]

    async def test_timeout_recorded_and_next_host_tried(self):
        """Test a timeout marks the host down and moves on."""
        executor, transport, store = make_executor(
            {"h1": timed_out(), "h2": connection_error("Name or service not known")},
            read_hosts=["h1", "h2"],
        )

        with pytest.raises(HostsUnreachableError) as exc_info:
            await executor.execute_request(OperationClass.READ, "GET", "/1/indexes")

        assert transport.hosts == ["h1", "h2"]
        assert exc_info.value.errors == [
            ("h1", "Timeout expired"),
            ("h2", "Name or service not known"),
        ]
        assert store.updates[0] == (HostPool.READ, "h1", False)

    async def test_unparseable_error_body(self):
        """Test a non-JSON error body falls back to the reason phrase."""
        executor, _, _ = make_executor(
            {"h1": TransportResponse(502, "<html>bad gateway</html>", "Bad Gateway")},
            read_hosts=["h1"],
        )

        with pytest.raises(HostsUnreachableError) as exc_info:
            await executor.execute_request(OperationClass.READ, "GET", "/1/indexes")

        assert exc_info.value.errors == [("h1(0)", "Bad Gateway")]

    async def test_empty_candidate_list(self):
        """Test no candidates fails immediately with no diagnostics."""
        executor, transport, store = make_executor({}, read_hosts=[])

        with pytest.raises(HostsUnreachableError) as exc_info:
            await executor.execute_request(OperationClass.SEARCH, "GET", "/1/indexes")

        assert exc_info.value.errors == []
        assert exc_info.value.message == "Hosts unreachable: "
        assert transport.calls == []
        assert store.updates == []

    async def test_repeated_host_keeps_both_diagnostics(self):
        """Test a host listed twice contributes two entries."""
        executor, transport, _ = make_executor(
            {"h1": error_response(500, "boom")},
            read_hosts=["h1", "h1"],
        )

        with pytest.raises(HostsUnreachableError) as exc_info:
            await executor.execute_request(OperationClass.READ, "GET", "/1/indexes")

        assert transport.hosts == ["h1", "h1"]
        assert exc_info.value.errors == [("h1(500)", "boom"), ("h1(500)", "boom")]


class SlowTransport(ScriptedTransport):
    """Transport whose attempts never finish on their own."""

    def __init__(self):
        super().__init__({})
        self.cancelled = False

    async def _perform(self, descriptor: RequestDescriptor, url: str, timeout: float) -> TransportOutcome:
        self.calls.append({"host": url, "url": url, "timeout": timeout, "descriptor": descriptor})
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return json_response(200, {})


class TestCancellation:
    """Cancellation is call-wide and terminal."""

    async def test_cancelled_before_start(self):
        """Test a pre-set event cancels with no attempts and no health updates."""
        executor, transport, store = make_executor(
            {"h1": json_response(200, {})},
            read_hosts=["h1", "h2"],
        )
        event = asyncio.Event()
        event.set()

        with pytest.raises(RequestCancelledError):
            await executor.execute_request(OperationClass.SEARCH, "GET", "/1/indexes", cancel_event=event)

        assert transport.calls == []
        assert store.updates == []

    async def test_cancelled_before_start_with_no_candidates(self):
        """Test a pre-set event wins over an empty candidate list."""
        executor, transport, store = make_executor({}, read_hosts=[])
        event = asyncio.Event()
        event.set()

        with pytest.raises(RequestCancelledError):
            await executor.execute_request(OperationClass.SEARCH, "GET", "/1/indexes", cancel_event=event)

        assert transport.calls == []
        assert store.updates == []

    async def test_cancelled_in_flight(self):
        """Test setting the event during an attempt aborts the whole call."""
        transport = SlowTransport()
        store = RecordingHealthStore(read_hosts=["h1", "h2"])
        executor = RequestExecutor(transport, store, timeouts=TIMEOUTS)
        event = asyncio.Event()

        async def cancel_soon():
            await asyncio.sleep(0.01)
            event.set()

        canceller = asyncio.create_task(cancel_soon())
        with pytest.raises(RequestCancelledError):
            await executor.execute_request(OperationClass.READ, "GET", "/1/indexes", cancel_event=event)
        await canceller

        assert len(transport.calls) == 1
        assert transport.cancelled is True
        assert store.updates == []

    async def test_cancel_after_retryable_keeps_earlier_update(self):
        """Test updates already pushed stay, and none is added for the cancel."""
        event = asyncio.Event()

        class CancelAfterFirst(ScriptedTransport):
            async def _perform(self, descriptor, url, timeout):
                outcome = await super()._perform(descriptor, url, timeout)
                event.set()
                return outcome

        transport = CancelAfterFirst({"h1": error_response(500, "boom"), "h2": json_response(200, {})})
        store = RecordingHealthStore(read_hosts=["h1", "h2"])
        executor = RequestExecutor(transport, store, timeouts=TIMEOUTS)

        with pytest.raises(RequestCancelledError):
            await executor.execute_request(OperationClass.READ, "GET", "/1/indexes", cancel_event=event)

        assert transport.hosts == ["h1"]
        assert store.updates == [(HostPool.READ, "h1", False)]


class TestRequestShape:
    """Per-call request construction."""

    async def test_timeouts_per_operation_class(self):
        """Test search and write use their own timeouts."""
        outcomes = {"r1": json_response(200, {}), "w1": json_response(200, {})}
        transport = ScriptedTransport(outcomes)
        store = RecordingHealthStore(read_hosts=["r1"], write_hosts=["w1"])
        executor = RequestExecutor(
            transport,
            store,
            timeouts={OperationClass.SEARCH: 2.0, OperationClass.READ: 9.0, OperationClass.WRITE: 9.0},
        )

        await executor.execute_request(OperationClass.SEARCH, "GET", "/s")
        await executor.execute_request(OperationClass.WRITE, "DELETE", "/w")

        assert [(c["host"], c["timeout"]) for c in transport.calls] == [("r1", 2.0), ("w1", 9.0)]
        assert store.updates == [(HostPool.READ, "r1", True), (HostPool.WRITE, "w1", True)]

    async def test_descriptor_is_fixed_across_hosts(self):
        """Test only the host changes between attempts."""
        executor, transport, _ = make_executor(
            {"h1": connection_error(), "h2": json_response(200, {})},
            read_hosts=["h1", "h2"],
        )
        options = RequestOptions().add_extra_query_param("tag", "a b")

        await executor.execute_request(
            OperationClass.SEARCH,
            "POST",
            "/1/indexes/a/query?x=1",
            {"params": "query=shoes"},
            request_options=options,
        )

        urls = [c["url"] for c in transport.calls]
        assert urls == [
            "https://h1/1/indexes/a/query?x=1&tag=a%20b",
            "https://h2/1/indexes/a/query?x=1&tag=a%20b",
        ]
        first, second = (c["descriptor"] for c in transport.calls)
        assert first is second
        assert first.body == '{"params": "query=shoes"}'
        assert first.headers["X-Relay-Application-Id"] == "app"

    async def test_accepts_string_operation_and_method(self):
        """Test plain strings are accepted for operation and method."""
        executor, transport, _ = make_executor({"h1": json_response(200, {"ok": True})}, read_hosts=["h1"])

        result = await executor.execute_request("read", "get", "/1/indexes")

        assert result == {"ok": True}

    async def test_callbacks_see_every_attempt(self):
        """Test callbacks are notified with the final status of each attempt."""
        callback = RecordingCallback()
        executor, _, _ = make_executor(
            {"h1": timed_out(), "h2": json_response(200, {})},
            read_hosts=["h1", "h2"],
            callbacks=CallbackManager([callback]),
        )

        await executor.execute_request(OperationClass.SEARCH, "GET", "/1/indexes")

        assert callback.started == ["h1", "h2"]
        assert callback.ended == [("h1", AttemptStatus.RETRYABLE), ("h2", AttemptStatus.SUCCESS)]
