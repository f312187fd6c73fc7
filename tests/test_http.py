"""Tests for the HTTP client transport (httpx.MockTransport, no network)."""
from __future__ import annotations

import httpx
import pytest

from rpcmux.cli.demo import CalculatorClient, WeatherReportClient, demo_processor
from rpcmux.codec import BinaryCodec
from rpcmux.core.errors import ProtocolError, TransportError
from rpcmux.transport import HttpClientTransport, MemoryBuffer

from tests.conftest import DuplexBuffer


def _rpc_app(request: httpx.Request) -> httpx.Response:
    """Server side: run the multiplexed demo processor on the request body."""
    response_body = MemoryBuffer()
    codec = BinaryCodec(DuplexBuffer(inbound=MemoryBuffer(request.content), outbound=response_body))
    demo_processor(temperature=18.0).process(codec)
    return httpx.Response(200, content=response_body.getvalue())


class TestHttpClientTransport:
    def test_flush_posts_buffered_body(self) -> None:
        seen: list[httpx.Request] = []

        def echo(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=request.content[::-1])

        client = httpx.Client(transport=httpx.MockTransport(echo))
        transport = HttpClientTransport("http://rpc.test/rpc", headers={"X-Trace": "1"}, client=client)
        transport.write(b"abc")
        transport.write(b"def")
        transport.flush()

        assert len(seen) == 1
        assert seen[0].method == "POST"
        assert seen[0].headers["content-type"] == "application/x-thrift"
        assert seen[0].headers["x-trace"] == "1"
        assert transport.read_all(6) == b"fedcba"

    def test_http_error_status(self) -> None:
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(503)))
        transport = HttpClientTransport("http://rpc.test/rpc", client=client)
        transport.write(b"x")
        with pytest.raises(TransportError) as exc_info:
            transport.flush()
        assert "503" in exc_info.value.message

    def test_connect_error(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = httpx.Client(transport=httpx.MockTransport(refuse))
        transport = HttpClientTransport("http://rpc.test/rpc", client=client)
        with pytest.raises(TransportError) as exc_info:
            transport.flush()
        assert exc_info.value.code == TransportError.UNKNOWN

    def test_multiplexed_calls_over_http(self) -> None:
        client = httpx.Client(transport=httpx.MockTransport(_rpc_app))
        codec = BinaryCodec(HttpClientTransport("http://rpc.test/rpc", client=client))

        assert CalculatorClient(codec).add(40, 2) == 42
        assert WeatherReportClient(codec).get_temperature() == 18.0

    def test_injected_client_is_not_closed(self) -> None:
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
        transport = HttpClientTransport("http://rpc.test/rpc", client=client)
        assert transport.is_open()
        transport.close()
        assert not client.is_closed

    def test_unencodable_call_is_not_posted(self) -> None:
        bodies: list[bytes] = []

        def record(request: httpx.Request) -> httpx.Response:
            bodies.append(request.content)
            return _rpc_app(request)

        client = httpx.Client(transport=httpx.MockTransport(record))
        calculator = CalculatorClient(BinaryCodec(HttpClientTransport("http://rpc.test/rpc", client=client)))
        with pytest.raises(ProtocolError):
            calculator.add(2 ** 31, 0)
        assert calculator.add(1, 1) == 2
        assert len(bodies) == 1
