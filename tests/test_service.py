"""Tests for ServiceProcessor / ServiceClient, alone and behind MultiplexedProcessor."""
from __future__ import annotations

import pytest

from rpcmux.codec import BinaryCodec
from rpcmux.core.errors import ApplicationError, ApplicationErrorType, ProtocolError, RpcError, UnknownServiceError
from rpcmux.core.message import MessageType, TType
from rpcmux.mux import MultiplexedCodec, MultiplexedProcessor
from rpcmux.service import ServiceClient, ServiceProcessor
from rpcmux.transport import BufferedTransport, MemoryBuffer

from tests.conftest import InProcessTransport


def _calculator(log: list | None = None) -> ServiceProcessor:
    def fail(args):
        raise RpcError("DB", "backend unavailable")

    return (
        ServiceProcessor("Calculator")
        .method("add", lambda args: args[1] + args[2], result_type=TType.I32)
        .method("fail", fail, result_type=TType.I32)
        .method("nothing", lambda args: None)
        .method("log", lambda args: (log if log is not None else []).append(args[1]), oneway=True)
    )


class TestServiceProcessor:
    """Tests for a single, non-multiplexed service."""

    def test_call_and_reply(self) -> None:
        transport = InProcessTransport(_calculator())
        client = ServiceClient(BinaryCodec(transport))
        assert client.call("add", [(1, TType.I32, 2), (2, TType.I32, 3)], TType.I32) == 5
        assert client.call("add", [(1, TType.I32, -1), (2, TType.I32, 1)], TType.I32) == 0
        assert transport.results == [True, True]

    def test_void_method(self) -> None:
        client = ServiceClient(BinaryCodec(InProcessTransport(_calculator())))
        assert client.call("nothing") is None

    def test_oneway_writes_no_reply(self) -> None:
        log: list = []
        transport = InProcessTransport(_calculator(log))
        ServiceClient(BinaryCodec(transport)).send_oneway("log", [(1, TType.STRING, "hello")])
        assert log == ["hello"]
        assert transport.inbound.remaining() == 0

    def test_unknown_method(self) -> None:
        transport = InProcessTransport(_calculator())
        client = ServiceClient(BinaryCodec(transport))
        with pytest.raises(ApplicationError) as exc_info:
            client.call("multiply", [(1, TType.I32, 2)], TType.I32)
        assert exc_info.value.type == ApplicationErrorType.UNKNOWN_METHOD
        assert transport.results == [False]
        # the connection is still usable
        assert client.call("add", [(1, TType.I32, 1), (2, TType.I32, 1)], TType.I32) == 2

    def test_rpc_error_becomes_internal_error(self) -> None:
        client = ServiceClient(BinaryCodec(InProcessTransport(_calculator())))
        with pytest.raises(ApplicationError) as exc_info:
            client.call("fail", result_type=TType.I32)
        assert exc_info.value.type == ApplicationErrorType.INTERNAL_ERROR
        assert exc_info.value.message == "backend unavailable"

    def test_other_exceptions_propagate(self) -> None:
        processor = ServiceProcessor().method("boom", lambda args: 1 / 0, result_type=TType.I32)
        client = ServiceClient(BinaryCodec(InProcessTransport(processor)))
        with pytest.raises(ZeroDivisionError):
            client.call("boom", result_type=TType.I32)

    def test_missing_result(self) -> None:
        processor = ServiceProcessor().method("get", lambda args: None, result_type=TType.I32)
        client = ServiceClient(BinaryCodec(InProcessTransport(processor)))
        with pytest.raises(ApplicationError) as exc_info:
            client.call("get", result_type=TType.I32)
        assert exc_info.value.type == ApplicationErrorType.MISSING_RESULT

    def test_bad_sequence_id(self) -> None:
        reply = MemoryBuffer()
        codec = BinaryCodec(reply)
        codec.write_message_begin("add", MessageType.REPLY, 42)
        codec.write_field_stop()
        client = ServiceClient(BinaryCodec(_Replay(reply)))
        with pytest.raises(ApplicationError) as exc_info:
            client.call("add", result_type=TType.I32)
        assert exc_info.value.type == ApplicationErrorType.BAD_SEQUENCE_ID

    def test_wrong_method_name(self) -> None:
        reply = MemoryBuffer()
        codec = BinaryCodec(reply)
        codec.write_message_begin("sub", MessageType.REPLY, 1)
        codec.write_field_stop()
        client = ServiceClient(BinaryCodec(_Replay(reply)))
        with pytest.raises(ApplicationError) as exc_info:
            client.call("add", result_type=TType.I32)
        assert exc_info.value.type == ApplicationErrorType.WRONG_METHOD_NAME

    def test_exception_reply_with_bad_sequence_id(self) -> None:
        """An EXCEPTION reply for another call is rejected before its payload is decoded."""
        reply = MemoryBuffer()
        codec = BinaryCodec(reply)
        codec.write_message_begin("add", MessageType.EXCEPTION, 42)
        ApplicationError(ApplicationErrorType.INTERNAL_ERROR, "stale").write(codec)
        client = ServiceClient(BinaryCodec(_Replay(reply)))
        with pytest.raises(ApplicationError) as exc_info:
            client.call("add", result_type=TType.I32)
        assert exc_info.value.type == ApplicationErrorType.BAD_SEQUENCE_ID

    def test_exception_reply_with_wrong_method_name(self) -> None:
        reply = MemoryBuffer()
        codec = BinaryCodec(reply)
        codec.write_message_begin("sub", MessageType.EXCEPTION, 1)
        ApplicationError(ApplicationErrorType.INTERNAL_ERROR, "stale").write(codec)
        client = ServiceClient(BinaryCodec(_Replay(reply)))
        with pytest.raises(ApplicationError) as exc_info:
            client.call("add", result_type=TType.I32)
        assert exc_info.value.type == ApplicationErrorType.WRONG_METHOD_NAME

    def test_unencodable_argument_sends_nothing(self) -> None:
        transport = InProcessTransport(_calculator())
        client = ServiceClient(BinaryCodec(BufferedTransport(transport)))
        with pytest.raises(ProtocolError) as exc_info:
            client.call("add", [(1, TType.I32, 2 ** 31), (2, TType.I32, 1)], TType.I32)
        assert exc_info.value.code == ProtocolError.INVALID_DATA
        assert transport.outbound.getvalue() == b""
        assert client.call("add", [(1, TType.I32, 1), (2, TType.I32, 2)], TType.I32) == 3
        assert transport.results == [True]


class _Replay(MemoryBuffer):
    """Swallows writes; reads come from a canned reply."""

    def __init__(self, reply: MemoryBuffer) -> None:
        super().__init__(reply.getvalue())

    def write(self, data: bytes) -> None:
        pass


class TestMultiplexedServices:
    """Several service clients over one connection, served by one MultiplexedProcessor."""

    def _processor(self) -> MultiplexedProcessor:
        weather = ServiceProcessor("WeatherReport").method("getTemperature", lambda args: 21.5, result_type=TType.DOUBLE)
        legacy = ServiceProcessor("Legacy").method("ping", lambda args: "legacy pong", result_type=TType.STRING)
        return (
            MultiplexedProcessor()
            .register_processor("Calculator", _calculator())
            .register_processor("WeatherReport", weather)
            .register_default(legacy)
        )

    def test_shared_connection(self) -> None:
        transport = InProcessTransport(self._processor())
        codec = BinaryCodec(transport)
        calculator = ServiceClient(MultiplexedCodec(codec, "Calculator"))
        weather = ServiceClient(MultiplexedCodec(codec, "WeatherReport"))
        legacy = ServiceClient(codec)

        assert calculator.call("add", [(1, TType.I32, 2), (2, TType.I32, 2)], TType.I32) == 4
        assert weather.call("getTemperature", result_type=TType.DOUBLE) == 21.5
        assert legacy.call("ping", result_type=TType.STRING) == "legacy pong"

    def test_unknown_method_reply_is_not_prefixed(self) -> None:
        transport = InProcessTransport(self._processor())
        client = ServiceClient(MultiplexedCodec(BinaryCodec(transport), "WeatherReport"))
        with pytest.raises(ApplicationError) as exc_info:
            client.call("getHumidity", result_type=TType.DOUBLE)
        assert exc_info.value.type == ApplicationErrorType.UNKNOWN_METHOD

    def test_unknown_service_raises_on_server(self) -> None:
        processor = MultiplexedProcessor().register_processor("Calculator", _calculator())
        transport = InProcessTransport(processor)
        client = ServiceClient(MultiplexedCodec(BinaryCodec(transport), "Unknown"))
        with pytest.raises(UnknownServiceError):
            client.call("ping", result_type=TType.STRING)
