"""Shared helpers: in-memory duplex transport, recording handler, running servers."""
from __future__ import annotations

import threading
from typing import Any, Callable, Iterator

import pytest

from rpcmux.codec import BinaryCodec
from rpcmux.core.message import MessageHeader, TType
from rpcmux.core.protocol import CallHandler
from rpcmux.server import SimpleServer
from rpcmux.service import read_struct, write_struct
from rpcmux.transport import MemoryBuffer, ServerSocket
from rpcmux.transport.base import TransportBase


class DuplexBuffer(TransportBase):
    """Reads from `inbound`, writes to `outbound`."""

    def __init__(self, inbound: MemoryBuffer | None = None, outbound: MemoryBuffer | None = None) -> None:
        self.inbound = inbound or MemoryBuffer()
        self.outbound = outbound or MemoryBuffer()

    def is_open(self) -> bool:
        return True

    def open(self) -> None:
        pass

    def close(self) -> None:
        pass

    def read(self, size: int) -> bytes:
        return self.inbound.read(size)

    def write(self, data: bytes) -> None:
        self.outbound.write(data)


class InProcessTransport(DuplexBuffer):
    """Client transport whose flush() runs the server-side handler on what was written."""

    def __init__(self, handler: CallHandler) -> None:
        super().__init__()
        self.handler = handler
        # server reads what the client wrote and writes what the client will read
        self.server_codec = BinaryCodec(DuplexBuffer(inbound=self.outbound, outbound=self.inbound))
        self.results: list[bool] = []

    def flush(self) -> None:
        self.results.append(self.handler.process(self.server_codec))


class RecordingHandler:
    """CallHandler that records the header it sees and optionally reads the args struct."""

    def __init__(self, result: bool = True, read_args: bool = True) -> None:
        self.result = result
        self.read_args = read_args
        self.headers: list[MessageHeader] = []
        self.args: list[dict[int, Any]] = []

    @property
    def called(self) -> bool:
        return bool(self.headers)

    @property
    def last_name(self) -> str:
        return self.headers[-1].name

    def process(self, codec) -> bool:
        self.headers.append(MessageHeader(*codec.read_message_begin()))
        if self.read_args:
            self.args.append(read_struct(codec))
            codec.read_message_end()
        return self.result


def write_message(codec, name: str, type: int, seqid: int = 1, fields=()) -> None:
    codec.write_message_begin(name, type, seqid)
    write_struct(codec, "args", fields)
    codec.write_message_end()
    codec.flush()


def encoded(name: str, type: int, seqid: int = 1, fields=((1, TType.I32, 7),)) -> MemoryBuffer:
    """Buffer holding one complete message written by a plain BinaryCodec."""
    buf = MemoryBuffer()
    write_message(BinaryCodec(buf), name, type, seqid, fields)
    return buf


@pytest.fixture
def serve() -> Iterator[Callable[..., SimpleServer]]:
    """Start SimpleServer instances on 127.0.0.1:<free port>; stopped at teardown."""
    running: list[tuple[SimpleServer, threading.Thread]] = []

    def _serve(processor: CallHandler, **kwargs: Any) -> SimpleServer:
        server = SimpleServer(processor, ServerSocket("127.0.0.1", 0), **kwargs)
        thread = threading.Thread(target=server.serve, daemon=True)
        thread.start()
        assert server.wait_until_listening(5)
        running.append((server, thread))
        return server

    yield _serve

    for server, thread in running:
        server.stop()
        thread.join(5)
