"""
Codec views used by multiplexing.

MultiplexedCodec (client side) prefixes call names with "<service>:".
StoredMessageCodec (server side) replays an already consumed header.

One connection, two services:

    transport = FramedTransport(SocketTransport("localhost", 9090))
    codec = BinaryCodec(transport)
    calculator = ServiceClient(MultiplexedCodec(codec, "Calculator"))
    weather = ServiceClient(MultiplexedCodec(codec, "WeatherReport"))
"""
from __future__ import annotations

from rpcmux.codec.decorator import CodecDecorator
from rpcmux.core.message import DISPATCHED_TYPES, MessageHeader
from rpcmux.core.protocol import Codec

SEPARATOR = ":"


class MultiplexedCodec(CodecDecorator):
    """
    Client-side decorator: CALL/ONEWAY names go out as "<service>:<method>".
    Every other operation is passed through unchanged. Not for servers.
    """

    def __init__(self, codec: Codec, service_name: str) -> None:
        super().__init__(codec)
        self._service_name = service_name

    @property
    def service_name(self) -> str:
        return self._service_name

    def write_message_begin(self, name: str, type: int, seqid: int) -> None:
        if type in DISPATCHED_TYPES:
            name = self._service_name + SEPARATOR + name
        self._codec.write_message_begin(name, type, seqid)


class StoredMessageCodec(CodecDecorator):
    """Returns a fixed header from read_message_begin; the wrapped codec is not read."""

    def __init__(self, codec: Codec, name: str, type: int, seqid: int) -> None:
        super().__init__(codec)
        self._header = MessageHeader(name, type, seqid)

    @property
    def header(self) -> MessageHeader:
        return self._header

    def read_message_begin(self) -> tuple[str, int, int]:
        return self._header.name, self._header.type, self._header.seqid
