"""
Transport factories: servers get a raw transport per accepted connection and
may wrap it (e.g. in a FramedTransport) before building a codec on top.
"""
from __future__ import annotations

from rpcmux.core.protocol import Transport
from rpcmux.transport.buffered import BufferedTransport
from rpcmux.transport.framed import DEFAULT_MAX_FRAME_SIZE, FramedTransport


class TransportFactory:
    """Returns the transport unchanged."""

    def get_transport(self, transport: Transport) -> Transport:
        return transport


class BufferedTransportFactory(TransportFactory):
    def get_transport(self, transport: Transport) -> Transport:
        return BufferedTransport(transport)


class FramedTransportFactory(TransportFactory):
    def __init__(self, max_frame_size: int = DEFAULT_MAX_FRAME_SIZE) -> None:
        self.max_frame_size = max_frame_size

    def get_transport(self, transport: Transport) -> Transport:
        return FramedTransport(transport, self.max_frame_size)
