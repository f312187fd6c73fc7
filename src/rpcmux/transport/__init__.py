from rpcmux.transport.base import TransportBase
from rpcmux.transport.buffered import BufferedTransport
from rpcmux.transport.factory import BufferedTransportFactory, FramedTransportFactory, TransportFactory
from rpcmux.transport.framed import FramedTransport
from rpcmux.transport.http import HttpClientTransport
from rpcmux.transport.memory import MemoryBuffer
from rpcmux.transport.tcp import ServerSocket, SocketTransport

__all__ = [
    "BufferedTransport",
    "BufferedTransportFactory",
    "FramedTransport",
    "FramedTransportFactory",
    "HttpClientTransport",
    "MemoryBuffer",
    "ServerSocket",
    "SocketTransport",
    "TransportBase",
    "TransportFactory",
]
