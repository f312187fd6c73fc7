"""
rpcmux: several RPC services over one endpoint.
Clients prefix call names with the service ("Calculator:add"); the server's
MultiplexedProcessor routes each call to the handler registered for that service.
"""
from rpcmux.codec import BinaryCodec, BinaryCodecFactory
from rpcmux.core import (
    ApplicationError,
    MessageType,
    RpcError,
    TType,
    TransportError,
    UnknownServiceError,
    load_config_from_env,
)
from rpcmux.mux import SEPARATOR, MultiplexedCodec, MultiplexedProcessor, StoredMessageCodec
from rpcmux.server import SimpleServer
from rpcmux.service import ServiceClient, ServiceProcessor

__all__ = [
    "SEPARATOR",
    "ApplicationError",
    "BinaryCodec",
    "BinaryCodecFactory",
    "MessageType",
    "MultiplexedCodec",
    "MultiplexedProcessor",
    "RpcError",
    "ServiceClient",
    "ServiceProcessor",
    "SimpleServer",
    "StoredMessageCodec",
    "TType",
    "TransportError",
    "UnknownServiceError",
    "load_config_from_env",
]
