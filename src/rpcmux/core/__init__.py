from rpcmux.core.config import Config, ServerConfig, load_config_from_env
from rpcmux.core.errors import (
    ApplicationError,
    ApplicationErrorType,
    ConfigError,
    ProtocolError,
    RegistryFrozenError,
    RpcError,
    TransportError,
    UnknownServiceError,
)
from rpcmux.core.message import MessageHeader, MessageType, TType
from rpcmux.core.protocol import CallHandler, Codec, Transport

__all__ = [
    "ApplicationError",
    "ApplicationErrorType",
    "CallHandler",
    "Codec",
    "Config",
    "ConfigError",
    "MessageHeader",
    "MessageType",
    "ProtocolError",
    "RegistryFrozenError",
    "RpcError",
    "ServerConfig",
    "Transport",
    "TransportError",
    "TType",
    "UnknownServiceError",
    "load_config_from_env",
]
