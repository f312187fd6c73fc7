"""Errors: transport, codec, dispatch and application level."""
from __future__ import annotations

from enum import IntEnum

from rpcmux.core.message import TType


class RpcError(Exception):
    """Base error: code + human readable message."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class TransportError(RpcError):
    """I/O failure on the byte transport."""

    UNKNOWN = "UNKNOWN"
    NOT_OPEN = "NOT_OPEN"
    ALREADY_OPEN = "ALREADY_OPEN"
    TIMED_OUT = "TIMED_OUT"
    END_OF_FILE = "END_OF_FILE"
    INTERRUPTED = "INTERRUPTED"


class ProtocolError(RpcError):
    """Malformed header or payload at the codec level."""

    UNKNOWN = "UNKNOWN"
    INVALID_DATA = "INVALID_DATA"
    NEGATIVE_SIZE = "NEGATIVE_SIZE"
    SIZE_LIMIT = "SIZE_LIMIT"
    BAD_VERSION = "BAD_VERSION"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"
    DEPTH_LIMIT = "DEPTH_LIMIT"


class UnknownServiceError(RpcError):
    """
    Inbound call names a service with no registered handler and no default.
    Nothing past the message header has been read from the transport.
    """

    CODE = "UNKNOWN_SERVICE"

    def __init__(self, service_name: str, method_name: str = "") -> None:
        self.service_name = service_name
        self.method_name = method_name
        super().__init__(self.CODE, f"unknown service {service_name!r}")


class RegistryFrozenError(RpcError):
    """Registration attempted after the processor was frozen for serving."""

    def __init__(self, service_name: str | None = None) -> None:
        target = "default handler" if service_name is None else f"service {service_name!r}"
        super().__init__("REGISTRY_FROZEN", f"cannot register {target}: processor is frozen")


class ConfigError(RpcError):
    """Environment setting that cannot be converted to its field type."""

    def __init__(self, variable: str, value: str, expected: str) -> None:
        self.variable = variable
        super().__init__("INVALID_CONFIG", f"{variable}={value!r} is not a valid {expected}")


class ApplicationErrorType(IntEnum):
    UNKNOWN = 0
    UNKNOWN_METHOD = 1
    INVALID_MESSAGE_TYPE = 2
    WRONG_METHOD_NAME = 3
    BAD_SEQUENCE_ID = 4
    MISSING_RESULT = 5
    INTERNAL_ERROR = 6
    PROTOCOL_ERROR = 7


class ApplicationError(RpcError):
    """
    Error sent back to the caller in an EXCEPTION message.
    Wire shape: struct {1: string message, 2: i32 type}.
    """

    def __init__(self, type: int = ApplicationErrorType.UNKNOWN, message: str = "") -> None:
        try:
            self.type = ApplicationErrorType(type)
        except ValueError:
            self.type = ApplicationErrorType.UNKNOWN
        super().__init__(self.type.name, message or self.type.name.lower().replace("_", " "))

    def write(self, codec) -> None:
        codec.write_struct_begin("ApplicationException")
        codec.write_field_begin("message", TType.STRING, 1)
        codec.write_string(self.message)
        codec.write_field_end()
        codec.write_field_begin("type", TType.I32, 2)
        codec.write_i32(int(self.type))
        codec.write_field_end()
        codec.write_field_stop()
        codec.write_struct_end()

    @classmethod
    def read(cls, codec) -> ApplicationError:
        message = ""
        type_ = ApplicationErrorType.UNKNOWN
        codec.read_struct_begin()
        while True:
            _, ftype, fid = codec.read_field_begin()
            if ftype == TType.STOP:
                break
            if fid == 1 and ftype == TType.STRING:
                message = codec.read_string()
            elif fid == 2 and ftype == TType.I32:
                type_ = codec.read_i32()
            else:
                codec.skip(ftype)
            codec.read_field_end()
        codec.read_struct_end()
        return cls(type_, message)
