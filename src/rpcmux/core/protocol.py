"""Contracts: codec (wire format), transport (bytes) and call handler (one service)."""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Transport(Protocol):
    """Byte stream: buffering, framing and socket I/O are the implementation's business."""

    def is_open(self) -> bool:
        ...

    def open(self) -> None:
        ...

    def close(self) -> None:
        ...

    def read(self, size: int) -> bytes:
        ...

    def read_all(self, size: int) -> bytes:
        ...

    def write(self, data: bytes) -> None:
        ...

    def flush(self) -> None:
        ...

    def discard(self) -> None:
        ...


@runtime_checkable
class Codec(Protocol):
    """
    Wire-format abstraction: message headers, structs and primitive values over a Transport.
    Decorators must implement every method listed here.
    """

    @property
    def transport(self) -> Transport:
        ...

    def write_message_begin(self, name: str, type: int, seqid: int) -> None: ...
    def write_message_end(self) -> None: ...
    def write_struct_begin(self, name: str) -> None: ...
    def write_struct_end(self) -> None: ...
    def write_field_begin(self, name: str, ttype: int, fid: int) -> None: ...
    def write_field_end(self) -> None: ...
    def write_field_stop(self) -> None: ...
    def write_map_begin(self, ktype: int, vtype: int, size: int) -> None: ...
    def write_map_end(self) -> None: ...
    def write_list_begin(self, etype: int, size: int) -> None: ...
    def write_list_end(self) -> None: ...
    def write_set_begin(self, etype: int, size: int) -> None: ...
    def write_set_end(self) -> None: ...
    def write_bool(self, value: bool) -> None: ...
    def write_byte(self, value: int) -> None: ...
    def write_i16(self, value: int) -> None: ...
    def write_i32(self, value: int) -> None: ...
    def write_i64(self, value: int) -> None: ...
    def write_double(self, value: float) -> None: ...
    def write_string(self, value: str) -> None: ...
    def write_binary(self, value: bytes) -> None: ...

    def read_message_begin(self) -> tuple[str, int, int]: ...
    def read_message_end(self) -> None: ...
    def read_struct_begin(self) -> str: ...
    def read_struct_end(self) -> None: ...
    def read_field_begin(self) -> tuple[str, int, int]: ...
    def read_field_end(self) -> None: ...
    def read_map_begin(self) -> tuple[int, int, int]: ...
    def read_map_end(self) -> None: ...
    def read_list_begin(self) -> tuple[int, int]: ...
    def read_list_end(self) -> None: ...
    def read_set_begin(self) -> tuple[int, int]: ...
    def read_set_end(self) -> None: ...
    def read_bool(self) -> bool: ...
    def read_byte(self) -> int: ...
    def read_i16(self) -> int: ...
    def read_i32(self) -> int: ...
    def read_i64(self) -> int: ...
    def read_double(self) -> float: ...
    def read_string(self) -> str: ...
    def read_binary(self) -> bytes: ...

    def skip(self, ttype: int) -> None: ...
    def flush(self) -> None: ...


@runtime_checkable
class CallHandler(Protocol):
    """
    Per-service handler: reads the call from the codec, runs application logic,
    writes the reply (if any) through the same codec.
    Returns True on success; raises on transport/codec failure.
    """

    def process(self, codec: Codec) -> bool:
        ...


@runtime_checkable
class CodecFactory(Protocol):
    def get_codec(self, transport: Transport) -> Codec:
        ...


@runtime_checkable
class TransportFactory(Protocol):
    def get_transport(self, transport: Transport) -> Transport:
        ...


@runtime_checkable
class ServerTransport(Protocol):
    """Listener handing out one Transport per accepted connection."""

    def listen(self) -> None:
        ...

    def accept(self) -> Transport:
        ...

    def close(self) -> None:
        ...

    def interrupt(self) -> None:
        ...

    @property
    def address(self) -> Any:
        ...
