"""Pass-through codec: holds a wrapped codec and delegates every operation to it."""
from __future__ import annotations

from rpcmux.core.protocol import Codec, Transport


class CodecDecorator:
    """
    Explicit delegation of the whole Codec contract.
    Subclasses override only what they change (e.g. write_message_begin).
    """

    def __init__(self, codec: Codec) -> None:
        self._codec = codec

    @property
    def wrapped(self) -> Codec:
        return self._codec

    @property
    def transport(self) -> Transport:
        return self._codec.transport

    def write_message_begin(self, name: str, type: int, seqid: int) -> None:
        self._codec.write_message_begin(name, type, seqid)

    def write_message_end(self) -> None:
        self._codec.write_message_end()

    def write_struct_begin(self, name: str) -> None:
        self._codec.write_struct_begin(name)

    def write_struct_end(self) -> None:
        self._codec.write_struct_end()

    def write_field_begin(self, name: str, ttype: int, fid: int) -> None:
        self._codec.write_field_begin(name, ttype, fid)

    def write_field_end(self) -> None:
        self._codec.write_field_end()

    def write_field_stop(self) -> None:
        self._codec.write_field_stop()

    def write_map_begin(self, ktype: int, vtype: int, size: int) -> None:
        self._codec.write_map_begin(ktype, vtype, size)

    def write_map_end(self) -> None:
        self._codec.write_map_end()

    def write_list_begin(self, etype: int, size: int) -> None:
        self._codec.write_list_begin(etype, size)

    def write_list_end(self) -> None:
        self._codec.write_list_end()

    def write_set_begin(self, etype: int, size: int) -> None:
        self._codec.write_set_begin(etype, size)

    def write_set_end(self) -> None:
        self._codec.write_set_end()

    def write_bool(self, value: bool) -> None:
        self._codec.write_bool(value)

    def write_byte(self, value: int) -> None:
        self._codec.write_byte(value)

    def write_i16(self, value: int) -> None:
        self._codec.write_i16(value)

    def write_i32(self, value: int) -> None:
        self._codec.write_i32(value)

    def write_i64(self, value: int) -> None:
        self._codec.write_i64(value)

    def write_double(self, value: float) -> None:
        self._codec.write_double(value)

    def write_string(self, value: str) -> None:
        self._codec.write_string(value)

    def write_binary(self, value: bytes) -> None:
        self._codec.write_binary(value)

    def read_message_begin(self) -> tuple[str, int, int]:
        return self._codec.read_message_begin()

    def read_message_end(self) -> None:
        self._codec.read_message_end()

    def read_struct_begin(self) -> str:
        return self._codec.read_struct_begin()

    def read_struct_end(self) -> None:
        self._codec.read_struct_end()

    def read_field_begin(self) -> tuple[str, int, int]:
        return self._codec.read_field_begin()

    def read_field_end(self) -> None:
        self._codec.read_field_end()

    def read_map_begin(self) -> tuple[int, int, int]:
        return self._codec.read_map_begin()

    def read_map_end(self) -> None:
        self._codec.read_map_end()

    def read_list_begin(self) -> tuple[int, int]:
        return self._codec.read_list_begin()

    def read_list_end(self) -> None:
        self._codec.read_list_end()

    def read_set_begin(self) -> tuple[int, int]:
        return self._codec.read_set_begin()

    def read_set_end(self) -> None:
        self._codec.read_set_end()

    def read_bool(self) -> bool:
        return self._codec.read_bool()

    def read_byte(self) -> int:
        return self._codec.read_byte()

    def read_i16(self) -> int:
        return self._codec.read_i16()

    def read_i32(self) -> int:
        return self._codec.read_i32()

    def read_i64(self) -> int:
        return self._codec.read_i64()

    def read_double(self) -> float:
        return self._codec.read_double()

    def read_string(self) -> str:
        return self._codec.read_string()

    def read_binary(self) -> bytes:
        return self._codec.read_binary()

    def skip(self, ttype: int) -> None:
        self._codec.skip(ttype)

    def flush(self) -> None:
        self._codec.flush()
