"""
Binary codec: big-endian fixed-width integers, length-prefixed strings.

Message header (strict): [i32 0x80010000 | type][string name][i32 seqid]
Message header (old):    [string name][byte type][i32 seqid]
Field: [byte ttype][i16 id] ... STOP byte ends a struct.
Map:   [byte ktype][byte vtype][i32 size]; list/set: [byte etype][i32 size].
"""
from __future__ import annotations

import struct

from rpcmux.core.errors import ProtocolError
from rpcmux.core.message import TType
from rpcmux.core.protocol import Transport

VERSION_MASK = 0xFFFF0000
VERSION_1 = 0x80010000
TYPE_MASK = 0x000000FF

DEFAULT_RECURSION_DEPTH = 64


def _pack(fmt: str, value) -> bytes:
    try:
        return struct.pack(fmt, value)
    except struct.error as e:
        raise ProtocolError(ProtocolError.INVALID_DATA, f"cannot encode {value!r} as {fmt[1:]}: {e}") from e


class BinaryCodec:
    """Codec over any Transport; does not own the transport's lifecycle."""

    def __init__(
        self,
        transport: Transport,
        strict_read: bool = False,
        strict_write: bool = True,
        *,
        string_length_limit: int | None = None,
        container_length_limit: int | None = None,
    ) -> None:
        self._trans = transport
        self.strict_read = strict_read
        self.strict_write = strict_write
        self.string_length_limit = string_length_limit
        self.container_length_limit = container_length_limit

    @property
    def transport(self) -> Transport:
        return self._trans

    # --- write ---

    def write_message_begin(self, name: str, type: int, seqid: int) -> None:
        if self.strict_write:
            self._write_i32_unsigned(VERSION_1 | int(type))
            self.write_string(name)
            self.write_i32(seqid)
        else:
            self.write_string(name)
            self.write_byte(int(type))
            self.write_i32(seqid)

    def write_message_end(self) -> None:
        pass

    def write_struct_begin(self, name: str) -> None:
        pass

    def write_struct_end(self) -> None:
        pass

    def write_field_begin(self, name: str, ttype: int, fid: int) -> None:
        self.write_byte(int(ttype))
        self.write_i16(fid)

    def write_field_end(self) -> None:
        pass

    def write_field_stop(self) -> None:
        self.write_byte(TType.STOP)

    def write_map_begin(self, ktype: int, vtype: int, size: int) -> None:
        self.write_byte(int(ktype))
        self.write_byte(int(vtype))
        self.write_i32(size)

    def write_map_end(self) -> None:
        pass

    def write_list_begin(self, etype: int, size: int) -> None:
        self.write_byte(int(etype))
        self.write_i32(size)

    def write_list_end(self) -> None:
        pass

    def write_set_begin(self, etype: int, size: int) -> None:
        self.write_byte(int(etype))
        self.write_i32(size)

    def write_set_end(self) -> None:
        pass

    def write_bool(self, value: bool) -> None:
        self.write_byte(1 if value else 0)

    def write_byte(self, value: int) -> None:
        self._trans.write(_pack("!b", value))

    def write_i16(self, value: int) -> None:
        self._trans.write(_pack("!h", value))

    def write_i32(self, value: int) -> None:
        self._trans.write(_pack("!i", value))

    def write_i64(self, value: int) -> None:
        self._trans.write(_pack("!q", value))

    def write_double(self, value: float) -> None:
        self._trans.write(_pack("!d", value))

    def write_string(self, value: str) -> None:
        if not isinstance(value, str):
            raise ProtocolError(ProtocolError.INVALID_DATA, f"cannot encode {value!r} as string")
        self.write_binary(value.encode("utf-8"))

    def write_binary(self, value: bytes) -> None:
        self.write_i32(len(value))
        self._trans.write(value)

    def _write_i32_unsigned(self, value: int) -> None:
        self._trans.write(_pack("!I", value))

    # --- read ---

    def read_message_begin(self) -> tuple[str, int, int]:
        sz = self.read_i32()
        if sz < 0:
            version = sz & VERSION_MASK
            if version != VERSION_1:
                raise ProtocolError(ProtocolError.BAD_VERSION, f"bad version in read_message_begin: {sz & 0xFFFFFFFF:#x}")
            type_ = sz & TYPE_MASK
            name = self.read_string()
            seqid = self.read_i32()
        else:
            if self.strict_read:
                raise ProtocolError(ProtocolError.BAD_VERSION, "no protocol version header")
            name = self._read_sized(sz, self.string_length_limit).decode("utf-8")
            type_ = self.read_byte()
            seqid = self.read_i32()
        return name, type_, seqid

    def read_message_end(self) -> None:
        pass

    def read_struct_begin(self) -> str:
        return ""

    def read_struct_end(self) -> None:
        pass

    def read_field_begin(self) -> tuple[str, int, int]:
        ttype = self.read_byte()
        if ttype == TType.STOP:
            return "", ttype, 0
        return "", ttype, self.read_i16()

    def read_field_end(self) -> None:
        pass

    def read_map_begin(self) -> tuple[int, int, int]:
        ktype = self.read_byte()
        vtype = self.read_byte()
        return ktype, vtype, self._check_container_size(self.read_i32())

    def read_map_end(self) -> None:
        pass

    def read_list_begin(self) -> tuple[int, int]:
        etype = self.read_byte()
        return etype, self._check_container_size(self.read_i32())

    def read_list_end(self) -> None:
        pass

    def read_set_begin(self) -> tuple[int, int]:
        etype = self.read_byte()
        return etype, self._check_container_size(self.read_i32())

    def read_set_end(self) -> None:
        pass

    def read_bool(self) -> bool:
        return self.read_byte() != 0

    def read_byte(self) -> int:
        return struct.unpack("!b", self._trans.read_all(1))[0]

    def read_i16(self) -> int:
        return struct.unpack("!h", self._trans.read_all(2))[0]

    def read_i32(self) -> int:
        return struct.unpack("!i", self._trans.read_all(4))[0]

    def read_i64(self) -> int:
        return struct.unpack("!q", self._trans.read_all(8))[0]

    def read_double(self) -> float:
        return struct.unpack("!d", self._trans.read_all(8))[0]

    def read_string(self) -> str:
        return self.read_binary().decode("utf-8")

    def read_binary(self) -> bytes:
        return self._read_sized(self.read_i32(), self.string_length_limit)

    def _read_sized(self, size: int, limit: int | None) -> bytes:
        if size < 0:
            raise ProtocolError(ProtocolError.NEGATIVE_SIZE, f"negative length: {size}")
        if limit is not None and size > limit:
            raise ProtocolError(ProtocolError.SIZE_LIMIT, f"length {size} exceeds limit {limit}")
        return self._trans.read_all(size)

    def _check_container_size(self, size: int) -> int:
        if size < 0:
            raise ProtocolError(ProtocolError.NEGATIVE_SIZE, f"negative container size: {size}")
        if self.container_length_limit is not None and size > self.container_length_limit:
            raise ProtocolError(
                ProtocolError.SIZE_LIMIT,
                f"container size {size} exceeds limit {self.container_length_limit}",
            )
        return size

    # --- misc ---

    def skip(self, ttype: int, _depth: int = DEFAULT_RECURSION_DEPTH) -> None:
        """Consume one value of the given wire type without decoding it for the caller."""
        if _depth <= 0:
            raise ProtocolError(ProtocolError.DEPTH_LIMIT, "depth limit exceeded while skipping")
        if ttype == TType.BOOL:
            self.read_bool()
        elif ttype == TType.BYTE:
            self.read_byte()
        elif ttype == TType.I16:
            self.read_i16()
        elif ttype == TType.I32:
            self.read_i32()
        elif ttype == TType.I64:
            self.read_i64()
        elif ttype == TType.DOUBLE:
            self.read_double()
        elif ttype == TType.STRING:
            self.read_binary()
        elif ttype == TType.STRUCT:
            self.read_struct_begin()
            while True:
                _, ftype, _ = self.read_field_begin()
                if ftype == TType.STOP:
                    break
                self.skip(ftype, _depth - 1)
                self.read_field_end()
            self.read_struct_end()
        elif ttype == TType.MAP:
            ktype, vtype, size = self.read_map_begin()
            for _ in range(size):
                self.skip(ktype, _depth - 1)
                self.skip(vtype, _depth - 1)
            self.read_map_end()
        elif ttype in (TType.LIST, TType.SET):
            etype, size = self.read_list_begin()
            for _ in range(size):
                self.skip(etype, _depth - 1)
            self.read_list_end()
        else:
            raise ProtocolError(ProtocolError.INVALID_DATA, f"unknown data type {ttype}")

    def flush(self) -> None:
        self._trans.flush()


class BinaryCodecFactory:
    """Builds one BinaryCodec per connection transport."""

    def __init__(self, strict_read: bool = False, strict_write: bool = True, **limits: int | None) -> None:
        self.strict_read = strict_read
        self.strict_write = strict_write
        self._limits = limits

    def get_codec(self, transport: Transport) -> BinaryCodec:
        return BinaryCodec(transport, self.strict_read, self.strict_write, **self._limits)
