"""
Generic value encoding for hand-written services (no IDL).

Type spec: a TType for scalars, or a tuple for containers/structs:
    (TType.LIST, elem_spec), (TType.SET, elem_spec), (TType.MAP, key_spec, value_spec),
    TType.STRUCT with the value given as [(fid, spec, value), ...].

Reading needs no spec: the wire carries types. Structs decode to {fid: value}.
Set elements and map keys that decode to lists, sets or dicts come back as
tuples, frozensets and tuples of (key, value) pairs.
"""
from __future__ import annotations

from typing import Any, Iterable, Union

from rpcmux.core.errors import ProtocolError
from rpcmux.core.message import TType
from rpcmux.core.protocol import Codec

TypeSpec = Union[int, tuple]
Field = tuple[int, TypeSpec, Any]


def ttype_of(spec: TypeSpec) -> int:
    return spec[0] if isinstance(spec, tuple) else spec


def write_value(codec: Codec, spec: TypeSpec, value: Any) -> None:
    ttype = ttype_of(spec)
    if ttype == TType.BOOL:
        codec.write_bool(value)
    elif ttype == TType.BYTE:
        codec.write_byte(value)
    elif ttype == TType.I16:
        codec.write_i16(value)
    elif ttype == TType.I32:
        codec.write_i32(value)
    elif ttype == TType.I64:
        codec.write_i64(value)
    elif ttype == TType.DOUBLE:
        codec.write_double(value)
    elif ttype == TType.STRING:
        if isinstance(value, (bytes, bytearray)):
            codec.write_binary(bytes(value))
        else:
            codec.write_string(value)
    elif ttype == TType.STRUCT:
        write_struct(codec, "", value)
    elif ttype == TType.LIST:
        elem = spec[1]
        codec.write_list_begin(ttype_of(elem), len(value))
        for item in value:
            write_value(codec, elem, item)
        codec.write_list_end()
    elif ttype == TType.SET:
        elem = spec[1]
        codec.write_set_begin(ttype_of(elem), len(value))
        for item in value:
            write_value(codec, elem, item)
        codec.write_set_end()
    elif ttype == TType.MAP:
        kspec, vspec = spec[1], spec[2]
        codec.write_map_begin(ttype_of(kspec), ttype_of(vspec), len(value))
        for k, v in value.items():
            write_value(codec, kspec, k)
            write_value(codec, vspec, v)
        codec.write_map_end()
    else:
        raise ProtocolError(ProtocolError.INVALID_DATA, f"cannot write type {ttype}")


def write_struct(codec: Codec, name: str, fields: Iterable[Field]) -> None:
    """Write a struct; fields whose value is None are left out."""
    codec.write_struct_begin(name)
    for fid, spec, value in fields:
        if value is None:
            continue
        codec.write_field_begin("", ttype_of(spec), fid)
        write_value(codec, spec, value)
        codec.write_field_end()
    codec.write_field_stop()
    codec.write_struct_end()


def _freeze(value: Any) -> Any:
    """Hashable form of a decoded value, for set elements and map keys."""
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, set):
        return frozenset(value)
    if isinstance(value, dict):
        # maps and structs: (key, value) pairs in wire order
        return tuple((k, _freeze(v)) for k, v in value.items())
    return value


def read_value(codec: Codec, ttype: int) -> Any:
    if ttype == TType.BOOL:
        return codec.read_bool()
    if ttype == TType.BYTE:
        return codec.read_byte()
    if ttype == TType.I16:
        return codec.read_i16()
    if ttype == TType.I32:
        return codec.read_i32()
    if ttype == TType.I64:
        return codec.read_i64()
    if ttype == TType.DOUBLE:
        return codec.read_double()
    if ttype == TType.STRING:
        raw = codec.read_binary()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return raw
    if ttype == TType.STRUCT:
        return read_struct(codec)
    if ttype == TType.LIST:
        etype, size = codec.read_list_begin()
        items = [read_value(codec, etype) for _ in range(size)]
        codec.read_list_end()
        return items
    if ttype == TType.SET:
        etype, size = codec.read_set_begin()
        items = {_freeze(read_value(codec, etype)) for _ in range(size)}
        codec.read_set_end()
        return items
    if ttype == TType.MAP:
        ktype, vtype, size = codec.read_map_begin()
        result = {}
        for _ in range(size):
            key = _freeze(read_value(codec, ktype))
            result[key] = read_value(codec, vtype)
        codec.read_map_end()
        return result
    raise ProtocolError(ProtocolError.INVALID_DATA, f"cannot read type {ttype}")


def read_struct(codec: Codec) -> dict[int, Any]:
    fields: dict[int, Any] = {}
    codec.read_struct_begin()
    while True:
        _, ftype, fid = codec.read_field_begin()
        if ftype == TType.STOP:
            break
        fields[fid] = read_value(codec, ftype)
        codec.read_field_end()
    codec.read_struct_end()
    return fields
