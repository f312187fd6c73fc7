"""Message header: kind, wire types and the (name, type, seqid) triple."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class MessageType(IntEnum):
    """Message kind carried in every message header."""

    CALL = 1
    REPLY = 2
    EXCEPTION = 3
    ONEWAY = 4


class TType(IntEnum):
    """Wire type of a field, container element or value."""

    STOP = 0
    VOID = 1
    BOOL = 2
    BYTE = 3
    DOUBLE = 4
    I16 = 6
    I32 = 8
    I64 = 10
    STRING = 11
    STRUCT = 12
    MAP = 13
    SET = 14
    LIST = 15


# Message kinds routed by service name; everything else passes through untouched.
DISPATCHED_TYPES = frozenset({MessageType.CALL, MessageType.ONEWAY})


@dataclass(frozen=True)
class MessageHeader:
    """Header triple as read from (or replayed to) a codec."""

    name: str
    type: int
    seqid: int
