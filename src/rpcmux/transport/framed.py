"""Framed transport: each flush() sends one frame, [i32 length][payload]."""
from __future__ import annotations

import struct

from rpcmux.core.errors import ProtocolError
from rpcmux.core.protocol import Transport
from rpcmux.transport.base import TransportBase

DEFAULT_MAX_FRAME_SIZE = 16 * 1024 * 1024


class FramedTransport(TransportBase):
    """Buffers writes until flush(); reads one whole frame at a time from the inner transport."""

    def __init__(self, inner: Transport, max_frame_size: int = DEFAULT_MAX_FRAME_SIZE) -> None:
        self._inner = inner
        self.max_frame_size = max_frame_size
        self._wbuf = bytearray()
        self._rbuf = b""
        self._rpos = 0

    @property
    def inner(self) -> Transport:
        return self._inner

    def is_open(self) -> bool:
        return self._inner.is_open()

    def open(self) -> None:
        self._inner.open()

    def close(self) -> None:
        self._inner.close()

    def read(self, size: int) -> bytes:
        if self._rpos >= len(self._rbuf):
            self._read_frame()
        data = self._rbuf[self._rpos:self._rpos + size]
        self._rpos += len(data)
        return data

    def _read_frame(self) -> None:
        (size,) = struct.unpack("!i", self._inner.read_all(4))
        if size < 0:
            raise ProtocolError(ProtocolError.NEGATIVE_SIZE, f"negative frame size: {size}")
        if size > self.max_frame_size:
            raise ProtocolError(ProtocolError.SIZE_LIMIT, f"frame size {size} exceeds {self.max_frame_size}")
        self._rbuf = self._inner.read_all(size)
        self._rpos = 0

    def write(self, data: bytes) -> None:
        self._wbuf.extend(data)

    def discard(self) -> None:
        self._wbuf = bytearray()

    def flush(self) -> None:
        frame, self._wbuf = bytes(self._wbuf), bytearray()
        self._inner.write(struct.pack("!i", len(frame)) + frame)
        self._inner.flush()
