"""Buffered transport: writes collect in memory and reach the inner transport only on flush()."""
from __future__ import annotations

from rpcmux.core.protocol import Transport
from rpcmux.transport.base import TransportBase

DEFAULT_BUFFER_SIZE = 4096


class BufferedTransport(TransportBase):
    """
    Unframed counterpart of FramedTransport. A message that fails halfway through
    encoding can be dropped with discard() without any of it reaching the peer.
    """

    def __init__(self, inner: Transport, read_buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        self._inner = inner
        self.read_buffer_size = read_buffer_size
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
            self._rbuf = self._inner.read(max(size, self.read_buffer_size))
            self._rpos = 0
        data = self._rbuf[self._rpos:self._rpos + size]
        self._rpos += len(data)
        return data

    def write(self, data: bytes) -> None:
        self._wbuf.extend(data)

    def discard(self) -> None:
        self._wbuf = bytearray()

    def flush(self) -> None:
        data, self._wbuf = bytes(self._wbuf), bytearray()
        if data:
            self._inner.write(data)
        self._inner.flush()
