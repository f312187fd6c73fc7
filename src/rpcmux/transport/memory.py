"""In-memory transport: reads from the initial value, writes append to the buffer."""
from __future__ import annotations

from io import BytesIO

from rpcmux.transport.base import TransportBase


class MemoryBuffer(TransportBase):
    """
    Read and write share one buffer with independent positions.
    Handy for tests and as the body buffer of HTTP transports.
    """

    def __init__(self, value: bytes = b"") -> None:
        self._buffer = BytesIO(value)
        self._read_pos = 0

    def is_open(self) -> bool:
        return not self._buffer.closed

    def open(self) -> None:
        pass

    def close(self) -> None:
        self._buffer.close()

    def read(self, size: int) -> bytes:
        self._buffer.seek(self._read_pos)
        data = self._buffer.read(size)
        self._read_pos += len(data)
        self._buffer.seek(0, 2)
        return data

    def write(self, data: bytes) -> None:
        self._buffer.seek(0, 2)
        self._buffer.write(data)

    def getvalue(self) -> bytes:
        return self._buffer.getvalue()

    def remaining(self) -> int:
        """Bytes written but not yet read."""
        return len(self._buffer.getvalue()) - self._read_pos

    def reset(self, value: bytes = b"") -> None:
        self._buffer = BytesIO(value)
        self._read_pos = 0
