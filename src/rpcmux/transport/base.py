"""Transport base: implementations provide read/write; read_all is built on read."""
from __future__ import annotations

from abc import ABC, abstractmethod

from rpcmux.core.errors import TransportError


class TransportBase(ABC):
    """Byte transport. read() may return fewer bytes than asked; read_all() may not."""

    @abstractmethod
    def is_open(self) -> bool:
        ...

    @abstractmethod
    def open(self) -> None:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    @abstractmethod
    def read(self, size: int) -> bytes:
        ...

    @abstractmethod
    def write(self, data: bytes) -> None:
        ...

    def flush(self) -> None:
        pass

    def discard(self) -> None:
        """Drop bytes written since the last flush(). No-op where writes go straight out."""

    def read_all(self, size: int) -> bytes:
        buf = b""
        while len(buf) < size:
            chunk = self.read(size - len(buf))
            if not chunk:
                raise TransportError(
                    TransportError.END_OF_FILE,
                    f"expected {size} bytes, got {len(buf)}",
                )
            buf += chunk
        return buf

    def __enter__(self) -> TransportBase:
        if not self.is_open():
            self.open()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
