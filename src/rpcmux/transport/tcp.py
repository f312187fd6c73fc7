"""TCP transports: client socket and the listening server socket."""
from __future__ import annotations

import logging
import socket
import threading
from contextlib import suppress

from rpcmux.core.errors import TransportError
from rpcmux.transport.base import TransportBase

logger = logging.getLogger(__name__)


class SocketTransport(TransportBase):
    """Blocking TCP stream. timeout (seconds) applies to connect, read and write."""

    def __init__(self, host: str = "localhost", port: int = 9090, timeout: float | None = None) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout
        self._sock: socket.socket | None = None

    @classmethod
    def from_socket(cls, sock: socket.socket, timeout: float | None = None) -> SocketTransport:
        """Wrap an already connected socket (e.g. from accept())."""
        host, port = sock.getpeername()[:2]
        trans = cls(host, port, timeout)
        sock.settimeout(timeout)
        trans._sock = sock
        return trans

    def is_open(self) -> bool:
        return self._sock is not None

    def open(self) -> None:
        if self._sock is not None:
            raise TransportError(TransportError.ALREADY_OPEN, "socket already connected")
        try:
            self._sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
        except socket.timeout as e:
            raise TransportError(TransportError.TIMED_OUT, f"connect to {self.host}:{self.port} timed out") from e
        except OSError as e:
            raise TransportError(TransportError.NOT_OPEN, f"could not connect to {self.host}:{self.port}: {e}") from e

    def close(self) -> None:
        if self._sock is None:
            return
        try:
            self._sock.close()
        finally:
            self._sock = None

    def _require_open(self) -> socket.socket:
        if self._sock is None:
            raise TransportError(TransportError.NOT_OPEN, "socket is not open")
        return self._sock

    def read(self, size: int) -> bytes:
        sock = self._require_open()
        try:
            data = sock.recv(size)
        except socket.timeout as e:
            raise TransportError(TransportError.TIMED_OUT, "read timed out") from e
        except OSError as e:
            raise TransportError(TransportError.UNKNOWN, str(e)) from e
        if not data and size > 0:
            raise TransportError(TransportError.END_OF_FILE, "connection closed by peer")
        return data

    def write(self, data: bytes) -> None:
        sock = self._require_open()
        try:
            sock.sendall(data)
        except socket.timeout as e:
            raise TransportError(TransportError.TIMED_OUT, "write timed out") from e
        except OSError as e:
            raise TransportError(TransportError.UNKNOWN, str(e)) from e


class ServerSocket:
    """
    Listening TCP socket. accept() hands out one SocketTransport per client,
    configured with client_timeout. interrupt() is safe to call from another thread.
    """

    def __init__(self, host: str = "", port: int = 9090, client_timeout: float | None = None) -> None:
        self.host = host
        self.port = port
        self.client_timeout = client_timeout
        self._listener: socket.socket | None = None
        self._lock = threading.Lock()
        self._interrupted = False

    @property
    def is_listening(self) -> bool:
        return self._listener is not None

    @property
    def address(self) -> tuple[str, int]:
        """Bound address once listening (port 0 resolves to the real port), else the configured one."""
        listener = self._listener
        if listener is not None:
            return listener.getsockname()[:2]
        return self.host, self.port

    def listen(self) -> None:
        """Start listening; no-op if already listening."""
        with self._lock:
            if self._listener is None:
                self._listener = self._bind()

    def open(self) -> None:
        with self._lock:
            if self._listener is not None:
                raise TransportError(TransportError.ALREADY_OPEN, "server socket already open")
            self._listener = self._bind()

    def _bind(self) -> socket.socket:
        try:
            listener = socket.create_server((self.host, self.port), reuse_port=False)
        except OSError as e:
            raise TransportError(TransportError.NOT_OPEN, f"could not listen on {self.host}:{self.port}: {e}") from e
        logger.info("listening on %s:%s", *listener.getsockname()[:2])
        return listener

    def accept(self) -> SocketTransport:
        with self._lock:
            interrupted = self._interrupted
        if interrupted:
            raise TransportError(TransportError.INTERRUPTED, "server socket interrupted")
        listener = self._listener
        if listener is None:
            raise TransportError(TransportError.NOT_OPEN, "no underlying server socket")
        try:
            conn, _ = listener.accept()
        except OSError as e:
            with self._lock:
                interrupted = self._interrupted
            if interrupted:
                raise TransportError(TransportError.INTERRUPTED, "server socket interrupted") from e
            raise TransportError(TransportError.UNKNOWN, str(e)) from e
        return SocketTransport.from_socket(conn, self.client_timeout)

    def close(self) -> None:
        listener, self._listener = self._listener, None
        if listener is not None:
            listener.close()

    def interrupt(self) -> None:
        """Stop accepting: pending and future accept() calls raise INTERRUPTED."""
        with self._lock:
            self._interrupted = True
            listener, self._listener = self._listener, None
        if listener is not None:
            with suppress(OSError):
                listener.shutdown(socket.SHUT_RDWR)
            listener.close()
