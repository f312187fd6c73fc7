"""HTTP client transport: one POST per flush(); the response body is what read() returns."""
from __future__ import annotations

import httpx

from rpcmux.core.errors import TransportError
from rpcmux.transport.base import TransportBase
from rpcmux.transport.memory import MemoryBuffer

CONTENT_TYPE = "application/x-thrift"


class HttpClientTransport(TransportBase):
    """
    Client-side only. Pass client= to share a connection pool or to inject
    httpx.MockTransport in tests; a client created here is closed by close().
    """

    def __init__(
        self,
        url: str,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._headers = {"Content-Type": CONTENT_TYPE, "Accept": CONTENT_TYPE, **(headers or {})}
        self._client = client
        self._owns_client = client is None
        self._wbuf = MemoryBuffer()
        self._rbuf = MemoryBuffer()

    def is_open(self) -> bool:
        return self._client is not None

    def open(self) -> None:
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout)
            self._owns_client = True

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def read(self, size: int) -> bytes:
        return self._rbuf.read(size)

    def write(self, data: bytes) -> None:
        self._wbuf.write(data)

    def discard(self) -> None:
        self._wbuf.reset()

    def flush(self) -> None:
        if self._client is None:
            self.open()
        body = self._wbuf.getvalue()
        self._wbuf.reset()
        try:
            response = self._client.post(self.url, content=body, headers=self._headers)
        except httpx.TimeoutException as e:
            raise TransportError(TransportError.TIMED_OUT, f"POST {self.url} timed out") from e
        except httpx.HTTPError as e:
            raise TransportError(TransportError.UNKNOWN, f"POST {self.url} failed: {e}") from e
        if not response.is_success:
            raise TransportError(TransportError.UNKNOWN, f"POST {self.url} returned HTTP {response.status_code}")
        self._rbuf.reset(response.content)
