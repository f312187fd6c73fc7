"""
SimpleServer: accept loop plus one thread per connection.

Within a connection requests are handled strictly in order: the next header
is read only after the previous handler has written its reply.
"""
from __future__ import annotations

import logging
import threading

from rpcmux.codec.binary import BinaryCodecFactory
from rpcmux.core.errors import TransportError, UnknownServiceError
from rpcmux.core.protocol import CallHandler, CodecFactory, ServerTransport, Transport, TransportFactory
from rpcmux.transport.factory import BufferedTransportFactory

logger = logging.getLogger(__name__)


class SimpleServer:
    """
    Serve processor on server_transport until stop(). Replies are buffered per
    connection unless transport_factory says otherwise. The processor is frozen (if it
    supports freeze()) before the first connection is accepted.
    """

    def __init__(
        self,
        processor: CallHandler,
        server_transport: ServerTransport,
        *,
        transport_factory: TransportFactory | None = None,
        codec_factory: CodecFactory | None = None,
    ) -> None:
        self.processor = processor
        self.server_transport = server_transport
        self.transport_factory = transport_factory or BufferedTransportFactory()
        self.codec_factory = codec_factory or BinaryCodecFactory()
        self._stopped = threading.Event()
        self._listening = threading.Event()
        self._connections: set[threading.Thread] = set()
        self._connections_lock = threading.Lock()

    @property
    def address(self):
        return self.server_transport.address

    def wait_until_listening(self, timeout: float | None = None) -> bool:
        return self._listening.wait(timeout)

    def serve(self) -> None:
        """Blocks until stop() is called from another thread."""
        freeze = getattr(self.processor, "freeze", None)
        if callable(freeze):
            freeze()
        self.server_transport.listen()
        self._listening.set()
        logger.info("serving on %s", self.address)
        try:
            while not self._stopped.is_set():
                try:
                    client = self.server_transport.accept()
                except TransportError as e:
                    if e.code == TransportError.INTERRUPTED or self._stopped.is_set():
                        break
                    logger.warning("accept failed: %s", e)
                    continue
                thread = threading.Thread(
                    target=self._serve_client,
                    args=(client,),
                    name=f"rpcmux-conn-{id(client):x}",
                    daemon=True,
                )
                with self._connections_lock:
                    self._connections.add(thread)
                thread.start()
        finally:
            self.server_transport.close()
            logger.info("server stopped")

    def stop(self) -> None:
        self._stopped.set()
        self.server_transport.interrupt()

    def join(self, timeout: float | None = None) -> None:
        """Wait for connection threads to finish."""
        with self._connections_lock:
            threads = list(self._connections)
        for thread in threads:
            thread.join(timeout)

    def _serve_client(self, client: Transport) -> None:
        transport = self.transport_factory.get_transport(client)
        codec = self.codec_factory.get_codec(transport)
        try:
            while not self._stopped.is_set():
                self.processor.process(codec)
        except TransportError as e:
            if e.code != TransportError.END_OF_FILE:
                logger.warning("connection error: %s", e)
        except UnknownServiceError as e:
            # Payload position is unknown; the connection cannot be resynchronised.
            logger.warning("closing connection: %s", e)
        except Exception:
            logger.exception("error while processing request; closing connection")
        finally:
            transport.close()
            with self._connections_lock:
                self._connections.discard(threading.current_thread())
