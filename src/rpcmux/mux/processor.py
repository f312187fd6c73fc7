"""
MultiplexedProcessor: one server, several services.

    processor = MultiplexedProcessor()
    processor.register_processor("Calculator", calculator_processor)
    processor.register_processor("WeatherReport", weather_processor)
    server = SimpleServer(processor, ServerSocket("0.0.0.0", 9090))
    server.serve()

Registration happens during setup; serve() freezes the registry.
"""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping

from rpcmux.core.errors import RegistryFrozenError, UnknownServiceError
from rpcmux.core.protocol import CallHandler, Codec
from rpcmux.mux.codec import SEPARATOR, StoredMessageCodec

logger = logging.getLogger(__name__)


def split_service_name(name: str) -> tuple[str, str] | None:
    """Split "<service>:<method>" at the first separator; None if there is none."""
    service_name, sep, method_name = name.partition(SEPARATOR)
    if not sep:
        return None
    return service_name, method_name


class MultiplexedProcessor:
    """
    Service registry + dispatcher. Each call to process() handles one inbound message:
    read header, strip the service prefix, hand the selected handler a codec that
    replays the stripped header.
    """

    def __init__(self) -> None:
        self._processors: dict[str, CallHandler] = {}
        self._default: CallHandler | None = None
        self._frozen = False

    def register_processor(self, service_name: str, processor: CallHandler) -> MultiplexedProcessor:
        """Route calls for service_name to processor. Last registration wins."""
        if self._frozen:
            raise RegistryFrozenError(service_name)
        self._processors[service_name] = processor
        return self

    def register_default(self, processor: CallHandler) -> MultiplexedProcessor:
        """Fallback for names without a service prefix (clients that do not multiplex)."""
        if self._frozen:
            raise RegistryFrozenError()
        self._default = processor
        return self

    def freeze(self) -> MultiplexedProcessor:
        """Make the registry read-only; it is shared by all connection threads from here on."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def services(self) -> Mapping[str, CallHandler]:
        return MappingProxyType(self._processors)

    @property
    def default(self) -> CallHandler | None:
        return self._default

    def process(self, codec: Codec) -> bool:
        name, type_, seqid = codec.read_message_begin()

        parts = split_service_name(name)
        if parts is not None:
            service_name, method_name = parts
            processor = self._processors.get(service_name)
            if processor is not None:
                logger.debug("dispatch %s.%s seqid=%s", service_name, method_name, seqid)
                return processor.process(StoredMessageCodec(codec, method_name, type_, seqid))
        else:
            service_name, method_name = "", name

        if self._default is not None:
            logger.debug("dispatch %r to default handler seqid=%s", name, seqid)
            return self._default.process(StoredMessageCodec(codec, name, type_, seqid))

        logger.debug("no handler for service %r (message %r, seqid=%s)", service_name, name, seqid)
        raise UnknownServiceError(service_name, method_name)
