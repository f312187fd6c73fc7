"""
ServiceProcessor: call handler for one service, built from plain functions.

    calculator = (
        ServiceProcessor("Calculator")
        .method("add", lambda args: args[1] + args[2], result_type=TType.I32)
        .method("zip", lambda args: None, oneway=True)
    )

Each function receives the decoded argument struct as {field_id: value}.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from rpcmux.core.errors import ApplicationError, ApplicationErrorType, ProtocolError, RpcError
from rpcmux.core.message import MessageType, TType
from rpcmux.core.protocol import Codec
from rpcmux.service.values import TypeSpec, read_struct, write_struct

logger = logging.getLogger(__name__)

MethodFn = Callable[[dict[int, Any]], Any]


@dataclass(frozen=True)
class _Method:
    fn: MethodFn
    result_type: TypeSpec | None
    oneway: bool


class ServiceProcessor:
    """Implements CallHandler: reads one call, runs the function, writes the reply."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._methods: dict[str, _Method] = {}

    def method(
        self,
        name: str,
        fn: MethodFn,
        *,
        result_type: TypeSpec | None = None,
        oneway: bool = False,
    ) -> ServiceProcessor:
        """Register a method. result_type None means void."""
        self._methods[name] = _Method(fn, result_type, oneway)
        return self

    @property
    def method_names(self) -> list[str]:
        return list(self._methods)

    def process(self, codec: Codec) -> bool:
        name, type_, seqid = codec.read_message_begin()
        method = self._methods.get(name)

        if method is None or type_ not in (MessageType.CALL, MessageType.ONEWAY):
            codec.skip(TType.STRUCT)
            codec.read_message_end()
            if method is None:
                error = ApplicationError(ApplicationErrorType.UNKNOWN_METHOD, f"unknown method {name!r}")
            else:
                error = ApplicationError(ApplicationErrorType.INVALID_MESSAGE_TYPE, f"unexpected message type {type_}")
            logger.warning("%s: %s", self.name or "service", error.message)
            if type_ != MessageType.ONEWAY:
                self._write_exception(codec, name, seqid, error)
            return False

        args = read_struct(codec)
        codec.read_message_end()

        try:
            result = method.fn(args)
        except ApplicationError as e:
            error = e
        except RpcError as e:
            error = ApplicationError(ApplicationErrorType.INTERNAL_ERROR, e.message)
        else:
            if method.oneway:
                return True
            return self._write_result(codec, name, seqid, method.result_type, result)

        logger.info("%s.%s failed: %s", self.name or "service", name, error)
        if method.oneway:
            return False
        self._write_exception(codec, name, seqid, error)
        return True

    def _write_result(self, codec: Codec, name: str, seqid: int, result_type: TypeSpec | None, result: Any) -> bool:
        """Returns False if the result could not be encoded and an exception went out instead."""
        try:
            codec.write_message_begin(name, MessageType.REPLY, seqid)
            fields = [] if result_type is None else [(0, result_type, result)]
            write_struct(codec, f"{name}_result", fields)
            codec.write_message_end()
        except ProtocolError as e:
            codec.transport.discard()
            logger.warning("%s.%s: cannot encode result: %s", self.name or "service", name, e.message)
            self._write_exception(codec, name, seqid, ApplicationError(ApplicationErrorType.PROTOCOL_ERROR, e.message))
            return False
        codec.flush()
        return True

    def _write_exception(self, codec: Codec, name: str, seqid: int, error: ApplicationError) -> None:
        codec.write_message_begin(name, MessageType.EXCEPTION, seqid)
        error.write(codec)
        codec.write_message_end()
        codec.flush()
