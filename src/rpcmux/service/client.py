"""ServiceClient: synchronous calls over one codec; wrap the codec in MultiplexedCodec to address a service."""
from __future__ import annotations

from typing import Any, Iterable

from rpcmux.core.errors import ApplicationError, ApplicationErrorType
from rpcmux.core.message import MessageType, TType
from rpcmux.core.protocol import Codec
from rpcmux.service.values import Field, TypeSpec, read_struct, write_struct


class ServiceClient:
    """
    Facade: call(method, args, result_type) -> result.
    args are (field_id, type_spec, value) tuples. Not thread-safe: clients sharing
    one connection must not call concurrently.
    """

    def __init__(self, codec: Codec) -> None:
        self._codec = codec
        self._seqid = 0

    @property
    def codec(self) -> Codec:
        return self._codec

    def _next_seqid(self) -> int:
        self._seqid = (self._seqid + 1) & 0x7FFFFFFF
        return self._seqid

    def call(self, method: str, args: Iterable[Field] = (), result_type: TypeSpec | None = None) -> Any:
        seqid = self._send(method, args, MessageType.CALL)
        return self._recv(method, seqid, result_type)

    def send_oneway(self, method: str, args: Iterable[Field] = ()) -> None:
        self._send(method, args, MessageType.ONEWAY)

    def _send(self, method: str, args: Iterable[Field], type_: MessageType) -> int:
        seqid = self._next_seqid()
        try:
            self._codec.write_message_begin(method, type_, seqid)
            write_struct(self._codec, f"{method}_args", args)
            self._codec.write_message_end()
        except Exception:
            # Nothing of a half-encoded call may reach the peer.
            self._codec.transport.discard()
            raise
        self._codec.flush()
        return seqid

    def _recv(self, method: str, seqid: int, result_type: TypeSpec | None) -> Any:
        name, type_, rseqid = self._codec.read_message_begin()
        if name != method or rseqid != seqid:
            self._codec.skip(TType.STRUCT)
            self._codec.read_message_end()
            if name != method:
                raise ApplicationError(ApplicationErrorType.WRONG_METHOD_NAME, f"{method} failed: wrong method name {name!r}")
            raise ApplicationError(ApplicationErrorType.BAD_SEQUENCE_ID, f"{method} failed: out of sequence response")
        if type_ == MessageType.EXCEPTION:
            error = ApplicationError.read(self._codec)
            self._codec.read_message_end()
            raise error
        result = read_struct(self._codec)
        self._codec.read_message_end()
        if 0 in result:
            return result[0]
        if result_type is None:
            return None
        raise ApplicationError(ApplicationErrorType.MISSING_RESULT, f"{method} failed: unknown result")
