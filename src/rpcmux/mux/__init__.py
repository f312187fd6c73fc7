from rpcmux.mux.codec import SEPARATOR, MultiplexedCodec, StoredMessageCodec
from rpcmux.mux.processor import MultiplexedProcessor, split_service_name

__all__ = [
    "SEPARATOR",
    "MultiplexedCodec",
    "MultiplexedProcessor",
    "StoredMessageCodec",
    "split_service_name",
]
