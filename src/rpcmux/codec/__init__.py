from rpcmux.codec.binary import BinaryCodec, BinaryCodecFactory
from rpcmux.codec.decorator import CodecDecorator

__all__ = [
    "BinaryCodec",
    "BinaryCodecFactory",
    "CodecDecorator",
]
