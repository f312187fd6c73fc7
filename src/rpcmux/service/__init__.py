from rpcmux.service.client import ServiceClient
from rpcmux.service.processor import ServiceProcessor
from rpcmux.service.values import read_struct, read_value, write_struct, write_value

__all__ = [
    "ServiceClient",
    "ServiceProcessor",
    "read_struct",
    "read_value",
    "write_struct",
    "write_value",
]
