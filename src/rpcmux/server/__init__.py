from rpcmux.server.simple import SimpleServer

__all__ = ["SimpleServer"]
