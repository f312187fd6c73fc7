"""Server config: dataclass with defaults, optionally loaded from the environment."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any

from rpcmux.core.errors import ConfigError

_TRUE = {"1", "true", "yes", "on"}


class Config:
    """Helpers for reading settings from os.environ."""

    @classmethod
    def load_from_env(cls, prefix: str = "RPCMUX_", **defaults: Any) -> dict[str, Any]:
        """Load from os.environ with prefix and defaults. Returns dict for ServerConfig(**...)."""
        result = dict(defaults)
        for key, value in os.environ.items():
            if key.startswith(prefix):
                name = key[len(prefix):].lower()
                result[name] = value
        return result


@dataclass
class ServerConfig:
    """Where and how to serve. client_timeout is in seconds; None blocks forever."""

    host: str = "127.0.0.1"
    port: int = 9090
    client_timeout: float | None = None
    framed: bool = False
    strict_read: bool = False


_CONVERTERS = {"port": (int, "integer"), "client_timeout": (float, "number")}


def _coerce(name: str, value: Any, prefix: str = "RPCMUX_") -> Any:
    if not isinstance(value, str):
        return value
    if name == "client_timeout" and not value.strip():
        return None
    if name in _CONVERTERS:
        convert, expected = _CONVERTERS[name]
        try:
            return convert(value)
        except ValueError as e:
            raise ConfigError(f"{prefix}{name.upper()}", value, expected) from e
    if name in ("framed", "strict_read"):
        return value.strip().lower() in _TRUE
    return value


def load_config_from_env(prefix: str = "RPCMUX_", **defaults: Any) -> ServerConfig:
    """
    Build ServerConfig from env: RPCMUX_HOST, RPCMUX_PORT, RPCMUX_CLIENT_TIMEOUT,
    RPCMUX_FRAMED, RPCMUX_STRICT_READ. Unknown keys are ignored; a
    malformed port or timeout raises ConfigError naming the variable.
    """
    known = {f.name for f in fields(ServerConfig)}
    raw = Config.load_from_env(prefix, **defaults)
    return ServerConfig(**{k: _coerce(k, v, prefix) for k, v in raw.items() if k in known})
