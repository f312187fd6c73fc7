"""
CLI: serve the multiplexed demo services and call them.
Host, port and framing default to RPCMUX_* environment variables.
"""
from __future__ import annotations

import logging
from typing import Optional

import typer

from rpcmux.cli.demo import CalculatorClient, WeatherReportClient, demo_processor
from rpcmux.codec import BinaryCodec, BinaryCodecFactory
from rpcmux.core.config import ServerConfig, load_config_from_env
from rpcmux.core.errors import ConfigError, RpcError
from rpcmux.core.message import TType
from rpcmux.mux import MultiplexedCodec
from rpcmux.server import SimpleServer
from rpcmux.service import ServiceClient
from rpcmux.transport import (
    BufferedTransport,
    BufferedTransportFactory,
    FramedTransport,
    FramedTransportFactory,
    ServerSocket,
    SocketTransport,
)
from rpcmux.transport.base import TransportBase

app = typer.Typer(help="rpcmux CLI: several services on one port.")

HostOption = typer.Option(None, "--host", "-h", help="Host (default: RPCMUX_HOST or 127.0.0.1)")
PortOption = typer.Option(None, "--port", "-p", help="Port (default: RPCMUX_PORT or 9090)")
FramedOption = typer.Option(
    None, "--framed/--buffered", help="Framed or buffered (unframed) transport (default: RPCMUX_FRAMED, else buffered)"
)
TimeoutOption = typer.Option(None, "--timeout", "-t", help="Socket timeout in seconds")


@app.callback()
def main_callback(
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="Logging level"),
) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _config(host: Optional[str], port: Optional[int], framed: Optional[bool], timeout: Optional[float]) -> ServerConfig:
    try:
        config = load_config_from_env()
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    if host is not None:
        config.host = host
    if port is not None:
        config.port = port
    if framed is not None:
        config.framed = framed
    if timeout is not None:
        config.client_timeout = timeout
    return config


def _connect(config: ServerConfig) -> TransportBase:
    transport: TransportBase = SocketTransport(config.host, config.port, config.client_timeout)
    transport = FramedTransport(transport) if config.framed else BufferedTransport(transport)
    try:
        transport.open()
    except RpcError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    return transport


def _run(fn):
    try:
        return fn()
    except RpcError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def serve(
    host: Optional[str] = HostOption,
    port: Optional[int] = PortOption,
    framed: Optional[bool] = FramedOption,
    timeout: Optional[float] = TimeoutOption,
    temperature: Optional[float] = typer.Option(None, help="Fixed temperature for WeatherReport (default: random)"),
) -> None:
    """Serve Calculator and WeatherReport multiplexed on one port (Ctrl+C to stop)."""
    config = _config(host, port, framed, timeout)
    server = SimpleServer(
        demo_processor(temperature),
        ServerSocket(config.host, config.port, config.client_timeout),
        transport_factory=FramedTransportFactory() if config.framed else BufferedTransportFactory(),
        codec_factory=BinaryCodecFactory(strict_read=config.strict_read),
    )
    typer.echo(f"Serving Calculator, WeatherReport on {config.host}:{config.port}")
    try:
        server.serve()
    except KeyboardInterrupt:
        server.stop()


@app.command()
def add(
    a: int = typer.Argument(..., help="First operand"),
    b: int = typer.Argument(..., help="Second operand"),
    host: Optional[str] = HostOption,
    port: Optional[int] = PortOption,
    framed: Optional[bool] = FramedOption,
    timeout: Optional[float] = TimeoutOption,
) -> None:
    """Call Calculator:add and print the sum."""
    with _connect(_config(host, port, framed, timeout)) as transport:
        client = CalculatorClient(BinaryCodec(transport))
        typer.echo(_run(lambda: client.add(a, b)))


@app.command()
def temperature(
    host: Optional[str] = HostOption,
    port: Optional[int] = PortOption,
    framed: Optional[bool] = FramedOption,
    timeout: Optional[float] = TimeoutOption,
) -> None:
    """Call WeatherReport:getTemperature."""
    with _connect(_config(host, port, framed, timeout)) as transport:
        client = WeatherReportClient(BinaryCodec(transport))
        typer.echo(_run(client.get_temperature))


@app.command()
def ping(
    service: str = typer.Argument(..., help="Service name, e.g. Calculator"),
    host: Optional[str] = HostOption,
    port: Optional[int] = PortOption,
    framed: Optional[bool] = FramedOption,
    timeout: Optional[float] = TimeoutOption,
) -> None:
    """Call <service>:ping over the shared endpoint."""
    with _connect(_config(host, port, framed, timeout)) as transport:
        client = ServiceClient(MultiplexedCodec(BinaryCodec(transport), service))
        typer.echo(_run(lambda: client.call("ping", result_type=TType.STRING)))


def main() -> None:
    """Entry point for the rpcmux console command."""
    app()


if __name__ == "__main__":
    main()
