"""Tests for the rpcmux CLI against a running demo server."""
from __future__ import annotations

import socket

from typer.testing import CliRunner

from rpcmux.cli.demo import demo_processor
from rpcmux.cli.main import app
from rpcmux.transport import FramedTransportFactory

runner = CliRunner()


def _port(server) -> str:
    return str(server.address[1])


def test_add(serve) -> None:
    server = serve(demo_processor())
    result = runner.invoke(app, ["add", "2", "3", "--host", "127.0.0.1", "--port", _port(server)])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "5"


def test_temperature(serve) -> None:
    server = serve(demo_processor(temperature=19.5))
    result = runner.invoke(app, ["temperature", "--host", "127.0.0.1", "--port", _port(server)])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "19.5"


def test_ping_known_service(serve) -> None:
    server = serve(demo_processor())
    result = runner.invoke(app, ["ping", "WeatherReport", "--host", "127.0.0.1", "--port", _port(server)])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "pong"


def test_ping_unknown_service_fails(serve) -> None:
    server = serve(demo_processor())
    result = runner.invoke(app, ["ping", "Unknown", "--host", "127.0.0.1", "--port", _port(server)])
    assert result.exit_code == 1


def test_env_config(serve, monkeypatch) -> None:
    server = serve(demo_processor())
    monkeypatch.setenv("RPCMUX_HOST", "127.0.0.1")
    monkeypatch.setenv("RPCMUX_PORT", _port(server))
    result = runner.invoke(app, ["add", "20", "22"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "42"


def test_connection_refused() -> None:
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]
    result = runner.invoke(app, ["add", "1", "2", "--host", "127.0.0.1", "--port", str(port)])
    assert result.exit_code == 1


def test_add_out_of_range_fails_cleanly(serve) -> None:
    server = serve(demo_processor())
    result = runner.invoke(app, ["add", "3000000000", "1", "--host", "127.0.0.1", "--port", _port(server)])
    assert result.exit_code == 1
    assert "INVALID_DATA" in result.output


def test_framed_flag(serve) -> None:
    server = serve(demo_processor(), transport_factory=FramedTransportFactory())
    result = runner.invoke(app, ["add", "4", "5", "--framed", "--host", "127.0.0.1", "--port", _port(server)])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "9"


def test_malformed_env_port(monkeypatch) -> None:
    monkeypatch.setenv("RPCMUX_PORT", "abc")
    result = runner.invoke(app, ["add", "1", "2"])
    assert result.exit_code == 1
    assert "RPCMUX_PORT" in result.output
