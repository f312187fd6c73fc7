"""Demo services served by `rpcmux serve`: Calculator and WeatherReport on one port."""
from __future__ import annotations

import random

from rpcmux.core.errors import ApplicationError, ApplicationErrorType
from rpcmux.core.message import TType
from rpcmux.core.protocol import Codec
from rpcmux.mux import MultiplexedCodec, MultiplexedProcessor
from rpcmux.service import ServiceClient, ServiceProcessor

CALCULATOR = "Calculator"
WEATHER_REPORT = "WeatherReport"


def _add(args: dict) -> int:
    return args.get(1, 0) + args.get(2, 0)


def _divide(args: dict) -> int:
    if args.get(2, 0) == 0:
        raise ApplicationError(ApplicationErrorType.INTERNAL_ERROR, "division by zero")
    return args.get(1, 0) // args[2]


def calculator_processor() -> ServiceProcessor:
    return (
        ServiceProcessor(CALCULATOR)
        .method("ping", lambda args: "pong", result_type=TType.STRING)
        .method("add", _add, result_type=TType.I32)
        .method("divide", _divide, result_type=TType.I32)
    )


def weather_processor(temperature: float | None = None) -> ServiceProcessor:
    def get_temperature(args: dict) -> float:
        return temperature if temperature is not None else round(random.uniform(-10.0, 35.0), 1)

    return (
        ServiceProcessor(WEATHER_REPORT)
        .method("ping", lambda args: "pong", result_type=TType.STRING)
        .method("getTemperature", get_temperature, result_type=TType.DOUBLE)
    )


def demo_processor(temperature: float | None = None) -> MultiplexedProcessor:
    return (
        MultiplexedProcessor()
        .register_processor(CALCULATOR, calculator_processor())
        .register_processor(WEATHER_REPORT, weather_processor(temperature))
    )


class CalculatorClient(ServiceClient):
    def __init__(self, codec: Codec) -> None:
        super().__init__(MultiplexedCodec(codec, CALCULATOR))

    def add(self, a: int, b: int) -> int:
        return self.call("add", [(1, TType.I32, a), (2, TType.I32, b)], TType.I32)

    def divide(self, a: int, b: int) -> int:
        return self.call("divide", [(1, TType.I32, a), (2, TType.I32, b)], TType.I32)


class WeatherReportClient(ServiceClient):
    def __init__(self, codec: Codec) -> None:
        super().__init__(MultiplexedCodec(codec, WEATHER_REPORT))

    def get_temperature(self) -> float:
        return self.call("getTemperature", result_type=TType.DOUBLE)
