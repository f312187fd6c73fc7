"""
Two services, one port, one client connection.
To run: python examples/multiplexed/main.py
"""
import threading

from rpcmux import BinaryCodec, MultiplexedCodec, MultiplexedProcessor, ServiceClient, ServiceProcessor, SimpleServer, TType
from rpcmux.transport import FramedTransport, FramedTransportFactory, ServerSocket, SocketTransport

calculator = ServiceProcessor("Calculator").method("add", lambda args: args[1] + args[2], result_type=TType.I32)
weather = ServiceProcessor("WeatherReport").method("getTemperature", lambda args: 21.5, result_type=TType.DOUBLE)
legacy = ServiceProcessor("Legacy").method("ping", lambda args: "pong from default", result_type=TType.STRING)

processor = (
    MultiplexedProcessor()
    .register_processor("Calculator", calculator)
    .register_processor("WeatherReport", weather)
    .register_default(legacy)
)

server = SimpleServer(processor, ServerSocket("127.0.0.1", 0), transport_factory=FramedTransportFactory())
threading.Thread(target=server.serve, daemon=True).start()
server.wait_until_listening(5)
host, port = server.address

# One connection shared by three clients: two multiplexed, one plain (routed to the default).
transport = FramedTransport(SocketTransport(host, port))
transport.open()
codec = BinaryCodec(transport)

calculator_client = ServiceClient(MultiplexedCodec(codec, "Calculator"))
weather_client = ServiceClient(MultiplexedCodec(codec, "WeatherReport"))
legacy_client = ServiceClient(codec)

print("2 + 2 =", calculator_client.call("add", [(1, TType.I32, 2), (2, TType.I32, 2)], TType.I32))
print("temperature:", weather_client.call("getTemperature", result_type=TType.DOUBLE))
print("legacy:", legacy_client.call("ping", result_type=TType.STRING))

transport.close()
server.stop()
