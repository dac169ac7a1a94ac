# tpzero

A small TCP client and server that use a simple binary protocol. Every
frame starts with a 4-byte operation code (`OpCode.MESSAGE` = 0 or
`OpCode.PACKET` = 1). A 4-byte payload size follows, and then the payload.
Both integers are signed and little-endian.

- A message payload is a NUL-terminated UTF-8 string.
- A packet payload is a sequence of values. Each value carries its own
  4-byte length prefix.

## Installation

```
pip install .
```

To also install the test dependencies, add the `test` extra:

```
pip install ".[test]"
```

## Running the server

```
tpzero-server [--port PORT] [--log FILE]
```

By default the server listens on port 4444 on all IPv4 addresses and logs to
`log.log`. It accepts one client and then reads frames from it:

- For a message, it logs `Me llego el mensaje <text>`.
- For a packet, it logs each of the packet's values.
- For an unknown operation code, it logs a warning.

All log lines go to the log file and to the console. When the client
disconnects, the server logs an error and exits with status 1.

## Running the client

```
tpzero-client [--config FILE] [--log FILE]
```

The client reads `KEY=VALUE` lines from its configuration file, which is
`./cliente.config` by default. Blank lines and lines that start with `#` are
skipped. The file must define `IP`, `PUERTO` and `CLAVE`:

```
IP=127.0.0.1
PUERTO=4444
CLAVE=placeholder
```

The client logs at INFO level to `tp0.log` (by default) and to the console,
in this order:

1. It logs a greeting.
2. It logs the configured values.
3. It logs every line you type at the `>` prompt, until you enter an empty
   line or reach end of input.
4. It opens a TCP connection to `IP`:`PUERTO` and closes it again.

Exit status:

- 1 if the configuration file cannot be read.
- 3 if one of the three settings is missing.
- 0 otherwise.

## Using the library

```python
from tpzero.protocol import Packet, encode_message, decode_message, decode_values

packet = Packet()
packet.add("hello")        # strings are stored NUL-terminated
packet.add(b"raw bytes")   # bytes are stored as given
frame = packet.serialize()

data = encode_message("hi")
```

`decode_message(payload)` returns the text of a message payload.
`decode_values(payload)` splits a packet payload into a list of strings. It
raises `ValueError` if the payload is malformed.

The `tpzero.client` module provides:

- `start_logger`
- `parse_config` and `load_config`
- `read_console`
- `create_connection`
- `send_message` and `send_packet`

The `tpzero.server` module provides:

- `start_server` and `wait_for_client`
- `receive_operation`, which closes the socket and raises `ConnectionError`
  when the peer is gone
- `receive_buffer`, `receive_message` and `receive_packet`
- `handle_client`, which serves frames until the client disconnects

## What it does not do

The `tpzero-client` command sends nothing over the connection it opens. The
lines you type are only logged, and the `CLAVE` value is never transmitted.
To send messages or packets to the server, call `send_message` or
`send_packet` from your own code.

The server serves a single client and then stops.