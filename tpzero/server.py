"""Server: accepts one client and logs the frames it sends."""

from __future__ import annotations

import argparse
import logging
import socket
import sys

from tpzero.protocol import INT, OpCode, decode_message, decode_values

PORT = 4444
LOG_FORMAT = "[%(levelname)s] %(asctime)s %(name)s/(%(process)d): %(message)s"

logger = logging.getLogger("Servidor")


def start_server(host: str | None = None, port: int | str = PORT) -> socket.socket:
    """Return an IPv4 socket listening on ``host``:``port``."""
    family, socktype, proto, _, address = socket.getaddrinfo(
        host, port, socket.AF_INET, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
    )[0]
    sock = socket.socket(family, socktype, proto)
    try:
        if hasattr(socket, "SO_REUSEPORT"):
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
        sock.bind(address)
        sock.listen(socket.SOMAXCONN)
    except OSError:
        sock.close()
        raise
    logger.debug("Listo para escuchar a mi cliente")
    return sock


def wait_for_client(server_sock: socket.socket) -> socket.socket:
    """Accept the next client and return its socket."""
    logger.info("Se conecto un cliente!")
    client_sock, _ = server_sock.accept()
    return client_sock


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    data = bytearray()
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        if not chunk:
            raise ConnectionError("connection closed by peer")
        data += chunk
    return bytes(data)


def receive_operation(sock: socket.socket) -> int:
    """Read an operation code; close the socket and raise if the peer is gone."""
    try:
        (opcode,) = INT.unpack(_recv_exact(sock, INT.size))
    except OSError:
        sock.close()
        raise ConnectionError("client disconnected") from None
    return opcode


def receive_buffer(sock: socket.socket) -> bytes:
    """Read a size-prefixed payload."""
    (size,) = INT.unpack(_recv_exact(sock, INT.size))
    if size < 0:
        raise ValueError(f"invalid payload size {size}")
    return _recv_exact(sock, size)


def receive_message(sock: socket.socket) -> str:
    """Read a MESSAGE payload, log it and return its text."""
    message = decode_message(receive_buffer(sock))
    logger.info("Me llego el mensaje %s", message)
    return message


def receive_packet(sock: socket.socket) -> list[str]:
    """Read a PACKET payload and return its values."""
    return decode_values(receive_buffer(sock))


def handle_client(sock: socket.socket, logger: logging.Logger | None = None) -> None:
    """Serve frames from ``sock`` until the client disconnects."""
    log = logger or _module_logger()
    while True:
        try:
            opcode = receive_operation(sock)
        except ConnectionError:
            log.error("el cliente se desconecto. Terminando servidor")
            return
        if opcode == OpCode.MESSAGE:
            receive_message(sock)
        elif opcode == OpCode.PACKET:
            values = receive_packet(sock)
            log.info("Me llegaron los siguientes valores:")
            for value in values:
                log.info("%s", value)
        else:
            log.warning("Operacion desconocida. No quieras meter la pata")


def _module_logger() -> logging.Logger:
    return logging.getLogger("Servidor")


def _configure_logging(path: str) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT)
    for handler in (logging.FileHandler(path), logging.StreamHandler()):
        handler.setFormatter(formatter)
        logger.addHandler(handler)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="tpzero-server")
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--log", default="log.log")
    args = parser.parse_args(argv)

    _configure_logging(args.log)
    with start_server(None, args.port) as server_sock:
        logger.info("Servidor listo para recibir al cliente")
        client_sock = wait_for_client(server_sock)
        with client_sock:
            handle_client(client_sock, logger)
    return 1


if __name__ == "__main__":
    sys.exit(main())