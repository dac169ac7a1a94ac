"""Client: logs, reads its configuration and console, then connects."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path

from tpzero.protocol import Packet, encode_message

LOG_FORMAT = "[%(levelname)s] %(asctime)s %(name)s/(%(process)d): %(message)s"
REQUIRED_KEYS = ("IP", "PUERTO", "CLAVE")


def start_logger(path: str | Path = "tp0.log") -> logging.Logger:
    """Return the "TP0" logger writing at INFO level to ``path`` and the console."""
    logger = logging.getLogger("TP0")
    _close_logger(logger)
    logger.setLevel(logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)
    for handler in (logging.FileHandler(path), logging.StreamHandler()):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def _close_logger(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def parse_config(text: str) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines, skipping blank lines and ``#`` comments."""
    config: dict[str, str] = {}
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        key, sep, value = stripped.partition("=")
        if sep:
            config[key.strip()] = value.strip()
    return config


def load_config(path: str | Path = "./cliente.config") -> dict[str, str]:
    """Read and parse the configuration file at ``path``."""
    return parse_config(Path(path).read_text(encoding="utf-8"))


def _console_lines() -> Iterator[str]:
    while True:
        try:
            yield input(">")
        except EOFError:
            return


def read_console(logger: logging.Logger, lines: Iterable[str] | None = None) -> list[str]:
    """Log each line until an empty one or the end of input; return those logged."""
    read: list[str] = []
    for line in _console_lines() if lines is None else lines:
        line = line.rstrip("\r\n")
        if not line:
            break
        logger.info("%s", line)
        read.append(line)
    return read


def create_connection(ip: str, port: str | int) -> socket.socket:
    """Open a TCP connection over IPv4 to ``ip``:``port``."""
    family, socktype, proto, _, address = socket.getaddrinfo(
        ip, port, socket.AF_INET, socket.SOCK_STREAM
    )[0]
    sock = socket.socket(family, socktype, proto)
    try:
        sock.connect(address)
    except OSError:
        sock.close()
        raise
    return sock


def send_message(message: str, sock: socket.socket) -> None:
    """Send ``message`` as a MESSAGE frame."""
    sock.sendall(encode_message(message))


def send_packet(packet: Packet, sock: socket.socket) -> None:
    """Send ``packet`` as one frame."""
    sock.sendall(packet.serialize())


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="tpzero-client")
    parser.add_argument("--config", default="./cliente.config")
    parser.add_argument("--log", default="tp0.log")
    args = parser.parse_args(argv)

    try:
        logger = start_logger(args.log)
    except OSError:
        print("No se ha podido crear el logger ")
        return 1
    logger.info("Hola! Soy un log")

    try:
        config = load_config(args.config)
    except OSError:
        print("No pude leer la config ")
        _close_logger(logger)
        return 1
    if any(key not in config for key in REQUIRED_KEYS):
        _close_logger(logger)
        return 3

    clave, ip, puerto = config["CLAVE"], config["IP"], config["PUERTO"]
    logger.info("Clave: %s, Direccion IP: %s, Numero de Puerto: %s", clave, ip, puerto)

    read_console(logger)
    _close_logger(logger)

    with create_connection(ip, puerto):
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())