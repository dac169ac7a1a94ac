import io
import socket

import pytest

from tpzero import client
from tpzero.protocol import HEADER, OpCode, Packet, decode_message, decode_values


@pytest.fixture
def listener():
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.bind(("127.0.0.1", 0))
    srv.listen()
    yield srv
    srv.close()


def _recv_all(sock):
    chunks = []
    while chunk := sock.recv(4096):
        chunks.append(chunk)
    return b"".join(chunks)


def test_parse_config_reads_pairs_and_skips_comments():
    text = "# comentario\nIP=127.0.0.1\n\nPUERTO = 4444\nCLAVE=a=b\nsuelto\n"
    assert client.parse_config(text) == {
        "IP": "127.0.0.1",
        "PUERTO": "4444",
        "CLAVE": "a=b",
    }


def test_load_config_from_file(tmp_path):
    path = tmp_path / "cliente.config"
    path.write_text("IP=localhost\nCLAVE=hola\n", encoding="utf-8")
    assert client.load_config(path) == {"IP": "localhost", "CLAVE": "hola"}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        client.load_config(tmp_path / "nada.config")


def test_read_console_stops_at_empty_line(tmp_path):
    log_path = tmp_path / "tp0.log"
    logger = client.start_logger(log_path)
    read = client.read_console(logger, ["uno\n", "dos", "", "tres"])
    assert read == ["uno", "dos"]
    content = log_path.read_text(encoding="utf-8")
    assert "uno" in content and "dos" in content
    assert "tres" not in content


def test_read_console_stops_at_end_of_input(tmp_path):
    logger = client.start_logger(tmp_path / "tp0.log")
    assert client.read_console(logger, iter(["a", "b"])) == ["a", "b"]


def test_send_message_over_connection(listener):
    port = listener.getsockname()[1]
    with client.create_connection("127.0.0.1", str(port)) as sock:
        peer, _ = listener.accept()
        client.send_message("hola", sock)
    with peer:
        data = _recv_all(peer)
    opcode, size = HEADER.unpack_from(data)
    assert opcode == OpCode.MESSAGE
    assert decode_message(data[HEADER.size:HEADER.size + size]) == "hola"


def test_send_packet_over_connection(listener):
    port = listener.getsockname()[1]
    packet = Packet()
    packet.add("uno")
    packet.add("dos")
    with client.create_connection("127.0.0.1", port) as sock:
        peer, _ = listener.accept()
        client.send_packet(packet, sock)
    with peer:
        data = _recv_all(peer)
    assert data == packet.serialize()
    assert decode_values(data[HEADER.size:]) == ["uno", "dos"]


def test_create_connection_refused(listener):
    port = listener.getsockname()[1]
    listener.close()
    with pytest.raises(OSError):
        client.create_connection("127.0.0.1", port)


def test_main_missing_keys_exits_with_three(tmp_path):
    config = tmp_path / "cliente.config"
    config.write_text("IP=127.0.0.1\n", encoding="utf-8")
    assert client.main(["--config", str(config), "--log", str(tmp_path / "tp0.log")]) == 3


def test_main_missing_config_fails(tmp_path):
    result = client.main(
        ["--config", str(tmp_path / "nada"), "--log", str(tmp_path / "tp0.log")]
    )
    assert result == 1


def test_main_logs_and_connects(tmp_path, listener, monkeypatch):
    port = listener.getsockname()[1]
    config = tmp_path / "cliente.config"
    config.write_text(f"IP=127.0.0.1\nPUERTO={port}\nCLAVE=hola\n", encoding="utf-8")
    log_path = tmp_path / "tp0.log"
    monkeypatch.setattr("sys.stdin", io.StringIO("primera\n\nignorada\n"))

    assert client.main(["--config", str(config), "--log", str(log_path)]) == 0

    peer, _ = listener.accept()
    with peer:
        assert _recv_all(peer) == b""
    content = log_path.read_text(encoding="utf-8")
    assert "Hola! Soy un log" in content
    assert "Clave: hola" in content
    assert "primera" in content
    assert "ignorada" not in content