"""Wire format shared by the client and the server.

Every frame is a native 32-bit operation code, a 32-bit payload size and the
payload itself. A message payload is a NUL-terminated string. A packet
payload is a sequence of values, each prefixed by its own 32-bit length.
"""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field

INT = struct.Struct("<i")
HEADER = struct.Struct("<ii")


class OpCode(enum.IntEnum):
    """Kinds of frame understood by the server."""

    MESSAGE = 0
    PACKET = 1


def _to_bytes(value: str | bytes | bytearray | memoryview) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8") + b"\0"
    return bytes(value)


def _to_text(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


@dataclass
class Packet:
    """A frame carrying a list of length-prefixed values."""

    opcode: OpCode = OpCode.PACKET
    payload: bytearray = field(default_factory=bytearray)

    def add(self, value: str | bytes | bytearray | memoryview) -> None:
        """Append a value; strings are stored NUL-terminated."""
        data = _to_bytes(value)
        self.payload += INT.pack(len(data))
        self.payload += data

    def serialize(self) -> bytes:
        """Return the frame as it is sent on the wire."""
        return HEADER.pack(int(self.opcode), len(self.payload)) + bytes(self.payload)


def encode_message(message: str) -> bytes:
    """Build a MESSAGE frame holding ``message`` as a NUL-terminated string."""
    data = message.encode("utf-8") + b"\0"
    return HEADER.pack(int(OpCode.MESSAGE), len(data)) + data


def decode_message(payload: bytes) -> str:
    """Return the string held in a MESSAGE payload."""
    return _to_text(bytes(payload))


def decode_values(payload: bytes) -> list[str]:
    """Split a PACKET payload into its values."""
    data = bytes(payload)
    values: list[str] = []
    offset = 0
    while offset < len(data):
        if offset + INT.size > len(data):
            raise ValueError("truncated value length in packet payload")
        (size,) = INT.unpack_from(data, offset)
        offset += INT.size
        if size < 0 or offset + size > len(data):
            raise ValueError(f"invalid value length {size} in packet payload")
        values.append(_to_text(data[offset:offset + size]))
        offset += size
    return values