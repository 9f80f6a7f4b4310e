"""Framed packets: the smallest unit written to and read from a connection."""

from __future__ import annotations

import re
import struct
from dataclasses import dataclass

PACKET_BEGIN = "PB->"
PACKET_END = "<-PE"
MSG_BEGIN = "MPB->"
MSG_END = "<-MPE"

_INT = struct.Struct("<i")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class PacketError(ValueError):
    """Raised when a packet cannot be decoded or carries no valid header."""


@dataclass(frozen=True)
class ServiceInfo:
    """Header data announced at the start of a message."""

    size: int = 0


class _Reader:
    """Sequential reader over a byte string that fails on short reads."""

    def __init__(self, data: bytes) -> None:
        self._data = memoryview(data)
        self._offset = 0

    def read(self, count: int) -> bytes:
        if count < 0:
            raise PacketError(f"negative length {count} in packet")
        end = self._offset + count
        if end > len(self._data):
            raise PacketError("packet is truncated")
        chunk = bytes(self._data[self._offset:end])
        self._offset = end
        return chunk

    def read_int(self) -> int:
        return _INT.unpack(self.read(_INT.size))[0]


def _pack_field(text: str) -> bytes:
    raw = text.encode("utf-8")
    return _INT.pack(len(raw)) + raw


@dataclass
class Packet:
    """A single framed chunk of text."""

    body: str = ""

    def serialize(self) -> bytes:
        """Encode the packet with its begin and end markers."""
        return _pack_field(PACKET_BEGIN) + _pack_field(self.body) + _pack_field(PACKET_END)

    @classmethod
    def deserialize(cls, data: bytes) -> "Packet":
        """Decode a packet whose data starts at the begin marker.

        The length prefix of the begin marker is not part of the input; the
        receiver locates packets by searching for the marker itself.
        """
        reader = _Reader(bytes(data))
        begin = PACKET_BEGIN.encode("utf-8")
        if reader.read(len(begin)) != begin:
            raise PacketError("packet does not start with the begin marker")

        body_size = reader.read_int()
        try:
            body = reader.read(body_size).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PacketError("packet body is not valid UTF-8") from exc

        end_size = reader.read_int()
        if reader.read(end_size) != PACKET_END.encode("utf-8"):
            raise PacketError("packet does not finish with the end marker")
        return cls(body)

    def is_msg_start(self) -> bool:
        """True if this packet opens a message."""
        return self.body.startswith(MSG_BEGIN)

    def is_msg_end(self) -> bool:
        """True if this packet closes a message."""
        return self.body == MSG_END

    def service_info(self) -> ServiceInfo | None:
        """Parse the size announced by a message-start packet.

        Returns None for packets that do not open a message.
        """
        if not self.is_msg_start():
            return None
        last_space = self.body.rfind(" ")
        if last_space < 0:
            raise PacketError("message header carries no size")
        match = _LEADING_INT.match(self.body, last_space)
        if match is None:
            raise PacketError(f"invalid size in message header {self.body!r}")
        size = int(match.group(1))
        if not _INT_MIN <= size <= _INT_MAX:
            raise PacketError(f"size out of range in message header {self.body!r}")
        return ServiceInfo(size)