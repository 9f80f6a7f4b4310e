"""Reassembly of chat messages from framed packets read off a connection."""

from __future__ import annotations

import logging
from collections import deque
from typing import Protocol

from .message import Message
from .packet import PACKET_BEGIN, PACKET_END, Packet, PacketError, ServiceInfo

BUFFER_SIZE = 1024

_BEGIN = PACKET_BEGIN.encode("utf-8")
_END = PACKET_END.encode("utf-8")

logger = logging.getLogger(__name__)


class _Readable(Protocol):
    def recv(self, bufsize: int) -> bytes: ...


def split_into_packets(data: bytes) -> list[bytes]:
    """Cut raw bytes into pieces that run from a begin marker to the next end marker.

    Anything after the last complete piece is dropped.
    """
    pieces: list[bytes] = []
    start = 0
    while start < len(data):
        begin = data.find(_BEGIN, start)
        end = data.find(_END, start)
        if begin < 0 or end < 0:
            break
        stop = end + len(_END)
        pieces.append(data[begin:stop])
        start = stop
    return pieces


class MessageReceiver:
    """Collects packets into messages framed by start and end packets."""

    def __init__(self) -> None:
        self._receiving = False
        self._packets: list[Packet] = []
        self._service_info: ServiceInfo | None = None
        self._pending: deque[Message] = deque()

    def feed(self, data: bytes) -> list[Message]:
        """Process raw bytes and return the messages they complete.

        Packets that cannot be decoded count as empty. A message whose length
        differs from the size its header announced is dropped, as are empty
        messages.
        """
        finished: list[Message] = []
        for piece in split_into_packets(data):
            try:
                packet = Packet.deserialize(piece)
            except PacketError:
                packet = Packet()

            if not self._receiving and packet.is_msg_start():
                self._service_info = packet.service_info()
                self._receiving = True
            elif self._receiving and packet.is_msg_end():
                self._receiving = False
                message = self._compose()
                self._service_info = None
                self._packets.clear()
                if message is not None:
                    finished.append(message)
            else:
                self._packets.append(packet)
        return finished

    def _compose(self) -> Message | None:
        content = "".join(packet.body for packet in self._packets)
        expected = self._service_info.size if self._service_info else 0
        if len(content) != expected:
            logger.warning(
                "Received msg is corrupted, expected %d bytes, got %d bytes.",
                expected,
                len(content),
            )
            return None
        if not content:
            return None
        return Message(content)

    def retrieve_last_message(self, connection: _Readable) -> Message:
        """Block until a complete message has been read from the connection.

        Raises ConnectionError when the peer closes the connection first.
        """
        while not self._pending:
            data = connection.recv(BUFFER_SIZE)
            if not data:
                raise ConnectionError("connection closed by peer")
            self._pending.extend(self.feed(data))
        return self._pending.popleft()