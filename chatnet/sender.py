"""Splitting of chat messages into framed packets and writing them out."""

from __future__ import annotations

from typing import Protocol

from .message import Message
from .packet import MSG_BEGIN, MSG_END, Packet

PACKET_SIZE = 50


class _Writable(Protocol):
    def sendall(self, data: bytes) -> None: ...


class MessageSender:
    """Encodes a message as a start packet, content chunks and an end packet."""

    def __init__(self, packet_size: int = PACKET_SIZE) -> None:
        if packet_size <= 0:
            raise ValueError("packet size must be positive")
        self.packet_size = packet_size

    def encode(self, message: Message) -> list[bytes]:
        """Return the serialized packets for a message, in sending order.

        Content goes out in chunks of packet_size; the first chunk shorter than
        that, possibly empty, is the last one.
        """
        frames = [Packet(f"{MSG_BEGIN}<size>: {message.size}").serialize()]
        content = message.content
        start = 0
        while True:
            chunk = content[start:start + self.packet_size]
            frames.append(Packet(chunk).serialize())
            start += self.packet_size
            if len(chunk) < self.packet_size:
                break
        frames.append(Packet(MSG_END).serialize())
        return frames

    def send(self, message: Message, connection: _Writable) -> None:
        """Write every packet of the message to the connection."""
        for frame in self.encode(message):
            connection.sendall(frame)