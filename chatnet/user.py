"""A connected chat participant with a background message reader."""

from __future__ import annotations

import logging
import queue
import socket
import threading
from contextlib import suppress
from typing import Any

from .message import Message
from .packet import PacketError
from .receiver import MessageReceiver
from .sender import MessageSender

logger = logging.getLogger(__name__)


class User:
    """One end of a chat connection: queues incoming messages and sends replies."""

    def __init__(self, connection: Any, user_id: str | None = None, *, start_receiving: bool = True) -> None:
        self.connection = connection
        self.user_id = user_id
        self._receiver = MessageReceiver()
        self._sender = MessageSender()
        self._incoming: queue.Queue[Message] = queue.Queue()
        self._send_lock = threading.Lock()
        self.receive_thread: threading.Thread | None = None
        if start_receiving:
            self.receive_thread = threading.Thread(target=self.receive_messages, daemon=True)
            self.receive_thread.start()

    def receive_messages(self) -> None:
        """Read messages into the incoming queue until the connection ends."""
        while True:
            try:
                message = self._receiver.retrieve_last_message(self.connection)
            except PacketError as exc:
                logger.warning("Dropping malformed packet data: %s", exc)
                continue
            except OSError:
                return
            self._incoming.put(message)

    def get_last_message(self) -> Message | None:
        """Return the oldest queued message, or None if none has arrived."""
        try:
            return self._incoming.get_nowait()
        except queue.Empty:
            return None

    def send_response(self, message: Message) -> None:
        """Send a message over this user's connection."""
        with self._send_lock:
            self._sender.send(message, self.connection)

    def close(self) -> None:
        """Shut the connection down, which also ends the reader thread."""
        with suppress(OSError):
            self.connection.shutdown(socket.SHUT_RDWR)
        self.connection.close()