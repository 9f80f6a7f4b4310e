"""Thin TCP socket wrappers for the chat server and its clients."""

from __future__ import annotations

import logging
import socket
from contextlib import suppress

logger = logging.getLogger(__name__)


class ClientSocket:
    """A TCP connection with Nagle's algorithm switched off."""

    def __init__(self, sock: socket.socket | None = None) -> None:
        self.raw = sock if sock is not None else socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.raw.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

    def connect(self, host: str, port: int) -> None:
        """Connect to a listening server."""
        self.raw.connect((host, port))

    def recv(self, bufsize: int) -> bytes:
        return self.raw.recv(bufsize)

    def sendall(self, data: bytes) -> None:
        self.raw.sendall(data)

    def fileno(self) -> int:
        return self.raw.fileno()

    def shutdown(self, how: int = socket.SHUT_RDWR) -> None:
        """Stop traffic in the given direction, ignoring an unconnected socket."""
        with suppress(OSError):
            self.raw.shutdown(how)

    def close(self) -> None:
        self.raw.close()

    def __enter__(self) -> "ClientSocket":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ServerSocket:
    """A bound TCP socket that accepts client connections."""

    def __init__(self, host: str, port: int) -> None:
        self.raw = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            self.raw.bind((host, port))
        except OSError:
            self.raw.close()
            raise

    @property
    def address(self) -> tuple[str, int]:
        """The host and port the socket is bound to."""
        host, port = self.raw.getsockname()[:2]
        return host, port

    def listen(self, backlog: int) -> None:
        """Start accepting connections with the given queue length."""
        self.raw.listen(backlog)
        host, port = self.address
        logger.info("Started listening on address: %s port: %d", host, port)

    def accept(self) -> ClientSocket:
        """Wait for the next client and return its connection."""
        connection, _ = self.raw.accept()
        return ClientSocket(connection)

    def close(self) -> None:
        host, port = self.address if self.raw.fileno() >= 0 else ("", 0)
        with suppress(OSError):
            self.raw.shutdown(socket.SHUT_RDWR)
        self.raw.close()
        logger.info("Stopped socket on address: %s port: %d", host, port)

    def __enter__(self) -> "ServerSocket":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()