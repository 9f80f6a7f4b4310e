"""Chat client that sends typed lines and prints what others say."""

from __future__ import annotations

import argparse
import sys
import threading
from typing import Iterator, TextIO

from .message import Message
from .sockets import ClientSocket
from .user import User

DEFAULT_HOST = "192.168.31.49"
DEFAULT_PORT = 8001
CLIENT_ID_PREFIX = "client_id: "
PROMPT = "Enter msg to send: "

_POLL_INTERVAL = 0.01


class TCPClient:
    """A connection to the chat server with a background printer of replies."""

    def __init__(self, *, output: TextIO | None = None) -> None:
        self.output = output if output is not None else sys.stdout
        self.socket = ClientSocket()
        self.user: User | None = None
        self.listen_thread: threading.Thread | None = None
        self._stopped = threading.Event()

    def connect(self, host: str, port: int) -> None:
        """Connect, announce the client id and start printing incoming messages."""
        if self.user is not None:
            raise RuntimeError("client is already connected")
        self.socket.connect(host, port)
        self.user = User(self.socket, f"Client{self.socket.fileno()}")
        self.send(f"{CLIENT_ID_PREFIX}{self.user.user_id}")
        self.listen_thread = threading.Thread(target=self.listen, daemon=True)
        self.listen_thread.start()

    def send(self, text: str) -> None:
        """Send a line of text to the server."""
        if self.user is None:
            raise RuntimeError("client is not connected")
        self.user.send_response(Message(text, self.user.user_id or ""))

    def listen(self) -> None:
        """Print incoming messages until disconnected or the server goes away."""
        user = self.user
        if user is None:
            raise RuntimeError("client is not connected")
        while not self._stopped.is_set():
            reader = user.receive_thread
            finished = reader is not None and not reader.is_alive()
            message = user.get_last_message()
            if message is not None:
                print(message.content, file=self.output, flush=True)
                continue
            if finished:
                return
            self._stopped.wait(_POLL_INTERVAL)

    def disconnect(self) -> None:
        """Close the connection and stop listening."""
        self._stopped.set()
        if self.user is not None:
            self.user.close()
        else:
            self.socket.close()

    def __enter__(self) -> "TCPClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.disconnect()


def _prompted_lines(stream: TextIO, prompt_to: TextIO) -> Iterator[str]:
    while True:
        print(PROMPT, end="", file=prompt_to, flush=True)
        line = stream.readline()
        if not line:
            return
        yield line.rstrip("\r\n")


def main(argv: list[str] | None = None) -> int:
    """Send lines from standard input to the chat server until end of input."""
    parser = argparse.ArgumentParser(description="Chat with other clients of a server.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="server address")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="server port")
    args = parser.parse_args(argv)

    client = TCPClient()
    try:
        try:
            client.connect(args.host, args.port)
        except OSError as exc:
            print(f"Failed to connect to server: {exc}", file=sys.stderr)
            return 1
        for line in _prompted_lines(sys.stdin, sys.stdout):
            client.send(line)
    finally:
        client.disconnect()
    return 0


if __name__ == "__main__":
    sys.exit(main())