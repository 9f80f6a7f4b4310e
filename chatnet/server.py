"""Chat server that relays every message to the other connected users."""

from __future__ import annotations

import argparse
import logging
import queue
import sys
import threading
from typing import Any, TextIO

from .message import Message
from .sockets import ServerSocket
from .user import User

DEFAULT_HOST = "192.168.31.49"
DEFAULT_PORT = 8001
DEFAULT_CONNECTIONS = 2
CLIENT_ID_PREFIX = "client_id: "

_POLL_INTERVAL = 0.01

logger = logging.getLogger(__name__)


class TCPServer:
    """Accepts clients, learns their ids and broadcasts what each one says."""

    def __init__(
        self,
        host: str,
        port: int,
        connections_per_socket: int = DEFAULT_CONNECTIONS,
        *,
        output: TextIO | None = None,
    ) -> None:
        self.connections_per_socket = connections_per_socket
        self.output = output if output is not None else sys.stdout
        self.users: list[Any] = []
        self.received: queue.Queue[Message] = queue.Queue()
        self._users_lock = threading.Lock()
        self._console_lock = threading.Lock()
        self._stopped = threading.Event()
        self.server_socket = ServerSocket(host, port)
        try:
            self.server_socket.listen(connections_per_socket)
        except OSError:
            self.server_socket.close()
            raise
        self._accept_thread = threading.Thread(target=self._accept_loop, daemon=True)
        self._accept_thread.start()

    @property
    def address(self) -> tuple[str, int]:
        """The host and port the server listens on."""
        return self.server_socket.address

    def _accept_loop(self) -> None:
        while not self._stopped.is_set():
            try:
                connection = self.server_socket.accept()
            except OSError:
                if self._stopped.is_set():
                    return
                logger.exception("Failed to accept a connection")
                continue
            user = User(connection)
            with self._users_lock:
                self.users.append(user)
            threading.Thread(target=self._process_user, args=(user,), daemon=True).start()
            logger.info("Connection is accepted and running on %d", connection.fileno())

    def _process_user(self, user: Any) -> None:
        while not self._stopped.is_set():
            reader = getattr(user, "receive_thread", None)
            finished = reader is not None and not reader.is_alive()
            if self.handle(user):
                continue
            if finished:
                break
            self._stopped.wait(_POLL_INTERVAL)
        with self._users_lock:
            if user in self.users:
                self.users.remove(user)
        user.close()

    def handle(self, user: Any) -> bool:
        """Take one message from the user; return False if none was waiting.

        A user without an id can only announce one; messages from a known
        user are echoed to the console and queued for broadcasting.
        """
        message = user.get_last_message()
        if message is None:
            return False
        if user.user_id is not None:
            self.write_to_console(f"{user.user_id}: {message.content}")
            message.sender = user.user_id
            self.received.put(message)
        elif CLIENT_ID_PREFIX in message.content:
            user.user_id = message.content[len(CLIENT_ID_PREFIX):].rstrip("\r\n\0")
        return True

    def broadcast_pending(self) -> int:
        """Send every queued message to all identified users but its sender.

        Returns how many messages were broadcast.
        """
        count = 0
        while True:
            try:
                message = self.received.get_nowait()
            except queue.Empty:
                return count
            with self._users_lock:
                recipients = [
                    user for user in self.users
                    if user.user_id is not None and user.user_id != message.sender
                ]
            for user in recipients:
                try:
                    user.send_response(message)
                except OSError as exc:
                    logger.warning("Failed to deliver message to %s: %s", user.user_id, exc)
            count += 1

    def run(self) -> None:
        """Broadcast incoming messages until the server is shut down."""
        while not self._stopped.is_set():
            if not self.broadcast_pending():
                self._stopped.wait(_POLL_INTERVAL)

    def shutdown(self) -> None:
        """Stop accepting, close every connection and end run()."""
        if self._stopped.is_set():
            return
        self._stopped.set()
        self.server_socket.close()
        with self._users_lock:
            users = list(self.users)
            self.users.clear()
        for user in users:
            user.close()

    def write_to_console(self, text: str) -> None:
        """Print a line to the server's output."""
        with self._console_lock:
            print(text, file=self.output, flush=True)

    def __enter__(self) -> "TCPServer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


def main(argv: list[str] | None = None) -> int:
    """Run the chat server until interrupted."""
    parser = argparse.ArgumentParser(description="Relay chat messages between clients.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="address to bind to")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    parser.add_argument(
        "--connections", type=int, default=DEFAULT_CONNECTIONS, help="length of the accept queue"
    )
    args = parser.parse_args(argv)

    server = TCPServer(args.host, args.port, args.connections)
    try:
        server.run()
    except KeyboardInterrupt:
        pass
    finally:
        server.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())