"""TCP chat server and client built on a framed packet protocol."""

__version__ = "0.1.0"

__all__ = [
    "client",
    "message",
    "packet",
    "receiver",
    "sender",
    "server",
    "sockets",
    "user",
]