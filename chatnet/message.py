"""Chat messages and their splitting into fixed-size chunks."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Message:
    """Text content with its sender and a cursor for chunked reading."""

    content: str = ""
    sender: str = ""
    _pointer: int = field(default=0, repr=False, compare=False)

    @property
    def size(self) -> int:
        """Length of the content."""
        return len(self.content)

    def get_chunk(self, chunk_size: int) -> str:
        """Return the next chunk of content, wrapping to the start once exhausted."""
        if self._pointer >= len(self.content):
            self._pointer = 0
        chunk = self.content[self._pointer:self._pointer + chunk_size]
        self._pointer += chunk_size
        return chunk

    def clear(self) -> None:
        """Drop the content and rewind the chunk cursor."""
        self.content = ""
        self._pointer = 0

    def update(self, new_content: str) -> None:
        """Replace the content, keeping the chunk cursor where it is."""
        self.content = new_content

    def copy(self) -> "Message":
        """Return a fresh message with the same content and sender."""
        return Message(self.content, self.sender)