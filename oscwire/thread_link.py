"""A ring buffer that passes OSC messages from one thread to another."""

from __future__ import annotations

import threading
from typing import Any, Sequence

from oscwire.message import MessageTooLong, build_message, message_length


class ThreadLink:
    """Single producer, single consumer queue of serialized OSC messages.

    Besides the normal read queue there is a lookahead queue: lookahead
    reads advance only their own position, and every normal read resets
    the lookahead position to the read position.
    """

    def __init__(self, max_message_length: int, max_messages: int) -> None:
        if max_message_length <= 0 or max_messages <= 0:
            raise ValueError("message length and message count must be positive")
        self._max_message = max_message_length
        self._size = max_message_length * max_messages
        self._ring = bytearray(self._size)
        self._write_pos = 0
        self._read_pos = 0
        self._lookahead_pos = 0
        self._last = b""
        self._lock = threading.Lock()

    def _read_size(self, lookahead: bool) -> int:
        start = self._lookahead_pos if lookahead else self._read_pos
        return (self._write_pos - start + self._size) % self._size

    def _write_size(self) -> int:
        # One byte stays free so that full and empty can be told apart.
        if self._read_pos == self._write_pos:
            return self._size - 1
        return (self._read_pos - self._write_pos + self._size) % self._size - 1

    def _push(self, data: bytes) -> bool:
        with self._lock:
            if self._write_size() < len(data):
                return False
            start = self._write_pos
            end = start + len(data)
            if end <= self._size:
                self._ring[start:end] = data
            else:
                first = self._size - start
                self._ring[start:] = data[:first]
                self._ring[:len(data) - first] = data[first:]
            self._write_pos = end % self._size
            return True

    def _readable(self, lookahead: bool) -> bytes:
        start = self._lookahead_pos if lookahead else self._read_pos
        end = start + self._read_size(lookahead)
        if end <= self._size:
            return bytes(self._ring[start:end])
        return bytes(self._ring[start:]) + bytes(self._ring[:end - self._size])

    def write(self, dest: str | bytes, types: str, *args: Any) -> bool:
        """Queue a message; return False if it was dropped for lack of space."""
        try:
            msg = build_message(dest, types, *args, max_length=self._max_message)
        except MessageTooLong:
            return False
        return self._push(msg)

    def write_array(self, dest: str | bytes, types: str, args: Sequence[Any]) -> bool:
        """Queue a message whose arguments come as a sequence."""
        return self.write(dest, types, *args)

    def raw_write(self, msg: bytes) -> bool:
        """Queue an already serialized message or bundle."""
        data = bytes(msg)
        length = message_length(data)
        if not length:
            raise ValueError("data does not start with a complete message")
        return self._push(data[:length])

    def has_next(self) -> bool:
        """Tell whether a message waits in the read queue."""
        with self._lock:
            return self._read_size(False) > 0

    def has_next_lookahead(self) -> bool:
        """Tell whether a message waits in the lookahead queue."""
        with self._lock:
            return self._read_size(True) > 0

    def _read(self, lookahead: bool) -> bytes:
        with self._lock:
            available = self._readable(lookahead)
            if not available:
                raise LookupError("no message to read")
            length = message_length(available)
            if not length:
                raise ValueError("queue does not hold a complete message")
            if length > self._max_message:
                raise ValueError("queued message exceeds the maximum length")
            start = self._lookahead_pos if lookahead else self._read_pos
            following = (start + length) % self._size
            if lookahead:
                self._lookahead_pos = following
            else:
                self._read_pos = self._lookahead_pos = following
            self._last = available[:length]
            return self._last

    def read(self) -> bytes:
        """Take the next message from the read queue."""
        return self._read(False)

    def read_lookahead(self) -> bytes:
        """Take the next message from the lookahead queue."""
        return self._read(True)

    def peek(self) -> bytes:
        """Return the message read last, without reading another."""
        return self._last

    def buffer_size(self) -> int:
        """Return the size of the ring buffer in bytes."""
        return self._size