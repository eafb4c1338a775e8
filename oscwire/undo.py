"""History of parameter changes that can be undone and redone.

Each recorded event is a message whose arguments are the address of the
changed parameter, its old value and its new value, e.g. types ``sff``.
"""

from __future__ import annotations

import time
from typing import Callable

from oscwire.message import (
    MessageTooLong,
    argument,
    argument_string,
    build_message,
    message_length,
)

_REPLY_LIMIT = 256
_MERGE_SECONDS = 2


def undo_address(msg: bytes) -> str:
    """Return the address of the parameter an undo event changes."""
    return argument(msg, 0)


def _address(msg: bytes) -> bytes:
    return bytes(msg).split(b"\0", 1)[0]


class UndoHistory:
    """Bounded list of change events with a current position."""

    max_history_size = 20

    def __init__(
        self,
        callback: Callable[[bytes], None] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._history: list[tuple[float, bytes]] = []
        self._pos = 0
        self._callback = callback
        self._clock = clock

    def set_callback(self, callback: Callable[[bytes], None]) -> None:
        """Set the function that receives the messages of undo and redo."""
        self._callback = callback

    def _emit(self, msg: bytes, index: int) -> None:
        if self._callback is None:
            raise RuntimeError("no callback set")
        types = argument_string(msg)
        try:
            out = build_message(
                undo_address(msg), types[2:], argument(msg, index),
                max_length=_REPLY_LIMIT,
            )
        except MessageTooLong:
            return
        self._callback(out)

    def _merge(self, now: float, msg: bytes) -> bool:
        address = undo_address(msg)
        for i in range(self._pos - 1, -1, -1):
            stamp, old = self._history[i]
            if now - stamp > _MERGE_SECONDS:
                break
            if undo_address(old) == address:
                merged = build_message(
                    _address(msg), argument_string(msg),
                    argument(msg, 0), argument(old, 1), argument(msg, 2),
                )
                self._history[i] = (now, merged)
                return True
        return False

    def record_event(self, msg: bytes) -> None:
        """Record a change, dropping any redo history beyond the position.

        A change of the same parameter within two seconds is merged into
        the earlier event.
        """
        data = bytes(msg)
        length = message_length(data)
        if not length:
            raise ValueError("data does not start with a complete message")
        data = data[:length]
        del self._history[self._pos:]
        now = self._clock()
        if self._merge(now, data):
            return
        self._history.append((now, data))
        self._pos += 1
        if len(self._history) > self.max_history_size:
            del self._history[0]
            self._pos -= 1

    def seek_history(self, distance: int) -> None:
        """Undo (negative) or redo (positive) up to ``distance`` events."""
        dest = self._pos + distance
        if dest < 0:
            distance -= dest
        if dest > len(self._history):
            distance = len(self._history) - self._pos
        while distance < 0:
            self._pos -= 1
            self._emit(self._history[self._pos][1], 1)
            distance += 1
        while distance > 0:
            self._emit(self._history[self._pos][1], 2)
            self._pos += 1
            distance -= 1

    def position(self) -> int:
        """Return the number of events currently applied."""
        return self._pos

    def get_history(self, index: int) -> bytes:
        """Return the recorded event at ``index``."""
        return self._history[index][1]

    def __len__(self) -> int:
        return len(self._history)

    def show_history(self) -> None:
        """Print one line per recorded event."""
        for number, (_, msg) in enumerate(self._history):
            print(
                f"#{number} type: {_address(msg).decode('latin-1')} "
                f"dest: {undo_address(msg)} arguments: {argument_string(msg)}"
            )