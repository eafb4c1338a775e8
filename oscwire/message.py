"""Encoding, decoding and validation of OSC messages.

Messages are plain ``bytes``. The type tag string names the type of every
argument:

* ``i``, ``c``, ``r`` -- 32 bit integers (``c`` also accepts a one-character str)
* ``f`` -- 32 bit float, ``d`` -- 64 bit float
* ``h`` -- signed 64 bit integer, ``t`` -- unsigned 64 bit time tag
* ``m`` -- four MIDI bytes
* ``s``, ``S`` -- strings (str or bytes without NUL)
* ``b`` -- blob (bytes-like)
* ``T``, ``F``, ``N``, ``I``, ``[``, ``]`` -- carry no data
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any, Iterator

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF

_FIXED_SIZE = {"i": 4, "c": 4, "r": 4, "f": 4, "m": 4, "h": 8, "t": 8, "d": 8}
_VARIABLE = frozenset("sSb")
_NO_DATA = frozenset("TFNI[]")
_BRACKETS = frozenset("[]")
_BUNDLE_HEADER = b"#bundle\0"


@dataclass(frozen=True)
class Arg:
    """A typed argument value taken from a message."""

    type: str
    value: Any


class MessageTooLong(ValueError):
    """Raised when a message does not fit into the allowed length."""

    def __init__(self, size: int, max_length: int) -> None:
        super().__init__(f"message needs {size} bytes but only {max_length} are allowed")
        self.size = size
        self.max_length = max_length


def _carries_data(type_code: str) -> bool:
    return type_code in _FIXED_SIZE or type_code in _VARIABLE


def _padded(raw: bytes) -> bytes:
    """Terminate with at least one NUL and pad to a multiple of four."""
    return raw + b"\0" * (4 - len(raw) % 4)


def _text_bytes(value: Any, what: str) -> bytes:
    if isinstance(value, str):
        raw = value.encode("utf-8")
    elif isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    else:
        raise TypeError(f"{what} must be str or bytes, not {type(value).__name__}")
    if b"\0" in raw:
        raise ValueError(f"{what} must not contain NUL bytes")
    return raw


def _encode_arg(type_code: str, value: Any) -> bytes:
    if type_code in "icr":
        if type_code == "c" and isinstance(value, str):
            value = ord(value)
        return struct.pack(">I", int(value) & _MASK32)
    if type_code == "f":
        return struct.pack(">f", value)
    if type_code == "d":
        return struct.pack(">d", value)
    if type_code in "ht":
        return struct.pack(">Q", int(value) & _MASK64)
    if type_code == "m":
        data = bytes(value)
        if len(data) != 4:
            raise ValueError("a MIDI argument needs exactly four bytes")
        return data
    if type_code in "sS":
        return _padded(_text_bytes(value, "string argument"))
    if type_code == "b":
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError(f"blob must be bytes-like, not {type(value).__name__}")
        data = bytes(value)
        blob = struct.pack(">I", len(data)) + data
        if len(blob) % 4:
            blob += b"\0" * (4 - len(blob) % 4)
        return blob
    raise ValueError(f"unknown argument type {type_code!r}")


def _encode(address: str | bytes, types: str, args: tuple) -> bytes:
    unknown = [t for t in types if not _carries_data(t) and t not in _NO_DATA]
    if unknown:
        raise ValueError(f"unknown argument type {unknown[0]!r}")
    data_types = [t for t in types if _carries_data(t)]
    if len(data_types) != len(args):
        raise TypeError(
            f"type tags {types!r} need {len(data_types)} arguments, got {len(args)}"
        )
    parts = [
        _padded(_text_bytes(address, "address")),
        _padded(b"," + types.encode("ascii")),
    ]
    parts.extend(_encode_arg(t, v) for t, v in zip(data_types, args))
    return b"".join(parts)


def message_size(address: str | bytes, types: str, *args: Any) -> int:
    """Return the number of bytes the message would occupy."""
    return len(_encode(address, types, args))


def build_message(
    address: str | bytes, types: str, *args: Any, max_length: int | None = None
) -> bytes:
    """Serialize an OSC message.

    Raises MessageTooLong if ``max_length`` is given and exceeded.
    """
    encoded = _encode(address, types, args)
    if max_length is not None and len(encoded) > max_length:
        raise MessageTooLong(len(encoded), max_length)
    return encoded


def _type_tag_position(msg: bytes) -> int:
    """Return the index of the ',' that starts the type tag string."""
    if not msg or msg[0] == 0:
        raise ValueError("message has no address")
    pos = msg.find(0, 1)
    if pos == -1:
        raise ValueError("message address is not terminated")
    while pos < len(msg) and msg[pos] == 0:
        pos += 1
    if pos >= len(msg) or msg[pos] != ord(","):
        raise ValueError("message has no type tag string")
    return pos


def _layout(msg: bytes) -> tuple[str, int]:
    comma = _type_tag_position(msg)
    end = msg.find(0, comma + 1)
    if end == -1:
        raise ValueError("type tag string is not terminated")
    types = msg[comma + 1:end].decode("latin-1")
    values_start = end + 4 - (end - comma) % 4
    return types, values_start


def argument_string(msg: bytes) -> str:
    """Return the type tag string of a message, without the leading ','."""
    return _layout(bytes(msg))[0]


def _value_types(msg: bytes) -> list[str]:
    return [t for t in argument_string(msg) if t not in _BRACKETS]


def narguments(msg: bytes) -> int:
    """Return the number of arguments, not counting array brackets."""
    return len(_value_types(msg))


def arg_type(msg: bytes, index: int) -> str:
    """Return the type tag of the argument at ``index``."""
    types = _value_types(msg)
    if not 0 <= index < len(types):
        raise IndexError(f"argument index {index} out of range")
    return types[index]


def _need(msg: bytes, pos: int, size: int) -> None:
    if pos + size > len(msg):
        raise ValueError("message is truncated")


def _decode_arg(msg: bytes, pos: int, type_code: str) -> tuple[Any, int]:
    """Return the value at ``pos`` and the number of bytes it occupies."""
    if type_code in "icr":
        _need(msg, pos, 4)
        return struct.unpack_from(">i", msg, pos)[0], 4
    if type_code == "f":
        _need(msg, pos, 4)
        return struct.unpack_from(">f", msg, pos)[0], 4
    if type_code == "d":
        _need(msg, pos, 8)
        return struct.unpack_from(">d", msg, pos)[0], 8
    if type_code == "h":
        _need(msg, pos, 8)
        return struct.unpack_from(">q", msg, pos)[0], 8
    if type_code == "t":
        _need(msg, pos, 8)
        return struct.unpack_from(">Q", msg, pos)[0], 8
    if type_code == "m":
        _need(msg, pos, 4)
        return msg[pos:pos + 4], 4
    if type_code in "sS":
        end = msg.find(0, pos)
        if end == -1:
            raise ValueError("string argument is not terminated")
        length = end - pos
        text = msg[pos:end].decode("utf-8", errors="surrogateescape")
        return text, length + 4 - length % 4
    if type_code == "b":
        _need(msg, pos, 4)
        length = struct.unpack_from(">I", msg, pos)[0]
        _need(msg, pos + 4, length)
        size = 4 + length
        if size % 4:
            size += 4 - size % 4
        return msg[pos + 4:pos + 4 + length], size
    if type_code == "T":
        return True, 0
    if type_code == "F":
        return False, 0
    return None, 0


def iter_arguments(msg: bytes) -> Iterator[Arg]:
    """Yield every argument of a message in order, skipping array brackets."""
    msg = bytes(msg)
    types, pos = _layout(msg)
    for type_code in types:
        if type_code in _BRACKETS:
            continue
        value, size = _decode_arg(msg, pos, type_code)
        yield Arg(type_code, value)
        pos += size


def argument(msg: bytes, index: int) -> Any:
    """Return the value of the argument at ``index``."""
    if index >= 0:
        for position, arg in enumerate(iter_arguments(msg)):
            if position == index:
                return arg.value
    raise IndexError(f"argument index {index} out of range")


def _read_u32(data: bytes, pos: int) -> int:
    return int.from_bytes(data[pos:pos + 4].ljust(4, b"\0"), "big")


def _bundle_length(data: bytes) -> int:
    pos = 16
    while True:
        advance = _read_u32(data, pos)
        if not advance:
            break
        pos += 4 + advance
    return pos if pos <= len(data) else 0


def _stream_length(data: bytes) -> int:
    total = len(data)

    def at(pos: int) -> int:
        return data[pos] if pos < total else 0

    if data[:8] == _BUNDLE_HEADER:
        return _bundle_length(data)

    pos = data.find(0)
    if pos == -1:
        pos = total
    for _ in range(4):
        pos += 1
        if at(pos):
            break
    if at(pos) != ord(","):
        return 0

    aligned = pos
    types_end = data.find(0, pos + 1)
    if types_end == -1:
        types_end = total
    pos = types_end + 4 - (types_end - aligned) % 4

    for code in data[aligned + 1:types_end]:
        type_code = chr(code)
        if type_code in "htd":
            pos += 8
        elif type_code in "mrcfi":
            pos += 4
        elif type_code in "sS":
            end = data.find(0, pos + 1)
            pos = total if end == -1 else end
            pos += 4 - (pos - aligned) % 4
        elif type_code == "b":
            pos += 4 + _read_u32(data, pos)
            if (pos - aligned) % 4:
                pos += 4 - (pos - aligned) % 4

    return pos if pos <= total else 0


def message_ring_length(*segments: bytes) -> int:
    """Return the length of the message or bundle that starts a split buffer.

    The segments are read as one contiguous stream, as a ring buffer hands
    out its readable region in up to two pieces. Zero means no complete
    message is present.
    """
    return _stream_length(b"".join(bytes(segment) for segment in segments))


def message_length(data: bytes) -> int:
    """Return the length of the message or bundle at the start of ``data``.

    Zero means no complete message is present.
    """
    return message_ring_length(data)


def is_valid_message(data: bytes) -> bool:
    """Check whether ``data`` holds exactly one well-formed OSC message."""
    data = bytes(data)
    if not data or data[0] != ord("/"):
        return False
    null = data.find(0)
    offset1 = len(data) if null == -1 else null
    if any(not 0x20 <= b <= 0x7E for b in data[:offset1]):
        return False
    comma = data.find(b",", offset1)
    offset2 = len(data) if comma == -1 else comma
    if offset2 - offset1 > 4:
        return False
    if offset2 % 4:
        return False
    return message_length(data) == len(data)