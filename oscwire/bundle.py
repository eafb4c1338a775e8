"""Building and reading OSC bundles.

A bundle is ``#bundle\\0``, an eight byte time tag and a sequence of
elements. Each element is a big-endian 32 bit length followed by a
message or a nested bundle of that many bytes.
"""

from __future__ import annotations

import struct

from oscwire.message import message_length

_HEADER = b"#bundle\0"
_FIRST_ELEMENT = 16
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _read_u32(data: bytes, pos: int) -> int:
    return int.from_bytes(data[pos:pos + 4].ljust(4, b"\0"), "big")


def _advance(length: int) -> int:
    """Bytes from one length field to the next one."""
    return (length // 4 + 1) * 4


def build_bundle(timetag: int, *elements: bytes) -> bytes:
    """Serialize a bundle holding the given messages or bundles.

    Each element is cut to the length of the message or bundle it starts
    with; an element that does not start with a complete message raises
    ValueError.
    """
    parts = [_HEADER, struct.pack(">Q", int(timetag) & _MASK64)]
    for element in elements:
        data = bytes(element)
        size = message_length(data)
        if not size:
            raise ValueError("bundle element is not a complete message or bundle")
        parts.append(struct.pack(">I", size))
        parts.append(data[:size])
    return b"".join(parts)


def is_bundle(data: bytes) -> bool:
    """Tell whether ``data`` starts with a bundle header."""
    return bytes(data[:8]) == _HEADER


def bundle_timetag(data: bytes) -> int:
    """Return the time tag of a bundle."""
    data = bytes(data)
    if not is_bundle(data) or len(data) < _FIRST_ELEMENT:
        raise ValueError("data is not a bundle")
    return struct.unpack_from(">Q", data, 8)[0]


def bundle_elements(data: bytes) -> int:
    """Count the elements that lie completely within ``data``."""
    data = bytes(data)
    total = len(data)
    pos = _FIRST_ELEMENT
    count = 0
    while pos < total:
        length = _read_u32(data, pos)
        if not length:
            break
        pos += _advance(length)
        if pos > total:
            break
        count += 1
    return count


def _element_position(data: bytes, index: int) -> int:
    if index < 0:
        raise IndexError(f"bundle element {index} out of range")
    pos = _FIRST_ELEMENT
    for _ in range(index):
        length = _read_u32(data, pos)
        if not length:
            raise IndexError(f"bundle element {index} out of range")
        pos += _advance(length)
    if not _read_u32(data, pos):
        raise IndexError(f"bundle element {index} out of range")
    return pos


def bundle_fetch(data: bytes, index: int) -> bytes:
    """Return the element at ``index`` of a bundle."""
    data = bytes(data)
    pos = _element_position(data, index)
    length = _read_u32(data, pos)
    return data[pos + 4:pos + 4 + length]


def bundle_size(data: bytes, index: int) -> int:
    """Return the size in bytes of the element at ``index`` of a bundle."""
    data = bytes(data)
    return _read_u32(data, _element_position(data, index))