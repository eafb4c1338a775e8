"""OSC time tags: 32 bits of seconds followed by 32 bits of second fractions."""

from __future__ import annotations

import struct
import time
from datetime import datetime
from fractions import Fraction

from oscwire.message import Arg

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF
_IMMEDIATELY = 1


def timetag_from_time(seconds: int, secfracs: int) -> int:
    """Combine whole seconds and second fractions (units of 2**-32 s)."""
    return ((int(seconds) << 32) | int(secfracs)) & _MASK64


def current_timetag() -> int:
    """Return a time tag for the current second, without fractions."""
    return timetag_from_time(int(time.time()), 0)


def timetag_from_datetime(moment: datetime, secfracs: int) -> int:
    """Return a time tag for ``moment``; naive datetimes are local time.

    Sub-second parts of ``moment`` are dropped; ``secfracs`` supplies them.
    """
    seconds = int(moment.replace(microsecond=0).timestamp())
    return timetag_from_time(seconds, secfracs)


def _as_float32(value: float) -> float:
    return struct.unpack(">f", struct.pack(">f", value))[0]


def float_to_secfracs(value: float) -> int:
    """Convert a fraction of a second in [0, 1) to second fractions.

    The value is taken at single precision and converted losslessly.
    Raises ValueError for values outside [0, 1) or too fine to represent.
    """
    single = _as_float32(value)
    if not 0.0 <= single < 1.0:
        raise ValueError(f"second fraction {value!r} is not in [0, 1)")
    scaled = Fraction(single) * (1 << 32)
    if scaled.denominator != 1:
        raise ValueError(f"second fraction {value!r} is too small to represent")
    return int(scaled)


def secfracs_to_float(secfracs: int) -> float:
    """Convert second fractions to a single precision fraction of a second."""
    return _as_float32((int(secfracs) & _MASK32) / (1 << 32))


def immediately() -> int:
    """Return the special time tag that means "immediately"."""
    return _IMMEDIATELY


def is_immediately(arg: int | Arg) -> bool:
    """Tell whether a time tag (or a time tag argument) means "immediately"."""
    if isinstance(arg, Arg):
        return arg.type == "t" and arg.value == _IMMEDIATELY
    return arg == _IMMEDIATELY


def seconds_from_timetag(timetag: int) -> int:
    """Return the whole seconds of a time tag."""
    return (int(timetag) & _MASK64) >> 32


def secfracs_from_timetag(timetag: int) -> int:
    """Return the second fractions of a time tag."""
    return int(timetag) & _MASK32


def datetime_from_timetag(timetag: int) -> datetime:
    """Return the local, naive datetime of a time tag's whole seconds."""
    return datetime.fromtimestamp(seconds_from_timetag(timetag))