"""Pattern matching of OSC paths against dispatch patterns.

A dispatch pattern has the form
``(normal-path)(#digit-specifier)?(/)?(:argument-restrictor)*``.
This is not a complete OSC pattern matcher; it avoids backtracking.
"""

from __future__ import annotations

import re
from enum import IntEnum

from oscwire.message import argument_string

_ATOI = re.compile(r"\s*([+-]?[0-9]+)")


class PatternType(IntEnum):
    """Kinds of sub-path patterns."""

    ALL = 1
    CHAR = 2
    PARTIAL_CHAR = 3
    SUBSTRING = 4
    OPTIONS = 5
    PARTIAL_OPTIONS = 6
    ENUMERATED = 7


def _text(value: str | bytes) -> str:
    """Return a path as text; bytes are read up to the first NUL."""
    if isinstance(value, str):
        return value
    raw = bytes(value)
    end = raw.find(0)
    if end != -1:
        raw = raw[:end]
    return raw.decode("latin-1")


def _at(text: str, index: int) -> str:
    return text[index] if 0 <= index < len(text) else ""


def _code(text: str, index: int) -> int:
    char = _at(text, index)
    return ord(char) if char else 0


def _isdigit(char: str) -> bool:
    return char != "" and char in "0123456789"


def _atoi(text: str) -> int:
    found = _ATOI.match(text)
    return int(found.group(1)) if found else 0


def _options(pattern: str, pi: int, path: str, mi: int) -> tuple[int, int] | None:
    if _at(pattern, pi) != "{":
        raise ValueError("an options pattern must start with '{'")
    start = mi
    pi += 1
    while True:
        pc = _at(pattern, pi)
        if pc in (",", "}"):
            end = pattern.find("}", pi)
            return (len(pattern) if end == -1 else end + 1), mi
        mc = _at(path, mi)
        if mc and pc == mc:
            pi += 1
            mi += 1
            continue
        mi = start
        while _at(pattern, pi) not in ("", "}", ","):
            pi += 1
        if _at(pattern, pi) != ",":
            return None
        pi += 1


def match_options(pattern: str, path: str | bytes) -> tuple[str, str] | None:
    """Match one option of a ``{a,b,...}`` list at the start of ``path``.

    Returns the pattern after the closing brace and the unmatched rest of
    the path, or None if no option matches.
    """
    text = _text(path)
    result = _options(pattern, 0, text, 0)
    if result is None:
        return None
    pi, mi = result
    return pattern[pi:], text[mi:]


def _match_number(pattern: str, pi: int, path: str, mi: int) -> tuple[int, int] | None:
    if not (_isdigit(_at(pattern, pi)) and _isdigit(_at(path, mi))):
        return None
    pe = pi
    while _isdigit(_at(pattern, pe)):
        pe += 1
    me = mi
    while _isdigit(_at(path, me)):
        me += 1
    if int(path[mi:me]) < int(pattern[pi:pe]):
        return pe, me
    return None


def match_path(pattern: str, path: str | bytes) -> tuple[str, int] | None:
    """Match a path against a pattern, ignoring argument restrictions.

    ``path`` may be text or a message, whose address is used. On a match
    the rest of the pattern (empty or starting with ':') and the index in
    the path where matching stopped are returned; otherwise None.
    """
    text = _text(path)
    pi = mi = 0
    while True:
        pc = _at(pattern, pi)
        mc = _at(text, mi)
        if pc == ":" and not mc:
            return pattern[pi:], mi
        if pc == "{":
            result = _options(pattern, pi, text, mi)
            if result is None:
                return None
            pi, mi = result
        elif pc == "*":
            while _at(pattern, pi) not in ("", "/", ":"):
                pi += 1
            if _at(pattern, pi) in ("/", ":"):
                while _at(text, mi) not in ("", "/"):
                    mi += 1
        elif pc == "/" and mc == "/":
            pi += 1
            mi += 1
            if _at(pattern, pi) in ("", ":"):
                return pattern[pi:], mi
        elif pc == "#":
            result = _match_number(pattern, pi + 1, text, mi)
            if result is None:
                return None
            pi, mi = result
        elif pc == mc:
            if not mc:
                return pattern[pi:], mi
            pi += 1
            mi += 1
        else:
            return None


def _match_args(spec: str, types: str) -> bool:
    """Check type tags against ':'-separated alternatives in ``spec``."""
    pos = 0
    while True:
        if _at(spec, pos) != ":":
            return True
        pos += 1
        ai = 0
        ok = bool(_at(spec, pos)) or _at(spec, pos) == _at(types, 0)
        while _at(spec, pos) not in ("", ":"):
            ok = ok and _at(spec, pos) == _at(types, ai)
            pos += 1
            ai += 1
        if _at(spec, pos) == ":":
            if ok and not _at(types, ai):
                return True
            continue
        return ok


def match(pattern: str, msg: str | bytes) -> bool:
    """Match a message's address and type tags against a dispatch pattern.

    A plain string is taken as an address whose message has no arguments.
    """
    result = match_path(pattern, msg)
    if result is None:
        return False
    rest, _ = result
    if rest.startswith(":"):
        types = "" if isinstance(msg, str) else argument_string(msg)
        return _match_args(rest, types)
    return True


def _is_charwise(char: str) -> bool:
    return ord(char) <= 0x7F and char not in " #/{}"


def subpath_pattern_type(pattern: str) -> PatternType:
    """Classify a single path segment pattern."""
    if pattern == "*":
        return PatternType.ALL
    if all(_is_charwise(c) for c in pattern) and "*" not in pattern:
        return PatternType.CHAR
    if "#" in pattern:
        return PatternType.ENUMERATED
    return PatternType.CHAR


def _match_char(path: str, ai: int, pattern: str, bi: int) -> tuple[bool, int, int]:
    pc = _at(pattern, bi)
    ac = _at(path, ai)
    if ac and ac == pc:
        return True, ai + 1, bi + 1
    if pc == "?":
        return True, ai + 1, bi + 1
    if pc == "[":
        matched = negation = False
        target = _code(path, ai)
        bi += 1
        if _at(pattern, bi) == "!":
            negation = True
            bi += 1
        while _at(pattern, bi) not in ("", "]"):
            char = _at(pattern, bi)
            last_range = ord(char)
            if last_range == target:
                matched = True
            elif char == "-":
                bi += 1
                high = _at(pattern, bi)
                if high in ("", "]"):
                    break
                if last_range <= target <= ord(high):
                    matched = True
            bi += 1
        if _at(pattern, bi) == "]":
            bi += 1
        return negation != matched, ai + 1, bi
    return False, ai, bi


def _walk_chars(path: str, pattern: str) -> tuple[int, int]:
    ok, ai, bi = True, 0, 0
    while ok:
        ok, ai, bi = _match_char(path, ai, pattern, bi)
    return ai, bi


def match_partial(path: str | bytes, pattern: str | bytes) -> bool:
    """Match a literal path segment against a segment pattern.

    Supports '?', '[...]' character sets, a trailing '*' and an
    enumeration suffix '#N' that accepts numbers below N.
    """
    a = _text(path)
    b = _text(pattern)
    kind = subpath_pattern_type(b)
    if kind is PatternType.ALL:
        return True
    if kind in (PatternType.CHAR, PatternType.PARTIAL_CHAR):
        ai, bi = _walk_chars(a, b)
        if not _at(a, ai) and not _at(b, bi):
            return True
        return bool(_at(a, ai)) and _at(b, bi) == "*" and _at(b, bi + 1) == ""
    if kind is PatternType.ENUMERATED:
        ai, bi = _walk_chars(a, b)
        if _at(a, ai) and _at(b, bi) == "#" and _at(b, bi + 1):
            return _atoi(a[ai:]) < _atoi(b[bi + 1:])
        return False
    return False