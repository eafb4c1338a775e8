import pytest

from oscwire.matching import (
    PatternType,
    match,
    match_options,
    match_partial,
    match_path,
    subpath_pattern_type,
)
from oscwire.message import build_message


@pytest.fixture
def freq_msg():
    return build_message("freq", "f", 1.0)


def test_match_path_exact():
    assert match_path("volume", "volume") == ("", len("volume"))


def test_match_path_stops_at_argument_spec():
    assert match_path("volume:f", "volume") == (":f", len("volume"))


def test_match_path_prefix_is_not_a_match():
    assert match_path("vol", "volume") is None
    assert match_path("volume", "vol") is None


def test_match_path_subtree():
    path = "sub/x"
    assert match_path("sub/", path) == ("", path.index("x"))


def test_match_path_reads_message_address(freq_msg):
    assert match_path("freq:f", freq_msg) == (":f", len("freq"))


def test_match_path_enumeration():
    assert match_path("voice#8/", "voice3/x") == ("", len("voice3/"))
    assert match_path("voice#8/", "voice9/x") is None
    assert match_path("voice#8/", "voicex/x") is None


def test_match_path_options():
    assert match_path("{a,b}x", "bx") == ("", len("bx"))
    assert match_path("{a,b}x", "cx") is None


def test_match_path_wildcard():
    assert match_path("*/", "anything/x") == ("", len("anything/"))


def test_match_options_picks_alternative():
    assert match_options("{foo,bar}/rest", "bar/x") == ("/rest", "/x")


def test_match_options_no_alternative():
    assert match_options("{foo,bar}", "baz") is None


def test_match_options_requires_brace():
    with pytest.raises(ValueError):
        match_options("foo", "foo")


def test_match_argument_types(freq_msg):
    assert match("freq:f", freq_msg)
    assert not match("freq:i", freq_msg)
    assert match("freq:i:f", freq_msg)
    assert match("freq", freq_msg)


def test_match_empty_restriction_needs_no_arguments(freq_msg):
    assert not match("freq:", freq_msg)
    assert match("freq:", build_message("freq", ""))


def test_match_wrong_path(freq_msg):
    assert not match("gain:f", freq_msg)


def test_match_plain_path_string():
    assert match("freq:", "freq")
    assert not match("freq:f", "freq")


def test_subpath_pattern_types():
    assert subpath_pattern_type("*") is PatternType.ALL
    assert subpath_pattern_type("abc") is PatternType.CHAR
    assert subpath_pattern_type("a?[bc]") is PatternType.CHAR
    assert subpath_pattern_type("ab*") is PatternType.CHAR
    assert subpath_pattern_type("voice#8") is PatternType.ENUMERATED


def test_match_partial_literal():
    assert match_partial("abc", "abc")
    assert not match_partial("abc", "abd")
    assert not match_partial("abc", "ab")


def test_match_partial_question_mark():
    assert match_partial("abc", "a?c")


def test_match_partial_all():
    assert match_partial("anything", "*")


def test_match_partial_trailing_star():
    assert match_partial("abc", "ab*")
    assert not match_partial("ab", "ab*")


def test_match_partial_enumeration():
    assert match_partial("voice3", "voice#8")
    assert not match_partial("voice9", "voice#8")
    assert not match_partial("voice", "voice#8")