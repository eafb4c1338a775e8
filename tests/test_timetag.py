import time
from datetime import datetime, timezone

import pytest

from oscwire.message import Arg
from oscwire.timetag import (
    current_timetag,
    datetime_from_timetag,
    float_to_secfracs,
    immediately,
    is_immediately,
    secfracs_from_timetag,
    secfracs_to_float,
    seconds_from_timetag,
    timetag_from_datetime,
    timetag_from_time,
)


def test_split_round_trip():
    tag = timetag_from_time(5, 7)
    assert seconds_from_timetag(tag) == 5
    assert secfracs_from_timetag(tag) == 7


def test_seconds_occupy_high_word():
    assert timetag_from_time(1, 0) == 1 << 32


def test_immediately():
    assert is_immediately(immediately())
    assert is_immediately(Arg("t", immediately()))
    assert not is_immediately(Arg("h", immediately()))
    assert not is_immediately(timetag_from_time(1, 0))


def test_half_second():
    assert float_to_secfracs(0.5) == 0x80000000
    assert secfracs_to_float(0x80000000) == 0.5


@pytest.mark.parametrize("value", [0.0, 0.25, 0.75, 0.125, 0.5])
def test_exact_round_trip(value):
    assert secfracs_to_float(float_to_secfracs(value)) == value


def test_inexact_value_is_stable():
    fracs = float_to_secfracs(0.85)
    back = secfracs_to_float(fracs)
    assert abs(back - 0.85) < 1e-6
    assert float_to_secfracs(back) == fracs


@pytest.mark.parametrize("value", [1.5, -0.5, 2.0])
def test_out_of_range(value):
    with pytest.raises(ValueError):
        float_to_secfracs(value)


def test_secfracs_to_float_ignores_high_bits():
    assert secfracs_to_float((1 << 32) | float_to_secfracs(0.25)) == 0.25


def test_datetime_round_trip():
    moment = datetime(2020, 1, 2, 3, 4, 5)
    tag = timetag_from_datetime(moment, 9)
    assert datetime_from_timetag(tag) == moment
    assert secfracs_from_timetag(tag) == 9


def test_aware_datetime():
    moment = datetime(1970, 1, 1, 0, 1, tzinfo=timezone.utc)
    assert seconds_from_timetag(timetag_from_datetime(moment, 0)) == 60


def test_current_timetag():
    before = int(time.time())
    tag = current_timetag()
    after = int(time.time())
    assert before <= seconds_from_timetag(tag) <= after
    assert secfracs_from_timetag(tag) == 0