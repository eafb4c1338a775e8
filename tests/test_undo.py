import pytest

from oscwire.message import argument, build_message
from oscwire.undo import UndoHistory, undo_address


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def change(path, old, new):
    return build_message("/undo_change", "sff", path, old, new)


@pytest.fixture
def setup():
    clock = FakeClock()
    received = []
    history = UndoHistory(received.append, clock)
    return history, clock, received


def test_undo_address():
    assert undo_address(change("/vol", 0.0, 0.5)) == "/vol"


def test_record_and_seek(setup):
    history, clock, received = setup
    history.record_event(change("/vol", 0.0, 0.5))
    assert len(history) == 1
    assert history.position() == 1
    history.seek_history(-1)
    assert received[-1] == build_message("/vol", "f", 0.0)
    assert history.position() == 0
    history.seek_history(1)
    assert received[-1] == build_message("/vol", "f", 0.5)
    assert history.position() == 1


def test_merge_within_two_seconds(setup):
    history, clock, received = setup
    history.record_event(change("/vol", 0.0, 0.5))
    clock.now = 1.0
    history.record_event(change("/vol", 0.5, 1.0))
    assert len(history) == 1
    assert history.get_history(0) == change("/vol", 0.0, 1.0)
    history.seek_history(-1)
    assert received == [build_message("/vol", "f", 0.0)]


def test_no_merge_after_delay(setup):
    history, clock, _ = setup
    history.record_event(change("/vol", 0.0, 0.5))
    clock.now = 10.0
    history.record_event(change("/vol", 0.5, 1.0))
    assert len(history) == 2


def test_no_merge_for_other_parameter(setup):
    history, _, _ = setup
    history.record_event(change("/vol", 0.0, 0.5))
    history.record_event(change("/pan", 0.0, 0.25))
    assert len(history) == 2
    assert undo_address(history.get_history(1)) == "/pan"


def test_recording_drops_future(setup):
    history, clock, _ = setup
    for step in range(3):
        clock.now = step * 10.0
        history.record_event(change("/vol", 0.0, float(step)))
    history.seek_history(-2)
    clock.now = 100.0
    history.record_event(change("/pan", 0.0, 0.25))
    assert len(history) == 2
    assert history.position() == 2
    assert undo_address(history.get_history(1)) == "/pan"


def test_history_is_bounded(setup):
    history, clock, _ = setup
    for step in range(25):
        clock.now = step * 10.0
        history.record_event(change("/vol", 0.0, float(step)))
    assert len(history) == history.max_history_size
    assert history.position() == history.max_history_size
    assert argument(history.get_history(0), 2) == 5.0


def test_seek_is_clamped(setup):
    history, clock, received = setup
    for step in range(2):
        clock.now = step * 10.0
        history.record_event(change("/vol", 0.0, float(step)))
    history.seek_history(-10)
    assert history.position() == 0
    assert len(received) == 2
    history.seek_history(10)
    assert history.position() == 2
    assert len(received) == 4


def test_seek_without_callback_raises():
    history = UndoHistory(clock=FakeClock())
    history.record_event(change("/vol", 0.0, 0.5))
    with pytest.raises(RuntimeError):
        history.seek_history(-1)


def test_set_callback():
    history = UndoHistory(clock=FakeClock())
    received = []
    history.set_callback(received.append)
    history.record_event(change("/vol", 0.0, 0.5))
    history.seek_history(-1)
    assert received == [build_message("/vol", "f", 0.0)]


def test_record_rejects_garbage(setup):
    history, _, _ = setup
    with pytest.raises(ValueError):
        history.record_event(b"/abc")


def test_show_history(setup, capsys):
    history, _, _ = setup
    history.record_event(change("/vol", 0.0, 0.5))
    history.show_history()
    assert capsys.readouterr().out == "#0 type: /undo_change dest: /vol arguments: sff\n"