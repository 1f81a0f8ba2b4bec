import io
import os

import pytest

from policydeploy.listener import KeyState, Listener
from policydeploy.terminal import Console


@pytest.fixture
def pipe():
    r, w = os.pipe()
    yield r, w
    for fd in (r, w):
        try:
            os.close(fd)
        except OSError:
            pass


def make_listener(fd=None):
    console = Console(stream=io.StringIO(), input_fd=fd)
    return Listener(console=console, poll_interval=0.001)


def test_key_state_round_trip():
    state = KeyState()
    assert state.get() == ""
    state.set("w")
    assert state.get() == "w"
    state.clear()
    assert state.get() == ""


@pytest.mark.parametrize("bad", ["", "ab", 5])
def test_key_state_rejects_bad_key(bad):
    with pytest.raises(ValueError):
        KeyState().set(bad)


def test_uppercase_is_lowered():
    listener = make_listener()
    assert listener.handle_char("W") == "w"
    assert listener.key_state.get() == "w"


@pytest.mark.parametrize("letter", ["A", "Z"])
def test_bounds_of_uppercase_range_kept(letter):
    listener = make_listener()
    assert listener.handle_char(letter) == letter
    assert listener.key_state.get() == letter


def test_integer_codes_accepted():
    listener = make_listener()
    assert listener.handle_char(ord("d")) == "d"


def test_newline_does_not_change_key():
    listener = make_listener()
    listener.handle_char("s")
    assert listener.handle_char("\n") is None
    assert listener.key_state.get() == "s"


def test_exit_key_stops():
    listener = make_listener()
    assert listener.is_running() is True
    listener.handle_char("z")
    assert listener.is_running() is False


def test_stop():
    listener = make_listener()
    listener.stop()
    assert listener.is_running() is False


def test_listen_keyboard_until_exit_key(pipe):
    r, w = pipe
    os.write(w, b"w\nz")
    listener = make_listener(r)
    listener.listen_keyboard()
    assert listener.is_running() is False
    assert listener.key_state.get() == "z"


def test_listen_keyboard_returns_when_stopped(pipe):
    r, w = pipe
    os.write(w, b"q")
    listener = make_listener(r)
    listener.stop()
    listener.listen_keyboard()
    assert listener.key_state.get() == ""