"""Timer and keypad tests."""

from __future__ import annotations

import pytest

from chip8emu.chip8.keypad import Chip8Keypad
from chip8emu.chip8.timer import Chip8Timer, Chip8Timers


def test_timer_counts_down_to_zero() -> None:
    timer = Chip8Timer()
    timer.set(2)
    assert timer.active
    timer.tick()
    timer.tick()
    timer.tick()
    assert timer.get() == 0
    assert not timer.active


def test_timer_value_is_a_byte() -> None:
    timer = Chip8Timer()
    timer.set(0x1FF)
    assert timer.get() == 0xFF


def test_timers_tick_together() -> None:
    timers = Chip8Timers()
    timers.delay.set(3)
    timers.sound.set(1)
    timers.tick()
    assert (timers.delay.get(), timers.sound.get()) == (2, 0)
    timers.reset()
    assert (timers.delay.get(), timers.sound.get()) == (0, 0)


def test_keys_are_independent() -> None:
    keypad = Chip8Keypad()
    keypad.press(0x3)
    keypad.press(0xC)
    assert keypad.is_pressed(0x3)
    assert keypad.is_pressed(0xC)
    assert not keypad.is_pressed(0x4)
    keypad.release(0x3)
    assert not keypad.is_pressed(0x3)


def test_first_pressed_is_lowest_index() -> None:
    keypad = Chip8Keypad()
    assert keypad.first_pressed() is None
    keypad.press(0xB)
    keypad.press(0x2)
    assert keypad.first_pressed() == 0x2


@pytest.mark.parametrize("index", [-1, 16, 0x20])
def test_set_key_out_of_range(index: int) -> None:
    with pytest.raises(ValueError):
        Chip8Keypad().set_key(index, True)


def test_state_round_trip() -> None:
    keypad = Chip8Keypad()
    state = [False] * 16
    state[5] = True
    keypad.set_state(state)
    assert keypad.get_state() == state
    keypad.clear()
    assert keypad.get_state() == [False] * 16
    with pytest.raises(ValueError):
        keypad.set_state([True] * 3)
