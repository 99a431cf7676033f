"""Headless regression checks running small CHIP-8 programs frame by frame."""

from __future__ import annotations

import importlib.util
from pathlib import Path
import sys

from chip8emu.chip8.quirks import Quirks

_HELPER_PATH = Path(__file__).resolve().parents[1] / "helpers" / "headless.py"
_SPEC = importlib.util.spec_from_file_location("headless_helper", _HELPER_PATH)
_MODULE = importlib.util.module_from_spec(_SPEC)
assert _SPEC is not None and _SPEC.loader is not None
sys.modules[_SPEC.name] = _MODULE
_SPEC.loader.exec_module(_MODULE)  # type: ignore[arg-type]

KeyEvent = _MODULE.KeyEvent
assemble = _MODULE.assemble
run_program = _MODULE.run_program


# Print the hundreds digit of 123 in the top-left corner.
BCD_DIGIT = assemble(
    0x607B,  # LD V0, 7B
    0xA300,  # LD I, 300
    0xF033,  # LD B, V0
    0xF265,  # LD V2, [I]
    0xF029,  # LD F, V0
    0x6300,
    0x6400,
    0xD345,  # DRW V3, V4, 5
    0x1210,
)

# Wait for a key, then draw its glyph at (0, 0).
KEY_GLYPH = assemble(
    0xF10A,  # LD V1, K
    0xF129,  # LD F, V1
    0x6000,
    0xD005,
    0x1208,
)

# Count frames with the delay timer: V2 is incremented every time DT runs out.
DELAY_COUNTER = assemble(
    0x6103,  # LD V1, 03
    0xF115,  # LD DT, V1
    0xF007,  # LD V0, DT
    0x3000,  # SE V0, 00
    0x1204,
    0x7201,  # ADD V2, 01
    0x1202,
)

# Subroutine adding V1 to V0 ten times.
CALL_LOOP = assemble(
    0x6105,  # LD V1, 05
    0x620A,  # LD V2, 0A
    0x220E,  # CALL 20E
    0x72FF,  # ADD V2, FF
    0x3200,  # SE V2, 00
    0x1204,
    0x120C,
    0x8014,  # ADD V0, V1
    0x00EE,
)


def test_bcd_then_font_draw() -> None:
    computer, history = run_program(BCD_DIGIT, frames=2)
    assert history[-1] == 0x210
    assert computer.registers.v[:3] == [1, 2, 3]
    rows = computer.display_rows()
    assert rows[0][2] is True
    assert rows[0][1] is False
    assert rows[1][1] is True
    assert computer.display.lit_count() == 8


def test_key_wait_blocks_until_pressed() -> None:
    computer, history = run_program(KEY_GLYPH, frames=6, events=[KeyEvent(3, 0xA, True)])
    assert history[:3] == [0x200, 0x200, 0x200]
    assert history[-1] == 0x208
    assert computer.registers.v[1] == 0xA
    rows = computer.display_rows()
    assert rows[0][:5] == (True, True, True, True, False)


def test_delay_timer_paces_program() -> None:
    computer, _ = run_program(DELAY_COUNTER, frames=10)
    # DT is reloaded with 3 after each expiry.
    assert computer.registers.v[2] == 3


def test_subroutine_loop() -> None:
    computer, history = run_program(CALL_LOOP, frames=20)
    assert computer.registers.v[0] == 50
    assert computer.registers.stack_pointer == 0
    assert history[-1] == 0x20C


def test_quirk_profile_changes_results() -> None:
    shifts = assemble(0x6008, 0x6101, 0x8016, 0x1206)
    vip, _ = run_program(shifts, frames=1)
    chip48, _ = run_program(shifts, frames=1, quirks=Quirks.preset("chip48"))
    assert vip.registers.v[0] == 0x00
    assert chip48.registers.v[0] == 0x04
