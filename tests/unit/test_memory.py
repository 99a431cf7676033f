"""Tests for the CHIP-8 memory model."""

from __future__ import annotations

import pytest

from chip8emu.errors import MemoryAccessError, RomTooLarge
from chip8emu.memory import FONT_DATA, FONT_START, MEMORY_SIZE, PROGRAM_CAPACITY, PROGRAM_START, Memory


def test_font_is_preloaded() -> None:
    memory = Memory()
    assert memory.read_block(FONT_START, len(FONT_DATA)) == list(FONT_DATA)
    assert memory.font_address(0xA) == FONT_START + 50
    assert memory.font_address(0x1F) == FONT_START + 75


def test_load_rom_places_bytes_at_program_start() -> None:
    memory = Memory()
    size = memory.load_rom(b"\x12\x34\x56")
    assert size == 3
    assert memory.read_word(PROGRAM_START) == 0x1234
    assert memory.read_byte(PROGRAM_START + 2) == 0x56


def test_load_rom_clears_previous_program() -> None:
    memory = Memory()
    memory.load_rom(b"\xAA" * 8)
    memory.load_rom(b"\x01")
    assert memory.read_block(PROGRAM_START, 4) == [0x01, 0x00, 0x00, 0x00]


def test_load_rom_capacity_boundary() -> None:
    memory = Memory()
    assert PROGRAM_CAPACITY == 0xE00
    memory.load_rom(bytes([0x11]) * PROGRAM_CAPACITY)
    assert memory.read_byte(MEMORY_SIZE - 1) == 0x11


def test_rom_too_large_leaves_memory_untouched() -> None:
    memory = Memory()
    memory.load_rom(b"\x60\x01")
    with pytest.raises(RomTooLarge) as excinfo:
        memory.load_rom(bytes(PROGRAM_CAPACITY + 1))
    assert excinfo.value.size == PROGRAM_CAPACITY + 1
    assert memory.read_word(PROGRAM_START) == 0x6001


@pytest.mark.parametrize("address", [-1, MEMORY_SIZE, 0x1FFF])
def test_read_out_of_bounds(address: int) -> None:
    with pytest.raises(MemoryAccessError):
        Memory().read_byte(address)


@pytest.mark.parametrize("address", [0x000, FONT_START, PROGRAM_START - 1, MEMORY_SIZE])
def test_write_outside_program_area_rejected(address: int) -> None:
    memory = Memory()
    with pytest.raises(MemoryAccessError) as excinfo:
        memory.write_byte(address, 0xFF)
    assert excinfo.value.write is True


def test_font_cannot_be_overwritten() -> None:
    memory = Memory()
    with pytest.raises(MemoryAccessError):
        memory.write_block(FONT_START, [0x00])
    assert memory.read_byte(FONT_START) == FONT_DATA[0]


def test_write_block_is_all_or_nothing() -> None:
    memory = Memory()
    with pytest.raises(MemoryAccessError):
        memory.write_block(MEMORY_SIZE - 2, [1, 2, 3])
    assert memory.read_byte(MEMORY_SIZE - 2) == 0
    assert memory.read_byte(MEMORY_SIZE - 1) == 0


def test_write_masks_to_byte() -> None:
    memory = Memory()
    memory.write_byte(0x300, 0x1FF)
    assert memory.read_byte(0x300) == 0xFF


def test_read_block_past_end() -> None:
    with pytest.raises(MemoryAccessError):
        Memory().read_block(MEMORY_SIZE - 1, 2)


def test_debug_trace_prints_accesses(capsys) -> None:
    memory = Memory()
    memory.enable_debug(True)
    memory.write_byte(0x300, 0x42)
    memory.read_byte(0x300)
    out = capsys.readouterr().out
    assert "write: addr=300 val=42" in out
    assert "read: addr=300 val=42" in out
