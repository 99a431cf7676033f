"""CHIP-8 memory: a flat 4 KiB byte array with a reserved interpreter area."""

from __future__ import annotations

from typing import Iterable, List

from chip8emu.errors import MemoryAccessError, RomTooLarge

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
PROGRAM_CAPACITY = MEMORY_SIZE - PROGRAM_START
FONT_START = 0x050
FONT_GLYPH_BYTES = 5

# 0-F, five rows each, high nibble used.
FONT_DATA = (
    0xF0, 0x90, 0x90, 0x90, 0xF0,
    0x20, 0x60, 0x20, 0x20, 0x70,
    0xF0, 0x10, 0xF0, 0x80, 0xF0,
    0xF0, 0x10, 0xF0, 0x10, 0xF0,
    0x90, 0x90, 0xF0, 0x10, 0x10,
    0xF0, 0x80, 0xF0, 0x10, 0xF0,
    0xF0, 0x80, 0xF0, 0x90, 0xF0,
    0xF0, 0x10, 0x20, 0x40, 0x40,
    0xF0, 0x90, 0xF0, 0x90, 0xF0,
    0xF0, 0x90, 0xF0, 0x10, 0xF0,
    0xF0, 0x90, 0xF0, 0x90, 0x90,
    0xE0, 0x90, 0xE0, 0x90, 0xE0,
    0xF0, 0x80, 0x80, 0x80, 0xF0,
    0xE0, 0x90, 0x90, 0x90, 0xE0,
    0xF0, 0x80, 0xF0, 0x80, 0xF0,
    0xF0, 0x80, 0xF0, 0x80, 0x80,
)


class Memory:
    """Bounds-checked RAM with the hexadecimal font preloaded."""

    size: int
    data: bytearray

    def __init__(self, size: int = MEMORY_SIZE) -> None:
        if size <= PROGRAM_START:
            raise ValueError("memory must extend past the program start")
        self.size = size
        self.data = bytearray(size)
        self._debug: bool = False
        self.data[FONT_START:FONT_START + len(FONT_DATA)] = bytes(FONT_DATA)

    @property
    def program_capacity(self) -> int:
        return self.size - PROGRAM_START

    def load_rom(self, rom: bytes | bytearray | Iterable[int]) -> int:
        """Copy a ROM image to 0x200, clearing the rest of the program area.

        Raises ``RomTooLarge`` before touching memory so a rejected image keeps
        the previous contents intact.
        """

        image = bytes(rom)
        if len(image) > self.program_capacity:
            raise RomTooLarge(len(image), self.program_capacity)
        self.data[PROGRAM_START:] = bytes(self.program_capacity)
        self.data[PROGRAM_START:PROGRAM_START + len(image)] = image
        return len(image)

    def read_byte(self, address: int) -> int:
        if not (0 <= address < self.size):
            raise MemoryAccessError(address)
        value = self.data[address]
        if self._debug:
            print(f"read: addr={address:03X} val={value:02X}")
        return value

    def write_byte(self, address: int, value: int) -> None:
        if not (PROGRAM_START <= address < self.size):
            raise MemoryAccessError(address, write=True)
        if self._debug:
            print(f"write: addr={address:03X} val={value & 0xFF:02X}")
        self.data[address] = value & 0xFF

    def write_block(self, address: int, values: Iterable[int]) -> None:
        """Write consecutive bytes, validating the whole range before the first write."""

        payload = [value & 0xFF for value in values]
        if not payload:
            return
        for candidate in (address, address + len(payload) - 1):
            if not (PROGRAM_START <= candidate < self.size):
                raise MemoryAccessError(candidate, write=True)
        for offset, value in enumerate(payload):
            self.write_byte(address + offset, value)

    def read_word(self, address: int) -> int:
        hi = self.read_byte(address)
        lo = self.read_byte(address + 1)
        return (hi << 8) | lo

    def read_block(self, address: int, length: int) -> List[int]:
        if length < 0:
            raise ValueError("length must not be negative")
        if address < 0 or address >= self.size:
            raise MemoryAccessError(address)
        if address + length > self.size:
            raise MemoryAccessError(self.size)
        return list(self.data[address:address + length])

    def font_address(self, digit: int) -> int:
        return FONT_START + (digit & 0x0F) * FONT_GLYPH_BYTES

    def dump(self) -> bytes:
        return bytes(self.data)

    def enable_debug(self, enabled: bool) -> None:
        self._debug = enabled


__all__ = [
    "MEMORY_SIZE",
    "PROGRAM_START",
    "PROGRAM_CAPACITY",
    "FONT_START",
    "FONT_GLYPH_BYTES",
    "FONT_DATA",
    "Memory",
]
