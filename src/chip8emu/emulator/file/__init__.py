"""File loading helpers for the CHIP-8 emulator."""

from chip8emu.emulator.file.rom import (
    ENV_ROM_PATH,
    RomInfo,
    RomLoadError,
    read_rom,
    resolve_rom_path,
)

__all__ = [
    "ENV_ROM_PATH",
    "RomInfo",
    "RomLoadError",
    "read_rom",
    "resolve_rom_path",
]
