"""Reading CHIP-8 ROM images from disk."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Optional

from chip8emu.memory import PROGRAM_CAPACITY

ENV_ROM_PATH = "CHIP8EMU_ROM"


class RomLoadError(RuntimeError):
    """Raised when a ROM file cannot be read or does not fit into memory."""


@dataclass
class RomInfo:
    """A ROM image plus where it came from."""

    data: bytes
    name: str = ""
    path: Optional[Path] = None
    size: int = field(init=False)

    def __post_init__(self) -> None:
        self.size = len(self.data)


def read_rom(path: str | os.PathLike[str], *, capacity: int = PROGRAM_CAPACITY) -> RomInfo:
    """Read a raw ROM image; there is no header, the bytes load verbatim at 0x200."""

    file_path = Path(path)
    try:
        data = file_path.read_bytes()
    except OSError as exc:
        raise RomLoadError(f"cannot read {file_path}: {exc}") from exc
    if not data:
        raise RomLoadError(f"{file_path} is empty")
    if len(data) > capacity:
        raise RomLoadError(f"{file_path} is {len(data)} bytes, program area holds {capacity}")
    return RomInfo(data=data, name=file_path.stem.upper(), path=file_path)


def resolve_rom_path(rom_path: str | os.PathLike[str] | None) -> Optional[Path]:
    """Return the explicit path as given, else ``$CHIP8EMU_ROM``, else ``None``.

    The environment variable is only consulted when no path was passed, so a
    mistyped ``--rom`` fails to load instead of silently running another ROM.
    """

    if rom_path is not None and str(rom_path):
        return Path(rom_path)
    env_value = os.getenv(ENV_ROM_PATH)
    if env_value:
        return Path(env_value)
    return None
