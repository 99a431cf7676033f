"""Exception hierarchy raised by the CHIP-8 core."""

from __future__ import annotations


class Chip8Error(RuntimeError):
    """Base class for every error surfaced by the interpreter."""


class RomTooLarge(Chip8Error):
    """Raised when a ROM image does not fit into the program area."""

    def __init__(self, size: int, capacity: int) -> None:
        super().__init__(f"ROM is {size} bytes, program area holds {capacity}")
        self.size = size
        self.capacity = capacity


class EngineError(Chip8Error):
    """Raised by ``step()`` when an instruction cannot be carried out."""


class UnknownOpcode(EngineError):
    def __init__(self, word: int, address: int) -> None:
        super().__init__(f"unknown opcode {word:04X} at {address:03X}")
        self.word = word
        self.address = address


class InvalidFetch(EngineError):
    """Program counter is misaligned or points outside memory."""

    def __init__(self, address: int) -> None:
        super().__init__(f"cannot fetch instruction at {address:04X}")
        self.address = address


class MemoryAccessError(EngineError):
    """Read or write outside the accessible memory range."""

    def __init__(self, address: int, *, write: bool = False) -> None:
        kind = "write" if write else "read"
        super().__init__(f"invalid memory {kind} at {address:04X}")
        self.address = address
        self.write = write


class StackOverflow(EngineError):
    def __init__(self, depth: int) -> None:
        super().__init__(f"call stack overflow (depth {depth})")
        self.depth = depth


class StackUnderflow(EngineError):
    def __init__(self) -> None:
        super().__init__("return with an empty call stack")


__all__ = [
    "Chip8Error",
    "RomTooLarge",
    "EngineError",
    "UnknownOpcode",
    "InvalidFetch",
    "MemoryAccessError",
    "StackOverflow",
    "StackUnderflow",
]
