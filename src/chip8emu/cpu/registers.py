"""Register file and call stack."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from chip8emu.errors import StackOverflow, StackUnderflow
from chip8emu.memory import PROGRAM_START

REGISTER_COUNT = 16
STACK_DEPTH = 16
FLAG_REGISTER = 0xF


@dataclass
class CallStack:
    """Bounded LIFO of return addresses."""

    capacity: int = STACK_DEPTH
    entries: List[int] = field(default_factory=list)

    def push(self, address: int) -> None:
        if len(self.entries) >= self.capacity:
            raise StackOverflow(len(self.entries) + 1)
        self.entries.append(address & 0xFFFF)

    def pop(self) -> int:
        if not self.entries:
            raise StackUnderflow()
        return self.entries.pop()

    @property
    def depth(self) -> int:
        return len(self.entries)

    def clear(self) -> None:
        self.entries.clear()


@dataclass
class CPURegisters:
    """V0-VF, I and PC. The stack pointer is the depth of ``stack``."""

    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    index: int = 0
    program_counter: int = PROGRAM_START
    stack: CallStack = field(default_factory=CallStack)

    def get_v(self, x: int) -> int:
        return self.v[x]

    def set_v(self, x: int, value: int) -> None:
        self.v[x] = value & 0xFF

    def set_flag(self, value: bool | int) -> None:
        self.v[FLAG_REGISTER] = 1 if value else 0

    def set_index(self, value: int) -> None:
        self.index = value & 0xFFFF

    def advance(self, count: int = 1) -> None:
        self.program_counter = (self.program_counter + 2 * count) & 0xFFFF

    def jump(self, address: int) -> None:
        self.program_counter = address & 0xFFFF

    @property
    def stack_pointer(self) -> int:
        return self.stack.depth

    def reset(self) -> None:
        self.v = [0] * REGISTER_COUNT
        self.index = 0
        self.program_counter = PROGRAM_START
        self.stack.clear()
