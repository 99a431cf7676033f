"""CHIP-8 hardware bundle shared by the CPU and the host."""

from __future__ import annotations

from dataclasses import dataclass, field

from chip8emu.chip8.display import Chip8Display
from chip8emu.chip8.keypad import Chip8Keypad
from chip8emu.chip8.sound import Chip8SoundProcessor
from chip8emu.chip8.timer import Chip8Timers
from chip8emu.memory import Memory


@dataclass
class Chip8Hardware:
    memory: Memory = field(default_factory=Memory)
    display: Chip8Display = field(default_factory=Chip8Display)
    keypad: Chip8Keypad = field(default_factory=Chip8Keypad)
    timers: Chip8Timers = field(default_factory=Chip8Timers)
    sound_processor: Chip8SoundProcessor = field(default_factory=Chip8SoundProcessor)
