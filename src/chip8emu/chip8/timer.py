"""Delay and sound timers."""

from __future__ import annotations

from dataclasses import dataclass, field

TIMER_HZ = 60


@dataclass
class Chip8Timer:
    """8-bit counter decremented once per 60 Hz tick, held at zero."""

    value: int = 0

    def get(self) -> int:
        return self.value

    def set(self, value: int) -> None:
        self.value = value & 0xFF

    def tick(self) -> None:
        if self.value > 0:
            self.value -= 1

    @property
    def active(self) -> bool:
        return self.value > 0


@dataclass
class Chip8Timers:
    delay: Chip8Timer = field(default_factory=Chip8Timer)
    sound: Chip8Timer = field(default_factory=Chip8Timer)

    def tick(self) -> None:
        self.delay.tick()
        self.sound.tick()

    def reset(self) -> None:
        self.delay.set(0)
        self.sound.set(0)
