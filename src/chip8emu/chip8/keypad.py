"""CHIP-8 hexadecimal keypad state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

KEY_COUNT = 16


@dataclass
class Chip8Keypad:
    """Sixteen independent key flags, written by the host between cycles.

    The physical COSMAC VIP layout is::

        1 2 3 C
        4 5 6 D
        7 8 9 E
        A 0 B F
    """

    _keys: List[bool] = field(default_factory=lambda: [False] * KEY_COUNT)

    def set_key(self, index: int, pressed: bool) -> None:
        if not (0 <= index < KEY_COUNT):
            raise ValueError("key index out of range")
        self._keys[index] = bool(pressed)

    def press(self, index: int) -> None:
        self.set_key(index, True)

    def release(self, index: int) -> None:
        self.set_key(index, False)

    def is_pressed(self, index: int) -> bool:
        return self._keys[index & 0x0F]

    def first_pressed(self) -> Optional[int]:
        for index, pressed in enumerate(self._keys):
            if pressed:
                return index
        return None

    def set_state(self, keys: Iterable[bool]) -> None:
        values = [bool(value) for value in keys]
        if len(values) != KEY_COUNT:
            raise ValueError("keypad state must have 16 entries")
        self._keys = values

    def get_state(self) -> List[bool]:
        return list(self._keys)

    def clear(self) -> None:
        self._keys = [False] * KEY_COUNT
