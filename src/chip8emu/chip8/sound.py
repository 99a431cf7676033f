"""CHIP-8 beeper with optional square-wave playback."""

from __future__ import annotations

from array import array
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class Chip8SoundProcessor:
    """Follows the sound timer: a tone plays while the timer is non-zero.

    Every on/off edge is appended to ``history`` as ``(event, timestamp)``
    whether or not audio output is enabled, so headless runs can be checked.
    """

    history: List[Tuple[str, float]] = field(default_factory=list)
    frequency: float = 440.0
    sample_rate: int = 44100
    volume: float = 0.3
    enable_audio: bool = False

    def __post_init__(self) -> None:
        self._active = False
        self._output: Optional[Tuple[object, object]] = None

    @property
    def active(self) -> bool:
        return self._active

    def set_active(self, timestamp: float, active: bool) -> None:
        if active == self._active:
            return
        self._active = active
        if active:
            self.set_line_on(timestamp)
        else:
            self.set_line_off(timestamp)

    def set_line_on(self, timestamp: float = 0.0) -> None:
        self.history.append(("set_line_on", timestamp))
        output = self._mixer_output()
        if output is None:
            return
        channel, tone = output
        channel.set_volume(self.volume)
        channel.play(tone, loops=-1)

    def set_line_off(self, timestamp: float = 0.0) -> None:
        self.history.append(("set_line_off", timestamp))
        if self._output is not None:
            self._output[0].stop()

    def _mixer_output(self) -> Optional[Tuple[object, object]]:
        """Channel and looped tone, opened on first use; ``None`` when audio is off."""

        if self._output is not None or not self.enable_audio:
            return self._output
        try:
            import pygame  # type: ignore

            mixer = pygame.mixer
            if not mixer.get_init():
                mixer.init(frequency=self.sample_rate, size=-16, channels=1)
            self._output = (mixer.Channel(0), mixer.Sound(buffer=self._square_wave()))
        except Exception as exc:
            print(f"audio disabled: {exc}")
            self.enable_audio = False
            self._output = None
        return self._output

    def _square_wave(self) -> array:
        """One period of a signed 16-bit square wave."""

        period = max(2, round(self.sample_rate / self.frequency))
        level = int(self.volume * 32767)
        high = period // 2
        return array("h", [level] * high + [-level] * (period - high))
