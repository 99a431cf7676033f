"""CHIP-8 machine: the core API consumed by host frontends."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
import random
from typing import List, Optional, Tuple

from chip8emu.chip8.display import Chip8Display
from chip8emu.chip8.hardware import Chip8Hardware
from chip8emu.chip8.quirks import Quirks
from chip8emu.chip8.sound import Chip8SoundProcessor
from chip8emu.chip8.timer import TIMER_HZ
from chip8emu.cpu.cpu import Chip8CPU, StepResult
from chip8emu.cpu.instruction import Op
from chip8emu.emulator.file import RomInfo, read_rom
from chip8emu.errors import RomTooLarge
from chip8emu.system.computer import Computer

DEFAULT_INSTRUCTIONS_PER_SECOND = 700


@dataclass(frozen=True)
class Chip8Config:
    instructions_per_second: int = DEFAULT_INSTRUCTIONS_PER_SECOND
    timer_hz: int = TIMER_HZ
    quirks: Quirks = field(default_factory=Quirks)
    enable_audio: bool = False


@dataclass(frozen=True)
class DebugState:
    """Point-in-time copy of the machine state for inspection tools."""

    v: Tuple[int, ...]
    index: int
    program_counter: int
    stack: Tuple[int, ...]
    delay_timer: int
    sound_timer: int
    instruction_count: int
    memory: bytes

    def format_registers(self) -> List[str]:
        lines = [
            " ".join(f"V{i:X}={value:02X}" for i, value in enumerate(self.v[:8])),
            " ".join(f"V{i + 8:X}={value:02X}" for i, value in enumerate(self.v[8:])),
            f"PC={self.program_counter:04X} I={self.index:04X} SP={len(self.stack):X} "
            f"DT={self.delay_timer:02X} ST={self.sound_timer:02X}",
        ]
        if self.stack:
            lines.append("STACK " + " ".join(f"{address:03X}" for address in self.stack))
        return lines


class Chip8Computer(Computer):
    """A single CHIP-8 machine owning its memory, registers, timers and I/O.

    The host drives it either instruction by instruction (``step`` plus
    ``tick_timers`` at 60 Hz) or per frame through ``run_frame`` /
    ``emulate``. Machines start paused and ``load_rom`` sets them running.
    """

    def __init__(
        self,
        config: Optional[Chip8Config] = None,
        *,
        rng: Optional[random.Random] = None,
        enable_audio: bool | None = None,
    ) -> None:
        self.config = config if config is not None else Chip8Config()
        if enable_audio is None:
            enable_audio = self.config.enable_audio
        hardware = Chip8Hardware(sound_processor=Chip8SoundProcessor(enable_audio=enable_audio))
        super().__init__(
            hardware,
            instructions_per_second=self.config.instructions_per_second,
            timer_hz=self.config.timer_hz,
        )
        self._quirks = self.config.quirks
        self.rom_info: Optional[RomInfo] = None
        self.cpu_core = Chip8CPU(self, rng=rng)
        self.set_cpu(self.cpu_core)
        self.set_running_status(self.STATUS_PAUSED)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def quirks(self) -> Quirks:
        return self._quirks

    @property
    def memory(self):
        return self.hardware.memory

    @property
    def registers(self):
        return self.cpu_core.registers

    @property
    def display(self) -> Chip8Display:
        return self.hardware.display

    def display_rows(self) -> Tuple[Tuple[bool, ...], ...]:
        return self.hardware.display.rows()

    def sound_active(self) -> bool:
        return self.hardware.timers.sound.active

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Restart the loaded program: registers, stack, timers and screen are cleared."""

        super().reset()
        hardware = self.hardware
        hardware.display.set_extended(False)
        hardware.timers.reset()
        self._sync_sound()

    def load_rom(self, rom: bytes | bytearray, *, quirks: Optional[Quirks] = None) -> None:
        """Install a ROM image at 0x200 and reset the machine.

        ``RomTooLarge`` is raised before anything changes, so a rejected image
        leaves the running program untouched.
        """

        image = bytes(rom)
        capacity = self.hardware.memory.program_capacity
        if len(image) > capacity:
            raise RomTooLarge(len(image), capacity)
        self.hardware.memory.load_rom(image)
        if quirks is not None:
            self._quirks = quirks
        self.reset()
        self.set_running_status(self.STATUS_RUNNING)

    def set_running_status(self, status: int) -> None:
        super().set_running_status(status)
        self._sync_sound()

    def pause(self) -> None:
        super().pause()
        self._sync_sound()

    def resume(self) -> None:
        super().resume()
        self._sync_sound()

    def load_rom_file(self, path: str | os.PathLike[str], *, quirks: Optional[Quirks] = None) -> RomInfo:
        info = read_rom(path, capacity=self.hardware.memory.program_capacity)
        self.load_rom(info.data, quirks=quirks)
        self.rom_info = info
        return info

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def step(self) -> StepResult:
        result = self.cpu_core.step()
        last = self.cpu_core.last_instruction
        if last is not None and last.op is Op.LD_ST_VX:
            self._sync_sound()
        return result

    def skip_instruction(self) -> None:
        self.cpu_core.skip()

    def tick_timers(self) -> None:
        self.hardware.timers.tick()
        self._sync_sound()

    def run_frame(self) -> int:
        """Execute one 1/60 s frame: ``steps_per_frame`` steps, then one timer tick."""

        if not self.running:
            return 0
        for _ in range(self.steps_per_frame):
            self.step()
        self.tick_timers()
        return self.steps_per_frame

    def emulate(self, delta_seconds: float) -> int:
        """Advance by wall-clock time, interleaving timer ticks with the steps."""

        if not self.running:
            return 0
        steps, ticks = self.clock.advance(delta_seconds)
        executed = 0
        for tick in range(ticks):
            # Spread the steps over the ticks of this slice.
            share = steps * (tick + 1) // ticks - executed
            for _ in range(share):
                self.step()
            executed += share
            self.tick_timers()
        for _ in range(steps - executed):
            self.step()
        return steps

    def set_key(self, index: int, pressed: bool) -> None:
        self.hardware.keypad.set_key(index, pressed)

    # ------------------------------------------------------------------
    # Debugging helpers
    # ------------------------------------------------------------------
    def get_debug(self) -> DebugState:
        regs = self.cpu_core.registers
        timers = self.hardware.timers
        return DebugState(
            v=tuple(regs.v),
            index=regs.index,
            program_counter=regs.program_counter,
            stack=tuple(regs.stack.entries),
            delay_timer=timers.delay.get(),
            sound_timer=timers.sound.get(),
            instruction_count=self.cpu_core.instruction_count,
            memory=self.hardware.memory.dump(),
        )

    def zero_delay(self) -> None:
        self.hardware.timers.delay.set(0)

    def zero_sound(self) -> None:
        self.hardware.timers.sound.set(0)
        self._sync_sound()

    def _sync_sound(self) -> None:
        # The tone only plays while the machine runs; a paused or halted
        # machine keeps its sound timer but goes quiet.
        active = self.running and self.sound_active()
        self.hardware.sound_processor.set_active(self.clock.elapsed, active)
