"""Run-state scaffold shared by concrete machines, plus the frame clock."""

from __future__ import annotations

from enum import IntEnum
from typing import Optional


MICROSECONDS = 1_000_000


class FrameClock:
    """Converts elapsed wall-clock time into whole instruction and timer ticks.

    Elapsed time is kept as integer microseconds and both counts are derived
    from the running total, so a delta of 1/60 s always yields one timer tick.
    """

    def __init__(self, instructions_per_second: float, timer_hz: float = 60.0) -> None:
        if instructions_per_second <= 0 or timer_hz <= 0:
            raise ValueError("frequencies must be positive")
        self.instructions_per_second = instructions_per_second
        self.timer_hz = timer_hz
        self.elapsed_us: int = 0

    @property
    def elapsed(self) -> float:
        return self.elapsed_us / MICROSECONDS

    @staticmethod
    def _count(rate: float, elapsed_us: int) -> int:
        return int(rate * elapsed_us) // MICROSECONDS

    def advance(self, delta_seconds: float) -> tuple[int, int]:
        delta_us = round(delta_seconds * MICROSECONDS)
        if delta_us <= 0:
            return 0, 0
        before = self.elapsed_us
        after = before + delta_us
        steps = self._count(self.instructions_per_second, after) - self._count(self.instructions_per_second, before)
        ticks = self._count(self.timer_hz, after) - self._count(self.timer_hz, before)
        self.elapsed_us = after
        return steps, ticks

    def reset(self) -> None:
        self.elapsed_us = 0


class RunStatus(IntEnum):
    RUNNING = 0
    PAUSED = 1
    STOPPED = 2


class Computer:
    """Hardware and a CPU under a run state.

    A machine is STOPPED until ``power_on``. ``pause``/``resume`` only move
    between RUNNING and PAUSED; a stopped machine ignores both.
    """

    STATUS_RUNNING = RunStatus.RUNNING
    STATUS_PAUSED = RunStatus.PAUSED
    STATUS_STOPPED = RunStatus.STOPPED

    def __init__(self, hardware: object, *, instructions_per_second: float = 700.0, timer_hz: float = 60.0) -> None:
        self.hardware = hardware
        self.clock = FrameClock(instructions_per_second, timer_hz)
        self.cpu: Optional[object] = None
        self._status = RunStatus.STOPPED

    def set_cpu(self, cpu: object) -> None:
        """Attach ``cpu`` and point its ``computer`` back-reference here."""

        cpu.computer = self  # type: ignore[attr-defined]
        self.cpu = cpu

    # ------------------------------------------------------------------
    # Run state
    # ------------------------------------------------------------------
    @property
    def running_status(self) -> RunStatus:
        return self._status

    @property
    def running(self) -> bool:
        return self._status is RunStatus.RUNNING

    def set_running_status(self, status: int) -> None:
        # RunStatus() raises ValueError for anything but the three states.
        self._status = RunStatus(status)

    def _transition(self, current: RunStatus, target: RunStatus) -> None:
        if self._status is current:
            self._status = target

    def power_on(self) -> None:
        self.reset()
        self._status = RunStatus.RUNNING

    def power_off(self) -> None:
        self._status = RunStatus.STOPPED

    def pause(self) -> None:
        self._transition(RunStatus.RUNNING, RunStatus.PAUSED)

    def resume(self) -> None:
        self._transition(RunStatus.PAUSED, RunStatus.RUNNING)

    def reset(self) -> None:
        self.clock.reset()
        reset_cpu = getattr(self.cpu, "reset", None)
        if reset_cpu is not None:
            reset_cpu()

    # ------------------------------------------------------------------
    # Instruction rate
    # ------------------------------------------------------------------
    def get_clock_frequency(self) -> float:
        return self.clock.instructions_per_second

    def set_clock_frequency(self, frequency: float) -> None:
        """Change the instruction rate; accumulated time restarts from zero."""

        if frequency <= 0:
            raise ValueError("instruction rate must be positive")
        self.clock.instructions_per_second = frequency
        self.clock.reset()

    @property
    def steps_per_frame(self) -> int:
        """Instructions executed per 60 Hz frame by ``run_frame`` (never zero)."""

        return max(1, round(self.clock.instructions_per_second / self.clock.timer_hz))
