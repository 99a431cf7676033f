"""Headless runner for CHIP-8 ROM diagnostics."""

from __future__ import annotations

import argparse
import random
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from chip8emu.chip8.computer import Chip8Computer, Chip8Config
from chip8emu.chip8.quirks import Quirks, preset_names
from chip8emu.cpu.cpu import StepResult
from chip8emu.cpu.instruction import disassemble
from chip8emu.emulator.file import RomLoadError, resolve_rom_path
from chip8emu.errors import EngineError, UnknownOpcode
from chip8emu.memory import MEMORY_SIZE

DEFAULT_MAX_FRAMES = 600
DEFAULT_HZ = 700
ADDRESS_MASK = MEMORY_SIZE - 1

EXIT_OK = 0
EXIT_LOAD_ERROR = 1
EXIT_ENGINE_ERROR = 2
EXIT_KEY_WAIT = 3


@dataclass(frozen=True)
class DumpRange:
    """Inclusive address range selected with ``--dump-range``."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def row_addresses(self) -> range:
        """Base addresses of the 16-byte rows covering the range."""

        return range(self.start & ~0x0F, self.end + 1, 16)


@dataclass
class RunOutcome:
    steps: int = 0
    frames: int = 0
    break_hit: bool = False
    waiting: bool = False
    error: EngineError | None = None
    skipped: int = 0
    timed_out: bool = False


def _parse_hex(value: str, *, limit: int = ADDRESS_MASK) -> int:
    text = value.strip()
    digits = text[2:] if text[:2].lower() == "0x" else text
    try:
        result = int(digits, 16)
    except ValueError:
        raise ValueError(f"not a hexadecimal value: {value!r}") from None
    if result < 0 or result > limit:
        raise ValueError(f"{text} is outside 0..{limit:X}")
    return result


def _parse_range(text: str) -> DumpRange:
    if ":" not in text:
        raise ValueError(f"expected START:END, got {text!r}")
    first, last = (_parse_hex(part) for part in text.split(":", 1))
    if last < first:
        raise ValueError("range end lies before its start")
    return DumpRange(first, last)


def _merge_ranges(ranges: Sequence[DumpRange]) -> List[DumpRange]:
    """Sort and coalesce overlapping or touching ranges; no ranges means all of RAM."""

    if not ranges:
        return [DumpRange(0x000, ADDRESS_MASK)]
    merged: List[DumpRange] = []
    for item in sorted(ranges, key=lambda r: (r.start, r.end)):
        if merged and item.start <= merged[-1].end + 1:
            previous = merged.pop()
            item = DumpRange(previous.start, max(previous.end, item.end))
        merged.append(item)
    return merged


def _format_hex_dump(memory, dump_ranges: Sequence[DumpRange]) -> str:
    header = "ADDR " + " ".join(f"+{column:X}" for column in range(16))
    blocks: List[str] = []
    for dump_range in dump_ranges:
        rows = [header]
        for base in dump_range.row_addresses():
            values = memory.read_block(base, 16)
            rows.append(f"{base:04X} " + " ".join(f"{value:02X}" for value in values))
        blocks.append("\n".join(rows))
    return "\n\n".join(blocks)


def _write_dump(memory, dump_ranges: Sequence[DumpRange], *, target: Path | None, fmt: str) -> None:
    ranges = _merge_ranges(dump_ranges)
    if fmt == "bin":
        data = b"".join(bytes(memory.read_block(r.start, r.length)) for r in ranges)
        if target is None:
            sys.stdout.buffer.write(data)
        else:
            target.write_bytes(data)
        return

    text = _format_hex_dump(memory, ranges)
    if target is None:
        print(text)
    else:
        target.write_text(text + "\n")


def _resolve_quirks(name: str, overrides: Sequence[str]) -> Quirks:
    quirks = Quirks.preset(name)
    changes = {}
    known = set(quirks.as_dict())
    for item in overrides:
        key, sep, raw = item.partition("=")
        key = key.strip().replace("-", "_")
        if key not in known:
            raise ValueError(f"unknown quirk '{key}'")
        if not sep:
            changes[key] = True
            continue
        value = raw.strip().lower()
        if value not in {"1", "0", "true", "false", "on", "off"}:
            raise ValueError(f"invalid value for quirk '{key}': {raw}")
        changes[key] = value in {"1", "true", "on"}
    return quirks.replace(**changes)


def _execute_program(
    computer: Chip8Computer,
    *,
    max_frames: int | None,
    max_steps: int | None,
    breakpoints: Sequence[int],
    on_unknown: str,
    max_seconds: float | None,
    trace: bool = False,
) -> RunOutcome:
    cpu = computer.cpu_core
    outcome = RunOutcome()
    break_set = {value & ADDRESS_MASK for value in breakpoints}
    per_frame = computer.steps_per_frame
    deadline: float | None = None
    if max_seconds is not None and max_seconds >= 0:
        deadline = time.monotonic() + max_seconds

    while max_frames is None or outcome.frames < max_frames:
        for _ in range(per_frame):
            if max_steps is not None and outcome.steps >= max_steps:
                return outcome
            pc = cpu.registers.program_counter
            if break_set and pc in break_set and outcome.steps:
                outcome.break_hit = True
                return outcome
            if trace:
                word = computer.memory.read_word(pc) if pc + 1 < computer.memory.size else 0
                print(f"{pc:03X}: {word:04X}  {disassemble(word)}", file=sys.stderr)
            try:
                result = computer.step()
            except UnknownOpcode as exc:
                if on_unknown != "skip":
                    outcome.error = exc
                    return outcome
                print(f"skipping {exc}", file=sys.stderr)
                computer.skip_instruction()
                outcome.skipped += 1
                result = StepResult.EXECUTED
            except EngineError as exc:
                outcome.error = exc
                return outcome
            outcome.steps += 1
            outcome.waiting = result is StepResult.WAITING
        computer.tick_timers()
        outcome.frames += 1
        if deadline is not None and time.monotonic() >= deadline:
            outcome.timed_out = True
            return outcome
    return outcome


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8-debug-runner",
        description="Headless CHIP-8 runner for ROM diagnostics.",
    )
    parser.add_argument("--rom", type=str, default=None, help="ROM image (defaults to $CHIP8EMU_ROM)")
    parser.add_argument(
        "--frames",
        type=int,
        default=DEFAULT_MAX_FRAMES,
        help="Maximum 60 Hz frames to execute (0 or negative disables the limit)",
    )
    parser.add_argument("--steps", type=int, default=None, help="Stop after this many instructions")
    parser.add_argument("--hz", type=int, default=DEFAULT_HZ, help="Instructions per second (default: 700)")
    parser.add_argument("--quirks", choices=preset_names(), default="chip8", help="Quirk preset")
    parser.add_argument(
        "--quirk",
        action="append",
        default=[],
        help="Override a single quirk, e.g. shift_uses_vy=off (repeatable)",
    )
    parser.add_argument(
        "--break-pc",
        action="append",
        default=[],
        help="Break when PC reaches the given hex address (repeatable)",
    )
    parser.add_argument(
        "--key",
        action="append",
        default=[],
        help="Hex keypad key held down for the whole run (repeatable)",
    )
    parser.add_argument(
        "--on-unknown",
        choices=("halt", "skip"),
        default="halt",
        help="Policy for unknown opcodes",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the CXNN random source")
    parser.add_argument("--trace", action="store_true", help="Print each instruction to stderr")
    parser.add_argument(
        "--dump",
        type=str,
        default=None,
        help="Write the memory dump to this file instead of stdout",
    )
    parser.add_argument(
        "--dump-range",
        action="append",
        default=[],
        help="Inclusive START:END hex range to dump (repeatable, default: all of RAM)",
    )
    parser.add_argument(
        "--dump-format",
        choices=("hex", "bin", "none"),
        default="none",
        help="Memory dump format; a --dump path implies hex",
    )
    parser.add_argument("--show-display", action="store_true", help="Print the display and registers")
    parser.add_argument(
        "--seconds",
        type=float,
        default=None,
        help="Maximum wall-clock seconds to run",
    )
    return parser


def _parse_each(parser: argparse.ArgumentParser, values: Sequence[str], parse, what: str) -> list:
    parsed = []
    for raw in values:
        try:
            parsed.append(parse(raw))
        except ValueError as exc:
            parser.error(f"invalid {what} '{raw}': {exc}")
    return parsed


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    rom_path = resolve_rom_path(args.rom)
    if rom_path is None:
        parser.error("no ROM given (use --rom or set CHIP8EMU_ROM)")

    if args.hz <= 0:
        parser.error("--hz must be positive")

    breakpoints = _parse_each(parser, args.break_pc, _parse_hex, "breakpoint address")
    keys = _parse_each(parser, args.key, lambda raw: _parse_hex(raw, limit=0xF), "key")
    dump_ranges = _parse_each(parser, args.dump_range, _parse_range, "dump range")

    try:
        quirks = _resolve_quirks(args.quirks, args.quirk)
    except ValueError as exc:
        parser.error(str(exc))

    rng = random.Random(args.seed) if args.seed is not None else None
    computer = Chip8Computer(Chip8Config(instructions_per_second=args.hz, quirks=quirks), rng=rng)

    try:
        computer.load_rom_file(rom_path)
    except RomLoadError as exc:
        print(f"Failed to load ROM: {exc}", file=sys.stderr)
        return EXIT_LOAD_ERROR

    for key in keys:
        computer.set_key(key, True)

    outcome = _execute_program(
        computer,
        max_frames=args.frames if args.frames > 0 else None,
        max_steps=args.steps,
        breakpoints=breakpoints,
        on_unknown=args.on_unknown,
        max_seconds=args.seconds,
        trace=args.trace,
    )

    if args.show_display:
        print(computer.display.render_text())
        for line in computer.get_debug().format_registers():
            print(line)

    if args.dump_format != "none" or args.dump is not None:
        fmt = "hex" if args.dump_format == "none" else args.dump_format
        dump_target = Path(args.dump) if args.dump is not None else None
        _write_dump(computer.memory, dump_ranges, target=dump_target, fmt=fmt)

    if outcome.error is not None:
        print(f"Execution halted: {outcome.error}", file=sys.stderr)
        return EXIT_ENGINE_ERROR
    if outcome.break_hit:
        return EXIT_OK
    if outcome.waiting:
        print("Execution stopped: waiting for a key", file=sys.stderr)
        return EXIT_KEY_WAIT
    if outcome.timed_out:
        print("Execution stopped: time limit reached", file=sys.stderr)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
