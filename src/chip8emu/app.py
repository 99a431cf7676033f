"""CHIP-8 emulator pygame frontend."""

from __future__ import annotations

import argparse
import sys
from typing import Dict, Iterable, Optional

from chip8emu.chip8.computer import Chip8Computer, Chip8Config, DEFAULT_INSTRUCTIONS_PER_SECOND
from chip8emu.chip8.keypad import Chip8Keypad
from chip8emu.chip8.quirks import Quirks, preset_names
from chip8emu.emulator.file import RomInfo, RomLoadError, resolve_rom_path
from chip8emu.errors import EngineError

BASE_CAPTION = "CHIP-8 Emulator"
FRAMES_PER_SECOND = 60

# Left-hand block of a QWERTY keyboard mapped onto the 4x4 hex keypad.
KEYPAD_MAP: Dict[int, int] = {
    ord("1"): 0x1,
    ord("2"): 0x2,
    ord("3"): 0x3,
    ord("4"): 0xC,
    ord("q"): 0x4,
    ord("w"): 0x5,
    ord("e"): 0x6,
    ord("r"): 0xD,
    ord("a"): 0x7,
    ord("s"): 0x8,
    ord("d"): 0x9,
    ord("f"): 0xE,
    ord("z"): 0xA,
    ord("x"): 0x0,
    ord("c"): 0xB,
    ord("v"): 0xF,
}


def _handle_key_event(keypad: Chip8Keypad, key: int, pressed: bool) -> bool:
    index = KEYPAD_MAP.get(key)
    if index is None:
        return False
    keypad.set_key(index, pressed)
    return True


def _build_caption(info: Optional[RomInfo], *, paused: bool = False, halted: str | None = None) -> str:
    caption = BASE_CAPTION
    if info is not None:
        caption = f"{caption} | {info.name}"
    if halted:
        return f"{caption} | HALTED: {halted}"
    if paused:
        return f"{caption} | PAUSED"
    return caption


def _pygame_loop(computer: Chip8Computer, info: RomInfo, *, scale: int) -> int:
    import pygame  # type: ignore

    pygame.init()
    display = computer.display
    screen = pygame.display.set_mode((display.width * scale, display.height * scale))
    pygame.display.set_caption(_build_caption(info))
    clock = pygame.time.Clock()
    keypad = computer.hardware.keypad
    halted: str | None = None
    exit_code = 0

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_F5:
                    computer.reset()
                    computer.resume()
                    halted = None
                    pygame.display.set_caption(_build_caption(info))
                elif event.key == pygame.K_p and halted is None:
                    if computer.running:
                        computer.pause()
                    else:
                        computer.resume()
                    pygame.display.set_caption(_build_caption(info, paused=not computer.running))
                else:
                    _handle_key_event(keypad, event.key, True)
            elif event.type == pygame.KEYUP:
                _handle_key_event(keypad, event.key, False)

        if halted is None:
            try:
                computer.run_frame()
            except EngineError as exc:
                print(f"Execution halted: {exc}", file=sys.stderr)
                halted = type(exc).__name__
                exit_code = 2
                computer.pause()
                pygame.display.set_caption(_build_caption(info, halted=halted))

        if (display.width * scale, display.height * scale) != screen.get_size():
            screen = pygame.display.set_mode((display.width * scale, display.height * scale))
        screen.blit(display.render_pygame_surface(scaling=scale), (0, 0))
        pygame.display.flip()
        clock.tick(FRAMES_PER_SECOND)

    computer.zero_sound()
    pygame.quit()
    return exit_code


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CHIP-8 emulator")
    parser.add_argument("rom", nargs="?", default=None, help="ROM image (defaults to $CHIP8EMU_ROM)")
    parser.add_argument("--scale", type=int, default=10, help="Integer scaling factor for display (default: 10)")
    parser.add_argument(
        "--hz",
        type=int,
        default=DEFAULT_INSTRUCTIONS_PER_SECOND,
        help=f"Instructions per second (default: {DEFAULT_INSTRUCTIONS_PER_SECOND})",
    )
    parser.add_argument("--quirks", choices=preset_names(), default="chip8", help="Quirk preset")
    parser.add_argument("--audio", action="store_true", help="Play the sound timer tone through pygame.mixer")
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_argument_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.scale <= 0:
        parser.error("--scale must be positive")
    if args.hz <= 0:
        parser.error("--hz must be positive")

    rom_path = resolve_rom_path(args.rom)
    if rom_path is None:
        parser.error("no ROM given (pass a path or set CHIP8EMU_ROM)")

    config = Chip8Config(
        instructions_per_second=args.hz,
        quirks=Quirks.preset(args.quirks),
        enable_audio=args.audio,
    )
    computer = Chip8Computer(config)
    try:
        info = computer.load_rom_file(rom_path)
    except RomLoadError as exc:
        print(f"Failed to load ROM: {exc}", file=sys.stderr)
        return 1

    try:
        import pygame  # type: ignore  # noqa: F401
    except ImportError:
        print("pygame is required for the emulator window", file=sys.stderr)
        return 1

    return _pygame_loop(computer, info, scale=args.scale)


if __name__ == "__main__":
    raise SystemExit(main())
