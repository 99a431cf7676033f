"""CHIP-8 monochrome display buffer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

STANDARD_SIZE = (64, 32)
EXTENDED_SIZE = (128, 64)


@dataclass
class Chip8Display:
    width: int = STANDARD_SIZE[0]
    height: int = STANDARD_SIZE[1]
    color_on: int = 0xFFFFFF
    color_off: int = 0x000000

    _pixels: List[List[bool]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.clear()

    @property
    def extended(self) -> bool:
        return (self.width, self.height) == EXTENDED_SIZE

    def set_extended(self, enabled: bool) -> None:
        """Switch between 64x32 and 128x64. The buffer is cleared either way."""

        self.width, self.height = EXTENDED_SIZE if enabled else STANDARD_SIZE
        self.clear()

    def clear(self) -> None:
        self._pixels = [[False] * self.width for _ in range(self.height)]

    def is_pixel_on(self, x: int, y: int) -> bool:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ValueError("pixel coordinate out of range")
        return self._pixels[y][x]

    def rows(self) -> Tuple[Tuple[bool, ...], ...]:
        """Read-only snapshot of the pixel grid, indexed ``[y][x]``."""

        return tuple(tuple(row) for row in self._pixels)

    def lit_count(self) -> int:
        return sum(sum(1 for pixel in row if pixel) for row in self._pixels)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def draw_sprite(
        self,
        x: int,
        y: int,
        sprite: Sequence[int],
        *,
        sprite_width: int = 8,
        clip_vertically: bool = True,
        clip_horizontally: bool = False,
    ) -> bool:
        """XOR ``sprite`` onto the buffer and report whether a lit pixel went dark.

        Each entry of ``sprite`` is one row, most significant bit leftmost.
        The origin wraps onto the screen; the sprite body wraps or clips at
        the edges according to the two clip flags.
        """

        origin_x = x % self.width
        origin_y = y % self.height
        collided = False
        for row_offset, bits in enumerate(sprite):
            py = origin_y + row_offset
            if py >= self.height:
                if clip_vertically:
                    break
                py %= self.height
            row = self._pixels[py]
            for col in range(sprite_width):
                if not (bits >> (sprite_width - 1 - col)) & 0x01:
                    continue
                px = origin_x + col
                if px >= self.width:
                    if clip_horizontally:
                        break
                    px %= self.width
                if row[px]:
                    collided = True
                row[px] = not row[px]
        return collided

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render_pixels(self) -> List[List[int]]:
        return [[self.color_on if pixel else self.color_off for pixel in row] for row in self._pixels]

    def render_text(self, on: str = "#", off: str = ".") -> str:
        return "\n".join("".join(on if pixel else off for pixel in row) for row in self._pixels)

    def render_pygame_surface(self, scaling: int = 1):
        """Render the display into a pygame Surface.

        Parameters
        ----------
        scaling:
            Integer scale factor applied to both axes.

        Returns
        -------
        pygame.Surface
            RGB surface representing the current screen.

        Raises
        ------
        RuntimeError
            If pygame is not available.
        """

        if scaling <= 0:
            raise ValueError("scaling factor must be positive")

        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for render_pygame_surface") from exc

        surface = pygame.Surface((self.width * scaling, self.height * scaling))
        surface.fill(self.color_off)
        for y, row in enumerate(self._pixels):
            for x, pixel in enumerate(row):
                if pixel:
                    surface.fill(self.color_on, (x * scaling, y * scaling, scaling, scaling))
        return surface
