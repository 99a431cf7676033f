"""Display buffer tests."""

from __future__ import annotations

import pytest

from chip8emu.chip8.display import Chip8Display


def test_starts_blank() -> None:
    display = Chip8Display()
    assert (display.width, display.height) == (64, 32)
    assert display.lit_count() == 0
    assert len(display.rows()) == 32
    assert len(display.rows()[0]) == 64


def test_draw_sets_pixels_without_collision() -> None:
    display = Chip8Display()
    assert display.draw_sprite(0, 0, [0b10100000]) is False
    assert display.is_pixel_on(0, 0)
    assert not display.is_pixel_on(1, 0)
    assert display.is_pixel_on(2, 0)


def test_redraw_erases_and_collides() -> None:
    display = Chip8Display()
    display.draw_sprite(5, 5, [0xFF, 0x81])
    assert display.draw_sprite(5, 5, [0xFF, 0x81]) is True
    assert display.lit_count() == 0


def test_partial_overlap_collides() -> None:
    display = Chip8Display()
    display.draw_sprite(0, 0, [0x80])
    assert display.draw_sprite(0, 0, [0xC0]) is True
    assert not display.is_pixel_on(0, 0)
    assert display.is_pixel_on(1, 0)


def test_sprite_wraps_horizontally_by_default() -> None:
    display = Chip8Display()
    display.draw_sprite(60, 0, [0xFF])
    lit = [x for x in range(64) if display.is_pixel_on(x, 0)]
    assert lit == [0, 1, 2, 3, 60, 61, 62, 63]


def test_sprite_clips_horizontally_when_asked() -> None:
    display = Chip8Display()
    display.draw_sprite(60, 0, [0xFF], clip_horizontally=True)
    assert display.lit_count() == 4
    assert not display.is_pixel_on(0, 0)


def test_sprite_clips_vertically_by_default() -> None:
    display = Chip8Display()
    display.draw_sprite(0, 31, [0x80, 0x80, 0x80])
    assert display.is_pixel_on(0, 31)
    assert display.lit_count() == 1


def test_sprite_wraps_vertically_when_allowed() -> None:
    display = Chip8Display()
    display.draw_sprite(0, 31, [0x80, 0x80, 0x80], clip_vertically=False)
    assert display.is_pixel_on(0, 31)
    assert display.is_pixel_on(0, 0)
    assert display.is_pixel_on(0, 1)


def test_origin_wraps_onto_screen() -> None:
    display = Chip8Display()
    display.draw_sprite(64 + 3, 32 + 2, [0x80])
    assert display.is_pixel_on(3, 2)


def test_pixel_lookup_out_of_range() -> None:
    display = Chip8Display()
    with pytest.raises(ValueError):
        display.is_pixel_on(64, 0)
    with pytest.raises(ValueError):
        display.is_pixel_on(0, -1)


def test_extended_mode_resizes_and_clears() -> None:
    display = Chip8Display()
    display.draw_sprite(0, 0, [0xFF])
    display.set_extended(True)
    assert display.extended
    assert (display.width, display.height) == (128, 64)
    assert display.lit_count() == 0
    display.draw_sprite(120, 0, [0xFFFF], sprite_width=16)
    assert display.is_pixel_on(127, 0)
    assert display.is_pixel_on(0, 0)
    display.set_extended(False)
    assert (display.width, display.height) == (64, 32)


def test_render_text_and_pixels() -> None:
    display = Chip8Display(color_on=0x00FF00)
    display.draw_sprite(1, 0, [0x80])
    text = display.render_text()
    lines = text.splitlines()
    assert len(lines) == 32
    assert lines[0].startswith(".#..")
    pixels = display.render_pixels()
    assert pixels[0][1] == 0x00FF00
    assert pixels[0][0] == 0x000000


def test_clear() -> None:
    display = Chip8Display()
    display.draw_sprite(0, 0, [0xFF] * 4)
    display.clear()
    assert display.lit_count() == 0
