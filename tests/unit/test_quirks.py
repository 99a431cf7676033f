"""Quirk configuration tests."""

from __future__ import annotations

import dataclasses

import pytest

from chip8emu.chip8.quirks import Quirks, preset_names


def test_defaults_follow_cosmac_vip() -> None:
    quirks = Quirks()
    assert quirks.shift_uses_vy
    assert not quirks.jump_with_offset_uses_vx
    assert quirks.store_load_increments_index
    assert quirks.clip_sprites_vertically
    assert not quirks.clip_sprites_horizontally
    assert quirks.logic_resets_vf
    assert not quirks.extended_display


def test_presets() -> None:
    assert preset_names() == ["chip48", "chip8", "schip"]
    assert Quirks.preset("chip8") == Quirks()
    schip = Quirks.preset("  SCHIP ")
    assert schip.extended_display
    assert not schip.shift_uses_vy
    assert schip.jump_with_offset_uses_vx


def test_unknown_preset() -> None:
    with pytest.raises(ValueError):
        Quirks.preset("xo-chip")


def test_quirks_are_immutable() -> None:
    quirks = Quirks()
    with pytest.raises(dataclasses.FrozenInstanceError):
        quirks.shift_uses_vy = False  # type: ignore[misc]
    changed = quirks.replace(shift_uses_vy=False)
    assert not changed.shift_uses_vy
    assert quirks.shift_uses_vy
    assert changed.as_dict()["shift_uses_vy"] is False
