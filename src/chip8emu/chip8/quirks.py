"""Named toggles for opcode behaviour that historic interpreters disagree on."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class Quirks:
    """Compatibility switches, fixed for the lifetime of a loaded ROM.

    Defaults reproduce the COSMAC VIP interpreter.

    shift_uses_vy:
        ``8XY6``/``8XYE`` shift ``VY`` into ``VX`` instead of shifting ``VX``.
    jump_with_offset_uses_vx:
        ``BNNN`` adds ``VX`` (X = high nibble of NNN) instead of ``V0``.
    store_load_increments_index:
        ``FX55``/``FX65`` leave ``I`` at ``I + X + 1``.
    clip_sprites_vertically:
        Rows drawn past the bottom edge are dropped instead of wrapping.
    clip_sprites_horizontally:
        Columns drawn past the right edge are dropped instead of wrapping.
    logic_resets_vf:
        ``8XY1``/``8XY2``/``8XY3`` clear ``VF``.
    extended_display:
        Decode ``00FE``/``00FF`` and allow the 128x64 display mode.
    """

    shift_uses_vy: bool = True
    jump_with_offset_uses_vx: bool = False
    store_load_increments_index: bool = True
    clip_sprites_vertically: bool = True
    clip_sprites_horizontally: bool = False
    logic_resets_vf: bool = True
    extended_display: bool = False

    @classmethod
    def preset(cls, name: str) -> "Quirks":
        key = name.strip().lower()
        try:
            return PRESETS[key]
        except KeyError:
            raise ValueError(f"unknown quirk preset: {name}") from None

    def replace(self, **changes: bool) -> "Quirks":
        return dataclasses.replace(self, **changes)

    def as_dict(self) -> Dict[str, bool]:
        return dataclasses.asdict(self)


PRESETS: Dict[str, Quirks] = {
    "chip8": Quirks(),
    "chip48": Quirks(
        shift_uses_vy=False,
        jump_with_offset_uses_vx=True,
        store_load_increments_index=False,
        logic_resets_vf=False,
    ),
    "schip": Quirks(
        shift_uses_vy=False,
        jump_with_offset_uses_vx=True,
        store_load_increments_index=False,
        logic_resets_vf=False,
        extended_display=True,
    ),
}


def preset_names() -> List[str]:
    return sorted(PRESETS)
