"""Frontend helper tests."""

from pathlib import Path

import pytest

from chip8emu import app
from chip8emu.chip8.keypad import Chip8Keypad
from chip8emu.emulator.file import ENV_ROM_PATH, RomInfo


def test_keypad_map_covers_all_keys():
    assert sorted(app.KEYPAD_MAP.values()) == list(range(16))


def test_handle_key_event():
    keypad = Chip8Keypad()
    assert app._handle_key_event(keypad, ord("z"), True) is True
    assert keypad.is_pressed(0xA)
    assert app._handle_key_event(keypad, ord("x"), True) is True
    assert keypad.is_pressed(0x0)
    app._handle_key_event(keypad, ord("z"), False)
    assert not keypad.is_pressed(0xA)
    assert app._handle_key_event(keypad, ord("p"), True) is False


def test_build_caption():
    info = RomInfo(data=b"\x12\x00", name="PONG")
    assert app._build_caption(None) == "CHIP-8 Emulator"
    assert app._build_caption(info) == "CHIP-8 Emulator | PONG"
    assert app._build_caption(info, paused=True) == "CHIP-8 Emulator | PONG | PAUSED"
    assert app._build_caption(info, halted="UnknownOpcode") == "CHIP-8 Emulator | PONG | HALTED: UnknownOpcode"


def test_main_requires_rom(monkeypatch):
    monkeypatch.delenv(ENV_ROM_PATH, raising=False)
    with pytest.raises(SystemExit):
        app.main([])


def test_main_reports_unreadable_rom(tmp_path: Path, capsys):
    rom_path = tmp_path / "empty.ch8"
    rom_path.write_bytes(b"")
    assert app.main([str(rom_path)]) == 1
    assert "Failed to load ROM" in capsys.readouterr().err
