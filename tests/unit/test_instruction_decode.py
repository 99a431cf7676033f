"""Instruction decoding tests."""

from __future__ import annotations

import pytest

from chip8emu.cpu.instruction import Op, decode, disassemble
from chip8emu.errors import UnknownOpcode


def test_operand_fields() -> None:
    ins = decode(0xD12F)
    assert ins.op is Op.DRW
    assert (ins.x, ins.y, ins.n) == (0x1, 0x2, 0xF)
    assert ins.nn == 0x2F
    assert ins.nnn == 0x12F


def test_logo_program_sequence() -> None:
    words = [0x00E0, 0xA22A, 0x600C, 0x6108, 0xD01F, 0x7009, 0x1228]
    ops = [decode(word).op for word in words]
    assert ops == [Op.CLS, Op.LD_I, Op.LD_BYTE, Op.LD_BYTE, Op.DRW, Op.ADD_BYTE, Op.JP]


@pytest.mark.parametrize(
    "word, op",
    [
        (0x00EE, Op.RET),
        (0x0123, Op.SYS),
        (0x2ABC, Op.CALL),
        (0x3A10, Op.SE_BYTE),
        (0x4A10, Op.SNE_BYTE),
        (0x5AB0, Op.SE_REG),
        (0x8AB0, Op.LD_REG),
        (0x8AB1, Op.OR),
        (0x8AB2, Op.AND),
        (0x8AB3, Op.XOR),
        (0x8AB4, Op.ADD_REG),
        (0x8AB5, Op.SUB),
        (0x8AB6, Op.SHR),
        (0x8AB7, Op.SUBN),
        (0x8ABE, Op.SHL),
        (0x9AB0, Op.SNE_REG),
        (0xB200, Op.JP_OFFSET),
        (0xC0FF, Op.RND),
        (0xE59E, Op.SKP),
        (0xE5A1, Op.SKNP),
        (0xF507, Op.LD_VX_DT),
        (0xF50A, Op.LD_VX_K),
        (0xF515, Op.LD_DT_VX),
        (0xF518, Op.LD_ST_VX),
        (0xF51E, Op.ADD_I),
        (0xF529, Op.LD_F),
        (0xF533, Op.BCD),
        (0xF555, Op.STORE),
        (0xF565, Op.LOAD),
    ],
)
def test_decode_classes(word: int, op: Op) -> None:
    assert decode(word).op is op


@pytest.mark.parametrize("word", [0x5AB1, 0x8AB8, 0x9AB1, 0xE500, 0xF5FF, 0xF000])
def test_unknown_opcodes(word: int) -> None:
    with pytest.raises(UnknownOpcode) as excinfo:
        decode(word, address=0x246)
    assert excinfo.value.word == word
    assert excinfo.value.address == 0x246


def test_extended_display_opcodes_need_flag() -> None:
    assert decode(0x00FF).op is Op.SYS
    assert decode(0x00FF, extended=True).op is Op.HIGH
    assert decode(0x00FE, extended=True).op is Op.LOW


def test_disassemble() -> None:
    assert disassemble(0xA22A) == "LD I, 22A"
    assert disassemble(0xD01F) == "DRW V0, V1, F"
    assert disassemble(0xF355) == "LD [I], V3"
    assert disassemble(0x5011) == "DW 5011"
