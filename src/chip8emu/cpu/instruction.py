"""Decoding of 16-bit CHIP-8 instruction words."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from chip8emu.errors import UnknownOpcode


class Op(Enum):
    CLS = "00E0"
    RET = "00EE"
    LOW = "00FE"
    HIGH = "00FF"
    SYS = "0NNN"
    JP = "1NNN"
    CALL = "2NNN"
    SE_BYTE = "3XNN"
    SNE_BYTE = "4XNN"
    SE_REG = "5XY0"
    LD_BYTE = "6XNN"
    ADD_BYTE = "7XNN"
    LD_REG = "8XY0"
    OR = "8XY1"
    AND = "8XY2"
    XOR = "8XY3"
    ADD_REG = "8XY4"
    SUB = "8XY5"
    SHR = "8XY6"
    SUBN = "8XY7"
    SHL = "8XYE"
    SNE_REG = "9XY0"
    LD_I = "ANNN"
    JP_OFFSET = "BNNN"
    RND = "CXNN"
    DRW = "DXYN"
    SKP = "EX9E"
    SKNP = "EXA1"
    LD_VX_DT = "FX07"
    LD_VX_K = "FX0A"
    LD_DT_VX = "FX15"
    LD_ST_VX = "FX18"
    ADD_I = "FX1E"
    LD_F = "FX29"
    BCD = "FX33"
    STORE = "FX55"
    LOAD = "FX65"


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction word with all operand fields pre-extracted."""

    op: Op
    word: int

    @property
    def x(self) -> int:
        return (self.word >> 8) & 0x0F

    @property
    def y(self) -> int:
        return (self.word >> 4) & 0x0F

    @property
    def n(self) -> int:
        return self.word & 0x0F

    @property
    def nn(self) -> int:
        return self.word & 0xFF

    @property
    def nnn(self) -> int:
        return self.word & 0x0FFF

    def mnemonic(self) -> str:
        x, y, n, nn, nnn = self.x, self.y, self.n, self.nn, self.nnn
        formats: Dict[Op, str] = {
            Op.CLS: "CLS",
            Op.RET: "RET",
            Op.LOW: "LOW",
            Op.HIGH: "HIGH",
            Op.SYS: f"SYS {nnn:03X}",
            Op.JP: f"JP {nnn:03X}",
            Op.CALL: f"CALL {nnn:03X}",
            Op.SE_BYTE: f"SE V{x:X}, {nn:02X}",
            Op.SNE_BYTE: f"SNE V{x:X}, {nn:02X}",
            Op.SE_REG: f"SE V{x:X}, V{y:X}",
            Op.LD_BYTE: f"LD V{x:X}, {nn:02X}",
            Op.ADD_BYTE: f"ADD V{x:X}, {nn:02X}",
            Op.LD_REG: f"LD V{x:X}, V{y:X}",
            Op.OR: f"OR V{x:X}, V{y:X}",
            Op.AND: f"AND V{x:X}, V{y:X}",
            Op.XOR: f"XOR V{x:X}, V{y:X}",
            Op.ADD_REG: f"ADD V{x:X}, V{y:X}",
            Op.SUB: f"SUB V{x:X}, V{y:X}",
            Op.SHR: f"SHR V{x:X}, V{y:X}",
            Op.SUBN: f"SUBN V{x:X}, V{y:X}",
            Op.SHL: f"SHL V{x:X}, V{y:X}",
            Op.SNE_REG: f"SNE V{x:X}, V{y:X}",
            Op.LD_I: f"LD I, {nnn:03X}",
            Op.JP_OFFSET: f"JP V0, {nnn:03X}",
            Op.RND: f"RND V{x:X}, {nn:02X}",
            Op.DRW: f"DRW V{x:X}, V{y:X}, {n:X}",
            Op.SKP: f"SKP V{x:X}",
            Op.SKNP: f"SKNP V{x:X}",
            Op.LD_VX_DT: f"LD V{x:X}, DT",
            Op.LD_VX_K: f"LD V{x:X}, K",
            Op.LD_DT_VX: f"LD DT, V{x:X}",
            Op.LD_ST_VX: f"LD ST, V{x:X}",
            Op.ADD_I: f"ADD I, V{x:X}",
            Op.LD_F: f"LD F, V{x:X}",
            Op.BCD: f"LD B, V{x:X}",
            Op.STORE: f"LD [I], V{x:X}",
            Op.LOAD: f"LD V{x:X}, [I]",
        }
        return formats[self.op]


# 8XYn is keyed by the low nibble, EXnn/FXnn by the low byte.
_ARITHMETIC: Dict[int, Op] = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_KEY_OPS: Dict[int, Op] = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

_MISC_OPS: Dict[int, Op] = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I,
    0x29: Op.LD_F,
    0x33: Op.BCD,
    0x55: Op.STORE,
    0x65: Op.LOAD,
}

_FIXED_NNN: Dict[int, Op] = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_BYTE,
    0x4: Op.SNE_BYTE,
    0x6: Op.LD_BYTE,
    0x7: Op.ADD_BYTE,
    0xA: Op.LD_I,
    0xB: Op.JP_OFFSET,
    0xC: Op.RND,
    0xD: Op.DRW,
}


def _classify(word: int, extended: bool) -> Optional[Op]:
    high = (word >> 12) & 0x0F
    low_byte = word & 0xFF
    low = word & 0x0F

    if high == 0x0:
        if word == 0x00E0:
            return Op.CLS
        if word == 0x00EE:
            return Op.RET
        if extended and word == 0x00FE:
            return Op.LOW
        if extended and word == 0x00FF:
            return Op.HIGH
        return Op.SYS
    if high in _FIXED_NNN:
        return _FIXED_NNN[high]
    if high == 0x5:
        return Op.SE_REG if low == 0x0 else None
    if high == 0x8:
        return _ARITHMETIC.get(low)
    if high == 0x9:
        return Op.SNE_REG if low == 0x0 else None
    if high == 0xE:
        return _KEY_OPS.get(low_byte)
    return _MISC_OPS.get(low_byte)


_CACHE: Dict[Tuple[int, bool], Instruction] = {}


def decode(word: int, *, address: int = 0, extended: bool = False) -> Instruction:
    """Decode ``word`` or raise ``UnknownOpcode`` for unassigned bit patterns."""

    word &= 0xFFFF
    key = (word, extended)
    cached = _CACHE.get(key)
    if cached is not None:
        return cached
    op = _classify(word, extended)
    if op is None:
        raise UnknownOpcode(word, address)
    instruction = Instruction(op, word)
    _CACHE[key] = instruction
    return instruction


def disassemble(word: int, *, extended: bool = False) -> str:
    try:
        return decode(word, extended=extended).mnemonic()
    except UnknownOpcode:
        return f"DW {word & 0xFFFF:04X}"
