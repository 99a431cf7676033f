"""CHIP-8 fetch-decode-execute engine."""

from __future__ import annotations

from enum import Enum
import random
from typing import Callable, Dict, Optional

from chip8emu.chip8.keypad import KEY_COUNT
from chip8emu.chip8.quirks import Quirks
from chip8emu.cpu.instruction import Instruction, Op, decode
from chip8emu.cpu.registers import CPURegisters, FLAG_REGISTER
from chip8emu.errors import InvalidFetch


class StepResult(Enum):
    EXECUTED = "executed"
    # FX0A saw no key; PC was left on the same instruction.
    WAITING = "waiting"


class CPU:
    """Abstract CPU base class."""

    def __init__(self, computer: object) -> None:
        self.computer = computer

    def reset(self) -> None:
        raise NotImplementedError

    def step(self) -> StepResult:
        raise NotImplementedError


class Chip8CPU(CPU):
    """Interpreter core executing one instruction per ``step()``.

    The CPU reaches memory, display, keypad and timers through
    ``computer.hardware`` and reads ``computer.quirks`` on every instruction
    that depends on them.
    """

    def __init__(self, computer: object, *, rng: Optional[random.Random] = None) -> None:
        super().__init__(computer)
        self.registers = CPURegisters()
        self.rng = rng if rng is not None else random.Random()
        self.instruction_count: int = 0
        self.last_instruction: Optional[Instruction] = None
        self._handlers: Dict[Op, Callable[[Instruction], Optional[StepResult]]] = {}
        self._init_opcode_table()

    # ------------------------------------------------------------------
    # Hardware accessors
    # ------------------------------------------------------------------
    @property
    def hardware(self):
        hardware = getattr(self.computer, "hardware", None)
        if hardware is None:
            raise RuntimeError("hardware is not attached to Chip8CPU")
        return hardware

    @property
    def memory(self):
        return self.hardware.memory

    @property
    def quirks(self) -> Quirks:
        return getattr(self.computer, "quirks", None) or Quirks()

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self.registers.reset()
        self.instruction_count = 0
        self.last_instruction = None

    def fetch(self) -> int:
        pc = self.registers.program_counter
        if pc & 0x01 or pc + 1 >= self.memory.size:
            raise InvalidFetch(pc)
        return self.memory.read_word(pc)

    def step(self) -> StepResult:
        pc = self.registers.program_counter
        word = self.fetch()
        instruction = decode(word, address=pc, extended=self.quirks.extended_display)
        result = self._handlers[instruction.op](instruction)
        self.last_instruction = instruction
        if result is StepResult.WAITING:
            return result
        self.instruction_count += 1
        return StepResult.EXECUTED

    def skip(self) -> None:
        """Step over the current instruction without executing it."""

        self.registers.advance()

    def _init_opcode_table(self) -> None:
        self._register_opcode(Op.CLS, self._opcode_cls)
        self._register_opcode(Op.RET, self._opcode_ret)
        self._register_opcode(Op.LOW, self._opcode_low)
        self._register_opcode(Op.HIGH, self._opcode_high)
        self._register_opcode(Op.SYS, self._opcode_sys)
        self._register_opcode(Op.JP, self._opcode_jp)
        self._register_opcode(Op.CALL, self._opcode_call)
        self._register_opcode(Op.SE_BYTE, self._opcode_se_byte)
        self._register_opcode(Op.SNE_BYTE, self._opcode_sne_byte)
        self._register_opcode(Op.SE_REG, self._opcode_se_reg)
        self._register_opcode(Op.LD_BYTE, self._opcode_ld_byte)
        self._register_opcode(Op.ADD_BYTE, self._opcode_add_byte)
        self._register_opcode(Op.LD_REG, self._opcode_ld_reg)
        self._register_opcode(Op.OR, self._opcode_or)
        self._register_opcode(Op.AND, self._opcode_and)
        self._register_opcode(Op.XOR, self._opcode_xor)
        self._register_opcode(Op.ADD_REG, self._opcode_add_reg)
        self._register_opcode(Op.SUB, self._opcode_sub)
        self._register_opcode(Op.SHR, self._opcode_shr)
        self._register_opcode(Op.SUBN, self._opcode_subn)
        self._register_opcode(Op.SHL, self._opcode_shl)
        self._register_opcode(Op.SNE_REG, self._opcode_sne_reg)
        self._register_opcode(Op.LD_I, self._opcode_ld_i)
        self._register_opcode(Op.JP_OFFSET, self._opcode_jp_offset)
        self._register_opcode(Op.RND, self._opcode_rnd)
        self._register_opcode(Op.DRW, self._opcode_drw)
        self._register_opcode(Op.SKP, self._opcode_skp)
        self._register_opcode(Op.SKNP, self._opcode_sknp)
        self._register_opcode(Op.LD_VX_DT, self._opcode_ld_vx_dt)
        self._register_opcode(Op.LD_VX_K, self._opcode_ld_vx_k)
        self._register_opcode(Op.LD_DT_VX, self._opcode_ld_dt_vx)
        self._register_opcode(Op.LD_ST_VX, self._opcode_ld_st_vx)
        self._register_opcode(Op.ADD_I, self._opcode_add_i)
        self._register_opcode(Op.LD_F, self._opcode_ld_f)
        self._register_opcode(Op.BCD, self._opcode_bcd)
        self._register_opcode(Op.STORE, self._opcode_store)
        self._register_opcode(Op.LOAD, self._opcode_load)
        missing = [op for op in Op if op not in self._handlers]
        if missing:  # pragma: no cover - table is static
            raise RuntimeError(f"no handler for {missing}")

    def _register_opcode(self, op: Op, handler: Callable[[Instruction], Optional[StepResult]]) -> None:
        self._handlers[op] = handler

    def _skip_if(self, condition: bool) -> None:
        self.registers.advance(2 if condition else 1)

    # ------------------------------------------------------------------
    # 0NNN / flow control
    # ------------------------------------------------------------------
    def _opcode_cls(self, ins: Instruction) -> None:
        self.hardware.display.clear()
        self.registers.advance()

    def _opcode_ret(self, ins: Instruction) -> None:
        self.registers.jump(self.registers.stack.pop())

    def _opcode_low(self, ins: Instruction) -> None:
        self.hardware.display.set_extended(False)
        self.registers.advance()

    def _opcode_high(self, ins: Instruction) -> None:
        self.hardware.display.set_extended(True)
        self.registers.advance()

    def _opcode_sys(self, ins: Instruction) -> None:
        # Native machine code routines are not emulated.
        self.registers.advance()

    def _opcode_jp(self, ins: Instruction) -> None:
        self.registers.jump(ins.nnn)

    def _opcode_call(self, ins: Instruction) -> None:
        regs = self.registers
        regs.stack.push(regs.program_counter + 2)
        regs.jump(ins.nnn)

    def _opcode_jp_offset(self, ins: Instruction) -> None:
        source = ins.x if self.quirks.jump_with_offset_uses_vx else 0x0
        self.registers.jump(ins.nnn + self.registers.get_v(source))

    # ------------------------------------------------------------------
    # Conditional skips
    # ------------------------------------------------------------------
    def _opcode_se_byte(self, ins: Instruction) -> None:
        self._skip_if(self.registers.get_v(ins.x) == ins.nn)

    def _opcode_sne_byte(self, ins: Instruction) -> None:
        self._skip_if(self.registers.get_v(ins.x) != ins.nn)

    def _opcode_se_reg(self, ins: Instruction) -> None:
        regs = self.registers
        self._skip_if(regs.get_v(ins.x) == regs.get_v(ins.y))

    def _opcode_sne_reg(self, ins: Instruction) -> None:
        regs = self.registers
        self._skip_if(regs.get_v(ins.x) != regs.get_v(ins.y))

    def _key_down(self, x: int) -> bool:
        # Vx above 0xF names no key, so it never reads as pressed.
        key = self.registers.get_v(x)
        return key < KEY_COUNT and self.hardware.keypad.is_pressed(key)

    def _opcode_skp(self, ins: Instruction) -> None:
        self._skip_if(self._key_down(ins.x))

    def _opcode_sknp(self, ins: Instruction) -> None:
        self._skip_if(not self._key_down(ins.x))

    # ------------------------------------------------------------------
    # Register arithmetic
    # ------------------------------------------------------------------
    def _opcode_ld_byte(self, ins: Instruction) -> None:
        self.registers.set_v(ins.x, ins.nn)
        self.registers.advance()

    def _opcode_add_byte(self, ins: Instruction) -> None:
        regs = self.registers
        regs.set_v(ins.x, regs.get_v(ins.x) + ins.nn)
        regs.advance()

    def _opcode_ld_reg(self, ins: Instruction) -> None:
        regs = self.registers
        regs.set_v(ins.x, regs.get_v(ins.y))
        regs.advance()

    def _logic(self, ins: Instruction, value: int) -> None:
        regs = self.registers
        regs.set_v(ins.x, value)
        if self.quirks.logic_resets_vf:
            regs.set_flag(0)
        regs.advance()

    def _opcode_or(self, ins: Instruction) -> None:
        regs = self.registers
        self._logic(ins, regs.get_v(ins.x) | regs.get_v(ins.y))

    def _opcode_and(self, ins: Instruction) -> None:
        regs = self.registers
        self._logic(ins, regs.get_v(ins.x) & regs.get_v(ins.y))

    def _opcode_xor(self, ins: Instruction) -> None:
        regs = self.registers
        self._logic(ins, regs.get_v(ins.x) ^ regs.get_v(ins.y))

    def _opcode_add_reg(self, ins: Instruction) -> None:
        regs = self.registers
        total = regs.get_v(ins.x) + regs.get_v(ins.y)
        regs.set_v(ins.x, total)
        regs.set_flag(total > 0xFF)
        regs.advance()

    def _opcode_sub(self, ins: Instruction) -> None:
        regs = self.registers
        vx, vy = regs.get_v(ins.x), regs.get_v(ins.y)
        regs.set_v(ins.x, vx - vy)
        regs.set_flag(vx >= vy)
        regs.advance()

    def _opcode_subn(self, ins: Instruction) -> None:
        regs = self.registers
        vx, vy = regs.get_v(ins.x), regs.get_v(ins.y)
        regs.set_v(ins.x, vy - vx)
        regs.set_flag(vy >= vx)
        regs.advance()

    def _shift_source(self, ins: Instruction) -> int:
        source = ins.y if self.quirks.shift_uses_vy else ins.x
        return self.registers.get_v(source)

    def _opcode_shr(self, ins: Instruction) -> None:
        regs = self.registers
        value = self._shift_source(ins)
        regs.set_v(ins.x, value >> 1)
        regs.set_flag(value & 0x01)
        regs.advance()

    def _opcode_shl(self, ins: Instruction) -> None:
        regs = self.registers
        value = self._shift_source(ins)
        regs.set_v(ins.x, value << 1)
        regs.set_flag(value & 0x80)
        regs.advance()

    def _opcode_rnd(self, ins: Instruction) -> None:
        self.registers.set_v(ins.x, self.rng.randrange(256) & ins.nn)
        self.registers.advance()

    # ------------------------------------------------------------------
    # Index register and memory
    # ------------------------------------------------------------------
    def _opcode_ld_i(self, ins: Instruction) -> None:
        self.registers.set_index(ins.nnn)
        self.registers.advance()

    def _opcode_add_i(self, ins: Instruction) -> None:
        regs = self.registers
        regs.set_index(regs.index + regs.get_v(ins.x))
        regs.advance()

    def _opcode_ld_f(self, ins: Instruction) -> None:
        regs = self.registers
        regs.set_index(self.memory.font_address(regs.get_v(ins.x)))
        regs.advance()

    def _opcode_bcd(self, ins: Instruction) -> None:
        regs = self.registers
        value = regs.get_v(ins.x)
        self.memory.write_block(regs.index, (value // 100, (value // 10) % 10, value % 10))
        regs.advance()

    def _opcode_store(self, ins: Instruction) -> None:
        regs = self.registers
        self.memory.write_block(regs.index, regs.v[: ins.x + 1])
        if self.quirks.store_load_increments_index:
            regs.set_index(regs.index + ins.x + 1)
        regs.advance()

    def _opcode_load(self, ins: Instruction) -> None:
        regs = self.registers
        values = self.memory.read_block(regs.index, ins.x + 1)
        for offset, value in enumerate(values):
            regs.set_v(offset, value)
        if self.quirks.store_load_increments_index:
            regs.set_index(regs.index + ins.x + 1)
        regs.advance()

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------
    def _opcode_drw(self, ins: Instruction) -> None:
        regs = self.registers
        display = self.hardware.display
        quirks = self.quirks
        if ins.n == 0 and quirks.extended_display and display.extended:
            raw = self.memory.read_block(regs.index, 32)
            sprite = [(raw[i] << 8) | raw[i + 1] for i in range(0, 32, 2)]
            width = 16
        else:
            sprite = self.memory.read_block(regs.index, ins.n)
            width = 8
        collided = display.draw_sprite(
            regs.get_v(ins.x),
            regs.get_v(ins.y),
            sprite,
            sprite_width=width,
            clip_vertically=quirks.clip_sprites_vertically,
            clip_horizontally=quirks.clip_sprites_horizontally,
        )
        regs.set_flag(collided)
        regs.advance()

    # ------------------------------------------------------------------
    # Timers and keypad
    # ------------------------------------------------------------------
    def _opcode_ld_vx_dt(self, ins: Instruction) -> None:
        self.registers.set_v(ins.x, self.hardware.timers.delay.get())
        self.registers.advance()

    def _opcode_ld_dt_vx(self, ins: Instruction) -> None:
        self.hardware.timers.delay.set(self.registers.get_v(ins.x))
        self.registers.advance()

    def _opcode_ld_st_vx(self, ins: Instruction) -> None:
        self.hardware.timers.sound.set(self.registers.get_v(ins.x))
        self.registers.advance()

    def _opcode_ld_vx_k(self, ins: Instruction) -> Optional[StepResult]:
        key = self.hardware.keypad.first_pressed()
        if key is None:
            return StepResult.WAITING
        self.registers.set_v(ins.x, key)
        self.registers.advance()
        return None


__all__ = ["CPU", "Chip8CPU", "StepResult", "FLAG_REGISTER"]
