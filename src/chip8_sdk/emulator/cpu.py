"""
CHIP-8 Opcode Dispatcher
========================

The virtual CPU. Each call to step() performs one fetch/decode/execute
cycle and returns a CycleResult:

1. Fetch the big-endian word at PC and PC+1
2. Decode it into an Instruction (pure, see decoder.py)
3. Look up the handler for the instruction's Op and run it
4. Advance PC: handlers return the next PC explicitly, or None to
   fall through to PC + 2
5. Update the 60Hz timers against the wall clock
6. Hand the CycleResult to the trace sink

Run states:

    RUNNING --FX0A--> WAITING_FOR_KEY --key pressed--> RUNNING
       |                    |
       +---fatal error------+-----------> HALTED (terminal until reset)

While waiting for a key the CPU does not fetch. Each step polls the
keypad; once a key is down its index is stored in VX, the press is
consumed and execution resumes after the FX0A. Timers keep running
while the program waits.

Any EmulationError raised during a step halts the machine, is logged
once at ERROR level and propagates to the caller with the failing PC
attached.

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

import logging
import random
from enum import Enum, auto
from typing import Callable, Dict, Optional

from ..errors import EmulationError, MachineHalted
from .decoder import Instruction, Op, decode
from .display import Display
from .keypad import Keypad
from .memory import Memory
from .quirks import QUIRKS_DEFAULT, Quirks
from .registers import RegisterFile
from .timers import Timers
from .trace import CycleResult, LoggingTraceSink, MachineSnapshot, TraceSink

logger = logging.getLogger(__name__)

Handler = Callable[[Instruction], Optional[int]]


class RunState(Enum):
    """Dispatcher run state."""
    RUNNING = auto()
    WAITING_FOR_KEY = auto()
    HALTED = auto()


class Chip8CPU:
    """
    CHIP-8 fetch/decode/execute engine.

    The CPU owns no state of its own beyond the run state; it operates
    on the memory, registers, display, keypad and timers it is given.

    Attributes:
        memory: 4KB memory
        registers: V0-VF, I, PC and call stack
        display: 64x32 framebuffer
        keypad: 16-key input state
        timers: Delay and sound timers
        quirks: Interpreter behaviour switches
        rng: Random source for CXNN
        trace: Receives every CycleResult
        state: Current RunState
    """

    def __init__(
        self,
        memory: Memory,
        registers: RegisterFile,
        display: Display,
        keypad: Keypad,
        timers: Timers,
        quirks: Quirks = QUIRKS_DEFAULT,
        rng: Optional[random.Random] = None,
        trace: Optional[TraceSink] = None,
    ):
        self.memory = memory
        self.registers = registers
        self.display = display
        self.keypad = keypad
        self.timers = timers
        self.quirks = quirks
        self.rng = rng if rng is not None else random.Random()
        self.trace: TraceSink = trace if trace is not None else LoggingTraceSink()
        self.state = RunState.RUNNING
        self._waiting: Optional[Instruction] = None
        self._steps = 0

        self._handlers: Dict[Op, Handler] = {
            Op.CLS: self._op_cls,
            Op.RET: self._op_ret,
            Op.JP: self._op_jp,
            Op.CALL: self._op_call,
            Op.SE_VX_NN: self._op_se_vx_nn,
            Op.SNE_VX_NN: self._op_sne_vx_nn,
            Op.SE_VX_VY: self._op_se_vx_vy,
            Op.LD_VX_NN: self._op_ld_vx_nn,
            Op.ADD_VX_NN: self._op_add_vx_nn,
            Op.LD_VX_VY: self._op_ld_vx_vy,
            Op.OR: self._op_or,
            Op.AND: self._op_and,
            Op.XOR: self._op_xor,
            Op.ADD_VX_VY: self._op_add_vx_vy,
            Op.SUB: self._op_sub,
            Op.SHR: self._op_shr,
            Op.SUBN: self._op_subn,
            Op.SHL: self._op_shl,
            Op.SNE_VX_VY: self._op_sne_vx_vy,
            Op.LD_I: self._op_ld_i,
            Op.JP_V0: self._op_jp_v0,
            Op.RND: self._op_rnd,
            Op.DRW: self._op_drw,
            Op.SKP: self._op_skp,
            Op.SKNP: self._op_sknp,
            Op.LD_VX_DT: self._op_ld_vx_dt,
            Op.LD_VX_K: self._op_ld_vx_k,
            Op.LD_DT_VX: self._op_ld_dt_vx,
            Op.LD_ST_VX: self._op_ld_st_vx,
            Op.ADD_I_VX: self._op_add_i_vx,
            Op.LD_F_VX: self._op_ld_f_vx,
            Op.LD_B_VX: self._op_ld_b_vx,
            Op.LD_MEM_VX: self._op_ld_mem_vx,
            Op.LD_VX_MEM: self._op_ld_vx_mem,
        }

    def reset(self) -> None:
        """Clear registers and return to RUNNING at $200."""
        self.registers.reset(pc=Memory.PROGRAM_START)
        self.state = RunState.RUNNING
        self._waiting = None
        self._steps = 0

    def restart(self, pc: int) -> None:
        """Resume RUNNING at pc, abandoning any key wait or halt."""
        self.registers.pc = pc
        self.state = RunState.RUNNING
        self._waiting = None

    @property
    def steps(self) -> int:
        """Number of completed steps since reset."""
        return self._steps

    @property
    def pc(self) -> int:
        return self.registers.pc

    @property
    def halted(self) -> bool:
        return self.state is RunState.HALTED

    @property
    def waiting_for_key(self) -> bool:
        return self.state is RunState.WAITING_FOR_KEY

    # =========================================================================
    # Step
    # =========================================================================

    def step(self) -> CycleResult:
        """
        Execute one cycle.

        Returns:
            CycleResult for this cycle

        Raises:
            MachineHalted: If the machine already halted
            EmulationError: On any fatal error (the machine halts)
        """
        if self.state is RunState.HALTED:
            raise MachineHalted(pc=self.registers.pc)

        pc = self.registers.pc
        before = self._snapshot()

        try:
            if self.state is RunState.WAITING_FOR_KEY:
                instruction = self._poll_key_wait()
            else:
                instruction = decode(self.memory.read_word(pc))
                next_pc = self._handlers[instruction.op](instruction)
                self.registers.pc = pc + 2 if next_pc is None else next_pc
        except EmulationError as e:
            self.state = RunState.HALTED
            e.with_pc(pc)
            logger.error(f"Machine halted: {e}")
            raise

        self.timers.update()
        self._steps += 1

        result = CycleResult(
            opcode=instruction.opcode,
            category=instruction.category,
            pseudo=instruction.pseudo,
            before=before,
            after=self._snapshot(),
            state=self.state,
        )
        self.trace(result)
        return result

    def _snapshot(self) -> MachineSnapshot:
        return MachineSnapshot(pc=self.registers.pc, v=self.registers.snapshot_v())

    def _poll_key_wait(self) -> Instruction:
        """One step of FX0A: resume if any key is down."""
        instruction = self._waiting
        key = self.keypad.first_pressed()
        if key is not None:
            self.keypad.consume(key)
            self.registers.set_v(instruction.x, key)
            self.registers.pc += 2
            self.state = RunState.RUNNING
            self._waiting = None
            logger.debug(f"Key wait satisfied: V{instruction.x:X} = {key:X}")
        return instruction

    # =========================================================================
    # Helpers
    # =========================================================================

    def _skip_if(self, condition: bool) -> Optional[int]:
        return self.registers.pc + 4 if condition else None

    def _index_address(self, offset: int) -> int:
        """Memory address I + offset, wrapped to 12 bits."""
        return (self.registers.i + offset) & 0x0FFF

    # =========================================================================
    # Flow Control
    # =========================================================================

    def _op_cls(self, ins: Instruction) -> Optional[int]:
        self.display.clear()
        return None

    def _op_ret(self, ins: Instruction) -> Optional[int]:
        address = self.registers.pop()
        if self.quirks.call_pushes_return_address:
            return address
        return address + 2

    def _op_jp(self, ins: Instruction) -> Optional[int]:
        return ins.nnn

    def _op_call(self, ins: Instruction) -> Optional[int]:
        pc = self.registers.pc
        self.registers.push(pc + 2 if self.quirks.call_pushes_return_address else pc)
        return ins.nnn

    def _op_jp_v0(self, ins: Instruction) -> Optional[int]:
        return (self.registers.v(0) + ins.nnn) & 0x0FFF

    # =========================================================================
    # Conditional Skips
    # =========================================================================

    def _op_se_vx_nn(self, ins: Instruction) -> Optional[int]:
        return self._skip_if(self.registers.v(ins.x) == ins.nn)

    def _op_sne_vx_nn(self, ins: Instruction) -> Optional[int]:
        return self._skip_if(self.registers.v(ins.x) != ins.nn)

    def _op_se_vx_vy(self, ins: Instruction) -> Optional[int]:
        return self._skip_if(self.registers.v(ins.x) == self.registers.v(ins.y))

    def _op_sne_vx_vy(self, ins: Instruction) -> Optional[int]:
        return self._skip_if(self.registers.v(ins.x) != self.registers.v(ins.y))

    def _op_skp(self, ins: Instruction) -> Optional[int]:
        return self._skip_if(self.keypad.consume(self.registers.v(ins.x)))

    def _op_sknp(self, ins: Instruction) -> Optional[int]:
        return self._skip_if(not self.keypad.consume(self.registers.v(ins.x)))

    # =========================================================================
    # Register Loads and Arithmetic
    # =========================================================================
    # Flag-setting ops write VX first and VF last, so with X = F the flag
    # is what remains in VF.

    def _op_ld_vx_nn(self, ins: Instruction) -> Optional[int]:
        self.registers.set_v(ins.x, ins.nn)
        return None

    def _op_add_vx_nn(self, ins: Instruction) -> Optional[int]:
        # No carry flag
        self.registers.set_v(ins.x, self.registers.v(ins.x) + ins.nn)
        return None

    def _op_ld_vx_vy(self, ins: Instruction) -> Optional[int]:
        self.registers.set_v(ins.x, self.registers.v(ins.y))
        return None

    def _op_or(self, ins: Instruction) -> Optional[int]:
        self.registers.set_v(ins.x, self.registers.v(ins.x) | self.registers.v(ins.y))
        return None

    def _op_and(self, ins: Instruction) -> Optional[int]:
        self.registers.set_v(ins.x, self.registers.v(ins.x) & self.registers.v(ins.y))
        return None

    def _op_xor(self, ins: Instruction) -> Optional[int]:
        self.registers.set_v(ins.x, self.registers.v(ins.x) ^ self.registers.v(ins.y))
        return None

    def _op_add_vx_vy(self, ins: Instruction) -> Optional[int]:
        total = self.registers.v(ins.x) + self.registers.v(ins.y)
        self.registers.set_v(ins.x, total)
        self.registers.flag = 1 if total > 0xFF else 0
        return None

    def _op_sub(self, ins: Instruction) -> Optional[int]:
        vx = self.registers.v(ins.x)
        vy = self.registers.v(ins.y)
        self.registers.set_v(ins.x, vx - vy)
        self.registers.flag = 1 if vx >= vy else 0
        return None

    def _op_subn(self, ins: Instruction) -> Optional[int]:
        vx = self.registers.v(ins.x)
        vy = self.registers.v(ins.y)
        self.registers.set_v(ins.x, vy - vx)
        self.registers.flag = 1 if vy >= vx else 0
        return None

    def _shift_source(self, ins: Instruction) -> int:
        index = ins.y if self.quirks.shift_uses_vy else ins.x
        return self.registers.v(index)

    def _op_shr(self, ins: Instruction) -> Optional[int]:
        source = self._shift_source(ins)
        self.registers.set_v(ins.x, source >> 1)
        self.registers.flag = source & 0x01
        return None

    def _op_shl(self, ins: Instruction) -> Optional[int]:
        source = self._shift_source(ins)
        self.registers.set_v(ins.x, source << 1)
        self.registers.flag = (source >> 7) & 0x01
        return None

    def _op_rnd(self, ins: Instruction) -> Optional[int]:
        self.registers.set_v(ins.x, self.rng.randrange(256) & ins.nn)
        return None

    # =========================================================================
    # Index Register and Memory
    # =========================================================================

    def _op_ld_i(self, ins: Instruction) -> Optional[int]:
        self.registers.i = ins.nnn
        return None

    def _op_add_i_vx(self, ins: Instruction) -> Optional[int]:
        # VF is not affected
        self.registers.i = self.registers.i + self.registers.v(ins.x)
        return None

    def _op_ld_f_vx(self, ins: Instruction) -> Optional[int]:
        self.registers.i = Memory.glyph_address(self.registers.v(ins.x))
        return None

    def _op_ld_b_vx(self, ins: Instruction) -> Optional[int]:
        value = self.registers.v(ins.x)
        digits = (value // 100, (value // 10) % 10, value % 10)
        for offset, digit in enumerate(digits):
            self.memory.write(self._index_address(offset), digit)
        return None

    def _op_ld_mem_vx(self, ins: Instruction) -> Optional[int]:
        # I is left unchanged
        for index in range(ins.x + 1):
            self.memory.write(self._index_address(index), self.registers.v(index))
        return None

    def _op_ld_vx_mem(self, ins: Instruction) -> Optional[int]:
        for index in range(ins.x + 1):
            self.registers.set_v(index, self.memory.read(self._index_address(index)))
        return None

    # =========================================================================
    # Display
    # =========================================================================

    def _op_drw(self, ins: Instruction) -> Optional[int]:
        rows = [self.memory.read(self._index_address(row)) for row in range(ins.n)]
        collision = self.display.draw_sprite(
            self.registers.v(ins.x), self.registers.v(ins.y), rows
        )
        self.registers.flag = 1 if collision else 0
        return None

    # =========================================================================
    # Timers and Keypad
    # =========================================================================

    def _op_ld_vx_dt(self, ins: Instruction) -> Optional[int]:
        self.registers.set_v(ins.x, self.timers.delay)
        return None

    def _op_ld_dt_vx(self, ins: Instruction) -> Optional[int]:
        self.timers.delay = self.registers.v(ins.x)
        return None

    def _op_ld_st_vx(self, ins: Instruction) -> Optional[int]:
        self.timers.sound = self.registers.v(ins.x)
        return None

    def _op_ld_vx_k(self, ins: Instruction) -> Optional[int]:
        # Always suspend, even if a key is already down; the next step
        # picks it up.
        self.state = RunState.WAITING_FOR_KEY
        self._waiting = ins
        return self.registers.pc

    def __repr__(self) -> str:
        return f"Chip8CPU(pc=0x{self.registers.pc:03X}, state={self.state.name})"
