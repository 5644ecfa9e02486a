"""
CHIP-8 Register File
====================

Holds the programmer-visible CPU state:

- V0-VF: sixteen 8-bit general registers. VF doubles as the flag
  register for carry, borrow, shift-out and sprite collision.
- I: index register. Stored as 16 bits; only the low 12 bits are used
  when it addresses memory.
- PC: program counter.
- Call stack: 16 return addresses with a stack pointer in [0, 16].

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from ..errors import StackOverflow, StackUnderflow


FLAG = 0xF
STACK_DEPTH = 16


@dataclass
class RegisterState:
    """
    Complete register file state.

    All values stored as Python ints but represent:
    - v: 16 x 8-bit unsigned
    - i, pc: 16-bit unsigned
    - stack: return addresses, only the first `sp` entries are live
    """
    v: List[int] = field(default_factory=lambda: [0] * 16)
    i: int = 0
    pc: int = 0x200
    sp: int = 0
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)


class RegisterFile:
    """
    CHIP-8 registers and call stack.

    Register writes wrap to their natural width. Stack misuse is never
    clamped: it raises StackOverflow / StackUnderflow.

    Example:
        >>> regs = RegisterFile()
        >>> regs.set_v(0, 0x1FF)
        >>> regs.v(0)
        255
    """

    def __init__(self):
        self.state = RegisterState()

    def reset(self, pc: int = 0x200) -> None:
        """Zero all registers and empty the stack."""
        self.state = RegisterState(pc=pc)

    # ========================================
    # General Registers
    # ========================================

    def v(self, index: int) -> int:
        """Read general register V[index]."""
        return self.state.v[index & 0x0F]

    def set_v(self, index: int, value: int) -> None:
        """Write general register V[index] (value wraps to 8 bits)."""
        self.state.v[index & 0x0F] = value & 0xFF

    @property
    def flag(self) -> int:
        """The flag register VF."""
        return self.state.v[FLAG]

    @flag.setter
    def flag(self, value: int) -> None:
        self.state.v[FLAG] = value & 0xFF

    def snapshot_v(self) -> Tuple[int, ...]:
        """Immutable copy of V0-VF."""
        return tuple(self.state.v)

    # ========================================
    # Index Register and Program Counter
    # ========================================

    @property
    def i(self) -> int:
        """Index register I (16-bit storage)."""
        return self.state.i

    @i.setter
    def i(self, value: int) -> None:
        self.state.i = value & 0xFFFF

    @property
    def address(self) -> int:
        """I masked to a 12-bit memory address."""
        return self.state.i & 0x0FFF

    @property
    def pc(self) -> int:
        """Program counter (16-bit)."""
        return self.state.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self.state.pc = value & 0xFFFF

    # ========================================
    # Call Stack
    # ========================================

    @property
    def sp(self) -> int:
        """Stack pointer: number of live return addresses."""
        return self.state.sp

    def push(self, address: int) -> None:
        """
        Push a return address.

        Raises:
            StackOverflow: If all 16 levels are in use
        """
        if self.state.sp >= STACK_DEPTH:
            raise StackOverflow(depth=STACK_DEPTH)
        self.state.stack[self.state.sp] = address & 0xFFFF
        self.state.sp += 1

    def pop(self) -> int:
        """
        Pop the most recent return address.

        Raises:
            StackUnderflow: If the stack is empty
        """
        if self.state.sp == 0:
            raise StackUnderflow()
        self.state.sp -= 1
        return self.state.stack[self.state.sp]

    def stack_frames(self) -> List[int]:
        """Live return addresses, oldest first."""
        return list(self.state.stack[:self.state.sp])
