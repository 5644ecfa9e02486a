"""
CHIP-8 SDK Error Hierarchy
==========================

This module defines the exception hierarchy for the entire CHIP-8 SDK.
All exceptions inherit from Chip8Error, allowing callers to catch all
SDK-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
├── LoadError (program loading)
│   └── RomTooLarge - ROM does not fit in the program region
└── EmulationError (raised from a machine step, all fatal)
    ├── UnknownOpcode - instruction word not in the CHIP-8 set
    ├── StackOverflow - CALL with a full call stack
    ├── StackUnderflow - RET with an empty call stack
    ├── MemoryAccessError - illegal memory address
    └── MachineHalted - step() after a fatal error

Load errors are recoverable: the caller may pick another ROM. Emulation
errors halt the dispatcher; the host either stops or resets the machine.

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all CHIP-8 SDK errors.

    All exceptions in the SDK inherit from this class, allowing callers
    to catch all SDK-related errors with a single except clause:

        try:
            emu.step()
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Loading Exceptions
# =============================================================================

class LoadError(Chip8Error):
    """Base exception for errors raised while loading a program."""
    pass


class RomTooLarge(LoadError):
    """
    ROM image does not fit in the program region.

    The program region spans $200-$FFF, so a ROM can be at most
    3584 bytes long.

    Attributes:
        size: Size of the rejected ROM in bytes
        limit: Maximum accepted size in bytes
    """

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"ROM is {size} bytes, but at most {limit} bytes fit in program memory"
        )


# =============================================================================
# Emulation Exceptions
# =============================================================================

class EmulationError(Chip8Error):
    """
    Base exception for fatal errors raised while executing a program.

    Attributes:
        pc: Program counter of the failing instruction (if known)
    """

    def __init__(self, message: str, pc: Optional[int] = None):
        self.pc = pc
        if pc is not None:
            message = f"0x{pc:03X}> {message}"
        super().__init__(message)

    def with_pc(self, pc: int) -> "EmulationError":
        """
        Attach the failing instruction's address if not already known.

        Lower layers (memory, stack) raise without a PC; the dispatcher
        fills it in before the error reaches the caller.
        """
        if self.pc is None:
            self.pc = pc
            self.args = (f"0x{pc:03X}> {self.args[0]}",) + self.args[1:]
        return self


class UnknownOpcode(EmulationError):
    """
    Instruction word is not part of the CHIP-8 instruction set.

    Attributes:
        opcode: The 16-bit instruction word
        pc: Address it was fetched from (None when decoded standalone)
    """

    def __init__(self, opcode: int, pc: Optional[int] = None):
        self.opcode = opcode
        super().__init__(f"unknown opcode: 0x{opcode:04X}", pc=pc)


class StackOverflow(EmulationError):
    """Subroutine call with all 16 stack levels in use."""

    def __init__(self, pc: Optional[int] = None, depth: int = 16):
        self.depth = depth
        super().__init__(f"call stack overflow (depth {depth})", pc=pc)


class StackUnderflow(EmulationError):
    """Return from subroutine with an empty call stack."""

    def __init__(self, pc: Optional[int] = None):
        super().__init__("return with empty call stack", pc=pc)


class MemoryAccessError(EmulationError):
    """
    Access to an address outside the legal range.

    Raised for reads or writes beyond $FFF, for instruction fetches that
    would straddle the end of memory, and for program writes into the
    interpreter region below $200.

    Attributes:
        address: The offending address
    """

    def __init__(self, address: int, reason: str, pc: Optional[int] = None):
        self.address = address
        self.reason = reason
        super().__init__(f"{reason} at address 0x{address:04X}", pc=pc)


class MachineHalted(EmulationError):
    """
    Step requested on a halted machine.

    A machine halts after any fatal emulation error. Call reset() or
    load a new ROM to resume.
    """

    def __init__(self, pc: Optional[int] = None):
        super().__init__("machine is halted; reset it before stepping", pc=pc)
