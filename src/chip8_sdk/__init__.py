"""
CHIP-8 SDK - Interpreter Core and Tools for the CHIP-8 Virtual Machine
======================================================================

This package provides an embeddable CHIP-8 interpreter together with the
tools needed to inspect and run CHIP-8 programs from the command line.

CHIP-8 is the interpreted language of the 1977 COSMAC VIP: a 4KB machine
with sixteen 8-bit registers, a 64x32 monochrome display, a hex keypad and
two 60Hz countdown timers. Programs are raw big-endian instruction words
loaded at $200.

Main Components
---------------
- **emulator**: The virtual machine
    Memory, registers, display, keypad, timers and the opcode dispatcher,
    behind the Emulator facade

- **disassembler**: CHIP-8 disassembler (chip8-disasm)
    Converts ROM images back to assembler-style listings

- **cli**: Command-line tools
    chip8-run (headless runner) and chip8-disasm

Quick Start
-----------
Run a program headless:
    >>> from chip8_sdk import Emulator
    >>> emu = Emulator()
    >>> emu.load_rom_file("ibm_logo.ch8")
    >>> emu.run(max_steps=200)
    >>> print("\\n".join(emu.display_lines()))

Disassemble a ROM:
    >>> from chip8_sdk.disassembler import Chip8Disassembler
    >>> for ins in Chip8Disassembler().disassemble(rom):
    ...     print(ins)

Or use the command-line tools:
    $ chip8-run ibm_logo.ch8 --steps 200 --screenshot logo.png
    $ chip8-disasm ibm_logo.ch8

Reference Documentation
-----------------------
- Cowgod's CHIP-8 Technical Reference: http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
- CHIP-8 quirks: https://chip8.gulrak.net/

Version History
---------------
1.0.0 - Initial release with emulator, disassembler and command-line runner
"""

__version__ = "1.0.0"
__author__ = "CHIP-8 SDK Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8_sdk.errors import (
    Chip8Error,
    LoadError,
    RomTooLarge,
    EmulationError,
    UnknownOpcode,
    StackOverflow,
    StackUnderflow,
    MemoryAccessError,
    MachineHalted,
)

from chip8_sdk.emulator import (
    Emulator,
    EmulatorConfig,
    Quirks,
    get_quirks,
    CycleResult,
    RunState,
    TraceBuffer,
)

from chip8_sdk.disassembler import Chip8Disassembler, DisassembledInstruction

__all__ = [
    # Version info
    "__version__",
    "__author__",

    # Emulator
    "Emulator",
    "EmulatorConfig",
    "Quirks",
    "get_quirks",
    "CycleResult",
    "RunState",
    "TraceBuffer",

    # Disassembler
    "Chip8Disassembler",
    "DisassembledInstruction",

    # Errors
    "Chip8Error",
    "LoadError",
    "RomTooLarge",
    "EmulationError",
    "UnknownOpcode",
    "StackOverflow",
    "StackUnderflow",
    "MemoryAccessError",
    "MachineHalted",
]
