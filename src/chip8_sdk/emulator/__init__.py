"""
CHIP-8 Emulator
===============

An interpreter core for the CHIP-8 virtual machine.

This package provides:

- **CPU**: All 34 standard CHIP-8 instructions with a pure decoder and a
  dispatch-table executor
- **Memory**: 4KB address space with the built-in hex font
- **Display**: 64x32 XOR framebuffer with collision detection
- **Keypad**: 16-key hex keypad with QWERTY mapping
- **Timers**: Wall-clock driven 60Hz delay and sound timers
- **Quirks**: Selectable behaviour of historical interpreters
- **Debugging**: Cycle traces and PC breakpoints

Quick Start
-----------

Basic usage::

    >>> from chip8_sdk.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(seed=1))
    >>> emu.load_rom_file("maze.ch8")
    >>> event = emu.run(max_steps=5000)
    >>> print("\\n".join(emu.display_lines()))

With tracing::

    >>> buf = TraceBuffer(maxlen=50)
    >>> emu = Emulator(trace=buf)
    >>> emu.load_rom(rom)
    >>> emu.run(100)
    >>> for line in buf.lines():
    ...     print(line)

Module Structure
----------------

- `emulator.py`: Main Emulator class (high-level API)
- `cpu.py`: Fetch/decode/execute and run states
- `decoder.py`: Opcode to Instruction mapping
- `memory.py`: Memory map and ROM loader
- `registers.py`: V0-VF, I, PC and call stack
- `display.py`: Framebuffer
- `keypad.py`: Key state
- `timers.py`: Delay and sound timers
- `quirks.py`: Quirk profiles
- `trace.py`: Cycle results and trace sinks
- `breakpoints.py`: Debugging support

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

# Main entry point
from .emulator import Emulator, EmulatorConfig

# CPU components
from .cpu import Chip8CPU, RunState
from .decoder import Instruction, Op, decode

# Machine state
from .memory import Memory, FONTSET
from .registers import RegisterFile, RegisterState
from .display import Display
from .keypad import Keypad, KeypadLayout
from .timers import Timers

# Configuration
from .quirks import (
    Quirks,
    get_quirks,
    list_quirk_profiles,
    QUIRKS_DEFAULT,
    QUIRKS_COSMAC,
    QUIRKS_CHIP48,
)

# Tracing
from .trace import (
    CycleResult,
    MachineSnapshot,
    TraceSink,
    LoggingTraceSink,
    NullTraceSink,
    TraceBuffer,
)

# Debugging support
from .breakpoints import BreakpointManager, BreakEvent, BreakReason

__all__ = [
    # Main API
    "Emulator",
    "EmulatorConfig",

    # CPU
    "Chip8CPU",
    "RunState",
    "Instruction",
    "Op",
    "decode",

    # Machine state
    "Memory",
    "FONTSET",
    "RegisterFile",
    "RegisterState",
    "Display",
    "Keypad",
    "KeypadLayout",
    "Timers",

    # Quirks
    "Quirks",
    "get_quirks",
    "list_quirk_profiles",
    "QUIRKS_DEFAULT",
    "QUIRKS_COSMAC",
    "QUIRKS_CHIP48",

    # Tracing
    "CycleResult",
    "MachineSnapshot",
    "TraceSink",
    "LoggingTraceSink",
    "NullTraceSink",
    "TraceBuffer",

    # Debugging
    "BreakpointManager",
    "BreakEvent",
    "BreakReason",
]
