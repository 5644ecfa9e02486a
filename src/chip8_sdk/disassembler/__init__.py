"""
CHIP-8 SDK Disassembler Module
==============================

This module provides disassembly of CHIP-8 machine code, using the same
decoder as the emulator.

Usage:
    from chip8_sdk.disassembler import Chip8Disassembler

    disasm = Chip8Disassembler()
    instructions = disasm.disassemble(rom_bytes, start_address=0x200)

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

from .chip8 import Chip8Disassembler, DisassembledInstruction

__all__ = [
    "Chip8Disassembler",
    "DisassembledInstruction",
]
