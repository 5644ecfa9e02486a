"""
CHIP-8 SDK Command-Line Interface
=================================

This package provides command-line tools for the CHIP-8 SDK:

- **chip8-run**: Headless ROM runner with trace and screenshot output
- **chip8-disasm**: ROM disassembler

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["c8run", "c8disasm"]
