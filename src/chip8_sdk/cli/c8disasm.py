"""
chip8-disasm - CHIP-8 Disassembler Command-Line Interface
=========================================================

This module implements the command-line interface for the CHIP-8
disassembler.

Usage Examples
--------------
Disassemble a ROM (loaded at $200 by default):
    $ chip8-disasm pong.ch8

With a different base address:
    $ chip8-disasm overlay.bin --address 0x300

Limit number of instructions:
    $ chip8-disasm pong.ch8 --count 20

Output to file, without the raw bytes column:
    $ chip8-disasm pong.ch8 --no-bytes -o pong.asm

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

import sys
from pathlib import Path
from typing import Optional

import click

from chip8_sdk import __version__
from chip8_sdk.cli.errors import ExitCode, handle_cli_exception
from chip8_sdk.disassembler import Chip8Disassembler


def parse_address(text: str) -> int:
    """Parse 0x-prefixed hex, $-prefixed hex or decimal."""
    if text.lower().startswith("0x"):
        return int(text, 16)
    if text.startswith("$"):
        return int(text[1:], 16)
    return int(text)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-a", "--address",
    type=str,
    default="0x200",
    help="Base address for disassembly (hex with 0x prefix or decimal). Default: 0x200",
)
@click.option(
    "-c", "--count",
    type=int,
    default=None,
    help="Maximum number of instructions to disassemble (default: all)",
)
@click.option(
    "--no-bytes",
    is_flag=True,
    help="Omit raw bytes from output (show only the instruction text)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="chip8-disasm")
def main(
    input_file: Path,
    output: Optional[Path],
    address: str,
    count: Optional[int],
    no_bytes: bool,
    verbose: bool,
) -> None:
    """
    Disassemble a CHIP-8 ROM.

    INPUT_FILE is the raw ROM image to disassemble.

    Examples:

        # Disassemble a ROM loaded at $200
        chip8-disasm pong.ch8

        # First 20 instructions into a file
        chip8-disasm pong.ch8 --count 20 -o listing.asm
    """
    try:
        base_address = parse_address(address)
    except ValueError:
        click.echo(f"Error: Invalid address '{address}'", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    if not 0 <= base_address <= 0xFFF:
        click.echo("Error: Address must be 0-4095 (0x000-0xFFF)", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    try:
        data = input_file.read_bytes()

        if len(data) == 0:
            click.echo(f"Error: {input_file} is empty", err=True)
            sys.exit(ExitCode.INVALID_ARGS)

        if verbose:
            click.echo(f"Input file: {input_file} ({len(data)} bytes)", err=True)
            click.echo(f"Base address: ${base_address:03X}", err=True)

        disasm = Chip8Disassembler()
        instructions = disasm.disassemble(data, start_address=base_address, count=count)

        output_lines = [
            f"; Disassembly of {input_file.name}",
            f"; Size: {len(data)} bytes",
            f"; Base address: ${base_address:03X}",
            "",
        ]
        output_lines.extend(instr.format(show_bytes=not no_bytes) for instr in instructions)
        result = "\n".join(output_lines) + "\n"

        if output:
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        else:
            click.echo(result, nl=False)

        if verbose:
            click.echo(f"Instructions disassembled: {len(instructions)}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
