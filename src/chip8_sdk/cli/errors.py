"""
Unified CLI Error Handling
==========================

Maps SDK and host exceptions onto exit codes and one-line messages so
chip8-run and chip8-disasm fail the same way.

    ROM errors        -> exit 1, "ROM error: ..."
    Emulation errors  -> exit 1, "<type> error: 0x2A4> ..."
    Bad arguments     -> exit 2
    Missing files     -> exit 2
    Anything else     -> exit 3 (traceback with --verbose)

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from chip8_sdk.errors import Chip8Error, LoadError


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    RUNTIME_ERROR = 1    # ROM load failure or fatal emulation error
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def exit_code_for(error: Exception) -> ExitCode:
    """Exit code a CLI tool should return for an exception."""
    if isinstance(error, Chip8Error):
        return ExitCode.RUNTIME_ERROR
    # BadParameter is not a ValueError; OSError covers missing and unreadable files
    if isinstance(error, (click.BadParameter, ValueError, OSError)):
        return ExitCode.INVALID_ARGS
    return ExitCode.INTERNAL_ERROR


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Report an exception and exit.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        error_type: Prefix for emulation errors (e.g., "Emulation")

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    code = exit_code_for(error)

    if isinstance(error, LoadError):
        message = f"ROM error: {error}"
    elif isinstance(error, Chip8Error):
        message = f"{error_type} error: {error}" if error_type else f"Error: {error}"
    elif code is ExitCode.INTERNAL_ERROR:
        message = f"Internal error: {error}"
    else:
        message = f"Error: {error}"

    click.echo(message, err=True)
    if verbose and code is ExitCode.INTERNAL_ERROR:
        traceback.print_exc()
    sys.exit(code)
