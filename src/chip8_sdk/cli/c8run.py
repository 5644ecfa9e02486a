"""
chip8-run - Headless CHIP-8 Runner
==================================

Runs a CHIP-8 ROM without a window and reports what it did: the final
screen as text art, an optional per-instruction trace and an optional
PNG screenshot.

Timers are driven by a virtual clock that advances a fixed amount per
instruction (see --rate), so runs are reproducible regardless of how
fast the host machine is.

The run stops when:
- the step budget (--steps) is used up
- the program jumps to itself (the usual CHIP-8 "end" idiom)
- the program waits for a key and no key is held (--keys)
- a fatal emulation error occurs (exit code 1)

Usage Examples
--------------
Run a ROM and show the screen:
    $ chip8-run ibm_logo.ch8

Trace the first 50 instructions:
    $ chip8-run pong.ch8 --steps 50 --trace

Hold keypad keys 1 and A, use CHIP-48 quirks, save a screenshot:
    $ chip8-run game.ch8 --keys 1,A --quirks chip48 --screenshot out.png

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

import logging
from pathlib import Path
from typing import List, Optional

import click

from chip8_sdk import __version__
from chip8_sdk.cli.errors import handle_cli_exception
from chip8_sdk.emulator import (
    CycleResult,
    Emulator,
    EmulatorConfig,
    NullTraceSink,
    Op,
    RunState,
    list_quirk_profiles,
)


class StepClock:
    """Virtual monotonic clock advanced explicitly by the runner."""

    def __init__(self, rate: float):
        self.period = 1.0 / rate
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self) -> None:
        self.now += self.period


class EchoTraceSink:
    """Print each cycle result on stdout."""

    def __call__(self, result: CycleResult) -> None:
        click.echo(result.format())


def parse_keys(text: str) -> List[int]:
    """
    Parse a comma-separated list of hex keypad keys ("1,A,f").

    Raises:
        click.BadParameter: If a key is not a single hex digit
    """
    keys = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        if len(part) != 1 or part.upper() not in "0123456789ABCDEF":
            raise click.BadParameter(f"'{part}' is not a hex keypad key (0-F)", param_hint="--keys")
        keys.append(int(part, 16))
    return keys


def _is_self_jump(result: CycleResult) -> bool:
    return result.category == Op.JP.category and result.after.pc == result.before.pc


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "rom_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-n", "--steps",
    type=click.IntRange(min=1),
    default=10_000,
    show_default=True,
    help="Maximum number of instructions to execute",
)
@click.option(
    "-q", "--quirks",
    type=click.Choice([p.name for p in list_quirk_profiles()], case_sensitive=False),
    default="default",
    show_default=True,
    help="Interpreter quirk profile",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed for the random number instruction (CXNN)",
)
@click.option(
    "--rate",
    type=click.FloatRange(min=1.0),
    default=500.0,
    show_default=True,
    help="Instructions per virtual second (timers tick at 60Hz of virtual time)",
)
@click.option(
    "-k", "--keys",
    type=str,
    default="",
    help="Comma-separated hex keypad keys held down for the whole run, e.g. 1,A",
)
@click.option(
    "-t", "--trace",
    is_flag=True,
    help="Print every executed instruction",
)
@click.option(
    "-s", "--screenshot",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write a PNG screenshot of the final screen",
)
@click.option(
    "--scale",
    type=click.IntRange(min=1),
    default=8,
    show_default=True,
    help="Screenshot pixel scale",
)
@click.option(
    "--no-screen",
    is_flag=True,
    help="Do not print the final screen",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (enables debug logging)",
)
@click.version_option(version=__version__, prog_name="chip8-run")
def main(
    rom_file: Path,
    steps: int,
    quirks: str,
    seed: Optional[int],
    rate: float,
    keys: str,
    trace: bool,
    screenshot: Optional[Path],
    scale: int,
    no_screen: bool,
    verbose: bool,
) -> None:
    """
    Run a CHIP-8 ROM headless.

    ROM_FILE is the raw program image (at most 3584 bytes).
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        held = parse_keys(keys)
        clock = StepClock(rate)
        config = EmulatorConfig(quirks=quirks, seed=seed, clock=clock)
        emu = Emulator(config, trace=EchoTraceSink() if trace else NullTraceSink())

        beeps = []
        emu.add_beep_listener(lambda: beeps.append(emu.total_steps))

        emu.load_rom_file(rom_file)
        if verbose:
            click.echo(f"Loaded {rom_file} with {emu.quirks.name} quirks", err=True)

        reason = f"step limit ({steps}) reached"
        for _ in range(steps):
            for key in held:
                emu.set_key(key, True)

            result = emu.step()
            clock.advance()

            if _is_self_jump(result):
                reason = f"program ended (jump to self at 0x{result.pc:03X})"
                break
            if result.state is RunState.WAITING_FOR_KEY and not held:
                reason = f"waiting for key at 0x{result.pc:03X}"
                break

        if not no_screen:
            click.echo("\n".join(emu.display_lines()))

        if screenshot:
            screenshot.write_bytes(emu.render_display(scale=scale))
            if verbose:
                click.echo(f"Screenshot written to: {screenshot}", err=True)

        if verbose:
            click.echo(f"Stopped: {reason}", err=True)
            click.echo(f"Steps executed: {emu.total_steps}", err=True)
            click.echo(f"Beeps: {len(beeps)}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Emulation")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
