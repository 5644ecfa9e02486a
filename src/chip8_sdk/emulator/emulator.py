"""
CHIP-8 Emulator - Main Orchestrator
===================================

This module provides the main `Emulator` class that wires the memory,
registers, display, keypad, timers and CPU together behind the small
interface a host needs:

- ROM loading: load_rom(), load_rom_file()
- Execution: step(), run(), run_until_pc(), reset()
- Input: set_key(), press_key(), release_key()
- Output: get_display(), needs_redraw(), poll_beep(), add_beep_listener()

A host (window, terminal, test) drives the machine by calling step() as
often as it likes; timers follow the wall clock independently of the
step rate.

Example usage:
    >>> from chip8_sdk.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(quirks="chip48", seed=1))
    >>> emu.load_rom_file("pong.ch8")
    >>> while True:
    ...     emu.step()
    ...     if emu.needs_redraw():
    ...         paint(emu.get_display())

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

import logging
import os
import random
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .breakpoints import BreakEvent, BreakpointManager, BreakReason
from .cpu import Chip8CPU, RunState
from .display import Display
from .keypad import Keypad, KeypadLayout
from .memory import Memory
from .quirks import Quirks, get_quirks
from .registers import RegisterFile
from .timers import BeepListener, Clock, Timers
from .trace import CycleResult, TraceSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        quirks: Quirk profile name ("default", "cosmac", "chip48") or a
                Quirks instance
        timer_hz: Delay/sound timer frequency (60 on real hardware)
        seed: Seed for the CXNN random source; None for a random seed
        clock: Monotonic clock callable returning seconds; None uses
               time.monotonic
        keypad_layout: How key names given to press_key() are read

    Example:
        >>> config = EmulatorConfig(quirks="cosmac", seed=42)
    """
    quirks: Union[str, Quirks] = "default"
    timer_hz: float = 60.0
    seed: Optional[int] = None
    clock: Optional[Clock] = None
    keypad_layout: KeypadLayout = KeypadLayout.QWERTY

    @classmethod
    def from_env(cls) -> "EmulatorConfig":
        """
        Create EmulatorConfig from environment variables.

        Environment variables (all optional):
            CHIP8_QUIRKS: Quirk profile name
            CHIP8_TIMER_HZ: Timer frequency (number)
            CHIP8_SEED: Random seed (integer)

        Invalid numeric values are ignored with a warning.

        Returns:
            EmulatorConfig with values from environment variables
        """
        kwargs = {}

        if quirks := os.environ.get("CHIP8_QUIRKS"):
            kwargs["quirks"] = quirks

        if timer_hz := os.environ.get("CHIP8_TIMER_HZ"):
            try:
                kwargs["timer_hz"] = float(timer_hz)
            except ValueError:
                logger.warning(f"Ignoring invalid CHIP8_TIMER_HZ={timer_hz!r}")

        if seed := os.environ.get("CHIP8_SEED"):
            try:
                kwargs["seed"] = int(seed, 0)
            except ValueError:
                logger.warning(f"Ignoring invalid CHIP8_SEED={seed!r}")

        return cls(**kwargs)


class Emulator:
    """
    CHIP-8 virtual machine with instrumentation support.

    All machine state lives in this object and its components; several
    emulators can run side by side in one process.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        quirks: Resolved quirk profile
        memory: 4KB memory with font
        registers: V0-VF, I, PC, stack
        display: 64x32 framebuffer
        keypad: Hex keypad
        timers: Delay and sound timers
        cpu: The fetch/decode/execute engine
        breakpoints: PC breakpoint manager used by run()

    Example:
        >>> emu = Emulator()
        >>> emu.load_rom(bytes([0x60, 0x2A]))   # LD V0, 0x2A
        >>> emu.step().pseudo
        'V0 = 0x2A'
        >>> emu.registers["v"][0]
        42
    """

    def __init__(
        self,
        config: Optional[EmulatorConfig] = None,
        trace: Optional[TraceSink] = None,
    ):
        """
        Initialize the emulator with given configuration.

        Args:
            config: EmulatorConfig; defaults to the default quirk profile
                    with a 60Hz wall-clock timer
            trace: Sink receiving every CycleResult; defaults to DEBUG
                   logging

        Raises:
            ValueError: If the quirk profile or timer frequency is invalid
        """
        self.config = config or EmulatorConfig()
        self.quirks = get_quirks(self.config.quirks)

        self.memory = Memory()
        self._registers = RegisterFile()
        self.display = Display(clip_sprites=self.quirks.clip_sprites)
        self.keypad = Keypad(layout=self.config.keypad_layout)
        self.timers = Timers(hz=self.config.timer_hz, clock=self.config.clock)
        self.cpu = Chip8CPU(
            memory=self.memory,
            registers=self._registers,
            display=self.display,
            keypad=self.keypad,
            timers=self.timers,
            quirks=self.quirks,
            rng=random.Random(self.config.seed),
            trace=trace,
        )
        self.breakpoints = BreakpointManager()
        self._rom: Optional[bytes] = None

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_rom(self, data: bytes) -> None:
        """
        Load a ROM image and point PC at it.

        Only the program region and PC are re-initialized; registers,
        display and timers keep their state. A halted machine becomes
        runnable again.

        Args:
            data: Raw CHIP-8 program, at most 3584 bytes

        Raises:
            RomTooLarge: If the ROM does not fit
        """
        data = bytes(data)
        self.memory.load(data)
        self._rom = data
        self.cpu.restart(Memory.PROGRAM_START)
        logger.info(f"Loaded ROM ({len(data)} bytes)")

    def load_rom_file(self, path: Union[str, Path]) -> None:
        """
        Load a ROM from a file.

        Raises:
            FileNotFoundError: If the file does not exist
            RomTooLarge: If the ROM does not fit
        """
        path = Path(path)
        logger.debug(f"Reading ROM file {path}")
        self.load_rom(path.read_bytes())

    # =========================================================================
    # Execution Control
    # =========================================================================

    def reset(self) -> None:
        """
        Reset to power-on state and reload the last ROM.

        Registers, display, keypad and timers are cleared, the random source
        is reseeded from the config and the machine returns to RUNNING,
        even if it had halted.
        """
        self.cpu.reset()
        self.display.clear()
        self.keypad.reset()
        self.timers.reset()
        self.cpu.rng.seed(self.config.seed)
        self.memory.load(self._rom if self._rom is not None else b"")
        logger.info("Machine reset")

    def step(self) -> CycleResult:
        """
        Execute a single cycle.

        Returns:
            CycleResult describing the cycle

        Raises:
            EmulationError: On a fatal error; the machine halts
            MachineHalted: If the machine already halted
        """
        return self.cpu.step()

    def run(self, max_steps: int = 100_000) -> BreakEvent:
        """
        Step until a breakpoint, a key wait, or max_steps.

        A breakpoint at the starting PC does not stop the run, so calling
        run() again after a breakpoint continues past it.

        Args:
            max_steps: Maximum steps to execute

        Returns:
            BreakEvent describing why execution stopped

        Raises:
            EmulationError: On a fatal error
        """
        steps = 0
        while steps < max_steps:
            if steps:
                event = self.breakpoints.check(self.pc & 0x0FFF)
                if event is not None:
                    event.steps = steps
                    return event

            result = self.cpu.step()
            steps += 1

            if result.state is RunState.WAITING_FOR_KEY:
                return self.breakpoints.record(BreakEvent(
                    BreakReason.KEY_WAIT,
                    address=self.pc,
                    steps=steps,
                ))

        return self.breakpoints.record(BreakEvent(
            BreakReason.MAX_STEPS,
            address=self.pc,
            steps=steps,
            message=f"Reached max steps ({max_steps})",
        ))

    def run_until_pc(self, address: int, max_steps: int = 1_000_000) -> bool:
        """
        Run until PC reaches a specific address.

        Creates a temporary breakpoint at the address and runs until hit.

        Returns:
            True if address was reached, False if the run stopped first
        """
        was_set = self.breakpoints.has_breakpoint(address)
        if not was_set:
            self.breakpoints.add_breakpoint(address)

        try:
            event = self.run(max_steps)
            return (event.reason == BreakReason.PC_BREAKPOINT and
                    event.address == (address & 0x0FFF))
        finally:
            if not was_set:
                self.breakpoints.remove_breakpoint(address)

    # =========================================================================
    # Keypad Input
    # =========================================================================

    def set_key(self, index: int, pressed: bool) -> None:
        """Set keypad key 0-15 down (True) or up (False)."""
        self.keypad.set_key(index, pressed)

    def press_key(self, key: str) -> None:
        """Press a key by name (QWERTY layout by default, e.g. "W" is key 5)."""
        self.keypad.key_down(key)

    def release_key(self, key: str) -> None:
        """Release a key by name."""
        self.keypad.key_up(key)

    # =========================================================================
    # Display and Sound Output
    # =========================================================================

    def get_display(self) -> bytes:
        """Framebuffer snapshot: 2048 cells of 0/1, row-major (y * 64 + x)."""
        return self.display.get_pixels()

    def needs_redraw(self) -> bool:
        """True once after each clear/draw."""
        return self.display.needs_redraw()

    def display_lines(self) -> List[str]:
        """Framebuffer as text art, one string per row."""
        return self.display.render_text()

    def render_display(self, scale: int = 8, format: str = "PNG") -> bytes:
        """Framebuffer as encoded image bytes (Pillow)."""
        return self.display.render_image(scale=scale, format=format)

    def poll_beep(self) -> bool:
        """True once after each sound-timer expiry."""
        return self.timers.poll_beep()

    def add_beep_listener(self, listener: BeepListener) -> None:
        """Call listener() whenever the sound timer reaches zero."""
        self.timers.add_beep_listener(listener)

    # =========================================================================
    # State Inspection
    # =========================================================================

    @property
    def state(self) -> RunState:
        return self.cpu.state

    @property
    def pc(self) -> int:
        return self._registers.pc

    @property
    def registers(self) -> dict:
        """
        Current register values as a dictionary.

        Returns:
            Dictionary with keys: v (list of 16), i, pc, sp, stack, dt, st
        """
        return {
            "v": list(self._registers.snapshot_v()),
            "i": self._registers.i,
            "pc": self._registers.pc,
            "sp": self._registers.sp,
            "stack": self._registers.stack_frames(),
            "dt": self.timers.delay,
            "st": self.timers.sound,
        }

    @property
    def register_file(self) -> RegisterFile:
        """Direct access to the register file."""
        return self._registers

    @property
    def total_steps(self) -> int:
        """Steps executed since the last reset."""
        return self.cpu.steps

    def __repr__(self) -> str:
        return (
            f"Emulator(quirks={self.quirks.name}, "
            f"pc=0x{self._registers.pc:03X}, "
            f"state={self.cpu.state.name})"
        )
