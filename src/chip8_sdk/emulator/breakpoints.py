"""
Breakpoints and Run Control
===========================

PC breakpoints for the CHIP-8 emulator. The Emulator consults the
BreakpointManager before each step of run(); when PC reaches a
breakpoint address execution stops before that instruction runs.

Example usage:

    >>> from chip8_sdk.emulator import Emulator, BreakReason
    >>> emu = Emulator()
    >>> emu.load_rom(rom)
    >>> emu.breakpoints.add_breakpoint(0x20A)
    >>> event = emu.run(10_000)
    >>> if event.reason == BreakReason.PC_BREAKPOINT:
    ...     print(f"Hit breakpoint at 0x{event.address:03X}")

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Set


class BreakReason(Enum):
    """
    Enumeration of reasons why execution stopped.

    Used in BreakEvent to indicate what triggered the break.
    """
    NONE = auto()           # No specific reason
    PC_BREAKPOINT = auto()  # PC reached a breakpoint address
    KEY_WAIT = auto()       # Program is blocked in FX0A
    STEP = auto()           # Single step
    MAX_STEPS = auto()      # Step budget exhausted


@dataclass
class BreakEvent:
    """
    Information about why execution stopped.

    Attributes:
        reason: Why execution stopped
        address: PC at the time of the break
        steps: Steps executed by the run that produced this event
        message: Human-readable description
    """
    reason: BreakReason
    address: Optional[int] = None
    steps: int = 0
    message: str = ""

    def __str__(self) -> str:
        if self.message:
            return self.message
        match self.reason:
            case BreakReason.PC_BREAKPOINT:
                return f"Breakpoint at 0x{self.address:03X}" if self.address is not None else "Breakpoint"
            case BreakReason.KEY_WAIT:
                return "Waiting for key"
            case BreakReason.STEP:
                return "Single step"
            case BreakReason.MAX_STEPS:
                return "Maximum steps reached"
            case _:
                return "Unknown"


class BreakpointManager:
    """
    Set of PC breakpoint addresses.

    Example:
        >>> mgr = BreakpointManager()
        >>> mgr.add_breakpoint(0x200)
        >>> mgr.has_breakpoint(0x200)
        True
    """

    def __init__(self):
        self._addresses: Set[int] = set()
        self._last_event: Optional[BreakEvent] = None

    @property
    def last_event(self) -> Optional[BreakEvent]:
        """The most recent break event recorded by run()."""
        return self._last_event

    @property
    def breakpoint_count(self) -> int:
        """Number of active PC breakpoints."""
        return len(self._addresses)

    def add_breakpoint(self, address: int) -> None:
        """
        Add PC breakpoint at address.

        Args:
            address: 12-bit memory address
        """
        self._addresses.add(address & 0x0FFF)

    def remove_breakpoint(self, address: int) -> None:
        """Remove PC breakpoint at address (no error if absent)."""
        self._addresses.discard(address & 0x0FFF)

    def has_breakpoint(self, address: int) -> bool:
        return (address & 0x0FFF) in self._addresses

    def clear_breakpoints(self) -> None:
        """Remove all PC breakpoints."""
        self._addresses.clear()

    def list_breakpoints(self) -> List[int]:
        """Sorted list of breakpoint addresses."""
        return sorted(self._addresses)

    def check(self, pc: int) -> Optional[BreakEvent]:
        """
        Check whether execution should stop before the instruction at pc.

        Returns:
            BreakEvent if a breakpoint is set at pc, else None
        """
        if pc in self._addresses:
            return self.record(BreakEvent(BreakReason.PC_BREAKPOINT, address=pc))
        return None

    def record(self, event: BreakEvent) -> BreakEvent:
        """Remember event as the last break and return it."""
        self._last_event = event
        return event
