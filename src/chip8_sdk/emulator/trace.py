"""
Cycle Trace Records and Sinks
=============================

Every dispatcher step produces a CycleResult describing what the
instruction did: the opcode, its category and pseudo-C text, and
snapshots of PC and V0-VF taken before and after execution.

Results are handed to a TraceSink, which is any callable accepting a
CycleResult. Three sinks ship with the SDK:

- LoggingTraceSink: writes one DEBUG line per cycle (the default)
- TraceBuffer: keeps the most recent N results in memory, for tests and
  post-mortem inspection
- NullTraceSink: discards everything

Example trace line:

    0x200> (0x6A05) VA = 0x5

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Deque, Iterator, List, Optional, Protocol, Tuple

if TYPE_CHECKING:
    from .cpu import RunState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MachineSnapshot:
    """
    PC and general registers at one instant.

    Attributes:
        pc: Program counter
        v: V0-VF values
    """
    pc: int
    v: Tuple[int, ...]

    @property
    def flag(self) -> int:
        """VF at the time of the snapshot."""
        return self.v[0xF]


@dataclass(frozen=True)
class CycleResult:
    """
    Outcome of one dispatcher step.

    A step spent waiting for a key executes nothing; it reports the
    pending FX0A opcode with before == after (or the register change if
    the wait was satisfied during that step).

    Attributes:
        opcode: Instruction word executed (or being waited on)
        category: Opcode pattern label, e.g. "0x8XY4"
        pseudo: Pseudo-C description, e.g. "V1 += V2"
        before: State before execution
        after: State after execution
        state: Run state after the step
    """
    opcode: int
    category: str
    pseudo: str
    before: MachineSnapshot
    after: MachineSnapshot
    state: "RunState"

    @property
    def pc(self) -> int:
        """Address the instruction was fetched from."""
        return self.before.pc

    def changed_registers(self) -> List[int]:
        """Indices of V registers whose value changed."""
        return [i for i, (a, b) in enumerate(zip(self.before.v, self.after.v)) if a != b]

    def format(self) -> str:
        """Single-line rendering: '0x200> (0x6A05) VA = 0x5'."""
        return f"0x{self.before.pc:03X}> (0x{self.opcode:04X}) {self.pseudo}"

    def __str__(self) -> str:
        return self.format()


# =============================================================================
# Sinks
# =============================================================================

class TraceSink(Protocol):
    """Anything that can receive cycle results."""

    def __call__(self, result: CycleResult) -> None:
        ...


class LoggingTraceSink:
    """Log every cycle at DEBUG level."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self._log = log or logger

    def __call__(self, result: CycleResult) -> None:
        if self._log.isEnabledFor(logging.DEBUG):
            self._log.debug(result.format())


class NullTraceSink:
    """Discard all cycle results."""

    def __call__(self, result: CycleResult) -> None:
        pass


class TraceBuffer:
    """
    Ring buffer of the most recent cycle results.

    Example:
        >>> buf = TraceBuffer(maxlen=100)
        >>> emu = Emulator(trace=buf)
        >>> emu.load_rom(bytes([0x00, 0xE0]))
        >>> result = emu.step()
        >>> buf.last.category
        '0x00E0'
    """

    def __init__(self, maxlen: Optional[int] = 1000):
        self._results: Deque[CycleResult] = deque(maxlen=maxlen)

    def __call__(self, result: CycleResult) -> None:
        self._results.append(result)

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[CycleResult]:
        return iter(self._results)

    def __getitem__(self, index: int) -> CycleResult:
        return self._results[index]

    @property
    def last(self) -> Optional[CycleResult]:
        """Most recent result, or None if empty."""
        return self._results[-1] if self._results else None

    def clear(self) -> None:
        self._results.clear()

    def lines(self) -> List[str]:
        """Formatted trace lines, oldest first."""
        return [r.format() for r in self._results]
