"""
Delay and Sound Timers
======================

CHIP-8 has two 8-bit countdown registers, delay (DT) and sound (ST).
Both count down toward zero at 60Hz, independent of how fast the
interpreter executes instructions. The buzzer sounds while ST is
non-zero; this emulator reports the moment ST reaches zero as a one-shot
"beep" edge which hosts can poll or subscribe to.

The timers are driven by a wall clock rather than by an instruction
count. Every dispatcher step calls update(); if at least one 60Hz period
has passed since the last tick, both counters drop by one. Several
elapsed periods still give a single decrement. The tick phase is kept,
so a host stepping faster than 60Hz sees accurate decay.

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

import logging
import time
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
BeepListener = Callable[[], None]


class Timers:
    """
    Wall-clock driven delay and sound timers.

    Attributes:
        hz: Tick frequency (60 on real hardware)

    Example:
        >>> now = [0.0]
        >>> timers = Timers(clock=lambda: now[0])
        >>> timers.sound = 1
        >>> now[0] = 1 / 60
        >>> timers.update()
        True
        >>> timers.poll_beep()
        True
    """

    def __init__(self, hz: float = 60.0, clock: Optional[Clock] = None):
        if hz <= 0:
            raise ValueError(f"Timer frequency must be positive, got {hz}")
        self.hz = hz
        self.period = 1.0 / hz
        self._clock = clock or time.monotonic
        self._delay = 0
        self._sound = 0
        self._beep_pending = False
        self._listeners: List[BeepListener] = []
        self._origin = self._clock()
        self._periods_seen = 0
        self._ticks = 0

    def reset(self) -> None:
        """Zero both counters and restart the tick phase."""
        self._delay = 0
        self._sound = 0
        self._beep_pending = False
        self._origin = self._clock()
        self._periods_seen = 0
        self._ticks = 0

    # =========================================================================
    # Registers
    # =========================================================================

    @property
    def delay(self) -> int:
        """Delay timer (8-bit)."""
        return self._delay

    @delay.setter
    def delay(self, value: int) -> None:
        self._delay = max(0, min(255, value))

    @property
    def sound(self) -> int:
        """Sound timer (8-bit)."""
        return self._sound

    @sound.setter
    def sound(self, value: int) -> None:
        self._sound = max(0, min(255, value))

    @property
    def ticks(self) -> int:
        """Number of ticks applied since reset."""
        return self._ticks

    # =========================================================================
    # Clocking
    # =========================================================================

    def update(self) -> bool:
        """
        Apply at most one tick if a period has elapsed.

        Returns:
            True if the counters were ticked
        """
        # Whole periods since the origin, not since the last tick
        due = int((self._clock() - self._origin) * self.hz + 1e-6)
        if due <= self._periods_seen:
            return False

        # Coalesce: one decrement regardless of how many periods passed
        self._periods_seen = due
        self.tick()
        return True

    def tick(self) -> None:
        """Decrement both counters once (floor at zero)."""
        self._ticks += 1
        if self._delay > 0:
            self._delay -= 1
        if self._sound > 0:
            self._sound -= 1
            if self._sound == 0:
                self._beep()

    def _beep(self) -> None:
        logger.debug("Sound timer expired: beep")
        self._beep_pending = True
        for listener in list(self._listeners):
            listener()

    # =========================================================================
    # Beep Signal
    # =========================================================================

    def poll_beep(self) -> bool:
        """
        Return whether a beep edge occurred since the last poll.

        Reading the signal resets it.
        """
        pending = self._beep_pending
        self._beep_pending = False
        return pending

    def add_beep_listener(self, listener: BeepListener) -> None:
        """Call listener() every time the sound timer reaches zero."""
        self._listeners.append(listener)

    def remove_beep_listener(self, listener: BeepListener) -> None:
        """Stop notifying a previously added listener."""
        self._listeners.remove(listener)
