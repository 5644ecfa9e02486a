"""
Shared pytest fixtures for the CHIP-8 SDK tests.

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

import pytest

from chip8_sdk.emulator import Emulator, EmulatorConfig, TraceBuffer


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def advance_ticks(self, ticks: float, hz: float = 60.0) -> None:
        self.now += ticks / hz


def rom(*words: int) -> bytes:
    """Build a ROM image from 16-bit instruction words."""
    data = bytearray()
    for word in words:
        data += bytes([(word >> 8) & 0xFF, word & 0xFF])
    return bytes(data)


@pytest.fixture
def clock():
    """A fake clock starting at t=0."""
    return FakeClock()


@pytest.fixture
def trace():
    """Trace buffer capturing every cycle."""
    return TraceBuffer(maxlen=None)


@pytest.fixture
def emu(clock, trace):
    """Emulator with default quirks, fixed seed, fake clock and trace buffer."""
    return Emulator(EmulatorConfig(seed=1234, clock=clock), trace=trace)


@pytest.fixture
def make_emu(clock, trace):
    """Factory for emulators with a given quirk profile."""
    def _make(quirks="default", seed=1234):
        return Emulator(EmulatorConfig(quirks=quirks, seed=seed, clock=clock), trace=trace)
    return _make
