"""
Breakpoint System Unit Tests
============================

Tests for PC breakpoints and the run loop's stop reasons.

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

import pytest

from chip8_sdk.emulator import BreakEvent, BreakpointManager, BreakReason

from conftest import rom


# 0x200: LD V0,0 ; 0x202: ADD V0,1 ; 0x204: JP 0x202
COUNTER = rom(0x6000, 0x7001, 0x1202)


@pytest.fixture
def mgr():
    return BreakpointManager()


class TestBreakpointManager:
    """Test breakpoint bookkeeping."""

    def test_add_and_query(self, mgr):
        mgr.add_breakpoint(0x204)
        assert mgr.has_breakpoint(0x204)
        assert mgr.breakpoint_count == 1

    def test_addresses_masked_to_12_bits(self, mgr):
        mgr.add_breakpoint(0x1204)
        assert mgr.has_breakpoint(0x204)

    def test_remove(self, mgr):
        mgr.add_breakpoint(0x204)
        mgr.remove_breakpoint(0x204)
        mgr.remove_breakpoint(0x300)  # absent is fine
        assert not mgr.has_breakpoint(0x204)

    def test_list_sorted(self, mgr):
        for addr in (0x300, 0x200, 0x250):
            mgr.add_breakpoint(addr)
        assert mgr.list_breakpoints() == [0x200, 0x250, 0x300]

    def test_clear(self, mgr):
        mgr.add_breakpoint(0x200)
        mgr.clear_breakpoints()
        assert mgr.breakpoint_count == 0

    def test_check_records_event(self, mgr):
        mgr.add_breakpoint(0x204)
        assert mgr.check(0x202) is None
        event = mgr.check(0x204)
        assert event.reason == BreakReason.PC_BREAKPOINT
        assert event.address == 0x204
        assert mgr.last_event is event


class TestBreakEvent:
    """Test event descriptions."""

    def test_breakpoint_str(self):
        assert str(BreakEvent(BreakReason.PC_BREAKPOINT, address=0x20A)) == "Breakpoint at 0x20A"

    def test_message_overrides(self):
        assert str(BreakEvent(BreakReason.MAX_STEPS, message="done")) == "done"

    def test_key_wait_str(self):
        assert str(BreakEvent(BreakReason.KEY_WAIT)) == "Waiting for key"


class TestRunControl:
    """Test Emulator.run() and run_until_pc()."""

    def test_run_max_steps(self, emu):
        emu.load_rom(COUNTER)
        event = emu.run(max_steps=7)
        assert event.reason == BreakReason.MAX_STEPS
        assert event.steps == 7
        assert emu.total_steps == 7

    def test_run_stops_at_breakpoint(self, emu):
        emu.load_rom(COUNTER)
        emu.breakpoints.add_breakpoint(0x204)
        event = emu.run(max_steps=100)
        assert event.reason == BreakReason.PC_BREAKPOINT
        assert event.address == 0x204
        assert event.steps == 2
        assert emu.registers["v"][0] == 1

    def test_run_continues_past_breakpoint(self, emu):
        emu.load_rom(COUNTER)
        emu.breakpoints.add_breakpoint(0x204)
        emu.run(max_steps=100)
        event = emu.run(max_steps=100)
        assert event.reason == BreakReason.PC_BREAKPOINT
        assert event.steps == 2
        assert emu.registers["v"][0] == 2

    def test_run_stops_on_key_wait(self, emu):
        emu.load_rom(rom(0x6001, 0xF10A))
        event = emu.run(max_steps=100)
        assert event.reason == BreakReason.KEY_WAIT
        assert event.steps == 2
        assert event.address == 0x202

    def test_run_until_pc(self, emu):
        emu.load_rom(COUNTER)
        assert emu.run_until_pc(0x204) is True
        assert emu.pc == 0x204
        assert not emu.breakpoints.has_breakpoint(0x204)

    def test_run_until_pc_unreachable(self, emu):
        emu.load_rom(COUNTER)
        assert emu.run_until_pc(0x300, max_steps=50) is False

    def test_run_until_pc_keeps_existing_breakpoint(self, emu):
        emu.load_rom(COUNTER)
        emu.breakpoints.add_breakpoint(0x204)
        emu.run_until_pc(0x204)
        assert emu.breakpoints.has_breakpoint(0x204)
