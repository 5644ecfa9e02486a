"""
Command-Line Tool Tests
=======================

Tests for chip8-run and chip8-disasm using click's CliRunner.

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from chip8_sdk import __version__
from chip8_sdk.cli.c8disasm import main as disasm_main, parse_address
from chip8_sdk.cli.c8run import main as run_main, parse_keys, StepClock
from chip8_sdk.cli.errors import ExitCode, exit_code_for
from chip8_sdk.errors import RomTooLarge, UnknownOpcode

from conftest import rom


# Draw glyph "0" at (0,0) then jump to self
DRAW_ZERO = rom(0x6000, 0xF029, 0xD005, 0x1206)


@pytest.fixture
def runner():
    return CliRunner()


# =============================================================================
# chip8-run
# =============================================================================

class TestRunCommand:
    """Test the headless runner."""

    def test_prints_screen(self, runner):
        with runner.isolated_filesystem():
            Path("zero.ch8").write_bytes(DRAW_ZERO)
            result = runner.invoke(run_main, ["zero.ch8"])

            assert result.exit_code == 0, result.output
            lines = result.output.splitlines()
            assert lines[0].startswith("####....")
            assert lines[1].startswith("#..#....")
            assert len(lines) == 32

    def test_no_screen(self, runner):
        with runner.isolated_filesystem():
            Path("zero.ch8").write_bytes(DRAW_ZERO)
            result = runner.invoke(run_main, ["zero.ch8", "--no-screen"])

            assert result.exit_code == 0
            assert "####" not in result.output

    def test_trace(self, runner):
        with runner.isolated_filesystem():
            Path("zero.ch8").write_bytes(DRAW_ZERO)
            result = runner.invoke(run_main, ["zero.ch8", "--trace", "--no-screen"])

            assert result.exit_code == 0
            assert "0x200> (0x6000) V0 = 0x0" in result.output
            assert "0x204> (0xD005) draw(V0, V0, 5)" in result.output

    def test_verbose_reports_stop_reason(self, runner):
        with runner.isolated_filesystem():
            Path("zero.ch8").write_bytes(DRAW_ZERO)
            result = runner.invoke(run_main, ["zero.ch8", "-v", "--no-screen"])

            assert result.exit_code == 0
            assert "jump to self at 0x206" in result.output
            assert "Steps executed: 4" in result.output

    def test_step_limit(self, runner):
        with runner.isolated_filesystem():
            Path("loop.ch8").write_bytes(rom(0x7001, 0x1200))
            result = runner.invoke(run_main, ["loop.ch8", "-n", "10", "-v", "--no-screen"])

            assert result.exit_code == 0
            assert "step limit (10) reached" in result.output

    def test_stops_on_key_wait(self, runner):
        with runner.isolated_filesystem():
            Path("wait.ch8").write_bytes(rom(0xF00A, 0x1202))
            result = runner.invoke(run_main, ["wait.ch8", "-v", "--no-screen"])

            assert result.exit_code == 0
            assert "waiting for key at 0x200" in result.output

    def test_held_key_satisfies_wait(self, runner):
        with runner.isolated_filesystem():
            # Wait for key into V0, draw its glyph, stop
            Path("key.ch8").write_bytes(rom(0xF00A, 0xF029, 0x6100, 0xD115, 0x1208))
            result = runner.invoke(run_main, ["key.ch8", "--keys", "1"])

            assert result.exit_code == 0, result.output
            assert result.output.splitlines()[1].startswith(".##.")

    def test_screenshot(self, runner):
        with runner.isolated_filesystem():
            Path("zero.ch8").write_bytes(DRAW_ZERO)
            result = runner.invoke(
                run_main, ["zero.ch8", "--screenshot", "out.png", "--scale", "2", "--no-screen"]
            )

            assert result.exit_code == 0
            assert Path("out.png").read_bytes()[:4] == b'\x89PNG'

    def test_quirks_option(self, runner):
        with runner.isolated_filesystem():
            Path("zero.ch8").write_bytes(DRAW_ZERO)
            result = runner.invoke(run_main, ["zero.ch8", "--quirks", "CHIP48", "-v", "--no-screen"])

            assert result.exit_code == 0
            assert "chip48 quirks" in result.output

    def test_invalid_quirks(self, runner):
        with runner.isolated_filesystem():
            Path("zero.ch8").write_bytes(DRAW_ZERO)
            result = runner.invoke(run_main, ["zero.ch8", "--quirks", "superchip"])

            assert result.exit_code == ExitCode.INVALID_ARGS

    def test_invalid_keys(self, runner):
        with runner.isolated_filesystem():
            Path("zero.ch8").write_bytes(DRAW_ZERO)
            result = runner.invoke(run_main, ["zero.ch8", "--keys", "1,G"])

            assert result.exit_code == ExitCode.INVALID_ARGS
            assert "'G' is not a hex keypad key" in result.output

    def test_unknown_opcode_fails(self, runner):
        with runner.isolated_filesystem():
            Path("bad.ch8").write_bytes(rom(0x6001, 0xFFFF))
            result = runner.invoke(run_main, ["bad.ch8"])

            assert result.exit_code == ExitCode.RUNTIME_ERROR
            assert "Emulation error: 0x202> unknown opcode: 0xFFFF" in result.output

    def test_rom_too_large(self, runner):
        with runner.isolated_filesystem():
            Path("big.ch8").write_bytes(bytes(4000))
            result = runner.invoke(run_main, ["big.ch8"])

            assert result.exit_code == ExitCode.RUNTIME_ERROR
            assert "ROM error: ROM is 4000 bytes" in result.output

    def test_missing_file(self, runner):
        result = runner.invoke(run_main, ["does-not-exist.ch8"])
        assert result.exit_code == 2

    def test_version(self, runner):
        result = runner.invoke(run_main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestRunHelpers:
    """Test runner helpers."""

    def test_parse_keys(self):
        assert parse_keys("1,a, F") == [0x1, 0xA, 0xF]
        assert parse_keys("") == []

    def test_step_clock(self):
        clock = StepClock(rate=600)
        assert clock() == 0.0
        for _ in range(10):
            clock.advance()
        assert clock() == pytest.approx(1 / 60)


# =============================================================================
# chip8-disasm
# =============================================================================

class TestDisasmCommand:
    """Test the disassembler CLI."""

    def test_listing(self, runner):
        with runner.isolated_filesystem():
            Path("zero.ch8").write_bytes(DRAW_ZERO)
            result = runner.invoke(disasm_main, ["zero.ch8"])

            assert result.exit_code == 0, result.output
            assert "; Disassembly of zero.ch8" in result.output
            assert "$200: 60 00  LD V0, 0x00" in result.output
            assert "$206: 12 06  JP 0x206" in result.output

    def test_no_bytes(self, runner):
        with runner.isolated_filesystem():
            Path("zero.ch8").write_bytes(DRAW_ZERO)
            result = runner.invoke(disasm_main, ["zero.ch8", "--no-bytes"])

            assert "$204:  DRW V0, V0, 5" in result.output
            assert "D0 05" not in result.output

    def test_count_and_address(self, runner):
        with runner.isolated_filesystem():
            Path("zero.ch8").write_bytes(DRAW_ZERO)
            result = runner.invoke(disasm_main, ["zero.ch8", "-a", "0x300", "-c", "2"])

            assert "$300:" in result.output
            assert "$302:" in result.output
            assert "$304:" not in result.output

    def test_output_file(self, runner):
        with runner.isolated_filesystem():
            Path("zero.ch8").write_bytes(DRAW_ZERO)
            result = runner.invoke(disasm_main, ["zero.ch8", "-o", "zero.asm"])

            assert result.exit_code == 0
            assert "LD F, V0" in Path("zero.asm").read_text()

    def test_invalid_address(self, runner):
        with runner.isolated_filesystem():
            Path("zero.ch8").write_bytes(DRAW_ZERO)
            result = runner.invoke(disasm_main, ["zero.ch8", "-a", "zzz"])

            assert result.exit_code == ExitCode.INVALID_ARGS

    def test_address_out_of_range(self, runner):
        with runner.isolated_filesystem():
            Path("zero.ch8").write_bytes(DRAW_ZERO)
            result = runner.invoke(disasm_main, ["zero.ch8", "-a", "0x1000"])

            assert result.exit_code == ExitCode.INVALID_ARGS

    def test_empty_file(self, runner):
        with runner.isolated_filesystem():
            Path("empty.ch8").write_bytes(b"")
            result = runner.invoke(disasm_main, ["empty.ch8"])

            assert result.exit_code == ExitCode.INVALID_ARGS
            assert "is empty" in result.output

    @pytest.mark.parametrize("text,value", [("0x200", 0x200), ("$2A0", 0x2A0), ("512", 512)])
    def test_parse_address(self, text, value):
        assert parse_address(text) == value


# =============================================================================
# Error mapping
# =============================================================================

class TestExitCodes:
    """Test exception to exit code mapping."""

    @pytest.mark.parametrize("error,code", [
        (RomTooLarge(4000, 3584), ExitCode.RUNTIME_ERROR),
        (UnknownOpcode(0xFFFF, pc=0x200), ExitCode.RUNTIME_ERROR),
        (ValueError("bad"), ExitCode.INVALID_ARGS),
        (FileNotFoundError("gone"), ExitCode.INVALID_ARGS),
        (RuntimeError("boom"), ExitCode.INTERNAL_ERROR),
    ])
    def test_exit_code_for(self, error, code):
        assert exit_code_for(error) is code
