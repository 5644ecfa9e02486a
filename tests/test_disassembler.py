"""
Disassembler Unit Tests
=======================

Tests for the CHIP-8 disassembler.

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

import pytest

from chip8_sdk.disassembler import Chip8Disassembler, DisassembledInstruction

from conftest import rom


@pytest.fixture
def disasm():
    return Chip8Disassembler()


class TestDisassembleOne:
    """Test single-word disassembly."""

    def test_basic(self, disasm):
        instr = disasm.disassemble_one(rom(0x6A05))
        assert isinstance(instr, DisassembledInstruction)
        assert instr.address == 0x200
        assert instr.opcode == 0x6A05
        assert instr.category == "0x6XNN"
        assert instr.text == "LD VA, 0x05"
        assert instr.size == 2
        assert instr.raw_bytes == bytes([0x6A, 0x05])
        assert not instr.is_data

    def test_offset_and_address(self, disasm):
        instr = disasm.disassemble_one(rom(0x00E0, 0x00EE), address=0x202, offset=2)
        assert instr.address == 0x202
        assert instr.text == "RET"

    def test_unknown_word(self, disasm):
        instr = disasm.disassemble_one(rom(0xFFFF))
        assert instr.text == "DW 0xFFFF"
        assert instr.comment == "unknown opcode"
        assert instr.is_data

    def test_trailing_byte(self, disasm):
        instr = disasm.disassemble_one(bytes([0x12]))
        assert instr.text == "DB 0x12"
        assert instr.size == 1

    def test_offset_beyond_data(self, disasm):
        with pytest.raises(ValueError):
            disasm.disassemble_one(rom(0x00E0), offset=2)

    def test_symbol_annotation(self):
        disasm = Chip8Disassembler(symbol_table={0x20A: "draw_loop"})
        instr = disasm.disassemble_one(rom(0x120A))
        assert instr.comment == "draw_loop"

    def test_add_symbols(self, disasm):
        disasm.add_symbol(0x300, "sprite")
        disasm.add_symbols({0x310: "score"})
        assert disasm.disassemble_one(rom(0xA300)).comment == "sprite"
        assert disasm.disassemble_one(rom(0xA310)).comment == "score"

    def test_shares_caller_symbol_table(self):
        symbols = {}
        disasm = Chip8Disassembler(symbol_table=symbols)
        symbols[0x20A] = "draw_loop"
        assert disasm.disassemble_one(rom(0x220A)).comment == "draw_loop"

    def test_symbols_ignored_for_immediates(self):
        disasm = Chip8Disassembler(symbol_table={0x005: "five"})
        assert disasm.disassemble_one(rom(0x6005)).comment == ""


class TestDisassemble:
    """Test listing generation."""

    def test_sequence(self, disasm):
        listing = disasm.disassemble(rom(0x00E0, 0xA22A, 0xD015, 0x1206))
        assert [i.address for i in listing] == [0x200, 0x202, 0x204, 0x206]
        assert [i.text for i in listing] == ["CLS", "LD I, 0x22A", "DRW V0, V1, 5", "JP 0x206"]

    def test_count(self, disasm):
        assert len(disasm.disassemble(rom(0x00E0) * 10, count=3)) == 3

    def test_odd_length(self, disasm):
        listing = disasm.disassemble(rom(0x00E0) + bytes([0xAB]))
        assert [i.size for i in listing] == [2, 1]
        assert listing[-1].address == 0x202

    def test_start_address(self, disasm):
        listing = disasm.disassemble(rom(0x00E0), start_address=0x300)
        assert listing[0].address == 0x300

    def test_format_with_bytes(self, disasm):
        instr = disasm.disassemble_one(rom(0x00E0))
        assert str(instr) == "$200: 00 E0  CLS"

    def test_format_without_bytes(self, disasm):
        instr = disasm.disassemble_one(rom(0x00E0))
        assert instr.format(show_bytes=False) == "$200:  CLS"

    def test_format_with_comment(self, disasm):
        line = str(disasm.disassemble_one(rom(0xFFFF)))
        assert line.startswith("$200: FF FF  DW 0xFFFF")
        assert line.endswith("; unknown opcode")

    def test_to_text(self, disasm):
        text = disasm.disassemble_to_text(rom(0x00E0, 0x00EE), show_bytes=False)
        assert text.splitlines() == ["$200:  CLS", "$202:  RET"]

    def test_to_dict(self, disasm):
        data = disasm.disassemble_one(rom(0x8014)).to_dict()
        assert data["address"] == "$200"
        assert data["opcode"] == "0x8014"
        assert data["category"] == "0x8XY4"
        assert data["text"] == "ADD V0, V1"
