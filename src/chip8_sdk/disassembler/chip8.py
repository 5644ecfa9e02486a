"""
CHIP-8 Disassembler
===================

Disassembles CHIP-8 ROM images into assembler-style listings. Decoding is
shared with the emulator (emulator/decoder.py), so the listing always
agrees with what the CPU would execute.

CHIP-8 instructions are two bytes, big-endian, and normally start on even
addresses. Data (sprites, tables) is interleaved with code in most ROMs;
the disassembler is linear and does not try to tell them apart. Words
that are not valid instructions are listed as DW, and a trailing odd
byte as DB.

Usage:
    disasm = Chip8Disassembler()

    # Disassemble a ROM loaded at $200
    instructions = disasm.disassemble(rom_bytes, start_address=0x200)

    # Disassemble single instruction
    instr = disasm.disassemble_one(rom_bytes, address=0x200)
    print(f"{instr.address:03X}: {instr.text}")

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..emulator.decoder import Op, decode
from ..errors import UnknownOpcode


# Ops whose NNN field is a code or data address worth annotating
_ADDRESS_OPS = {Op.JP, Op.CALL, Op.LD_I, Op.JP_V0}


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class DisassembledInstruction:
    """
    Represents a single disassembled CHIP-8 word.

    Attributes:
        address: Memory address of the instruction
        opcode: The instruction word (or the single byte for DB)
        category: Opcode pattern (e.g. "0x8XY4"), empty for data
        text: Assembler text (e.g. "ADD V1, V2" or "DW 0x0123")
        size: Bytes consumed (2, or 1 for a trailing byte)
        raw_bytes: The bytes comprising this item
        comment: Optional comment (symbol names, "unknown opcode")
    """
    address: int
    opcode: int
    category: str
    text: str
    size: int
    raw_bytes: bytes
    comment: str = ""

    @property
    def is_data(self) -> bool:
        """True for DW/DB entries that did not decode."""
        return not self.category

    def format(self, show_bytes: bool = True) -> str:
        """Format as listing line: ADDRESS: [BYTES] TEXT [; COMMENT]"""
        parts = [f"${self.address:03X}:"]
        if show_bytes:
            parts.append(" ".join(f"{b:02X}" for b in self.raw_bytes).ljust(5))
        line = " ".join(parts) + "  "
        if self.comment:
            return f"{line}{self.text:<18} ; {self.comment}"
        return f"{line}{self.text}"

    def __str__(self) -> str:
        return self.format()

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": f"${self.address:03X}",
            "address_int": self.address,
            "opcode": f"0x{self.opcode:04X}" if self.size == 2 else f"0x{self.opcode:02X}",
            "category": self.category,
            "text": self.text,
            "size": self.size,
            "bytes": [f"{b:02X}" for b in self.raw_bytes],
            "comment": self.comment,
        }


# =============================================================================
# CHIP-8 Disassembler
# =============================================================================

class Chip8Disassembler:
    """
    Linear disassembler for CHIP-8 machine code.

    Attributes:
        _symbols: Optional address -> name map used to annotate
                  jump, call and index targets
    """

    def __init__(self, symbol_table: Optional[Dict[int, str]] = None):
        """
        Initialize the disassembler.

        Args:
            symbol_table: Optional dict mapping addresses to symbol names.
        """
        self._symbols = symbol_table if symbol_table is not None else {}

    def disassemble_one(
        self,
        data: bytes,
        address: int = 0x200,
        offset: int = 0
    ) -> DisassembledInstruction:
        """
        Disassemble a single word.

        Args:
            data: Byte buffer containing the instruction
            address: Memory address of the instruction
            offset: Offset into data buffer where instruction starts

        Returns:
            DisassembledInstruction with decoded information

        Raises:
            ValueError: If offset is beyond the end of data
        """
        if offset >= len(data):
            raise ValueError(f"Offset {offset} beyond data length {len(data)}")

        if offset + 1 >= len(data):
            value = data[offset]
            return DisassembledInstruction(
                address=address,
                opcode=value,
                category="",
                text=f"DB 0x{value:02X}",
                size=1,
                raw_bytes=bytes([value]),
                comment="trailing byte",
            )

        raw = bytes(data[offset:offset + 2])
        word = (raw[0] << 8) | raw[1]

        try:
            instruction = decode(word)
        except UnknownOpcode:
            return DisassembledInstruction(
                address=address,
                opcode=word,
                category="",
                text=f"DW 0x{word:04X}",
                size=2,
                raw_bytes=raw,
                comment="unknown opcode",
            )

        comment = ""
        if instruction.op in _ADDRESS_OPS:
            comment = self._symbols.get(instruction.nnn, "")

        return DisassembledInstruction(
            address=address,
            opcode=word,
            category=instruction.category,
            text=instruction.mnemonic,
            size=2,
            raw_bytes=raw,
            comment=comment,
        )

    def disassemble(
        self,
        data: bytes,
        start_address: int = 0x200,
        count: Optional[int] = None
    ) -> List[DisassembledInstruction]:
        """
        Disassemble multiple words.

        Args:
            data: Byte buffer containing machine code
            start_address: Memory address of first byte
            count: Maximum number of entries to disassemble (None = all)

        Returns:
            List of DisassembledInstruction objects
        """
        result = []
        offset = 0
        address = start_address

        while offset < len(data):
            if count is not None and len(result) >= count:
                break

            instr = self.disassemble_one(data, address, offset)
            result.append(instr)

            offset += instr.size
            address += instr.size

        return result

    def disassemble_to_text(
        self,
        data: bytes,
        start_address: int = 0x200,
        count: Optional[int] = None,
        show_bytes: bool = True
    ) -> str:
        """
        Disassemble and return a complete listing as one string.

        Args:
            data: Byte buffer containing machine code
            start_address: Memory address of first byte
            count: Maximum number of entries
            show_bytes: Include the raw hex bytes column

        Returns:
            Multi-line string with disassembly listing
        """
        instructions = self.disassemble(data, start_address, count)
        return "\n".join(instr.format(show_bytes=show_bytes) for instr in instructions)

    def add_symbol(self, address: int, name: str) -> None:
        """Add a symbol to the symbol table."""
        self._symbols[address] = name

    def add_symbols(self, symbols: Dict[int, str]) -> None:
        """Add multiple symbols to the symbol table."""
        self._symbols.update(symbols)
