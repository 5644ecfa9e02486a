"""
Memory Subsystem for CHIP-8 Emulator
====================================

Memory Map:
    $000-$04F  Built-in hexadecimal font (16 glyphs x 5 bytes)
    $050-$1FF  Interpreter area (unused, reserved)
    $200-$FFF  Program ROM and work RAM

The whole address space is a flat 4KB byte array. The font is written
once when the memory is created; a ROM load only touches the program
region.

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

import logging

from ..errors import MemoryAccessError, RomTooLarge

logger = logging.getLogger(__name__)


# =============================================================================
# FONT BITMAP DATA
# =============================================================================
# 4x5 pixel glyphs for hex digits 0-F. Each glyph is 5 bytes (5 rows);
# the high nibble of each byte holds the 4 pixels of a row.

FONTSET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

FONT_ADDRESS = 0x000
GLYPH_SIZE = 5


class Memory:
    """
    Flat 4KB CHIP-8 memory with the built-in font preloaded.

    Program code may read anywhere in $000-$FFF but may only write to
    the program region. The interpreter area below $200 belongs to the
    font loader.

    Example:
        >>> mem = Memory()
        >>> mem.load(bytes([0x00, 0xE0]))
        >>> hex(mem.read_word(0x200))
        '0xe0'
    """

    SIZE = 0x1000
    PROGRAM_START = 0x200
    MAX_ROM_SIZE = SIZE - PROGRAM_START  # 3584 bytes

    def __init__(self):
        self._data = bytearray(self.SIZE)
        self._data[FONT_ADDRESS:FONT_ADDRESS + len(FONTSET)] = FONTSET

    def _check(self, address: int, reason: str) -> None:
        if not 0 <= address < self.SIZE:
            raise MemoryAccessError(address, reason)

    def read(self, address: int) -> int:
        """
        Read byte from memory.

        Args:
            address: 12-bit address

        Returns:
            Byte value at address

        Raises:
            MemoryAccessError: If address is outside $000-$FFF
        """
        self._check(address, "read outside memory")
        return self._data[address]

    def write(self, address: int, value: int) -> None:
        """
        Write byte to the program region.

        Args:
            address: 12-bit address ($200-$FFF)
            value: Byte value (wrapped to 8 bits)

        Raises:
            MemoryAccessError: If address is outside memory or below $200
        """
        self._check(address, "write outside memory")
        if address < self.PROGRAM_START:
            raise MemoryAccessError(address, "write to interpreter area")
        self._data[address] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Read a big-endian 16-bit instruction word."""
        if not 0 <= address <= self.SIZE - 2:
            raise MemoryAccessError(address, "instruction fetch outside memory")
        return (self._data[address] << 8) | self._data[address + 1]

    def read_bytes(self, address: int, count: int) -> bytes:
        """Read `count` consecutive bytes starting at address."""
        self._check(address, "read outside memory")
        if count:
            self._check(address + count - 1, "read outside memory")
        return bytes(self._data[address:address + count])

    def load(self, rom: bytes) -> None:
        """
        Load a ROM image into the program region.

        The program region is cleared first, so leftovers from a previous,
        longer ROM never survive. The font region is left untouched.

        Args:
            rom: Raw CHIP-8 machine code

        Raises:
            RomTooLarge: If the ROM exceeds 3584 bytes
        """
        if len(rom) > self.MAX_ROM_SIZE:
            raise RomTooLarge(len(rom), self.MAX_ROM_SIZE)

        self._data[self.PROGRAM_START:] = bytes(self.MAX_ROM_SIZE)
        self._data[self.PROGRAM_START:self.PROGRAM_START + len(rom)] = rom
        logger.debug(f"Loaded {len(rom)} ROM bytes at 0x{self.PROGRAM_START:03X}")

    def dump(self) -> bytes:
        """Return a copy of the full 4KB image."""
        return bytes(self._data)

    @staticmethod
    def glyph_address(digit: int) -> int:
        """Address of the font glyph for a hex digit (low nibble used)."""
        return FONT_ADDRESS + (digit & 0x0F) * GLYPH_SIZE
