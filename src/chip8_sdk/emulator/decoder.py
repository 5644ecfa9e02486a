"""
CHIP-8 Instruction Decoder
==========================

Pure mapping from a 16-bit instruction word to a tagged Instruction.
Decoding has no side effects and touches no machine state, so it is
shared by the CPU, the disassembler and the tests.

Opcode fields (nibbles of the big-endian word):

    15..12  11..8  7..4  3..0
    group   X      Y     N
                   NN (low byte)
            NNN (low 12 bits)

The high nibble selects one of 16 instruction groups. Groups 0, 8, E
and F are further selected by the low byte or low nibble; any word that
does not match a defined instruction raises UnknownOpcode.

Each Op's value is its conventional opcode pattern ("0x8XY4"), which is
also used as the category label in cycle traces.

Copyright (c) 2025 CHIP-8 SDK Contributors
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from ..errors import UnknownOpcode


class Op(Enum):
    """CHIP-8 instruction kinds, valued by opcode pattern."""
    CLS = "0x00E0"
    RET = "0x00EE"
    JP = "0x1NNN"
    CALL = "0x2NNN"
    SE_VX_NN = "0x3XNN"
    SNE_VX_NN = "0x4XNN"
    SE_VX_VY = "0x5XY0"
    LD_VX_NN = "0x6XNN"
    ADD_VX_NN = "0x7XNN"
    LD_VX_VY = "0x8XY0"
    OR = "0x8XY1"
    AND = "0x8XY2"
    XOR = "0x8XY3"
    ADD_VX_VY = "0x8XY4"
    SUB = "0x8XY5"
    SHR = "0x8XY6"
    SUBN = "0x8XY7"
    SHL = "0x8XYE"
    SNE_VX_VY = "0x9XY0"
    LD_I = "0xANNN"
    JP_V0 = "0xBNNN"
    RND = "0xCXNN"
    DRW = "0xDXYN"
    SKP = "0xEX9E"
    SKNP = "0xEXA1"
    LD_VX_DT = "0xFX07"
    LD_VX_K = "0xFX0A"
    LD_DT_VX = "0xFX15"
    LD_ST_VX = "0xFX18"
    ADD_I_VX = "0xFX1E"
    LD_F_VX = "0xFX29"
    LD_B_VX = "0xFX33"
    LD_MEM_VX = "0xFX55"
    LD_VX_MEM = "0xFX65"

    @property
    def category(self) -> str:
        """Opcode pattern label, e.g. '0x8XY4'."""
        return self.value


# =============================================================================
# Decode Tables
# =============================================================================

# Groups fully determined by the high nibble
_SIMPLE_GROUPS: Dict[int, Op] = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_VX_NN,
    0x4: Op.SNE_VX_NN,
    0x5: Op.SE_VX_VY,
    0x6: Op.LD_VX_NN,
    0x7: Op.ADD_VX_NN,
    0x9: Op.SNE_VX_VY,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}

# Group 0 is matched on the whole word; 0NNN machine-code calls are
# not supported.
_SYSTEM_OPS: Dict[int, Op] = {
    0x00E0: Op.CLS,
    0x00EE: Op.RET,
}

# Group 8 is selected by the low nibble
_ALU_OPS: Dict[int, Op] = {
    0x0: Op.LD_VX_VY,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_VX_VY,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

# Group E is selected by the low byte
_KEY_OPS: Dict[int, Op] = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

# Group F is selected by the low byte
_MISC_OPS: Dict[int, Op] = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.LD_MEM_VX,
    0x65: Op.LD_VX_MEM,
}


# =============================================================================
# Text Templates
# =============================================================================
# Pseudo-C renders the instruction the way a trace reader thinks about it;
# mnemonics follow the common CHIP-8 assembler syntax.

_PSEUDO: Dict[Op, str] = {
    Op.CLS: "disp_clear()",
    Op.RET: "return;",
    Op.JP: "goto 0x{nnn:X};",
    Op.CALL: "*(0x{nnn:X})()",
    Op.SE_VX_NN: "if(V{x:X}==0x{nn:X})",
    Op.SNE_VX_NN: "if(V{x:X}!=0x{nn:X})",
    Op.SE_VX_VY: "if(V{x:X}==V{y:X})",
    Op.LD_VX_NN: "V{x:X} = 0x{nn:X}",
    Op.ADD_VX_NN: "V{x:X} += 0x{nn:X}",
    Op.LD_VX_VY: "V{x:X} = V{y:X}",
    Op.OR: "V{x:X} |= V{y:X}",
    Op.AND: "V{x:X} &= V{y:X}",
    Op.XOR: "V{x:X} ^= V{y:X}",
    Op.ADD_VX_VY: "V{x:X} += V{y:X}",
    Op.SUB: "V{x:X} -= V{y:X}",
    Op.SHR: "V{x:X} = V{y:X} >> 1",
    Op.SUBN: "V{x:X} = V{y:X} - V{x:X}",
    Op.SHL: "V{x:X} = V{y:X} << 1",
    Op.SNE_VX_VY: "if(V{x:X}!=V{y:X})",
    Op.LD_I: "I = 0x{nnn:X}",
    Op.JP_V0: "PC = V0 + 0x{nnn:X}",
    Op.RND: "V{x:X} = rand() & 0x{nn:X}",
    Op.DRW: "draw(V{x:X}, V{y:X}, {n})",
    Op.SKP: "if(key()==V{x:X})",
    Op.SKNP: "if(key()!=V{x:X})",
    Op.LD_VX_DT: "V{x:X} = get_delay()",
    Op.LD_VX_K: "V{x:X} = get_key()",
    Op.LD_DT_VX: "delay_timer(V{x:X})",
    Op.LD_ST_VX: "sound_timer(V{x:X})",
    Op.ADD_I_VX: "I += V{x:X}",
    Op.LD_F_VX: "I = sprite_addr[V{x:X}]",
    Op.LD_B_VX: "set_BCD(V{x:X})",
    Op.LD_MEM_VX: "reg_dump(V{x:X}, &I)",
    Op.LD_VX_MEM: "reg_load(V{x:X}, &I)",
}

_MNEMONIC: Dict[Op, str] = {
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP 0x{nnn:03X}",
    Op.CALL: "CALL 0x{nnn:03X}",
    Op.SE_VX_NN: "SE V{x:X}, 0x{nn:02X}",
    Op.SNE_VX_NN: "SNE V{x:X}, 0x{nn:02X}",
    Op.SE_VX_VY: "SE V{x:X}, V{y:X}",
    Op.LD_VX_NN: "LD V{x:X}, 0x{nn:02X}",
    Op.ADD_VX_NN: "ADD V{x:X}, 0x{nn:02X}",
    Op.LD_VX_VY: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD_VX_VY: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X}, V{y:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X}, V{y:X}",
    Op.SNE_VX_VY: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, 0x{nnn:03X}",
    Op.JP_V0: "JP V0, 0x{nnn:03X}",
    Op.RND: "RND V{x:X}, 0x{nn:02X}",
    Op.DRW: "DRW V{x:X}, V{y:X}, {n}",
    Op.SKP: "SKP V{x:X}",
    Op.SKNP: "SKNP V{x:X}",
    Op.LD_VX_DT: "LD V{x:X}, DT",
    Op.LD_VX_K: "LD V{x:X}, K",
    Op.LD_DT_VX: "LD DT, V{x:X}",
    Op.LD_ST_VX: "LD ST, V{x:X}",
    Op.ADD_I_VX: "ADD I, V{x:X}",
    Op.LD_F_VX: "LD F, V{x:X}",
    Op.LD_B_VX: "LD B, V{x:X}",
    Op.LD_MEM_VX: "LD [I], V{x:X}",
    Op.LD_VX_MEM: "LD V{x:X}, [I]",
}


# =============================================================================
# Instruction
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """
    A decoded CHIP-8 instruction.

    All operand fields are extracted for every instruction; each Op uses
    the subset its pattern names.

    Attributes:
        op: Instruction kind
        opcode: The raw 16-bit word
        x: Register index from bits 11-8
        y: Register index from bits 7-4
        n: 4-bit immediate (bits 3-0)
        nn: 8-bit immediate (bits 7-0)
        nnn: 12-bit address (bits 11-0)
    """
    op: Op
    opcode: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int

    @property
    def category(self) -> str:
        """Opcode pattern label, e.g. '0xDXYN'."""
        return self.op.category

    @property
    def pseudo(self) -> str:
        """Pseudo-C description, e.g. 'V1 += V2'."""
        return _PSEUDO[self.op].format(**self._fields())

    @property
    def mnemonic(self) -> str:
        """Assembler-style text, e.g. 'ADD V1, V2'."""
        return _MNEMONIC[self.op].format(**self._fields())

    def _fields(self) -> dict:
        return {"x": self.x, "y": self.y, "n": self.n, "nn": self.nn, "nnn": self.nnn}

    def __str__(self) -> str:
        return self.mnemonic


def decode(opcode: int) -> Instruction:
    """
    Decode a 16-bit instruction word.

    Args:
        opcode: Big-endian instruction word (0x0000-0xFFFF)

    Returns:
        The decoded Instruction

    Raises:
        UnknownOpcode: If the word is not a CHIP-8 instruction

    Example:
        >>> decode(0x8014).mnemonic
        'ADD V0, V1'
    """
    opcode &= 0xFFFF
    group = opcode >> 12

    if group in _SIMPLE_GROUPS:
        op = _SIMPLE_GROUPS[group]
    elif group == 0x0:
        op = _SYSTEM_OPS.get(opcode)
    elif group == 0x8:
        op = _ALU_OPS.get(opcode & 0x000F)
    elif group == 0xE:
        op = _KEY_OPS.get(opcode & 0x00FF)
    else:  # 0xF
        op = _MISC_OPS.get(opcode & 0x00FF)

    if op is None:
        raise UnknownOpcode(opcode)

    return Instruction(
        op=op,
        opcode=opcode,
        x=(opcode >> 8) & 0x0F,
        y=(opcode >> 4) & 0x0F,
        n=opcode & 0x000F,
        nn=opcode & 0x00FF,
        nnn=opcode & 0x0FFF,
    )
