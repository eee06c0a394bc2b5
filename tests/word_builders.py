#    Copyright 2026 Two Sigma Open Source, LLC
#
#    Licensed under the Apache License, Version 2.0 (the "License");
#    you may not use this file except in compliance with the License.
#    You may obtain a copy of the License at
#
#        http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS,
#    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#    See the License for the specific language governing permissions and
#    limitations under the License.

"""Instruction word builders for tests.

Instruction Formats
===================

Each builder packs named fields into an instruction word, scattering
immediates the way the ISA does. Tests use these instead of magic numbers
when the exact word is not the point of the test:

    R-type: funct7[31:25] | rs2[24:20] | rs1[19:15] | funct3[14:12] | rd[11:7] | opcode[6:0]
    I-type: imm[31:20] | rs1[19:15] | funct3[14:12] | rd[11:7] | opcode[6:0]
    S-type: imm[11:5][31:25] | rs2 | rs1 | funct3 | imm[4:0][11:7] | opcode
    B-type: imm[12|10:5][31:25] | rs2 | rs1 | funct3 | imm[4:1|11][11:7] | opcode
    U-type: imm[31:12] | rd[11:7] | opcode[6:0]
    J-type: imm[20|10:1|11|19:12][31:12] | rd[11:7] | opcode[6:0]

Compressed builders take the quadrant as ``op`` (0, 1 or 2).

Usage Example:
    >>> hex(r_type(funct7=0, rs2=4, rs1=3, funct3=0, rd=5, opcode=0x33))   # add x5, x3, x4
    '0x4181b3'
"""

from enum import IntEnum


class Opcode(IntEnum):
    """Full 7-bit opcodes of the base encodings used in tests."""

    LOAD = 0x03
    LOAD_FP = 0x07
    CUSTOM_0 = 0x0B
    MISC_MEM = 0x0F
    OP_IMM = 0x13
    AUIPC = 0x17
    OP_IMM_32 = 0x1B
    STORE = 0x23
    STORE_FP = 0x27
    AMO = 0x2F
    OP = 0x33
    LUI = 0x37
    OP_32 = 0x3B
    MADD = 0x43
    OP_FP = 0x53
    BRANCH = 0x63
    JALR = 0x67
    JAL = 0x6F
    SYSTEM = 0x73


def _pack_bits(*fields: tuple[int, int, int]) -> int:
    """Pack (value, position, mask) tuples into one word."""
    result = 0
    for value, position, mask in fields:
        result |= (value & mask) << position
    return result


# ============================================================================
# Base formats
# ============================================================================


def r_type(funct7: int, rs2: int, rs1: int, funct3: int, rd: int, opcode: int) -> int:
    return _pack_bits(
        (funct7, 25, 0x7F),
        (rs2, 20, 0x1F),
        (rs1, 15, 0x1F),
        (funct3, 12, 0x7),
        (rd, 7, 0x1F),
        (opcode, 0, 0x7F),
    )


def i_type(imm: int, rs1: int, funct3: int, rd: int, opcode: int) -> int:
    return _pack_bits(
        (imm, 20, 0xFFF),
        (rs1, 15, 0x1F),
        (funct3, 12, 0x7),
        (rd, 7, 0x1F),
        (opcode, 0, 0x7F),
    )


def s_type(imm: int, rs2: int, rs1: int, funct3: int, opcode: int = Opcode.STORE) -> int:
    return _pack_bits(
        (imm >> 5, 25, 0x7F),
        (rs2, 20, 0x1F),
        (rs1, 15, 0x1F),
        (funct3, 12, 0x7),
        (imm, 7, 0x1F),
        (opcode, 0, 0x7F),
    )


def b_type(offset: int, rs2: int, rs1: int, funct3: int) -> int:
    """Conditional branch; ``offset`` must be even and fit in 13 bits."""
    if offset % 2 or not -4096 <= offset <= 4094:
        raise ValueError(f"bad branch offset {offset}")
    return _pack_bits(
        (offset >> 12, 31, 0x1),
        (offset >> 5, 25, 0x3F),
        (rs2, 20, 0x1F),
        (rs1, 15, 0x1F),
        (funct3, 12, 0x7),
        (offset >> 1, 8, 0xF),
        (offset >> 11, 7, 0x1),
        (Opcode.BRANCH, 0, 0x7F),
    )


def u_type(imm20: int, rd: int, opcode: int = Opcode.LUI) -> int:
    return _pack_bits((imm20, 12, 0xFFFFF), (rd, 7, 0x1F), (opcode, 0, 0x7F))


def j_type(offset: int, rd: int) -> int:
    """JAL; ``offset`` must be even and fit in 21 bits."""
    if offset % 2 or not -(1 << 20) <= offset <= (1 << 20) - 2:
        raise ValueError(f"bad jump offset {offset}")
    return _pack_bits(
        (offset >> 20, 31, 0x1),
        (offset >> 1, 21, 0x3FF),
        (offset >> 11, 20, 0x1),
        (offset >> 12, 12, 0xFF),
        (rd, 7, 0x1F),
        (Opcode.JAL, 0, 0x7F),
    )


def csr_type(csr: int, rs1: int, funct3: int, rd: int) -> int:
    """Zicsr instruction; ``rs1`` is the zimm for the immediate forms."""
    return i_type(csr, rs1, funct3, rd, Opcode.SYSTEM)


# ============================================================================
# Compressed formats
# ============================================================================


def c_r(funct4: int, rd: int, rs2: int, op: int = 2) -> int:
    return _pack_bits((funct4, 12, 0xF), (rd, 7, 0x1F), (rs2, 2, 0x1F), (op, 0, 0x3))


def c_i(funct3: int, rd: int, imm: int, op: int) -> int:
    """CI format with a 6-bit immediate: imm[5] at bit 12, imm[4:0] at [6:2]."""
    return _pack_bits(
        (funct3, 13, 0x7),
        (imm >> 5, 12, 0x1),
        (rd, 7, 0x1F),
        (imm, 2, 0x1F),
        (op, 0, 0x3),
    )


def c_j(funct3: int, offset: int) -> int:
    """C.J-style jump: offset[11|4|9:8|10|6|7|3:1|5] in bits [12:2]."""
    return _pack_bits(
        (funct3, 13, 0x7),
        (offset >> 11, 12, 0x1),
        (offset >> 4, 11, 0x1),
        (offset >> 8, 9, 0x3),
        (offset >> 10, 8, 0x1),
        (offset >> 6, 7, 0x1),
        (offset >> 7, 6, 0x1),
        (offset >> 1, 3, 0x7),
        (offset >> 5, 2, 0x1),
        (1, 0, 0x3),
    )


def c_b(funct3: int, rs1_prime: int, offset: int) -> int:
    """C.BEQZ / C.BNEZ: offset[8|4:3] in [12:10], offset[7:6|2:1|5] in [6:2]."""
    return _pack_bits(
        (funct3, 13, 0x7),
        (offset >> 8, 12, 0x1),
        (offset >> 3, 10, 0x3),
        (rs1_prime, 7, 0x7),
        (offset >> 6, 5, 0x3),
        (offset >> 1, 3, 0x3),
        (offset >> 5, 2, 0x1),
        (1, 0, 0x3),
    )
