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

"""Base (32-bit) instruction encodings.

Major Opcode Dispatch
=====================

A base instruction has ``opcode[1:0] = 11``. Bits [6:2] select one of 32 major
opcodes, each of which is a conditional branch below carrying the format's
fields:

    R-type:  funct7[31:25] rs2[24:20] rs1[19:15] funct3[14:12] rd[11:7]
    I-type:  imm[31:20]               rs1[19:15] funct3[14:12] rd[11:7]
    S-type:  imm[31:25]    rs2[24:20] rs1[19:15] funct3[14:12] imm[11:7]
    B-type:  imm[31:25]    rs2[24:20] rs1[19:15] funct3[14:12] imm[11:7]
    U-type:  imm[31:12]                                        rd[11:7]
    J-type:  imm[31:12]                                        rd[11:7]

Within a major opcode, funct3 / funct7 (and for OP-FP, funct7[6:2]) select
further branches. Unassigned encodings resolve to "Reserved".

Bits [63:32] are not part of a base instruction.
"""

from typing import Final

from rvfields.bits import extract_bits
from rvfields.config import INSTRUCTION_WIDTH, WORD_WIDTH
from rvfields.csr import CSR_NAMES, CsrAccess, classify_csr
from rvfields.immediates import IMM_B, IMM_I, IMM_J, IMM_S, IMM_U, ZIMM
from rvfields.model import (
    Condition,
    ConditionalMode,
    DecodeMode,
    Diagnostic,
    FieldSpec,
    branch,
    invalid,
    reserved,
    when,
    when_not,
)
from rvfields.tables.registers import FP_REGISTER_NAMES, REGISTER_NAMES

# ============================================================================
# Common fields
# ============================================================================

RD: Final = FieldSpec(7, 11, "rd", REGISTER_NAMES)
RS1: Final = FieldSpec(15, 19, "rs1", REGISTER_NAMES)
RS2: Final = FieldSpec(20, 24, "rs2", REGISTER_NAMES)
RD_RESERVED: Final = reserved(7, 11, "rd")
RS1_RESERVED: Final = reserved(15, 19, "rs1")

FRD: Final = FieldSpec(7, 11, "frd", FP_REGISTER_NAMES)
FRS1: Final = FieldSpec(15, 19, "frs1", FP_REGISTER_NAMES)
FRS2: Final = FieldSpec(20, 24, "frs2", FP_REGISTER_NAMES)
FRS3: Final = FieldSpec(27, 31, "frs3", FP_REGISTER_NAMES)
FRS2_RESERVED: Final = reserved(20, 24, "frs2")

ROUNDING_MODES: Final[tuple[str, ...]] = (
    "RNE", "RTZ", "RDN", "RUP", "RMM", "Reserved", "Reserved", "DYN",
)
FRM: Final = FieldSpec(12, 14, "frm", ROUNDING_MODES)
FRM_RESERVED: Final = reserved(12, 14, "frm")

PRECISIONS: Final[tuple[str, ...]] = ("S", "D", "H", "Q")
INT_LENGTHS: Final[tuple[str, ...]] = ("W", "WU", "L", "LU")

DEST_PRECISION: Final = FieldSpec(25, 26, "Dest precision", PRECISIONS)
SOURCE_PRECISION: Final = FieldSpec(20, 21, "Source precision", PRECISIONS)
SOURCE_UPPER_RESERVED: Final = reserved(22, 24)

SHAMT5: Final = FieldSpec(20, 24, "shamt")
SHAMT6: Final = FieldSpec(20, 25, "shamt")


def funct3(*names: str) -> FieldSpec:
    return FieldSpec(12, 14, "funct3", names or None)


def funct7(names: dict[int, str] | None = None) -> FieldSpec:
    return FieldSpec(25, 31, "funct7", names)


def _csr_diagnose(word: int) -> tuple[Diagnostic, ...]:
    """Classification of the CSR address, plus writes to read-only CSRs."""
    address = extract_bits(word, 20, 31)
    csr_class = classify_csr(address)
    notes = [Diagnostic.info(csr_class.describe())]
    op = extract_bits(word, 12, 14)
    source = extract_bits(word, 15, 19)
    # CSRRW/CSRRWI always write; CSRRS/CSRRC and their immediate forms write
    # only when rs1 / uimm is non-zero.
    writes = op in (1, 5) or (op in (2, 3, 6, 7) and source != 0)
    if csr_class.access is CsrAccess.READ_ONLY and writes:
        notes.append(Diagnostic.error("Write to a read-only CSR raises an illegal instruction"))
    return tuple(notes)


CSR: Final = FieldSpec(20, 31, "csr", CSR_NAMES, diagnose=_csr_diagnose)


# ============================================================================
# Major opcodes
# ============================================================================

OPCODES: Final[tuple[str, ...]] = (
    "LOAD", "LOAD-FP", "custom-0", "MISC-MEM", "OP-IMM", "AUIPC", "OP-IMM-32", "Reserved",
    "STORE", "STORE-FP", "custom-1", "AMO", "OP", "LUI", "OP-32", "Reserved",
    "MADD", "MSUB", "NMSUB", "NMADD", "OP-FP", "OP-V", "custom-2", "Reserved",
    "BRANCH", "JALR", "Reserved", "JAL", "SYSTEM", "OP-VE", "custom-3", "Reserved",
)
"""opcode[6:2] -> major opcode name."""

OPCODE: Final = FieldSpec(2, 6, "opcode[6:2]", OPCODES)


def _opcode(name: str, *fields) -> ConditionalMode:
    return branch(name, when(OPCODE.name, OPCODES.index(name)), *fields)


def _funct3_is(*values) -> Condition:
    return when("funct3", *values)


LOAD: Final = _opcode(
    "LOAD",
    RD, funct3("LB", "LH", "LW", "LD", "LBU", "LHU", "LWU", "Reserved"), RS1, IMM_I.fields(),
)

LOAD_FP: Final = _opcode(
    "LOAD-FP",
    FRD,
    funct3("Reserved", "FLH", "FLW", "FLD", "FLQ", "Reserved", "Reserved", "Reserved"),
    RS1,
    IMM_I.fields(),
)

CUSTOM: Final = tuple(
    branch(name, when(OPCODE.name, index), FieldSpec(7, 31, "Custom"))
    for index, name in enumerate(OPCODES)
    if name.startswith("custom-")
)

RESERVED_OPCODES: Final = branch(
    "Reserved",
    when(OPCODE.name, [index for index, name in enumerate(OPCODES) if name == "Reserved"]),
    reserved(7, 31).with_diagnose(lambda word: (Diagnostic.error("Reserved major opcode"),)),
)

MISC_MEM: Final = _opcode(
    "MISC-MEM",
    funct3("FENCE", "FENCE.I", *("Reserved",) * 6),
    branch(
        "FENCE",
        _funct3_is(0),
        RD,
        RS1,
        FieldSpec(20, 20, "SW"),
        FieldSpec(21, 21, "SR"),
        FieldSpec(22, 22, "SO"),
        FieldSpec(23, 23, "SI"),
        FieldSpec(24, 24, "PW"),
        FieldSpec(25, 25, "PR"),
        FieldSpec(26, 26, "PO"),
        FieldSpec(27, 27, "PI"),
        FieldSpec(28, 31, "fm", {0b0000: "FENCE", 0b1000: "FENCE.TSO"}),
    ),
    branch("FENCE.I", _funct3_is(1), RD, RS1, IMM_I.fields()),
    branch("reserved", _funct3_is(range(2, 8)), RD_RESERVED, RS1_RESERVED, reserved(20, 31)),
)

OP_IMM: Final = _opcode(
    "OP-IMM",
    RD,
    RS1,
    funct3("ADDI", "SLLI", "SLTI", "SLTIU", "XORI", "SRLI/SRAI", "ORI", "ANDI"),
    branch("other", _funct3_is(0, 2, 3, 4, 6, 7), IMM_I.fields()),
    branch("SLLI", _funct3_is(1), SHAMT6, FieldSpec(26, 31, "funct6", {0: "SLLI"})),
    branch(
        "SRLI/SRAI",
        _funct3_is(5),
        SHAMT6,
        FieldSpec(26, 31, "funct6", {0b000000: "SRLI", 0b010000: "SRAI"}),
    ),
)

OP_IMM_32: Final = _opcode(
    "OP-IMM-32",
    RD,
    RS1,
    funct3("ADDIW", "SLLIW", "Reserved", "Reserved", "Reserved", "SRLIW/SRAIW", "Reserved", "Reserved"),
    branch("ADDIW", _funct3_is(0), IMM_I.fields()),
    branch("SLLIW", _funct3_is(1), SHAMT5, funct7({0: "SLLIW"})),
    branch("SRLIW/SRAIW", _funct3_is(5), SHAMT5, funct7({0b0000000: "SRLIW", 0b0100000: "SRAIW"})),
    branch("reserved", _funct3_is(2, 3, 4, 6, 7), reserved(20, 31)),
)

AUIPC: Final = _opcode("AUIPC", RD, IMM_U.fields())
LUI: Final = _opcode("LUI", RD, IMM_U.fields())

STORE: Final = _opcode(
    "STORE",
    funct3("SB", "SH", "SW", "SD", "Reserved", "Reserved", "Reserved", "Reserved"),
    RS1,
    RS2,
    IMM_S.fields(),
)

STORE_FP: Final = _opcode(
    "STORE-FP",
    funct3("Reserved", "FSH", "FSW", "FSD", "FSQ", "Reserved", "Reserved", "Reserved"),
    RS1,
    FRS2,
    IMM_S.fields(),
)

AMO: Final = _opcode(
    "AMO",
    RD,
    funct3("Reserved", "Reserved", "W", "D", "Reserved", "Reserved", "Reserved", "Reserved"),
    RS1,
    RS2,
    FieldSpec(25, 25, "rl"),
    FieldSpec(26, 26, "aq"),
    FieldSpec(
        27,
        31,
        "funct5",
        {
            0b00010: "LR",
            0b00011: "SC",
            0b00001: "AMOSWAP",
            0b00000: "AMOADD",
            0b00100: "AMOXOR",
            0b01100: "AMOAND",
            0b01000: "AMOOR",
            0b10000: "AMOMIN",
            0b10100: "AMOMAX",
            0b11000: "AMOMINU",
            0b11100: "AMOMAXU",
        },
    ),
)

FUNCT7_GROUPS: Final[dict[int, str]] = {0b0000000: "Base", 0b0000001: "M-Ext", 0b0100000: "Base-alt"}


def _register_ops(name: str, base: tuple, mext: tuple, alt: tuple) -> ConditionalMode:
    """OP / OP-32: funct7 selects the base, M-extension or alternate funct3 table."""
    return _opcode(
        name,
        RD,
        RS1,
        RS2,
        funct7(FUNCT7_GROUPS),
        branch("funct7-base", when("funct7", 0b0000000), funct3(*base)),
        branch("funct7-mext", when("funct7", 0b0000001), funct3(*mext)),
        branch("funct7-base-alt", when("funct7", 0b0100000), funct3(*alt)),
        branch("funct7-reserved", when_not("funct7", FUNCT7_GROUPS, 7), funct3()),
    )


OP: Final = _register_ops(
    "OP",
    ("ADD", "SLL", "SLT", "SLTU", "XOR", "SRL", "OR", "AND"),
    ("MUL", "MULH", "MULHSU", "MULHU", "DIV", "DIVU", "REM", "REMU"),
    ("SUB", "Reserved", "Reserved", "Reserved", "Reserved", "SRA", "Reserved", "Reserved"),
)

OP_32: Final = _register_ops(
    "OP-32",
    ("ADDW", "SLLW", "Reserved", "Reserved", "Reserved", "SRLW", "Reserved", "Reserved"),
    ("MULW", "Reserved", "Reserved", "Reserved", "DIVW", "DIVUW", "REMW", "REMUW"),
    ("SUBW", "Reserved", "Reserved", "Reserved", "Reserved", "SRAW", "Reserved", "Reserved"),
)

FUSED_MULTIPLY_ADD: Final = tuple(
    _opcode(name, FRD, FRM, FRS1, FRS2, DEST_PRECISION, FRS3)
    for name in ("MADD", "MSUB", "NMSUB", "NMADD")
)

# ----------------------------------------------------------------------------
# OP-FP
# ----------------------------------------------------------------------------

FP_OPERATIONS: Final[dict[int, str]] = {
    0b00000: "FADD",
    0b00001: "FSUB",
    0b00010: "FMUL",
    0b00011: "FDIV",
    0b01011: "FSQRT",
    0b00100: "FSGNJ",
    0b00101: "FMIN/MAX",
    0b01000: "FCVT.F.F",
    0b11000: "FCVT.X.F",
    0b11010: "FCVT.F.X",
    0b11100: "FMV.X/FCLASS",
    0b10100: "FCMP",
    0b11110: "FMV.F.X",
}
"""funct7[6:2] -> operation group; funct7[1:0] is the format."""

FP_OPERATION: Final = FieldSpec(27, 31, "funct7[6:2]", FP_OPERATIONS)


def _fp_op(name: str, values, *fields) -> ConditionalMode:
    return branch(name, when(FP_OPERATION.name, values), *fields)


OP_FP: Final = _opcode(
    "OP-FP",
    FRD,
    FRS1,
    FP_OPERATION,
    _fp_op("arithmetic", (0, 1, 2, 3), DEST_PRECISION, FRS2, FRM),
    _fp_op("FSQRT", 0b01011, DEST_PRECISION, FRS2_RESERVED, FRM),
    _fp_op("FSGNJ", 0b00100, DEST_PRECISION, FRS2, funct3("SGNJ", "SGNJN", "SGNJX", "Reserved")),
    _fp_op("FMIN/MAX", 0b00101, DEST_PRECISION, FRS2, funct3("MIN", "MAX", "Reserved", "Reserved")),
    _fp_op("FCVT.F.F", 0b01000, DEST_PRECISION, SOURCE_PRECISION, SOURCE_UPPER_RESERVED, FRM),
    _fp_op(
        "FCVT.X.F",
        0b11000,
        FieldSpec(25, 26, "Source precision", PRECISIONS),
        FieldSpec(20, 21, "Dest length", INT_LENGTHS),
        SOURCE_UPPER_RESERVED,
        FRM,
    ),
    _fp_op(
        "FCVT.F.X",
        0b11010,
        DEST_PRECISION,
        FieldSpec(20, 21, "Source length", INT_LENGTHS),
        SOURCE_UPPER_RESERVED,
        FRM,
    ),
    _fp_op(
        "FMV.X/FCLASS",
        0b11100,
        FRS2_RESERVED,
        FieldSpec(12, 14, "funct3", {0: "FMV.X", 1: "FCLASS"}),
        branch("FMV.X", _funct3_is(0), FieldSpec(25, 26, "funct2", ("W", "D", "H", "Reserved"))),
        branch("FCLASS", _funct3_is(1), DEST_PRECISION),
    ),
    _fp_op("FCMP", 0b10100, DEST_PRECISION, FRS2, funct3("LE", "LT", "EQ", "Reserved")),
    _fp_op(
        "FMV.F.X",
        0b11110,
        FRM_RESERVED,
        FRS2_RESERVED,
        FieldSpec(25, 26, "funct2", ("W", "D", "H", "Reserved")),
    ),
    branch("other", when_not(FP_OPERATION.name, FP_OPERATIONS, 5), DEST_PRECISION, FRS2, funct3()),
)

OP_V: Final = _opcode(
    "OP-V",
    FieldSpec(7, 31, "OP-V").with_diagnose(
        lambda word: (Diagnostic.info("Vector encodings are not broken down"),)
    ),
)

BRANCH: Final = _opcode(
    "BRANCH",
    funct3("BEQ", "BNE", "Reserved", "Reserved", "BLT", "BGE", "BLTU", "BGEU"),
    RS1,
    RS2,
    IMM_B.fields(),
)

JALR: Final = _opcode("JALR", RD, funct3("JALR"), RS1, IMM_I.fields())
JAL: Final = _opcode("JAL", RD, IMM_J.fields())

SYSTEM_COMMANDS: Final[dict[int, str]] = {
    0x000: "ECALL",
    0x001: "EBREAK",
    0x00D: "WRS.NTO",
    0x01D: "WRS.STO",
    0x102: "SRET",
    0x105: "WFI",
    0x302: "MRET",
    0x7B2: "DRET",
}

SYSTEM: Final = _opcode(
    "SYSTEM",
    funct3("SYSTEM", "CSRRW", "CSRRS", "CSRRC", "Reserved", "CSRRWI", "CSRRSI", "CSRRCI"),
    branch("SYSTEM", _funct3_is(0), RD_RESERVED, RS1_RESERVED, FieldSpec(20, 31, "CMD", SYSTEM_COMMANDS)),
    branch("CSR", _funct3_is(1, 2, 3), RD, RS1, CSR),
    branch("reserved", _funct3_is(4), RD_RESERVED, RS1_RESERVED, reserved(20, 31)),
    branch("CSRI", _funct3_is(5, 6, 7), RD, ZIMM.fields(), CSR),
)

OP_VE: Final = _opcode("OP-VE", FieldSpec(7, 31, "OP-VE"))


# ============================================================================
# Mode
# ============================================================================

RVI_MODE: Final = DecodeMode(
    "I",
    (
        OPCODE,
        LOAD,
        LOAD_FP,
        *CUSTOM,
        MISC_MEM,
        OP_IMM,
        AUIPC,
        OP_IMM_32,
        STORE,
        STORE_FP,
        AMO,
        OP,
        LUI,
        OP_32,
        *FUSED_MULTIPLY_ADD,
        OP_FP,
        OP_V,
        BRANCH,
        JALR,
        JAL,
        SYSTEM,
        OP_VE,
        RESERVED_OPCODES,
        invalid(INSTRUCTION_WIDTH, WORD_WIDTH - 1),
    ),
    condition=when("opcode[1:0]", 0b11),
    description="32-bit base encodings (RV32/RV64 I, M, A, F, D, Q, Zicsr, Zifencei)",
)
