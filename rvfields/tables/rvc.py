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

"""Compressed (16-bit) instruction encodings.

Quadrants
=========

A compressed instruction has ``opcode[1:0] != 11``; the quadrant (C0, C1, C2)
and funct3 in bits [15:13] select the instruction:

    C0  ADDI4SPN  FLD    LW     LD     -      FSD    SW     SD
    C1  ADDI      ADDIW  LI     LUI    OP     J      BEQZ   BNEZ
    C2  SLLI      FLDSP  LWSP   LDSP   OP     FSDSP  SWSP   SDSP

Many compressed encodings are only meaningful for some register or immediate
values; the rest are HINTs (valid, no architectural effect), Reserved, or an
alias of a neighbouring instruction. Those cases are reported as diagnostics
on the register field that decides them.

Registers written with a prime (rd', rs1', rs2') are 3-bit fields naming
x8-x15 / f8-f15.

Bits [63:16] are not part of a compressed instruction.
"""

from collections.abc import Callable
from typing import Final

from rvfields.bits import extract_bits
from rvfields.config import COMPRESSED_INSTRUCTION_WIDTH, WORD_WIDTH
from rvfields.immediates import (
    CB,
    CI_1,
    CI_1_UNSIGNED,
    CI_2,
    CI_3,
    CIW,
    CJ,
    CLS_1,
    CLS_2,
    CSL_1,
    CSL_2,
    CSS_1,
    CSS_2,
    ci_imm_is_zero,
    ciw_uimm_is_zero,
    rd_is_sp,
    rd_is_zero,
)
from rvfields.model import (
    Condition,
    DecodeMode,
    Diagnostic,
    DiagnoseFn,
    FieldSpec,
    branch,
    invalid,
    reserved,
    when,
    when_not,
)
from rvfields.tables.registers import (
    COMPRESSED_FP_REGISTER_NAMES,
    COMPRESSED_REGISTER_NAMES,
    FP_REGISTER_NAMES,
    REGISTER_NAMES,
)

# ============================================================================
# Common fields
# ============================================================================

RD_P: Final = FieldSpec(2, 4, "rd'", COMPRESSED_REGISTER_NAMES)
RS2_P: Final = FieldSpec(2, 4, "rs2'", COMPRESSED_REGISTER_NAMES)
RS1_P: Final = FieldSpec(7, 9, "rs1'", COMPRESSED_REGISTER_NAMES)
RS1_RD_P: Final = FieldSpec(7, 9, "rs1'/rd'", COMPRESSED_REGISTER_NAMES)
FRD_P: Final = FieldSpec(2, 4, "frd'", COMPRESSED_FP_REGISTER_NAMES)
FRS2_P: Final = FieldSpec(2, 4, "frs2'", COMPRESSED_FP_REGISTER_NAMES)

RD: Final = FieldSpec(7, 11, "rd", REGISTER_NAMES)
RS1: Final = FieldSpec(7, 11, "rs1", REGISTER_NAMES)
RS1_RD: Final = FieldSpec(7, 11, "rs1/rd", REGISTER_NAMES)
RS2: Final = FieldSpec(2, 6, "rs2", REGISTER_NAMES)
FRD: Final = FieldSpec(7, 11, "frd", FP_REGISTER_NAMES)
FRS2: Final = FieldSpec(2, 6, "frs2", FP_REGISTER_NAMES)


def funct3(*names: str) -> FieldSpec:
    return FieldSpec(13, 15, "funct3", names)


def funct4_0(*names: str) -> FieldSpec:
    return FieldSpec(12, 12, "funct4[0]", names)


def funct2_high(*names: str) -> FieldSpec:
    return FieldSpec(10, 11, "funct2[11:10]", names)


def funct2_low(*names: str) -> FieldSpec:
    return FieldSpec(5, 6, "funct2[6:5]", names)


def checks(*rules: tuple[Callable[[int], bool], Diagnostic]) -> DiagnoseFn:
    """Diagnose function emitting each rule's diagnostic when its predicate holds."""

    def diagnose(word: int) -> tuple[Diagnostic, ...]:
        return tuple(diag for predicate, diag in rules if predicate(word))

    return diagnose


def _always(word: int) -> bool:
    return True


def _funct3_is(*values) -> Condition:
    return when("funct3", *values)


# ============================================================================
# Quadrant 0
# ============================================================================

C0_MODE: Final = DecodeMode(
    "C0",
    (
        funct3("ADDI4SPN", "FLD", "LW", "LD", "Reserved", "FSD", "SW", "SD"),
        branch(
            "ADDI4SPN",
            _funct3_is(0),
            RD_P.with_diagnose(
                checks(
                    (lambda word: extract_bits(word, 0, 15) == 0,
                     Diagnostic.error("An all-zero 16-bit word is an illegal instruction")),
                    (ciw_uimm_is_zero, Diagnostic.error("C.ADDI4SPN with uimm=0 is Reserved")),
                )
            ),
            CIW.fields(),
        ),
        branch("FLD", _funct3_is(1), FRD_P, RS1_P, CLS_2.fields()),
        branch("LW", _funct3_is(2), RD_P, RS1_P, CLS_1.fields()),
        branch("LD", _funct3_is(3), RD_P, RS1_P, CLS_2.fields()),
        branch("Reserved", _funct3_is(4), reserved(2, 12)),
        branch("FSD", _funct3_is(5), FRS2_P, RS1_P, CLS_2.fields()),
        branch("SW", _funct3_is(6), RS2_P, RS1_P, CLS_1.fields()),
        branch("SD", _funct3_is(7), RS2_P, RS1_P, CLS_2.fields()),
        invalid(COMPRESSED_INSTRUCTION_WIDTH, WORD_WIDTH - 1),
    ),
    condition=when("opcode[1:0]", 0b00),
    description="Compressed quadrant 0: stack-pointer adds, loads and stores",
)


# ============================================================================
# Quadrant 1
# ============================================================================

_C1_OP: Final = branch(
    "OP",
    _funct3_is(4),
    funct2_high("SRLI", "SRAI", "ANDI", "R"),
    RS1_RD_P.with_diagnose(
        checks(
            (lambda word: extract_bits(word, 10, 11) in (0, 1) and ci_imm_is_zero(word),
             Diagnostic.info("C.SRLI/SRAI with uimm=0 is a HINT")),
        )
    ),
    branch("SRLI/SRAI", when("funct2[11:10]", 0, 1), CI_1_UNSIGNED.fields()),
    branch("ANDI", when("funct2[11:10]", 2), CI_1.fields()),
    branch(
        "R",
        when("funct2[11:10]", 3),
        funct4_0("D", "W"),
        RS2_P,
        branch("D", when("funct4[0]", 0), funct2_low("SUB", "XOR", "OR", "AND")),
        branch("W", when("funct4[0]", 1), funct2_low("SUBW", "ADDW", "Reserved", "Reserved")),
    ),
)

C1_MODE: Final = DecodeMode(
    "C1",
    (
        funct3("ADDI", "ADDIW", "LI", "LUI/ADDI16SP", "OP", "J", "BEQZ", "BNEZ"),
        branch(
            "ADDI",
            _funct3_is(0),
            RS1_RD.with_diagnose(
                checks(
                    (ci_imm_is_zero, Diagnostic.info("C.ADDI with imm=0 is a HINT")),
                    (lambda word: rd_is_zero(word) and not ci_imm_is_zero(word),
                     Diagnostic.info("C.ADDI with rs1/rd=0 is a HINT")),
                    (lambda word: rd_is_zero(word) and ci_imm_is_zero(word),
                     Diagnostic.info("C.ADDI with rs1/rd=0 and imm=0 is C.NOP")),
                )
            ),
            CI_1.fields(),
        ),
        branch(
            "ADDIW",
            _funct3_is(1),
            RS1_RD.with_diagnose(
                checks((rd_is_zero, Diagnostic.error("C.ADDIW with rs1/rd=0 is Reserved")))
            ),
            CI_1.fields(),
        ),
        branch(
            "LI",
            _funct3_is(2),
            RD.with_diagnose(checks((rd_is_zero, Diagnostic.info("C.LI with rd=0 is a HINT")))),
            CI_1.fields(),
        ),
        branch(
            "LUI/ADDI16SP",
            _funct3_is(3),
            RD.with_diagnose(
                checks(
                    (ci_imm_is_zero, Diagnostic.error("C.LUI/ADDI16SP with imm=0 is Reserved")),
                    (rd_is_zero, Diagnostic.info("C.LUI with rd=0 is a HINT")),
                    (rd_is_sp, Diagnostic.info("C.LUI with rd=2 is C.ADDI16SP")),
                )
            ),
            branch("ADDI16SP", when("rd", 2), CI_2.fields()),
            branch("LUI", when_not("rd", {2}, 5), CI_3.fields()),
        ),
        _C1_OP,
        branch("J", _funct3_is(5), CJ.fields()),
        branch("BEQZ", _funct3_is(6), RS1_P, CB.fields()),
        branch("BNEZ", _funct3_is(7), RS1_P, CB.fields()),
        invalid(COMPRESSED_INSTRUCTION_WIDTH, WORD_WIDTH - 1),
    ),
    condition=when("opcode[1:0]", 0b01),
    description="Compressed quadrant 1: immediates, jumps, branches and register ALU ops",
)


# ============================================================================
# Quadrant 2
# ============================================================================

_JR_MV: Final = branch(
    "JR/MV",
    when("funct4[0]", 0),
    RS2,
    branch(
        "JR",
        when("rs2", 0),
        RS1.with_diagnose(
            checks(
                (_always, Diagnostic.info("C.JR/MV with rs2=0 is C.JR")),
                (rd_is_zero, Diagnostic.error("C.JR with rs1=0 is Reserved")),
            )
        ),
    ),
    branch(
        "MV",
        when_not("rs2", {0}, 5),
        RD.with_diagnose(
            checks(
                (_always, Diagnostic.info("C.JR/MV with rs2!=0 is C.MV")),
                (rd_is_zero, Diagnostic.info("C.MV with rd=0 is a HINT")),
            )
        ),
    ),
)

_EBREAK_JALR_ADD: Final = branch(
    "EBREAK/JALR/ADD",
    when("funct4[0]", 1),
    RS2,
    branch(
        "EBREAK/JALR",
        when("rs2", 0),
        RS1_RD.with_diagnose(
            checks(
                (rd_is_zero,
                 Diagnostic.info("C.EBREAK/JALR/ADD with rs1/rd=0 & rs2=0 is C.EBREAK")),
                (lambda word: not rd_is_zero(word),
                 Diagnostic.info("C.EBREAK/JALR/ADD with rs1/rd!=0 & rs2=0 is C.JALR")),
            )
        ),
    ),
    branch(
        "ADD",
        when_not("rs2", {0}, 5),
        RS1_RD.with_diagnose(
            checks(
                (_always, Diagnostic.info("C.EBREAK/JALR/ADD with rs2!=0 is C.ADD")),
                (rd_is_zero, Diagnostic.info("C.ADD with rs1/rd=0 is a HINT")),
            )
        ),
    ),
)

C2_MODE: Final = DecodeMode(
    "C2",
    (
        funct3("SLLI", "FLDSP", "LWSP", "LDSP", "OP", "FSDSP", "SWSP", "SDSP"),
        branch(
            "SLLI",
            _funct3_is(0),
            RS1_RD.with_diagnose(
                checks(
                    (ci_imm_is_zero, Diagnostic.info("C.SLLI with imm=0 is a HINT")),
                    (rd_is_zero, Diagnostic.info("C.SLLI with rs1/rd=0 is a HINT")),
                )
            ),
            CI_1_UNSIGNED.fields(),
        ),
        branch("FLDSP", _funct3_is(1), FRD, CSL_2.fields()),
        branch(
            "LWSP",
            _funct3_is(2),
            RD.with_diagnose(checks((rd_is_zero, Diagnostic.error("C.LWSP with rd=0 is Reserved")))),
            CSL_1.fields(),
        ),
        branch(
            "LDSP",
            _funct3_is(3),
            RD.with_diagnose(checks((rd_is_zero, Diagnostic.error("C.LDSP with rd=0 is Reserved")))),
            CSL_2.fields(),
        ),
        branch(
            "OP",
            _funct3_is(4),
            funct4_0("JR/MV", "EBREAK/JALR/ADD"),
            _JR_MV,
            _EBREAK_JALR_ADD,
        ),
        branch("FSDSP", _funct3_is(5), FRS2, CSS_2.fields()),
        branch("SWSP", _funct3_is(6), RS2, CSS_1.fields()),
        branch("SDSP", _funct3_is(7), RS2, CSS_2.fields()),
        invalid(COMPRESSED_INSTRUCTION_WIDTH, WORD_WIDTH - 1),
    ),
    condition=when("opcode[1:0]", 0b10),
    description="Compressed quadrant 2: stack-pointer loads/stores, moves, jumps and adds",
)
