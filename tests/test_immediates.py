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

"""Tests for immediate reconstruction."""

import pytest
from word_builders import b_type, c_b, c_i, c_j, i_type, j_type, s_type, u_type

from rvfields.errors import ConfigurationError
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
    IMM_B,
    IMM_I,
    IMM_J,
    IMM_S,
    IMM_U,
    LAYOUTS,
    ZIMM,
    Fragment,
    ImmediateLayout,
    ci_imm_is_zero,
    ciw_uimm_is_zero,
    rd_is_sp,
    rd_is_zero,
)
from rvfields.model import Severity


class TestBaseImmediates:
    """I/S/B/U/J layouts against hand-assembled words."""

    @pytest.mark.parametrize("imm", [0, 10, 2047, -1, -2048])
    def test_i_type(self, imm: int) -> None:
        word = i_type(imm, rs1=1, funct3=0, rd=2, opcode=0x13)
        assert IMM_I.value(word) == imm

    def test_s_type(self) -> None:
        word = 0xFEB52C23  # sw a1, -8(a0)
        assert word == s_type(-8, rs2=11, rs1=10, funct3=2)
        assert IMM_S.value(word) == -8

    def test_b_type_negative(self) -> None:
        word = 0xFE000EE3  # beq zero, zero, -4
        assert IMM_B.reconstruct(word) == 0x1FFC
        assert IMM_B.value(word) == -4
        assert IMM_B.message(word) == "Immediate(B-type): 0x1ffc -> 0xfffffffffffffffc (-4)"

    @pytest.mark.parametrize("offset", [2, 8, 2048, 4094, -2, -4096])
    def test_b_type(self, offset: int) -> None:
        assert IMM_B.value(b_type(offset, rs2=1, rs1=2, funct3=0)) == offset

    def test_u_type(self) -> None:
        word = 0x12345537  # lui a0, 0x12345
        assert word == u_type(0x12345, rd=10)
        assert IMM_U.message(word) == "Immediate(U-type): 0x12345000 -> 0x0000000012345000 (305418240)"
        assert IMM_U.value(u_type(0xFFFFF, rd=1)) == -4096

    def test_j_type(self) -> None:
        assert j_type(-4, rd=0) == 0xFFDFF06F
        assert IMM_J.value(0xFFDFF06F) == -4
        assert IMM_J.value(0x001000EF) == 2048

    @pytest.mark.parametrize("offset", [2, 2048, 4096, (1 << 20) - 2, -(1 << 20)])
    def test_j_type_range(self, offset: int) -> None:
        assert IMM_J.value(j_type(offset, rd=1)) == offset

    def test_zimm_is_unsigned(self) -> None:
        word = 0x3002D073  # csrrwi zero, mstatus, 5
        assert ZIMM.message(word) == "Immediate(zimm-type): 0x5 -> 0x0000000000000005 (5)"
        assert ZIMM.value(0x300FD073) == 31


class TestCompressedImmediates:
    """Compressed layouts against known encodings."""

    @pytest.mark.parametrize(
        "layout,word,expected",
        [
            (CIW, 0x0808, 16),  # c.addi4spn a0, sp, 16
            (CLS_1, 0x41C8, 4),  # c.lw a0, 4(a1)
            (CLS_2, 0x6588, 8),  # c.ld a0, 8(a1)
            (CSL_1, 0x4532, 12),  # c.lwsp a0, 12(sp)
            (CSL_2, 0x60A2, 8),  # c.ldsp ra, 8(sp)
            (CSS_1, 0xC22A, 4),  # c.swsp a0, 4(sp)
            (CSS_2, 0xE406, 8),  # c.sdsp ra, 8(sp)
            (CI_2, 0x7139, -64),  # c.addi16sp sp, -64
            (CI_2, 0x713D, -32),  # c.addi16sp sp, -32
            (CI_3, 0x6505, 4096),  # c.lui a0, 1
            (CI_3, 0x757D, -4096),  # c.lui a0, 0xfffff
            (CJ, 0xBFFD, -2),  # c.j -2
            (CB, 0xC501, 8),  # c.beqz a0, 8
        ],
    )
    def test_known_encodings(self, layout: ImmediateLayout, word: int, expected: int) -> None:
        assert layout.value(word) == expected

    def test_ci_signed_and_unsigned(self) -> None:
        word = c_i(0, rd=10, imm=0x3F, op=2)  # c.slli a0, 63
        assert word == 0x157E
        assert CI_1_UNSIGNED.value(word) == 63
        assert CI_1.value(word) == -1
        assert CI_1_UNSIGNED.message(word) == "Immediate(CI/1-type): 0x3f -> 0x000000000000003f (63)"

    @pytest.mark.parametrize("offset", [-2048, -2, 2, 0x7FE, 0x2AA, -0x556])
    def test_cj(self, offset: int) -> None:
        assert CJ.value(c_j(5, offset)) == offset

    @pytest.mark.parametrize("offset", [-256, -2, 2, 254, 0xAA, -0x56])
    def test_cb(self, offset: int) -> None:
        assert CB.value(c_b(6, 2, offset)) == offset

    def test_addi4spn_maximum(self) -> None:
        # every uimm bit set: 0x3FC
        assert CIW.value(0x1FE0) == 0x3FC


class TestLayoutFields:
    """Fragment fields emitted into the decode tables."""

    def test_names_follow_logical_bits(self) -> None:
        assert [spec.name for spec in IMM_B.fields()] == [
            "immB[11]",
            "immB[4:1]",
            "immB[10:5]",
            "immB[12]",
        ]
        assert [spec.name for spec in CIW.fields()] == [
            "uimm[3]",
            "uimm[2]",
            "uimm[9:6]",
            "uimm[5:4]",
        ]

    @pytest.mark.parametrize("layout", list(LAYOUTS.values()), ids=list(LAYOUTS))
    def test_only_lowest_fragment_is_annotated(self, layout: ImmediateLayout) -> None:
        specs = layout.fields()
        anchored = [spec for spec in specs if spec.diagnose is not None]
        assert len(anchored) == 1
        assert anchored[0].low == min(spec.low for spec in specs)

    @pytest.mark.parametrize("layout", list(LAYOUTS.values()), ids=list(LAYOUTS))
    def test_fragments_fill_the_width_without_gaps(self, layout: ImmediateLayout) -> None:
        covered = 0
        for frag in layout.fragments:
            bits = ((1 << frag.width) - 1) << frag.at
            assert not covered & bits
            covered |= bits
        # Scaled offsets leave their low bits implicit; everything above is encoded
        lowest = (covered & -covered).bit_length() - 1
        assert covered == ((1 << layout.width) - 1) ^ ((1 << lowest) - 1)

    def test_anchor_diagnostic(self) -> None:
        anchor = CB.fields()[0]
        (diag,) = anchor.diagnose(0xC501)
        assert diag.severity is Severity.INFO
        assert diag.message == "Immediate(CB-type): 0x8 -> 0x0000000000000008 (8)"

    def test_fragment_outside_width(self) -> None:
        with pytest.raises(ConfigurationError):
            ImmediateLayout("bad", (Fragment(0, 3, at=2),), width=4)


class TestPredicates:
    """Word predicates used by the HINT / Reserved checks."""

    def test_rd(self) -> None:
        assert rd_is_zero(0x0001)
        assert not rd_is_zero(0x0501)
        assert rd_is_sp(0x0101)
        assert not rd_is_sp(0x0501)

    def test_ciw_uimm(self) -> None:
        assert ciw_uimm_is_zero(0x0000)
        assert ciw_uimm_is_zero(0x001C)  # only rd' set
        assert not ciw_uimm_is_zero(0x0808)

    def test_ci_imm(self) -> None:
        assert ci_imm_is_zero(0x0501)
        assert not ci_imm_is_zero(0x1501)
        assert not ci_imm_is_zero(0x0505)
