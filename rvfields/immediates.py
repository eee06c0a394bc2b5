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

"""Immediate reconstruction library.

Scattered Immediates
====================

RISC-V immediates are split into fragments placed wherever the encoding had
room. Each ImmediateLayout lists its fragments as (word bits -> logical bit)
placements, the total logical width and whether the value is sign-extended:

    B-type:   imm[12|10:5] rs2 rs1 funct3 imm[4:1|11] opcode
              31   30:25              11:8  7

    Fragment(8, 11, at=1)    word[11:8]  -> imm[4:1]
    Fragment(25, 30, at=5)   word[30:25] -> imm[10:5]
    Fragment(7, 7, at=11)    word[7]     -> imm[11]
    Fragment(31, 31, at=12)  word[31]    -> imm[12]

A layout expands into one FieldSpec per fragment. The fragment at the lowest
word position is the anchor: it carries a single info diagnostic with the
rendered immediate, the others are plain bit ranges so the immediate's
provenance stays visible in the output.

Compressed layouts are named as in the RVC tables: CIW, CLS/n, CSL/n, CSS/n,
CI/n, CJ and CB, where the suffix selects the access width variant
(1 = word, 2 = double, 3 = quad).

Example:
    >>> IMM_B.reconstruct(0xFE000EE3)   # beq zero, zero, -4
    8188
    >>> IMM_B.message(0xFE000EE3)
    'Immediate(B-type): 0x1ffc -> 0xfffffffffffffffc (-4)'
"""

from dataclasses import dataclass
from typing import Final

from rvfields.bits import RenderedImmediate, extract_bits, render_immediate
from rvfields.errors import ConfigurationError
from rvfields.model import Diagnostic, FieldSpec


@dataclass(frozen=True, slots=True)
class Fragment:
    """Word bits ``[low, high]`` landing at logical bit ``at`` of the immediate."""

    low: int
    high: int
    at: int

    @property
    def width(self) -> int:
        return self.high - self.low + 1

    def place(self, word: int) -> int:
        return extract_bits(word, self.low, self.high) << self.at

    def label(self, prefix: str) -> str:
        if self.width == 1:
            return f"{prefix}[{self.at}]"
        return f"{prefix}[{self.at + self.width - 1}:{self.at}]"


@dataclass(frozen=True)
class ImmediateLayout:
    """One ISA immediate shape."""

    kind: str
    fragments: tuple[Fragment, ...]
    width: int
    signed: bool = True
    prefix: str = "imm"

    def __post_init__(self) -> None:
        object.__setattr__(self, "fragments", tuple(self.fragments))
        for frag in self.fragments:
            if frag.at + frag.width > self.width:
                raise ConfigurationError(
                    "Fragment lands outside the immediate", kind=self.kind, at=frag.at
                )

    def reconstruct(self, word: int) -> int:
        """OR every fragment into its logical position."""
        value = 0
        for frag in self.fragments:
            value |= frag.place(word)
        return value

    def render(self, word: int) -> RenderedImmediate:
        return render_immediate(self.reconstruct(word), self.width, self.signed)

    def value(self, word: int) -> int:
        """Numeric value of the immediate after extension."""
        return self.render(word).decimal

    def message(self, word: int) -> str:
        return f"Immediate({self.kind}-type): {self.render(word)}"

    def fields(self) -> tuple[FieldSpec, ...]:
        """Fragment fields in table order, the lowest-positioned one annotated."""
        anchor = min(self.fragments, key=lambda frag: frag.low)
        specs = []
        for frag in self.fragments:
            spec = FieldSpec(frag.low, frag.high, frag.label(self.prefix))
            if frag is anchor:
                spec = spec.with_diagnose(self._diagnose)
            specs.append(spec)
        return tuple(specs)

    def _diagnose(self, word: int) -> tuple[Diagnostic, ...]:
        return (Diagnostic.info(self.message(word)),)


def _layout(kind: str, width: int, *placements: tuple[int, int, int],
            signed: bool = True, prefix: str | None = None) -> ImmediateLayout:
    if prefix is None:
        prefix = "imm" if signed else "uimm"
    frags = tuple(Fragment(low, high, at) for low, high, at in placements)
    return ImmediateLayout(kind, frags, width, signed, prefix)


# ============================================================================
# Base (32-bit) layouts
# ============================================================================

IMM_I: Final = _layout("I", 12, (20, 31, 0), prefix="immI")
IMM_S: Final = _layout("S", 12, (7, 11, 0), (25, 31, 5), prefix="immS")
IMM_B: Final = _layout(
    "B", 13, (7, 7, 11), (8, 11, 1), (25, 30, 5), (31, 31, 12), prefix="immB"
)
IMM_U: Final = _layout("U", 32, (12, 31, 12), prefix="immU")
IMM_J: Final = _layout(
    "J", 21, (12, 19, 12), (20, 20, 11), (21, 30, 1), (31, 31, 20), prefix="immJ"
)
ZIMM: Final = _layout("zimm", 5, (15, 19, 0), signed=False)
"""Unsigned register-field immediate of the CSR*I instructions."""


# ============================================================================
# Compressed (16-bit) layouts
# ============================================================================

CIW: Final = _layout("CIW", 10, (5, 5, 3), (6, 6, 2), (7, 10, 6), (11, 12, 4), signed=False)

CLS_1: Final = _layout("CLS/1", 7, (5, 5, 6), (6, 6, 2), (10, 12, 3), signed=False)
CLS_2: Final = _layout("CLS/2", 8, (5, 6, 6), (10, 12, 3), signed=False)
CLS_3: Final = _layout("CLS/3", 9, (5, 6, 6), (10, 10, 8), (11, 12, 4), signed=False)

CSL_1: Final = _layout("CSL/1", 8, (2, 3, 6), (4, 6, 2), (12, 12, 5), signed=False)
CSL_2: Final = _layout("CSL/2", 9, (2, 4, 6), (5, 6, 3), (12, 12, 5), signed=False)
CSL_3: Final = _layout("CSL/3", 10, (2, 5, 6), (6, 6, 4), (12, 12, 5), signed=False)

CSS_1: Final = _layout("CSS/1", 8, (7, 8, 6), (9, 12, 2), signed=False)
CSS_2: Final = _layout("CSS/2", 9, (7, 9, 6), (10, 12, 3), signed=False)
CSS_3: Final = _layout("CSS/3", 10, (7, 10, 6), (11, 12, 4), signed=False)

CI_1: Final = _layout("CI/1", 6, (2, 6, 0), (12, 12, 5))
CI_1_UNSIGNED: Final = _layout("CI/1", 6, (2, 6, 0), (12, 12, 5), signed=False)
CI_2: Final = _layout(
    "CI/2", 10, (2, 2, 5), (3, 4, 7), (5, 5, 6), (6, 6, 4), (12, 12, 9)
)
CI_3: Final = _layout("CI/3", 18, (2, 6, 12), (12, 12, 17))

CJ: Final = _layout(
    "CJ", 12,
    (2, 2, 5), (3, 5, 1), (6, 6, 7), (7, 7, 6),
    (8, 8, 10), (9, 10, 8), (11, 11, 4), (12, 12, 11),
)
CB: Final = _layout("CB", 9, (2, 2, 5), (3, 4, 1), (5, 6, 6), (10, 11, 3), (12, 12, 8))

LAYOUTS: Final[dict[str, ImmediateLayout]] = {
    layout.kind: layout
    for layout in (
        IMM_I, IMM_S, IMM_B, IMM_U, IMM_J, ZIMM,
        CIW, CLS_1, CLS_2, CLS_3, CSL_1, CSL_2, CSL_3, CSS_1, CSS_2, CSS_3,
        CI_1, CI_2, CI_3, CJ, CB,
    )
}
"""Layouts by kind; ``CI/1`` maps to the signed variant."""


# ============================================================================
# Predicates for HINT / Reserved checks
# ============================================================================


def rd_is_zero(word: int) -> bool:
    """rd (or rs1/rd) field, bits [11:7], is x0."""
    return extract_bits(word, 7, 11) == 0


def rd_is_sp(word: int) -> bool:
    """rd field, bits [11:7], is x2 (sp)."""
    return extract_bits(word, 7, 11) == 2


def ciw_uimm_is_zero(word: int) -> bool:
    return extract_bits(word, 5, 12) == 0


def ci_imm_is_zero(word: int) -> bool:
    return extract_bits(word, 12) == 0 and extract_bits(word, 2, 6) == 0
