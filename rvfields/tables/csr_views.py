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

"""CSR address and register-content views.

The ``csr address`` mode splits a 12-bit CSR address into the fields that
encode its accessibility and reports the architectural name and
classification. The remaining modes lay out the contents of individual
machine-level CSRs (RV64 layouts), using the CSR field types:

    WPRI   write-preserve, read-ignore; flagged (info) when non-zero
    0      read-only zero; flagged (error) when non-zero
"""

from typing import Final

from rvfields.bits import extract_bits
from rvfields.config import CSR_ADDRESS_WIDTH, MASK64, WORD_WIDTH
from rvfields.csr import classify_csr, csr_name
from rvfields.model import (
    DecodeCategory,
    DecodeMode,
    Diagnostic,
    FieldSpec,
    branch,
    invalid,
    read_only_zero,
    reserved,
    when,
    wpri,
)
from rvfields.tables.rvi import ROUNDING_MODES


def _address_notes(word: int) -> tuple[Diagnostic, ...]:
    address = extract_bits(word, 0, 11)
    name = csr_name(address)
    if name is None:
        return (Diagnostic.info("No architectural CSR at this address"),)
    return (Diagnostic.info(f"CSR {name}"),)


def _class_notes(word: int) -> tuple[Diagnostic, ...]:
    return (Diagnostic.info(classify_csr(extract_bits(word, 0, 11)).describe()),)


CSR_ADDRESS_MODE: Final = DecodeMode(
    "csr address",
    (
        FieldSpec(0, 7, "index", diagnose=_address_notes),
        FieldSpec(8, 9, "privilege", ("User", "Supervisor", "Hypervisor", "Machine")),
        FieldSpec(10, 11, "access", ("read/write", "read/write", "read/write", "read-only"),
                  diagnose=_class_notes),
        invalid(CSR_ADDRESS_WIDTH, WORD_WIDTH - 1),
    ),
    description="12-bit CSR address",
)

# ============================================================================
# mstatus
# ============================================================================

EXTENSION_STATES: Final[tuple[str, ...]] = ("Off", "Initial", "Clean", "Dirty")
XLEN_VALUES: Final[tuple[str, ...]] = ("Reserved", "32", "64", "128")
PRIVILEGE_MODES: Final[tuple[str, ...]] = ("U", "S", "Reserved", "M")

MSTATUS_MODE: Final = DecodeMode(
    "mstatus",
    (
        wpri(0),
        FieldSpec(1, 1, "SIE"),
        wpri(2),
        FieldSpec(3, 3, "MIE"),
        wpri(4),
        FieldSpec(5, 5, "SPIE"),
        FieldSpec(6, 6, "UBE"),
        FieldSpec(7, 7, "MPIE"),
        FieldSpec(8, 8, "SPP", ("U", "S")),
        FieldSpec(9, 10, "VS", EXTENSION_STATES),
        FieldSpec(11, 12, "MPP", PRIVILEGE_MODES),
        FieldSpec(13, 14, "FS", EXTENSION_STATES),
        FieldSpec(15, 16, "XS", EXTENSION_STATES),
        FieldSpec(17, 17, "MPRV"),
        FieldSpec(18, 18, "SUM"),
        FieldSpec(19, 19, "MXR"),
        FieldSpec(20, 20, "TVM"),
        FieldSpec(21, 21, "TW"),
        FieldSpec(22, 22, "TSR"),
        FieldSpec(23, 23, "SPELP"),
        FieldSpec(24, 24, "SDT"),
        wpri(25, 31),
        FieldSpec(32, 33, "UXL", XLEN_VALUES),
        FieldSpec(34, 35, "SXL", XLEN_VALUES),
        FieldSpec(36, 36, "SBE"),
        FieldSpec(37, 37, "MBE"),
        FieldSpec(38, 38, "GVA"),
        FieldSpec(39, 39, "MPV"),
        wpri(40),
        FieldSpec(41, 41, "MPELP"),
        FieldSpec(42, 42, "MDT"),
        wpri(43, 62),
        FieldSpec(63, 63, "SD"),
    ),
    description="Machine status register (RV64)",
)

# ============================================================================
# misa
# ============================================================================

MISA_EXTENSIONS: Final[dict[str, str]] = {
    "A": "Atomic",
    "B": "Bit-manipulation",
    "C": "Compressed",
    "D": "Double-precision floating point",
    "E": "RV32E/RV64E base",
    "F": "Single-precision floating point",
    "H": "Hypervisor",
    "I": "RV32I/RV64I base",
    "M": "Integer multiply/divide",
    "Q": "Quad-precision floating point",
    "S": "Supervisor mode",
    "U": "User mode",
    "V": "Vector",
    "X": "Non-standard extensions",
}


def _misa_letter(bit: int) -> FieldSpec:
    letter = chr(ord("A") + bit)
    if letter not in MISA_EXTENSIONS:
        return reserved(bit, bit, letter)
    return FieldSpec(bit, bit, letter, ("-", MISA_EXTENSIONS[letter]))


MISA_MODE: Final = DecodeMode(
    "misa",
    (
        *(_misa_letter(bit) for bit in range(26)),
        read_only_zero(26, 61),
        FieldSpec(62, 63, "MXL", XLEN_VALUES),
    ),
    description="Machine ISA register (RV64)",
)

# ============================================================================
# Trap registers
# ============================================================================


def _vector_base(word: int) -> tuple[Diagnostic, ...]:
    return (Diagnostic.info(f"Trap vector base address: {word & MASK64 & ~0b11:#018x}"),)


MTVEC_MODE: Final = DecodeMode(
    "mtvec",
    (
        FieldSpec(0, 1, "MODE", ("Direct", "Vectored", "Reserved", "Reserved")),
        FieldSpec(2, 63, "BASE", diagnose=_vector_base),
    ),
    description="Machine trap-vector base address",
)

EXCEPTION_CODES: Final[dict[int, str]] = {
    0: "Instruction address misaligned",
    1: "Instruction access fault",
    2: "Illegal instruction",
    3: "Breakpoint",
    4: "Load address misaligned",
    5: "Load access fault",
    6: "Store/AMO address misaligned",
    7: "Store/AMO access fault",
    8: "Environment call from U-mode",
    9: "Environment call from S-mode",
    10: "Environment call from VS-mode",
    11: "Environment call from M-mode",
    12: "Instruction page fault",
    13: "Load page fault",
    15: "Store/AMO page fault",
    16: "Double trap",
    18: "Software check",
    19: "Hardware error",
    20: "Instruction guest-page fault",
    21: "Load guest-page fault",
    22: "Virtual instruction",
    23: "Store/AMO guest-page fault",
}

INTERRUPT_CODES: Final[dict[int, str]] = {
    1: "Supervisor software interrupt",
    2: "Virtual supervisor software interrupt",
    3: "Machine software interrupt",
    5: "Supervisor timer interrupt",
    6: "Virtual supervisor timer interrupt",
    7: "Machine timer interrupt",
    9: "Supervisor external interrupt",
    10: "Virtual supervisor external interrupt",
    11: "Machine external interrupt",
    12: "Supervisor guest external interrupt",
    13: "Counter-overflow interrupt",
}

MCAUSE_MODE: Final = DecodeMode(
    "mcause",
    (
        FieldSpec(63, 63, "Interrupt", ("Exception", "Interrupt")),
        branch("exception", when("Interrupt", 0), FieldSpec(0, 62, "Exception code", EXCEPTION_CODES)),
        branch("interrupt", when("Interrupt", 1), FieldSpec(0, 62, "Interrupt code", INTERRUPT_CODES)),
    ),
    description="Machine trap cause (RV64)",
)

_INTERRUPT_SOURCES: Final[dict[int, str]] = {
    1: "SS",
    3: "MS",
    5: "ST",
    7: "MT",
    9: "SE",
    11: "ME",
    13: "LCOF",
}


def _interrupt_bits(suffix: str) -> tuple[FieldSpec, ...]:
    """mie / mip layout: standard sources in [15:0], platform-defined above."""
    fields = [
        FieldSpec(bit, bit, _INTERRUPT_SOURCES[bit] + suffix)
        if bit in _INTERRUPT_SOURCES
        else read_only_zero(bit)
        for bit in range(16)
    ]
    fields.append(FieldSpec(16, 63, "platform"))
    return tuple(fields)


MIE_MODE: Final = DecodeMode("mie", _interrupt_bits("IE"), description="Machine interrupt enable")
MIP_MODE: Final = DecodeMode("mip", _interrupt_bits("IP"), description="Machine interrupt pending")

# ============================================================================
# Address translation and floating point
# ============================================================================


def _root_table(word: int) -> tuple[Diagnostic, ...]:
    return (Diagnostic.info(f"Root page table: {extract_bits(word, 0, 43) << 12:#018x}"),)


SATP_MODE: Final = DecodeMode(
    "satp",
    (
        FieldSpec(0, 43, "PPN", diagnose=_root_table),
        FieldSpec(44, 59, "ASID"),
        FieldSpec(60, 63, "MODE", {0: "Bare", 8: "Sv39", 9: "Sv48", 10: "Sv57", 11: "Sv64"}),
    ),
    description="Supervisor address translation and protection (RV64)",
)

FCSR_MODE: Final = DecodeMode(
    "fcsr",
    (
        FieldSpec(0, 0, "NX"),
        FieldSpec(1, 1, "UF"),
        FieldSpec(2, 2, "OF"),
        FieldSpec(3, 3, "DZ"),
        FieldSpec(4, 4, "NV"),
        FieldSpec(5, 7, "frm", ROUNDING_MODES),
        reserved(8, 31),
        invalid(32, 63),
    ),
    description="Floating-point control and status",
)

CSR_CATEGORY: Final = DecodeCategory(
    "csr",
    (
        CSR_ADDRESS_MODE,
        MSTATUS_MODE,
        MISA_MODE,
        MTVEC_MODE,
        MCAUSE_MODE,
        MIE_MODE,
        MIP_MODE,
        SATP_MODE,
        FCSR_MODE,
    ),
    description="CSR addresses and register contents",
)
