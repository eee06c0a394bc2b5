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

"""CSR address classification and name table.

CSR Address Space
=================

A CSR address is 12 bits, and its bit pattern carries the register's
accessibility (RISC-V privileged spec, table "Allocation of RISC-V CSR
address ranges"):

    [11:10]  11 = read-only, otherwise read/write
    [9:8]    lowest privilege that can access the CSR
             (00 User, 01 Supervisor, 10 Hypervisor, 11 Machine)
    [7:6]    with [11:10], separates standard from custom ranges

Addresses 0x7A0-0x7BF are the trigger and debug-mode registers, reported as
Machine-level standard with a debug marker.

classify_csr() depends only on the address bits; CSR_NAMES is the separate
lookup of architecturally named registers.

Example:
    >>> classify_csr(0x300).describe()
    'Machine-level standard read/write'
    >>> csr_name(0xC00)
    'cycle'
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Final

from rvfields.bits import extract_bits
from rvfields.config import CSR_ADDRESS_COUNT


class Privilege(IntEnum):
    """CSR privilege sphere, encoded in address bits [9:8]."""

    USER = 0
    SUPERVISOR = 1
    HYPERVISOR = 2
    MACHINE = 3

    @property
    def title(self) -> str:
        return self.name.capitalize()


class CsrAccess(Enum):
    READ_WRITE = "read/write"
    READ_ONLY = "read-only"


DEBUG_PREFIXES: Final[frozenset[int]] = frozenset({0b0111_1010, 0b0111_1011})
"""Values of address bits [11:4] reserved for trigger and debug-mode CSRs."""


@dataclass(frozen=True, slots=True)
class CsrClass:
    """Accessibility class of one CSR address."""

    privilege: Privilege
    access: CsrAccess
    custom: bool = False
    debug: bool = False

    def describe(self) -> str:
        kind = "custom" if self.custom else "standard"
        text = f"{self.privilege.title}-level {kind} {self.access.value}"
        if self.debug:
            text += " (debug-mode only)"
        return text


def _is_custom(tier: int, sphere: int, sub: int) -> bool:
    if sphere == Privilege.USER:
        return tier == 0b10 or (tier == 0b11 and sub == 0b11)
    return tier != 0 and sub == 0b11


def classify_csr(address: int) -> CsrClass:
    """Classify a CSR address from its bits alone.

    Raises:
        ValueError: If ``address`` is not a 12-bit value.
    """
    if not 0 <= address < CSR_ADDRESS_COUNT:
        raise ValueError(f"CSR address out of range: {address:#x}")

    tier = extract_bits(address, 10, 11)
    sphere = extract_bits(address, 8, 9)
    access = CsrAccess.READ_ONLY if tier == 0b11 else CsrAccess.READ_WRITE

    if extract_bits(address, 4, 11) in DEBUG_PREFIXES:
        return CsrClass(Privilege.MACHINE, access, custom=False, debug=True)

    sub = extract_bits(address, 6, 7)
    return CsrClass(Privilege(sphere), access, custom=_is_custom(tier, sphere, sub))


# ============================================================================
# Name table
# ============================================================================


def _series(base: int, template: str, first: int, last: int) -> dict[int, str]:
    """``template`` numbered ``first..last`` at consecutive addresses from ``base``."""
    return {base + i - first: template.format(i) for i in range(first, last + 1)}


_UNPRIVILEGED: Final[dict[int, str]] = {
    # Floating point
    0x001: "fflags",
    0x002: "frm",
    0x003: "fcsr",
    # Vector
    0x008: "vstart",
    0x009: "vxsat",
    0x00A: "vxrm",
    0x00F: "vcsr",
    0xC20: "vl",
    0xC21: "vtype",
    0xC22: "vlenb",
    # Zicfiss, Zkr, Zcmt
    0x011: "ssp",
    0x015: "seed",
    0x017: "jvt",
    # Counters and timers
    0xC00: "cycle",
    0xC01: "time",
    0xC02: "instret",
    **_series(0xC03, "hpmcounter{}", 3, 31),
    0xC80: "cycleh",
    0xC81: "timeh",
    0xC82: "instreth",
    **_series(0xC83, "hpmcounter{}h", 3, 31),
}

_SUPERVISOR: Final[dict[int, str]] = {
    0x100: "sstatus",
    0x104: "sie",
    0x105: "stvec",
    0x106: "scounteren",
    0x10A: "senvcfg",
    0x120: "scountinhibit",
    0x140: "sscratch",
    0x141: "sepc",
    0x142: "scause",
    0x143: "stval",
    0x144: "sip",
    0xDA0: "scountovf",
    0x150: "siselect",
    0x151: "sireg",
    0x152: "sireg2",
    0x153: "sireg3",
    0x155: "sireg4",
    0x156: "sireg5",
    0x157: "sireg6",
    0x180: "satp",
    0x14D: "stimecmp",
    0x15D: "stimecmph",
    0x5A8: "scontext",
    0x181: "srmcfg",
    **_series(0x10C, "sstateen{}", 0, 3),
    0x14E: "sctrctl",
    0x14F: "sctrstatus",
    0x15F: "sctrdepth",
}

_HYPERVISOR: Final[dict[int, str]] = {
    0x600: "hstatus",
    0x602: "hedeleg",
    0x603: "hideleg",
    0x604: "hie",
    0x606: "hcounteren",
    0x607: "hgeie",
    0x643: "htval",
    0x644: "hip",
    0x645: "hvip",
    0x64A: "htinst",
    0xE12: "hgeip",
    0x60A: "henvcfg",
    0x61A: "henvcfgh",
    0x680: "hgatp",
    0x6A8: "hcontext",
    **_series(0x60C, "hstateen{}", 0, 3),
    **_series(0x61C, "hstateen{}h", 0, 3),
    # Virtual supervisor
    0x200: "vsstatus",
    0x204: "vsie",
    0x205: "vstvec",
    0x240: "vsscratch",
    0x241: "vsepc",
    0x242: "vscause",
    0x243: "vstval",
    0x244: "vsip",
    0x280: "vsatp",
    0x250: "vsiselect",
    0x251: "vsireg",
    0x252: "vsireg2",
    0x253: "vsireg3",
    0x255: "vsireg4",
    0x256: "vsireg5",
    0x257: "vsireg6",
    0x24D: "vstimecmp",
    0x25D: "vstimecmph",
    0x24E: "vsctrctl",
}

_MACHINE: Final[dict[int, str]] = {
    # Information
    0xF11: "mvendorid",
    0xF12: "marchid",
    0xF13: "mimpid",
    0xF14: "mhartid",
    0xF15: "mconfigptr",
    # Trap setup
    0x300: "mstatus",
    0x301: "misa",
    0x302: "medeleg",
    0x303: "mideleg",
    0x304: "mie",
    0x305: "mtvec",
    0x306: "mcounteren",
    0x310: "mstatush",
    0x312: "medelegh",
    # Counter setup
    0x321: "mcyclecfg",
    0x322: "minstretcfg",
    0x721: "mcyclecfgh",
    0x722: "minstretcfgh",
    # Trap handling
    0x340: "mscratch",
    0x341: "mepc",
    0x342: "mcause",
    0x343: "mtval",
    0x344: "mip",
    0x34A: "mtinst",
    0x34B: "mtval2",
    0x350: "miselect",
    0x351: "mireg",
    0x352: "mireg2",
    0x353: "mireg3",
    0x355: "mireg4",
    0x356: "mireg5",
    0x357: "mireg6",
    # Configuration
    0x30A: "menvcfg",
    0x31A: "menvcfgh",
    0x747: "mseccfg",
    0x757: "mseccfgh",
    # Memory protection
    **_series(0x3A0, "pmpcfg{}", 0, 15),
    **_series(0x3B0, "pmpaddr{}", 0, 63),
    # State enable
    **_series(0x30C, "mstateen{}", 0, 3),
    **_series(0x31C, "mstateen{}h", 0, 3),
    # Resumable NMI
    0x740: "mnscratch",
    0x741: "mnepc",
    0x742: "mncause",
    0x744: "mnstatus",
    # Counters
    0xB00: "mcycle",
    0xB02: "minstret",
    **_series(0xB03, "mhpmcounter{}", 3, 31),
    0xB80: "mcycleh",
    0xB82: "minstreth",
    **_series(0xB83, "mhpmcounter{}h", 3, 31),
    0x320: "mcountinhibit",
    **_series(0x323, "mhpmevent{}", 3, 31),
    **_series(0x723, "mhpmevent{}h", 3, 31),
    0x34E: "mctrctl",
    # Trigger and debug
    0x7A0: "tselect",
    0x7A1: "tdata1",
    0x7A2: "tdata2",
    0x7A3: "tdata3",
    0x7A8: "mcontext",
    0x7B0: "dcsr",
    0x7B1: "dpc",
    0x7B2: "dscratch0",
    0x7B3: "dscratch1",
}

CSR_NAMES: Final[dict[int, str]] = {**_UNPRIVILEGED, **_SUPERVISOR, **_HYPERVISOR, **_MACHINE}
"""CSR address -> architectural name."""

CSR_ADDRESSES: Final[dict[str, int]] = {name: address for address, name in CSR_NAMES.items()}
"""Architectural name -> CSR address."""


def csr_name(address: int) -> str | None:
    """Architectural name of ``address``, or None for unnamed addresses."""
    return CSR_NAMES.get(address)
