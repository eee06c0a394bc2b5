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

"""Tests for the CSR classifier and name table."""

import pytest

from rvfields.config import CSR_ADDRESS_COUNT
from rvfields.csr import (
    CSR_ADDRESSES,
    CSR_NAMES,
    CsrAccess,
    CsrClass,
    Privilege,
    classify_csr,
    csr_name,
)


class TestClassifier:
    """classify_csr spot checks and invariants."""

    @pytest.mark.parametrize(
        "address,description",
        [
            (0x300, "Machine-level standard read/write"),
            (0xC00, "User-level standard read-only"),
            (0x100, "Supervisor-level standard read/write"),
            (0x600, "Hypervisor-level standard read/write"),
            (0xF11, "Machine-level standard read-only"),
            (0x800, "User-level custom read/write"),
            (0xCC0, "User-level custom read-only"),
            (0x5C0, "Supervisor-level custom read/write"),
            (0x7C0, "Machine-level custom read/write"),
            (0xFC0, "Machine-level custom read-only"),
            (0x7B0, "Machine-level standard read/write (debug-mode only)"),
            (0x7A0, "Machine-level standard read/write (debug-mode only)"),
        ],
    )
    def test_describe(self, address: int, description: str) -> None:
        assert classify_csr(address).describe() == description

    def test_mstatus_fields(self) -> None:
        assert classify_csr(0x300) == CsrClass(Privilege.MACHINE, CsrAccess.READ_WRITE)

    @pytest.mark.slow
    def test_every_address_classifies(self) -> None:
        for address in range(CSR_ADDRESS_COUNT):
            csr_class = classify_csr(address)
            assert (csr_class.access is CsrAccess.READ_ONLY) == (address >> 10 == 0b11)
            if not csr_class.debug:
                assert csr_class.privilege == (address >> 8) & 0b11

    @pytest.mark.slow
    def test_debug_block(self) -> None:
        debug = [a for a in range(CSR_ADDRESS_COUNT) if classify_csr(a).debug]
        assert debug == list(range(0x7A0, 0x7C0))

    @pytest.mark.slow
    def test_user_custom_rule(self) -> None:
        for address in range(CSR_ADDRESS_COUNT):
            if (address >> 8) & 0b11 == 0 and address >> 10 == 0b10:
                assert classify_csr(address).custom

    @pytest.mark.parametrize("address", [-1, CSR_ADDRESS_COUNT, 0x10000])
    def test_rejects_out_of_range(self, address: int) -> None:
        with pytest.raises(ValueError):
            classify_csr(address)


class TestNames:
    """CSR_NAMES contents."""

    @pytest.mark.parametrize(
        "address,name",
        [
            (0x001, "fflags"),
            (0x300, "mstatus"),
            (0xC00, "cycle"),
            (0xC03, "hpmcounter3"),
            (0xC1F, "hpmcounter31"),
            (0xC9F, "hpmcounter31h"),
            (0xB9F, "mhpmcounter31h"),
            (0x33F, "mhpmevent31"),
            (0x3A0, "pmpcfg0"),
            (0x3EF, "pmpaddr63"),
            (0x31F, "mstateen3h"),
            (0x7B1, "dpc"),
            (0x180, "satp"),
            (0x680, "hgatp"),
            (0x280, "vsatp"),
        ],
    )
    def test_named(self, address: int, name: str) -> None:
        assert csr_name(address) == name

    def test_unnamed(self) -> None:
        assert csr_name(0x800) is None

    def test_names_are_unique(self) -> None:
        assert len(CSR_ADDRESSES) == len(CSR_NAMES)
        assert CSR_ADDRESSES["mepc"] == 0x341

    def test_addresses_fit_twelve_bits(self) -> None:
        assert all(0 <= address < CSR_ADDRESS_COUNT for address in CSR_NAMES)
