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

"""Tests for the recursive decode engine and load-time validation."""

import pytest

from rvfields.engine import decode, validate_entries
from rvfields.errors import BitRangeError, DanglingConditionError, OverlapError
from rvfields.model import (
    ConditionalMode,
    Diagnostic,
    FieldSpec,
    FieldType,
    Severity,
    invalid,
    read_only_zero,
    reserved,
    when,
    wpri,
)

SELECTOR = FieldSpec(0, 1, "sel", ["zero", "one", "two", "three"])
ENTRIES = (
    SELECTOR,
    ConditionalMode("one", when("sel", 1), (FieldSpec(2, 3, "low"),)),
    ConditionalMode("two-or-three", when("sel", 2, 3), (FieldSpec(2, 5, "wide"),)),
    FieldSpec(8, 11, "tail"),
)


def _names(records) -> list[str]:
    return [record.name for record in records]


class TestDecodeOrder:
    """Records come out in table order with branches spliced in place."""

    def test_branch_spliced_at_trigger(self) -> None:
        records = decode(0b0101_0000_1101, ENTRIES)
        assert _names(records) == ["sel", "low", "tail"]
        assert [r.display for r in records] == ["one", "0x3", "0x5"]
        assert records[1].path == ("one",)
        assert records[0].path == ()

    def test_non_matching_branch_contributes_nothing(self) -> None:
        assert _names(decode(0, ENTRIES)) == ["sel", "tail"]

    def test_set_condition(self) -> None:
        assert _names(decode(0b11, ENTRIES)) == ["sel", "wide", "tail"]

    def test_all_matching_siblings_decode(self) -> None:
        entries = (
            FieldSpec(0, 0, "flag"),
            ConditionalMode("first", when("flag", 1), (FieldSpec(1, 2, "a"),)),
            ConditionalMode("second", when("flag", 0, 1), (FieldSpec(1, 2, "b"),)),
        )
        records = decode(0b111, entries)
        assert _names(records) == ["flag", "a", "b"]
        assert [r.path for r in records[1:]] == [("first",), ("second",)]

    def test_nested_branch_sees_ancestor_field(self) -> None:
        entries = (
            FieldSpec(0, 1, "outer"),
            ConditionalMode(
                "level1",
                when("outer", 1),
                (
                    FieldSpec(2, 3, "inner"),
                    ConditionalMode("level2", when("outer", 1), (FieldSpec(4, 7, "deep"),)),
                ),
            ),
        )
        records = decode(0b1010_01_01, entries)
        assert _names(records) == ["outer", "inner", "deep"]
        assert records[-1].path == ("level1", "level2")
        assert records[-1].raw == 0b1010

    def test_most_recent_value_wins(self) -> None:
        entries = (
            FieldSpec(0, 1, "x"),
            FieldSpec(2, 3, "x"),
            ConditionalMode("hit", when("x", 2), (FieldSpec(4, 5, "y"),)),
        )
        assert _names(decode(0b10_01, entries)) == ["x", "x", "y"]

    def test_deterministic(self) -> None:
        assert decode(0xDEADBEEF, ENTRIES) == decode(0xDEADBEEF, ENTRIES)

    def test_word_is_masked_to_width(self) -> None:
        seen: list[int] = []

        def spy(word: int) -> tuple[Diagnostic, ...]:
            seen.append(word)
            return ()

        entries = (FieldSpec(0, 3, "x", diagnose=spy),)
        records = decode((1 << 40) | 5, entries, word_width=32)
        assert records[0].raw == 5
        assert seen == [5]


class TestFieldResolution:
    """Display values, special types and diagnostics."""

    def test_unresolved_ordered_entry(self) -> None:
        (record,) = decode(3, (FieldSpec(0, 1, "f", ["a", "b"]),))
        assert record.display == "0x3"
        assert record.resolved is False

    def test_unresolved_sparse_entry(self) -> None:
        (record,) = decode(2, (FieldSpec(0, 1, "f", {1: "one"}),))
        assert record.display == "0x2"
        assert not record.resolved
        assert record.diagnostics == ()

    def test_plain_field_is_hex(self) -> None:
        (record,) = decode(0xAB, (FieldSpec(0, 7, "byte"),))
        assert record.display == "0xab"
        assert record.resolved

    def test_invalid_produces_no_record(self) -> None:
        assert decode(0xFFFF, (invalid(0, 15),)) == []

    def test_unnamed_field_is_silent(self) -> None:
        assert decode(0xF, (FieldSpec(0, 3),)) == []

    def test_unnamed_field_with_diagnose(self) -> None:
        spec = FieldSpec(0, 3, diagnose=lambda word: (Diagnostic.info("seen"),))
        (record,) = decode(0xF, (spec,))
        assert record.name == "bits[3:0]"
        assert record.diagnostics == (Diagnostic.info("seen"),)

    def test_diagnose_sees_whole_word(self) -> None:
        spec = FieldSpec(
            0, 3, "x", diagnose=lambda word: (Diagnostic.info(f"{word:#x}"),)
        )
        (record,) = decode(0x1234, (spec,))
        assert record.diagnostics[0].message == "0x1234"

    def test_reserved(self) -> None:
        (zero,) = decode(0, (reserved(4, 7),))
        (nonzero,) = decode(0x10, (reserved(4, 7),))
        assert zero.display == "Reserved" and zero.diagnostics == ()
        assert nonzero.field_type is FieldType.RESERVED
        assert [d.severity for d in nonzero.diagnostics] == [Severity.INFO]

    def test_wpri(self) -> None:
        (record,) = decode(1, (wpri(0),))
        assert record.display == "WPRI"
        assert record.diagnostics[0].severity is Severity.INFO

    def test_read_only_zero(self) -> None:
        (zero,) = decode(0, (read_only_zero(0, 3),))
        (nonzero,) = decode(2, (read_only_zero(0, 3),))
        assert zero.display == "0" and not zero.diagnostics
        assert nonzero.diagnostics[0].severity is Severity.ERROR

    def test_type_diagnostics_precede_table_diagnostics(self) -> None:
        spec = reserved(0, 3).with_diagnose(lambda word: (Diagnostic.error("custom"),))
        (record,) = decode(1, (spec,))
        assert [d.message for d in record.diagnostics] == [
            "Reserved bits are non-zero",
            "custom",
        ]


class TestDanglingConditions:
    """Conditions must reference a field decoded earlier."""

    BAD = (
        ConditionalMode("early", when("later", 0), (FieldSpec(0, 1, "a"),)),
        FieldSpec(2, 3, "later"),
    )

    def test_decode_raises(self) -> None:
        with pytest.raises(DanglingConditionError) as excinfo:
            decode(0, self.BAD)
        assert excinfo.value.context == {"mode": "early", "field": "later"}

    def test_validate_raises(self) -> None:
        with pytest.raises(DanglingConditionError):
            validate_entries(self.BAD)

    def test_name_inside_sibling_branch_is_not_visible(self) -> None:
        entries = (
            FieldSpec(0, 0, "q"),
            ConditionalMode("a", when("q", 1), (FieldSpec(1, 2, "inner"),)),
            ConditionalMode("b", when("inner", 0), (FieldSpec(3, 4, "z"),)),
        )
        with pytest.raises(DanglingConditionError):
            validate_entries(entries)


class TestValidation:
    """Load-time structural checks."""

    def test_valid_entries_pass(self) -> None:
        validate_entries(ENTRIES)

    def test_sibling_overlap(self) -> None:
        with pytest.raises(OverlapError) as excinfo:
            validate_entries((FieldSpec(0, 4, "a"), FieldSpec(4, 6, "b")), mode="m")
        assert excinfo.value.context == {"mode": "m", "field": "b", "other": "a"}

    def test_overlap_across_levels_is_allowed(self) -> None:
        entries = (
            FieldSpec(0, 1, "sel"),
            FieldSpec(2, 5, "payload"),
            ConditionalMode("alt", when("sel", 1), (FieldSpec(2, 3, "part"),)),
        )
        validate_entries(entries)

    def test_branches_may_reuse_bits(self) -> None:
        validate_entries(ENTRIES)  # "low" and "wide" share bits 2-3

    def test_invalid_fields_claim_bits(self) -> None:
        with pytest.raises(OverlapError):
            validate_entries((invalid(16, 63), FieldSpec(20, 24, "x")))

    def test_range_past_word_width(self) -> None:
        with pytest.raises(BitRangeError) as excinfo:
            validate_entries((FieldSpec(30, 40, "big"),), word_width=32, mode="narrow")
        assert excinfo.value.context["field"] == "big"
        assert excinfo.value.context["mode"] == "narrow"

    def test_nested_range_is_checked(self) -> None:
        entries = (
            FieldSpec(0, 0, "q"),
            ConditionalMode("deep", when("q", 1), (FieldSpec(9, 3, "backwards"),)),
        )
        with pytest.raises(BitRangeError):
            validate_entries(entries)
