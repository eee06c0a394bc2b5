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

"""Recursive decode engine.

Decode Algorithm
================

decode() walks an entry list in order. A FieldSpec extracts its bits,
resolves a display value and emits a DecodedField. A ConditionalMode looks up
the raw value most recently decoded under its condition's field name and, when
the value is in the condition's set, decodes its nested entries in place.

Every sibling branch is tested and every matching branch contributes records,
in list order. Tables are written so that branches on one field partition its
domain, but overlap is allowed.

The per-call DecodeContext carries the name -> raw value map through every
level of recursion, so a nested branch may test a field decoded by an
ancestor list.

Load-time validation
====================

validate_entries() rejects malformed tables before any word is decoded:

    - bit ranges that are inverted or reach past the word width
    - sibling leaf fields in one list that share bits
    - conditions naming a field that is not decoded earlier on the path

Example:
    >>> records = decode(0x00A00513, INSTRUCTION_MODE.fields)
    >>> [(r.name, r.display) for r in records][:3]
    [('opcode[1:0]', 'I'), ('opcode[6:2]', 'OP-IMM'), ('rd', 'a0')]
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from rvfields.bits import bit_mask, check_bit_range, extract_bits
from rvfields.config import WORD_WIDTH
from rvfields.errors import BitRangeError, DanglingConditionError, OverlapError
from rvfields.model import (
    ConditionalMode,
    DecodedField,
    Diagnostic,
    Entry,
    FieldSpec,
    FieldType,
)

logger = logging.getLogger(__name__)


@dataclass
class DecodeContext:
    """State for one top-level decode call.

    Attributes:
        word: The full input word, already masked to ``word_width``.
        word_width: Logical width of the decoded word.
        values: Field name -> raw value, most recent decode wins.
        path: Names of the conditional branches currently being decoded.
    """

    word: int
    word_width: int = WORD_WIDTH
    values: dict[str, int] = field(default_factory=dict)
    path: list[str] = field(default_factory=list)


# ============================================================================
# Leaf resolution
# ============================================================================


def _special_display(spec: FieldSpec, raw: int) -> tuple[str, list[Diagnostic]]:
    """Display value and type-driven diagnostics for special field types."""
    if spec.field_type is FieldType.RESERVED:
        notes = [Diagnostic.info("Reserved bits are non-zero")] if raw else []
        return "Reserved", notes
    if spec.field_type is FieldType.CSR_WPRI:
        notes = [Diagnostic.info("WPRI bits are non-zero")] if raw else []
        return "WPRI", notes
    # CSR_RO0
    notes = [Diagnostic.error("Read-only zero bits are non-zero")] if raw else []
    return "0", notes


def _decode_field(spec: FieldSpec, ctx: DecodeContext) -> DecodedField | None:
    raw = extract_bits(ctx.word, spec.low, spec.high)
    if spec.name is not None:
        ctx.values[spec.name] = raw

    if spec.field_type is FieldType.INVALID:
        return None
    if spec.field_type is FieldType.NAMED and spec.name is None and spec.diagnose is None:
        return None

    resolved = True
    if spec.field_type is FieldType.NAMED:
        notes: list[Diagnostic] = []
        display = None if spec.values is None else spec.values.lookup(raw)
        if display is None:
            display = f"{raw:#x}"
            if spec.values is not None:
                resolved = False
                logger.debug("No table entry for %s=%d", spec.label, raw)
    else:
        display, notes = _special_display(spec, raw)

    if spec.diagnose is not None:
        notes.extend(spec.diagnose(ctx.word))

    return DecodedField(
        low=spec.low,
        high=spec.high,
        name=spec.label,
        display=display,
        raw=raw,
        field_type=spec.field_type,
        resolved=resolved,
        diagnostics=tuple(notes),
        path=tuple(ctx.path),
    )


# ============================================================================
# Recursive walk
# ============================================================================


def decode_entries(entries: Sequence[Entry], ctx: DecodeContext) -> list[DecodedField]:
    """Decode ``entries`` against an existing context, mutating it in place."""
    records: list[DecodedField] = []
    for entry in entries:
        match entry:
            case FieldSpec():
                record = _decode_field(entry, ctx)
                if record is not None:
                    records.append(record)
            case ConditionalMode(name=name, condition=condition, fields=fields):
                if condition.field not in ctx.values:
                    raise DanglingConditionError(
                        "Condition references a field not decoded before it",
                        mode=name,
                        field=condition.field,
                    )
                if not condition.matches(ctx.values[condition.field]):
                    continue
                logger.debug("Branch %s selected (%s=%d)", name, condition.field,
                             ctx.values[condition.field])
                ctx.path.append(name)
                try:
                    records.extend(decode_entries(fields, ctx))
                finally:
                    ctx.path.pop()
            case _:
                raise TypeError(f"Unsupported entry type: {type(entry).__name__}")
    return records


def decode(word: int, entries: Sequence[Entry], *, word_width: int = WORD_WIDTH) -> list[DecodedField]:
    """Decode ``word`` against an entry list.

    Args:
        word: Input value; bits above ``word_width`` are discarded.
        entries: Top-level entry list of a decode mode.
        word_width: Logical width of the word.

    Returns:
        Decoded records in table order, branch records spliced in at their
        trigger point.

    Raises:
        DanglingConditionError: A condition references a field that was never
            decoded (only reachable when load-time validation was skipped).
    """
    ctx = DecodeContext(word=word & bit_mask(word_width), word_width=word_width)
    return decode_entries(entries, ctx)


# ============================================================================
# Load-time validation
# ============================================================================


def _check_overlap(leaves: list[FieldSpec], mode: str | None) -> None:
    claimed: list[FieldSpec] = []
    for spec in leaves:
        for other in claimed:
            if spec.mask & other.mask:
                raise OverlapError(
                    "Sibling fields overlap",
                    mode=mode,
                    field=spec.label,
                    other=other.label,
                )
        claimed.append(spec)


def _validate(entries: Sequence[Entry], known: set[str], word_width: int, mode: str | None) -> None:
    leaves: list[FieldSpec] = []
    for entry in entries:
        match entry:
            case FieldSpec():
                try:
                    check_bit_range(entry.low, entry.high, word_width)
                except BitRangeError as err:
                    raise BitRangeError(
                        err.message, mode=mode, field=entry.label, **err.context
                    ) from err
                leaves.append(entry)
                if entry.name is not None:
                    known.add(entry.name)
            case ConditionalMode(name=name, condition=condition, fields=fields):
                if condition.field not in known:
                    raise DanglingConditionError(
                        "Condition references a field not decoded before it",
                        mode=name,
                        field=condition.field,
                    )
                # Names decoded inside a branch are visible only within it
                _validate(fields, set(known), word_width, name)
            case _:
                raise TypeError(f"Unsupported entry type: {type(entry).__name__}")
    _check_overlap(leaves, mode)


def validate_entries(
    entries: Sequence[Entry], *, word_width: int = WORD_WIDTH, mode: str | None = None
) -> None:
    """Check an entry list for configuration errors.

    Raises:
        BitRangeError: A range is inverted or exceeds ``word_width``.
        OverlapError: Two sibling leaves share bits.
        DanglingConditionError: A condition names a field not decoded earlier
            on its path.
    """
    _validate(entries, set(), word_width, mode)
