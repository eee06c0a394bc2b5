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

"""Field specification model.

Specification Tables
====================

A decode mode is an ordered list of entries. Each entry is either:

    FieldSpec
        A leaf: an inclusive bit range, an optional display name, an optional
        value table resolving the raw bits to a symbol, an optional special
        type (Invalid, Reserved, WPRI, read-only zero) and an optional
        diagnose function producing annotations from the whole word.

    ConditionalMode
        A named nested entry list decoded only when a previously decoded
        field's raw value is in the condition's value set.

Entries are immutable and shared by every decode call. The engine produces
DecodedField records, which copy values out of the tables and never
refer back into them.

Example:
    >>> funct3 = FieldSpec(12, 14, "funct3", ["BEQ", "BNE"])
    >>> rs1 = FieldSpec(15, 19, "rs1", REGISTER_NAMES)
    >>> beq_only = ConditionalMode("funct3-BEQ", when("funct3", 0), (rs1,))
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Union

from rvfields.errors import ConfigurationError, UnknownModeError


class FieldType(Enum):
    """Classification of a leaf field."""

    NAMED = "named"  # default: resolve through the value table
    INVALID = "invalid"  # padding, no record produced
    RESERVED = "reserved"  # architecturally reserved, expected zero
    CSR_WPRI = "wpri"  # CSR write-preserve, read-ignore
    CSR_RO0 = "ro0"  # CSR read-only zero


class Severity(str, Enum):
    """Severity of a diagnostic annotation."""

    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One annotation attached to a decoded field."""

    message: str
    severity: Severity = Severity.INFO

    @classmethod
    def info(cls, message: str) -> "Diagnostic":
        return cls(message, Severity.INFO)

    @classmethod
    def error(cls, message: str) -> "Diagnostic":
        return cls(message, Severity.ERROR)

    def to_dict(self) -> dict[str, str]:
        return {"message": self.message, "severity": self.severity.value}


DiagnoseFn = Callable[[int], Sequence[Diagnostic]]
"""Pure function of the full word returning zero or more diagnostics."""


# ============================================================================
# Value tables
# ============================================================================


@dataclass(frozen=True, slots=True)
class OrderedTable:
    """Names indexed by raw value (index = extracted integer)."""

    names: tuple[str, ...]

    def lookup(self, raw: int) -> str | None:
        if 0 <= raw < len(self.names):
            return self.names[raw]
        return None


@dataclass(frozen=True, slots=True)
class SparseTable:
    """Names keyed by raw value; absent keys are unresolved."""

    names: Mapping[int, str]

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", MappingProxyType(dict(self.names)))

    def lookup(self, raw: int) -> str | None:
        return self.names.get(raw)

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.names.items())))


ValueTable = Union[OrderedTable, SparseTable]


def as_table(values: ValueTable | Sequence[str] | Mapping[int, str] | None) -> ValueTable | None:
    """Normalize a plain list or dict into a value table."""
    if values is None or isinstance(values, (OrderedTable, SparseTable)):
        return values
    if isinstance(values, Mapping):
        return SparseTable(values)
    if isinstance(values, str):
        raise ConfigurationError("Value table must be a sequence of names, not a string")
    return OrderedTable(tuple(values))


# ============================================================================
# Entries
# ============================================================================

_TYPE_PREFIXES: dict[FieldType, str] = {
    FieldType.NAMED: "bits",
    FieldType.INVALID: "invalid",
    FieldType.RESERVED: "Reserved",
    FieldType.CSR_WPRI: "WPRI",
    FieldType.CSR_RO0: "0",
}


@dataclass(frozen=True)
class FieldSpec:
    """A leaf decode unit covering bits ``[low, high]``.

    ``high`` defaults to ``low`` for single-bit fields. Plain lists and dicts
    passed as ``values`` are converted to OrderedTable / SparseTable.
    """

    low: int
    high: int | None = None
    name: str | None = None
    values: ValueTable | Sequence[str] | Mapping[int, str] | None = None
    field_type: FieldType = FieldType.NAMED
    diagnose: DiagnoseFn | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.high is None:
            object.__setattr__(self, "high", self.low)
        object.__setattr__(self, "values", as_table(self.values))

    @property
    def width(self) -> int:
        return self.high - self.low + 1

    @property
    def mask(self) -> int:
        """Mask of the covered bits in word position."""
        return ((1 << self.width) - 1) << self.low

    @property
    def label(self) -> str:
        """Display label: the name, or the type and bit range for unnamed fields."""
        if self.name is not None:
            return self.name
        span = f"[{self.low}]" if self.width == 1 else f"[{self.high}:{self.low}]"
        return _TYPE_PREFIXES[self.field_type] + span

    def with_diagnose(self, diagnose: DiagnoseFn) -> "FieldSpec":
        """Return a copy of this field carrying ``diagnose``."""
        return replace(self, diagnose=diagnose)


def reserved(low: int, high: int | None = None, name: str | None = None) -> FieldSpec:
    """Architecturally reserved range."""
    return FieldSpec(low, high, name, field_type=FieldType.RESERVED)


def invalid(low: int, high: int | None = None) -> FieldSpec:
    """Bits that carry no meaning for the mode (e.g. above a 16-bit encoding)."""
    return FieldSpec(low, high, field_type=FieldType.INVALID)


def wpri(low: int, high: int | None = None) -> FieldSpec:
    """CSR write-preserve / read-ignore range."""
    return FieldSpec(low, high, field_type=FieldType.CSR_WPRI)


def read_only_zero(low: int, high: int | None = None, name: str | None = None) -> FieldSpec:
    """CSR range hardwired to zero."""
    return FieldSpec(low, high, name, field_type=FieldType.CSR_RO0)


def _flatten(values: Iterable[Any]) -> frozenset[int]:
    flat: set[int] = set()
    for value in values:
        if isinstance(value, int):
            flat.add(value)
        else:
            flat.update(int(v) for v in value)
    return frozenset(flat)


@dataclass(frozen=True, slots=True)
class Condition:
    """Fires when field ``field`` was last decoded with a raw value in ``values``."""

    field: str
    values: frozenset[int]

    def matches(self, raw: int) -> bool:
        return raw in self.values


def when(field_name: str, *values: int | Iterable[int]) -> Condition:
    """Build a Condition from ints and/or iterables of ints."""
    if not values:
        raise ConfigurationError("Condition needs at least one value", field=field_name)
    return Condition(field_name, _flatten(values))


def when_not(field_name: str, excluded: Iterable[int], width: int) -> Condition:
    """Condition matching every ``width``-bit value except ``excluded``."""
    return Condition(field_name, frozenset(range(1 << width)) - _flatten([excluded]))


@dataclass(frozen=True)
class ConditionalMode:
    """A nested entry list gated on an earlier field's value."""

    name: str
    condition: Condition
    fields: tuple["Entry", ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))


Entry = Union[FieldSpec, ConditionalMode]


def branch(name: str, condition: Condition, *fields: Entry | Sequence[Entry]) -> ConditionalMode:
    """Build a ConditionalMode, splicing nested sequences (immediate fragment lists)."""
    flat: list[Entry] = []
    for item in fields:
        if isinstance(item, (FieldSpec, ConditionalMode)):
            flat.append(item)
        else:
            flat.extend(item)
    return ConditionalMode(name, condition, tuple(flat))


@dataclass(frozen=True)
class DecodeMode:
    """A named top-level entry list.

    A mode with a ``condition`` is a sub-decoder meant to be selected by an
    outer mode; embed it with as_branch().
    """

    name: str
    fields: tuple[Entry, ...]
    condition: Condition | None = None
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))

    def as_branch(self) -> ConditionalMode:
        if self.condition is None:
            raise ConfigurationError("Only gated modes can be embedded", mode=self.name)
        return ConditionalMode(self.name, self.condition, self.fields)


@dataclass(frozen=True)
class DecodeCategory:
    """A named group of decode modes exposed to callers."""

    name: str
    modes: tuple[DecodeMode, ...]
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "modes", tuple(self.modes))

    def mode_names(self) -> list[str]:
        return [mode.name for mode in self.modes]

    def mode(self, name: str) -> DecodeMode:
        for mode in self.modes:
            if mode.name == name:
                return mode
        raise UnknownModeError("mode", name, self.mode_names())


# ============================================================================
# Output records
# ============================================================================


@dataclass(frozen=True, slots=True)
class DecodedField:
    """One decoded field, as produced by the engine.

    Attributes:
        low, high: Inclusive bit range.
        name: Field label (``rd``, ``imm[8:6]``, ``Reserved[31:20]``).
        display: Resolved symbol, or the raw value in hex when unresolved.
        raw: Extracted integer.
        field_type: Special type tag of the source field.
        resolved: False when a value table had no entry for ``raw``.
        diagnostics: Annotations in the order the tables produced them.
        path: Conditional branch names leading to this record, outermost first.
    """

    low: int
    high: int
    name: str
    display: str
    raw: int
    field_type: FieldType = FieldType.NAMED
    resolved: bool = True
    diagnostics: tuple[Diagnostic, ...] = ()
    path: tuple[str, ...] = ()

    @property
    def bits(self) -> str:
        if self.low == self.high:
            return f"[{self.low}]"
        return f"[{self.high}:{self.low}]"

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable representation."""
        return {
            "low": self.low,
            "high": self.high,
            "name": self.name,
            "value": self.display,
            "raw": self.raw,
            "type": self.field_type.value,
            "resolved": self.resolved,
            "path": list(self.path),
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }
