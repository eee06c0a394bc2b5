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

"""Text and JSON rendering of decoded records."""

import json
from collections.abc import Sequence

from rvfields.model import DecodedField

HEADERS = ("bits", "name", "value", "notes")


def records_to_json(records: Sequence[DecodedField], indent: int | None = 2) -> str:
    """Serialize records as an ordered JSON array."""
    return json.dumps([record.to_dict() for record in records], indent=indent)


def _notes(record: DecodedField) -> list[str]:
    return [f"[{diag.severity.value}] {diag.message}" for diag in record.diagnostics]


def format_table(records: Sequence[DecodedField]) -> str:
    """Fixed-width table, one row per record and one extra row per additional note.

    Example:
        bits     name         value   notes
        [1:0]    opcode[1:0]  C1
        [15:13]  funct3       LI
        [11:7]   rd           a0
        [6:2]    imm[4:0]     0x0     [info] Immediate(CI/1-type): 0x0 -> ...
    """
    rows: list[tuple[str, str, str, str]] = []
    for record in records:
        notes = _notes(record) or [""]
        rows.append((record.bits, record.name, record.display, notes[0]))
        rows.extend(("", "", "", note) for note in notes[1:])

    widths = [len(header) for header in HEADERS]
    for row in rows:
        for i, cell in enumerate(row[:3]):
            widths[i] = max(widths[i], len(cell))

    def line(cells: Sequence[str]) -> str:
        padded = [cell.ljust(widths[i]) for i, cell in enumerate(cells[:3])]
        return "  ".join([*padded, cells[3]]).rstrip()

    return "\n".join([line(HEADERS), *(line(row) for row in rows)])
