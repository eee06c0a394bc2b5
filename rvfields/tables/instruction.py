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

"""The ``instruction`` mode: quadrant dispatch over compressed and base tables."""

from typing import Final

from rvfields.model import DecodeCategory, DecodeMode, FieldSpec
from rvfields.tables.rvc import C0_MODE, C1_MODE, C2_MODE
from rvfields.tables.rvi import RVI_MODE

QUADRANTS: Final[tuple[str, ...]] = ("C0", "C1", "C2", "I")
"""opcode[1:0] -> quadrant; ``11`` is a 32-bit base instruction."""

QUADRANT: Final = FieldSpec(0, 1, "opcode[1:0]", QUADRANTS)

INSTRUCTION_MODE: Final = DecodeMode(
    "instruction",
    (
        QUADRANT,
        C0_MODE.as_branch(),
        C1_MODE.as_branch(),
        C2_MODE.as_branch(),
        RVI_MODE.as_branch(),
    ),
    description="RV64GC instruction word (16-bit compressed or 32-bit base)",
)

INSTRUCTION_CATEGORY: Final = DecodeCategory(
    "instruction", (INSTRUCTION_MODE,), description="Instruction encodings"
)
