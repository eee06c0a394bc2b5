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

"""Plain bit-slice views of a 64-bit value.

These modes carry no ISA knowledge; they split the word into equal slices and
show each slice in hex.
"""

from typing import Final

from rvfields.model import DecodeCategory, DecodeMode, FieldSpec


def _slices(width: int, label: str) -> tuple[FieldSpec, ...]:
    return tuple(
        FieldSpec(low, low + width - 1, label.format(high=low + width - 1, low=low, index=low // width))
        for low in range(0, 64, width)
    )


GENERAL_MODE: Final = DecodeMode(
    "general", _slices(4, "bits[{high}:{low}]"), description="16 nibbles, low to high"
)
BYTES_MODE: Final = DecodeMode("bytes", _slices(8, "byte[{index}]"), description="8 bytes")
HALVES_MODE: Final = DecodeMode("halves", _slices(16, "[{high}:{low}]"), description="4 half-words")

GENERAL_CATEGORY: Final = DecodeCategory(
    "general", (GENERAL_MODE, BYTES_MODE, HALVES_MODE), description="Raw bit slices"
)
