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

"""Bit arithmetic primitives.

Bit Extraction and Immediate Rendering
======================================

Every field the decoder reports is an inclusive bit range ``[low, high]`` of a
64-bit word. This module provides the two primitives the rest of the package
builds on:

    extract_bits(word, low, high)
        ``(word >> low) & mask(high - low + 1)``

    render_immediate(value, bit_width, signed)
        Sign- or zero-extends a ``bit_width``-bit value to 64 bits and renders
        it as the original hex, the padded 64-bit hex and a decimal.

render_immediate is the single place sign extension happens; immediate
layouts, CSR views and the CLI all go through it.

Example:
    >>> extract_bits(0x00A00513, 7, 11)   # rd of "addi a0, zero, 10"
    10
    >>> str(render_immediate(0x3F, 6))
    '0x3f -> 0xffffffffffffffff (-1)'
"""

from dataclasses import dataclass

from rvfields.config import HEX_DIGITS_64, MASK64, WORD_WIDTH
from rvfields.errors import BitRangeError


def bit_mask(width: int) -> int:
    """Return a mask of ``width`` low-order ones."""
    return (1 << width) - 1


def check_bit_range(low: int, high: int, word_width: int = WORD_WIDTH) -> None:
    """Raise BitRangeError unless ``0 <= low <= high < word_width``."""
    if low < 0 or high < low:
        raise BitRangeError("Invalid bit range", low=low, high=high)
    if high >= word_width:
        raise BitRangeError(
            "Bit range exceeds word width", low=low, high=high, word_width=word_width
        )


def extract_bits(word: int, low: int, high: int | None = None) -> int:
    """Extract the inclusive bit range ``[low, high]`` of ``word``.

    Args:
        word: Unsigned value of up to 64 bits.
        low: Lowest bit position of the range.
        high: Highest bit position (defaults to ``low`` for a single bit).

    Returns:
        The extracted bits, right-aligned.

    Raises:
        BitRangeError: If the range is inverted or reaches past bit 63.
    """
    if high is None:
        high = low
    check_bit_range(low, high)
    return (word >> low) & bit_mask(high - low + 1)


def to_signed64(value: int) -> int:
    """Interpret a 64-bit pattern as a two's complement integer."""
    value &= MASK64
    return value - (1 << 64) if value >= 1 << 63 else value


def sign_extend(value: int, bit_width: int) -> int:
    """Sign-extend a ``bit_width``-bit value to a 64-bit pattern."""
    if (value >> (bit_width - 1)) & 1:
        return (value | (bit_mask(WORD_WIDTH - bit_width) << bit_width)) & MASK64
    return value & MASK64


@dataclass(frozen=True, slots=True)
class RenderedImmediate:
    """An immediate rendered for display.

    Attributes:
        value: The reconstructed immediate as extracted (before extension).
        raw_hex: ``value`` in hex, unpadded (``0x3f``).
        extended_hex: The 64-bit extended pattern, 16 hex digits.
        decimal: Signed (or unsigned) decimal interpretation.
    """

    value: int
    raw_hex: str
    extended_hex: str
    decimal: int

    def __str__(self) -> str:
        return f"{self.raw_hex} -> {self.extended_hex} ({self.decimal})"


def render_immediate(value: int, bit_width: int, signed: bool = True) -> RenderedImmediate:
    """Render an immediate of ``bit_width`` bits.

    When ``signed`` is set, bit ``bit_width - 1`` is the sign bit: if it is
    set every bit above it is filled with ones and the 64-bit pattern is read
    as a signed integer. Otherwise the value is zero-extended and the decimal
    is the unsigned value itself.

    Args:
        value: Reconstructed immediate (non-negative).
        bit_width: Logical width of the immediate, 1..64.
        signed: Whether the immediate is sign-extended.

    Returns:
        RenderedImmediate with hex, extended hex and decimal renderings.
    """
    if not 1 <= bit_width <= WORD_WIDTH:
        raise BitRangeError("Immediate width out of range", bit_width=bit_width)

    if signed:
        extended = sign_extend(value, bit_width)
        decimal = to_signed64(extended)
    else:
        extended = value & MASK64
        decimal = value

    return RenderedImmediate(
        value=value,
        raw_hex=f"{value:#x}",
        extended_hex=f"0x{extended:0{HEX_DIGITS_64}x}",
        decimal=decimal,
    )
