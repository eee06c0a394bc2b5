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

"""Central configuration for the decoder.

Configuration
=============

This module contains the configuration constants used throughout the decoder.
Centralizing these values keeps the tables, the engine and the front end in
agreement about word widths and defaults.

Organization:
    Constants are organized into logical sections:
    - Word Geometry (decoded word width, masks, hex rendering)
    - RISC-V Encoding Widths (base, compressed, CSR address space)
    - Front End Defaults (category/mode selection, logging)

Usage:
    Import specific constants as needed:
    >>> from rvfields.config import MASK64, WORD_WIDTH
    >>> word = value & MASK64

    Or build a DecoderConfig to override the defaults for a registry:
    >>> from rvfields.config import DecoderConfig
    >>> config = DecoderConfig(validate_on_load=False)
"""

import os
from dataclasses import dataclass
from typing import Final

# ============================================================================
# Word Geometry
# ============================================================================

WORD_WIDTH: Final[int] = 64
"""Width in bits of the value handed to the decoder."""

MASK64: Final[int] = (1 << 64) - 1
"""64-bit mask."""

HEX_DIGITS_64: Final[int] = 16
"""Number of hex digits in a zero-padded 64-bit rendering."""

# ============================================================================
# RISC-V Encoding Widths
# ============================================================================

INSTRUCTION_WIDTH: Final[int] = 32
"""Width of a base (uncompressed) instruction in bits."""

COMPRESSED_INSTRUCTION_WIDTH: Final[int] = 16
"""Width of a C-extension instruction in bits."""

CSR_ADDRESS_WIDTH: Final[int] = 12
"""Width of a CSR address in bits."""

CSR_ADDRESS_COUNT: Final[int] = 1 << CSR_ADDRESS_WIDTH
"""Size of the CSR address space (4096 addresses)."""

NUM_REGISTERS: Final[int] = 32
"""Number of integer (and floating-point) registers."""

# ============================================================================
# Front End Defaults
# ============================================================================

DEFAULT_CATEGORY: Final[str] = "instruction"
"""Category selected when the caller does not name one."""

DEFAULT_MODE: Final[str] = "instruction"
"""Mode selected when the caller does not name one."""

LOG_LEVEL_ENV_VAR: Final[str] = "RVFIELDS_LOG_LEVEL"
"""Environment variable holding the CLI log level."""

DEFAULT_LOG_LEVEL: Final[str] = "WARNING"
"""Log level used when neither --log-level nor the environment sets one."""

VALIDATE_ENV_VAR: Final[str] = "RVFIELDS_VALIDATE"
"""Environment variable that can disable load-time table validation."""

_FALSE_STRINGS: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class DecoderConfig:
    """Options a registry is built with.

    Attributes:
        word_width: Width of the decoded word. Field ranges past
            ``word_width - 1`` are rejected at load time.
        validate_on_load: Run the structural table checks (bit ranges,
            sibling overlap, condition references) when the registry is built.
    """

    word_width: int = WORD_WIDTH
    validate_on_load: bool = True

    @classmethod
    def from_env(cls) -> "DecoderConfig":
        """Build a config honoring RVFIELDS_VALIDATE."""
        raw = os.environ.get(VALIDATE_ENV_VAR)
        if raw is None:
            return cls()
        return cls(validate_on_load=raw.strip().lower() not in _FALSE_STRINGS)
