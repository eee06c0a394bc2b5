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

"""rvfields - RISC-V bit-field decoder.

This package breaks 64-bit values into annotated bit fields: RV64GC
instruction words (16-bit compressed and 32-bit base encodings), CSR
addresses and machine-level CSR contents, and plain bit slices. Decoding is
driven by immutable specification tables interpreted by a small recursive
engine; HINT, Reserved and alias encodings are reported as diagnostics on the
decoded records.
"""

from ._version import __version__
from .bits import extract_bits, render_immediate, sign_extend
from .csr import classify_csr, csr_name
from .engine import decode, validate_entries
from .errors import ConfigurationError, RvFieldsError, UnknownModeError
from .model import DecodedField, Diagnostic, FieldSpec, Severity
from .registry import DecoderRegistry, decode_value, default_registry

__all__ = [
    "__version__",
    "ConfigurationError",
    "DecodedField",
    "DecoderRegistry",
    "Diagnostic",
    "FieldSpec",
    "RvFieldsError",
    "Severity",
    "UnknownModeError",
    "classify_csr",
    "csr_name",
    "decode",
    "decode_value",
    "default_registry",
    "extract_bits",
    "render_immediate",
    "sign_extend",
    "validate_entries",
]
