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

"""Register ABI names."""

from typing import Final

REGISTER_NAMES: Final[tuple[str, ...]] = (
    "zero", "ra", "sp", "gp", "tp", "t0", "t1", "t2",
    "s0/fp", "s1", "a0", "a1", "a2", "a3", "a4", "a5",
    "a6", "a7", "s2", "s3", "s4", "s5", "s6", "s7",
    "s8", "s9", "s10", "s11", "t3", "t4", "t5", "t6",
)
"""Integer registers x0-x31."""

FP_REGISTER_NAMES: Final[tuple[str, ...]] = (
    *(f"ft{i}" for i in range(8)),
    "fs0", "fs1",
    *(f"fa{i}" for i in range(8)),
    *(f"fs{i}" for i in range(2, 12)),
    *(f"ft{i}" for i in range(8, 12)),
)
"""Floating-point registers f0-f31."""

COMPRESSED_REGISTER_NAMES: Final[tuple[str, ...]] = REGISTER_NAMES[8:16]
"""x8-x15, the registers reachable through a 3-bit rd'/rs1'/rs2' field."""

COMPRESSED_FP_REGISTER_NAMES: Final[tuple[str, ...]] = FP_REGISTER_NAMES[8:16]
