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

"""Static specification tables.

Categories
==========

    general       Raw slices of the word (nibbles, bytes, half-words)
    instruction   RV64GC instruction words, compressed and base
    csr           CSR addresses and machine-level CSR contents

Tables are immutable and built once at import time.
"""

from typing import Final

from rvfields.model import DecodeCategory
from rvfields.tables.csr_views import CSR_CATEGORY
from rvfields.tables.general import GENERAL_CATEGORY
from rvfields.tables.instruction import INSTRUCTION_CATEGORY

BUILTIN_CATEGORIES: Final[tuple[DecodeCategory, ...]] = (
    GENERAL_CATEGORY,
    INSTRUCTION_CATEGORY,
    CSR_CATEGORY,
)

__all__ = ["BUILTIN_CATEGORIES", "CSR_CATEGORY", "GENERAL_CATEGORY", "INSTRUCTION_CATEGORY"]
