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

"""Exception hierarchy for specification and lookup errors.

Decoding itself never fails: unresolved values and reserved encodings are
reported through the records' diagnostics. The exceptions here describe a
malformed specification table, or a caller asking for a mode that does not
exist.

Errors carry keyword context identifying the offending field or mode:
    >>> raise BitRangeError("Bit range exceeds word width", field="rd", high=64)
    BitRangeError: Bit range exceeds word width (field='rd', high=64)
"""

from typing import Any


class RvFieldsError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(RvFieldsError):
    """A specification table is malformed."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(self._format())

    def _format(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value!r}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class BitRangeError(ConfigurationError):
    """A field's bit range is inverted, negative or past the word width."""


class OverlapError(ConfigurationError):
    """Two sibling leaf fields claim the same bits."""


class DanglingConditionError(ConfigurationError):
    """A conditional mode references a field that was not decoded before it."""


class UnknownModeError(RvFieldsError, KeyError):
    """A category or mode name is not registered."""

    def __init__(self, kind: str, name: str, available: list[str]) -> None:
        self.kind = kind
        self.name = name
        self.available = available
        super().__init__(f"Unknown {kind} {name!r}; available: {', '.join(available)}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])
