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

"""Decode category registry.

A DecoderRegistry owns a set of DecodeCategory objects, checks every mode's
tables once when it is built, and decodes words against a mode selected by
category and mode name.

Usage:
    >>> registry = default_registry()
    >>> registry.categories()
    ['general', 'instruction', 'csr']
    >>> records = registry.decode(0x4501, "instruction", "instruction")   # c.li a0, 0
"""

import functools
import logging
from collections.abc import Iterable

from rvfields.config import DEFAULT_CATEGORY, DEFAULT_MODE, DecoderConfig
from rvfields.engine import decode, validate_entries
from rvfields.errors import ConfigurationError, UnknownModeError
from rvfields.model import DecodeCategory, DecodedField, DecodeMode
from rvfields.tables import BUILTIN_CATEGORIES

logger = logging.getLogger(__name__)


class DecoderRegistry:
    """Named decode categories with load-time validation."""

    def __init__(
        self,
        categories: Iterable[DecodeCategory] = BUILTIN_CATEGORIES,
        config: DecoderConfig | None = None,
    ) -> None:
        self.config = config if config is not None else DecoderConfig()
        self._categories: dict[str, DecodeCategory] = {}
        for category in categories:
            if category.name in self._categories:
                raise ConfigurationError("Duplicate category", category=category.name)
            self._check_category(category)
            self._categories[category.name] = category
        logger.debug(
            "Registered %d categories (%d modes, validated=%s)",
            len(self._categories),
            sum(len(category.modes) for category in self._categories.values()),
            self.config.validate_on_load,
        )

    def _check_category(self, category: DecodeCategory) -> None:
        seen: set[str] = set()
        for mode in category.modes:
            if mode.name in seen:
                raise ConfigurationError("Duplicate mode", category=category.name, mode=mode.name)
            seen.add(mode.name)
            if mode.condition is not None:
                raise ConfigurationError(
                    "Gated modes must be embedded in another mode",
                    category=category.name,
                    mode=mode.name,
                )
            if self.config.validate_on_load:
                validate_entries(mode.fields, word_width=self.config.word_width, mode=mode.name)

    def categories(self) -> list[str]:
        return list(self._categories)

    def category(self, name: str) -> DecodeCategory:
        try:
            return self._categories[name]
        except KeyError:
            raise UnknownModeError("category", name, self.categories()) from None

    def mode(self, category: str, mode: str) -> DecodeMode:
        return self.category(category).mode(mode)

    def decode(
        self, word: int, category: str = DEFAULT_CATEGORY, mode: str = DEFAULT_MODE
    ) -> list[DecodedField]:
        """Decode ``word`` with the named mode.

        Raises:
            UnknownModeError: If the category or mode is not registered.
        """
        selected = self.mode(category, mode)
        return decode(word, selected.fields, word_width=self.config.word_width)


@functools.lru_cache(maxsize=None)
def default_registry() -> DecoderRegistry:
    """Registry of the built-in categories, built on first use."""
    return DecoderRegistry(BUILTIN_CATEGORIES, DecoderConfig.from_env())


def decode_value(
    word: int, category: str = DEFAULT_CATEGORY, mode: str = DEFAULT_MODE
) -> list[DecodedField]:
    """Decode ``word`` with the default registry."""
    return default_registry().decode(word, category, mode)
