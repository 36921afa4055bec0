# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data model describing catalogued linter templates."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..severity import Severity


class LinterCategory(StrEnum):
    """Enumerate the families a linter template belongs to."""

    LANGUAGE = "language"
    SECURITY = "security"
    QUALITY = "quality"
    FORMAT = "format"
    DOCUMENTATION = "documentation"
    PERFORMANCE = "performance"
    ACCESSIBILITY = "accessibility"


# Categories pulled in for every detected language in addition to language linters.
QUALITY_CATEGORIES: frozenset[LinterCategory] = frozenset(
    {LinterCategory.QUALITY, LinterCategory.FORMAT, LinterCategory.DOCUMENTATION}
)


class LinterTemplate(BaseModel):
    """Static, read-only definition of a lint/format/security tool."""

    model_config = ConfigDict(frozen=True)

    name: str
    languages: tuple[str, ...] = Field(default_factory=tuple)
    frameworks: tuple[str, ...] = Field(default_factory=tuple)
    category: LinterCategory
    severity: Severity
    rules: dict[str, Any] = Field(default_factory=dict)
    file_patterns: tuple[str, ...] = Field(default_factory=tuple)
    exclude_patterns: tuple[str, ...] = Field(default_factory=tuple)
    conflicts_with: tuple[str, ...] = Field(default_factory=tuple)
    version: str | None = None
    home_language: str | None = None

    @property
    def default_language(self) -> str:
        """Return the language a template is bound to when none is implied.

        Framework extras declare no ``languages`` and fall back to
        ``home_language``.
        """

        if self.languages:
            return self.languages[0]
        return self.home_language or "generic"

    def applies_to_language(self, language: str) -> bool:
        """Return ``True`` when the template lints ``language``."""

        return language in self.languages

    def applies_to_any(self, languages: tuple[str, ...] | list[str]) -> bool:
        """Return ``True`` when the template lints any of ``languages``."""

        return any(language in self.languages for language in languages)


__all__ = ["LinterCategory", "LinterTemplate", "QUALITY_CATEGORIES"]
