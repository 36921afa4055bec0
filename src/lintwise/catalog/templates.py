# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Built-in linter templates and the known-conflict table."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

from ..severity import Severity
from .models import LinterCategory, LinterTemplate

# Each group lists tools that must not be enabled together; the first present
# name in a group wins.
KNOWN_CONFLICTS: Final[tuple[tuple[str, ...], ...]] = (
    ("prettier", "eslint-plugin-prettier"),
    ("black", "autopep8"),
    ("pylint", "flake8"),
)

_NODE_EXCLUDES: Final[tuple[str, ...]] = ("node_modules/**", "dist/**")


class CatalogIntegrityError(ValueError):
    """Raised when the template catalogue contains duplicate names."""


@dataclass(frozen=True, slots=True)
class TemplateRegistry:
    """Immutable catalogue of linter templates keyed by name."""

    templates: tuple[LinterTemplate, ...]
    conflicts: tuple[tuple[str, ...], ...] = KNOWN_CONFLICTS
    _by_name: Mapping[str, LinterTemplate] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Index templates by name, rejecting duplicates."""

        index: dict[str, LinterTemplate] = {}
        for template in self.templates:
            if template.name in index:
                raise CatalogIntegrityError(f"Duplicate linter template '{template.name}'")
            index[template.name] = template
        object.__setattr__(self, "_by_name", MappingProxyType(index))

    def __iter__(self) -> Iterator[LinterTemplate]:
        return iter(self.templates)

    def __len__(self) -> int:
        return len(self.templates)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> LinterTemplate | None:
        """Return the template called ``name`` when catalogued."""

        return self._by_name.get(name)

    def for_language(self, language: str) -> tuple[LinterTemplate, ...]:
        """Return templates that lint ``language`` in catalogue order."""

        return tuple(template for template in self.templates if template.applies_to_language(language))

    def for_framework(self, framework: str) -> tuple[LinterTemplate, ...]:
        """Return framework extras registered for ``framework``."""

        return tuple(template for template in self.templates if framework in template.frameworks)

    def for_categories(
        self,
        categories: Iterable[LinterCategory],
        languages: Sequence[str],
    ) -> tuple[LinterTemplate, ...]:
        """Return templates in ``categories`` that apply to any of ``languages``."""

        wanted = frozenset(categories)
        return tuple(
            template
            for template in self.templates
            if template.category in wanted and template.applies_to_any(languages)
        )

    def find_conflicts(self, names: Iterable[str]) -> list[tuple[str, ...]]:
        """Return conflict groups with at least two members present in ``names``.

        Members of each returned group keep the order of the conflict table.
        """

        present = set(names)
        groups: list[tuple[str, ...]] = []
        for group in self.conflicts:
            members = tuple(name for name in group if name in present)
            if len(members) > 1:
                groups.append(members)
        return groups

    def declared_conflicts(self, enabled: Iterable[str]) -> list[str]:
        """Return templates whose ``conflicts_with`` names an enabled linter.

        Templates that are themselves enabled are never returned.
        """

        enabled_set = set(enabled)
        return [
            template.name
            for template in self.templates
            if template.name not in enabled_set and enabled_set.intersection(template.conflicts_with)
        ]


BUILTIN_TEMPLATES: Final[tuple[LinterTemplate, ...]] = (
    LinterTemplate(
        name="eslint",
        languages=("javascript", "typescript"),
        category=LinterCategory.LANGUAGE,
        severity=Severity.ERROR,
        rules={"no-unused-vars": "error", "no-console": "warn", "prefer-const": "error"},
        file_patterns=("**/*.js", "**/*.jsx", "**/*.ts", "**/*.tsx"),
        exclude_patterns=(*_NODE_EXCLUDES, "build/**"),
    ),
    LinterTemplate(
        name="prettier",
        languages=("javascript", "typescript", "css", "html", "json", "markdown"),
        category=LinterCategory.FORMAT,
        severity=Severity.WARNING,
        rules={"printWidth": 100, "tabWidth": 2, "semi": True, "singleQuote": True},
        file_patterns=("**/*.js", "**/*.ts", "**/*.css", "**/*.html", "**/*.json", "**/*.md"),
        exclude_patterns=_NODE_EXCLUDES,
    ),
    LinterTemplate(
        name="eslint-plugin-prettier",
        languages=("javascript", "typescript"),
        category=LinterCategory.FORMAT,
        severity=Severity.WARNING,
        rules={"prettier/prettier": "error"},
        file_patterns=("**/*.js", "**/*.jsx", "**/*.ts", "**/*.tsx"),
        exclude_patterns=_NODE_EXCLUDES,
        conflicts_with=("prettier",),
    ),
    LinterTemplate(
        name="pylint",
        languages=("python",),
        category=LinterCategory.LANGUAGE,
        severity=Severity.ERROR,
        rules={"max-line-length": 88, "disable": ["C0114", "C0115", "C0116"]},
        file_patterns=("**/*.py",),
        exclude_patterns=("__pycache__/**", "*.pyc", "venv/**", ".venv/**"),
    ),
    LinterTemplate(
        name="flake8",
        languages=("python",),
        category=LinterCategory.LANGUAGE,
        severity=Severity.WARNING,
        rules={"max-line-length": 88},
        file_patterns=("**/*.py",),
        exclude_patterns=("__pycache__/**", "venv/**", ".venv/**"),
        conflicts_with=("pylint",),
    ),
    LinterTemplate(
        name="black",
        languages=("python",),
        category=LinterCategory.FORMAT,
        severity=Severity.WARNING,
        rules={"line-length": 88, "target-version": ["py312"]},
        file_patterns=("**/*.py",),
        exclude_patterns=("__pycache__/**", "venv/**"),
    ),
    LinterTemplate(
        name="autopep8",
        languages=("python",),
        category=LinterCategory.FORMAT,
        severity=Severity.WARNING,
        rules={"max-line-length": 88, "aggressive": 1},
        file_patterns=("**/*.py",),
        exclude_patterns=("__pycache__/**", "venv/**"),
        conflicts_with=("black",),
    ),
    LinterTemplate(
        name="bandit",
        languages=("python",),
        category=LinterCategory.SECURITY,
        severity=Severity.ERROR,
        rules={"skips": ["B101"], "severity": "medium"},
        file_patterns=("**/*.py",),
        exclude_patterns=("tests/**", "test/**"),
    ),
    LinterTemplate(
        name="secretlint",
        languages=("javascript", "typescript", "python", "java", "go", "rust"),
        category=LinterCategory.SECURITY,
        severity=Severity.ERROR,
        rules={"preset": "recommend", "disableRules": []},
        file_patterns=("**/*",),
        exclude_patterns=(*_NODE_EXCLUDES, "build/**", ".git/**"),
    ),
    LinterTemplate(
        name="semgrep",
        languages=("javascript", "typescript", "python", "java", "go"),
        category=LinterCategory.SECURITY,
        severity=Severity.ERROR,
        rules={"config": "auto", "exclude": ["test/**", "tests/**"]},
        file_patterns=("**/*.js", "**/*.ts", "**/*.py", "**/*.java", "**/*.go"),
        exclude_patterns=("node_modules/**", "test/**", "tests/**"),
    ),
    LinterTemplate(
        name="cspell",
        languages=("javascript", "typescript", "python", "markdown", "html"),
        category=LinterCategory.QUALITY,
        severity=Severity.WARNING,
        rules={"language": "en", "allowCompoundWords": True},
        file_patterns=("**/*.js", "**/*.ts", "**/*.py", "**/*.md", "**/*.html"),
        exclude_patterns=_NODE_EXCLUDES,
    ),
    LinterTemplate(
        name="stylelint",
        languages=("css", "scss", "less"),
        category=LinterCategory.LANGUAGE,
        severity=Severity.ERROR,
        rules={
            "extends": "stylelint-config-standard",
            "rules": {"color-hex-case": "lower", "color-hex-length": "short"},
        },
        file_patterns=("**/*.css", "**/*.scss", "**/*.less"),
        exclude_patterns=_NODE_EXCLUDES,
    ),
    LinterTemplate(
        name="markdownlint",
        languages=("markdown",),
        category=LinterCategory.DOCUMENTATION,
        severity=Severity.WARNING,
        rules={"MD013": False, "MD033": False},
        file_patterns=("**/*.md",),
        exclude_patterns=("node_modules/**",),
    ),
    LinterTemplate(
        name="eslint-plugin-react",
        frameworks=("react",),
        home_language="javascript",
        category=LinterCategory.LANGUAGE,
        severity=Severity.ERROR,
        rules={"react/prop-types": "error", "react/jsx-uses-react": "error", "react/jsx-uses-vars": "error"},
        file_patterns=("**/*.jsx", "**/*.tsx"),
        exclude_patterns=("node_modules/**",),
        version="latest",
    ),
    LinterTemplate(
        name="eslint-plugin-vue",
        frameworks=("vue",),
        home_language="javascript",
        category=LinterCategory.LANGUAGE,
        severity=Severity.ERROR,
        rules={"vue/no-unused-vars": "error", "vue/require-default-prop": "warn"},
        file_patterns=("**/*.vue",),
        exclude_patterns=("node_modules/**",),
        version="latest",
    ),
)

DEFAULT_REGISTRY: Final[TemplateRegistry] = TemplateRegistry(BUILTIN_TEMPLATES)

__all__ = [
    "BUILTIN_TEMPLATES",
    "CatalogIntegrityError",
    "DEFAULT_REGISTRY",
    "KNOWN_CONFLICTS",
    "TemplateRegistry",
]
