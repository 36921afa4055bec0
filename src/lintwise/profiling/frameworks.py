# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Manifest heuristics for frameworks and presence checks for build tools."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Final

from ..constants import BUILD_TOOL_FILES, JAVASCRIPT_FRAMEWORK_KEYS, MANIFEST_FRAMEWORKS, SubstringRules

LOGGER = logging.getLogger(__name__)

PACKAGE_JSON: Final[str] = "package.json"
_JAVASCRIPT_LANGUAGES: Final[frozenset[str]] = frozenset({"javascript", "typescript"})
_DEPENDENCY_SECTIONS: Final[tuple[str, ...]] = ("dependencies", "devDependencies")


def _dedupe(items: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for item in items:
        seen.setdefault(item, None)
    return list(seen)


def _read_package_dependencies(root: Path) -> set[str]:
    manifest = root / PACKAGE_JSON
    if not manifest.is_file():
        return set()
    try:
        payload = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        LOGGER.warning("Ignoring unreadable %s: %s", manifest, exc)
        return set()
    if not isinstance(payload, Mapping):
        LOGGER.warning("Ignoring %s: top-level value is not an object", manifest)
        return set()
    names: set[str] = set()
    for section in _DEPENDENCY_SECTIONS:
        deps = payload.get(section)
        if isinstance(deps, Mapping):
            names.update(str(key) for key in deps)
    return names


def detect_javascript_frameworks(root: Path) -> list[str]:
    """Return frameworks declared in ``package.json`` dependencies.

    Args:
        root: Repository root containing the manifest.

    Returns:
        list[str]: Frameworks in table order, deduplicated.
    """

    dependencies = _read_package_dependencies(root)
    found: list[str] = []
    for key, frameworks in JAVASCRIPT_FRAMEWORK_KEYS:
        if key in dependencies:
            found.extend(frameworks)
    return _dedupe(found)


def _scan_manifest(manifest: Path, rules: SubstringRules) -> list[str]:
    if not manifest.is_file():
        return []
    try:
        content = manifest.read_text(encoding="utf-8").lower()
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.warning("Ignoring unreadable %s: %s", manifest, exc)
        return []
    return [framework for needle, framework in rules if needle in content]


def detect_manifest_frameworks(root: Path, language: str) -> list[str]:
    """Return frameworks named in the manifests associated with ``language``."""

    found: list[str] = []
    for manifest_name, rules in MANIFEST_FRAMEWORKS.get(language, ()):
        found.extend(_scan_manifest(root / manifest_name, rules))
    return _dedupe(found)


def detect_frameworks(root: Path, languages: Sequence[str]) -> list[str]:
    """Return frameworks for every detected language, first seen first.

    Manifest read or parse failures are logged and contribute nothing.

    Args:
        root: Repository root.
        languages: Languages detected for the repository.

    Returns:
        list[str]: Deduplicated framework names.
    """

    found: list[str] = []
    if _JAVASCRIPT_LANGUAGES.intersection(languages):
        found.extend(detect_javascript_frameworks(root))
    for language in MANIFEST_FRAMEWORKS:
        if language in languages:
            found.extend(detect_manifest_frameworks(root, language))
    return _dedupe(found)


def detect_build_tools(root: Path) -> list[str]:
    """Return build tools whose marker file exists at the repository root."""

    return _dedupe(tool for filename, tool in BUILD_TOOL_FILES if (root / filename).is_file())


__all__ = [
    "detect_build_tools",
    "detect_frameworks",
    "detect_javascript_frameworks",
    "detect_manifest_frameworks",
]
