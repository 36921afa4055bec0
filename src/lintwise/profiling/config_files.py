# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate tooling configuration files inside a repository walk."""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable

from ..constants import CONFIG_FILE_PATTERNS
from ..discovery.walker import WalkEntry
from ..models import ConfigFileEntry, Importance


def matches_config_pattern(relative: str, pattern: str) -> bool:
    """Return ``True`` when ``relative`` matches a config-file ``pattern``.

    Patterns containing ``/`` are matched against the full repository-relative
    path; bare patterns are matched against the file name at any depth.
    """

    if "/" in pattern:
        return fnmatch.fnmatchcase(relative, pattern)
    return fnmatch.fnmatchcase(relative.rsplit("/", 1)[-1], pattern)


def locate_config_files(entries: Iterable[WalkEntry]) -> dict[str, ConfigFileEntry]:
    """Return located configuration files keyed by ``<type>_<index>``.

    Each file is tagged by the first pattern it matches. Keys are numbered in
    walk order, so identical trees produce identical maps.

    Args:
        entries: File entries produced by a tree walk.

    Returns:
        dict[str, ConfigFileEntry]: Located files keyed for lookup.
    """

    located: dict[str, ConfigFileEntry] = {}
    for entry in entries:
        for pattern, config_type, importance in CONFIG_FILE_PATTERNS:
            if matches_config_pattern(entry.relative, pattern):
                key = f"{config_type}_{len(located)}"
                located[key] = ConfigFileEntry(
                    path=entry.relative,
                    type=config_type,
                    importance=Importance(importance),
                )
                break
    return located


__all__ = ["locate_config_files", "matches_config_pattern"]
