# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Extension and filename based language detection."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ..constants import (
    DATA_LANGUAGES,
    DOCKERFILE_PREFIX,
    EXTENSION_LANGUAGES,
    FILENAME_LANGUAGES,
    PRIMARY_FILE_SHARE,
    PRIMARY_LIMIT,
    PRIMARY_MIN_FILES,
    SECONDARY_FILE_SHARE,
    SECONDARY_LIMIT,
    SECONDARY_MIN_FILES,
)
from ..discovery.walker import WalkEntry

LOGGER = logging.getLogger(__name__)

_DEFAULT_LINE_WORKERS: Final[int] = 8


def language_for(path: Path) -> str | None:
    """Return the language implied by ``path`` or ``None`` when unknown.

    Args:
        path: File path to classify.

    Returns:
        str | None: Language identifier such as ``"python"``.
    """

    name = path.name.lower()
    if name in FILENAME_LANGUAGES:
        return FILENAME_LANGUAGES[name]
    if name.startswith(DOCKERFILE_PREFIX):
        return FILENAME_LANGUAGES["dockerfile"]
    return EXTENSION_LANGUAGES.get(path.suffix.lower())


def count_lines(path: Path) -> int:
    """Return the number of lines in ``path``; unreadable files count as zero."""

    try:
        data = path.read_bytes()
    except OSError as exc:
        LOGGER.debug("Unable to read %s for line counting: %s", path, exc)
        return 0
    if not data:
        return 0
    return data.count(b"\n") + 1


@dataclass(frozen=True, slots=True)
class LanguageStats:
    """File and line totals for one language."""

    language: str
    files: int
    lines: int
    file_share: float


@dataclass(frozen=True, slots=True)
class Prevalence:
    """Primary/secondary split produced by :meth:`LanguageDetector.prevalence`."""

    primary: tuple[str, ...]
    secondary: tuple[str, ...]
    stats: tuple[LanguageStats, ...]


class LanguageDetector:
    """Count and rank languages found in a repository walk."""

    def __init__(self, *, line_workers: int = _DEFAULT_LINE_WORKERS) -> None:
        self._line_workers = max(1, line_workers)

    @staticmethod
    def count_files(entries: Iterable[WalkEntry]) -> Counter[str]:
        """Return per-language file counts for ``entries``."""

        counts: Counter[str] = Counter()
        for entry in entries:
            language = language_for(entry.path)
            if language is not None:
                counts[language] += 1
        return counts

    def detect(self, entries: Iterable[WalkEntry]) -> list[str]:
        """Return detected languages sorted by file count, most frequent first.

        Ties are broken alphabetically so identical trees yield identical
        orderings.
        """

        counts = self.count_files(entries)
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [language for language, count in ranked if count >= 1]

    def prevalence(self, entries: Iterable[WalkEntry]) -> Prevalence:
        """Split detected languages into primary and secondary sets.

        Languages are ranked by total line count (then file count, then name).
        The first :data:`PRIMARY_LIMIT` languages that hold at least
        :data:`PRIMARY_FILE_SHARE` percent of the classified files, or at least
        :data:`PRIMARY_MIN_FILES` files, become primary. Data and markup formats
        never become primary. The next :data:`SECONDARY_LIMIT` languages meeting
        the secondary threshold become secondary.

        Args:
            entries: File entries produced by a tree walk.

        Returns:
            Prevalence: Ranked statistics together with the split.
        """

        by_language: dict[str, list[Path]] = {}
        for entry in entries:
            language = language_for(entry.path)
            if language is not None:
                by_language.setdefault(language, []).append(entry.path)
        line_totals = self._count_lines(by_language)
        total_files = sum(len(paths) for paths in by_language.values())
        stats = tuple(
            sorted(
                (
                    LanguageStats(
                        language=language,
                        files=len(paths),
                        lines=line_totals.get(language, 0),
                        file_share=(len(paths) / total_files) * 100 if total_files else 0.0,
                    )
                    for language, paths in by_language.items()
                ),
                key=lambda item: (-item.lines, -item.files, item.language),
            )
        )

        primary = tuple(
            item.language
            for item in stats
            if item.language not in DATA_LANGUAGES
            and (item.file_share >= PRIMARY_FILE_SHARE or item.files >= PRIMARY_MIN_FILES)
        )[:PRIMARY_LIMIT]
        secondary = tuple(
            item.language
            for item in stats
            if item.language not in primary
            and (item.file_share >= SECONDARY_FILE_SHARE or item.files >= SECONDARY_MIN_FILES)
        )[:SECONDARY_LIMIT]
        return Prevalence(primary=primary, secondary=secondary, stats=stats)

    def _count_lines(self, by_language: Mapping[str, list[Path]]) -> dict[str, int]:
        jobs = [(language, path) for language, paths in by_language.items() for path in paths]
        totals: dict[str, int] = dict.fromkeys(by_language, 0)
        if not jobs:
            return totals
        with ThreadPoolExecutor(max_workers=min(self._line_workers, len(jobs))) as executor:
            counts = executor.map(count_lines, (path for _, path in jobs))
            for (language, _), lines in zip(jobs, counts, strict=True):
                totals[language] += lines
        return totals


__all__ = ["LanguageDetector", "LanguageStats", "Prevalence", "count_lines", "language_for"]
