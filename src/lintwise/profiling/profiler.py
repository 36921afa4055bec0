# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compose detectors into a :class:`LanguageProfile`."""

from __future__ import annotations

import logging
from pathlib import Path

from ..constants import DEFAULT_MAX_DEPTH
from ..discovery.walker import TreeWalker
from ..models import LanguageProfile
from .config_files import locate_config_files
from .frameworks import detect_build_tools, detect_frameworks
from .languages import LanguageDetector
from .scoring import TreeStats, calculate_confidence, classify_complexity

LOGGER = logging.getLogger(__name__)


class RepositoryProfiler:
    """Inspect a repository tree and summarise its composition.

    Every call to :meth:`analyze` walks the tree afresh and returns a new
    immutable profile; the profiler holds no per-repository state.
    """

    def __init__(self, *, max_depth: int = DEFAULT_MAX_DEPTH, detector: LanguageDetector | None = None) -> None:
        self._max_depth = max_depth
        self._detector = detector or LanguageDetector()

    def analyze(self, path: Path) -> LanguageProfile:
        """Return the profile of the repository rooted at ``path``.

        Args:
            path: Repository root directory.

        Returns:
            LanguageProfile: Detected languages, frameworks, build tools,
            configuration files, complexity class and confidence.

        Raises:
            AnalysisError: If ``path`` is missing or unreadable.
        """

        root = Path(path).resolve()
        walker = TreeWalker(root, max_depth=self._max_depth)
        files = list(walker.files())
        directories = list(walker.directories())

        detected = self._detector.detect(files)
        prevalence = self._detector.prevalence(files)
        frameworks = detect_frameworks(root, detected)
        build_tools = detect_build_tools(root)
        config_files = locate_config_files(files)

        stats = TreeStats(
            file_count=len(files),
            directory_count=len(directories),
            max_depth=max((entry.depth for entry in files), default=0),
            language_count=len(detected),
        )
        complexity = classify_complexity(stats)
        confidence = calculate_confidence(detected, frameworks, build_tools, len(config_files))
        LOGGER.debug(
            "Profiled %s: %d files, %d directories, languages=%s, complexity=%s",
            root,
            stats.file_count,
            stats.directory_count,
            detected,
            complexity,
        )
        return LanguageProfile(
            primary=prevalence.primary,
            secondary=prevalence.secondary,
            frameworks=tuple(frameworks),
            build_tools=tuple(build_tools),
            config_files=config_files,
            complexity=complexity,
            confidence=confidence,
        )


__all__ = ["RepositoryProfiler"]
