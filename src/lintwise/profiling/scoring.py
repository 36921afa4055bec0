# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Deterministic complexity and confidence scoring."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from ..models import Complexity

FILE_COUNT_THRESHOLDS: Final[tuple[int, ...]] = (100, 500, 1000)
DIRECTORY_COUNT_THRESHOLDS: Final[tuple[int, ...]] = (10, 50)
MAX_DEPTH_THRESHOLDS: Final[tuple[int, ...]] = (5, 10)
LANGUAGE_COUNT_THRESHOLDS: Final[tuple[int, ...]] = (3, 6)
SIMPLE_CEILING: Final[int] = 2
MODERATE_CEILING: Final[int] = 5

BASE_CONFIDENCE: Final[float] = 0.3
LANGUAGE_BONUS: Final[float] = 0.3
MULTI_LANGUAGE_BONUS: Final[float] = 0.1
FRAMEWORK_BONUS: Final[float] = 0.2
BUILD_TOOL_BONUS: Final[float] = 0.1
CONFIG_FILE_BONUS: Final[float] = 0.1
MANY_CONFIG_FILES_BONUS: Final[float] = 0.1
MULTI_LANGUAGE_THRESHOLD: Final[int] = 2
MANY_CONFIG_FILES_THRESHOLD: Final[int] = 5


@dataclass(frozen=True, slots=True)
class TreeStats:
    """Structural counts gathered from one repository walk."""

    file_count: int = 0
    directory_count: int = 0
    max_depth: int = 0
    language_count: int = 0


def _crossed(value: int, thresholds: Sequence[int]) -> int:
    return sum(1 for threshold in thresholds if value > threshold)


def complexity_score(stats: TreeStats) -> int:
    """Return the number of complexity thresholds crossed by ``stats``."""

    return (
        _crossed(stats.file_count, FILE_COUNT_THRESHOLDS)
        + _crossed(stats.directory_count, DIRECTORY_COUNT_THRESHOLDS)
        + _crossed(stats.max_depth, MAX_DEPTH_THRESHOLDS)
        + _crossed(stats.language_count, LANGUAGE_COUNT_THRESHOLDS)
    )


def classify_complexity(stats: TreeStats) -> Complexity:
    """Map ``stats`` onto a :class:`Complexity` class.

    Scores up to 2 are simple, up to 5 moderate, anything above complex.
    """

    score = complexity_score(stats)
    if score <= SIMPLE_CEILING:
        return Complexity.SIMPLE
    if score <= MODERATE_CEILING:
        return Complexity.MODERATE
    return Complexity.COMPLEX


def calculate_confidence(
    languages: Sequence[str],
    frameworks: Sequence[str],
    build_tools: Sequence[str],
    config_file_count: int,
) -> float:
    """Return the detection confidence in ``[0, 1]``.

    Args:
        languages: Detected languages.
        frameworks: Detected frameworks.
        build_tools: Detected build tools.
        config_file_count: Number of located tooling configuration files.

    Returns:
        float: Weighted sum of the detection signals capped at ``1.0``.
    """

    confidence = BASE_CONFIDENCE
    if languages:
        confidence += LANGUAGE_BONUS
    if len(languages) > MULTI_LANGUAGE_THRESHOLD:
        confidence += MULTI_LANGUAGE_BONUS
    if frameworks:
        confidence += FRAMEWORK_BONUS
    if build_tools:
        confidence += BUILD_TOOL_BONUS
    if config_file_count > 0:
        confidence += CONFIG_FILE_BONUS
    if config_file_count > MANY_CONFIG_FILES_THRESHOLD:
        confidence += MANY_CONFIG_FILES_BONUS
    return round(min(confidence, 1.0), 10)


__all__ = ["TreeStats", "calculate_confidence", "classify_complexity", "complexity_score"]
