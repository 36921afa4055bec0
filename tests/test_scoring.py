# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for complexity classification and confidence scoring."""

from __future__ import annotations

import itertools

import pytest

from lintwise.models import Complexity
from lintwise.profiling.scoring import TreeStats, calculate_confidence, classify_complexity, complexity_score


def test_complexity_ordering() -> None:
    assert Complexity.SIMPLE < Complexity.MODERATE < Complexity.COMPLEX
    assert max(Complexity) is Complexity.COMPLEX


@pytest.mark.parametrize(
    ("stats", "expected"),
    [
        (TreeStats(), Complexity.SIMPLE),
        (TreeStats(file_count=600, directory_count=20), Complexity.MODERATE),
        (TreeStats(file_count=1500, directory_count=60, max_depth=11, language_count=7), Complexity.COMPLEX),
    ],
)
def test_classify_complexity(stats: TreeStats, expected: Complexity) -> None:
    assert classify_complexity(stats) is expected


def test_complexity_is_monotonic() -> None:
    samples = (0, 4, 11, 51, 101, 501, 1001)
    grid = [
        TreeStats(file_count=f, directory_count=d, max_depth=m, language_count=lang)
        for f, d, m, lang in itertools.product(samples, samples, (0, 6, 11), (0, 4, 7))
    ]
    for base in grid:
        grown = [
            TreeStats(base.file_count + 500, base.directory_count, base.max_depth, base.language_count),
            TreeStats(base.file_count, base.directory_count + 40, base.max_depth, base.language_count),
            TreeStats(base.file_count, base.directory_count, base.max_depth + 5, base.language_count),
            TreeStats(base.file_count, base.directory_count, base.max_depth, base.language_count + 3),
        ]
        for candidate in grown:
            assert complexity_score(candidate) >= complexity_score(base)
            assert classify_complexity(candidate) >= classify_complexity(base)


def test_confidence_bounds() -> None:
    assert calculate_confidence([], [], [], 0) == pytest.approx(0.3)
    assert calculate_confidence(["python"], [], [], 0) == pytest.approx(0.6)
    full = calculate_confidence(["a", "b", "c"], ["react"], ["npm"], 10)
    assert full == 1.0
