# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for performance budget tuning."""

from __future__ import annotations

import pytest

from lintwise.config.models import CacheStrategy, PerformanceProfile, UserPreferences
from lintwise.models import Complexity, LanguageProfile
from lintwise.planning.performance import format_memory, increase_memory, parse_memory, tune_performance


@pytest.mark.parametrize(
    ("value", "expected"),
    [("512MB", 512), ("2GB", 2048), ("2gb", 2048), (" 1GB ", 1024), ("lots", 0), ("1.5GB", 0)],
)
def test_parse_memory(value: str, expected: int) -> None:
    assert parse_memory(value) == expected


def test_format_and_increase_memory() -> None:
    assert format_memory(768) == "768MB"
    assert format_memory(1536) == "2GB"
    assert increase_memory("2GB") == "3GB"
    assert increase_memory("512MB") == "768MB"
    assert increase_memory("8GB") == "8GB"


@pytest.mark.parametrize(
    ("complexity", "time_ms", "parallelism", "memory", "cache"),
    [
        (Complexity.SIMPLE, 120_000, 2, "1GB", CacheStrategy.AGGRESSIVE),
        (Complexity.MODERATE, 300_000, 4, "2GB", CacheStrategy.CONSERVATIVE),
        (Complexity.COMPLEX, 600_000, 6, "4GB", CacheStrategy.CONSERVATIVE),
    ],
)
def test_presets_by_complexity(complexity, time_ms, parallelism, memory, cache) -> None:
    config = tune_performance(LanguageProfile(complexity=complexity))

    assert config.max_execution_time == time_ms
    assert config.parallelism == parallelism
    assert config.resource_limits.max_memory == memory
    assert config.cache_strategy is cache
    assert config.incremental_scanning is True


def test_many_languages_and_debt_scale_budget() -> None:
    profile = LanguageProfile(
        primary=("python", "go", "rust"),
        secondary=("java", "ruby", "php"),
        complexity=Complexity.MODERATE,
        technical_debt_score=75.0,
    )

    config = tune_performance(profile)

    assert config.max_execution_time == 540_000
    assert config.resource_limits.max_memory == "5GB"


@pytest.mark.parametrize(
    ("speed", "time_ms", "incremental", "cache"),
    [
        (PerformanceProfile.FAST, 150_000, True, CacheStrategy.AGGRESSIVE),
        (PerformanceProfile.BALANCED, 300_000, True, CacheStrategy.CONSERVATIVE),
        (PerformanceProfile.THOROUGH, 450_000, False, CacheStrategy.CONSERVATIVE),
    ],
)
def test_performance_profiles(speed, time_ms, incremental, cache) -> None:
    config = tune_performance(
        LanguageProfile(complexity=Complexity.MODERATE),
        UserPreferences(performance_profile=speed),
    )

    assert config.max_execution_time == time_ms
    assert config.incremental_scanning is incremental
    assert config.cache_strategy is cache


def test_fast_profile_respects_time_floor() -> None:
    config = tune_performance(
        LanguageProfile(complexity=Complexity.SIMPLE),
        UserPreferences(performance_profile=PerformanceProfile.FAST),
    )

    assert config.max_execution_time == 60_000
