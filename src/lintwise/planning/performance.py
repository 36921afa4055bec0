# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Performance budgeting derived from a repository profile."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Final

from ..config.models import CacheStrategy, PerformanceConfig, PerformanceProfile, ResourceLimits, UserPreferences
from ..models import Complexity, LanguageProfile

MEMORY_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(\d+)(GB|MB)$", re.IGNORECASE)
MEMORY_CEILING_MB: Final[int] = 8192
MEMORY_STEP: Final[float] = 1.5
MANY_LANGUAGES_THRESHOLD: Final[int] = 5
MANY_LANGUAGES_TIME_FACTOR: Final[float] = 1.5
TECHNICAL_DEBT_THRESHOLD: Final[float] = 50.0
TECHNICAL_DEBT_TIME_FACTOR: Final[float] = 1.2
FAST_TIME_FACTOR: Final[float] = 0.5
FAST_TIME_FLOOR_MS: Final[int] = 60_000
THOROUGH_TIME_FACTOR: Final[float] = 1.5


def parse_memory(value: str) -> int:
    """Return ``value`` (``"512MB"``, ``"2GB"``) in megabytes; ``0`` when unparseable."""

    match = MEMORY_PATTERN.match(value.strip())
    if match is None:
        return 0
    amount = int(match.group(1))
    return amount * 1024 if match.group(2).upper() == "GB" else amount


def format_memory(megabytes: float) -> str:
    """Render ``megabytes`` as ``NGB`` (rounded up) from 1024MB, ``NMB`` below."""

    if megabytes >= 1024:
        return f"{math.ceil(megabytes / 1024)}GB"
    return f"{math.ceil(megabytes)}MB"


def increase_memory(value: str) -> str:
    """Scale a memory limit by one step, capped at the memory ceiling."""

    scaled = min(parse_memory(value) * MEMORY_STEP, MEMORY_CEILING_MB)
    return format_memory(scaled)


@dataclass(frozen=True, slots=True)
class ComplexityPreset:
    """Baseline budget for one complexity class."""

    max_execution_time: int
    parallelism: int
    max_memory: str
    cache_strategy: CacheStrategy
    incremental_scanning: bool


COMPLEXITY_PRESETS: Final[dict[Complexity, ComplexityPreset]] = {
    Complexity.SIMPLE: ComplexityPreset(120_000, 2, "1GB", CacheStrategy.AGGRESSIVE, True),
    Complexity.MODERATE: ComplexityPreset(300_000, 4, "2GB", CacheStrategy.CONSERVATIVE, True),
    Complexity.COMPLEX: ComplexityPreset(600_000, 6, "4GB", CacheStrategy.CONSERVATIVE, True),
}


def tune_performance(profile: LanguageProfile, preferences: UserPreferences | None = None) -> PerformanceConfig:
    """Return the performance budget for ``profile``.

    The complexity preset is scaled up for repositories with many languages or
    a high technical-debt score, then adjusted for the user's performance
    profile.

    Args:
        profile: Repository profile being planned for.
        preferences: Optional user preferences carrying the performance profile.

    Returns:
        PerformanceConfig: Tuned performance parameters.
    """

    preset = COMPLEXITY_PRESETS[profile.complexity]
    execution_time = float(preset.max_execution_time)
    memory = preset.max_memory
    cache_strategy = preset.cache_strategy
    incremental = preset.incremental_scanning

    if len(profile.languages) > MANY_LANGUAGES_THRESHOLD:
        execution_time *= MANY_LANGUAGES_TIME_FACTOR
        memory = increase_memory(memory)

    debt = profile.technical_debt_score
    if debt is not None and debt > TECHNICAL_DEBT_THRESHOLD:
        execution_time *= TECHNICAL_DEBT_TIME_FACTOR
        memory = increase_memory(memory)

    speed = preferences.performance_profile if preferences is not None else PerformanceProfile.BALANCED
    if speed is PerformanceProfile.FAST:
        execution_time = max(execution_time * FAST_TIME_FACTOR, FAST_TIME_FLOOR_MS)
        cache_strategy = CacheStrategy.AGGRESSIVE
        incremental = True
    elif speed is PerformanceProfile.THOROUGH:
        execution_time *= THOROUGH_TIME_FACTOR
        incremental = False

    return PerformanceConfig(
        max_execution_time=round(execution_time),
        parallelism=preset.parallelism,
        resource_limits=ResourceLimits(max_memory=memory),
        cache_strategy=cache_strategy,
        incremental_scanning=incremental,
    )


__all__ = [
    "COMPLEXITY_PRESETS",
    "ComplexityPreset",
    "format_memory",
    "increase_memory",
    "parse_memory",
    "tune_performance",
]
