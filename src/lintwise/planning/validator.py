# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Validation, automatic remediation and optimisation of configurations."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from ..catalog.templates import DEFAULT_REGISTRY, TemplateRegistry
from ..config.models import CacheStrategy, Configuration, OutputFormat
from ..errors import ConfigValidationError
from .performance import parse_memory

LOGGER = logging.getLogger(__name__)

MIN_EXECUTION_TIME_MS: Final[int] = 60_000
MEMORY_FLOOR_MB: Final[int] = 512
FALLBACK_MEMORY: Final[str] = "2GB"
FALLBACK_FORMAT: Final[OutputFormat] = OutputFormat.JSON
MANY_LINTERS_SUGGESTION_THRESHOLD: Final[int] = 50
INCREMENTAL_SUGGESTION_THRESHOLD: Final[int] = 20
SMALL_PLAN_LIMIT: Final[int] = 10
SMALL_PLAN_PARALLELISM: Final[int] = 2
MEDIUM_PLAN_LIMIT: Final[int] = 20
MEDIUM_PLAN_PARALLELISM: Final[int] = 4
INCREMENTAL_THRESHOLD: Final[int] = 15
AGGRESSIVE_CACHE_THRESHOLD: Final[int] = 25


class ValidationCode(StrEnum):
    """Identify each validation check."""

    LINTER_CONFLICT = "LINTER_CONFLICT"
    LOW_EXECUTION_TIME = "LOW_EXECUTION_TIME"
    INSUFFICIENT_MEMORY = "INSUFFICIENT_MEMORY"
    NO_OUTPUT_FORMAT = "NO_OUTPUT_FORMAT"


class ValidationIssue(BaseModel):
    """Single validation finding."""

    model_config = ConfigDict(frozen=True)

    code: ValidationCode
    message: str
    field: str
    suggestion: str | None = None


class ValidationResult(BaseModel):
    """Outcome of validating a configuration.

    Errors make the configuration invalid; warnings and suggestions are
    advisory only.
    """

    model_config = ConfigDict(validate_assignment=True)

    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        """Return ``True`` when no errors were recorded."""

        return not self.errors

    def codes(self) -> set[ValidationCode]:
        """Return the codes of every recorded error."""

        return {issue.code for issue in self.errors}


class ConfigurationValidator:
    """Check configurations against the conflict table and resource floors."""

    def __init__(self, registry: TemplateRegistry = DEFAULT_REGISTRY) -> None:
        self._registry = registry

    def validate(self, config: Configuration) -> ValidationResult:
        """Return the validation result for ``config``.

        Args:
            config: Configuration to check.

        Returns:
            ValidationResult: Errors, warnings and suggestions.
        """

        result = ValidationResult()
        enabled = config.enabled_names

        for group in self._registry.find_conflicts(enabled):
            result.errors.append(
                ValidationIssue(
                    code=ValidationCode.LINTER_CONFLICT,
                    message=f"Conflicting linters detected: {', '.join(group)}",
                    field="linters.enabled",
                ),
            )

        if config.performance.max_execution_time < MIN_EXECUTION_TIME_MS:
            result.warnings.append(
                ValidationIssue(
                    code=ValidationCode.LOW_EXECUTION_TIME,
                    message="Execution time limit is very low and may cause timeouts",
                    field="performance.max_execution_time",
                    suggestion="Consider increasing to at least 2 minutes",
                ),
            )

        if parse_memory(config.performance.resource_limits.max_memory) < MEMORY_FLOOR_MB:
            result.errors.append(
                ValidationIssue(
                    code=ValidationCode.INSUFFICIENT_MEMORY,
                    message=f"Memory limit is below {MEMORY_FLOOR_MB}MB",
                    field="performance.resource_limits.max_memory",
                ),
            )

        if not config.reporting.formats:
            result.errors.append(
                ValidationIssue(
                    code=ValidationCode.NO_OUTPUT_FORMAT,
                    message="At least one output format must be specified",
                    field="reporting.formats",
                ),
            )

        if len(enabled) > MANY_LINTERS_SUGGESTION_THRESHOLD:
            result.suggestions.append("Consider reducing the number of enabled linters for better performance")
        if not config.performance.incremental_scanning and len(enabled) > INCREMENTAL_SUGGESTION_THRESHOLD:
            result.suggestions.append("Enable incremental scanning for better performance with many linters")
        return result

    def apply_automatic_fixes(self, config: Configuration, result: ValidationResult) -> Configuration:
        """Return a copy of ``config`` with the errors in ``result`` remediated.

        Conflicts are resolved by disabling every member of a conflict group
        after the first; memory below the floor is raised to ``2GB``; an empty
        format list receives ``json``.
        """

        fixed = config.model_copy(deep=True)
        codes = result.codes()
        if ValidationCode.LINTER_CONFLICT in codes:
            self.resolve_conflicts(fixed)
        if ValidationCode.INSUFFICIENT_MEMORY in codes:
            LOGGER.info(
                "Raising memory limit from %s to %s",
                fixed.performance.resource_limits.max_memory,
                FALLBACK_MEMORY,
            )
            fixed.performance.resource_limits.max_memory = FALLBACK_MEMORY
        if ValidationCode.NO_OUTPUT_FORMAT in codes and not fixed.reporting.formats:
            LOGGER.info("Adding default output format %s", FALLBACK_FORMAT)
            fixed.reporting.formats = [FALLBACK_FORMAT]
        return fixed

    def resolve_conflicts(self, config: Configuration) -> list[str]:
        """Disable later members of every conflict group in place.

        Returns:
            list[str]: Names moved from ``enabled`` to ``disabled``.
        """

        losers: list[str] = []
        for group in self._registry.find_conflicts(config.enabled_names):
            losers.extend(group[1:])
        if not losers:
            return []
        LOGGER.info("Disabling conflicting linters: %s", ", ".join(losers))
        loser_set = set(losers)
        config.linters.enabled = [linter for linter in config.linters.enabled if linter.name not in loser_set]
        config.linters.disabled = _merge_unique(config.linters.disabled, losers)
        return losers

    @staticmethod
    def optimize(config: Configuration) -> Configuration:
        """Return a copy of ``config`` tuned for the size of its linter set."""

        optimized = config.model_copy(deep=True)
        performance = optimized.performance
        count = len(optimized.enabled_names)
        if count < SMALL_PLAN_LIMIT:
            performance.parallelism = min(performance.parallelism, SMALL_PLAN_PARALLELISM)
        elif count < MEDIUM_PLAN_LIMIT:
            performance.parallelism = min(performance.parallelism, MEDIUM_PLAN_PARALLELISM)
        if count > INCREMENTAL_THRESHOLD:
            performance.incremental_scanning = True
        if count > AGGRESSIVE_CACHE_THRESHOLD:
            performance.cache_strategy = CacheStrategy.AGGRESSIVE
        return optimized

    def validate_and_optimize(self, config: Configuration) -> Configuration:
        """Validate ``config``, fix it once when needed, then optimise it.

        Raises:
            ConfigValidationError: If errors remain after the fix pass.
        """

        result = self.validate(config)
        if not result.valid:
            LOGGER.warning(
                "Configuration validation issues: %s",
                ", ".join(issue.code for issue in result.errors),
            )
            config = self.apply_automatic_fixes(config, result)
            result = self.validate(config)
            if not result.valid:
                raise ConfigValidationError(result)
        return self.optimize(config)


def _merge_unique(existing: list[str], extra: list[str]) -> list[str]:
    merged: dict[str, None] = dict.fromkeys(existing)
    for name in extra:
        merged.setdefault(name, None)
    return list(merged)


__all__ = [
    "ConfigurationValidator",
    "ValidationCode",
    "ValidationIssue",
    "ValidationResult",
]
