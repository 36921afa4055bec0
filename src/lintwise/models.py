# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Profile and result models exchanged between the engine's stages."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .config.models import Configuration
from .severity import Severity


class Complexity(StrEnum):
    """Repository complexity class ordered ``simple < moderate < complex``."""

    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"

    @property
    def rank(self) -> int:
        """Return the ordinal position of the complexity class."""

        return _COMPLEXITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Complexity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Complexity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Complexity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Complexity):
            return NotImplemented
        return self.rank >= other.rank


_COMPLEXITY_RANK: Final[dict[Complexity, int]] = {
    Complexity.SIMPLE: 0,
    Complexity.MODERATE: 1,
    Complexity.COMPLEX: 2,
}


class Importance(StrEnum):
    """Importance tag attached to located tooling configuration files."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ConfigFileEntry(BaseModel):
    """Tooling configuration file discovered in the repository."""

    model_config = ConfigDict(frozen=True)

    path: str
    type: str
    importance: Importance


class LanguageProfile(BaseModel):
    """Detected composition of a repository.

    ``primary`` and ``secondary`` never share a language. ``technical_debt_score``
    is an externally computed scalar; the profiler itself never sets it.
    """

    model_config = ConfigDict(frozen=True)

    primary: tuple[str, ...] = Field(default_factory=tuple)
    secondary: tuple[str, ...] = Field(default_factory=tuple)
    frameworks: tuple[str, ...] = Field(default_factory=tuple)
    build_tools: tuple[str, ...] = Field(default_factory=tuple)
    config_files: dict[str, ConfigFileEntry] = Field(default_factory=dict)
    complexity: Complexity = Complexity.SIMPLE
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    technical_debt_score: float | None = None

    @model_validator(mode="after")
    def _check_disjoint(self) -> LanguageProfile:
        overlap = set(self.primary) & set(self.secondary)
        if overlap:
            joined = ", ".join(sorted(overlap))
            raise ValueError(f"languages cannot be both primary and secondary: {joined}")
        return self

    @property
    def languages(self) -> tuple[str, ...]:
        """Return primary languages followed by secondary languages."""

        return self.primary + self.secondary


class IssueCategory(StrEnum):
    """Classification of a reported linter issue."""

    SYNTAX = "syntax"
    STYLE = "style"
    SECURITY = "security"
    PERFORMANCE = "performance"
    MAINTAINABILITY = "maintainability"
    ACCESSIBILITY = "accessibility"


class LinterStatus(StrEnum):
    """Outcome of one linter inside an execution."""

    SUCCESS = "success"
    FAILURE = "failure"
    TIMEOUT = "timeout"
    SKIPPED = "skipped"


class LinterIssue(BaseModel):
    """Single finding reported by a linter."""

    model_config = ConfigDict(frozen=True)

    file: str
    line: int = 0
    column: int = 0
    severity: Severity = Severity.WARNING
    message: str = ""
    rule: str = ""
    linter: str
    fixable: bool = False
    category: IssueCategory = IssueCategory.STYLE


class LinterResult(BaseModel):
    """Per-tool result extracted from the container output."""

    model_config = ConfigDict(frozen=True)

    linter: str
    version: str | None = None
    status: LinterStatus = LinterStatus.SUCCESS
    duration: float = 0.0
    files_scanned: int = 0
    issues: tuple[LinterIssue, ...] = Field(default_factory=tuple)
    errors: tuple[str, ...] = Field(default_factory=tuple)
    warnings: tuple[str, ...] = Field(default_factory=tuple)


class LintingSummary(BaseModel):
    """Aggregate counts across every executed linter."""

    model_config = ConfigDict(frozen=True)

    total_files: int = 0
    total_issues: int = 0
    errors: int = 0
    warnings: int = 0
    info: int = 0
    fixable_issues: int = 0
    linters_executed: int = 0
    linters_succeeded: int = 0
    linters_failed: int = 0


class SecuritySummary(BaseModel):
    """Security finding counts per normalised security bucket."""

    model_config = ConfigDict(frozen=True)

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    @property
    def total(self) -> int:
        """Return the number of security findings across every bucket."""

        return self.critical + self.high + self.medium + self.low


class PerformanceMetrics(BaseModel):
    """Timing and resource usage observed during an execution."""

    model_config = ConfigDict(frozen=True)

    total_execution_time: float = 0.0
    linter_execution_times: dict[str, float] = Field(default_factory=dict)
    memory_usage: float = 0.0
    cpu_usage: float = 0.0
    cache_hits: int = 0
    cache_misses: int = 0


class RepositoryContext(BaseModel):
    """Identity of the repository a run was executed against."""

    model_config = ConfigDict(frozen=True)

    root_path: str
    git_remote: str | None = None
    organization: str | None = None
    repository: str | None = None
    package_manager: str | None = None
    last_analyzed: datetime


class LintingResults(BaseModel):
    """Immutable record of one completed execution."""

    model_config = ConfigDict(frozen=True)

    execution_id: str
    timestamp: datetime
    duration: float
    repository: RepositoryContext
    profile: LanguageProfile | None = None
    configuration: Configuration
    results: tuple[LinterResult, ...] = Field(default_factory=tuple)
    summary: LintingSummary = Field(default_factory=LintingSummary)
    security: SecuritySummary = Field(default_factory=SecuritySummary)
    performance: PerformanceMetrics = Field(default_factory=PerformanceMetrics)
    warnings: tuple[str, ...] = Field(default_factory=tuple)

    @property
    def has_issues(self) -> bool:
        """Return ``True`` when any linter reported at least one issue."""

        return self.summary.total_issues > 0


__all__ = [
    "Complexity",
    "ConfigFileEntry",
    "Importance",
    "IssueCategory",
    "LanguageProfile",
    "LinterIssue",
    "LinterResult",
    "LinterStatus",
    "LintingResults",
    "LintingSummary",
    "PerformanceMetrics",
    "RepositoryContext",
    "SecuritySummary",
]
