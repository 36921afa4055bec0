# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration and preference models for the lint planning engine."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..catalog.models import LinterCategory
from ..severity import SecuritySeverity, Severity

CONFIG_VERSION: Final[str] = "7.0.0"
TRUSTED_DIRECTORIES: Final[tuple[str, ...]] = ("tests/", "test/", "__tests__/", "spec/")


class CacheStrategy(StrEnum):
    """Enumerate linter cache strategies."""

    AGGRESSIVE = "aggressive"
    CONSERVATIVE = "conservative"
    DISABLED = "disabled"


class OutputFormat(StrEnum):
    """Enumerate report formats understood by the linting container."""

    JSON = "json"
    SARIF = "sarif"
    JUNIT = "junit"
    CONSOLE = "console"
    HTML = "html"
    MARKDOWN = "markdown"


class ReportDestination(StrEnum):
    """Enumerate where reports are delivered."""

    CONSOLE = "console"
    FILE = "file"
    GITHUB_ANNOTATIONS = "github_annotations"
    WEBHOOK = "webhook"


class PerformanceProfile(StrEnum):
    """Enumerate user-selectable speed/thoroughness trade-offs."""

    FAST = "fast"
    BALANCED = "balanced"
    THOROUGH = "thorough"


class DetailLevel(StrEnum):
    """Enumerate reporting verbosity levels."""

    MINIMAL = "minimal"
    STANDARD = "standard"
    VERBOSE = "verbose"


class LinterConfiguration(BaseModel):
    """A template materialised for a specific language."""

    model_config = ConfigDict(validate_assignment=True)

    name: str
    version: str | None = None
    enabled: bool = True
    severity: Severity
    rules: dict[str, Any] = Field(default_factory=dict)
    file_patterns: list[str] = Field(default_factory=list)
    exclude_patterns: list[str] = Field(default_factory=list)
    language: str
    category: LinterCategory


class CustomRule(BaseModel):
    """Reference to an organisation-provided rule bundle."""

    model_config = ConfigDict(validate_assignment=True)

    name: str
    path: str
    type: Literal["eslint", "custom", "script"]
    enabled: bool = True


class LinterSet(BaseModel):
    """Enabled linters, names that must stay disabled, and custom rules."""

    model_config = ConfigDict(validate_assignment=True)

    enabled: list[LinterConfiguration] = Field(default_factory=list)
    disabled: list[str] = Field(default_factory=list)
    custom_rules: list[CustomRule] = Field(default_factory=list)

    @property
    def enabled_names(self) -> list[str]:
        """Return the names of enabled linters in plan order."""

        return [linter.name for linter in self.enabled if linter.enabled]


class ResourceLimits(BaseModel):
    """Resource bounds applied to the linting container."""

    model_config = ConfigDict(validate_assignment=True)

    max_memory: str = "2GB"
    max_cpu_time: int = 300
    max_file_size: int = 1_048_576
    max_files_per_linter: int = 10_000


class PerformanceConfig(BaseModel):
    """Execution budget and caching behaviour."""

    model_config = ConfigDict(validate_assignment=True)

    max_execution_time: int = Field(default=300_000, description="Wall-clock budget in milliseconds.")
    parallelism: int = Field(default=4, ge=1)
    resource_limits: ResourceLimits = Field(default_factory=ResourceLimits)
    cache_strategy: CacheStrategy = CacheStrategy.CONSERVATIVE
    incremental_scanning: bool = True


class ReportingConfig(BaseModel):
    """Where and how reports are produced."""

    model_config = ConfigDict(validate_assignment=True)

    formats: list[OutputFormat] = Field(default_factory=list)
    destinations: list[ReportDestination] = Field(default_factory=list)
    real_time_updates: bool = True
    include_passing: bool = False


class SecurityConfig(BaseModel):
    """Security scanning switches."""

    model_config = ConfigDict(validate_assignment=True)

    enable_security_linters: bool = True
    security_severity_threshold: SecuritySeverity = SecuritySeverity.CRITICAL
    allow_secrets: bool = False
    trusted_directories: list[str] = Field(default_factory=lambda: list(TRUSTED_DIRECTORIES))


class Configuration(BaseModel):
    """Validated, tuned, executable plan of linters plus runtime parameters."""

    model_config = ConfigDict(validate_assignment=True)

    version: str = CONFIG_VERSION
    linters: LinterSet = Field(default_factory=LinterSet)
    performance: PerformanceConfig = Field(default_factory=PerformanceConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    @property
    def enabled_names(self) -> list[str]:
        """Return enabled linter names in plan order."""

        return self.linters.enabled_names


class ReportingPreferences(BaseModel):
    """User reporting preferences."""

    model_config = ConfigDict(validate_assignment=True)

    format: OutputFormat = OutputFormat.CONSOLE
    include_passing_files: bool = False
    detail_level: DetailLevel = DetailLevel.STANDARD
    real_time_updates: bool = True


class SecurityPreferences(BaseModel):
    """User security preferences."""

    model_config = ConfigDict(validate_assignment=True)

    enable_security_scanning: bool = True
    secrets_detection: bool = True
    vulnerability_scanning: bool = True
    license_checking: bool = False


class SecurityPolicy(BaseModel):
    """Organisation security policy entry."""

    model_config = ConfigDict(validate_assignment=True)

    name: str
    description: str = ""
    severity: SecuritySeverity = SecuritySeverity.HIGH
    enforcement_level: Literal["warn", "error", "block"] = "warn"


class OrganizationStandards(BaseModel):
    """Organisation-wide overrides applied on top of user preferences."""

    model_config = ConfigDict(validate_assignment=True)

    required_linters: list[str] = Field(default_factory=list)
    enforced_rules: dict[str, Any] = Field(default_factory=dict)
    allowed_licenses: list[str] = Field(default_factory=list)
    security_policies: list[SecurityPolicy] = Field(default_factory=list)


class UserPreferences(BaseModel):
    """Preferences supplied by the caller of the configuration generator."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    preferred_linters: list[str] = Field(default_factory=list)
    excluded_linters: list[str] = Field(default_factory=list)
    severity_threshold: Severity = Severity.WARNING
    performance_profile: PerformanceProfile = PerformanceProfile.BALANCED
    reporting_preferences: ReportingPreferences = Field(default_factory=ReportingPreferences)
    security_preferences: SecurityPreferences = Field(default_factory=SecurityPreferences)
    organization_standards: OrganizationStandards | None = None

    @field_validator("severity_threshold", mode="before")
    @classmethod
    def _coerce_threshold(cls, value: object) -> object:
        """Accept tool-style aliases such as ``warn`` for the threshold."""

        if isinstance(value, str):
            return Severity.coerce(value)
        return value


__all__ = [
    "CONFIG_VERSION",
    "CacheStrategy",
    "Configuration",
    "CustomRule",
    "DetailLevel",
    "LinterConfiguration",
    "LinterSet",
    "OrganizationStandards",
    "OutputFormat",
    "PerformanceConfig",
    "PerformanceProfile",
    "ReportDestination",
    "ReportingConfig",
    "ReportingPreferences",
    "ResourceLimits",
    "SecurityConfig",
    "SecurityPolicy",
    "SecurityPreferences",
    "TRUSTED_DIRECTORIES",
    "UserPreferences",
]
