# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Turn a :class:`LanguageProfile` into a validated :class:`Configuration`."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Final

from ..catalog.models import QUALITY_CATEGORIES, LinterCategory, LinterTemplate
from ..catalog.templates import DEFAULT_REGISTRY, TemplateRegistry
from ..config.export import export_environment
from ..config.models import (
    Configuration,
    CustomRule,
    DetailLevel,
    LinterConfiguration,
    LinterSet,
    OutputFormat,
    PerformanceConfig,
    ReportDestination,
    ReportingConfig,
    SecurityConfig,
    UserPreferences,
)
from ..models import LanguageProfile
from ..severity import SecuritySeverity
from .performance import tune_performance
from .validator import ConfigurationValidator, ValidationResult

LOGGER = logging.getLogger(__name__)

ORGANIZATION_RULES_NAME: Final[str] = "organization-rules"
ORGANIZATION_RULES_PATH: Final[str] = ".megalinter/custom-rules.js"
FALLBACK_LANGUAGE: Final[str] = "generic"
REPORT_DESTINATIONS: Final[tuple[ReportDestination, ...]] = (ReportDestination.CONSOLE, ReportDestination.FILE)


def materialize(template: LinterTemplate, language: str) -> LinterConfiguration:
    """Bind ``template`` to ``language`` as an enabled configuration."""

    return LinterConfiguration(
        name=template.name,
        version=template.version,
        enabled=True,
        severity=template.severity,
        rules=dict(template.rules),
        file_patterns=list(template.file_patterns),
        exclude_patterns=list(template.exclude_patterns),
        language=language,
        category=template.category,
    )


def _unique(names: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(names))


class ConfigurationGenerator:
    """Select, resolve and tune the linter plan for a repository.

    ``generate`` is deterministic: identical profiles and preferences always
    serialise to identical configurations.
    """

    def __init__(
        self,
        registry: TemplateRegistry = DEFAULT_REGISTRY,
        validator: ConfigurationValidator | None = None,
    ) -> None:
        self._registry = registry
        self._validator = validator or ConfigurationValidator(registry)

    @property
    def registry(self) -> TemplateRegistry:
        """Return the template registry used for selection."""

        return self._registry

    def generate(self, profile: LanguageProfile, preferences: UserPreferences | None = None) -> Configuration:
        """Return the validated configuration for ``profile``.

        Args:
            profile: Repository profile to plan for.
            preferences: Optional user preferences; defaults apply when omitted.

        Returns:
            Configuration: Validated and optimised plan.

        Raises:
            ConfigValidationError: If the plan is still invalid after the
                automatic fix pass.
        """

        prefs = preferences or UserPreferences()
        selected = self.select_linters(profile)
        conflict_losers = self._conflict_losers(selected)
        losers = set(conflict_losers)
        selected = [linter for linter in selected if linter.name not in losers]
        enabled = self._apply_preferences(selected, prefs)
        enabled_names = [linter.name for linter in enabled]
        enabled_set = set(enabled_names)

        disabled = _unique(
            [
                *prefs.excluded_linters,
                *conflict_losers,
                *self._threshold_dropped(selected, enabled, prefs),
                *self._registry.declared_conflicts(enabled_names),
            ]
        )
        disabled = [name for name in disabled if name not in enabled_set]

        config = Configuration(
            linters=LinterSet(enabled=enabled, disabled=disabled, custom_rules=self._custom_rules(prefs)),
            performance=self.generate_performance_config(profile, prefs),
            reporting=self.generate_reporting_config(prefs),
            security=self.generate_security_config(prefs),
        )
        return self.validate_and_optimize(config)

    def select_linters(self, profile: LanguageProfile) -> list[LinterConfiguration]:
        """Return candidate linters for ``profile``, deduplicated by name.

        Language linters come first, then framework extras, then security
        templates and finally quality, format and documentation templates
        applicable to any detected language.
        """

        languages = list(profile.languages)
        first_language = languages[0] if languages else FALLBACK_LANGUAGE
        candidates: list[LinterConfiguration] = []
        for language in languages:
            candidates.extend(materialize(template, language) for template in self._registry.for_language(language))
        for framework in profile.frameworks:
            candidates.extend(
                materialize(template, template.default_language)
                for template in self._registry.for_framework(framework)
            )
        candidates.extend(
            materialize(template, first_language)
            for template in self._registry.for_categories((LinterCategory.SECURITY,), languages)
        )
        candidates.extend(
            materialize(template, first_language)
            for template in self._registry.for_categories(QUALITY_CATEGORIES, languages)
        )

        unique: dict[str, LinterConfiguration] = {}
        for candidate in candidates:
            unique.setdefault(candidate.name, candidate)
        return list(unique.values())

    def _conflict_losers(self, linters: Sequence[LinterConfiguration]) -> list[str]:
        losers: list[str] = []
        for group in self._registry.find_conflicts(linter.name for linter in linters):
            LOGGER.debug("Resolving conflict %s in favour of %s", group, group[0])
            losers.extend(group[1:])
        return _unique(losers)

    def _apply_preferences(
        self,
        linters: Sequence[LinterConfiguration],
        prefs: UserPreferences,
    ) -> list[LinterConfiguration]:
        filtered = list(linters)
        if prefs.preferred_linters:
            preferred = set(prefs.preferred_linters)
            filtered = [linter for linter in filtered if linter.name in preferred]
        if prefs.excluded_linters:
            excluded = set(prefs.excluded_linters)
            filtered = [linter for linter in filtered if linter.name not in excluded]
        filtered = [linter for linter in filtered if linter.severity >= prefs.severity_threshold]

        standards = prefs.organization_standards
        if standards is not None:
            present = {linter.name for linter in filtered}
            for name in standards.required_linters:
                if name in present:
                    continue
                existing = next((linter for linter in linters if linter.name == name), None)
                if existing is not None:
                    filtered.append(existing)
                else:
                    template = self._registry.get(name)
                    if template is None:
                        LOGGER.warning("Required linter %s is not in the template catalogue", name)
                        continue
                    filtered.append(materialize(template, template.default_language))
                present.add(name)
        return filtered

    @staticmethod
    def _threshold_dropped(
        selected: Sequence[LinterConfiguration],
        enabled: Sequence[LinterConfiguration],
        prefs: UserPreferences,
    ) -> list[str]:
        kept = {linter.name for linter in enabled}
        excluded = set(prefs.excluded_linters)
        return [
            linter.name
            for linter in selected
            if linter.name not in kept
            and linter.name not in excluded
            and linter.severity < prefs.severity_threshold
        ]

    @staticmethod
    def _custom_rules(prefs: UserPreferences) -> list[CustomRule]:
        standards = prefs.organization_standards
        if standards is None or not standards.enforced_rules:
            return []
        return [CustomRule(name=ORGANIZATION_RULES_NAME, path=ORGANIZATION_RULES_PATH, type="eslint")]

    @staticmethod
    def generate_performance_config(
        profile: LanguageProfile,
        preferences: UserPreferences | None = None,
    ) -> PerformanceConfig:
        """Return the performance budget for ``profile`` and ``preferences``."""

        return tune_performance(profile, preferences)

    @staticmethod
    def generate_reporting_config(preferences: UserPreferences | None = None) -> ReportingConfig:
        """Return reporting settings: ``json`` plus the preferred format.

        Verbose detail additionally requests an ``html`` report.
        """

        reporting = (preferences or UserPreferences()).reporting_preferences
        formats: list[OutputFormat] = [OutputFormat.JSON, reporting.format]
        if reporting.detail_level is DetailLevel.VERBOSE:
            formats.append(OutputFormat.HTML)
        return ReportingConfig(
            formats=list(dict.fromkeys(formats)),
            destinations=list(REPORT_DESTINATIONS),
            real_time_updates=reporting.real_time_updates,
            include_passing=reporting.include_passing_files,
        )

    @staticmethod
    def generate_security_config(preferences: UserPreferences | None = None) -> SecurityConfig:
        """Return security settings derived from the user's security preferences."""

        security = (preferences or UserPreferences()).security_preferences
        threshold = SecuritySeverity.HIGH if security.enable_security_scanning else SecuritySeverity.CRITICAL
        return SecurityConfig(
            enable_security_linters=security.enable_security_scanning,
            security_severity_threshold=threshold,
            allow_secrets=False,
        )

    def validate(self, config: Configuration) -> ValidationResult:
        """Return the validation result for ``config``."""

        return self._validator.validate(config)

    def validate_and_optimize(self, config: Configuration) -> Configuration:
        """Validate, auto-fix once and optimise ``config``."""

        return self._validator.validate_and_optimize(config)

    @staticmethod
    def export_environment(config: Configuration) -> dict[str, str]:
        """Return the environment-style export of ``config``."""

        return export_environment(config)

    @staticmethod
    def describe_optimizations(before: Configuration, after: Configuration) -> list[str]:
        """Return human-readable notes on what changed between two plans.

        Args:
            before: Plan prior to tuning or optimisation.
            after: Plan after tuning or optimisation.

        Returns:
            list[str]: One sentence per changed parameter.
        """

        notes: list[str] = []
        old_perf, new_perf = before.performance, after.performance
        if old_perf.parallelism != new_perf.parallelism:
            notes.append(f"Parallelism changed from {old_perf.parallelism} to {new_perf.parallelism}")
        if old_perf.max_execution_time != new_perf.max_execution_time:
            notes.append(
                f"Execution budget changed from {old_perf.max_execution_time}ms to {new_perf.max_execution_time}ms"
            )
        old_memory = old_perf.resource_limits.max_memory
        new_memory = new_perf.resource_limits.max_memory
        if old_memory != new_memory:
            notes.append(f"Memory limit changed from {old_memory} to {new_memory}")
        if old_perf.cache_strategy != new_perf.cache_strategy:
            notes.append(f"Cache strategy changed from {old_perf.cache_strategy} to {new_perf.cache_strategy}")
        if old_perf.incremental_scanning != new_perf.incremental_scanning:
            state = "enabled" if new_perf.incremental_scanning else "disabled"
            notes.append(f"Incremental scanning {state}")
        removed = [name for name in before.enabled_names if name not in after.enabled_names]
        added = [name for name in after.enabled_names if name not in before.enabled_names]
        if removed:
            notes.append(f"Disabled linters: {', '.join(removed)}")
        if added:
            notes.append(f"Enabled linters: {', '.join(added)}")
        return notes


__all__ = ["ConfigurationGenerator", "materialize"]
