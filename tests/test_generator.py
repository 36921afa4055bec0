# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for linter selection and configuration generation."""

from __future__ import annotations

import pytest

from lintwise.catalog import DEFAULT_REGISTRY
from lintwise.config.models import (
    DetailLevel,
    OrganizationStandards,
    OutputFormat,
    ReportingPreferences,
    SecurityPreferences,
    UserPreferences,
)
from lintwise.models import Complexity, LanguageProfile
from lintwise.planning import ConfigurationGenerator
from lintwise.severity import SecuritySeverity, Severity

REACT_PROFILE = LanguageProfile(
    primary=("typescript",),
    secondary=("json",),
    frameworks=("react",),
    build_tools=("npm",),
    complexity=Complexity.SIMPLE,
    confidence=1.0,
)
PYTHON_PROFILE = LanguageProfile(primary=("python",), complexity=Complexity.SIMPLE, confidence=0.6)


@pytest.fixture
def generator() -> ConfigurationGenerator:
    return ConfigurationGenerator()


def test_select_linters_orders_language_framework_security_quality(generator) -> None:
    names = [linter.name for linter in generator.select_linters(REACT_PROFILE)]

    assert names == [
        "eslint",
        "prettier",
        "eslint-plugin-prettier",
        "secretlint",
        "semgrep",
        "cspell",
        "eslint-plugin-react",
    ]


def test_select_linters_binds_framework_extras_to_home_language(generator) -> None:
    by_name = {linter.name: linter for linter in generator.select_linters(REACT_PROFILE)}

    assert by_name["eslint-plugin-react"].language == "javascript"
    assert by_name["eslint"].language == "typescript"


def test_generate_resolves_prettier_conflict(generator) -> None:
    config = generator.generate(REACT_PROFILE)

    enabled = config.enabled_names
    assert "prettier" in enabled
    assert "eslint-plugin-prettier" not in enabled
    assert "eslint-plugin-prettier" in config.linters.disabled


def test_requested_conflicting_pair_keeps_exactly_one(generator) -> None:
    prefs = UserPreferences(
        organization_standards=OrganizationStandards(required_linters=["prettier", "eslint-plugin-prettier"]),
    )

    config = generator.generate(REACT_PROFILE, prefs)

    pair = {"prettier", "eslint-plugin-prettier"}
    assert len(pair & set(config.enabled_names)) == 1
    assert len(pair & set(config.linters.disabled)) == 1


@pytest.mark.parametrize("profile", [REACT_PROFILE, PYTHON_PROFILE])
def test_generated_plans_never_enable_conflicting_linters(generator, profile) -> None:
    config = generator.generate(profile)

    assert DEFAULT_REGISTRY.find_conflicts(config.enabled_names) == []
    assert not set(config.enabled_names) & set(config.linters.disabled)


def test_python_plan_disables_conflict_losers(generator) -> None:
    config = generator.generate(PYTHON_PROFILE)

    assert config.enabled_names == ["pylint", "black", "bandit", "secretlint", "semgrep", "cspell"]
    assert config.linters.disabled == ["autopep8", "flake8"]


def test_generation_is_idempotent(generator) -> None:
    prefs = UserPreferences(excluded_linters=["cspell"])

    first = generator.generate(REACT_PROFILE, prefs)
    second = ConfigurationGenerator().generate(REACT_PROFILE, prefs)

    assert first.model_dump_json() == second.model_dump_json()


def test_preferred_and_excluded_linters(generator) -> None:
    preferred = generator.generate(PYTHON_PROFILE, UserPreferences(preferred_linters=["pylint", "bandit"]))
    excluded = generator.generate(PYTHON_PROFILE, UserPreferences(excluded_linters=["semgrep"]))

    assert preferred.enabled_names == ["pylint", "bandit"]
    assert "semgrep" not in excluded.enabled_names
    assert "semgrep" in excluded.linters.disabled


def test_severity_threshold_drops_lower_severity_linters(generator) -> None:
    config = generator.generate(PYTHON_PROFILE, UserPreferences(severity_threshold="error"))

    assert config.enabled_names == ["pylint", "bandit", "secretlint", "semgrep"]
    assert all(linter.severity >= Severity.ERROR for linter in config.linters.enabled)
    assert {"black", "cspell"} <= set(config.linters.disabled)


def test_required_linters_are_added(generator) -> None:
    prefs = UserPreferences(
        preferred_linters=["pylint"],
        organization_standards=OrganizationStandards(required_linters=["markdownlint", "unknown-tool"]),
    )

    config = generator.generate(PYTHON_PROFILE, prefs)

    assert config.enabled_names == ["pylint", "markdownlint"]
    markdownlint = config.linters.enabled[1]
    assert markdownlint.language == "markdown"


def test_enforced_rules_add_organisation_custom_rule(generator) -> None:
    prefs = UserPreferences(organization_standards=OrganizationStandards(enforced_rules={"no-eval": "error"}))

    config = generator.generate(REACT_PROFILE, prefs)

    (rule,) = config.linters.custom_rules
    assert rule.name == "organization-rules"
    assert rule.path == ".megalinter/custom-rules.js"


def test_reporting_config_follows_preferences(generator) -> None:
    default = generator.generate_reporting_config()
    verbose = generator.generate_reporting_config(
        UserPreferences(
            reporting_preferences=ReportingPreferences(format=OutputFormat.SARIF, detail_level=DetailLevel.VERBOSE),
        ),
    )
    json_only = generator.generate_reporting_config(
        UserPreferences(reporting_preferences=ReportingPreferences(format=OutputFormat.JSON)),
    )

    assert default.formats == [OutputFormat.JSON, OutputFormat.CONSOLE]
    assert verbose.formats == [OutputFormat.JSON, OutputFormat.SARIF, OutputFormat.HTML]
    assert json_only.formats == [OutputFormat.JSON]


def test_security_config_threshold(generator) -> None:
    enabled = generator.generate_security_config()
    disabled = generator.generate_security_config(
        UserPreferences(security_preferences=SecurityPreferences(enable_security_scanning=False)),
    )

    assert enabled.security_severity_threshold is SecuritySeverity.HIGH
    assert disabled.security_severity_threshold is SecuritySeverity.CRITICAL
    assert enabled.allow_secrets is False


def test_describe_optimizations(generator) -> None:
    before = generator.generate(PYTHON_PROFILE)
    after = before.model_copy(deep=True)
    after.performance.parallelism = 1
    after.performance.incremental_scanning = False

    notes = generator.describe_optimizations(before, after)

    assert notes == ["Parallelism changed from 2 to 1", "Incremental scanning disabled"]
    assert generator.describe_optimizations(before, before) == []


def test_export_environment_is_public(generator) -> None:
    env = generator.export_environment(generator.generate(PYTHON_PROFILE))

    assert env["ENABLE_LINTERS"].split(",")[0] == "pylint"
