# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the lintwise command line interface."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from lintwise.cli.app import app
from lintwise.cli.commands.run.command import parse_timeout
from lintwise.cli.shared import CLIContext
from lintwise.planning.validator import ConfigurationValidator

CLEAN_REPORT = {"linters": [{"linter": "eslint", "status": "success", "issues": []}]}
DIRTY_REPORT = {
    "linters": [
        {"linter": "eslint", "status": "success", "issues": [{"file": "a.ts", "severity": "error", "message": "x"}]},
    ],
}


def _report_script(report: dict[str, Any]) -> str:
    return "print(" + repr(json.dumps(report)) + ")\n"


def _load_json(output: str) -> Any:
    payload, _ = json.JSONDecoder().raw_decode(output, output.index("{"))
    return payload


def _invoke(args: list[str], runtime=None):
    obj = CLIContext(use_emoji=False)
    if runtime is not None:
        obj.runtime_factory = lambda: runtime
    return CliRunner().invoke(app, ["--no-emoji", *args], obj=obj)


def test_profile_prints_json(react_repo: Path) -> None:
    result = _invoke(["profile", str(react_repo)])

    assert result.exit_code == 0
    payload = _load_json(result.stdout)
    assert payload["primary"] == ["typescript"]
    assert "react" in payload["frameworks"]
    assert payload["complexity"] == "simple"


def test_profile_missing_path_exits_one(tmp_path: Path) -> None:
    result = _invoke(["profile", str(tmp_path / "missing")])

    assert result.exit_code == 1


def test_plan_prints_configuration(react_repo: Path) -> None:
    result = _invoke(["plan", str(react_repo)])

    assert result.exit_code == 0
    payload = _load_json(result.stdout)
    enabled = [linter["name"] for linter in payload["linters"]["enabled"]]
    assert "prettier" in enabled
    assert "eslint-plugin-prettier" not in enabled
    assert "eslint-plugin-prettier" in payload["linters"]["disabled"]


def test_plan_env_format(react_repo: Path) -> None:
    result = _invoke(["plan", str(react_repo), "--format", "env"])

    assert result.exit_code == 0
    assert "ENABLE_LINTERS=eslint,prettier" in result.stdout
    assert "TIMEOUT_SECONDS=120" in result.stdout


def test_plan_applies_preferences_file(react_repo: Path, tmp_path: Path) -> None:
    prefs = tmp_path / "prefs.toml"
    prefs.write_text('[preferences]\nexcluded_linters = ["cspell"]\n', encoding="utf-8")

    result = _invoke(["plan", str(react_repo), "--prefs", str(prefs)])

    assert result.exit_code == 0
    payload = _load_json(result.stdout)
    assert "cspell" in payload["linters"]["disabled"]


def test_plan_invalid_preferences_exit_one(react_repo: Path, tmp_path: Path) -> None:
    prefs = tmp_path / "prefs.toml"
    prefs.write_text("unknown_option = true\n", encoding="utf-8")

    result = _invoke(["plan", str(react_repo), "--prefs", str(prefs)])

    assert result.exit_code == 1


def test_plan_validation_failure_exits_two(react_repo: Path, tmp_path: Path, monkeypatch) -> None:
    prefs = tmp_path / "prefs.toml"
    prefs.write_text(
        '[preferences.organization_standards]\nrequired_linters = ["prettier", "eslint-plugin-prettier"]\n',
        encoding="utf-8",
    )
    monkeypatch.setattr(ConfigurationValidator, "apply_automatic_fixes", lambda self, config, result: config)

    result = _invoke(["plan", str(react_repo), "--prefs", str(prefs)])

    assert result.exit_code == 2


def test_run_with_unreachable_runtime_exits_four(react_repo: Path, fake_runtime) -> None:
    runtime = fake_runtime(available=False, script=_report_script(CLEAN_REPORT))

    result = _invoke(["run", str(react_repo)], runtime)

    assert result.exit_code == 4
    assert runtime.launched == []


def test_run_without_issues_exits_zero(react_repo: Path, fake_runtime) -> None:
    runtime = fake_runtime(script=_report_script(CLEAN_REPORT))

    result = _invoke(["run", str(react_repo), "--profile", "fast"], runtime)

    assert result.exit_code == 0
    payload = _load_json(result.stdout)
    assert payload["summary"]["total_issues"] == 0
    assert payload["configuration"]["performance"]["cache_strategy"] == "aggressive"
    assert payload["profile"]["primary"] == ["typescript"]


def test_run_with_issues_exits_one(react_repo: Path, fake_runtime) -> None:
    runtime = fake_runtime(script=_report_script(DIRTY_REPORT))

    result = _invoke(["run", str(react_repo)], runtime)

    assert result.exit_code == 1
    assert _load_json(result.stdout)["summary"]["errors"] == 1


def test_run_timeout_exits_three(react_repo: Path, fake_runtime) -> None:
    runtime = fake_runtime(script="import time\ntime.sleep(30)\n")

    result = _invoke(["run", str(react_repo), "--timeout", "0.5s"], runtime)

    assert result.exit_code == 3


def test_run_container_failure_exits_five(react_repo: Path, fake_runtime) -> None:
    runtime = fake_runtime(script="import sys\nsys.exit(2)\n")

    result = _invoke(["run", str(react_repo)], runtime)

    assert result.exit_code == 5


def test_run_rejects_malformed_timeout(react_repo: Path, fake_runtime) -> None:
    runtime = fake_runtime(script=_report_script(CLEAN_REPORT))

    result = _invoke(["run", str(react_repo), "--timeout", "soon"], runtime)

    assert result.exit_code == 2
    assert runtime.launched == []


@pytest.mark.parametrize(("available", "code"), [(True, 0), (False, 4)])
def test_status(fake_runtime, available: bool, code: int) -> None:
    result = _invoke(["status"], fake_runtime(available=available))

    assert result.exit_code == code
    assert "engine: fake-engine" in result.stdout


@pytest.mark.parametrize(("value", "expected"), [(None, None), ("90", 90.0), ("1.5s", 1.5), (" 30S ", 30.0)])
def test_parse_timeout(value: str | None, expected: float | None) -> None:
    assert parse_timeout(value) == expected


def test_run_interrupted_exits_three(react_repo: Path, fake_runtime) -> None:
    runtime = fake_runtime(script=_report_script(CLEAN_REPORT))

    def interrupted_launch(spec):
        raise KeyboardInterrupt

    runtime.launch = interrupted_launch

    result = _invoke(["run", str(react_repo)], runtime)

    assert result.exit_code == 3
