# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for end-to-end repository profiling."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from lintwise.errors import AnalysisError
from lintwise.models import Complexity, LanguageProfile
from lintwise.profiling import RepositoryProfiler


def test_typescript_react_repository(react_repo: Path) -> None:
    profile = RepositoryProfiler().analyze(react_repo)

    assert list(profile.primary) == ["typescript"]
    assert "react" in profile.frameworks
    assert profile.complexity is Complexity.SIMPLE
    assert "npm" in profile.build_tools
    assert any(entry.type == "npm" for entry in profile.config_files.values())


@pytest.mark.parametrize(
    "files",
    [
        {},
        {"README.md": "# hi\n"},
        {"a.py": "", "b.go": "", "c.rs": "", "d.java": "", "e.rb": "", "f.php": "", "package.json": "{}"},
        {f"pkg{index}/mod.py": "x = 1\n" for index in range(12)},
    ],
)
def test_profile_invariants(make_repo, files) -> None:
    root = make_repo(files)

    profile = RepositoryProfiler().analyze(root)

    assert 0.0 <= profile.confidence <= 1.0
    assert not set(profile.primary) & set(profile.secondary)


def test_profiling_is_deterministic(react_repo: Path) -> None:
    profiler = RepositoryProfiler()

    assert profiler.analyze(react_repo) == profiler.analyze(react_repo)


def test_missing_repository_raises(tmp_path: Path) -> None:
    with pytest.raises(AnalysisError):
        RepositoryProfiler().analyze(tmp_path / "nowhere")


def test_profile_rejects_overlapping_languages() -> None:
    with pytest.raises(ValidationError):
        LanguageProfile(primary=("python",), secondary=("python",), complexity=Complexity.SIMPLE, confidence=0.5)


def test_profile_is_immutable(react_repo: Path) -> None:
    profile = RepositoryProfiler().analyze(react_repo)

    with pytest.raises(ValidationError):
        profile.confidence = 0.1  # type: ignore[misc]
