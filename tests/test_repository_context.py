# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for repository identity detection."""

from __future__ import annotations

from pathlib import Path

import pytest

from lintwise.execution.context import (
    build_repository_context,
    detect_package_manager,
    read_git_remote,
    split_github_remote,
)

GIT_CONFIG = """[core]
\trepositoryformatversion = 0
[remote "origin"]
\turl = git@github.com:acme/widgets.git
\tfetch = +refs/heads/*:refs/remotes/origin/*
"""


@pytest.mark.parametrize(
    ("remote", "expected"),
    [
        ("https://github.com/acme/widgets.git", ("acme", "widgets")),
        ("https://github.com/acme/widgets", ("acme", "widgets")),
        ("git@github.com:acme/widgets.git", ("acme", "widgets")),
        ("https://gitlab.com/acme/widgets.git", None),
    ],
)
def test_split_github_remote(remote: str, expected) -> None:
    assert split_github_remote(remote) == expected


@pytest.mark.parametrize(
    ("files", "expected"),
    [
        (("package.json", "yarn.lock"), "yarn"),
        (("package.json", "pnpm-lock.yaml"), "pnpm"),
        (("package.json",), "npm"),
        (("pom.xml",), "maven"),
        (("requirements.txt",), "pip"),
        (("go.mod",), "go"),
        ((), None),
    ],
)
def test_detect_package_manager(make_repo, files, expected) -> None:
    root = make_repo({name: "" for name in files})

    assert detect_package_manager(root) == expected


def test_build_repository_context_with_git_remote(make_repo) -> None:
    root = make_repo({".git/config": GIT_CONFIG, "package.json": "{}"})

    context = build_repository_context(root)

    assert read_git_remote(root) == "git@github.com:acme/widgets.git"
    assert context.organization == "acme"
    assert context.repository == "widgets"
    assert context.package_manager == "npm"
    assert context.last_analyzed.tzinfo is not None


def test_build_repository_context_without_git(tmp_path: Path) -> None:
    context = build_repository_context(tmp_path)

    assert context.git_remote is None
    assert context.organization is None
    assert context.root_path == str(tmp_path)
