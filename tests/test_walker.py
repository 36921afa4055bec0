# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the bounded repository tree walker."""

from __future__ import annotations

from pathlib import Path

import pytest

from lintwise.discovery import TreeWalker
from lintwise.discovery.walker import is_skipped_name
from lintwise.errors import AnalysisError


def test_walker_skips_excluded_directories_and_logs(make_repo) -> None:
    root = make_repo(
        {
            "src/main.py": "print('hi')\n",
            "node_modules/pkg/index.js": "module.exports = 1;\n",
            ".git/config": "[core]\n",
            ".github/workflows/ci.yml": "on: push\n",
            "debug.log": "noise\n",
        },
    )

    relatives = [entry.relative for entry in TreeWalker(root).files()]

    assert "src/main.py" in relatives
    assert ".github/workflows/ci.yml" in relatives
    assert not any(path.startswith("node_modules") for path in relatives)
    assert not any(path.startswith(".git/") for path in relatives)
    assert "debug.log" not in relatives


def test_walker_respects_max_depth(make_repo) -> None:
    root = make_repo(
        {
            "top.py": "",
            "a/one.py": "",
            "a/b/two.py": "",
            "a/b/c/three.py": "",
        },
    )

    shallow = {entry.relative for entry in TreeWalker(root, max_depth=1).files()}
    deep = {entry.relative for entry in TreeWalker(root, max_depth=3).files()}

    assert shallow == {"top.py", "a/one.py"}
    assert deep == {"top.py", "a/one.py", "a/b/two.py", "a/b/c/three.py"}


def test_walker_reports_depth_and_directories(make_repo) -> None:
    root = make_repo({"pkg/mod.py": "", "pkg/sub/leaf.py": ""})
    walker = TreeWalker(root)

    depths = {entry.relative: entry.depth for entry in walker.files()}
    directories = [entry.relative for entry in walker.directories()]

    assert depths == {"pkg/mod.py": 1, "pkg/sub/leaf.py": 2}
    assert directories == ["pkg", "pkg/sub"]


def test_walker_is_reusable(make_repo) -> None:
    root = make_repo({"a.py": "", "b.py": ""})
    walker = TreeWalker(root)

    assert list(walker.files()) == list(walker.files())


def test_walker_rejects_missing_root(tmp_path: Path) -> None:
    with pytest.raises(AnalysisError):
        TreeWalker(tmp_path / "missing").files()


def test_walker_rejects_file_root(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")

    with pytest.raises(AnalysisError):
        TreeWalker(target).directories()


def test_walker_rejects_negative_depth(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        TreeWalker(tmp_path, max_depth=-1)


@pytest.mark.parametrize(
    ("name", "is_dir", "expected"),
    [
        (".cache", True, True),
        (".github", True, False),
        (".eslintrc.json", False, False),
        ("__pycache__", True, True),
        ("server.log", False, True),
        ("src", True, False),
    ],
)
def test_is_skipped_name(name: str, is_dir: bool, expected: bool) -> None:
    assert is_skipped_name(name, is_dir=is_dir) is expected
