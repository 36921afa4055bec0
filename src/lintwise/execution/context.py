# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Repository identity captured alongside execution results."""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import Final

from ..models import RepositoryContext

LOGGER = logging.getLogger(__name__)

_REMOTE_URL: Final[re.Pattern[str]] = re.compile(r"^\s*url\s*=\s*(\S+)\s*$", re.MULTILINE)
_GITHUB_REMOTE: Final[re.Pattern[str]] = re.compile(
    r"(?:https://github\.com/|git@github\.com:)(?P<owner>[^/\s]+)/(?P<repo>[^/\s]+?)(?:\.git)?/?$",
)

# Node lockfiles take precedence over the generic package.json marker.
_NODE_LOCKFILES: Final[tuple[tuple[str, str], ...]] = (
    ("yarn.lock", "yarn"),
    ("pnpm-lock.yaml", "pnpm"),
)
_PACKAGE_MANAGER_MARKERS: Final[tuple[tuple[str, str], ...]] = (
    ("pom.xml", "maven"),
    ("build.gradle", "gradle"),
    ("requirements.txt", "pip"),
    ("Cargo.toml", "cargo"),
    ("go.mod", "go"),
)


def read_git_remote(root: Path) -> str | None:
    """Return the first remote URL recorded in ``.git/config``."""

    config_path = root / ".git" / "config"
    if not config_path.is_file():
        return None
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.debug("Unable to read %s: %s", config_path, exc)
        return None
    match = _REMOTE_URL.search(text)
    return match.group(1) if match else None


def split_github_remote(remote: str) -> tuple[str, str] | None:
    """Return ``(owner, repository)`` for a GitHub remote URL."""

    match = _GITHUB_REMOTE.search(remote)
    if match is None:
        return None
    return match.group("owner"), match.group("repo")


def detect_package_manager(root: Path) -> str | None:
    """Return the package manager implied by files at ``root``."""

    if (root / "package.json").is_file():
        for lockfile, manager in _NODE_LOCKFILES:
            if (root / lockfile).is_file():
                return manager
        return "npm"
    for marker, manager in _PACKAGE_MANAGER_MARKERS:
        if (root / marker).is_file():
            return manager
    return None


def build_repository_context(root: Path) -> RepositoryContext:
    """Return the :class:`RepositoryContext` for ``root``.

    Git metadata is optional; missing or unreadable data leaves the fields
    unset.
    """

    remote = read_git_remote(root)
    owner_repo = split_github_remote(remote) if remote else None
    return RepositoryContext(
        root_path=str(root),
        git_remote=remote,
        organization=owner_repo[0] if owner_repo else None,
        repository=owner_repo[1] if owner_repo else None,
        package_manager=detect_package_manager(root),
        last_analyzed=datetime.now(UTC),
    )


__all__ = ["build_repository_context", "detect_package_manager", "read_git_remote", "split_github_remote"]
