# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Bounded, filtered traversal of a repository tree."""

from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from ..constants import ALLOWED_HIDDEN_DIRS, ALWAYS_EXCLUDE_NAMES, DEFAULT_MAX_DEPTH, EXCLUDE_NAME_GLOBS
from ..errors import AnalysisError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WalkEntry:
    """File or directory produced by :class:`TreeWalker`.

    Attributes:
        path: Absolute path of the entry.
        relative: Repository-relative POSIX path.
        depth: ``0`` for direct children of the root, ``+1`` per nesting level.
    """

    path: Path
    relative: str
    depth: int

    @property
    def name(self) -> str:
        """Return the final path component."""

        return self.path.name


def is_skipped_name(name: str, *, is_dir: bool) -> bool:
    """Return ``True`` when ``name`` must never be reported or entered.

    Args:
        name: Base name of the candidate entry.
        is_dir: Whether the entry is a directory.

    Returns:
        bool: ``True`` when the walker skips the entry.
    """

    if is_dir and name.startswith(".") and name not in ALLOWED_HIDDEN_DIRS:
        return True
    if name in ALWAYS_EXCLUDE_NAMES:
        return True
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in EXCLUDE_NAME_GLOBS)


class TreeWalker:
    """Walk a repository up to ``max_depth`` levels below its root.

    ``files()`` and ``directories()`` each return a new lazy iterator, so a
    walker can be consumed any number of times. Entries are produced in
    sorted name order.
    """

    def __init__(self, root: Path, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth < 0:
            raise ValueError("max_depth must be non-negative")
        self.root = Path(root)
        self.max_depth = max_depth

    def files(self) -> Iterator[WalkEntry]:
        """Return an iterator over files below the root.

        Raises:
            AnalysisError: If the root is missing or unreadable.
        """

        root = self._checked_root()
        return (entry for entry, is_dir in self._walk(root) if not is_dir)

    def directories(self) -> Iterator[WalkEntry]:
        """Return an iterator over directories below the root.

        Raises:
            AnalysisError: If the root is missing or unreadable.
        """

        root = self._checked_root()
        return (entry for entry, is_dir in self._walk(root) if is_dir)

    def _checked_root(self) -> Path:
        root = self.root.resolve()
        if not root.is_dir():
            raise AnalysisError(f"Repository root {self.root} does not exist or is not a directory")
        try:
            with os.scandir(root) as handle:
                next(handle, None)
        except OSError as exc:
            raise AnalysisError(f"Repository root {self.root} is not readable: {exc}") from exc
        return root

    def _walk(self, root: Path) -> Iterator[tuple[WalkEntry, bool]]:
        for dirpath, dirnames, filenames in os.walk(root, onerror=self._on_error, followlinks=False):
            current = Path(dirpath)
            rel_dir = current.relative_to(root)
            depth = len(rel_dir.parts)
            dirnames[:] = sorted(name for name in dirnames if not is_skipped_name(name, is_dir=True))
            for name in dirnames:
                yield self._entry(current / name, rel_dir / name, depth), True
            if depth + 1 > self.max_depth:
                dirnames[:] = []
            for name in sorted(filenames):
                if is_skipped_name(name, is_dir=False):
                    continue
                yield self._entry(current / name, rel_dir / name, depth), False

    @staticmethod
    def _entry(path: Path, relative: Path, depth: int) -> WalkEntry:
        return WalkEntry(path=path, relative=relative.as_posix(), depth=depth)

    @staticmethod
    def _on_error(error: OSError) -> None:
        LOGGER.warning("Skipping unreadable directory %s: %s", error.filename, error.strerror or error)


__all__ = ["TreeWalker", "WalkEntry", "is_skipped_name"]
