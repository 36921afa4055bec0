# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
import subprocess
import sys
import threading
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

from lintwise.execution.runtime import ContainerRunSpec, ContainerRuntime, RuntimeStatus
from lintwise.process_utils import spawn_streaming

RepoBuilder = Callable[[Mapping[str, str]], Path]


@pytest.fixture
def make_repo(tmp_path: Path) -> RepoBuilder:
    """Return a builder that materialises ``{relative path: content}`` under a fresh root."""

    def _build(files: Mapping[str, str]) -> Path:
        root = tmp_path / "repo"
        root.mkdir(exist_ok=True)
        for relative, content in files.items():
            target = root / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _build


@pytest.fixture
def react_repo(make_repo: RepoBuilder) -> Path:
    """Return a TypeScript repository whose manifest depends on React."""

    manifest = {"name": "demo", "dependencies": {"react": "^18.2.0"}}
    return make_repo(
        {
            "src/index.ts": "export const answer = 42;\n",
            "src/app.ts": "import { answer } from './index';\nconsole.log(answer);\n",
            "src/util.ts": "export function id<T>(value: T): T {\n  return value;\n}\n",
            "package.json": json.dumps(manifest),
        },
    )


class FakeRuntime(ContainerRuntime):
    """Container runtime whose availability is fixed and whose launches run Python."""

    def __init__(self, *, available: bool = True, script: str = "") -> None:
        super().__init__(engine="fake-engine")
        self.available = available
        self.script = script
        self.launched: list[ContainerRunSpec] = []
        self.stopped: list[ContainerRunSpec] = []
        self.started = threading.Event()

    def status(self) -> RuntimeStatus:
        if self.available:
            return RuntimeStatus(available=True, version="99.0", health="healthy")
        return RuntimeStatus(available=False, health="unreachable", detail="daemon not running")

    def launch(self, spec: ContainerRunSpec) -> subprocess.Popen[str]:
        self.launched.append(spec)
        process = spawn_streaming([sys.executable, "-c", self.script])
        self.started.set()
        return process

    def stop(self, spec: ContainerRunSpec) -> bool:
        self.stopped.append(spec)
        return True


@pytest.fixture
def fake_runtime() -> Callable[..., FakeRuntime]:
    """Return a factory for :class:`FakeRuntime` instances."""

    return FakeRuntime
