# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Container runtime status queries and run-specification building."""

from __future__ import annotations

import logging
import subprocess  # nosec B404
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from ..config.models import Configuration
from ..planning.performance import parse_memory
from ..process_utils import CommandOptions, run_command, spawn_streaming

LOGGER = logging.getLogger(__name__)

DEFAULT_ENGINE: Final[str] = "docker"
DEFAULT_IMAGE: Final[str] = "oxsecurity/megalinter:latest"
WORKSPACE_MOUNT: Final[str] = "/tmp/lint"  # nosec B108 - path inside the container
ENGINE_COMMAND_TIMEOUT_SECONDS: Final[float] = 10.0
HEALTH_HEALTHY: Final[str] = "healthy"
HEALTH_MISSING: Final[str] = "missing"
HEALTH_UNREACHABLE: Final[str] = "unreachable"


@dataclass(frozen=True, slots=True)
class RuntimeStatus:
    """Availability of the container engine."""

    available: bool
    version: str | None = None
    health: str = HEALTH_UNREACHABLE
    detail: str | None = None


@dataclass(frozen=True, slots=True)
class ContainerRunSpec:
    """Resource-bounded description of one container run."""

    image: str
    repo_path: Path
    mount_target: str = WORKSPACE_MOUNT
    memory: str = "2GB"
    cpus: int = 1
    env: Mapping[str, str] = field(default_factory=dict)
    remove: bool = True
    name: str | None = None

    @property
    def memory_flag(self) -> str:
        """Return the memory limit in the engine's ``<n>m`` notation."""

        return f"{parse_memory(self.memory)}m"

    def to_command(self, engine: str = DEFAULT_ENGINE) -> list[str]:
        """Return the engine command line that performs this run."""

        command = [engine, "run"]
        if self.remove:
            command.append("--rm")
        if self.name:
            command.extend(["--name", self.name])
        command.extend(
            [
                "--volume",
                f"{self.repo_path}:{self.mount_target}:rw",
                "--workdir",
                self.mount_target,
                "--memory",
                self.memory_flag,
                "--cpus",
                str(self.cpus),
            ],
        )
        for key, value in self.env.items():
            command.extend(["--env", f"{key}={value}"])
        command.append(self.image)
        return command


class ContainerRuntime:
    """Query and drive a Docker-compatible container engine."""

    def __init__(
        self,
        engine: str = DEFAULT_ENGINE,
        *,
        image: str = DEFAULT_IMAGE,
        command_timeout: float = ENGINE_COMMAND_TIMEOUT_SECONDS,
    ) -> None:
        self.engine = engine
        self.image = image
        self._command_timeout = command_timeout

    def status(self) -> RuntimeStatus:
        """Return whether the engine's daemon answers a version query."""

        try:
            completed = run_command(
                [self.engine, "version", "--format", "{{.Server.Version}}"],
                options=CommandOptions(timeout=self._command_timeout),
            )
        except FileNotFoundError as exc:
            LOGGER.debug("Container engine %s not found: %s", self.engine, exc)
            return RuntimeStatus(available=False, health=HEALTH_MISSING, detail=str(exc))
        except OSError as exc:
            LOGGER.debug("Container engine %s could not be queried: %s", self.engine, exc)
            return RuntimeStatus(available=False, health=HEALTH_UNREACHABLE, detail=str(exc))
        if completed.returncode != 0:
            detail = (completed.stderr or "").strip() or None
            return RuntimeStatus(available=False, health=HEALTH_UNREACHABLE, detail=detail)
        version = completed.stdout.strip() or None
        return RuntimeStatus(available=True, version=version, health=HEALTH_HEALTHY)

    def build_run_spec(
        self,
        config: Configuration,
        repo_path: Path,
        env: Mapping[str, str],
        *,
        name: str | None = None,
    ) -> ContainerRunSpec:
        """Return the run specification for ``config`` against ``repo_path``.

        Args:
            config: Plan whose resource limits bound the container.
            repo_path: Repository mounted read-write into the container.
            env: Variables exported into the container.
            name: Container name used to stop the run from outside.

        Returns:
            ContainerRunSpec: Description consumed by a launcher.
        """

        workspace_env = {
            "DEFAULT_WORKSPACE": WORKSPACE_MOUNT,
            "MEGALINTER_CONFIG_VERSION": config.version,
        }
        return ContainerRunSpec(
            image=self.image,
            repo_path=repo_path,
            memory=config.performance.resource_limits.max_memory,
            cpus=config.performance.parallelism,
            env={**workspace_env, **env},
            name=name,
        )

    def launch(self, spec: ContainerRunSpec) -> subprocess.Popen[str]:
        """Start ``spec`` with streaming pipes."""

        command = spec.to_command(self.engine)
        LOGGER.debug("Launching %s", " ".join(command[:2]))
        return spawn_streaming(command)

    def stop(self, spec: ContainerRunSpec) -> bool:
        """Kill the named container started for ``spec`` through the engine.

        Returns:
            bool: ``True`` when the engine acknowledged the kill.
        """

        if not spec.name:
            return False
        try:
            completed = run_command(
                [self.engine, "kill", spec.name],
                options=CommandOptions(timeout=self._command_timeout),
            )
        except OSError as exc:
            LOGGER.warning("Unable to stop container %s: %s", spec.name, exc)
            return False
        if completed.returncode != 0:
            LOGGER.debug("Container %s not killed: %s", spec.name, (completed.stderr or "").strip())
            return False
        return True


__all__ = [
    "ContainerRunSpec",
    "ContainerRuntime",
    "DEFAULT_IMAGE",
    "RuntimeStatus",
    "WORKSPACE_MOUNT",
]
