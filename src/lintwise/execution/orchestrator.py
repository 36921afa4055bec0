# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Single-flight execution of a linter plan inside a container."""

from __future__ import annotations

import logging
import re
import subprocess  # nosec B404
import threading
import time
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from enum import StrEnum
from pathlib import Path
from typing import IO, Final, NoReturn

from ..config.export import export_environment, render_environment
from ..config.models import Configuration
from ..errors import ExecutionError, ExecutionErrorKind
from ..models import LanguageProfile, LintingResults, PerformanceMetrics
from .context import build_repository_context
from .events import EventChannel, EventType, LintingEvent
from .parser import ResultParser
from .runtime import ContainerRunSpec, ContainerRuntime, RuntimeStatus

LOGGER = logging.getLogger(__name__)

CONFIG_EXPORT_FILENAME: Final[str] = ".lintwise.env"
CANCEL_GRACE_SECONDS: Final[float] = 5.0
CONTAINER_NAME_PREFIX: Final[str] = "lintwise-"
STDOUT: Final[str] = "stdout"
STDERR: Final[str] = "stderr"
_PROGRESS_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"\bRunning\s+(?:linter\s+)?([A-Za-z0-9_.+-]+)"),
    re.compile(r"^\s*\[([A-Za-z0-9_.+-]+)\]"),
)

Launcher = Callable[[ContainerRunSpec], "subprocess.Popen[str]"]


class ExecutionState(StrEnum):
    """Lifecycle states of an orchestrator."""

    IDLE = "idle"
    PREPARING = "preparing"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


def running_linter(line: str) -> str | None:
    """Return the linter name announced by ``line``, if any."""

    for pattern in _PROGRESS_PATTERNS:
        if match := pattern.search(line):
            return match.group(1)
    return None


class ExecutionOrchestrator:
    """Run one linter plan at a time inside a container.

    A second :meth:`execute` while one is in flight fails immediately with an
    ``ExecutionError`` of kind ``BUSY``. Every call ends in a terminal state
    and releases the busy flag, whatever the outcome.
    """

    def __init__(
        self,
        runtime: ContainerRuntime | None = None,
        *,
        launcher: Launcher | None = None,
        parser: ResultParser | None = None,
        events: EventChannel | None = None,
        grace_period: float = CANCEL_GRACE_SECONDS,
    ) -> None:
        self.runtime = runtime or ContainerRuntime()
        self._launcher: Launcher = launcher or self.runtime.launch
        self.parser = parser or ResultParser()
        self.events = events or EventChannel()
        self._grace_period = grace_period
        self._lock = threading.Lock()
        self._busy = False
        self._state = ExecutionState.IDLE
        self._process: subprocess.Popen[str] | None = None
        self._spec: ContainerRunSpec | None = None
        self._cancel_requested = False
        self._timed_out = False
        self._execution_id: str | None = None

    @property
    def state(self) -> ExecutionState:
        """Return the current lifecycle state."""

        with self._lock:
            return self._state

    @property
    def busy(self) -> bool:
        """Return ``True`` while an execution is in flight."""

        with self._lock:
            return self._busy

    def status(self) -> RuntimeStatus:
        """Return the container runtime's availability."""

        return self.runtime.status()

    def execute(
        self,
        config: Configuration,
        repo_path: Path,
        *,
        profile: LanguageProfile | None = None,
        timeout: float | None = None,
    ) -> LintingResults:
        """Run ``config`` against ``repo_path`` and return parsed results.

        Args:
            config: Validated plan to execute.
            repo_path: Repository mounted into the container.
            profile: Optional profile snapshot recorded on the results.
            timeout: Wall-clock limit in seconds; defaults to the plan's
                ``max_execution_time``.

        Returns:
            LintingResults: Immutable record of the completed execution.

        Raises:
            ExecutionError: If the orchestrator is busy, the runtime is
                unreachable, the launch fails, the deadline passes, the run is
                cancelled, or the container exits non-zero. A keyboard
                interrupt while waiting on the container is treated as a
                cancellation.
        """

        with self._lock:
            if self._busy:
                raise ExecutionError(
                    "Engine busy: an execution is already in progress",
                    kind=ExecutionErrorKind.BUSY,
                    execution_id=self._execution_id,
                )
            self._busy = True
            self._cancel_requested = False
            self._timed_out = False
            self._process = None
            self._spec = None
            self._execution_id = uuid.uuid4().hex
            execution_id = self._execution_id
        try:
            return self._execute(execution_id, config, Path(repo_path), profile, timeout)
        except ExecutionError:
            raise
        except KeyboardInterrupt:
            self._set_state(ExecutionState.CANCELLED)
            raise
        except BaseException:
            self._set_state(ExecutionState.FAILED)
            raise
        finally:
            with self._lock:
                self._busy = False
                self._process = None
                self._spec = None

    def cancel(self) -> bool:
        """Cancel the in-flight execution.

        The named container is killed through the engine and the client
        process receives a termination signal, then a kill signal if it is
        still alive after the grace period. The pending :meth:`execute` call
        raises ``ExecutionError`` of kind ``CANCELLED``.

        Returns:
            bool: ``True`` when an execution was in flight.
        """

        with self._lock:
            if not self._busy:
                return False
            self._cancel_requested = True
            process = self._process
            spec = self._spec
        if process is not None and spec is not None:
            self._stop(spec, process)
        return True

    def _execute(
        self,
        execution_id: str,
        config: Configuration,
        repo_path: Path,
        profile: LanguageProfile | None,
        timeout: float | None,
    ) -> LintingResults:
        started = time.monotonic()
        runtime_status = self.runtime.status()
        if not runtime_status.available:
            detail = f" ({runtime_status.detail})" if runtime_status.detail else ""
            self._fail(
                execution_id,
                ExecutionState.FAILED,
                ExecutionError(
                    f"Container runtime is not available{detail}",
                    kind=ExecutionErrorKind.RUNTIME_UNAVAILABLE,
                    execution_id=execution_id,
                ),
            )

        self._set_state(ExecutionState.PREPARING)
        root = repo_path.resolve()
        spec = self._prepare(execution_id, config, root)

        self._set_state(ExecutionState.RUNNING)
        self.events.publish(LintingEvent(EventType.STARTED, execution_id, message=str(root)))
        stdout, stderr, returncode = self._run(execution_id, spec, config, timeout)
        duration_ms = (time.monotonic() - started) * 1000

        if self._timed_out:
            self._fail(
                execution_id,
                ExecutionState.TIMED_OUT,
                ExecutionError(
                    "Execution exceeded its time limit",
                    kind=ExecutionErrorKind.TIMED_OUT,
                    returncode=returncode,
                    stderr=stderr,
                    execution_id=execution_id,
                ),
            )
        if self._cancel_requested:
            self._fail(
                execution_id,
                ExecutionState.CANCELLED,
                ExecutionError(
                    "Execution was cancelled",
                    kind=ExecutionErrorKind.CANCELLED,
                    returncode=returncode,
                    stderr=stderr,
                    execution_id=execution_id,
                ),
            )
        if returncode != 0:
            self._fail(
                execution_id,
                ExecutionState.FAILED,
                ExecutionError(
                    f"Linting container exited with status {returncode}",
                    kind=ExecutionErrorKind.NON_ZERO_EXIT,
                    returncode=returncode,
                    stderr=stderr,
                    execution_id=execution_id,
                ),
            )

        parsed = self.parser.parse(stdout, stderr)
        for warning in parsed.warnings:
            LOGGER.warning("%s", warning)
        results = LintingResults(
            execution_id=execution_id,
            timestamp=datetime.now(UTC),
            duration=duration_ms,
            repository=build_repository_context(root),
            profile=profile,
            configuration=config.model_copy(deep=True),
            results=parsed.results,
            summary=parsed.summary,
            security=parsed.security,
            performance=PerformanceMetrics(
                total_execution_time=duration_ms,
                linter_execution_times={result.linter: result.duration for result in parsed.results},
            ),
            warnings=parsed.warnings,
        )
        self._set_state(ExecutionState.COMPLETED)
        self.events.publish(
            LintingEvent(
                EventType.COMPLETED,
                execution_id,
                message=f"{results.summary.total_issues} issue(s) found",
            ),
        )
        return results

    def _prepare(self, execution_id: str, config: Configuration, root: Path) -> ContainerRunSpec:
        if not root.is_dir():
            self._fail(
                execution_id,
                ExecutionState.FAILED,
                ExecutionError(
                    f"Repository path {root} is not a directory",
                    kind=ExecutionErrorKind.LAUNCH_FAILED,
                    execution_id=execution_id,
                ),
            )
        env = export_environment(config)
        try:
            (root / CONFIG_EXPORT_FILENAME).write_text(render_environment(env), encoding="utf-8")
        except OSError as exc:
            self._fail(
                execution_id,
                ExecutionState.FAILED,
                ExecutionError(
                    f"Unable to write {CONFIG_EXPORT_FILENAME}: {exc}",
                    kind=ExecutionErrorKind.LAUNCH_FAILED,
                    execution_id=execution_id,
                ),
                cause=exc,
            )
        return self.runtime.build_run_spec(config, root, env, name=f"{CONTAINER_NAME_PREFIX}{execution_id}")

    def _run(
        self,
        execution_id: str,
        spec: ContainerRunSpec,
        config: Configuration,
        timeout: float | None,
    ) -> tuple[str, str, int]:
        with self._lock:
            cancelled_early = self._cancel_requested
        if cancelled_early:
            return "", "", -1

        try:
            process = self._launcher(spec)
        except OSError as exc:
            self._fail(
                execution_id,
                ExecutionState.FAILED,
                ExecutionError(
                    f"Unable to launch linting container: {exc}",
                    kind=ExecutionErrorKind.LAUNCH_FAILED,
                    execution_id=execution_id,
                ),
                cause=exc,
            )
        with self._lock:
            self._process = process
            self._spec = spec
            cancel_now = self._cancel_requested
        if cancel_now:
            self._stop(spec, process)

        stdout_lines: list[str] = []
        stderr_lines: list[str] = []
        readers = [
            threading.Thread(
                target=self._pump,
                args=(process.stdout, stdout_lines, execution_id, STDOUT),
                name="lintwise-stdout",
                daemon=True,
            ),
            threading.Thread(
                target=self._pump,
                args=(process.stderr, stderr_lines, execution_id, STDERR),
                name="lintwise-stderr",
                daemon=True,
            ),
        ]
        for reader in readers:
            reader.start()

        deadline = timeout if timeout is not None else config.performance.max_execution_time / 1000
        timer = threading.Timer(deadline, self._on_deadline, args=(spec, process))
        timer.daemon = True
        timer.start()
        try:
            returncode = process.wait()
        except KeyboardInterrupt:
            LOGGER.warning("Interrupted; cancelling execution %s", execution_id)
            with self._lock:
                self._cancel_requested = True
            self._stop(spec, process)
            returncode = process.wait()
        except BaseException:
            self._stop(spec, process)
            raise
        finally:
            timer.cancel()
        for reader in readers:
            reader.join(self._grace_period)
        return "".join(stdout_lines), "".join(stderr_lines), returncode

    def _pump(self, stream: IO[str] | None, sink: list[str], execution_id: str, name: str) -> None:
        if stream is None:
            return
        try:
            for line in iter(stream.readline, ""):
                sink.append(line)
                self.events.publish(
                    LintingEvent(EventType.OUTPUT, execution_id, message=line.rstrip("\n"), stream=name),
                )
                if name == STDOUT and (linter := running_linter(line)) is not None:
                    self.events.publish(
                        LintingEvent(EventType.PROGRESS, execution_id, linter=linter, message=line.strip()),
                    )
        except (OSError, ValueError) as exc:
            LOGGER.debug("Stopped reading %s: %s", name, exc)
        finally:
            stream.close()

    def _on_deadline(self, spec: ContainerRunSpec, process: subprocess.Popen[str]) -> None:
        if process.poll() is not None:
            return
        with self._lock:
            self._timed_out = True
        LOGGER.warning("Execution deadline reached; killing container process %s", process.pid)
        self.runtime.stop(spec)
        process.kill()

    def _stop(self, spec: ContainerRunSpec, process: subprocess.Popen[str]) -> None:
        if process.poll() is not None:
            return
        self.runtime.stop(spec)
        self._terminate(process)

    def _terminate(self, process: subprocess.Popen[str]) -> None:
        if process.poll() is not None:
            return
        process.terminate()
        try:
            process.wait(self._grace_period)
        except subprocess.TimeoutExpired:
            LOGGER.warning("Process %s ignored termination; killing it", process.pid)
            process.kill()

    def _set_state(self, state: ExecutionState) -> None:
        with self._lock:
            self._state = state

    def _fail(
        self,
        execution_id: str,
        state: ExecutionState,
        error: ExecutionError,
        *,
        cause: BaseException | None = None,
    ) -> NoReturn:
        self._set_state(state)
        event_type = {
            ExecutionState.TIMED_OUT: EventType.TIMED_OUT,
            ExecutionState.CANCELLED: EventType.CANCELLED,
        }.get(state, EventType.FAILED)
        self.events.publish(LintingEvent(event_type, execution_id, message=str(error)))
        raise error from cause


__all__ = ["CONFIG_EXPORT_FILENAME", "ExecutionOrchestrator", "ExecutionState", "Launcher", "running_linter"]
