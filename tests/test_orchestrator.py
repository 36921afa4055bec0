# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for single-flight container execution."""

from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from lintwise.config.models import Configuration
from lintwise.errors import ExecutionError, ExecutionErrorKind
from lintwise.execution import EventChannel, ExecutionOrchestrator, ExecutionState, LintingEvent, ResultParser
from lintwise.execution.events import EventType
from lintwise.execution.orchestrator import CONFIG_EXPORT_FILENAME, running_linter

REPORT = {
    "linters": [
        {
            "linter": "eslint",
            "status": "success",
            "duration": 812,
            "files_scanned": 3,
            "issues": [{"file": "src/a.ts", "line": 1, "severity": "error", "message": "bad"}],
        },
    ],
}
SUCCESS_SCRIPT = "print('Running linter eslint', flush=True)\nprint(" + repr(json.dumps(REPORT)) + ")\n"
SLEEP_SCRIPT = "import time\nprint('Running pylint', flush=True)\ntime.sleep(30)\n"
SLOW_SUCCESS_SCRIPT = "import time\ntime.sleep(1.0)\nprint(" + repr(json.dumps(REPORT)) + ")\n"
FAILING_SCRIPT = "import sys\nsys.stderr.write('container exploded\\n')\nsys.exit(3)\n"


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    root = tmp_path / "repo"
    root.mkdir()
    (root / "index.ts").write_text("export {};\n", encoding="utf-8")
    return root


def _orchestrator(runtime, events: EventChannel | None = None) -> ExecutionOrchestrator:
    return ExecutionOrchestrator(runtime, events=events, grace_period=1.0)


def test_successful_execution(fake_runtime, repo: Path) -> None:
    runtime = fake_runtime(script=SUCCESS_SCRIPT)
    events = EventChannel()
    received: list[LintingEvent] = []
    events.subscribe(received.append)
    orchestrator = _orchestrator(runtime, events)
    config = Configuration()

    results = orchestrator.execute(config, repo)
    events.flush()

    assert orchestrator.state is ExecutionState.COMPLETED
    assert not orchestrator.busy
    assert results.summary.total_issues == 1
    assert results.has_issues
    assert results.results[0].linter == "eslint"
    assert results.performance.linter_execution_times == {"eslint": 812.0}
    assert results.repository.root_path == str(repo.resolve())
    assert results.warnings == ()
    assert (repo / CONFIG_EXPORT_FILENAME).read_text(encoding="utf-8").startswith("ENABLE_LINTERS=")
    types = [event.type for event in received]
    assert types[0] is EventType.STARTED
    assert types[-1] is EventType.COMPLETED
    assert any(event.type is EventType.PROGRESS and event.linter == "eslint" for event in received)
    events.close()


def test_results_hold_a_configuration_snapshot(fake_runtime, repo: Path) -> None:
    orchestrator = _orchestrator(fake_runtime(script=SUCCESS_SCRIPT))
    config = Configuration()

    results = orchestrator.execute(config, repo)
    config.performance.parallelism = 9

    assert results.configuration.performance.parallelism == 4
    assert results.configuration is not config


def test_run_spec_carries_resource_limits(fake_runtime, repo: Path) -> None:
    runtime = fake_runtime(script=SUCCESS_SCRIPT)
    config = Configuration()
    config.performance.resource_limits.max_memory = "3GB"
    config.performance.parallelism = 3

    results = _orchestrator(runtime).execute(config, repo)

    (spec,) = runtime.launched
    command = spec.to_command("docker")
    assert command[command.index("--name") + 1] == f"lintwise-{results.execution_id}"
    assert command[command.index("--memory") + 1] == "3072m"
    assert command[command.index("--cpus") + 1] == "3"
    assert spec.env["ENABLE_LINTERS"] == ""
    assert spec.env["DEFAULT_WORKSPACE"] == "/tmp/lint"


def test_unavailable_runtime_spawns_nothing(fake_runtime, repo: Path) -> None:
    runtime = fake_runtime(available=False, script=SUCCESS_SCRIPT)
    orchestrator = _orchestrator(runtime)

    with pytest.raises(ExecutionError) as excinfo:
        orchestrator.execute(Configuration(), repo)

    assert excinfo.value.kind is ExecutionErrorKind.RUNTIME_UNAVAILABLE
    assert runtime.launched == []
    assert orchestrator.state is ExecutionState.FAILED
    assert not orchestrator.busy
    assert not (repo / CONFIG_EXPORT_FILENAME).exists()


def test_second_execution_fails_fast_while_busy(fake_runtime, repo: Path) -> None:
    runtime = fake_runtime(script=SLOW_SUCCESS_SCRIPT)
    orchestrator = _orchestrator(runtime)
    outcome: dict[str, object] = {}

    def first() -> None:
        outcome["results"] = orchestrator.execute(Configuration(), repo)

    worker = threading.Thread(target=first)
    worker.start()
    assert runtime.started.wait(10)

    with pytest.raises(ExecutionError) as excinfo:
        orchestrator.execute(Configuration(), repo)
    worker.join(30)

    assert excinfo.value.kind is ExecutionErrorKind.BUSY
    assert "busy" in str(excinfo.value).lower()
    assert len(runtime.launched) == 1
    assert outcome["results"].summary.total_issues == 1
    assert orchestrator.state is ExecutionState.COMPLETED


def test_timeout_kills_the_process(fake_runtime, repo: Path) -> None:
    runtime = fake_runtime(script=SLEEP_SCRIPT)
    orchestrator = _orchestrator(runtime)

    with pytest.raises(ExecutionError) as excinfo:
        orchestrator.execute(Configuration(), repo, timeout=0.5)

    assert excinfo.value.kind is ExecutionErrorKind.TIMED_OUT
    assert orchestrator.state is ExecutionState.TIMED_OUT
    assert not orchestrator.busy
    assert runtime.stopped == runtime.launched


def test_cancel_resolves_in_flight_execution(fake_runtime, repo: Path) -> None:
    runtime = fake_runtime(script=SLEEP_SCRIPT)
    orchestrator = _orchestrator(runtime)
    errors: list[ExecutionError] = []

    def run() -> None:
        try:
            orchestrator.execute(Configuration(), repo)
        except ExecutionError as exc:
            errors.append(exc)

    worker = threading.Thread(target=run)
    worker.start()
    assert runtime.started.wait(10)

    assert orchestrator.cancel() is True
    worker.join(30)

    assert not worker.is_alive()
    assert [error.kind for error in errors] == [ExecutionErrorKind.CANCELLED]
    assert orchestrator.state is ExecutionState.CANCELLED
    assert orchestrator.cancel() is False
    assert runtime.stopped == runtime.launched


def test_non_zero_exit_reports_stderr(fake_runtime, repo: Path) -> None:
    orchestrator = _orchestrator(fake_runtime(script=FAILING_SCRIPT))

    with pytest.raises(ExecutionError) as excinfo:
        orchestrator.execute(Configuration(), repo)

    assert excinfo.value.kind is ExecutionErrorKind.NON_ZERO_EXIT
    assert excinfo.value.returncode == 3
    assert "container exploded" in excinfo.value.stderr
    assert orchestrator.state is ExecutionState.FAILED


def test_launch_failure(fake_runtime, repo: Path) -> None:
    def broken_launcher(spec):
        raise FileNotFoundError("docker")

    orchestrator = ExecutionOrchestrator(fake_runtime(), launcher=broken_launcher)

    with pytest.raises(ExecutionError) as excinfo:
        orchestrator.execute(Configuration(), repo)

    assert excinfo.value.kind is ExecutionErrorKind.LAUNCH_FAILED
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)
    assert not orchestrator.busy


def test_missing_repository_is_a_launch_failure(fake_runtime, tmp_path: Path) -> None:
    runtime = fake_runtime(script=SUCCESS_SCRIPT)

    with pytest.raises(ExecutionError) as excinfo:
        _orchestrator(runtime).execute(Configuration(), tmp_path / "absent")

    assert excinfo.value.kind is ExecutionErrorKind.LAUNCH_FAILED
    assert runtime.launched == []


def test_unparseable_output_becomes_warning(fake_runtime, repo: Path) -> None:
    orchestrator = _orchestrator(fake_runtime(script="print('nothing useful')"))

    results = orchestrator.execute(Configuration(), repo)

    assert results.warnings == ("ParseError: no recognisable summary in output",)
    assert not results.has_issues


@pytest.mark.parametrize(
    ("line", "expected"),
    [("Running linter eslint\n", "eslint"), ("[black] reformatted 2 files", "black"), ("Pulling image", None)],
)
def test_running_linter(line: str, expected: str | None) -> None:
    assert running_linter(line) == expected


def test_overflowing_report_numbers_become_warnings(fake_runtime, repo: Path) -> None:
    orchestrator = _orchestrator(fake_runtime(script="print('{\"summary\": {\"issues\": 1e400}}')"))

    results = orchestrator.execute(Configuration(), repo)

    assert orchestrator.state is ExecutionState.COMPLETED
    assert results.warnings[0].startswith("ParseError: summary.total_issues")
    assert not results.has_issues


class ExplodingParser(ResultParser):
    def parse(self, stdout: str, stderr: str = ""):
        raise RuntimeError("parser crashed")


def test_unexpected_error_leaves_a_terminal_state(fake_runtime, repo: Path) -> None:
    orchestrator = ExecutionOrchestrator(fake_runtime(script=SUCCESS_SCRIPT), parser=ExplodingParser())

    with pytest.raises(RuntimeError, match="parser crashed"):
        orchestrator.execute(Configuration(), repo)

    assert orchestrator.state is ExecutionState.FAILED
    assert not orchestrator.busy


def _interrupting_launcher(runtime, error: BaseException, launched: list):
    def launch(spec):
        process = runtime.launch(spec)
        original_wait = process.wait
        raised: list[bool] = []

        def wait(timeout=None):
            if not raised:
                raised.append(True)
                raise error
            return original_wait(timeout)

        process.wait = wait
        launched.append(process)
        return process

    return launch


def test_keyboard_interrupt_cancels_and_stops_the_child(fake_runtime, repo: Path) -> None:
    runtime = fake_runtime(script=SLEEP_SCRIPT)
    processes: list = []
    orchestrator = ExecutionOrchestrator(
        runtime,
        launcher=_interrupting_launcher(runtime, KeyboardInterrupt(), processes),
        grace_period=1.0,
    )

    with pytest.raises(ExecutionError) as excinfo:
        orchestrator.execute(Configuration(), repo)

    assert excinfo.value.kind is ExecutionErrorKind.CANCELLED
    assert orchestrator.state is ExecutionState.CANCELLED
    assert not orchestrator.busy
    assert processes[0].poll() is not None
    assert runtime.stopped == runtime.launched


def test_error_while_waiting_stops_the_child(fake_runtime, repo: Path) -> None:
    runtime = fake_runtime(script=SLEEP_SCRIPT)
    processes: list = []
    orchestrator = ExecutionOrchestrator(
        runtime,
        launcher=_interrupting_launcher(runtime, RuntimeError("wait failed"), processes),
        grace_period=1.0,
    )

    with pytest.raises(RuntimeError, match="wait failed"):
        orchestrator.execute(Configuration(), repo)

    assert orchestrator.state is ExecutionState.FAILED
    assert processes[0].poll() is not None
    assert runtime.stopped == runtime.launched
