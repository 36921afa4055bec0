# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Containerised lint execution CLI command."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Annotated, Final

import typer

from ....config.models import PerformanceProfile
from ....errors import AnalysisError, ConfigError, ConfigValidationError, ExecutionError, ExecutionErrorKind
from ....execution import EventChannel, ExecutionOrchestrator, LintingEvent
from ....execution.events import EventType, Subscriber
from ....logging import info, ok, section, warn
from ....models import LintingResults
from ....planning import ConfigurationGenerator
from ....profiling import RepositoryProfiler
from ...shared import (
    EXIT_EXECUTION_FAILED,
    EXIT_INTERRUPTED,
    EXIT_INVALID_CONFIG,
    EXIT_ISSUES_FOUND,
    EXIT_OK,
    EXIT_RUNTIME_UNAVAILABLE,
    CLIContext,
    abort,
    cli_context,
    emit_json,
    resolve_preferences,
)

_INTERRUPTED_MESSAGE: Final[str] = "Interrupted; execution cancelled"
_TIMEOUT_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*s?\s*$", re.IGNORECASE)
_EXIT_BY_KIND: Final[dict[ExecutionErrorKind, int]] = {
    ExecutionErrorKind.TIMED_OUT: EXIT_INTERRUPTED,
    ExecutionErrorKind.CANCELLED: EXIT_INTERRUPTED,
    ExecutionErrorKind.RUNTIME_UNAVAILABLE: EXIT_RUNTIME_UNAVAILABLE,
}


def parse_timeout(value: str | None) -> float | None:
    """Return seconds parsed from ``value`` such as ``"90"`` or ``"90s"``.

    Raises:
        typer.BadParameter: If ``value`` is not a positive number of seconds.
    """

    if value is None:
        return None
    match = _TIMEOUT_PATTERN.match(value)
    if match is None or float(match.group(1)) <= 0:
        raise typer.BadParameter(f"expected a positive number of seconds, got {value!r}")
    return float(match.group(1))


def run_command(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Repository root to lint.")],
    timeout: Annotated[
        str | None,
        typer.Option("--timeout", help="Wall-clock limit such as 90 or 90s."),
    ] = None,
    performance_profile: Annotated[
        PerformanceProfile | None,
        typer.Option("--profile", help="Speed/thoroughness trade-off.", case_sensitive=False),
    ] = None,
    prefs: Annotated[
        Path | None,
        typer.Option("--prefs", help="TOML or JSON preferences file.", dir_okay=False),
    ] = None,
) -> None:
    """Profile, plan and lint a repository inside the container runtime.

    Raises:
        typer.Exit: ``0`` when no issues were found, ``1`` when issues were
            found, ``2`` for an invalid plan, ``3`` on timeout or cancellation,
            ``4`` when the runtime is unavailable and ``5`` for other failures.
    """

    state = cli_context(ctx)
    deadline = parse_timeout(timeout)
    try:
        preferences = resolve_preferences(prefs)
        if performance_profile is not None:
            preferences = preferences.model_copy(update={"performance_profile": performance_profile})
        profile = RepositoryProfiler().analyze(path)
        config = ConfigurationGenerator().generate(profile, preferences)
    except ConfigValidationError as exc:
        raise abort(str(exc), code=EXIT_INVALID_CONFIG, use_emoji=state.use_emoji) from exc
    except (AnalysisError, ConfigError) as exc:
        raise abort(str(exc), code=EXIT_EXECUTION_FAILED, use_emoji=state.use_emoji) from exc
    except KeyboardInterrupt as exc:
        raise abort(_INTERRUPTED_MESSAGE, code=EXIT_INTERRUPTED, use_emoji=state.use_emoji) from exc

    events = EventChannel()
    orchestrator = ExecutionOrchestrator(state.runtime_factory(), events=events)
    subscription = events.subscribe(_progress_printer(state))
    try:
        results = orchestrator.execute(config, path, profile=profile, timeout=deadline)
    except ExecutionError as exc:
        code = _EXIT_BY_KIND.get(exc.kind, EXIT_EXECUTION_FAILED)
        raise abort(str(exc), code=code, use_emoji=state.use_emoji) from exc
    except KeyboardInterrupt as exc:
        orchestrator.cancel()
        raise abort(_INTERRUPTED_MESSAGE, code=EXIT_INTERRUPTED, use_emoji=state.use_emoji) from exc
    finally:
        events.flush()
        subscription.unsubscribe()
        events.close()

    emit_json(results)
    raise typer.Exit(code=_report(results, state))


def _progress_printer(state: CLIContext) -> Subscriber:
    def _print(event: LintingEvent) -> None:
        if state.verbose and event.type is EventType.PROGRESS and event.linter:
            info(f"Running {event.linter}", use_emoji=state.use_emoji)

    return _print


def _report(results: LintingResults, state: CLIContext) -> int:
    summary = results.summary
    section("Summary")
    for message in results.warnings:
        warn(message, use_emoji=state.use_emoji)
    if results.has_issues:
        warn(
            f"{summary.total_issues} issue(s) found by {summary.linters_executed} linter(s)",
            use_emoji=state.use_emoji,
        )
        return EXIT_ISSUES_FOUND
    ok(f"No issues found by {summary.linters_executed} linter(s)", use_emoji=state.use_emoji)
    return EXIT_OK
