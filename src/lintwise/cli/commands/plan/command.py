# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration planning CLI command."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer

from ....config.export import export_environment, render_environment
from ....errors import AnalysisError, ConfigError, ConfigValidationError
from ....logging import warn
from ....planning import ConfigurationGenerator
from ....profiling import RepositoryProfiler
from ...shared import (
    EXIT_FAILURE,
    EXIT_INVALID_CONFIG,
    EXIT_OK,
    abort,
    cli_context,
    emit_json,
    resolve_preferences,
)


class PlanFormat(StrEnum):
    """Output encodings supported by ``plan``."""

    JSON = "json"
    ENV = "env"


def plan_command(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Repository root to plan for.")],
    prefs: Annotated[
        Path | None,
        typer.Option("--prefs", help="TOML or JSON preferences file.", dir_okay=False),
    ] = None,
    output_format: Annotated[
        PlanFormat,
        typer.Option("--format", help="Emit the plan as JSON or environment assignments.", case_sensitive=False),
    ] = PlanFormat.JSON,
) -> None:
    """Profile a repository and print the generated lint configuration.

    Raises:
        typer.Exit: ``0`` on success, ``1`` when the repository or the
            preferences cannot be read, and ``2`` when the plan stays invalid.
    """

    state = cli_context(ctx)
    try:
        preferences = resolve_preferences(prefs)
        profile = RepositoryProfiler().analyze(path)
        generator = ConfigurationGenerator()
        config = generator.generate(profile, preferences)
    except ConfigValidationError as exc:
        for issue in exc.result.errors:
            warn(f"{issue.code}: {issue.message}", use_emoji=state.use_emoji)
        raise abort(str(exc), code=EXIT_INVALID_CONFIG, use_emoji=state.use_emoji) from exc
    except (AnalysisError, ConfigError) as exc:
        raise abort(str(exc), code=EXIT_FAILURE, use_emoji=state.use_emoji) from exc

    for issue in generator.validate(config).warnings:
        warn(issue.message, use_emoji=state.use_emoji)
    if output_format is PlanFormat.ENV:
        typer.echo(render_environment(export_environment(config)), nl=False)
    else:
        emit_json(config)
    raise typer.Exit(code=EXIT_OK)
