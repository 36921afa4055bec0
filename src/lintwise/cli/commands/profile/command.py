# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Repository profiling CLI command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ....errors import AnalysisError
from ....profiling import RepositoryProfiler
from ...shared import EXIT_FAILURE, EXIT_OK, abort, cli_context, emit_json


def profile_command(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Repository root to analyse.")],
    max_depth: Annotated[int, typer.Option("--max-depth", min=0, help="Directory levels to descend.")] = 3,
) -> None:
    """Print the repository's language profile as JSON.

    Raises:
        typer.Exit: Always raised with ``0`` on success or ``1`` when the
            path cannot be analysed.
    """

    state = cli_context(ctx)
    try:
        profile = RepositoryProfiler(max_depth=max_depth).analyze(path)
    except AnalysisError as exc:
        raise abort(str(exc), code=EXIT_FAILURE, use_emoji=state.use_emoji) from exc
    emit_json(profile)
    raise typer.Exit(code=EXIT_OK)
