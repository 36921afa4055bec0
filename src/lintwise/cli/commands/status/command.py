# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Container runtime status CLI command."""

from __future__ import annotations

import typer

from ....logging import ok, warn
from ...shared import EXIT_OK, EXIT_RUNTIME_UNAVAILABLE, cli_context


def status_command(ctx: typer.Context) -> None:
    """Report whether the container runtime is reachable."""

    state = cli_context(ctx)
    runtime = state.runtime_factory()
    status = runtime.status()
    typer.echo(f"engine: {runtime.engine}")
    typer.echo(f"health: {status.health}")
    typer.echo(f"version: {status.version or 'unknown'}")
    if status.available:
        ok("Container runtime is available", use_emoji=state.use_emoji)
        raise typer.Exit(code=EXIT_OK)
    detail = f": {status.detail}" if status.detail else ""
    warn(f"Container runtime is unavailable{detail}", use_emoji=state.use_emoji)
    raise typer.Exit(code=EXIT_RUNTIME_UNAVAILABLE)
