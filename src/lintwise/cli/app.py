# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

from typing import Annotated

import typer

from ..console import detect_tty
from ..logging import configure_logging
from .commands import register_commands
from .shared import cli_context

app = typer.Typer(
    help="Profile repositories and run adaptive multi-linter plans.",
    add_completion=False,
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)


@app.callback()
def _root(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Emit debug logging.")] = False,
    use_emoji: Annotated[
        bool | None,
        typer.Option("--emoji/--no-emoji", help="Decorate console messages with emoji."),
    ] = None,
) -> None:
    """Configure logging and per-invocation state."""

    state = cli_context(ctx)
    state.verbose = verbose
    state.use_emoji = detect_tty() if use_emoji is None else use_emoji
    configure_logging(verbose=verbose)


register_commands(app)


def main() -> None:
    """Run the ``lintwise`` console script."""

    app()


__all__ = ["app", "main"]
