# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Helpers shared by CLI command implementations."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

import typer
from pydantic import BaseModel

from ..config.loader import load_preferences
from ..config.models import UserPreferences
from ..console import detect_tty
from ..execution.runtime import ContainerRuntime
from ..logging import fail

EXIT_OK: Final[int] = 0
EXIT_FAILURE: Final[int] = 1
EXIT_ISSUES_FOUND: Final[int] = 1
EXIT_INVALID_CONFIG: Final[int] = 2
EXIT_INTERRUPTED: Final[int] = 3
EXIT_RUNTIME_UNAVAILABLE: Final[int] = 4
EXIT_EXECUTION_FAILED: Final[int] = 5

RuntimeFactory = Callable[[], ContainerRuntime]


@dataclass(slots=True)
class CLIContext:
    """Per-invocation state carried on ``typer.Context.obj``."""

    verbose: bool = False
    use_emoji: bool = field(default_factory=detect_tty)
    runtime_factory: RuntimeFactory = ContainerRuntime


def cli_context(ctx: typer.Context) -> CLIContext:
    """Return the :class:`CLIContext` attached to ``ctx``, creating one if needed."""

    if not isinstance(ctx.obj, CLIContext):
        ctx.obj = CLIContext()
    return ctx.obj


def emit_json(model: BaseModel) -> None:
    """Write ``model`` to stdout as indented JSON."""

    typer.echo(model.model_dump_json(indent=2))


def abort(message: str, *, code: int, use_emoji: bool) -> typer.Exit:
    """Report ``message`` through the console and return the exit to raise."""

    fail(message, use_emoji=use_emoji)
    return typer.Exit(code=code)


def resolve_preferences(path: Path | None) -> UserPreferences:
    """Return preferences loaded from ``path`` or the defaults."""

    if path is None:
        return UserPreferences()
    return load_preferences(path)


def register_command(app: typer.Typer, command: Callable[..., Any], *, name: str) -> None:
    """Register ``command`` on ``app`` under ``name``."""

    app.command(name=name)(command)


__all__ = [
    "CLIContext",
    "EXIT_EXECUTION_FAILED",
    "EXIT_FAILURE",
    "EXIT_INTERRUPTED",
    "EXIT_INVALID_CONFIG",
    "EXIT_ISSUES_FOUND",
    "EXIT_OK",
    "EXIT_RUNTIME_UNAVAILABLE",
    "RuntimeFactory",
    "abort",
    "cli_context",
    "emit_json",
    "register_command",
    "resolve_preferences",
]
