# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Run CLI command package."""

from __future__ import annotations

import typer

from ...shared import register_command
from .command import run_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the containerised lint run command on ``app``."""

    register_command(app, run_command, name="run")
