# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Profile CLI command package."""

from __future__ import annotations

import typer

from ...shared import register_command
from .command import profile_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the repository profiling command on ``app``."""

    register_command(app, profile_command, name="profile")
