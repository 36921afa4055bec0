# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Plan CLI command package."""

from __future__ import annotations

import typer

from ...shared import register_command
from .command import plan_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the configuration planning command on ``app``."""

    register_command(app, plan_command, name="plan")
