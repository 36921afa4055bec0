# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Runtime status CLI command package."""

from __future__ import annotations

import typer

from ...shared import register_command
from .command import status_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the container runtime status command on ``app``."""

    register_command(app, status_command, name="status")
