# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models, preference loading and environment export."""

from __future__ import annotations

from .export import export_environment, parse_environment
from .loader import load_preferences
from .models import Configuration, UserPreferences

__all__ = [
    "Configuration",
    "UserPreferences",
    "export_environment",
    "load_preferences",
    "parse_environment",
]
