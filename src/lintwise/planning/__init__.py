# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Linter plan generation, tuning and validation."""

from __future__ import annotations

from .generator import ConfigurationGenerator
from .validator import ConfigurationValidator, ValidationIssue, ValidationResult

__all__ = [
    "ConfigurationGenerator",
    "ConfigurationValidator",
    "ValidationIssue",
    "ValidationResult",
]
