# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Language, framework and complexity detection for repositories."""

from __future__ import annotations

from .profiler import RepositoryProfiler

__all__ = ["RepositoryProfiler"]
