# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Containerised execution of a linter plan."""

from __future__ import annotations

from .events import EventChannel, LintingEvent
from .orchestrator import ExecutionOrchestrator, ExecutionState
from .parser import ResultParser
from .runtime import ContainerRuntime, ContainerRunSpec, RuntimeStatus

__all__ = [
    "ContainerRunSpec",
    "ContainerRuntime",
    "EventChannel",
    "ExecutionOrchestrator",
    "ExecutionState",
    "LintingEvent",
    "ResultParser",
    "RuntimeStatus",
]
