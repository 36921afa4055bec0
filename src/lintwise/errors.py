# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exception hierarchy shared by the profiling, planning and execution layers."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .planning.validator import ValidationResult


class LintwiseError(Exception):
    """Base class for every error raised by lintwise."""


class AnalysisError(LintwiseError):
    """Raised when a repository cannot be analysed (missing or unreadable root)."""


class ConfigError(LintwiseError):
    """Raised when a preferences or configuration document is malformed."""


class ConfigValidationError(LintwiseError):
    """Raised when a configuration stays invalid after the automatic fix pass."""

    def __init__(self, result: ValidationResult) -> None:
        """Initialise the error with the failing validation result.

        Args:
            result: Validation outcome recorded after auto-remediation.
        """

        codes = ", ".join(error.code for error in result.errors) or "<none>"
        super().__init__(f"Configuration is invalid after automatic fixes: {codes}")
        self.result = result


class ExecutionErrorKind(StrEnum):
    """Enumerate the reasons an execution can terminate unsuccessfully."""

    RUNTIME_UNAVAILABLE = "runtime_unavailable"
    BUSY = "busy"
    NON_ZERO_EXIT = "non_zero_exit"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"
    LAUNCH_FAILED = "launch_failed"


class ExecutionError(LintwiseError):
    """Raised when a lint execution cannot start or does not complete."""

    def __init__(
        self,
        message: str,
        *,
        kind: ExecutionErrorKind,
        returncode: int | None = None,
        stderr: str | None = None,
        execution_id: str | None = None,
    ) -> None:
        """Initialise the error with diagnostic context.

        Args:
            message: Human-readable description of the failure.
            kind: Category of the failure.
            returncode: Exit status reported by the child process, when known.
            stderr: Standard error captured from the child process.
            execution_id: Identifier of the execution that failed.
        """

        super().__init__(message)
        self.kind = kind
        self.returncode = returncode
        self.stderr = stderr
        self.execution_id = execution_id


class ParseError(LintwiseError):
    """Raised internally when linter output cannot be interpreted.

    The result parser downgrades this error to a warning on the produced
    results; it never escapes an otherwise successful execution.
    """


__all__ = [
    "AnalysisError",
    "ConfigError",
    "ConfigValidationError",
    "ExecutionError",
    "ExecutionErrorKind",
    "LintwiseError",
    "ParseError",
]
