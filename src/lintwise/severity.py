# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity vocabularies with explicit total ordering."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class Severity(StrEnum):
    """Linter and issue severity ordered ``info < warning < error``."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        """Return the ordinal position of the severity."""

        return _SEVERITY_RANK[self]

    # str ordering is lexical; compare by rank instead.
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def coerce(cls, label: object, default: Severity | None = None) -> Severity:
        """Map a tool-native label onto :class:`Severity`.

        Args:
            label: Raw label emitted by a linter (``"warn"``, ``"E"``, ...).
            default: Severity returned when the label is not recognised.

        Returns:
            Severity: Normalised severity.
        """

        fallback = default if default is not None else cls.WARNING
        if isinstance(label, Severity):
            return label
        if not isinstance(label, str):
            return fallback
        return _SEVERITY_ALIASES.get(label.strip().lower(), fallback)


_SEVERITY_RANK: Final[dict[Severity, int]] = {
    Severity.INFO: 0,
    Severity.WARNING: 1,
    Severity.ERROR: 2,
}

_SEVERITY_ALIASES: Final[dict[str, Severity]] = {
    "info": Severity.INFO,
    "information": Severity.INFO,
    "note": Severity.INFO,
    "notice": Severity.INFO,
    "hint": Severity.INFO,
    "i": Severity.INFO,
    "warning": Severity.WARNING,
    "warn": Severity.WARNING,
    "w": Severity.WARNING,
    "error": Severity.ERROR,
    "err": Severity.ERROR,
    "fatal": Severity.ERROR,
    "critical": Severity.ERROR,
    "blocker": Severity.ERROR,
    "e": Severity.ERROR,
    "f": Severity.ERROR,
}


class SecuritySeverity(StrEnum):
    """Security severity buckets ordered ``low < medium < high < critical``."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Return the ordinal position of the severity."""

        return _SECURITY_RANK[self]

    # str ordering is lexical; compare by rank instead.
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SecuritySeverity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, SecuritySeverity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, SecuritySeverity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, SecuritySeverity):
            return NotImplemented
        return self.rank >= other.rank


_SECURITY_RANK: Final[dict[SecuritySeverity, int]] = {
    SecuritySeverity.LOW: 0,
    SecuritySeverity.MEDIUM: 1,
    SecuritySeverity.HIGH: 2,
    SecuritySeverity.CRITICAL: 3,
}

# Mapping kept as published by the MegaLinter/Trunk report format; WARNING
# lands in HIGH while INFO lands in MEDIUM.
SECURITY_SEVERITY_TABLE: Final[dict[str, SecuritySeverity]] = {
    "ERROR": SecuritySeverity.CRITICAL,
    "CRITICAL": SecuritySeverity.CRITICAL,
    "BLOCKER": SecuritySeverity.CRITICAL,
    "WARNING": SecuritySeverity.HIGH,
    "HIGH": SecuritySeverity.HIGH,
    "INFO": SecuritySeverity.MEDIUM,
    "MEDIUM": SecuritySeverity.MEDIUM,
    "LOW": SecuritySeverity.LOW,
    "NOTICE": SecuritySeverity.LOW,
}


def normalize_security_severity(label: str | None) -> SecuritySeverity | None:
    """Return the security bucket for ``label`` or ``None`` when unknown.

    Args:
        label: Severity label reported by a security-oriented linter.

    Returns:
        SecuritySeverity | None: Normalised bucket, ``None`` for unknown labels.
    """

    if not label:
        return None
    return SECURITY_SEVERITY_TABLE.get(label.strip().upper())


__all__ = [
    "SECURITY_SEVERITY_TABLE",
    "SecuritySeverity",
    "Severity",
    "normalize_security_severity",
]
