# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Best-effort extraction of structured results from container output."""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Final

from pydantic import ValidationError

from ..catalog.models import LinterCategory
from ..catalog.templates import DEFAULT_REGISTRY
from ..errors import ParseError
from ..models import (
    IssueCategory,
    LinterIssue,
    LinterResult,
    LinterStatus,
    LintingSummary,
    SecuritySummary,
)
from ..severity import Severity, SecuritySeverity, normalize_security_severity

LOGGER = logging.getLogger(__name__)

_ISSUES_FOUND: Final[re.Pattern[str]] = re.compile(r"(\d+)\s+issue\(s\)\s+found", re.IGNORECASE)
_FILES_SCANNED: Final[re.Pattern[str]] = re.compile(r"Scanned\s+(\d+)\s+files?", re.IGNORECASE)
_FIXABLE: Final[re.Pattern[str]] = re.compile(r"(\d+)\s+fixable", re.IGNORECASE)
_EXECUTED: Final[re.Pattern[str]] = re.compile(r"Executed\s+(\d+)\s+linters?", re.IGNORECASE)
_SUCCEEDED: Final[re.Pattern[str]] = re.compile(r"(\d+)\s+succeeded", re.IGNORECASE)
_FAILED: Final[re.Pattern[str]] = re.compile(r"(\d+)\s+failed", re.IGNORECASE)
_RESULT_LIST_KEYS: Final[tuple[str, ...]] = ("linters", "results")

# Output keys accepted for each summary field, snake_case first.
_SUMMARY_KEYS: Final[dict[str, tuple[str, ...]]] = {
    "total_files": ("total_files", "totalFiles", "files"),
    "total_issues": ("total_issues", "totalIssues", "issues"),
    "errors": ("errors",),
    "warnings": ("warnings",),
    "info": ("info",),
    "fixable_issues": ("fixable_issues", "fixableIssues", "fixable"),
    "linters_executed": ("linters_executed", "lintersExecuted"),
    "linters_succeeded": ("linters_succeeded", "lintersSucceeded"),
    "linters_failed": ("linters_failed", "lintersFailed"),
}

_DEFAULT_SECURITY_LINTERS: Final[frozenset[str]] = frozenset(
    template.name for template in DEFAULT_REGISTRY if template.category is LinterCategory.SECURITY
)


@dataclass(slots=True)
class ParsedOutput:
    """Structured data recovered from one execution's output."""

    results: tuple[LinterResult, ...] = ()
    summary: LintingSummary = field(default_factory=LintingSummary)
    security: SecuritySummary = field(default_factory=SecuritySummary)
    warnings: tuple[str, ...] = ()


def _first(mapping: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        if key in mapping:
            return mapping[key]
    return None


def _as_int(value: Any, *, context: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ParseError(f"{context} must be numeric, got {value!r}")
    try:
        return int(value)
    except (ValueError, OverflowError) as exc:
        raise ParseError(f"{context} must be numeric, got {value!r}") from exc


def _as_float(value: Any, *, context: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ParseError(f"{context} must be numeric, got {value!r}")
    try:
        number = float(value)
    except (ValueError, OverflowError) as exc:
        raise ParseError(f"{context} must be numeric, got {value!r}") from exc
    if not math.isfinite(number):
        raise ParseError(f"{context} must be finite, got {value!r}")
    return number


def _str_tuple(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list):
        return tuple(str(item) for item in value)
    return (str(value),)


class ResultParser:
    """Convert raw container output into results and summary statistics.

    Embedded JSON is preferred; otherwise summary counts are pulled from
    well-known lines. Problems never raise: they become warnings on the
    returned :class:`ParsedOutput`.
    """

    def __init__(self, *, security_linters: Iterable[str] | None = None) -> None:
        self._security_linters = (
            frozenset(security_linters) if security_linters is not None else _DEFAULT_SECURITY_LINTERS
        )

    def parse(self, stdout: str, stderr: str = "") -> ParsedOutput:
        """Return the structured view of ``stdout``.

        Args:
            stdout: Text written by the container to standard output.
            stderr: Text written to standard error; only used for diagnostics.

        Returns:
            ParsedOutput: Results, summary and accumulated warnings.
        """

        warnings: list[str] = []
        try:
            payload = self.find_json_payload(stdout)
        except ParseError as exc:
            warnings.append(f"ParseError: {exc}")
            payload = None
        if payload is not None:
            try:
                parsed = self._from_payload(payload)
            except (ParseError, ValidationError) as exc:
                LOGGER.warning("Falling back to line parsing: %s", exc)
                warnings.append(f"ParseError: {exc}")
            else:
                parsed.warnings = tuple(warnings)
                return parsed

        summary, matched = self._from_lines(stdout)
        if not matched:
            reason = "no recognisable summary in output" if stdout.strip() else "empty output"
            if stderr.strip():
                LOGGER.debug("stderr while parsing: %s", stderr.strip()[:200])
            warnings.append(f"ParseError: {reason}")
        return ParsedOutput(summary=summary, warnings=tuple(warnings))

    @staticmethod
    def find_json_payload(text: str) -> Mapping[str, Any] | None:
        """Return the first embedded JSON object that looks like a report.

        A report object carries a ``summary`` key or a ``linters``/``results``
        list. Objects start at the beginning of a line.

        Raises:
            ParseError: If a line opens a report-looking object that does not
                decode.
        """

        decoder = json.JSONDecoder()
        offset = 0
        broken: str | None = None
        for line in text.splitlines(keepends=True):
            stripped = line.lstrip()
            start = offset + (len(line) - len(stripped))
            offset += len(line)
            if not stripped.startswith("{"):
                continue
            try:
                candidate, _ = decoder.raw_decode(text, start)
            except json.JSONDecodeError as exc:
                if '"summary"' in stripped or '"linters"' in stripped or '"results"' in stripped:
                    broken = f"malformed JSON report at offset {start}: {exc.msg}"
                continue
            if isinstance(candidate, dict) and (
                "summary" in candidate or any(isinstance(candidate.get(key), list) for key in _RESULT_LIST_KEYS)
            ):
                return candidate
        if broken is not None:
            raise ParseError(broken)
        return None

    def _from_payload(self, payload: Mapping[str, Any]) -> ParsedOutput:
        raw_results = _first(payload, _RESULT_LIST_KEYS) or []
        if not isinstance(raw_results, list):
            raise ParseError("linter results must be a list")
        results: list[LinterResult] = []
        security_counts: dict[SecuritySeverity, int] = dict.fromkeys(SecuritySeverity, 0)
        for index, raw in enumerate(raw_results):
            if not isinstance(raw, Mapping):
                raise ParseError(f"linter result #{index} is not an object")
            result, security_labels = self._parse_result(raw, index)
            results.append(result)
            for label in security_labels:
                bucket = normalize_security_severity(label)
                if bucket is not None:
                    security_counts[bucket] += 1

        computed = self._summarise(results)
        raw_summary = payload.get("summary")
        if raw_summary is None:
            summary = computed
        elif isinstance(raw_summary, Mapping):
            values = computed.model_dump()
            for name, keys in _SUMMARY_KEYS.items():
                value = _first(raw_summary, keys)
                if value is not None:
                    values[name] = _as_int(value, context=f"summary.{name}")
            summary = LintingSummary(**values)
        else:
            raise ParseError("summary must be an object")

        security = SecuritySummary(
            critical=security_counts[SecuritySeverity.CRITICAL],
            high=security_counts[SecuritySeverity.HIGH],
            medium=security_counts[SecuritySeverity.MEDIUM],
            low=security_counts[SecuritySeverity.LOW],
        )
        return ParsedOutput(results=tuple(results), summary=summary, security=security)

    def _parse_result(self, raw: Mapping[str, Any], index: int) -> tuple[LinterResult, list[str]]:
        name = _first(raw, ("linter", "name", "linter_name"))
        if not isinstance(name, str) or not name:
            raise ParseError(f"linter result #{index} has no name")
        raw_issues = raw.get("issues") or []
        if not isinstance(raw_issues, list):
            raise ParseError(f"issues for {name} must be a list")
        issues: list[LinterIssue] = []
        security_labels: list[str] = []
        for position, raw_issue in enumerate(raw_issues):
            if not isinstance(raw_issue, Mapping):
                raise ParseError(f"issue #{position} for {name} is not an object")
            issue = self._parse_issue(raw_issue, name)
            issues.append(issue)
            if issue.category is IssueCategory.SECURITY:
                security_labels.append(str(raw_issue.get("severity", "")))

        status_raw = str(raw.get("status", "")).lower()
        try:
            status = LinterStatus(status_raw)
        except ValueError:
            status = LinterStatus.FAILURE if raw.get("errors") else LinterStatus.SUCCESS
        version = raw.get("version")
        result = LinterResult(
            linter=name,
            version=str(version) if version is not None else None,
            status=status,
            duration=_as_float(_first(raw, ("duration", "elapsed_time", "elapsedTime")), context=f"{name}.duration"),
            files_scanned=_as_int(_first(raw, ("files_scanned", "filesScanned", "files")), context=f"{name}.files"),
            issues=tuple(issues),
            errors=_str_tuple(raw.get("errors")),
            warnings=_str_tuple(raw.get("warnings")),
        )
        return result, security_labels

    def _parse_issue(self, raw: Mapping[str, Any], linter: str) -> LinterIssue:
        category_raw = str(raw.get("category", "")).lower()
        try:
            category = IssueCategory(category_raw)
        except ValueError:
            category = IssueCategory.SECURITY if linter in self._security_linters else IssueCategory.STYLE
        return LinterIssue(
            file=str(_first(raw, ("file", "path")) or ""),
            line=_as_int(raw.get("line"), context=f"{linter}.line"),
            column=_as_int(raw.get("column"), context=f"{linter}.column"),
            severity=Severity.coerce(raw.get("severity")),
            message=str(raw.get("message", "")),
            rule=str(_first(raw, ("rule", "rule_id", "ruleId")) or ""),
            linter=linter,
            fixable=bool(raw.get("fixable", False)),
            category=category,
        )

    @staticmethod
    def _summarise(results: Sequence[LinterResult]) -> LintingSummary:
        issues = [issue for result in results for issue in result.issues]
        return LintingSummary(
            total_files=sum(result.files_scanned for result in results),
            total_issues=len(issues),
            errors=sum(1 for issue in issues if issue.severity is Severity.ERROR),
            warnings=sum(1 for issue in issues if issue.severity is Severity.WARNING),
            info=sum(1 for issue in issues if issue.severity is Severity.INFO),
            fixable_issues=sum(1 for issue in issues if issue.fixable),
            linters_executed=len(results),
            linters_succeeded=sum(1 for result in results if result.status is LinterStatus.SUCCESS),
            linters_failed=sum(1 for result in results if result.status is LinterStatus.FAILURE),
        )

    @staticmethod
    def _from_lines(text: str) -> tuple[LintingSummary, bool]:
        total_issues = 0
        total_files = 0
        fixable = 0
        executed: int | None = None
        succeeded: int | None = None
        failed: int | None = None
        matched = False
        for line in text.splitlines():
            if match := _ISSUES_FOUND.search(line):
                total_issues += int(match.group(1))
                matched = True
            if match := _FILES_SCANNED.search(line):
                total_files += int(match.group(1))
                matched = True
            if match := _FIXABLE.search(line):
                fixable += int(match.group(1))
                matched = True
            if match := _EXECUTED.search(line):
                executed = int(match.group(1))
                matched = True
            if match := _SUCCEEDED.search(line):
                succeeded = int(match.group(1))
                matched = True
            if match := _FAILED.search(line):
                failed = int(match.group(1))
                matched = True
        summary = LintingSummary(
            total_files=total_files,
            total_issues=total_issues,
            fixable_issues=fixable,
            linters_executed=executed or 0,
            linters_succeeded=succeeded or 0,
            linters_failed=failed or 0,
        )
        return summary, matched


__all__ = ["ParsedOutput", "ResultParser"]
