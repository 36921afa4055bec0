# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Environment-style export of a :class:`Configuration` and its inverse."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Final

from ..errors import ConfigError
from .models import CacheStrategy, Configuration, OutputFormat, PerformanceConfig, ResourceLimits

ENABLE_LINTERS_KEY: Final[str] = "ENABLE_LINTERS"
DISABLE_LINTERS_KEY: Final[str] = "DISABLE_LINTERS"
PARALLEL_KEY: Final[str] = "PARALLEL"
PARALLEL_PROCESSES_KEY: Final[str] = "PARALLEL_PROCESS_NUMBER"
TIMEOUT_SECONDS_KEY: Final[str] = "TIMEOUT_SECONDS"
MAX_MEMORY_KEY: Final[str] = "MAX_MEMORY"
CACHE_STRATEGY_KEY: Final[str] = "CACHE_STRATEGY"
INCREMENTAL_KEY: Final[str] = "INCREMENTAL_SCANNING"
OUTPUT_FORMAT_KEY: Final[str] = "OUTPUT_FORMAT"
EXECUTION_TIME_MS_KEY: Final[str] = "LINTWISE_MAX_EXECUTION_TIME_MS"
MAX_CPU_TIME_KEY: Final[str] = "LINTWISE_MAX_CPU_TIME"
MAX_FILE_SIZE_KEY: Final[str] = "LINTWISE_MAX_FILE_SIZE"
MAX_FILES_PER_LINTER_KEY: Final[str] = "LINTWISE_MAX_FILES_PER_LINTER"
FILTER_INCLUDE_SUFFIX: Final[str] = "_FILTER_REGEX_INCLUDE"
FILTER_EXCLUDE_SUFFIX: Final[str] = "_FILTER_REGEX_EXCLUDE"

_LIST_SEPARATOR: Final[str] = ","
_TRUE_VALUES: Final[frozenset[str]] = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES: Final[frozenset[str]] = frozenset({"false", "0", "no", "off"})
_NAME_SANITIZER: Final[re.Pattern[str]] = re.compile(r"[^A-Za-z0-9]+")


@dataclass(slots=True)
class ParsedEnvironment:
    """Plan parameters recovered from an environment-style export."""

    enabled: tuple[str, ...] = ()
    disabled: tuple[str, ...] = ()
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)
    output_formats: tuple[OutputFormat, ...] = ()
    filters: dict[str, tuple[str | None, str | None]] = field(default_factory=dict)


def linter_env_prefix(name: str) -> str:
    """Return the variable prefix used for per-linter settings.

    Args:
        name: Linter name such as ``eslint-plugin-react``.

    Returns:
        str: Upper-case prefix such as ``ESLINT_PLUGIN_REACT``.
    """

    return _NAME_SANITIZER.sub("_", name).strip("_").upper()


def glob_to_regex(pattern: str) -> str:
    """Translate a path glob into an unanchored-prefix regular expression.

    ``**/`` matches any number of leading directories, ``*`` and ``?`` stay
    within one path segment and ``{a,b}`` expands to an alternation.
    """

    out: list[str] = []
    index = 0
    length = len(pattern)
    while index < length:
        char = pattern[index]
        if pattern.startswith("**/", index):
            out.append("(?:.*/)?")
            index += 3
            continue
        if pattern.startswith("**", index):
            out.append(".*")
            index += 2
            continue
        if char == "*":
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        elif char == "{":
            closing = pattern.find("}", index)
            if closing == -1:
                out.append(re.escape(char))
            else:
                options = pattern[index + 1 : closing].split(",")
                out.append("(?:" + "|".join(re.escape(option) for option in options) + ")")
                index = closing + 1
                continue
        else:
            out.append(re.escape(char))
        index += 1
    return "".join(out) + "$"


def _patterns_regex(patterns: Iterable[str]) -> str | None:
    compiled = [f"(?:{glob_to_regex(pattern)})" for pattern in patterns]
    if not compiled:
        return None
    return "|".join(compiled)


def export_environment(config: Configuration) -> dict[str, str]:
    """Return the environment-style export consumed by the linting container.

    Args:
        config: Validated configuration to serialise.

    Returns:
        dict[str, str]: Ordered mapping of variable names to values.
    """

    performance = config.performance
    limits = performance.resource_limits
    enabled = config.enabled_names
    env: dict[str, str] = {
        ENABLE_LINTERS_KEY: _LIST_SEPARATOR.join(enabled),
        DISABLE_LINTERS_KEY: _LIST_SEPARATOR.join(config.linters.disabled),
        PARALLEL_KEY: _format_bool(performance.parallelism > 1),
        PARALLEL_PROCESSES_KEY: str(performance.parallelism),
        TIMEOUT_SECONDS_KEY: str(math.ceil(performance.max_execution_time / 1000)),
        EXECUTION_TIME_MS_KEY: str(performance.max_execution_time),
        MAX_MEMORY_KEY: limits.max_memory,
        MAX_CPU_TIME_KEY: str(limits.max_cpu_time),
        MAX_FILE_SIZE_KEY: str(limits.max_file_size),
        MAX_FILES_PER_LINTER_KEY: str(limits.max_files_per_linter),
        CACHE_STRATEGY_KEY: performance.cache_strategy.value,
        INCREMENTAL_KEY: _format_bool(performance.incremental_scanning),
        OUTPUT_FORMAT_KEY: _LIST_SEPARATOR.join(fmt.value for fmt in config.reporting.formats),
    }
    for linter in config.linters.enabled:
        if not linter.enabled:
            continue
        prefix = linter_env_prefix(linter.name)
        include = _patterns_regex(linter.file_patterns)
        exclude = _patterns_regex(linter.exclude_patterns)
        if include:
            env[f"{prefix}{FILTER_INCLUDE_SUFFIX}"] = include
        if exclude:
            env[f"{prefix}{FILTER_EXCLUDE_SUFFIX}"] = exclude
    return env


def render_environment(env: Mapping[str, str]) -> str:
    """Render ``env`` as ``KEY=value`` lines suitable for an env file."""

    return "".join(f"{key}={value}\n" for key, value in env.items())


def parse_environment(source: str | Mapping[str, str]) -> ParsedEnvironment:
    """Recover plan parameters from an export produced by :func:`export_environment`.

    Args:
        source: Either rendered ``KEY=value`` text or an already split mapping.

    Returns:
        ParsedEnvironment: Enabled and disabled names, performance parameters,
        output formats and per-linter filters.

    Raises:
        ConfigError: If a line or value cannot be interpreted.
    """

    env = _split_lines(source) if isinstance(source, str) else dict(source)
    enabled = _split_list(env.get(ENABLE_LINTERS_KEY, ""))
    disabled = _split_list(env.get(DISABLE_LINTERS_KEY, ""))
    defaults = PerformanceConfig()
    default_limits = defaults.resource_limits

    if EXECUTION_TIME_MS_KEY in env:
        max_execution_time = _parse_int(env, EXECUTION_TIME_MS_KEY)
    elif TIMEOUT_SECONDS_KEY in env:
        max_execution_time = _parse_int(env, TIMEOUT_SECONDS_KEY) * 1000
    else:
        max_execution_time = defaults.max_execution_time

    if PARALLEL_PROCESSES_KEY in env:
        parallelism = _parse_int(env, PARALLEL_PROCESSES_KEY)
    elif PARALLEL_KEY in env:
        parallelism = defaults.parallelism if _parse_bool(env, PARALLEL_KEY) else 1
    else:
        parallelism = defaults.parallelism

    try:
        cache_strategy = CacheStrategy(env.get(CACHE_STRATEGY_KEY, defaults.cache_strategy.value))
        formats = tuple(OutputFormat(item) for item in _split_list(env.get(OUTPUT_FORMAT_KEY, "")))
    except ValueError as exc:
        raise ConfigError(f"Unsupported value in environment export: {exc}") from exc

    performance = PerformanceConfig(
        max_execution_time=max_execution_time,
        parallelism=parallelism,
        resource_limits=ResourceLimits(
            max_memory=env.get(MAX_MEMORY_KEY, default_limits.max_memory),
            max_cpu_time=_parse_int(env, MAX_CPU_TIME_KEY, default_limits.max_cpu_time),
            max_file_size=_parse_int(env, MAX_FILE_SIZE_KEY, default_limits.max_file_size),
            max_files_per_linter=_parse_int(env, MAX_FILES_PER_LINTER_KEY, default_limits.max_files_per_linter),
        ),
        cache_strategy=cache_strategy,
        incremental_scanning=(
            _parse_bool(env, INCREMENTAL_KEY) if INCREMENTAL_KEY in env else defaults.incremental_scanning
        ),
    )

    filters: dict[str, tuple[str | None, str | None]] = {}
    for name in enabled:
        prefix = linter_env_prefix(name)
        include = env.get(f"{prefix}{FILTER_INCLUDE_SUFFIX}")
        exclude = env.get(f"{prefix}{FILTER_EXCLUDE_SUFFIX}")
        if include is not None or exclude is not None:
            filters[name] = (include, exclude)

    return ParsedEnvironment(
        enabled=enabled,
        disabled=disabled,
        performance=performance,
        output_formats=formats,
        filters=filters,
    )


def _split_lines(text: str) -> dict[str, str]:
    env: dict[str, str] = {}
    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep or not key.strip():
            raise ConfigError(f"Malformed environment line {lineno}: {raw_line!r}")
        env[key.strip()] = value.strip()
    return env


def _split_list(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(_LIST_SEPARATOR) if item.strip())


def _parse_int(env: Mapping[str, str], key: str, default: int | None = None) -> int:
    raw = env.get(key)
    if raw is None:
        if default is None:
            raise ConfigError(f"Missing environment key {key}")
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from exc


def _parse_bool(env: Mapping[str, str], key: str) -> bool:
    raw = env[key].strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ConfigError(f"{key} must be a boolean, got {env[key]!r}")


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


__all__ = [
    "ParsedEnvironment",
    "export_environment",
    "glob_to_regex",
    "linter_env_prefix",
    "parse_environment",
    "render_environment",
]
