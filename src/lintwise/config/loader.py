# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Load :class:`UserPreferences` from TOML or JSON documents."""

from __future__ import annotations

import json
import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from ..errors import ConfigError
from .models import UserPreferences

LOGGER = logging.getLogger(__name__)

PREFERENCES_KEY: Final[str] = "preferences"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "lintwise"
_JSON_SUFFIXES: Final[frozenset[str]] = frozenset({".json"})


def load_preferences(path: Path) -> UserPreferences:
    """Return preferences parsed from ``path``.

    TOML documents may hold the preferences at the top level, inside a
    ``[preferences]`` table, or (for ``pyproject.toml``) inside
    ``[tool.lintwise]``. Files ending in ``.json`` are decoded as JSON.

    Args:
        path: Location of the preferences document.

    Returns:
        UserPreferences: Validated preferences.

    Raises:
        ConfigError: If the file cannot be read, decoded or validated.
    """

    document = _read_document(path)
    payload = _select_section(document)
    try:
        preferences = UserPreferences.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid preferences in {path}: {exc}") from exc
    LOGGER.debug("Loaded preferences from %s", path)
    return preferences


def _read_document(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ConfigError(f"Unable to read preferences file {path}: {exc}") from exc
    if path.suffix.lower() in _JSON_SUFFIXES:
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Malformed JSON in {path}: {exc}") from exc
    else:
        try:
            data = tomllib.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"Malformed TOML in {path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigError(f"Preferences at {path} must be a table")
    return data


def _select_section(document: Mapping[str, Any]) -> Mapping[str, Any]:
    tool_section = document.get(PYPROJECT_TOOL_KEY)
    if isinstance(tool_section, Mapping) and isinstance(tool_section.get(PYPROJECT_SECTION_KEY), Mapping):
        document = tool_section[PYPROJECT_SECTION_KEY]
    section = document.get(PREFERENCES_KEY)
    if section is None:
        return document
    if not isinstance(section, Mapping):
        raise ConfigError(f"'{PREFERENCES_KEY}' section must be a table")
    return section


__all__ = ["load_preferences"]
